# sugarscape_engine/distributions.py

import math
from dataclasses import dataclass
from typing import Union, assert_never

import numpy as np


@dataclass(frozen=True)
class Uniform:
    min: int
    max: int


@dataclass(frozen=True)
class Normal:
    mean: float
    sd: float
    min: int
    max: int


@dataclass(frozen=True)
class DiscreteItem:
    value: int
    weight: float


@dataclass(frozen=True)
class Discrete:
    items: tuple[DiscreteItem, ...]

    @classmethod
    def from_pairs(cls, pairs):
        """Build from an iterable of (value, weight) pairs."""
        return cls(tuple(DiscreteItem(int(v), float(w)) for v, w in pairs))


DistributionSpec = Union[Uniform, Normal, Discrete]


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def sample_int(spec: DistributionSpec, rng: np.random.Generator) -> int:
    """
    Draws one integer from the shape described by `spec`.

    Degenerate inputs never fail: inverted bounds are tolerated by clamping to
    the ordered pair, and a discrete set with no positive weight yields 0.
    """
    match spec:
        case Uniform(min=lo, max=hi):
            value = math.floor(lo + rng.random() * (hi - lo + 1))
            return int(_clamp(value, min(lo, hi), max(lo, hi)))
        case Normal(mean=mean, sd=sd, min=lo, max=hi):
            z = rng.standard_normal()
            # Clamp before rounding so inf and nan land on a bound.
            x = _clamp(mean + z * sd, min(lo, hi), max(lo, hi))
            # Round half up, not to even.
            return int(math.floor(x + 0.5))
        case Discrete(items=items):
            live = [it for it in items if it.weight > 0]
            if not live:
                return 0
            remaining = rng.random() * sum(it.weight for it in live)
            for it in live:
                remaining -= it.weight
                if remaining <= 0:
                    return int(it.value)
            # Float residue left over after the last subtraction.
            return int(live[-1].value)
        case _:
            assert_never(spec)


def sample_many(spec: DistributionSpec, rng: np.random.Generator, count: int) -> np.ndarray:
    return np.array([sample_int(spec, rng) for _ in range(count)], dtype=np.int64)
