# sugarscape_engine/histogram.py

import math
from typing import NamedTuple

import numpy as np

from . import config as cfg
from .distributions import sample_many


class HistogramBin(NamedTuple):
    label: str
    count: int


def _clamp(value, lo, hi):
    return max(lo, min(hi, value))


def auto_bin_count(n, lo=cfg.AUTO_BINS_MIN, hi=cfg.AUTO_BINS_MAX):
    """Sturges' rule, ceil(log2(n) + 1), clamped to [lo, hi]."""
    return _clamp(math.ceil(math.log2(max(2, n)) + 1), lo, hi)


def bin_values(values, bins):
    """
    Bins integer values into contiguous, equal-width ranges covering [min, max].

    The width is ceil(range / bins) so the number of bins actually produced
    can come out lower than requested. Empty bins are kept. The last label
    may run past max when the range does not divide evenly.
    """
    values = np.asarray(values, dtype=np.int64)
    n = len(values)
    if n == 0:
        return [HistogramBin("0-0", 0)]
    lo, hi = int(values.min()), int(values.max())
    if lo == hi:
        return [HistogramBin(f"{lo}-{hi}", n)]

    span = hi - lo + 1
    width = max(1, math.ceil(span / bins))
    n_bins = math.ceil(span / width)
    indices = np.clip((values - lo) // width, 0, n_bins - 1)
    counts = np.bincount(indices, minlength=n_bins)
    return [
        HistogramBin(f"{lo + i * width}-{lo + i * width + width - 1}", int(c))
        for i, c in enumerate(counts)
    ]


def wealth_histogram(agents, auto=True, bin_count=cfg.BIN_COUNT):
    """
    Frequency table of agent wealth (sugar, floored to an integer).

    With `auto` the bin count follows the population size, clamped to 5..30;
    otherwise `bin_count` is used, clamped to 1..50.
    """
    wealth = np.floor(np.asarray(agents)[:, cfg.AGENT_SUGAR]) if len(agents) else []
    if auto:
        bins = auto_bin_count(len(wealth))
    else:
        bins = _clamp(int(bin_count), cfg.MANUAL_BINS_MIN, cfg.MANUAL_BINS_MAX)
    return bin_values(wealth, bins)


def preview_histogram(spec, rng, samples=cfg.PREVIEW_SAMPLES):
    """Samples a distribution spec and bins the draws, for previewing an attribute setting."""
    draws = sample_many(spec, rng, samples)
    return bin_values(draws, auto_bin_count(samples, cfg.PREVIEW_BINS_MIN, cfg.PREVIEW_BINS_MAX))
