# sugarscape_engine/config.py

from dataclasses import dataclass, fields, replace

import numpy as np

from .distributions import DistributionSpec, Normal, Uniform

# --- BASELINE WORLD PARAMETERS ---

# World & Population
WORLD_WIDTH = 60; WORLD_HEIGHT = 60
AGENT_COUNT = 400

# Landscape & Ecosystem
MAX_SUGAR_PER_CELL = 4
GROWBACK_RATE = 1

# Two fixed sugar mountains, as fractions of the world size
PEAK_CENTERS = ((0.25, 0.30), (0.75, 0.70))
PEAK_SIGMA_FRACTION = 0.12

# Agent attribute distributions
VISION_SPEC = Uniform(min=1, max=6)
METABOLISM_SPEC = Uniform(min=1, max=4)
INITIAL_SUGAR_SPEC = Normal(mean=10, sd=2, min=0, max=30)

# Respawn stays off for the baseline Pareto tail
RESPAWN = False

# Histogram & Pacing
AUTO_BINS = True
BIN_COUNT = 12
TICKS_PER_SECOND = 10

# --- ENGINE CONSTANTS ---

# Agent table layout: one row per agent, int64
AGENT_ID = 0; AGENT_X = 1; AGENT_Y = 2
AGENT_SUGAR = 3; AGENT_VISION = 4; AGENT_METABOLISM = 5
AGENT_FIELDS = 6

# Search order for movement intents: +x, -x, +y, -y
DIRECTIONS = np.array([[1, 0], [-1, 0], [0, 1], [0, -1]], dtype=np.int64)

# Conflict resolution
CONFLICT_COIN_FLIP = 0
CONFLICT_UNIFORM = 1
CONFLICT_POLICIES = {"coin_flip": CONFLICT_COIN_FLIP, "uniform": CONFLICT_UNIFORM}
USURP_PROBABILITY = 0.5

# Histogram bin clamps
AUTO_BINS_MIN = 5; AUTO_BINS_MAX = 30
MANUAL_BINS_MIN = 1; MANUAL_BINS_MAX = 50
PREVIEW_BINS_MIN = 5; PREVIEW_BINS_MAX = 24
PREVIEW_SAMPLES = 200

# Headless runner
HISTOGRAM_INTERVAL = 50
TICKER_INTERVAL = 100

# Changing any of these means building a new world
SHAPE_FIELDS = ("width", "height", "agent_count", "max_sugar_per_cell")


class ConfigError(ValueError):
    """Raised when a configuration can never describe a valid world."""


@dataclass(frozen=True)
class SimulationConfig:
    width: int
    height: int
    agent_count: int
    max_sugar_per_cell: int
    growback_rate: int
    vision_spec: DistributionSpec
    metabolism_spec: DistributionSpec
    initial_sugar_spec: DistributionSpec
    respawn: bool
    auto_bins: bool
    bin_count: int
    ticks_per_second: int
    conflict_policy: str = "coin_flip"

    def validate(self):
        """Returns self, or raises ConfigError naming the first bad field."""
        if self.width < 1 or self.height < 1:
            raise ConfigError(f"world must be at least 1x1, got {self.width}x{self.height}")
        if self.agent_count < 0:
            raise ConfigError(f"agent_count must be >= 0, got {self.agent_count}")
        if self.max_sugar_per_cell < 0:
            raise ConfigError(f"max_sugar_per_cell must be >= 0, got {self.max_sugar_per_cell}")
        if self.growback_rate < 0:
            raise ConfigError(f"growback_rate must be >= 0, got {self.growback_rate}")
        if self.ticks_per_second < 1:
            raise ConfigError(f"ticks_per_second must be >= 1, got {self.ticks_per_second}")
        if self.conflict_policy not in CONFLICT_POLICIES:
            raise ConfigError(
                f"unknown conflict_policy {self.conflict_policy!r}, "
                f"expected one of {sorted(CONFLICT_POLICIES)}"
            )
        return self

    def with_changes(self, **changes):
        return replace(self, **changes)

    def changes_shape(self, other):
        """True if moving from self to `other` requires a fresh world."""
        return any(getattr(self, name) != getattr(other, name) for name in SHAPE_FIELDS)

    @property
    def policy_code(self):
        return CONFLICT_POLICIES[self.conflict_policy]

    def as_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}


def default_config() -> SimulationConfig:
    return SimulationConfig(
        width=WORLD_WIDTH,
        height=WORLD_HEIGHT,
        agent_count=AGENT_COUNT,
        max_sugar_per_cell=MAX_SUGAR_PER_CELL,
        growback_rate=GROWBACK_RATE,
        vision_spec=VISION_SPEC,
        metabolism_spec=METABOLISM_SPEC,
        initial_sugar_spec=INITIAL_SUGAR_SPEC,
        respawn=RESPAWN,
        auto_bins=AUTO_BINS,
        bin_count=BIN_COUNT,
        ticks_per_second=TICKS_PER_SECOND,
    )
