# sugarscape_engine/world.py

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from . import config as cfg
from .config import SimulationConfig
from .population import make_agents_from_config
from .terrain import Grid, build_landscape, read_only


@dataclass(frozen=True, eq=False)
class World:
    """
    One immutable snapshot of the simulation.

    `agents` is an (n, AGENT_FIELDS) int64 table whose row order is the
    conflict-resolution priority. The snapshot holds read-only arrays: any
    writable array passed in is copied first, so the caller keeps its own.
    Every tick produces a new World instead of editing this one.
    """
    width: int
    height: int
    grid: Grid
    agents: np.ndarray
    tick: int
    next_id: int
    config: SimulationConfig

    def __post_init__(self):
        object.__setattr__(self, "grid", self.grid.frozen())
        object.__setattr__(self, "agents", read_only(self.agents))

    @property
    def population(self):
        return len(self.agents)

    def has_valid_shape(self):
        n_cells = self.width * self.height
        return len(self.grid.sugar) == n_cells and len(self.grid.max_sugar) == n_cells


def initialize(config: SimulationConfig, rng: np.random.Generator) -> World:
    """Builds a fresh landscape and population for `config` at tick 0."""
    config.validate()
    grid = build_landscape(config.width, config.height, config.max_sugar_per_cell)
    agents = make_agents_from_config(config.agent_count, config, rng)
    return World(
        width=config.width,
        height=config.height,
        grid=grid,
        agents=agents,
        tick=0,
        next_id=config.agent_count,
        config=config,
    )


class WorldStats(NamedTuple):
    tick: int
    population: int
    land_sugar: int
    held_sugar: int
    mean_wealth: float


def summarize(world: World) -> WorldStats:
    wealth = world.agents[:, cfg.AGENT_SUGAR]
    return WorldStats(
        tick=world.tick,
        population=world.population,
        land_sugar=int(world.grid.sugar.sum()),
        # Debt does not count against the total held.
        held_sugar=int(np.maximum(wealth, 0).sum()),
        mean_wealth=float(wealth.mean()) if len(wealth) else 0.0,
    )
