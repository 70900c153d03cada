# sugarscape_engine/population.py

import numpy as np

from . import config as cfg
from .distributions import sample_int


def make_agents(count, width, height, vision_spec, metabolism_spec, initial_sugar_spec,
                rng: np.random.Generator, first_id=0) -> np.ndarray:
    """
    Creates `count` agents with sequential ids starting at `first_id`.

    Positions are uniform over the grid and are not de-duplicated; two newborns
    may share a cell.
    """
    agents = np.zeros((max(count, 0), cfg.AGENT_FIELDS), dtype=np.int64)
    for i in range(len(agents)):
        agents[i, cfg.AGENT_ID] = first_id + i
        agents[i, cfg.AGENT_X] = rng.integers(0, width)
        agents[i, cfg.AGENT_Y] = rng.integers(0, height)
        agents[i, cfg.AGENT_SUGAR] = sample_int(initial_sugar_spec, rng)
        agents[i, cfg.AGENT_VISION] = sample_int(vision_spec, rng)
        agents[i, cfg.AGENT_METABOLISM] = sample_int(metabolism_spec, rng)
    return agents


def make_agents_from_config(count, config, rng, first_id=0):
    return make_agents(
        count, config.width, config.height,
        config.vision_spec, config.metabolism_spec, config.initial_sugar_spec,
        rng, first_id=first_id,
    )
