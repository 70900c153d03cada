# sugarscape_engine/engine.py

import numpy as np
import numba

from . import config as cfg
from .population import make_agents_from_config
from .terrain import Grid, cell_index
from .world import World

AGENT_X = cfg.AGENT_X
AGENT_Y = cfg.AGENT_Y
AGENT_SUGAR = cfg.AGENT_SUGAR
AGENT_VISION = cfg.AGENT_VISION
AGENT_METABOLISM = cfg.AGENT_METABOLISM
DIRECTIONS = cfg.DIRECTIONS
CONFLICT_COIN_FLIP = cfg.CONFLICT_COIN_FLIP
USURP_PROBABILITY = cfg.USURP_PROBABILITY


class ShapeMismatchError(ValueError):
    """The grid length does not match width * height; indices would be corrupt."""


# ==============================================================================
# PART 1: MOVEMENT - INTENTS, CONFLICTS, MOVES
# ==============================================================================
@numba.njit
def choose_intents(agents, sugar, width, height):
    """
    Picks a destination cell index for every agent from the previous snapshot.

    Each agent scans +x, -x, +y, -y up to `vision` cells on the torus, skipping
    any cell occupied at the start of the tick. A cell replaces the current
    best if it holds strictly more sugar, or equal sugar at a strictly shorter
    distance. Staying put (distance 0) is the starting candidate.
    Returns (origins, targets).
    """
    n = agents.shape[0]
    occupied = np.zeros(width * height, dtype=np.bool_)
    for i in range(n):
        occupied[cell_index(agents[i, AGENT_X], agents[i, AGENT_Y], width)] = True

    origins = np.empty(n, dtype=np.int64)
    targets = np.empty(n, dtype=np.int64)
    for i in range(n):
        ox, oy = agents[i, AGENT_X], agents[i, AGENT_Y]
        origin = cell_index(ox, oy, width)
        best, best_sugar, best_dist = origin, sugar[origin], 0
        for k in range(DIRECTIONS.shape[0]):
            dx, dy = DIRECTIONS[k, 0], DIRECTIONS[k, 1]
            for d in range(1, agents[i, AGENT_VISION] + 1):
                nx = (ox + dx * d) % width
                ny = (oy + dy * d) % height
                j = cell_index(nx, ny, width)
                if occupied[j]:
                    continue
                s = sugar[j]
                if s > best_sugar or (s == best_sugar and d < best_dist):
                    best, best_sugar, best_dist = j, s, d
        origins[i] = origin
        targets[i] = best
    return origins, targets


@numba.njit
def resolve_conflicts(targets, draws, n_cells, policy):
    """
    Maps each destination cell to the index of the agent that gets it (-1 if none).

    Claims are processed in agent order. Under the coin-flip policy a later
    claimant usurps the current holder when its draw is below 0.5, which
    favours late claimants over early ones when there are three or more.
    Under the uniform policy the k-th claimant takes over with probability 1/k,
    so every contender ends up equally likely.
    """
    winners = np.full(n_cells, -1, dtype=np.int64)
    claims = np.zeros(n_cells, dtype=np.int64)
    for i in range(targets.shape[0]):
        t = targets[i]
        claims[t] += 1
        if winners[t] == -1:
            winners[t] = i
        elif policy == CONFLICT_COIN_FLIP:
            if draws[i] < USURP_PROBABILITY:
                winners[t] = i
        elif draws[i] < 1.0 / claims[t]:
            winners[t] = i
    return winners


@numba.njit
def apply_moves(agents, targets, winners, width):
    """Moves winners onto their targets in place; losers keep their origin. Returns per-cell occupancy counts."""
    occupancy = np.zeros(winners.shape[0], dtype=np.int64)
    for i in range(agents.shape[0]):
        t = targets[i]
        if winners[t] == i:
            agents[i, AGENT_X] = t % width
            agents[i, AGENT_Y] = t // width
        occupancy[cell_index(agents[i, AGENT_X], agents[i, AGENT_Y], width)] += 1
    return occupancy


# ==============================================================================
# PART 2: THE RESOURCE CYCLE - HARVEST, METABOLISM, DEATH, GROWBACK
# ==============================================================================
@numba.njit
def harvest(agents, sugar, width):
    """Each agent takes everything on its cell, in row order. Mutates both arrays."""
    for i in range(agents.shape[0]):
        j = cell_index(agents[i, AGENT_X], agents[i, AGENT_Y], width)
        agents[i, AGENT_SUGAR] += sugar[j]
        sugar[j] = 0


@numba.njit
def metabolize(agents):
    """Charges metabolism in place and returns the survival mask (sugar >= 0 lives)."""
    alive = np.empty(agents.shape[0], dtype=np.bool_)
    for i in range(agents.shape[0]):
        agents[i, AGENT_SUGAR] -= agents[i, AGENT_METABOLISM]
        alive[i] = agents[i, AGENT_SUGAR] >= 0
    return alive


@numba.njit
def grow_back(sugar, max_sugar, rate):
    for j in range(sugar.shape[0]):
        sugar[j] = min(max_sugar[j], sugar[j] + rate)


# ==============================================================================
# PART 3: PURE PHASE WRAPPERS AND THE TICK
# ==============================================================================
def plan_moves(agents, grid, width, height, rng, policy=CONFLICT_COIN_FLIP):
    """
    Runs intent planning, conflict resolution and move application.

    Returns (moved_agents, occupancy). The inputs are never modified.
    """
    origins, targets = choose_intents(agents, grid.sugar, width, height)
    draws = rng.random(len(agents))
    winners = resolve_conflicts(targets, draws, width * height, policy)
    moved = np.array(agents, dtype=np.int64, copy=True)
    occupancy = apply_moves(moved, targets, winners, width)
    return moved, occupancy


def cycle_resources(agents, grid, growback_rate, width):
    """Harvest, metabolize, drop the dead and regrow. Returns (survivors, next_grid)."""
    fed = np.array(agents, dtype=np.int64, copy=True)
    sugar = np.array(grid.sugar, dtype=np.int64, copy=True)
    harvest(fed, sugar, width)
    alive = metabolize(fed)
    grow_back(sugar, grid.max_sugar, growback_rate)
    return fed[alive], Grid(sugar=sugar, max_sugar=grid.max_sugar)


def respawn(survivors, config, rng, next_id):
    """Tops the population back up to `config.agent_count`. Returns (agents, next_id)."""
    deficit = config.agent_count - len(survivors)
    if not config.respawn or deficit <= 0:
        return survivors, next_id
    # Newborn ids continue the global sequence so they never collide with survivors.
    newborns = make_agents_from_config(deficit, config, rng, first_id=next_id)
    return np.concatenate([survivors, newborns]), next_id + deficit


def step(world: World, rng: np.random.Generator = None) -> World:
    """
    Advances `world` by one tick and returns the next World.

    The input is left untouched. Pass a seeded Generator for reproducible runs;
    without one a fresh unseeded Generator is used.
    """
    if not world.has_valid_shape():
        raise ShapeMismatchError(
            f"grid has {len(world.grid)} cells but world is "
            f"{world.width}x{world.height}={world.width * world.height}"
        )
    if rng is None:
        rng = np.random.default_rng()
    config = world.config

    moved, _ = plan_moves(world.agents, world.grid, world.width, world.height, rng,
                          policy=config.policy_code)
    survivors, grid = cycle_resources(moved, world.grid, config.growback_rate, world.width)
    agents, next_id = respawn(survivors, config, rng, world.next_id)

    return World(
        width=world.width,
        height=world.height,
        grid=grid,
        agents=agents,
        tick=world.tick + 1,
        next_id=next_id,
        config=config,
    )
