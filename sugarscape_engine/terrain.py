# sugarscape_engine/terrain.py

from dataclasses import dataclass

import numpy as np
import numba

from . import config as cfg


@dataclass(frozen=True, eq=False)
class Grid:
    """Row-major sugar landscape: cell (x, y) lives at index y * width + x."""
    sugar: np.ndarray
    max_sugar: np.ndarray

    def __len__(self):
        return len(self.sugar)

    def frozen(self):
        """Returns a Grid whose arrays are read-only, copying any that are still writable."""
        return Grid(sugar=read_only(self.sugar), max_sugar=read_only(self.max_sugar))


def read_only(array):
    if not array.flags.writeable:
        return array
    array = array.copy()
    array.flags.writeable = False
    return array


@numba.njit
def cell_index(x, y, width):
    return y * width + x


def build_landscape(width: int, height: int, max_sugar_per_cell: int) -> Grid:
    """
    Lays two Gaussian sugar mountains over a width x height torus.

    Deterministic. Each cell's ceiling is its own initial level, so the cap of
    a cell far from both peaks can be well below `max_sugar_per_cell`.
    """
    ys, xs = np.mgrid[0:height, 0:width]
    sigma = min(width, height) * cfg.PEAK_SIGMA_FRACTION
    field = np.zeros((height, width), dtype=np.float64)
    for fx, fy in cfg.PEAK_CENTERS:
        cx, cy = np.floor(width * fx), np.floor(height * fy)
        d2 = (xs - cx) ** 2 + (ys - cy) ** 2
        field += max_sugar_per_cell * np.exp(-d2 / (2 * sigma * sigma))

    # Round half up, then keep within the global cap.
    sugar = np.clip(np.floor(field + 0.5), 0, max_sugar_per_cell).astype(np.int64).ravel()
    return Grid(sugar=sugar, max_sugar=sugar.copy())
