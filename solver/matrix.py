"""
Grid helpers used by callers that build the cell grid: dimension checks,
blank and random grids, resizing, and snapshot comparison.
"""

import logging
from typing import Optional

import numpy as np

from solver.config import EPS, MAX_SIZE, MIN_SIZE, RANDOM_RANGE
from solver.errors import DimensionError

logger = logging.getLogger(__name__)


def check_dimensions(equations: int, unknowns: int) -> None:
    """Raise DimensionError unless both counts lie in ``MIN_SIZE..MAX_SIZE``."""
    for name, value in (("equations", equations), ("unknowns", unknowns)):
        if not MIN_SIZE <= value <= MAX_SIZE:
            raise DimensionError(
                f"Number of {name} must be between {MIN_SIZE} and {MAX_SIZE}, got {value}."
            )


def zero_grid(equations: int, unknowns: int) -> list[list[str]]:
    """A fresh ``equations × (unknowns + 1)`` grid filled with ``"0"``."""
    check_dimensions(equations, unknowns)
    return [["0"] * (unknowns + 1) for _ in range(equations)]


def random_grid(equations: int, unknowns: int,
                rng: Optional[np.random.Generator] = None) -> list[list[str]]:
    """A grid of random integers drawn uniformly from ``RANDOM_RANGE``."""
    check_dimensions(equations, unknowns)
    if rng is None:
        rng = np.random.default_rng()
    low, high = RANDOM_RANGE
    values = rng.integers(low, high, size=(equations, unknowns + 1), endpoint=True)
    logger.debug("Generated random %dx%d grid", equations, unknowns + 1)
    return [[str(int(v)) for v in row] for row in values]


def resize_grid(grid, equations: int, unknowns: int) -> list[list[str]]:
    """Return a new grid of the requested size.

    Cells that exist in both shapes are kept; the right-hand side column
    stays the last column, new cells are ``"0"``.
    """
    check_dimensions(equations, unknowns)
    resized = zero_grid(equations, unknowns)
    for r, row in enumerate(grid[:equations]):
        if not row:
            continue
        old_unknowns = len(row) - 1
        for c in range(min(old_unknowns, unknowns)):
            resized[r][c] = row[c]
        resized[r][unknowns] = row[-1]
    return resized


def matrices_equal(a, b, eps: float = EPS) -> bool:
    """Compare two snapshots entry-by-entry within *eps*.

    ``None`` on either side counts as different so the first snapshot
    is always shown.
    """
    if a is None or b is None:
        return False
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        return False
    return bool(np.all(np.abs(a - b) <= eps))
