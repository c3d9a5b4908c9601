"""
Cell model and Matrix Validator.

A grid cell arrives as raw text typed by the user.  It is classified once
into a :data:`CellValue` variant so the rest of the package never has to
re-derive meaning from string prefixes:

    ""    → Empty          (nothing typed yet)
    "-"   → Negative       (sign typed, digits pending)
    "-."  → NegativeDot    (sign and point typed, digits pending)
    "2.5" → Number(2.5)
    "1/3" → Fraction(1.0, 3.0)

The three sentinels are valid *while typing* but never ready to solve.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from solver.errors import DimensionError, InputError

logger = logging.getLogger(__name__)

# Plain decimal literal: optional sign, digits with optional point, optional exponent.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


# ── CellValue variants ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Empty:
    text = ""


@dataclass(frozen=True)
class Negative:
    text = "-"


@dataclass(frozen=True)
class NegativeDot:
    text = "-."


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Fraction:
    numerator: float
    denominator: float

    @property
    def value(self) -> float:
        return self.numerator / self.denominator


CellValue = Union[Empty, Negative, NegativeDot, Number, Fraction]

_SENTINELS = {
    "": Empty(),
    "-": Negative(),
    "-.": NegativeDot(),
}


def _parse_decimal(text: str) -> Optional[float]:
    if not _DECIMAL_RE.fullmatch(text):
        return None
    value = float(text)
    # "1e400" overflows to inf; treat it like any other unusable entry.
    return value if math.isfinite(value) else None


def classify_cell(text: str) -> Optional[CellValue]:
    """Map raw cell text to a :data:`CellValue`, or ``None`` if it is garbage.

    Fractions need exactly one ``/`` with a decimal on either side and a
    non-zero denominator; ``"1/0"`` is garbage, not a sentinel.
    """
    s = text.strip()
    if s in _SENTINELS:
        return _SENTINELS[s]

    num = _parse_decimal(s)
    if num is not None:
        return Number(num)

    if s.count("/") != 1:
        return None
    num_s, den_s = s.split("/")
    num = _parse_decimal(num_s.strip())
    den = _parse_decimal(den_s.strip())
    if num is None or den is None or den == 0.0:
        return None
    if not math.isfinite(num / den):
        return None
    return Fraction(num, den)


def is_ready(cell: Optional[CellValue]) -> bool:
    return isinstance(cell, (Number, Fraction))


def is_cell_ready(text: str) -> bool:
    """True when *text* would parse to a number."""
    return is_ready(classify_cell(text))


# ── Parsing ─────────────────────────────────────────────────────────────

def parse_cell(text: str, row: int, col: int) -> float:
    """Convert one cell to a float.

    *row* / *col* are 1-based and only used in the error message.
    Raises InputError when the cell is a sentinel or unparsable.
    """
    cell = classify_cell(text)
    if is_ready(cell):
        return cell.value
    if cell is not None:
        reason = "invalid input"
    elif "/" in text:
        reason = "invalid fraction"
    else:
        reason = "invalid number"
    raise InputError(row, col, text, reason)


def check_grid_shape(grid) -> tuple[int, int]:
    """Return ``(rows, cols)`` of a rectangular grid or raise DimensionError."""
    rows = len(grid)
    if rows == 0:
        raise DimensionError("Matrix is empty.")
    cols = len(grid[0])
    for r, row in enumerate(grid):
        if len(row) != cols:
            raise DimensionError(
                f"Row {r + 1} has {len(row)} entries, expected {cols}. "
                f"Every row must have the same length."
            )
    if cols < 2:
        raise DimensionError(
            "Each row needs at least one coefficient and a right-hand side."
        )
    return rows, cols


def parse_grid(grid) -> np.ndarray:
    """Convert a grid of cell strings into a fresh ``float64`` matrix.

    The first unparsable cell (row-major order) aborts the conversion.
    """
    rows, cols = check_grid_shape(grid)
    a = np.empty((rows, cols), dtype=np.float64)
    for r in range(rows):
        for c in range(cols):
            a[r, c] = parse_cell(grid[r][c], r + 1, c + 1)
    return a


# ── Matrix Validator ────────────────────────────────────────────────────

def validate_matrix(grid) -> bool:
    """True iff the grid is non-empty, rectangular and every cell is ready."""
    if not grid or not grid[0]:
        return False
    width = len(grid[0])
    for row in grid:
        if len(row) != width:
            return False
        for text in row:
            if not is_cell_ready(text):
                return False
    return True


def validation_report(grid) -> list[InputError]:
    """List one InputError per bad cell, row-major, without raising.

    Shape problems still raise DimensionError since no per-cell report
    makes sense for them.
    """
    check_grid_shape(grid)
    errors = []
    for r, row in enumerate(grid):
        for c, text in enumerate(row):
            try:
                parse_cell(text, r + 1, c + 1)
            except InputError as e:
                errors.append(e)
    if errors:
        logger.debug("Validation found %d bad cell(s)", len(errors))
    return errors
