"""Gaussian elimination with partial pivoting and a full step-by-step trail."""

"""
Takes an augmented matrix [A | b], either as raw cell text (e.g.
``[["2", "1/2", "3"], ["-1", "4", "0.5"]]``) or as numbers, reduces it
row by row, classifies the system (unique / infinite / inconsistent) and,
when the solution is unique, back-substitutes to find every unknown.

Every row operation is recorded as a :class:`StepRecord` holding a
read-only snapshot of the matrix right after the operation, so a caller
can replay the elimination one step at a time.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Union

import numpy as np

from solver.cells import parse_grid
from solver.config import DEFAULT_DISPLAY_DIGITS, EPS, INPUT_EPS, VERIFY_TOLERANCE
from solver.errors import DimensionError
from solver.formatting import format_matrix, format_smart, format_solution
from solver.matrix import check_dimensions

logger = logging.getLogger(__name__)


# ── Result types ────────────────────────────────────────────────────────

@dataclass(frozen=True, eq=False)
class StepRecord:
    """One elimination action and the matrix state right after it."""
    description: str
    matrix: np.ndarray


@dataclass(frozen=True)
class UniqueSolution:
    values: tuple

    kind = "unique"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "values": list(self.values)}


@dataclass(frozen=True)
class InfiniteSolutions:
    rank: int
    unknowns: int

    kind = "infinite"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "rank": self.rank, "unknowns": self.unknowns}


@dataclass(frozen=True)
class Inconsistent:
    """``row`` is 1-based; ``residual`` is the leftover right-hand side."""
    row: int
    residual: float

    kind = "inconsistent"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "row": self.row, "residual": self.residual}


SolveOutcome = Union[UniqueSolution, InfiniteSolutions, Inconsistent]


def outcome_text(outcome: SolveOutcome, digits: int = DEFAULT_DISPLAY_DIGITS) -> str:
    """Human-readable result summary for *outcome*."""
    if isinstance(outcome, UniqueSolution):
        return (
            "Unique solution found (by back-substitution):\n"
            + format_solution(outcome.values, digits)
        )
    if isinstance(outcome, InfiniteSolutions):
        return (
            f"Rank = {outcome.rank}, Unknowns = {outcome.unknowns} → "
            f"Infinite solutions (free variables exist).\n"
            "Forward elimination result shown above. "
            "Cannot compute unique solution by back-substitution.\n"
        )
    return (
        f"Inconsistent system: row {outcome.row} reduces to "
        f"0 = {format_smart(outcome.residual, digits)}"
    )


# ── Elimination ─────────────────────────────────────────────────────────

def _snapshot(a: np.ndarray) -> np.ndarray:
    snap = a.copy()
    snap.flags.writeable = False
    return snap


def _snap_zero(segment: np.ndarray) -> None:
    """Flush floating-point dust to exactly 0 (in place)."""
    segment[np.abs(segment) < EPS] = 0.0


def _as_matrix(matrix) -> np.ndarray:
    try:
        a = np.array(matrix, dtype=np.float64)
    except ValueError as e:
        raise DimensionError(f"Expected a rectangular matrix of numbers: {e}") from e
    if a.ndim != 2 or a.shape[0] < 1 or a.shape[1] < 2:
        raise DimensionError(
            "Expected a non-empty augmented matrix with at least one "
            f"coefficient column and a right-hand side, got shape {a.shape}."
        )
    return a


def eliminate(matrix, digits: int = DEFAULT_DISPLAY_DIGITS) -> tuple[list, SolveOutcome]:
    """Run forward elimination, classification and back-substitution.

    *matrix* is any rectangular array-like of numbers; it is copied and
    never modified.  Returns ``(steps, outcome)`` where *steps* is the
    ordered list of :class:`StepRecord`.  Inconsistent and
    underdetermined systems are outcomes, not exceptions; the steps
    recorded so far are always returned.
    """
    a = _as_matrix(matrix)
    rows, cols = a.shape
    unknowns = cols - 1
    steps: list[StepRecord] = []

    def record(description: str) -> None:
        steps.append(StepRecord(description, _snapshot(a)))

    record("Initial augmented matrix:")

    pivot_row = 0
    pivots: list[tuple[int, int]] = []
    for col in range(unknowns):
        if pivot_row >= rows:
            break

        # Step 1: partial pivoting, largest magnitude at or below pivot_row.
        i_max = pivot_row + int(np.argmax(np.abs(a[pivot_row:, col])))
        record(
            f"Step 1 (Find pivot) - Column {col + 1}: candidate row {i_max + 1} "
            f"(value = {format_smart(a[i_max, col], digits)})"
        )
        if abs(a[i_max, col]) < EPS:
            record(f"Column {col + 1}: no valid pivot (column ~ 0), skip column")
            continue

        # Step 2: swap
        if i_max != pivot_row:
            a[[pivot_row, i_max]] = a[[i_max, pivot_row]]
            record(f"Step 2 (Swap) - Swap R{pivot_row + 1} <-> R{i_max + 1}")
        else:
            record(f"Step 2 (Swap) - No swap needed (R{pivot_row + 1} is pivot row)")

        # Step 3: scale to a leading 1
        pivot = a[pivot_row, col]
        if abs(pivot - 1.0) > EPS:
            a[pivot_row, col:] /= pivot
            _snap_zero(a[pivot_row, col:])
            record(
                f"Step 3 (Scale) - Divide R{pivot_row + 1} by "
                f"{format_smart(pivot, digits)} to make leading 1"
            )
        else:
            record(f"Step 3 (Scale) - Pivot already ~1 in R{pivot_row + 1}")
        pivots.append((pivot_row, col))

        # Step 4: clear the column below the pivot
        for r in range(pivot_row + 1, rows):
            factor = a[r, col]
            if abs(factor) < EPS:
                continue
            a[r, col:] -= factor * a[pivot_row, col:]
            _snap_zero(a[r, col:])
            record(
                f"Step 4 (Eliminate below) - R{r + 1} -> R{r + 1} - "
                f"({format_smart(factor, digits)}) * R{pivot_row + 1}"
            )

        pivot_row += 1

    record("Final matrix after forward elimination (upper-triangular under pivots):")

    # ── Classification ──
    # A row with every coefficient ~0 must also have a ~0 right-hand side.
    zero_coeffs = np.all(np.abs(a[:, :unknowns]) <= EPS, axis=1)
    for r in range(rows):
        if zero_coeffs[r] and abs(a[r, unknowns]) > INPUT_EPS:
            logger.info("Inconsistent system at row %d", r + 1)
            return steps, Inconsistent(r + 1, float(a[r, unknowns]))

    # Rows that keep a coefficient.  Equals the pivot count for the
    # reduced form produced above, which is not true rank in every case.
    rank = int(np.count_nonzero(~zero_coeffs))
    if rank < unknowns:
        logger.info("Rank %d < %d unknowns, infinite solutions", rank, unknowns)
        return steps, InfiniteSolutions(rank, unknowns)

    values = _back_substitute(a, pivots, unknowns, digits, record)
    return steps, UniqueSolution(tuple(float(v) for v in values))


def _back_substitute(a, pivots, unknowns, digits, record) -> np.ndarray:
    """Solve for each pivot variable, highest column first."""
    x = np.zeros(unknowns, dtype=np.float64)
    equations = []
    for prow, pcol in reversed(pivots):
        sum_known = 0.0
        terms = []
        for j in range(pcol + 1, unknowns):
            coeff = a[prow, j]
            if abs(coeff) < EPS:
                continue
            terms.append(f"{format_smart(coeff, digits)}·x{j + 1}")
            sum_known += coeff * x[j]
        rhs = a[prow, unknowns]
        left = f"x{pcol + 1}"
        if terms:
            left += " + " + " + ".join(terms)
        equations.append(f"{left} = {format_smart(rhs, digits)}")
        x[pcol] = (rhs - sum_known) / a[prow, pcol]

    # Solved bottom-up, displayed top-down from x1.
    record("Back-substitution equations:\n" + "\n".join(reversed(equations)))
    return x


def solve(grid, digits: int = DEFAULT_DISPLAY_DIGITS) -> tuple[list, SolveOutcome]:
    """Parse a grid of cell strings and solve it.

    Raises InputError (naming the 1-based row/column and the raw text)
    before any elimination step when a cell is unparsable, and
    DimensionError for empty, ragged or oversized grids.
    """
    a = parse_grid(grid)
    check_dimensions(a.shape[0], a.shape[1] - 1)
    logger.debug("Solving %dx%d augmented matrix", a.shape[0], a.shape[1])
    return eliminate(a, digits)


# ── Verification ────────────────────────────────────────────────────────

def verify_solution(matrix, values, tolerance: float = VERIFY_TOLERANCE) -> list[dict]:
    """Re-substitute *values* into every equation of *matrix*.

    Returns one ``{"row", "lhs", "rhs", "ok"}`` dict per equation.
    """
    a = _as_matrix(matrix)
    x = np.asarray(values, dtype=np.float64)
    lhs = a[:, :-1] @ x
    rhs = a[:, -1]
    return [
        {
            "row": r + 1,
            "lhs": float(lhs[r]),
            "rhs": float(rhs[r]),
            "ok": bool(abs(lhs[r] - rhs[r]) <= tolerance),
        }
        for r in range(a.shape[0])
    ]


def _build_verification_steps(matrix, values, digits) -> list:
    checks = verify_solution(matrix, values)
    steps = [{
        "description": "Substitute into every equation",
        "expression": ", ".join(
            f"x{i + 1} = {format_smart(v, digits)}" for i, v in enumerate(values)
        ),
        "explanation": "Plug the solution back into each original equation.",
    }]
    for check in checks:
        lhs_s = format_smart(check["lhs"], digits)
        rhs_s = format_smart(check["rhs"], digits)
        steps.append({
            "description": f"Equation ({check['row']})",
            "expression": (
                f"LHS = {lhs_s},  RHS = {rhs_s}  →  {'✓' if check['ok'] else '✗'}"
            ),
            "explanation": (
                f"Both sides ≈ {lhs_s}." if check["ok"]
                else "Sides differ — the solution is numerically unreliable."
            ),
        })
    if all(check["ok"] for check in checks):
        steps.append({
            "description": "All equations verified",
            "expression": "All equations satisfied  ✓",
            "explanation": "The back-substituted solution is correct.",
        })
    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    return steps


# ── Main public entry point ─────────────────────────────────────────────

def solve_system(grid, digits: int = DEFAULT_DISPLAY_DIGITS) -> dict:
    """
    Solve the system given as a grid of cell strings and return the full
    result dict used by the CLI and the HTTP backend:

      - equation / given / method: what was asked and how it is solved
      - steps: ``{step_number, description, expression, matrix}``
      - final_answer: the result summary text
      - outcome: the classification as a plain dict
      - verification_steps: re-substitution check (unique solutions only)
      - summary: runtime and bookkeeping
    """
    t_start = time.perf_counter()

    original = parse_grid(grid)
    n_eq, n_cols = original.shape
    n_var = n_cols - 1
    check_dimensions(n_eq, n_var)

    records, outcome = eliminate(original, digits)

    steps = []
    for i, rec in enumerate(records, 1):
        steps.append({
            "step_number": i,
            "description": rec.description,
            "expression": format_matrix(rec.matrix, digits),
            "matrix": rec.matrix.tolist(),
        })

    verification_steps = []
    validation_status = "pass"
    if isinstance(outcome, UniqueSolution):
        verification_steps = _build_verification_steps(original, outcome.values, digits)
        if verification_steps[-1]["description"] != "All equations verified":
            validation_status = "fail"
            logger.warning("Solution failed re-substitution check")

    t_end = time.perf_counter()
    runtime_ms = round((t_end - t_start) * 1000, 2)
    logger.info("Solved %dx%d system (%s) in %.2f ms",
                n_eq, n_var, outcome.kind, runtime_ms)

    cells = "; ".join(" ".join(cell.strip() for cell in row) for row in grid)
    return {
        "equation": cells,
        "given": {
            "problem": "Solve the linear system A·x = b by Gaussian elimination",
            "inputs": {
                "augmented_matrix": cells,
                "number_of_equations": str(n_eq),
                "number_of_unknowns": str(n_var),
            },
        },
        "method": {
            "name": "Gaussian Elimination (Partial Pivoting)",
            "description": (
                "Reduce the augmented matrix column by column, choosing the "
                "largest pivot, then back-substitute."
            ),
            "parameters": {
                "pivot_tolerance": f"{EPS:g}",
                "inconsistency_tolerance": f"{INPUT_EPS:g}",
                "approach": "Pivot → Swap → Scale → Eliminate → Back-substitute",
            },
        },
        "steps": steps,
        "final_answer": outcome_text(outcome, digits),
        "outcome": outcome.to_dict(),
        "verification_steps": verification_steps,
        "summary": {
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "verification_steps": len(verification_steps),
            "validation_status": validation_status,
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"NumPy {np.__version__}",
        },
    }
