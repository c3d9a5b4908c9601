"""Gaussian elimination solver with a step-by-step trail."""

from solver.cells import (
    CellValue,
    classify_cell,
    is_cell_ready,
    parse_cell,
    parse_grid,
    validate_matrix,
    validation_report,
)
from solver.engine import (
    Inconsistent,
    InfiniteSolutions,
    SolveOutcome,
    StepRecord,
    UniqueSolution,
    eliminate,
    outcome_text,
    solve,
    solve_system,
    verify_solution,
)
from solver.errors import DimensionError, InputError
from solver.formatting import build_plain_text, format_matrix, format_smart
from solver.matrix import check_dimensions, random_grid, resize_grid, zero_grid
