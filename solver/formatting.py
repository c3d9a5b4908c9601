"""
Display formatting shared by the step log, the final answer and the
plain-text trail.

All numbers go through :func:`format_smart` so a value never shows up with
two different roundings in the same result.
"""

import math
from decimal import Context, Decimal, ROUND_HALF_UP

from solver.config import DEFAULT_DISPLAY_DIGITS
from solver.matrix import matrices_equal


def format_smart(value: float, digits: int = DEFAULT_DISPLAY_DIGITS) -> str:
    """Round *value* half-up to *digits* decimals and strip trailing zeros.

    The shortest round-trip repr is rounded, not the binary expansion,
    so ``0.00005`` becomes ``"0.0001"`` as a user would expect.

    >>> format_smart(2.00004)
    '2'
    >>> format_smart(1 / 3)
    '0.3333'
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    # Wide enough for the largest double written out with every decimal.
    ctx = Context(prec=digits + 400)
    quantum = Decimal(1).scaleb(-digits)
    d = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP, context=ctx)
    if d == 0:
        return "0"
    return format(d.normalize(context=ctx), "f")


def format_row(row, unknowns: int, digits: int = DEFAULT_DISPLAY_DIGITS) -> str:
    """Render one augmented row as ``[a, b | c]``."""
    coeffs = ", ".join(format_smart(v, digits) for v in row[:unknowns])
    rhs = ", ".join(format_smart(v, digits) for v in row[unknowns:])
    return f"[{coeffs} | {rhs}]"


def format_matrix(matrix, digits: int = DEFAULT_DISPLAY_DIGITS) -> str:
    """Render an augmented matrix one bracketed row per line."""
    unknowns = len(matrix[0]) - 1
    return "\n".join(format_row(row, unknowns, digits) for row in matrix)


def format_solution(values, digits: int = DEFAULT_DISPLAY_DIGITS) -> str:
    return "\n".join(
        f"x{i + 1} = {format_smart(v, digits)}" for i, v in enumerate(values)
    )


# ── Plain-text trail ────────────────────────────────────────────────────

def _section(title: str) -> str:
    return f"\n── {title} " + "─" * max(0, 40 - len(title))


def build_plain_text(result: dict) -> str:
    """Convert a solver result dict into a readable plain-text trail.

    A step's matrix is only repeated when it differs from the previous
    step's snapshot.
    """
    lines: list[str] = []
    lines.append("=" * 56)
    lines.append("  Gaussian Elimination — Solution Trail")
    lines.append("=" * 56)

    given = result.get("given", {})
    lines.append(_section("GIVEN"))
    if given.get("problem"):
        lines.append(given["problem"])
    for key, val in given.get("inputs", {}).items():
        label = key.replace("_", " ").title()
        lines.append(f"  {label}: {val}")

    method = result.get("method", {})
    lines.append(_section("METHOD"))
    if method.get("name"):
        lines.append(f"  {method['name']}")
    if method.get("description"):
        lines.append(f"  {method['description']}")
    for key, val in method.get("parameters", {}).items():
        label = key.replace("_", " ").title()
        lines.append(f"  {label}: {val}")

    lines.append(_section("STEPS"))
    prev = None
    for step in result.get("steps", []):
        num = step.get("step_number", "?")
        description = step.get("description", "").split("\n")
        lines.append(f"\n  Step {num}: {description[0]}")
        for extra in description[1:]:
            lines.append(f"    {extra}")
        current = step.get("matrix")
        if step.get("expression") and not matrices_equal(prev, current):
            for row in step["expression"].split("\n"):
                lines.append(f"    {row}")
        prev = current

    lines.append(_section("FINAL ANSWER"))
    for line in result.get("final_answer", "?").rstrip("\n").split("\n"):
        lines.append(f"  {line}")

    v_steps = result.get("verification_steps", [])
    if v_steps:
        lines.append(_section("VERIFICATION"))
        for step in v_steps:
            num = step.get("step_number", "?")
            lines.append(f"\n  Step {num}: {step.get('description', '')}")
            if step.get("expression"):
                lines.append(f"    {step['expression']}")
            if step.get("explanation"):
                lines.append(f"    → {step['explanation']}")

    return "\n".join(lines) + "\n"
