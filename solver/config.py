"""
Numerical tolerances, display defaults and dimension limits.

Every module reads its constants from here so the two-tolerance split
(structural zero vs. inconsistent right-hand side) lives in one place.
"""

# Pivot / structural zero test during elimination.
EPS = 1e-12
# A reduced right-hand side must exceed this to declare the system inconsistent.
INPUT_EPS = 1e-9

DEFAULT_DISPLAY_DIGITS = 4

MIN_SIZE = 1
MAX_SIZE = 12
DEFAULT_EQUATIONS = 3
DEFAULT_UNKNOWNS = 3

# Inclusive bounds for randomly generated cells.
RANDOM_RANGE = (-10, 10)

# Re-substitution residual accepted by the verification trail.
VERIFY_TOLERANCE = 1e-6
