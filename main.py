"""
Gaussian elimination — command-line entry point.

Reads an augmented matrix (one equation per line, cells separated by
spaces or commas, fractions written as ``p/q``) and prints the full
step-by-step solution trail.

    python main.py system.txt
    echo "2 1 5
    1 -1 1" | python main.py
    python main.py --random 3x3 --seed 7
"""

import argparse
import logging
import re
import sys

import numpy as np

from solver import (
    DimensionError,
    InputError,
    build_plain_text,
    random_grid,
    solve_system,
)
from solver.config import DEFAULT_DISPLAY_DIGITS
from solver.logging_config import setup_logging

EXIT_UNIQUE = 0
EXIT_NO_UNIQUE = 1
EXIT_INPUT_ERROR = 2


def read_grid(text: str) -> list[list[str]]:
    """Split text into rows of cell strings, ignoring blanks and ``#`` comments."""
    grid = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        grid.append([cell for cell in re.split(r"[,\s]+", line) if cell])
    return grid


def _parse_size(value: str) -> tuple[int, int]:
    m = re.fullmatch(r"(\d+)[xX](\d+)", value.strip())
    if not m:
        raise argparse.ArgumentTypeError(
            f"expected EQUATIONSxUNKNOWNS (e.g. 3x3), got '{value}'")
    return int(m.group(1)), int(m.group(2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve A·x = b by Gaussian elimination and show every step.")
    parser.add_argument("file", nargs="?", default="-",
                        help="matrix file, '-' for stdin (default)")
    parser.add_argument("--digits", type=int, default=DEFAULT_DISPLAY_DIGITS,
                        help="decimal places shown (default: %(default)s)")
    parser.add_argument("--random", type=_parse_size, metavar="EQxUN",
                        help="solve a random integer system of this size")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for --random")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log solver diagnostics")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.random:
            equations, unknowns = args.random
            grid = random_grid(equations, unknowns, np.random.default_rng(args.seed))
        elif args.file == "-":
            grid = read_grid(sys.stdin.read())
        else:
            with open(args.file, "r", encoding="utf-8") as f:
                grid = read_grid(f.read())
        result = solve_system(grid, digits=args.digits)
    except InputError as e:
        print(f"Input Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except (DimensionError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    print(build_plain_text(result), end="")
    if result["outcome"]["kind"] == "unique":
        return EXIT_UNIQUE
    return EXIT_NO_UNIQUE


if __name__ == "__main__":
    sys.exit(main())
