import numpy as np
import pytest

from solver.config import MAX_SIZE, MIN_SIZE, RANDOM_RANGE
from solver.errors import DimensionError
from solver.matrix import (
    check_dimensions,
    matrices_equal,
    random_grid,
    resize_grid,
    zero_grid,
)


@pytest.mark.parametrize(
    "equations,unknowns",
    [(0, 1), (1, 0), (MAX_SIZE + 1, 1), (1, MAX_SIZE + 1), (-1, 3)],
)
def test_check_dimensions_rejects_out_of_range(equations, unknowns) -> None:
    with pytest.raises(DimensionError):
        check_dimensions(equations, unknowns)


def test_check_dimensions_accepts_bounds() -> None:
    check_dimensions(MIN_SIZE, MIN_SIZE)
    check_dimensions(MAX_SIZE, MAX_SIZE)


def test_zero_grid_shape() -> None:
    grid = zero_grid(2, 3)
    assert grid == [["0", "0", "0", "0"], ["0", "0", "0", "0"]]
    grid[0][0] = "5"
    assert grid[1][0] == "0"


class TestRandomGrid:
    def test_shape_and_range(self):
        grid = random_grid(4, 3, np.random.default_rng(0))
        assert len(grid) == 4
        assert all(len(row) == 4 for row in grid)
        low, high = RANDOM_RANGE
        assert all(low <= int(cell) <= high for row in grid for cell in row)

    def test_seeded_is_deterministic(self):
        a = random_grid(3, 3, np.random.default_rng(42))
        b = random_grid(3, 3, np.random.default_rng(42))
        assert a == b

    def test_default_rng(self):
        assert len(random_grid(2, 2)) == 2

    def test_out_of_range_rejected(self):
        with pytest.raises(DimensionError):
            random_grid(13, 2)


class TestResizeGrid:
    def test_shrink_keeps_rhs(self):
        grid = [["1", "2", "3"], ["4", "5", "6"]]
        assert resize_grid(grid, 3, 1) == [["1", "3"], ["4", "6"], ["0", "0"]]

    def test_grow_pads_coefficients(self):
        grid = [["1", "2", "3"], ["4", "5", "6"]]
        assert resize_grid(grid, 2, 3) == [["1", "2", "0", "3"], ["4", "5", "0", "6"]]

    def test_drop_rows(self):
        assert resize_grid([["1", "2"], ["3", "4"]], 1, 1) == [["1", "2"]]


class TestMatricesEqual:
    def test_none_is_different(self):
        assert not matrices_equal(None, [[1.0]])
        assert not matrices_equal([[1.0]], None)

    def test_within_eps(self):
        assert matrices_equal([[1.0, 2.0]], [[1.0 + 1e-13, 2.0]])

    def test_beyond_eps(self):
        assert not matrices_equal([[1.0, 2.0]], [[1.0, 2.001]])

    def test_shape_mismatch(self):
        assert not matrices_equal([[1.0, 2.0]], [[1.0, 2.0], [3.0, 4.0]])
