"""Circular reference detection across cells and variables."""

import pytest

from gridcalc import CycleError, evaluate_cell, evaluate_with_grid, visit


class TestCellCycles:
    def test_self_reference(self):
        grid = [["=A1"]]
        with pytest.raises(CycleError, match="#CYCLE!"):
            evaluate_cell(grid, grid[0][0], 0, 0)

    def test_two_cell_ring(self):
        grid = [["=B1", "=A1"]]
        with pytest.raises(CycleError) as exc:
            evaluate_cell(grid, grid[0][0], 0, 0)
        assert exc.value.marker == "#CYCLE!"
        assert exc.value.key == "0:0"

    def test_three_cell_ring(self):
        grid = [["=B1", "=C1", "=A1"]]
        for col in range(3):
            with pytest.raises(CycleError):
                evaluate_cell(grid, grid[0][col], 0, col)

    def test_ring_through_grid_entry_point(self):
        grid = [["=B1", "=A1"]]
        with pytest.raises(CycleError):
            evaluate_with_grid(grid, "=A1 + 1")

    def test_cycle_inside_function_is_not_wrapped(self):
        grid = [["=abs(B1)", "=max(A1, 1)"]]
        with pytest.raises(CycleError):
            evaluate_cell(grid, grid[0][0], 0, 0)

    def test_cell_outside_ring_still_fails(self):
        grid = [["=B1", "=A1", "=A1 + 1"]]
        with pytest.raises(CycleError):
            evaluate_cell(grid, grid[0][2], 0, 2)


class TestNoFalsePositives:
    def test_repeated_reference(self):
        grid = [["5", "=A1+A1"]]
        assert evaluate_cell(grid, grid[0][1], 0, 1) == 10

    def test_diamond(self):
        grid = [["2", "=A1*2", "=A1+B1"]]
        assert evaluate_cell(grid, grid[0][2], 0, 2) == 6

    def test_chain(self):
        grid = [["1", "=A1+1"], ["=B1+1", "=A2+1"]]
        assert evaluate_cell(grid, grid[1][1], 1, 1) == 4

    def test_empty_and_missing_cells_are_zero(self):
        grid = [["", "=A1 + Z99 + 3"]]
        assert evaluate_cell(grid, grid[0][1], 0, 1) == 3

    def test_evaluating_twice(self):
        grid = [["5", "=A1*2"]]
        assert evaluate_cell(grid, grid[0][1], 0, 1) == 10
        assert evaluate_cell(grid, grid[0][1], 0, 1) == 10


class TestVariableCycles:
    def test_variables_defined_in_each_other(self, evaluator, registry):
        grid = [["x = y + 1", "y = x + 1"]]
        registry.define_variable_in_cell("x", 1, "0:0")
        registry.define_variable_in_cell("y", 1, "0:1")
        with pytest.raises(CycleError):
            evaluator.evaluate_cell(grid, grid[0][0], 0, 0)

    def test_variable_defined_from_itself(self, evaluator, registry):
        grid = [["x = x + 1"]]
        registry.define_variable_in_cell("x", 1, "0:0")
        with pytest.raises(CycleError):
            evaluator.evaluate_cell(grid, grid[0][0], 0, 0)

    def test_variable_read_in_its_own_cell_reference(self, evaluator, registry):
        grid = [["L = B1", "=L * 2"]]
        registry.define_variable_in_cell("L", 1, "0:0")
        with pytest.raises(CycleError):
            evaluator.evaluate_cell(grid, grid[0][1], 0, 1)


class TestVisit:
    def test_key_removed_after_block(self):
        visiting = set()
        with visit("0:0", visiting):
            assert visiting == {"0:0"}
        assert visiting == set()

    def test_key_removed_when_block_fails(self):
        visiting = set()
        with pytest.raises(RuntimeError):
            with visit("0:0", visiting):
                raise RuntimeError("boom")
        assert visiting == set()

    def test_reentry_raises(self):
        visiting = set()
        with visit("var:x", visiting):
            with pytest.raises(CycleError) as exc:
                with visit("var:x", visiting):
                    pass
            assert exc.value.key == "var:x"
        assert visiting == set()
