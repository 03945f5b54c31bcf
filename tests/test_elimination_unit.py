from fractions import Fraction

import pytest

from algebra.errors import DivisionByZeroError, InvalidArgumentError, NotInvertibleError
from linalg.elimination import (
    add_scaled_row,
    apply_scale_row,
    determinant,
    inverse_gauss_jordan,
    pivot_columns,
    rank,
    scale_row,
    swap_rows,
    to_reduced_row_echelon_form,
    to_row_echelon_form,
    union_rref,
)
from linalg.history import OperationHistory, OperationType, run_recorded
from linalg.matrix import Matrix

A2 = "[1, 2; 3, 4]"
SINGULAR = "[1, 2, 3; 4, 5, 6; 7, 8, 9]"


class TestRowOperations:
    def test_pure_forms_leave_input_alone(self) -> None:
        m = Matrix.parse(A2)
        assert swap_rows(m, 0, 1) == Matrix.parse("[3, 4; 1, 2]")
        assert scale_row(m, 1, Fraction(1, 2)) == Matrix.parse("[1, 2; 3/2, 2]")
        assert add_scaled_row(m, 1, 0, -3) == Matrix.parse("[1, 2; 0, -2]")
        assert m == Matrix.parse(A2)

    def test_scale_by_zero(self) -> None:
        with pytest.raises(DivisionByZeroError):
            apply_scale_row(Matrix.parse(A2), 0, 0)

    def test_recorded_step_fields(self) -> None:
        history = OperationHistory()
        apply_scale_row(Matrix.parse(A2), 0, -2, history)
        step = history.last()
        assert step.kind is OperationType.SCALE_ROW
        assert step.row1 == 0
        assert step.scalar == -2
        assert step.description == "R1 → (-2)·R1"


class TestEchelonForms:
    def test_ref(self) -> None:
        result, history = run_recorded(to_row_echelon_form, Matrix.parse(A2))
        assert result == Matrix.parse("[1, 2; 0, -2]")
        assert [s.kind for s in history] == [
            OperationType.INITIAL_STATE,
            OperationType.ADD_SCALED_ROW,
            OperationType.RESULT_STATE,
        ]
        assert history[1].description == "R2 → R2 + (-3)·R1"

    def test_ref_swaps_for_zero_pivot(self) -> None:
        result, history = run_recorded(to_row_echelon_form, Matrix.parse("[0, 1; 1, 0]"))
        assert result == Matrix.identity(2)
        swap = history[1]
        assert swap.kind is OperationType.SWAP_ROWS
        assert (swap.row1, swap.row2) == (0, 1)

    def test_rref(self) -> None:
        assert to_reduced_row_echelon_form(Matrix.parse(A2)) == Matrix.identity(2)
        assert to_reduced_row_echelon_form(Matrix.parse(SINGULAR)) == Matrix.parse(
            "[1, 0, -1; 0, 1, 2; 0, 0, 0]"
        )

    def test_rref_of_rectangular(self) -> None:
        m = Matrix.parse("[2, 4, 6; 1, 2, 4]")
        reduced = to_reduced_row_echelon_form(m)
        assert reduced == Matrix.parse("[1, 2, 0; 0, 0, 1]")
        assert pivot_columns(reduced) == [0, 2]

    def test_input_not_modified(self) -> None:
        m = Matrix.parse(SINGULAR)
        to_reduced_row_echelon_form(m)
        assert m == Matrix.parse(SINGULAR)

    def test_history_snapshots_are_independent(self) -> None:
        _, history = run_recorded(to_reduced_row_echelon_form, Matrix.parse(A2))
        assert history[0].matrix == Matrix.parse(A2)
        assert history.last().matrix == Matrix.identity(2)


class TestRankAndDeterminant:
    @pytest.mark.parametrize(
        "text,expected",
        [(A2, 2), (SINGULAR, 2), ("[0, 0; 0, 0]", 0), ("[1, 2, 3]", 1), ("[1; 2; 3]", 1)],
    )
    def test_rank(self, text: str, expected: int) -> None:
        assert rank(Matrix.parse(text)) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("[5]", 5),
            (A2, -2),
            (SINGULAR, 0),
            ("[2, 1, 3; 0, -1, 4; 1, 2, 0]", -9),
            ("[0, 1, 2; 1, 0, 3; 4, -3, 8]", -2),
            ("[1/2, 0, 0; 0, 2/3, 0; 0, 0, 3]", 1),
        ],
    )
    def test_determinant(self, text: str, expected) -> None:
        assert determinant(Matrix.parse(text)) == expected

    def test_determinant_of_empty_matrix(self) -> None:
        assert determinant(Matrix(0, 0)) == 1

    def test_determinant_requires_square(self) -> None:
        with pytest.raises(InvalidArgumentError, match="square"):
            determinant(Matrix.parse("[1, 2, 3]"))

    def test_determinant_history_notes_the_sign_flip(self) -> None:
        value, history = run_recorded(determinant, Matrix.parse("[0, 1, 2; 1, 0, 3; 4, -3, 8]"))
        assert value == -2
        assert any(s.kind is OperationType.SWAP_ROWS for s in history)
        assert "sign flipped" in history.last().description


class TestInverse:
    def test_inverse_2x2(self) -> None:
        assert inverse_gauss_jordan(Matrix.parse(A2)) == Matrix.parse("[-2, 1; 3/2, -1/2]")

    def test_inverse_3x3_times_original_is_identity(self) -> None:
        m = Matrix.parse("[2, 1, 3; 0, -1, 4; 1, 2, 0]")
        assert m * inverse_gauss_jordan(m) == Matrix.identity(3)

    def test_singular(self) -> None:
        with pytest.raises(NotInvertibleError, match="not invertible"):
            inverse_gauss_jordan(Matrix.parse(SINGULAR))

    def test_history_starts_from_augmented_identity(self) -> None:
        _, history = run_recorded(inverse_gauss_jordan, Matrix.parse(A2))
        assert history[0].matrix == Matrix.parse("[1, 2, 1, 0; 3, 4, 0, 1]")


def test_union_rref_carries_the_second_block() -> None:
    reduced, carried = union_rref(Matrix.parse(A2), Matrix.parse("[1; 1]"))
    assert reduced == Matrix.identity(2)
    assert carried == Matrix.parse("[-1; 1]")
