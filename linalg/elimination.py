"""
Gaussian elimination over exact rationals, with optional step recording.

Every elementary row operation comes in two forms:

  - a pure form (``swap_rows``, ``scale_row``, ``add_scaled_row``) that
    returns a new matrix, and
  - an in-place form (``apply_*``) that mutates the matrix it is given and,
    when a history is passed, appends an ``OperationStep``.

The algorithms (REF, RREF, rank, determinant, Gauss-Jordan inverse) are
built only from the in-place forms, so whatever they do can be replayed
from their history. Each takes ``history=None``; use
``run_recorded(func, matrix)`` to get ``(result, history)`` back.
"""

import logging
from fractions import Fraction
from typing import Optional

from algebra.errors import DivisionByZeroError, NotInvertibleError
from linalg.history import OperationHistory, OperationType, recording
from linalg.matrix import Matrix, to_fraction

logger = logging.getLogger(__name__)


def _label(i: int) -> str:
    return f"R{i + 1}"


def _factor_text(value: Fraction) -> str:
    return f"({value})" if value < 0 or value.denominator != 1 else str(value)


# ── Elementary row operations ───────────────────────────────────────────

def apply_swap_rows(matrix: Matrix, r1: int, r2: int,
                    history: Optional[OperationHistory] = None) -> None:
    first, second = matrix.row(r1), matrix.row(r2)
    matrix.set_row(r1, second)
    matrix.set_row(r2, first)
    if history is not None:
        history.record(OperationType.SWAP_ROWS, f"{_label(r1)} ↔ {_label(r2)}",
                       matrix, row1=r1, row2=r2)


def apply_scale_row(matrix: Matrix, row: int, scalar,
                    history: Optional[OperationHistory] = None) -> None:
    scalar = to_fraction(scalar)
    if scalar == 0:
        raise DivisionByZeroError("A row cannot be scaled by zero.")
    matrix.set_row(row, [v * scalar for v in matrix.row(row)])
    if history is not None:
        history.record(OperationType.SCALE_ROW,
                       f"{_label(row)} → {_factor_text(scalar)}·{_label(row)}",
                       matrix, row1=row, scalar=scalar)


def apply_add_scaled_row(matrix: Matrix, target: int, source: int, scalar,
                         history: Optional[OperationHistory] = None) -> None:
    """``row[target] += scalar * row[source]``."""
    scalar = to_fraction(scalar)
    source_row = matrix.row(source)
    matrix.set_row(target, [t + scalar * s for t, s in zip(matrix.row(target), source_row)])
    if history is not None:
        history.record(OperationType.ADD_SCALED_ROW,
                       f"{_label(target)} → {_label(target)} + {_factor_text(scalar)}·{_label(source)}",
                       matrix, row1=target, row2=source, scalar=scalar)


def swap_rows(matrix: Matrix, r1: int, r2: int) -> Matrix:
    result = matrix.copy()
    apply_swap_rows(result, r1, r2)
    return result


def scale_row(matrix: Matrix, row: int, scalar) -> Matrix:
    result = matrix.copy()
    apply_scale_row(result, row, scalar)
    return result


def add_scaled_row(matrix: Matrix, target: int, source: int, scalar) -> Matrix:
    result = matrix.copy()
    apply_add_scaled_row(result, target, source, scalar)
    return result


# ── Elimination passes ──────────────────────────────────────────────────

def _find_pivot_row(matrix: Matrix, col: int, start: int) -> Optional[int]:
    return next((i for i in range(start, matrix.rows) if matrix[i, col] != 0), None)


def _forward_eliminate(matrix: Matrix, history: Optional[OperationHistory],
                       pivot_cols: Optional[int] = None) -> list[int]:
    """Reduce *matrix* in place to row echelon form; returns the pivot columns.

    Pivots are not normalised: each entry below a pivot is cleared with
    ``-entry/pivot`` directly. Only the first *pivot_cols* columns may hold
    pivots (all of them by default).
    """
    limit = matrix.cols if pivot_cols is None else pivot_cols
    pivots: list[int] = []
    row = 0
    for col in range(limit):
        if row >= matrix.rows:
            break
        pivot_row = _find_pivot_row(matrix, col, row)
        if pivot_row is None:
            continue
        if pivot_row != row:
            apply_swap_rows(matrix, row, pivot_row, history)
        pivot = matrix[row, col]
        for i in range(row + 1, matrix.rows):
            entry = matrix[i, col]
            if entry != 0:
                apply_add_scaled_row(matrix, i, row, -entry / pivot, history)
        logger.debug("pivot %s at (%d, %d)", pivot, row, col)
        pivots.append(col)
        row += 1
    return pivots


def _back_substitute(matrix: Matrix, pivots: list[int],
                     history: Optional[OperationHistory]) -> None:
    """Turn an echelon matrix into RREF in place, bottom pivot first."""
    for row in reversed(range(len(pivots))):
        col = pivots[row]
        pivot = matrix[row, col]
        if pivot != 1:
            apply_scale_row(matrix, row, 1 / pivot, history)
        for i in range(row):
            entry = matrix[i, col]
            if entry != 0:
                apply_add_scaled_row(matrix, i, row, -entry, history)


def pivot_columns(matrix: Matrix) -> list[int]:
    """Column of the first non-zero entry of each non-zero row of an echelon matrix."""
    columns = []
    for i in range(matrix.rows):
        col = next((j for j in range(matrix.cols) if matrix[i, j] != 0), None)
        if col is not None:
            columns.append(col)
    return columns


# ── Public algorithms ───────────────────────────────────────────────────

@recording(OperationHistory)
def to_row_echelon_form(matrix: Matrix, history: Optional[OperationHistory] = None) -> Matrix:
    """Row echelon form of *matrix* (the argument is not modified)."""
    result = matrix.copy()
    if history is not None:
        history.record(OperationType.INITIAL_STATE, "Initial matrix", result)
    _forward_eliminate(result, history)
    if history is not None:
        history.record(OperationType.RESULT_STATE, "Row echelon form", result)
    return result


@recording(OperationHistory)
def to_reduced_row_echelon_form(matrix: Matrix,
                                history: Optional[OperationHistory] = None) -> Matrix:
    """Reduced row echelon form: pivots 1, zeros above and below each pivot."""
    result = matrix.copy()
    if history is not None:
        history.record(OperationType.INITIAL_STATE, "Initial matrix", result)
    pivots = _forward_eliminate(result, history)
    _back_substitute(result, pivots, history)
    if history is not None:
        history.record(OperationType.RESULT_STATE, "Reduced row echelon form", result)
    return result


@recording(OperationHistory)
def rank(matrix: Matrix, history: Optional[OperationHistory] = None) -> int:
    """Number of non-zero rows in the reduced row echelon form."""
    reduced = to_reduced_row_echelon_form(matrix, history)
    return sum(1 for i in range(reduced.rows) if not reduced.is_zero_row(i))


@recording(OperationHistory)
def determinant(matrix: Matrix, history: Optional[OperationHistory] = None) -> Fraction:
    """Determinant by elimination.

    Row swaps flip the sign and the product of the pivots is the
    determinant of the triangular result; a column without a pivot means
    the determinant is 0. 1x1 and 2x2 matrices are computed directly.
    """
    matrix.require_square("The determinant")
    n = matrix.rows
    work = matrix.copy()
    if history is not None:
        history.record(OperationType.INITIAL_STATE, "Initial matrix", work)
    if n == 0:
        return Fraction(1)
    if n == 1:
        result = work[0, 0]
        if history is not None:
            history.record(OperationType.RESULT_STATE, f"det = {result}", work)
        return result
    if n == 2:
        result = work[0, 0] * work[1, 1] - work[0, 1] * work[1, 0]
        if history is not None:
            history.record(OperationType.RESULT_STATE,
                           f"det = ad - bc = {work[0, 0]}·{work[1, 1]} - "
                           f"{_factor_text(work[0, 1])}·{_factor_text(work[1, 0])} = {result}",
                           work)
        return result

    sign = 1
    product = Fraction(1)
    for col in range(n):
        pivot_row = _find_pivot_row(work, col, col)
        if pivot_row is None:
            if history is not None:
                history.record(OperationType.RESULT_STATE,
                               f"Column {col + 1} has no pivot, so det = 0", work)
            return Fraction(0)
        if pivot_row != col:
            apply_swap_rows(work, col, pivot_row, history)
            sign = -sign
        pivot = work[col, col]
        product *= pivot
        for i in range(col + 1, n):
            entry = work[i, col]
            if entry != 0:
                apply_add_scaled_row(work, i, col, -entry / pivot, history)

    result = sign * product
    if history is not None:
        swaps = "" if sign == 1 else " (sign flipped by an odd number of swaps)"
        history.record(OperationType.RESULT_STATE,
                       f"det = product of the pivots{swaps} = {result}", work)
    return result


@recording(OperationHistory)
def inverse_gauss_jordan(matrix: Matrix, history: Optional[OperationHistory] = None) -> Matrix:
    """Inverse by reducing ``[A | I]`` to ``[I | A^-1]``.

    Raises NotInvertibleError when a column has no pivot.
    """
    matrix.require_square("The inverse")
    n = matrix.rows
    work = matrix.augment(Matrix.identity(n))
    if history is not None:
        history.record(OperationType.INITIAL_STATE, "Augmented matrix [A | I]", work)
    for col in range(n):
        pivot_row = _find_pivot_row(work, col, col)
        if pivot_row is None:
            raise NotInvertibleError(
                f"The matrix is not invertible: column {col + 1} has no pivot."
            )
        if pivot_row != col:
            apply_swap_rows(work, col, pivot_row, history)
        pivot = work[col, col]
        if pivot != 1:
            apply_scale_row(work, col, 1 / pivot, history)
        for i in range(n):
            entry = work[i, col]
            if i != col and entry != 0:
                apply_add_scaled_row(work, i, col, -entry, history)
    result = work.right_part(n)
    if history is not None:
        history.record(OperationType.RESULT_STATE, "The right block is the inverse", result)
    return result


@recording(OperationHistory)
def union_rref(a: Matrix, b: Matrix,
               history: Optional[OperationHistory] = None) -> tuple[Matrix, Matrix]:
    """Reduce *a* to RREF and apply the same row operations to *b*.

    Returns ``(rref(a), transformed b)``. Pivots are only taken from *a*.
    """
    work = a.augment(b)
    if history is not None:
        history.record(OperationType.INITIAL_STATE, "Augmented matrix [A | B]", work)
    pivots = _forward_eliminate(work, history, pivot_cols=a.cols)
    _back_substitute(work, pivots, history)
    if history is not None:
        history.record(OperationType.RESULT_STATE, "RREF of A with B carried along", work)
    return work.left_part(a.cols), work.right_part(a.cols)
