"""
Cofactor expansion, cofactor matrix, adjugate and the adjugate inverse.

``determinant_by_expansion`` records ``ExpansionStep`` entries: which
row or column is expanded, each element with its cofactor and term, and
the running total. Minors inside the expansion are evaluated silently.
"""

import logging
from fractions import Fraction
from typing import Optional

from algebra.errors import InvalidArgumentError, NotInvertibleError
from linalg.elimination import determinant
from linalg.history import (
    ExpansionHistory,
    ExpansionType,
    OperationHistory,
    OperationType,
    recording,
)
from linalg.matrix import Matrix

logger = logging.getLogger(__name__)

EXPANSION_STRATEGIES = ("first_row", "optimal")


def _sign(i: int, j: int) -> int:
    return 1 if (i + j) % 2 == 0 else -1


def find_optimal_expansion_index(matrix: Matrix) -> tuple[bool, int]:
    """Line with the most zeros as ``(is_row, index)``; rows win ties."""
    best_is_row, best_index, best_zeros = True, 0, -1
    for i in range(matrix.rows):
        zeros = sum(1 for v in matrix.row(i) if v == 0)
        if zeros > best_zeros:
            best_is_row, best_index, best_zeros = True, i, zeros
    for j in range(matrix.cols):
        zeros = sum(1 for v in matrix.column(j) if v == 0)
        if zeros > best_zeros:
            best_is_row, best_index, best_zeros = False, j, zeros
    return best_is_row, best_index


def _expand(matrix: Matrix) -> Fraction:
    """Determinant by first-row expansion, without recording."""
    n = matrix.rows
    if n == 0:
        return Fraction(1)
    if n == 1:
        return matrix[0, 0]
    if n == 2:
        return matrix[0, 0] * matrix[1, 1] - matrix[0, 1] * matrix[1, 0]
    total = Fraction(0)
    for j in range(n):
        element = matrix[0, j]
        if element != 0:
            total += _sign(0, j) * element * _expand(matrix.submatrix(0, j))
    return total


@recording(ExpansionHistory)
def determinant_by_expansion(matrix: Matrix, history: Optional[ExpansionHistory] = None,
                             strategy: str = "first_row") -> Fraction:
    """Determinant by cofactor (Laplace) expansion.

    ``strategy="first_row"`` expands along row 1; ``"optimal"`` picks the
    row or column with the most zeros.
    """
    matrix.require_square("The determinant")
    if strategy not in EXPANSION_STRATEGIES:
        raise InvalidArgumentError(
            f"Unknown expansion strategy '{strategy}'; use one of {', '.join(EXPANSION_STRATEGIES)}."
        )
    n = matrix.rows
    if history is not None:
        history.record(ExpansionType.INITIAL_STATE, f"Expand the determinant of this {n}x{n} matrix",
                       matrix)
    if n <= 2:
        result = _expand(matrix)
        if history is not None:
            history.record(ExpansionType.RESULT_STATE, f"det = {result}", matrix,
                           accumulated_value=result)
        return result

    along_row, index = (True, 0) if strategy == "first_row" else find_optimal_expansion_index(matrix)
    if history is not None:
        line = "row" if along_row else "column"
        history.record(
            ExpansionType.ROW_EXPANSION if along_row else ExpansionType.COLUMN_EXPANSION,
            f"Expand along {line} {index + 1}", matrix, expansion_index=index,
        )

    total = Fraction(0)
    for k in range(n):
        i, j = (index, k) if along_row else (k, index)
        element = matrix[i, j]
        if element == 0:
            if history is not None:
                history.record(ExpansionType.SUBMATRIX_CALCULATION,
                               f"a{i + 1}{j + 1} = 0, so its term is 0", matrix,
                               expansion_index=index, element_index=k, element=element,
                               term_value=Fraction(0), accumulated_value=total)
            continue
        minor = matrix.submatrix(i, j)
        cofactor_value = _sign(i, j) * _expand(minor)
        term = element * cofactor_value
        total += term
        if history is not None:
            history.record(ExpansionType.SUBMATRIX_CALCULATION,
                           f"a{i + 1}{j + 1}·C{i + 1}{j + 1} = {element}·{cofactor_value} = {term}",
                           minor, expansion_index=index, element_index=k, element=element,
                           cofactor=cofactor_value, term_value=term, accumulated_value=total)
    logger.debug("expansion of %dx%d matrix gives %s", n, n, total)
    if history is not None:
        history.record(ExpansionType.RESULT_STATE, f"det = {total}", matrix,
                       accumulated_value=total)
    return total


def cofactor(matrix: Matrix, i: int, j: int) -> Fraction:
    """``(-1)^(i+j)`` times the minor at ``(i, j)``."""
    matrix.require_square("A cofactor")
    return _sign(i, j) * determinant(matrix.submatrix(i, j))


@recording(OperationHistory)
def cofactor_matrix(matrix: Matrix, history: Optional[OperationHistory] = None) -> Matrix:
    matrix.require_square("The cofactor matrix")
    if history is not None:
        history.record(OperationType.INITIAL_STATE, "Initial matrix", matrix)
    n = matrix.rows
    result = Matrix(n, n)
    for i in range(n):
        for j in range(n):
            result[i, j] = cofactor(matrix, i, j)
    if history is not None:
        history.record(OperationType.RESULT_STATE, "Cofactor matrix: C[i,j] = (-1)^(i+j)·M[i,j]",
                       result)
    return result


@recording(OperationHistory)
def adjugate(matrix: Matrix, history: Optional[OperationHistory] = None) -> Matrix:
    """Transpose of the cofactor matrix."""
    result = cofactor_matrix(matrix, history).transpose()
    if history is not None:
        history.record(OperationType.RESULT_STATE, "Adjugate: transpose of the cofactor matrix",
                       result)
    return result


@recording(OperationHistory)
def inverse(matrix: Matrix, history: Optional[OperationHistory] = None) -> Matrix:
    """Inverse as ``adj(A) / det(A)``; NotInvertibleError when ``det(A) == 0``."""
    matrix.require_square("The inverse")
    det = determinant(matrix)
    if det == 0:
        raise NotInvertibleError("The matrix is not invertible: its determinant is 0.")
    if history is not None:
        history.record(OperationType.INITIAL_STATE, f"det(A) = {det}", matrix)
    result = adjugate(matrix, history) * (1 / det)
    if history is not None:
        history.record(OperationType.RESULT_STATE, f"A^-1 = adj(A) / {det}", result)
    return result
