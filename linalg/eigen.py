"""
Characteristic polynomial and eigenvalues.

``det(xI - A)`` is expanded along the first row over polynomial entries,
so the result is exact and monic; its roots come from the equation solver
(rational, ``a ± b*sqrt(m)``, or unsolvable markers for irreducible cubic
and higher factors).
"""

from algebra.equation import Root, solve_all_roots
from algebra.polynomial import Polynomial
from linalg.matrix import Matrix


def _expand(entries: list[list[Polynomial]]) -> Polynomial:
    n = len(entries)
    if n == 1:
        return entries[0][0]
    if n == 2:
        return entries[0][0] * entries[1][1] - entries[0][1] * entries[1][0]
    total = Polynomial()
    for j, element in enumerate(entries[0]):
        if element.is_zero():
            continue
        minor = [row[:j] + row[j + 1:] for row in entries[1:]]
        term = element * _expand(minor)
        total = total + term if j % 2 == 0 else total - term
    return total


def characteristic_polynomial(matrix: Matrix, variable: str = "x") -> Polynomial:
    """``det(xI - A)`` as a polynomial in *variable*."""
    matrix.require_square("The characteristic polynomial")
    n = matrix.rows
    if n == 0:
        return Polynomial.constant(1, variable)
    x = Polynomial.monomial(1, 1, variable)
    entries = [
        [(x if i == j else Polynomial(variable=variable)) - matrix[i, j] for j in range(n)]
        for i in range(n)
    ]
    return _expand(entries)


def eigenvalues(matrix: Matrix) -> list[Root]:
    """Roots of the characteristic polynomial, repeated by algebraic multiplicity."""
    return solve_all_roots(characteristic_polynomial(matrix))
