"""
Linear representation between vector sets.

Vectors are the *columns* of the matrices passed in. ``represent`` asks
whether every column of ``B`` is a linear combination of the columns of
``A`` and, if so, with which coefficients.
"""

from dataclasses import dataclass
from typing import Optional

from algebra.errors import InvalidArgumentError
from linalg.elimination import rank, union_rref
from linalg.matrix import Matrix
from linalg.systems import EquationSolver
from linalg.vector import Vector


@dataclass
class Representation:
    """Outcome of expressing the columns of B through the columns of A.

    ``coefficients`` is ``m x n`` (column j holds the weights for column j of
    B); when the weights are not unique it holds the particular choice with
    every free weight set to 0.
    """

    representable: bool
    unique: bool = False
    coefficients: Optional[Matrix] = None


def represent(a: Matrix, b: Matrix) -> Representation:
    if a.rows != b.rows:
        raise InvalidArgumentError(
            f"Both vector sets need vectors of the same size ({a.rows} vs {b.rows})."
        )
    coefficients = Matrix(a.cols, b.cols)
    unique = True
    for j in range(b.cols):
        solution = EquationSolver.solve(a, Vector(b.column(j)))
        if not solution.has_solution():
            return Representation(representable=False)
        unique = unique and solution.has_unique_solution()
        for i in range(a.cols):
            coefficients[i, j] = solution.particular[i, 0]
    return Representation(representable=True, unique=unique, coefficients=coefficients)


def represent_vector(a: Matrix, v: Vector) -> Optional[Vector]:
    """Weights expressing *v* through the columns of *a*, or None."""
    if all(x == 0 for x in v):
        raise InvalidArgumentError("The target vector must not be the zero vector.")
    result = represent(a, v.to_column())
    return Vector(result.coefficients.column(0)) if result.representable else None


def are_equivalent(a: Matrix, b: Matrix) -> bool:
    """True when each set spans the other: ``rank(A) == rank(B) == rank([A | B])``."""
    if a.rows != b.rows:
        raise InvalidArgumentError(
            f"Both vector sets need vectors of the same size ({a.rows} vs {b.rows})."
        )
    joint = rank(a.augment(b))
    return rank(a) == joint and rank(b) == joint


def compare_vector_sets(a: Matrix, b: Matrix) -> dict:
    """Both directions of representation plus the joint reduced form.

    Returns a dict with ``a_represents_b``, ``b_represents_a``,
    ``equivalent`` and ``union_rref`` (``(rref(A), B carried along)``).
    """
    return {
        "a_represents_b": represent(a, b),
        "b_represents_a": represent(b, a),
        "equivalent": are_equivalent(a, b),
        "union_rref": union_rref(a, b),
    }
