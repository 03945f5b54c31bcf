"""
ExactSolver — exact linear algebra.

Public API
~~~~~~~~~~
- Containers: ``Matrix``, ``Vector``
- Elimination: ``to_row_echelon_form``, ``to_reduced_row_echelon_form``,
  ``rank``, ``determinant``, ``inverse_gauss_jordan``, ``union_rref``
- Cofactors: ``determinant_by_expansion``, ``cofactor_matrix``,
  ``adjugate``, ``inverse``
- Systems: ``EquationSolver``, ``EquationSolution``, ``SolutionType``
- Vector sets: ``represent``, ``represent_vector``, ``are_equivalent``,
  ``compare_vector_sets``
- Operation table: ``MATRIX_OPERATIONS`` (name -> function)
- Histories: ``OperationHistory``, ``ExpansionHistory``, ``run_recorded``
"""

import logging as _logging

from linalg.cofactor import adjugate, cofactor_matrix, determinant_by_expansion, inverse
from linalg.elimination import (
    determinant,
    inverse_gauss_jordan,
    rank,
    to_reduced_row_echelon_form,
    to_row_echelon_form,
    union_rref,
)
from linalg.history import ExpansionHistory, OperationHistory, run_recorded
from linalg.matrix import Matrix
from linalg.systems import EquationSolution, EquationSolver, SolutionType
from linalg.vector import Vector
from linalg.vectorset import (
    Representation,
    are_equivalent,
    compare_vector_sets,
    represent,
    represent_vector,
)

# Named single-matrix operations shared by the CLI and the HTTP app.
MATRIX_OPERATIONS = {
    "ref": to_row_echelon_form,
    "rref": to_reduced_row_echelon_form,
    "rank": rank,
    "det": determinant,
    "det_expansion": determinant_by_expansion,
    "inverse": inverse,
    "inverse_gauss": inverse_gauss_jordan,
    "cofactor": cofactor_matrix,
    "adjugate": adjugate,
    "transpose": Matrix.transpose,
}

__all__ = [
    "MATRIX_OPERATIONS",
    "Matrix",
    "Vector",
    "to_row_echelon_form",
    "to_reduced_row_echelon_form",
    "rank",
    "determinant",
    "inverse_gauss_jordan",
    "union_rref",
    "determinant_by_expansion",
    "cofactor_matrix",
    "adjugate",
    "inverse",
    "EquationSolver",
    "EquationSolution",
    "SolutionType",
    "OperationHistory",
    "ExpansionHistory",
    "run_recorded",
    "Representation",
    "represent",
    "represent_vector",
    "are_equivalent",
    "compare_vector_sets",
]

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
