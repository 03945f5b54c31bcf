"""
Linear systems ``Ax = b`` over exact rationals.

The system is classified by comparing ``rank(A)``, ``rank([A | b])`` and the
number of unknowns (Rouché–Capelli):

  - rank(A) < rank([A | b])           → no solution
  - rank(A) == rank([A | b]) == n     → unique solution
  - rank(A) == rank([A | b]) < n      → infinitely many solutions

The particular solution sets every free variable to 0; the homogeneous
basis has one column per free variable.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from algebra.errors import InvalidArgumentError
from linalg.codec import join_fields, matrix_fields, matrix_from_fields, split_fields
from linalg.elimination import pivot_columns, rank, to_reduced_row_echelon_form
from linalg.history import OperationHistory, OperationType, recording
from linalg.matrix import Matrix
from linalg.vector import Vector

logger = logging.getLogger(__name__)


class SolutionType(Enum):
    UNIQUE = "unique"
    INFINITE = "infinite"
    NONE = "none"
    UNDETERMINED = "undetermined"


@dataclass
class SystemInfo:
    coefficient_rank: int = 0
    augmented_rank: int = 0
    num_variables: int = 0
    num_equations: int = 0
    solution_type: SolutionType = SolutionType.UNDETERMINED
    description: str = ""

    @property
    def free_variables(self) -> int:
        return self.num_variables - self.coefficient_rank


@dataclass
class EquationSolution:
    solution_type: SolutionType = SolutionType.UNDETERMINED
    particular: Matrix = field(default_factory=lambda: Matrix(0, 0))
    homogeneous: Matrix = field(default_factory=lambda: Matrix(0, 0))
    info: SystemInfo = field(default_factory=SystemInfo)
    description: str = ""
    augmented: Matrix = field(default_factory=lambda: Matrix(0, 0))

    def has_solution(self) -> bool:
        return self.solution_type in (SolutionType.UNIQUE, SolutionType.INFINITE)

    def has_unique_solution(self) -> bool:
        return self.solution_type is SolutionType.UNIQUE

    def has_infinite_solutions(self) -> bool:
        return self.solution_type is SolutionType.INFINITE

    # ── Serialization ───────────────────────────────────────────────────

    def serialize(self) -> str:
        info = self.info
        return join_fields([
            "EQUATION_SOLUTION",
            self.solution_type.value,
            info.coefficient_rank,
            info.augmented_rank,
            info.num_variables,
            info.num_equations,
            info.solution_type.value,
            info.description,
            self.description,
            join_fields(matrix_fields(self.particular)),
            join_fields(matrix_fields(self.homogeneous)),
            join_fields(matrix_fields(self.augmented)),
        ])

    @classmethod
    def deserialize(cls, text: str) -> "EquationSolution":
        fields = split_fields(text)
        if len(fields) != 12 or fields[0] != "EQUATION_SOLUTION":
            raise InvalidArgumentError("Not a serialized equation solution.")
        try:
            info = SystemInfo(
                coefficient_rank=int(fields[2]),
                augmented_rank=int(fields[3]),
                num_variables=int(fields[4]),
                num_equations=int(fields[5]),
                solution_type=SolutionType(fields[6]),
                description=fields[7],
            )
            solution_type = SolutionType(fields[1])
        except ValueError as exc:
            raise InvalidArgumentError(f"Corrupt equation solution: {exc}") from None
        return cls(
            solution_type=solution_type,
            particular=matrix_from_fields(split_fields(fields[9])),
            homogeneous=matrix_from_fields(split_fields(fields[10])),
            info=info,
            description=fields[8],
            augmented=matrix_from_fields(split_fields(fields[11])),
        )

    def __str__(self) -> str:
        return self.description


def _as_column(b: Union[Matrix, Vector], rows: int) -> Matrix:
    if isinstance(b, Vector):
        b = b.to_column()
    if b.cols != 1:
        raise InvalidArgumentError(f"The right-hand side must be a column, got {b.rows}x{b.cols}.")
    if b.rows != rows:
        raise InvalidArgumentError(
            f"The coefficient matrix has {rows} rows but the right-hand side has {b.rows}."
        )
    return b


class EquationSolver:
    """Solves ``Ax = b`` and ``Ax = 0`` by reduced row echelon form."""

    @staticmethod
    def analyze_system(a: Matrix, b: Union[Matrix, Vector]) -> SystemInfo:
        b = _as_column(b, a.rows)
        info = SystemInfo(
            coefficient_rank=rank(a),
            augmented_rank=rank(a.augment(b)),
            num_variables=a.cols,
            num_equations=a.rows,
        )
        if info.coefficient_rank < info.augmented_rank:
            info.solution_type = SolutionType.NONE
            info.description = "No solution: rank(A) < rank([A|b])."
        elif info.coefficient_rank == info.num_variables:
            info.solution_type = SolutionType.UNIQUE
            info.description = "Unique solution: rank(A) = rank([A|b]) = number of unknowns."
        elif info.coefficient_rank < info.num_variables:
            info.solution_type = SolutionType.INFINITE
            info.description = "Infinitely many solutions: rank(A) = rank([A|b]) < number of unknowns."
        else:
            info.description = "Undetermined."
        return info

    @staticmethod
    def analyze_homogeneous_system(a: Matrix) -> SystemInfo:
        r = rank(a)
        info = SystemInfo(coefficient_rank=r, augmented_rank=r,
                          num_variables=a.cols, num_equations=a.rows)
        if r == a.cols:
            info.solution_type = SolutionType.UNIQUE
            info.description = "Only the zero solution."
        else:
            info.solution_type = SolutionType.INFINITE
            info.description = "Non-zero solutions exist (infinitely many)."
        return info

    @staticmethod
    @recording(OperationHistory)
    def solve(a: Matrix, b: Union[Matrix, Vector],
              history: Optional[OperationHistory] = None) -> EquationSolution:
        b = _as_column(b, a.rows)
        info = EquationSolver.analyze_system(a, b)
        augmented = a.augment(b)
        if history is not None:
            history.record(OperationType.INITIAL_STATE, "Solve Ax = b", a)
            history.record(OperationType.RESULT_STATE, "Augmented matrix [A | b]", augmented)

        reduced = to_reduced_row_echelon_form(augmented, history)
        a_reduced = reduced.left_part(a.cols)
        b_reduced = reduced.right_part(a.cols)
        pivots = pivot_columns(a_reduced)

        solution = EquationSolution(solution_type=info.solution_type, info=info,
                                    augmented=augmented)
        if info.solution_type is SolutionType.NONE:
            if history is not None:
                history.record(OperationType.RESULT_STATE,
                               "No solution: rank(A) < rank([A|b])", reduced)
        elif info.solution_type is SolutionType.UNIQUE:
            solution.particular = _particular_solution(a_reduced, b_reduced, pivots)
            if history is not None:
                history.record(OperationType.RESULT_STATE,
                               "Unique solution: rank(A) = rank([A|b]) = n", solution.particular)
        elif info.solution_type is SolutionType.INFINITE:
            solution.particular = _particular_solution(a_reduced, b_reduced, pivots)
            solution.homogeneous = _homogeneous_basis(a_reduced, pivots)
            if history is not None:
                history.record(OperationType.RESULT_STATE,
                               f"Infinitely many solutions: rank(A) = rank([A|b]) < n\n"
                               f"Free variables: {info.free_variables}", reduced)
        solution.description = _describe(solution)
        logger.debug("system %dx%d: %s", a.rows, a.cols, info.solution_type.value)
        return solution

    @staticmethod
    @recording(OperationHistory)
    def solve_homogeneous(a: Matrix, history: Optional[OperationHistory] = None) -> EquationSolution:
        if history is not None:
            history.record(OperationType.INITIAL_STATE, "Solve the homogeneous system Ax = 0", a)
        return EquationSolver.solve(a, Matrix(a.rows, 1), history)


def _particular_solution(a_reduced: Matrix, b_reduced: Matrix, pivots: list[int]) -> Matrix:
    x = Matrix(a_reduced.cols, 1)
    for row, col in enumerate(pivots):
        x[col, 0] = b_reduced[row, 0]
    return x


def _homogeneous_basis(a_reduced: Matrix, pivots: list[int]) -> Matrix:
    n = a_reduced.cols
    free = [j for j in range(n) if j not in pivots]
    basis = Matrix(n, len(free))
    for k, free_col in enumerate(free):
        basis[free_col, k] = 1
        for row, col in enumerate(pivots):
            basis[col, k] = -a_reduced[row, free_col]
    return basis


def _describe(solution: EquationSolution) -> str:
    info = solution.info
    lines = [
        "System analysis:",
        f"  equations: {info.num_equations}",
        f"  unknowns: {info.num_variables}",
        f"  rank(A): {info.coefficient_rank}",
        f"  rank([A|b]): {info.augmented_rank}",
        "",
        info.description,
    ]
    if solution.solution_type is SolutionType.UNIQUE:
        values = ", ".join(f"x{i + 1} = {solution.particular[i, 0]}"
                           for i in range(solution.particular.rows))
        lines.append(f"Solution: {values}")
    elif solution.solution_type is SolutionType.INFINITE:
        k = solution.homogeneous.cols
        terms = " + ".join(f"k{i + 1}*v{i + 1}" for i in range(k))
        lines.append(f"General solution: x = x_p + {terms}")
        lines.append(f"where k1..k{k} are arbitrary and v1..v{k} are the basis columns.")
    return "\n".join(lines)
