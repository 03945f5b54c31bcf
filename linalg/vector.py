"""Exact vectors: arithmetic, dot and cross products, exact norms."""

from fractions import Fraction
from typing import Iterable

from algebra.errors import DivisionByZeroError, InvalidArgumentError
from algebra.radical import SimplifiedRadical, as_radical, simplify_sqrt
from linalg.matrix import Matrix, to_fraction


class Vector:
    __slots__ = ("_data",)

    def __init__(self, values: Iterable = ()):
        self._data = [to_fraction(v) for v in values]

    @classmethod
    def zeros(cls, n: int) -> "Vector":
        return cls([0] * n)

    @classmethod
    def parse(cls, text: str) -> "Vector":
        """``"[1, 2, 3]"``."""
        matrix = Matrix.parse(text)
        if matrix.rows == 1:
            return cls(matrix.row(0))
        if matrix.cols == 1:
            return cls(matrix.column(0))
        raise InvalidArgumentError(f"'{text}' is a {matrix.rows}x{matrix.cols} matrix, not a vector.")

    @classmethod
    def from_column(cls, matrix: Matrix, j: int = 0) -> "Vector":
        return cls(matrix.column(j))

    def to_column(self) -> Matrix:
        return Matrix.from_rows([v] for v in self._data) if self._data else Matrix(0, 1)

    def copy(self) -> "Vector":
        return Vector(self._data)

    # ── Sequence protocol ───────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __getitem__(self, i: int) -> Fraction:
        return self._data[i]

    def __setitem__(self, i: int, value) -> None:
        self._data[i] = to_fraction(value)

    # ── Arithmetic ──────────────────────────────────────────────────────

    def _check_same_size(self, other: "Vector", operation: str) -> None:
        if len(self) != len(other):
            raise InvalidArgumentError(
                f"Cannot {operation} vectors of sizes {len(self)} and {len(other)}."
            )

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_size(other, "add")
        return Vector(a + b for a, b in zip(self._data, other._data))

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_size(other, "subtract")
        return Vector(a - b for a, b in zip(self._data, other._data))

    def __neg__(self) -> "Vector":
        return Vector(-v for v in self._data)

    def __mul__(self, scalar) -> "Vector":
        if isinstance(scalar, (int, Fraction)) and not isinstance(scalar, bool):
            return Vector(v * scalar for v in self._data)
        return NotImplemented

    __rmul__ = __mul__

    def dot(self, other: "Vector") -> Fraction:
        self._check_same_size(other, "take the dot product of")
        return sum((a * b for a, b in zip(self._data, other._data)), Fraction(0))

    def cross(self, other: "Vector") -> "Vector":
        if len(self) != 3 or len(other) != 3:
            raise InvalidArgumentError("The cross product is only defined for 3-dimensional vectors.")
        a1, a2, a3 = self._data
        b1, b2, b3 = other._data
        return Vector([a2 * b3 - a3 * b2, a3 * b1 - a1 * b3, a1 * b2 - a2 * b1])

    def norm(self) -> SimplifiedRadical:
        """Euclidean length, exactly: ``sqrt(v . v)`` as a simplified radical."""
        return simplify_sqrt(self.dot(self))

    def normalize(self) -> tuple[SimplifiedRadical, ...]:
        """Unit vector; components are radicals because the norm usually is."""
        length = self.norm()
        if length.is_zero():
            raise DivisionByZeroError("The zero vector cannot be normalized.")
        return tuple(as_radical(v) / length for v in self._data)

    # ── Comparison and display ──────────────────────────────────────────

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        return self._data == other._data

    __hash__ = None

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self._data) + "]"

    def __repr__(self) -> str:
        return f"Vector('{self}')"
