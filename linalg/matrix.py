"""
Mutable rectangular matrices of exact rationals.

Entries are ``fractions.Fraction``; anything else handed in (ints, strings
such as ``"3/4"``) is converted on the way in. Matrices mutate in place
(``m[i, j] = v``, the row/column editors); algorithms that must leave the
caller's matrix alone copy it first.
"""

import re
from fractions import Fraction
from typing import Iterable, Sequence, Union

from algebra.errors import InvalidArgumentError
from algebra.rational import parse_rational

Scalar = Union[int, Fraction]


def to_fraction(value) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{value!r} is not a number.")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, str):
        return parse_rational(value)
    raise InvalidArgumentError(
        f"{value!r} is not an exact number; use int, Fraction or a string like '3/4'."
    )


class Matrix:
    __slots__ = ("_rows", "_cols", "_data")

    def __init__(self, rows: int, cols: int, fill: Scalar = 0):
        if rows < 0 or cols < 0:
            raise InvalidArgumentError(f"Invalid matrix size {rows}x{cols}.")
        fill = to_fraction(fill)
        self._rows = rows
        self._cols = cols
        self._data = [[fill] * cols for _ in range(rows)]

    # ── Construction ────────────────────────────────────────────────────

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable]) -> "Matrix":
        data = [[to_fraction(v) for v in row] for row in rows]
        widths = {len(row) for row in data}
        if len(widths) > 1:
            raise InvalidArgumentError("All matrix rows must have the same length.")
        matrix = cls(len(data), widths.pop() if widths else 0)
        matrix._data = data
        return matrix

    @classmethod
    def parse(cls, text: str) -> "Matrix":
        """``"[1, 2; 3, 4]"`` or ``"[[1, 2], [3, 4]]"``; entries may be ``3/4``."""
        body = text.strip()
        if not (body.startswith("[") and body.endswith("]")):
            raise InvalidArgumentError(f"A matrix must be written in brackets, got '{text}'.")
        if body.startswith("[["):
            chunks = re.findall(r"\[([^\[\]]*)\]", body[1:-1])
        else:
            chunks = body[1:-1].split(";")
        rows = []
        for chunk in chunks:
            cells = [c for c in re.split(r"[,\s]+", chunk.strip()) if c]
            rows.append(cells)
        if not rows or not rows[0]:
            raise InvalidArgumentError("A matrix needs at least one entry.")
        return cls.from_rows(rows)

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        return cls(rows, cols)

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        matrix = cls(n, n)
        for i in range(n):
            matrix._data[i][i] = Fraction(1)
        return matrix

    @classmethod
    def diagonal(cls, values: Sequence) -> "Matrix":
        matrix = cls(len(values), len(values))
        for i, value in enumerate(values):
            matrix._data[i][i] = to_fraction(value)
        return matrix

    def copy(self) -> "Matrix":
        clone = Matrix(self._rows, self._cols)
        clone._data = [row[:] for row in self._data]
        return clone

    # ── Shape and access ────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    def is_square(self) -> bool:
        return self._rows == self._cols

    def require_square(self, operation: str) -> None:
        if not self.is_square():
            raise InvalidArgumentError(
                f"{operation} needs a square matrix, got {self._rows}x{self._cols}."
            )

    def _check_row(self, i: int) -> None:
        if not 0 <= i < self._rows:
            raise IndexError(f"Row {i} is out of range for {self._rows} rows.")

    def _check_col(self, j: int) -> None:
        if not 0 <= j < self._cols:
            raise IndexError(f"Column {j} is out of range for {self._cols} columns.")

    def __getitem__(self, index: tuple[int, int]) -> Fraction:
        i, j = index
        self._check_row(i)
        self._check_col(j)
        return self._data[i][j]

    def __setitem__(self, index: tuple[int, int], value) -> None:
        i, j = index
        self._check_row(i)
        self._check_col(j)
        self._data[i][j] = to_fraction(value)

    def row(self, i: int) -> list[Fraction]:
        self._check_row(i)
        return self._data[i][:]

    def set_row(self, i: int, values: Sequence) -> None:
        self._check_row(i)
        values = [to_fraction(v) for v in values]
        if len(values) != self._cols:
            raise InvalidArgumentError(f"Row {i} needs {self._cols} entries, got {len(values)}.")
        self._data[i] = values

    def column(self, j: int) -> list[Fraction]:
        self._check_col(j)
        return [row[j] for row in self._data]

    def is_zero_row(self, i: int) -> bool:
        self._check_row(i)
        return all(v == 0 for v in self._data[i])

    def to_lists(self) -> list[list[Fraction]]:
        return [row[:] for row in self._data]

    def to_strings(self) -> list[list[str]]:
        return [[str(v) for v in row] for row in self._data]

    # ── Arithmetic ──────────────────────────────────────────────────────

    def _check_same_shape(self, other: "Matrix", operation: str) -> None:
        if self.shape != other.shape:
            raise InvalidArgumentError(
                f"Cannot {operation} a {self._rows}x{self._cols} matrix and a "
                f"{other._rows}x{other._cols} matrix."
            )

    def _combine(self, other: "Matrix", op) -> "Matrix":
        result = Matrix(self._rows, self._cols)
        result._data = [[op(a, b) for a, b in zip(ra, rb)] for ra, rb in zip(self._data, other._data)]
        return result

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other, "add")
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other, "subtract")
        return self._combine(other, lambda a, b: a - b)

    def __neg__(self) -> "Matrix":
        return self * -1

    def __mul__(self, other) -> "Matrix":
        if isinstance(other, Matrix):
            if self._cols != other._rows:
                raise InvalidArgumentError(
                    f"Cannot multiply a {self._rows}x{self._cols} matrix by a "
                    f"{other._rows}x{other._cols} matrix."
                )
            columns = [other.column(j) for j in range(other._cols)]
            result = Matrix(self._rows, other._cols)
            result._data = [
                [sum((a * b for a, b in zip(row, col)), Fraction(0)) for col in columns]
                for row in self._data
            ]
            return result
        if isinstance(other, (int, Fraction)) and not isinstance(other, bool):
            result = Matrix(self._rows, self._cols)
            result._data = [[v * other for v in row] for row in self._data]
            return result
        return NotImplemented

    def __rmul__(self, other) -> "Matrix":
        if isinstance(other, (int, Fraction)) and not isinstance(other, bool):
            return self * other
        return NotImplemented

    __matmul__ = __mul__

    def transpose(self) -> "Matrix":
        result = Matrix(self._cols, self._rows)
        for i in range(self._rows):
            for j in range(self._cols):
                result._data[j][i] = self._data[i][j]
        return result

    # ── Structure ───────────────────────────────────────────────────────

    def augment(self, other: "Matrix") -> "Matrix":
        """``[self | other]``; both need the same number of rows."""
        if self._rows != other._rows:
            raise InvalidArgumentError(
                f"Cannot augment a matrix with {self._rows} rows by one with {other._rows} rows."
            )
        result = Matrix(self._rows, self._cols + other._cols)
        result._data = [a + b for a, b in zip(self._data, other._data)]
        return result

    def left_part(self, cols: int) -> "Matrix":
        """The first *cols* columns."""
        if not 0 <= cols <= self._cols:
            raise InvalidArgumentError(f"Cannot take {cols} columns of a {self._cols}-column matrix.")
        result = Matrix(self._rows, cols)
        result._data = [row[:cols] for row in self._data]
        return result

    def right_part(self, start_col: int) -> "Matrix":
        """Columns from *start_col* to the end."""
        if not 0 <= start_col <= self._cols:
            raise InvalidArgumentError(f"Column {start_col} is outside a {self._cols}-column matrix.")
        result = Matrix(self._rows, self._cols - start_col)
        result._data = [row[start_col:] for row in self._data]
        return result

    def submatrix(self, row: int, col: int) -> "Matrix":
        """The minor obtained by deleting *row* and *col*."""
        self._check_row(row)
        self._check_col(col)
        result = Matrix(self._rows - 1, self._cols - 1)
        result._data = [
            [v for j, v in enumerate(r) if j != col]
            for i, r in enumerate(self._data) if i != row
        ]
        return result

    # ── In-place editing ────────────────────────────────────────────────

    def add_row(self, values: Sequence = None, index: int = None) -> None:
        """Insert a row (zeros by default) before *index*, or append."""
        values = [Fraction(0)] * self._cols if values is None else [to_fraction(v) for v in values]
        if len(values) != self._cols:
            raise InvalidArgumentError(f"A new row needs {self._cols} entries, got {len(values)}.")
        index = self._rows if index is None else index
        if not 0 <= index <= self._rows:
            raise IndexError(f"Row {index} is out of range for {self._rows} rows.")
        self._data.insert(index, values)
        self._rows += 1

    def add_column(self, values: Sequence = None, index: int = None) -> None:
        values = [Fraction(0)] * self._rows if values is None else [to_fraction(v) for v in values]
        if len(values) != self._rows:
            raise InvalidArgumentError(f"A new column needs {self._rows} entries, got {len(values)}.")
        index = self._cols if index is None else index
        if not 0 <= index <= self._cols:
            raise IndexError(f"Column {index} is out of range for {self._cols} columns.")
        for row, value in zip(self._data, values):
            row.insert(index, value)
        self._cols += 1

    def delete_row(self, i: int) -> None:
        self._check_row(i)
        del self._data[i]
        self._rows -= 1

    def delete_column(self, j: int) -> None:
        self._check_col(j)
        for row in self._data:
            del row[j]
        self._cols -= 1

    def resize(self, rows: int, cols: int) -> None:
        """Grow with zeros or truncate to ``rows x cols``, keeping the overlap."""
        if rows < 0 or cols < 0:
            raise InvalidArgumentError(f"Invalid matrix size {rows}x{cols}.")
        data = [row[:cols] + [Fraction(0)] * (cols - len(row[:cols])) for row in self._data[:rows]]
        data.extend([Fraction(0)] * cols for _ in range(rows - len(data)))
        self._data = data
        self._rows, self._cols = rows, cols

    # ── Comparison and display ──────────────────────────────────────────

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and self._data == other._data

    __hash__ = None

    def __str__(self) -> str:
        if not self._rows or not self._cols:
            return "[]"
        cells = self.to_strings()
        widths = [max(len(cells[i][j]) for i in range(self._rows)) for j in range(self._cols)]
        return "\n".join(
            "[ " + "  ".join(cell.rjust(w) for cell, w in zip(row, widths)) + " ]"
            for row in cells
        )

    def __repr__(self) -> str:
        body = "; ".join(", ".join(row) for row in self.to_strings())
        return f"Matrix('[{body}]')"
