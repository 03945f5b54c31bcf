"""
Tagged result values and their text serialization.

A result is exactly one of ``ScalarResult``, ``VectorResult``,
``MatrixResult`` or ``TextResult``. ``serialize_result`` writes a single
line ``TAG|field|field...`` using the escaped field codec;
``deserialize_result`` reverses it exactly and also reads the older
``<!RES_FIELD_SEP!>`` layout.
"""

import csv
import io
from dataclasses import dataclass
from fractions import Fraction
from typing import Union

from algebra.errors import InvalidArgumentError
from linalg.codec import join_fields, matrix_fields, matrix_from_fields, split_fields
from linalg.matrix import Matrix, to_fraction
from linalg.vector import Vector

_LEGACY_SEP = "<!RES_FIELD_SEP!>"
_LEGACY_ESCAPED_SEP = "<!ESC_SEP!>"
_LEGACY_NEWLINE = "<!NL!>"
_TAGS = ("SCALAR", "VECTOR", "MATRIX", "STRING")


@dataclass(frozen=True)
class ScalarResult:
    value: Fraction

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class VectorResult:
    vector: Vector

    def __str__(self) -> str:
        return str(self.vector)


@dataclass(frozen=True)
class MatrixResult:
    matrix: Matrix

    def __str__(self) -> str:
        return str(self.matrix)


@dataclass(frozen=True)
class TextResult:
    text: str

    def __str__(self) -> str:
        return self.text


Result = Union[ScalarResult, VectorResult, MatrixResult, TextResult]


def to_result(value) -> Result:
    """Wrap a plain engine value in the matching result case."""
    if isinstance(value, (ScalarResult, VectorResult, MatrixResult, TextResult)):
        return value
    if isinstance(value, Matrix):
        return MatrixResult(value)
    if isinstance(value, Vector):
        return VectorResult(value)
    if isinstance(value, str):
        return TextResult(value)
    if isinstance(value, (int, Fraction)) and not isinstance(value, bool):
        return ScalarResult(Fraction(value))
    raise InvalidArgumentError(f"Cannot store a {type(value).__name__} as a result.")


def serialize_result(result: Result) -> str:
    if isinstance(result, ScalarResult):
        return join_fields(["SCALAR", result.value])
    if isinstance(result, VectorResult):
        return join_fields(["VECTOR", *result.vector])
    if isinstance(result, MatrixResult):
        return join_fields(["MATRIX", *matrix_fields(result.matrix)])
    if isinstance(result, TextResult):
        return join_fields(["STRING", result.text])
    raise InvalidArgumentError(f"Cannot serialize {type(result).__name__}.")


def _build(tag: str, fields: list[str]) -> Result:
    if tag == "SCALAR" and len(fields) == 1:
        return ScalarResult(to_fraction(fields[0]))
    if tag == "VECTOR":
        return VectorResult(Vector(fields))
    if tag == "MATRIX":
        return MatrixResult(matrix_from_fields(fields))
    if tag == "STRING" and len(fields) == 1:
        return TextResult(fields[0])
    raise InvalidArgumentError(f"Unknown or malformed result record '{tag}'.")


def _split_legacy(text: str) -> list[str]:
    return [
        part.replace(_LEGACY_ESCAPED_SEP, _LEGACY_SEP).replace(_LEGACY_NEWLINE, "\n")
        for part in text.split(_LEGACY_SEP)
    ]


def deserialize_result(text: str) -> Result:
    # The separator that follows the tag picks the layout; payloads may
    # contain either separator.
    legacy = any(text.startswith(tag + _LEGACY_SEP) for tag in _TAGS)
    fields = _split_legacy(text) if legacy else split_fields(text)
    if len(fields) == 1 and fields[0] == "VECTOR":
        return VectorResult(Vector())
    return _build(fields[0], fields[1:])


def result_to_csv(result: Result) -> str:
    """CSV text: one cell for scalars and text, one row for vectors."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if isinstance(result, MatrixResult):
        writer.writerows(result.matrix.to_strings())
    elif isinstance(result, VectorResult):
        writer.writerow([str(v) for v in result.vector])
    else:
        writer.writerow([str(result)])
    return buffer.getvalue()
