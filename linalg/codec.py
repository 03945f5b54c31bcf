"""
Plain-text field codec shared by every serializer.

Records are fields joined by ``|``. Inside a field a backslash escapes the
separator (``\\|``), itself (``\\\\``) and line breaks (``\\n``, ``\\r``), so a
serialized record is always one line and any field, including another
serialized record, survives a round trip unchanged.
"""

from typing import Iterable

from algebra.errors import InvalidArgumentError
from linalg.matrix import Matrix

FIELD_SEP = "|"
_ESCAPE = "\\"
_ENCODE = {_ESCAPE: _ESCAPE * 2, FIELD_SEP: _ESCAPE + FIELD_SEP, "\n": _ESCAPE + "n", "\r": _ESCAPE + "r"}
_DECODE = {_ESCAPE: _ESCAPE, FIELD_SEP: FIELD_SEP, "n": "\n", "r": "\r"}


def escape_field(text: str) -> str:
    return "".join(_ENCODE.get(ch, ch) for ch in text)


def join_fields(fields: Iterable) -> str:
    return FIELD_SEP.join(escape_field(str(field)) for field in fields)


def split_fields(text: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch == _ESCAPE:
            nxt = next(chars, None)
            if nxt not in _DECODE:
                raise InvalidArgumentError(f"Bad escape sequence in serialized data: '\\{nxt or ''}'.")
            current.append(_DECODE[nxt])
        elif ch == FIELD_SEP:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


# ── Matrices ────────────────────────────────────────────────────────────

def matrix_fields(matrix: Matrix) -> list[str]:
    """``[rows, cols, a11, a12, ...]`` in row-major order."""
    fields = [str(matrix.rows), str(matrix.cols)]
    for row in matrix.to_strings():
        fields.extend(row)
    return fields


def matrix_from_fields(fields: list[str]) -> Matrix:
    try:
        rows, cols = int(fields[0]), int(fields[1])
    except (IndexError, ValueError):
        raise InvalidArgumentError("Serialized matrix is missing its dimensions.") from None
    entries = fields[2:]
    if rows < 0 or cols < 0 or len(entries) != rows * cols:
        raise InvalidArgumentError(
            f"Serialized {rows}x{cols} matrix has {len(entries)} entries."
        )
    matrix = Matrix(rows, cols)
    for k, entry in enumerate(entries):
        matrix[k // cols, k % cols] = entry
    return matrix


def encode_matrix(matrix: Matrix) -> str:
    return join_fields(matrix_fields(matrix))


def decode_matrix(text: str) -> Matrix:
    return matrix_from_fields(split_fields(text))
