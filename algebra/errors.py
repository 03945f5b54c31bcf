"""Error kinds raised by the algebra and linear-algebra engines.

Each class also derives from the built-in exception a caller would reach
for first, so ``except ValueError`` (as the HTTP layer does) and
``except ZeroDivisionError`` keep working.
"""


class AlgebraError(Exception):
    """Base class for every engine error."""


class InvalidArgumentError(AlgebraError, ValueError):
    """Malformed input, zero denominator, wrong matrix shape."""


class DivisionByZeroError(AlgebraError, ZeroDivisionError):
    """Division by an exact zero, including scaling a row by zero."""


class DomainError(AlgebraError, ValueError):
    """Valid syntax outside what the engine supports.

    Negative radicands, radical coefficients where only rationals are
    accepted, and a second variable in a polynomial all land here.
    """


class NotInvertibleError(AlgebraError, ValueError):
    """The matrix has a zero determinant."""
