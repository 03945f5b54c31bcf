from fractions import Fraction

import pytest

from algebra.errors import DivisionByZeroError, InvalidArgumentError
from algebra.radical import SimplifiedRadical
from linalg.matrix import Matrix
from linalg.vector import Vector


def test_construction_and_parse() -> None:
    v = Vector([1, "1/2", Fraction(3)])
    assert list(v) == [1, Fraction(1, 2), 3]
    assert Vector.parse("[1, 2, 3]") == Vector([1, 2, 3])
    assert Vector.parse("[1; 2]") == Vector([1, 2])
    assert Vector.zeros(2) == Vector([0, 0])
    with pytest.raises(InvalidArgumentError, match="not a vector"):
        Vector.parse("[1, 2; 3, 4]")


def test_column_conversion() -> None:
    v = Vector([1, 2])
    column = v.to_column()
    assert column.shape == (2, 1)
    assert Vector.from_column(column) == v
    assert Vector().to_column().shape == (0, 1)


def test_arithmetic() -> None:
    a, b = Vector([1, 2]), Vector([3, 5])
    assert a + b == Vector([4, 7])
    assert b - a == Vector([2, 3])
    assert -a == Vector([-1, -2])
    assert a * 2 == Vector([2, 4])
    assert Fraction(1, 2) * a == Vector([Fraction(1, 2), 1])
    with pytest.raises(InvalidArgumentError):
        a + Vector([1, 2, 3])


def test_dot_and_cross() -> None:
    assert Vector([1, 2, 3]).dot(Vector([4, 5, 6])) == 32
    assert Vector([1, 0, 0]).cross(Vector([0, 1, 0])) == Vector([0, 0, 1])
    with pytest.raises(InvalidArgumentError, match="3-dimensional"):
        Vector([1, 2]).cross(Vector([3, 4]))


def test_exact_norm_and_normalize() -> None:
    assert Vector([3, 4]).norm() == 5
    assert Vector([1, 1]).norm() == SimplifiedRadical(1, 2)
    unit = Vector([1, 1]).normalize()
    assert unit == (SimplifiedRadical(Fraction(1, 2), 2), SimplifiedRadical(Fraction(1, 2), 2))
    assert [str(c) for c in Vector([3, 4]).normalize()] == ["3/5", "4/5"]
    with pytest.raises(DivisionByZeroError):
        Vector([0, 0]).normalize()


def test_display() -> None:
    assert str(Vector([1, "-1/2"])) == "[1, -1/2]"
    assert len(Vector([1, 2, 3])) == 3
    assert Vector([1, 2])[1] == 2
