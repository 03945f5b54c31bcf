from fractions import Fraction

import pytest

from algebra.errors import DivisionByZeroError, DomainError
from algebra.radical import SimplifiedRadical, pow_frac, simplify_sqrt
from algebra.rational import MAX_TRIAL_DIVISION


@pytest.mark.parametrize(
    "value,coefficient,radicand",
    [
        (8, 2, 2),
        (12, 2, 3),
        (72, 6, 2),
        (49, 7, 1),
        (Fraction(1, 2), Fraction(1, 2), 2),
        (Fraction(9, 4), Fraction(3, 2), 1),
        (0, 0, 1),
    ],
)
def test_simplify_sqrt(value, coefficient, radicand) -> None:
    result = simplify_sqrt(value)
    assert result.coefficient == coefficient
    assert result.radicand == radicand


def test_simplify_sqrt_negative() -> None:
    with pytest.raises(DomainError, match="negative"):
        simplify_sqrt(-1)


def test_simplify_sqrt_large_values() -> None:
    assert simplify_sqrt(10 ** 40) == 10 ** 20
    assert simplify_sqrt(Fraction(1, 10 ** 30)) == Fraction(1, 10 ** 15)
    with pytest.raises(DomainError, match="too large"):
        simplify_sqrt(10 ** 30 + 57)
    with pytest.raises(DomainError, match="too large"):
        SimplifiedRadical(1, MAX_TRIAL_DIVISION + 1)


def test_constructor_normalizes() -> None:
    r = SimplifiedRadical(3, 8)
    assert (r.coefficient, r.radicand) == (6, 2)
    assert SimplifiedRadical(0, 5) == 0
    with pytest.raises(DomainError):
        SimplifiedRadical(1, -2)


def test_display() -> None:
    assert str(simplify_sqrt(2)) == "sqrt(2)"
    assert str(-simplify_sqrt(2)) == "-sqrt(2)"
    assert str(simplify_sqrt(8)) == "2*sqrt(2)"
    assert str(simplify_sqrt(Fraction(1, 2))) == "1/2*sqrt(2)"
    assert str(simplify_sqrt(9)) == "3"


class TestArithmetic:
    def test_add_like_radicals(self) -> None:
        assert simplify_sqrt(2) + simplify_sqrt(8) == SimplifiedRadical(3, 2)

    def test_add_rationals_and_zero(self) -> None:
        assert SimplifiedRadical(Fraction(1, 2)) + 1 == Fraction(3, 2)
        assert simplify_sqrt(3) + 0 == simplify_sqrt(3)
        assert 0 + simplify_sqrt(3) == simplify_sqrt(3)

    def test_add_unlike_radicals_rejected(self) -> None:
        with pytest.raises(DomainError, match="radicands differ"):
            simplify_sqrt(2) + simplify_sqrt(3)

    def test_sub_to_zero(self) -> None:
        assert (simplify_sqrt(5) - simplify_sqrt(5)).is_zero()

    def test_multiply_pulls_out_squares(self) -> None:
        assert simplify_sqrt(2) * simplify_sqrt(2) == 2
        assert simplify_sqrt(6) * simplify_sqrt(3) == SimplifiedRadical(3, 2)
        assert 2 * simplify_sqrt(3) == SimplifiedRadical(2, 3)

    def test_divide(self) -> None:
        assert simplify_sqrt(8) / simplify_sqrt(2) == 2
        assert 1 / simplify_sqrt(2) == SimplifiedRadical(Fraction(1, 2), 2)
        with pytest.raises(DivisionByZeroError):
            simplify_sqrt(2) / 0

    def test_integer_powers(self) -> None:
        assert simplify_sqrt(2) ** 2 == 2
        assert simplify_sqrt(2) ** 3 == SimplifiedRadical(2, 2)
        assert simplify_sqrt(2) ** 0 == 1
        assert simplify_sqrt(2) ** -2 == Fraction(1, 2)
        with pytest.raises(DomainError):
            simplify_sqrt(2) ** Fraction(1, 2)

    def test_predicates(self) -> None:
        r = SimplifiedRadical(-2, 3)
        assert r.is_negative()
        assert not r.is_rational()
        assert abs(r) == SimplifiedRadical(2, 3)
        assert SimplifiedRadical(5).rational_value() == 5
        with pytest.raises(DomainError):
            r.rational_value()

    def test_hash_matches_rational(self) -> None:
        assert hash(SimplifiedRadical(3)) == hash(Fraction(3))
        assert len({simplify_sqrt(8), SimplifiedRadical(2, 2)}) == 1


class TestPowFrac:
    def test_integer_exponent(self) -> None:
        assert pow_frac(2, 3) == 8
        assert pow_frac(2, -2) == Fraction(1, 4)

    def test_half_exponent(self) -> None:
        assert pow_frac(4, Fraction(1, 2)) == 2
        assert pow_frac(8, Fraction(1, 2)) == SimplifiedRadical(2, 2)
        assert pow_frac(2, Fraction(3, 2)) == SimplifiedRadical(2, 2)

    def test_exact_higher_roots(self) -> None:
        assert pow_frac(8, Fraction(1, 3)) == 2
        assert pow_frac(-8, Fraction(1, 3)) == -2
        assert pow_frac(Fraction(1, 16), Fraction(1, 4)) == Fraction(1, 2)

    def test_inexact_higher_root(self) -> None:
        with pytest.raises(DomainError, match="only square roots"):
            pow_frac(2, Fraction(1, 3))

    def test_zero_base(self) -> None:
        assert pow_frac(0, 2) == 0
        with pytest.raises(DivisionByZeroError):
            pow_frac(0, 0)
        with pytest.raises(DivisionByZeroError):
            pow_frac(0, -1)
