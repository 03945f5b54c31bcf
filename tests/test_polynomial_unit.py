from fractions import Fraction

import random

import pytest

from algebra.errors import DivisionByZeroError, DomainError, InvalidArgumentError
from algebra.parser import apply_power, parse_polynomial
from algebra.polynomial import Monomial, Polynomial, format_power
from algebra.radical import SimplifiedRadical, simplify_sqrt


def test_canonical_form_combines_and_orders() -> None:
    poly = Polynomial(
        [Monomial(2, 1, "x"), Monomial(3, 2, "x"), Monomial(-2, 1, "x"), Monomial(5)],
        "x",
    )
    assert str(poly) == "3x^2 + 5"
    assert poly.degree == 2
    assert poly.leading_coefficient == 3
    assert [t.power for t in poly.terms] == [2, 0]


def test_zero_polynomial() -> None:
    poly = Polynomial()
    assert poly.is_zero()
    assert poly.degree is None
    assert str(poly) == "0"
    assert poly.dense_coefficients() == []


def test_multi_variable_rejected() -> None:
    with pytest.raises(DomainError, match="Multi-variable"):
        Polynomial([Monomial(1, 1, "x"), Monomial(1, 1, "y")])
    with pytest.raises(DomainError):
        Polynomial.monomial(1, 1, "x") + Polynomial.monomial(1, 1, "y")


def test_monomial_display() -> None:
    assert str(Monomial(3, 2, "x")) == "3x^2"
    assert str(Monomial(1, 1, "x")) == "x"
    assert str(Monomial(-1, 3, "x")) == "-x^3"
    assert str(Monomial(Fraction(3, 2), 1, "x")) == "3/2*x"
    assert str(Monomial(simplify_sqrt(2), 1, "x")) == "sqrt(2)*x"
    assert str(Monomial(4)) == "4"
    assert format_power(Fraction(1, 2)) == "^(1/2)"
    assert format_power(Fraction(-1)) == "^(-1)"


class TestArithmetic:
    def test_add_sub(self) -> None:
        p = Polynomial.from_coefficients([1, 2, 1])
        q = Polynomial.from_coefficients([1, -1])
        assert str(p + q) == "x^2 + 3x"
        assert str(p - q) == "x^2 + x + 2"
        assert (p - p).is_zero()
        assert str(p + 1) == "x^2 + 2x + 2"
        assert str(1 - q) == "-x + 2"

    def test_mul_and_pow(self) -> None:
        x_plus_1 = Polynomial.from_coefficients([1, 1])
        x_minus_1 = Polynomial.from_coefficients([1, -1])
        assert str(x_plus_1 * x_minus_1) == "x^2 - 1"
        assert str(x_plus_1 ** 2) == "x^2 + 2x + 1"
        assert x_plus_1 ** 0 == 1
        with pytest.raises(DomainError):
            x_plus_1 ** -1

    def test_div_by_single_term(self) -> None:
        p = Polynomial.from_coefficients([2, 4, 0])
        assert str(p / Polynomial.monomial(2, 1)) == "x + 2"
        assert str(p / 2) == "x^2 + 2x"
        with pytest.raises(DivisionByZeroError):
            p / 0
        with pytest.raises(DomainError, match="single term"):
            p / Polynomial.from_coefficients([1, 1])

    def test_radical_coefficients_mix_only_when_compatible(self) -> None:
        a = Polynomial.monomial(simplify_sqrt(2), 1)
        b = Polynomial.monomial(simplify_sqrt(8), 1)
        assert (a + b).leading_coefficient == SimplifiedRadical(3, 2)
        with pytest.raises(DomainError):
            a + Polynomial.monomial(simplify_sqrt(3), 1)


def test_inspection_helpers() -> None:
    p = Polynomial.from_coefficients([Fraction(1, 2), 0, -3])
    assert p.coefficient(2) == Fraction(1, 2)
    assert p.coefficient(1) == 0
    assert p.has_only_rational_coefficients()
    assert p.has_natural_powers()
    assert p.dense_coefficients() == [Fraction(1, 2), 0, -3]
    assert not p.is_constant()
    assert Polynomial.constant(7).constant_value() == 7
    with pytest.raises(DomainError):
        p.constant_value()


def test_evaluate_is_exact() -> None:
    p = Polynomial.from_coefficients([1, -5, 6])
    assert p.evaluate(2) == 0
    assert p.evaluate(Fraction(1, 2)) == Fraction(15, 4)


def test_dense_coefficients_rejects_radicals_and_negative_powers() -> None:
    with pytest.raises(DomainError, match="rational coefficients"):
        Polynomial.monomial(simplify_sqrt(2), 1).dense_coefficients()
    with pytest.raises(DomainError, match="non-negative integer powers"):
        Polynomial.monomial(1, -1).dense_coefficients()


def test_equality_and_hash() -> None:
    assert Polynomial.parse("x + 1") == Polynomial.from_coefficients([1, 1])
    assert Polynomial.constant(3) == 3
    assert hash(Polynomial.parse("2x")) == hash(Polynomial.monomial(2, 1))


# ── Parser ──────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "text,expected",
    [
        ("2x + 3x - 1", "5x - 1"),
        ("x(x - 1)", "x^2 - x"),
        ("(x + 1)^2", "x^2 + 2x + 1"),
        ("2(x + 1) - 2", "2x"),
        ("x^2 - 5x + 6", "x^2 - 5x + 6"),
        ("x**3", "x^3"),
        ("-x^2", "-x^2"),
        ("x/2", "1/2*x"),
        ("0.5x + 1", "1/2*x + 1"),
        ("sqrt(8)", "2*sqrt(2)"),
        ("sqrt(2) * x", "sqrt(2)*x"),
        ("4^(1/2)", "2"),
        ("8^(1/3) + x", "x + 2"),
        ("x^(1/2)", "x^(1/2)"),
        ("x^-1", "x^(-1)"),
        ("(2x)^2", "4x^2"),
        ("x²", "x^2"),
        ("3 − x", "-x + 3"),
        ("x - x", "0"),
    ],
)
def test_parse_polynomial(text: str, expected: str) -> None:
    assert str(parse_polynomial(text)) == expected


@pytest.mark.parametrize(
    "text,error,match",
    [
        ("2x @ 1", InvalidArgumentError, "Invalid character"),
        ("", InvalidArgumentError, "empty"),
        ("(x + 1", InvalidArgumentError, "Expected"),
        ("x +", InvalidArgumentError, "end of input"),
        ("x^", InvalidArgumentError, "Missing exponent"),
        ("xy", DomainError, "Multi-variable"),
        ("(x + 1)^(1/2)", DomainError, "several terms"),
        ("2^(1/3)", DomainError, "only square roots"),
        ("0^0", DivisionByZeroError, "non-positive"),
        ("x / (x + 1)", DomainError, "single term"),
        ("x^(x)", DomainError, "rational constant"),
    ],
)
def test_parse_errors(text: str, error: type, match: str) -> None:
    with pytest.raises(error, match=match):
        parse_polynomial(text)


def test_apply_power_rules() -> None:
    x = Polynomial.monomial(1, 1)
    assert str(apply_power(x, Fraction(3))) == "x^3"
    assert str(apply_power(Polynomial.monomial(4, 2), Fraction(1, 2))) == "2x"
    assert apply_power(Polynomial.constant(9), Fraction(-1, 2)) == Fraction(1, 3)
    with pytest.raises(DivisionByZeroError):
        apply_power(Polynomial(), Fraction(-1))


# ── Display and parse agree ─────────────────────────────────────────────

_POWERS = [Fraction(3), Fraction(2), Fraction(3, 2), Fraction(1), Fraction(1, 2),
           Fraction(0), Fraction(-1, 2), Fraction(-1), Fraction(-2)]


def _random_canonical(rng: random.Random) -> Polynomial:
    terms = []
    for power in rng.sample(_POWERS, rng.randint(1, 4)):
        value = Fraction(rng.choice([-7, -3, -2, -1, 1, 2, 5, 12]), rng.choice([1, 1, 2, 3]))
        radicand = rng.choice([1, 1, 2, 3, 5, 8])
        terms.append(Monomial(SimplifiedRadical(value, radicand), power, "x"))
    return Polynomial(terms, "x")


_ROUND_TRIP = [
    Polynomial([Monomial(SimplifiedRadical(2, 3), 2, "x"), Monomial(Fraction(-1, 2), 1, "x"),
                Monomial(7)], "x"),
    Polynomial([Monomial(1, Fraction(1, 2), "x"), Monomial(-1, Fraction(-1), "x")], "x"),
    Polynomial([Monomial(SimplifiedRadical(-1, 2), 1, "x"), Monomial(Fraction(3, 4), 0)], "x"),
] + [_random_canonical(random.Random(seed)) for seed in range(25)]


@pytest.mark.parametrize("poly", _ROUND_TRIP, ids=str)
def test_display_parses_back_to_the_same_polynomial(poly: Polynomial) -> None:
    assert parse_polynomial(str(poly)) == poly
