"""
Single-variable polynomials with radical coefficients.

A ``Polynomial`` is immutable and always canonical: one term per power,
no zero terms, powers strictly descending. Powers are rationals so that
``x^(1/2)`` and ``x^(-1)`` can be represented and displayed, although
factoring and solving only accept non-negative integer powers.
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, Optional, Union

from algebra.errors import DivisionByZeroError, DomainError
from algebra.radical import RadicalLike, SimplifiedRadical, as_radical
from algebra.rational import ONE, ZERO

PolynomialLike = Union[int, Fraction, SimplifiedRadical, "Polynomial"]


def format_power(power: Fraction) -> str:
    """``^n`` for non-negative integers, ``^(p/q)`` for anything else."""
    if power.denominator == 1 and power >= 0:
        return f"^{power.numerator}"
    return f"^({power})"


@dataclass(frozen=True)
class Monomial:
    coefficient: SimplifiedRadical
    power: Fraction = ZERO
    variable: str = ""

    def __post_init__(self):
        object.__setattr__(self, "coefficient", as_radical(self.coefficient))
        object.__setattr__(self, "power", Fraction(self.power))
        if self.power == 0:
            object.__setattr__(self, "variable", "")

    def is_constant(self) -> bool:
        return self.power == 0

    def __neg__(self) -> "Monomial":
        return Monomial(-self.coefficient, self.power, self.variable)

    def __str__(self) -> str:
        coefficient = self.coefficient
        if coefficient.is_zero():
            return "0"
        if self.is_constant():
            return str(coefficient)
        var_part = self.variable
        if self.power != 1:
            var_part += format_power(self.power)
        if coefficient == 1:
            return var_part
        if coefficient == -1:
            return f"-{var_part}"
        text = str(coefficient)
        # "3x" reads naturally; "3/2*x" and "2*sqrt(3)*x" keep the star
        if coefficient.is_rational() and coefficient.coefficient.denominator == 1:
            return f"{text}{var_part}"
        return f"{text}*{var_part}"


def _single_variable(monomials: Iterable[Monomial]) -> str:
    names = {m.variable for m in monomials if m.variable}
    if len(names) > 1:
        raise DomainError(
            f"Multi-variable polynomials are not supported "
            f"(found {', '.join(sorted(names))})."
        )
    return names.pop() if names else ""


class Polynomial:
    """Canonical sum of monomials in one variable."""

    __slots__ = ("_terms", "_variable")

    def __init__(self, terms: Iterable[Monomial] = (), variable: str = ""):
        terms = list(terms)
        found = _single_variable(terms)
        if found and variable and found != variable:
            raise DomainError(
                f"Multi-variable polynomials are not supported "
                f"(found {found}, {variable})."
            )
        variable = found or variable

        # Group by power; SimplifiedRadical addition rejects mixed radicands.
        grouped: dict[Fraction, SimplifiedRadical] = {}
        for term in terms:
            grouped[term.power] = grouped.get(term.power, SimplifiedRadical(ZERO)) + term.coefficient
        canonical = [
            Monomial(coefficient, power, variable)
            for power, coefficient in grouped.items()
            if not coefficient.is_zero()
        ]
        canonical.sort(key=lambda m: m.power, reverse=True)
        self._terms = tuple(canonical)
        self._variable = variable

    # ── Construction ────────────────────────────────────────────────────

    @classmethod
    def constant(cls, value: RadicalLike, variable: str = "") -> "Polynomial":
        return cls([Monomial(as_radical(value))], variable)

    @classmethod
    def monomial(cls, coefficient: RadicalLike, power, variable: str = "x") -> "Polynomial":
        return cls([Monomial(as_radical(coefficient), Fraction(power), variable)], variable)

    @classmethod
    def from_coefficients(cls, coefficients: Iterable, variable: str = "x") -> "Polynomial":
        """Build from dense coefficients, highest power first."""
        coefficients = list(coefficients)
        degree = len(coefficients) - 1
        return cls(
            [Monomial(as_radical(c), degree - i, variable) for i, c in enumerate(coefficients)],
            variable,
        )

    @classmethod
    def linear_factor(cls, root: Fraction, variable: str = "x") -> "Polynomial":
        """``x - root``."""
        return cls.from_coefficients([ONE, -Fraction(root)], variable or "x")

    @classmethod
    def parse(cls, text: str) -> "Polynomial":
        from algebra.parser import parse_polynomial

        return parse_polynomial(text)

    # ── Inspection ──────────────────────────────────────────────────────

    @property
    def terms(self) -> tuple[Monomial, ...]:
        return self._terms

    @property
    def variable(self) -> str:
        return self._variable

    @property
    def degree(self) -> Optional[Fraction]:
        """Power of the leading term, or None for the zero polynomial."""
        return self._terms[0].power if self._terms else None

    @property
    def leading_coefficient(self) -> SimplifiedRadical:
        return self._terms[0].coefficient if self._terms else SimplifiedRadical(ZERO)

    def coefficient(self, power) -> SimplifiedRadical:
        power = Fraction(power)
        for term in self._terms:
            if term.power == power:
                return term.coefficient
        return SimplifiedRadical(ZERO)

    def is_zero(self) -> bool:
        return not self._terms

    def is_constant(self) -> bool:
        return not self._terms or (len(self._terms) == 1 and self._terms[0].is_constant())

    def is_monomial(self) -> bool:
        return len(self._terms) == 1

    def constant_value(self) -> SimplifiedRadical:
        if not self.is_constant():
            raise DomainError(f"'{self}' is not a constant.")
        return self.leading_coefficient

    def has_only_rational_coefficients(self) -> bool:
        return all(term.coefficient.is_rational() for term in self._terms)

    def has_natural_powers(self) -> bool:
        """True when every power is a non-negative integer."""
        return all(t.power >= 0 and t.power.denominator == 1 for t in self._terms)

    def dense_coefficients(self) -> list[Fraction]:
        """Rational coefficients from the leading power down to the constant.

        Raises DomainError for radical coefficients or powers that are not
        non-negative integers.
        """
        if not self.has_only_rational_coefficients():
            raise DomainError("Only polynomials with rational coefficients can be factored.")
        if not self.has_natural_powers():
            raise DomainError("Only non-negative integer powers can be factored.")
        if not self._terms:
            return []
        degree = self.degree.numerator
        dense = [ZERO] * (degree + 1)
        for term in self._terms:
            dense[degree - term.power.numerator] = term.coefficient.coefficient
        return dense

    def evaluate(self, x) -> Fraction:
        """Exact value at the rational point *x* (rational coefficients only)."""
        value = ZERO
        for c in self.dense_coefficients():
            value = value * Fraction(x) + c
        return value

    # ── Arithmetic ──────────────────────────────────────────────────────

    def __neg__(self) -> "Polynomial":
        return Polynomial([-t for t in self._terms], self._variable)

    def __add__(self, other: PolynomialLike) -> "Polynomial":
        other = as_polynomial(other)
        return Polynomial(self._terms + other._terms, self._merge_variable(other))

    __radd__ = __add__

    def __sub__(self, other: PolynomialLike) -> "Polynomial":
        return self + (-as_polynomial(other))

    def __rsub__(self, other: PolynomialLike) -> "Polynomial":
        return as_polynomial(other) - self

    def __mul__(self, other: PolynomialLike) -> "Polynomial":
        other = as_polynomial(other)
        variable = self._merge_variable(other)
        products = [
            Monomial(a.coefficient * b.coefficient, a.power + b.power, variable)
            for a in self._terms
            for b in other._terms
        ]
        return Polynomial(products, variable)

    __rmul__ = __mul__

    def __truediv__(self, other: PolynomialLike) -> "Polynomial":
        """Division by a single non-zero term."""
        other = as_polynomial(other)
        if other.is_zero():
            raise DivisionByZeroError("Division by zero.")
        if not other.is_monomial():
            raise DomainError(
                f"Division by '{other}' is not supported; divide by a single term."
            )
        divisor = other._terms[0]
        variable = self._merge_variable(other)
        return Polynomial(
            [
                Monomial(t.coefficient / divisor.coefficient, t.power - divisor.power, variable)
                for t in self._terms
            ],
            variable,
        )

    def __pow__(self, exponent: int) -> "Polynomial":
        if exponent < 0:
            raise DomainError("Only non-negative integer powers of a polynomial are supported.")
        result = Polynomial.constant(ONE, self._variable)
        for _ in range(exponent):
            result = result * self
        return result

    def _merge_variable(self, other: "Polynomial") -> str:
        if self._variable and other._variable and self._variable != other._variable:
            raise DomainError(
                f"Multi-variable polynomials are not supported "
                f"(found {self._variable}, {other._variable})."
            )
        return self._variable or other._variable

    # ── Comparison and display ──────────────────────────────────────────

    def __eq__(self, other):
        if isinstance(other, (int, Fraction, SimplifiedRadical)):
            other = as_polynomial(other)
        if not isinstance(other, Polynomial):
            return NotImplemented
        if self._terms != other._terms:
            return False
        return self.is_constant() or self._variable == other._variable

    def __hash__(self):
        return hash(self._terms)

    def __str__(self) -> str:
        if not self._terms:
            return "0"
        parts = [str(self._terms[0])]
        for term in self._terms[1:]:
            if term.coefficient.is_negative():
                parts.append(f" - {-term}")
            else:
                parts.append(f" + {term}")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Polynomial('{self}')"


def as_polynomial(value: PolynomialLike) -> Polynomial:
    if isinstance(value, Polynomial):
        return value
    return Polynomial.constant(as_radical(value))
