"""
Recursive-descent parser for single-variable polynomial expressions.

Grammar (``^`` binds tighter than unary minus, so ``-x^2`` is ``-(x^2)``)::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/" | <juxtaposition>) unary)*
    unary      := ("+" | "-") unary | power
    power      := primary ("^" exponent)?
    exponent   := ("+" | "-")? (NUMBER | "(" expression ")")
    primary    := NUMBER | LETTER | "sqrt" "(" expression ")" | "(" expression ")"

Juxtaposition is implicit multiplication: ``5x``, ``2(x + 1)``, ``x(x - 1)``.
Every letter is its own variable, so ``xy`` is ``x*y`` and is rejected as
multi-variable. Decimals are read as exact rationals.
"""

import logging
import re
from fractions import Fraction

from algebra.errors import DivisionByZeroError, DomainError, InvalidArgumentError
from algebra.polynomial import Polynomial
from algebra.radical import pow_frac
from algebra.rational import parse_rational

logger = logging.getLogger(__name__)

_FUNCTIONS = ("sqrt",)

# Unicode the user may paste, mapped to the ASCII the tokenizer reads.
_REPLACEMENTS = {
    "√": "sqrt",   # √
    "−": "-",      # −
    "×": "*",      # ×
    "·": "*",      # ·
    "÷": "/",      # ÷
    "²": "^2",     # ²
    "³": "^3",     # ³
    "**": "^",
}

_TOKEN_RE = re.compile(r"\s*(?:(\d+(?:\.\d*)?|\.\d+)|([A-Za-z]+)|(.))")


def _tokenize(text: str) -> list[tuple[str, str]]:
    for old, new in _REPLACEMENTS.items():
        text = text.replace(old, new)
    tokens: list[tuple[str, str]] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        number, name, symbol = match.groups()
        pos = match.end()
        if number is not None:
            tokens.append(("NUMBER", number))
        elif name is not None:
            # "sqrt" is a function; any other letters are single-letter variables
            i = 0
            while i < len(name):
                func = next((f for f in _FUNCTIONS if name.startswith(f, i)), None)
                if func:
                    tokens.append(("FUNC", func))
                    i += len(func)
                else:
                    tokens.append(("VAR", name[i]))
                    i += 1
        elif symbol in "+-*/^()":
            tokens.append(("OP", symbol))
        else:
            raise InvalidArgumentError(
                f"Invalid character '{symbol}'. Only letters, numbers, "
                f"sqrt and the symbols + - * / ^ ( ) are allowed."
            )
    return tokens


def apply_power(base: Polynomial, exponent: Fraction) -> Polynomial:
    """``base ** exponent`` under the engine's rules.

    * a zero base needs a positive exponent;
    * a constant base goes through :func:`pow_frac` (radicals only take
      integer exponents);
    * a single term raises its coefficient and multiplies its power;
    * several terms need a non-negative integer exponent.
    """
    exponent = Fraction(exponent)
    if base.is_zero():
        if exponent <= 0:
            raise DivisionByZeroError("0 cannot be raised to a non-positive power.")
        return base
    if base.is_constant():
        value = base.constant_value()
        if value.is_rational():
            return Polynomial.constant(pow_frac(value.coefficient, exponent), base.variable)
        return Polynomial.constant(value ** exponent, base.variable)
    if base.is_monomial():
        term = base.terms[0]
        coefficient = term.coefficient
        if coefficient == 1:
            new_coefficient = coefficient
        elif exponent.denominator == 1:
            new_coefficient = coefficient ** exponent.numerator
        elif coefficient.is_rational():
            new_coefficient = pow_frac(coefficient.coefficient, exponent)
        else:
            raise DomainError(
                f"Cannot raise the coefficient {coefficient} to the fractional power {exponent}."
            )
        return Polynomial.monomial(new_coefficient, term.power * exponent, term.variable)
    if exponent.denominator != 1 or exponent < 0:
        raise DomainError(
            f"'{base}' has several terms and can only be raised to a "
            f"non-negative integer power (got {exponent})."
        )
    return base ** exponent.numerator


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    # ── Token helpers ───────────────────────────────────────────────────

    def _peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else (None, None)

    def _advance(self):
        token = self._peek()
        self.pos += 1
        return token

    def _accept(self, value: str) -> bool:
        if self._peek() == ("OP", value):
            self.pos += 1
            return True
        return False

    def _expect(self, value: str) -> None:
        if not self._accept(value):
            found = self._peek()[1]
            where = f"'{found}'" if found is not None else "end of input"
            raise InvalidArgumentError(f"Expected '{value}' but found {where} in '{self.text}'.")

    def _starts_primary(self) -> bool:
        kind, value = self._peek()
        return kind in ("NUMBER", "VAR", "FUNC") or (kind, value) == ("OP", "(")

    # ── Grammar ─────────────────────────────────────────────────────────

    def parse(self) -> Polynomial:
        if not self.tokens:
            raise InvalidArgumentError("Expression is empty.")
        result = self._expression()
        if self.pos != len(self.tokens):
            raise InvalidArgumentError(
                f"Unexpected '{self._peek()[1]}' in '{self.text}'."
            )
        return result

    def _expression(self) -> Polynomial:
        result = self._term()
        while True:
            if self._accept("+"):
                result = result + self._term()
            elif self._accept("-"):
                result = result - self._term()
            else:
                return result

    def _term(self) -> Polynomial:
        result = self._unary()
        while True:
            if self._accept("*"):
                result = result * self._unary()
            elif self._accept("/"):
                result = result / self._unary()
            elif self._starts_primary():
                result = result * self._unary()
            else:
                return result

    def _unary(self) -> Polynomial:
        if self._accept("-"):
            return -self._unary()
        if self._accept("+"):
            return self._unary()
        return self._power()

    def _power(self) -> Polynomial:
        base = self._primary()
        if self._accept("^"):
            return apply_power(base, self._exponent())
        return base

    def _exponent(self) -> Fraction:
        sign = 1
        if self._accept("-"):
            sign = -1
        elif self._accept("+"):
            pass
        kind, value = self._peek()
        if kind == "NUMBER":
            self._advance()
            return sign * parse_rational(value)
        if (kind, value) == ("OP", "("):
            self._advance()
            inner = self._expression()
            self._expect(")")
            if not inner.is_constant() or not inner.constant_value().is_rational():
                raise DomainError(f"The exponent '{inner}' must be a rational constant.")
            return sign * inner.constant_value().coefficient
        raise InvalidArgumentError(f"Missing exponent after '^' in '{self.text}'.")

    def _primary(self) -> Polynomial:
        kind, value = self._advance()
        if kind == "NUMBER":
            return Polynomial.constant(parse_rational(value))
        if kind == "VAR":
            return Polynomial.monomial(1, 1, value)
        if kind == "FUNC":
            self._expect("(")
            inner = self._expression()
            self._expect(")")
            return apply_power(inner, Fraction(1, 2))
        if (kind, value) == ("OP", "("):
            inner = self._expression()
            self._expect(")")
            return inner
        where = f"'{value}'" if value is not None else "end of input"
        raise InvalidArgumentError(f"Unexpected {where} in '{self.text}'.")


def parse_polynomial(text: str) -> Polynomial:
    """Parse *text* into a canonical :class:`Polynomial`."""
    polynomial = _Parser(text).parse()
    logger.debug("parsed %r as %s", text, polynomial)
    return polynomial
