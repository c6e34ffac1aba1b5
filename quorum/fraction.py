"""
Rational
Exact fractions over Python integers.

Every value is kept in canonical form: the numerator and denominator
share no common factor and the denominator is positive. All arithmetic
goes back through the constructor, so results are canonical too.
"""

from math import gcd

from quorum.errors import DivisionByZeroError


class Rational:
    """
    An immutable fraction ``num/den``.

    Args:
        num: Numerator.
        den: Denominator. Must not be zero.

    Raises:
        DivisionByZeroError: If ``den`` is zero.
    """

    __slots__ = ("num", "den")

    def __init__(self, num: int, den: int = 1):
        if den == 0:
            raise DivisionByZeroError("Division by zero in fraction")

        divisor = gcd(num, den)  # always positive for den != 0
        num //= divisor
        den //= divisor
        if den < 0:
            num, den = -num, -den

        object.__setattr__(self, "num", num)
        object.__setattr__(self, "den", den)

    def __setattr__(self, name, value):
        raise AttributeError("Rational is immutable")

    def __reduce__(self):
        return (Rational, (self.num, self.den))

    @staticmethod
    def _coerce(other) -> "Rational":
        if isinstance(other, Rational):
            return other
        if isinstance(other, int):
            return Rational(other)
        return NotImplemented

    def add(self, other: "Rational") -> "Rational":
        return Rational(self.num * other.den + other.num * self.den, self.den * other.den)

    def subtract(self, other: "Rational") -> "Rational":
        return Rational(self.num * other.den - other.num * self.den, self.den * other.den)

    def multiply(self, other: "Rational") -> "Rational":
        return Rational(self.num * other.num, self.den * other.den)

    def divide(self, other: "Rational") -> "Rational":
        """Divide by ``other``. Raises DivisionByZeroError if it is zero."""
        if other.is_zero():
            raise DivisionByZeroError("Division by zero fraction")
        return Rational(self.num * other.den, self.den * other.num)

    def is_zero(self) -> bool:
        return self.num == 0

    def to_int(self) -> int:
        """
        Truncate toward zero.

        Python's ``//`` floors, so the quotient is taken on magnitudes and
        the sign is put back afterwards: -7/2 becomes -3, not -4.
        """
        if self.den == 0:
            raise DivisionByZeroError("Fraction has a zero denominator")
        quotient = abs(self.num) // self.den
        return -quotient if self.num < 0 else quotient

    # Operator forms

    def __add__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is NotImplemented else self.add(other)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is NotImplemented else self.subtract(other)

    def __rsub__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is NotImplemented else other.subtract(self)

    def __mul__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is NotImplemented else self.multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is NotImplemented else self.divide(other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        return NotImplemented if other is NotImplemented else other.divide(self)

    def __neg__(self):
        return Rational(-self.num, self.den)

    def __abs__(self):
        return Rational(abs(self.num), self.den)

    def __bool__(self):
        return not self.is_zero()

    def __eq__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self.num == other.num and self.den == other.den

    def __hash__(self):
        return hash((self.num, self.den))

    def __repr__(self):
        return f"Rational({self.num}, {self.den})"

    def __str__(self):
        return f"{self.num}/{self.den}"
