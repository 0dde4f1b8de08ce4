"""
BigRational: exact fractions over BigInteger.

Invariants held by every value:
  - the denominator is positive (the sign lives on the numerator),
  - numerator and denominator are coprime (zero is 0/1).

Every constructor and every arithmetic result goes through `_reduced`.
Binary operations accept either one operand or a numerator/denominator
pair, e.g. r.add(1, 3).
"""

import functools
import math
from typing import Optional, Union

import numpy as np

from .constants import DEFAULT_DECIMAL_DIGITS, NATIVE_SAFE_BITS
from .errors import DivisionByZeroError, InvalidArgumentError
from .formatting import decimal_expansion, parse_rational
from .integer import (
    BigInteger, ONE as INT_ONE, ZERO as INT_ZERO, big_int, coerce_exponent,
    coerce_integer, gcd,
)
from .limbs import store

RationalLike = Union["BigRational", BigInteger, int, float, str, np.integer]


def _is_operand(value) -> bool:
    """Types the Python operators accept."""
    return (isinstance(value, (BigRational, BigInteger, int, np.integer))
            and not isinstance(value, bool))


def _reduced(numerator: BigInteger, denominator: BigInteger) -> "BigRational":
    if denominator.is_zero():
        raise DivisionByZeroError(f"Zero denominator for {numerator}/0")
    if denominator.is_negative():
        numerator, denominator = numerator.negate(), denominator.negate()
    divisor = gcd(numerator, denominator)
    if not divisor.is_unit():
        numerator = numerator.divide(divisor)
        denominator = denominator.divide(divisor)
    return BigRational._make(numerator, denominator)


def _single(value: RationalLike) -> "BigRational":
    if isinstance(value, BigRational):
        return value
    if isinstance(value, str):
        return _reduced(*parse_rational(value))
    if isinstance(value, (float, np.floating)) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise InvalidArgumentError(f"Cannot represent {value!r} as a rational")
        text = np.format_float_positional(value, unique=True, trim="-")
        return _reduced(*parse_rational(text))
    return BigRational._make(coerce_integer(value), INT_ONE)


def coerce_rational(value: RationalLike,
                    denom: Optional[RationalLike] = None) -> "BigRational":
    """Interpret a value, or a numerator/denominator pair, as a BigRational.

    Raises:
        DivisionByZeroError for a zero denominator.
        InvalidArgumentError / ParseError for unusable operands.
    """
    if denom is None:
        return _single(value)
    top, bottom = _single(value), _single(denom)
    return _reduced(top._num.multiply(bottom._den),
                    top._den.multiply(bottom._num))


def _operator(method):
    """Wrap a method as a Python operator that defers on foreign types."""
    @functools.wraps(method)
    def operator(self, other):
        if not _is_operand(other):
            return NotImplemented
        return method(self, other)
    return operator


class BigRational:
    """Arbitrary-precision rational number in lowest terms.

    Usage:
        big_rat(1, 3).add(big_rat(1, 6))      # BigRational('1/2')
        big_rat(-3, 4).to_decimal(2)          # '-0.75'
    """

    __slots__ = ("_num", "_den")

    zero: "BigRational"
    one: "BigRational"
    minus_one: "BigRational"

    def __init__(self, value: RationalLike = 0,
                 denom: Optional[RationalLike] = None):
        other = coerce_rational(value, denom)
        object.__setattr__(self, "_num", other._num)
        object.__setattr__(self, "_den", other._den)

    @classmethod
    def _make(cls, numerator: BigInteger, denominator: BigInteger) -> "BigRational":
        obj = cls.__new__(cls)
        object.__setattr__(obj, "_num", numerator)
        object.__setattr__(obj, "_den", denominator)
        return obj

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (BigRational, (self._num, self._den))

    @property
    def numerator(self) -> BigInteger:
        return self._num

    @property
    def denominator(self) -> BigInteger:
        return self._den

    num = numerator
    denom = denominator

    # -- arithmetic ---------------------------------------------------------

    def add(self, value: RationalLike, denom: Optional[RationalLike] = None) -> "BigRational":
        other = coerce_rational(value, denom)
        return _reduced(self._num.multiply(other._den).add(other._num.multiply(self._den)),
                        self._den.multiply(other._den))

    def subtract(self, value: RationalLike, denom: Optional[RationalLike] = None) -> "BigRational":
        other = coerce_rational(value, denom)
        return _reduced(self._num.multiply(other._den).subtract(other._num.multiply(self._den)),
                        self._den.multiply(other._den))

    def multiply(self, value: RationalLike, denom: Optional[RationalLike] = None) -> "BigRational":
        other = coerce_rational(value, denom)
        return _reduced(self._num.multiply(other._num), self._den.multiply(other._den))

    def divide(self, value: RationalLike, denom: Optional[RationalLike] = None) -> "BigRational":
        """Exact quotient.

        Raises:
            DivisionByZeroError if the divisor is zero.
        """
        other = coerce_rational(value, denom)
        if other.is_zero():
            raise DivisionByZeroError(f"Division of {self} by zero")
        return _reduced(self._num.multiply(other._den), self._den.multiply(other._num))

    def mod(self, value: RationalLike, denom: Optional[RationalLike] = None) -> "BigRational":
        """self - other*trunc(self/other); the result has the sign of self."""
        other = coerce_rational(value, denom)
        if other.is_zero():
            raise DivisionByZeroError(f"Modulo of {self} by zero")
        quotient = self._num.multiply(other._den).divide(self._den.multiply(other._num))
        return self.subtract(other.multiply(BigRational._make(quotient, INT_ONE)))

    def reciprocate(self) -> "BigRational":
        if self.is_zero():
            raise DivisionByZeroError("Reciprocal of zero")
        return _reduced(self._den, self._num)

    def pow(self, exponent) -> "BigRational":
        """self**exponent for an integral exponent; negative exponents
        invert first."""
        exponent = coerce_exponent(exponent)
        if exponent.is_zero():
            return ONE
        if exponent.is_negative():
            return self.reciprocate().pow(exponent.negate())
        return BigRational._make(self._num.pow(exponent), self._den.pow(exponent))

    def negate(self) -> "BigRational":
        return BigRational._make(self._num.negate(), self._den)

    def abs(self) -> "BigRational":
        if not self._num.is_negative():
            return self
        return BigRational._make(self._num.abs(), self._den)

    # -- rounding -----------------------------------------------------------

    def floor(self) -> BigInteger:
        quotient, remainder = self._num.divmod(self._den)
        return quotient.prev() if remainder.is_negative() else quotient

    def ceil(self) -> BigInteger:
        quotient, remainder = self._num.divmod(self._den)
        if not remainder.is_zero() and not remainder.is_negative():
            return quotient.next()
        return quotient

    def round(self) -> BigInteger:
        """Nearest integer; ties round away from zero."""
        quotient, remainder = self._num.divmod(self._den)
        if remainder.abs().shift_left(1).compare(self._den) < 0:
            return quotient
        return quotient.prev() if self._num.is_negative() else quotient.next()

    # -- comparison ---------------------------------------------------------

    def compare(self, value: RationalLike, denom: Optional[RationalLike] = None) -> int:
        """-1, 0 or 1; cross-multiplied (denominators are positive)."""
        other = coerce_rational(value, denom)
        return self._num.multiply(other._den).compare(other._num.multiply(self._den))

    def compare_abs(self, value: RationalLike, denom: Optional[RationalLike] = None) -> int:
        other = coerce_rational(value, denom)
        return self._num.multiply(other._den).compare_abs(other._num.multiply(self._den))

    def equals(self, value: RationalLike, denom: Optional[RationalLike] = None) -> bool:
        return self.compare(value, denom) == 0

    def not_equals(self, value: RationalLike, denom: Optional[RationalLike] = None) -> bool:
        return self.compare(value, denom) != 0

    def lesser(self, value: RationalLike, denom: Optional[RationalLike] = None) -> bool:
        return self.compare(value, denom) < 0

    def lesser_or_equals(self, value: RationalLike, denom: Optional[RationalLike] = None) -> bool:
        return self.compare(value, denom) <= 0

    def greater(self, value: RationalLike, denom: Optional[RationalLike] = None) -> bool:
        return self.compare(value, denom) > 0

    def greater_or_equals(self, value: RationalLike, denom: Optional[RationalLike] = None) -> bool:
        return self.compare(value, denom) >= 0

    # -- predicates ---------------------------------------------------------

    def is_zero(self) -> bool:
        return self._num.is_zero()

    def is_positive(self) -> bool:
        """True for zero and positive values."""
        return self._num.is_positive()

    def is_negative(self) -> bool:
        return self._num.is_negative()

    def is_integer(self) -> bool:
        return self._den.is_unit()

    # -- conversion ---------------------------------------------------------

    def to_decimal(self, digits: int = DEFAULT_DECIMAL_DIGITS) -> str:
        return decimal_expansion(self._num, self._den, digits)

    def to_string(self) -> str:
        if self._den.is_unit():
            return self._num.to_string()
        return f"{self._num.to_string()}/{self._den.to_string()}"

    def value_of(self) -> float:
        """Best-effort float of the fraction (never raises)."""
        # Scale so the integer quotient keeps a few bits beyond a double's.
        shift = max(0, NATIVE_SAFE_BITS + 11
                    + self._den.bit_length() - self._num.bit_length())
        quotient = self._num.abs().shift_left(shift).divide(self._den)
        value = math.ldexp(store.to_float(quotient.magnitude), -shift)
        return -value if self._num.is_negative() else value

    # -- aliases ------------------------------------------------------------

    plus = add
    minus = subtract
    times = multiply
    over = divide
    eq = equals
    neq = not_equals

    # -- Python protocol ----------------------------------------------------

    __add__ = __radd__ = _operator(add)
    __sub__ = _operator(subtract)
    __rsub__ = _operator(lambda self, other: coerce_rational(other).subtract(self))
    __mul__ = __rmul__ = _operator(multiply)
    __truediv__ = _operator(divide)
    __rtruediv__ = _operator(lambda self, other: coerce_rational(other).divide(self))
    __mod__ = _operator(mod)
    __rmod__ = _operator(lambda self, other: coerce_rational(other).mod(self))
    __eq__ = _operator(equals)
    __ne__ = _operator(not_equals)
    __lt__ = _operator(lesser)
    __le__ = _operator(lesser_or_equals)
    __gt__ = _operator(greater)
    __ge__ = _operator(greater_or_equals)

    def __pow__(self, exponent):
        if isinstance(exponent, bool) or not isinstance(exponent, (BigInteger, int, np.integer)):
            return NotImplemented
        return self.pow(exponent)

    def __neg__(self) -> "BigRational":
        return self.negate()

    def __pos__(self) -> "BigRational":
        return self

    def __abs__(self) -> "BigRational":
        return self.abs()

    def __floor__(self) -> BigInteger:
        return self.floor()

    def __ceil__(self) -> BigInteger:
        return self.ceil()

    def __round__(self, ndigits: Optional[int] = None):
        if ndigits is None:
            return self.round()
        if ndigits < 0:
            raise InvalidArgumentError(f"ndigits must be non-negative, got {ndigits!r}")
        scale = big_int(10).pow(ndigits)
        return BigRational._make(self.multiply(scale).round(), INT_ONE).divide(scale)

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __hash__(self) -> int:
        if self._den.is_unit():
            return hash(self._num)
        return hash((self._num, self._den))

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigRational('{self.to_string()}')"


ZERO = BigRational._make(INT_ZERO, INT_ONE)
ONE = BigRational._make(INT_ONE, INT_ONE)
MINUS_ONE = BigRational._make(INT_ONE.negate(), INT_ONE)

BigRational.zero = ZERO
BigRational.one = ONE
BigRational.minus_one = MINUS_ONE


def big_rat(value: Optional[RationalLike] = None,
            denom: Optional[RationalLike] = None) -> BigRational:
    """Factory: no argument gives zero, a lone BigRational is returned as is."""
    if value is None:
        return ZERO
    if denom is None and isinstance(value, BigRational):
        return value
    return BigRational(value, denom)
