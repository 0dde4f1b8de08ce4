"""
BigInteger: signed arbitrary-precision integers on the limb store.

A value is a sign flag plus a canonical magnitude (read-only numpy limb
array).  Values are immutable; every operation returns a new BigInteger.

Division is truncating: the quotient rounds toward zero and the
remainder takes the sign of the dividend, so a == q*b + r always holds.
The `//` and `%` operators follow the same rule, as decimal.Decimal does.
"""

import functools
import math
import warnings
from typing import NamedTuple, Optional, Union

import numpy as np

from .constants import NATIVE_SAFE_BITS
from .errors import (
    DivisionByZeroError, InvalidArgumentError, ParseError, PrecisionLossWarning,
)
from .limbs import store, convert
from . import bitwise
from . import primality

IntegerLike = Union["BigInteger", int, float, str, np.integer]


class DivMod(NamedTuple):
    """Result of BigInteger.divmod."""
    quotient: "BigInteger"
    remainder: "BigInteger"


# ---------------------------------------------------------------------------
# Operand coercion
# ---------------------------------------------------------------------------

def _is_operand(value) -> bool:
    """Types the Python operators accept (no text, no floats)."""
    return (isinstance(value, (BigInteger, int, np.integer))
            and not isinstance(value, bool))


def coerce_integer(value: IntegerLike) -> "BigInteger":
    """Interpret a native number, decimal text or BigInteger as a BigInteger.

    Raises:
        InvalidArgumentError for bools, non-integral or non-finite floats
        and unsupported types.
        ParseError for malformed text.
    """
    if isinstance(value, BigInteger):
        return value
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Cannot interpret bool {value!r} as an integer")
    if isinstance(value, (int, np.integer)):
        value = int(value)
        return BigInteger._make(value < 0, store.from_int(abs(value)))
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidArgumentError(f"{value!r} is not an integral value")
        value = int(value)
        return BigInteger._make(value < 0, store.from_int(abs(value)))
    if isinstance(value, str):
        return BigInteger._make(*convert.parse(value, 10))
    raise InvalidArgumentError(
        f"Cannot interpret {type(value).__name__} {value!r} as an integer"
    )


def _coerce_base(base) -> int:
    try:
        value = coerce_integer(base)
    except InvalidArgumentError as exc:
        raise ParseError(f"Invalid base {base!r}") from exc
    return convert.check_base(value.to_int())


def coerce_exponent(value: IntegerLike) -> "BigInteger":
    """Exponent operands: decimal text is accepted, but malformed text is
    an unusable argument rather than a parse failure."""
    try:
        return coerce_integer(value)
    except ParseError as exc:
        raise InvalidArgumentError(f"Invalid exponent {value!r}") from exc


def _coerce_count(value) -> int:
    """Shift counts: any integer operand, as a Python int."""
    return coerce_integer(value).to_int()


def _operator(method):
    """Wrap a method as a Python operator that defers on foreign types."""
    @functools.wraps(method)
    def operator(self, other):
        if not _is_operand(other):
            return NotImplemented
        return method(self, other)
    return operator


# ---------------------------------------------------------------------------
# BigInteger
# ---------------------------------------------------------------------------

class BigInteger:
    """Signed arbitrary-precision integer.

    Usage:
        a = big_int("123456789012345678901234567890")
        a.add(1).to_string()          # '123456789012345678901234567891'
        big_int("ff", 16).multiply(2) # BigInteger('510')
    """

    __slots__ = ("_negative", "_magnitude")

    zero: "BigInteger"
    one: "BigInteger"
    minus_one: "BigInteger"

    def __init__(self, value: IntegerLike = 0, base=None):
        if base is None:
            other = coerce_integer(value)
            negative, magnitude = other._negative, other._magnitude
        else:
            text = value if isinstance(value, str) else coerce_integer(value).to_string()
            negative, magnitude = convert.parse(text, _coerce_base(base))
        object.__setattr__(self, "_negative", negative)
        object.__setattr__(self, "_magnitude", magnitude)

    @classmethod
    def _make(cls, negative: bool, magnitude: np.ndarray) -> "BigInteger":
        obj = cls.__new__(cls)
        object.__setattr__(obj, "_negative", bool(negative) and not store.is_zero(magnitude))
        object.__setattr__(obj, "_magnitude", magnitude)
        return obj

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return (BigInteger, (self.to_string(16), 16))

    # -- attributes ---------------------------------------------------------

    @property
    def negative(self) -> bool:
        return self._negative

    @property
    def magnitude(self) -> np.ndarray:
        """Read-only limb array, least significant first."""
        return self._magnitude

    @property
    def sign(self) -> int:
        if store.is_zero(self._magnitude):
            return 0
        return -1 if self._negative else 1

    # -- additive -----------------------------------------------------------

    def _add_signed(self, negative: bool, magnitude: np.ndarray) -> "BigInteger":
        if self._negative == negative:
            return BigInteger._make(negative, store.add(self._magnitude, magnitude))
        cmp = store.compare(self._magnitude, magnitude)
        if cmp == 0:
            return ZERO
        if cmp > 0:
            return BigInteger._make(self._negative,
                                    store.subtract(self._magnitude, magnitude))
        return BigInteger._make(negative, store.subtract(magnitude, self._magnitude))

    def add(self, other: IntegerLike) -> "BigInteger":
        other = coerce_integer(other)
        return self._add_signed(other._negative, other._magnitude)

    def subtract(self, other: IntegerLike) -> "BigInteger":
        other = coerce_integer(other)
        return self._add_signed(not other._negative, other._magnitude)

    def negate(self) -> "BigInteger":
        return BigInteger._make(not self._negative, self._magnitude)

    def abs(self) -> "BigInteger":
        if not self._negative:
            return self
        return BigInteger._make(False, self._magnitude)

    def next(self) -> "BigInteger":
        """self + 1."""
        return self._add_signed(False, store.ONE)

    def prev(self) -> "BigInteger":
        """self - 1."""
        return self._add_signed(True, store.ONE)

    # -- multiplicative -----------------------------------------------------

    def multiply(self, other: IntegerLike) -> "BigInteger":
        other = coerce_integer(other)
        return BigInteger._make(self._negative != other._negative,
                                store.multiply(self._magnitude, other._magnitude))

    def square(self) -> "BigInteger":
        return BigInteger._make(False, store.square(self._magnitude))

    def divmod(self, other: IntegerLike) -> DivMod:
        """Truncating division.

        Returns:
            DivMod(quotient, remainder) with self == quotient*other + remainder
            and the remainder carrying the sign of self.

        Raises:
            DivisionByZeroError if other is zero.
        """
        other = coerce_integer(other)
        quotient, remainder = store.divrem(self._magnitude, other._magnitude)
        return DivMod(
            BigInteger._make(self._negative != other._negative, quotient),
            BigInteger._make(self._negative, remainder),
        )

    def divide(self, other: IntegerLike) -> "BigInteger":
        """Quotient of the truncating division."""
        return self.divmod(other).quotient

    def mod(self, other: IntegerLike) -> "BigInteger":
        """Remainder of the truncating division (sign of self)."""
        return self.divmod(other).remainder

    def pow(self, exponent: IntegerLike) -> "BigInteger":
        """self**exponent.  0**0 is 1; a negative exponent gives 0.

        Raises:
            InvalidArgumentError for a non-integral exponent.
        """
        exponent = coerce_exponent(exponent)
        if exponent.is_zero():
            return ONE
        if exponent._negative or self.is_zero():
            return ZERO
        negative = self._negative and exponent.is_odd()
        if store.is_one(self._magnitude):
            return MINUS_ONE if negative else ONE
        return BigInteger._make(negative,
                                store.power(self._magnitude, exponent._magnitude))

    def mod_pow(self, exponent: IntegerLike, modulus: IntegerLike) -> "BigInteger":
        """(self**exponent) rem |modulus|, carrying the sign of self**exponent.

        Raises:
            DivisionByZeroError for a zero modulus.
            InvalidArgumentError for a negative exponent.
        """
        exponent = coerce_exponent(exponent)
        modulus = coerce_integer(modulus)
        if modulus.is_zero():
            raise DivisionByZeroError("mod_pow with a zero modulus")
        if exponent._negative:
            raise InvalidArgumentError(
                f"mod_pow needs a non-negative exponent, got {exponent}"
            )
        magnitude = store.pow_mod(self._magnitude, exponent._magnitude,
                                  modulus._magnitude)
        return BigInteger._make(self._negative and exponent.is_odd(), magnitude)

    # -- comparison ---------------------------------------------------------

    def compare_abs(self, other: IntegerLike) -> int:
        other = coerce_integer(other)
        return store.compare(self._magnitude, other._magnitude)

    def compare(self, other: IntegerLike) -> int:
        """-1, 0 or 1 as self is less than, equal to or greater than other."""
        other = coerce_integer(other)
        if self._negative != other._negative:
            return -1 if self._negative else 1
        cmp = store.compare(self._magnitude, other._magnitude)
        return -cmp if self._negative else cmp

    def equals(self, other: IntegerLike) -> bool:
        return self.compare(other) == 0

    def not_equals(self, other: IntegerLike) -> bool:
        return self.compare(other) != 0

    def greater(self, other: IntegerLike) -> bool:
        return self.compare(other) > 0

    def greater_or_equals(self, other: IntegerLike) -> bool:
        return self.compare(other) >= 0

    def lesser(self, other: IntegerLike) -> bool:
        return self.compare(other) < 0

    def lesser_or_equals(self, other: IntegerLike) -> bool:
        return self.compare(other) <= 0

    # -- predicates ---------------------------------------------------------

    def is_zero(self) -> bool:
        return store.is_zero(self._magnitude)

    def is_unit(self) -> bool:
        """True only for +1."""
        return not self._negative and store.is_one(self._magnitude)

    def is_even(self) -> bool:
        return int(self._magnitude[0]) & 1 == 0

    def is_odd(self) -> bool:
        return int(self._magnitude[0]) & 1 == 1

    def is_positive(self) -> bool:
        """True for zero and positive values."""
        return not self._negative

    def is_negative(self) -> bool:
        return self._negative

    def is_divisible_by(self, other: IntegerLike) -> bool:
        """False for a zero divisor."""
        other = coerce_integer(other)
        if other.is_zero():
            return False
        return self.mod(other).is_zero()

    def is_prime(self, config: Optional[primality.PrimalityConfig] = None) -> bool:
        """Primality with the library's default rigor.

        Exact below 3317044064679887385961981; above that a random-witness
        Miller-Rabin test (see bigarith.primality).  Negative values are
        never prime.
        """
        return not self._negative and primality.is_prime(self._magnitude, config)

    def is_probable_prime(self, iterations: Optional[int] = None,
                          config: Optional[primality.PrimalityConfig] = None,
                          rng: Optional[np.random.Generator] = None) -> bool:
        if self._negative:
            return False
        return primality.is_probable_prime(self._magnitude, iterations,
                                           config=config, rng=rng)

    # -- bits ---------------------------------------------------------------

    def bit_length(self) -> int:
        return store.bit_length(self._magnitude)

    def shift_left(self, n: IntegerLike) -> "BigInteger":
        """self * 2**n; a negative n shifts right."""
        count = _coerce_count(n)
        if count < 0:
            return self.shift_right(-count)
        return BigInteger._make(self._negative,
                                store.shift_left(self._magnitude, count))

    def shift_right(self, n: IntegerLike) -> "BigInteger":
        """self / 2**n truncated toward zero; a negative n shifts left."""
        count = _coerce_count(n)
        if count < 0:
            return self.shift_left(-count)
        return BigInteger._make(self._negative,
                                store.shift_right(self._magnitude, count))

    def _signed(self) -> bitwise.Signed:
        return self._negative, self._magnitude

    def not_(self) -> "BigInteger":
        return BigInteger._make(*bitwise.invert(self._signed()))

    def and_(self, other: IntegerLike) -> "BigInteger":
        other = coerce_integer(other)
        return BigInteger._make(*bitwise.bitwise(self._signed(), "&", other._signed()))

    def or_(self, other: IntegerLike) -> "BigInteger":
        other = coerce_integer(other)
        return BigInteger._make(*bitwise.bitwise(self._signed(), "|", other._signed()))

    def xor(self, other: IntegerLike) -> "BigInteger":
        other = coerce_integer(other)
        return BigInteger._make(*bitwise.bitwise(self._signed(), "^", other._signed()))

    # -- conversion ---------------------------------------------------------

    def to_string(self, base=10) -> str:
        return convert.render(self._magnitude, self._negative, _coerce_base(base))

    def to_int(self) -> int:
        value = store.to_int(self._magnitude)
        return -value if self._negative else value

    def to_native(self) -> float:
        """Best-effort float.  Exact up to 2**53 in magnitude; larger values
        are approximated (inf past the double range) with a
        PrecisionLossWarning instead of an error."""
        if self.bit_length() > NATIVE_SAFE_BITS:
            warnings.warn(
                f"{self.bit_length()}-bit integer does not fit a float "
                "exactly; precision is lost",
                PrecisionLossWarning, stacklevel=2,
            )
        value = store.to_float(self._magnitude)
        return -value if self._negative else value

    # -- aliases ------------------------------------------------------------

    plus = add
    minus = subtract
    times = multiply
    over = divide
    remainder = mod
    eq = equals
    neq = not_equals
    value_of = to_native
    to_js_number = to_native

    # -- Python protocol ----------------------------------------------------

    __add__ = __radd__ = _operator(add)
    __sub__ = _operator(subtract)
    __rsub__ = _operator(lambda self, other: coerce_integer(other).subtract(self))
    __mul__ = __rmul__ = _operator(multiply)
    __floordiv__ = _operator(divide)
    __rfloordiv__ = _operator(lambda self, other: coerce_integer(other).divide(self))
    __mod__ = _operator(mod)
    __rmod__ = _operator(lambda self, other: coerce_integer(other).mod(self))
    __divmod__ = _operator(divmod)
    __rdivmod__ = _operator(lambda self, other: coerce_integer(other).divmod(self))
    __and__ = __rand__ = _operator(and_)
    __or__ = __ror__ = _operator(or_)
    __xor__ = __rxor__ = _operator(xor)
    __lshift__ = _operator(shift_left)
    __rshift__ = _operator(shift_right)
    __eq__ = _operator(equals)
    __ne__ = _operator(not_equals)
    __lt__ = _operator(lesser)
    __le__ = _operator(lesser_or_equals)
    __gt__ = _operator(greater)
    __ge__ = _operator(greater_or_equals)

    def __pow__(self, exponent, modulus=None):
        if not _is_operand(exponent) or (modulus is not None and not _is_operand(modulus)):
            return NotImplemented
        if modulus is None:
            return self.pow(exponent)
        return self.mod_pow(exponent, modulus)

    def __rpow__(self, base):
        if not _is_operand(base):
            return NotImplemented
        return coerce_integer(base).pow(self)

    def __neg__(self) -> "BigInteger":
        return self.negate()

    def __pos__(self) -> "BigInteger":
        return self

    def __abs__(self) -> "BigInteger":
        return self.abs()

    def __invert__(self) -> "BigInteger":
        return self.not_()

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __int__(self) -> int:
        return self.to_int()

    def __hash__(self) -> int:
        return hash(self.to_int())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"BigInteger('{self.to_string()}')"


ZERO = BigInteger._make(False, store.ZERO)
ONE = BigInteger._make(False, store.ONE)
MINUS_ONE = BigInteger._make(True, store.ONE)

BigInteger.zero = ZERO
BigInteger.one = ONE
BigInteger.minus_one = MINUS_ONE


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

def big_int(value: Optional[IntegerLike] = None, base=None) -> BigInteger:
    """Factory: no argument gives zero, a BigInteger is returned as is,
    text is parsed in `base` (default 10)."""
    if value is None:
        return ZERO
    if base is None and isinstance(value, BigInteger):
        return value
    return BigInteger(value, base)


def max_of(a: IntegerLike, b: IntegerLike) -> BigInteger:
    a, b = coerce_integer(a), coerce_integer(b)
    return a if a.greater(b) else b


def min_of(a: IntegerLike, b: IntegerLike) -> BigInteger:
    a, b = coerce_integer(a), coerce_integer(b)
    return a if a.lesser(b) else b


def gcd(a: IntegerLike, b: IntegerLike) -> BigInteger:
    """Non-negative greatest common divisor; gcd(a, 0) == |a|."""
    a, b = coerce_integer(a), coerce_integer(b)
    return BigInteger._make(False, store.gcd(a.magnitude, b.magnitude))


def lcm(a: IntegerLike, b: IntegerLike) -> BigInteger:
    """|a*b| / gcd(a, b).

    Raises:
        DivisionByZeroError if either operand is zero (lcm is left
        undefined there).
    """
    a, b = coerce_integer(a), coerce_integer(b)
    if a.is_zero() or b.is_zero():
        raise DivisionByZeroError(f"lcm is undefined for a zero operand ({a}, {b})")
    return a.abs().divide(gcd(a, b)).multiply(b.abs())


def rand_between(a: IntegerLike, b: IntegerLike,
                 rng: Optional[np.random.Generator] = None) -> BigInteger:
    """Uniform random integer in the inclusive range spanned by a and b."""
    a, b = coerce_integer(a), coerce_integer(b)
    low, high = min_of(a, b), max_of(a, b)
    span = high.subtract(low).next()
    if rng is None:
        rng = np.random.default_rng()
    offset = store.random_below(span.magnitude, rng)
    return low.add(BigInteger._make(False, offset))


BigInteger.max = staticmethod(max_of)
BigInteger.min = staticmethod(min_of)
BigInteger.gcd = staticmethod(gcd)
BigInteger.lcm = staticmethod(lcm)
BigInteger.rand_between = staticmethod(rand_between)
