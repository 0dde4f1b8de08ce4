"""
Limb store: unsigned magnitudes as fixed-radix limb arrays.

A magnitude is a read-only 1-D numpy array of LIMB_DTYPE holding limbs
in [0, RADIX), least significant first.  The canonical form has no high
zero limbs; zero is the single-limb array [0].

All routines ignore sign (the integer engine carries it) and return new
arrays; inputs are never modified.
"""

from typing import Iterator, List, Sequence, Tuple

import numpy as np

from ..constants import SHIFT, RADIX, MASK, LIMB_DTYPE, WIDE_DTYPE
from ..errors import DivisionByZeroError


# ---------------------------------------------------------------------------
# Construction / canonical form
# ---------------------------------------------------------------------------

def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


ZERO = _freeze(np.zeros(1, dtype=LIMB_DTYPE))
ONE = _freeze(np.ones(1, dtype=LIMB_DTYPE))


def normalize(limbs: Sequence[int]) -> np.ndarray:
    """Canonical read-only magnitude from limbs already in [0, RADIX)."""
    arr = np.array(limbs, dtype=LIMB_DTYPE)
    nonzero = np.flatnonzero(arr)
    if nonzero.size == 0:
        return ZERO
    top = int(nonzero[-1]) + 1
    if top != arr.size:
        arr = arr[:top].copy()
    return _freeze(arr)


def from_int(value: int) -> np.ndarray:
    """Magnitude of a non-negative Python int."""
    if value < 0:
        raise ValueError(f"from_int expects a non-negative value, got {value}")
    limbs: List[int] = []
    while value:
        limbs.append(value & MASK)
        value >>= SHIFT
    return normalize(limbs) if limbs else ZERO


def to_int(mag: np.ndarray) -> int:
    """Exact Python int of a magnitude."""
    value = 0
    for limb in reversed(mag.tolist()):
        value = (value << SHIFT) | limb
    return value


def to_float(mag: np.ndarray) -> float:
    """Best-effort float of a magnitude; exact below 2**53, inf past
    the double range."""
    value = 0.0
    for limb in reversed(mag.tolist()):
        value = value * RADIX + limb
    return value


def _propagate(columns: Sequence[int]) -> np.ndarray:
    """Resolve column sums (any size or sign, non-negative total) into
    canonical limbs."""
    out: List[int] = []
    carry = 0
    for col in columns:
        carry += col
        out.append(carry & MASK)
        carry >>= SHIFT
    while carry > 0:
        out.append(carry & MASK)
        carry >>= SHIFT
    if carry < 0:
        raise ArithmeticError("magnitude underflow")
    return normalize(out)


def _widen(mag: np.ndarray, size: int) -> np.ndarray:
    out = np.zeros(size, dtype=WIDE_DTYPE)
    out[:mag.size] = mag
    return out


# ---------------------------------------------------------------------------
# Inspection
# ---------------------------------------------------------------------------

def is_zero(mag: np.ndarray) -> bool:
    return bool(mag.size == 1 and mag[0] == 0)


def is_one(mag: np.ndarray) -> bool:
    return bool(mag.size == 1 and mag[0] == 1)


def compare(a: np.ndarray, b: np.ndarray) -> int:
    """Three-way comparison of two magnitudes: -1, 0 or 1."""
    if a.size != b.size:
        return 1 if a.size > b.size else -1
    differ = np.flatnonzero(a != b)
    if differ.size == 0:
        return 0
    i = differ[-1]
    return 1 if a[i] > b[i] else -1


def bit_length(mag: np.ndarray) -> int:
    if is_zero(mag):
        return 0
    return (mag.size - 1) * SHIFT + int(mag[-1]).bit_length()


def trailing_zero_bits(mag: np.ndarray) -> int:
    """Number of low zero bits of a non-zero magnitude."""
    first = int(np.flatnonzero(mag)[0])
    limb = int(mag[first])
    return first * SHIFT + (limb & -limb).bit_length() - 1


def iter_bits(mag: np.ndarray) -> Iterator[int]:
    """Bits of a magnitude, most significant first, without leading zeros."""
    limbs = mag.tolist()
    top = limbs[-1]
    for k in range(top.bit_length() - 1, -1, -1):
        yield (top >> k) & 1
    for limb in reversed(limbs[:-1]):
        for k in range(SHIFT - 1, -1, -1):
            yield (limb >> k) & 1


# ---------------------------------------------------------------------------
# Add / subtract / multiply
# ---------------------------------------------------------------------------

def add(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """a + b."""
    size = max(a.size, b.size)
    return _propagate((_widen(a, size) + _widen(b, size)).tolist())


def subtract(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """a - b.  Requires a >= b."""
    size = max(a.size, b.size)
    return _propagate((_widen(a, size) - _widen(b, size)).tolist())


def multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Schoolbook product: the limb convolution gives every column sum
    (each term < 2**30, so int64 columns cannot overflow), then one
    carry pass."""
    if is_zero(a) or is_zero(b):
        return ZERO
    columns = np.convolve(a.astype(WIDE_DTYPE), b.astype(WIDE_DTYPE))
    return _propagate(columns.tolist())


def square(a: np.ndarray) -> np.ndarray:
    return multiply(a, a)


def mul_small(a: np.ndarray, n: int, extra: int = 0) -> np.ndarray:
    """a * n + extra for 0 <= n, extra <= RADIX."""
    columns = a.astype(WIDE_DTYPE) * n
    columns[0] += extra
    return _propagate(columns.tolist())


# ---------------------------------------------------------------------------
# Division
# ---------------------------------------------------------------------------

def divrem_small(a: np.ndarray, n: int) -> Tuple[np.ndarray, int]:
    """Divide a magnitude by a single limb 0 < n <= MASK.

    Returns (quotient magnitude, remainder int).
    """
    if n == 0:
        raise DivisionByZeroError("division or modulo by zero")
    limbs = a.tolist()
    quotient = [0] * len(limbs)
    rem = 0
    for i in range(len(limbs) - 1, -1, -1):
        rem = (rem << SHIFT) | limbs[i]
        quotient[i], rem = divmod(rem, n)
    return normalize(quotient), rem


def _long_divrem(a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Knuth algorithm D for len(b) >= 2 and a >= b."""
    # Normalize so the top divisor limb is at least RADIX // 2.
    d = RADIX // (int(b[-1]) + 1)
    v = mul_small(a, d).tolist()
    w = mul_small(b, d).tolist()
    size_v = len(v)
    size_w = len(w)
    w_top = w[-1]
    w_next = w[-2]

    size_q = size_v - size_w + 1
    q_limbs = [0] * size_q

    j = size_v
    for k in range(size_q - 1, -1, -1):
        vj = v[j] if j < size_v else 0

        if vj == w_top:
            q = MASK
        else:
            q = ((vj << SHIFT) + v[j - 1]) // w_top
        while (w_next * q >
               ((((vj << SHIFT) + v[j - 1] - q * w_top) << SHIFT)
                + v[j - 2])):
            q -= 1

        # v[k:k+size_w+1] -= q * w
        carry = 0
        i = 0
        while i < size_w and i + k < size_v:
            z = w[i] * q
            zz = z >> SHIFT
            carry += v[i + k] - z + (zz << SHIFT)
            v[i + k] = carry & MASK
            carry >>= SHIFT
            carry -= zz
            i += 1
        if i + k < size_v:
            carry += v[i + k]
            v[i + k] = 0

        if carry != 0:
            # q was one too large: add w back once.
            q -= 1
            carry = 0
            i = 0
            while i < size_w and i + k < size_v:
                carry += v[i + k] + w[i]
                v[i + k] = carry & MASK
                carry >>= SHIFT
                i += 1
        q_limbs[k] = q
        j -= 1

    remainder, _ = divrem_small(normalize(v), d)
    return normalize(q_limbs), remainder


def divrem(a: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Unsigned long division: (a // b, a % b)."""
    if is_zero(b):
        raise DivisionByZeroError("division or modulo by zero")
    if compare(a, b) < 0:
        return ZERO, a
    if b.size == 1:
        quotient, rem = divrem_small(a, int(b[0]))
        return quotient, from_int(rem)
    return _long_divrem(a, b)


def gcd(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Greatest common divisor by Euclid's algorithm."""
    while not is_zero(b):
        a, b = b, divrem(a, b)[1]
    return a


# ---------------------------------------------------------------------------
# Shifts
# ---------------------------------------------------------------------------

def shift_left(a: np.ndarray, n: int) -> np.ndarray:
    """a * 2**n for n >= 0."""
    if n == 0 or is_zero(a):
        return a
    words, bits = divmod(n, SHIFT)
    columns = np.zeros(a.size + words, dtype=WIDE_DTYPE)
    columns[words:] = a.astype(WIDE_DTYPE) << bits
    return _propagate(columns.tolist())


def shift_right(a: np.ndarray, n: int) -> np.ndarray:
    """a // 2**n for n >= 0."""
    if n == 0:
        return a
    words, bits = divmod(n, SHIFT)
    if words >= a.size:
        return ZERO
    high = a[words:].astype(WIDE_DTYPE)
    if bits:
        spill = np.zeros_like(high)
        spill[:-1] = (high[1:] << (SHIFT - bits)) & MASK
        high = (high >> bits) | spill
    return normalize(high)


# ---------------------------------------------------------------------------
# Powers
# ---------------------------------------------------------------------------

def power(base: np.ndarray, exponent: np.ndarray) -> np.ndarray:
    """base**exponent by left-to-right repeated squaring."""
    if is_zero(exponent):
        return ONE
    result = ONE
    for bit in iter_bits(exponent):
        result = square(result)
        if bit:
            result = multiply(result, base)
    return result


def pow_mod(base: np.ndarray, exponent: np.ndarray,
            modulus: np.ndarray) -> np.ndarray:
    """base**exponent mod modulus, reducing after every multiplication so
    intermediates stay below modulus**2."""
    if is_zero(modulus):
        raise DivisionByZeroError("modular exponentiation with zero modulus")
    result = divrem(ONE, modulus)[1]
    if is_zero(exponent):
        return result
    base = divrem(base, modulus)[1]
    for bit in iter_bits(exponent):
        result = divrem(square(result), modulus)[1]
        if bit:
            result = divrem(multiply(result, base), modulus)[1]
    return result


# ---------------------------------------------------------------------------
# Random magnitudes
# ---------------------------------------------------------------------------

def random_below(bound: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    """Uniform magnitude in [0, bound).

    Fills len(bound) random limbs, masks the top limb to the bound's bit
    width and rejects draws >= bound (acceptance >= 1/2 per draw).
    """
    if is_zero(bound):
        raise ValueError("random_below needs a positive bound")
    top_mask = (1 << int(bound[-1]).bit_length()) - 1
    while True:
        limbs = rng.integers(0, RADIX, size=bound.size, dtype=WIDE_DTYPE)
        limbs[-1] &= top_mask
        candidate = normalize(limbs)
        if compare(candidate, bound) < 0:
            return candidate
