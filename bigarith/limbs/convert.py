"""
Text <-> magnitude conversion in bases 2..36.

Parsing consumes digits in chunks of the largest power of the base that
fits in one limb (one multiply-add per chunk).  Rendering uses bit
accumulation for power-of-two bases and repeated single-limb division
otherwise.
"""

from typing import Dict, List, Tuple

import numpy as np

from ..constants import (
    SHIFT, MASK, DIGIT_ALPHABET, MIN_BASE, MAX_BASE, RADIX_PREFIXES,
)
from ..errors import ParseError
from . import store

_DIGIT_VALUES: Dict[str, int] = {}
for _value, _char in enumerate(DIGIT_ALPHABET):
    _DIGIT_VALUES[_char] = _value
    _DIGIT_VALUES[_char.upper()] = _value


def check_base(base: int) -> int:
    """Validate a base, returning it as an int."""
    if isinstance(base, bool) or not isinstance(base, (int, np.integer)):
        raise ParseError(f"Base must be an integer, got {base!r}")
    base = int(base)
    if not MIN_BASE <= base <= MAX_BASE:
        raise ParseError(
            f"Base {base} out of range [{MIN_BASE}, {MAX_BASE}]"
        )
    return base


def chunk_power(base: int) -> Tuple[int, int]:
    """(base**k, k) for the largest k with base**k <= MASK."""
    power, count = base, 1
    while power * base <= MASK:
        power *= base
        count += 1
    return power, count


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_magnitude(digits: str, base: int, source: str = "") -> np.ndarray:
    """Magnitude of an unsigned digit string (no sign, no prefix)."""
    if not digits:
        raise ParseError(f"No digits in {source or digits!r}")
    _, per_chunk = chunk_power(base)
    mag = store.ZERO
    for start in range(0, len(digits), per_chunk):
        chunk = digits[start:start + per_chunk]
        value = 0
        for char in chunk:
            digit = _DIGIT_VALUES.get(char)
            if digit is None or digit >= base:
                raise ParseError(
                    f"Invalid character {char!r} for base {base} "
                    f"in {source or digits!r}"
                )
            value = value * base + digit
        mag = store.mul_small(mag, base ** len(chunk), value)
    return mag


def parse(text: str, base: int = 10) -> Tuple[bool, np.ndarray]:
    """Parse signed integer text.

    Accepts an optional leading '-', then an optional radix prefix matching
    the base ('0b', '0o', '0x'), then one or more digits.  Whitespace is
    not trimmed.

    Returns:
        (negative, magnitude); zero is never negative.

    Raises:
        ParseError on malformed text or an invalid base.
    """
    if not isinstance(text, str):
        raise ParseError(f"Expected text, got {type(text).__name__}")
    base = check_base(base)
    body = text
    negative = body.startswith("-")
    if negative:
        body = body[1:]
    prefix = RADIX_PREFIXES.get(base)
    if prefix is not None and body[:2].lower() == prefix:
        body = body[2:]
    mag = parse_magnitude(body, base, source=text)
    return negative and not store.is_zero(mag), mag


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render_pow2(mag: np.ndarray, base: int) -> str:
    bits_per_char = base.bit_length() - 1
    out: List[str] = []
    accum = 0
    accum_bits = 0
    for limb in mag.tolist():
        accum |= limb << accum_bits
        accum_bits += SHIFT
        while accum_bits >= bits_per_char:
            out.append(DIGIT_ALPHABET[accum & (base - 1)])
            accum >>= bits_per_char
            accum_bits -= bits_per_char
    if accum:
        out.append(DIGIT_ALPHABET[accum])
    return "".join(reversed(out)).lstrip("0")


def _render_general(mag: np.ndarray, base: int) -> str:
    powbase, per_chunk = chunk_power(base)
    out: List[str] = []
    while not store.is_zero(mag):
        mag, rem = store.divrem_small(mag, powbase)
        for _ in range(per_chunk):
            rem, digit = divmod(rem, base)
            out.append(DIGIT_ALPHABET[digit])
    return "".join(reversed(out)).lstrip("0")


def render(mag: np.ndarray, negative: bool = False, base: int = 10) -> str:
    """Canonical text: lowercase digits, no leading zeros, '-' only for
    negative non-zero values, "0" for zero."""
    base = check_base(base)
    if store.is_zero(mag):
        return "0"
    if base & (base - 1) == 0:
        digits = _render_pow2(mag, base)
    else:
        digits = _render_general(mag, base)
    return "-" + digits if negative else digits
