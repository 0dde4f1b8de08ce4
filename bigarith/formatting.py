"""
Rational text parsing and fixed-point decimal rendering.

Accepted rational text (optional leading '-' applies to the whole value):
  "n"        integer
  "n/d"      fraction
  "w_n/d"    mixed number, w + n/d
  "i.f"      decimal, either side may be empty but not both
All parts are base-10 digit strings.
"""

from typing import Tuple

import numpy as np

from .constants import DEFAULT_DECIMAL_DIGITS
from .errors import DivisionByZeroError, InvalidArgumentError, ParseError
from .integer import BigInteger, ONE, big_int
from .limbs import convert


def _unsigned(part: str, source: str) -> BigInteger:
    if not part or part.startswith("-"):
        raise ParseError(f"Malformed rational {source!r}")
    negative, magnitude = convert.parse(part, 10)
    return BigInteger._make(negative, magnitude)


def parse_rational(text: str) -> Tuple[BigInteger, BigInteger]:
    """Split rational text into an (unreduced) numerator and denominator.

    Raises:
        ParseError on malformed text.
        DivisionByZeroError on a zero denominator.
    """
    if not isinstance(text, str):
        raise ParseError(f"Expected text, got {type(text).__name__}")
    body = text[1:] if text.startswith("-") else text

    if "/" in body:
        whole_text, underscore, fraction = body.partition("_")
        if not underscore:
            whole_text, fraction = "", body
        num_text, _, den_text = fraction.partition("/")
        numerator = _unsigned(num_text, text)
        denominator = _unsigned(den_text, text)
        if denominator.is_zero():
            raise DivisionByZeroError(f"Zero denominator in {text!r}")
        if underscore:
            numerator = _unsigned(whole_text, text).multiply(denominator).add(numerator)
    elif "." in body:
        int_text, _, frac_text = body.partition(".")
        if not int_text and not frac_text:
            raise ParseError(f"Malformed rational {text!r}")
        numerator = _unsigned((int_text or "0") + frac_text, text)
        denominator = big_int(10).pow(len(frac_text))
    else:
        numerator, denominator = _unsigned(body, text), ONE

    if text.startswith("-"):
        numerator = numerator.negate()
    return numerator, denominator


def decimal_expansion(numerator: BigInteger, denominator: BigInteger,
                      digits: int = DEFAULT_DECIMAL_DIGITS) -> str:
    """Fixed-point text of numerator/denominator (denominator > 0).

    Produces exactly `digits` fractional digits, the last one rounded half
    away from zero; the '-' sign is dropped when every rendered digit is 0.
    """
    if (isinstance(digits, bool) or not isinstance(digits, (int, np.integer))
            or digits < 0):
        raise InvalidArgumentError(
            f"digits must be a non-negative integer, got {digits!r}"
        )
    digits = int(digits)
    scaled, remainder = numerator.abs().multiply(big_int(10).pow(digits)).divmod(denominator)
    if remainder.shift_left(1).compare(denominator) >= 0:
        scaled = scaled.next()

    text = scaled.to_string().rjust(digits + 1, "0")
    if digits:
        text = f"{text[:-digits]}.{text[-digits:]}"
    if numerator.is_negative() and not scaled.is_zero():
        text = "-" + text
    return text
