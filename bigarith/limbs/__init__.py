"""
Limb store for bigarith.

Provides sign-free magnitude arithmetic on read-only numpy limb arrays
(radix 2**15) and text conversion in bases 2..36.
"""

from .store import (
    ZERO, ONE,
    normalize, from_int, to_int, to_float,
    is_zero, is_one, compare, bit_length, trailing_zero_bits,
    add, subtract, multiply, square, mul_small,
    divrem, divrem_small, gcd,
    shift_left, shift_right,
    power, pow_mod, random_below,
)
from .convert import check_base, parse, parse_magnitude, render

__all__ = [
    "ZERO", "ONE",
    "normalize", "from_int", "to_int", "to_float",
    "is_zero", "is_one", "compare", "bit_length", "trailing_zero_bits",
    "add", "subtract", "multiply", "square", "mul_small",
    "divrem", "divrem_small", "gcd",
    "shift_left", "shift_right",
    "power", "pow_mod", "random_below",
    "check_base", "parse", "parse_magnitude", "render",
]
