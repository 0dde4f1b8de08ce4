"""
Two's-complement bitwise operations on signed magnitudes.

Operands are (negative, magnitude) pairs and are treated as if sign
extended to infinite width.  A negative operand x is handled through
~x = -(x + 1), which is non-negative, with its limbs XOR-ed against MASK.
"""

from typing import Tuple

import numpy as np

from .constants import MASK, WIDE_DTYPE
from .limbs import store

Signed = Tuple[bool, np.ndarray]


def invert(value: Signed) -> Signed:
    """~x == -(x + 1)."""
    negative, mag = value
    if negative:
        return False, store.subtract(mag, store.ONE)
    return True, store.add(mag, store.ONE)


def _limbs(mag: np.ndarray, mask: int, size: int) -> np.ndarray:
    out = np.full(size, mask, dtype=WIDE_DTYPE)
    out[:mag.size] = mag.astype(WIDE_DTYPE) ^ mask
    return out


def bitwise(a: Signed, op: str, b: Signed) -> Signed:
    """a op b for op in '&', '|', '^'."""
    if op not in ("&", "|", "^"):
        raise ValueError(f"Unknown bitwise operator {op!r}")

    mask_a = mask_b = 0
    if a[0]:
        a = invert(a)
        mask_a = MASK
    if b[0]:
        b = invert(b)
        mask_b = MASK

    # Rewrite so the limbs past both operands are zero; negate_result
    # marks results that must be inverted back at the end.
    negate_result = False
    if op == "^":
        if mask_a != mask_b:
            mask_a ^= MASK
            negate_result = True
    elif op == "&":
        if mask_a and mask_b:
            op = "|"
            mask_a ^= MASK
            mask_b ^= MASK
            negate_result = True
    elif mask_a or mask_b:
        op = "&"
        mask_a ^= MASK
        mask_b ^= MASK
        negate_result = True

    size = max(a[1].size, b[1].size)
    limbs_a = _limbs(a[1], mask_a, size)
    limbs_b = _limbs(b[1], mask_b, size)
    if op == "&":
        limbs = limbs_a & limbs_b
    elif op == "|":
        limbs = limbs_a | limbs_b
    else:
        limbs = limbs_a ^ limbs_b

    result = (False, store.normalize(limbs))
    if negate_result:
        return invert(result)
    return result
