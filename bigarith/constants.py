"""
Numeric constants shared by the limb store, the engines and the
primality tests.

Covers: limb radix, digit alphabet for bases 2..36, radix prefixes,
the small-prime table used for trial division and the fixed
Miller-Rabin witness set.
"""

from typing import Dict, List

import numpy as np

# ---------------------------------------------------------------------------
# Limb layout
# ---------------------------------------------------------------------------

SHIFT = 15                      # bits per limb
RADIX = 1 << SHIFT
MASK = RADIX - 1
LIMB_DTYPE = np.uint32          # storage dtype of a magnitude
WIDE_DTYPE = np.int64           # accumulator dtype for vectorized steps

# Largest integer a float64 represents exactly, and its bit length.
NATIVE_SAFE_BITS = 53

# ---------------------------------------------------------------------------
# Text conversion
# ---------------------------------------------------------------------------

DIGIT_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
MIN_BASE = 2
MAX_BASE = 36

# Radix prefixes, accepted only when they match the requested base.
RADIX_PREFIXES: Dict[int, str] = {
    2: "0b",
    8: "0o",
    16: "0x",
}

DEFAULT_DECIMAL_DIGITS = 10

# ---------------------------------------------------------------------------
# Primality
# ---------------------------------------------------------------------------

SMALL_PRIME_LIMIT = 1000

# Miller-Rabin with these bases is exact below DETERMINISTIC_LIMIT.
DETERMINISTIC_WITNESSES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41]
DETERMINISTIC_LIMIT = 3317044064679887385961981

DEFAULT_MR_ITERATIONS = 20      # false-positive bound 4**-20


def sieve_primes(limit: int) -> List[int]:
    """All primes strictly below `limit` (sieve of Eratosthenes)."""
    if limit < 3:
        return []
    is_comp = np.zeros(limit, dtype=bool)
    is_comp[:2] = True
    for p in range(2, int(limit ** 0.5) + 1):
        if not is_comp[p]:
            is_comp[p * p::p] = True
    return [int(p) for p in np.flatnonzero(~is_comp)]


SMALL_PRIMES = sieve_primes(SMALL_PRIME_LIMIT)
