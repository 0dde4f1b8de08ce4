"""
Primality testing on magnitudes.

Two stages:
  1. Trial division by every prime below `small_prime_limit`; inputs
     below small_prime_limit**2 are fully decided here.
  2. Miller-Rabin.  Below `deterministic_limit` the fixed witnesses
     2..41 make the answer exact; above it `is_prime` uses
     `default_iterations` random witnesses, so a composite slips through
     with probability at most 4**-default_iterations (about 9.1e-13 for
     the default 20 rounds).
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import (
    SMALL_PRIME_LIMIT, SMALL_PRIMES, DETERMINISTIC_LIMIT,
    DETERMINISTIC_WITNESSES, DEFAULT_MR_ITERATIONS, sieve_primes,
)
from .errors import InvalidArgumentError
from .limbs import store


@dataclass(frozen=True)
class PrimalityConfig:
    """Rigor settings for `is_prime` / `is_probable_prime`.

    False-positive bound for random-witness rounds: 4**-iterations.

    Raises:
        InvalidArgumentError if default_iterations < 1,
        small_prime_limit < 2 or deterministic_limit < 0.
    """
    default_iterations: int = DEFAULT_MR_ITERATIONS
    small_prime_limit: int = SMALL_PRIME_LIMIT
    deterministic_limit: int = DETERMINISTIC_LIMIT
    seed: Optional[int] = None      # None: fresh entropy per call

    def __post_init__(self):
        for name, minimum in [("default_iterations", 1),
                              ("small_prime_limit", 2),
                              ("deterministic_limit", 0)]:
            value = getattr(self, name)
            if (isinstance(value, bool)
                    or not isinstance(value, (int, np.integer))
                    or value < minimum):
                raise InvalidArgumentError(
                    f"{name} must be an integer >= {minimum}, got {value!r}"
                )
            object.__setattr__(self, name, int(value))

    def rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)


DEFAULT_CONFIG = PrimalityConfig()

_TWO = store.from_int(2)
_THREE = store.from_int(3)
_FOUR = store.from_int(4)


@lru_cache(maxsize=8)
def _small_primes(limit: int) -> Tuple[int, ...]:
    if limit == SMALL_PRIME_LIMIT:
        return tuple(SMALL_PRIMES)
    return tuple(sieve_primes(limit))


def trial_division(n: np.ndarray, limit: int) -> Optional[bool]:
    """Decide n >= 2 by trial division, or return None when undecided."""
    for p in _small_primes(limit):
        _, rem = store.divrem_small(n, p)
        if rem == 0:
            return store.compare(n, store.from_int(p)) == 0
    if store.compare(n, store.from_int(limit * limit)) < 0:
        return True
    return None


def _decide_small(n: np.ndarray, limit: int) -> Optional[bool]:
    """Settle n < 4, even n, and anything trial division can decide."""
    if store.compare(n, _TWO) < 0:
        return False
    if store.compare(n, _FOUR) < 0:
        return True
    if not int(n[0]) & 1:
        return False
    return trial_division(n, limit)


def _witness_passes(a: np.ndarray, n: np.ndarray, n_minus_one: np.ndarray,
                    d: np.ndarray, s: int) -> bool:
    x = store.pow_mod(a, d, n)
    if store.is_one(x) or store.compare(x, n_minus_one) == 0:
        return True
    for _ in range(s - 1):
        x = store.divrem(store.square(x), n)[1]
        if store.compare(x, n_minus_one) == 0:
            return True
        if store.is_one(x):
            return False
    return False


def miller_rabin(n: np.ndarray, witnesses: Sequence[np.ndarray]) -> bool:
    """Miller-Rabin rounds for odd n > 3 with the given witnesses."""
    n_minus_one = store.subtract(n, store.ONE)
    s = store.trailing_zero_bits(n_minus_one)
    d = store.shift_right(n_minus_one, s)
    for a in witnesses:
        a = store.divrem(a, n)[1]
        if store.is_zero(a):
            continue
        if not _witness_passes(a, n, n_minus_one, d, s):
            return False
    return True


def random_witnesses(n: np.ndarray, count: int,
                     rng: np.random.Generator) -> List[np.ndarray]:
    """`count` witnesses drawn uniformly from [2, n - 2]."""
    span = store.subtract(n, _THREE)
    return [store.add(store.random_below(span, rng), _TWO)
            for _ in range(count)]


def is_prime(n: np.ndarray, config: Optional[PrimalityConfig] = None) -> bool:
    """Primality of a magnitude with the library's default rigor."""
    config = config or DEFAULT_CONFIG
    decided = _decide_small(n, config.small_prime_limit)
    if decided is not None:
        return decided
    if store.compare(n, store.from_int(config.deterministic_limit)) < 0:
        witnesses = [store.from_int(a) for a in DETERMINISTIC_WITNESSES]
    else:
        witnesses = random_witnesses(n, config.default_iterations,
                                     config.rng())
    return miller_rabin(n, witnesses)


def is_probable_prime(n: np.ndarray, iterations: Optional[int] = None,
                      config: Optional[PrimalityConfig] = None,
                      rng: Optional[np.random.Generator] = None) -> bool:
    """Trial division then `iterations` random-witness Miller-Rabin rounds.

    Args:
        n: Magnitude to test.
        iterations: Rounds to run (default: config.default_iterations).
        config: Primality settings.
        rng: Witness source (default: config.rng()).

    Raises:
        InvalidArgumentError if iterations is not a positive integer.
    """
    config = config or DEFAULT_CONFIG
    if iterations is None:
        iterations = config.default_iterations
    if (isinstance(iterations, bool)
            or not isinstance(iterations, (int, np.integer))
            or iterations < 1):
        raise InvalidArgumentError(
            f"iterations must be a positive integer, got {iterations!r}"
        )
    decided = _decide_small(n, config.small_prime_limit)
    if decided is not None:
        return decided
    witnesses = random_witnesses(n, int(iterations), rng or config.rng())
    return miller_rabin(n, witnesses)
