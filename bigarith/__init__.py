"""
bigarith: exact arbitrary-precision integers and rationals on numpy limbs.

Number model:
  BigInteger   sign flag + magnitude in radix 2**15 limbs
  BigRational  BigInteger numerator / positive BigInteger denominator,
               always in lowest terms
Division is truncating (quotient toward zero, remainder has the sign of
the dividend).  Text conversion covers bases 2..36.
"""

__version__ = "0.1.0"

from .errors import (
    BigArithError, ParseError, InvalidArgumentError,
    DivisionByZeroError, PrecisionLossWarning,
)
from .integer import (
    BigInteger, DivMod, big_int,
    gcd, lcm, max_of, min_of, rand_between,
)
from .rational import BigRational, big_rat
from .primality import PrimalityConfig
from .logging import RunLogger, RunManifest
from .validation import ValidationConfig, run_validation

__all__ = [
    "BigArithError", "ParseError", "InvalidArgumentError",
    "DivisionByZeroError", "PrecisionLossWarning",
    "BigInteger", "DivMod", "big_int",
    "gcd", "lcm", "max_of", "min_of", "rand_between",
    "BigRational", "big_rat",
    "PrimalityConfig",
    "RunLogger", "RunManifest",
    "ValidationConfig", "run_validation",
]
