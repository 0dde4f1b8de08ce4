"""
Error and warning types raised by the bigarith engine.

Every failure is reported immediately to the caller; nothing is retried
and no sentinel value is ever returned in place of an error.
"""


class BigArithError(Exception):
    """Base class for all bigarith errors."""


class ParseError(BigArithError, ValueError):
    """Malformed numeric text or an invalid base."""


class InvalidArgumentError(BigArithError, TypeError):
    """Operand of the wrong type or shape (e.g. a non-integral exponent)."""


class DivisionByZeroError(BigArithError, ZeroDivisionError):
    """Division, modulo, reciprocal or lcm with a zero operand."""


class PrecisionLossWarning(RuntimeWarning):
    """A conversion to a native float could not be exact."""
