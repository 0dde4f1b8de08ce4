"""
Randomized cross-check of bigarith against Python's own big numbers.

Every case draws signed operands of up to `max_bits` bits and compares the
engine's answer with `int` / `fractions.Fraction`:

  1. add / subtract / multiply
  2. truncating divmod (quotient and remainder identity)
  3. pow and mod_pow
  4. bitwise and / or / xor, shifts
  5. text round-trip in each configured base
  6. gcd
  7. rational arithmetic and lowest-terms invariants

Usage:
    from bigarith.validation import ValidationConfig, run_validation
    summary = run_validation(ValidationConfig(n_cases=50, output_dir="runs/v1"))
"""

import math
import random
import time
from collections import defaultdict
from dataclasses import dataclass, asdict
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .integer import BigInteger, big_int, gcd
from .logging import RunLogger, create_manifest
from .rational import big_rat


@dataclass
class ValidationConfig:
    """Configuration for a validation run."""
    seed: int = 42
    n_cases: int = 200                  # Random cases per run
    max_bits: int = 512                 # Operand size bound
    bases: Tuple[int, ...] = (2, 10, 16, 36)
    output_dir: Optional[str] = None    # None: no files written


def _truncated_divmod(a: int, b: int) -> Tuple[int, int]:
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


def _shift_right(a: int, n: int) -> int:
    return -(-a >> n) if a < 0 else a >> n


def _signed_mod_pow(a: int, e: int, m: int) -> int:
    r = pow(abs(a), e, abs(m))
    return -r if a < 0 and e % 2 else r


class _Checker:
    """Counts checks per operation and forwards them to an optional logger."""

    def __init__(self, logger: Optional[RunLogger]):
        self.logger = logger
        self.counts: Dict[str, Dict[str, int]] = defaultdict(
            lambda: {"checks": 0, "failures": 0})

    def __call__(self, op: str, got: Any, want: Any, **detail) -> bool:
        passed = got == want
        self.counts[op]["checks"] += 1
        if not passed:
            self.counts[op]["failures"] += 1
        if self.logger is not None:
            self.logger.log_check(dict(detail, op=op, passed=passed,
                                       got=str(got), want=str(want)))
        return passed

    def summary(self) -> Dict[str, Any]:
        checks = sum(c["checks"] for c in self.counts.values())
        failures = sum(c["failures"] for c in self.counts.values())
        return {
            "checks": checks,
            "failures": failures,
            "passed": failures == 0,
            "operations": {op: dict(c) for op, c in sorted(self.counts.items())},
        }


def _draw(rng: random.Random, max_bits: int, nonzero: bool = False) -> int:
    while True:
        value = rng.getrandbits(rng.randint(1, max_bits))
        if rng.random() < 0.5:
            value = -value
        if value or not nonzero:
            return value


def _check_integers(check: _Checker, a: int, b: int, rng: random.Random,
                    config: ValidationConfig):
    x, y = big_int(a), big_int(b)
    operands = {"a": a, "b": b}

    check("add", x.add(y).to_int(), a + b, **operands)
    check("subtract", x.subtract(y).to_int(), a - b, **operands)
    check("multiply", x.multiply(y).to_int(), a * b, **operands)

    if b:
        q, r = x.divmod(y)
        check("divmod", (q.to_int(), r.to_int()), _truncated_divmod(a, b), **operands)

    e = rng.randint(0, 8)
    check("pow", x.pow(e).to_int(), a ** e, a=a, e=e)

    if b:
        e = rng.getrandbits(rng.randint(1, 64))
        check("mod_pow", x.mod_pow(e, y).to_int(), _signed_mod_pow(a, e, b),
              a=a, e=e, m=b)

    check("and", x.and_(y).to_int(), a & b, **operands)
    check("or", x.or_(y).to_int(), a | b, **operands)
    check("xor", x.xor(y).to_int(), a ^ b, **operands)
    check("not", x.not_().to_int(), ~a, a=a)

    n = rng.randint(0, 96)
    check("shift_left", x.shift_left(n).to_int(), a << n, a=a, n=n)
    check("shift_right", x.shift_right(n).to_int(), _shift_right(a, n), a=a, n=n)

    for base in config.bases:
        text = x.to_string(base)
        check("round_trip", BigInteger(text, base).to_int(), a, a=a, base=base)
    check("to_string", x.to_string(), str(a), a=a)

    check("gcd", gcd(x, y).to_int(), math.gcd(a, b), **operands)


def _check_rationals(check: _Checker, a: int, b: int, c: int, d: int):
    p, q = big_rat(a, b), big_rat(c, d)
    fp, fq = Fraction(a, b), Fraction(c, d)
    operands = {"p": f"{a}/{b}", "q": f"{c}/{d}"}

    def as_fraction(r):
        return Fraction(r.numerator.to_int(), r.denominator.to_int())

    for r in (p, q):
        num, den = r.numerator.to_int(), r.denominator.to_int()
        check("rational_reduced", (den > 0, math.gcd(num, den)), (True, 1), value=str(r))

    check("rational_add", as_fraction(p.add(q)), fp + fq, **operands)
    check("rational_subtract", as_fraction(p.subtract(q)), fp - fq, **operands)
    check("rational_multiply", as_fraction(p.multiply(q)), fp * fq, **operands)
    if c:
        check("rational_divide", as_fraction(p.divide(q)), fp / fq, **operands)
    check("rational_compare", p.compare(q), (fp > fq) - (fp < fq), **operands)
    check("rational_floor", p.floor().to_int(), math.floor(fp), p=operands["p"])
    check("rational_ceil", p.ceil().to_int(), math.ceil(fp), p=operands["p"])


def run_validation(config: Optional[ValidationConfig] = None,
                   logger: Optional[RunLogger] = None) -> Dict[str, Any]:
    """Run the cross-check suite.

    Args:
        config: Run settings (default ValidationConfig()).
        logger: Where to log checks. When omitted and config.output_dir is
            set, a RunLogger (plus manifest.json) is created in that
            directory and closed at the end of the run.

    Returns:
        {"checks", "failures", "passed", "operations", "wall_time_sec"}
    """
    config = config or ValidationConfig()
    owns_logger = False
    if logger is None and config.output_dir is not None:
        run_id = f"validate_{time.strftime('%Y%m%d_%H%M%S')}_seed{config.seed}"
        create_manifest(run_id, asdict(config)).save(
            Path(config.output_dir) / "manifest.json")
        logger = RunLogger(Path(config.output_dir))
        owns_logger = True

    rng = random.Random(config.seed)
    check = _Checker(logger)
    t0 = time.time()
    try:
        for _ in range(config.n_cases):
            a = _draw(rng, config.max_bits)
            b = _draw(rng, config.max_bits)
            _check_integers(check, a, b, rng, config)

            small = max(1, config.max_bits // 4)
            _check_rationals(check,
                             _draw(rng, small), _draw(rng, small, nonzero=True),
                             _draw(rng, small), _draw(rng, small, nonzero=True))
    finally:
        if owns_logger:
            logger.close()

    summary = check.summary()
    summary["wall_time_sec"] = time.time() - t0
    return summary
