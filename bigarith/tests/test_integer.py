"""
Unit tests for BigInteger.

Compares signed arithmetic, truncating division, powers, comparisons and
conversions against Python int.  Covers sign handling, zero, immutability
and the Python operator protocol.
"""

import unittest
import random
import pickle
import warnings
import sys
import os

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from bigarith import (
    BigInteger, DivMod, big_int, gcd, lcm, max_of, min_of, rand_between,
    ParseError, InvalidArgumentError, DivisionByZeroError, PrecisionLossWarning,
)


def trunc_divmod(a, b):
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


class TestConstruction(unittest.TestCase):

    def test_from_int(self):
        for x in [0, 1, -1, 2 ** 15, -(2 ** 100), 10 ** 50]:
            self.assertEqual(big_int(x).to_int(), x)

    def test_from_text(self):
        self.assertEqual(big_int("-123456789012345678901234567890").to_int(),
                         -123456789012345678901234567890)

    def test_from_text_base(self):
        self.assertEqual(big_int("ff", 16).to_int(), 255)
        self.assertEqual(big_int("-zz", 36).to_int(), -(35 * 36 + 35))
        self.assertEqual(big_int("0x1F", 16).to_int(), 31)
        self.assertEqual(big_int("101", big_int(2)).to_int(), 5)
        self.assertEqual(big_int("101", "2").to_int(), 5)

    def test_from_float(self):
        self.assertEqual(big_int(3.0).to_int(), 3)
        self.assertEqual(big_int(-1e20).to_int(), -10 ** 20)
        self.assertEqual(big_int(np.float64(8.0)).to_int(), 8)

    def test_from_numpy_int(self):
        self.assertEqual(big_int(np.int64(-42)).to_int(), -42)
        self.assertEqual(big_int(np.uint32(7)).to_int(), 7)

    def test_default_is_zero(self):
        self.assertTrue(big_int().is_zero())
        self.assertTrue(BigInteger().is_zero())

    def test_big_int_passthrough(self):
        x = big_int(5)
        self.assertIs(big_int(x), x)

    def test_rejects(self):
        for bad in [1.5, float("nan"), float("inf"), True, [1], 1j]:
            with self.assertRaises(InvalidArgumentError, msg=repr(bad)):
                big_int(bad)

    def test_rejects_text(self):
        for bad in ["", "-", "12.5", "1e5", " 1", "+1", "abc"]:
            with self.assertRaises(ParseError, msg=repr(bad)):
                big_int(bad)

    def test_invalid_base(self):
        for base in [1, 37, 0, "x", 2.5]:
            with self.assertRaises(ParseError):
                big_int("1", base)

    def test_negative_zero(self):
        z = big_int("-0")
        self.assertFalse(z.is_negative())
        self.assertEqual(z.to_string(), "0")
        self.assertEqual(z.sign, 0)
        self.assertEqual(big_int(5).subtract(5).sign, 0)


class TestImmutability(unittest.TestCase):

    def test_no_attribute_assignment(self):
        x = big_int(5)
        with self.assertRaises(AttributeError):
            x._negative = True
        with self.assertRaises(AttributeError):
            x.foo = 1

    def test_magnitude_read_only(self):
        x = big_int(5)
        with self.assertRaises(ValueError):
            x.magnitude[0] = 6

    def test_operations_do_not_mutate(self):
        x = big_int(10)
        x.add(5)
        x.negate()
        x.shift_left(3)
        self.assertEqual(x.to_int(), 10)

    def test_pickle(self):
        for v in [0, -1, 2 ** 200 + 17, -(3 ** 90)]:
            x = big_int(v)
            self.assertEqual(pickle.loads(pickle.dumps(x)).to_int(), v)

    def test_hash_matches_int(self):
        for v in [0, 5, -5, 2 ** 100]:
            self.assertEqual(hash(big_int(v)), hash(v))
        self.assertEqual(len({big_int(3), big_int("3"), big_int(3.0)}), 1)


class TestArithmetic(unittest.TestCase):
    """Signed arithmetic against Python int."""

    def setUp(self):
        self.rng = random.Random(42)

    def _signed(self, max_bits=400):
        x = self.rng.getrandbits(self.rng.randint(1, max_bits))
        return -x if self.rng.random() < 0.5 else x

    def test_add_subtract_multiply(self):
        for _ in range(200):
            a, b = self._signed(), self._signed()
            x, y = big_int(a), big_int(b)
            self.assertEqual(x.add(y).to_int(), a + b)
            self.assertEqual(x.subtract(y).to_int(), a - b)
            self.assertEqual(x.multiply(y).to_int(), a * b)

    def test_mixed_operands(self):
        x = big_int(10)
        self.assertEqual(x.add(5).to_int(), 15)
        self.assertEqual(x.add("5").to_int(), 15)
        self.assertEqual(x.add(5.0).to_int(), 15)
        self.assertEqual(x.times(-3).to_int(), -30)

    def test_example_increment(self):
        a = big_int("123456789012345678901234567890").add(1)
        self.assertEqual(a.to_string(), "123456789012345678901234567891")

    def test_negate_abs_next_prev(self):
        for v in [0, 1, -1, 2 ** 60, -(2 ** 60)]:
            x = big_int(v)
            self.assertEqual(x.negate().to_int(), -v)
            self.assertEqual(x.abs().to_int(), abs(v))
            self.assertEqual(x.next().to_int(), v + 1)
            self.assertEqual(x.prev().to_int(), v - 1)

    def test_square(self):
        for _ in range(50):
            a = self._signed()
            self.assertEqual(big_int(a).square().to_int(), a * a)

    def test_divmod_truncates(self):
        for _ in range(300):
            a, b = self._signed(600), self._signed(300)
            if b == 0:
                continue
            q, r = big_int(a).divmod(b)
            self.assertEqual((q.to_int(), r.to_int()), trunc_divmod(a, b),
                             f"divmod({a}, {b})")

    def test_divmod_small_cases(self):
        cases = {(7, 2): (3, 1), (-7, 2): (-3, -1), (7, -2): (-3, 1),
                 (-7, -2): (3, -1), (0, 5): (0, 0), (6, 3): (2, 0)}
        for (a, b), want in cases.items():
            result = big_int(a).divmod(b)
            self.assertIsInstance(result, DivMod)
            self.assertEqual((result.quotient.to_int(), result.remainder.to_int()), want)
            self.assertEqual(big_int(a).divide(b).to_int(), want[0])
            self.assertEqual(big_int(a).mod(b).to_int(), want[1])

    def test_division_identity(self):
        for _ in range(100):
            a, b = self._signed(500), self._signed(200) or 1
            x, y = big_int(a), big_int(b)
            self.assertTrue(x.divide(y).multiply(y).add(x.mod(y)).equals(x))
            r = x.mod(y)
            self.assertTrue(r.is_zero() or r.is_negative() == x.is_negative())

    def test_division_by_zero(self):
        for op in ("divide", "mod", "divmod", "over", "remainder"):
            with self.assertRaises(DivisionByZeroError):
                getattr(big_int(5), op)(0)
        with self.assertRaises(ZeroDivisionError):
            big_int(5) // 0

    def test_pow(self):
        for _ in range(50):
            a = self._signed(60)
            e = self.rng.randint(0, 20)
            self.assertEqual(big_int(a).pow(e).to_int(), a ** e)

    def test_pow_edge_cases(self):
        self.assertEqual(big_int(0).pow(0).to_int(), 1)
        self.assertEqual(big_int(5).pow(-1).to_int(), 0)
        self.assertEqual(big_int(1).pow(-3).to_int(), 0)
        self.assertEqual(big_int(-1).pow(10 ** 30 + 1).to_int(), -1)
        self.assertEqual(big_int(-1).pow(10 ** 30).to_int(), 1)
        self.assertEqual(big_int(0).pow(7).to_int(), 0)
        with self.assertRaises(InvalidArgumentError):
            big_int(2).pow(1.5)

    def test_text_exponents(self):
        self.assertEqual(big_int(2).pow("10").to_int(), 1024)
        self.assertEqual(big_int(3).mod_pow("4", 7).to_int(), 4)
        for bad in ["abc", "", "1.5", "0x10"]:
            with self.assertRaises(InvalidArgumentError):
                big_int(2).pow(bad)
            with self.assertRaises(InvalidArgumentError):
                big_int(2).mod_pow(bad, 7)
        with self.assertRaises(ParseError):
            big_int(2).mod_pow(3, "abc")

    def test_mod_pow(self):
        self.assertEqual(big_int(2).mod_pow(10, 1000).to_int(), 24)
        for _ in range(50):
            a = self._signed(200)
            e = self.rng.getrandbits(80)
            m = self._signed(120) or 7
            r = pow(abs(a), e, abs(m))
            want = -r if a < 0 and e % 2 else r
            self.assertEqual(big_int(a).mod_pow(e, m).to_int(), want)

    def test_mod_pow_errors(self):
        with self.assertRaises(DivisionByZeroError):
            big_int(2).mod_pow(3, 0)
        with self.assertRaises(InvalidArgumentError):
            big_int(2).mod_pow(-1, 5)

    def test_mod_pow_modulus_one(self):
        self.assertEqual(big_int(12345).mod_pow(0, 1).to_int(), 0)
        self.assertEqual(big_int(12345).mod_pow(0, 7).to_int(), 1)


class TestComparison(unittest.TestCase):

    def test_compare(self):
        rng = random.Random(3)
        for _ in range(200):
            a = rng.randint(-10 ** 30, 10 ** 30)
            b = rng.choice([a, -a, rng.randint(-10 ** 30, 10 ** 30)])
            x = big_int(a)
            self.assertEqual(x.compare(b), (a > b) - (a < b))
            self.assertEqual(x.compare_abs(b), (abs(a) > abs(b)) - (abs(a) < abs(b)))
            self.assertEqual(x.equals(b), a == b)
            self.assertEqual(x.not_equals(b), a != b)
            self.assertEqual(x.lesser(b), a < b)
            self.assertEqual(x.lesser_or_equals(b), a <= b)
            self.assertEqual(x.greater(b), a > b)
            self.assertEqual(x.greater_or_equals(b), a >= b)

    def test_operators(self):
        x, y = big_int(3), big_int(-4)
        self.assertTrue(x > y)
        self.assertTrue(y < 0)
        self.assertTrue(x == 3)
        self.assertTrue(3 == x)
        self.assertTrue(x != y)
        self.assertFalse(x == "3")
        self.assertEqual(sorted([x, y, big_int(0)]), [y, 0, x])


class TestPredicates(unittest.TestCase):

    def test_parity_and_sign(self):
        for v in [0, 1, 2, -3, -4, 2 ** 90 + 1]:
            x = big_int(v)
            self.assertEqual(x.is_even(), v % 2 == 0)
            self.assertEqual(x.is_odd(), v % 2 == 1)
            self.assertEqual(x.is_positive(), v >= 0)
            self.assertEqual(x.is_negative(), v < 0)
            self.assertEqual(x.is_zero(), v == 0)

    def test_is_unit(self):
        self.assertTrue(big_int(1).is_unit())
        self.assertFalse(big_int(-1).is_unit())
        self.assertFalse(big_int(0).is_unit())
        self.assertFalse(big_int(2 ** 15 + 1).is_unit())

    def test_is_divisible_by(self):
        self.assertTrue(big_int(12).is_divisible_by(4))
        self.assertTrue(big_int(-12).is_divisible_by(-3))
        self.assertFalse(big_int(12).is_divisible_by(5))
        self.assertFalse(big_int(12).is_divisible_by(0))
        self.assertTrue(big_int(0).is_divisible_by(7))


class TestConversion(unittest.TestCase):

    def test_to_string_bases(self):
        self.assertEqual(big_int(255).to_string(16), "ff")
        self.assertEqual(big_int(-255).to_string(2), "-11111111")
        self.assertEqual(big_int(35).to_string(36), "z")
        self.assertEqual(big_int(0).to_string(7), "0")
        self.assertEqual(str(big_int(-10 ** 30)), str(-10 ** 30))
        self.assertEqual(repr(big_int(12)), "BigInteger('12')")

    def test_round_trip(self):
        rng = random.Random(11)
        for base in (2, 10, 16, 36):
            for _ in range(30):
                v = rng.randint(-2 ** 300, 2 ** 300)
                x = big_int(v)
                self.assertTrue(big_int(x.to_string(base), base).equals(x))

    def test_to_native_exact(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            self.assertEqual(big_int(2 ** 53 - 1).to_native(), float(2 ** 53 - 1))
            self.assertEqual(big_int(-12345).value_of(), -12345.0)
            self.assertEqual(big_int(-12345).to_js_number(), -12345.0)

    def test_to_native_warns(self):
        with self.assertWarns(PrecisionLossWarning):
            value = big_int(2 ** 80 + 1).to_native()
        self.assertAlmostEqual(value / 2.0 ** 80, 1.0)

    def test_to_native_overflow_is_inf(self):
        with self.assertWarns(PrecisionLossWarning):
            self.assertEqual(big_int(-(2 ** 2000)).to_native(), float("-inf"))

    def test_int_conversion(self):
        self.assertEqual(int(big_int(-99)), -99)


class TestOperators(unittest.TestCase):

    def test_arithmetic_operators(self):
        x, y = big_int(17), big_int(-5)
        self.assertEqual((x + y).to_int(), 12)
        self.assertEqual((x - y).to_int(), 22)
        self.assertEqual((x * y).to_int(), -85)
        self.assertEqual((x // y).to_int(), -3)
        self.assertEqual((x % y).to_int(), 2)
        self.assertEqual((-x).to_int(), -17)
        self.assertEqual(abs(y).to_int(), 5)
        self.assertEqual((x ** 2).to_int(), 289)
        self.assertEqual(pow(x, 3, 5).to_int(), 17 ** 3 % 5)
        q, r = divmod(x, y)
        self.assertEqual((q.to_int(), r.to_int()), (-3, 2))

    def test_reflected_operators(self):
        x = big_int(5)
        self.assertEqual((3 + x).to_int(), 8)
        self.assertEqual((3 - x).to_int(), -2)
        self.assertEqual((3 * x).to_int(), 15)
        self.assertEqual((17 // x).to_int(), 3)
        self.assertEqual((17 % x).to_int(), 2)
        self.assertEqual((2 ** x).to_int(), 32)

    def test_foreign_types(self):
        with self.assertRaises(TypeError):
            big_int(1) + "1"
        with self.assertRaises(TypeError):
            big_int(1) + 1.5

    def test_bool(self):
        self.assertFalse(big_int(0))
        self.assertTrue(big_int(-3))


class TestHelpers(unittest.TestCase):

    def test_max_min(self):
        self.assertEqual(max_of(3, -7).to_int(), 3)
        self.assertEqual(min_of(3, -7).to_int(), -7)
        self.assertEqual(BigInteger.max("5", 9).to_int(), 9)
        self.assertEqual(BigInteger.min(big_int(5), 9).to_int(), 5)

    def test_gcd(self):
        import math
        rng = random.Random(5)
        for _ in range(100):
            a = rng.randint(-10 ** 40, 10 ** 40)
            b = rng.randint(-10 ** 20, 10 ** 20)
            self.assertEqual(gcd(a, b).to_int(), math.gcd(a, b))
        self.assertEqual(gcd(-12, 0).to_int(), 12)
        self.assertEqual(gcd(0, 0).to_int(), 0)

    def test_lcm(self):
        self.assertEqual(lcm(4, 6).to_int(), 12)
        self.assertEqual(lcm(-4, 6).to_int(), 12)
        self.assertEqual(BigInteger.lcm(2 ** 40, 3 ** 20).to_int(), 2 ** 40 * 3 ** 20)
        with self.assertRaises(DivisionByZeroError):
            lcm(0, 5)

    def test_rand_between(self):
        rng = np.random.default_rng(42)
        seen = set()
        for _ in range(300):
            v = rand_between(-2, 2, rng=rng).to_int()
            self.assertTrue(-2 <= v <= 2)
            seen.add(v)
        self.assertEqual(seen, {-2, -1, 0, 1, 2})

    def test_rand_between_reversed_and_large(self):
        rng = np.random.default_rng(1)
        low, high = 10 ** 30, 10 ** 30 + 10 ** 25
        for _ in range(50):
            v = rand_between(high, low, rng=rng).to_int()
            self.assertTrue(low <= v <= high)
        self.assertEqual(rand_between(7, 7).to_int(), 7)


if __name__ == "__main__":
    unittest.main()
