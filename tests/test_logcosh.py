# tests/test_logcosh.py
#
# ============================================================
# UNIT TESTS: Stable log(cosh(x))
# ============================================================
#
# For small arguments the result must match np.log(np.cosh(x)); for large
# |x| it must follow |x| - ln 2 instead of overflowing.
#
# ============================================================

import sys
import os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from multival_nqs.logcosh import log_cosh, sum_log_cosh, LN2


class TestLogCosh(unittest.TestCase):

    def test_small_real_matches_direct(self):
        x = np.linspace(-5.0, 5.0, 41)
        np.testing.assert_allclose(log_cosh(x), np.log(np.cosh(x)),
                                   rtol=1e-12, atol=1e-14)

    def test_zero(self):
        self.assertAlmostEqual(float(log_cosh(0.0)), 0.0, places=15)

    def test_large_real_asymptote(self):
        x = np.array([800.0, -800.0, 1e5, -1e5])
        result = log_cosh(x)
        self.assertTrue(np.all(np.isfinite(result)))
        np.testing.assert_allclose(result, np.abs(x) - LN2, rtol=1e-15)

    def test_even(self):
        x = np.array([0.3, 2.0, 40.0]) + 1j * np.array([0.1, -0.7, 0.2])
        np.testing.assert_allclose(log_cosh(x), log_cosh(-x), atol=1e-13)

    def test_complex_matches_cosh(self):
        """exp(log_cosh(z)) == cosh(z) for moderate complex z."""
        rng = np.random.default_rng(0)
        z = rng.normal(0, 2, size=20) + 1j * rng.normal(0, 2, size=20)
        np.testing.assert_allclose(np.exp(log_cosh(z)), np.cosh(z), rtol=1e-10)

    def test_large_complex_is_finite(self):
        z = np.array([1000.0 + 0.5j, -1000.0 - 3.0j])
        result = log_cosh(z)
        self.assertTrue(np.all(np.isfinite(result)))
        np.testing.assert_allclose(result.real, 1000.0 - LN2, rtol=1e-15)

    def test_sum(self):
        x = np.array([0.1, -0.4, 900.0])
        expected = np.log(np.cosh(0.1)) + np.log(np.cosh(0.4)) + 900.0 - LN2
        self.assertAlmostEqual(sum_log_cosh(x), expected, places=10)


if __name__ == '__main__':
    unittest.main(verbosity=2)
