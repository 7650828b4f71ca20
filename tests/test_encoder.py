# tests/test_encoder.py
#
# ============================================================
# UNIT TESTS: One-hot configuration encoder
# ============================================================
#
# The encoder fixes which visible unit a (site, value) pair lights up. The
# same index_of feeds both encode() and the incremental lookup updates, so
# these tests pin down the mapping, its error behaviour, and both lookup
# strategies (flat integer table and sorted-array search).
#
# ============================================================

import sys
import os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from multival_nqs.ansatz import LocalValueEncoder
from multival_nqs.errors import LocalValueError


class TestIndexOf(unittest.TestCase):

    def setUp(self):
        self.enc = LocalValueEncoder([-2.0, 0.0, 2.0], n_sites=3)

    def test_integer_values_use_table(self):
        self.assertTrue(self.enc.uses_table)

    def test_scalar_lookup(self):
        self.assertEqual(self.enc.index_of(-2.0), 0)
        self.assertEqual(self.enc.index_of(0.0), 1)
        self.assertEqual(self.enc.index_of(2), 2)
        self.assertIsInstance(self.enc.index_of(2.0), int)

    def test_array_lookup(self):
        idx = self.enc.index_of(np.array([[2.0, -2.0], [0.0, 0.0]]))
        np.testing.assert_array_equal(idx, [[2, 0], [1, 1]])

    def test_order_follows_local_states_not_sorting(self):
        enc = LocalValueEncoder([1.0, -1.0], n_sites=2)
        self.assertEqual(enc.index_of(1.0), 0)
        self.assertEqual(enc.index_of(-1.0), 1)

    def test_illegal_values(self):
        """Inside the span, outside the span, non-integral and NaN all fail."""
        for bad in (1.0, 4.0, -3.0, 0.5, np.nan):
            with self.subTest(value=bad):
                with self.assertRaises(LocalValueError):
                    self.enc.index_of(bad)

    def test_illegal_value_in_array(self):
        with self.assertRaises(LocalValueError):
            self.enc.index_of(np.array([0.0, 2.0, 1.0]))

    def test_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            self.enc.index_of(7.0)


class TestSearchFallback(unittest.TestCase):
    """Non-integer or widely spread values use the sorted-array search."""

    def test_half_integer_values(self):
        enc = LocalValueEncoder([0.5, -0.5, 1.5], n_sites=2)
        self.assertFalse(enc.uses_table)
        self.assertEqual(enc.index_of(0.5), 0)
        self.assertEqual(enc.index_of(-0.5), 1)
        self.assertEqual(enc.index_of(1.5), 2)
        np.testing.assert_array_equal(enc.index_of([1.5, 0.5]), [2, 0])
        with self.assertRaises(LocalValueError):
            enc.index_of(0.7)
        with self.assertRaises(LocalValueError):
            enc.index_of(2.5)

    def test_wide_integer_span(self):
        enc = LocalValueEncoder([0.0, 1e6], n_sites=1)
        self.assertFalse(enc.uses_table)
        self.assertEqual(enc.index_of(1e6), 1)
        with self.assertRaises(LocalValueError):
            enc.index_of(5.0)


class TestEncodeDecode(unittest.TestCase):

    def setUp(self):
        self.enc = LocalValueEncoder([-2.0, 0.0, 2.0], n_sites=3)

    def test_encode_blocks(self):
        vtilde = self.enc.encode(np.array([-2.0, 0.0, 2.0]))
        np.testing.assert_array_equal(vtilde, [1, 0, 0, 0, 1, 0, 0, 0, 1])

    def test_exactly_one_per_block(self):
        vtilde = self.enc.encode(np.array([2.0, 2.0, 0.0]))
        np.testing.assert_array_equal(vtilde.reshape(3, 3).sum(axis=1), 1.0)

    def test_decode_inverts_encode(self):
        config = np.array([0.0, -2.0, 2.0])
        np.testing.assert_array_equal(self.enc.decode(self.enc.encode(config)),
                                      config)

    def test_decode_rejects_non_one_hot(self):
        with self.assertRaises(ValueError):
            self.enc.decode([1, 1, 0, 0, 1, 0, 0, 0, 1])
        with self.assertRaises(ValueError):
            self.enc.decode([0, 0, 0, 0, 1, 0, 0, 0, 1])

    def test_encode_wrong_length(self):
        with self.assertRaises(ValueError):
            self.enc.encode(np.array([0.0, 0.0]))

    def test_rows(self):
        np.testing.assert_array_equal(self.enc.rows([0, 2], [2.0, -2.0]), [2, 6])
        with self.assertRaises(ValueError):
            self.enc.rows([3], [0.0])
        with self.assertRaises(ValueError):
            self.enc.rows([-1], [0.0])
        with self.assertRaises(ValueError):
            self.enc.rows([0.7], [0.0])
        np.testing.assert_array_equal(self.enc.rows([2.0], [-2.0]), [6])


class TestConstruction(unittest.TestCase):

    def test_duplicate_values_rejected(self):
        with self.assertRaises(ValueError):
            LocalValueEncoder([0.0, 1.0, 0.0], n_sites=2)

    def test_empty_values_rejected(self):
        with self.assertRaises(ValueError):
            LocalValueEncoder([], n_sites=2)


if __name__ == '__main__':
    unittest.main(verbosity=2)
