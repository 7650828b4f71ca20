# tests/test_hilbert.py
#
# ============================================================
# UNIT TESTS: Configuration spaces
# ============================================================
#
# The ansatz reads three facts from a configuration space: the number of
# sites, the number of local values, and their order. These tests pin down
# those facts for each concrete space and check argument validation.
#
# ============================================================

import sys
import os
import unittest
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from multival_nqs.hilbert import Spin, Boson, CustomHilbert


class TestSpin(unittest.TestCase):

    def test_spin_half(self):
        hilbert = Spin(n_sites=4)
        self.assertEqual(hilbert.size, 4)
        self.assertEqual(hilbert.local_size, 2)
        np.testing.assert_array_equal(hilbert.local_states, [-1, 1])

    def test_spin_one(self):
        np.testing.assert_array_equal(Spin(n_sites=2, s=1).local_states, [-2, 0, 2])

    def test_spin_three_halves(self):
        hilbert = Spin(n_sites=2, s=1.5)
        self.assertEqual(hilbert.local_size, 4)
        np.testing.assert_array_equal(hilbert.local_states, [-3, -1, 1, 3])

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            Spin(n_sites=3, s=0.3)
        with self.assertRaises(ValueError):
            Spin(n_sites=3, s=0)
        with self.assertRaises(ValueError):
            Spin(n_sites=0)


class TestBoson(unittest.TestCase):

    def test_occupations(self):
        hilbert = Boson(n_sites=5, n_max=3)
        self.assertEqual(hilbert.size, 5)
        np.testing.assert_array_equal(hilbert.local_states, [0, 1, 2, 3])

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            Boson(n_sites=2, n_max=0)


class TestCustomHilbert(unittest.TestCase):

    def test_order_preserved(self):
        hilbert = CustomHilbert(n_sites=2, local_states=[0.5, -0.5, 1.5])
        np.testing.assert_array_equal(hilbert.local_states, [0.5, -0.5, 1.5])
        self.assertEqual(hilbert.local_size, 3)

    def test_duplicates_rejected(self):
        with self.assertRaises(ValueError):
            CustomHilbert(n_sites=2, local_states=[1.0, 1.0])

    def test_empty_rejected(self):
        with self.assertRaises(ValueError):
            CustomHilbert(n_sites=2, local_states=[])


class TestRandomState(unittest.TestCase):

    def test_random_state_is_legal(self):
        rng = np.random.default_rng(0)
        for hilbert in (Spin(6, s=1), Boson(6, 4), CustomHilbert(6, [0.5, 7.0])):
            with self.subTest(hilbert=repr(hilbert)):
                state = hilbert.random_state(rng)
                self.assertEqual(state.shape, (6,))
                self.assertTrue(np.all(np.isin(state, hilbert.local_states)))

    def test_repr(self):
        self.assertIn("size=3", repr(Spin(3)))


if __name__ == '__main__':
    unittest.main(verbosity=2)
