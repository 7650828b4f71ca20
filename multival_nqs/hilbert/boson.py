# multival_nqs/hilbert/boson.py
#
# Bosonic modes with a truncated occupation number.
# Each site holds 0, 1, ..., n_max particles.

import numpy as np
from .base import Hilbert


class Boson(Hilbert):
    """N bosonic sites with occupation numbers 0..n_max."""

    def __init__(self, n_sites: int, n_max: int):
        if n_sites < 1:
            raise ValueError(f"n_sites must be positive, got {n_sites}")
        if n_max < 1:
            raise ValueError(f"n_max must be at least 1, got {n_max}")
        self._n_sites = n_sites
        self.n_max = n_max
        self._local_states = np.arange(n_max + 1, dtype=float)

    @property
    def size(self) -> int:
        return self._n_sites

    @property
    def local_states(self) -> np.ndarray:
        return self._local_states
