# multival_nqs/hilbert/spin.py
#
# Chain of spin-s degrees of freedom.
#
# Local values are the eigenvalues of 2*S^z, i.e. -2s, -2s+2, ..., 2s, so a
# spin-1/2 site takes values {-1, +1} (the usual sigma^z convention) and a
# spin-1 site takes {-2, 0, +2}. Keeping the values integral lets the encoder
# use a flat array lookup.

import numpy as np
from .base import Hilbert


class Spin(Hilbert):
    """
    N sites, each a spin-s with local_size = 2s + 1.
    """

    def __init__(self, n_sites: int, s: float = 0.5):
        """
        Args:
            n_sites: Number of spins.
            s:       Spin quantum number (0.5, 1, 1.5, ...).
        """
        if n_sites < 1:
            raise ValueError(f"n_sites must be positive, got {n_sites}")
        two_s = 2.0 * s
        if s <= 0 or two_s != int(two_s):
            raise ValueError(f"s must be a positive half-integer, got {s}")

        self._n_sites = n_sites
        self.s = s
        self._local_states = np.arange(-int(two_s), int(two_s) + 1, 2,
                                       dtype=float)

    @property
    def size(self) -> int:
        return self._n_sites

    @property
    def local_states(self) -> np.ndarray:
        return self._local_states
