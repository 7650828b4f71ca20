# multival_nqs/hilbert/custom.py
#
# Configuration space with an arbitrary, user-given list of local values.
# Useful for quantum numbers that are not evenly spaced integers, e.g.
# half-integer S^z eigenvalues or clock-model phases.

import numpy as np
from .base import Hilbert


class CustomHilbert(Hilbert):
    """N sites sharing one explicit ordered list of local values."""

    def __init__(self, n_sites: int, local_states):
        local_states = np.asarray(local_states, dtype=float)
        if n_sites < 1:
            raise ValueError(f"n_sites must be positive, got {n_sites}")
        if local_states.ndim != 1 or local_states.size == 0:
            raise ValueError("local_states must be a non-empty 1D sequence")
        if len(np.unique(local_states)) != local_states.size:
            raise ValueError(f"local_states must be unique, got {local_states}")
        self._n_sites = n_sites
        self._local_states = local_states

    @property
    def size(self) -> int:
        return self._n_sites

    @property
    def local_states(self) -> np.ndarray:
        return self._local_states
