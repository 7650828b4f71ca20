# multival_nqs/hilbert/base.py
#
# Abstract base class for discrete configuration spaces.
# A configuration assigns one legal local value to each of `size` sites, and
# every site draws from the same ordered list of `local_size` values. The
# ansatz only reads these three facts, once, when it is built or loaded.

from abc import ABC, abstractmethod
import numpy as np


class Hilbert(ABC):
    """
    Abstract base class for a lattice of sites with a uniform local value set.

    Subclasses must provide `size` and `local_states`. The order of
    `local_states` is significant: it fixes the one-hot encoding used by the
    ansatz, so it must never change after construction.
    """

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of sites."""
        pass

    @property
    @abstractmethod
    def local_states(self) -> np.ndarray:
        """Ordered array of the legal values of a single site."""
        pass

    @property
    def local_size(self) -> int:
        """Number of legal values per site."""
        return len(self.local_states)

    def random_state(self, rng: np.random.Generator) -> np.ndarray:
        """Draw a configuration with every site uniform over its local values."""
        return rng.choice(self.local_states, size=self.size)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self.size}, "
            f"local_states={list(self.local_states)})"
        )
