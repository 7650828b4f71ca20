# multival_nqs/ansatz/base.py
#
# Abstract base class for neural network quantum state ansatze.
# An "ansatz" is a parameterized wavefunction psi(sigma; theta) used to
# approximate an unknown quantum state. Samplers and optimizers only talk to
# this interface, so any ansatz with a per-configuration lookup can be dropped
# in.
#
# Every evaluation method takes an optional `lookup`: an opaque cache created
# by init_lookup for one configuration and kept in sync by update_lookup as a
# random walk moves. Passing it turns O(N * M) evaluations into cheap ones;
# omitting it always gives the same answer, computed from scratch.

from abc import ABC, abstractmethod
import numpy as np


class Ansatz(ABC):
    """
    Abstract base class for neural quantum state ansatze.

    Every ansatz must provide:
      - init_lookup / update_lookup: per-configuration cache management
      - log_psi(config): log amplitude of the wavefunction
      - log_psi_diff(config, to_change, new_conf): log amplitude ratios for a
        batch of local moves
      - grad_log_psi(config): gradients w.r.t. all parameters (for VMC updates)
      - get_parameters / set_parameters: flat parameter vector access
    """

    @abstractmethod
    def init_lookup(self, config: np.ndarray):
        """Build the cache for `config` from scratch."""
        pass

    @abstractmethod
    def update_lookup(self, config: np.ndarray, to_change, new_values,
                      lookup) -> None:
        """
        Update `lookup` in place for a local move away from `config`.

        Args:
            config:     configuration the lookup currently describes
            to_change:  site indices being changed
            new_values: new local values, positionally matching to_change
            lookup:     cache returned by init_lookup (mutated)
        """
        pass

    @abstractmethod
    def log_psi(self, config: np.ndarray, lookup=None) -> complex:
        """
        Compute log(psi(config)).

        We use log amplitudes for numerical stability and efficient ratio
        computation: psi(s')/psi(s) = exp(log_psi(s') - log_psi(s)).

        Args:
            config: array of shape (n_sites,) of legal local values
            lookup: optional cache for config from init_lookup

        Returns:
            log(psi(config)) as a complex scalar.
        """
        pass

    @abstractmethod
    def log_psi_diff(self, config: np.ndarray, to_change, new_conf,
                     lookup=None) -> np.ndarray:
        """
        log(psi(config') / psi(config)) for a batch of candidate moves.

        Each move k changes sites to_change[k] to values new_conf[k], all
        relative to the same base config. An empty move gives exactly 0.

        Returns:
            Complex array of shape (len(to_change),).
        """
        pass

    @abstractmethod
    def grad_log_psi(self, config: np.ndarray, lookup=None) -> np.ndarray:
        """
        Compute d(log psi)/d(theta_k) for all parameters.

        These "log-derivatives" O_k are the key ingredient in the VMC gradient:
            grad_E = 2 * Re( <O_k* E_loc> - <O_k*> <E_loc> )

        Returns:
            Flat array of shape (n_params,), same layout as get_parameters().
        """
        pass

    @abstractmethod
    def get_parameters(self) -> np.ndarray:
        """Return all trainable parameters as a single flat array."""
        pass

    @abstractmethod
    def set_parameters(self, pars: np.ndarray) -> None:
        """Overwrite all trainable parameters from a flat array."""
        pass

    @property
    def parameters(self) -> np.ndarray:
        """All trainable parameters as a flat vector."""
        return self.get_parameters()

    def update_parameters(self, delta: np.ndarray) -> None:
        """
        Apply a parameter update: theta <- theta + delta.

        Args:
            delta: flat array of shape (n_params,), same layout as `parameters`
        """
        self.set_parameters(self.get_parameters() + delta)

    @property
    def n_params(self) -> int:
        """Total number of trainable parameters."""
        return len(self.get_parameters())

    def log_psi_ratio(self, config: np.ndarray, sites, values,
                      lookup=None) -> complex:
        """Single-move form of log_psi_diff."""
        return self.log_psi_diff(config, [sites], [values], lookup)[0]
