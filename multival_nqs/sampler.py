# multival_nqs/sampler.py
#
# Metropolis-Hastings MCMC sampler for multi-valued configurations.
#
# In VMC, we need expectation values over |psi(v)|^2, but summing over all
# ls^N configurations is intractable. Instead, we use MCMC to draw samples
# from |psi(v)|^2. Each step proposes changing one site to a different legal
# local value and accepts/rejects on |psi(new)/psi(old)|^2, satisfying
# detailed balance (the proposal is symmetric).
#
# The walker owns a lookup for its current configuration: ratios are read off
# it without recomputing theta, and accepted moves are pushed into it with
# update_lookup, so one step costs O(M) rather than O(N * ls * M).

import numpy as np

from .ansatz.base import Ansatz


class MetropolisLocal:
    """
    Metropolis-Hastings sampler drawing configurations from |psi(v)|^2.

    Proposes single-site moves to a uniformly chosen *different* local value.
    Acceptance ratio computed in log-space for stability.
    """

    def __init__(self, machine: Ansatz, hilbert=None, seed: int = 42):
        """
        Args:
            machine: Wavefunction with a lookup (e.g. RbmMultival).
            hilbert: Configuration space. Default: machine.hilbert.
            seed:    Random seed for reproducibility.
        """
        self.machine = machine
        self.hilbert = hilbert if hilbert is not None else machine.hilbert
        self.n_sites = self.hilbert.size
        self.local_states = np.asarray(self.hilbert.local_states, dtype=float)
        self.rng = np.random.default_rng(seed)

        self._n_proposed = 0
        self._n_accepted = 0
        self.reset_state()

    def _propose(self):
        """Pick a site and a new value for it, different from the current one."""
        site = int(self.rng.integers(0, self.n_sites))
        n_values = len(self.local_states)
        if n_values == 1:
            return site, self.current_state[site]
        current_idx = int(np.flatnonzero(self.local_states == self.current_state[site])[0])
        new_idx = int(self.rng.integers(0, n_values - 1))
        if new_idx >= current_idx:
            new_idx += 1
        return site, self.local_states[new_idx]

    def _metropolis_step(self) -> None:
        """
        One Metropolis step: propose a single-site move and accept/reject.

        Acceptance ratio: A = |psi(proposed)|^2 / |psi(current)|^2
        Computed as log(A) = 2 * Re(log_psi_ratio).
        """
        site, new_value = self._propose()
        log_ratio = self.machine.log_psi_diff(
            self.current_state, [[site]], [[new_value]], self.lookup
        )[0]
        log_acceptance = 2.0 * np.real(log_ratio)

        self._n_proposed += 1

        if log_acceptance >= 0 or np.log(self.rng.random()) < log_acceptance:
            # update_lookup must see the old configuration
            self.machine.update_lookup(self.current_state, [site], [new_value],
                                       self.lookup)
            self.current_state[site] = new_value
            self.current_log_psi += log_ratio
            self._n_accepted += 1

    def burn_in(self, n_steps: int) -> None:
        """Run n_steps without recording to let the chain reach equilibrium."""
        for _ in range(n_steps):
            self._metropolis_step()

    def sample(self, n_samples: int, sweep_size: int = None,
               with_log_derivatives: bool = False):
        """
        Collect n_samples configurations from |psi(v)|^2.

        Between consecutive samples, performs `sweep_size` Metropolis steps
        to reduce autocorrelation. One "sweep" = N steps.

        Args:
            n_samples:            Number of configurations to collect.
            sweep_size:           Steps between samples. Default: n_sites.
            with_log_derivatives: Also return grad_log_psi for every sample,
                                  computed from the walker's lookup.

        Returns:
            samples of shape (n_samples, n_sites), and if requested the
            log-derivatives of shape (n_samples, n_params).
        """
        if sweep_size is None:
            sweep_size = self.n_sites

        samples = np.empty((n_samples, self.n_sites), dtype=float)
        grads = None
        if with_log_derivatives:
            grads = np.empty((n_samples, self.machine.n_params), dtype=np.complex128)

        for k in range(n_samples):
            for _ in range(sweep_size):
                self._metropolis_step()
            samples[k] = self.current_state
            if grads is not None:
                grads[k] = self.machine.grad_log_psi(self.current_state, self.lookup)

        if with_log_derivatives:
            return samples, grads
        return samples

    @property
    def acceptance_rate(self) -> float:
        """Fraction of proposed moves that were accepted."""
        if self._n_proposed == 0:
            return 0.0
        return self._n_accepted / self._n_proposed

    def reset_acceptance_stats(self) -> None:
        """Reset acceptance counters (call at the start of each epoch)."""
        self._n_proposed = 0
        self._n_accepted = 0

    def refresh(self) -> None:
        """
        Rebuild the lookup and cached log_psi for the current configuration.

        Must be called after the machine's parameters change: the lookup holds
        W^T . v + b for the old W and b.
        """
        self.lookup = self.machine.init_lookup(self.current_state)
        self.current_log_psi = self.machine.log_psi(self.current_state, self.lookup)

    def reset_state(self, config: np.ndarray = None) -> None:
        """
        Reset the walker's configuration (and rebuild its lookup).

        Args:
            config: New configuration. If None, draws a random one.
        """
        if config is None:
            self.current_state = np.asarray(self.hilbert.random_state(self.rng),
                                            dtype=float)
        else:
            self.current_state = np.array(config, dtype=float)

        self.refresh()
        self.reset_acceptance_stats()
