# multival_nqs/ansatz/rbm_multival.py
#
# Restricted Boltzmann Machine for sites with more than two local values.
#
# Each site with ls legal values is one-hot encoded into ls visible units
# (see encoder.py), giving nv*ls visible units coupled to nh hidden units.
# Summing out the hidden units gives a closed-form log-wavefunction:
#
#   log psi(v) = a . vtilde + sum_j log cosh(theta_j)
#   theta      = W^T . vtilde + b
#
# For ls = 2 this is the familiar spin RBM of Carleo & Troyer (2017) up to a
# reparametrization. The per-configuration cache is theta itself: a local
# move only swaps a few rows of W in and out of it (lookup.py).
#
# Gradients are analytical:
#   d/d(a_i)   = vtilde_i
#   d/d(b_j)   = tanh(theta_j)
#   d/d(W_ij)  = vtilde_i * tanh(theta_j)

import numpy as np

from .base import Ansatz
from .encoder import LocalValueEncoder
from .lookup import ThetaLookup, check_lookup, compute_theta, apply_local_changes
from .parameters import RbmParameters
from ..logcosh import sum_log_cosh
from .. import serialization


class RbmMultival(Ansatz):
    """
    Multi-valued RBM as a neural quantum state ansatz.

    Parameters:
        a (nv*ls,):      visible biases, one per (site, local value)
        b (nh,):         hidden biases
        W (nv*ls, nh):   weight matrix connecting visible to hidden units

    Total parameters: nv*ls*nh + nv*ls (if use_visible_bias) + nh (if use_hidden_bias)
    """

    def __init__(self, hilbert, n_hidden: int = 0, alpha: int = 0,
                 use_visible_bias: bool = True, use_hidden_bias: bool = True,
                 seed: int = 42, sigma: float = 0.01, dtype=np.complex128):
        """
        Args:
            hilbert:          Configuration space (multival_nqs.hilbert.Hilbert).
                              Only read here and on load; must outlive the machine.
            n_hidden:         Requested number of hidden units.
            alpha:            Hidden unit density. nh = max(n_hidden, alpha * nv).
            use_visible_bias: Train the visible bias a (else fixed at zero).
            use_hidden_bias:  Train the hidden bias b (else fixed at zero).
            seed:             Random seed for the Gaussian initialization.
            sigma:            Standard deviation of the initial parameters.
            dtype:            complex128 (default) or float64 parameters.
        """
        if n_hidden < 0 or alpha < 0:
            raise ValueError(
                f"n_hidden and alpha must be non-negative, got {n_hidden}, {alpha}"
            )
        self.hilbert = hilbert
        self.seed = seed
        self.sigma = sigma
        self.dtype = np.dtype(dtype)

        self._init(max(n_hidden, alpha * hilbert.size),
                   use_visible_bias, use_hidden_bias)

    def _init(self, n_hidden: int, use_visible_bias: bool,
              use_hidden_bias: bool) -> None:
        """(Re)build dimensions, encoder and freshly initialized parameters."""
        n_hidden = int(n_hidden)
        if n_hidden < 1:
            raise ValueError(
                f"Need at least one hidden unit, got n_hidden = {n_hidden}"
            )
        self.n_visible = self.hilbert.size
        self.local_size = self.hilbert.local_size
        self.n_hidden = n_hidden

        self.encoder = LocalValueEncoder(self.hilbert.local_states, self.n_visible)
        self.params = RbmParameters(self.n_visible * self.local_size, n_hidden,
                                    use_visible_bias, use_hidden_bias, self.dtype)
        self.params.init_random(np.random.default_rng(self.seed), self.sigma)

    # ---- parameter views ----------------------------------------------------

    @property
    def use_visible_bias(self) -> bool:
        return self.params.use_visible_bias

    @property
    def use_hidden_bias(self) -> bool:
        return self.params.use_hidden_bias

    @property
    def a(self) -> np.ndarray:
        return self.params.a

    @a.setter
    def a(self, value) -> None:
        self.params.a = self._checked(value, self.params.a.shape, "a")

    @property
    def b(self) -> np.ndarray:
        return self.params.b

    @b.setter
    def b(self, value) -> None:
        self.params.b = self._checked(value, self.params.b.shape, "b")

    @property
    def W(self) -> np.ndarray:
        return self.params.W

    @W.setter
    def W(self, value) -> None:
        self.params.W = self._checked(value, self.params.W.shape, "W")

    def _checked(self, value, shape, name) -> np.ndarray:
        value = np.asarray(value)
        if np.iscomplexobj(value) and not np.issubdtype(self.dtype, np.complexfloating):
            if np.any(value.imag != 0):
                raise ValueError(f"{name} is complex but the machine is {self.dtype}")
            value = value.real
        value = value.astype(self.dtype)
        if value.shape != shape:
            raise ValueError(f"{name} must have shape {shape}, got {value.shape}")
        return value.copy()

    @property
    def n_params(self) -> int:
        return self.params.n_params

    @property
    def is_holomorphic(self) -> bool:
        """log psi is a holomorphic function of the (complex) parameters."""
        return True

    def get_parameters(self) -> np.ndarray:
        """All parameters as a flat vector: [a | b | W.flatten()]."""
        return self.params.get_parameters()

    def set_parameters(self, pars: np.ndarray) -> None:
        self.params.set_parameters(pars)

    # ---- lookup ---------------------------------------------------------------

    def _config(self, config) -> np.ndarray:
        config = np.asarray(config)
        if config.shape != (self.n_visible,):
            raise ValueError(
                f"Expected a configuration of shape ({self.n_visible},), "
                f"got {config.shape}"
            )
        return config

    def _theta(self, vtilde: np.ndarray, lookup) -> np.ndarray:
        if lookup is None:
            return compute_theta(self.W, self.b, vtilde)
        return check_lookup(lookup, self.n_hidden, self.dtype)

    def init_lookup(self, config: np.ndarray) -> ThetaLookup:
        """theta = W^T . vtilde(config) + b, from scratch."""
        vtilde = self.encoder.encode(config)
        return ThetaLookup(compute_theta(self.W, self.b, vtilde))

    def update_lookup(self, config: np.ndarray, to_change, new_values,
                      lookup: ThetaLookup) -> None:
        """
        Push a local move into `lookup`, in place.

        Cost is O(len(to_change) * nh). An empty move leaves the lookup alone.
        Values are validated before theta is touched, so a rejected call never
        leaves the cache half-updated.
        """
        theta = check_lookup(lookup, self.n_hidden, self.dtype)
        config = self._config(config)
        sites = self.encoder.site_indices(to_change)
        values = np.asarray(new_values, dtype=float).reshape(-1)
        if sites.size != values.size:
            raise ValueError(
                f"Got {sites.size} sites but {values.size} new values"
            )
        if sites.size == 0:
            return

        new_rows = self.encoder.rows(sites, values)
        old_rows = self.encoder.rows(sites, config[sites])
        apply_local_changes(theta, self.W, old_rows, new_rows)

    # ---- amplitudes -----------------------------------------------------------

    def log_psi(self, config: np.ndarray, lookup=None) -> complex:
        """
        Compute log(psi(v)) for a given configuration.

        log psi = a . vtilde + sum_j log cosh(theta_j)

        Args:
            config: array of shape (nv,) of legal local values
            lookup: optional ThetaLookup for config

        Returns:
            Log amplitude as a complex scalar.
        """
        vtilde = self.encoder.encode(config)
        theta = self._theta(vtilde, lookup)
        return complex(self.a @ vtilde + sum_log_cosh(theta))

    def log_psi_diff(self, config: np.ndarray, to_change, new_conf,
                     lookup=None) -> np.ndarray:
        """
        Log amplitude ratios for a batch of independent local moves.

        Move k sets sites to_change[k] to values new_conf[k] jointly, relative
        to the same base config (moves are not chained). `lookup`, if given,
        supplies the base theta and is never modified.

        Returns:
            Complex array of shape (n_moves,); entries for empty moves are 0.
        """
        config = self._config(config)
        if len(to_change) != len(new_conf):
            raise ValueError(
                f"Got {len(to_change)} site lists but {len(new_conf)} value lists"
            )
        if lookup is None:
            theta = compute_theta(self.W, self.b, self.encoder.encode(config))
        else:
            theta = check_lookup(lookup, self.n_hidden, self.dtype)

        diffs = np.zeros(len(to_change), dtype=np.complex128)
        logt_base = sum_log_cosh(theta)

        for k, (sites, values) in enumerate(zip(to_change, new_conf)):
            sites = self.encoder.site_indices(sites)
            values = np.asarray(values, dtype=float).reshape(-1)
            if sites.size != values.size:
                raise ValueError(
                    f"Move {k}: {sites.size} sites but {values.size} new values"
                )
            if sites.size == 0:
                continue

            new_rows = self.encoder.rows(sites, values)
            old_rows = self.encoder.rows(sites, config[sites])
            theta_new = apply_local_changes(theta.copy(), self.W, old_rows, new_rows)

            diffs[k] = (self.a[new_rows].sum() - self.a[old_rows].sum()
                        + sum_log_cosh(theta_new) - logt_base)
        return diffs

    # ---- derivatives ----------------------------------------------------------

    def grad_log_psi(self, config: np.ndarray, lookup=None) -> np.ndarray:
        """
        Compute d(log psi)/d(params) for all parameters.

        Returns:
            Flat array [grad_a | grad_b | grad_W.flatten()] (disabled biases
            omitted), shape (n_params,).
        """
        vtilde = self.encoder.encode(config)
        tanh_theta = np.tanh(self._theta(vtilde, lookup))
        return self.params.flatten(vtilde, tanh_theta, np.outer(vtilde, tanh_theta))

    # ---- persistence ----------------------------------------------------------

    def state_dict(self) -> dict:
        """Parameters and dimensions as a plain record (see serialization.py)."""
        return serialization.state_dict(self)

    def load_state_dict(self, record: dict) -> None:
        """
        Replace dimensions and parameters with those of a saved record.

        The record is fully validated before anything is changed, so a failed
        load leaves the machine untouched.
        """
        state = serialization.parse_state_dict(record, self.hilbert)

        # stored values of a disabled bias are ignored
        a = state.a if state.use_visible_bias else None
        b = state.b if state.use_hidden_bias else None
        loaded = [x for x in (a, b, state.W) if x is not None]

        # a complex record loaded into a real machine makes the machine complex
        dtype = np.result_type(self.dtype, *[x.dtype for x in loaded])
        self.dtype = dtype
        self._init(state.n_hidden, state.use_visible_bias, state.use_hidden_bias)

        p = self.params
        p.a = np.zeros_like(p.a)
        p.b = np.zeros_like(p.b)
        if a is not None:
            p.a = a.astype(dtype)
        if b is not None:
            p.b = b.astype(dtype)
        if state.W is not None:
            p.W = state.W.astype(dtype)

    @classmethod
    def from_state_dict(cls, record: dict, hilbert, **kwargs) -> "RbmMultival":
        """Build a machine on `hilbert` directly from a saved record."""
        state = serialization.parse_state_dict(record, hilbert)
        machine = cls(hilbert, n_hidden=state.n_hidden,
                      use_visible_bias=state.use_visible_bias,
                      use_hidden_bias=state.use_hidden_bias, **kwargs)
        machine.load_state_dict(record)
        return machine

    def save(self, path: str) -> None:
        """Write the state record to a JSON file."""
        serialization.save_json(self.state_dict(), path)

    def load(self, path: str) -> None:
        """Load a JSON state file written by save()."""
        self.load_state_dict(serialization.read_json(path))

    @classmethod
    def from_file(cls, path: str, hilbert, **kwargs) -> "RbmMultival":
        return cls.from_state_dict(serialization.read_json(path), hilbert, **kwargs)

    # ---- reporting ------------------------------------------------------------

    def summary(self) -> None:
        """Print the machine's dimensions and bias settings."""
        print(f"RbmMultival initialized with nvisible = {self.n_visible} "
              f"and nhidden = {self.n_hidden}")
        print(f"  Using visible bias = {self.use_visible_bias}")
        print(f"  Using hidden bias  = {self.use_hidden_bias}")
        print(f"  Local size is      = {self.local_size}")
        print(f"  Parameters         = {self.n_params}")

    def __repr__(self) -> str:
        return (
            f"RbmMultival(n_visible={self.n_visible}, n_hidden={self.n_hidden}, "
            f"local_size={self.local_size}, n_params={self.n_params})"
        )
