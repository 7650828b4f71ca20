# multival_nqs/ansatz/parameters.py
#
# Storage for the RBM parameters and their flat-vector view.
#
# Optimizers see the machine as one flat vector. The layout is fixed:
#
#   [ a (nv*ls, if enabled) | b (nh, if enabled) | W.flatten() (nv*ls*nh) ]
#
# with W flattened row-major over (extended visible index, hidden index).
# `flatten` is the single place this order is written down; both
# get_parameters and the log-derivative code go through it.

import numpy as np


class RbmParameters:
    """
    Visible bias a, hidden bias b and weight matrix W of a multi-valued RBM.

    Parameters:
        a (nv*ls,):      visible biases, one per (site, local value) pair
        b (nh,):         hidden biases
        W (nv*ls, nh):   visible-hidden couplings

    A disabled bias is kept as a zero vector so the formulas stay uniform, but
    it is not part of the flat parameter vector and never changes.
    """

    def __init__(self, n_visible_ext: int, n_hidden: int,
                 use_visible_bias: bool = True, use_hidden_bias: bool = True,
                 dtype=np.complex128):
        """
        Args:
            n_visible_ext:    Number of extended visible units, nv * ls.
            n_hidden:         Number of hidden units nh.
            use_visible_bias: Include a in the trainable parameters.
            use_hidden_bias:  Include b in the trainable parameters.
            dtype:            Parameter dtype (complex128 or float64).
        """
        self.n_visible_ext = n_visible_ext
        self.n_hidden = n_hidden
        self.use_visible_bias = use_visible_bias
        self.use_hidden_bias = use_hidden_bias
        self.dtype = np.dtype(dtype)

        self.a = np.zeros(n_visible_ext, dtype=self.dtype)
        self.b = np.zeros(n_hidden, dtype=self.dtype)
        self.W = np.zeros((n_visible_ext, n_hidden), dtype=self.dtype)

    @property
    def n_params(self) -> int:
        """nv*ls*nh plus the enabled bias lengths."""
        n = self.n_visible_ext * self.n_hidden
        if self.use_visible_bias:
            n += self.n_visible_ext
        if self.use_hidden_bias:
            n += self.n_hidden
        return n

    def init_random(self, rng: np.random.Generator, sigma: float = 0.01) -> None:
        """
        Gaussian initialization of all enabled parameters.

        Small sigma keeps the initial amplitude close to uniform. For complex
        dtypes the real and imaginary parts are drawn independently.
        """
        def draw(shape):
            x = rng.normal(0.0, sigma, size=shape)
            if np.iscomplexobj(self.a):
                x = x + 1j * rng.normal(0.0, sigma, size=shape)
            return x.astype(self.dtype)

        self.a = draw(self.a.shape) if self.use_visible_bias else np.zeros_like(self.a)
        self.b = draw(self.b.shape) if self.use_hidden_bias else np.zeros_like(self.b)
        self.W = draw(self.W.shape)

    def flatten(self, a_part, b_part, W_part) -> np.ndarray:
        """
        Pack three blocks shaped like (a, b, W) in the fixed parameter order.

        Disabled biases are dropped from the output.
        """
        pieces = []
        if self.use_visible_bias:
            pieces.append(np.ravel(a_part))
        if self.use_hidden_bias:
            pieces.append(np.ravel(b_part))
        pieces.append(np.ravel(W_part))
        return np.concatenate(pieces)

    def get_parameters(self) -> np.ndarray:
        """All trainable parameters as a flat vector (a copy)."""
        return self.flatten(self.a, self.b, self.W)

    def set_parameters(self, pars) -> None:
        """
        Inverse of get_parameters: overwrite all trainable parameters.

        Raises:
            ValueError: if pars does not have n_params entries, or if it
                        carries imaginary parts the real dtype cannot hold.
        """
        pars = np.asarray(pars)
        if pars.shape != (self.n_params,):
            raise ValueError(
                f"Expected {self.n_params} parameters, got shape {pars.shape}"
            )
        if np.iscomplexobj(pars) and not np.issubdtype(self.dtype, np.complexfloating):
            if np.any(pars.imag != 0):
                raise ValueError(
                    f"Complex parameters cannot be stored in a {self.dtype} machine"
                )
            pars = pars.real
        nv, nh = self.n_visible_ext, self.n_hidden
        k = 0
        if self.use_visible_bias:
            self.a = pars[k:k + nv].astype(self.dtype)
            k += nv
        if self.use_hidden_bias:
            self.b = pars[k:k + nh].astype(self.dtype)
            k += nh
        self.W = pars[k:].reshape(nv, nh).astype(self.dtype)

    def update_parameters(self, delta) -> None:
        """Apply parameter update: p <- p + delta."""
        self.set_parameters(self.get_parameters() + np.asarray(delta))

    def __repr__(self) -> str:
        return (
            f"RbmParameters(n_visible_ext={self.n_visible_ext}, "
            f"n_hidden={self.n_hidden}, n_params={self.n_params})"
        )
