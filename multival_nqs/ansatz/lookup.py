# multival_nqs/ansatz/lookup.py
#
# The cached hidden pre-activations ("theta") and their incremental updates.
#
# theta = W^T . vtilde + b is the only quantity the RBM needs per
# configuration. Computing it from scratch is a full matrix-vector product,
# but a local move that changes site s from value v to v' only swaps one
# active visible unit for another, so
#
#   theta' = theta - W[s*ls + idx(v)] + W[s*ls + idx(v')]
#
# i.e. O(nh) per changed site. A sampler keeps one ThetaLookup per random
# walk and pushes every accepted move through apply_local_changes.

import numpy as np


class ThetaLookup:
    """
    Opaque per-configuration cache handed to samplers.

    Samplers only create, copy and pass it back; the machine that created it
    reads and mutates `theta`. Machines check the handle's type and shape once
    on every use, so a lookup built for another machine fails loudly instead of
    silently producing wrong amplitudes.
    """

    __slots__ = ("theta",)

    def __init__(self, theta: np.ndarray):
        self.theta = theta

    @property
    def n_hidden(self) -> int:
        return self.theta.shape[0]

    def copy(self) -> "ThetaLookup":
        """Independent cache, e.g. for a second walker."""
        return ThetaLookup(self.theta.copy())

    def __repr__(self) -> str:
        return f"ThetaLookup(n_hidden={self.n_hidden}, dtype={self.theta.dtype})"


def check_lookup(lookup, n_hidden: int, dtype=None) -> np.ndarray:
    """
    Validate a lookup handle and return its theta vector.

    Args:
        lookup:   handle to check.
        n_hidden: hidden units of the machine using it.
        dtype:    parameter dtype of that machine; theta must be able to hold
                  W rows of this dtype in place.

    Raises:
        TypeError:  if lookup is not a ThetaLookup.
        ValueError: if it was built for a different number of hidden units or
                    for a parameter dtype it cannot hold.
    """
    if not isinstance(lookup, ThetaLookup):
        raise TypeError(f"Expected a ThetaLookup, got {type(lookup).__name__}")
    if lookup.theta.shape != (n_hidden,):
        raise ValueError(
            f"Lookup holds theta of shape {lookup.theta.shape}, "
            f"expected ({n_hidden},)"
        )
    if dtype is not None and not np.can_cast(dtype, lookup.theta.dtype):
        raise ValueError(
            f"Lookup holds {lookup.theta.dtype} theta but the machine has "
            f"{np.dtype(dtype)} parameters; rebuild it with init_lookup"
        )
    return lookup.theta


def compute_theta(W: np.ndarray, b: np.ndarray, vtilde: np.ndarray) -> np.ndarray:
    """Hidden pre-activations from scratch: W^T . vtilde + b."""
    return W.T @ vtilde + b


def apply_local_changes(theta: np.ndarray, W: np.ndarray,
                        old_rows: np.ndarray, new_rows: np.ndarray) -> np.ndarray:
    """
    Move theta from the old active visible units to the new ones, in place.

    Args:
        theta:    pre-activations for the configuration before the move.
        W:        weight matrix, shape (nv*ls, nh).
        old_rows: extended indices site*ls + idx(old value) of changed sites.
        new_rows: extended indices site*ls + idx(new value), same order.

    Returns:
        theta (the same array), now matching the configuration after the move.
    """
    theta -= W[old_rows].sum(axis=0)
    theta += W[new_rows].sum(axis=0)
    return theta
