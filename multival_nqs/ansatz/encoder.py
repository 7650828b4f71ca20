# multival_nqs/ansatz/encoder.py
#
# One-hot ("extended") encoding of multi-valued configurations.
#
# A site with ls legal values is represented by ls visible units, exactly one
# of which is on. A configuration of nv sites therefore becomes a 0/1 vector
# vtilde of length nv*ls, and site i with value v lights up entry
#
#   i*ls + index_of(v)
#
# where index_of is the position of v in the ordered local value list. The
# same index_of must be used by the encoder and by every incremental lookup
# update, otherwise the cached theta drifts away from the true configuration.

import numpy as np

from ..errors import LocalValueError

# Largest integer value span for which index_of uses a flat array table.
MAX_TABLE_SPAN = 1 << 16


class LocalValueEncoder:
    """
    Maps local values <-> indices and configurations <-> one-hot vectors.

    Local value lookup is O(1): when all legal values are integers spanning a
    modest range (spins, occupation numbers) it is a single array read at
    `value - min_value`. Arbitrary float values fall back to a binary search
    over the sorted value list with an exact-match check.
    """

    def __init__(self, local_states, n_sites: int):
        """
        Args:
            local_states: Ordered legal values of one site (shared by all sites).
            n_sites:      Number of sites in a configuration.
        """
        local_states = np.asarray(local_states, dtype=float)
        if local_states.ndim != 1 or local_states.size == 0:
            raise ValueError("local_states must be a non-empty 1D sequence")
        if len(np.unique(local_states)) != local_states.size:
            raise ValueError(f"local_states must be unique, got {local_states}")

        self.local_states = local_states
        self.local_size = local_states.size
        self.n_sites = n_sites

        codes = np.rint(local_states)
        span = codes.max() - codes.min() + 1
        if np.all(codes == local_states) and span <= MAX_TABLE_SPAN:
            self._offset = int(codes.min())
            self._table = np.full(int(span), -1, dtype=np.intp)
            self._table[codes.astype(np.intp) - self._offset] = np.arange(self.local_size)
        else:
            self._table = None
            order = np.argsort(local_states)
            self._sorted_values = local_states[order]
            self._sorted_index = order.astype(np.intp)

    @property
    def uses_table(self) -> bool:
        """True if index_of is served by the flat array table."""
        return self._table is not None

    def index_of(self, values):
        """
        Position of each value in the local value list.

        Args:
            values: scalar or array of local values.

        Returns:
            int for a scalar input, integer array of the same shape otherwise.

        Raises:
            LocalValueError: if any value is not a legal local value.
        """
        values = np.asarray(values, dtype=float)
        flat = values.reshape(-1)

        if self._table is not None:
            codes = np.rint(flat)
            ok = ((codes == flat)
                  & (codes >= self._offset)
                  & (codes < self._offset + self._table.size))
            idx = np.full(flat.shape, -1, dtype=np.intp)
            idx[ok] = self._table[codes[ok].astype(np.intp) - self._offset]
        else:
            pos = np.clip(np.searchsorted(self._sorted_values, flat),
                          0, self.local_size - 1)
            ok = self._sorted_values[pos] == flat
            idx = np.where(ok, self._sorted_index[pos], -1)

        if np.any(idx < 0):
            bad = np.unique(flat[idx < 0])
            raise LocalValueError(
                f"Values {bad.tolist()} are not legal local values "
                f"{self.local_states.tolist()}"
            )

        if values.ndim == 0:
            return int(idx[0])
        return idx.reshape(values.shape)

    def site_indices(self, sites) -> np.ndarray:
        """
        Validate site indices and return them as a flat intp array.

        Raises:
            ValueError: for non-integral or out-of-range indices.
        """
        raw = np.asarray(sites).reshape(-1)
        if raw.size and not np.issubdtype(raw.dtype, np.integer):
            if not (np.issubdtype(raw.dtype, np.floating)
                    and np.all(raw == np.rint(raw))):
                raise ValueError(f"Site indices {raw.tolist()} are not integers")
        sites = raw.astype(np.intp)
        if np.any((sites < 0) | (sites >= self.n_sites)):
            raise ValueError(
                f"Site indices {sites.tolist()} out of range [0, {self.n_sites})"
            )
        return sites

    def rows(self, sites, values) -> np.ndarray:
        """
        Extended (one-hot) row indices site*ls + index_of(value).

        Args:
            sites:  integer array of site indices.
            values: local values at those sites, same length.
        """
        sites = self.site_indices(sites)
        return sites * self.local_size + self.index_of(np.reshape(values, -1))

    def encode(self, config) -> np.ndarray:
        """
        One-hot encode a configuration.

        Args:
            config: array of shape (n_sites,) of legal local values.

        Returns:
            vtilde of shape (n_sites * local_size,) with one 1.0 per block.
        """
        config = np.asarray(config)
        if config.shape != (self.n_sites,):
            raise ValueError(
                f"Expected a configuration of shape ({self.n_sites},), "
                f"got {config.shape}"
            )
        vtilde = np.zeros(self.n_sites * self.local_size)
        vtilde[self.rows(np.arange(self.n_sites), config)] = 1.0
        return vtilde

    def decode(self, vtilde) -> np.ndarray:
        """Inverse of encode: recover the configuration from a one-hot vector."""
        blocks = np.asarray(vtilde, dtype=float).reshape(self.n_sites, self.local_size)
        valid = np.all((blocks == 0.0) | (blocks == 1.0), axis=1) & (blocks.sum(axis=1) == 1.0)
        if not np.all(valid):
            bad = np.flatnonzero(~valid).tolist()
            raise ValueError(f"Blocks for sites {bad} are not one-hot")
        return self.local_states[np.argmax(blocks, axis=1)]

    def __repr__(self) -> str:
        return (
            f"LocalValueEncoder(n_sites={self.n_sites}, "
            f"local_states={self.local_states.tolist()})"
        )
