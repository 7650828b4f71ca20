# multival_nqs/serialization.py
#
# Saved-state records for RbmMultival and their JSON file encoding.
#
# The logical record is a flat dict:
#
#   { "type": "RbmMultival", "Nvisible": int, "Nhidden": int,
#     "LocalSize": int, "UseVisibleBias": bool, "UseHiddenBias": bool,
#     "a": (nv*ls,), "b": (nh,), "W": (nv*ls, nh) }
#
# Older records may carry "Name" instead of "type", and "Alpha" instead of
# "Nhidden" (then Nhidden = Nvisible * Alpha). A record is parsed and checked
# in full before any machine state is touched.
#
# JSON has no complex numbers, so complex arrays are written as
# {"real": [...], "imag": [...]}; plain nested lists are read as real arrays.

from collections import namedtuple
import json

import numpy as np

from .errors import SchemaMismatchError, IncompatibleHilbertError

SCHEMA_NAME = "RbmMultival"

ParsedState = namedtuple(
    "ParsedState",
    ["n_visible", "local_size", "n_hidden",
     "use_visible_bias", "use_hidden_bias", "a", "b", "W"],
)


def state_dict(machine) -> dict:
    """Record of an RbmMultival's dimensions and parameters (arrays copied)."""
    return {
        "type": SCHEMA_NAME,
        "Nvisible": machine.n_visible,
        "Nhidden": machine.n_hidden,
        "LocalSize": machine.local_size,
        "UseVisibleBias": machine.use_visible_bias,
        "UseHiddenBias": machine.use_hidden_bias,
        "a": machine.a.copy(),
        "b": machine.b.copy(),
        "W": machine.W.copy(),
    }


def _array(record: dict, key: str, shape: tuple):
    if key not in record or record[key] is None:
        return None
    value = record[key]
    if isinstance(value, dict):
        value = _decode_array(value)
    arr = np.asarray(value)
    if arr.shape != shape:
        raise SchemaMismatchError(
            f"Field '{key}' has shape {arr.shape}, expected {shape}"
        )
    if not np.issubdtype(arr.dtype, np.number):
        raise SchemaMismatchError(f"Field '{key}' is not numeric ({arr.dtype})")
    return arr


def parse_state_dict(record: dict, hilbert) -> ParsedState:
    """
    Validate a saved record against a configuration space.

    Args:
        record:  dict as produced by state_dict() or read_json().
        hilbert: configuration space the machine will live on.

    Returns:
        ParsedState; array fields are None when absent from the record.

    Raises:
        SchemaMismatchError:      wrong/missing type tag, no hidden size,
                                  or an array of the wrong shape.
        IncompatibleHilbertError: Nvisible or LocalSize disagree with hilbert.
    """
    tag = record.get("type", record.get("Name"))
    if tag != SCHEMA_NAME:
        raise SchemaMismatchError(
            f"Expected a '{SCHEMA_NAME}' record, got type {tag!r}"
        )

    n_visible = int(record.get("Nvisible", hilbert.size))
    if n_visible != hilbert.size:
        raise IncompatibleHilbertError(
            f"Saved state has Nvisible = {n_visible}, "
            f"but the configuration space has {hilbert.size} sites"
        )
    local_size = int(record.get("LocalSize", hilbert.local_size))
    if local_size != hilbert.local_size:
        raise IncompatibleHilbertError(
            f"Saved state has LocalSize = {local_size}, "
            f"but the configuration space has {hilbert.local_size} local values"
        )

    if "Nhidden" in record:
        n_hidden = int(record["Nhidden"])
    elif "Alpha" in record:
        n_hidden = int(n_visible * float(record["Alpha"]))
    else:
        raise SchemaMismatchError("Record has neither 'Nhidden' nor 'Alpha'")
    if n_hidden < 1:
        raise SchemaMismatchError(f"Record has Nhidden = {n_hidden} < 1")

    n_ext = n_visible * local_size
    return ParsedState(
        n_visible=n_visible,
        local_size=local_size,
        n_hidden=n_hidden,
        use_visible_bias=bool(record.get("UseVisibleBias", True)),
        use_hidden_bias=bool(record.get("UseHiddenBias", True)),
        a=_array(record, "a", (n_ext,)),
        b=_array(record, "b", (n_hidden,)),
        W=_array(record, "W", (n_ext, n_hidden)),
    )


# ============================================================
# JSON encoding
# ============================================================

def _encode_array(arr: np.ndarray):
    arr = np.asarray(arr)
    if np.iscomplexobj(arr):
        return {"real": arr.real.tolist(), "imag": arr.imag.tolist()}
    return arr.tolist()


def _decode_array(value) -> np.ndarray:
    if isinstance(value, dict):
        if set(value) != {"real", "imag"}:
            raise SchemaMismatchError(
                f"Complex arrays need exactly 'real' and 'imag', got {sorted(value)}"
            )
        return np.asarray(value["real"], dtype=float) + 1j * np.asarray(value["imag"], dtype=float)
    return np.asarray(value)


def save_json(record: dict, path: str) -> None:
    """Write a state record to `path` as JSON."""
    out = {}
    for key, value in record.items():
        if isinstance(value, np.ndarray):
            value = _encode_array(value)
        elif isinstance(value, np.generic):
            value = value.item()
        out[key] = value
    with open(path, 'w') as f:
        json.dump(out, f, indent=2)


def read_json(path: str) -> dict:
    """Read a JSON state file; array fields come back as numpy arrays."""
    with open(path, 'r') as f:
        record = json.load(f)
    for key in ("a", "b", "W"):
        if record.get(key) is not None:
            record[key] = _decode_array(record[key])
    return record
