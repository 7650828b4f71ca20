# tests/smoke_test.py
#
# Quick sanity check: verifies that all modules import correctly, produce
# outputs of the right shape, and don't crash. This is not a correctness
# test, just checking that the plumbing works end to end.

import sys
import os
import tempfile
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import numpy as np

# ── 1. Configuration spaces ───────────────────────────────────────────────────
print("=" * 60)
print("Testing configuration spaces...")

from multival_nqs.hilbert import Spin, Boson

N = 6  # small chain for fast testing

spin1 = Spin(n_sites=N, s=1.0)
boson = Boson(n_sites=N, n_max=2)

assert spin1.local_size == 3, "Spin-1 should have 3 local values"
assert boson.local_size == 3, "Boson(n_max=2) should have 3 local values"
print(f"  {spin1} ... OK")
print(f"  {boson} ... OK")

# ── 2. RbmMultival ────────────────────────────────────────────────────────────
print("\nTesting RbmMultival ansatz...")

from multival_nqs.ansatz import RbmMultival

rbm = RbmMultival(spin1, alpha=2, seed=0, sigma=0.1)
print(f"  {rbm}")

# nv*ls*nh + nv*ls + nh
n_ext = N * 3
expected_params = n_ext * rbm.n_hidden + n_ext + rbm.n_hidden
assert rbm.n_params == expected_params, (
    f"n_params mismatch: got {rbm.n_params}, expected {expected_params}"
)
print(f"  n_params = {rbm.n_params} (expected {expected_params}) ... OK")

config = np.array([2.0, 0.0, -2.0, 0.0, 2.0, -2.0])
log_p = rbm.log_psi(config)
assert np.isscalar(log_p), f"log_psi should be scalar, got {type(log_p)}"
print(f"  log_psi({config}) = {log_p:.6f} ... OK")

grad = rbm.grad_log_psi(config)
assert grad.shape == (rbm.n_params,), (
    f"grad shape mismatch: got {grad.shape}, expected ({rbm.n_params},)"
)
print(f"  grad_log_psi shape = {grad.shape} ... OK")

# ── 3. Lookup and ratios ──────────────────────────────────────────────────────
print("\nTesting lookup updates and ratios...")

lookup = rbm.init_lookup(config)
diffs = rbm.log_psi_diff(config, [[], [0], [1, 2]], [[], [-2.0], [2.0, 0.0]], lookup)
assert diffs[0] == 0, "empty move must give a zero log-ratio"

rbm.update_lookup(config, [0], [-2.0], lookup)
moved = config.copy()
moved[0] = -2.0
assert np.allclose(lookup.theta, rbm.init_lookup(moved).theta), "lookup drifted"
assert np.isclose(diffs[1], rbm.log_psi(moved) - log_p), "ratio mismatch"
print(f"  log_psi_diff = {np.round(diffs, 6)} ... OK")

# ── 4. Sampler ────────────────────────────────────────────────────────────────
print("\nTesting MetropolisLocal...")

from multival_nqs.sampler import MetropolisLocal

sampler = MetropolisLocal(rbm, spin1, seed=42)
sampler.burn_in(n_steps=100)
print(f"  burn_in(100) ... OK")

n_samples = 50
samples, grads = sampler.sample(n_samples=n_samples, with_log_derivatives=True)
assert samples.shape == (n_samples, N), (
    f"samples shape mismatch: got {samples.shape}, expected ({n_samples}, {N})"
)
assert set(np.unique(samples)).issubset({-2.0, 0.0, 2.0}), "illegal sample values"
assert grads.shape == (n_samples, rbm.n_params)
print(f"  sample(n_samples={n_samples}) -> shape {samples.shape} ... OK")
print(f"  acceptance_rate = {sampler.acceptance_rate:.3f} ... OK")

# ── 5. Save / load ────────────────────────────────────────────────────────────
print("\nTesting state save/load...")

with tempfile.TemporaryDirectory() as tmp:
    path = os.path.join(tmp, "state.json")
    rbm.save(path)
    loaded = RbmMultival.from_file(path, spin1)
assert np.array_equal(loaded.get_parameters(), rbm.get_parameters())
print(f"  save -> from_file ... OK")

# ── Summary ───────────────────────────────────────────────────────────────────
print()
print("=" * 60)
print("All smoke tests passed.")
print("=" * 60)
