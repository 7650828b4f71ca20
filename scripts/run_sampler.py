#!/usr/bin/env python3
# scripts/run_sampler.py
#
# ============================================================
# CLI ENTRY POINT: Sample a multi-valued RBM from a YAML config
# ============================================================
#
# USAGE:
#   python scripts/run_sampler.py configs/spin1_chain.yaml
#   python scripts/run_sampler.py configs/spin1_chain.yaml --resume
#
# WHAT THIS SCRIPT DOES:
#   1. Loads the YAML config to get all settings
#   2. Constructs the configuration space, the RbmMultival machine and the
#      Metropolis sampler
#   3. Optionally reloads the latest checkpoint from the results directory
#   4. Burns in the chain, then draws blocks of samples together with their
#      log-derivatives (tqdm progress bar)
#   5. Prints and saves per-block statistics and the final machine state
#
# The optimizer is not part of this project: an external optimizer reads the
# saved log-derivatives, writes new parameters into the checkpoint, and this
# script is rerun with --resume.
#
# ============================================================

import argparse
import sys
import os
import numpy as np

# Add project root to path so the package imports without installation
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from multival_nqs.hilbert import Spin, Boson, CustomHilbert
from multival_nqs.ansatz import RbmMultival
from multival_nqs.sampler import MetropolisLocal
from multival_nqs.utils import (load_config, make_progress_bar,
                                SamplingLogger, Checkpointer)


# ============================================================
# SECTION: Object Builders (Config → Python Objects)
# ============================================================

def build_hilbert(cfg: dict):
    """Construct the configuration space from the 'hilbert' section."""
    h = cfg['hilbert']
    if h['type'] == 'spin':
        return Spin(n_sites=h['n_sites'], s=h.get('s', 0.5))
    elif h['type'] == 'boson':
        return Boson(n_sites=h['n_sites'], n_max=h['n_max'])
    elif h['type'] == 'custom':
        return CustomHilbert(n_sites=h['n_sites'], local_states=h['local_states'])
    else:
        raise ValueError(
            f"Unknown hilbert type '{h['type']}'. "
            f"Choose 'spin', 'boson', or 'custom'."
        )


def build_machine(cfg: dict, hilbert):
    """Construct the RbmMultival from the 'machine' section."""
    m = cfg['machine']
    dtypes = {'complex': np.complex128, 'real': np.float64}
    if m.get('dtype', 'complex') not in dtypes:
        raise ValueError(
            f"Unknown machine dtype '{m['dtype']}'. Choose 'complex' or 'real'."
        )
    return RbmMultival(
        hilbert,
        n_hidden         = m.get('n_hidden', 0),
        alpha            = m.get('alpha', 1),
        use_visible_bias = m.get('use_visible_bias', True),
        use_hidden_bias  = m.get('use_hidden_bias', True),
        seed             = m.get('seed', 42),
        sigma            = m.get('sigma', 0.01),
        dtype            = dtypes[m.get('dtype', 'complex')],
    )


# ============================================================
# SECTION: Main Entry Point
# ============================================================

def main():
    parser = argparse.ArgumentParser(
        description='Sample a multi-valued RBM wavefunction from a YAML config.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_sampler.py configs/spin1_chain.yaml
  python scripts/run_sampler.py configs/spin1_chain.yaml --resume
        """
    )
    parser.add_argument(
        'config',
        help='Path to a YAML config file (e.g. configs/spin1_chain.yaml)'
    )
    parser.add_argument(
        '--resume', action='store_true',
        help='Load the latest checkpoint from the results directory first'
    )
    args = parser.parse_args()

    # ---- Load config ----------------------------------------------------------
    cfg = load_config(args.config)
    out = cfg.get('output', {})
    results_dir = out.get('results_dir', 'results/default/')
    samp = cfg['sampler']

    # ---- Build all objects ----------------------------------------------------
    hilbert = build_hilbert(cfg)
    machine = build_machine(cfg, hilbert)
    checkpointer = Checkpointer(save_dir=results_dir)

    if args.resume:
        path = checkpointer.latest()
        if path is None:
            print(f"No checkpoint found in {results_dir}, starting fresh.")
        else:
            checkpointer.load(machine, path)
            print(f"Resumed from {path}")

    print("=" * 62)
    print(f"  Configuration space: {hilbert}")
    machine.summary()
    print("=" * 62)

    sampler = MetropolisLocal(machine, hilbert, seed=samp.get('seed', 42))

    # ---- Sample ---------------------------------------------------------------
    sampler.burn_in(samp.get('n_burn', 200))

    logger = SamplingLogger()
    all_grads = []
    n_blocks = samp.get('n_blocks', 10)
    for block in make_progress_bar(range(n_blocks), desc="Sampling"):
        sampler.reset_acceptance_stats()
        samples, grads = sampler.sample(
            n_samples            = samp['n_samples'],
            sweep_size           = samp.get('sweep_size', None),
            with_log_derivatives = True,
        )
        log_psi = [machine.log_psi(s) for s in samples]
        logger.record(
            block           = block,
            acceptance_rate = sampler.acceptance_rate,
            mean_log_psi    = float(np.mean(np.real(log_psi))),
            grad_norm       = float(np.linalg.norm(np.mean(grads, axis=0))),
        )
        all_grads.append(grads)

    logger.summary(last_n=out.get('summary_blocks', 10))

    # ---- Save -----------------------------------------------------------------
    logger.save(os.path.join(results_dir, 'sampling_history.npz'))
    np.save(os.path.join(results_dir, 'log_derivatives.npy'),
            np.concatenate(all_grads))
    path = checkpointer.save(machine, step=n_blocks, tag='final')
    print(f"\n  Machine state saved: {path}")
    print("\nDone.")


if __name__ == '__main__':
    main()
