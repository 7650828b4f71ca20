# multival_nqs/utils.py
#
# Infrastructure utilities: sampling logs, checkpointing, config loading and
# progress bars.
#
# Checkpoints are the JSON state records from serialization.py, so a saved
# machine can be reloaded onto any configuration space with matching
# dimensions (and is rejected loudly otherwise).

import os

import numpy as np
import yaml
from tqdm import tqdm

from . import serialization


# ============================================================
# Sampling Logger
# ============================================================

class SamplingLogger:
    """
    Records sampling metrics block by block.

    Tracked quantities:
      - acceptance_rates: MCMC acceptance fraction (healthy: 0.3-0.7)
      - mean_log_psi: mean Re(log psi) of the samples in the block
      - grad_norms: ||<O_k>||_2 of the mean log-derivative over the block

    Uses Python lists internally (O(1) append) and converts to numpy on demand.
    """

    def __init__(self):
        self.blocks           = []
        self.acceptance_rates = []
        self.mean_log_psi     = []
        self.grad_norms       = []

    def record(self, block: int, acceptance_rate: float, mean_log_psi: float,
               grad_norm: float) -> None:
        """Record metrics for one block of samples."""
        self.blocks.append(block)
        self.acceptance_rates.append(acceptance_rate)
        self.mean_log_psi.append(mean_log_psi)
        self.grad_norms.append(grad_norm)

    @property
    def history(self) -> dict:
        """Return all metrics as a dict of numpy arrays."""
        return {
            'blocks':           np.array(self.blocks),
            'acceptance_rates': np.array(self.acceptance_rates),
            'mean_log_psi':     np.array(self.mean_log_psi),
            'grad_norms':       np.array(self.grad_norms),
        }

    def save(self, path: str) -> None:
        """Save the history to a .npz file (numpy compressed archive)."""
        np.savez(path, **self.history)

    @classmethod
    def load(cls, path: str) -> 'SamplingLogger':
        """Load a history written by save()."""
        logger = cls()
        data = np.load(path)
        logger.blocks           = list(data['blocks'])
        logger.acceptance_rates = list(data['acceptance_rates'])
        logger.mean_log_psi     = list(data['mean_log_psi'])
        logger.grad_norms       = list(data['grad_norms'])
        return logger

    def summary(self, last_n: int = 10) -> None:
        """Print a formatted summary of the last n recorded blocks."""
        if not self.blocks:
            print("SamplingLogger: no data recorded yet.")
            return
        n = min(last_n, len(self.blocks))
        print(f"Sampling summary (last {n} blocks):")
        for i in range(-n, 0):
            print(
                f"  Block {self.blocks[i]:4d} | "
                f"accept = {self.acceptance_rates[i]:.3f} | "
                f"<Re log psi> = {self.mean_log_psi[i]:+.6f} | "
                f"|<O>| = {self.grad_norms[i]:.2e}"
            )


# ============================================================
# Checkpointing
# ============================================================

class Checkpointer:
    """
    Saves and loads machine states as JSON records.

    Serves three purposes:
      1. Fault tolerance: resume a run that crashed
      2. Handing parameters between the sampler and an external optimizer
      3. Reproducibility: share trained wavefunctions
    """

    def __init__(self, save_dir: str):
        self.save_dir = save_dir
        os.makedirs(save_dir, exist_ok=True)

    def save(self, machine, step: int, tag: str = None) -> str:
        """
        Save a machine's state record.

        Args:
            machine: RbmMultival (anything with state_dict()).
            step:    Current step (used in filename).
            tag:     Optional label like 'best' or 'final'.

        Returns:
            Path to the saved file.
        """
        suffix = tag if tag else f"step{step:04d}"
        path = os.path.join(self.save_dir, f"checkpoint_{suffix}.json")
        serialization.save_json(machine.state_dict(), path)
        return path

    def load(self, machine, path: str) -> None:
        """Load a checkpoint into a machine (validated against its hilbert)."""
        machine.load_state_dict(serialization.read_json(path))

    def latest(self) -> str | None:
        """Return path of the most recent checkpoint, or None."""
        files = [
            os.path.join(self.save_dir, f)
            for f in os.listdir(self.save_dir)
            if f.startswith("checkpoint_") and f.endswith(".json")
        ]
        if not files:
            return None
        return max(files, key=os.path.getmtime)


# ============================================================
# Configuration Loading
# ============================================================

def load_config(path: str) -> dict:
    """
    Load a YAML experiment config file and return as a dict.

    YAML supports inline comments, which keeps sampling configs
    self-documenting and reproducible.
    """
    with open(path, 'r') as f:
        config = yaml.safe_load(f)
    return config


# ============================================================
# Progress Bar
# ============================================================

def make_progress_bar(iterable, desc: str = "", total: int = None,
                      disable: bool = False, **kwargs):
    """Wrap an iterable with a tqdm progress bar."""
    return tqdm(iterable, desc=desc, total=total, disable=disable, **kwargs)
