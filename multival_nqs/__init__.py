# multival_nqs/__init__.py
#
# Multi-valued RBM wavefunction ansatz for variational Monte Carlo.
#
#   from multival_nqs import RbmMultival, Spin, MetropolisLocal

from .ansatz import RbmMultival, ThetaLookup
from .errors import (MultivalError, LocalValueError, SchemaMismatchError,
                     IncompatibleHilbertError)
from .hilbert import Hilbert, Spin, Boson, CustomHilbert
from .logcosh import log_cosh, sum_log_cosh
from .sampler import MetropolisLocal

__all__ = [
    "RbmMultival", "ThetaLookup",
    "MultivalError", "LocalValueError", "SchemaMismatchError",
    "IncompatibleHilbertError",
    "Hilbert", "Spin", "Boson", "CustomHilbert",
    "log_cosh", "sum_log_cosh",
    "MetropolisLocal",
]

__version__ = "0.1.0"
