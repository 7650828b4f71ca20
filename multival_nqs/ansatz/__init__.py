# multival_nqs/ansatz/__init__.py
#
# Exposes the neural network ansatze at the package level so you can write:
#
#   from multival_nqs.ansatz import RbmMultival

from .base import Ansatz
from .encoder import LocalValueEncoder
from .lookup import ThetaLookup
from .parameters import RbmParameters
from .rbm_multival import RbmMultival

__all__ = ["Ansatz", "LocalValueEncoder", "ThetaLookup", "RbmParameters",
           "RbmMultival"]
