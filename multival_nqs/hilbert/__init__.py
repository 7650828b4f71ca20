# multival_nqs/hilbert/__init__.py
#
# Discrete configuration spaces ("Hilbert spaces") the ansatz is defined on.
# Exposed at the package level so you can write:
#
#   from multival_nqs.hilbert import Spin, Boson, CustomHilbert

from .base import Hilbert
from .spin import Spin
from .boson import Boson
from .custom import CustomHilbert

__all__ = ["Hilbert", "Spin", "Boson", "CustomHilbert"]
