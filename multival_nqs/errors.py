# multival_nqs/errors.py
#
# Exceptions raised by the ansatz and its state serializer.
#
# Every failure in this package is a local contract violation (bad input,
# incompatible saved state), never a transient condition, so nothing here is
# meant to be retried. All of them subclass ValueError so callers that already
# catch ValueError for bad input keep working.


class MultivalError(ValueError):
    """Base class for all errors raised by multival_nqs."""


class LocalValueError(MultivalError):
    """A local value is not in the configuration space's set of legal values."""


class SchemaMismatchError(MultivalError):
    """A saved state record does not describe this kind of machine."""


class IncompatibleHilbertError(MultivalError):
    """A saved state was built for a different configuration space."""
