"""Exceptions raised by the RBM engine.

Both concrete errors also derive from ValueError, so callers that only know about builtin exceptions can still catch
them.
"""


class RBMError(Exception):
    """Base class for everything the engine raises on purpose."""


class InvalidDimension(RBMError, ValueError):
    """A unit count, learning rate, epoch or sample count was not a positive number."""


class ShapeMismatch(RBMError, ValueError):
    """An input matrix is ragged, not 2D, or its width does not match the configured number of units."""
