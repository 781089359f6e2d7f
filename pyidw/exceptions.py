"""
Exception hierarchy for PyIDW.

Every error raised by the library on bad input derives from :class:`PyIDWError`
and from :class:`ValueError`, so callers can catch either the library-specific
base class or the generic built-in.
"""


class PyIDWError(Exception):
    """Base exception for all PyIDW errors."""


class InvalidExtentError(PyIDWError, ValueError):
    """Raised when grid bounds have zero or negative width/height or are not finite."""


class InvalidParameterError(PyIDWError, ValueError):
    """Raised when a numeric parameter is out of range (e.g. a non-positive power)."""


class InsufficientSamplesError(PyIDWError, ValueError):
    """
    Raised when an operation needs more samples than were supplied.

    Leave-one-out validation and the jackknife both remove one sample per pass,
    so they need at least two.
    """


class DegenerateQueryError(PyIDWError, ValueError):
    """Raised when a query cannot be answered because no samples remain."""
