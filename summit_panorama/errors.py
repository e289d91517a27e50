"""Error kinds raised by the panorama engine.

All errors are raised synchronously at the offending call and never retried.
They derive from ValueError (or RuntimeError for released tiles) so callers
that only know the builtin exceptions still catch them.
"""


class PanoramaError(Exception):
    """Base class for all panorama engine errors."""


class FormatError(PanoramaError, ValueError):
    """Malformed tile name or tile byte length."""


class OutOfRangeError(PanoramaError, ValueError):
    """Sample index or coordinate outside the covered extent."""


class DomainError(PanoramaError, ValueError):
    """Argument outside the domain of a function (e.g. profile distance)."""


class ConfigurationError(PanoramaError, ValueError):
    """Invalid parameters (non-positive field of view, distance, size or step)."""


class TileClosedError(PanoramaError, RuntimeError):
    """Query on an elevation tile whose buffer has been released."""
