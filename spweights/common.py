RTOL = 0.00001
ATOL = 1e-7

# span (in degrees) of lon/lat-looking coordinates above which planar
# distance is considered a likely metric mismatch
LONLAT_SPAN_THRESHOLD = 1.0

__all__ = [
    "RTOL",
    "ATOL",
    "LONLAT_SPAN_THRESHOLD",
    "MalformedGeometryError",
    "MismatchedUnitSetError",
    "ZeroVarianceError",
    "DegenerateGraphError",
    "MetricMismatchWarning",
    "MalformedGeometryWarning",
]


class MalformedGeometryError(ValueError):
    """Custom ValueError raised when input polygons are not valid simple polygons.

    The ``ids`` attribute holds the identifiers of the offending units.
    """

    def __init__(self, message, ids=None):
        super().__init__(message)
        self.ids = [] if ids is None else list(ids)


class MismatchedUnitSetError(ValueError):
    """Custom ValueError raised when two objects refer to different sets of ids."""

    pass


class ZeroVarianceError(ValueError):
    """Custom ValueError raised when a statistic is undefined for constant input."""

    pass


class DegenerateGraphError(ValueError):
    """Custom ValueError raised when every unit of a graph is an isolate."""

    pass


class MetricMismatchWarning(UserWarning):
    """Longitude/latitude coordinates appear to be treated as planar."""

    pass


class MalformedGeometryWarning(UserWarning):
    """Some geometries are invalid and contiguity may be inconsistent."""

    pass
