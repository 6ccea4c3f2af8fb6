"""
sphere: Tools for working with spherical geometry.

All points are expected in ``(longitude, latitude)`` order, in decimal degrees.
"""

import math

import numpy
import scipy.constants

__all__ = [
    "RADIUS_EARTH_KM",
    "RADIUS_EARTH_MILES",
    "arcdist",
    "haversine",
    "pairwise_arcdist",
    "paired_arcdist",
    "arcdist2linear",
    "to_xyz",
    "is_lonlat",
]


RADIUS_EARTH_KM = 6371.0
RADIUS_EARTH_MILES = (RADIUS_EARTH_KM * scipy.constants.kilo) / scipy.constants.mile


def haversine(x):
    """Computes the haversine formula.

    Parameters
    ----------
    x : float | numpy.ndarray
        The angle in radians.

    Returns
    -------
    haversine_dist : float | numpy.ndarray
        The square of sine of half the radian (the haversine formula).

    Examples
    --------

    >>> haversine(math.pi) # is 180 in radians, hence sin of 90 = 1
    1.0

    """

    x = numpy.sin(numpy.asarray(x, dtype=float) / 2)

    haversine_dist = x * x

    if haversine_dist.ndim == 0:
        return float(haversine_dist)
    return haversine_dist


def _central_angle(lon0, lat0, lon1, lat1):
    """Central angle (radians) between points given in radians."""
    h = haversine(lat1 - lat0) + numpy.cos(lat0) * numpy.cos(lat1) * haversine(
        lon1 - lon0
    )
    # rounding can push h marginally outside [0, 1] for antipodal points
    h = numpy.clip(h, 0.0, 1.0)
    return 2 * numpy.arcsin(numpy.sqrt(h))


def arcdist(pt0, pt1, radius=RADIUS_EARTH_KM):
    """Arc distance between two points on a sphere.

    Parameters
    ----------
    pt0 : tuple
        A point assumed to be in form (longitude,latitude).
    pt1 : tuple
        A point assumed to be in form (longitude,latitude).
    radius : float
        The radius of a sphere. Default is Earth's radius in
        kilometers, ``RADIUS_EARTH_KM`` (``6371.0``). Earth's
        radius in miles, ``RADIUS_EARTH_MILES`` (``3958.76``)
        is also an option.

    Returns
    -------
    dist : float
        The arc distance between ``pt0`` and ``pt1`` using supplied ``radius``.

    Examples
    --------

    >>> pt0 = (0, 0)
    >>> pt1 = (180, 0)
    >>> d = arcdist(pt0, pt1, RADIUS_EARTH_MILES)
    >>> math.isclose(d, math.pi * RADIUS_EARTH_MILES)
    True

    """
    lon0, lat0 = map(math.radians, pt0)
    lon1, lat1 = map(math.radians, pt1)

    return float(_central_angle(lon0, lat0, lon1, lat1) * radius)


def pairwise_arcdist(coordinates, other=None, radius=RADIUS_EARTH_KM):
    """Matrix of arc distances between two sets of points on a sphere.

    Parameters
    ----------
    coordinates : numpy.ndarray
        array of shape ``(n, 2)`` with ``(longitude, latitude)`` rows
    other : numpy.ndarray, optional
        array of shape ``(m, 2)``. If None, ``coordinates`` is used.
    radius : float
        The radius of a sphere, by default ``RADIUS_EARTH_KM``.

    Returns
    -------
    numpy.ndarray
        array of shape ``(n, m)`` with arc distances in the units of ``radius``
    """
    a = numpy.radians(numpy.asarray(coordinates, dtype=float))
    b = a if other is None else numpy.radians(numpy.asarray(other, dtype=float))

    lon0, lat0 = a[:, 0][:, None], a[:, 1][:, None]
    lon1, lat1 = b[:, 0][None, :], b[:, 1][None, :]

    return _central_angle(lon0, lat0, lon1, lat1) * radius


def paired_arcdist(coordinates, other, radius=RADIUS_EARTH_KM):
    """Arc distances between matching rows of two arrays of points.

    Parameters
    ----------
    coordinates, other : numpy.ndarray
        arrays of shape ``(n, 2)`` with ``(longitude, latitude)`` rows
    radius : float
        The radius of a sphere, by default ``RADIUS_EARTH_KM``.

    Returns
    -------
    numpy.ndarray
        array of shape ``(n,)`` with the distance between row ``i`` of both
    """
    a = numpy.radians(numpy.asarray(coordinates, dtype=float))
    b = numpy.radians(numpy.asarray(other, dtype=float))
    return _central_angle(a[:, 0], a[:, 1], b[:, 0], b[:, 1]) * radius


def arcdist2linear(arc_dist, radius=RADIUS_EARTH_KM):
    """Convert an arc distance to the chord length in the unit sphere.

    Arc distances beyond half the circumference map onto the diameter, 2.0.

    Examples
    --------

    >>> d = arcdist((0, 0), (180, 0), RADIUS_EARTH_MILES)
    >>> float(arcdist2linear(d, RADIUS_EARTH_MILES))
    2.0
    """
    angle = numpy.minimum(numpy.asarray(arc_dist, dtype=float) / radius, math.pi)
    return 2 * numpy.sin(angle / 2)


def to_xyz(coordinates):
    """Convert ``(longitude, latitude)`` rows to points on the unit sphere.

    Euclidean distances between the returned points are chord lengths, which
    order pairs of points the same way as their arc distances.

    Parameters
    ----------
    coordinates : numpy.ndarray
        array of shape ``(n, 2)``

    Returns
    -------
    numpy.ndarray
        array of shape ``(n, 3)``
    """
    lon, lat = numpy.radians(numpy.asarray(coordinates, dtype=float)).T
    cos_lat = numpy.cos(lat)
    return numpy.column_stack(
        (cos_lat * numpy.cos(lon), cos_lat * numpy.sin(lon), numpy.sin(lat))
    )


def is_lonlat(coordinates):
    """Check whether all coordinates fall within the longitude/latitude range.

    Parameters
    ----------
    coordinates : numpy.ndarray
        array of shape ``(n, 2)``

    Returns
    -------
    bool
    """
    coordinates = numpy.asarray(coordinates, dtype=float)
    return bool(
        (
            (coordinates[:, 0] >= -180)
            & (coordinates[:, 0] <= 180)
            & (coordinates[:, 1] >= -90)
            & (coordinates[:, 1] <= 90)
        ).all()
    )
