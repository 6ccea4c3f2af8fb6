import warnings

import numpy
from scipy import spatial

from ..cg.sphere import arcdist2linear, is_lonlat, paired_arcdist, to_xyz
from ..common import LONLAT_SPAN_THRESHOLD, MetricMismatchWarning
from ._utils import _resolve_islands, _validate_geometry_input

_VALID_GEOMETRY_TYPES = ["Point"]

_METRIC_ALIASES = {
    "euclidean": "euclidean",
    "planar": "euclidean",
    "haversine": "haversine",
    "great_circle": "haversine",
}

# widening of tree search radii, exact distances decide afterwards
_SEARCH_SLACK = 1e-7


def _resolve_metric(metric):
    """Map a user facing metric name onto ``"euclidean"`` or ``"haversine"``."""
    try:
        return _METRIC_ALIASES[metric]
    except (KeyError, TypeError):
        raise ValueError(
            f"metric '{metric}' is not supported. Use one of "
            f"{list(_METRIC_ALIASES)}."
        ) from None


def _check_metric(coordinates, metric, crs=None):
    """Validate coordinates against the metric and flag likely mismatches.

    ``haversine`` requires longitude/latitude ranges. ``euclidean`` over
    geographic coordinates spanning more than ``LONLAT_SPAN_THRESHOLD`` degrees
    produces a :class:`MetricMismatchWarning`. Coordinates are geographic when
    their CRS says so. Without a CRS, they are assumed geographic when they fall
    within the longitude/latitude range and are not all whole numbers, which
    would rather indicate a planar lattice. The coordinates are never altered.
    """
    if metric == "haversine":
        if not is_lonlat(coordinates):
            raise ValueError(
                "'haversine' metric is limited to the range of latitude coordinates "
                "[-90, 90] and the range of longitude coordinates [-180, 180]."
            )
        return

    if coordinates.shape[0] < 2:
        return
    if crs is not None:
        geographic = crs.is_geographic
    else:
        geographic = is_lonlat(coordinates) and not numpy.all(
            numpy.mod(coordinates, 1) == 0
        )
    if not geographic:
        return

    span = numpy.ptp(coordinates, axis=0).max()
    if span > LONLAT_SPAN_THRESHOLD:
        warnings.warn(
            f"The coordinates are longitude/latitude and span {span:.2f} degrees, "
            "but a planar (euclidean) metric is used. Use metric='haversine' to "
            "measure great-circle distances.",
            MetricMismatchWarning,
            stacklevel=4,
        )


def _build_tree(coordinates, metric):
    """KDTree over points whose euclidean distances rank pairs as ``metric`` does.

    Great-circle distance is searched on the unit sphere, where the chord length
    grows with the arc distance.
    """
    if metric == "haversine":
        return spatial.KDTree(to_xyz(coordinates))
    return spatial.KDTree(coordinates)


def _pair_distances(coordinates, heads_ix, tails_ix, metric):
    """Exact distances of the pairs ``(heads_ix[i], tails_ix[i])``."""
    if metric == "haversine":
        return paired_arcdist(coordinates[heads_ix], coordinates[tails_ix])
    offsets = coordinates[heads_ix] - coordinates[tails_ix]
    return numpy.sqrt((offsets**2).sum(axis=1))


def _knn(coordinates, k, metric="euclidean", ids=None, weighted=False):
    """Generate adjacency arrays based on the k nearest neighbors

    Parameters
    ----------
    coordinates : numpy.ndarray, geopandas.GeoSeries, geopandas.GeoDataFrame
        point geometries or an array of shape ``(n, 2)`` of coordinates
    k : int
        number of nearest neighbors. If ``k`` is larger than the number of other
        observations, all other observations are used.
    metric : str (default: 'euclidean')
        ``"euclidean"`` (or ``"planar"``) for straight-line distance on the raw
        coordinate values, ``"haversine"`` (or ``"great_circle"``) for the arc
        distance in kilometers between ``(longitude, latitude)`` pairs.
    ids : numpy.ndarray (default: None)
        ids to use for each sample in coordinates.
    weighted : bool (default: False)
        If True, weights are the distances to the neighbors, otherwise binary.

    Returns
    -------
    (heads, tails, weights) : three vectors describing the links, neighbors of
        each focal ordered by ascending distance with ties broken by input order.
    """
    if int(k) != k or k < 1:
        raise ValueError(f"'k' needs to be a positive integer. {k} was given.")
    k = int(k)
    metric = _resolve_metric(metric)
    coordinates, ids, geoms = _validate_geometry_input(
        coordinates, ids=ids, valid_geometry_types=_VALID_GEOMETRY_TYPES
    )
    _check_metric(coordinates, metric, crs=geoms.crs)

    n = coordinates.shape[0]
    k = min(k, n - 1)
    if k == 0:
        return _resolve_islands(ids[:0], ids[:0], ids, numpy.array([], dtype=int))

    tree = _build_tree(coordinates, metric)
    # k + 1 to account for self; the farthest of them bounds the k-th neighbor,
    # so a ball of that radius also holds every unit tied with it
    bound, _ = tree.query(tree.data, k=k + 1)
    radius = bound[:, -1] * (1 + _SEARCH_SLACK) + _SEARCH_SLACK
    candidates = tree.query_ball_point(tree.data, r=radius)

    heads_ix = numpy.repeat(numpy.arange(n), [len(c) for c in candidates])
    tails_ix = numpy.concatenate([numpy.asarray(c, dtype=int) for c in candidates])
    # self is always excluded, even if another point is co-located
    not_self = heads_ix != tails_ix
    heads_ix, tails_ix = heads_ix[not_self], tails_ix[not_self]
    distances = _pair_distances(coordinates, heads_ix, tails_ix, metric)

    # by focal, then distance, ties in input order
    order = numpy.lexsort((tails_ix, distances, heads_ix))
    heads_ix, tails_ix, distances = heads_ix[order], tails_ix[order], distances[order]
    rank = numpy.arange(heads_ix.shape[0]) - numpy.searchsorted(heads_ix, heads_ix)
    nearest = rank < k
    heads_ix, tails_ix, distances = (
        heads_ix[nearest],
        tails_ix[nearest],
        distances[nearest],
    )

    if weighted:
        weights = distances
    else:
        weights = numpy.ones(heads_ix.shape[0], dtype=int)

    return ids[heads_ix], ids[tails_ix], weights


def _distance_band(coordinates, threshold, metric="euclidean", ids=None, binary=True):
    """Generate adjacency arrays based on a distance band

    Parameters
    ----------
    coordinates : numpy.ndarray, geopandas.GeoSeries, geopandas.GeoDataFrame
        point geometries or an array of shape ``(n, 2)`` of coordinates
    threshold : float
        distance band. Pairs with a distance ``<= threshold`` are neighbors.
    metric : str (default: 'euclidean')
        ``"euclidean"`` / ``"planar"`` or ``"haversine"`` / ``"great_circle"``
        (``threshold`` then in kilometers).
    ids : numpy.ndarray (default: None)
        ids to use for each sample in coordinates.
    binary : bool (default: True)
        If True, weights are 1, otherwise the distances.

    Returns
    -------
    (heads, tails, weights) : three vectors describing the links, with islands
        represented as a self-loop with zero weight.
    """
    if threshold < 0:
        raise ValueError(f"'threshold' needs to be non-negative. {threshold} was given.")
    metric = _resolve_metric(metric)
    coordinates, ids, geoms = _validate_geometry_input(
        coordinates, ids=ids, valid_geometry_types=_VALID_GEOMETRY_TYPES
    )
    _check_metric(coordinates, metric, crs=geoms.crs)

    tree = _build_tree(coordinates, metric)
    radius = float(arcdist2linear(threshold)) if metric == "haversine" else threshold
    pairs = tree.query_pairs(
        radius * (1 + _SEARCH_SLACK) + _SEARCH_SLACK, output_type="ndarray"
    ).reshape(-1, 2)
    distances = _pair_distances(coordinates, pairs[:, 0], pairs[:, 1], metric)
    within = distances <= threshold
    pairs, distances = pairs[within], distances[within]

    heads_ix = numpy.concatenate((pairs[:, 0], pairs[:, 1]))
    tails_ix = numpy.concatenate((pairs[:, 1], pairs[:, 0]))
    distances = numpy.concatenate((distances, distances))
    order = numpy.lexsort((tails_ix, heads_ix))
    heads_ix, tails_ix, distances = heads_ix[order], tails_ix[order], distances[order]

    if binary:
        weights = numpy.ones(heads_ix.shape[0], dtype=int)
    else:
        weights = distances

    return _resolve_islands(ids[heads_ix], ids[tails_ix], ids, weights)
