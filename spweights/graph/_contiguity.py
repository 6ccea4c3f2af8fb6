import warnings
from collections import defaultdict

import numpy
import pandas
import shapely

from ..common import MalformedGeometryError, MalformedGeometryWarning
from ._utils import _neighbor_dict_to_edges, _resolve_islands, _validate_geometry_input

_VALID_GEOMETRY_TYPES = ["Polygon", "MultiPolygon", "LineString", "MultiLineString"]
_STRICT_GEOMETRY_TYPES = ["Polygon", "MultiPolygon"]

_MALFORMED_POLICIES = ("warn", "raise", "ignore")


def _vertex_set_intersection(geoms, rook=True, ids=None, by_perimeter=False):
    """
    Use a hash map inversion to construct a graph

    Parameters
    ---------
    geoms : geopandas.GeoDataFrame, geopandas.GeoSeries, numpy.array
        The container for the geometries to compute contiguity. Regardless of
        the containing type, the geometries within the container must be Polygons
        or MultiPolygons.
    rook : bool (default: True)
        whether to compute vertex set intersection contiguity by edge or by point.
        By default, vertex set contiguity is computed by edge. This means that at least
        two adjacent vertices on the polygon boundary must be shared.
    ids : numpy.ndarray (default: None)
        names to use for indexing the graph constructed from geoms. If None (default),
        an index is extracted from `geoms`. If `geoms` has no index, a pandas.RangeIndex
        is constructed.
    by_perimeter : bool (default: False)
        whether to compute perimeter-weighted contiguity. By default, this returns
        the raw length of perimeter overlap betwen contiguous polygons or lines.

    Returns
    -------
    (heads, tails, weights) : three vectors describing the links in the
        contiguity graph, with islands represented as a self-loop with
        zero weight.
    """
    _, ids, geoms = _validate_geometry_input(
        geoms, ids=ids, valid_geometry_types=_VALID_GEOMETRY_TYPES
    )

    # initialise the target map, preserving input order of ids
    graph = {idx: set() for idx in ids}

    # get all of the vertices for the input
    vertices, offsets = shapely.get_coordinates(geoms.geometry, return_index=True)
    # use offsets from exploded geoms to create edges to avoid a phantom edge between
    # parts of multipolygon
    _, single_part_offsets = shapely.get_coordinates(
        geoms.geometry.explode(ignore_index=True), return_index=True
    )
    # initialise the hashmap we want to invert
    vert_to_geom = defaultdict(set)

    if rook:
        for i, vertex in enumerate(vertices[:-1]):
            if single_part_offsets[i] != single_part_offsets[i + 1]:
                continue
            edge = tuple(sorted([tuple(vertex), tuple(vertices[i + 1])]))
            # a repeated vertex is not a segment of positive length
            if edge[0] == edge[1]:
                continue
            # edge to {polygons, with, this, edge}
            vert_to_geom[edge].add(offsets[i])
    else:
        for i, vertex in enumerate(vertices):
            # vertex to {polygons, with, this, vertex}
            vert_to_geom[tuple(vertex)].add(offsets[i])

    # invert vert_to_geom
    for nexus in vert_to_geom.values():
        if len(nexus) < 2:
            continue
        nexus_names = {ids[ix] for ix in nexus}
        for geom_ix in nexus:
            gid = ids[geom_ix]
            graph[gid] |= nexus_names - {gid}

    # neighbors listed in input order
    order = {idx: position for position, idx in enumerate(ids)}
    neighbors = {
        focal: sorted(linked, key=order.__getitem__) for focal, linked in graph.items()
    }
    heads, tails, weights = _neighbor_dict_to_edges(neighbors)

    if by_perimeter:
        weights = numpy.zeros(len(heads), dtype=float)
        non_isolates = heads != tails  # can't pass isolates to _perimeter_weigths
        weights[non_isolates] = _perimeter_weights(
            geoms, heads[non_isolates], tails[non_isolates]
        )

    return heads, tails, weights


def _queen(geoms, ids=None, by_perimeter=False):
    """
    Construct queen contiguity using point-set relations.

    Queen contiguity occurs when two polygons touch at least at a point.
    Overlapping polygons will not be considered as neighboring
    under this rule, since contiguity is strictly planar.

    Parameters
    ----------
    geoms : geopandas.GeoDataFrame, geopandas.GeoSeries, numpy.array
        The container for the geometries to compute contiguity. Regardless of
        the containing type, the geometries within the container must be Polygons
        or MultiPolygons.
    ids : numpy.ndarray (default: None)
        names to use for indexing the graph constructed from geoms.
    by_perimeter : bool (default: False)
        whether to compute perimeter-weighted contiguity.

    Returns
    -------
    (heads, tails, weights) : three vectors describing the links in the
        queen contiguity graph, with islands represented as a self-loop with
        zero weight.
    """
    _, ids, geoms = _validate_geometry_input(
        geoms, ids=ids, valid_geometry_types=_STRICT_GEOMETRY_TYPES
    )
    heads_ix, tails_ix = shapely.STRtree(geoms.values).query(
        geoms.values, predicate="touches"
    )
    heads_ix, tails_ix = _sort_pairs(heads_ix, tails_ix)
    heads, tails = ids[heads_ix], ids[tails_ix]

    if by_perimeter:
        weights = _perimeter_weights(geoms, heads, tails)
    else:
        weights = numpy.ones_like(heads_ix, dtype=int)

    return _resolve_islands(heads, tails, ids, weights=weights)


def _rook(geoms, ids=None, by_perimeter=False):
    """
    Construct rook contiguity using point-set relations.

    Rook contiguity occurs when two polygons touch over at least one edge.
    Overlapping polygons will not be considered as neighboring
    under this rule, since contiguity is strictly planar.

    Parameters
    ----------
    geoms : geopandas.GeoDataFrame, geopandas.GeoSeries, numpy.array
        The container for the geometries to compute contiguity. Regardless of
        the containing type, the geometries within the container must be Polygons
        or MultiPolygons.
    ids : numpy.ndarray (default: None)
        names to use for indexing the graph constructed from geoms.
    by_perimeter : bool (default: False)
        whether to compute perimeter-weighted contiguity.

    Returns
    -------
    (heads, tails, weights) : three vectors describing the links in the
        rook contiguity graph, with islands represented as a self-loop with
        zero weight.
    """
    _, ids, geoms = _validate_geometry_input(
        geoms, ids=ids, valid_geometry_types=_STRICT_GEOMETRY_TYPES
    )
    heads_ix, tails_ix = shapely.STRtree(geoms.values).query(geoms.values)
    heads_ix, tails_ix = _sort_pairs(heads_ix, tails_ix)
    mask = shapely.relate_pattern(
        geoms.values[heads_ix], geoms.values[tails_ix], "F***1****"
    )
    heads, tails = ids[heads_ix][mask], ids[tails_ix][mask]

    if by_perimeter:
        weights = _perimeter_weights(geoms, heads, tails)
    else:
        weights = numpy.ones_like(heads, dtype=int)

    return _resolve_islands(heads, tails, ids, weights)


def _sort_pairs(heads_ix, tails_ix):
    """Order tree query results by focal and then by neighbor position."""
    sorter = numpy.lexsort((tails_ix, heads_ix))
    return heads_ix[sorter], tails_ix[sorter]


def _perimeter_weights(geoms, heads, tails):
    """
    Compute the perimeter of neighbor pairs for edges describing a contiguity graph.

    Note that this result will be incorrect if the head and tail polygon overlap.
    If they do overlap, it is an "invalid" contiguity, so the length of the
    perimeter of the intersection may not express the correct value for relatedness
    in the contiguity graph.

    This is a private method, so strict conditions
    on input data are expected.
    """
    intersection = shapely.intersection(geoms[heads].values, geoms[tails].values)
    geom_types = shapely.get_type_id(shapely.get_parts(intersection))

    # check if the intersection resulted in (Multi)Polygon
    if numpy.isin(geom_types, [3, 6]).any():
        raise ValueError(
            "Some geometries overlap. Perimeter weights require planar coverage."
        )

    return shapely.length(intersection)


def _malformed_units(geoms, ids=None, on_malformed="warn"):
    """Identify units whose geometry is not valid according to shapely.

    Parameters
    ----------
    geoms : geopandas.GeoDataFrame, geopandas.GeoSeries, numpy.array
        geometries of the spatial units
    ids : array-like, optional
        ids of the units
    on_malformed : {"warn", "raise", "ignore"}
        policy applied when malformed geometries are found

    Returns
    -------
    pandas.Index
        ids of units with invalid geometry (empty when all are valid)
    """
    if on_malformed not in _MALFORMED_POLICIES:
        raise ValueError(
            f"'{on_malformed}' is not a valid option. Use one of "
            f"{list(_MALFORMED_POLICIES)}."
        )
    _, ids, geoms = _validate_geometry_input(geoms, ids=ids)
    valid = shapely.is_valid(geoms.values)
    malformed = pandas.Index(ids[~valid])

    if malformed.empty or on_malformed == "ignore":
        return malformed

    reasons = shapely.is_valid_reason(geoms.values[~valid])
    preview = "; ".join(
        f"{unit}: {reason}" for unit, reason in zip(malformed[:5], reasons[:5])
    )
    message = (
        f"{len(malformed)} of {len(ids)} geometries are not valid ({preview}). "
        "Contiguity for these units may be incomplete or asymmetric."
    )
    if on_malformed == "raise":
        raise MalformedGeometryError(message, ids=malformed)

    warnings.warn(message, MalformedGeometryWarning, stacklevel=4)
    return malformed
