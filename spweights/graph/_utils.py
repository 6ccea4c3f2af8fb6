import geopandas
import numpy as np
import pandas as pd
import shapely

from ..common import MismatchedUnitSetError


def _neighbor_dict_to_edges(neighbors, weights=None):
    """
    Flatten ``{focal: [neighbor, ...]}`` and optional ``{focal: [weight, ...]}``
    into (heads, tails, weights) arrays, keeping the order of both levels.
    A focal without neighbors becomes a self-loop with weight 0.
    """
    heads, tails, values = [], [], []
    for focal, linked in neighbors.items():
        linked = list(linked)
        if weights is None:
            weight = [1] * len(linked)
        else:
            weight = list(weights[focal])
            if len(weight) != len(linked):
                raise ValueError(
                    f"Unit '{focal}' has {len(linked)} neighbors but "
                    f"{len(weight)} weights."
                )
        if not linked:
            linked, weight = [focal], [0]
        heads.extend([focal] * len(linked))
        tails.extend(linked)
        values.extend(weight)

    heads = pd.Index(heads).to_numpy()
    tails = pd.Index(tails).to_numpy().astype(heads.dtype)
    return heads, tails, pd.to_numeric(np.asarray(values))


def _validate_geometry_input(geoms, ids=None, valid_geometry_types=None):
    """
    Normalise supported geometry containers to a GeoSeries indexed by ``ids``.

    ``geoms`` can be a GeoSeries, a GeoDataFrame, an array with a geometry
    dtype, a sequence of shapely geometries or an ``(n, 2)`` array of point
    coordinates.

    Returns ``(coordinates, ids, geoms)`` where ``coordinates`` holds every
    vertex and so may be longer than ``geoms`` for lines and polygons.
    """
    if isinstance(geoms, (geopandas.GeoSeries, geopandas.GeoDataFrame)):
        geoms = geoms.geometry
        ids = np.asarray(geoms.index if ids is None else ids)
        if ids.shape[0] != geoms.shape[0]:
            raise ValueError(
                f"The length of ids ({ids.shape[0]}) does not match "
                f"the number of geometries ({geoms.shape[0]})."
            )
        if pd.Index(ids).has_duplicates:
            raise ValueError("The ids of spatial units need to be unique.")
        if valid_geometry_types is not None:
            if isinstance(valid_geometry_types, str):
                valid_geometry_types = (valid_geometry_types,)
            valid_geometry_types = set(valid_geometry_types)
            if not set(geoms.geom_type) <= valid_geometry_types:
                raise ValueError(
                    "This Graph type is only well-defined for "
                    f"geom_types: {valid_geometry_types}."
                )
        geoms = geoms.set_axis(ids)
        return shapely.get_coordinates(geoms), ids, geoms

    if isinstance(geoms, (list, tuple)):
        geoms = np.asarray(geoms, dtype=object if _is_geometry_list(geoms) else None)

    if isinstance(geoms.dtype, geopandas.array.GeometryDtype) or (
        geoms.dtype == object and geoms.ndim == 1
    ):
        series = geopandas.GeoSeries(geoms)
    elif geoms.ndim == 2 and geoms.shape[1] == 2:
        series = geopandas.GeoSeries.from_xy(*np.asarray(geoms, dtype=float).T)
    else:
        raise ValueError(
            "input geometry type is not supported. Input must either be a "
            "geopandas.GeoSeries, geopandas.GeoDataFrame, a numpy array with a "
            "geometry dtype, or an array of coordinates."
        )
    return _validate_geometry_input(
        series, ids=ids, valid_geometry_types=valid_geometry_types
    )


def _is_geometry_list(values):
    return len(values) > 0 and all(
        isinstance(v, shapely.Geometry) or v is None for v in values
    )


def _evaluate_index(data):
    """Unit ids of any supported input, a RangeIndex if it carries none."""
    if isinstance(data, (pd.Series, pd.DataFrame)):
        return data.index
    return pd.RangeIndex(0, data.shape[0] if hasattr(data, "shape") else len(data))


def _resolve_islands(heads, tails, ids, weights):
    """
    Add a zero-weight self-loop for every id that is not a focal of any link
    and order the links by ``ids`` on both levels.
    """
    islands = pd.Index(ids).difference(pd.Index(heads))
    if len(islands):
        heads = np.hstack((np.asarray(heads), islands))
        tails = np.hstack((np.asarray(tails), islands))
        weights = np.hstack((np.asarray(weights), np.zeros(len(islands), dtype=int)))

    adjacency = pd.Series(
        weights,
        index=pd.MultiIndex.from_arrays([heads, tails], names=["focal", "neighbor"]),
        name="weight",
    )
    adjacency = adjacency.reindex(ids, level=0).reindex(ids, level=1)
    return (
        adjacency.index.get_level_values(0),
        adjacency.index.get_level_values(1),
        adjacency.values,
    )


def _check_unit_sets(left_ids, right_ids, operation="combine"):
    """Raise if two collections of ids do not describe the same set of units."""
    left_ids, right_ids = pd.Index(left_ids), pd.Index(right_ids)
    if left_ids.shape == right_ids.shape and left_ids.equals(right_ids):
        return
    only_left = left_ids.difference(right_ids)
    only_right = right_ids.difference(left_ids)
    if len(only_left) or len(only_right) or left_ids.shape != right_ids.shape:
        raise MismatchedUnitSetError(
            f"Cannot {operation} objects that are based on different sets of "
            f"unique IDs. {len(only_left)} IDs are only present on the left and "
            f"{len(only_right)} IDs only on the right."
        )
