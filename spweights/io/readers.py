"""
Readers for the external sources of spatial units.

Parsing is delegated to ``geopandas`` (geometry files, e.g. shapefiles) and
``pandas`` (delimited text). These helpers only align the result on the unit
identifiers used to index graphs.
"""

import geopandas
import numpy
import pandas


def read_units(filepath, id_column=None, **kwargs):
    """Reads a geometry file into a GeoDataFrame indexed by unit id.

    Parameters
    ----------
    filepath : str
        The file path (shapefile, GeoPackage, GeoJSON, ...).
    id_column : str, optional
        Column holding the stable unit identifier. If None, the row position
        is used.
    **kwargs : dict
        Optional keyword arguments for ``geopandas.read_file()``.

    Returns
    -------
    geopandas.GeoDataFrame
        units indexed by ``id_column``
    """
    units = geopandas.read_file(filepath, **kwargs)
    return _set_ids(units, id_column)


def read_coordinates(
    filepath,
    x_column="lon",
    y_column="lat",
    id_column=None,
    as_geoseries=True,
    crs=None,
    **kwargs,
):
    """Reads a delimited text table of unit coordinates.

    Parameters
    ----------
    filepath : str | file-like
        The file path.
    x_column : str
        Column holding the x coordinate (longitude). Default is ``'lon'``.
    y_column : str
        Column holding the y coordinate (latitude). Default is ``'lat'``.
    id_column : str, optional
        Column holding the stable unit identifier. If None, the row position
        is used.
    as_geoseries : bool
        If True (default), return a Point ``geopandas.GeoSeries`` indexed by unit
        id, which the graph builders read the ids from. If False, return the
        ids and the coordinates separately.
    crs : str, optional
        CRS assigned to the GeoSeries, e.g. ``'EPSG:4326'``. Only used when
        ``as_geoseries=True``.
    **kwargs : dict
        Optional keyword arguments for ``pandas.read_csv()``.

    Returns
    -------
    geopandas.GeoSeries | tuple
        Point GeoSeries indexed by unit id, or ``(ids, coordinates)`` with ``ids``
        a pandas.Index and ``coordinates`` an array of shape ``(n, 2)`` when
        ``as_geoseries=False``.
    """
    table = pandas.read_csv(filepath, **kwargs)
    missing = [c for c in (x_column, y_column) if c not in table.columns]
    if missing:
        raise ValueError(
            f"Columns {missing} are not present in the table. "
            f"Available columns are: {table.columns.tolist()}."
        )
    table = _set_ids(table, id_column)

    coordinates = table[[x_column, y_column]].to_numpy(dtype=float)
    if numpy.isnan(coordinates).any():
        raise ValueError("The coordinate table cannot contain missing values.")

    if as_geoseries:
        return geopandas.GeoSeries(
            geopandas.points_from_xy(coordinates[:, 0], coordinates[:, 1]),
            index=table.index,
            crs=crs,
        )
    return table.index, coordinates


def _set_ids(frame, id_column):
    if id_column is None:
        return frame
    if id_column not in frame.columns:
        raise ValueError(
            f"'{id_column}' is not a column of the table. "
            f"Available columns are: {frame.columns.tolist()}."
        )
    frame = frame.set_index(id_column)
    if frame.index.has_duplicates:
        raise ValueError(f"The values of '{id_column}' need to be unique.")
    return frame
