import string

import geopandas
import pytest
import shapely


def _lattice(nrows, ncols, ids=None):
    """Regular lattice of unit squares, row by row from the origin."""
    cells = [
        shapely.box(col, row, col + 1, row + 1)
        for row in range(nrows)
        for col in range(ncols)
    ]
    return geopandas.GeoDataFrame(geometry=cells, index=ids)


@pytest.fixture
def lattice():
    return _lattice


@pytest.fixture
def grid():
    return _lattice(3, 3, ids=list(string.ascii_lowercase[:9]))


@pytest.fixture
def grid_with_island():
    cells = list(_lattice(3, 3).geometry) + [shapely.box(10, 10, 11, 11)]
    return geopandas.GeoDataFrame(
        geometry=cells, index=list(string.ascii_lowercase[:9]) + ["island"]
    )
