import geopandas
import numpy as np
import pytest
import shapely

from spweights.graph import Graph
from spweights.io import read_coordinates, read_units


class TestReadCoordinates:
    def setup_method(self):
        self.table = (
            "station,lon,lat,elevation\n"
            "oslo,10.75,59.91,23\n"
            "stockholm,18.07,59.33,28\n"
            "helsinki,24.94,60.17,17\n"
        )

    def test_ids_and_coordinates(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text(self.table)
        ids, coords = read_coordinates(path, id_column="station", as_geoseries=False)

        assert ids.tolist() == ["oslo", "stockholm", "helsinki"]
        np.testing.assert_array_equal(
            coords, [[10.75, 59.91], [18.07, 59.33], [24.94, 60.17]]
        )

    def test_positional_ids(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text(self.table)
        ids, coords = read_coordinates(path, as_geoseries=False)
        assert ids.tolist() == [0, 1, 2]
        assert coords.shape == (3, 2)

    def test_geoseries(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text(self.table)
        points = read_coordinates(
            path, id_column="station", as_geoseries=True, crs="EPSG:4326"
        )

        assert isinstance(points, geopandas.GeoSeries)
        assert points.crs.to_epsg() == 4326
        assert points["stockholm"].x == 18.07

        g = Graph.build_knn(points, k=1, metric="haversine")
        assert g.neighbors("oslo") == ("stockholm",)

    def test_default_carries_ids_into_knn(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text(self.table)
        points = read_coordinates(path, id_column="station")

        assert isinstance(points, geopandas.GeoSeries)
        assert points.crs is None
        g = Graph.build_knn(points, k=2, metric="haversine")
        assert g.unique_ids.tolist() == ["oslo", "stockholm", "helsinki"]
        assert g.neighbors("helsinki") == ("stockholm", "oslo")

    def test_custom_columns(self, tmp_path):
        path = tmp_path / "projected.csv"
        path.write_text("id;x;y\n1;500000;4000000\n2;501000;4000000\n")
        ids, coords = read_coordinates(
            path,
            x_column="x",
            y_column="y",
            id_column="id",
            sep=";",
            as_geoseries=False,
        )
        assert ids.tolist() == [1, 2]
        assert coords[1, 0] == 501000

    def test_missing_column(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text(self.table)
        with pytest.raises(ValueError, match="are not present in the table"):
            read_coordinates(path, x_column="x")
        with pytest.raises(ValueError, match="'code' is not a column"):
            read_coordinates(path, id_column="code")

    def test_duplicated_ids(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text("station,lon,lat\noslo,10.75,59.91\noslo,18.07,59.33\n")
        with pytest.raises(ValueError, match="need to be unique"):
            read_coordinates(path, id_column="station")

    def test_missing_values(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text("station,lon,lat\noslo,10.75,\nstockholm,18.07,59.33\n")
        with pytest.raises(ValueError, match="cannot contain missing values"):
            read_coordinates(path, id_column="station")


class TestReadUnits:
    def setup_method(self):
        self.units = geopandas.GeoDataFrame(
            {
                "code": ["n", "s", "e"],
                "population": [10, 20, 30],
            },
            geometry=[
                shapely.box(0, 1, 1, 2),
                shapely.box(0, 0, 1, 1),
                shapely.box(1, 0, 2, 2),
            ],
        )

    def test_read_units(self, tmp_path):
        path = tmp_path / "units.gpkg"
        self.units.to_file(path)

        units = read_units(path, id_column="code")
        assert units.index.tolist() == ["n", "s", "e"]
        assert units.population.tolist() == [10, 20, 30]

        # "e" meets "n" and "s" along parts of a single edge
        g = Graph.build_contiguity(units, rook=True, strict=True)
        assert g.neighbors("e") == ("n", "s")

    def test_positional_ids(self, tmp_path):
        path = tmp_path / "units.gpkg"
        self.units.to_file(path)
        assert read_units(path).index.tolist() == [0, 1, 2]

    def test_missing_id_column(self, tmp_path):
        path = tmp_path / "units.gpkg"
        self.units.to_file(path)
        with pytest.raises(ValueError, match="'fid' is not a column"):
            read_units(path, id_column="fid")
