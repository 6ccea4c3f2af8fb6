import geopandas as gpd
import numpy as np
import shapely

from spweights.graph import Graph
from spweights.stats import moran_permutation_test, morans_i


def _lattice(size):
    cells = [
        shapely.box(col, row, col + 1, row + 1)
        for row in range(size)
        for col in range(size)
    ]
    return gpd.GeoDataFrame(geometry=cells, crs="EPSG:3857")


class TimeSuite:
    def setup(self, *args, **kwargs):
        self.gdf = _lattice(40)
        self.gdf_str = self.gdf.set_index("cell_" + self.gdf.index.astype(str))
        self.gdf_points = self.gdf.set_geometry(self.gdf.centroid)
        self.gdf_str_points = self.gdf_str.set_geometry(self.gdf_str.centroid)

        rng = np.random.default_rng(0)
        self.lonlat = np.column_stack(
            [rng.uniform(-10, 30, 1600), rng.uniform(35, 70, 1600)]
        )
        self.y = rng.normal(size=1600)

        self.graphs = {
            "small_int": Graph.build_knn(self.gdf_points, k=8),
            "large_int": Graph.build_knn(self.gdf_points, k=100),
            "small_str": Graph.build_knn(self.gdf_str_points, k=8),
            "large_str": Graph.build_knn(self.gdf_str_points, k=100),
            "queen": Graph.build_contiguity(self.gdf, rook=False),
            "rook": Graph.build_contiguity(self.gdf, rook=True),
        }

    def time_queen(self, idx, strict):
        Graph.build_contiguity(
            self.gdf if idx == "int" else self.gdf_str,
            rook=False,
            strict=strict,
        )

    time_queen.params = (["int", "str"], [True, False])
    time_queen.param_names = ["index", "strict"]

    def time_knn(self, idx, k):
        Graph.build_knn(self.gdf_points if idx == "int" else self.gdf_str_points, k=k)

    time_knn.params = (["int", "str"], [8, 100])
    time_knn.param_names = ["index", "k"]

    def time_knn_haversine(self, k):
        Graph.build_knn(self.lonlat, k=k, metric="haversine")

    time_knn_haversine.params = [8, 100]
    time_knn_haversine.param_names = ["k"]

    def time_sparse(self, idx, size):
        self.graphs[f"{size}_{idx}"].sparse

    time_sparse.params = (["int", "str"], ["small", "large"])
    time_sparse.param_names = ["index", "graph_size"]

    def time_row_standardize(self, graph):
        self.graphs[graph].transform("R")

    time_row_standardize.params = ["queen", "small_int", "large_str"]
    time_row_standardize.param_names = ["graph"]

    def time_symmetrize_check(self, graph):
        self.graphs[graph].symmetrize_check()

    time_symmetrize_check.params = ["queen", "large_int"]
    time_symmetrize_check.param_names = ["graph"]

    def time_diff(self):
        self.graphs["queen"].diff(self.graphs["rook"])

    def time_morans_i(self, graph):
        morans_i(self.y, self.graphs[graph])

    time_morans_i.params = ["queen", "large_int"]
    time_morans_i.param_names = ["graph"]

    def time_permutation_test(self, permutations):
        moran_permutation_test(
            self.y, self.graphs["queen"], permutations=permutations, seed=0
        )

    time_permutation_test.params = [99, 999]
    time_permutation_test.param_names = ["permutations"]
