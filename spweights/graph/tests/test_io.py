import numpy as np
import pytest

from spweights.graph import Graph, read_csv, read_gal


class TestCSV:
    def setup_method(self):
        self.path_graph = Graph.from_dicts(
            {"a": ["b"], "b": ["a", "c"], "c": ["b"], "d": []}
        )

    def test_layout(self, tmp_path):
        path = tmp_path / "weights.csv"
        self.path_graph.to_csv(path)

        lines = path.read_text().splitlines()
        assert len(lines) == 5
        assert lines[0] == ",a,b,c,d"
        assert lines[2] == "b,1.0,0.0,1.0,0.0"
        assert lines[4] == "d,0.0,0.0,0.0,0.0"

    def test_roundtrip_row_standardized(self, tmp_path, grid_with_island):
        g = Graph.build_contiguity(grid_with_island, rook=False).transform("R")
        path = tmp_path / "queen_r.csv"
        g.to_csv(path)
        back = read_csv(path)

        assert back.unique_ids.tolist() == g.unique_ids.tolist()
        assert back.isolates.tolist() == ["island"]
        assert back == g
        for unit in g.unique_ids:
            assert set(back.neighbors(unit)) == set(g.neighbors(unit))
            np.testing.assert_allclose(
                sorted(back.weights_dict[unit]), sorted(g.weights_dict[unit])
            )

    def test_roundtrip_integer_ids(self, tmp_path):
        coords = np.array([[0, 0], [100, 0], [300, 0], [600, 0]])
        g = Graph.build_knn(coords, k=2)
        path = tmp_path / "knn.csv"
        g.to_csv(path)
        back = read_csv(path)

        assert back.unique_ids.tolist() == [0, 1, 2, 3]
        assert back.unique_ids.dtype == np.int64
        assert back.asymmetry().equals(g.asymmetry())
        assert back == g

    def test_ids_kept_as_strings(self, tmp_path):
        g = Graph.from_dicts({"01": ["02"], "02": ["01"]})
        path = tmp_path / "padded.csv"
        g.to_csv(path)
        assert read_csv(path).unique_ids.tolist() == ["01", "02"]

    def test_float_format(self, tmp_path):
        path = tmp_path / "rounded.csv"
        self.path_graph.transform("V").to_csv(path, float_format="%.3f")
        assert path.read_text().splitlines()[1].startswith("a,0.000,1.")

    def test_not_square(self, tmp_path):
        path = tmp_path / "broken.csv"
        path.write_text(",a,b\na,0,1\n")
        with pytest.raises(ValueError, match="needs to be square"):
            read_csv(path)

    def test_different_labels(self, tmp_path):
        path = tmp_path / "broken.csv"
        path.write_text(",a,b\na,0,1\nc,1,0\n")
        with pytest.raises(ValueError, match="same ids labelling"):
            read_csv(path)

    def test_nonzero_diagonal(self, tmp_path):
        path = tmp_path / "diagonal.csv"
        path.write_text(",a,b\na,1,1\nb,1,0\n")
        with pytest.raises(ValueError, match=r"nonzero diagonal cells for \['a'\]"):
            read_csv(path)

    def test_no_unit_is_its_own_neighbor(self, tmp_path, grid_with_island):
        path = tmp_path / "queen.csv"
        Graph.build_contiguity(grid_with_island, rook=False).to_csv(path)
        back = read_csv(path)
        for unit in back.unique_ids:
            assert unit not in back.neighbors(unit)


class TestGAL:
    def test_layout(self, tmp_path):
        g = Graph.from_dicts({"a": ["b"], "b": ["a", "c"], "c": ["b"], "d": []})
        path = tmp_path / "path.gal"
        g.to_gal(path)
        assert path.read_text() == "4\na 1\nb\nb 2\na c\nc 1\nb\nd 0\n\n"

    def test_roundtrip(self, tmp_path, grid_with_island):
        g = Graph.build_contiguity(grid_with_island, rook=True)
        path = tmp_path / "rook.gal"
        g.to_gal(path)
        back = read_gal(path)

        assert back == g
        assert back.neighbors_dict == g.neighbors_dict

    def test_roundtrip_integer_ids(self, tmp_path):
        g = Graph.build_knn(np.array([[0, 0], [100, 0], [300, 0], [600, 0]]), k=1)
        path = tmp_path / "knn.gal"
        g.to_gal(path)
        back = read_gal(path)

        assert back.unique_ids.tolist() == [0, 1, 2, 3]
        assert back.neighbors_dict == g.neighbors_dict

    def test_header_with_polygon_id(self, tmp_path):
        path = tmp_path / "legacy.gal"
        path.write_text("0 2 shapefile POLY_ID\n1 1\n2\n2 1\n1\n")
        assert read_gal(path).neighbors_dict == {1: (2,), 2: (1,)}

    def test_inconsistent_cardinality(self, tmp_path):
        path = tmp_path / "broken.gal"
        path.write_text("2\n1 2\n2\n2 1\n1\n")
        with pytest.raises(ValueError, match="declares 2 neighbors but 1"):
            read_gal(path)

    def test_self_listed_as_neighbor(self, tmp_path):
        path = tmp_path / "broken.gal"
        path.write_text("2\n1 2\n1 2\n2 1\n1\n")
        with pytest.raises(ValueError, match="cannot be its own neighbor"):
            read_gal(path)
