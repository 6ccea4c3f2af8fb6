"""
Tests for the core Graph class: construction, validation, neighbor access,
transformations and derived properties.
"""

import numpy as np
import pandas as pd
import pytest

from spweights.common import DegenerateGraphError
from spweights.graph import Graph, to_row_standardized_weights


class TestBase:
    def setup_method(self):
        self.neighbor_dict = {"a": ["b"], "b": ["a", "c"], "c": ["b"], "d": []}
        self.g = Graph.from_dicts(self.neighbor_dict)

        self.adjacency = pd.Series(
            [1, 1, 1, 1, 0],
            name="weight",
            index=pd.MultiIndex.from_arrays(
                [["a", "b", "b", "c", "d"], ["b", "a", "c", "b", "d"]],
                names=["focal", "neighbor"],
            ),
        )

    def test_init(self):
        g = Graph(self.adjacency)
        assert g.transformation == "O"
        assert g.kind == "custom"
        assert g.params == {}
        assert g.malformed.empty
        pd.testing.assert_series_equal(g.adjacency, self.adjacency)

        with pytest.raises(TypeError, match="needs to be a pandas.Series"):
            Graph(self.adjacency.values)

        with pytest.raises(ValueError, match="needs to be a MultiIndex"):
            Graph(self.adjacency.rename_axis(["i", "j"]))

        with pytest.raises(ValueError, match="needs to be named 'weight'"):
            Graph(self.adjacency.rename("cost"))

        with pytest.raises(ValueError, match="needs to be of a numeric dtype"):
            Graph(self.adjacency.astype(str))

        with pytest.raises(ValueError, match="cannot contain missing values"):
            Graph(self.adjacency.replace(0, np.nan))

        with pytest.raises(ValueError, match="cannot contain duplicated links"):
            Graph(pd.concat([self.adjacency, self.adjacency.iloc[:1]]))

        with pytest.raises(ValueError, match="'transformation' needs to be one of"):
            Graph(self.adjacency, transformation="Z")

        with pytest.raises(ValueError, match="'kind' needs to be one of"):
            Graph(self.adjacency, kind="lattice")

    def test_self_loops(self):
        with pytest.raises(ValueError, match="cannot be its own neighbor"):
            Graph.from_dicts({0: [0, 1], 1: [0]})

        with pytest.raises(ValueError, match=r"links \['d'\] to themselves"):
            Graph(self.adjacency.replace({0: 0.5}))

        with pytest.raises(ValueError, match="cannot be its own neighbor"):
            Graph.from_arrays(["a", "a", "b"], ["a", "b", "a"], [1, 1, 1])

        # a zero-weight self-loop is the isolate marker
        g = Graph.from_dicts({0: [0], 1: []}, weights={0: [0], 1: []})
        assert g.isolates.tolist() == [0, 1]
        for unit in g.unique_ids:
            assert unit not in g.neighbors(unit)

    def test_neighbor_order_is_kept(self):
        g = Graph.from_arrays(
            ["b", "a", "b", "c"], ["c", "b", "a", "b"], [1, 1, 1, 1]
        )
        assert g.unique_ids.tolist() == ["b", "a", "c"]
        assert g.neighbors("b") == ("c", "a")

    def test_from_dicts(self):
        assert self.g.neighbors_dict == {
            "a": ("b",),
            "b": ("a", "c"),
            "c": ("b",),
            "d": (),
        }
        assert self.g.weights_dict == {
            "a": (1,),
            "b": (1, 1),
            "c": (1,),
            "d": (),
        }

        weighted = Graph.from_dicts(
            self.neighbor_dict, {"a": [2], "b": [2, 0.5], "c": [0.5], "d": []}
        )
        assert weighted.weights_dict["b"] == (2.0, 0.5)

    def test_from_weights_dict(self):
        g = Graph.from_weights_dict(
            {"a": {"b": 1}, "b": {"a": 1, "c": 1}, "c": {"b": 1}, "d": {}}
        )
        assert g == self.g

    def test_from_adjacency(self):
        frame = self.adjacency.reset_index()
        assert Graph.from_adjacency(frame) == self.g

        renamed = frame.rename(
            columns={"focal": "origin", "neighbor": "destination", "weight": "cost"}
        )
        g = Graph.from_adjacency(
            renamed, focal_col="origin", neighbor_col="destination", weight_col="cost"
        )
        assert g == self.g

        with pytest.raises(ValueError, match='"origin" was given'):
            Graph.from_adjacency(frame, focal_col="origin")

    def test_neighbors(self):
        assert self.g.neighbors("b") == ("a", "c")
        assert self.g.neighbors("d") == ()
        with pytest.raises(KeyError):
            self.g.neighbors("z")

    def test_getitem(self):
        pd.testing.assert_series_equal(
            self.g["b"],
            pd.Series([1, 1], index=pd.Index(["a", "c"], name="neighbor"), name="weight"),
        )
        assert self.g["d"].empty

    def test_isolates(self):
        assert self.g.isolates.tolist() == ["d"]
        assert self.g.cardinalities.tolist() == [1, 2, 1, 0]
        assert self.g.n == 4
        assert self.g.n_nodes == 4
        assert self.g.n_edges == 4
        assert self.g.nonzero == 4
        assert self.g.pct_nonzero == 25.0

    def test_sparse(self):
        expected = np.array(
            [
                [0, 1, 0, 0],
                [1, 0, 1, 0],
                [0, 1, 0, 0],
                [0, 0, 0, 0],
            ]
        )
        np.testing.assert_array_equal(self.g.sparse.toarray(), expected)

        # rows and columns follow unique_ids, not the sorted ids
        g = Graph.from_dicts({"z": ["a"], "a": ["z", "m"], "m": ["a"]})
        assert g.unique_ids.tolist() == ["z", "a", "m"]
        np.testing.assert_array_equal(
            g.sparse.toarray(), np.array([[0, 1, 0], [1, 0, 1], [0, 1, 0]])
        )

    def test_components(self):
        assert self.g.n_components == 2
        labels = self.g.component_labels
        assert labels["a"] == labels["b"] == labels["c"]
        assert labels["a"] != labels["d"]

    def test_copy(self):
        g = Graph.build_knn(np.array([[0, 0], [100, 0], [300, 0]]), k=1)
        copy = g.copy()
        assert copy.identical(g)
        assert copy.kind == "knn"
        assert copy.params == g.params
        assert copy._adjacency is not g._adjacency

    def test_adjacency_is_a_copy(self):
        adjacency = self.g.adjacency
        adjacency.iloc[0] = 100
        assert self.g.weights_dict["a"] == (1,)

    def test_repr(self):
        assert repr(self.g) == (
            "<Graph of 4 nodes and 4 nonzero edges indexed by\n ['a', 'b', 'c', 'd']>"
        )
        long = Graph.from_dicts({i: [] for i in range(10)})
        assert repr(long).endswith("[0, 1, 2, 3, 4, ...]>")

    def test_lag(self):
        np.testing.assert_array_equal(self.g.lag([1, 2, 3, 4]), [2, 4, 2, 0])
        np.testing.assert_array_equal(
            self.g.transform("R").lag([1, 2, 3, 4]), [2, 2, 2, 0]
        )
        with pytest.raises(ValueError, match="needs to match the number"):
            self.g.lag([1, 2, 3])


class TestTransform:
    def setup_method(self):
        self.g = Graph.from_dicts(
            {"a": ["b"], "b": ["a", "c"], "c": ["b"], "d": []}
        )

    def test_row_standardized(self):
        r = self.g.transform("R")
        assert r.transformation == "R"
        assert r.weights_dict == {"a": (1.0,), "b": (0.5, 0.5), "c": (1.0,), "d": ()}
        row_sums = r.adjacency.groupby(level=0, sort=False).sum()
        np.testing.assert_allclose(row_sums.values, [1, 1, 1, 0], atol=1e-9)
        # non-isolated units
        assert r.s0 == pytest.approx(3)

    def test_lowercase(self):
        assert self.g.transform("r").transformation == "R"

    def test_alias(self):
        assert to_row_standardized_weights(self.g).identical(self.g.transform("R"))

    def test_row_standardized_weighted(self):
        g = Graph.from_dicts(
            {"a": ["b", "c"], "b": ["a"], "c": ["a"]},
            {"a": [3, 1], "b": [2], "c": [5]},
        )
        assert g.transform("R").weights_dict["a"] == (0.75, 0.25)

    def test_row_sums_on_contiguity(self, grid_with_island):
        r = Graph.build_contiguity(grid_with_island, rook=False).transform("R")
        row_sums = r.adjacency.groupby(level=0, sort=False).sum()
        expected = np.ones(10)
        expected[-1] = 0
        np.testing.assert_allclose(row_sums.values, expected, atol=1e-9)
        assert r.s0 == pytest.approx(9)

    def test_double_standardized(self):
        d = self.g.transform("D")
        assert d.s0 == pytest.approx(1)
        assert d.weights_dict["b"] == (0.25, 0.25)

    def test_binary(self):
        b = self.g.transform("R").transform("B")
        assert b.weights_dict == self.g.weights_dict
        assert b.transformation == "B"

    def test_variance_stabilizing(self):
        v = self.g.transform("V")
        assert v.s0 == pytest.approx(self.g.n)
        assert v.weights_dict["b"][0] == pytest.approx(v.weights_dict["b"][1])
        assert v.weights_dict["d"] == ()

    def test_same_transformation(self):
        r = self.g.transform("R")
        assert r.transform("R").identical(r)

    def test_invalid(self):
        with pytest.raises(ValueError, match="is not supported"):
            self.g.transform("X")

    def test_metadata_survives(self, grid):
        r = Graph.build_contiguity(grid, rook=False).transform("R")
        assert r.kind == "contiguity"
        assert r.params["rule"] == "queen"


class TestDegenerate:
    def setup_method(self):
        self.isolates = Graph.from_dicts({0: [], 1: [], 2: []})

    def test_check_degenerate(self):
        with pytest.raises(DegenerateGraphError, match="All 3 units"):
            self.isolates.check_degenerate()

    def test_double_standardization(self):
        with pytest.raises(DegenerateGraphError):
            self.isolates.transform("D")

    def test_row_standardization_of_isolates(self):
        r = self.isolates.transform("R")
        assert r.s0 == 0
        assert r.isolates.tolist() == [0, 1, 2]

    def test_not_degenerate(self):
        g = Graph.from_dicts({0: [1], 1: [0], 2: []})
        assert g.check_degenerate() is g


class TestSymmetry:
    def test_asymmetry(self):
        g = Graph.from_dicts({"a": ["b", "c"], "b": ["a"], "c": []})
        assert not g.symmetrize_check()
        asymmetry = g.asymmetry()
        assert asymmetry.index.tolist() == ["a"]
        assert asymmetry.tolist() == ["c"]

    def test_weights_ignored(self):
        g = Graph.from_dicts({"a": ["b"], "b": ["a"]}, {"a": [1], "b": [5]})
        assert g.symmetrize_check()
        assert g.asymmetry().empty
        intrinsic = g.asymmetry(intrinsic=True)
        assert sorted(intrinsic.index.tolist()) == ["a", "b"]

    def test_symmetrize(self):
        g = Graph.from_dicts({"a": ["b", "c"], "b": ["a"], "c": []}).symmetrize()
        assert g.symmetrize_check()
        assert g.neighbors("c") == ("a",)
