from functools import cached_property

import numpy as np
import pandas as pd
from scipy import sparse

from ..common import DegenerateGraphError
from ._contiguity import _malformed_units, _queen, _rook, _vertex_set_intersection
from ._knn import _distance_band, _knn, _resolve_metric
from ._set_ops import SetOpsMixin
from ._spatial_lag import _lag_spatial
from ._summary import GraphSummary
from ._utils import _evaluate_index, _neighbor_dict_to_edges, _resolve_islands
from .io._csv import _read_csv, _to_csv
from .io._gal import _read_gal, _to_gal

ALLOWED_TRANSFORMATIONS = ("O", "B", "R", "D", "V")
GRAPH_KINDS = ("contiguity", "knn", "distance_band", "custom")

__all__ = [
    "Graph",
    "read_csv",
    "read_gal",
    "build_contiguity_graph",
    "build_knn_graph",
    "symmetrize_check",
    "diff",
    "to_row_standardized_weights",
]


class Graph(SetOpsMixin):
    """Graph class encoding spatial neighbor relations and their weights

    A Graph is immutable. Every operation returning a different neighbor
    structure or different weights returns a new Graph.
    """

    def __init__(
        self,
        adjacency,
        transformation="O",
        is_sorted=False,
        kind="custom",
        params=None,
        malformed=None,
    ):
        """Weights base class based on adjacency list

        It is recommenced to use one of the ``from_*`` or ``build_*`` constructors
        rather than invoking ``__init__`` directly.

        Each observation needs to be present in the focal,
        at least as a self-loop with a weight 0. A self-loop with any other
        weight is rejected.

        Parameters
        ----------
        adjacency : pandas.Series
            A MultiIndexed pandas.Series with ``"focal"`` and ``"neigbor"`` levels
            encoding adjacency, and values encoding weights. By convention,
            isolates are encoded as self-loops with a weight 0.
        transformation : str, default "O"
            weights transformation used to produce the table.

            - **O** -- Original
            - **B** -- Binary
            - **R** -- Row-standardization (global sum :math:`=n`)
            - **D** -- Double-standardization (global sum :math:`=1`)
            - **V** -- Variance stabilizing
        is_sorted : bool, default False
            ``adjacency`` needs to be grouped by focal in the order of ids in the
            original data from which the Graph is created. Grouping is performed
            by default based on the order of first appearance in the focal level,
            preserving the order of neighbors within each focal. Set
            ``is_sorted=True`` to skip this step.
        kind : str, default "custom"
            how the graph was constructed. One of ``"contiguity"``, ``"knn"``,
            ``"distance_band"``, ``"custom"``.
        params : dict, optional
            parameters of the constructor (e.g. ``{"k": 5, "metric": "haversine"}``)
        malformed : array-like, optional
            ids of units whose geometry was invalid at construction time
        """
        if not isinstance(adjacency, pd.Series):
            raise TypeError(
                f"The adjacency table needs to be a pandas.Series. {type(adjacency)}"
            )
        if not tuple(adjacency.index.names) == ("focal", "neighbor"):
            raise ValueError(
                "The index of the adjacency table needs to be a MultiIndex named "
                "['focal', 'neighbor']."
            )
        if not adjacency.name == "weight":
            raise ValueError(
                "The adjacency needs to be named 'weight'. "
                f"'{adjacency.name}' was given instead."
            )
        if not pd.api.types.is_numeric_dtype(adjacency):
            raise ValueError(
                "The 'weight' needs to be of a numeric dtype. "
                f"'{adjacency.dtype}' dtype was given instead."
            )
        if adjacency.isna().any():
            raise ValueError("The adjacency table cannot contain missing values.")
        if adjacency.index.has_duplicates:
            raise ValueError("The adjacency table cannot contain duplicated links.")
        self_loops = adjacency[
            adjacency.index.get_level_values(0) == adjacency.index.get_level_values(1)
        ]
        if (self_loops != 0).any():
            raise ValueError(
                "A unit cannot be its own neighbor. Self-loops are only allowed "
                "with a weight 0 to encode isolates, but the adjacency table links "
                f"{self_loops[self_loops != 0].index.get_level_values(0).tolist()} "
                "to themselves."
            )
        if transformation.upper() not in ALLOWED_TRANSFORMATIONS:
            raise ValueError(
                f"'transformation' needs to be one of {ALLOWED_TRANSFORMATIONS}. "
                f"'{transformation}' was given instead."
            )
        if kind not in GRAPH_KINDS:
            raise ValueError(
                f"'kind' needs to be one of {GRAPH_KINDS}. '{kind}' was given instead."
            )

        if not is_sorted:
            # group links by focal in order of first appearance, keep neighbor order
            focal = adjacency.index.get_level_values(0)
            codes = focal.unique().get_indexer(focal)
            adjacency = adjacency.iloc[np.argsort(codes, kind="stable")]

        self._adjacency = adjacency
        self.transformation = transformation.upper()
        self.kind = kind
        self.params = {} if params is None else dict(params)
        self.malformed = pd.Index([] if malformed is None else malformed)

    def _derive(self, adjacency, transformation=None, **kwargs):
        """New Graph sharing construction metadata of this one."""
        return Graph(
            adjacency,
            transformation=self.transformation
            if transformation is None
            else transformation,
            is_sorted=True,
            kind=kwargs.get("kind", self.kind),
            params=self.params,
            malformed=self.malformed,
        )

    def __getitem__(self, item):
        """Easy lookup based on focal index

        Parameters
        ----------
        item : hashable
            hashable represting an index value

        Returns
        -------
        pandas.Series
            subset of the adjacency table for `item`
        """
        if item in self.isolates:
            return pd.Series(
                [],
                index=pd.Index([], name="neighbor"),
                name="weight",
                dtype=self._adjacency.dtype,
            )
        return self._adjacency.loc[item]

    def _get_ids_repr(self, chars=72):
        if len(self.unique_ids) > 5:
            ids = str(self.unique_ids[:5].tolist())[:-1] + ", "
            if len(ids) > chars:
                ids = str(self.unique_ids[:5].tolist())[:chars]
            return f"{ids}...]"
        else:
            return self.unique_ids.tolist()

    def __repr__(self):
        return (
            f"<Graph of {self.n} nodes and {self.nonzero} nonzero edges indexed by\n"
            f" {self._get_ids_repr()}>"
        )

    def copy(self, deep=True):
        """Make a copy of this Graph's adjacency table and transformation

        Parameters
        ----------
        deep : bool, optional
            Make a deep copy of the adjacency table, by default True

        Returns
        -------
        Graph
            spweights.graph.Graph as a copy of the original
        """
        return self._derive(self._adjacency.copy(deep=deep))

    @cached_property
    def adjacency(self):
        """Return a copy of the adjacency list

        Returns
        -------
        pandas.Series
            Underlying adjacency list
        """
        return self._adjacency.copy()

    @classmethod
    def from_arrays(cls, focal_ids, neighbor_ids, weight, **kwargs):
        """Generate Graph from arrays of indices and weights of the same length

        The arrays needs to be sorted in a way ensuring that focal_ids.unique() is
        equal to the index of original observations from which the Graph is being built

        Parameters
        ----------
        focal_index : array-like
            focal indices
        neighbor_index : array-like
            neighbor indices
        weight : array-like
            weights
        **kwargs
            keyword arguments passed to the class constructor

        Returns
        -------
        Graph
            spweights.graph.Graph based on arrays
        """

        w = cls(
            pd.Series(
                weight,
                name="weight",
                index=pd.MultiIndex.from_arrays(
                    [focal_ids, neighbor_ids], names=["focal", "neighbor"]
                ),
            ),
            **kwargs,
        )

        return w

    @classmethod
    def from_adjacency(
        cls, adjacency, focal_col="focal", neighbor_col="neighbor", weight_col="weight"
    ):
        """Create a Graph from a pandas DataFrame formatted as an adjacency list

        Parameters
        ----------
        adjacency : pandas.DataFrame
            a dataframe formatted as an ajacency list. Should have columns
            "focal", "neighbor", and "weight", or columns that can be mapped
            to these (e.g. origin, destination, cost)
        focal_col : str, optional
            name of column holding focal/origin index, by default 'focal'
        neighbor_col : str, optional
            name of column holding neighbor/destination index, by default 'neighbor'
        weight_col : str, optional
            name of column holding weight values, by default 'weight'

        Returns
        -------
        Graph
            spweights.graph.Graph
        """
        for col in (focal_col, neighbor_col, weight_col):
            if col not in adjacency.columns:
                raise ValueError(
                    f'"{col}" was given, but the columns available in `adjacency` '
                    f"are: {adjacency.columns.tolist()}."
                )
        return cls.from_arrays(
            adjacency[focal_col].values,
            adjacency[neighbor_col].values,
            adjacency[weight_col].values,
        )

    @classmethod
    def from_weights_dict(cls, weights_dict):
        """Generate Graph from a dict of dicts

        Parameters
        ----------
        weights_dict : dictionary of dictionaries
            weights dictionary with the ``{focal: {neighbor: weight}}`` structure.

        Returns
        -------
        Graph
            spweights.graph.Graph based on weights dictionary of dictionaries
        """
        idx = {f: list(neighbors) for f, neighbors in weights_dict.items()}
        data = {f: list(neighbors.values()) for f, neighbors in weights_dict.items()}
        return cls.from_dicts(idx, data)

    @classmethod
    def from_dicts(cls, neighbors, weights=None):
        """Generate Graph from dictionaries of neighbors and weights

        Parameters
        ----------
        neighbors : dict
            dictionary of neighbors with the ``{focal: [neighbor1, neighbor2]}``
            structure
        weights : dict, optional
            dictionary of neighbors with the ``{focal: [weight1, weight2]}``
            structure. If None, assumes binary weights.

        Returns
        -------
        Graph
            spweights.graph.Graph based on dictionaries

        Examples
        --------
        >>> neighbors = {
        ...     'Africa': ['Asia'],
        ...     'Asia': ['Africa', 'Europe'],
        ...     'Australia': [],
        ...     'Europe': ['Asia'],
        ... }
        >>> connectivity = Graph.from_dicts(neighbors)
        >>> connectivity.neighbors('Asia')
        ('Africa', 'Europe')
        >>> connectivity.neighbors('Australia')
        ()
        """
        head, tail, weight = _neighbor_dict_to_edges(neighbors, weights=weights)
        return cls.from_arrays(head, tail, weight)

    @classmethod
    def build_contiguity(
        cls, geometry, rook=True, by_perimeter=False, strict=False, on_malformed="warn"
    ):
        """Generate Graph from geometry based on contiguity

        Contiguity builder assumes that all geometries are forming a coverage, i.e.
        a non-overlapping mesh and neighbouring geometries share only points or
        segments of their exterior boundaries.

        Parameters
        ----------
        geometry : array-like of shapely.Geometry objects
            Could be geopandas.GeoSeries or geopandas.GeoDataFrame, in which case the
            resulting Graph is indexed by the original index. If an array of
            shapely.Geometry objects is passed, Graph will assume a RangeIndex.
        rook : bool, optional
            Contiguity method. If True, two geometries are considered neighbours if
            they share at least one edge. If False, two geometries are considered
            neighbours if they share at least one vertex. By default True
        by_perimeter : bool, optional
            If True, ``weight`` represents the length of the shared boundary between
            adjacent units, by default False.
        strict : bool, optional
            Use the strict topological method. If False, the contiguity is determined
            based on shared coordinates or coordinate sequences representing edges.
            This assumes geometry coverage that is topologically correct. This method
            is faster but can miss some relations. If True, the contiguity is
            determined based on geometric relations that do not require precise
            topology. By default False.
        on_malformed : {"warn", "raise", "ignore"}
            Geometries that are not valid (self-intersecting rings, spikes, ...)
            are recorded in :attr:`Graph.malformed`. ``"warn"`` (default) also emits
            a ``MalformedGeometryWarning`` and ``"raise"`` aborts the build with a
            ``MalformedGeometryError``. The build itself is best-effort and the
            resulting graph may be asymmetric; see :meth:`Graph.asymmetry`.

        Returns
        -------
        Graph
            spweights.graph.Graph encoding contiguity weights

        Examples
        --------
        >>> import shapely
        >>> import geopandas as gpd
        >>> cells = gpd.GeoSeries(
        ...     [shapely.box(x, y, x + 1, y + 1) for y in range(2) for x in range(2)],
        ...     index=["sw", "se", "nw", "ne"],
        ... )
        >>> queen = Graph.build_contiguity(cells, rook=False)
        >>> queen.neighbors("sw")
        ('se', 'nw', 'ne')
        >>> rook = Graph.build_contiguity(cells, rook=True)
        >>> rook.neighbors("sw")
        ('se', 'nw')
        """
        ids = _evaluate_index(geometry)

        if hasattr(geometry, "geometry"):
            # potentially cast GeoDataFrame to GeoSeries
            geometry = geometry.geometry

        malformed = _malformed_units(geometry, ids=ids, on_malformed=on_malformed)
        kwargs = {
            "kind": "contiguity",
            "params": {
                "rule": "rook" if rook else "queen",
                "strict": strict,
                "by_perimeter": by_perimeter,
            },
            "malformed": malformed,
        }

        if strict:
            # use shapely-based constructors
            if rook:
                return cls.from_arrays(
                    *_rook(geometry, ids=ids, by_perimeter=by_perimeter), **kwargs
                )
            return cls.from_arrays(
                *_queen(geometry, ids=ids, by_perimeter=by_perimeter), **kwargs
            )

        # use vertex-based constructor
        return cls.from_arrays(
            *_vertex_set_intersection(
                geometry, rook=rook, ids=ids, by_perimeter=by_perimeter
            ),
            **kwargs,
        )

    @classmethod
    def build_knn(cls, data, k, metric="euclidean", weighted=False):
        """Generate Graph from geometry data based on k-nearest neighbors search

        Parameters
        ----------
        data : numpy.ndarray, geopandas.GeoSeries, geopandas.GeoDataFrame
            geometries over which to compute nearest neighbors. If a geopandas
            object with Point geometry is provided, the .geometry attribute is used.
            If a numpy.ndarray of a shape (n, 2) is used, it is assumed to contain
            x, y (longitude, latitude) coordinates. Unit ids are taken from the
            index of a geopandas object, an array gets positional ids. A table of
            coordinates read with :func:`spweights.io.read_coordinates` comes as a
            GeoSeries indexed by its id column.
        k : int
            number of nearest neighbors. If ``k`` is not smaller than the number of
            observations, every other observation becomes a neighbor.
        metric : str (default: 'euclidean')
            ``"euclidean"`` (alias ``"planar"``) measures straight-line distance on
            the raw coordinate values. ``"haversine"`` (alias ``"great_circle"``)
            measures great-circle distance in kilometers between longitude,
            latitude pairs on a sphere of radius ``RADIUS_EARTH_KM``.

            Planar distance on longitude/latitude values produces a different,
            self-consistent but geographically wrong graph. It is not an error;
            a ``MetricMismatchWarning`` is emitted when geographic coordinates span
            a non-trivial area. Coordinates are geographic if their CRS is, or,
            without a CRS, if they fall in the longitude/latitude range and are not
            all whole numbers.
        weighted : bool (default: False)
            store the distance to each neighbor as the weight instead of 1

        Returns
        -------
        Graph
            spweights.graph.Graph encoding KNN weights. Neighbors of each unit are
            ranked by ascending distance, ties broken by the input order. The
            relation is generally not symmetric.

        Examples
        --------
        >>> import numpy as np
        >>> points = np.array([[0, 0], [1, 0], [3, 0], [6, 0]])
        >>> knn1 = Graph.build_knn(points, k=1)
        >>> knn1.neighbors(2)
        (1,)
        >>> knn1.symmetrize_check()
        False
        """
        ids = _evaluate_index(data)

        head, tail, weight = _knn(
            data, k=k, metric=metric, ids=ids, weighted=weighted
        )

        return cls.from_arrays(
            head,
            tail,
            weight,
            kind="knn",
            params={"k": k, "metric": _resolve_metric(metric)},
        )

    @classmethod
    def build_distance_band(cls, data, threshold, metric="euclidean", binary=True):
        """Generate Graph from geometry based on a distance band

        Parameters
        ----------
        data : numpy.ndarray, geopandas.GeoSeries, geopandas.GeoDataFrame
            Point geometries or an array of shape (n, 2) of coordinates.
        threshold : float
            distance band. Units within ``threshold`` (inclusive) are neighbors.
            In kilometers if ``metric="haversine"``.
        metric : str (default: 'euclidean')
            ``"euclidean"`` / ``"planar"`` or ``"haversine"`` / ``"great_circle"``
        binary : bool, optional
            If True :math:`w_{ij}=1` if :math:`d_{i,j}<=threshold`, otherwise
            :math:`w_{i,j}=d_{i,j}`. By default True.

        Returns
        -------
        Graph
            spweights.graph.Graph encoding distance band weights
        """
        ids = _evaluate_index(data)

        head, tail, weight = _distance_band(
            data, threshold=threshold, metric=metric, ids=ids, binary=binary
        )

        return cls.from_arrays(
            head,
            tail,
            weight,
            kind="distance_band",
            params={"threshold": threshold, "metric": _resolve_metric(metric)},
        )

    def neighbors(self, unit_id):
        """Ordered neighbors of a unit

        Parameters
        ----------
        unit_id : hashable
            id of the focal unit

        Returns
        -------
        tuple
            ids of the neighbors (empty for an isolate)

        Raises
        ------
        KeyError
            if ``unit_id`` is not part of the Graph
        """
        return self.neighbors_dict[unit_id]

    @cached_property
    def neighbors_dict(self):
        """Get neighbors dictionary

        Notes
        -----
        It is recommended to work directly with :meth:`Graph.adjacency` rather than
        using the :meth:`Graph.neighbors_dict`.

        Returns
        -------
        dict
            dict of tuples representing neighbors
        """
        grouper = self._adjacency.groupby(level=0, sort=False)
        neighbors = {}
        for ix, chunk in grouper:
            if ix in self.isolates:
                neighbors[ix] = ()
            else:
                neighbors[ix] = tuple(chunk.index.get_level_values("neighbor"))
        return neighbors

    @cached_property
    def weights_dict(self):
        """Get weights dictionary

        Returns
        -------
        dict
            dict of tuples representing weights
        """
        grouper = self._adjacency.groupby(level=0, sort=False)
        weights = {}
        for ix, chunk in grouper:
            if ix in self.isolates:
                weights[ix] = ()
            else:
                weights[ix] = tuple(chunk)
        return weights

    @cached_property
    def sparse(self):
        """Return a scipy.sparse array (CSR)

        Rows and columns follow the order of :attr:`unique_ids`.

        Returns
        -------
        scipy.sparse.csr_array
            sparse representation of the adjacency
        """
        focal, neighbor = self.index_pairs
        rows = self.unique_ids.get_indexer(focal)
        cols = self.unique_ids.get_indexer(neighbor)
        sp = sparse.csr_array(
            (self._adjacency.values.astype(float), (rows, cols)),
            shape=(self.n, self.n),
        )
        sp.eliminate_zeros()
        return sp

    def transform(self, transformation):
        """Transformation of weights

        Parameters
        ----------
        transformation : str | callable
            Transformation method. The following are
            valid transformations.

            - **B** -- Binary
            - **R** -- Row-standardization (global sum :math:`=n`)
            - **D** -- Double-standardization (global sum :math:`=1`)
            - **V** -- Variance stabilizing

        Returns
        -------
        Graph
            transformed weights

        Raises
        ------
        ValueError
            Value error for unsupported transformation
        """
        transformation = transformation.upper()

        if self.transformation == transformation:
            return self.copy()

        if transformation == "R":
            standardized = (
                (
                    self._adjacency
                    / self._adjacency.groupby(level=0, sort=False).transform("sum")
                )
                .fillna(0)
                .values
            )  # isolate comes as NaN -> 0

        elif transformation == "D":
            total = self._adjacency.sum()
            if total == 0:
                raise DegenerateGraphError(
                    "Double-standardization requires a nonzero sum of weights."
                )
            standardized = (self._adjacency / total).values

        elif transformation == "B":
            standardized = self._adjacency.astype(bool).astype(int).values

        elif transformation == "V":
            s = self._adjacency.groupby(level=0, sort=False).transform(
                lambda group: group / np.sqrt((group**2).sum())
            )
            n_q = self.n / s.sum()
            standardized = (s * n_q).fillna(0).values  # isolate comes as NaN -> 0

        else:
            raise ValueError(
                f"Transformation '{transformation}' is not supported. "
                f"Use one of {ALLOWED_TRANSFORMATIONS[1:]}."
            )

        standardized_adjacency = pd.Series(
            standardized, name="weight", index=self._adjacency.index
        )
        return self._derive(standardized_adjacency, transformation=transformation)

    @cached_property
    def _components(self):
        """helper for n_components and component_labels"""
        return sparse.csgraph.connected_components(self.sparse)

    @cached_property
    def n_components(self):
        """Get a number of connected components

        Returns
        -------
        int
            number of components
        """
        return self._components[0]

    @cached_property
    def component_labels(self):
        """Get component labels per observation

        Returns
        -------
        pandas.Series
            Series of component labels
        """
        return pd.Series(
            self._components[1], index=self.unique_ids, name="component labels"
        )

    @cached_property
    def cardinalities(self):
        """Number of neighbors for each observation

        Returns
        -------
        pandas.Series
            Series with a number of neighbors per each observation
        """
        focal, neighbor = self.index_pairs
        links = pd.Series(focal != neighbor, index=self._adjacency.index)
        links = links | (self._adjacency != 0)
        cardinalities = links.groupby(level=0, sort=False).sum()
        cardinalities.name = "cardinalities"
        return cardinalities

    @cached_property
    def isolates(self):
        """Index of observations with no neighbors

        Isolates are encoded as a self-loop with
        the weight == 0 in the adjacency table.

        Returns
        -------
        pandas.Index
            Index with a subset of observations that do not have any neighbor
        """
        return self.cardinalities.index[self.cardinalities == 0]

    @cached_property
    def unique_ids(self):
        """Unique IDs used in the Graph"""
        return self._adjacency.index.get_level_values("focal").unique()

    @cached_property
    def n(self):
        """Number of observations."""
        return self.unique_ids.shape[0]

    @cached_property
    def n_nodes(self):
        """Number of nodes."""
        return self.unique_ids.shape[0]

    @cached_property
    def n_edges(self):
        """Number of edges."""
        return self._adjacency.shape[0] - self.isolates.shape[0]

    @cached_property
    def pct_nonzero(self):
        """Percentage of nonzero weights."""
        p = 100.0 * self.sparse.nnz / (1.0 * self.n**2)
        return p

    @cached_property
    def nonzero(self):
        """Number of nonzero weights."""
        return int((self._adjacency != 0).sum())

    @cached_property
    def s0(self):
        r"""Global sum of weights

        .. math::

               s0=\sum_i \sum_j w_{i,j}

        For row-standardized weights this equals the number of units that have
        at least one neighbor.
        """
        return float(self._adjacency.sum())

    @cached_property
    def index_pairs(self):
        """Return focal-neighbor index pairs

        Returns
        -------
        tuple(Index, Index)
            tuple of two aligned pandas.Index objects encoding all edges of the Graph
            by their nodes
        """
        focal = self._adjacency.index.get_level_values("focal")
        neighbor = self._adjacency.index.get_level_values("neighbor")
        return (focal, neighbor)

    def asymmetry(self, intrinsic=False):
        r"""Asymmetry check.

        Parameters
        ----------
        intrinsic : bool, optional
            Default is ``False``, where symmetry is defined as:

            .. math::

                i \in N_j \ \& \ j \in N_i

            where :math:`N_j` is the set of neighbors for :math:`j`. Only the
            presence of a link with a non-zero weight matters. If ``intrinsic``
            is ``True``, symmetry requires equal weights:

            .. math::

                w_{i,j} == w_{j,i}

        Returns
        -------
        pandas.Series
            A ``Series`` of ``(i,j)`` pairs of asymmetries, where ``i`` is the
            focal (index) and ``j`` is the neighbor (value). For the default
            presence-based check, ``j`` is listed by ``i`` but ``i`` is not listed
            by ``j``. An empty ``Series`` is returned if no asymmetries are found.
        """
        if intrinsic:
            wd = self.sparse.transpose() - self.sparse
            rows, cols = wd.nonzero()
        else:
            binary = (self.sparse != 0).astype(int)
            one_way = binary - binary.multiply(binary.transpose())
            one_way = sparse.csr_array(one_way)
            one_way.eliminate_zeros()
            rows, cols = one_way.nonzero()

        order = np.lexsort((cols, rows))
        rows, cols = rows[order], cols[order]
        return pd.Series(
            self.unique_ids[cols],
            index=pd.Index(self.unique_ids[rows], name="focal"),
            name="neighbor",
            dtype=self.unique_ids.dtype,
        )

    def symmetrize_check(self):
        """Whether every link has its reciprocal link

        Returns True if, for every unit ``a`` and each of its neighbors ``b``,
        ``a`` is a neighbor of ``b``. Weights are ignored. Read-only diagnostic;
        contiguity graphs built from clean coverages are symmetric, KNN graphs
        generally are not.

        Returns
        -------
        bool
        """
        return self.asymmetry(intrinsic=False).empty

    def symmetrize(self):
        """Binary graph containing every link and its reciprocal

        The result is no longer a graph of the original ``kind``. It is tagged
        ``"custom"`` and its ``params`` record the original kind under
        ``"symmetrized_from"``.

        Returns
        -------
        Graph
            union of the graph and its transpose with binary weights
        """
        links = self._links
        reverse = pd.MultiIndex.from_arrays(
            [links.get_level_values(1), links.get_level_values(0)],
            names=["focal", "neighbor"],
        )
        symmetric = self._from_links(links.union(reverse))
        return Graph(
            symmetric._adjacency,
            transformation="B",
            is_sorted=True,
            kind="custom",
            params={**self.params, "symmetrized_from": self.kind},
            malformed=self.malformed,
        )

    def check_degenerate(self):
        """Raise if the graph has no link at all

        Raises
        ------
        DegenerateGraphError
            if every unit is an isolate, making weights and statistics trivially
            zero or undefined

        Returns
        -------
        Graph
            the graph itself, to allow chaining
        """
        if self.nonzero == 0:
            raise DegenerateGraphError(
                f"All {self.n} units of the Graph are isolates. Weights and "
                "statistics derived from it are trivially zero or undefined."
            )
        return self

    def summary(self):
        """Summary of the Graph properties

        Returns a :class:`GraphSummary` object with the statistical attributes
        summarising the Graph and its basic properties. See the docstring of the
        :class:`GraphSummary` for details and all the available attributes.

        Returns
        -------
        GraphSummary
            a class containing a summary statisitcs about the graph
        """
        return GraphSummary(self)

    def lag(self, y):
        """Spatial lag operator

        Constructs spatial lag based on neighbor relations of the graph.

        Parameters
        ----------
        y : array
            numpy array with dimensionality conforming to the graph

        Returns
        -------
        numpy.ndarray
            array of numeric values for the spatial lag
        """
        return _lag_spatial(self, y)

    def to_csv(self, path, float_format=None):
        """Save the full weights matrix to a delimited text file

        The table has one row and one column per unit, a header row and a header
        column of unit ids and the weight of each link in the cells (0 for
        non-neighbors). Reading it back with :func:`read_csv` reproduces the
        adjacency of the graph.

        Parameters
        ----------
        path : str | path-like | file-like
            target passed to ``pandas.DataFrame.to_csv``
        float_format : str, optional
            format string for floating point weights, by default full precision

        See also
        --------
        read_csv
        """
        _to_csv(self, path, float_format=float_format)

    def to_gal(self, path):
        """Save Graph to a GAL file

        Graph is serialized to the GAL file format. Weights are not stored.

        Parameters
        ----------
        path : str
            path to the GAL file

        See also
        --------
        read_gal
        """
        _to_gal(self, path)


def read_csv(path):
    """Read Graph from a full weights matrix table

    Nonzero cells become links carrying the cell value as weight. The reader
    tries to infer integer ids; otherwise ids are kept as strings.

    Parameters
    ----------
    path : str | path-like | file-like
        table written by :meth:`Graph.to_csv`

    Returns
    -------
    Graph
        deserialized Graph
    """
    heads, tails, weights, ids = _read_csv(path)
    return Graph.from_arrays(*_resolve_islands(heads, tails, ids, weights))


def read_gal(path):
    """Read Graph from a GAL file

    The reader tries to infer the dtype of IDs. In case of unsuccessful
    casting to int, it will fall back to string.

    Parameters
    ----------
    path : str
        path to a file

    Returns
    -------
    Graph
        deserialized Graph
    """
    neighbors = _read_gal(path)
    return Graph.from_dicts(neighbors)


def build_contiguity_graph(units, rule="queen", strict=False, on_malformed="warn"):
    """Contiguity graph of polygon units

    Parameters
    ----------
    units : geopandas.GeoDataFrame | geopandas.GeoSeries | array-like
        polygons indexed by unit id
    rule : {"queen", "rook"}
        ``"queen"``: boundaries share at least a point; ``"rook"``: boundaries
        share a segment of positive length
    strict : bool
        use shapely predicates instead of shared vertices, see
        :meth:`Graph.build_contiguity`
    on_malformed : {"warn", "raise", "ignore"}
        policy for invalid geometries

    Returns
    -------
    Graph
    """
    if rule not in ("queen", "rook"):
        raise ValueError(f"'rule' needs to be 'queen' or 'rook'. '{rule}' was given.")
    return Graph.build_contiguity(
        units, rook=rule == "rook", strict=strict, on_malformed=on_malformed
    )


def build_knn_graph(points, k, metric="euclidean"):
    """K-nearest-neighbor graph of point units

    See :meth:`Graph.build_knn`.
    """
    return Graph.build_knn(points, k=k, metric=metric)


def symmetrize_check(graph):
    """Whether every link of ``graph`` has its reciprocal link."""
    return graph.symmetrize_check()


def diff(left, right):
    """Per unit symmetric difference of the neighbor sets of two graphs.

    Raises ``MismatchedUnitSetError`` if the graphs cover different ids.
    """
    return left.diff(right)


def to_row_standardized_weights(graph):
    """Row-standardized weights of ``graph``.

    Each link of a unit with ``d`` links gets ``w / sum(w)`` (``1/d`` for binary
    graphs); isolates keep a zero row.
    """
    return graph.transform("R")
