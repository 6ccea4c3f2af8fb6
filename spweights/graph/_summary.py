import numpy as np

_WIDTH = 62


def _weight_sums(w):
    r"""S0, S1 and S2 of a sparse weights array

    .. math::

        S_0 = \sum_i \sum_j w_{ij}, \quad
        S_1 = \frac{1}{2} \sum_i \sum_j (w_{ij} + w_{ji})^2, \quad
        S_2 = \sum_i (w_{i \cdot} + w_{\cdot i})^2
    """
    s0 = float(w.sum())
    t = w + w.transpose()
    s1 = float(t.multiply(t).sum() / 2.0)
    row = np.asarray(w.sum(axis=1)).ravel()
    col = np.asarray(w.sum(axis=0)).ravel()
    s2 = float(((row + col) ** 2).sum())
    return s0, s1, s2


def _section(title, rows):
    lines = [title, "=" * _WIDTH]
    lines.extend(f"{label:<50}{value:>12}" for label, value in rows)
    lines.append("-" * _WIDTH)
    return lines


class GraphSummary:
    r"""Descriptive statistics of a Graph

    Collects the size, connectivity, symmetry, cardinality and weight
    statistics of a Graph together with the sums of weights used by the
    variance of Moran's I.

    Attributes
    ----------
    n_nodes : int
        number of units
    n_edges : int
        number of links (isolate self-loops excluded)
    n_components : int
        number of connected components
    n_isolates : int
        number of units without neighbors
    nonzero : int
        number of links with a nonzero weight
    pct_nonzero : float
        share of nonzero cells of the full weights matrix, in percent
    n_asymmetries : int
        number of links whose reciprocal link is missing
    cardinalities_mean, cardinalities_std : float
        mean and standard deviation of the number of neighbors
    cardinalities_min, cardinalities_max : float
        smallest and largest number of neighbors
    weights_mean, weights_min, weights_max : float
        statistics of the link weights
    s0, s1, s2 : float
        sums of weights, :math:`S_0` being the global sum of weights

    Examples
    --------
    >>> from spweights.graph import Graph
    >>> contiguity = Graph.from_dicts(
    ...     {"a": ["b"], "b": ["a", "c"], "c": ["b"], "d": []}
    ... )
    >>> summary = contiguity.summary()
    >>> summary.s0
    4.0
    >>> summary.n_isolates
    1
    """

    def __init__(self, graph):
        self._graph = graph

        self.n_nodes = graph.n_nodes
        self.n_edges = graph.n_edges
        self.n_components = graph.n_components
        self.n_isolates = len(graph.isolates)
        self.nonzero = graph.nonzero
        self.pct_nonzero = graph.pct_nonzero
        self.n_asymmetries = len(graph.asymmetry())

        cardinalities = graph.cardinalities
        self.cardinalities_mean = cardinalities.mean()
        self.cardinalities_std = cardinalities.std()
        self.cardinalities_min = cardinalities.min()
        self.cardinalities_max = cardinalities.max()

        weights = graph._adjacency.drop(graph.isolates, level="focal")
        if weights.empty:
            self.weights_mean = self.weights_min = self.weights_max = 0.0
        else:
            self.weights_mean = weights.mean()
            self.weights_min = weights.min()
            self.weights_max = weights.max()

        self.s0, self.s1, self.s2 = _weight_sums(graph.sparse)

    def __repr__(self):
        lines = [
            "Graph Summary Statistics",
            "=" * 24,
            "Graph indexed by:",
            f" {self._graph._get_ids_repr(57)}",
            "=" * _WIDTH,
        ]
        lines += _section(
            "Structure",
            [
                ("Number of nodes:", self.n_nodes),
                ("Number of edges:", self.n_edges),
                ("Number of connected components:", self.n_components),
                ("Number of isolates:", self.n_isolates),
                ("Number of non-zero edges:", self.nonzero),
                ("Percentage of non-zero edges:", f"{self.pct_nonzero:.2f}%"),
                ("Number of asymmetries:", self.n_asymmetries),
            ],
        )
        lines += _section(
            "Cardinalities",
            [
                ("Mean:", f"{self.cardinalities_mean:.2f}"),
                ("Standard deviation:", f"{self.cardinalities_std:.2f}"),
                ("Min:", f"{self.cardinalities_min:.0f}"),
                ("Max:", f"{self.cardinalities_max:.0f}"),
            ],
        )
        lines += _section(
            "Weights",
            [
                ("Mean:", f"{self.weights_mean:.3f}"),
                ("Min:", f"{self.weights_min:.3f}"),
                ("Max:", f"{self.weights_max:.3f}"),
            ],
        )
        lines += _section(
            "Sum of weights",
            [
                ("S0:", f"{self.s0:.3f}"),
                ("S1:", f"{self.s1:.3f}"),
                ("S2:", f"{self.s2:.3f}"),
            ],
        )
        return "\n".join(lines) + "\n"
