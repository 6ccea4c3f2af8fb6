import numpy as np


def _lag_spatial(graph, y):
    """Spatial lag operator

    Constructs spatial lag based on neighbor relations of the graph.


    Parameters
    ----------
    graph : Graph
        spweights.graph.Graph
    y : array
        numpy array with dimensionality conforming to graph


    Returns
    -------
    numpy.array
        array of numeric values for the spatial lag


    Examples
    --------
    >>> import numpy as np
    >>> from spweights.graph import Graph
    >>> from spweights.graph._spatial_lag import _lag_spatial
    >>> graph = Graph.from_dicts({"a": ["b"], "b": ["a", "c"], "c": ["b"]})
    >>> _lag_spatial(graph, np.array([1, 2, 3]))
    array([2., 4., 2.])

    Row standardization
    >>> _lag_spatial(graph.transform("r"), np.array([1, 2, 3]))
    array([2., 2., 2.])
    """
    sp = graph.sparse
    y = np.asarray(y)
    if y.shape[0] != sp.shape[0]:
        raise ValueError(
            "The length of `y` needs to match the number of observations "
            f"in Graph. Expected {sp.shape[0]}, got {y.shape[0]}."
        )
    return sp @ y.astype(float)
