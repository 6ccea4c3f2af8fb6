import numpy as np
import pandas as pd


def _cast_ids(ids):
    """Cast string ids to integers when this is loss-less, otherwise keep strings."""
    ids = pd.Index(ids, dtype=object).astype(str)
    try:
        as_int = ids.astype(np.int64)
    except (ValueError, OverflowError):
        return ids
    if (as_int.astype(str) == ids).all():
        return as_int
    return ids


def _to_csv(graph_obj, path, float_format=None):
    """Write the full weights matrix of a Graph to a delimited text file

    One row and one column per unit, both labelled by unit ids, a cell holding
    the weight of the link (0 for non-neighbors).

    Parameters
    ----------
    graph_obj : Graph
        Graph object
    path : str | path-like | file-like
        target passed to ``pandas.DataFrame.to_csv``
    float_format : str, optional
        format string for floating point weights, by default full precision
    """
    ids = graph_obj.unique_ids
    matrix = pd.DataFrame(
        graph_obj.sparse.toarray(),
        index=pd.Index(ids.astype(str), name=None),
        columns=ids.astype(str),
    )
    matrix.to_csv(path, float_format=float_format)


def _read_csv(path):
    """Read a full weights matrix written by :func:`_to_csv`

    Parameters
    ----------
    path : str | path-like | file-like
        source passed to ``pandas.read_csv``

    Returns
    -------
    tuple
        ``(heads, tails, weights, ids)`` of the nonzero cells, in row order
    """
    table = pd.read_csv(path, header=None, dtype=str, keep_default_na=False)
    if table.shape[0] < 1 or table.shape[1] < 1:
        raise ValueError("The weights table is empty.")

    column_ids = table.iloc[0, 1:].tolist()
    row_ids = table.iloc[1:, 0].tolist()
    if len(column_ids) != len(row_ids) or set(column_ids) != set(row_ids):
        raise ValueError(
            "The weights table needs to be square with the same ids labelling "
            "rows and columns."
        )
    if len(set(row_ids)) != len(row_ids):
        raise ValueError("The ids labelling the weights table need to be unique.")

    values = table.iloc[1:, 1:].astype(float)
    values.index = row_ids
    values.columns = column_ids
    values = values.loc[row_ids, row_ids]

    matrix = values.to_numpy()
    diagonal = np.flatnonzero(np.diag(matrix))
    if diagonal.shape[0]:
        raise ValueError(
            "A unit cannot be its own neighbor. The weights table has nonzero "
            f"diagonal cells for {[row_ids[i] for i in diagonal]}."
        )

    ids = _cast_ids(row_ids)
    heads_ix, tails_ix = np.nonzero(matrix)
    ids_array = np.asarray(ids)
    return (
        ids_array[heads_ix],
        ids_array[tails_ix],
        matrix[heads_ix, tails_ix],
        ids_array,
    )
