from ._csv import _cast_ids


def _read_gal(path):
    """Read a GAL neighbor list

    The header is either ``n`` or the legacy ``0 n shapefile ID_FIELD`` form.
    Each unit takes two lines: ``id cardinality`` and its neighbor ids.

    Parameters
    ----------
    path : str | path-like
        path to the GAL file

    Returns
    -------
    dict
        ``{focal: [neighbor, ...]}`` with ids cast to int when loss-less
    """
    with open(path) as file:
        header = file.readline().split()
        n = int(header[1] if len(header) > 1 else header[0])

        neighbors = {}
        for _ in range(n):
            focal, cardinality = file.readline().split()
            linked = file.readline().split()
            if len(linked) != int(cardinality):
                raise ValueError(
                    f"Unit '{focal}' declares {cardinality} neighbors but "
                    f"{len(linked)} are listed."
                )
            neighbors[focal] = linked

    ids = _cast_ids(list(neighbors))
    lookup = dict(zip(neighbors, ids))
    return {
        lookup[focal]: [lookup.get(unit, unit) for unit in linked]
        for focal, linked in neighbors.items()
    }


def _to_gal(graph_obj, path):
    """Write the neighbor lists of a Graph to a GAL file. Weights are dropped."""
    lines = [str(graph_obj.n)]
    for focal, linked in graph_obj.neighbors_dict.items():
        lines.append(f"{focal} {len(linked)}")
        lines.append(" ".join(str(unit) for unit in linked))

    with open(path, "w") as file:
        file.write("\n".join(lines) + "\n")
