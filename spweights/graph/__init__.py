from .base import (
    Graph,
    build_contiguity_graph,
    build_knn_graph,
    diff,
    read_csv,
    read_gal,
    symmetrize_check,
    to_row_standardized_weights,
)

__all__ = [
    "Graph",
    "build_contiguity_graph",
    "build_knn_graph",
    "diff",
    "read_csv",
    "read_gal",
    "symmetrize_check",
    "to_row_standardized_weights",
]
