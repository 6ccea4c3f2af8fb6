import numpy as np
import pandas

from ._utils import _check_unit_sets, _resolve_islands


class SetOpsMixin:
    """
    This implements common useful set operations on graphs as dunder methods.

    Links are compared by their ``(focal, neighbor)`` labels, irrespective of
    the weight value. Isolates carry no links.
    """

    def __le__(self, other):  # <=
        return self.issubgraph(other)

    def __ge__(self, other):  # >=
        return other.issubgraph(self)

    def __lt__(self, other):  # <
        return self.issubgraph(other) & (len(self) < len(other))

    def __gt__(self, other):  # >
        return other.issubgraph(self) & (len(self) > len(other))

    def __eq__(self, other):  # ==
        return self.label_equals(other)

    def __ne__(self, other):  # not ==
        return not self.label_equals(other)

    def __and__(self, other):  # &
        return self.intersection(other)

    def __or__(self, other):  # |
        return self.union(other)

    def __xor__(self, other):  # ^
        return self.symmetric_difference(other)

    def __iand__(self, other):
        raise TypeError("Graphs are immutable")

    def __ior__(self, other):
        raise TypeError("Graphs are immutable")

    def __len__(self):
        return self.n_edges

    @property
    def _links(self):
        """MultiIndex of (focal, neighbor) pairs excluding isolate self-loops."""
        index = self._adjacency.index
        return index[~index.get_level_values("focal").isin(self.isolates)]

    def _from_links(self, links):
        from .base import Graph

        return Graph.from_arrays(
            *_resolve_islands(
                links.get_level_values(0),
                links.get_level_values(1),
                self.unique_ids,
                np.ones(links.shape[0], dtype=np.int8),
            )
        )

    def intersects(self, right):
        """
        Returns True if this graph and ``right`` share at least one link,
        irrespective of weights value.
        """
        return len(self._links.intersection(right._links)) > 0

    def intersection(self, right):
        """
        Returns a binary Graph, that includes only those neighbor pairs that exist
        in both this graph and ``right``.
        """
        _check_unit_sets(self.unique_ids, right.unique_ids, "intersect")
        return self._from_links(self._links.intersection(right._links))

    def symmetric_difference(self, right):
        """
        Returns a binary Graph with the links present in exactly one of this
        graph and ``right``.

        Per unit, the result lists the symmetric difference of the two neighbor
        sets. Units whose neighbor sets are identical become isolates.

        Raises
        ------
        MismatchedUnitSetError
            if the two graphs are not built over the same unique IDs
        """
        _check_unit_sets(self.unique_ids, right.unique_ids, "do symmetric difference of")
        return self._from_links(self._links.symmetric_difference(right._links))

    def diff(self, right):
        """Per unit symmetric difference of neighbor sets.

        Used to quantify the effect of changing the construction method (for
        example a planar vs a great-circle metric) on the neighbor structure.

        Parameters
        ----------
        right : Graph
            graph built over the same unique IDs

        Returns
        -------
        Graph
            binary graph; units with identical neighbor sets are isolates

        Raises
        ------
        MismatchedUnitSetError
            if the two graphs are not built over the same unique IDs
        """
        return self.symmetric_difference(right)

    def union(self, right):
        """
        Provide the union of two Graph objects, collecting all links that are in
        either graph.
        """
        _check_unit_sets(self.unique_ids, right.unique_ids, "do union of")
        return self._from_links(self._links.union(right._links))

    def difference(self, right):
        """
        Provide the set difference between this graph and the graph on the right.
        This returns all links in this graph that are not in the right graph.
        """
        _check_unit_sets(self.unique_ids, right.unique_ids, "do difference of")
        return self._from_links(self._links.difference(right._links))

    def issubgraph(self, right):
        """
        Return True if every link in this Graph also occurs in the right Graph.
        Isolates are ignored.
        """
        return len(self._links.difference(right._links)) == 0

    def label_equals(self, right):
        """
        Check that two graphs have the same labels. This requires them to have
        1. the same edge labels and node labels
        2. with the same weights

        This is implemented by comparing the underlying adjacency series
        without respect to ordering.
        """
        try:
            pandas.testing.assert_series_equal(
                self._adjacency.sort_index(),
                right._adjacency.sort_index(),
                check_dtype=False,
            )
        except AssertionError:
            return False
        return True

    def identical(self, right):
        """
        Check that two graphs are identical. This requires them to have
        1. the same edge labels and node labels
        2. in the same order
        3. with the same weights
        """
        try:
            pandas.testing.assert_series_equal(self._adjacency, right._adjacency)
        except AssertionError:
            return False
        return True
