"""
spweights: spatial neighbor graphs and spatial autocorrelation
==============================================================


Available sub-packages
----------------------

cg
    Spherical geometry helpers used for great-circle distances
graph
    Neighbor graph construction, weights transformation and export
io
    Readers for geometry sources and coordinate tables
stats
    Moran's I spatial autocorrelation statistic and its inference
"""

import contextlib
from importlib.metadata import PackageNotFoundError, version

from . import cg, graph, io, stats

with contextlib.suppress(PackageNotFoundError):
    __version__ = version("spweights")
