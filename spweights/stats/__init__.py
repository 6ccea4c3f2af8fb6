"""
Spatial autocorrelation statistics computed over neighbor graphs.
"""

from .moran import (
    Moran,
    MoranPermutationTest,
    MoranTest,
    moran_permutation_test,
    moran_test,
    morans_i,
)
