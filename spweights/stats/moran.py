"""
Moran's I global spatial autocorrelation.

Three distinct operations are provided, since they answer slightly different
questions:

- :func:`morans_i` computes the statistic only.
- :func:`moran_test` draws analytic inference under the normality or the
  randomization assumption (Cliff & Ord 1981).
- :func:`moran_permutation_test` draws assumption-free inference by randomly
  permuting the values across units.

:class:`Moran` bundles the three for interactive use.
"""

from collections import namedtuple

import numpy as np
import pandas as pd
from scipy import stats

from ..common import DegenerateGraphError, MismatchedUnitSetError, ZeroVarianceError
from ..graph._summary import _weight_sums
from ..graph._utils import _check_unit_sets

__all__ = [
    "Moran",
    "MoranTest",
    "MoranPermutationTest",
    "morans_i",
    "moran_test",
    "moran_permutation_test",
]

ASSUMPTIONS = ("randomization", "normality")
ALTERNATIVES = ("greater", "less", "two-sided")

MoranTest = namedtuple(
    "MoranTest",
    ["I", "expected_I", "variance", "z_score", "p_value", "assumption", "alternative"],
)
MoranTest.__doc__ = """Analytic inference for Moran's I

Attributes
----------
I : float
    value of Moran's I
expected_I : float
    expected value of I under the null, :math:`-1/(n-1)`
variance : float
    variance of I under the null and the chosen ``assumption``
z_score : float
    standardized value of I
p_value : float
    p-value from the standard normal distribution for the ``alternative``
assumption : str
    ``"normality"`` or ``"randomization"``
alternative : str
    ``"greater"``, ``"less"`` or ``"two-sided"``
"""

MoranPermutationTest = namedtuple(
    "MoranPermutationTest",
    ["I", "expected_I", "p_value", "simulated", "permutations", "alternative"],
)
MoranPermutationTest.__doc__ = """Permutation inference for Moran's I

Attributes
----------
I : float
    value of Moran's I
expected_I : float
    mean of I over the permutations
p_value : float
    pseudo p-value, :math:`(count + 1) / (permutations + 1)`
simulated : numpy.ndarray
    values of I for each permutation
permutations : int
    number of permutations
alternative : str
    ``"greater"``, ``"less"`` or ``"two-sided"``
"""


def _aligned_values(values, graph):
    """Values as a float array ordered as ``graph.unique_ids``."""
    if isinstance(values, pd.Series):
        _check_unit_sets(graph.unique_ids, values.index, "align")
        y = values.reindex(graph.unique_ids).to_numpy(dtype=float)
    else:
        y = np.asarray(values, dtype=float)
        if y.ndim != 1:
            raise ValueError(f"`values` need to be one-dimensional. {y.ndim} given.")
        if y.shape[0] != graph.n:
            raise MismatchedUnitSetError(
                f"The length of `values` ({y.shape[0]}) does not match the number "
                f"of units in the Graph ({graph.n})."
            )
    if not np.isfinite(y).all():
        raise ValueError("`values` cannot contain missing or infinite values.")
    return y


def _prepare(values, graph, transformation):
    """Shared set up: aligned deviations, weights and their sum."""
    if transformation is not None:
        graph = graph.transform(transformation)
    y = _aligned_values(values, graph)
    graph.check_degenerate()

    if np.ptp(y) == 0:
        raise ZeroVarianceError(
            "Moran's I is undefined for constant values (zero variance)."
        )

    z = y - y.mean()
    w = graph.sparse
    s0 = w.sum()
    if s0 == 0:
        raise DegenerateGraphError("Moran's I is undefined for a zero sum of weights.")
    return z, w, s0


def _statistic(z, w, s0):
    n = z.shape[0]
    return (n / s0) * (z @ (w @ z)) / (z @ z)


def _p_value(z_score, alternative):
    if alternative == "greater":
        return stats.norm.sf(z_score)
    if alternative == "less":
        return stats.norm.cdf(z_score)
    return 2 * stats.norm.sf(abs(z_score))


def _check_alternative(alternative):
    if alternative not in ALTERNATIVES:
        raise ValueError(
            f"'alternative' needs to be one of {ALTERNATIVES}. "
            f"'{alternative}' was given instead."
        )


def morans_i(values, graph, transformation="R"):
    r"""Moran's I statistic

    .. math::

        I = \frac{n}{S_0} \frac{\sum_i \sum_j w_{ij} z_i z_j}{\sum_i z_i^2}

    where :math:`z_i = x_i - \bar{x}` and :math:`S_0 = \sum_i \sum_j w_{ij}`.
    The weights do not need to be symmetric.

    Parameters
    ----------
    values : array-like | pandas.Series
        one value per unit. A Series is aligned on the Graph ids by its index,
        any other array-like is assumed to follow the order of
        ``graph.unique_ids``.
    graph : spweights.graph.Graph
        neighbor graph
    transformation : str | None, default "R"
        transformation applied to the graph weights before computing the
        statistic. Use None to use the weights as they are.

    Returns
    -------
    float
        Moran's I

    Raises
    ------
    ZeroVarianceError
        if all values are equal
    MismatchedUnitSetError
        if the values do not cover exactly the units of the graph
    DegenerateGraphError
        if the graph has no links

    Examples
    --------
    >>> from spweights.graph import Graph
    >>> path = Graph.from_dicts({0: [1], 1: [0, 2], 2: [1, 3], 3: [2]})
    >>> round(morans_i([1, 2, 3, 4], path), 4)
    0.4
    """
    z, w, s0 = _prepare(values, graph, transformation)
    return float(_statistic(z, w, s0))


def moran_test(
    values, graph, assumption="randomization", alternative="greater", transformation="R"
):
    r"""Moran's I with analytic inference

    The expected value under the null of no spatial autocorrelation is
    :math:`E[I] = -1/(n-1)`. Variances follow Cliff & Ord (1981):

    normality

    .. math::

        V[I] = \frac{n^2 S_1 - n S_2 + 3 S_0^2}{(n^2 - 1) S_0^2} - E[I]^2

    randomization, with :math:`b_2 = n \sum z_i^4 / (\sum z_i^2)^2`

    .. math::

        V[I] = \frac{n [(n^2 - 3n + 3) S_1 - n S_2 + 3 S_0^2]
               - b_2 [(n^2 - n) S_1 - 2n S_2 + 6 S_0^2]}
               {(n-1)(n-2)(n-3) S_0^2} - E[I]^2

    Parameters
    ----------
    values : array-like | pandas.Series
        one value per unit, see :func:`morans_i`
    graph : spweights.graph.Graph
        neighbor graph
    assumption : {"randomization", "normality"}
        null distribution of the values
    alternative : {"greater", "less", "two-sided"}
        alternative hypothesis. ``"greater"`` tests for positive spatial
        autocorrelation (clustering).
    transformation : str | None, default "R"
        transformation applied to the graph weights

    Returns
    -------
    MoranTest
        named tuple ``(I, expected_I, variance, z_score, p_value, assumption,
        alternative)``
    """
    if assumption not in ASSUMPTIONS:
        raise ValueError(
            f"'assumption' needs to be one of {ASSUMPTIONS}. "
            f"'{assumption}' was given instead."
        )
    _check_alternative(alternative)

    z, w, s0 = _prepare(values, graph, transformation)
    n = z.shape[0]
    if assumption == "randomization" and n < 4:
        raise ValueError("The randomization variance requires at least 4 units.")

    i = _statistic(z, w, s0)
    _, s1, s2 = _weight_sums(w)
    ei = -1.0 / (n - 1)
    s02 = s0 * s0

    if assumption == "normality":
        v = (n * n * s1 - n * s2 + 3 * s02) / ((n * n - 1) * s02)
    else:
        m2 = (z @ z) / n
        b2 = ((z**4).sum() / n) / (m2 * m2)
        a = n * ((n * n - 3 * n + 3) * s1 - n * s2 + 3 * s02)
        b = b2 * ((n * n - n) * s1 - 2 * n * s2 + 6 * s02)
        v = (a - b) / ((n - 1) * (n - 2) * (n - 3) * s02)
    variance = v - ei * ei

    z_score = (i - ei) / np.sqrt(variance)
    return MoranTest(
        float(i),
        ei,
        float(variance),
        float(z_score),
        float(_p_value(z_score, alternative)),
        assumption,
        alternative,
    )


def moran_permutation_test(
    values,
    graph,
    permutations=999,
    seed=None,
    alternative="greater",
    transformation="R",
    chunk_size=1000,
):
    """Moran's I with permutation inference

    The values are randomly reassigned to units ``permutations`` times and I is
    recomputed for every permutation. The pseudo p-value compares the observed
    I to this reference distribution and makes no distributional assumption.

    Parameters
    ----------
    values : array-like | pandas.Series
        one value per unit, see :func:`morans_i`
    graph : spweights.graph.Graph
        neighbor graph
    permutations : int
        number of random permutations
    seed : int | numpy.random.Generator, optional
        seed for ``numpy.random.default_rng``. Fixing it makes the result
        reproducible.
    alternative : {"greater", "less", "two-sided"}
        ``"greater"`` counts permutations with I at least as large as observed,
        ``"less"`` at most as large, ``"two-sided"`` doubles the smaller of the
        two one-sided p-values (capped at 1).
    transformation : str | None, default "R"
        transformation applied to the graph weights
    chunk_size : int
        number of permutations evaluated at once

    Returns
    -------
    MoranPermutationTest
        named tuple ``(I, expected_I, p_value, simulated, permutations,
        alternative)``
    """
    if int(permutations) != permutations or permutations < 1:
        raise ValueError(
            f"'permutations' needs to be a positive integer. {permutations} given."
        )
    _check_alternative(alternative)
    permutations = int(permutations)

    z, w, s0 = _prepare(values, graph, transformation)
    n = z.shape[0]
    i = _statistic(z, w, s0)
    m2 = z @ z

    rng = np.random.default_rng(seed)
    simulated = np.empty(permutations)
    for start in range(0, permutations, chunk_size):
        stop = min(start + chunk_size, permutations)
        shuffled = rng.permuted(np.tile(z, (stop - start, 1)), axis=1)
        lag = (w @ shuffled.T).T
        simulated[start:stop] = (n / s0) * (shuffled * lag).sum(axis=1) / m2

    greater = (np.sum(simulated >= i) + 1.0) / (permutations + 1.0)
    less = (np.sum(simulated <= i) + 1.0) / (permutations + 1.0)
    if alternative == "greater":
        p_value = greater
    elif alternative == "less":
        p_value = less
    else:
        p_value = min(1.0, 2 * min(greater, less))

    return MoranPermutationTest(
        float(i),
        float(simulated.mean()),
        float(p_value),
        simulated,
        permutations,
        alternative,
    )


class Moran:
    """Moran's I global autocorrelation statistic

    Parameters
    ----------
    y : array-like | pandas.Series
        variable measured across the units of ``graph``
    graph : spweights.graph.Graph
        neighbor graph
    transformation : str | None, default "R"
        weights transformation
    permutations : int, default 999
        number of random permutations for the pseudo p-value. Set to 0 to skip
        permutation inference.
    alternative : {"greater", "less", "two-sided"}
        alternative hypothesis for all p-values
    seed : int, optional
        seed of the permutations

    Attributes
    ----------
    I : float
        value of Moran's I
    EI : float
        expected value under the null
    VI_norm, seI_norm, z_norm, p_norm : float
        variance, standard error, z-value and p-value under normality
    VI_rand, seI_rand, z_rand, p_rand : float
        variance, standard error, z-value and p-value under randomization
    sim : numpy.ndarray | None
        values of I from the permutations
    p_sim : float | None
        pseudo p-value from the permutations
    EI_sim, seI_sim : float | None
        mean and standard deviation of the permutation distribution
    z : numpy.ndarray
        deviations from the mean, ordered as ``graph.unique_ids``
    z_lag : numpy.ndarray
        spatial lag of ``z``. ``z`` against ``z_lag`` is the Moran scatterplot
        whose OLS slope equals I for row-standardized weights.

    Examples
    --------
    >>> import numpy as np
    >>> from spweights.graph import Graph
    >>> path = Graph.from_dicts({0: [1], 1: [0, 2], 2: [1, 3], 3: [2]})
    >>> mi = Moran(np.array([1, 2, 3, 4]), path, permutations=0)
    >>> round(mi.I, 4)
    0.4
    """

    def __init__(
        self,
        y,
        graph,
        transformation="R",
        permutations=999,
        alternative="greater",
        seed=None,
    ):
        self.graph = graph.transform(transformation) if transformation else graph
        self.y = _aligned_values(y, self.graph)
        self.n = self.graph.n
        self.permutations = permutations
        self.alternative = alternative

        norm = moran_test(
            y, self.graph, "normality", alternative, transformation=None
        )
        self.I = norm.I
        self.EI = norm.expected_I
        self.VI_norm = norm.variance
        self.seI_norm = self.VI_norm**0.5
        self.z_norm = norm.z_score
        self.p_norm = norm.p_value

        if self.n > 3:
            rand = moran_test(
                y, self.graph, "randomization", alternative, transformation=None
            )
            self.VI_rand = rand.variance
            self.seI_rand = self.VI_rand**0.5
            self.z_rand = rand.z_score
            self.p_rand = rand.p_value
        else:
            self.VI_rand = self.seI_rand = self.z_rand = self.p_rand = np.nan

        self.sim = self.p_sim = self.EI_sim = self.seI_sim = None
        if permutations:
            sim = moran_permutation_test(
                y,
                self.graph,
                permutations=permutations,
                seed=seed,
                alternative=alternative,
                transformation=None,
            )
            self.sim = sim.simulated
            self.p_sim = sim.p_value
            self.EI_sim = sim.expected_I
            self.seI_sim = float(self.sim.std())

        self.z = self.y - self.y.mean()
        self.z_lag = self.graph.lag(self.z)

    def __repr__(self):
        return (
            f"<Moran's I {self.I:.4f} (E[I] {self.EI:.4f}, "
            f"p_norm {self.p_norm:.4f}) over {self.n} units>"
        )
