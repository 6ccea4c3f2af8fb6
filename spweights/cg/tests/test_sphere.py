import math

import numpy as np
import pytest

from spweights.cg import sphere


class TestSphere:
    def setup_method(self):
        self.points = np.array([[0.0, 60.0], [20.0, 60.0], [0.0, 75.0], [-179.0, -89.0]])

    def test_haversine(self):
        assert sphere.haversine(math.pi) == pytest.approx(1.0)
        assert sphere.haversine(0) == 0.0
        np.testing.assert_allclose(
            sphere.haversine(np.array([0, math.pi / 2, math.pi])), [0, 0.5, 1]
        )

    def test_arcdist(self):
        half = sphere.arcdist((0, 0), (180, 0))
        assert half == pytest.approx(math.pi * sphere.RADIUS_EARTH_KM)

        miles = sphere.arcdist((0, 0), (180, 0), sphere.RADIUS_EARTH_MILES)
        assert miles == pytest.approx(math.pi * 3958.76, rel=1e-5)

        # one degree of latitude
        assert sphere.arcdist((10, 0), (10, 1)) == pytest.approx(111.19, abs=0.01)

    def test_arcdist_antipodes(self):
        d = sphere.arcdist((45, 30), (-135, -30))
        assert d == pytest.approx(math.pi * sphere.RADIUS_EARTH_KM)

    def test_pairwise_arcdist(self):
        distances = sphere.pairwise_arcdist(self.points)

        assert distances.shape == (4, 4)
        np.testing.assert_allclose(np.diag(distances), 0, atol=1e-9)
        np.testing.assert_allclose(distances, distances.T)
        for i, j in [(0, 1), (0, 2), (1, 3)]:
            assert distances[i, j] == pytest.approx(
                sphere.arcdist(self.points[i], self.points[j])
            )

    def test_pairwise_arcdist_other(self):
        distances = sphere.pairwise_arcdist(self.points[:2], self.points)
        assert distances.shape == (2, 4)
        assert distances[1, 0] == pytest.approx(1107.7, abs=1)

    def test_is_lonlat(self):
        assert sphere.is_lonlat(self.points)
        assert not sphere.is_lonlat([[181, 0]])
        assert not sphere.is_lonlat([[0, 91]])
        assert not sphere.is_lonlat([[500_000, 4_000_000]])

    def test_paired_arcdist(self):
        others = self.points[::-1]
        distances = sphere.paired_arcdist(self.points, others)
        expected = np.diag(sphere.pairwise_arcdist(self.points, others))
        np.testing.assert_allclose(distances, expected)

    def test_arcdist2linear(self):
        assert sphere.arcdist2linear(0) == 0
        half = math.pi * sphere.RADIUS_EARTH_KM
        assert sphere.arcdist2linear(half) == pytest.approx(2.0)
        # beyond half the circumference the chord stays the diameter
        assert sphere.arcdist2linear(3 * half) == pytest.approx(2.0)

    def test_to_xyz(self):
        xyz = sphere.to_xyz(self.points)
        assert xyz.shape == (4, 3)
        np.testing.assert_allclose(np.linalg.norm(xyz, axis=1), 1)
        np.testing.assert_allclose(
            sphere.to_xyz([[0, 0], [90, 0], [0, 90]]), np.eye(3), atol=1e-12
        )

        # chord lengths order pairs like arc distances
        chords = np.linalg.norm(xyz[0] - xyz[1:], axis=1)
        arcs = sphere.pairwise_arcdist(self.points[:1], self.points[1:])[0]
        np.testing.assert_array_equal(np.argsort(chords), np.argsort(arcs))
        np.testing.assert_allclose(chords, sphere.arcdist2linear(arcs), rtol=1e-9)
