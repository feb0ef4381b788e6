"""
Tests for pyOPT_turbo.spatial site geometry

Tests geodetic <-> cartesian conversions, local frames and normal gravity.
"""

import numpy as np
import pytest

from pyOPT_turbo.spatial import (
    datum,
    enu_rotation,
    local_frame,
    normal_gravity,
    to_cartesian,
    to_geodetic,
    to_spherical,
)


class TestDatum:
    """Test datum/ellipsoid class"""

    def test_grs80_default(self):
        """Test GRS80 ellipsoid parameters"""
        d = datum()
        assert d.name == 'GRS80'
        assert d.a == 6378137.0
        np.testing.assert_almost_equal(d.f, 1.0 / 298.257222101)

    def test_wgs84(self):
        d = datum('wgs84')
        assert d.name == 'WGS84'
        np.testing.assert_almost_equal(d.b, 6356752.3142, decimal=1)

    def test_unknown_ellipsoid(self):
        """Test error for unknown ellipsoid"""
        with pytest.raises(ValueError, match="Unknown ellipsoid"):
            datum('UNKNOWN')


class TestConversions:

    def test_equator_prime_meridian(self):
        """Test point on equator at prime meridian"""
        x, y, z = to_cartesian(0.0, 0.0, 0.0)
        np.testing.assert_allclose([x[0], y[0], z[0]], [6378137.0, 0.0, 0.0], atol=1e-6)

    def test_round_trip(self):
        """Cartesian -> geodetic recovers the input"""
        lon = np.array([0.0, 140.0, -75.5, 20.0, 179.9])
        lat = np.array([0.0, 35.0, -40.25, 60.0, -89.0])
        h = np.array([0.0, 120.0, -30.0, 2500.0, 10.0])
        lon2, lat2, h2 = to_geodetic(*to_cartesian(lon, lat, h))
        np.testing.assert_allclose(lon2, lon, atol=1e-9)
        np.testing.assert_allclose(lat2, lat, atol=1e-9)
        np.testing.assert_allclose(h2, h, atol=1e-3)

    def test_spherical(self):
        r, theta, lon = to_spherical(0.0, 3.0, 4.0)
        np.testing.assert_allclose(r, 5.0)
        np.testing.assert_allclose(theta, np.arctan2(3.0, 4.0))
        np.testing.assert_allclose(lon, np.pi / 2.0)


class TestLocalFrame:

    def test_orthonormal(self):
        theta = np.radians([10.0, 90.0, 150.0])
        lon = np.radians([0.0, 45.0, -120.0])
        east, north, up = local_frame(theta, lon)
        for a in (east, north, up):
            np.testing.assert_allclose(np.linalg.norm(a, axis=1), 1.0)
        np.testing.assert_allclose(np.sum(east * north, axis=1), 0.0, atol=1e-15)
        np.testing.assert_allclose(np.sum(east * up, axis=1), 0.0, atol=1e-15)
        # right-handed: east x north = up
        np.testing.assert_allclose(np.cross(east, north), up, atol=1e-15)

    def test_enu_rotation(self):
        """Rotating the radial direction gives pure up"""
        points = np.array([[1.0, 2.0, 3.0], [-4.0, 0.5, -1.0]])
        rotation = enu_rotation(points)
        assert rotation.shape == (2, 3, 3)
        radial = points / np.linalg.norm(points, axis=1)[:, None]
        enu = np.einsum('kij,kj->ki', rotation, radial)
        np.testing.assert_allclose(enu, [[0.0, 0.0, 1.0], [0.0, 0.0, 1.0]], atol=1e-15)


class TestNormalGravity:

    def test_equator_and_pole(self):
        g = normal_gravity(np.array([0.0, 90.0]))
        np.testing.assert_allclose(g, [9.7803267715, 9.8321863685], rtol=1e-8)

    def test_free_air(self):
        g0 = normal_gravity(45.0)
        g1 = normal_gravity(45.0, 1000.0)
        np.testing.assert_allclose(g0 - g1, 3.086e-3)
