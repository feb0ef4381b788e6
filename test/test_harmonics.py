"""
Tests for pyOPT_turbo.harmonics

Tests the coefficient container, the vector layout and the Legendre functions.
"""

import numpy as np
import pytest

from pyOPT_turbo.harmonics import (
    SphericalHarmonics,
    coefficient_index,
    legendre_functions,
)

GM = 3.986004415e14
R = 6378136.3


def _field(N=3, seed=1):
    rng = np.random.default_rng(seed)
    cnm = np.tril(rng.normal(size=(N + 1, N + 1)))
    snm = np.tril(rng.normal(size=(N + 1, N + 1)))
    return SphericalHarmonics(GM, R, cnm, snm)


class TestCoefficientIndex:
    """Test degree-wise vector ordering"""

    def test_low_degrees(self):
        """C(n,0), C(n,1), S(n,1), ... order"""
        assert coefficient_index(0, 0) == 0
        assert coefficient_index(1, 0) == 1
        assert coefficient_index(1, 1) == 2
        assert coefficient_index(2, 0) == 4
        assert coefficient_index(2, 1) == 5
        assert coefficient_index(2, 2) == 7

    def test_invalid_order(self):
        """Test error for m > n"""
        with pytest.raises(ValueError):
            coefficient_index(2, 3)

    def test_vector_matches_index(self):
        """coefficient_vector places C(n,m) at coefficient_index and S(n,m) after it"""
        field = _field()
        x = field.coefficient_vector()
        assert x.size == 16
        for n in range(4):
            for m in range(n + 1):
                i = coefficient_index(n, m)
                assert x[i] == field.cnm[n, m]
                if m > 0:
                    assert x[i + 1] == field.snm[n, m]

    def test_from_vector(self):
        """from_vector inverts coefficient_vector"""
        field = _field()
        restored = SphericalHarmonics.from_vector(GM, R, field.coefficient_vector())
        np.testing.assert_array_equal(restored.cnm, field.cnm)
        np.testing.assert_array_equal(restored.snm, field.snm)

    def test_from_vector_bad_length(self):
        """Test error for lengths that are not (N+1)^2"""
        with pytest.raises(ValueError, match="not \\(N\\+1\\)\\^2"):
            SphericalHarmonics.from_vector(GM, R, np.zeros(5))


class TestSphericalHarmonics:
    """Test the immutable coefficient container"""

    def test_lower_triangle_and_zonal_sine(self):
        """Upper triangle and S(n,0) are cleared"""
        field = SphericalHarmonics(GM, R, np.ones((3, 3)), np.ones((3, 3)))
        np.testing.assert_array_equal(field.cnm, np.tril(np.ones((3, 3))))
        assert np.all(field.snm[:, 0] == 0.0)
        assert field.snm[2, 1] == 1.0

    def test_read_only(self):
        """Coefficient arrays cannot be modified"""
        field = _field()
        with pytest.raises(ValueError):
            field.cnm[2, 0] = 1.0

    def test_input_copied(self):
        """The container does not alias its inputs"""
        cnm = np.zeros((3, 3))
        field = SphericalHarmonics(GM, R, cnm)
        cnm[2, 0] = 5.0
        assert field.cnm[2, 0] == 0.0

    def test_shape_errors(self):
        """Test errors for non-square or mismatched inputs"""
        with pytest.raises(ValueError, match="square"):
            SphericalHarmonics(GM, R, np.zeros((3, 2)))
        with pytest.raises(ValueError, match="shapes differ"):
            SphericalHarmonics(GM, R, np.zeros((3, 3)), np.zeros((4, 4)))

    def test_get_truncate_and_pad(self):
        """get truncates or zero-pads to the requested maximum degree"""
        field = _field(N=3)
        small = field.get(2)
        assert small.max_degree == 2
        np.testing.assert_array_equal(small.cnm, field.cnm[:3, :3])
        large = field.get(5)
        assert large.max_degree == 5
        np.testing.assert_array_equal(large.cnm[:4, :4], field.cnm)
        assert np.all(large.cnm[4:] == 0.0)

    def test_get_min_degree(self):
        """Degrees below min_degree are zero"""
        field = _field(N=3).get(3, min_degree=2)
        assert np.all(field.cnm[:2] == 0.0)
        assert np.all(field.snm[:2] == 0.0)
        assert field.min_degree == 2

    def test_get_invalid_range(self):
        """Test error when min_degree exceeds max_degree"""
        with pytest.raises(ValueError, match="exceeds"):
            _field(N=3).get(2, min_degree=3)

    def test_get_rescale(self):
        """Coefficients scale with (GM0/GM) (R0/R)^n"""
        field = _field(N=3)
        rescaled = field.get(GM=2.0 * GM, R=2.0 * R)
        scale = 0.5 * 0.5 ** np.arange(4)
        np.testing.assert_allclose(rescaled.cnm, field.cnm * scale[:, None])
        np.testing.assert_allclose(rescaled.snm, field.snm * scale[:, None])
        assert rescaled.GM == 2.0 * GM
        assert rescaled.R == 2.0 * R

    def test_scalar_multiplication(self):
        """Scaling and negation act on both coefficient sets"""
        field = _field()
        np.testing.assert_allclose((2.5 * field).cnm, 2.5 * field.cnm)
        np.testing.assert_allclose((field * 2.5).snm, 2.5 * field.snm)
        np.testing.assert_allclose((-field).cnm, -field.cnm)

    def test_addition(self):
        """Sum pads to the larger degree and keeps the left reference"""
        a = _field(N=2, seed=1)
        b = _field(N=3, seed=2).get(GM=2.0 * GM)
        total = a + b
        assert total.max_degree == 3
        assert total.GM == GM
        expected = a.get(3).cnm + b.get(GM=GM).cnm
        np.testing.assert_allclose(total.cnm, expected)


class TestLegendre:
    """Test fully normalized associated Legendre functions"""

    theta = np.radians([10.0, 35.0, 90.0, 123.0, 170.0])

    def test_closed_form(self):
        """Compare low degrees with closed-form expressions"""
        Pnm, dPnm, _ = legendre_functions(self.theta, 2)
        t, s = np.cos(self.theta), np.sin(self.theta)
        np.testing.assert_allclose(Pnm[:, 0, 0], 1.0)
        np.testing.assert_allclose(Pnm[:, 1, 0], np.sqrt(3.0) * t)
        np.testing.assert_allclose(Pnm[:, 1, 1], np.sqrt(3.0) * s)
        np.testing.assert_allclose(Pnm[:, 2, 0], np.sqrt(5.0) * (3.0 * t**2 - 1.0) / 2.0)
        np.testing.assert_allclose(Pnm[:, 2, 1], np.sqrt(15.0) * s * t)
        np.testing.assert_allclose(Pnm[:, 2, 2], np.sqrt(15.0) / 2.0 * s**2)
        np.testing.assert_allclose(dPnm[:, 2, 0], -3.0 * np.sqrt(5.0) * s * t,
                                   atol=1e-14)

    def test_derivative_finite_difference(self):
        """dPnm agrees with a central difference"""
        h = 1e-6
        N = 8
        _, dPnm, _ = legendre_functions(self.theta, N)
        P_plus, _, _ = legendre_functions(self.theta + h, N)
        P_minus, _, _ = legendre_functions(self.theta - h, N)
        np.testing.assert_allclose(dPnm, (P_plus - P_minus) / (2.0 * h),
                                   rtol=1e-6, atol=1e-7)

    def test_q_is_p_over_sin(self):
        """Qnm = Pnm / sin(theta) for m >= 1"""
        Pnm, _, Qnm = legendre_functions(self.theta, 6)
        s = np.sin(self.theta)[:, None, None]
        np.testing.assert_allclose(Qnm[:, :, 1:] * s, Pnm[:, :, 1:], atol=1e-14)
        assert np.all(Qnm[:, :, 0] == 0.0)

    def test_pole_finite(self):
        """Qnm stays finite at the poles"""
        _, _, Qnm = legendre_functions(np.array([0.0, np.pi]), 5)
        assert np.all(np.isfinite(Qnm))
        np.testing.assert_allclose(Qnm[0, 1, 1], np.sqrt(3.0))
