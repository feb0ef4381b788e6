import numpy as np
import pytest

from pyOPT_turbo.constants import ARCSEC2RAD, GM_EARTH, R_EARTH
from pyOPT_turbo.harmonics import SphericalHarmonics
from pyOPT_turbo.io.coefficients import write_ocean_pole_tide
from pyOPT_turbo.rotation.earth_rotation import EarthOrientation, EarthRotation
from pyOPT_turbo.rotation.mean_pole import MeanPolarMotion


class ConstantEarthRotation(EarthRotation):
    """Polar motion fixed at (xp, yp) arcseconds, optionally drifting per day"""

    def __init__(self, xp=0.0, yp=0.0, xp_rate=0.0, yp_rate=0.0, t0=58849.0):
        self.xp = xp
        self.yp = yp
        self.xp_rate = xp_rate
        self.yp_rate = yp_rate
        self.t0 = t0
        self.calls = 0

    def earth_orientation_parameter(self, mjd):
        self.calls += 1
        t = np.asarray(mjd, dtype=np.float64)
        xp = (self.xp + self.xp_rate * (t - self.t0)) * ARCSEC2RAD
        yp = (self.yp + self.yp_rate * (t - self.t0)) * ARCSEC2RAD
        zero = np.zeros_like(t)
        if t.ndim == 0:
            xp, yp, zero = float(xp), float(yp), 0.0
        return EarthOrientation(xp=xp, yp=yp, sp=zero, delta_ut1=zero, lod=zero,
                                X=zero, Y=zero, S=zero)


@pytest.fixture
def eop_factory():
    """ Returns the mock Earth orientation provider class """
    return ConstantEarthRotation


@pytest.fixture
def zero_mean_pole():
    return MeanPolarMotion.zero()


def make_fields(max_degree=4, seed=42):
    """Synthetic real and imaginary fields with degrees 2..max_degree"""
    rng = np.random.default_rng(seed)
    fields = []
    for _ in range(2):
        cnm = np.tril(rng.normal(scale=1e-9, size=(max_degree + 1, max_degree + 1)))
        snm = np.tril(rng.normal(scale=1e-9, size=(max_degree + 1, max_degree + 1)))
        cnm[:2] = 0.0
        snm[:2] = 0.0
        fields.append(SphericalHarmonics(GM_EARTH, R_EARTH, cnm, snm))
    return fields[0], fields[1]


@pytest.fixture
def fields():
    """ Returns synthetic (real, imag) coefficient fields """
    return make_fields()


@pytest.fixture
def coefficient_file(tmp_path, fields):
    """ Writes the synthetic fields as a text coefficient file """
    path = tmp_path / 'oceanPoleTide.txt'
    write_ocean_pole_tide(path, *fields)
    return path


@pytest.fixture
def love_numbers():
    """ Returns load Love numbers (hn, ln) up to degree 4 """
    hn = np.array([0.0, -0.290, -1.001, -1.052, -1.053])
    ln = np.array([0.0, 0.113, 0.030, 0.059, 0.062])
    return hn, ln


@pytest.fixture
def sites():
    """ Returns cartesian positions of a few sites on the reference sphere """
    lon = np.radians([0.0, 140.0, -75.0, 20.0])
    lat = np.radians([0.0, 35.0, -40.0, 89.0])
    return R_EARTH * np.column_stack([
        np.cos(lat) * np.cos(lon),
        np.cos(lat) * np.sin(lon),
        np.sin(lat),
    ])
