"""
Tests for the pyOPT_turbo.compute high-level API
"""

import json
from datetime import datetime, timezone

import numpy as np
import pytest

import pyOPT_turbo
from pyOPT_turbo import compute
from pyOPT_turbo.constants import R_EARTH
from pyOPT_turbo.errors import ConfigurationError
from pyOPT_turbo.harmonics import SphericalHarmonics
from pyOPT_turbo.spatial import enu_rotation

MJD = 58849.0


@pytest.fixture
def model(coefficient_file, monkeypatch):
    monkeypatch.setattr(compute, '_model', None)
    return compute.init_model({'inputfileOceanPole': str(coefficient_file),
                               'inputfileMeanPole': 'zero'})


def test_datetime_to_mjd():
    assert compute.datetime_to_mjd(datetime(2020, 1, 1)) == 58849.0
    assert compute.datetime_to_mjd(datetime(2020, 1, 1, 12, tzinfo=timezone.utc)) == 58849.5


def test_time_conversion():
    times = np.array(['2020-01-01T00:00:00', '2020-01-01T06:00:00'], dtype='datetime64[s]')
    np.testing.assert_allclose(compute._to_mjd(times), [58849.0, 58849.25])
    np.testing.assert_allclose(compute._to_mjd(58849.0), [58849.0])


def test_no_model(monkeypatch, eop_factory):
    monkeypatch.setattr(compute, '_model', None)
    with pytest.raises(ConfigurationError, match="init_model"):
        compute.OPT_potential(MJD, eop_factory())


def test_init_from_json(coefficient_file, tmp_path, monkeypatch):
    monkeypatch.setattr(compute, '_model', None)
    path = tmp_path / 'tides.json'
    path.write_text(json.dumps({'type': 'oceanPole',
                                'inputfileOceanPole': str(coefficient_file),
                                'inputfileMeanPole': 'iers2018'}))
    model = compute.init_model(path)
    assert compute.get_model() is model
    assert model.mean_pole.name == 'IERS2018'


class TestPotential:

    def test_scalar_time(self, model, eop_factory):
        field = pyOPT_turbo.OPT_potential(MJD, eop_factory(xp=0.2), max_degree=3)
        assert isinstance(field, SphericalHarmonics)
        assert field.max_degree == 3

    def test_time_series(self, model, eop_factory):
        eop = eop_factory(xp=0.2, xp_rate=0.01, t0=MJD)
        fields = pyOPT_turbo.OPT_potential(MJD + np.arange(3.0), eop)
        assert len(fields) == 3
        np.testing.assert_allclose(fields[0].cnm, model.potential(MJD, eop).cnm)
        np.testing.assert_allclose(fields[2].cnm, model.potential(MJD + 2.0, eop).cnm)


class TestDisplacements:

    def test_shape_and_model(self, model, eop_factory, sites, love_numbers):
        """Explicit gravity reproduces the model evaluation"""
        eop = eop_factory(xp=0.2, yp=0.3)
        mjd = MJD + np.arange(4.0)
        disp = pyOPT_turbo.OPT_displacements(*sites.T, mjd, eop, *love_numbers, gravity=9.81)
        assert disp.shape == (len(sites), 4, 3)
        expected = np.zeros_like(disp)
        model.deformation(mjd, sites, eop, 9.81, *love_numbers, expected)
        np.testing.assert_allclose(disp, expected)

    def test_normal_gravity_default(self, model, eop_factory, sites, love_numbers):
        eop = eop_factory(xp=0.2, yp=0.3)
        disp = pyOPT_turbo.OPT_displacements(*sites.T, MJD, eop, *love_numbers)
        assert disp.shape == (len(sites), 1, 3)
        assert np.all(np.isfinite(disp))
        assert np.any(disp != 0.0)

    def test_enu_frame(self, model, eop_factory, sites, love_numbers):
        """Local frame output is the rotated cartesian output"""
        eop = eop_factory(xp=0.2, yp=0.3)
        xyz = pyOPT_turbo.OPT_displacements(*sites.T, MJD, eop, *love_numbers, gravity=9.81)
        enu = pyOPT_turbo.OPT_displacements(*sites.T, MJD, eop, *love_numbers,
                                            gravity=9.81, frame='ENU')
        np.testing.assert_allclose(np.linalg.norm(enu, axis=2), np.linalg.norm(xyz, axis=2))
        rotation = enu_rotation(sites)
        np.testing.assert_allclose(enu[:, 0, :], np.einsum('kij,kj->ki', rotation, xyz[:, 0, :]))

    def test_unknown_frame(self, model, eop_factory, sites, love_numbers):
        with pytest.raises(ValueError, match="Unknown frame"):
            pyOPT_turbo.OPT_displacements(*sites.T, MJD, eop_factory(), *love_numbers,
                                          frame='neu')

    def test_empty(self, model, eop_factory, love_numbers):
        disp = pyOPT_turbo.OPT_displacements([], [], [], MJD, eop_factory(), *love_numbers)
        assert disp.shape == (0, 1, 3)

    def test_single_site(self, model, eop_factory, love_numbers):
        disp = pyOPT_turbo.OPT_displacements(R_EARTH, 0.0, 0.0, [MJD, MJD + 1.0],
                                             eop_factory(xp=0.2), *love_numbers)
        assert disp.shape == (1, 2, 3)
