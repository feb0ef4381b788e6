"""
Tests for pyOPT_turbo.tides TidesGroup and tides_from_config
"""

import numpy as np
import pytest

from pyOPT_turbo.config import OceanPoleTideConfig
from pyOPT_turbo.errors import ConfigurationError
from pyOPT_turbo.tides import TidesGroup, TidesOceanPole, tides_from_config

MJD = 58849.0
G = 9.81


@pytest.fixture
def config(coefficient_file):
    return {'type': 'oceanPole', 'inputfileOceanPole': str(coefficient_file),
            'inputfileMeanPole': 'zero'}


class TestTidesFromConfig:

    def test_single(self, config):
        assert isinstance(tides_from_config(config), TidesOceanPole)

    def test_dataclass(self, coefficient_file):
        tide = tides_from_config(OceanPoleTideConfig(str(coefficient_file), 'zero'))
        assert isinstance(tide, TidesOceanPole)

    def test_list(self, config):
        group = tides_from_config([config, dict(config, factor=-1.0)])
        assert isinstance(group, TidesGroup)
        assert len(group) == 2

    def test_unknown_type(self, config):
        with pytest.raises(ConfigurationError, match="Unknown tide type"):
            tides_from_config(dict(config, type='solidEarth'))

    def test_missing_type(self, config):
        del config['type']
        with pytest.raises(ConfigurationError):
            tides_from_config(config)

    def test_empty_list(self):
        with pytest.raises(ConfigurationError):
            tides_from_config([])


class TestTidesGroup:

    def test_empty(self):
        with pytest.raises(ValueError):
            TidesGroup([])

    def test_potential_sum(self, config, eop_factory):
        eop = eop_factory(xp=0.2, yp=0.3)
        single = tides_from_config(config)
        group = tides_from_config([config, config])
        np.testing.assert_allclose(group.potential(MJD, eop).cnm,
                                   2.0 * single.potential(MJD, eop).cnm)

    def test_cancelling_members(self, config, eop_factory, sites, love_numbers):
        """A tide and its negation sum to zero"""
        eop = eop_factory(xp=0.2, yp=0.3)
        group = tides_from_config([config, dict(config, factor=-1.0)])
        field = group.potential(MJD, eop)
        np.testing.assert_allclose(field.cnm, 0.0, atol=1e-30)
        disp = np.zeros((len(sites), 2, 3))
        group.deformation(MJD + np.arange(2.0), sites, eop, G, *love_numbers, disp)
        np.testing.assert_allclose(disp, 0.0, atol=1e-25)

    def test_deformation_shared_buffer(self, config, eop_factory, sites, love_numbers):
        eop = eop_factory(xp=0.2, yp=0.3)
        single = np.zeros((len(sites), 1, 3))
        tides_from_config(config).deformation(MJD, sites, eop, G, *love_numbers, single)
        both = np.zeros((len(sites), 1, 3))
        tides_from_config([config, config]).deformation(MJD, sites, eop, G, *love_numbers, both)
        np.testing.assert_allclose(both, 2.0 * single)
