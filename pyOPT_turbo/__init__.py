"""
pyOPT_turbo - Ocean pole tide potential and site deformation

Evaluates the ocean pole tide as spherical harmonic potential fields and
as displacements of Earth-fixed sites, for arrays of sites and times.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.

Usage:
    import numpy as np
    import pyOPT_turbo

    # Polar motion from an IERS EOP C04 series
    eop = pyOPT_turbo.read_iers_c04('/path/to/eopc04.1962-now')

    # Coefficient file and mean pole model
    pyOPT_turbo.init_model({
        'inputfileOceanPole': '{dataDir}/oceanPoleTide.nc',
        'inputfileMeanPole': 'iers2018',
        'maxDegree': 60,
    })

    # Time as Modified Julian Day (MJD)
    mjd = 60310.0 + np.arange(24) / 24.0

    # Potential coefficients (one field per time)
    fields = pyOPT_turbo.OPT_potential(mjd, eop, max_degree=60)

    # Site displacements (n_sites, n_times, 3)
    hn, ln, _ = pyOPT_turbo.read_love_numbers('/path/to/loadLoveNumbers.txt')
    x, y, z = pyOPT_turbo.to_cartesian(lons, lats)
    disp = pyOPT_turbo.OPT_displacements(x, y, z, mjd, eop, hn, ln, frame='enu')
"""

from . import compute
from . import io
from . import rotation
from . import spatial
from . import tides
from .compute import (
    OPT_displacements,
    OPT_potential,
    datetime_to_mjd,
    get_model,
    init_model,
)
from .config import (
    OceanPoleTideConfig,
    load_config,
)
from .errors import (
    ConfigurationError,
    EOPError,
    FileFormatError,
    PyOPTError,
)
from .harmonics import (
    SphericalHarmonics,
    coefficient_index,
)
from .io import (
    OceanPoleCoefficients,
    read_iers_c04,
    read_love_numbers,
    read_mean_pole,
    read_ocean_pole_tide,
    write_mean_pole,
    write_ocean_pole_tide,
)
from .rotation import (
    EarthOrientation,
    EarthRotation,
    MeanPolarMotion,
    TabulatedEarthRotation,
)
from .spatial import (
    datum,
    normal_gravity,
    to_cartesian,
    to_geodetic,
)
from .tides import (
    Tides,
    TidesGroup,
    TidesOceanPole,
    tides_from_config,
)

__version__ = '0.1.0'

__all__ = [
    # Modules
    'compute',
    'io',
    'rotation',
    'spatial',
    'tides',
    # High-level API
    'OPT_displacements',
    'OPT_potential',
    'datetime_to_mjd',
    'get_model',
    'init_model',
    # Configuration and errors
    'ConfigurationError',
    'EOPError',
    'FileFormatError',
    'OceanPoleTideConfig',
    'PyOPTError',
    'load_config',
    # Models
    'EarthOrientation',
    'EarthRotation',
    'MeanPolarMotion',
    'OceanPoleCoefficients',
    'SphericalHarmonics',
    'TabulatedEarthRotation',
    'Tides',
    'TidesGroup',
    'TidesOceanPole',
    'coefficient_index',
    'tides_from_config',
    # I/O
    'read_iers_c04',
    'read_love_numbers',
    'read_mean_pole',
    'read_ocean_pole_tide',
    'write_mean_pole',
    'write_ocean_pole_tide',
    # Coordinates
    'datum',
    'normal_gravity',
    'to_cartesian',
    'to_geodetic',
]
