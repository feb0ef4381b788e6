"""
pyOPT_turbo.io - Readers and writers for static model inputs

- Ocean pole tide coefficients (NetCDF, text)
- Mean pole models (JSON, builtin names)
- Load Love numbers (text)
- IERS EOP C04 series (text)

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from .coefficients import (
    OceanPoleCoefficients,
    read_ocean_pole_tide,
    write_ocean_pole_tide,
)
from .eop import read_iers_c04
from .love_numbers import read_love_numbers
from .mean_pole import (
    BUILTIN_MEAN_POLES,
    read_mean_pole,
    write_mean_pole,
)

__all__ = [
    'BUILTIN_MEAN_POLES',
    'OceanPoleCoefficients',
    'read_iers_c04',
    'read_love_numbers',
    'read_mean_pole',
    'read_ocean_pole_tide',
    'write_mean_pole',
    'write_ocean_pole_tide',
]
