"""
pyOPT_turbo.rotation - Earth rotation inputs of the pole tide

- Earth orientation providers (polar motion)
- Mean pole models

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from .earth_rotation import (
    EarthOrientation,
    EarthRotation,
    TabulatedEarthRotation,
    tio_locator,
)
from .mean_pole import (
    MeanPolarMotion,
    PolynomialInterval,
    decimal_year,
)

__all__ = [
    'EarthOrientation',
    'EarthRotation',
    'MeanPolarMotion',
    'PolynomialInterval',
    'TabulatedEarthRotation',
    'decimal_year',
    'tio_locator',
]
