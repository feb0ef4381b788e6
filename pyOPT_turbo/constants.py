"""
pyOPT_turbo.constants - Numeric and physical constants

Angle conversions are kept here so the potential and deformation code
paths share a single arcsecond convention.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

import numpy as np

__all__ = [
    'ARCSEC2RAD',
    'DEG2RAD',
    'GAMMA_IMAGINARY',
    'GAMMA_REAL',
    'GM_EARTH',
    'MAS2ARCSEC',
    'MJD_J2000',
    'R_EARTH',
    'RAD2ARCSEC',
    'RAD2DEG',
    'DAYS_PER_YEAR',
]

# Angle conversions
DEG2RAD = np.pi / 180.0
RAD2DEG = 180.0 / np.pi
RAD2ARCSEC = RAD2DEG * 3600.0
ARCSEC2RAD = DEG2RAD / 3600.0
MAS2ARCSEC = 1e-3

# Earth parameters (IERS Conventions 2010)
GM_EARTH = 3.986004415e14   # m^3/s^2
R_EARTH = 6378136.3         # m

# Ocean pole tide admittance (Desai 2002)
GAMMA_REAL = 0.6870
GAMMA_IMAGINARY = 0.0036

# Time
MJD_J2000 = 51544.5
DAYS_PER_YEAR = 365.25
