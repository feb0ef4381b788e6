"""
pyOPT_turbo.io.eop - IERS Earth orientation series

Reads the IERS EOP C04 series (text). Both column layouts are accepted,
the 14 C04 one::

    year month day MJD x(") y(") UT1-UTC(s) LOD(s) dX(") dY(") ...

and the 20 C04 one, which adds the hour of day and pole rates::

    year month day hour MJD x(") y(") UT1-UTC(s) dX(") dY(") xrt(") yrt(") LOD(s) ...

The layout is recognized per line from the fourth column (an hour of day
in 20 C04, an MJD in 14 C04). Header and comment lines are skipped.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Union

import numpy as np

from ..constants import ARCSEC2RAD
from ..errors import FileFormatError
from ..rotation.earth_rotation import TabulatedEarthRotation

__all__ = ['read_iers_c04']

logger = logging.getLogger(__name__)

# token positions of MJD, x, y, UT1-UTC, LOD, dX, dY
_COLUMNS_14C04 = (3, 4, 5, 6, 7, 8, 9)
_COLUMNS_20C04 = (4, 5, 6, 7, 12, 8, 9)


def _is_data_line(tokens: list) -> bool:
    if len(tokens) < 10:
        return False
    return (tokens[0].isdigit() and len(tokens[0]) == 4
            and tokens[1].isdigit() and tokens[2].isdigit())


def _columns(tokens: list) -> tuple:
    """Column layout of a data line"""
    if float(tokens[3]) < 24.0:
        if len(tokens) < 13:
            raise ValueError(f"20 C04 record with {len(tokens)} columns: {' '.join(tokens)}")
        return _COLUMNS_20C04
    return _COLUMNS_14C04


def read_iers_c04(input_file: Union[str, pathlib.Path]) -> TabulatedEarthRotation:
    """
    Read an IERS EOP C04 series

    Parameters
    ----------
    input_file : str or pathlib.Path
        EOP C04 text file

    Returns
    -------
    TabulatedEarthRotation
        Interpolating Earth orientation provider
    """
    input_file = pathlib.Path(input_file).expanduser()
    rows = []
    try:
        with open(input_file, 'r', encoding='utf-8') as f:
            for line in f:
                tokens = line.split()
                if not _is_data_line(tokens):
                    continue
                rows.append([float(tokens[i]) for i in _columns(tokens)])
        if len(rows) < 2:
            raise FileFormatError(f"{input_file}: fewer than two EOP records")
        data = np.array(rows)
        eop = TabulatedEarthRotation(
            mjd=data[:, 0],
            xp=data[:, 1] * ARCSEC2RAD,
            yp=data[:, 2] * ARCSEC2RAD,
            delta_ut1=data[:, 3],
            lod=data[:, 4],
            X=data[:, 5] * ARCSEC2RAD,
            Y=data[:, 6] * ARCSEC2RAD,
        )
    except FileFormatError:
        raise
    except (OSError, ValueError) as e:
        raise FileFormatError(f"Cannot read EOP series {input_file}: {e}") from e

    logger.debug("Read %d EOP records from %s", len(rows), input_file)
    return eop
