"""
pyOPT_turbo.rotation.earth_rotation - Earth orientation providers

Tide models consume Earth orientation through the
:class:`EarthRotation` interface. Instances are owned by the caller and
passed to every evaluation.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import NamedTuple, Optional, Union

import numpy as np
from scipy.interpolate import make_interp_spline

from ..constants import ARCSEC2RAD, MJD_J2000
from ..errors import EOPError

__all__ = [
    'EarthOrientation',
    'EarthRotation',
    'TabulatedEarthRotation',
    'tio_locator',
]

logger = logging.getLogger(__name__)


class EarthOrientation(NamedTuple):
    """Earth orientation parameters at one or more epochs"""
    xp: Union[float, np.ndarray]         # polar motion x (rad)
    yp: Union[float, np.ndarray]         # polar motion y (rad)
    sp: Union[float, np.ndarray]         # TIO locator s' (rad)
    delta_ut1: Union[float, np.ndarray]  # UT1-UTC (s)
    lod: Union[float, np.ndarray]        # length of day excess (s)
    X: Union[float, np.ndarray]          # celestial pole X (rad)
    Y: Union[float, np.ndarray]          # celestial pole Y (rad)
    S: Union[float, np.ndarray]          # CIO locator s (rad)


class EarthRotation(ABC):
    """Source of Earth orientation parameters"""

    @abstractmethod
    def earth_orientation_parameter(
        self,
        mjd: Union[float, np.ndarray],
    ) -> EarthOrientation:
        """
        Earth orientation at the requested epochs

        Parameters
        ----------
        mjd : float or np.ndarray
            Modified Julian Day

        Returns
        -------
        EarthOrientation
            Angles in radians, times in seconds
        """


def tio_locator(mjd: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """TIO locator s' = -47 microarcseconds per Julian century (radians)"""
    T = (np.asarray(mjd, dtype=np.float64) - MJD_J2000) / 36525.0
    return -47e-6 * T * ARCSEC2RAD


class TabulatedEarthRotation(EarthRotation):
    """
    Earth orientation interpolated from a tabulated series

    Parameters
    ----------
    mjd : np.ndarray
        Epochs of the table (Modified Julian Day), strictly increasing
    xp, yp : np.ndarray
        Polar motion (radians)
    delta_ut1 : np.ndarray, optional
        UT1-UTC (seconds)
    lod : np.ndarray, optional
        Length of day excess (seconds)
    X, Y : np.ndarray, optional
        Celestial pole coordinates (radians)
    degree : int, default 3
        Spline degree (reduced automatically for short tables)
    """

    def __init__(
        self,
        mjd: np.ndarray,
        xp: np.ndarray,
        yp: np.ndarray,
        delta_ut1: Optional[np.ndarray] = None,
        lod: Optional[np.ndarray] = None,
        X: Optional[np.ndarray] = None,
        Y: Optional[np.ndarray] = None,
        degree: int = 3,
    ):
        mjd = np.asarray(mjd, dtype=np.float64)
        if mjd.ndim != 1 or mjd.size < 2:
            raise ValueError("Earth orientation table needs at least two epochs")
        if np.any(np.diff(mjd) <= 0):
            raise ValueError("Earth orientation epochs must be strictly increasing")

        k = min(int(degree), mjd.size - 1)
        self._span = (float(mjd[0]), float(mjd[-1]))
        self._splines = {}
        columns = dict(xp=xp, yp=yp, delta_ut1=delta_ut1, lod=lod, X=X, Y=Y)
        for key, values in columns.items():
            if values is None:
                continue
            values = np.asarray(values, dtype=np.float64)
            if values.shape != mjd.shape:
                raise ValueError(
                    f"Column '{key}' has shape {values.shape}, expected {mjd.shape}"
                )
            self._splines[key] = make_interp_spline(mjd, values, k=k)
        logger.debug("Earth orientation table %.1f-%.1f (%d epochs, spline degree %d)",
                     self._span[0], self._span[1], mjd.size, k)

    @property
    def span(self) -> tuple[float, float]:
        """First and last tabulated epoch (MJD)"""
        return self._span

    def earth_orientation_parameter(
        self,
        mjd: Union[float, np.ndarray],
    ) -> EarthOrientation:
        scalar = np.ndim(mjd) == 0
        t = np.atleast_1d(np.asarray(mjd, dtype=np.float64))
        if np.any(t < self._span[0]) or np.any(t > self._span[1]):
            raise EOPError(
                f"Epochs {t.min():.5f}-{t.max():.5f} outside of Earth orientation "
                f"table {self._span[0]:.5f}-{self._span[1]:.5f}"
            )

        def column(key):
            if key in self._splines:
                values = self._splines[key](t)
            else:
                values = np.zeros_like(t)
            return float(values[0]) if scalar else values

        sp = tio_locator(t)
        return EarthOrientation(
            xp=column('xp'),
            yp=column('yp'),
            sp=float(sp[0]) if scalar else sp,
            delta_ut1=column('delta_ut1'),
            lod=column('lod'),
            X=column('X'),
            Y=column('Y'),
            S=0.0 if scalar else np.zeros_like(t),
        )
