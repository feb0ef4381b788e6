"""
pyOPT_turbo.compute - High-level ocean pole tide API

Loads the tide model once and evaluates potential fields and site
displacements for arrays of sites and times.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import logging
import pathlib
from datetime import datetime, timezone
from typing import Optional, Union

import numpy as np

from .config import OceanPoleTideConfig, load_config
from .errors import ConfigurationError
from .harmonics import SphericalHarmonics
from .rotation.earth_rotation import EarthRotation
from .spatial import enu_rotation, normal_gravity, to_geodetic
from .tides import Tides, tides_from_config

__all__ = [
    'OPT_displacements',
    'OPT_potential',
    'datetime_to_mjd',
    'get_model',
    'init_model',
]

logger = logging.getLogger(__name__)

# Global model (loaded only once)
_model: Optional[Tides] = None


def datetime_to_mjd(dt: datetime) -> float:
    """Convert datetime to Modified Julian Day (MJD)"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp() / 86400.0 + 40587.0


def _to_mjd(times) -> np.ndarray:
    """datetime64, datetime or MJD values as an MJD array"""
    times = np.atleast_1d(times)
    if times.size == 0:
        return times.astype(np.float64)
    if np.issubdtype(times.dtype, np.datetime64):
        return times.astype('datetime64[us]').astype(np.float64) / 86400e6 + 40587.0
    if isinstance(times.flat[0], datetime):
        return np.array([datetime_to_mjd(t) for t in times.flat], dtype=np.float64)
    return np.asarray(times, dtype=np.float64)


def init_model(
    config: Union[str, pathlib.Path, dict, list, OceanPoleTideConfig, Tides],
) -> Tides:
    """
    Load the tide model used by :func:`OPT_potential` and :func:`OPT_displacements`

    Parameters
    ----------
    config : str, pathlib.Path, dict, list, OceanPoleTideConfig or Tides
        JSON configuration file, configuration mapping (or list of
        mappings), or an already constructed model

    Returns
    -------
    Tides
        The loaded model
    """
    global _model

    if isinstance(config, Tides):
        model = config
    else:
        if isinstance(config, (str, pathlib.Path)):
            config = load_config(config)
        if isinstance(config, dict) and 'type' not in config:
            config = OceanPoleTideConfig.from_dict(config)
        model = tides_from_config(config)

    _model = model
    logger.debug("Loaded tide model %r", model)
    return model


def get_model() -> Tides:
    """Currently loaded model"""
    if _model is None:
        raise ConfigurationError("No tide model loaded; call init_model() first")
    return _model


def OPT_potential(
    times,
    earth_rotation: EarthRotation,
    max_degree: Optional[int] = None,
    min_degree: int = 0,
    GM: Optional[float] = None,
    R: Optional[float] = None,
) -> Union[SphericalHarmonics, list[SphericalHarmonics]]:
    """
    Ocean pole tide potential coefficients

    Parameters
    ----------
    times : float, np.ndarray
        Times (MJD, datetime64 or datetime)
    earth_rotation : EarthRotation
        Polar motion provider
    max_degree, min_degree : int
        Degree range of the result
    GM, R : float, optional
        Reference of the result (default: the model's own)

    Returns
    -------
    SphericalHarmonics or list of SphericalHarmonics
        One field for a scalar time, otherwise one field per time
    """
    model = get_model()
    scalar = np.ndim(times) == 0
    mjd = _to_mjd(times)
    fields = [model.potential(float(t), earth_rotation, max_degree, min_degree, GM, R)
              for t in mjd]
    return fields[0] if scalar else fields


def OPT_displacements(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    times,
    earth_rotation: EarthRotation,
    hn: np.ndarray,
    ln: np.ndarray,
    gravity: Union[float, np.ndarray, None] = None,
    frame: str = 'xyz',
) -> np.ndarray:
    """
    Ocean pole tide site displacements

    Parameters
    ----------
    x, y, z : np.ndarray
        Earth-fixed cartesian site coordinates (meters)
    times : float, np.ndarray
        Times (MJD, datetime64 or datetime)
    earth_rotation : EarthRotation
        Polar motion provider
    hn, ln : np.ndarray
        Load Love numbers indexed by degree
    gravity : float or np.ndarray, optional
        Local gravity (m/s^2), default is GRS80 normal gravity at each site
    frame : str, default 'xyz'
        Output frame:
        - 'xyz': Earth-fixed cartesian (dX, dY, dZ)
        - 'enu': local (East, North, Up)

    Returns
    -------
    np.ndarray
        Displacements (meters), shape (n_sites, n_times, 3)

    Examples
    --------
    >>> import pyOPT_turbo
    >>> pyOPT_turbo.init_model('ocean_pole.json')
    >>> hn, ln, _ = pyOPT_turbo.read_love_numbers('loadLove.txt')
    >>> x, y, z = pyOPT_turbo.to_cartesian(140.0, 35.0)
    >>> mjd = 60310.0 + np.arange(24) / 24.0
    >>> disp = pyOPT_turbo.OPT_displacements(x, y, z, mjd, eop, hn, ln, frame='enu')
    """
    frame = frame.lower()
    if frame not in ('xyz', 'enu'):
        raise ValueError(f"Unknown frame '{frame}'. Supported: ['xyz', 'enu']")
    model = get_model()

    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    y = np.atleast_1d(np.asarray(y, dtype=np.float64))
    z = np.atleast_1d(np.asarray(z, dtype=np.float64))
    points = np.column_stack([x, y, z])
    mjd = _to_mjd(times)

    disp = np.zeros((points.shape[0], mjd.size, 3))
    if disp.size == 0:
        return disp

    if gravity is None:
        _, lat, h = to_geodetic(x, y, z)
        gravity = normal_gravity(lat, h)

    model.deformation(mjd, points, earth_rotation, gravity, hn, ln, disp)

    if frame == 'enu':
        rotation = enu_rotation(points)  # (n_sites, 3, 3)
        disp = np.einsum('kij,ktj->kti', rotation, disp)
    return disp
