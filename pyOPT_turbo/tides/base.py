"""
pyOPT_turbo.tides.base - Tide model interface and load response

Every tide contribution exposes the same two evaluations:

- ``potential``: spherical harmonic field at one epoch
- ``deformation``: site displacements accumulated into a caller-owned
  ``(n_sites, n_times, 3)`` buffer

The load response operator maps potential coefficients to site
displacements with degree-dependent Love numbers. Building it dominates
the cost of a deformation call, so it is cached per site set.

References:
    W. E. Farrell, "Deformation of the Earth by surface loads",
    Rev. Geophys. 10, 1972.
    Petit, G. and Luzum, B. (eds.), IERS Conventions (2010),
    IERS Technical Note No. 36, Chapter 7.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import logging
import threading
import warnings
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Optional, Sequence, Union

import numpy as np

from ..harmonics import SphericalHarmonics, _vector_layout, legendre_functions
from ..rotation.earth_rotation import EarthRotation
from ..spatial import local_frame, to_spherical

__all__ = [
    'LoadResponseCache',
    'Tides',
    'TidesGroup',
    'check_accumulator',
    'deformation_matrix',
]

logger = logging.getLogger(__name__)

# Sites per block when building the load response operator
_CHUNK = 16


def deformation_matrix(
    points: np.ndarray,
    gravity: Union[float, np.ndarray],
    hn: np.ndarray,
    ln: np.ndarray,
    GM: float,
    R: float,
    max_degree: int,
) -> np.ndarray:
    """
    Load response operator from potential coefficients to displacements

    For the coefficient (n, m) and a site at (r, theta, lambda) with
    gravity g the displacement is

        u = (h_n V up + l_n (dV/dphi north + 1/cos(phi) dV/dlambda east)) / g

    with V = GM/R (R/r)^(n+1) P_nm(cos theta) {cos, sin}(m lambda).

    Parameters
    ----------
    points : np.ndarray
        Site positions, Earth-fixed cartesian (n_points, 3) in meters
    gravity : float or np.ndarray
        Local gravity at the sites (m/s^2)
    hn, ln : np.ndarray
        Vertical and horizontal Love numbers indexed by degree
    GM, R : float
        Reference of the coefficients
    max_degree : int
        Maximum degree; reduced to the length of the Love numbers

    Returns
    -------
    np.ndarray
        Operator of shape (3*n_points, (N+1)^2); rows 3k..3k+2 are the
        x, y, z displacement of site k, columns follow the degree-wise
        coefficient vector
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))
    n_points = points.shape[0]
    gravity = np.broadcast_to(np.asarray(gravity, dtype=np.float64), (n_points,))
    hn = np.asarray(hn, dtype=np.float64)
    ln = np.asarray(ln, dtype=np.float64)

    N = min(int(max_degree), hn.size - 1, ln.size - 1)
    if N < 0:
        raise ValueError("Love numbers must cover at least degree 0")
    if N < max_degree:
        warnings.warn(
            f"Love numbers end at degree {N}; coefficients up to degree "
            f"{max_degree} are truncated.",
            RuntimeWarning,
            stacklevel=2
        )

    r, theta, lon = to_spherical(points[:, 0], points[:, 1], points[:, 2])
    east, north, up = local_frame(theta, lon)
    degree, order, sine = _vector_layout(N)
    n_coeff = degree.size

    A = np.zeros((3 * n_points, n_coeff))
    for start in range(0, n_points, _CHUNK):
        sl = slice(start, min(start + _CHUNK, n_points))
        Pnm, dPnm, Qnm = legendre_functions(theta[sl], N)

        # GM/R (R/r)^(n+1) / g
        scale = (GM / R) * (R / r[sl, None]) ** (degree[None, :] + 1) / gravity[sl, None]
        cos_ml = np.cos(order[None, :] * lon[sl, None])
        sin_ml = np.sin(order[None, :] * lon[sl, None])
        trig = np.where(sine, sin_ml, cos_ml)
        dtrig = np.where(sine, order * cos_ml, -order * sin_ml)

        u_up = hn[degree] * scale * Pnm[:, degree, order] * trig
        u_north = -ln[degree] * scale * dPnm[:, degree, order] * trig
        u_east = ln[degree] * scale * Qnm[:, degree, order] * dtrig

        block = (u_east[:, :, None] * east[sl, None, :]
                 + u_north[:, :, None] * north[sl, None, :]
                 + u_up[:, :, None] * up[sl, None, :])
        A[3 * sl.start:3 * sl.stop] = block.transpose(0, 2, 1).reshape(-1, n_coeff)

    return A


def check_accumulator(disp: np.ndarray, n_points: int, n_times: int) -> None:
    """Displacement buffers must be float arrays of shape (n_points, n_times, 3)"""
    if not isinstance(disp, np.ndarray):
        raise TypeError(f"Displacement buffer must be a numpy array, got {type(disp).__name__}")
    if disp.shape != (n_points, n_times, 3):
        raise ValueError(
            f"Displacement buffer has shape {disp.shape}, "
            f"expected {(n_points, n_times, 3)}"
        )
    if not np.issubdtype(disp.dtype, np.floating):
        raise ValueError(f"Displacement buffer must be floating point, got {disp.dtype}")


class LoadResponseCache:
    """
    Thread-safe cache of load responses keyed by site set

    Each entry is built exactly once; the least recently used entry is
    dropped when ``maxsize`` is exceeded.
    """

    def __init__(self, maxsize: int = 8):
        self._lock = threading.Lock()
        self._entries: OrderedDict = OrderedDict()
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key(points: np.ndarray, gravity: np.ndarray, hn: np.ndarray, ln: np.ndarray) -> tuple:
        return (points.shape, points.tobytes(), gravity.tobytes(), hn.tobytes(), ln.tobytes())

    def get(self, key: tuple, builder: Callable[[], tuple]) -> tuple:
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                logger.debug("Load response cache hit (%d entries)", len(self._entries))
                return self._entries[key]
            self.misses += 1
            value = builder()
            self._entries[key] = value
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
            logger.debug("Load response cache miss, built entry (%d entries)",
                         len(self._entries))
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class Tides(ABC):
    """Tide contribution to the potential and to site displacements"""

    @abstractmethod
    def potential(
        self,
        mjd: float,
        earth_rotation: EarthRotation,
        max_degree: Optional[int] = None,
        min_degree: int = 0,
        GM: Optional[float] = None,
        R: Optional[float] = None,
    ) -> SphericalHarmonics:
        """
        Tidal potential at one epoch

        Parameters
        ----------
        mjd : float
            Modified Julian Day
        earth_rotation : EarthRotation
            Earth orientation provider (not retained)
        max_degree, min_degree : int
            Degree range of the result
        GM, R : float, optional
            Reference of the result (default: the model's own)
        """

    @abstractmethod
    def deformation(
        self,
        mjd: np.ndarray,
        points: np.ndarray,
        earth_rotation: EarthRotation,
        gravity: Union[float, np.ndarray],
        hn: np.ndarray,
        ln: np.ndarray,
        disp: np.ndarray,
    ) -> None:
        """
        Add site displacements into ``disp``

        Parameters
        ----------
        mjd : np.ndarray
            Epochs (Modified Julian Day)
        points : np.ndarray
            Site positions, Earth-fixed cartesian (n_points, 3) in meters
        earth_rotation : EarthRotation
            Earth orientation provider (not retained)
        gravity : float or np.ndarray
            Local gravity at the sites (m/s^2)
        hn, ln : np.ndarray
            Load Love numbers indexed by degree
        disp : np.ndarray
            Buffer of shape (n_points, n_times, 3); values are added,
            never overwritten
        """


class TidesGroup(Tides):
    """Sum of several tide contributions"""

    def __init__(self, tides: Sequence[Tides]):
        tides = tuple(tides)
        if not tides:
            raise ValueError("TidesGroup needs at least one tide model")
        self.tides = tides

    def potential(self, mjd, earth_rotation, max_degree=None, min_degree=0, GM=None, R=None):
        fields = [t.potential(mjd, earth_rotation, max_degree, min_degree, GM, R)
                  for t in self.tides]
        total = fields[0]
        for field in fields[1:]:
            total = total + field
        return total

    def deformation(self, mjd, points, earth_rotation, gravity, hn, ln, disp):
        for t in self.tides:
            t.deformation(mjd, points, earth_rotation, gravity, hn, ln, disp)

    def __len__(self) -> int:
        return len(self.tides)

    def __repr__(self) -> str:
        return f"TidesGroup({list(self.tides)!r})"
