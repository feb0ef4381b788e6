"""
pyOPT_turbo.spatial - Site geometry

Coordinate conversions between geodetic and Earth-fixed cartesian
positions, spherical coordinates, local east/north/up frames and
normal gravity at the sites.

Functions:
    to_cartesian: Convert geodetic to cartesian (ECEF) coordinates
    to_geodetic: Convert cartesian (ECEF) to geodetic coordinates
    to_spherical: Convert cartesian to geocentric spherical coordinates
    local_frame: East/north/up unit vectors at spherical positions
    normal_gravity: Somigliana normal gravity with free-air correction
    enu_rotation: Rotate cartesian vectors into local east/north/up
    datum: Ellipsoid parameters

References:
    B. Hofmann-Wellenhof and H. Moritz, "Physical Geodesy", 2005.
    H. Moritz, "Geodetic Reference System 1980", J. Geodesy 74, 2000.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = [
    'datum',
    'enu_rotation',
    'local_frame',
    'normal_gravity',
    'to_cartesian',
    'to_geodetic',
    'to_spherical',
]


@dataclass
class datum:
    """
    Ellipsoid parameters

    Parameters
    ----------
    ellipsoid : str, optional
        Ellipsoid name (default: 'GRS80')
        Supported: 'GRS80', 'WGS84'

    Attributes
    ----------
    a : float
        Semi-major axis (meters)
    f : float
        Flattening
    gamma_e : float
        Normal gravity at the equator (m/s^2)
    k : float
        Somigliana constant
    """

    # (a, f, gamma_e, k)
    _ellipsoids = {
        'GRS80': (6378137.0, 1.0 / 298.257222101, 9.7803267715, 0.001931851353),
        'WGS84': (6378137.0, 1.0 / 298.257223563, 9.7803253359, 0.00193185265241),
    }

    a: float = 6378137.0
    f: float = 1.0 / 298.257222101
    gamma_e: float = 9.7803267715
    k: float = 0.001931851353
    name: str = 'GRS80'

    def __init__(self, ellipsoid: str = 'GRS80'):
        ellipsoid = ellipsoid.upper()
        if ellipsoid not in self._ellipsoids:
            raise ValueError(
                f"Unknown ellipsoid: {ellipsoid}. "
                f"Supported: {list(self._ellipsoids.keys())}"
            )
        self.a, self.f, self.gamma_e, self.k = self._ellipsoids[ellipsoid]
        self.name = ellipsoid

    @property
    def b(self) -> float:
        """Semi-minor axis (meters)"""
        return self.a * (1.0 - self.f)

    @property
    def e2(self) -> float:
        """First eccentricity squared"""
        return self.f * (2.0 - self.f)


def to_cartesian(
    lon: np.ndarray,
    lat: np.ndarray,
    h: np.ndarray | None = None,
    ellipsoid: str = 'GRS80',
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert geodetic coordinates to cartesian (ECEF)

    Parameters
    ----------
    lon : np.ndarray
        Longitude (degrees)
    lat : np.ndarray
        Latitude (degrees)
    h : np.ndarray, optional
        Height above ellipsoid (meters), default is 0
    ellipsoid : str, default 'GRS80'
        Reference ellipsoid name

    Returns
    -------
    x, y, z : np.ndarray
        Cartesian coordinates (meters)
    """
    lon = np.atleast_1d(np.asarray(lon, dtype=np.float64))
    lat = np.atleast_1d(np.asarray(lat, dtype=np.float64))
    if h is None:
        h = np.zeros_like(lon)
    else:
        h = np.atleast_1d(np.asarray(h, dtype=np.float64))

    d = datum(ellipsoid)
    lon_rad = np.radians(lon)
    lat_rad = np.radians(lat)
    sin_lat = np.sin(lat_rad)
    cos_lat = np.cos(lat_rad)

    # Radius of curvature in the prime vertical
    N = d.a / np.sqrt(1.0 - d.e2 * sin_lat**2)

    x = (N + h) * cos_lat * np.cos(lon_rad)
    y = (N + h) * cos_lat * np.sin(lon_rad)
    z = (N * (1.0 - d.e2) + h) * sin_lat
    return x, y, z


def to_geodetic(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    ellipsoid: str = 'GRS80',
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert cartesian (ECEF) coordinates to geodetic

    Parameters
    ----------
    x, y, z : np.ndarray
        Cartesian coordinates (meters)
    ellipsoid : str, default 'GRS80'
        Reference ellipsoid name

    Returns
    -------
    lon : np.ndarray
        Longitude (degrees)
    lat : np.ndarray
        Latitude (degrees)
    h : np.ndarray
        Height above ellipsoid (meters)
    """
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    y = np.atleast_1d(np.asarray(y, dtype=np.float64))
    z = np.atleast_1d(np.asarray(z, dtype=np.float64))

    d = datum(ellipsoid)
    lon = np.arctan2(y, x)
    p = np.sqrt(x**2 + y**2)

    # Bowring iteration
    lat = np.arctan2(z, p * (1.0 - d.e2))
    for _ in range(10):
        sin_lat = np.sin(lat)
        N = d.a / np.sqrt(1.0 - d.e2 * sin_lat**2)
        lat_new = np.arctan2(z + d.e2 * N * sin_lat, p)
        if np.max(np.abs(lat_new - lat)) < 1e-12:
            lat = lat_new
            break
        lat = lat_new

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    N = d.a / np.sqrt(1.0 - d.e2 * sin_lat**2)
    # height from the better conditioned component
    h = np.where(
        np.abs(cos_lat) > 1e-10,
        p / np.where(np.abs(cos_lat) > 1e-10, cos_lat, 1.0) - N,
        np.abs(z) - d.b,
    )
    return np.degrees(lon), np.degrees(lat), h


def to_spherical(
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert cartesian coordinates to geocentric spherical coordinates

    Returns
    -------
    r : np.ndarray
        Radius (meters)
    theta : np.ndarray
        Colatitude (radians)
    lon : np.ndarray
        Longitude (radians)
    """
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    y = np.atleast_1d(np.asarray(y, dtype=np.float64))
    z = np.atleast_1d(np.asarray(z, dtype=np.float64))
    r = np.sqrt(x**2 + y**2 + z**2)
    theta = np.arctan2(np.sqrt(x**2 + y**2), z)
    lon = np.arctan2(y, x)
    return r, theta, lon


def local_frame(
    theta: np.ndarray,
    lon: np.ndarray,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Local east, north and up unit vectors

    Parameters
    ----------
    theta : np.ndarray
        Colatitude (radians)
    lon : np.ndarray
        Longitude (radians)

    Returns
    -------
    east, north, up : np.ndarray
        Cartesian unit vectors, each of shape (n_points, 3)
    """
    theta = np.atleast_1d(np.asarray(theta, dtype=np.float64))
    lon = np.atleast_1d(np.asarray(lon, dtype=np.float64))
    sin_t, cos_t = np.sin(theta), np.cos(theta)
    sin_l, cos_l = np.sin(lon), np.cos(lon)

    east = np.column_stack([-sin_l, cos_l, np.zeros_like(lon)])
    north = np.column_stack([-cos_t * cos_l, -cos_t * sin_l, sin_t])
    up = np.column_stack([sin_t * cos_l, sin_t * sin_l, cos_t])
    return east, north, up


def enu_rotation(points: np.ndarray) -> np.ndarray:
    """
    Rotation matrices from Earth-fixed cartesian to local east/north/up

    Parameters
    ----------
    points : np.ndarray
        Site positions (n_points, 3) in meters

    Returns
    -------
    np.ndarray
        Rotation matrices (n_points, 3, 3); rows are east, north, up
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.float64))
    _, theta, lon = to_spherical(points[:, 0], points[:, 1], points[:, 2])
    east, north, up = local_frame(theta, lon)
    return np.stack([east, north, up], axis=1)


def normal_gravity(
    lat: np.ndarray,
    h: np.ndarray | None = None,
    ellipsoid: str = 'GRS80',
) -> np.ndarray:
    """
    Normal gravity at geodetic latitude and height

    Somigliana's closed formula on the ellipsoid with a linear free-air
    reduction for the height.

    Parameters
    ----------
    lat : np.ndarray
        Geodetic latitude (degrees)
    h : np.ndarray, optional
        Height above ellipsoid (meters), default is 0
    ellipsoid : str, default 'GRS80'
        Reference ellipsoid name

    Returns
    -------
    np.ndarray
        Normal gravity (m/s^2)
    """
    lat = np.atleast_1d(np.asarray(lat, dtype=np.float64))
    if h is None:
        h = np.zeros_like(lat)
    else:
        h = np.atleast_1d(np.asarray(h, dtype=np.float64))

    d = datum(ellipsoid)
    sin2 = np.sin(np.radians(lat))**2
    gamma = d.gamma_e * (1.0 + d.k * sin2) / np.sqrt(1.0 - d.e2 * sin2)
    return gamma - 3.086e-6 * h
