"""
pyOPT_turbo.tides.ocean_pole - Ocean pole tide

The ocean pole tide is the ocean response to the centrifugal potential
perturbation of polar motion. Following IERS Conventions (2010) 6.5 and
7.1.5, the wobble variables

    m1 =   (xp - xp_mean)
    m2 = -(yp - yp_mean)

(arcseconds) scale a static real and imaginary coefficient field through
the admittance gamma = gamma_real + i gamma_imaginary:

    C = (m1 gR + m2 gI) C_real + (m2 gR - m1 gI) C_imag

and likewise for S, with the weights converted to radians.

References:
    S. D. Desai, "Observing the pole tide with satellite altimetry",
    J. Geophys. Res. 107(C11), 2002.
    Petit, G. and Luzum, B. (eds.), IERS Conventions (2010),
    IERS Technical Note No. 36.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Optional, Union

import numpy as np

from ..config import OceanPoleTideConfig
from ..constants import ARCSEC2RAD, GAMMA_IMAGINARY, GAMMA_REAL, RAD2ARCSEC
from ..errors import ConfigurationError, FileFormatError
from ..harmonics import SphericalHarmonics
from ..io.coefficients import OceanPoleCoefficients
from ..io.mean_pole import read_mean_pole
from ..rotation.earth_rotation import EarthRotation
from ..rotation.mean_pole import MeanPolarMotion
from .base import LoadResponseCache, Tides, check_accumulator, deformation_matrix

__all__ = [
    'TidesOceanPole',
    'admittance_weights',
    'pole_excitation',
]

logger = logging.getLogger(__name__)


def pole_excitation(
    mjd: Union[float, np.ndarray],
    earth_rotation: EarthRotation,
    mean_pole: MeanPolarMotion,
) -> tuple[Union[float, np.ndarray], Union[float, np.ndarray]]:
    """
    Wobble variables m1, m2 in arcseconds

    Parameters
    ----------
    mjd : float or np.ndarray
        Modified Julian Day
    earth_rotation : EarthRotation
        Polar motion provider (radians)
    mean_pole : MeanPolarMotion
        Mean pole model (arcseconds)

    Returns
    -------
    m1, m2 : float or np.ndarray
        Pole offsets from the mean pole; m2 carries the sign flip of
        the y coordinate
    """
    eop = earth_rotation.earth_orientation_parameter(mjd)
    x_bar, y_bar = mean_pole.compute(mjd)
    m1 = eop.xp * RAD2ARCSEC - x_bar
    m2 = -(eop.yp * RAD2ARCSEC - y_bar)
    return m1, m2


def admittance_weights(
    m1: Union[float, np.ndarray],
    m2: Union[float, np.ndarray],
    gamma_real: float = GAMMA_REAL,
    gamma_imaginary: float = GAMMA_IMAGINARY,
) -> tuple[Union[float, np.ndarray], Union[float, np.ndarray]]:
    """
    Weights of the real and imaginary coefficient fields

    Shared by the potential and the deformation evaluations.

    Returns
    -------
    w_real, w_imag : float or np.ndarray
        Dimensionless weights (radians)
    """
    w_real = (m1 * gamma_real + m2 * gamma_imaginary) * ARCSEC2RAD
    w_imag = (m2 * gamma_real - m1 * gamma_imaginary) * ARCSEC2RAD
    return w_real, w_imag


class TidesOceanPole(Tides):
    """
    Ocean pole tide model

    Parameters
    ----------
    config : OceanPoleTideConfig or dict
        Coefficient file, mean pole model, degree range, admittance and
        factor. Mappings are converted with
        :meth:`OceanPoleTideConfig.from_dict`.

    Raises
    ------
    ConfigurationError
        Invalid settings
    FileFormatError
        Coefficient or mean pole file missing or unreadable

    Examples
    --------
    >>> tide = TidesOceanPole({'inputfileOceanPole': 'desai2002.nc',
    ...                        'inputfileMeanPole': 'iers2018'})
    >>> field = tide.potential(60000.0, eop, max_degree=30)
    """

    def __init__(self, config: Union[OceanPoleTideConfig, dict]):
        try:
            if not isinstance(config, OceanPoleTideConfig):
                config = OceanPoleTideConfig.from_dict(config)
            coefficients = OceanPoleCoefficients.load(
                config.ocean_pole_path,
                min_degree=config.min_degree,
                max_degree=config.max_degree,
                factor=config.factor,
            )
            mean_pole = read_mean_pole(config.mean_pole_path)
        except (ConfigurationError, FileFormatError) as e:
            raise type(e)(f"Cannot initialize ocean pole tide: {e}") from e

        self.config = config
        self._setup(coefficients, mean_pole, config.gamma_real, config.gamma_imaginary)
        logger.debug("Initialized %r", self)

    def _setup(self, coefficients, mean_pole, gamma_real, gamma_imaginary):
        self.coefficients = coefficients
        self.mean_pole = mean_pole
        self.gamma_real = float(gamma_real)
        self.gamma_imaginary = float(gamma_imaginary)
        self._cache = LoadResponseCache()

    @classmethod
    def from_files(
        cls,
        ocean_pole_file: Union[str, pathlib.Path],
        mean_pole_file: Union[str, pathlib.Path] = 'iers2018',
        **kwargs,
    ) -> TidesOceanPole:
        """Construct from file paths; keyword arguments as in the configuration"""
        return cls(OceanPoleTideConfig(
            input_file_ocean_pole=str(ocean_pole_file),
            input_file_mean_pole=str(mean_pole_file),
            **kwargs,
        ))

    @classmethod
    def from_coefficients(
        cls,
        coefficients: OceanPoleCoefficients,
        mean_pole: MeanPolarMotion,
        gamma_real: float = GAMMA_REAL,
        gamma_imaginary: float = GAMMA_IMAGINARY,
    ) -> TidesOceanPole:
        """Construct from already loaded fields"""
        tide = cls.__new__(cls)
        tide.config = None
        tide._setup(coefficients, mean_pole, gamma_real, gamma_imaginary)
        return tide

    def pole(self, mjd, earth_rotation):
        """Wobble variables m1, m2 (arcseconds) at the given epochs"""
        return pole_excitation(mjd, earth_rotation, self.mean_pole)

    def weights(self, mjd, earth_rotation):
        """Real and imaginary field weights at the given epochs"""
        m1, m2 = self.pole(mjd, earth_rotation)
        return admittance_weights(m1, m2, self.gamma_real, self.gamma_imaginary)

    def potential(
        self,
        mjd: float,
        earth_rotation: EarthRotation,
        max_degree: Optional[int] = None,
        min_degree: int = 0,
        GM: Optional[float] = None,
        R: Optional[float] = None,
    ) -> SphericalHarmonics:
        if np.ndim(mjd) != 0:
            raise ValueError("potential is evaluated at a single epoch")
        w_real, w_imag = self.weights(float(mjd), earth_rotation)
        real = self.coefficients.real
        imag = self.coefficients.imag
        field = SphericalHarmonics(
            real.GM, real.R,
            w_real * real.cnm + w_imag * imag.cnm,
            w_real * real.snm + w_imag * imag.snm,
            min_degree=real.min_degree,
        )
        return field.get(max_degree, min_degree, GM, R)

    def _load_response(self, points, gravity, hn, ln):
        """Displacement images of the real and imaginary fields, (3*n_points,) each"""
        gravity = np.ascontiguousarray(
            np.broadcast_to(np.asarray(gravity, dtype=np.float64), (points.shape[0],)))
        hn = np.ascontiguousarray(hn, dtype=np.float64)
        ln = np.ascontiguousarray(ln, dtype=np.float64)
        key = LoadResponseCache.key(points, gravity, hn, ln)

        def build():
            real = self.coefficients.real
            A = deformation_matrix(points, gravity, hn, ln, real.GM, real.R, real.max_degree)
            n_coeff = A.shape[1]
            x_real = A @ real.coefficient_vector()[:n_coeff]
            x_imag = A @ self.coefficients.imag.coefficient_vector()[:n_coeff]
            return x_real, x_imag

        return self._cache.get(key, build)

    def deformation(self, mjd, points, earth_rotation, gravity, hn, ln, disp):
        mjd = np.atleast_1d(np.asarray(mjd, dtype=np.float64))
        points = np.ascontiguousarray(np.asarray(points, dtype=np.float64).reshape(-1, 3))
        n_points, n_times = points.shape[0], mjd.size
        if n_points == 0 or n_times == 0:
            return
        check_accumulator(disp, n_points, n_times)

        x_real, x_imag = self._load_response(points, gravity, hn, ln)
        w_real, w_imag = self.weights(mjd, earth_rotation)
        x = np.outer(x_real, w_real) + np.outer(x_imag, w_imag)
        disp += x.reshape(n_points, 3, n_times).transpose(0, 2, 1)

    def __repr__(self) -> str:
        return (f"TidesOceanPole(max_degree={self.coefficients.max_degree}, "
                f"mean_pole={self.mean_pole.name!r}, "
                f"gamma=({self.gamma_real}, {self.gamma_imaginary}))")
