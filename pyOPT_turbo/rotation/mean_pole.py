"""
pyOPT_turbo.rotation.mean_pole - Secular (mean) pole models

The mean pole is the smoothed trend of polar motion which is removed
from the observed pole coordinates before computing pole tides.

References:
    Petit, G. and Luzum, B. (eds.), IERS Conventions (2010),
    IERS Technical Note No. 36, Section 7.1.4 (Table 7.7).
    IERS Conventions Update 2018, secular pole.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from ..constants import DAYS_PER_YEAR, MAS2ARCSEC, MJD_J2000

__all__ = [
    'MeanPolarMotion',
    'PolynomialInterval',
    'decimal_year',
]


def decimal_year(mjd: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Convert Modified Julian Day to decimal year (Julian years from J2000)"""
    return 2000.0 + (np.asarray(mjd, dtype=np.float64) - MJD_J2000) / DAYS_PER_YEAR


@dataclass(frozen=True)
class PolynomialInterval:
    """
    One polynomial piece of a mean pole model

    Coefficients are in ascending powers of ``(year - epoch)`` and in
    arcseconds.
    """
    start: float
    end: float
    x: tuple
    y: tuple


class MeanPolarMotion:
    """
    Piecewise polynomial mean pole model

    Each interval is valid on ``[start, end)`` in decimal years and the
    next interval starts where the previous one ends. Times before the
    first or after the last interval are extrapolated with the first or
    last polynomial.

    Parameters
    ----------
    intervals : sequence of PolynomialInterval
        Contiguous polynomial pieces, sorted by start year
    epoch : float, default 2000.0
        Reference epoch of the polynomials (decimal year)
    name : str, optional
        Model name

    Examples
    --------
    >>> model = MeanPolarMotion.iers2018()
    >>> x_bar, y_bar = model.compute(58849.0)
    """

    def __init__(
        self,
        intervals: Sequence[PolynomialInterval],
        epoch: float = 2000.0,
        name: str = '',
    ):
        intervals = tuple(intervals)
        if not intervals:
            raise ValueError("Mean pole model needs at least one interval")
        for interval in intervals:
            if len(interval.x) == 0 or len(interval.y) == 0:
                raise ValueError("Mean pole interval without coefficients")
            if interval.end <= interval.start:
                raise ValueError(
                    f"Mean pole interval end ({interval.end}) "
                    f"must be after start ({interval.start})"
                )
        # each piece starts where the previous one ends
        for i, (current, following) in enumerate(zip(intervals[:-1], intervals[1:])):
            if current.end != following.start:
                raise ValueError(
                    f"Mean pole intervals must be sorted and contiguous: interval {i} "
                    f"ends at {current.end}, interval {i + 1} starts at {following.start}"
                )
        starts = np.array([i.start for i in intervals])

        self._intervals = intervals
        self._starts = starts
        self._starts.flags.writeable = False
        self.epoch = float(epoch)
        self.name = name

    @property
    def intervals(self) -> tuple:
        return self._intervals

    def compute(
        self,
        mjd: Union[float, np.ndarray],
    ) -> tuple[Union[float, np.ndarray], Union[float, np.ndarray]]:
        """
        Mean pole coordinates

        Parameters
        ----------
        mjd : float or np.ndarray
            Modified Julian Day

        Returns
        -------
        x_bar, y_bar : float or np.ndarray
            Mean pole coordinates (arcseconds)
        """
        scalar = np.ndim(mjd) == 0
        years = np.atleast_1d(decimal_year(mjd))
        dt = years - self.epoch

        index = np.searchsorted(self._starts, years, side='right') - 1
        index = np.clip(index, 0, len(self._intervals) - 1)

        x_bar = np.zeros_like(years)
        y_bar = np.zeros_like(years)
        for i, interval in enumerate(self._intervals):
            mask = index == i
            if not np.any(mask):
                continue
            x_bar[mask] = np.polynomial.polynomial.polyval(dt[mask], interval.x)
            y_bar[mask] = np.polynomial.polynomial.polyval(dt[mask], interval.y)

        if scalar:
            return float(x_bar[0]), float(y_bar[0])
        return x_bar, y_bar

    # ---------------------------------------------------------------------
    # Builtin models
    # ---------------------------------------------------------------------

    @classmethod
    def from_mas(
        cls,
        pieces: Sequence[tuple],
        epoch: float = 2000.0,
        name: str = '',
    ) -> MeanPolarMotion:
        """Build a model from ``(start, end, x, y)`` pieces in milliarcseconds"""
        intervals = [
            PolynomialInterval(
                start=float(start),
                end=float(end),
                x=tuple(c * MAS2ARCSEC for c in x),
                y=tuple(c * MAS2ARCSEC for c in y),
            )
            for start, end, x, y in pieces
        ]
        return cls(intervals, epoch=epoch, name=name)

    @classmethod
    def iers2010(cls) -> MeanPolarMotion:
        """Conventional mean pole of the IERS Conventions 2010"""
        return cls.from_mas([
            (-np.inf, 2010.0,
             (55.974, 1.8243, 0.18413, 0.007024),
             (346.346, 1.7896, -0.10729, -0.000908)),
            (2010.0, np.inf,
             (23.513, 7.6141),
             (358.891, -0.6287)),
        ], name='IERS2010')

    @classmethod
    def iers2018(cls) -> MeanPolarMotion:
        """Linear secular pole of the 2018 update of the IERS Conventions"""
        return cls.from_mas([
            (-np.inf, np.inf, (55.0, 1.677), (320.5, 3.460)),
        ], name='IERS2018')

    @classmethod
    def zero(cls) -> MeanPolarMotion:
        """Mean pole fixed at the reference pole"""
        return cls([PolynomialInterval(-np.inf, np.inf, (0.0,), (0.0,))],
                   name='zero')

    def __repr__(self) -> str:
        return (f"MeanPolarMotion(name={self.name!r}, epoch={self.epoch}, "
                f"intervals={len(self._intervals)})")
