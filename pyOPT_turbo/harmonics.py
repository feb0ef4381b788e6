"""
pyOPT_turbo.harmonics - Spherical harmonic coefficient fields

Provides a small immutable container for fully normalized (4 pi)
potential coefficients and the associated Legendre functions needed
to evaluate them at surface sites.

References:
    W. A. Heiskanen and H. Moritz, "Physical Geodesy", 1967.
    S. A. Holmes and W. E. Featherstone, "A unified approach to the
    Clenshaw summation and the recursive computation of very high degree
    and order normalised associated Legendre functions",
    J. Geodesy 76, 2002.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

from functools import lru_cache

import numpy as np

__all__ = [
    'SphericalHarmonics',
    'coefficient_index',
    'legendre_functions',
]


def coefficient_index(n: int, m: int) -> int:
    """
    Position of C(n,m) in a degree-wise coefficient vector

    The vector is ordered ``C(n,0), C(n,1), S(n,1), ..., C(n,n), S(n,n)``
    for n = 0 ... N, so S(n,m) directly follows C(n,m).
    """
    if m < 0 or m > n:
        raise ValueError(f"Invalid degree/order: n={n}, m={m}")
    return n * n + (2 * m - 1 if m > 0 else 0)


@lru_cache(maxsize=16)
def _vector_layout(max_degree: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Degree, order and sine-flag for every slot of the coefficient vector"""
    degree = []
    order = []
    sine = []
    for n in range(max_degree + 1):
        degree.append(n)
        order.append(0)
        sine.append(False)
        for m in range(1, n + 1):
            degree.extend((n, n))
            order.extend((m, m))
            sine.extend((False, True))
    layout = (np.array(degree), np.array(order), np.array(sine))
    for arr in layout:
        arr.flags.writeable = False
    return layout


def legendre_functions(
    theta: np.ndarray,
    max_degree: int,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Fully normalized associated Legendre functions and derivatives

    Parameters
    ----------
    theta : np.ndarray
        Colatitude (radians), shape (n_points,)
    max_degree : int
        Maximum degree N

    Returns
    -------
    Pnm : np.ndarray
        P_nm(cos theta), shape (n_points, N+1, N+1)
    dPnm : np.ndarray
        dP_nm / d theta, same shape
    Qnm : np.ndarray
        P_nm / sin(theta) for m >= 1 (zero for m = 0), same shape.
        Finite at the poles.
    """
    theta = np.atleast_1d(np.asarray(theta, dtype=np.float64))
    N = int(max_degree)
    if N < 0:
        raise ValueError(f"max_degree must be non-negative, got {max_degree}")

    t = np.cos(theta)
    s = np.sin(theta)
    n_points = theta.shape[0]

    Pnm = np.zeros((n_points, N + 1, N + 1))
    Qnm = np.zeros((n_points, N + 1, N + 1))

    # Zonal column
    Pnm[:, 0, 0] = 1.0
    if N >= 1:
        Pnm[:, 1, 0] = np.sqrt(3.0) * t
    for n in range(2, N + 1):
        a = np.sqrt((2 * n - 1) * (2 * n + 1)) / n
        b = (n - 1) / n * np.sqrt((2 * n + 1) / (2 * n - 3))
        Pnm[:, n, 0] = a * t * Pnm[:, n - 1, 0] - b * Pnm[:, n - 2, 0]

    # Non-zonal columns are recursed without the leading sin(theta)
    for m in range(1, N + 1):
        if m == 1:
            Qnm[:, 1, 1] = np.sqrt(3.0)
        else:
            Qnm[:, m, m] = s * np.sqrt((2 * m + 1) / (2 * m)) * Qnm[:, m - 1, m - 1]
        if m < N:
            Qnm[:, m + 1, m] = np.sqrt(2 * m + 3) * t * Qnm[:, m, m]
        for n in range(m + 2, N + 1):
            a = np.sqrt((2 * n - 1) * (2 * n + 1) / ((n - m) * (n + m)))
            b = np.sqrt((2 * n + 1) * (n + m - 1) * (n - m - 1)
                        / ((n - m) * (n + m) * (2 * n - 3)))
            Qnm[:, n, m] = a * t * Qnm[:, n - 1, m] - b * Qnm[:, n - 2, m]
    Pnm[:, :, 1:] = Qnm[:, :, 1:] * s[:, None, None]

    # Derivatives with respect to colatitude
    dPnm = np.zeros_like(Pnm)
    degrees = np.arange(N + 1, dtype=np.float64)
    if N >= 1:
        nn = degrees[1:]
        dPnm[:, 1:, 0] = -np.sqrt(nn * (nn + 1) / 2.0) * Pnm[:, 1:, 1]
    for m in range(1, N + 1):
        nn = degrees[m:]
        lower = np.sqrt((nn + m) * (nn - m + 1)) * Pnm[:, m:, m - 1]
        if m == 1:
            lower *= np.sqrt(2.0)
        if m < N:
            upper = np.sqrt((nn - m) * (nn + m + 1)) * Pnm[:, m:, m + 1]
        else:
            upper = 0.0
        dPnm[:, m:, m] = 0.5 * (lower - upper)

    return Pnm, dPnm, Qnm


class SphericalHarmonics:
    """
    Immutable field of fully normalized spherical harmonic coefficients

    Parameters
    ----------
    GM : float
        Reference geocentric gravitational constant (m^3/s^2)
    R : float
        Reference radius (m)
    cnm : np.ndarray
        Cosine coefficients, shape (N+1, N+1), lower triangular
    snm : np.ndarray, optional
        Sine coefficients, same shape (zero if omitted)
    min_degree : int, default 0
        Lowest degree carrying coefficients

    Examples
    --------
    >>> cnm = np.zeros((3, 3)); cnm[2, 0] = 1e-9
    >>> field = SphericalHarmonics(3.986004415e14, 6378136.3, cnm)
    >>> field.get(max_degree=2, min_degree=2).max_degree
    2
    """

    def __init__(
        self,
        GM: float,
        R: float,
        cnm: np.ndarray,
        snm: np.ndarray | None = None,
        min_degree: int = 0,
    ):
        cnm = np.array(cnm, dtype=np.float64)
        if cnm.ndim != 2 or cnm.shape[0] != cnm.shape[1]:
            raise ValueError(f"cnm must be a square matrix, got shape {cnm.shape}")
        if snm is None:
            snm = np.zeros_like(cnm)
        else:
            snm = np.array(snm, dtype=np.float64)
        if snm.shape != cnm.shape:
            raise ValueError(
                f"cnm and snm shapes differ: {cnm.shape} != {snm.shape}"
            )
        if min_degree < 0:
            raise ValueError(f"min_degree must be non-negative, got {min_degree}")

        # Only the lower triangle is meaningful; S(n,0) is always zero
        mask = np.tril(np.ones(cnm.shape, dtype=bool))
        cnm[~mask] = 0.0
        snm[~mask] = 0.0
        snm[:, 0] = 0.0
        cnm.flags.writeable = False
        snm.flags.writeable = False

        self._GM = float(GM)
        self._R = float(R)
        self._cnm = cnm
        self._snm = snm
        self._min_degree = int(min_degree)

    @property
    def GM(self) -> float:
        return self._GM

    @property
    def R(self) -> float:
        return self._R

    @property
    def cnm(self) -> np.ndarray:
        return self._cnm

    @property
    def snm(self) -> np.ndarray:
        return self._snm

    @property
    def max_degree(self) -> int:
        return self._cnm.shape[0] - 1

    @property
    def min_degree(self) -> int:
        return self._min_degree

    def get(
        self,
        max_degree: int | None = None,
        min_degree: int = 0,
        GM: float | None = None,
        R: float | None = None,
    ) -> SphericalHarmonics:
        """
        Truncate and rescale to a new degree range and reference

        Parameters
        ----------
        max_degree : int, optional
            Maximum degree of the result (default: native maximum).
            Larger values pad with zeros.
        min_degree : int, default 0
            Degrees below this value are set to zero
        GM : float, optional
            Target reference GM (default: unchanged)
        R : float, optional
            Target reference radius (default: unchanged)

        Returns
        -------
        SphericalHarmonics
            New independent field
        """
        N = self.max_degree if max_degree is None else int(max_degree)
        min_degree = int(min_degree)
        if N < 0 or min_degree < 0:
            raise ValueError(
                f"Degrees must be non-negative: max_degree={N}, min_degree={min_degree}"
            )
        if min_degree > N:
            raise ValueError(
                f"min_degree ({min_degree}) exceeds max_degree ({N})"
            )
        GM = self._GM if GM is None else float(GM)
        R = self._R if R is None else float(R)

        cnm = np.zeros((N + 1, N + 1))
        snm = np.zeros((N + 1, N + 1))
        n_copy = min(N, self.max_degree) + 1
        cnm[:n_copy, :n_copy] = self._cnm[:n_copy, :n_copy]
        snm[:n_copy, :n_copy] = self._snm[:n_copy, :n_copy]
        cnm[:min_degree, :] = 0.0
        snm[:min_degree, :] = 0.0

        if (GM != self._GM) or (R != self._R):
            scale = (self._GM / GM) * (self._R / R) ** np.arange(N + 1)
            cnm *= scale[:, None]
            snm *= scale[:, None]

        return SphericalHarmonics(GM, R, cnm, snm,
                                  min_degree=max(min_degree, self._min_degree))

    def coefficient_vector(self) -> np.ndarray:
        """Coefficients flattened degree-wise (see :func:`coefficient_index`)"""
        degree, order, sine = _vector_layout(self.max_degree)
        return np.where(sine, self._snm[degree, order], self._cnm[degree, order])

    @classmethod
    def from_vector(
        cls,
        GM: float,
        R: float,
        x: np.ndarray,
        min_degree: int = 0,
    ) -> SphericalHarmonics:
        """Inverse of :meth:`coefficient_vector`"""
        x = np.asarray(x, dtype=np.float64)
        N = int(round(np.sqrt(x.size))) - 1
        if (N + 1) ** 2 != x.size:
            raise ValueError(
                f"Vector length {x.size} is not (N+1)^2 for any degree N"
            )
        degree, order, sine = _vector_layout(N)
        cnm = np.zeros((N + 1, N + 1))
        snm = np.zeros((N + 1, N + 1))
        cnm[degree[~sine], order[~sine]] = x[~sine]
        snm[degree[sine], order[sine]] = x[sine]
        return cls(GM, R, cnm, snm, min_degree=min_degree)

    def __mul__(self, factor: float) -> SphericalHarmonics:
        factor = float(factor)
        return SphericalHarmonics(self._GM, self._R, factor * self._cnm,
                                  factor * self._snm, min_degree=self._min_degree)

    __rmul__ = __mul__

    def __neg__(self) -> SphericalHarmonics:
        return self * -1.0

    def __add__(self, other: SphericalHarmonics) -> SphericalHarmonics:
        if not isinstance(other, SphericalHarmonics):
            return NotImplemented
        # result keeps the reference of the left operand
        N = max(self.max_degree, other.max_degree)
        lhs = self.get(N)
        rhs = other.get(N, GM=self._GM, R=self._R)
        return SphericalHarmonics(self._GM, self._R, lhs.cnm + rhs.cnm,
                                  lhs.snm + rhs.snm,
                                  min_degree=min(self._min_degree, other.min_degree))

    def __repr__(self) -> str:
        return (f"SphericalHarmonics(GM={self._GM!r}, R={self._R!r}, "
                f"min_degree={self._min_degree}, max_degree={self.max_degree})")
