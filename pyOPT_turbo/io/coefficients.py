"""
pyOPT_turbo.io.coefficients - Ocean pole tide coefficient files

Reads the real and imaginary spherical harmonic fields of the ocean pole
tide (self-consistent equilibrium model of Desai, 2002, expressed as
potential coefficients) from NetCDF or plain text files.

NetCDF layout:
    variables ``cnm_real``, ``snm_real``, ``cnm_imag``, ``snm_imag`` on
    dimensions ``(degree, order)``; ``GM`` and ``R`` attributes on the
    dataset or on the individual variables.

Text layout::

    # comment
    GM  3.986004415e+14
    R   6378136.3
    # n  m  C_real  S_real  C_imag  S_imag
    2  0  ...

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import logging
import pathlib
import warnings
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import xarray as xr

from ..errors import ConfigurationError, FileFormatError
from ..harmonics import SphericalHarmonics

__all__ = [
    'OceanPoleCoefficients',
    'read_ocean_pole_tide',
    'write_ocean_pole_tide',
]

logger = logging.getLogger(__name__)

_NETCDF_SUFFIXES = ('.nc', '.nc4', '.netcdf')


def _check_reference(real: SphericalHarmonics, imag: SphericalHarmonics) -> None:
    """Real and imaginary fields must share GM and R"""
    if real.GM != imag.GM or real.R != imag.R:
        raise FileFormatError(
            f"Inconsistent reference of real (GM={real.GM}, R={real.R}) and "
            f"imaginary (GM={imag.GM}, R={imag.R}) coefficients"
        )


def _read_netcdf(input_file: pathlib.Path) -> tuple[SphericalHarmonics, SphericalHarmonics]:
    fields = []
    with xr.open_dataset(input_file) as ds:
        for part in ('real', 'imag'):
            cnm = ds[f'cnm_{part}']
            snm = ds[f'snm_{part}']
            reference = []
            for key in ('GM', 'R'):
                values = {float(var.attrs.get(key, ds.attrs.get(key, np.nan)))
                          for var in (cnm, snm)}
                if len(values) != 1:
                    raise FileFormatError(
                        f"Inconsistent {key} between cnm_{part} and snm_{part}"
                    )
                value = values.pop()
                if not np.isfinite(value):
                    raise FileFormatError(f"Missing {key} attribute for {part} coefficients")
                reference.append(value)
            GM, R = reference
            fields.append(SphericalHarmonics(
                GM, R,
                cnm.transpose('degree', 'order').values,
                snm.transpose('degree', 'order').values,
            ))
    return fields[0], fields[1]


def _read_text(input_file: pathlib.Path) -> tuple[SphericalHarmonics, SphericalHarmonics]:
    header = {}
    rows = []
    with open(input_file, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            line = line.split('#', 1)[0].strip()
            if not line:
                continue
            tokens = line.split()
            key = tokens[0].upper()
            if key in ('GM', 'R'):
                if len(tokens) != 2:
                    raise FileFormatError(f"{input_file}:{line_number}: malformed {key} line")
                header[key] = float(tokens[1])
                continue
            if len(tokens) != 6:
                raise FileFormatError(
                    f"{input_file}:{line_number}: expected 6 columns, got {len(tokens)}"
                )
            n, m = int(tokens[0]), int(tokens[1])
            if n < 0 or m < 0 or m > n:
                raise FileFormatError(f"{input_file}:{line_number}: invalid degree/order {n} {m}")
            rows.append((n, m, *map(float, tokens[2:])))

    for key in ('GM', 'R'):
        if key not in header:
            raise FileFormatError(f"{input_file}: missing {key} header")
    if not rows:
        raise FileFormatError(f"{input_file}: no coefficients found")

    N = max(row[0] for row in rows)
    arrays = np.zeros((4, N + 1, N + 1))
    for n, m, c_real, s_real, c_imag, s_imag in rows:
        arrays[:, n, m] = (c_real, s_real, c_imag, s_imag)
    real = SphericalHarmonics(header['GM'], header['R'], arrays[0], arrays[1])
    imag = SphericalHarmonics(header['GM'], header['R'], arrays[2], arrays[3])
    return real, imag


def read_ocean_pole_tide(
    input_file: Union[str, pathlib.Path],
) -> tuple[SphericalHarmonics, SphericalHarmonics]:
    """
    Read ocean pole tide coefficients

    Parameters
    ----------
    input_file : str or pathlib.Path
        NetCDF (``.nc``) or text coefficient file

    Returns
    -------
    real, imag : SphericalHarmonics
        Real and imaginary admittance fields

    Raises
    ------
    FileFormatError
        File missing, unreadable, or GM/R inconsistent
    """
    input_file = pathlib.Path(input_file).expanduser()
    try:
        if not input_file.exists():
            raise FileNotFoundError(f"File not found: {input_file}")
        if input_file.suffix.lower() in _NETCDF_SUFFIXES:
            real, imag = _read_netcdf(input_file)
        else:
            real, imag = _read_text(input_file)
        _check_reference(real, imag)
    except FileFormatError:
        raise
    except (OSError, ValueError, KeyError) as e:
        raise FileFormatError(f"Cannot read ocean pole tide file {input_file}: {e}") from e

    logger.debug("Read ocean pole tide coefficients from %s (max degree %d)",
                 input_file, real.max_degree)
    return real, imag


def write_ocean_pole_tide(
    output_file: Union[str, pathlib.Path],
    real: SphericalHarmonics,
    imag: SphericalHarmonics,
) -> None:
    """
    Write ocean pole tide coefficients

    The format follows the file suffix: NetCDF for ``.nc``, text otherwise.
    """
    _check_reference(real, imag)
    output_file = pathlib.Path(output_file).expanduser()
    N = max(real.max_degree, imag.max_degree)
    real, imag = real.get(N), imag.get(N)

    if output_file.suffix.lower() in _NETCDF_SUFFIXES:
        dims = ('degree', 'order')
        ds = xr.Dataset(
            data_vars={
                'cnm_real': (dims, real.cnm),
                'snm_real': (dims, real.snm),
                'cnm_imag': (dims, imag.cnm),
                'snm_imag': (dims, imag.snm),
            },
            coords={'degree': np.arange(N + 1), 'order': np.arange(N + 1)},
            attrs={'GM': real.GM, 'R': real.R,
                   'description': 'ocean pole tide potential coefficients'},
        )
        ds.to_netcdf(output_file)
        return

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write('# ocean pole tide potential coefficients\n')
        f.write(f'GM {real.GM!r}\n')
        f.write(f'R  {real.R!r}\n')
        f.write('# n m C_real S_real C_imag S_imag\n')
        for n in range(N + 1):
            for m in range(n + 1):
                values = (real.cnm[n, m], real.snm[n, m], imag.cnm[n, m], imag.snm[n, m])
                f.write(f'{n} {m} ' + ' '.join(f'{v:.17g}' for v in values) + '\n')


@dataclass(frozen=True)
class OceanPoleCoefficients:
    """
    Static real and imaginary ocean pole tide fields

    Both fields share the reference GM and R. Instances are read-only
    and safe to share between threads.
    """
    real: SphericalHarmonics
    imag: SphericalHarmonics

    def __post_init__(self):
        _check_reference(self.real, self.imag)
        if self.real.max_degree != self.imag.max_degree:
            raise FileFormatError(
                f"Real (max degree {self.real.max_degree}) and imaginary "
                f"(max degree {self.imag.max_degree}) coefficients differ in size"
            )

    @property
    def GM(self) -> float:
        return self.real.GM

    @property
    def R(self) -> float:
        return self.real.R

    @property
    def max_degree(self) -> int:
        return self.real.max_degree

    @classmethod
    def load(
        cls,
        input_file: Union[str, pathlib.Path],
        min_degree: int = 2,
        max_degree: Optional[int] = None,
        factor: float = 1.0,
    ) -> OceanPoleCoefficients:
        """
        Read, truncate and scale the coefficient fields

        Parameters
        ----------
        input_file : str or pathlib.Path
            Coefficient file
        min_degree : int, default 2
            Lowest degree kept
        max_degree : int, optional
            Highest degree kept (default: file maximum)
        factor : float, default 1.0
            Multiplier applied to both fields (-1 subtracts the tide)
        """
        real, imag = read_ocean_pole_tide(input_file)
        N = max(real.max_degree, imag.max_degree)
        if max_degree is not None and max_degree > N:
            warnings.warn(
                f"Requested max_degree {max_degree} exceeds file maximum {N} "
                f"in {input_file}; higher degrees are zero.",
                RuntimeWarning,
                stacklevel=2
            )
        try:
            real = factor * real.get(max_degree if max_degree is not None else N, min_degree)
            imag = factor * imag.get(max_degree if max_degree is not None else N, min_degree)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid degree range [{min_degree}, {max_degree}] for {input_file}: {e}"
            ) from e
        return cls(real, imag)
