"""
pyOPT_turbo.io.mean_pole - Mean pole model files

JSON layout::

    {
        "name": "IERS2018",
        "epoch": 2000.0,
        "units": "mas",
        "intervals": [
            {"start": null, "end": null, "x": [55.0, 1.677], "y": [320.5, 3.460]}
        ]
    }

``start``/``end`` are decimal years (``null`` for unbounded), ``x``/``y``
polynomial coefficients in ascending powers of ``(year - epoch)``.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Union

import numpy as np

from ..constants import MAS2ARCSEC
from ..errors import FileFormatError
from ..rotation.mean_pole import MeanPolarMotion, PolynomialInterval

__all__ = [
    'BUILTIN_MEAN_POLES',
    'read_mean_pole',
    'write_mean_pole',
]

logger = logging.getLogger(__name__)

BUILTIN_MEAN_POLES = {
    'iers2010': MeanPolarMotion.iers2010,
    'iers2018': MeanPolarMotion.iers2018,
    'zero': MeanPolarMotion.zero,
}

_UNITS = {'mas': MAS2ARCSEC, 'arcsec': 1.0}


def _bound(value, default: float) -> float:
    return default if value is None else float(value)


def read_mean_pole(input_file: Union[str, pathlib.Path]) -> MeanPolarMotion:
    """
    Read a mean pole model

    Parameters
    ----------
    input_file : str or pathlib.Path
        JSON model file, or one of the builtin names
        ('iers2010', 'iers2018', 'zero')

    Returns
    -------
    MeanPolarMotion

    Raises
    ------
    FileFormatError
        File missing, not valid JSON, or describing an invalid model
    """
    name = str(input_file).lower()
    if name in BUILTIN_MEAN_POLES:
        return BUILTIN_MEAN_POLES[name]()

    input_file = pathlib.Path(input_file).expanduser()
    try:
        with open(input_file, 'r', encoding='utf-8') as f:
            d = json.load(f)
        if not isinstance(d, dict):
            raise FileFormatError(
                f"Mean pole file {input_file} must hold a JSON object, "
                f"not {type(d).__name__}"
            )
        units = d.get('units', 'arcsec')
        if not isinstance(units, str) or units.lower() not in _UNITS:
            raise FileFormatError(
                f"Unknown mean pole units {units!r}. Supported: {list(_UNITS)}"
            )
        scale = _UNITS[units.lower()]
        if not all(isinstance(item, dict) for item in d['intervals']):
            raise FileFormatError(
                f"Mean pole intervals in {input_file} must be JSON objects"
            )
        intervals = [
            PolynomialInterval(
                start=_bound(item.get('start'), -np.inf),
                end=_bound(item.get('end'), np.inf),
                x=tuple(float(c) * scale for c in item['x']),
                y=tuple(float(c) * scale for c in item['y']),
            )
            for item in d['intervals']
        ]
        model = MeanPolarMotion(intervals, epoch=float(d.get('epoch', 2000.0)),
                                name=d.get('name', input_file.stem))
    except FileFormatError:
        raise
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise FileFormatError(f"Cannot read mean pole file {input_file}: {e}") from e

    logger.debug("Read mean pole model '%s' from %s", model.name, input_file)
    return model


def write_mean_pole(
    output_file: Union[str, pathlib.Path],
    model: MeanPolarMotion,
) -> None:
    """Write a mean pole model as JSON (arcseconds)"""

    def bound(value):
        return None if not np.isfinite(value) else value

    d = {
        'name': model.name,
        'epoch': model.epoch,
        'units': 'arcsec',
        'intervals': [
            {'start': bound(i.start), 'end': bound(i.end),
             'x': list(i.x), 'y': list(i.y)}
            for i in model.intervals
        ],
    }
    with open(pathlib.Path(output_file).expanduser(), 'w', encoding='utf-8') as f:
        json.dump(d, f, indent=2)
