"""
pyOPT_turbo.config - Ocean pole tide configuration

Settings can be given with the camelCase names used in tide model
configuration files (``inputfileOceanPole``, ``minDegree`` ...) or with
their Python attribute names.

Environment variables:
    PYOPT_TURBO_DATA: directory substituted for ``{dataDir}`` in paths
        (default: ~/.cache/pyOPT)

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import json
import os
import pathlib
from dataclasses import asdict, dataclass
from typing import Any, Optional, Union

from .constants import GAMMA_IMAGINARY, GAMMA_REAL
from .errors import ConfigurationError
from .io.mean_pole import BUILTIN_MEAN_POLES

__all__ = [
    'OceanPoleTideConfig',
    'get_data_path',
    'load_config',
    'resolve_path',
]

# file key -> attribute
_KEYS = {
    'inputfileOceanPole': 'input_file_ocean_pole',
    'minDegree': 'min_degree',
    'maxDegree': 'max_degree',
    'gammaReal': 'gamma_real',
    'gammaImaginary': 'gamma_imaginary',
    'inputfileMeanPole': 'input_file_mean_pole',
    'factor': 'factor',
}


def get_data_path() -> pathlib.Path:
    """Directory substituted for ``{dataDir}``"""
    env = os.environ.get('PYOPT_TURBO_DATA', '')
    if env:
        return pathlib.Path(env).expanduser()
    return pathlib.Path.home() / '.cache' / 'pyOPT'


def resolve_path(path: Union[str, pathlib.Path]) -> pathlib.Path:
    """Expand ``{dataDir}``, environment variables and ``~``"""
    path = str(path).replace('{dataDir}', str(get_data_path()))
    return pathlib.Path(os.path.expandvars(path)).expanduser()


@dataclass(frozen=True)
class OceanPoleTideConfig:
    """
    Ocean pole tide settings

    Attributes
    ----------
    input_file_ocean_pole : str
        Coefficient file (required)
    input_file_mean_pole : str
        Mean pole model file or builtin name (required)
    min_degree : int, default 2
    max_degree : int, optional
        Default: maximum degree of the coefficient file
    gamma_real : float, default 0.6870
    gamma_imaginary : float, default 0.0036
    factor : float, default 1.0
        The result is multiplied by this factor, -1 subtracts the tide
    """
    input_file_ocean_pole: str = ''
    input_file_mean_pole: str = ''
    min_degree: int = 2
    max_degree: Optional[int] = None
    gamma_real: float = GAMMA_REAL
    gamma_imaginary: float = GAMMA_IMAGINARY
    factor: float = 1.0

    def __post_init__(self):
        if not self.input_file_ocean_pole:
            raise ConfigurationError("inputfileOceanPole must be set")
        if not self.input_file_mean_pole:
            raise ConfigurationError("inputfileMeanPole must be set")
        if self.min_degree < 0:
            raise ConfigurationError(f"minDegree must be non-negative, got {self.min_degree}")
        if self.max_degree is not None and self.max_degree < self.min_degree:
            raise ConfigurationError(
                f"maxDegree ({self.max_degree}) is smaller than minDegree ({self.min_degree})"
            )

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> OceanPoleTideConfig:
        """
        Build a configuration from a mapping

        Keys may use file names (``inputfileOceanPole``) or attribute
        names (``input_file_ocean_pole``). A ``type`` entry is ignored.
        """
        attributes = set(_KEYS.values())
        kwargs = {}
        for key, value in d.items():
            if key == 'type':
                continue
            name = _KEYS.get(key, key)
            if name not in attributes:
                raise ConfigurationError(f"Unknown ocean pole tide setting '{key}'")
            if name in kwargs:
                raise ConfigurationError(f"Setting '{key}' given twice")
            kwargs[name] = value

        try:
            for name in ('min_degree', 'max_degree'):
                if kwargs.get(name) is not None:
                    kwargs[name] = int(kwargs[name])
            for name in ('gamma_real', 'gamma_imaginary', 'factor'):
                if name in kwargs:
                    kwargs[name] = float(kwargs[name])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid ocean pole tide setting: {e}") from e
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Mapping with file key names"""
        attributes = asdict(self)
        return {key: attributes[name] for key, name in _KEYS.items()}

    @property
    def ocean_pole_path(self) -> pathlib.Path:
        return resolve_path(self.input_file_ocean_pole)

    @property
    def mean_pole_path(self) -> Union[str, pathlib.Path]:
        """Resolved mean pole file, or the builtin model name"""
        if str(self.input_file_mean_pole).lower() in BUILTIN_MEAN_POLES:
            return str(self.input_file_mean_pole).lower()
        return resolve_path(self.input_file_mean_pole)


def load_config(input_file: Union[str, pathlib.Path]) -> Union[dict, list]:
    """
    Read a JSON tide configuration

    Returns the raw mapping (or list of mappings); pass it to
    :func:`pyOPT_turbo.tides.tides_from_config`.
    """
    input_file = pathlib.Path(input_file).expanduser()
    try:
        with open(input_file, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Cannot read configuration {input_file}: {e}") from e
