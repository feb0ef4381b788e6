"""
pyOPT_turbo.tides - Tide models

- Tides: common interface (potential, deformation)
- TidesOceanPole: ocean pole tide
- TidesGroup: sum of several models
- tides_from_config: build models from configuration mappings

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

from typing import Union

from ..config import OceanPoleTideConfig
from ..errors import ConfigurationError
from .base import (
    LoadResponseCache,
    Tides,
    TidesGroup,
    check_accumulator,
    deformation_matrix,
)
from .ocean_pole import TidesOceanPole, admittance_weights, pole_excitation

__all__ = [
    'LoadResponseCache',
    'Tides',
    'TidesGroup',
    'TidesOceanPole',
    'admittance_weights',
    'check_accumulator',
    'deformation_matrix',
    'pole_excitation',
    'tides_from_config',
]

# configuration 'type' -> model class
TIDE_TYPES = {
    'oceanPole': TidesOceanPole,
}


def tides_from_config(config: Union[dict, list, OceanPoleTideConfig]) -> Tides:
    """
    Build tide models from configuration

    Parameters
    ----------
    config : dict, list or OceanPoleTideConfig
        A mapping with a ``type`` entry (e.g. ``'oceanPole'``) and the
        model settings, or a list of such mappings (summed)

    Returns
    -------
    Tides
        Single model, or TidesGroup for lists
    """
    if isinstance(config, OceanPoleTideConfig):
        return TidesOceanPole(config)
    if isinstance(config, (list, tuple)):
        if not config:
            raise ConfigurationError("Empty tide configuration list")
        return TidesGroup([tides_from_config(item) for item in config])
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Tide configuration must be a mapping or list, got {type(config).__name__}"
        )
    tide_type = config.get('type')
    if tide_type not in TIDE_TYPES:
        raise ConfigurationError(
            f"Unknown tide type '{tide_type}'. Available: {list(TIDE_TYPES)}"
        )
    return TIDE_TYPES[tide_type](config)
