"""
pyOPT_turbo.io.love_numbers - Load Love number tables

Text layout: one row per degree ``n h l [k]``, ``#`` starts a comment.
Degrees missing from the table are zero.

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

from __future__ import annotations

import pathlib
from typing import Union

import numpy as np

from ..errors import FileFormatError

__all__ = ['read_love_numbers']


def read_love_numbers(
    input_file: Union[str, pathlib.Path],
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Read degree-dependent load Love numbers

    Parameters
    ----------
    input_file : str or pathlib.Path
        Text table with columns ``n h l`` and optionally ``k``

    Returns
    -------
    hn, ln, kn : np.ndarray
        Love numbers indexed by degree (kn is zero when not tabulated)
    """
    input_file = pathlib.Path(input_file).expanduser()
    try:
        data = np.loadtxt(input_file, comments='#', ndmin=2)
    except (OSError, ValueError) as e:
        raise FileFormatError(f"Cannot read Love numbers from {input_file}: {e}") from e

    if data.size == 0 or data.shape[1] not in (3, 4):
        raise FileFormatError(
            f"{input_file}: expected 3 or 4 columns (n h l [k]), got shape {data.shape}"
        )
    degree = data[:, 0].astype(int)
    if np.any(degree < 0) or np.any(degree != data[:, 0]):
        raise FileFormatError(f"{input_file}: degrees must be non-negative integers")

    N = degree.max()
    hn = np.zeros(N + 1)
    ln = np.zeros(N + 1)
    kn = np.zeros(N + 1)
    hn[degree] = data[:, 1]
    ln[degree] = data[:, 2]
    if data.shape[1] == 4:
        kn[degree] = data[:, 3]
    return hn, ln, kn
