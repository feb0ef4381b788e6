"""
pyOPT_turbo.errors - Exception types

Copyright (c) 2024-2026 tkykszk

This software is licensed under the MIT License.
"""

__all__ = [
    'ConfigurationError',
    'EOPError',
    'FileFormatError',
    'PyOPTError',
]


class PyOPTError(Exception):
    """Base class for pyOPT_turbo errors"""


class ConfigurationError(PyOPTError, ValueError):
    """Missing or invalid configuration (paths, degree bounds, tide types)"""


class FileFormatError(PyOPTError, ValueError):
    """Unreadable or inconsistent input file"""


class EOPError(PyOPTError, ValueError):
    """Earth orientation requested outside the available data"""
