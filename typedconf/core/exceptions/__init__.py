"""
Core exceptions for the typedconf package.

This module provides all exception classes used throughout typedconf,
organized with a clear inheritance hierarchy.
"""

# Base exceptions
from .base import (
    TypedConfError,
    ConfigurationError,
    StateError,
    NotFoundError
)

# Settings pipeline exceptions
from .settings import (
    ConfigurationMissingError,
    BindingError,
    SettingsValidationError,
    BuilderStateError,
    SettingsNotRegisteredError
)

__all__ = [
    # Base exceptions
    'TypedConfError',
    'ConfigurationError',
    'StateError',
    'NotFoundError',

    # Settings pipeline exceptions
    'ConfigurationMissingError',
    'BindingError',
    'SettingsValidationError',
    'BuilderStateError',
    'SettingsNotRegisteredError'
]
