"""
Typed settings binding and validation.

Binds sections of a hierarchical configuration tree onto dataclass settings
types, validates them with declarative field constraints and custom
predicates, and registers them for later resolution.
"""

from .configuration import Configuration, ConfigurationSection, bind
from .validation import (
    Required, Range, StringLength, MinLength, MaxLength, RegularExpression,
    AllowedValues, setting, ValidationFailure, ValidationResult
)
from .registry import SettingsRegistry, Lifetime
from .builder import SettingsBuilder, SettingsPipeline, EvaluationMode, BuilderState
from .extensions import configure_settings, configure_required_settings, register_settings
from .core.exceptions import (
    TypedConfError, ConfigurationError, ConfigurationMissingError, BindingError,
    SettingsValidationError, BuilderStateError, SettingsNotRegisteredError
)

__all__ = [
    # Configuration tree
    'Configuration',
    'ConfigurationSection',
    'bind',

    # Validation
    'Required',
    'Range',
    'StringLength',
    'MinLength',
    'MaxLength',
    'RegularExpression',
    'AllowedValues',
    'setting',
    'ValidationFailure',
    'ValidationResult',

    # Pipeline
    'SettingsRegistry',
    'Lifetime',
    'SettingsBuilder',
    'SettingsPipeline',
    'EvaluationMode',
    'BuilderState',
    'configure_settings',
    'configure_required_settings',
    'register_settings',

    # Errors
    'TypedConfError',
    'ConfigurationError',
    'ConfigurationMissingError',
    'BindingError',
    'SettingsValidationError',
    'BuilderStateError',
    'SettingsNotRegisteredError'
]
