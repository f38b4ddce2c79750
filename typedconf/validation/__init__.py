"""
Validation strategies for bound settings.

- Constraints (Required, Range, ...) declared per field with `setting()`
- AnnotationValidator: checks every declared constraint
- PredicateValidator: checks a caller-supplied predicate
- validate: runs an ordered rule set and aggregates failures
"""

from .constraints import (
    Constraint, Required, Range, StringLength, MinLength, MaxLength,
    RegularExpression, AllowedValues, FieldConstraint, setting, constraint_table
)
from .validator import (
    ValidationFailure, ValidationResult, SettingsValidator, AnnotationValidator,
    PredicateValidator, default_failure_message, validate
)

__all__ = [
    # Constraints
    'Constraint',
    'Required',
    'Range',
    'StringLength',
    'MinLength',
    'MaxLength',
    'RegularExpression',
    'AllowedValues',
    'FieldConstraint',
    'setting',
    'constraint_table',

    # Validators
    'ValidationFailure',
    'ValidationResult',
    'SettingsValidator',
    'AnnotationValidator',
    'PredicateValidator',
    'default_failure_message',
    'validate'
]
