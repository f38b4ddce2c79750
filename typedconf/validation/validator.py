"""
Settings validation framework.

This module provides the validation strategies applied to bound settings
instances: constraint-driven (annotation) validation and caller-supplied
predicate validation.
"""

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional

from typedconf.logger import get_typedconf_logger

from .constraints import DISPLAY_NAME_KEY, constraint_table


class ValidationFailure:
    """A single rule violation recorded during validation."""

    def __init__(self, message: str, rule: str, field: Optional[str] = None, value: Any = None):
        self.message = message
        self.rule = rule
        self.field = field
        self.value = value

    def __repr__(self):
        return f"ValidationFailure(rule={self.rule!r}, field={self.field!r}, message={self.message!r})"


class ValidationResult:
    """Result of settings validation."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[ValidationFailure]] = None):
        self.errors = list(errors or [])
        self.is_valid = is_valid and not self.errors

    def add_error(self, error: ValidationFailure):
        """Add a validation failure."""
        self.errors.append(error)
        self.is_valid = False

    def merge(self, other: "ValidationResult"):
        """Append another result's failures, keeping their order."""
        for error in other.errors:
            self.add_error(error)

    @property
    def messages(self) -> List[str]:
        return [error.message for error in self.errors]

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors!r})"


class SettingsValidator(ABC):
    """Abstract base class for settings validation rules."""

    name: str = "validator"

    def __init__(self, settings_type: type):
        self.settings_type = settings_type
        self.logger = get_typedconf_logger().bind(
            component=f"SettingsValidator_{settings_type.__name__}", rule=self.name
        )

    @abstractmethod
    def validate(self, instance: Any) -> ValidationResult:
        """Validate a bound settings instance."""
        pass


class AnnotationValidator(SettingsValidator):
    """
    Validator driven by the constraints declared on the settings fields.

    Every field is checked and every violation recorded. Nested dataclass
    values (and sequences of them) are validated recursively, their
    failures reported under the dotted field path.
    """

    name = "annotations"

    def validate(self, instance: Any) -> ValidationResult:
        result = ValidationResult()
        self._validate_object(instance, result, path="", label_path="")
        if not result:
            self.logger.debug("Annotation validation failed", failures=result.messages)
        return result

    def _validate_object(self, instance: Any, result: ValidationResult, path: str, label_path: str):
        table = constraint_table(type(instance))
        for f in dataclasses.fields(instance):
            label = f.metadata.get(DISPLAY_NAME_KEY) or f.name
            full_path = f"{path}.{f.name}" if path else f.name
            full_label = f"{label_path}.{label}" if label_path else label
            value = getattr(instance, f.name)

            for row in table:
                if row.field_name != f.name:
                    continue
                if not row.constraint.is_valid(value):
                    result.add_error(ValidationFailure(
                        row.constraint.format_message(full_label),
                        rule=f"{self.name}:{row.kind}",
                        field=full_path,
                        value=value
                    ))

            for suffix, nested in self._nested(value):
                self._validate_object(nested, result, full_path + suffix, full_label + suffix)

    @staticmethod
    def _nested(value: Any) -> Iterable[tuple]:
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            yield "", value
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if dataclasses.is_dataclass(item) and not isinstance(item, type):
                    yield f"[{index}]", item
        elif isinstance(value, dict):
            for key, item in value.items():
                if dataclasses.is_dataclass(item) and not isinstance(item, type):
                    yield f"[{key}]", item


class PredicateValidator(SettingsValidator):
    """
    Validator backed by a caller-supplied predicate over the whole instance.

    The predicate must not raise: an exception from it is a programming
    error and propagates to the caller unchanged.
    """

    name = "predicate"

    def __init__(self, settings_type: type, predicate: Callable[[Any], bool], message: Optional[str] = None):
        super().__init__(settings_type)
        if not callable(predicate):
            raise TypeError(f"Validation predicate must be callable, got {predicate!r}")
        self.predicate = predicate
        self.message = message if message is not None else default_failure_message(settings_type)

    def validate(self, instance: Any) -> ValidationResult:
        result = ValidationResult()
        if not self.predicate(instance):
            result.add_error(ValidationFailure(self.message, rule=self.name))
        return result


def default_failure_message(settings_type: type) -> str:
    return f"Custom validation failed for {settings_type.__name__}"


def validate(instance: Any, rules: Iterable[SettingsValidator]) -> ValidationResult:
    """
    Run `rules` over `instance` in order and aggregate every failure.

    No rule short-circuits the others.
    """
    result = ValidationResult()
    for rule in rules:
        result.merge(rule.validate(instance))
    return result
