"""
Declarative per-field constraints for settings dataclasses.

Constraints are attached to fields through dataclass field metadata:

    @dataclass
    class DatabaseSettings:
        host: str = setting(Required())
        port: int = setting(Range(1, 65535), default=5432)

`constraint_table` collects them once per type into a static table of
`FieldConstraint` entries, which the annotation validator walks in field
declaration order.
"""

import dataclasses
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional, Tuple

CONSTRAINTS_KEY = "typedconf.constraints"
DISPLAY_NAME_KEY = "typedconf.display_name"


class Constraint(ABC):
    """Base class for a single declarative field constraint."""

    kind: str = "constraint"

    def __init__(self, error_message: Optional[str] = None):
        self.error_message = error_message

    @abstractmethod
    def is_valid(self, value: Any) -> bool:
        """Return True if `value` satisfies the constraint."""
        pass

    @abstractmethod
    def default_message(self, field_name: str) -> str:
        pass

    def format_message(self, field_name: str) -> str:
        if self.error_message:
            return self.error_message.replace("{field}", field_name)
        return self.default_message(field_name)

    def __repr__(self):
        params = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if v is not None)
        return f"{type(self).__name__}({params})"


class Required(Constraint):
    """Value must be present: not None, and not empty or whitespace for strings."""

    kind = "required"

    def __init__(self, allow_empty_strings: bool = False, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.allow_empty_strings = allow_empty_strings

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, str) and not self.allow_empty_strings:
            return value.strip() != ""
        return True

    def default_message(self, field_name: str) -> str:
        return f"The {field_name} field is required."


class Range(Constraint):
    """Value must lie within [minimum, maximum], both bounds inclusive."""

    kind = "range"

    def __init__(self, minimum: Any, maximum: Any, error_message: Optional[str] = None):
        super().__init__(error_message)
        if minimum > maximum:
            raise ValueError(f"Range minimum {minimum} is greater than maximum {maximum}")
        self.minimum = minimum
        self.maximum = maximum

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        try:
            return self.minimum <= value <= self.maximum
        except TypeError:
            return False

    def default_message(self, field_name: str) -> str:
        return f"The field {field_name} must be between {self.minimum} and {self.maximum}."


class StringLength(Constraint):
    """String length must lie within [minimum, maximum]."""

    kind = "string_length"

    def __init__(self, maximum: int, minimum: int = 0, error_message: Optional[str] = None):
        super().__init__(error_message)
        if maximum < 0 or minimum > maximum:
            raise ValueError(f"Invalid string length bounds: {minimum}..{maximum}")
        self.maximum = maximum
        self.minimum = minimum

    def is_valid(self, value: Any) -> bool:
        if value is None:
            return True
        return self.minimum <= len(value) <= self.maximum

    def default_message(self, field_name: str) -> str:
        if self.minimum:
            return (f"The field {field_name} must be a string with a minimum length of "
                    f"{self.minimum} and a maximum length of {self.maximum}.")
        return f"The field {field_name} must be a string with a maximum length of {self.maximum}."


class MinLength(Constraint):
    """String or collection must have at least `length` items."""

    kind = "min_length"

    def __init__(self, length: int, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.length = length

    def is_valid(self, value: Any) -> bool:
        return value is None or len(value) >= self.length

    def default_message(self, field_name: str) -> str:
        return f"The field {field_name} must be a string or array type with a minimum length of '{self.length}'."


class MaxLength(Constraint):
    """String or collection must have at most `length` items."""

    kind = "max_length"

    def __init__(self, length: int, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.length = length

    def is_valid(self, value: Any) -> bool:
        return value is None or len(value) <= self.length

    def default_message(self, field_name: str) -> str:
        return f"The field {field_name} must be a string or array type with a maximum length of '{self.length}'."


class RegularExpression(Constraint):
    """String must match `pattern` in full."""

    kind = "regular_expression"

    def __init__(self, pattern: str, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.pattern = pattern
        self._compiled = re.compile(pattern)

    def is_valid(self, value: Any) -> bool:
        if value is None or value == "":
            return True
        return self._compiled.fullmatch(str(value)) is not None

    def default_message(self, field_name: str) -> str:
        return f"The field {field_name} must match the regular expression '{self.pattern}'."

    def __repr__(self):
        return f"RegularExpression(pattern={self.pattern!r})"


class AllowedValues(Constraint):
    """Value must be one of the listed values."""

    kind = "allowed_values"

    def __init__(self, *values: Any, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.values = values

    def is_valid(self, value: Any) -> bool:
        return value is None or value in self.values

    def default_message(self, field_name: str) -> str:
        return f"The {field_name} field does not equal any of the values allowed."


@dataclass(frozen=True)
class FieldConstraint:
    """One row of a settings type's constraint table."""
    field_name: str
    constraint: Constraint

    @property
    def kind(self) -> str:
        return self.constraint.kind


def setting(*constraints: Constraint, default: Any = dataclasses.MISSING,
            default_factory: Any = dataclasses.MISSING, display_name: Optional[str] = None,
            **field_kwargs: Any):
    """
    Declare a dataclass field carrying validation constraints.

    Accepts the same `default` / `default_factory` as `dataclasses.field`.
    `display_name` replaces the field name in failure messages, e.g. the
    configuration key "RangeProperty" for a `range_property` field.
    """
    for constraint in constraints:
        if not isinstance(constraint, Constraint):
            raise TypeError(f"Expected a Constraint, got {constraint!r}")
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[CONSTRAINTS_KEY] = tuple(constraints)
    if display_name is not None:
        metadata[DISPLAY_NAME_KEY] = display_name
    return dataclasses.field(default=default, default_factory=default_factory,
                             metadata=metadata, **field_kwargs)


def field_constraints(f: dataclasses.Field) -> Tuple[Constraint, ...]:
    return tuple(f.metadata.get(CONSTRAINTS_KEY, ()))


@lru_cache(maxsize=None)
def constraint_table(cls: type) -> Tuple[FieldConstraint, ...]:
    """Return the constraints declared on `cls`, in field declaration order."""
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"Settings type must be a dataclass, got {cls!r}")
    return tuple(
        FieldConstraint(f.name, constraint)
        for f in dataclasses.fields(cls)
        for constraint in field_constraints(f)
    )

