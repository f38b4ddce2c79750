"""
Settings-pipeline exceptions for the typedconf package.
"""

from .base import TypedConfError, ConfigurationError, StateError, NotFoundError


class ConfigurationMissingError(ConfigurationError):
    """Raised when a section has no data to bind to the settings type."""

    def __init__(self, section_name: str, type_name: str):
        self.section_name = section_name
        self.type_name = type_name
        # Bypass ConfigurationError's message assembly, the wording is fixed
        TypedConfError.__init__(
            self,
            f"Configuration section '{section_name}' for type '{type_name}' is missing or invalid."
        )
        self.config_key = section_name
        self.config_value = None
        self.reason = "missing or invalid"


class BindingError(ConfigurationError):
    """Raised when a raw value cannot be coerced to a field's declared type."""

    def __init__(self, path: str, field: str, type_name: str, value=None, reason: str = None):
        self.path = path
        self.field = field
        self.type_name = type_name
        self.value = value
        detail = f"cannot bind field '{field}' of '{type_name}'"
        if reason:
            detail += f" ({reason})"
        super().__init__(path, None if value is None else str(value), detail)


class SettingsValidationError(TypedConfError):
    """
    Raised when one or more validation rules fail for a bound settings instance.

    `failures` keeps the ordered messages, rule by rule in the order the
    rules were added; annotation violations follow field declaration order.
    `eager` is True when the failure surfaced while materializing at
    registration time rather than on first access.
    """

    def __init__(self, type_name: str, result, eager: bool = False):
        self.type_name = type_name
        self.result = result
        self.eager = eager
        self.failures = result.messages
        when = " at registration" if eager else ""
        message = f"Validation failed for '{type_name}'{when}: " + "; ".join(self.failures)
        super().__init__(message)


class BuilderStateError(StateError):
    """Raised when a settings builder is used after a terminal operation."""

    def __init__(self, type_name: str, current_state: str, operation: str):
        self.type_name = type_name
        super().__init__(
            f"SettingsBuilder[{type_name}]",
            current_state,
            required_state="configuring",
            operation=operation
        )


class SettingsNotRegisteredError(NotFoundError):
    """Raised when resolving a settings type that was never registered."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__("Settings registration", type_name)
