"""
Entry points for configuring strongly-typed settings.
"""

from typing import Type, TypeVar

from typedconf.builder import SettingsBuilder
from typedconf.configuration import ConfigurationSection
from typedconf.registry import SettingsRegistry

T = TypeVar('T')


def configure_settings(registry: SettingsRegistry, configuration: ConfigurationSection,
                       section_name: str, settings_type: Type[T]) -> SettingsBuilder[T]:
    """
    Create a fluent settings builder for `settings_type`.

    Example:
        configure_settings(registry, configuration, "MySection", MySettings) \\
            .with_annotation_validation() \\
            .with_eager_validation() \\
            .build()
    """
    return SettingsBuilder(registry, configuration, section_name, settings_type)


def configure_required_settings(registry: SettingsRegistry, configuration: ConfigurationSection,
                                section_name: str, settings_type: Type[T]) -> T:
    """
    Build settings with annotation and eager validation enabled.

    Raises:
        ConfigurationMissingError: If the section has no data
        SettingsValidationError: If a declared constraint is violated
    """
    return (
        configure_settings(registry, configuration, section_name, settings_type)
        .with_annotation_validation()
        .with_eager_validation()
        .build()
    )


def register_settings(registry: SettingsRegistry, configuration: ConfigurationSection,
                      section_name: str, settings_type: Type[T]) -> SettingsRegistry:
    """
    Register settings with annotation and eager validation enabled.

    The settings are materialized immediately, so configuration problems
    surface here rather than when a consumer first resolves them.
    """
    return (
        configure_settings(registry, configuration, section_name, settings_type)
        .with_annotation_validation()
        .with_eager_validation()
        .register()
    )
