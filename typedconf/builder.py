"""
Fluent settings builder.

A builder sequences binding, validation and materialization for one
settings type and one configuration section:

    settings = (
        configure_settings(registry, configuration, "Database", DatabaseSettings)
        .with_annotation_validation()
        .with_custom_validation(lambda s: s.pool_min <= s.pool_max, "Pool bounds are inverted")
        .build()
    )

Configuration calls mutate the builder and return it. `build()` and
`register()` are terminal: they consume the builder, and any later call on
it raises `BuilderStateError`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, List, Optional, Tuple, Type, TypeVar

from typedconf.configuration import ConfigurationSection, is_settings_type
from typedconf.core.exceptions import (
    BuilderStateError, ConfigurationMissingError, SettingsValidationError
)
from typedconf.logger import get_typedconf_logger
from typedconf.registry import Lifetime, SettingsRegistry
from typedconf.validation import (
    AnnotationValidator, PredicateValidator, SettingsValidator, validate
)

T = TypeVar('T')


class EvaluationMode(Enum):
    """When validation runs for registered settings."""
    LAZY = "lazy"
    EAGER = "eager"


class BuilderState(Enum):
    """Lifecycle of a settings builder."""
    CONFIGURING = "configuring"
    MATERIALIZING = "materializing"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class SettingsPipeline(Generic[T]):
    """
    Immutable snapshot of a builder, taken by its terminal operation.

    Registered factories close over a pipeline so later resolutions run
    exactly the rules that were configured at registration time.
    """
    configuration: ConfigurationSection
    section_name: str
    settings_type: Type[T]
    evaluation_mode: EvaluationMode
    rules: Tuple[SettingsValidator, ...]

    def materialize(self, eager: bool = False) -> T:
        """
        Resolve, bind and validate.

        Raises:
            ConfigurationMissingError: If the section has no data
            BindingError: If a value cannot be coerced to its field type
            SettingsValidationError: If any rule reports a failure
        """
        type_name = self.settings_type.__name__
        instance = self.configuration.get_section(self.section_name).get(self.settings_type)
        if instance is None:
            raise ConfigurationMissingError(self.section_name, type_name)

        result = validate(instance, self.rules)
        if not result:
            raise SettingsValidationError(type_name, result, eager=eager)
        return instance


class SettingsBuilder(Generic[T]):
    """
    Fluent builder for one settings type bound from one configuration section.

    Args:
        registry: Registry that `register()` hands the pipeline to
        configuration: Configuration root the section is resolved from
        section_name: Name of the section to bind; not validated
        settings_type: Dataclass to bind the section onto
    """

    def __init__(self, registry: SettingsRegistry, configuration: ConfigurationSection,
                 section_name: str, settings_type: Type[T]):
        if not is_settings_type(settings_type):
            raise TypeError(f"Settings type must be a dataclass, got {settings_type!r}")
        self._registry = registry
        self._configuration = configuration
        self._section_name = section_name
        self._settings_type = settings_type
        self._evaluation_mode = EvaluationMode.LAZY
        self._rules: List[SettingsValidator] = []
        self._state = BuilderState.CONFIGURING
        self.logger = get_typedconf_logger().bind(
            component="SettingsBuilder",
            section=section_name,
            settings_type=settings_type.__name__
        )

    @property
    def section_name(self) -> str:
        return self._section_name

    @property
    def settings_type(self) -> Type[T]:
        return self._settings_type

    @property
    def evaluation_mode(self) -> EvaluationMode:
        return self._evaluation_mode

    @property
    def rules(self) -> Tuple[SettingsValidator, ...]:
        return tuple(self._rules)

    @property
    def state(self) -> BuilderState:
        return self._state

    def _ensure_configuring(self, operation: str):
        if self._state is not BuilderState.CONFIGURING:
            raise BuilderStateError(self._settings_type.__name__, self._state.value, operation)

    def with_annotation_validation(self) -> "SettingsBuilder[T]":
        """Validate the constraints declared on the settings fields."""
        self._ensure_configuring("with_annotation_validation")
        if not any(isinstance(rule, AnnotationValidator) for rule in self._rules):
            self._rules.append(AnnotationValidator(self._settings_type))
        return self

    def with_eager_validation(self) -> "SettingsBuilder[T]":
        """Materialize and validate at registration time rather than on first use."""
        self._ensure_configuring("with_eager_validation")
        self._evaluation_mode = EvaluationMode.EAGER
        return self

    def with_custom_validation(self, predicate: Callable[[T], bool],
                               message: Optional[str] = None) -> "SettingsBuilder[T]":
        """
        Add a predicate over the whole settings instance.

        Args:
            predicate: Returns True when the settings are valid; must not raise
            message: Failure message, defaults to "Custom validation failed for <Type>"
        """
        self._ensure_configuring("with_custom_validation")
        self._rules.append(PredicateValidator(self._settings_type, predicate, message))
        return self

    def _take_pipeline(self, operation: str) -> SettingsPipeline[T]:
        self._ensure_configuring(operation)
        self._state = BuilderState.MATERIALIZING
        return SettingsPipeline(
            configuration=self._configuration,
            section_name=self._section_name,
            settings_type=self._settings_type,
            evaluation_mode=self._evaluation_mode,
            rules=tuple(self._rules)
        )

    def build(self) -> T:
        """
        Bind and validate the settings, returning the instance.

        Never registers anything. The builder is consumed whether or not
        the call succeeds.
        """
        pipeline = self._take_pipeline("build")
        try:
            instance = pipeline.materialize()
        except Exception as e:
            self.logger.error("Settings build failed", error=str(e))
            raise
        finally:
            self._state = BuilderState.TERMINAL

        self.logger.debug("Settings built", rules=len(pipeline.rules))
        return instance

    def register(self) -> SettingsRegistry:
        """
        Hand the pipeline to the registry as a singleton factory.

        In eager mode the registry materializes the settings immediately and
        any failure is raised from here; otherwise it happens on first
        resolution.
 A failed eager registration stays in place; resolving it later
        re-runs the pipeline and reports an on-access failure.

        Returns:
            The registry, for chaining
        """
        pipeline = self._take_pipeline("register")
        eager = pipeline.evaluation_mode is EvaluationMode.EAGER
        try:
            self._registry.add(
                self._settings_type,
                pipeline.materialize,
                lifetime=Lifetime.SINGLETON
            )
            if eager:
                self._registry.materialize(self._settings_type, lambda: pipeline.materialize(eager=True))
        except Exception as e:
            self.logger.error("Settings registration failed", error=str(e), eager=eager)
            raise
        finally:
            self._state = BuilderState.TERMINAL

        self.logger.info("Settings pipeline registered",
                         evaluation_mode=pipeline.evaluation_mode.value,
                         rules=len(pipeline.rules))
        return self._registry
