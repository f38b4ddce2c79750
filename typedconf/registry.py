"""
Settings registry keyed by settings type.

The registry holds factories rather than instances. A factory is invoked
when its type is first resolved; the lifetime chosen at registration decides
whether the result is cached (singleton) or rebuilt on every resolution
(transient).
"""

import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from typedconf.core.exceptions import SettingsNotRegisteredError
from typedconf.logger import get_typedconf_logger

T = TypeVar('T')


class Lifetime(Enum):
    """Memoization policy for a registered factory."""
    SINGLETON = "singleton"
    TRANSIENT = "transient"


class _Registration:
    __slots__ = ("factory", "lifetime", "instance", "materialized")

    def __init__(self, factory: Callable[[], Any], lifetime: Lifetime):
        self.factory = factory
        self.lifetime = lifetime
        self.instance: Any = None
        self.materialized = False


class SettingsRegistry:
    """
    Central registry for settings factories.

    Registering a type again replaces the earlier registration, so
    resolution always returns the most recently registered settings.
    """

    def __init__(self):
        self.logger = get_typedconf_logger().bind(component="SettingsRegistry")
        self._lock = threading.RLock()
        self._registrations: Dict[type, _Registration] = {}

    def add(self, settings_type: Type[T], factory: Callable[[], T],
            lifetime: Lifetime = Lifetime.SINGLETON) -> "SettingsRegistry":
        """
        Register a factory for a settings type.

        Args:
            settings_type: Key the settings are resolved by
            factory: Zero-argument callable producing the settings
            lifetime: Whether resolved instances are cached

        Returns:
            The registry, for chaining
        """
        if not callable(factory):
            raise TypeError(f"Factory for {settings_type.__name__} must be callable")
        with self._lock:
            replaced = settings_type in self._registrations
            self._registrations[settings_type] = _Registration(factory, lifetime)
            self.logger.info("Settings registered",
                             settings_type=settings_type.__name__,
                             lifetime=lifetime.value,
                             replaced=replaced)
        return self

    def resolve(self, settings_type: Type[T]) -> T:
        """
        Resolve settings of the given type, invoking its factory if needed.

        Raises:
            SettingsNotRegisteredError: If the type was never registered
        """
        with self._lock:
            registration = self._registrations.get(settings_type)
            if registration is None:
                raise SettingsNotRegisteredError(settings_type.__name__)

            if registration.lifetime is Lifetime.SINGLETON and registration.materialized:
                return registration.instance

            instance = registration.factory()
            if registration.lifetime is Lifetime.SINGLETON:
                registration.instance = instance
                registration.materialized = True
            self.logger.debug("Settings materialized", settings_type=settings_type.__name__)
            return instance

    def materialize(self, settings_type: Type[T], factory: Optional[Callable[[], T]] = None) -> T:
        """
        Resolve immediately; used to surface failures at registration time.

        `factory`, when given, runs once in place of the registered factory
        and its result is cached according to the registered lifetime.
        """
        if factory is None:
            return self.resolve(settings_type)
        with self._lock:
            registration = self._registrations.get(settings_type)
            if registration is None:
                raise SettingsNotRegisteredError(settings_type.__name__)

            instance = factory()
            if registration.lifetime is Lifetime.SINGLETON:
                registration.instance = instance
                registration.materialized = True
            self.logger.debug("Settings materialized", settings_type=settings_type.__name__)
            return instance

    def is_registered(self, settings_type: type) -> bool:
        with self._lock:
            return settings_type in self._registrations

    def is_materialized(self, settings_type: type) -> bool:
        with self._lock:
            registration = self._registrations.get(settings_type)
            return registration is not None and registration.materialized

    def registered_types(self) -> List[type]:
        """List all registered settings types."""
        with self._lock:
            return list(self._registrations.keys())

    def remove(self, settings_type: type) -> Optional[Callable[[], Any]]:
        """Drop a registration, returning its factory if there was one."""
        with self._lock:
            registration = self._registrations.pop(settings_type, None)
            if registration is not None:
                self.logger.info("Settings removed", settings_type=settings_type.__name__)
                return registration.factory
            return None

    def clear(self):
        """Remove every registration."""
        with self._lock:
            self._registrations.clear()
            self.logger.info("Registry cleared")

    def __contains__(self, settings_type: type) -> bool:
        return self.is_registered(settings_type)

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)
