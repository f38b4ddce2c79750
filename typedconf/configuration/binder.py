"""
Binding of configuration sections onto dataclass settings types.

Each dataclass field is matched case-insensitively to a child key of the
section, underscores ignored, so "MaxSize" fills `max_size`. The raw string
value is coerced to the field's declared type. Fields with no matching key
keep their default, or the zero value of their type when the field declares
no default.
"""

import dataclasses
import re
import types
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from typedconf.core.exceptions import BindingError
from typedconf.logger import get_typedconf_logger

from .section import ConfigurationSection

T = TypeVar('T')

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}

_TIMESPAN = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{2})(?::(?P<seconds>\d{2}(?:\.\d+)?))?$"
)

_CONTAINERS = (list, set, frozenset, tuple, dict)

_ZERO_VALUES = {
    str: "",
    int: 0,
    float: 0.0,
    bool: False,
    Decimal: Decimal(0),
    timedelta: timedelta(0),
}

def _logger():
    return get_typedconf_logger().bind(component="SettingsBinder")


@lru_cache(maxsize=None)
def _field_table(cls: type) -> Tuple[Tuple[dataclasses.Field, Any], ...]:
    """Return the init fields of `cls` paired with their resolved types."""
    hints = get_type_hints(cls)
    return tuple(
        (f, hints.get(f.name, Any))
        for f in dataclasses.fields(cls)
        if f.init
    )


def is_settings_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def bind(section: ConfigurationSection, target_type: Type[T]) -> Optional[T]:
    """
    Bind `section` to a new instance of `target_type`.

    Returns None when no child of the section holds data, so callers can
    tell a missing section apart from one that binds to defaults. A section
    with keys that match no field binds to an all-defaults instance.

    Raises:
        TypeError: If `target_type` is not a dataclass
        BindingError: If a value cannot be coerced to its field's type
    """
    if not is_settings_type(target_type):
        raise TypeError(f"Settings type must be a dataclass, got {target_type!r}")

    if not any(child.exists() for child in section.get_children()):
        _logger().debug("Section has no data", section=section.path, settings_type=target_type.__name__)
        return None

    instance = _bind_dataclass(section, target_type)
    _logger().debug("Section bound", section=section.path, settings_type=target_type.__name__)
    return instance


def _bind_dataclass(section: ConfigurationSection, cls: type):
    kwargs: Dict[str, Any] = {}
    for f, field_type in _field_table(cls):
        child = _field_section(section, f.name)
        if child.exists():
            kwargs[f.name] = _convert(child, field_type, cls, f.name)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = _zero_value(field_type)
    return cls(**kwargs)


def _field_section(section: ConfigurationSection, name: str) -> ConfigurationSection:
    """Find the child for a field; "RequiredProperty" also matches required_property."""
    child = section.get_section(name)
    if child.exists():
        return child
    folded = name.replace("_", "").lower()
    for candidate in section.get_children():
        if candidate.key.replace("_", "").lower() == folded:
            return candidate
    return child


def _zero_value(tp: Any) -> Any:
    origin = get_origin(tp) or tp
    if origin in _ZERO_VALUES:
        return _ZERO_VALUES[origin]
    if origin in _CONTAINERS:
        return origin()
    if is_settings_type(tp):
        return _bind_dataclass(ConfigurationSection(None, ""), tp)
    return None


def _convert(section: ConfigurationSection, tp: Any, owner: type, field_name: str) -> Any:
    origin = get_origin(tp)
    args = get_args(tp)
    # Bare `list`, `dict`, ... carry no item types
    if origin is None and tp in _CONTAINERS:
        origin = tp
        args = (Any, Ellipsis) if tp is tuple else ()

    if tp is Any:
        return section.value if section.value is not None else section.to_dict()

    if origin is Union or origin is types.UnionType:
        candidates = [arg for arg in args if arg is not type(None)]
        if section.value is not None and section.value.strip() == "" and len(candidates) < len(args):
            return None
        if len(candidates) == 1:
            return _convert(section, candidates[0], owner, field_name)
        for candidate in candidates:
            try:
                return _convert(section, candidate, owner, field_name)
            except BindingError:
                continue
        raise BindingError(section.path, field_name, owner.__name__, section.value,
                           f"no member of {tp} accepts the value")

    if is_settings_type(tp):
        return _bind_dataclass(section, tp)

    if origin in (list, set, frozenset) or (origin is tuple and len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0] if args else Any
        items = [_convert(child, item_type, owner, field_name) for child in section.get_children()]
        return origin(items)

    if origin is tuple:
        children = section.get_children()
        if args and len(children) != len(args):
            raise BindingError(section.path, field_name, owner.__name__, None,
                               f"expected {len(args)} items, found {len(children)}")
        return tuple(_convert(child, item_type, owner, field_name) for child, item_type in zip(children, args))

    if origin is dict:
        value_type = args[1] if args else Any
        return {
            child.key: _convert(child, value_type, owner, field_name)
            for child in section.get_children()
        }

    raw = section.value
    if raw is None:
        raise BindingError(section.path, field_name, owner.__name__, None,
                           "expected a scalar value but found a nested section")
    try:
        return _coerce(raw, tp)
    except (ValueError, TypeError, InvalidOperation, KeyError) as e:
        raise BindingError(section.path, field_name, owner.__name__, raw,
                           f"cannot convert to {getattr(tp, '__name__', tp)}: {e}") from e


def _coerce(raw: str, tp: Any) -> Any:
    """Convert a raw string to a scalar type."""
    if tp is str:
        return raw
    text = raw.strip()
    if tp is bool:
        folded = text.lower()
        if folded in _TRUE:
            return True
        if folded in _FALSE:
            return False
        raise ValueError(f"'{raw}' is not a boolean")
    if tp is int:
        return int(text)
    if tp is float:
        return float(text)
    if tp is Decimal:
        return Decimal(text)
    if tp is datetime:
        return datetime.fromisoformat(text)
    if tp is date:
        return date.fromisoformat(text)
    if tp is time:
        return time.fromisoformat(text)
    if tp is timedelta:
        return _parse_timespan(text)
    if tp is Path:
        return Path(text)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return _parse_enum(text, tp)
    return tp(raw)


def _parse_timespan(text: str) -> timedelta:
    match = _TIMESPAN.match(text)
    if match is None:
        return timedelta(seconds=float(text))
    delta = timedelta(
        days=int(match.group("days") or 0),
        hours=int(match.group("hours")),
        minutes=int(match.group("minutes")),
        seconds=float(match.group("seconds") or 0),
    )
    return -delta if match.group("sign") else delta


def _parse_enum(text: str, enum_type: Type[Enum]) -> Enum:
    for member in enum_type:
        if str(member.value) == text:
            return member
    for member in enum_type:
        if member.name.lower() == text.lower():
            return member
    raise ValueError(f"'{text}' is not a valid {enum_type.__name__}")
