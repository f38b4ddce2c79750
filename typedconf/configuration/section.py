"""
Hierarchical configuration sections.

A configuration tree is a set of case-insensitive keys addressed by
delimiter-separated paths ("Database:Port"). Any path can be resolved to a
section, whether or not data exists under it; absence only becomes visible
when the section is bound.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from typedconf.config import Config

T = TypeVar('T')

KEY_DELIMITER = Config.KEY_DELIMITER


def _split(path: str) -> List[str]:
    return [segment for segment in path.split(KEY_DELIMITER) if segment != ""]


def _sort_key(key: str):
    # Indexed children ("0", "1", "10") keep numeric order ahead of named ones
    return (0, int(key), "") if key.isdigit() else (1, 0, key.lower())


class _Node:
    """Mutable storage node backing the read-only section views."""

    __slots__ = ("key", "value", "children")

    def __init__(self, key: str):
        self.key = key
        self.value: Optional[str] = None
        self.children: Dict[str, "_Node"] = {}

    def child(self, key: str, create: bool = False) -> Optional["_Node"]:
        folded = key.lower()
        node = self.children.get(folded)
        if node is None and create:
            node = _Node(key)
            self.children[folded] = node
        return node

    def has_data(self) -> bool:
        return self.value is not None or any(child.has_data() for child in self.children.values())


class ConfigurationSection:
    """
    A view over a position in the configuration tree.

    Sections are cheap handles: resolving a path that holds no data still
    yields a section, one whose `exists()` is False.
    """

    def __init__(self, node: Optional[_Node], path: str):
        self._node = node
        self.path = path

    @property
    def key(self) -> str:
        segments = _split(self.path)
        if self._node is not None:
            return self._node.key
        return segments[-1] if segments else ""

    @property
    def value(self) -> Optional[str]:
        return self._node.value if self._node is not None else None

    def exists(self) -> bool:
        return self._node is not None and self._node.has_data()

    def get_section(self, name: str) -> "ConfigurationSection":
        """Resolve a descendant section by relative path. Never fails."""
        segments = _split(name)
        node = self._node if segments else None
        keys = [self.path] if self.path else []
        for segment in segments:
            node = node.child(segment) if node is not None else None
            # Existing keys keep the casing they were stored with
            keys.append(node.key if node is not None else segment)
        return ConfigurationSection(node, KEY_DELIMITER.join(keys) or name)

    def get_children(self) -> List["ConfigurationSection"]:
        if self._node is None:
            return []
        nodes = sorted(self._node.children.values(), key=lambda n: _sort_key(n.key))
        return [
            ConfigurationSection(node, KEY_DELIMITER.join(filter(None, [self.path, node.key])))
            for node in nodes
        ]

    def get(self, target_type: Type[T]) -> Optional[T]:
        """Bind this section to `target_type`; None when the section has no data."""
        from .binder import bind
        return bind(self, target_type)

    def to_dict(self) -> Any:
        """Return the raw subtree as nested dicts of strings."""
        if self._node is None:
            return None
        if not self._node.children:
            return self._node.value
        return {child.key: child.to_dict() for child in self.get_children()}

    def __getitem__(self, path: str) -> Optional[str]:
        return self.get_section(path).value

    def __repr__(self):
        return f"{type(self).__name__}(path={self.path!r}, exists={self.exists()})"


class Configuration(ConfigurationSection):
    """
    Root of an in-memory configuration tree.

    Built from either a nested mapping or a flat mapping of delimited keys.
    Scalar leaves are stored as strings, the way file and environment
    sources deliver them; the binder coerces them per field type.
    """

    def __init__(self):
        super().__init__(_Node(""), "")

    def set(self, path: str, value: Any) -> "Configuration":
        """Set a single key, creating intermediate sections as needed."""
        segments = _split(path)
        if not segments:
            raise ValueError("Configuration key must not be empty")
        node = self._node
        for segment in segments:
            node = node.child(segment, create=True)
        node.value = None if value is None else _to_raw(value)
        return self

    @classmethod
    def from_flat(cls, data: Mapping[str, Any]) -> "Configuration":
        """Build from {"Section:Key": value}; later keys override earlier ones."""
        config = cls()
        for path, value in data.items():
            config.set(path, value)
        return config

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Configuration":
        """Build from nested dicts; lists become indexed children."""
        config = cls()
        for path, value in _flatten(data, ""):
            config.set(path, value)
        return config

    @classmethod
    def merge(cls, *configs: "Configuration") -> "Configuration":
        """Layer several configurations; later ones win key by key."""
        merged = cls()
        for config in configs:
            for path, value in _leaves(config):
                merged.set(path, value)
        return merged


def _to_raw(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(data: Any, prefix: str) -> Iterable[tuple]:
    if isinstance(data, Mapping):
        items = data.items()
    elif isinstance(data, (list, tuple)):
        items = enumerate(data)
    else:
        yield prefix, data
        return
    for key, value in items:
        path = f"{prefix}{KEY_DELIMITER}{key}" if prefix else str(key)
        yield from _flatten(value, path)


def _leaves(section: ConfigurationSection) -> Iterable[tuple]:
    for child in section.get_children():
        if child.value is not None:
            yield child.path, child.value
        yield from _leaves(child)
