"""
Configuration tree and binding.

- Configuration / ConfigurationSection: in-memory hierarchical key tree
- bind: maps a section onto a dataclass settings type
"""

from .section import Configuration, ConfigurationSection, KEY_DELIMITER
from .binder import bind, is_settings_type

__all__ = [
    'Configuration',
    'ConfigurationSection',
    'KEY_DELIMITER',
    'bind',
    'is_settings_type'
]
