"""
Shared pytest configuration and fixtures for the typedconf tests.
"""

import pytest

from typedconf import Configuration, SettingsRegistry


@pytest.fixture(scope="session")
def base_settings_data():
    """
    Flat key/value data for a well-formed settings section.
    Session scope means this fixture is created once per test session.
    """
    return {
        'TestSection:RequiredProperty': 'Test Value',
        'TestSection:OptionalProperty': '42',
        'TestSection:RangeProperty': '50'
    }


@pytest.fixture
def configuration(base_settings_data):
    """Configuration holding the well-formed settings section."""
    return Configuration.from_flat(base_settings_data)


@pytest.fixture
def empty_configuration():
    """Configuration with no data at all."""
    return Configuration.from_flat({})


@pytest.fixture
def registry():
    """A fresh settings registry."""
    return SettingsRegistry()
