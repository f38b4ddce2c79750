from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from typedconf import BindingError, Configuration, bind


class Environment(Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


@dataclass
class PoolSettings:
    min_size: int = 1
    max_size: int = 10


@dataclass
class DatabaseSettings:
    host: str = "localhost"
    port: int = 5432
    ssl: bool = False
    timeout: timedelta = timedelta(seconds=30)
    pool: PoolSettings = field(default_factory=PoolSettings)


@dataclass
class AppSettings:
    name: str
    version: int
    ratio: float = 0.5
    budget: Decimal = Decimal("0")
    started: Optional[datetime] = None
    release: Optional[date] = None
    environment: Environment = Environment.DEVELOPMENT
    data_dir: Path = Path(".")
    hosts: List[str] = field(default_factory=list)
    limits: Dict[str, int] = field(default_factory=dict)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    owner: Optional[str] = None


@dataclass
class UntypedContainerSettings:
    tags: list
    limits: dict
    regions: tuple = ()
    labels: set = field(default_factory=set)


class TestBind:
    """Test binding sections onto dataclass settings types."""

    def test_fields_are_coerced_to_declared_types(self):
        configuration = Configuration.from_mapping({'App': {
            'Name': 'svc',
            'Version': '3',
            'Ratio': '0.75',
            'Budget': '1000.50',
            'Started': '2024-05-01T12:30:00',
            'Release': '2024-06-01',
            'Environment': 'production',
            'DataDir': '/var/lib/svc',
        }})

        settings = configuration.get_section('App').get(AppSettings)

        assert settings.name == 'svc'
        assert settings.version == 3
        assert settings.ratio == 0.75
        assert settings.budget == Decimal('1000.50')
        assert settings.started == datetime(2024, 5, 1, 12, 30)
        assert settings.release == date(2024, 6, 1)
        assert settings.environment is Environment.PRODUCTION
        assert settings.data_dir == Path('/var/lib/svc')

    def test_missing_keys_keep_defaults(self):
        configuration = Configuration.from_flat({'App:Name': 'svc'})

        settings = bind(configuration.get_section('App'), AppSettings)

        assert settings.name == 'svc'
        assert settings.version == 0
        assert settings.ratio == 0.5
        assert settings.hosts == []
        assert settings.owner is None
        assert settings.database == DatabaseSettings()

    def test_missing_section_binds_to_none(self):
        configuration = Configuration.from_flat({'Other:Key': 'value'})
        assert bind(configuration.get_section('App'), AppSettings) is None

    def test_present_section_without_matching_keys_binds_to_defaults(self):
        configuration = Configuration.from_flat({'Database:Unrelated': 'value'})

        settings = bind(configuration.get_section('Database'), DatabaseSettings)

        assert settings == DatabaseSettings()

    def test_nested_dataclasses_lists_and_dicts(self):
        configuration = Configuration.from_mapping({'App': {
            'name': 'svc',
            'hosts': ['a', 'b', 'c'],
            'limits': {'read': '100', 'write': '10'},
            'database': {
                'host': 'db',
                'ssl': 'TRUE',
                'timeout': '00:01:30',
                'pool': {'max_size': '25'},
            },
        }})

        settings = bind(configuration.get_section('App'), AppSettings)

        assert settings.hosts == ['a', 'b', 'c']
        assert settings.limits == {'read': 100, 'write': 10}
        assert settings.database.host == 'db'
        assert settings.database.ssl is True
        assert settings.database.timeout == timedelta(minutes=1, seconds=30)
        assert settings.database.pool == PoolSettings(min_size=1, max_size=25)

    def test_bare_container_annotations_bind_raw_items(self):
        configuration = Configuration.from_mapping({'App': {
            'tags': ['a', 'b'],
            'limits': {'x': '1', 'nested': {'y': '2'}},
            'regions': ['eu', 'us'],
            'labels': ['blue', 'blue'],
        }})

        settings = bind(configuration.get_section('App'), UntypedContainerSettings)

        assert settings.tags == ['a', 'b']
        assert settings.limits == {'x': '1', 'nested': {'y': '2'}}
        assert settings.regions == ('eu', 'us')
        assert settings.labels == {'blue'}

    def test_missing_bare_containers_default_to_empty(self):
        configuration = Configuration.from_flat({'App:Other': 'value'})

        settings = bind(configuration.get_section('App'), UntypedContainerSettings)

        assert settings.tags == []
        assert settings.limits == {}

    def test_snake_case_fields_match_pascal_case_keys(self):
        configuration = Configuration.from_flat({'Pool:MinSize': '2', 'Pool:MAX_SIZE': '4'})
        assert bind(configuration.get_section('Pool'), PoolSettings) == PoolSettings(2, 4)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("False", False), ("1", True), ("0", False),
        ("yes", True), ("off", False),
    ])
    def test_boolean_spellings(self, raw, expected):
        configuration = Configuration.from_flat({'Db:Ssl': raw})
        assert bind(configuration.get_section('Db'), DatabaseSettings).ssl is expected

    @pytest.mark.parametrize("raw,expected", [
        ("45", timedelta(seconds=45)),
        ("1.02:00:00", timedelta(days=1, hours=2)),
        ("-00:00:05", timedelta(seconds=-5)),
    ])
    def test_timespan_formats(self, raw, expected):
        configuration = Configuration.from_flat({'Db:Timeout': raw})
        assert bind(configuration.get_section('Db'), DatabaseSettings).timeout == expected

    def test_enum_by_member_name(self):
        configuration = Configuration.from_flat({'App:Name': 'svc', 'App:Environment': 'Production'})
        assert bind(configuration.get_section('App'), AppSettings).environment is Environment.PRODUCTION

    def test_empty_string_for_optional_binds_to_none(self):
        configuration = Configuration.from_flat({'App:Name': 'svc', 'App:Started': ''})
        assert bind(configuration.get_section('App'), AppSettings).started is None

    def test_unconvertible_value_raises_binding_error(self):
        configuration = Configuration.from_flat({'Db:Port': 'not-a-number'})

        with pytest.raises(BindingError) as exc_info:
            bind(configuration.get_section('Db'), DatabaseSettings)

        error = exc_info.value
        assert error.field == 'port'
        assert error.type_name == 'DatabaseSettings'
        assert error.path == 'Db:Port'
        assert error.value == 'not-a-number'

    def test_nested_section_for_scalar_field_raises_binding_error(self):
        configuration = Configuration.from_flat({'Db:Port:Value': '1'})
        with pytest.raises(BindingError):
            bind(configuration.get_section('Db'), DatabaseSettings)

    def test_non_dataclass_target_is_rejected(self):
        configuration = Configuration.from_flat({'Db:Port': '1'})
        with pytest.raises(TypeError):
            bind(configuration.get_section('Db'), dict)
