from __future__ import annotations

import mysql.connector
import pytest
from mysql.connector.constants import ClientFlag

from src.workforce_pay.workforce_pay.database import bootstrap
from src.workforce_pay.workforce_pay.database.connection import DatabaseConnection, DBConfig

SETTINGS = {"host": "db", "port": "3307", "user": "payroll", "password": "secret", "database": "workforce_pay_test"}


@pytest.fixture(autouse=True)
def fresh_factory():
    DatabaseConnection._instance = None
    yield
    DatabaseConnection._instance = None


def test_connect_passes_config_and_found_rows(monkeypatch):
    seen = {}
    monkeypatch.setattr(mysql.connector, "connect", lambda **kwargs: seen.update(kwargs) or "conn")
    factory = DatabaseConnection.get_instance(DBConfig("db", 3307, "payroll", "secret", "workforce_pay_test"))

    assert factory.connect() == "conn"
    assert seen["host"] == "db"
    assert seen["port"] == 3307
    assert seen["database"] == "workforce_pay_test"
    assert seen["client_flags"] == [ClientFlag.FOUND_ROWS]


def test_instance_is_shared_until_config_changes():
    first = DatabaseConnection.get_instance(DBConfig("db", 3306, "u", "p", "a"))

    assert DatabaseConnection.get_instance(DBConfig("db", 3306, "u", "p", "a")) is first
    assert DatabaseConnection.get_instance(DBConfig("db", 3306, "u", "p", "b")) is not first


def test_settings_dict_maps_to_config():
    config = bootstrap._as_config(SETTINGS)

    assert config == DBConfig("db", 3307, "payroll", "secret", "workforce_pay_test")
    assert bootstrap._as_config({k: v for k, v in SETTINGS.items() if k != "port"}).port == 3306


def test_settings_dict_without_database_is_rejected():
    with pytest.raises(KeyError):
        bootstrap._as_config({k: v for k, v in SETTINGS.items() if k != "database"})
