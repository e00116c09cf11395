import pytest

from snapsql.adapters import AdapterConfig, SQLiteAdapter
from snapsql.errors import AdapterConfigurationError
from snapsql.utils.performance import SLOW_QUERY_ENV, resolve_slow_query_ms


def test_override_wins(monkeypatch):
    monkeypatch.setenv(SLOW_QUERY_ENV, "500")
    assert resolve_slow_query_ms(default=100, override=20) == 20


def test_environment_used_when_no_override(monkeypatch):
    monkeypatch.setenv(SLOW_QUERY_ENV, "500")
    assert resolve_slow_query_ms(default=100) == 500


def test_invalid_environment_raises(monkeypatch):
    monkeypatch.setenv(SLOW_QUERY_ENV, "soon")
    with pytest.raises(AdapterConfigurationError):
        resolve_slow_query_ms(default=100)
    monkeypatch.setenv(SLOW_QUERY_ENV, "-5")
    with pytest.raises(AdapterConfigurationError):
        resolve_slow_query_ms(default=100)


def test_adapter_and_config_agree_on_invalid_threshold(monkeypatch):
    monkeypatch.setenv(SLOW_QUERY_ENV, "-5")
    with pytest.raises(AdapterConfigurationError):
        AdapterConfig.from_env()
    with pytest.raises(AdapterConfigurationError):
        SQLiteAdapter()


def test_default_when_unset(monkeypatch):
    monkeypatch.delenv(SLOW_QUERY_ENV, raising=False)
    assert resolve_slow_query_ms(default=75) == 75
