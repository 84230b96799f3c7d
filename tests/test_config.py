import pytest
from pydantic import ValidationError

from modelmap.config import Settings, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MODELMAP_DEBUG_LEVEL", raising=False)
    monkeypatch.delenv("MODELMAP_DEBUG_TOPICS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.debug_level is None
    assert settings.topics() is None


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODELMAP_DEBUG_LEVEL", " TRACE ")
    monkeypatch.setenv("MODELMAP_DEBUG_TOPICS", "compile, execute,,")
    settings = Settings(_env_file=None)
    assert settings.debug_level == "trace"
    assert settings.topics() == frozenset({"compile", "execute"})


def test_blank_level_means_off() -> None:
    assert Settings(debug_level="  ", _env_file=None).debug_level is None


def test_unknown_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(debug_level="loud", _env_file=None)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_settings()
    monkeypatch.setenv("MODELMAP_DEBUG_LEVEL", "error")
    assert get_settings() is first

    get_settings.cache_clear()
    assert get_settings().debug_level == "error"
