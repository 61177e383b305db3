"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from lume.config import (
    ANTHROPIC_URL,
    DEFAULT_COMPILE_TIMEOUT,
    DEFAULT_HTTP_TIMEOUT,
    Settings,
    default_cache_dir,
)
from lume.errors import ConfigurationError

ENV_VARS = [
    "LUME_OPENAI_URL",
    "LUME_ANTHROPIC_URL",
    "LUME_GOOGLE_URL",
    "LUME_ANTHROPIC_VERSION",
    "LUME_MAX_TOKENS",
    "LUME_HTTP_TIMEOUT",
    "LUME_ENGINE",
    "LUME_ENGINE_PATH",
    "LUME_CACHE_DIR",
    "LUME_COMPILE_TIMEOUT",
    "LUME_KEEP_WORKSPACE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    settings = Settings.from_env()
    assert settings.anthropic_url == ANTHROPIC_URL
    assert settings.http_timeout == DEFAULT_HTTP_TIMEOUT
    assert settings.compile_timeout == DEFAULT_COMPILE_TIMEOUT
    assert settings.max_tokens == 4096
    assert settings.engine == "tectonic"
    assert settings.engine_path is None
    assert settings.keep_workspace is False
    assert settings.cache_dir == tmp_path / "lume" / "lume_temp"


def test_default_cache_dir_without_xdg(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
    assert default_cache_dir() == Path.home() / ".cache" / "lume" / "lume_temp"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LUME_HTTP_TIMEOUT", "7.5")
    monkeypatch.setenv("LUME_COMPILE_TIMEOUT", "30")
    monkeypatch.setenv("LUME_CACHE_DIR", str(tmp_path / "scratch"))
    monkeypatch.setenv("LUME_ENGINE_PATH", "/opt/tectonic")
    monkeypatch.setenv("LUME_KEEP_WORKSPACE", "yes")
    monkeypatch.setenv("LUME_OPENAI_URL", "http://localhost:8080/v1/chat/completions")

    settings = Settings.from_env()

    assert settings.http_timeout == 7.5
    assert settings.compile_timeout == 30
    assert settings.cache_dir == tmp_path / "scratch"
    assert settings.engine_path == "/opt/tectonic"
    assert settings.keep_workspace is True
    assert settings.openai_url == "http://localhost:8080/v1/chat/completions"


def test_invalid_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LUME_COMPILE_TIMEOUT", "two minutes")
    with pytest.raises(ConfigurationError, match="LUME_COMPILE_TIMEOUT"):
        Settings.from_env()
