"""Runtime settings for the gateway and the compilation supervisor."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from lume.errors import ConfigurationError
from lume.models import Provider

SYSTEM_PROMPT = (
    "You are a LaTeX expert assistant. "
    "Return only valid LaTeX code or helpful advice as requested."
)

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
GOOGLE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/chat/completions"
ANTHROPIC_VERSION = "2023-06-01"

DEFAULT_MAX_TOKENS = 4096
DEFAULT_HTTP_TIMEOUT = 60.0
DEFAULT_COMPILE_TIMEOUT = 120

# Used when the caller names a provider but no model
DEFAULT_MODELS = {
    Provider.OPENAI: "gpt-4o",
    Provider.ANTHROPIC: "claude-3-5-sonnet-latest",
    Provider.GOOGLE: "gemini-2.0-flash-exp",
}


def default_cache_dir() -> Path:
    """Return the workspace root, honouring ``XDG_CACHE_HOME``."""
    base = os.environ.get("XDG_CACHE_HOME")
    root = Path(base) if base else Path.home() / ".cache"
    return root / "lume" / "lume_temp"


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from None


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Configuration shared by the gateway and the supervisor."""

    # Provider gateway
    openai_url: str = OPENAI_URL
    anthropic_url: str = ANTHROPIC_URL
    google_url: str = GOOGLE_URL
    anthropic_version: str = ANTHROPIC_VERSION
    max_tokens: int = DEFAULT_MAX_TOKENS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    system_prompt: str = SYSTEM_PROMPT

    # Compilation supervisor
    engine: str = "tectonic"
    engine_path: Optional[str] = None
    cache_dir: Path = field(default_factory=default_cache_dir)
    compile_timeout: Optional[int] = DEFAULT_COMPILE_TIMEOUT
    keep_workspace: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from ``LUME_*`` environment variables."""
        cache_dir = os.getenv("LUME_CACHE_DIR")
        return cls(
            openai_url=os.getenv("LUME_OPENAI_URL", OPENAI_URL),
            anthropic_url=os.getenv("LUME_ANTHROPIC_URL", ANTHROPIC_URL),
            google_url=os.getenv("LUME_GOOGLE_URL", GOOGLE_URL),
            anthropic_version=os.getenv("LUME_ANTHROPIC_VERSION", ANTHROPIC_VERSION),
            max_tokens=_env_number("LUME_MAX_TOKENS", DEFAULT_MAX_TOKENS, int),
            http_timeout=_env_number("LUME_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT, float),
            engine=os.getenv("LUME_ENGINE", "tectonic"),
            engine_path=os.getenv("LUME_ENGINE_PATH") or None,
            cache_dir=Path(cache_dir).expanduser() if cache_dir else default_cache_dir(),
            compile_timeout=_env_number(
                "LUME_COMPILE_TIMEOUT", DEFAULT_COMPILE_TIMEOUT, int
            ),
            keep_workspace=_env_flag("LUME_KEEP_WORKSPACE"),
        )
