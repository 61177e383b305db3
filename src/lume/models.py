"""Data models for completions, compilation results and diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal, Optional, Union

from lume.errors import LumeError, UnsupportedProvider

Role = Literal["system", "user", "assistant"]


class Provider(str, Enum):
    """Supported AI completion backends."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"

    @property
    def display_name(self) -> str:
        return {
            Provider.OPENAI: "OpenAI",
            Provider.ANTHROPIC: "Anthropic",
            Provider.GOOGLE: "Google",
        }[self]

    @classmethod
    def parse(cls, value: Union[str, "Provider"]) -> "Provider":
        """Resolve a provider from a member or a case-insensitive name.

        Raises:
            UnsupportedProvider: If the value names no supported backend
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedProvider(
                f"Unsupported provider: {value}", provider=str(value)
            ) from None


@dataclass(frozen=True)
class ChatMessage:
    """A single turn of a chat-completion payload."""

    role: Role
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class CompletionRequest:
    """A normalized completion request, built per call."""

    prompt: str
    model: str
    provider: Provider
    api_key: str = field(repr=False)


@dataclass(frozen=True)
class NormalizedError:
    """Provider-independent description of a failed completion."""

    provider: str
    http_status: Optional[int]
    message: str
    kind: str = "GatewayError"

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "http_status": self.http_status,
            "message": self.message,
            "kind": self.kind,
        }


@dataclass(frozen=True)
class CompletionResult:
    """Either the completion text or a normalized error, never both."""

    text: Optional[str] = None
    error: Optional[NormalizedError] = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.error is None):
            raise ValueError("CompletionResult needs exactly one of text or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the text, or raise the error message as a LumeError."""
        if self.error is not None:
            raise LumeError(self.error.message)
        return self.text  # type: ignore[return-value]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "text": self.text,
            "error": self.error.to_dict() if self.error else None,
        }


@dataclass
class Diagnostic:
    """A diagnostic message extracted from engine output."""

    level: Literal["error", "warning", "info"]
    code: str
    message: str
    raw: str
    file: Optional[str] = None
    line: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert diagnostic to a dictionary for JSON serialization."""
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "raw": self.raw,
            "file": self.file,
            "line": self.line,
        }


@dataclass
class CompileResult:
    """Result of a compilation attempt."""

    success: bool
    artifact: Optional[bytes] = None
    log: str = ""
    diagnostics: list[Diagnostic] = field(default_factory=list)
    engine: str = ""
    return_code: Optional[int] = None
    workdir: Optional[Path] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert result to a dictionary for JSON serialization."""
        return {
            "success": self.success,
            "artifact_size": len(self.artifact) if self.artifact is not None else None,
            "log": self.log,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "engine": self.engine,
            "return_code": self.return_code,
            "workdir": str(self.workdir) if self.workdir else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class OutlineItem:
    """A heading or label found in a document source."""

    title: str
    level: int
    line: int

    def to_dict(self) -> dict:
        return {"title": self.title, "level": self.level, "line": self.line}
