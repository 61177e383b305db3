"""Wire-protocol adapters for the supported completion backends.

Each adapter knows how to turn a :class:`CompletionRequest` into an HTTP
request and how to pull the answer text back out of a successful body.
Nothing here performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lume.config import Settings
from lume.errors import ResponseParseError
from lume.models import ChatMessage, CompletionRequest, Provider
from lume.normalize import lookup


@dataclass
class HttpCall:
    """A fully-built outbound request."""

    url: str
    headers: dict[str, str]
    json: dict[str, Any]
    params: dict[str, str] = field(default_factory=dict)


class ProviderAdapter:
    """Base class for a provider's request building and response extraction."""

    provider: Provider

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build(self, request: CompletionRequest) -> HttpCall:
        raise NotImplementedError

    def extract(self, body: Any) -> str:
        raise NotImplementedError

    def _text_at(self, body: Any, *path) -> str:
        text = lookup(body, *path)
        if not isinstance(text, str):
            dotted = "".join(
                f"[{p}]" if isinstance(p, int) else f".{p}" for p in path
            ).lstrip(".")
            raise ResponseParseError(
                f"{self.provider.display_name} response has no {dotted}",
                provider=self.provider.value,
            )
        return text


class OpenAIAdapter(ProviderAdapter):
    """OpenAI chat completions: bearer auth, system prompt as first message."""

    provider = Provider.OPENAI

    def url(self) -> str:
        return self.settings.openai_url

    def messages(self, request: CompletionRequest) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=self.settings.system_prompt),
            ChatMessage(role="user", content=request.prompt),
        ]

    def build(self, request: CompletionRequest) -> HttpCall:
        return HttpCall(
            url=self.url(),
            headers={"Authorization": f"Bearer {request.api_key}"},
            json={
                "model": request.model,
                "messages": [m.to_dict() for m in self.messages(request)],
            },
        )

    def extract(self, body: Any) -> str:
        return self._text_at(body, "choices", 0, "message", "content")


class GoogleAdapter(OpenAIAdapter):
    """Google's OpenAI-compatible proxy; the key also travels as ``?key=``."""

    provider = Provider.GOOGLE

    def url(self) -> str:
        return self.settings.google_url

    def build(self, request: CompletionRequest) -> HttpCall:
        call = super().build(request)
        call.params["key"] = request.api_key
        return call


class AnthropicAdapter(ProviderAdapter):
    """Anthropic messages API: system prompt travels out-of-band."""

    provider = Provider.ANTHROPIC

    def build(self, request: CompletionRequest) -> HttpCall:
        user = ChatMessage(role="user", content=request.prompt)
        return HttpCall(
            url=self.settings.anthropic_url,
            headers={
                "x-api-key": request.api_key,
                "anthropic-version": self.settings.anthropic_version,
            },
            json={
                "model": request.model,
                "max_tokens": self.settings.max_tokens,
                "system": self.settings.system_prompt,
                "messages": [user.to_dict()],
            },
        )

    def extract(self, body: Any) -> str:
        return self._text_at(body, "content", 0, "text")


ADAPTERS: dict[Provider, type[ProviderAdapter]] = {
    Provider.OPENAI: OpenAIAdapter,
    Provider.ANTHROPIC: AnthropicAdapter,
    Provider.GOOGLE: GoogleAdapter,
}


def get_adapter(provider: Provider, settings: Settings) -> ProviderAdapter:
    return ADAPTERS[provider](settings)
