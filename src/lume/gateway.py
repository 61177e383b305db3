"""Provider gateway: one normalized completion call over three wire protocols."""

from __future__ import annotations

import logging
from typing import Optional, Union

import requests

from lume.config import Settings
from lume.errors import (
    ConfigurationError,
    GatewayError,
    GatewayTimeout,
    ResponseParseError,
    TransportError,
    UpstreamError,
)
from lume.logging_config import redact_url
from lume.models import CompletionRequest, CompletionResult, Provider
from lume.normalize import normalize_error
from lume.providers import get_adapter

logger = logging.getLogger(__name__)


class ProviderGateway:
    """Sends completion requests to the configured provider.

    The gateway holds no per-request state; a single instance may serve
    concurrent callers. ``session`` is any object with a
    ``requests.Session``-compatible ``post`` method. A session the gateway
    creates itself is closed by :meth:`close`; an injected one is left open.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> ProviderGateway:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def build_request(
        self,
        prompt: str,
        model: str,
        provider: Union[str, Provider],
        api_key: str,
    ) -> CompletionRequest:
        """Validate the inputs and freeze them into a request.

        Raises:
            UnsupportedProvider: If ``provider`` is not a supported backend
            ConfigurationError: If ``api_key`` is blank
        """
        resolved = Provider.parse(provider)
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                f"{resolved.display_name} API key is not configured. "
                "Add it in Settings and try again.",
                provider=resolved.value,
            )
        return CompletionRequest(
            prompt=prompt,
            model=model,
            provider=resolved,
            api_key=api_key.strip(),
        )

    def request(
        self,
        prompt: str,
        model: str,
        provider: Union[str, Provider],
        api_key: str,
    ) -> str:
        """Perform one completion round trip and return the answer text.

        Raises:
            GatewayError: Any of its subclasses, with a displayable message
        """
        request = self.build_request(prompt, model, provider, api_key)
        adapter = get_adapter(request.provider, self.settings)
        call = adapter.build(request)
        name = request.provider.display_name

        logger.info(
            "POST %s (provider=%s, model=%s)",
            redact_url(call.url),
            request.provider.value,
            request.model,
        )
        try:
            response = self.session.post(
                call.url,
                headers=call.headers,
                json=call.json,
                params=call.params or None,
                timeout=self.settings.http_timeout,
            )
        except requests.Timeout as e:
            raise GatewayTimeout(
                f"{name} did not respond within {self.settings.http_timeout:g} seconds",
                provider=request.provider.value,
            ) from e
        except requests.RequestException as e:
            # str(e) quotes the full URL, query key included
            raise TransportError(
                f"Could not reach {name}: {type(e).__name__}",
                provider=request.provider.value,
            ) from e

        status = response.status_code
        logger.debug("%s answered with HTTP %s", name, status)
        if not 200 <= status < 300:
            raise UpstreamError(
                normalize_error(request.provider, status, response.text),
                provider=request.provider.value,
                status=status,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseParseError(
                f"{name} returned a body that is not JSON: {response.text[:200]}",
                provider=request.provider.value,
                status=status,
            ) from e

        try:
            return adapter.extract(body)
        except ResponseParseError as e:
            e.status = status
            raise

    def complete(
        self,
        prompt: str,
        model: str,
        provider: Union[str, Provider],
        api_key: str,
    ) -> CompletionResult:
        """Like :meth:`request`, but folds failures into the result."""
        try:
            return CompletionResult(text=self.request(prompt, model, provider, api_key))
        except GatewayError as e:
            logger.warning("Completion failed: %s", e.message)
            return CompletionResult(error=e.to_normalized())


def complete(
    prompt: str,
    model: str,
    provider: Union[str, Provider],
    api_key: str,
    settings: Optional[Settings] = None,
    session: Optional[requests.Session] = None,
) -> CompletionResult:
    """Complete ``prompt`` with ``model`` on ``provider``.

    Args:
        prompt: The user's request
        model: Provider-specific model identifier
        provider: ``"openai"``, ``"anthropic"`` or ``"google"``
        api_key: Credential for the provider; never stored
        settings: Endpoint and timeout overrides
        session: HTTP session to send the request with

    Returns:
        CompletionResult holding either the text or a NormalizedError
    """
    with ProviderGateway(settings, session) as gateway:
        return gateway.complete(prompt, model, provider, api_key)
