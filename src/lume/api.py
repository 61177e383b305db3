"""Entry points consumed by the editor UI."""

from __future__ import annotations

from typing import Optional, Union

from lume.config import Settings
from lume.gateway import ProviderGateway
from lume.models import OutlineItem, Provider
from lume.outline import extract_outline as _extract_outline
from lume.supervisor import Supervisor


def complete_text(
    prompt: str,
    model: str,
    provider: Union[str, Provider],
    api_key: str,
    settings: Optional[Settings] = None,
) -> str:
    """Ask ``provider`` to complete ``prompt`` and return the answer text.

    Raises:
        GatewayError: With a message ready to show to the user
    """
    with ProviderGateway(settings) as gateway:
        return gateway.request(prompt, model, provider, api_key)


def compile_document(source: str, settings: Optional[Settings] = None) -> bytes:
    """Compile ``source`` and return the PDF bytes.

    Raises:
        SupervisorError: With the engine transcript or a diagnosis
    """
    return Supervisor(settings).compile(source)


def extract_outline(source: str) -> list[OutlineItem]:
    return _extract_outline(source)
