"""Normalization of provider error bodies into a single readable message.

Error payloads are not contractually stable across providers, so bodies
are parsed into a plain JSON tree and inspected with :func:`lookup`
rather than deserialized into typed models.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from lume.models import Provider

_MISSING = object()

PathKey = Union[str, int]


def parse_tree(body: str) -> Any:
    """Parse a response body as JSON, returning ``_MISSING`` on failure."""
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return _MISSING


def lookup(tree: Any, *path: PathKey) -> Any:
    """Walk ``path`` through nested dicts and lists.

    String keys index into dicts, integer keys into lists. Returns None as
    soon as a step is missing or has the wrong shape.
    """
    if not path:
        return tree
    key, rest = path[0], path[1:]
    if isinstance(key, int):
        if isinstance(tree, list) and -len(tree) <= key < len(tree):
            return lookup(tree[key], *rest)
        return None
    if isinstance(tree, dict) and key in tree:
        return lookup(tree[key], *rest)
    return None


def generic_message(provider: Provider, status: int, body: str) -> str:
    return f"{provider.display_name.upper()} API Error ({status}): {body}"


def find_error_message(provider: Provider, tree: Any) -> Optional[str]:
    """Return ``error.message`` from a parsed body, if present.

    Google's proxy sometimes wraps the error in a one-element array,
    either around the whole body or as the value of ``error``.
    """
    candidates = [("error", "message")]
    if provider is Provider.GOOGLE:
        candidates += [(0, "error", "message"), ("error", 0, "message")]
    for path in candidates:
        message = lookup(tree, *path)
        if isinstance(message, str):
            return message
    return None


def normalize_error(provider: Provider, status: int, body: str) -> str:
    """Turn a failed response into one human-readable message."""
    tree = parse_tree(body)
    if tree is _MISSING:
        return generic_message(provider, status, body)

    message = find_error_message(provider, tree)
    if message is None:
        return generic_message(provider, status, body)

    if provider is Provider.GOOGLE and status == 429:
        first_line = message.split("\n", 1)[0].rstrip(".")
        return (
            f"Google Gemini Quota Exceeded: {first_line}. "
            "Please wait a minute and try again."
        )
    return f"{provider.display_name} Error ({status}): {message}"
