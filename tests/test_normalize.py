"""Tests for provider error normalization."""

from __future__ import annotations

import json

import pytest

from lume.models import Provider
from lume.normalize import find_error_message, lookup, normalize_error


def test_lookup_walks_dicts_and_lists() -> None:
    tree = {"choices": [{"message": {"content": "x"}}]}
    assert lookup(tree, "choices", 0, "message", "content") == "x"
    assert lookup(tree) is tree


@pytest.mark.parametrize(
    "path",
    [
        ("choices", 1),
        ("choices", 0, "delta"),
        ("missing",),
        ("choices", "0"),
        ("choices", 0, "message", "content", "deeper"),
    ],
)
def test_lookup_returns_none_for_missing_steps(path: tuple) -> None:
    tree = {"choices": [{"message": {"content": "x"}}]}
    assert lookup(tree, *path) is None


def test_lookup_on_non_container() -> None:
    assert lookup("text", "error") is None
    assert lookup(None, 0) is None


def test_google_error_as_object_or_array() -> None:
    """Google errors may be bare objects or wrapped in an array."""
    inner = {"error": {"message": "API key not valid."}}
    assert find_error_message(Provider.GOOGLE, inner) == "API key not valid."
    assert find_error_message(Provider.GOOGLE, [inner]) == "API key not valid."


def test_google_error_field_may_be_an_array() -> None:
    body = {"error": [{"code": 429, "message": "Quota exceeded.\nretry"}]}
    assert find_error_message(Provider.GOOGLE, body) == "Quota exceeded.\nretry"
    assert normalize_error(Provider.GOOGLE, 429, json.dumps(body)) == (
        "Google Gemini Quota Exceeded: Quota exceeded. Please wait a minute and try again."
    )


def test_array_wrapping_only_checked_for_google() -> None:
    wrapped = [{"error": {"message": "nope"}}]
    assert find_error_message(Provider.OPENAI, wrapped) is None


def test_google_quota_message() -> None:
    body = json.dumps({"error": {"message": "Quota exceeded for metric.\n* details"}})
    message = normalize_error(Provider.GOOGLE, 429, body)
    assert message == (
        "Google Gemini Quota Exceeded: Quota exceeded for metric. "
        "Please wait a minute and try again."
    )


def test_google_non_quota_keeps_full_message() -> None:
    body = json.dumps([{"error": {"message": "line one\nline two"}}])
    assert normalize_error(Provider.GOOGLE, 400, body) == "Google Error (400): line one\nline two"


def test_quota_branch_is_google_only() -> None:
    body = json.dumps({"error": {"message": "Rate limit reached\nretry later"}})
    assert normalize_error(Provider.OPENAI, 429, body) == (
        "OpenAI Error (429): Rate limit reached\nretry later"
    )


@pytest.mark.parametrize(
    "body",
    [
        "not json at all",
        "",
        json.dumps({"detail": "nope"}),
        json.dumps({"error": "plain string"}),
        json.dumps({"error": {"message": 42}}),
    ],
)
def test_generic_fallback(body: str) -> None:
    """Anything without a string error.message falls back to the raw body."""
    assert normalize_error(Provider.ANTHROPIC, 503, body) == f"ANTHROPIC API Error (503): {body}"
