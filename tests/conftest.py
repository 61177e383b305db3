"""Shared test fixtures: a counting fake HTTP session and stub engines."""

from __future__ import annotations

import json
import os
import stat
import sys
import textwrap
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from lume.config import Settings


class FakeResponse:
    """Just enough of ``requests.Response`` for the gateway."""

    def __init__(self, status_code: int = 200, body: Any = None, text: Optional[str] = None) -> None:
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """Records every ``post`` and replies with a canned response or error.

    ``calls`` doubles as the network call counter.
    """

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response or FakeResponse(200, {})
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = 0

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed += 1


@pytest.fixture
def fake_session() -> Callable[..., FakeSession]:
    """Build a FakeSession answering with one canned response or error.

    Takes the FakeResponse arguments, plus ``error=`` to raise from ``post``.
    """

    def _make(
        status_code: int = 200,
        body: Any = None,
        text: Optional[str] = None,
        error: Optional[Exception] = None,
    ) -> FakeSession:
        return FakeSession(FakeResponse(status_code, body if body is not None else {}, text), error)

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment and the real cache dir."""
    return Settings(cache_dir=tmp_path / "cache", compile_timeout=30)


@pytest.fixture
def make_engine(tmp_path: Path) -> Callable[[str], str]:
    """Build an executable stand-in for tectonic.

    ``body`` is Python run with the workspace as cwd and ``sys.argv`` set
    to the engine arguments.
    """
    if os.name != "posix":
        pytest.skip("stub engines are shell scripts")

    counter = {"n": 0}

    def _make(body: str) -> str:
        counter["n"] += 1
        script = tmp_path / f"engine_{counter['n']}.py"
        script.write_text(
            "import sys\nfrom pathlib import Path\n" + textwrap.dedent(body),
            encoding="utf-8",
        )
        wrapper = tmp_path / f"engine_{counter['n']}"
        wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
        wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(wrapper)

    return _make
