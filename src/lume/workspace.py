"""Per-compile scratch directories."""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path

from lume.errors import WorkspaceError

logger = logging.getLogger(__name__)

SOURCE_NAME = "main.tex"
OUTPUT_NAME = "main.pdf"


class Workspace:
    """A directory owned by exactly one compile invocation.

    Every allocation gets a fresh ``job-<hex>`` directory below the cache
    root, so concurrent compiles never share a source or output file.
    """

    def __init__(self, path: Path, keep: bool = False) -> None:
        self.path = path
        self.keep = keep

    @classmethod
    def allocate(cls, root: Path, keep: bool = False) -> "Workspace":
        """Create the root if needed and reserve a unique directory below it.

        Raises:
            WorkspaceError: If either directory cannot be created
        """
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceError(f"Could not create cache directory {root}: {e}") from e

        path = root / f"job-{uuid.uuid4().hex}"
        try:
            path.mkdir()
        except OSError as e:
            raise WorkspaceError(f"Could not create workspace {path}: {e}") from e
        logger.debug("Allocated workspace %s", path)
        return cls(path, keep=keep)

    @property
    def source_path(self) -> Path:
        return self.path / SOURCE_NAME

    @property
    def output_path(self) -> Path:
        return self.path / OUTPUT_NAME

    def write_source(self, content: str) -> Path:
        """Write the document source, replacing any previous contents."""
        try:
            self.source_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise WorkspaceError(f"Could not write {self.source_path}: {e}") from e
        return self.source_path

    def list_files(self) -> list[str]:
        """Names of the files currently in the workspace.

        Enumeration is best-effort: an unreadable directory yields ``[]``.
        """
        try:
            return sorted(p.name for p in self.path.iterdir())
        except OSError as e:
            logger.debug("Could not list %s: %s", self.path, e)
            return []

    def release(self) -> None:
        """Delete the workspace unless it was allocated with ``keep``."""
        if self.keep:
            return
        try:
            shutil.rmtree(self.path)
        except OSError as e:
            logger.warning("Could not remove workspace %s: %s", self.path, e)

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
