"""Compilation supervisor: run tectonic on a document and validate the PDF."""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from pathlib import Path
from typing import Optional

from lume.analysis import analyse_log
from lume.config import Settings
from lume.errors import (
    CompileTimeout,
    EmptyInput,
    InvalidOutput,
    MissingOutput,
    NonZeroExit,
    ProcessSpawnError,
    SupervisorError,
    WorkspaceError,
)
from lume.models import CompileResult, Diagnostic
from lume.workspace import OUTPUT_NAME, SOURCE_NAME, Workspace

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"
PREVIEW_BYTES = 50


def _find_engine_executable(engine_name: str) -> Optional[str]:
    """Find the executable path for a given engine.

    Args:
        engine_name: Name of the engine (e.g. 'tectonic')

    Returns:
        Path to the executable if found, None otherwise
    """
    return shutil.which(engine_name)


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


def _preview(data: bytes) -> str:
    """Printable rendering of the first ``PREVIEW_BYTES`` bytes.

    Undecodable bytes become ``.`` like control characters do, so the
    preview never encodes to more than ``PREVIEW_BYTES`` bytes of UTF-8.
    """
    text = _decode(data[:PREVIEW_BYTES])
    return "".join(
        "." if ch == "\ufffd" or not (ch.isprintable() or ch in "\n\t") else ch
        for ch in text
    )


def _kill_process_group(proc: subprocess.Popen) -> None:
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        proc.kill()


class Supervisor:
    """Runs one engine process per compile in a private workspace."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings.from_env()

    def resolve_engine(self) -> str:
        """Return the engine executable to spawn.

        Raises:
            ProcessSpawnError: If the engine cannot be found
        """
        configured = self.settings.engine_path
        if configured:
            if not Path(configured).is_file():
                raise ProcessSpawnError(f"Typesetting engine not found at {configured}")
            return configured

        exe = _find_engine_executable(self.settings.engine)
        if not exe:
            raise ProcessSpawnError(
                f"Typesetting engine '{self.settings.engine}' not found on PATH"
            )
        return exe

    def command(self, exe: str) -> list[str]:
        # tectonic -X compile main.tex --synctex
        return [exe, "-X", "compile", SOURCE_NAME, "--synctex"]

    def _run(self, cmd: list[str], cwd: Path) -> tuple[int, bytes, bytes]:
        """Spawn the engine and wait for it, bounded by ``compile_timeout``."""
        timeout = self.settings.compile_timeout
        # Own process group so a timeout can take down any grandchildren too
        extra = {"start_new_session": True} if os.name == "posix" else {}
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                **extra,
            )
        except OSError as e:
            raise ProcessSpawnError(f"Failed to execute '{cmd[0]}': {e}") from e

        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill_process_group(proc)
            stdout, stderr = proc.communicate()
            log = _decode(stdout) + _decode(stderr)
            raise CompileTimeout(
                f"Compilation timed out after {timeout} seconds",
                log=log,
                diagnostics=analyse_log(log),
            ) from None
        return proc.returncode, stdout, stderr

    def _check_output(
        self,
        workspace: Workspace,
        return_code: int,
        stdout: str,
        stderr: str,
    ) -> bytes:
        log = stdout + stderr
        if return_code != 0:
            raise NonZeroExit(
                f"STDOUT: {stdout}\nSTDERR: {stderr}",
                log=log,
                diagnostics=analyse_log(log),
                return_code=return_code,
            )

        if not workspace.output_path.exists():
            files = workspace.list_files()
            raise MissingOutput(
                f"PDF not generated. Files in workspace: {files}",
                files=files,
                log=log,
                diagnostics=analyse_log(log),
                return_code=return_code,
            )

        try:
            data = workspace.output_path.read_bytes()
        except OSError as e:
            raise WorkspaceError(f"Could not read {OUTPUT_NAME}: {e}", log=log) from e

        if len(data) < len(PDF_SIGNATURE) or data[: len(PDF_SIGNATURE)] != PDF_SIGNATURE:
            preview = _preview(data)
            raise InvalidOutput(
                f"Generated file is not a valid PDF. Output starts with: {preview}",
                preview=preview,
                log=log,
                return_code=return_code,
            )
        return data

    def run(self, source: str) -> CompileResult:
        """Compile ``source`` and return a successful CompileResult.

        Raises:
            SupervisorError: Any of its subclasses, with a displayable message
        """
        if not source.strip():
            raise EmptyInput("LaTeX content is empty. Please add some code and try again.")

        exe = self.resolve_engine()
        with Workspace.allocate(
            self.settings.cache_dir, keep=self.settings.keep_workspace
        ) as workspace:
            workspace.write_source(source)
            logger.info("Compiling in %s", workspace.path)

            return_code, out, err = self._run(self.command(exe), workspace.path)
            stdout, stderr = _decode(out), _decode(err)
            artifact = self._check_output(workspace, return_code, stdout, stderr)
            logger.info("Produced %d byte PDF", len(artifact))

            log = stdout + stderr
            return CompileResult(
                success=True,
                artifact=artifact,
                log=log,
                diagnostics=analyse_log(log),
                engine=self.settings.engine,
                return_code=return_code,
                workdir=workspace.path if workspace.keep else None,
            )

    def compile(self, source: str) -> bytes:
        """Compile ``source`` and return the validated PDF bytes."""
        return self.run(source).artifact  # type: ignore[return-value]


def compile_latex(source: str, settings: Optional[Settings] = None) -> CompileResult:
    """Compile a LaTeX document, reporting failures inside the result.

    Args:
        source: Full document source
        settings: Engine, cache directory and timeout overrides

    Returns:
        CompileResult containing success status, PDF bytes, log, and diagnostics
    """
    supervisor = Supervisor(settings)
    try:
        return supervisor.run(source)
    except SupervisorError as e:
        logger.warning("Compilation failed: %s", e.code)
        diagnostics = e.diagnostics or [
            Diagnostic(
                level="error",
                code=e.code,
                message=e.message,
                raw=e.log[-500:] if len(e.log) > 500 else e.log,
            )
        ]
        return CompileResult(
            success=False,
            log=e.log,
            diagnostics=diagnostics,
            engine=supervisor.settings.engine,
            return_code=e.return_code,
            error=e.message,
        )
