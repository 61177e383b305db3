"""CLI interface for lume."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from lume.config import DEFAULT_MODELS, Settings
from lume.errors import LumeError, UnsupportedProvider
from lume.gateway import ProviderGateway
from lume.logging_config import configure_logging
from lume.models import CompileResult, Provider
from lume.outline import extract_outline
from lume.supervisor import compile_latex

app = typer.Typer(
    name="lume",
    help="Compile LaTeX documents and ask AI providers for LaTeX help",
)


@app.callback()
def main(
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
    ] = "WARNING",
) -> None:
    """Lume backend tools."""
    configure_logging(log_level)


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except LumeError as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _read_source(input_file: Path) -> str:
    if not input_file.is_file():
        typer.echo(f"Error: Input file not found: {input_file}", err=True)
        sys.exit(1)
    return input_file.read_text(encoding="utf-8", errors="replace")


def _print_diagnostics(result: CompileResult) -> None:
    """Print diagnostics in human-readable format."""
    if not result.diagnostics:
        return

    for diag in result.diagnostics:
        level_marker = {
            "error": "ERROR",
            "warning": "WARNING",
            "info": "INFO",
        }.get(diag.level, "INFO")
        location = f" {diag.file}:{diag.line}" if diag.file else ""
        typer.echo(
            f"{level_marker} [{diag.code}]{location}: {diag.message}",
            err=True,
        )


@app.command("compile")
def compile_command(
    input_file: Annotated[
        Path,
        typer.Argument(help="Path to the input .tex file"),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Where to write the PDF (default: next to the input)"),
    ] = None,
    engine_path: Annotated[
        Optional[str],
        typer.Option("--engine-path", help="Explicit path to the tectonic executable"),
    ] = None,
    timeout: Annotated[
        Optional[int],
        typer.Option("--timeout", "-t", help="Maximum compilation time in seconds"),
    ] = None,
    keep_workspace: Annotated[
        bool,
        typer.Option("--keep-workspace", help="Keep the scratch directory for inspection"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Compile a LaTeX file to PDF.

    Examples:
        lume compile document.tex
        lume compile document.tex -o build/document.pdf --json
    """
    source = _read_source(input_file)
    settings = _load_settings()
    if engine_path:
        settings.engine_path = engine_path
    if timeout is not None:
        settings.compile_timeout = timeout
    if keep_workspace:
        settings.keep_workspace = True

    result = compile_latex(source, settings)

    pdf_path = output or input_file.with_suffix(".pdf")
    if result.success and result.artifact is not None:
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        pdf_path.write_bytes(result.artifact)

    if json_output:
        payload = result.to_dict()
        payload["pdf_path"] = str(pdf_path.resolve()) if result.success else None
        typer.echo(json.dumps(payload, indent=2))
        sys.exit(0 if result.success else 2)

    if result.success:
        typer.echo(f"OK: {pdf_path.resolve()}")
        sys.exit(0)
    else:
        typer.echo("Compilation failed.", err=True)
        typer.echo(result.error or "", err=True)
        _print_diagnostics(result)
        sys.exit(2)


@app.command()
def ask(
    prompt: Annotated[str, typer.Argument(help="What to ask the assistant")],
    provider: Annotated[
        str,
        typer.Option("--provider", "-p", help="openai, anthropic or google"),
    ] = Provider.OPENAI.value,
    model: Annotated[
        Optional[str],
        typer.Option(
            "--model", "-m", help="Provider-specific model identifier [default: per provider]"
        ),
    ] = None,
    api_key: Annotated[
        str,
        typer.Option("--api-key", envvar="LUME_API_KEY", help="API key for the provider"),
    ] = "",
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Send one prompt to an AI provider and print the answer."""
    if model is None:
        try:
            model = DEFAULT_MODELS[Provider.parse(provider)]
        except UnsupportedProvider:
            model = ""  # reported by the gateway below
    with ProviderGateway(_load_settings()) as gateway:
        result = gateway.complete(prompt, model, provider, api_key)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    elif result.ok:
        typer.echo(result.text)
    else:
        typer.echo(result.error.message, err=True)

    if result.ok:
        sys.exit(0)
    kind = result.error.kind
    sys.exit(1 if kind in ("ConfigurationError", "UnsupportedProvider") else 2)


@app.command()
def outline(
    input_file: Annotated[
        Path,
        typer.Argument(help="Path to the input .tex file"),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """List the sections and labels of a LaTeX file."""
    items = extract_outline(_read_source(input_file))

    if json_output:
        typer.echo(json.dumps([item.to_dict() for item in items], indent=2))
        return

    for item in items:
        indent = "  " * (item.level - 1)
        typer.echo(f"{item.line:>5}  {indent}{item.title}")


if __name__ == "__main__":
    app()
