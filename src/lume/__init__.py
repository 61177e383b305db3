"""lume: AI provider gateway and LaTeX compilation supervisor for the Lume editor."""

from __future__ import annotations

from lume.api import compile_document, complete_text, extract_outline
from lume.config import Settings
from lume.gateway import ProviderGateway, complete
from lume.models import CompileResult, CompletionResult, Diagnostic, NormalizedError, Provider
from lume.supervisor import Supervisor, compile_latex

__version__ = "0.1.0"
__all__ = [
    "compile_document",
    "compile_latex",
    "complete",
    "complete_text",
    "extract_outline",
    "CompileResult",
    "CompletionResult",
    "Diagnostic",
    "NormalizedError",
    "Provider",
    "ProviderGateway",
    "Settings",
    "Supervisor",
]
