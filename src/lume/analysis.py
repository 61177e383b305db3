"""Log analysis and diagnostic extraction from engine output."""

from __future__ import annotations

import re
from typing import Callable

from lume.models import Diagnostic

# Type alias for a rule handler function
RuleHandler = Callable[[re.Match[str]], list[Diagnostic]]

_MISSING_STY = re.compile(r"File `([^']+\.sty)' not found")


class LogAnalyzer:
    """Analyzes tectonic output to extract diagnostics."""

    def __init__(self) -> None:
        """Initialize the analyzer with default rules."""
        self.rules: list[tuple[re.Pattern[str], RuleHandler]] = []
        self._register_default_rules()

    def _register_default_rules(self) -> None:
        """Register the default diagnostic rules."""
        # tectonic: "error: main.tex:12: Undefined control sequence"
        self.add_rule(
            re.compile(
                r"^(error|warning): ([^:\n]+\.tex):(\d+): (.*)$",
                re.MULTILINE,
            ),
            self._handle_located,
        )

        # Missing package reported outside a located line (e.g. TeX log)
        self.add_rule(
            re.compile(
                r"^(?!error:|warning:).*LaTeX Error: File `([^']+\.sty)' not found",
                re.MULTILINE,
            ),
            self._handle_missing_package,
        )

        # Runaway argument
        self.add_rule(
            re.compile(r"Runaway argument\??", re.MULTILINE),
            self._handle_runaway_argument,
        )

        # Engine-level errors with no source location
        self.add_rule(
            re.compile(r"^error: (?![^:\n]+\.tex:\d+:)(.+)$", re.MULTILINE),
            self._handle_engine_error,
        )

        # Raw TeX error lines (starting with !)
        self.add_rule(
            re.compile(r"^!(.*)$", re.MULTILINE),
            self._handle_generic_error,
        )

    def add_rule(self, pattern: re.Pattern[str], handler: RuleHandler) -> None:
        """Add a new analysis rule.

        Args:
            pattern: Regex pattern to match in the log
            handler: Function that takes a match and returns a list of Diagnostic objects
        """
        self.rules.append((pattern, handler))

    def _handle_located(self, match: re.Match[str]) -> list[Diagnostic]:
        """Handle ``error:``/``warning:`` lines that carry file and line."""
        level, file, line, text = match.groups()
        raw = match.group(0).strip()
        text = text.strip()

        if level == "warning":
            return [
                Diagnostic(
                    level="warning",
                    code="tex-warning",
                    message=text,
                    raw=raw,
                    file=file,
                    line=int(line),
                )
            ]

        missing = _MISSING_STY.search(text)
        if missing:
            code = "missing-package"
            message = (
                f"Missing package file '{missing.group(1)}'. "
                "Check the package name or adjust your preamble."
            )
        elif text.startswith("Undefined control sequence"):
            code = "undefined-control-sequence"
            message = (
                f"Undefined control sequence on line {line}. "
                "Check for typos or missing `\\usepackage`/`\\newcommand`."
            )
        else:
            code = "tex-error"
            message = text
        return [
            Diagnostic(
                level="error",
                code=code,
                message=message,
                raw=raw,
                file=file,
                line=int(line),
            )
        ]

    def _handle_missing_package(self, match: re.Match[str]) -> list[Diagnostic]:
        """Handle missing package file errors."""
        package = match.group(1)
        raw = match.group(0)
        return [
            Diagnostic(
                level="error",
                code="missing-package",
                message=(
                    f"Missing package file '{package}'. "
                    "Check the package name or adjust your preamble."
                ),
                raw=raw.strip(),
            )
        ]

    def _handle_runaway_argument(self, match: re.Match[str]) -> list[Diagnostic]:
        """Handle runaway argument errors."""
        raw = match.group(0)
        return [
            Diagnostic(
                level="error",
                code="runaway-argument",
                message=(
                    "Runaway argument. Likely an unclosed brace or environment; "
                    "check for missing '}' or \\end{...} above."
                ),
                raw=raw.strip(),
            )
        ]

    def _handle_engine_error(self, match: re.Match[str]) -> list[Diagnostic]:
        """Handle engine errors such as halts or failed bundle downloads."""
        text = match.group(1).strip()
        if text.startswith("halted on potentially-recoverable error"):
            return []
        return [
            Diagnostic(
                level="error",
                code="engine-error",
                message=text,
                raw=match.group(0).strip(),
            )
        ]

    def _handle_generic_error(self, match: re.Match[str]) -> list[Diagnostic]:
        """Handle raw TeX error lines."""
        raw = match.group(0).strip()

        # Skip if this is already matched by a more specific rule
        if any(
            code in raw.lower()
            for code in [
                "file",
                "not found",
                "runaway argument",
            ]
        ):
            return []

        return [
            Diagnostic(
                level="error",
                code="latex-error",
                message=match.group(1).strip() or "LaTeX reported an error.",
                raw=raw,
            )
        ]

    def analyse(self, log: str) -> list[Diagnostic]:
        """Analyze engine output and extract diagnostics.

        Args:
            log: The full compilation transcript

        Returns:
            A list of Diagnostic objects extracted from the log
        """
        diagnostics: list[Diagnostic] = []
        matched_positions: set[tuple[int, int]] = set()

        for pattern, handler in self.rules:
            for match in pattern.finditer(log):
                # Avoid duplicate diagnostics from overlapping matches
                match_span = match.span()
                if match_span in matched_positions:
                    continue

                diagnostics.extend(handler(match))
                matched_positions.add(match_span)

        return diagnostics


# Global analyzer instance
_analyzer = LogAnalyzer()


def analyse_log(log: str) -> list[Diagnostic]:
    """Analyze engine output and extract diagnostics.

    This is the main entry point for log analysis.

    Args:
        log: The full compilation transcript

    Returns:
        A list of Diagnostic objects extracted from the log
    """
    return _analyzer.analyse(log)
