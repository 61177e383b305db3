"""Error taxonomy for the provider gateway and the compilation supervisor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from lume.models import Diagnostic, NormalizedError


class LumeError(Exception):
    """Base class for every failure reported by lume.

    The message is always suitable for direct display to an end user.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Provider gateway
# ---------------------------------------------------------------------------


class GatewayError(LumeError):
    """A completion request failed."""

    def __init__(
        self,
        message: str,
        provider: str = "",
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status = status

    def to_normalized(self) -> NormalizedError:
        """Collapse the error into the gateway's normalized error shape."""
        from lume.models import NormalizedError

        return NormalizedError(
            provider=self.provider,
            http_status=self.status,
            message=self.message,
            kind=type(self).__name__,
        )


class ConfigurationError(GatewayError):
    """Missing or invalid configuration, e.g. a blank API key."""


class UnsupportedProvider(GatewayError):
    """The requested provider is not one of the supported backends."""


class TransportError(GatewayError):
    """The endpoint could not be reached (DNS, TLS, connection reset...)."""


class GatewayTimeout(GatewayError):
    """The provider did not answer within the configured bound."""


class UpstreamError(GatewayError):
    """The provider answered with a non-2xx status."""


class ResponseParseError(GatewayError):
    """A 2xx answer whose body has no extractable completion text."""


# ---------------------------------------------------------------------------
# Compilation supervisor
# ---------------------------------------------------------------------------


class SupervisorError(LumeError):
    """A compile request failed."""

    code = "supervisor-error"

    def __init__(
        self,
        message: str,
        log: str = "",
        diagnostics: Optional[list[Diagnostic]] = None,
        return_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.log = log
        self.diagnostics = diagnostics or []
        self.return_code = return_code


class WorkspaceError(SupervisorError):
    """The workspace could not be prepared."""

    code = "workspace-error"


class EmptyInput(WorkspaceError):
    """The document source is empty or whitespace only."""

    code = "empty-input"


class ProcessSpawnError(SupervisorError):
    """The typesetting engine could not be started."""

    code = "engine-not-found"


class CompileTimeout(SupervisorError):
    """The engine did not finish within the configured bound."""

    code = "timeout"


class CompileError(SupervisorError):
    """The engine ran but did not produce a valid artifact."""

    code = "compilation-failed"


class NonZeroExit(CompileError):
    """The engine exited with a nonzero status."""

    code = "nonzero-exit"


class MissingOutput(CompileError):
    """The engine exited cleanly but wrote no output file."""

    code = "missing-output"

    def __init__(self, message: str, files: Optional[list[str]] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.files = files or []


class InvalidOutput(CompileError):
    """The output file does not start with the expected signature."""

    code = "invalid-output"

    def __init__(self, message: str, preview: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.preview = preview
