"""
Unified error handling for Orchard resource adapters.

Every failure path raises one of the exceptions below; nothing is
logged-and-ignored. Callers tell decode problems (bad persisted or supplied
data) apart from backend faults by type.

Exit Codes:
- 0: Success
- 10: Configuration error
- 11: Backend error (control-plane failure, transient or permanent)
- 12: Validation error (resource spec or instance spec decode)
- 13: Protocol drift (backend reported an unrecognized native state)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, Sequence, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    CONFIG_ERROR = 10
    BACKEND_ERROR = 11
    VALIDATION_ERROR = 12
    PROTOCOL_ERROR = 13
    UNKNOWN_ERROR = 127


class OrchardError(Exception):
    """Base exception for Orchard errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(OrchardError):
    """Raised for unusable provider settings or unknown resource types."""

    exit_code = ExitCode.CONFIG_ERROR


class SpecDecodeError(OrchardError):
    """A resource spec or persisted instance spec does not have the expected shape.

    ``errors`` holds the structural validation failures (location, message,
    type) as reported by pydantic. Never retried.
    """

    exit_code = ExitCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        errors: Sequence[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.errors = list(errors or [])

    @classmethod
    def from_validation_error(cls, subject: str, exc: Any) -> "SpecDecodeError":
        """Build from a ``pydantic.ValidationError``."""
        errors = [
            {
                "loc": ".".join(str(part) for part in err.get("loc", ())),
                "msg": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        return cls(
            f"Invalid {subject}: {len(errors)} validation error(s)",
            errors=errors,
            details={"subject": subject},
        )


class BackendError(OrchardError):
    """Raised when a control-plane call fails."""

    exit_code = ExitCode.BACKEND_ERROR

    def __init__(self, message: str, operation: str, details: dict[str, Any] | None = None):
        super().__init__(message, {"operation": operation, **(details or {})})
        self.operation = operation


class BackendTransientError(BackendError):
    """Network, timeout or throttling failure that outlasted the retry policy."""


class BackendPermanentError(BackendError):
    """Request rejected by the control plane (bad parameters, authorization)."""


class ProtocolDriftError(OrchardError):
    """The backend reported a native state with no Status mapping."""

    exit_code = ExitCode.PROTOCOL_ERROR

    def __init__(self, state: str, details: dict[str, Any] | None = None):
        super().__init__(f"Unrecognized backend state: {state}", {"state": state, **(details or {})})
        self.state = state


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Catches exceptions and converts them to appropriate exit codes with
    consistent error reporting.

    Exit codes:
        - OrchardError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except OrchardError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                from orchard.cli.ux import error as print_error

                print_error(format_error_message(e))
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: OrchardError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    if isinstance(error, SpecDecodeError) and error.errors:
        lines = [f"  {err['loc'] or '<root>'}: {err['msg']}" for err in error.errors]
        msg = "\n".join([msg, *lines])
    return msg
