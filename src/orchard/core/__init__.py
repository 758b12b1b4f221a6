"""Core modules for Orchard - centralized error definitions."""

from orchard.core.errors import (
    BackendError,
    BackendPermanentError,
    BackendTransientError,
    ConfigurationError,
    ExitCode,
    OrchardError,
    ProtocolDriftError,
    SpecDecodeError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "OrchardError",
    "ConfigurationError",
    "SpecDecodeError",
    "BackendError",
    "BackendTransientError",
    "BackendPermanentError",
    "ProtocolDriftError",
    "main_with_error_handling",
    "format_error_message",
]
