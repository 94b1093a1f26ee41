"""covmcp error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Report (resolution, parsing, file lookup)
- 4xxx: Recording (baseline snapshot)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Report (3xxx)
    REPORT_NOT_FOUND = 3001
    REPORT_PARSE_ERROR = 3002
    FILE_NOT_IN_COVERAGE = 3003  # reserved: unknown files summarize to zero

    # Recording (4xxx)
    NO_BASELINE = 4001
    INVALID_RECORDING_REFERENCE = 4002  # reserved: only one baseline exists

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_TIMEOUT = 9002


@dataclass(frozen=True)
class CovMcpError(Exception):
    """Base error with structured context for MCP responses.

    No __slots__: the traceback must stay assignable when the error passes
    through generator-based context managers.
    """

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'NO_BASELINE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/MCP responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovMcpError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ReportError(CovMcpError):
    """Coverage report resolution and parsing errors."""

    @classmethod
    def not_found(cls, path: str, *, default_used: bool = False) -> "ReportError":
        suffix = " (default path)" if default_used else ""
        return cls(
            code=ErrorCode.REPORT_NOT_FOUND,
            message=f"Coverage report not found at: {path}{suffix}",
            details={"path": path, "default_used": default_used},
        )

    @classmethod
    def parse_error(cls, path: str, cause: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_PARSE_ERROR,
            message=f"Failed to parse coverage report: {path}. Error: {cause}",
            details={"path": path, "cause": cause},
        )

    @classmethod
    def file_not_in_coverage(cls, path: str) -> "ReportError":
        return cls(
            code=ErrorCode.FILE_NOT_IN_COVERAGE,
            message=f"File not present in coverage report: {path}",
            details={"path": path},
        )


class RecordingError(CovMcpError):
    """Baseline recording errors."""

    @classmethod
    def no_baseline(cls) -> "RecordingError":
        return cls(
            code=ErrorCode.NO_BASELINE,
            message="No coverage recording found. Please run start_recording first.",
        )

    @classmethod
    def invalid_reference(cls, reference: str) -> "RecordingError":
        return cls(
            code=ErrorCode.INVALID_RECORDING_REFERENCE,
            message=f"Unknown recording reference: {reference}",
            details={"reference": reference},
        )


class InternalError(CovMcpError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
