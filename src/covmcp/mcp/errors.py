"""Structured error system for MCP tools.

Domain errors (CovMcpError) are translated here into MCPError, which carries
a machine-readable kind plus a remediation hint, so agents can self-correct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError

from covmcp.core.errors import CovMcpError, ErrorCode

FALLBACK_REMEDIATION = "Retry the call; report the error with the server log if it persists."


class MCPErrorCode(StrEnum):
    """Machine-readable error kinds for MCP tool failures."""

    # Report errors - agent should fix the path or regenerate the report
    REPORT_NOT_FOUND = "REPORT_NOT_FOUND"
    REPORT_PARSE_ERROR = "REPORT_PARSE_ERROR"
    FILE_NOT_IN_COVERAGE = "FILE_NOT_IN_COVERAGE"

    # Recording errors - agent should record a baseline first
    NO_BASELINE = "NO_BASELINE"
    INVALID_RECORDING_REFERENCE = "INVALID_RECORDING_REFERENCE"

    # Validation errors
    INVALID_PARAMS = "INVALID_PARAMS"

    # System errors
    CONFIG_ERROR = "CONFIG_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_KIND_BY_CODE: dict[ErrorCode, MCPErrorCode] = {
    ErrorCode.REPORT_NOT_FOUND: MCPErrorCode.REPORT_NOT_FOUND,
    ErrorCode.REPORT_PARSE_ERROR: MCPErrorCode.REPORT_PARSE_ERROR,
    ErrorCode.FILE_NOT_IN_COVERAGE: MCPErrorCode.FILE_NOT_IN_COVERAGE,
    ErrorCode.NO_BASELINE: MCPErrorCode.NO_BASELINE,
    ErrorCode.INVALID_RECORDING_REFERENCE: MCPErrorCode.INVALID_RECORDING_REFERENCE,
    ErrorCode.CONFIG_PARSE_ERROR: MCPErrorCode.CONFIG_ERROR,
    ErrorCode.CONFIG_INVALID_VALUE: MCPErrorCode.CONFIG_ERROR,
    ErrorCode.CONFIG_MISSING_REQUIRED: MCPErrorCode.CONFIG_ERROR,
    ErrorCode.CONFIG_FILE_NOT_FOUND: MCPErrorCode.CONFIG_ERROR,
}


@dataclass
class ErrorResponse:
    """Structured error response for MCP tools."""

    kind: MCPErrorCode
    message: str
    remediation: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "remediation": self.remediation,
        }
        if self.details:
            data["details"] = self.details
        return data


class MCPError(ToolError):
    """Base exception for MCP tool errors with structured response.

    Extends FastMCP's ToolError so FastMCP passes it through unwrapped.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        **details: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.details = details

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            kind=self.code,
            message=self.message,
            remediation=self.remediation,
            details=self.details,
        )

    @classmethod
    def from_domain(cls, error: CovMcpError) -> MCPError:
        """Translate a core error into its MCP kind, attaching the catalog remediation."""
        kind = _KIND_BY_CODE.get(error.code, MCPErrorCode.INTERNAL_ERROR)
        doc = ERROR_CATALOG.get(kind.value)
        remediation = doc.remediation[0] if doc else FALLBACK_REMEDIATION
        mcp_error = cls(code=kind, message=error.message, remediation=remediation)
        mcp_error.details = dict(error.details)
        return mcp_error


# =============================================================================
# Error Catalog for Introspection
# =============================================================================


@dataclass
class ErrorDocumentation:
    """Documentation for an error kind."""

    code: MCPErrorCode
    category: str  # report, recording, validation, system
    description: str
    causes: list[str]
    remediation: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "category": self.category,
            "description": self.description,
            "causes": self.causes,
            "remediation": self.remediation,
        }


ERROR_CATALOG: dict[str, ErrorDocumentation] = {
    MCPErrorCode.REPORT_NOT_FOUND.value: ErrorDocumentation(
        code=MCPErrorCode.REPORT_NOT_FOUND,
        category="report",
        description="No coverage report exists at the resolved location.",
        causes=[
            "Tests have not been run with coverage enabled yet",
            "lcov_path is relative to a different working directory",
            "The default coverage/lcov.info was used but the tool writes elsewhere",
        ],
        remediation=[
            "Run the test suite with coverage so the report exists, or pass lcov_path",
            "Pass an absolute lcov_path",
            "Set coverage.default_report_path in .covmcp/config.yaml",
        ],
    ),
    MCPErrorCode.REPORT_PARSE_ERROR.value: ErrorDocumentation(
        code=MCPErrorCode.REPORT_PARSE_ERROR,
        category="report",
        description="The report exists but could not be parsed into coverage records.",
        causes=[
            "The file is not LCOV or Cobertura XML",
            "The report was still being written when it was read",
            "A record carries a non-numeric count",
        ],
        remediation=[
            "Regenerate the coverage report and retry once it is complete",
            "Check details.cause for the offending line",
            "Force the format with coverage.format if detection picks the wrong one",
        ],
    ),
    MCPErrorCode.FILE_NOT_IN_COVERAGE.value: ErrorDocumentation(
        code=MCPErrorCode.FILE_NOT_IN_COVERAGE,
        category="report",
        description="Reserved. File summaries for unknown paths currently return 0%.",
        causes=[
            "The path is spelled differently in the report (relative vs absolute)",
        ],
        remediation=[
            "Use the path exactly as it appears in the report's SF: lines",
        ],
    ),
    MCPErrorCode.NO_BASELINE.value: ErrorDocumentation(
        code=MCPErrorCode.NO_BASELINE,
        category="recording",
        description="A diff was requested but no baseline has been recorded.",
        causes=[
            "start_recording was never called",
            "The baseline was cleared",
            "The server runs with a different recording directory than before",
        ],
        remediation=[
            "Call start_recording before making changes, then get_diff_since_start",
            "Check recording_status to see whether a baseline exists",
        ],
    ),
    MCPErrorCode.INVALID_RECORDING_REFERENCE.value: ErrorDocumentation(
        code=MCPErrorCode.INVALID_RECORDING_REFERENCE,
        category="recording",
        description="Reserved. Only a single baseline exists, so references are never used.",
        causes=["A recording id from another tool was passed"],
        remediation=["Omit recording references; the latest baseline is always used"],
    ),
    MCPErrorCode.INVALID_PARAMS.value: ErrorDocumentation(
        code=MCPErrorCode.INVALID_PARAMS,
        category="validation",
        description="Tool parameters failed validation.",
        causes=["A required parameter is missing", "An unknown parameter was passed"],
        remediation=["Check meta.validation_errors and the tool's input schema"],
    ),
    MCPErrorCode.CONFIG_ERROR.value: ErrorDocumentation(
        code=MCPErrorCode.CONFIG_ERROR,
        category="system",
        description="Server configuration is invalid.",
        causes=["Malformed .covmcp/config.yaml", "Invalid COVMCP__* environment variable"],
        remediation=["Fix the configuration named in details and restart the server"],
    ),
    MCPErrorCode.INTERNAL_ERROR.value: ErrorDocumentation(
        code=MCPErrorCode.INTERNAL_ERROR,
        category="system",
        description="An unexpected error occurred inside the server.",
        causes=["A bug in covmcp"],
        remediation=["Retry the call; report the error with the server log if it persists"],
    ),
}


def get_error_documentation(code: str) -> ErrorDocumentation | None:
    """Get documentation for an error kind."""
    return ERROR_CATALOG.get(code)
