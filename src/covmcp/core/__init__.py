"""Core module exports."""

from covmcp.core.errors import (
    ConfigError,
    CovMcpError,
    ErrorCode,
    InternalError,
    RecordingError,
    ReportError,
)
from covmcp.core.logging import (
    clear_request_id,
    configure_logging,
    get_request_id,
    set_request_id,
)
from covmcp.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "CovMcpError",
    "ErrorCode",
    "InternalError",
    "RecordingError",
    "ReportError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_request_id",
    "set_request_id",
    # Progress
    "spinner",
    "status",
]
