"""Config module exports."""

from covmcp.config.loader import load_config
from covmcp.config.models import (
    CoverageConfig,
    CovMcpConfig,
    LoggingConfig,
    LogOutputConfig,
    RecordingConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "CovMcpConfig",
    "CoverageConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RecordingConfig",
    "ServerConfig",
]
