"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVMCP__SECTION__KEY)
3. Repo YAML (.covmcp/config.yaml)
4. Global YAML (~/.config/covmcp/config.yaml)
5. Built-in defaults (this file)

Examples:
    COVMCP__LOGGING__LEVEL=DEBUG
    COVMCP__COVERAGE__DEFAULT_REPORT_PATH=build/lcov.info
    COVMCP__RECORDING__DIRECTORY=/tmp/covmcp-recording
    COVMCP__SERVER__TRANSPORT=http
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from covmcp.config.constants import (
    DEFAULT_RECORDING_DIR,
    DEFAULT_REPORT_PATH,
    PORT_MAX,
    PORT_MIN,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
ReportFormat = Literal["auto", "lcov", "cobertura"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVMCP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every parsed record count and baseline write.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CoverageConfig(BaseModel):
    """Coverage report defaults.

    Env vars:
        COVMCP__COVERAGE__DEFAULT_REPORT_PATH: Report used when a call names none
        COVMCP__COVERAGE__FORMAT: auto, lcov or cobertura
    """

    default_report_path: str = Field(
        default=DEFAULT_REPORT_PATH,
        description="Report used when a tool call names none. Relative paths resolve "
        "against the server's working directory.",
    )
    format: ReportFormat = Field(
        default="auto",
        description="Force a report format instead of sniffing the file.",
    )


class RecordingConfig(BaseModel):
    """Baseline recording configuration.

    Env vars:
        COVMCP__RECORDING__DIRECTORY: Directory holding the baseline snapshot
    """

    directory: str = Field(
        default=DEFAULT_RECORDING_DIR,
        description="Directory holding the single baseline snapshot. "
        "Relative paths resolve against the working directory.",
    )


class ServerConfig(BaseModel):
    """MCP server configuration.

    Env vars:
        COVMCP__SERVER__TRANSPORT: stdio (default) or http
        COVMCP__SERVER__HOST: Bind address for http transport
        COVMCP__SERVER__PORT: Port for http transport
    """

    name: str = Field(default="coverage-mcp", description="Server name reported to clients.")
    transport: Literal["stdio", "http"] = Field(
        default="stdio",
        description="stdio for editor/agent integrations, http for a shared local server.",
    )
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for http transport.",
    )
    port: int = Field(
        default=7655,
        description="Port for http transport.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (PORT_MIN <= v <= PORT_MAX):
            raise ValueError(f"Port must be {PORT_MIN}-{PORT_MAX}, got {v}")
        return v


class CovMcpConfig(BaseModel):
    """Root configuration for covmcp."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    recording: RecordingConfig = Field(default_factory=RecordingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
