"""structlog setup for the server and the CLI.

The CLI passes a single ``level``. ``covmcp serve`` passes a ``LoggingConfig``
with a console output on stderr and a JSON file output. Each tool call gets a
request id that is stamped on every event it logs.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any
from uuid import uuid4

import structlog

from covmcp.config.models import LoggingConfig, LogOutputConfig
from covmcp.core.progress import is_console_suppressed

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

# Per-request chatter from the MCP SDK
_QUIET_LOGGERS = (
    "mcp.server.lowlevel.server",
    "mcp.server.streamable_http",
    "fastmcp.server.context.to_client",
)


def get_request_id() -> str | None:
    return _request_id.get()


def set_request_id(request_id: str | None = None) -> str:
    """Set or generate the id for the tool call being handled."""
    rid = request_id or uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def clear_request_id() -> None:
    _request_id.set(None)


def _stamp_request_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if rid := _request_id.get():
        event_dict.setdefault("request_id", rid)
    return event_dict


_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    _stamp_request_id,  # type: ignore[list-item]
]


class ConsoleSuppressingFilter(logging.Filter):
    """Drop console records while a Rich spinner is on screen.

    File handlers never get this filter.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        return not is_console_suppressed()


def _level_number(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _handler_for(output: LogOutputConfig, default_level: str) -> logging.Handler:
    handler: logging.Handler
    stream = {"stderr": sys.stderr, "stdout": sys.stdout}.get(output.destination)
    if stream is not None:
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream is not None and stream.isatty())

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_PRE_CHAIN)
    )
    handler.setLevel(_level_number(output.level or default_level))
    return handler


def configure_logging(config: LoggingConfig | None = None, *, level: str = "INFO") -> None:
    """Route structlog and stdlib logging to the configured outputs.

    Without ``config`` everything goes to stderr in console format at ``level``.
    Safe to call more than once; earlier handlers are closed and replaced.
    """
    if config is None:
        config = LoggingConfig(level=level.upper())  # type: ignore[arg-type]

    root_level = _level_number(config.level)
    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_handler_for(output, config.level))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
