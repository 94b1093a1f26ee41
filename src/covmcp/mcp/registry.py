"""Tool registry for the MCP server.

Tool modules register their handlers here at import time; ``create_mcp_server``
wires whatever the registry holds.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from covmcp.mcp.context import AppContext

# Handler signature: (ctx, validated_params) -> result
HandlerFn = Callable[["AppContext", Any], Awaitable[Any]]

# Names MCP clients accept for tools
_TOOL_NAME = re.compile(r"[A-Za-z0-9_-]{1,64}")


@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: handler plus what the server advertises for it."""

    name: str
    handler: HandlerFn
    description: str
    params_model: type[BaseModel]


class ToolRegistry:
    """Ordered set of tools, keyed by name."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        description: str,
        params_model: type[BaseModel],
    ) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator that adds a tool handler.

        Usage:
            @registry.register("coverage_summary", "Overall coverage", ReportParams)
            async def coverage_summary(ctx: AppContext, params: ReportParams) -> dict:
                ...

        Raises:
            ValueError: The name is not a valid MCP tool name or is already taken.
        """
        if not _TOOL_NAME.fullmatch(name):
            raise ValueError(f"invalid tool name {name!r}")
        if name in self._tools:
            existing = self._tools[name].handler
            raise ValueError(
                f"tool {name!r} already registered by {existing.__module__}.{existing.__qualname__}"
            )

        def decorator(fn: HandlerFn) -> HandlerFn:
            self._tools[name] = ToolSpec(
                name=name,
                handler=fn,
                description=description,
                params_model=params_model,
            )
            return fn

        return decorator

    def get_all(self) -> list[ToolSpec]:
        """Registered tools in registration order."""
        return list(self._tools.values())

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


registry = ToolRegistry()
