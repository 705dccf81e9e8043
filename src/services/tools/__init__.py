"""MCP tool surface.

Each tool module forwards its arguments to the shared `ToolExchange`, so the
same validation and error reporting apply to every transport.
"""
import importlib
import logging

from fastmcp import FastMCP

from services.exchange import ToolExchange
from services.registry import get_registered_tools

logger = logging.getLogger("scene-designer-mcp")

TOOL_MODULES = (
    "services.tools.request_scaffold",
    "services.tools.submit_script",
    "services.tools.compose_scene",
)

_exchange: ToolExchange | None = None


def get_exchange() -> ToolExchange:
    global _exchange
    if _exchange is None:
        _exchange = ToolExchange()
    return _exchange


def set_exchange(exchange: ToolExchange | None) -> None:
    """Replace the shared exchange (tests, embedding hosts)."""
    global _exchange
    _exchange = exchange


def register_all_tools(mcp: FastMCP) -> list[str]:
    """Import every tool module and register its tools with `mcp`."""
    for module in TOOL_MODULES:
        importlib.import_module(module)

    registered = []
    for tool in get_registered_tools():
        mcp.tool(
            name=tool["name"],
            description=tool["description"],
            **tool["kwargs"],
        )(tool["func"])
        registered.append(tool["name"])
    logger.info("Registered %d tool(s): %s", len(registered), ", ".join(registered))
    return registered
