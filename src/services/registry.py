"""Registry of MCP tools exposed by the server.

Tool modules decorate their functions with `scene_designer_tool`; the server
registers everything collected here with FastMCP at startup.
"""
from typing import Any, Callable

_tool_registry: list[dict[str, Any]] = []


def scene_designer_tool(
    name: str | None = None,
    description: str | None = None,
    **kwargs: Any,
) -> Callable:
    """Mark a function as an MCP tool. The function itself is returned unchanged."""
    def decorator(func: Callable) -> Callable:
        _tool_registry.append({
            "func": func,
            "name": name or func.__name__,
            "description": description,
            "kwargs": kwargs,
        })
        return func

    return decorator


def get_registered_tools() -> list[dict[str, Any]]:
    return list(_tool_registry)


def clear_tool_registry() -> None:
    _tool_registry.clear()
