"""Runs tool calls in-process for the CLI."""
import asyncio
import functools
import sys
from typing import Any, Callable

from scene_designer.errors import SceneDesignerError
from services.exchange import ToolExchange

from .output import print_error


def run_command(tool: str, params: dict[str, Any], exchange: ToolExchange | None = None) -> dict[str, Any]:
    """Dispatch one tool call and return its payload."""
    exchange = exchange or ToolExchange(execute_on_submit=False)
    response = asyncio.run(exchange.dispatch(tool, params))
    return response.to_payload()


def handle_errors(func: Callable) -> Callable:
    """Turn engine errors raised directly by a command into a clean exit."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SceneDesignerError as e:
            print_error(f"{e.kind}: {e}")
            sys.exit(1)

    return wrapper
