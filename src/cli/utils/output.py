"""Output helpers for the CLI."""
import json
from typing import Any

import click


def format_output(result: dict[str, Any], fmt: str = "text") -> str:
    """Render a tool payload as JSON or as its human-readable message."""
    if fmt == "json":
        return json.dumps(result, indent=2)
    message = result.get("message", "")
    if result.get("isError"):
        return f"{result.get('error', 'Error')}: {message}"
    return str(message)


def print_success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green", err=True)


def print_error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)


def print_info(message: str) -> None:
    click.secho(message, fg="cyan", err=True)
