"""
Middleware for normalizing tool argument names.

Agents send camelCase (`projectPath`), snake_case (`project_path`), or the
name the first release of the tools used (`unity_project_path`). This
middleware rewrites them to the canonical snake_case names before FastMCP
validates the call, and the tool exchange applies the same normalization to
calls that arrive without going through FastMCP.
"""
import logging
import re

from fastmcp.server.middleware import Middleware, MiddlewareContext

logger = logging.getLogger("scene-designer-mcp")

# Legacy argument name -> canonical name
ARGUMENT_ALIASES: dict[str, str] = {
    "unity_project_path": "project_path",
}


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case, handling edge cases.

    Examples:
        projectPath -> project_path
        HTMLParser -> html_parser
        filter2D -> filter2_d
        already_snake -> already_snake
    """
    # Handle consecutive capitals (e.g., "HTMLParser" -> "html_parser")
    s1 = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    # Handle standard camelCase (e.g., "projectPath" -> "project_path")
    s2 = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', s1)
    return s2.lower()


def canonical_name(name: str) -> str:
    snake = camel_to_snake(name)
    return ARGUMENT_ALIASES.get(snake, snake)


def normalize_arguments(arguments: dict | None) -> dict | None:
    """Normalize argument names to their canonical snake_case form.

    When several spellings map to the same name, the one already written in
    canonical form wins; otherwise the first one seen is kept.
    """
    if arguments is None:
        return None

    normalized = {}
    explicit: set[str] = set()

    for key, value in arguments.items():
        name = canonical_name(key)

        if name in normalized:
            if key == name and name not in explicit:
                normalized[name] = value
                explicit.add(name)
            else:
                logger.debug("Skipping '%s' as '%s' already provided", key, name)
            continue

        if key == name:
            explicit.add(name)
        normalized[name] = value

    return normalized


class ParamNormalizerMiddleware(Middleware):
    """
    Middleware that normalizes argument names before validation.

    This allows MCP clients to use any of these spellings:
        - submit_script(modifiedScript=..., projectPath=...)
        - submit_script(modified_script=..., project_path=...)
        - submit_script(modified_script=..., unity_project_path=...)
    """

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        """Normalize tool call arguments before passing to the tool."""
        message = context.message
        original_args = getattr(message, "arguments", None)

        if original_args:
            normalized_args = normalize_arguments(original_args)
            if normalized_args != original_args:
                logger.debug(
                    "Normalized tool arguments: %s -> %s",
                    list(original_args.keys()),
                    list(normalized_args.keys())
                )
                try:
                    new_message = message.model_copy(update={"arguments": normalized_args})
                    context = context.copy(message=new_message)
                except Exception as e:
                    logger.warning(
                        "Failed to normalize arguments, proceeding with original: %s",
                        e
                    )

        return await call_next(context)
