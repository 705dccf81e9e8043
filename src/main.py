"""Scene designer MCP server entry point."""
import logging
import sys

from fastmcp import FastMCP

from scene_designer.config import cfg
from services.tools import register_all_tools
from transport.param_normalizer_middleware import ParamNormalizerMiddleware

logger = logging.getLogger("scene-designer-mcp")

SERVER_NAME = "scene-designer-mcp"
SERVER_INSTRUCTIONS = (
    "Design Unity scenes in two steps: call request_scaffold to get a boilerplate editor script, "
    "edit it to satisfy the user's request, then call submit_script with the edited source. "
    "For grid rooms (floor, walls, lights, camera) compose_scene builds and previews the "
    "scene directly from a config."
)


def configure_logging(level: str | None = None) -> None:
    # stdout carries the stdio protocol; logs must go to stderr.
    logging.basicConfig(
        level=getattr(logging, (level or cfg.log_level).upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_mcp_server() -> FastMCP:
    mcp = FastMCP(name=SERVER_NAME, instructions=SERVER_INSTRUCTIONS)
    mcp.add_middleware(ParamNormalizerMiddleware())
    register_all_tools(mcp)
    return mcp


def run_server(transport: str = "stdio") -> None:
    configure_logging()
    logger.info("Starting %s (transport=%s)", SERVER_NAME, transport)
    create_mcp_server().run(transport=transport)


def main() -> None:
    try:
        run_server()
    except KeyboardInterrupt:
        logger.info("Server stopped")


if __name__ == "__main__":
    main()
