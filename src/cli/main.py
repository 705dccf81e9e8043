"""Command line entry point: `scene-designer`."""

import click

from cli.commands.scene import scene
from main import configure_logging, run_server


@click.group()
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format."
)
@click.option("--log-level", default=None, help="Logging level (default from SCENE_DESIGNER_LOG_LEVEL).")
@click.pass_context
def cli(ctx: click.Context, fmt: str, log_level: str | None):
    """Scene designer - compose grid scenes and exchange editor scripts with agents."""
    ctx.ensure_object(dict)
    ctx.obj["format"] = fmt
    configure_logging(log_level)


@cli.command("serve")
@click.option(
    "--transport", "-t",
    type=click.Choice(["stdio", "http"]),
    default="stdio",
    help="MCP transport."
)
def serve(transport: str):
    """Run the MCP server."""
    run_server(transport)


cli.add_command(scene)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
