"""Scene CLI commands."""

import json
import sys
from typing import Any, Optional

import click

from cli.utils.connection import handle_errors, run_command
from cli.utils.output import format_output, print_info, print_success
from scene_designer.install import install_editor_script


def _color(value: Optional[str]) -> Optional[list[float]]:
    if value is None:
        return None
    try:
        return [float(part) for part in value.split(",")]
    except ValueError:
        raise click.BadParameter(f"Expected comma-separated floats, got '{value}'")


def config_options(func):
    """Options shared by every command that takes a scene config."""
    options = [
        click.option("--config-file", type=click.File("r"), default=None,
                     help="JSON scene config; flags below override its values."),
        click.option("--name", "scene_name", default=None, help="Scene name (also the default file name)."),
        click.option("--grid-size", "-g", type=int, default=None, help="Cells per side."),
        click.option("--cell-size", "-c", type=float, default=None, help="Cell edge length in world units."),
        click.option("--floor/--no-floor", "include_floor", default=None),
        click.option("--walls/--no-walls", "include_walls", default=None),
        click.option("--lights/--no-lights", "include_lights", default=None),
        click.option("--player/--no-player", "include_player", default=None),
        click.option("--floor-color", default=None, help="r,g,b[,a] in 0..1."),
        click.option("--wall-color", default=None, help="r,g,b[,a] in 0..1."),
        click.option("--floor-template", default=None),
        click.option("--wall-template", default=None),
        click.option("--light-template", default=None),
        click.option("--player-template", default=None),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_config(config_file, **values: Any) -> dict[str, Any]:
    config: dict[str, Any] = {}
    if config_file:
        try:
            config = json.load(config_file)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Not valid JSON: {e}", param_hint="--config-file")
        if not isinstance(config, dict):
            raise click.BadParameter(
                f"Expected a JSON object, got {type(config).__name__}", param_hint="--config-file")
    for key in ("floor_color", "wall_color"):
        values[key] = _color(values.get(key))
    config.update({k: v for k, v in values.items() if v is not None})
    return config


def _emit(result: dict[str, Any], ctx: click.Context) -> None:
    click.echo(format_output(result, ctx.obj.get("format", "text")))
    if result.get("isError"):
        sys.exit(1)


@click.group()
def scene():
    """Scene operations - compose, commit, clear, scaffold and submit scripts."""
    pass


@scene.command("compose")
@click.option("--project", "-p", default=".", help="Unity project folder.")
@config_options
@click.pass_context
def compose(ctx: click.Context, project: str, config_file, **values):
    """Print the objects a config produces, without touching any file.

    \b
    Examples:
        scene-designer scene compose --grid-size 10 --cell-size 1
        scene-designer scene compose --light-template Assets/Prefabs/Lamp.prefab --format json
    """
    params = {
        "action": "compose",
        "project_path": project,
        "config": _build_config(config_file, **values),
    }
    _emit(run_command("compose_scene", params), ctx)


@scene.command("commit")
@click.option("--project", "-p", default=".", help="Unity project folder.")
@click.option("--path", default=None, help="Scene file (default Assets/Scenes/<name>.unity).")
@config_options
@click.pass_context
def commit(ctx: click.Context, project: str, path: Optional[str], config_file, **values):
    """Compose a scene and save it.

    \b
    Examples:
        scene-designer scene commit --project ~/MyGame --name Arena --grid-size 20
        scene-designer scene commit --project ~/MyGame --path Assets/Levels/Arena.unity
    """
    params: dict[str, Any] = {
        "action": "commit",
        "project_path": project,
        "config": _build_config(config_file, **values),
    }
    if path:
        params["path"] = path
    result = run_command("compose_scene", params)
    _emit(result, ctx)
    print_success(f"Saved {result['data']['object_count']} object(s) to {result['data']['path']}")


@scene.command("clear")
@click.option("--project", "-p", default=".", help="Unity project folder.")
@click.option("--path", required=True, help="Scene file to overwrite with an empty scene.")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def clear(ctx: click.Context, project: str, path: str, yes: bool):
    """Overwrite a scene file with an empty scene. Cannot be undone."""
    if not yes:
        click.confirm(f"Remove every object stored in {path}?", abort=True)
    params = {"action": "clear", "project_path": project, "path": path, "confirm": True}
    _emit(run_command("compose_scene", params), ctx)


@scene.command("scaffold")
@click.option("--project", "-p", default=".", help="Unity project folder.")
@click.argument("query", required=False, default="")
@click.pass_context
def scaffold(ctx: click.Context, project: str, query: str):
    """Print the boilerplate editor script."""
    result = run_command("request_scaffold", {"query": query, "project_path": project})
    if result.get("isError") or ctx.obj.get("format") == "json":
        _emit(result, ctx)
        return
    click.echo(result["data"]["scaffold_source"], nl=False)


@scene.command("submit")
@click.option("--project", "-p", required=True, help="Unity project folder.")
@click.argument("script", type=click.File("r"))
@click.pass_context
def submit(ctx: click.Context, project: str, script):
    """Write an edited script to Assets/Scripts (use '-' for stdin)."""
    result = run_command("submit_script", {"modified_script": script.read(), "project_path": project})
    if result.get("isError"):
        _emit(result, ctx)
    print_success(f"Wrote {result['data']['path']}")


@scene.command("install")
@click.option("--project", "-p", required=True, help="Unity project folder.")
@handle_errors
def install(project: str):
    """Move the submitted script into Assets/Editor.

    Run once after submitting; editor scripts must live under an Editor folder.
    """
    target = install_editor_script(project)
    print_info(f"Editor script at {target}")
