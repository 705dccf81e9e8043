from typing import Annotated, Any, Literal

from fastmcp import Context
from mcp.types import ToolAnnotations

from services.registry import scene_designer_tool
from services.tools import get_exchange


@scene_designer_tool(
    description=(
        "Builds a grid scene (floor, four walls, lights, player or camera) from a declarative config. "
        "Actions: compose (return the object list, no side effects), preview (rebuild the preview once), "
        "update (store a new config; rebuilds the preview when live mode is on), "
        "live_on / live_off (toggle live preview; off clears it), "
        "commit (write permanent objects and save to path, default Assets/Scenes/<scene_name>.unity), "
        "clear (DESTRUCTIVE: removes every top-level object in the working scene; requires confirm=true). "
        "Config keys: scene_name, grid_size, cell_size, include_floor, include_walls, include_lights, "
        "include_player, floor_color, wall_color, ambient_light_color, floor_template, wall_template, "
        "light_template, player_template."
    ),
    annotations=ToolAnnotations(
        title="Compose Scene",
        destructiveHint=True,
    ),
)
async def compose_scene(
    ctx: Context,
    action: Annotated[Literal[
        "compose",
        "preview",
        "update",
        "live_on",
        "live_off",
        "commit",
        "clear",
    ], "Operation to perform."] | None = None,
    project_path: Annotated[str, "Path to the Unity project folder."] | None = None,
    config: Annotated[dict[str, Any] | str,
                      "Scene config as an object or JSON string. Omit to reuse the last config."] | None = None,
    path: Annotated[str,
                    "Scene file path for commit, absolute or relative to the project. "
                    "Defaults to Assets/Scenes/<scene_name>.unity."] | None = None,
    confirm: Annotated[bool | str, "Must be true for clear."] | None = None,
) -> dict[str, Any]:
    arguments: dict[str, Any] = {"action": action, "project_path": project_path}
    if config is not None:
        arguments["config"] = config
    if path is not None:
        arguments["path"] = path
    if confirm is not None:
        arguments["confirm"] = confirm

    response = await get_exchange().dispatch("compose_scene", arguments)
    return response.to_payload()
