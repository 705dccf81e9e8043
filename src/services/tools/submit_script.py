from typing import Annotated, Any

from fastmcp import Context
from mcp.types import ToolAnnotations

from services.registry import scene_designer_tool
from services.tools import get_exchange


@scene_designer_tool(
    description=(
        "Sends the modified scaffold script back to the server. It is written to "
        "<project_path>/Assets/Scripts/SceneCreator.cs, overwriting any previous version, "
        "and the written source is returned. "
        "Remember that [InitializeOnLoadMethod] goes on a static method, not on the class."
    ),
    annotations=ToolAnnotations(
        title="Submit Scene Script",
        destructiveHint=True,
        idempotentHint=True,
    ),
)
async def submit_script(
    ctx: Context,
    modified_script: Annotated[str, "Full C# source of the modified scaffold."] | None = None,
    project_path: Annotated[str, "Path to the Unity project folder."] | None = None,
) -> dict[str, Any]:
    response = await get_exchange().dispatch(
        "submit_script",
        {"modified_script": modified_script, "project_path": project_path},
    )
    return response.to_payload()
