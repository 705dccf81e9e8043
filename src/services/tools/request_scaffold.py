from typing import Annotated, Any

from fastmcp import Context
from mcp.types import ToolAnnotations

from services.registry import scene_designer_tool
from services.tools import get_exchange


@scene_designer_tool(
    description=(
        "Returns a boilerplate Unity editor script (C#) for designing a scene. "
        "Modify it to build what the user asked for, then send it back with submit_script. "
        "The query is not parsed; it is accepted so the request reads naturally. "
        "The entry point is SceneCreator.CreateScene, run automatically by the "
        "[InitializeOnLoadMethod] bootstrap once the editor compiles the script. "
        "Keep the using directives of the scaffold. "
        "Ask the user for the Unity project path before calling this tool."
    ),
    annotations=ToolAnnotations(
        title="Request Scene Scaffold",
        readOnlyHint=True,
    ),
)
async def request_scaffold(
    ctx: Context,
    query: Annotated[str, "What the user wants in the scene."] | None = None,
    project_path: Annotated[str,
                            "Path to the Unity project folder, e.g. C:/Users/me/Documents/MyGame."] | None = None,
) -> dict[str, Any]:
    response = await get_exchange().dispatch(
        "request_scaffold",
        {"query": query, "project_path": project_path},
    )
    return response.to_payload()
