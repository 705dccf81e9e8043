import pytest
from fastmcp import Client, FastMCP

import main
from services.tools import register_all_tools


def test_register_all_tools():
    mcp = FastMCP(name="test")
    names = register_all_tools(mcp)
    assert sorted(names) == ["compose_scene", "request_scaffold", "submit_script"]


@pytest.mark.asyncio
async def test_server_normalizes_camel_case_arguments(tmp_path):
    """projectPath / modifiedScript reach the tool as project_path / modified_script."""
    mcp = main.create_mcp_server()

    async with Client(mcp) as client:
        await client.call_tool(
            "submit_script",
            {"modifiedScript": "// from agent", "projectPath": str(tmp_path)},
        )

    written = tmp_path / "Assets" / "Scripts" / "SceneCreator.cs"
    assert written.read_text(encoding="utf-8") == "// from agent"


@pytest.mark.asyncio
async def test_server_accepts_legacy_project_path(tmp_path):
    mcp = main.create_mcp_server()

    async with Client(mcp) as client:
        await client.call_tool(
            "compose_scene",
            {"action": "commit", "unity_project_path": str(tmp_path), "config": {"scene_name": "Legacy"}},
        )

    assert (tmp_path / "Assets" / "Scenes" / "Legacy.unity").is_file()
