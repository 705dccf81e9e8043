"""Tests for the scene-designer command line."""
import json

from click.testing import CliRunner

from cli.main import cli


def _invoke(*args, input=None):
    return CliRunner().invoke(cli, list(args), input=input, obj={})


def test_compose_text_output(tmp_path):
    result = _invoke("scene", "compose", "--project", str(tmp_path), "--grid-size", "4")

    assert result.exit_code == 0, result.output
    assert "North_Wall" in result.output
    assert "Main_Camera" in result.output


def test_compose_json_output(tmp_path):
    result = _invoke("--format", "json", "scene", "compose", "--project", str(tmp_path), "--no-walls")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["success"] is True
    assert payload["data"]["count"] == 3


def test_compose_rejects_bad_config(tmp_path):
    result = _invoke("scene", "compose", "--project", str(tmp_path), "--grid-size", "0")

    assert result.exit_code == 1
    assert "InvalidConfig" in result.output


def test_commit_writes_scene(tmp_path):
    result = _invoke("scene", "commit", "--project", str(tmp_path), "--name", "Arena", "--floor-color", "1,0,0")

    assert result.exit_code == 0, result.output
    scene = tmp_path / "Assets" / "Scenes" / "Arena.unity"
    data = json.loads(scene.read_text(encoding="utf-8"))
    floor = data["roots"][0]["children"][0]
    assert floor["color"] == [1.0, 0.0, 0.0, 1.0]


def test_commit_with_config_file(tmp_path):
    config = tmp_path / "room.json"
    config.write_text(json.dumps({"scene_name": "FromFile", "grid_size": 3}))

    result = _invoke("scene", "commit", "--project", str(tmp_path), "--config-file", str(config), "-g", "5")

    assert result.exit_code == 0, result.output
    data = json.loads((tmp_path / "Assets" / "Scenes" / "FromFile.unity").read_text(encoding="utf-8"))
    assert data["roots"][0]["children"][0]["scale"][0] == 5.0


def test_config_file_with_invalid_json(tmp_path):
    config = tmp_path / "room.json"
    config.write_text("{grid_size: 3")

    result = _invoke("scene", "compose", "--project", str(tmp_path), "--config-file", str(config))

    assert result.exit_code == 2
    assert "--config-file" in result.output
    assert "Not valid JSON" in result.output


def test_config_file_must_hold_an_object(tmp_path):
    config = tmp_path / "room.json"
    config.write_text("[1, 2, 3]")

    result = _invoke("scene", "commit", "--project", str(tmp_path), "--config-file", str(config))

    assert result.exit_code == 2
    assert "--config-file" in result.output
    assert not (tmp_path / "Assets").exists()


def test_clear_asks_first(tmp_path):
    scene = tmp_path / "Assets" / "Scenes" / "New Scene.unity"
    _invoke("scene", "commit", "--project", str(tmp_path))

    result = _invoke("scene", "clear", "--project", str(tmp_path), "--path", str(scene), input="n\n")

    assert result.exit_code == 1
    assert len(json.loads(scene.read_text(encoding="utf-8"))["roots"]) == 3


def test_clear_with_yes(tmp_path):
    scene = tmp_path / "Assets" / "Scenes" / "New Scene.unity"
    _invoke("scene", "commit", "--project", str(tmp_path))

    result = _invoke("scene", "clear", "--project", str(tmp_path), "--path", str(scene), "--yes")

    assert result.exit_code == 0, result.output
    assert json.loads(scene.read_text(encoding="utf-8"))["roots"] == []


def test_scaffold_prints_source(tmp_path):
    result = _invoke("scene", "scaffold", "--project", str(tmp_path), "a room")

    assert result.exit_code == 0
    assert "public static void CreateScene()" in result.stdout


def test_submit_and_install(tmp_path):
    script = tmp_path / "edited.cs"
    script.write_text('Debug.Log(\\"hi\\");', encoding="utf-8")

    submitted = _invoke("scene", "submit", "--project", str(tmp_path), str(script))
    installed = _invoke("scene", "install", "--project", str(tmp_path))

    assert submitted.exit_code == 0, submitted.output
    assert installed.exit_code == 0, installed.output
    editor_script = tmp_path / "Assets" / "Editor" / "SceneCreator.cs"
    assert editor_script.read_text(encoding="utf-8") == 'Debug.Log("hi");'
    assert not (tmp_path / "Assets" / "Scripts" / "SceneCreator.cs").exists()


def test_install_without_script(tmp_path):
    result = _invoke("scene", "install", "--project", str(tmp_path))

    assert result.exit_code == 1
    assert "FileSystemError" in result.output
