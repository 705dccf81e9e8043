"""Tests for moving the submitted script into the Editor folder."""
import pytest

from scene_designer import SceneFileSystemError
from scene_designer.install import editor_script_path, install_editor_script, script_path


def _submit(project, content="public class SceneCreator {}"):
    source = script_path(project)
    source.parent.mkdir(parents=True, exist_ok=True)
    source.write_text(content, encoding="utf-8")
    return source


def test_paths(tmp_path):
    assert script_path(tmp_path) == tmp_path / "Assets" / "Scripts" / "SceneCreator.cs"
    assert editor_script_path(tmp_path) == tmp_path / "Assets" / "Editor" / "SceneCreator.cs"


def test_script_filename_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("SCENE_DESIGNER_SCRIPT_FILENAME", "Builder.cs")
    assert script_path(tmp_path).name == "Builder.cs"


def test_install_moves_script(tmp_path):
    source = _submit(tmp_path, "// v1")

    target = install_editor_script(tmp_path)

    assert target == editor_script_path(tmp_path)
    assert target.read_text(encoding="utf-8") == "// v1"
    assert not source.exists()


def test_install_removes_stale_meta(tmp_path):
    source = _submit(tmp_path)
    meta = source.with_name("SceneCreator.cs.meta")
    meta.write_text("guid: 123")

    install_editor_script(tmp_path)

    assert not meta.exists()


def test_install_replaces_older_copy(tmp_path):
    _submit(tmp_path, "// v1")
    install_editor_script(tmp_path)
    _submit(tmp_path, "// v2")

    target = install_editor_script(tmp_path)

    assert target.read_text(encoding="utf-8") == "// v2"


def test_already_installed(tmp_path):
    _submit(tmp_path)
    first = install_editor_script(tmp_path)
    assert install_editor_script(tmp_path) == first


def test_nothing_to_install(tmp_path):
    with pytest.raises(SceneFileSystemError, match="No script to install"):
        install_editor_script(tmp_path)
