"""Pytest configuration for scene designer tests."""
import sys
from pathlib import Path

import pytest

# Add src directory to Python path so tests can import scene_designer, services, etc.
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep developer environment settings out of the tests."""
    for key in (
        "SCENE_DESIGNER_PREVIEW_PREFIX",
        "SCENE_DESIGNER_SCENE_EXTENSION",
        "SCENE_DESIGNER_SCRIPT_FILENAME",
        "SCENE_DESIGNER_UNITY_EXECUTABLE",
        "SCENE_DESIGNER_EXECUTION_TIMEOUT",
        "SCENE_DESIGNER_EXECUTE_ON_SUBMIT",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def engine(tmp_path):
    from scene_designer import SceneEngine
    return SceneEngine(tmp_path)


def pytest_collection_modifyitems(session, config, items):
    """Run unit tests before the tool-level integration tests."""
    integration_tests = []
    other_tests = []

    for item in items:
        if "integration" in str(item.fspath):
            integration_tests.append(item)
        else:
            other_tests.append(item)

    items[:] = other_tests + integration_tests
