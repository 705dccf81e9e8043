"""Tests for environment-backed settings and the .env loader."""
import os

import pytest

from scene_designer.config import cfg, load_env_file

KEYS = ("SD_TEST_PLAIN", "SD_TEST_EXPORTED", "SD_TEST_QUOTED", "SD_TEST_KEPT")


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch removes whatever the loader adds.
    for key in KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_loads_unset_variables(tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local overrides\n"
        "\n"
        "SD_TEST_PLAIN=plain\n"
        "export SD_TEST_EXPORTED=exported\n"
        "SD_TEST_QUOTED = \"with spaces\"\n"
        "not a setting\n",
        encoding="utf-8",
    )

    applied = load_env_file(env_file)

    assert applied == {
        "SD_TEST_PLAIN": "plain",
        "SD_TEST_EXPORTED": "exported",
        "SD_TEST_QUOTED": "with spaces",
    }
    assert os.environ["SD_TEST_QUOTED"] == "with spaces"


def test_process_environment_wins(tmp_path, clean_env):
    clean_env.setenv("SD_TEST_KEPT", "from-shell")
    env_file = tmp_path / ".env"
    env_file.write_text("SD_TEST_KEPT=from-file\n", encoding="utf-8")

    assert load_env_file(env_file) == {}
    assert os.environ["SD_TEST_KEPT"] == "from-shell"


def test_missing_file_is_ignored(tmp_path):
    assert load_env_file(tmp_path / ".env") == {}


def test_settings_read_at_access_time(monkeypatch):
    assert cfg.preview_prefix == "PREVIEW_"
    monkeypatch.setenv("SCENE_DESIGNER_PREVIEW_PREFIX", "GHOST_")
    assert cfg.preview_prefix == "GHOST_"
