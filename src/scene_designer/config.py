"""Scene designer settings.

Every setting is an environment variable named SCENE_DESIGNER_*. A `.env`
file beside this module may supply them for local runs; variables already
set in the process environment take precedence over it.

    from scene_designer.config import cfg
    cfg.preview_prefix   # "PREVIEW_"
"""
from __future__ import annotations

import os
from pathlib import Path

ENV_FILE = Path(__file__).resolve().parent / ".env"


def _parse_env_line(line: str) -> tuple[str, str] | None:
    """`KEY=value`, `export KEY=value` or a quoted value; None for blanks and comments."""
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):]
    key, _, value = line.partition("=")
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip("'\"")


def load_env_file(env_file: Path = ENV_FILE) -> dict[str, str]:
    """Copy unset variables from `env_file` into os.environ. Returns what was applied."""
    if not env_file.is_file():
        return {}
    applied = {}
    for line in env_file.read_text(encoding="utf-8").splitlines():
        entry = _parse_env_line(line)
        if entry is None or entry[0] in os.environ:
            continue
        os.environ[entry[0]] = entry[1]
        applied[entry[0]] = entry[1]
    return applied


load_env_file()


_TRUTHY = {"1", "true", "yes", "on"}


class _Config:
    """Settings read from os.environ on every access, never cached."""

    # ── Logging ──────────────────────────────────────────────────────

    @property
    def log_level(self) -> str:
        return os.environ.get("SCENE_DESIGNER_LOG_LEVEL", "INFO").upper()

    # ── Scene layout ─────────────────────────────────────────────────

    @property
    def preview_prefix(self) -> str:
        """Reserved name prefix of every preview object."""
        return os.environ.get("SCENE_DESIGNER_PREVIEW_PREFIX", "PREVIEW_")

    @property
    def scene_extension(self) -> str:
        ext = os.environ.get("SCENE_DESIGNER_SCENE_EXTENSION", ".unity")
        return ext if ext.startswith(".") else f".{ext}"

    @property
    def script_filename(self) -> str:
        return os.environ.get("SCENE_DESIGNER_SCRIPT_FILENAME", "SceneCreator.cs")

    # ── Host editor execution ────────────────────────────────────────

    @property
    def unity_executable(self) -> str:
        return os.environ.get("SCENE_DESIGNER_UNITY_EXECUTABLE", "unity")

    @property
    def execution_timeout(self) -> float:
        """Seconds before a batch-mode editor run is killed."""
        val = os.environ.get("SCENE_DESIGNER_EXECUTION_TIMEOUT", "300")
        try:
            return float(val)
        except ValueError:
            return 300.0

    @property
    def execute_on_submit(self) -> bool:
        return os.environ.get("SCENE_DESIGNER_EXECUTE_ON_SUBMIT", "false").strip().lower() in _TRUTHY


cfg = _Config()
