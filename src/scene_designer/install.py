"""One-time installation of the submitted editor script.

Editor-only scripts must live under an `Editor` folder to be compiled into the
editor assembly. Submission writes to Assets/Scripts; this step moves the file
into Assets/Editor. It is run explicitly by tooling (`scene-designer install`),
never from the composition engine.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .config import cfg
from .errors import SceneFileSystemError
from .fileio import atomic_write_text

logger = logging.getLogger(__name__)

SCRIPTS_DIR = ("Assets", "Scripts")
EDITOR_DIR = ("Assets", "Editor")


def script_path(project_path: str | Path) -> Path:
    """Fixed destination of submitted scripts."""
    return Path(project_path).joinpath(*SCRIPTS_DIR, cfg.script_filename)


def editor_script_path(project_path: str | Path) -> Path:
    return Path(project_path).joinpath(*EDITOR_DIR, cfg.script_filename)


def install_editor_script(project_path: str | Path) -> Path:
    """Move the submitted script into Assets/Editor and return where it now lives.

    If there is nothing under Assets/Scripts the installed copy (if any) is
    left alone. An installed copy with different content is overwritten.

    Raises:
        SceneFileSystemError: Neither location holds the script, or the move failed.
    """
    source = script_path(project_path)
    target = editor_script_path(project_path)

    if not source.is_file():
        if target.is_file():
            logger.info("Editor script already installed at %s", target)
            return target
        raise SceneFileSystemError(f"No script to install at {source}")

    try:
        content = source.read_text(encoding="utf-8")
    except OSError as e:
        raise SceneFileSystemError(f"Could not read {source}: {e}") from e

    atomic_write_text(target, content)
    try:
        source.unlink()
        # Unity tracks assets by .meta file; a stale one would point at a missing asset.
        meta = source.with_name(source.name + ".meta")
        if meta.exists():
            meta.unlink()
    except OSError as e:
        raise SceneFileSystemError(f"Installed {target} but could not remove {source}: {e}") from e

    logger.info("Installed editor script %s -> %s", source, target)
    return target
