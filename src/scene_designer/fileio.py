"""All-or-nothing file writes."""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .errors import SceneFileSystemError

logger = logging.getLogger(__name__)


def atomic_write_text(path: str | os.PathLike[str], text: str) -> Path:
    """Write `text` to `path`, creating parent directories as needed.

    The content goes to a temporary file in the destination directory and is
    moved over the target with os.replace, so readers see either the old file
    or the complete new one.

    Raises:
        SceneFileSystemError: The directory could not be created or the write failed.
    """
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SceneFileSystemError(f"Could not create directory {target.parent}: {e}") from e

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=target.parent,
            prefix=f".{target.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            except OSError:
                logger.debug("Failed to remove temporary file %s", tmp_name, exc_info=True)
        raise SceneFileSystemError(f"Could not write {target}: {e}") from e

    logger.debug("Wrote %d characters to %s", len(text), target)
    return target
