"""Commit descriptors to a path-addressed scene store, and hard-reset the scene."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .composer import ENVIRONMENT_GROUP, LIGHTS_GROUP, compose
from .config import cfg
from .host import SceneHost, materialize
from .models import Color, CommitResult, ObjectKind, SceneConfig, SceneObjectDescriptor
from .preview import PreviewReconciler

logger = logging.getLogger(__name__)

SCENES_DIR = ("Assets", "Scenes")

# Containers are created in this order, only when something lands in them.
_GROUPS = (ENVIRONMENT_GROUP, LIGHTS_GROUP)
_UNSET = object()


class PersistenceWriter:
    """Materializes descriptors as permanent objects and saves the scene.

    Committing is idempotent by path: objects from this writer's previous
    commit are removed from the working scene before the new ones are
    created, and the store at the path is overwritten, never appended to.
    """

    def __init__(self, host: SceneHost, reconciler: PreviewReconciler, project_path: str | Path):
        self.host = host
        self.reconciler = reconciler
        self.project_path = Path(project_path)
        self._committed: list[int] = []
        # Ambient light in effect before this writer first changed it; _UNSET if untouched.
        self._ambient_before: Color | None | object = _UNSET

    def default_scene_path(self, scene_name: str) -> Path:
        return self.project_path.joinpath(*SCENES_DIR, f"{scene_name}{cfg.scene_extension}")

    def resolve_path(self, path: str | Path | None, scene_name: str) -> Path:
        """Empty path -> Assets/Scenes/<scene_name><ext>; relative -> under the project."""
        if path is None or str(path).strip() == "":
            return self.default_scene_path(scene_name)
        resolved = Path(path)
        if not resolved.is_absolute():
            resolved = self.project_path / resolved
        return resolved

    def discard_committed(self) -> int:
        """Remove objects created by the previous commit from the working scene.

        Ambient light changed by that commit is restored as well.
        """
        destroyed = 0
        for handle in self._committed:
            destroyed += self.host.destroy(handle)
        self._committed = []
        if self._ambient_before is not _UNSET:
            self.host.set_ambient_light(self._ambient_before)
            self._ambient_before = _UNSET
        return destroyed

    def commit(
        self,
        descriptors: Sequence[SceneObjectDescriptor],
        path: str | Path | None = "",
        *,
        scene_name: str,
        ambient_color: Color | None = None,
    ) -> CommitResult:
        target = self.resolve_path(path, scene_name)

        # Preview objects must never reach the store.
        self.reconciler.clear_preview()
        self.discard_committed()

        containers: dict[str, int] = {}
        for group in _GROUPS:
            if any(d.parent_ref == group for d in descriptors):
                containers[group] = self.host.create_container(group)
                self._committed.append(containers[group])

        for descriptor in descriptors:
            parent = containers.get(descriptor.parent_ref) if descriptor.parent_ref else None
            handle = materialize(self.host, descriptor, name=descriptor.name, parent=parent, preview=False)
            if parent is None:
                self._committed.append(handle)

        if ambient_color is not None and any(d.kind is ObjectKind.LIGHT for d in descriptors):
            self._ambient_before = self.host.get_ambient_light()
            self.host.set_ambient_light(ambient_color)

        written = self.host.save(target)
        logger.info("Committed %d object(s) to %s", len(descriptors), written)
        return CommitResult(path=str(written), object_count=len(descriptors))

    def compose_and_commit(self, config: SceneConfig, path: str | Path | None = "") -> CommitResult:
        """Compose against the scene as it will be once the previous commit is gone."""
        self.reconciler.clear_preview()
        self.discard_committed()
        descriptors = compose(config, scene_has_camera=self.host.has_camera())
        return self.commit(
            descriptors,
            path,
            scene_name=config.scene_name,
            ambient_color=config.ambient_light_color,
        )

    def clear(self, path: str | Path | None = None) -> int:
        """Destroy every top-level object in the working scene, whatever created it.

        With a path, the emptied scene is also saved there. Destructive and not
        recoverable; callers must ask for it explicitly. Returns the number of
        objects destroyed.
        """
        destroyed = self.reconciler.clear_preview()
        destroyed += self.discard_committed()
        for handle in self.host.root_objects():
            destroyed += self.host.destroy(handle)
        logger.warning("Cleared working scene (%d object(s) destroyed)", destroyed)
        if path is not None and str(path).strip():
            self.host.save(self.resolve_path(path, ""))
        return destroyed
