"""Boundary to the host editor's scene graph.

The engine never touches editor objects directly; it goes through a
`SceneHost`, which hands out integer handles. `InMemorySceneHost` keeps the
graph in process and persists it as JSON to a path-addressed store. The file
content is opaque to callers; only the path matters to them.
"""
from __future__ import annotations

import itertools
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import MissingTemplateError, SceneFileSystemError
from .fileio import atomic_write_text
from .models import (
    IDENTITY_ROTATION,
    UNIT_SCALE,
    Color,
    ObjectKind,
    Quaternion,
    SceneObjectDescriptor,
    Vector3,
)

logger = logging.getLogger(__name__)

STORE_FORMAT_VERSION = 1

# Built-in shape used when a descriptor has no template, or its template is missing.
DEFAULT_PRIMITIVES: dict[ObjectKind, str] = {
    ObjectKind.FLOOR: "cube",
    ObjectKind.WALL: "cube",
    ObjectKind.LIGHT: "directional_light",
    ObjectKind.PLAYER: "capsule",
    ObjectKind.CAMERA: "camera",
}


def default_primitive(kind: ObjectKind) -> str:
    return DEFAULT_PRIMITIVES[kind]


@dataclass
class SceneObject:
    """One live object in the host scene graph."""
    handle: int
    name: str
    kind: ObjectKind | None = None  # None for containers
    position: Vector3 = (0.0, 0.0, 0.0)
    scale: Vector3 = UNIT_SCALE
    rotation: Quaternion = IDENTITY_ROTATION
    color: Color | None = None
    primitive: str | None = None
    template_ref: str | None = None
    parent: int | None = None
    preview: bool = False
    children: list[int] = field(default_factory=list)

    def to_dict(self, objects: dict[int, "SceneObject"]) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value if self.kind else None,
            "position": list(self.position),
            "scale": list(self.scale),
            "rotation": list(self.rotation),
            "color": list(self.color) if self.color else None,
            "primitive": self.primitive,
            "template_ref": self.template_ref,
            "children": [objects[c].to_dict(objects) for c in self.children if c in objects],
        }


class SceneHost(ABC):
    """Operations the engine needs from a host editor."""

    @abstractmethod
    def create_container(self, name: str, *, parent: int | None = None, preview: bool = False) -> int:
        """Create an empty grouping object and return its handle."""

    @abstractmethod
    def instantiate_template(
        self, descriptor: SceneObjectDescriptor, *, name: str, parent: int | None, preview: bool
    ) -> int:
        """Instantiate descriptor.template_ref. Raises MissingTemplateError if unresolvable."""

    @abstractmethod
    def create_primitive(
        self, descriptor: SceneObjectDescriptor, *, name: str, parent: int | None, preview: bool
    ) -> int:
        """Create the default primitive for descriptor.kind."""

    @abstractmethod
    def destroy(self, handle: int) -> int:
        """Destroy an object and its descendants. Returns how many objects went away."""

    @abstractmethod
    def exists(self, handle: int) -> bool: ...

    @abstractmethod
    def get(self, handle: int) -> SceneObject: ...

    @abstractmethod
    def find_by_name_prefix(self, prefix: str) -> list[int]: ...

    @abstractmethod
    def root_objects(self) -> list[int]: ...

    @abstractmethod
    def has_camera(self, *, include_preview: bool = False) -> bool: ...

    @abstractmethod
    def get_ambient_light(self) -> Color | None: ...

    @abstractmethod
    def set_ambient_light(self, color: Color | None) -> None:
        """None restores the host default."""

    @abstractmethod
    def save(self, path: str | Path) -> Path:
        """Persist every non-preview object to `path`, overwriting it."""


def materialize(
    host: SceneHost,
    descriptor: SceneObjectDescriptor,
    *,
    name: str,
    parent: int | None,
    preview: bool,
) -> int:
    """Instantiate one descriptor, degrading to the kind's primitive if its template is missing."""
    if descriptor.template_ref is not None:
        try:
            return host.instantiate_template(descriptor, name=name, parent=parent, preview=preview)
        except MissingTemplateError as e:
            logger.warning("%s; using default %s for %s", e, default_primitive(descriptor.kind), name)
    return host.create_primitive(descriptor, name=name, parent=parent, preview=preview)


class InMemorySceneHost(SceneHost):
    """Process-local scene graph.

    Templates must be registered before descriptors can reference them;
    anything else is reported as missing.
    """

    def __init__(self, templates: list[str] | None = None):
        self._objects: dict[int, SceneObject] = {}
        self._roots: list[int] = []
        self._handles = itertools.count(1)
        self._templates: set[str] = set(templates or ())
        self.ambient_light: Color | None = None

    # ── Templates ────────────────────────────────────────────────────

    def register_template(self, template_ref: str) -> None:
        self._templates.add(template_ref)

    def unregister_template(self, template_ref: str) -> None:
        self._templates.discard(template_ref)

    # ── Creation ─────────────────────────────────────────────────────

    def _add(self, obj: SceneObject) -> int:
        if obj.parent is not None:
            parent = self._objects.get(obj.parent)
            if parent is None:
                raise KeyError(f"Parent handle {obj.parent} does not exist")
            # Children of preview objects are never persisted either.
            obj.preview = obj.preview or parent.preview
            parent.children.append(obj.handle)
        else:
            self._roots.append(obj.handle)
        self._objects[obj.handle] = obj
        return obj.handle

    def _from_descriptor(
        self, descriptor: SceneObjectDescriptor, name: str, parent: int | None, preview: bool
    ) -> SceneObject:
        return SceneObject(
            handle=next(self._handles),
            name=name,
            kind=descriptor.kind,
            position=descriptor.position,
            scale=descriptor.scale,
            rotation=descriptor.rotation,
            color=descriptor.color,
            parent=parent,
            preview=preview,
        )

    def create_container(self, name: str, *, parent: int | None = None, preview: bool = False) -> int:
        return self._add(SceneObject(handle=next(self._handles), name=name, parent=parent, preview=preview))

    def instantiate_template(
        self, descriptor: SceneObjectDescriptor, *, name: str, parent: int | None, preview: bool
    ) -> int:
        if descriptor.template_ref is None or descriptor.template_ref not in self._templates:
            raise MissingTemplateError(str(descriptor.template_ref))
        obj = self._from_descriptor(descriptor, name, parent, preview)
        obj.template_ref = descriptor.template_ref
        return self._add(obj)

    def create_primitive(
        self, descriptor: SceneObjectDescriptor, *, name: str, parent: int | None, preview: bool
    ) -> int:
        obj = self._from_descriptor(descriptor, name, parent, preview)
        obj.primitive = default_primitive(descriptor.kind)
        return self._add(obj)

    # ── Queries ──────────────────────────────────────────────────────

    def exists(self, handle: int) -> bool:
        return handle in self._objects

    def get(self, handle: int) -> SceneObject:
        return self._objects[handle]

    def find_by_name_prefix(self, prefix: str) -> list[int]:
        return [h for h, obj in self._objects.items() if obj.name.startswith(prefix)]

    def root_objects(self) -> list[int]:
        return list(self._roots)

    def all_objects(self) -> list[SceneObject]:
        return list(self._objects.values())

    def preview_objects(self) -> list[SceneObject]:
        return [obj for obj in self._objects.values() if obj.preview]

    def has_camera(self, *, include_preview: bool = False) -> bool:
        return any(
            obj.kind is ObjectKind.CAMERA and (include_preview or not obj.preview)
            for obj in self._objects.values()
        )

    def __len__(self) -> int:
        return len(self._objects)

    # ── Mutation ─────────────────────────────────────────────────────

    def destroy(self, handle: int) -> int:
        obj = self._objects.get(handle)
        if obj is None:
            return 0
        count = 0
        for child in list(obj.children):
            count += self.destroy(child)
        if obj.parent is not None and obj.parent in self._objects:
            self._objects[obj.parent].children.remove(handle)
        elif handle in self._roots:
            self._roots.remove(handle)
        del self._objects[handle]
        return count + 1

    def get_ambient_light(self) -> Color | None:
        return self.ambient_light

    def set_ambient_light(self, color: Color | None) -> None:
        self.ambient_light = color

    # ── Persistence ──────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Serializable view of the non-preview graph."""
        persistent = {h: o for h, o in self._objects.items() if not o.preview}
        return {
            "version": STORE_FORMAT_VERSION,
            "ambient_light": list(self.ambient_light) if self.ambient_light else None,
            "roots": [persistent[h].to_dict(persistent) for h in self._roots if h in persistent],
        }

    def save(self, path: str | Path) -> Path:
        text = json.dumps(self.snapshot(), indent=2)
        written = atomic_write_text(path, text + "\n")
        logger.info("Saved scene to %s", written)
        return written

    def load(self, path: str | Path) -> None:
        """Replace the working graph with the one stored at `path`."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SceneFileSystemError(f"Could not read {path}: {e}") from e
        for handle in list(self._roots):
            self.destroy(handle)
        ambient = data.get("ambient_light")
        self.ambient_light = tuple(ambient) if ambient else None
        for node in data.get("roots", []):
            self._load_node(node, parent=None)

    def _load_node(self, node: dict[str, Any], parent: int | None) -> None:
        kind = node.get("kind")
        color = node.get("color")
        obj = SceneObject(
            handle=next(self._handles),
            name=node["name"],
            kind=ObjectKind(kind) if kind else None,
            position=tuple(node.get("position", (0.0, 0.0, 0.0))),
            scale=tuple(node.get("scale", UNIT_SCALE)),
            rotation=tuple(node.get("rotation", IDENTITY_ROTATION)),
            color=tuple(color) if color else None,
            primitive=node.get("primitive"),
            template_ref=node.get("template_ref"),
            parent=parent,
        )
        handle = self._add(obj)
        for child in node.get("children", []):
            self._load_node(child, parent=handle)
