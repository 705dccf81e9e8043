"""Pydantic data models for scene composition."""
from __future__ import annotations

import json
import math
from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import InvalidConfigError

Vector3 = tuple[float, float, float]
Quaternion = tuple[float, float, float, float]  # (x, y, z, w)
Color = tuple[float, float, float, float]  # (r, g, b, a), values in [0, 1]

IDENTITY_ROTATION: Quaternion = (0.0, 0.0, 0.0, 1.0)
UNIT_SCALE: Vector3 = (1.0, 1.0, 1.0)

GRAY: Color = (0.5, 0.5, 0.5, 1.0)
WHITE: Color = (1.0, 1.0, 1.0, 1.0)
YELLOW: Color = (1.0, 0.92, 0.016, 1.0)
DEFAULT_AMBIENT: Color = (0.3, 0.3, 0.3, 1.0)

# Characters no host filesystem accepts inside a single path component.
_RESERVED_NAME_CHARS = frozenset('/\\:*?"<>|')


class ObjectKind(str, Enum):
    """Closed set of entity kinds the composition engine can place."""
    FLOOR = "floor"
    WALL = "wall"
    LIGHT = "light"
    PLAYER = "player"
    CAMERA = "camera"


def finite_width(grid_size: int, cell_size: float) -> bool:
    try:
        return math.isfinite(grid_size * cell_size)
    except OverflowError:
        return False


def _coerce_color(value: Any) -> Any:
    """Accept RGB or RGBA sequences; RGB gets an opaque alpha."""
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return (*value, 1.0)
    return value


class SceneConfig(BaseModel):
    """Declarative description of the scene to build. Immutable."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    scene_name: str = "New Scene"
    grid_size: int = 10
    cell_size: float = 1.0

    include_floor: bool = True
    include_walls: bool = True
    include_lights: bool = True
    include_player: bool = True

    floor_color: Color = GRAY
    wall_color: Color = WHITE
    ambient_light_color: Color = DEFAULT_AMBIENT

    # Opaque template handles (e.g. prefab asset paths) replacing default primitives.
    floor_template: str | None = None
    wall_template: str | None = None
    light_template: str | None = None
    player_template: str | None = None

    @field_validator("scene_name")
    @classmethod
    def _valid_path_component(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("scene_name must not be empty")
        if value in (".", ".."):
            raise ValueError("scene_name must not be '.' or '..'")
        bad = sorted({ch for ch in value if ch in _RESERVED_NAME_CHARS or ord(ch) < 32})
        if bad:
            raise ValueError(f"scene_name contains characters not allowed in a file name: {bad!r}")
        return value

    @field_validator("grid_size")
    @classmethod
    def _positive_grid(cls, value: int) -> int:
        if value < 1:
            raise ValueError("grid_size must be >= 1")
        return value

    @field_validator("cell_size")
    @classmethod
    def _positive_cell(cls, value: float) -> float:
        if not math.isfinite(value) or value <= 0:
            raise ValueError("cell_size must be a finite number > 0")
        return value

    @model_validator(mode="after")
    def _finite_extent(self) -> "SceneConfig":
        if not finite_width(self.grid_size, self.cell_size):
            raise ValueError("grid_size * cell_size must be a finite width")
        return self

    @field_validator("floor_color", "wall_color", "ambient_light_color", mode="before")
    @classmethod
    def _rgba(cls, value: Any) -> Any:
        return _coerce_color(value)

    @property
    def total_width(self) -> float:
        """World extent along X and Z; every derived geometry uses this."""
        return self.grid_size * self.cell_size

    @property
    def player_added(self) -> bool:
        return self.include_player and self.player_template is not None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | str | None) -> "SceneConfig":
        """Build a config from a dict or JSON string, reporting InvalidConfigError.

        None yields the default configuration.
        """
        if payload is None:
            return cls()
        if isinstance(payload, str):
            try:
                payload = json.loads(payload) if payload.strip() else {}
            except json.JSONDecodeError as e:
                raise InvalidConfigError(f"Scene config is not valid JSON: {e}") from e
        if not isinstance(payload, Mapping):
            raise InvalidConfigError(
                f"Scene config must be an object, got {type(payload).__name__}")
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidConfigError(f"Invalid scene config: {problems}") from e


class SceneObjectDescriptor(BaseModel):
    """Inert placement instruction for one scene entity.

    Produced only by the composition engine and never mutated; to change
    geometry, compose again from a new SceneConfig.
    """

    model_config = ConfigDict(frozen=True)

    kind: ObjectKind
    name: str
    position: Vector3
    scale: Vector3 = UNIT_SCALE
    rotation: Quaternion = IDENTITY_ROTATION
    color: Color | None = None
    template_ref: str | None = None
    parent_ref: str | None = None


class CommitResult(BaseModel):
    """Outcome of committing descriptors to a path-addressed store."""
    path: str
    object_count: int = Field(ge=0)
