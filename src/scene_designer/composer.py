"""Composition engine: SceneConfig -> ordered scene object descriptors.

`compose` is a pure function. It reads only its arguments, uses no
randomness, and evaluates every float in a fixed order, so the same config
always yields the same list, element for element and bit for bit.

Layout (Y-up, world origin at the floor center, top face of the floor at y=0):

    Floor   one slab, (W, FLOOR_THICKNESS, W), sunk by half its thickness
    Walls   North (+Z), South (-Z), East (+X), West (-X), WALL_HEIGHT tall
    Lights  one directional light, or 4 template lights on a ring
    Player  one template instance above the floor center
    Camera  only when the scene has none and no player was placed
"""
from __future__ import annotations

import math

from .errors import InvalidConfigError
from .geometry import euler_to_quat, look_at
from .models import (
    ObjectKind,
    SceneConfig,
    SceneObjectDescriptor,
    Vector3,
    YELLOW,
    finite_width,
)

FLOOR_THICKNESS = 0.1
WALL_HEIGHT = 2.0
WALL_THICKNESS = 0.1

LIGHT_RING_RADIUS_FRACTION = 0.3
LIGHT_RING_HEIGHT = 3.0
LIGHT_RING_COUNT = 4
DIRECTIONAL_LIGHT_POSITION: Vector3 = (2.0, 4.0, -2.0)
DIRECTIONAL_LIGHT_EULER = (50.0, -30.0, 0.0)

PLAYER_POSITION: Vector3 = (0.0, 1.0, 0.0)

CAMERA_HEIGHT = 2.0
CAMERA_DISTANCE_FRACTION = 0.4
CAMERA_FOCAL_POINT: Vector3 = (0.0, 1.0, 0.0)

ENVIRONMENT_GROUP = "Environment"
LIGHTS_GROUP = "Lights"

# (name, direction along X, direction along Z); order is part of the output contract
_WALLS = (
    ("North_Wall", 0.0, 1.0),
    ("South_Wall", 0.0, -1.0),
    ("East_Wall", 1.0, 0.0),
    ("West_Wall", -1.0, 0.0),
)


def _validate(config: SceneConfig) -> None:
    # SceneConfig validates on construction, but model_construct() skips that.
    if config.grid_size <= 0:
        raise InvalidConfigError(f"grid_size must be >= 1, got {config.grid_size}")
    if not config.cell_size > 0:
        raise InvalidConfigError(f"cell_size must be > 0, got {config.cell_size}")
    if not finite_width(config.grid_size, config.cell_size):
        raise InvalidConfigError("grid_size * cell_size must be a finite width")


def _floor(config: SceneConfig, width: float) -> SceneObjectDescriptor:
    return SceneObjectDescriptor(
        kind=ObjectKind.FLOOR,
        name="Floor",
        position=(0.0, -FLOOR_THICKNESS / 2, 0.0),
        scale=(width, FLOOR_THICKNESS, width),
        color=config.floor_color,
        template_ref=config.floor_template,
        parent_ref=ENVIRONMENT_GROUP,
    )


def _walls(config: SceneConfig, width: float) -> list[SceneObjectDescriptor]:
    half = width / 2
    walls = []
    for name, dx, dz in _WALLS:
        # North/South span X; East/West are the same slab turned to span Z.
        spans_x = dz != 0.0
        scale = (width, WALL_HEIGHT, WALL_THICKNESS) if spans_x else (WALL_THICKNESS, WALL_HEIGHT, width)
        walls.append(SceneObjectDescriptor(
            kind=ObjectKind.WALL,
            name=name,
            position=(dx * half, WALL_HEIGHT / 2, dz * half),
            scale=scale,
            color=config.wall_color,
            template_ref=config.wall_template,
            parent_ref=ENVIRONMENT_GROUP,
        ))
    return walls


def _lights(config: SceneConfig, width: float) -> list[SceneObjectDescriptor]:
    if config.light_template is None:
        return [SceneObjectDescriptor(
            kind=ObjectKind.LIGHT,
            name="Main_Directional_Light",
            position=DIRECTIONAL_LIGHT_POSITION,
            rotation=euler_to_quat(*DIRECTIONAL_LIGHT_EULER),
            color=YELLOW,
            parent_ref=LIGHTS_GROUP,
        )]

    radius = width * LIGHT_RING_RADIUS_FRACTION
    lights = []
    for i in range(LIGHT_RING_COUNT):
        angle = math.radians(i * 90.0)
        lights.append(SceneObjectDescriptor(
            kind=ObjectKind.LIGHT,
            name=f"Light_{i}",
            position=(math.cos(angle) * radius, LIGHT_RING_HEIGHT, math.sin(angle) * radius),
            template_ref=config.light_template,
            parent_ref=LIGHTS_GROUP,
        ))
    return lights


def _player(config: SceneConfig) -> SceneObjectDescriptor:
    return SceneObjectDescriptor(
        kind=ObjectKind.PLAYER,
        name="Player",
        position=PLAYER_POSITION,
        template_ref=config.player_template,
    )


def _camera(width: float) -> SceneObjectDescriptor:
    eye = (0.0, CAMERA_HEIGHT, -width * CAMERA_DISTANCE_FRACTION)
    return SceneObjectDescriptor(
        kind=ObjectKind.CAMERA,
        name="Main_Camera",
        position=eye,
        rotation=look_at(eye, CAMERA_FOCAL_POINT),
    )


def compose(config: SceneConfig, *, scene_has_camera: bool = False) -> list[SceneObjectDescriptor]:
    """Derive the ordered descriptor list for `config`.

    Args:
        config: The scene description.
        scene_has_camera: Whether the target scene already holds a camera.
            When it does, or when a player is placed, no camera is emitted.

    Raises:
        InvalidConfigError: grid_size or cell_size is not positive.
    """
    _validate(config)
    width = config.total_width

    descriptors: list[SceneObjectDescriptor] = []
    if config.include_floor:
        descriptors.append(_floor(config, width))
    if config.include_walls:
        descriptors.extend(_walls(config, width))
    if config.include_lights:
        descriptors.extend(_lights(config, width))
    if config.player_added:
        descriptors.append(_player(config))
    if not scene_has_camera and not config.player_added:
        descriptors.append(_camera(width))
    return descriptors


def describe_descriptors(descriptors: list[SceneObjectDescriptor]) -> str:
    """One line per descriptor, for logs and CLI output."""
    lines = []
    for d in descriptors:
        x, y, z = d.position
        sx, sy, sz = d.scale
        parent = f" in {d.parent_ref}" if d.parent_ref else ""
        template = f" from {d.template_ref}" if d.template_ref else ""
        lines.append(
            f"{d.kind.value:<7} {d.name:<24} pos=({x:.2f}, {y:.2f}, {z:.2f}) "
            f"scale=({sx:.2f}, {sy:.2f}, {sz:.2f}){parent}{template}"
        )
    return "\n".join(lines)


__all__ = [
    "compose",
    "describe_descriptors",
    "ENVIRONMENT_GROUP",
    "LIGHTS_GROUP",
    "FLOOR_THICKNESS",
    "WALL_HEIGHT",
    "WALL_THICKNESS",
]
