"""Third-person follow camera: orbit boom state and pose construction."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np

_MIN_LENGTH_SQUARED = 0.000001
_WORLD_UP = (0.0, 1.0, 0.0)
_WORLD_EAST = (1.0, 0.0, 0.0)


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


def _normalize_or_fallback(direction, fallback) -> np.ndarray:
    direction = _vec(direction)
    length_squared = float(np.dot(direction, direction))
    if length_squared <= _MIN_LENGTH_SQUARED:
        return _vec(fallback)
    return direction / math.sqrt(length_squared)


def _project_direction_onto_surface(direction, surface_up, fallback) -> np.ndarray:
    direction = _vec(direction)
    up = _normalize_or_fallback(surface_up, _WORLD_UP)
    tangent = direction - float(np.dot(direction, up)) * up
    return _normalize_or_fallback(tangent, fallback)


class _FollowTarget(Protocol):
    """What the camera needs to know about the pawn it follows."""

    @property
    def surface_up(self): ...

    @property
    def render_position(self): ...

    @property
    def render_facing_direction(self): ...


def normalize_angle_radians(angle_radians: float) -> float:
    """Wrap an angle into the range [-pi, pi]."""
    if not math.isfinite(angle_radians):
        raise ValueError(f"cannot normalise a non-finite angle: {angle_radians}")
    while angle_radians > math.pi:
        angle_radians -= 2.0 * math.pi
    while angle_radians < -math.pi:
        angle_radians += 2.0 * math.pi
    return angle_radians


@dataclass
class CameraPose:
    """Where a camera sits, what it looks at, and which way is up."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    target: np.ndarray = field(default_factory=lambda: np.zeros(3))
    up: np.ndarray = field(default_factory=lambda: _vec(_WORLD_UP))

    def __post_init__(self) -> None:
        self.position = _vec(self.position)
        self.target = _vec(self.target)
        self.up = _vec(self.up)


@dataclass
class CameraBoon:
    """Orbit boom holding the yaw and clamped pitch of a follow camera."""

    DISTANCE_METERS = 7.2
    FOCUS_HEIGHT_METERS = 0.70
    PITCH_MIN_RADIANS = 0.20
    PITCH_MAX_RADIANS = 1.10
    DEFAULT_PITCH_RADIANS = 0.55

    yaw_radians: float = 0.0
    pitch_radians: float = DEFAULT_PITCH_RADIANS

    @property
    def distance_meters(self) -> float:
        """Length of the boom."""
        return self.DISTANCE_METERS

    @property
    def focus_height_meters(self) -> float:
        """Height above the pawn that the camera looks at."""
        return self.FOCUS_HEIGHT_METERS

    def reset(self) -> None:
        """Return to the default yaw and pitch."""
        self.yaw_radians = 0.0
        self.pitch_radians = self.DEFAULT_PITCH_RADIANS

    def add_yaw_delta(self, yaw_delta_radians: float) -> None:
        """Turn the boom, keeping the yaw within [-pi, pi]."""
        self.yaw_radians = normalize_angle_radians(self.yaw_radians + yaw_delta_radians)

    def add_pitch_delta(self, pitch_delta_radians: float) -> None:
        """Tilt the boom, keeping the pitch within its limits."""
        self.pitch_radians = min(
            max(self.pitch_radians + pitch_delta_radians, self.PITCH_MIN_RADIANS),
            self.PITCH_MAX_RADIANS,
        )


def _boon_distances(camera_boon: CameraBoon) -> tuple[float, float]:
    horizontal = camera_boon.distance_meters * math.cos(camera_boon.pitch_radians)
    vertical = camera_boon.distance_meters * math.sin(camera_boon.pitch_radians)
    return horizontal, vertical


def build_camera_forward_on_ground(
    controlled_pawn: _FollowTarget | None, camera_boon: CameraBoon
) -> np.ndarray:
    """Horizontal look direction of the boom, laid onto the pawn's ground plane."""
    yaw = camera_boon.yaw_radians
    base_forward = np.array([math.cos(yaw), 0.0, math.sin(yaw)])
    if controlled_pawn is None:
        return _normalize_or_fallback(base_forward, _WORLD_EAST)
    return _project_direction_onto_surface(
        base_forward,
        controlled_pawn.surface_up,
        controlled_pawn.render_facing_direction,
    )


def build_follow_camera_pose(
    controlled_pawn: _FollowTarget | None, camera_boon: CameraBoon
) -> CameraPose:
    """Pose of a camera trailing the pawn (or the origin) along the boom."""
    horizontal, vertical = _boon_distances(camera_boon)

    if controlled_pawn is None:
        focus = np.array([0.0, camera_boon.focus_height_meters, 0.0])
        forward = build_camera_forward_on_ground(None, camera_boon)
        position = focus - forward * horizontal + np.array([0.0, vertical, 0.0])
        return CameraPose(position=position, target=focus, up=_vec(_WORLD_UP))

    up = _vec(controlled_pawn.surface_up)
    focus = _vec(controlled_pawn.render_position) + up * camera_boon.focus_height_meters
    forward = build_camera_forward_on_ground(controlled_pawn, camera_boon)
    position = focus - forward * horizontal + up * vertical
    return CameraPose(position=position, target=focus, up=up)


def build_camera_boon_local_offset(camera_boon: CameraBoon) -> np.ndarray:
    """Offset of the camera from the pawn root in the pawn's own frame."""
    horizontal, vertical = _boon_distances(camera_boon)
    return np.array([-horizontal, camera_boon.focus_height_meters + vertical, 0.0])