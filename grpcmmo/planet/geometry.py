"""Vector math on a spherical planet: tangent frames, projections, horizons."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field

import numpy as np

_EPSILON = sys.float_info.epsilon
_UNIT_X = (1.0, 0.0, 0.0)
_UNIT_Y = (0.0, 1.0, 0.0)
_UNIT_Z = (0.0, 0.0, 1.0)


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass
class HorizonDistances:
    """Distances to the horizon from a given altitude."""

    line_of_sight_m: float = 0.0
    surface_arc_m: float = 0.0


@dataclass(eq=False)
class TangentFrame:
    """An orthonormal east/north/up basis on the planet surface."""

    east: np.ndarray = field(default_factory=lambda: _vec(_UNIT_X))
    north: np.ndarray = field(default_factory=lambda: _vec(_UNIT_Z))
    up: np.ndarray = field(default_factory=lambda: _vec(_UNIT_Y))

    def __post_init__(self) -> None:
        self.east = _vec(self.east)
        self.north = _vec(self.north)
        self.up = _vec(self.up)


def normalize_or_fallback(value, fallback) -> np.ndarray:
    """Return the unit vector of value, or fallback when value is (nearly) zero."""
    value = _vec(value)
    length = float(np.linalg.norm(value))
    if length <= _EPSILON:
        return _vec(fallback)
    return value / length


def surface_up_from_position(position) -> np.ndarray:
    """Unit up direction at a planet-centred position."""
    return normalize_or_fallback(position, _UNIT_Y)


def gravity_direction_from_position(position) -> np.ndarray:
    """Unit direction of gravity at a planet-centred position."""
    return -surface_up_from_position(position)


def altitude_from_position(position, planet_radius_m: float) -> float:
    """Height of a planet-centred position above a sphere of the given radius."""
    return float(np.linalg.norm(_vec(position))) - planet_radius_m


def project_to_altitude(position, planet_radius_m: float, altitude_m: float) -> np.ndarray:
    """Move a position radially so that it sits at the given altitude."""
    return surface_up_from_position(position) * (planet_radius_m + altitude_m)


def build_tangent_frame_from_up(up_unit) -> TangentFrame:
    """Build an east/north/up frame around an up direction."""
    up = normalize_or_fallback(up_unit, _UNIT_Y)
    if abs(float(np.dot(up, _UNIT_Z))) >= 0.999:
        reference_axis = _vec(_UNIT_X)
    else:
        reference_axis = _vec(_UNIT_Z)
    east = normalize_or_fallback(np.cross(reference_axis, up), _UNIT_X)
    north = normalize_or_fallback(np.cross(up, east), _UNIT_Z)
    return TangentFrame(east=east, north=north, up=up)


def project_vector_onto_tangent(vector, up_unit) -> np.ndarray:
    """Remove the component of vector along up."""
    vector = _vec(vector)
    up = normalize_or_fallback(up_unit, _UNIT_Y)
    return vector - float(np.dot(vector, up)) * up


def project_direction_onto_tangent(direction, up_unit, fallback) -> np.ndarray:
    """Project a direction onto the tangent plane and normalise it."""
    return normalize_or_fallback(project_vector_onto_tangent(direction, up_unit), fallback)


def tangent_offset_to_planet_space(frame: TangentFrame, east_offset_m: float, north_offset_m: float) -> np.ndarray:
    """Convert an east/north offset into a planet-space vector."""
    return frame.east * east_offset_m + frame.north * north_offset_m


def direction_from_lat_lon_degrees(latitude_deg: float, longitude_deg: float) -> np.ndarray:
    """Unit direction for a latitude and longitude, with +Y as the pole."""
    latitude = math.radians(latitude_deg)
    longitude = math.radians(longitude_deg)
    cos_latitude = math.cos(latitude)
    return np.array(
        [math.cos(longitude) * cos_latitude, math.sin(latitude), math.sin(longitude) * cos_latitude]
    )


def position_from_lat_lon_altitude(
    planet_radius_m: float, latitude_deg: float, longitude_deg: float, altitude_m: float
) -> np.ndarray:
    """Planet-centred position for a latitude, longitude and altitude."""
    return direction_from_lat_lon_degrees(latitude_deg, longitude_deg) * (planet_radius_m + altitude_m)


def world_position_to_local(planet_position_m, local_origin_planet_position_m, frame: TangentFrame) -> np.ndarray:
    """Express a planet position as (east, up, north) relative to a local origin."""
    offset = _vec(planet_position_m) - _vec(local_origin_planet_position_m)
    return world_direction_to_local(offset, frame)


def world_direction_to_local(world_direction, frame: TangentFrame) -> np.ndarray:
    """Express a planet-space direction as (east, up, north) components."""
    direction = _vec(world_direction)
    return np.array(
        [float(np.dot(direction, frame.east)), float(np.dot(direction, frame.up)), float(np.dot(direction, frame.north))]
    )


def local_direction_to_world(local_direction, frame: TangentFrame) -> np.ndarray:
    """Convert an (east, up, north) direction back into planet space."""
    local = _vec(local_direction)
    return frame.east * local[0] + frame.up * local[1] + frame.north * local[2]


def compute_horizon_distances(planet_radius_m: float, altitude_m: float) -> HorizonDistances:
    """Line-of-sight and surface-arc distances to the horizon."""
    radius = max(planet_radius_m, 0.0)
    altitude = max(altitude_m, 0.0)
    line_of_sight = math.sqrt(altitude * (2.0 * radius + altitude))
    if radius <= _EPSILON:
        return HorizonDistances(line_of_sight_m=line_of_sight, surface_arc_m=0.0)
    cosine = min(max(radius / (radius + altitude), -1.0), 1.0)
    return HorizonDistances(line_of_sight_m=line_of_sight, surface_arc_m=radius * math.acos(cosine))