"""Scene description of the third-person level: node transforms and layout."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

GROUND_SCALE_METERS = (250.0, 0.10, 250.0)
GROUND_TILE_HEIGHT = -0.10
PAWN_LIFT_METERS = 0.675
PAWN_BODY_SCALE = (1.35, 1.35, 1.35)
HIDDEN_POSITION = (0.0, -200.0, 0.0)
HIDDEN_SCALE = (0.01, 0.01, 0.01)
MATRIX_TOLERANCE = 0.0001

GROUND_PREVIEW_MESH = "ground_preview.gltf"
GROUND_FALLBACK_MESH = "cube.glb"
PAWN_BODY_MESH = "player_cube.gltf"

_IDENTITY_ROTATION = (1.0, 0.0, 0.0, 0.0)
_SKYBOX_FACES = ("positive_x", "negative_x", "positive_y", "negative_y", "positive_z", "negative_z")


def _vec3(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


def _rotation_matrix(rotation: Sequence[float]) -> np.ndarray:
    w, x, y, z = (float(c) for c in rotation)
    length = math.sqrt(w * w + x * x + y * y + z * z)
    if length <= 0.0:
        w, x, y, z = _IDENTITY_ROTATION
    else:
        w, x, y, z = w / length, x / length, y / length, z / length
    return np.array(
        [
            [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
            [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
            [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
        ]
    )


def make_transform(translation, rotation, scale) -> np.ndarray:
    """Compose translate * rotate * scale into a 4x4 matrix.

    The rotation is a quaternion given as (w, x, y, z); it is normalised first.
    The matrix acts on column vectors, with the translation in the last column.
    """
    matrix = np.eye(4)
    matrix[:3, :3] = _rotation_matrix(rotation) * _vec3(scale)[np.newaxis, :]
    matrix[:3, 3] = _vec3(translation)
    return matrix


def make_hidden_transform() -> np.ndarray:
    """Transform that shrinks a node and moves it far below the ground."""
    return make_transform(HIDDEN_POSITION, _IDENTITY_ROTATION, HIDDEN_SCALE)


def matrices_nearly_equal(lhs, rhs) -> bool:
    """Whether every element of two 4x4 matrices differs by at most 0.0001."""
    lhs = np.asarray(lhs, dtype=float).reshape(4, 4)
    rhs = np.asarray(rhs, dtype=float).reshape(4, 4)
    return bool(np.all(np.abs(lhs - rhs) <= MATRIX_TOLERANCE))


def build_ground_transform(has_ground_preview: bool) -> np.ndarray:
    """Ground mesh transform: identity for the baked preview, a flat slab otherwise."""
    if has_ground_preview:
        return make_transform((0.0, 0.0, 0.0), _IDENTITY_ROTATION, (1.0, 1.0, 1.0))
    return make_transform((0.0, GROUND_TILE_HEIGHT, 0.0), _IDENTITY_ROTATION, GROUND_SCALE_METERS)


def _matrix_node(name: str, matrix: np.ndarray, parent: str | None = None) -> dict:
    node = {"name": name, "matrix_type": "STATIC_MATRIX", "matrix": matrix}
    if parent:
        node["parent"] = parent
    return node


def _render_texture(name: str) -> dict:
    return {
        "name": name,
        "cubemap": False,
        "pixel_element_size": "BYTE",
        "pixel_structure": "RGB",
        "size": (-1, -1),
    }


def _skybox_texture(name: str) -> dict:
    return {
        "name": name,
        "cubemap": True,
        "pixel_structure": "RGB_ALPHA",
        "pixel_element_size": "BYTE",
        "file_names": {face: f"asset/cubemap/{face}.png" for face in _SKYBOX_FACES},
    }


def build_level(has_ground_preview: bool) -> dict:
    """Describe the third-person level: textures, scene tree, camera and sun."""
    identity = np.eye(4)
    identity_nodes = [
        ("root", None),
        ("env_holder", "root"),
        ("mesh_holder", "root"),
        ("ground_holder", "mesh_holder"),
        ("guide_holder", "mesh_holder"),
        ("landmark_holder", "mesh_holder"),
        ("pawn_root_matrix", "mesh_holder"),
        ("camera_boon_matrix", "pawn_root_matrix"),
    ]
    node_matrices = [_matrix_node(name, identity.copy(), parent) for name, parent in identity_nodes]
    node_matrices.append(
        _matrix_node("ground_matrix", build_ground_transform(has_ground_preview), "ground_holder")
    )
    node_matrices.append(
        _matrix_node(
            "pawn_body_matrix",
            make_transform((0.0, PAWN_LIFT_METERS, 0.0), _IDENTITY_ROTATION, PAWN_BODY_SCALE),
            "pawn_root_matrix",
        )
    )

    ground_mesh = GROUND_PREVIEW_MESH if has_ground_preview else GROUND_FALLBACK_MESH
    node_meshes = [
        {
            "name": "CubeMapMesh",
            "parent": "env_holder",
            "mesh_enum": "CUBE",
            "render_time": "SKYBOX_RENDER_TIME",
        },
        {
            "name": "GroundMesh",
            "parent": "ground_matrix",
            "file_name": ground_mesh,
            "render_time": "SCENE_RENDER_TIME",
        },
        {
            "name": "PawnBodyMesh",
            "parent": "pawn_body_matrix",
            "file_name": PAWN_BODY_MESH,
            "render_time": "SCENE_RENDER_TIME",
        },
    ]

    camera = {
        "name": "camera",
        "parent": "root",
        "fov_degrees": 65.0,
        "near_clip": 0.05,
        "far_clip": 6000.0,
        "position": (-18.0, 12.0, -18.0),
        "target": (0.0, 0.7, 0.0),
        "up": (0.0, 1.0, 0.0),
    }
    sun = {
        "name": "sun",
        "parent": "root",
        "light_type": "DIRECTIONAL_LIGHT",
        "shadow_type": "HARD_SHADOW",
        "direction": (0.7, -1.0, 0.5),
        "color": (1.0, 1.0, 1.0),
    }

    return {
        "name": "grpcMMOThirdPerson",
        "default_texture_name": "albedo",
        "textures": [
            _render_texture("albedo"),
            _skybox_texture("skybox"),
            _skybox_texture("skybox_env"),
        ],
        "scene_tree": {
            "default_root_name": "root",
            "default_camera_name": "camera",
            "node_matrices": node_matrices,
            "node_meshes": node_meshes,
            "node_cameras": [camera],
            "node_lights": [sun],
        },
    }