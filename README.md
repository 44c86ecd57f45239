# grpcmmo

Helpers for a third-person MMO client set on a spherical planet. The package
holds the maths and data preparation a client needs. It has no rendering and
no networking of its own.

## Modules

- **`grpcmmo.planet.geometry`**: vector maths on a sphere, using numpy arrays.
  - `normalize_or_fallback`, `surface_up_from_position`,
    `gravity_direction_from_position`, `altitude_from_position` and
    `project_to_altitude`.
  - `TangentFrame` (east/north/up) and `build_tangent_frame_from_up`.
  - `project_vector_onto_tangent`, `project_direction_onto_tangent` and
    `tangent_offset_to_planet_space`.
  - `direction_from_lat_lon_degrees` and `position_from_lat_lon_altitude`.
    These use +Y as the pole.
  - `world_position_to_local`, `world_direction_to_local` and
    `local_direction_to_world`. Local coordinates are ordered (east, up, north).
  - `compute_horizon_distances`, which returns a `HorizonDistances` with
    `line_of_sight_m` and `surface_arc_m`.
- **`grpcmmo.camera`**: the third-person follow camera.
  - `CameraBoon` is an orbit boom. Its yaw is wrapped to [-pi, pi] by
    `normalize_angle_radians`. Its pitch is clamped to [0.20, 1.10] radians.
    The boom is 7.2 m long, with a focus height of 0.70 m. `reset()` restores
    yaw 0 and pitch 0.55.
  - `build_follow_camera_pose` returns a `CameraPose` with `position`,
    `target` and `up`.
  - `build_camera_forward_on_ground` and `build_camera_boon_local_offset`.
  - The followed pawn may be `None`. Otherwise it is any object with
    `surface_up`, `render_position` and `render_facing_direction` attributes.
- **`grpcmmo.scene`**: the description of the level.
  - `make_transform(translation, rotation, scale)` builds a 4x4
    translate·rotate·scale matrix. The quaternion is given as (w, x, y, z).
  - `make_hidden_transform`, `matrices_nearly_equal` (tolerance 0.0001) and
    `build_ground_transform`.
  - `build_level(has_ground_preview)` returns a plain dict. It holds the
    textures, the scene tree nodes (matrices, meshes, camera and sun light) of
    the third-person level.
- **`grpcmmo.assets`**: preparation of the asset tree.
  - `AssetBootstrap(project_root, frame_root, data_root=None)` copies every
    file under `<frame_root>/asset/{shader,cubemap,model}` into
    `<project_root>/asset`.
    - It writes only the files whose bytes changed.
    - If a data root is given, it also copies the terrain preview from
      `tiles/mars/patch-000`.
    - `ensure_frame_assets_available()` returns the shader directory. It
      raises `AssetError` when a source directory is missing.
  - `apply_ground_pbr_override` rewrites the materials, images and textures
    sections of `model/ground_preview.gltf`. It does this only when the three
    `ground_pbr` textures are present.
  - `copy_file_if_changed`, `write_text_file_if_changed` and
    `replace_json_section` are also available. `replace_json_section` raises
    `SectionNotFoundError`.
- **`grpcmmo.timeutil`**: `now_ms()`, the wall-clock time in milliseconds since
  the Unix epoch.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from grpcmmo.planet.geometry import (
    build_tangent_frame_from_up,
    position_from_lat_lon_altitude,
    world_position_to_local,
)

radius = 16980.95
origin = position_from_lat_lon_altitude(radius, -14.0, -65.0, 0.0)
frame = build_tangent_frame_from_up(origin)
nearby = position_from_lat_lon_altitude(radius, -13.99, -65.0, 2.0)
print(world_position_to_local(nearby, origin, frame))
```

```python
from grpcmmo.camera import CameraBoon, build_follow_camera_pose

boon = CameraBoon()
boon.add_yaw_delta(0.3)
boon.add_pitch_delta(-1.0)  # pitch is clamped to its minimum
pose = build_follow_camera_pose(None, boon)
print(pose.position, pose.target)
```

## What the package does not do

- It does not connect to any server or drive a window or renderer.
- It does not sample terrain heights. It does not read baked height grids.
- It ships no planet constants or preview-patch configuration. Radii, latitudes
  and longitudes are passed in by the caller.
- It has no cube-sphere tile addressing.
- It does not generate texture pixels. `build_level` names textures and files
  but carries no pixel data.
- It provides no command-line program.