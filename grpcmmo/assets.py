"""Preparing the asset directory of the client workspace.

Renderer assets (shaders, cubemaps, models) are mirrored from the engine
checkout into the project, and an optional terrain preview from the data
checkout is laid on top, with its material switched to the bundled PBR
ground textures when they are present.
"""

from __future__ import annotations

import os
from pathlib import Path


class AssetError(RuntimeError):
    """Raised when assets cannot be read, written or patched."""


class SectionNotFoundError(ValueError):
    """Raised when a top-level section of a glTF text cannot be located."""


_ASSET_SUBDIRECTORIES = ("shader", "cubemap", "model")

_GROUND_PBR_DIRECTORY = "ground_pbr"
_GROUND_DIFFUSE = "red_laterite_soil_stones_diff_1k.jpg"
_GROUND_NORMAL = "red_laterite_soil_stones_nor_gl_1k.jpg"
_GROUND_ARM = "red_laterite_soil_stones_arm_1k.jpg"

_MATERIALS_SECTION = (
    '  "materials": [\n'
    "    {\n"
    '      "name": "GroundPreview",\n'
    '      "pbrMetallicRoughness": {\n'
    '        "baseColorFactor": [1.000000, 1.000000, 1.000000, 1.000000],\n'
    '        "baseColorTexture": {\n'
    '          "index": 0\n'
    "        },\n"
    '        "metallicFactor": 1.000000,\n'
    '        "roughnessFactor": 1.000000,\n'
    '        "metallicRoughnessTexture": {\n'
    '          "index": 2\n'
    "        }\n"
    "      },\n"
    '      "normalTexture": {\n'
    '        "index": 1,\n'
    '        "scale": 1.000000\n'
    "      },\n"
    '      "occlusionTexture": {\n'
    '        "index": 2,\n'
    '        "strength": 1.000000\n'
    "      }\n"
    "    }\n"
    "  ],\n"
)

_IMAGES_SECTION = (
    '  "images": [\n'
    "    {\n"
    f'      "uri": "{_GROUND_PBR_DIRECTORY}/{_GROUND_DIFFUSE}"\n'
    "    },\n"
    "    {\n"
    f'      "uri": "{_GROUND_PBR_DIRECTORY}/{_GROUND_NORMAL}"\n'
    "    },\n"
    "    {\n"
    f'      "uri": "{_GROUND_PBR_DIRECTORY}/{_GROUND_ARM}"\n'
    "    }\n"
    "  ],\n"
)

_TEXTURES_SECTION = (
    '  "textures": [\n'
    "    {\n"
    '      "sampler": 0,\n'
    '      "source": 0\n'
    "    },\n"
    "    {\n"
    '      "sampler": 0,\n'
    '      "source": 1\n'
    "    },\n"
    "    {\n"
    '      "sampler": 0,\n'
    '      "source": 2\n'
    "    }\n"
    "  ],\n"
)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as error:
        raise AssetError(f"failed to read {path}") from error


def _existing_bytes(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError:
        return None


def _write_bytes(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as error:
        raise AssetError(f"failed to write {path}") from error


def _remove_if_present(path: Path) -> None:
    try:
        path.unlink()
    except OSError:
        pass


def _normalize(path) -> Path:
    return Path(os.path.normpath(os.fspath(path)))


def copy_file_if_changed(source, destination) -> bool:
    """Copy source to destination unless the destination already holds the same bytes.

    Missing parent directories of the destination are created.
    Returns whether the destination was written.
    """
    source = Path(source)
    destination = Path(destination)
    data = _read_bytes(source)
    if _existing_bytes(destination) == data:
        return False
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise AssetError(f"failed to write {destination}") from error
    _write_bytes(destination, data)
    return True


def write_text_file_if_changed(destination, contents: str) -> bool:
    """Write contents to destination unless it already holds exactly that text.

    Returns whether the destination was written.
    """
    destination = Path(destination)
    data = contents.encode("utf-8")
    if _existing_bytes(destination) == data:
        return False
    _write_bytes(destination, data)
    return True


def _section_line_start(text: str, key: str) -> int | None:
    key_start = text.find(key)
    if key_start < 0:
        return None
    return text.rfind("\n", 0, key_start) + 1


def replace_json_section(text: str, start_key: str, next_key: str, replacement: str) -> str:
    """Replace the lines from the one holding start_key up to the one holding next_key.

    Raises SectionNotFoundError if either key is missing or the next section
    does not begin after the start section.
    """
    start = _section_line_start(text, start_key)
    if start is None:
        raise SectionNotFoundError(f"section {start_key!r} not found")
    following = _section_line_start(text, next_key)
    if following is None or following <= start:
        raise SectionNotFoundError(f"section {next_key!r} not found after {start_key!r}")
    return text[:start] + replacement + text[following:]


def apply_ground_pbr_override(preview_gltf_path, destination_asset_root) -> bool:
    """Point the ground preview's material at the bundled PBR textures.

    Does nothing, and returns False, when the preview or any of the three
    textures is missing. Returns True once the override has been applied.
    """
    preview_gltf_path = Path(preview_gltf_path)
    if not preview_gltf_path.exists():
        return False

    material_directory = Path(destination_asset_root) / "model" / _GROUND_PBR_DIRECTORY
    textures = (_GROUND_DIFFUSE, _GROUND_NORMAL, _GROUND_ARM)
    if not all((material_directory / name).exists() for name in textures):
        return False

    gltf = _read_bytes(preview_gltf_path).decode("utf-8")
    try:
        gltf = replace_json_section(gltf, '"materials": [', '"samplers": [', _MATERIALS_SECTION)
        gltf = replace_json_section(gltf, '"images": [', '"textures": [', _IMAGES_SECTION)
        gltf = replace_json_section(gltf, '"textures": [', '"buffers": [', _TEXTURES_SECTION)
    except SectionNotFoundError as error:
        raise AssetError(
            f"failed to apply ground material override to {preview_gltf_path}"
        ) from error

    write_text_file_if_changed(preview_gltf_path, gltf)
    return True


class AssetBootstrap:
    """Mirrors engine assets and the terrain preview into a project's asset tree."""

    def __init__(self, project_root, frame_root, data_root=None) -> None:
        self.project_root = Path(project_root)
        self.frame_root = _normalize(frame_root)
        self.data_root = _normalize(data_root) if data_root is not None else None

    @property
    def asset_root(self) -> Path:
        """The project's asset directory."""
        return self.project_root / "asset"

    def ensure_frame_assets_available(self) -> Path:
        """Bring the project's asset tree up to date; return its shader directory."""
        source_asset_root = self.frame_root / "asset"
        destination_asset_root = self.asset_root
        model_directory = destination_asset_root / "model"
        preview_gltf = model_directory / "ground_preview.gltf"
        preview_texture = model_directory / "ground_preview_basecolor.png"
        preview_obj = model_directory / "ground_preview.obj"

        for name in _ASSET_SUBDIRECTORIES:
            source_directory = source_asset_root / name
            if not source_directory.exists():
                raise AssetError(f"Frame asset directory not found: {source_directory}")
            for entry in sorted(source_directory.rglob("*")):
                if not entry.is_file():
                    continue
                relative = entry.relative_to(source_asset_root)
                copy_file_if_changed(entry, destination_asset_root / relative)

        if self.data_root is not None:
            patch_directory = self.data_root / "tiles" / "mars" / "patch-000"
            terrain_preview = patch_directory / "ground_preview.gltf"
            terrain_texture = patch_directory / "ground_preview_basecolor.png"
            if terrain_preview.exists():
                copy_file_if_changed(terrain_preview, preview_gltf)
                if terrain_texture.exists():
                    copy_file_if_changed(terrain_texture, preview_texture)
                else:
                    _remove_if_present(preview_texture)
                _remove_if_present(preview_obj)

        apply_ground_pbr_override(preview_gltf, destination_asset_root)
        return destination_asset_root / "shader"