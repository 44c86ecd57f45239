import pytest

from grpcmmo.assets import (
    AssetBootstrap,
    AssetError,
    SectionNotFoundError,
    apply_ground_pbr_override,
    copy_file_if_changed,
    replace_json_section,
    write_text_file_if_changed,
)

SAMPLE_GLTF = (
    "{\n"
    '  "asset": {\n'
    '    "version": "2.0"\n'
    "  },\n"
    '  "materials": [\n'
    "    {\n"
    '      "name": "Old"\n'
    "    }\n"
    "  ],\n"
    '  "samplers": [\n'
    "    {}\n"
    "  ],\n"
    '  "images": [\n'
    '    {"uri": "old.png"}\n'
    "  ],\n"
    '  "textures": [\n'
    '    {"source": 0}\n'
    "  ],\n"
    '  "buffers": [\n'
    "  ]\n"
    "}\n"
)

PBR_TEXTURES = (
    "red_laterite_soil_stones_diff_1k.jpg",
    "red_laterite_soil_stones_nor_gl_1k.jpg",
    "red_laterite_soil_stones_arm_1k.jpg",
)


def _add_pbr_textures(asset_root):
    directory = asset_root / "model" / "ground_pbr"
    directory.mkdir(parents=True, exist_ok=True)
    for name in PBR_TEXTURES:
        (directory / name).write_bytes(b"jpg")


def _make_frame(root):
    asset = root / "asset"
    (asset / "shader" / "opengl").mkdir(parents=True)
    (asset / "shader" / "opengl" / "scene.vert").write_text("vert")
    (asset / "cubemap").mkdir()
    (asset / "cubemap" / "positive_x.png").write_bytes(b"px")
    (asset / "model").mkdir()
    (asset / "model" / "cube.glb").write_bytes(b"cube")
    return root


def test_copy_file_creates_parents_and_copies(tmp_path):
    source = tmp_path / "a.bin"
    source.write_bytes(b"\x00\x01data")
    destination = tmp_path / "deep" / "nested" / "a.bin"
    assert copy_file_if_changed(source, destination) is True
    assert destination.read_bytes() == b"\x00\x01data"


def test_copy_file_skips_identical_destination(tmp_path):
    source = tmp_path / "a.bin"
    source.write_bytes(b"same")
    destination = tmp_path / "b.bin"
    destination.write_bytes(b"same")
    assert copy_file_if_changed(source, destination) is False
    assert destination.read_bytes() == b"same"


def test_copy_file_overwrites_different_destination(tmp_path):
    source = tmp_path / "a.bin"
    source.write_bytes(b"new")
    destination = tmp_path / "b.bin"
    destination.write_bytes(b"old contents")
    assert copy_file_if_changed(source, destination) is True
    assert destination.read_bytes() == b"new"


def test_copy_file_missing_source_raises(tmp_path):
    with pytest.raises(AssetError, match="failed to read"):
        copy_file_if_changed(tmp_path / "missing", tmp_path / "out")


def test_write_text_file_if_changed(tmp_path):
    destination = tmp_path / "f.txt"
    assert write_text_file_if_changed(destination, "hello") is True
    assert destination.read_text() == "hello"
    assert write_text_file_if_changed(destination, "hello") is False
    assert write_text_file_if_changed(destination, "other") is True
    assert destination.read_text() == "other"


def test_write_text_file_missing_directory_raises(tmp_path):
    with pytest.raises(AssetError, match="failed to write"):
        write_text_file_if_changed(tmp_path / "nope" / "f.txt", "x")


def test_replace_json_section_replaces_whole_lines():
    text = 'a\n  "one": [\n  1\n  ],\n  "two": [\n  ]\n'
    result = replace_json_section(text, '"one": [', '"two": [', "X\n")
    assert result == 'a\nX\n  "two": [\n  ]\n'


def test_replace_json_section_at_first_line():
    text = '"one": 1,\n"two": 2\n'
    result = replace_json_section(text, '"one"', '"two"', "R\n")
    assert result == 'R\n"two": 2\n'


def test_replace_json_section_missing_start():
    with pytest.raises(SectionNotFoundError):
        replace_json_section('"two": []\n', '"one"', '"two"', "x")


def test_replace_json_section_next_before_start():
    with pytest.raises(SectionNotFoundError):
        replace_json_section('"two": []\n"one": []\n', '"one"', '"two"', "x")


def test_replace_json_section_missing_next():
    with pytest.raises(SectionNotFoundError):
        replace_json_section('"one": []\n', '"one"', '"two"', "x")


def test_override_missing_preview(tmp_path):
    assert apply_ground_pbr_override(tmp_path / "none.gltf", tmp_path) is False


def test_override_without_textures_leaves_file(tmp_path):
    gltf = tmp_path / "model" / "ground_preview.gltf"
    gltf.parent.mkdir(parents=True)
    gltf.write_text(SAMPLE_GLTF)
    assert apply_ground_pbr_override(gltf, tmp_path) is False
    assert gltf.read_text() == SAMPLE_GLTF


def test_override_rewrites_sections(tmp_path):
    _add_pbr_textures(tmp_path)
    gltf = tmp_path / "model" / "ground_preview.gltf"
    gltf.write_text(SAMPLE_GLTF)
    assert apply_ground_pbr_override(gltf, tmp_path) is True
    text = gltf.read_text()
    assert '"name": "GroundPreview"' in text
    assert '"name": "Old"' not in text
    assert "old.png" not in text
    for name in PBR_TEXTURES:
        assert f'"uri": "ground_pbr/{name}"' in text
    assert text.index('"materials"') < text.index('"samplers"') < text.index('"images"')
    assert text.index('"images"') < text.index('"textures"') < text.index('"buffers"')
    assert text.startswith('{\n  "asset": {')


def test_override_is_idempotent(tmp_path):
    _add_pbr_textures(tmp_path)
    gltf = tmp_path / "model" / "ground_preview.gltf"
    gltf.write_text(SAMPLE_GLTF)
    apply_ground_pbr_override(gltf, tmp_path)
    first = gltf.read_text()
    apply_ground_pbr_override(gltf, tmp_path)
    assert gltf.read_text() == first


def test_override_missing_section_raises(tmp_path):
    _add_pbr_textures(tmp_path)
    gltf = tmp_path / "model" / "ground_preview.gltf"
    gltf.write_text('{\n  "materials": [\n  ]\n}\n')
    with pytest.raises(AssetError, match="failed to apply ground material override"):
        apply_ground_pbr_override(gltf, tmp_path)


def test_bootstrap_missing_frame_directory(tmp_path):
    frame = tmp_path / "frame"
    (frame / "asset" / "shader").mkdir(parents=True)
    bootstrap = AssetBootstrap(tmp_path / "project", frame)
    with pytest.raises(AssetError, match="Frame asset directory not found"):
        bootstrap.ensure_frame_assets_available()


def test_bootstrap_copies_frame_assets(tmp_path):
    frame = _make_frame(tmp_path / "frame")
    project = tmp_path / "project"
    shader_dir = AssetBootstrap(project, frame).ensure_frame_assets_available()
    assert shader_dir == project / "asset" / "shader"
    assert (project / "asset" / "shader" / "opengl" / "scene.vert").read_text() == "vert"
    assert (project / "asset" / "cubemap" / "positive_x.png").read_bytes() == b"px"
    assert (project / "asset" / "model" / "cube.glb").read_bytes() == b"cube"


def test_bootstrap_with_data_preview(tmp_path):
    frame = _make_frame(tmp_path / "frame")
    data = tmp_path / "data"
    patch = data / "tiles" / "mars" / "patch-000"
    patch.mkdir(parents=True)
    (patch / "ground_preview.gltf").write_text(SAMPLE_GLTF)
    (patch / "ground_preview_basecolor.png").write_bytes(b"png")
    project = tmp_path / "project"
    model = project / "asset" / "model"
    model.mkdir(parents=True)
    (model / "ground_preview.obj").write_text("obj")

    AssetBootstrap(project, frame, data).ensure_frame_assets_available()
    assert (model / "ground_preview.gltf").read_text() == SAMPLE_GLTF
    assert (model / "ground_preview_basecolor.png").read_bytes() == b"png"
    assert not (model / "ground_preview.obj").exists()


def test_bootstrap_removes_stale_preview_texture(tmp_path):
    frame = _make_frame(tmp_path / "frame")
    data = tmp_path / "data"
    patch = data / "tiles" / "mars" / "patch-000"
    patch.mkdir(parents=True)
    (patch / "ground_preview.gltf").write_text(SAMPLE_GLTF)
    project = tmp_path / "project"
    model = project / "asset" / "model"
    model.mkdir(parents=True)
    (model / "ground_preview_basecolor.png").write_bytes(b"stale")

    AssetBootstrap(project, frame, data).ensure_frame_assets_available()
    assert not (model / "ground_preview_basecolor.png").exists()
    assert (model / "ground_preview.gltf").exists()


def test_bootstrap_applies_pbr_override_from_frame_textures(tmp_path):
    frame = _make_frame(tmp_path / "frame")
    _add_pbr_textures(frame / "asset")
    data = tmp_path / "data"
    patch = data / "tiles" / "mars" / "patch-000"
    patch.mkdir(parents=True)
    (patch / "ground_preview.gltf").write_text(SAMPLE_GLTF)
    project = tmp_path / "project"

    AssetBootstrap(project, frame, data).ensure_frame_assets_available()
    text = (project / "asset" / "model" / "ground_preview.gltf").read_text()
    assert '"name": "GroundPreview"' in text


def test_bootstrap_without_data_keeps_existing_preview_unpatched(tmp_path):
    frame = _make_frame(tmp_path / "frame")
    project = tmp_path / "project"
    model = project / "asset" / "model"
    model.mkdir(parents=True)
    (model / "ground_preview.gltf").write_text(SAMPLE_GLTF)

    AssetBootstrap(project, frame).ensure_frame_assets_available()
    assert (model / "ground_preview.gltf").read_text() == SAMPLE_GLTF