[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grpcmmo"
version = "0.1.0"
description = "Planet geometry, follow-camera, scene-description and asset helpers for a third-person MMO client."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["mmo", "planet", "camera", "gltf", "game", "scene"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["grpcmmo"]

[tool.hatch.build.targets.sdist]
include = ["grpcmmo", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
