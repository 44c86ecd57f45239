"""Planet geometry, follow-camera, scene-description and asset helpers for a third-person MMO client."""

__version__ = "0.1.0"