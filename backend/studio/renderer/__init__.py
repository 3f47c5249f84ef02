# Renderer module
# Source text -> rendered scene, plus export of the rendered output

from studio.renderer.adapter import (
    LAYOUT_FAILURE_MESSAGE,
    RendererAdapter,
    RenderResult,
    SceneBackend,
    classify_render_error,
)
from studio.renderer.kroki_client import KrokiBackend
from studio.renderer.svg_scene import parse_scene

__all__ = [
    "LAYOUT_FAILURE_MESSAGE",
    "RendererAdapter",
    "RenderResult",
    "SceneBackend",
    "classify_render_error",
    "KrokiBackend",
    "parse_scene",
]
