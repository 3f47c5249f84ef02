# Visual module
# Rendered scene geometry, canonical scene-library elements and their styling

from studio.visual.scene_schema import (
    CanonicalElement,
    DiagramState,
    RenderedScene,
    SceneEdge,
    SceneNode,
)
from studio.visual.element_style import ELEMENT_STYLE, MERMAID_THEMES
from studio.visual.normalizer import NormalizeResult, normalize, normalize_json, patch_dark_strokes
from studio.visual.converter import scene_to_elements

__all__ = [
    "CanonicalElement",
    "DiagramState",
    "RenderedScene",
    "SceneEdge",
    "SceneNode",
    "ELEMENT_STYLE",
    "MERMAID_THEMES",
    "NormalizeResult",
    "normalize",
    "normalize_json",
    "patch_dark_strokes",
    "scene_to_elements",
]
