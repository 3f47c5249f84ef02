"""
Renderer Adapter - source text -> RenderedScene.

Rendering is delegated to a SceneBackend (Kroki by default). The adapter:
- short-circuits empty source to the blank scene
- classifies backend failures into stable user-facing messages
- stamps every request with a monotonically increasing generation so
  callers can discard results that finished after a newer request
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from studio.errors import RenderError
from studio.renderer.svg_scene import parse_scene
from studio.visual.scene_schema import RenderedScene


LAYOUT_FAILURE_MESSAGE = (
    "Layout calculation failed. Try simplifying the diagram or switching orientation."
)
DEFAULT_FAILURE_MESSAGE = "Syntax Error"

# Substrings of layout-engine crashes (dagre point lookup, property access on undefined)
_LAYOUT_FAILURE_MARKERS = (
    "suitable point",
    "read property 'x'",
    "read properties of undefined",
    "undefined (reading",
    "reading 'x'",
)


class SceneBackend(Protocol):
    async def render_svg(self, source: str, theme: str = "default") -> str:
        ...


@dataclass
class RenderResult:
    generation: int
    source: str
    scene: Optional[RenderedScene] = None
    error: Optional[RenderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "generation": self.generation,
            "ok": self.ok,
            "svg": self.scene.svg if self.scene else "",
            "nodes": len(self.scene.nodes) if self.scene else 0,
            "error": self.error.message if self.error else None,
        }


def classify_render_error(message: Optional[str]) -> str:
    """Rewrite known layout-engine crashes; pass everything else through."""
    if not message:
        return DEFAULT_FAILURE_MESSAGE
    lowered = message.lower()
    if any(marker in lowered for marker in _LAYOUT_FAILURE_MARKERS):
        return LAYOUT_FAILURE_MESSAGE
    return message


class RendererAdapter:
    """
    Usage:
        adapter = RendererAdapter(KrokiBackend())
        result = await adapter.render("graph TD\\nA-->B", theme="dark")
        if adapter.is_current(result.generation) and result.ok:
            show(result.scene)
    """

    def __init__(self, backend: SceneBackend):
        self.backend = backend
        self._generation = 0

    @property
    def latest_generation(self) -> int:
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def render(self, source_text: str, theme: str = "default") -> RenderResult:
        self._generation += 1
        generation = self._generation

        if not source_text or not source_text.strip():
            return RenderResult(generation=generation, source=source_text, scene=RenderedScene.blank())

        try:
            svg = await self.backend.render_svg(source_text, theme)
            scene = parse_scene(svg)
        except Exception as e:
            message = classify_render_error(str(e))
            print(f"[RENDER] ⚠️ Render #{generation} failed: {message}")
            return RenderResult(generation=generation, source=source_text, error=RenderError(message))

        print(f"[RENDER] Render #{generation}: {len(scene.nodes)} nodes, {len(scene.edges)} edges")
        return RenderResult(generation=generation, source=source_text, scene=scene)
