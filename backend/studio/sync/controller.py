"""
Sync Controller - keeps source text, rendered scene and canonical
elements in step.

States:
    IDLE --source changed--> RENDERING --ok--> IDLE
                             RENDERING --fail--> ERROR --source changed--> RENDERING
    IDLE --double-click (not pan mode)--> EDITING --commit/cancel--> IDLE

Every write to the source text goes through _write_source(), which
issues exactly one render request. Render results are applied only when
they belong to the latest request; anything older is dropped.
"""

import asyncio
from dataclasses import replace
from typing import Any, List, Optional

from studio.dsl.mermaid import (
    DEFAULT_SOURCE,
    inject_syntax,
    shape_syntax,
    toggle_orientation,
)
from studio.editing.patch_engine import EditSession, NodePatchEngine, PatchOutcome
from studio.errors import ConversionError, RenderError, StudioError
from studio.inference.generator import DiagramGenerator
from studio.renderer.adapter import RendererAdapter, RenderResult
from studio.renderer.export import export_png, export_svg
from studio.sync.state import DiagramType, History, HistoryEntry, SyncState
from studio.viewport.transform import Point, Rect, TransformManager
from studio.visual.converter import scene_to_elements
from studio.visual.element_style import MERMAID_THEMES, style_for
from studio.visual.normalizer import NormalizeResult, normalize, normalize_json
from studio.visual.scene_schema import DiagramState, RenderedScene


TITLE_LENGTH = 30


class SyncController:
    """
    Usage:
        controller = SyncController(RendererAdapter(KrokiBackend()))
        await controller.set_source("graph TD\\nA[Box] --> B[Other]")
        session = controller.begin_edit(Point(40, 20))
        await controller.commit_edit("Renamed")
    """

    def __init__(
        self,
        renderer: RendererAdapter,
        generator: Optional[DiagramGenerator] = None,
        dark_mode: bool = True,
        source: str = DEFAULT_SOURCE,
        transform: Optional[TransformManager] = None,
    ):
        self.renderer = renderer
        self.generator = generator
        self.transform = transform or TransformManager()
        self.patcher = NodePatchEngine(self.transform)
        self.history = History()

        self.diagram = DiagramState(source_text=source)
        self.scene: Optional[RenderedScene] = None
        self.error: Optional[str] = None
        self.status = SyncState.IDLE
        self.warnings: List[str] = []

        self.dark_mode = dark_mode
        self.theme = style_for(dark_mode)["mermaid_theme"]
        self.pan_mode = False
        self.orientation = "TD"
        self.active_tab = DiagramType.TEXTUAL
        self.fit_requested = False

    @property
    def source(self) -> str:
        return self.diagram.source_text

    # ============================================================
    # RENDERING
    # ============================================================

    async def set_source(self, text: str, theme: Optional[str] = None) -> RenderResult:
        """Replace the source text (direct edit) and re-render."""
        if theme is not None:
            self._check_theme(theme)
            self.theme = theme
        return await self._write_source(text)

    async def refresh(self) -> RenderResult:
        return await self._render()

    async def _write_source(self, text: str) -> RenderResult:
        if self.patcher.editing:
            self.cancel_edit()
        self.diagram = replace(self.diagram, source_text=text)
        return await self._render()

    async def _render(self) -> RenderResult:
        self.status = SyncState.RENDERING
        result = await self.renderer.render(self.diagram.source_text, self.theme)

        if not self.renderer.is_current(result.generation):
            print(
                f"[SYNC] Dropping stale render #{result.generation} "
                f"(latest is #{self.renderer.latest_generation})"
            )
            return result

        if result.ok:
            self.scene = result.scene
            self.error = None
            self.status = SyncState.IDLE
        else:
            self.scene = None
            self.error = result.error.message
            self.status = SyncState.ERROR
        return result

    @staticmethod
    def _check_theme(theme: str) -> None:
        if theme not in MERMAID_THEMES:
            raise StudioError(f"Unknown theme '{theme}'. Use one of: {', '.join(MERMAID_THEMES)}")

    async def set_theme(self, theme: str) -> RenderResult:
        self._check_theme(theme)
        self.cancel_edit()
        self.theme = theme
        return await self._render()

    async def set_dark_mode(self, dark_mode: bool) -> RenderResult:
        """Global theme switch: re-theme the diagram and re-colour elements."""
        self.cancel_edit()
        self.dark_mode = dark_mode
        self.theme = style_for(dark_mode)["mermaid_theme"]
        raw = list(self.diagram.source_elements)
        if not raw:
            raw = [e.to_dict() for e in self.diagram.canonical_elements]
        if raw:
            self._swap_elements(normalize(raw, dark_mode))
        return await self._render()

    # ============================================================
    # SOURCE COMMANDS (orientation, shape injection)
    # ============================================================

    async def toggle_orientation(self) -> RenderResult:
        new_source, self.orientation = toggle_orientation(self.source, self.orientation)
        print(f"[SYNC] Orientation -> {self.orientation}")
        return await self._write_source(new_source)

    async def inject_shape(self, kind: str, node_id: Optional[str] = None) -> RenderResult:
        return await self._write_source(inject_syntax(self.source, shape_syntax(kind, node_id)))

    # ============================================================
    # IN-PLACE EDITING
    # ============================================================

    def set_pan_mode(self, enabled: bool) -> None:
        self.pan_mode = enabled
        if enabled and self.patcher.editing:
            self.cancel_edit()

    def begin_edit(self, screen_point: Point) -> Optional[EditSession]:
        if self.status not in (SyncState.IDLE, SyncState.EDITING):
            return None

        session = self.patcher.locate(screen_point, self.scene, pan_mode=self.pan_mode)
        self.status = SyncState.EDITING if session else SyncState.IDLE
        return session

    def update_draft(self, text: str) -> Optional[EditSession]:
        return self.patcher.update_draft(text)

    def edit_overlay(self) -> Optional[Rect]:
        """Screen rectangle for the editor, following the current pan/zoom."""
        session = self.patcher.session
        if session is None:
            return None
        moved = replace(session, screen_geometry=self.transform.rect_to_screen(session.scene_geometry))
        return moved.overlay

    async def commit_edit(self, text: Optional[str] = None) -> PatchOutcome:
        outcome = self.patcher.commit(self.source, text)
        self.status = SyncState.ERROR if self.error else SyncState.IDLE

        for warning in outcome.warnings:
            self.warnings.append(str(warning))

        if outcome.changed:
            await self._write_source(outcome.source)
        return outcome

    def cancel_edit(self) -> None:
        self.patcher.cancel()
        if self.status == SyncState.EDITING:
            self.status = SyncState.IDLE

    # ============================================================
    # VIEWPORT
    # ============================================================

    def pan_by(self, dx: float, dy: float):
        return self.transform.pan_by(dx, dy)

    def zoom_by(self, delta: float, pivot: Optional[Point] = None):
        return self.transform.zoom_by(delta, pivot)

    def reset_view(self):
        return self.transform.reset_view()

    # ============================================================
    # CANONICAL ELEMENTS
    # ============================================================

    def _swap_elements(self, result: NormalizeResult) -> NormalizeResult:
        self.diagram = replace(
            self.diagram,
            canonical_elements=tuple(result.elements),
            source_elements=tuple(result.source_items),
        )
        self.fit_requested = result.fit_requested
        return result

    def _publish_elements(self, result: NormalizeResult, title: Optional[str]) -> NormalizeResult:
        self._swap_elements(result)
        if title is not None:
            self.diagram = replace(self.diagram, title=title)
        self.active_tab = DiagramType.VISUAL
        self.history.record(self.diagram, DiagramType.VISUAL)
        return result

    def apply_elements(self, shape_list: List[Any], title: Optional[str] = None) -> NormalizeResult:
        """Normalize a shape list and push it as the current element set."""
        return self._publish_elements(normalize(shape_list, self.dark_mode), title)

    def ingest_shape_json(self, text: str, title: Optional[str] = None) -> NormalizeResult:
        """Raises SchemaError before anything is swapped in."""
        return self._publish_elements(normalize_json(text, self.dark_mode), title)

    async def convert_to_elements(self) -> NormalizeResult:
        """Rendered scene -> canonical elements; switches to the visual tab."""
        try:
            if self.scene is None:
                raise RenderError(self.error or "The diagram has not been rendered")
            elements = scene_to_elements(self.scene)
            result = normalize([e.to_dict() for e in elements], self.dark_mode)
        except Exception as e:
            print(f"[SYNC] ⚠️ Conversion failed: {e}")
            raise ConversionError(f"Failed to convert diagram: {e}. Check logs for details.") from e

        return self._publish_elements(result, None)

    # ============================================================
    # GENERATION & HISTORY
    # ============================================================

    async def generate(
        self,
        prompt: str,
        diagram_type: DiagramType,
        model: Optional[str] = None,
    ) -> HistoryEntry:
        if self.generator is None:
            raise StudioError("No generation service configured")

        text = await asyncio.to_thread(self.generator.generate, prompt, diagram_type, model)
        title = prompt[:TITLE_LENGTH]

        print(f"[GENERATE] ✅ {diagram_type.value} diagram '{title}'")

        if diagram_type == DiagramType.VISUAL:
            self.ingest_shape_json(text, title=title)
            return self.history.entries[0]

        self.diagram = replace(self.diagram, title=title)
        await self._write_source(text)
        self.active_tab = DiagramType.TEXTUAL
        return self.history.record(self.diagram, DiagramType.TEXTUAL)

    async def select_history(self, entry_id: str) -> Optional[HistoryEntry]:
        entry = self.history.get(entry_id)
        if entry is None:
            return None
        self.cancel_edit()
        self.active_tab = entry.type
        self.diagram = entry.state
        await self._render()
        return entry

    # ============================================================
    # EXPORT
    # ============================================================

    def export_svg(self) -> str:
        return export_svg(self.scene)

    def export_png(self) -> bytes:
        return export_png(self.scene, dark_mode=self.dark_mode)

    def snapshot(self) -> dict:
        return {
            "status": self.status.value,
            "diagram": self.diagram.to_dict(),
            "active_tab": self.active_tab.value,
            "theme": self.theme,
            "dark_mode": self.dark_mode,
            "pan_mode": self.pan_mode,
            "orientation": self.orientation,
            "error": self.error,
            "warnings": list(self.warnings),
            "viewport": self.transform.snapshot(),
            "editing": self.patcher.session.to_dict() if self.patcher.session else None,
            "fit_requested": self.fit_requested,
            "canvas_background": style_for(self.dark_mode)["canvas"],
        }
