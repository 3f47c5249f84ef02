"""
Node Patch Engine - in-place label editing of a rendered node.

Double-click -> locate() hit-tests the rendered scene under the pointer
and opens an EditSession carrying the node's label and geometry.
Confirm    -> commit() rewrites the first delimited occurrence of the
              old label in the source text and closes the session.
Escape/blur -> cancel() closes the session without touching the source.

There is no source map: nodes that share a label are not told apart and
the first occurrence in the source is the one rewritten.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from studio.dsl.mermaid import patch_label
from studio.errors import PatchNoMatch
from studio.viewport.transform import Point, Rect, TransformManager
from studio.visual.scene_schema import RenderedScene


MIN_OVERLAY_WIDTH = 100
MIN_OVERLAY_HEIGHT = 40


@dataclass(frozen=True)
class EditSession:
    node_id: str
    target_label: str
    draft_text: str
    scene_geometry: Rect
    screen_geometry: Rect

    @property
    def overlay(self) -> Rect:
        """Where the text editor sits on screen; never smaller than usable."""
        g = self.screen_geometry
        return Rect(g.x, g.y, max(MIN_OVERLAY_WIDTH, g.width), max(MIN_OVERLAY_HEIGHT, g.height))

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "target_label": self.target_label,
            "draft_text": self.draft_text,
            "scene_geometry": self.scene_geometry.to_dict(),
            "screen_geometry": self.screen_geometry.to_dict(),
            "overlay": self.overlay.to_dict(),
        }


@dataclass
class PatchOutcome:
    source: str
    changed: bool
    warnings: list = field(default_factory=list)


def apply_patch(session: EditSession, new_text: str, source: str) -> PatchOutcome:
    """Pure rewrite of ``source``; an unmatched label leaves it untouched."""
    new_source, matched = patch_label(source, session.target_label, new_text)
    if not matched:
        warning = PatchNoMatch(f"No shape delimits the label '{session.target_label}'")
        print(f"[PATCH] ⚠️ {warning}")
        return PatchOutcome(source=source, changed=False, warnings=[warning])

    return PatchOutcome(source=new_source, changed=new_source != source)


class NodePatchEngine:
    """
    Owns the single live EditSession.

    Usage:
        engine = NodePatchEngine(transform)
        session = engine.locate(Point(320, 180), scene)
        if session:
            outcome = engine.commit(source, "Renamed")
    """

    def __init__(self, transform: TransformManager):
        self.transform = transform
        self.session: Optional[EditSession] = None

    @property
    def editing(self) -> bool:
        return self.session is not None

    def locate(
        self,
        screen_point: Point,
        scene: Optional[RenderedScene],
        pan_mode: bool = False,
    ) -> Optional[EditSession]:
        # A new double-click resolves whatever session is still open.
        if self.session is not None:
            self.cancel()

        if pan_mode or scene is None or scene.empty:
            return None

        scene_point = self.transform.screen_to_scene(screen_point)
        node = scene.hit_test(scene_point)
        if node is None:
            return None

        self.session = EditSession(
            node_id=node.id,
            target_label=node.label,
            draft_text=node.label,
            scene_geometry=node.bounds,
            screen_geometry=self.transform.rect_to_screen(node.bounds),
        )
        print(f"[PATCH] Editing node '{node.id}' ({node.label!r})")
        return self.session

    def update_draft(self, text: str) -> Optional[EditSession]:
        if self.session is not None:
            self.session = replace(self.session, draft_text=text)
        return self.session

    def commit(self, source: str, new_text: Optional[str] = None) -> PatchOutcome:
        """Apply the draft (or ``new_text``) to ``source``; always closes the session."""
        session = self.session
        self.session = None
        if session is None:
            return PatchOutcome(source=source, changed=False)

        text = session.draft_text if new_text is None else new_text
        return apply_patch(session, text, source)

    def cancel(self) -> None:
        self.session = None
