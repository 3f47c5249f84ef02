"""
Element Normalizer - turns a loosely structured shape list into canonical
scene elements.

Two input shapes are accepted:

    Already canonical -> every item has an id and a type; items are
                         copied and, in dark mode, black strokes patched
    Shape descriptors -> simplified schema from the generation service
                         ({"type": "rectangle", "x": .., "label": ..});
                         mapped per kind, unknown kinds dropped
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from studio.utils.json_extract import extract_json_array
from studio.visual.element_style import (
    BASE_ELEMENT,
    BLACK_STROKES,
    ELEMENT_STYLE,
    FIT_ZOOM_FACTOR,
    style_for,
)
from studio.visual.scene_schema import CanonicalElement


SUPPORTED_KINDS = {"rectangle", "ellipse", "arrow", "text"}

DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 50
DEFAULT_ARROW_END = 100
DEFAULT_FONT_SIZE = 20


@dataclass
class NormalizeResult:
    elements: List[CanonicalElement] = field(default_factory=list)
    canonical_input: bool = False
    fit_requested: bool = False             # ask the scene library to scroll-to-content
    zoom_factor: float = FIT_ZOOM_FACTOR
    dropped: int = 0
    source_items: List[Any] = field(default_factory=list)   # the raw list, kept for re-theming

    def to_dict(self) -> dict:
        return {
            "elements": [e.to_dict() for e in self.elements],
            "canonical_input": self.canonical_input,
            "fit_requested": self.fit_requested,
            "zoom_factor": self.zoom_factor,
            "dropped": self.dropped,
        }


def _num(value: Any, default: float) -> float:
    # Falsy values (None, 0, "") fall back like the generation schema expects.
    if not value:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _element_id(index: int) -> str:
    return f"el-{index}-{int(time.time() * 1000)}"


def is_canonical(items: List[Any]) -> bool:
    """True when every item already carries an identity and a kind."""
    if not items:
        return False
    return all(
        isinstance(item, dict)
        and bool(item.get("id"))
        and isinstance(item.get("type"), str)
        and bool(item.get("type"))
        for item in items
    )


def patch_dark_strokes(elements: Iterable[CanonicalElement]) -> List[CanonicalElement]:
    """
    Rewrite black or unset strokes to light slate for a dark canvas.

    Idempotent: the replacement colour is never black.
    """
    light_slate = ELEMENT_STYLE["dark"]["stroke"]
    patched = []
    for element in elements:
        stroke = (element.stroke_color or "").strip().lower()
        if stroke in BLACK_STROKES:
            element = replace(element, stroke_color=light_slate)
        patched.append(element)
    return patched


# ------------------------------------------------------------
# Descriptor mapping
# ------------------------------------------------------------

def _map_descriptor(item: Dict[str, Any], index: int, dark_mode: bool) -> Optional[CanonicalElement]:
    kind = item.get("type")
    if not isinstance(kind, str) or kind not in SUPPORTED_KINDS:
        return None

    style = style_for(dark_mode)
    base = dict(BASE_ELEMENT)
    base["id"] = item.get("id") or _element_id(index)
    base["stroke_color"] = style["stroke"]
    base["background_color"] = item.get("backgroundColor") or BASE_ELEMENT["background_color"]

    if kind in ("rectangle", "ellipse"):
        label = item.get("label")
        return CanonicalElement(
            type=kind,
            x=_num(item.get("x"), 0),
            y=_num(item.get("y"), 0),
            width=_num(item.get("width"), DEFAULT_WIDTH),
            height=_num(item.get("height"), DEFAULT_HEIGHT),
            label=str(label) if label else None,
            **base,
        )

    if kind == "arrow":
        start_x = _num(item.get("startX"), 0)
        start_y = _num(item.get("startY"), 0)
        end_x = _num(item.get("endX"), DEFAULT_ARROW_END)
        end_y = _num(item.get("endY"), DEFAULT_ARROW_END)
        dx = end_x - start_x
        dy = end_y - start_y
        label = item.get("label")
        return CanonicalElement(
            type="arrow",
            x=start_x,
            y=start_y,
            width=abs(dx),
            height=abs(dy),
            points=[[0, 0], [dx, dy]],
            label=str(label) if label else None,
            **base,
        )

    # text: stroke follows the theme, never the caller
    base["stroke_color"] = style["text"]
    return CanonicalElement(
        type="text",
        x=_num(item.get("x"), 0),
        y=_num(item.get("y"), 0),
        text=str(item.get("text") or item.get("label") or "Text"),
        font_size=_num(item.get("fontSize"), DEFAULT_FONT_SIZE),
        **base,
    )


# ------------------------------------------------------------
# Public API
# ------------------------------------------------------------

def normalize(shape_list: List[Any], dark_mode: bool = True) -> NormalizeResult:
    """Convert a shape list into canonical elements for the given theme."""
    items = list(shape_list or [])

    if is_canonical(items):
        elements = [CanonicalElement.from_dict(dict(item)) for item in items]
        if dark_mode:
            elements = patch_dark_strokes(elements)
        print(f"[NORMALIZER] Passed through {len(elements)} canonical elements (dark={dark_mode})")
        return NormalizeResult(
            elements=elements,
            canonical_input=True,
            fit_requested=bool(elements),
            source_items=items,
        )

    elements = []
    dropped = 0
    for index, item in enumerate(items):
        element = _map_descriptor(item, index, dark_mode) if isinstance(item, dict) else None
        if element is None:
            dropped += 1
            continue
        elements.append(element)

    print(f"[NORMALIZER] Mapped {len(elements)} descriptors, dropped {dropped}")
    return NormalizeResult(
        elements=elements,
        canonical_input=False,
        fit_requested=bool(elements),
        dropped=dropped,
        source_items=items,
    )


def normalize_json(text: str, dark_mode: bool = True) -> NormalizeResult:
    """JSON ingestion path; raises SchemaError for anything but a list."""
    return normalize(extract_json_array(text), dark_mode=dark_mode)
