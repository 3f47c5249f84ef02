from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from studio.viewport.transform import Point, Rect


# ============================================================
# RENDERED SCENE (text -> scene output)
# ============================================================

@dataclass
class SceneNode:
    id: str
    label: str
    x: float                                # scene coordinates, top-left
    y: float
    width: float
    height: float
    shape: str = "rect"                     # rect, circle, diamond, ellipse, path

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def contains(self, point: Point) -> bool:
        return self.bounds.contains(point)


@dataclass
class SceneEdge:
    id: str
    points: List[Point] = field(default_factory=list)


@dataclass
class RenderedScene:
    svg: str = ""
    nodes: List[SceneNode] = field(default_factory=list)
    edges: List[SceneEdge] = field(default_factory=list)
    width: float = 0.0
    height: float = 0.0

    @property
    def empty(self) -> bool:
        return not self.svg

    @classmethod
    def blank(cls) -> "RenderedScene":
        return cls()

    def hit_test(self, point: Point) -> Optional[SceneNode]:
        """Topmost node containing ``point``; later nodes are drawn on top."""
        for node in reversed(self.nodes):
            if node.contains(point):
                return node
        return None


# ============================================================
# CANONICAL ELEMENTS (scene-library input)
# ============================================================

# Numeric fields that fall back to 0 when missing or unparseable
_NUMERIC_FIELDS = ("x", "y", "width", "height")


def _coerce(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


# Scene-library field name -> CanonicalElement attribute
_FIELD_MAP = {
    "id": "id",
    "type": "type",
    "x": "x",
    "y": "y",
    "width": "width",
    "height": "height",
    "strokeColor": "stroke_color",
    "backgroundColor": "background_color",
    "fillStyle": "fill_style",
    "strokeWidth": "stroke_width",
    "roughness": "roughness",
    "text": "text",
    "fontSize": "font_size",
    "points": "points",
}


@dataclass
class CanonicalElement:
    id: str
    type: str                               # rectangle, ellipse, arrow, text, ...
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    stroke_color: str = "#000000"
    background_color: str = "transparent"
    fill_style: str = "solid"
    stroke_width: float = 1
    roughness: float = 1
    label: Optional[str] = None
    text: Optional[str] = None
    font_size: Optional[float] = None
    points: Optional[List[List[float]]] = None
    extra: Dict[str, Any] = field(default_factory=dict)   # untouched pass-through fields

    def __post_init__(self):
        for attr in _NUMERIC_FIELDS:
            setattr(self, attr, _coerce(getattr(self, attr)))
        self.width = max(0.0, self.width)
        self.height = max(0.0, self.height)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanonicalElement":
        kwargs: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}

        for key, value in data.items():
            if key == "label":
                if isinstance(value, dict):
                    kwargs["label"] = value.get("text")
                elif value is not None:
                    kwargs["label"] = str(value)
            elif key in _FIELD_MAP:
                if value is not None:
                    kwargs[_FIELD_MAP[key]] = value
            else:
                extra[key] = value

        # Unset strokes resolve to the scene library's default black.
        if not kwargs.get("stroke_color"):
            kwargs["stroke_color"] = "#000000"

        return cls(extra=extra, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        for key, attr in _FIELD_MAP.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        if self.label is not None:
            data["label"] = {"text": self.label}
        return data


# ============================================================
# DIAGRAM STATE (persisted unit)
# ============================================================

@dataclass(frozen=True)
class DiagramState:
    source_text: str = ""
    canonical_elements: tuple = ()          # tuple of CanonicalElement
    title: str = "Untitled Diagram"
    source_elements: tuple = ()             # raw shape list the elements were normalized from

    def to_dict(self) -> dict:
        return {
            "source_text": self.source_text,
            "canonical_elements": [e.to_dict() for e in self.canonical_elements],
            "title": self.title,
        }
