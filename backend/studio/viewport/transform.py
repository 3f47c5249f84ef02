"""
Viewport transform manager.

Owns the pan/zoom state between screen space and scene space:

    scene  = (screen - translation) / scale
    screen = scene * scale + translation
"""

from dataclasses import dataclass, field
from typing import Optional


MIN_SCALE = 0.1
MAX_SCALE = 5.0
ZOOM_STEP = 0.1
WHEEL_FACTOR = 0.001


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains(self, point: Point) -> bool:
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class Viewport:
    scale: float = 1.0
    translation: Point = field(default_factory=Point)

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "translation": {"x": self.translation.x, "y": self.translation.y},
        }


def clamp_scale(scale: float) -> float:
    return max(MIN_SCALE, min(MAX_SCALE, scale))


class TransformManager:
    """
    Pan/zoom state for one canvas.

    ``anchor`` is the screen point zooms keep fixed when no pivot is
    given, normally the centre of the canvas. It defaults to the origin.

    Usage:
        tm = TransformManager()
        tm.zoom_by(0.5, pivot=Point(200, 100))
        scene_point = tm.screen_to_scene(Point(200, 100))
    """

    def __init__(self, anchor: Optional[Point] = None):
        self.viewport = Viewport()
        self.anchor = anchor or Point()

    @property
    def scale(self) -> float:
        return self.viewport.scale

    @property
    def translation(self) -> Point:
        return self.viewport.translation

    @property
    def percent(self) -> int:
        """Zoom level as shown on the zoom control."""
        return round(self.viewport.scale * 100)

    # ------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------

    def pan_by(self, dx: float, dy: float) -> Viewport:
        t = self.viewport.translation
        self.viewport.translation = Point(t.x + dx, t.y + dy)
        return self.viewport

    def zoom_by(self, delta: float, pivot: Optional[Point] = None) -> Viewport:
        """
        Change scale by ``delta``, clamped to [MIN_SCALE, MAX_SCALE].

        The scene point under ``pivot`` (or under the anchor) stays under
        it after the zoom.
        """
        pivot = pivot or self.anchor
        old_scale = self.viewport.scale
        new_scale = clamp_scale(old_scale + delta)
        if new_scale == old_scale:
            return self.viewport

        fixed = self.screen_to_scene(pivot)
        self.viewport.scale = new_scale
        self.viewport.translation = Point(
            pivot.x - fixed.x * new_scale,
            pivot.y - fixed.y * new_scale,
        )
        return self.viewport

    def zoom_in(self, pivot: Optional[Point] = None) -> Viewport:
        return self.zoom_by(ZOOM_STEP, pivot)

    def zoom_out(self, pivot: Optional[Point] = None) -> Viewport:
        return self.zoom_by(-ZOOM_STEP, pivot)

    def zoom_from_wheel(self, delta_y: float, pivot: Optional[Point] = None) -> Viewport:
        # Wheel up (negative delta) zooms in.
        return self.zoom_by(-delta_y * WHEEL_FACTOR, pivot)

    def reset_view(self) -> Viewport:
        self.viewport = Viewport()
        return self.viewport

    # ------------------------------------------------------------
    # Coordinate mapping
    # ------------------------------------------------------------

    def screen_to_scene(self, point: Point) -> Point:
        s = self.viewport.scale
        t = self.viewport.translation
        return Point((point.x - t.x) / s, (point.y - t.y) / s)

    def scene_to_screen(self, point: Point) -> Point:
        s = self.viewport.scale
        t = self.viewport.translation
        return Point(point.x * s + t.x, point.y * s + t.y)

    def rect_to_screen(self, rect: Rect) -> Rect:
        origin = self.scene_to_screen(Point(rect.x, rect.y))
        s = self.viewport.scale
        return Rect(origin.x, origin.y, rect.width * s, rect.height * s)

    def rect_to_scene(self, rect: Rect) -> Rect:
        origin = self.screen_to_scene(Point(rect.x, rect.y))
        s = self.viewport.scale
        return Rect(origin.x, origin.y, rect.width / s, rect.height / s)

    def snapshot(self) -> dict:
        data = self.viewport.to_dict()
        data["percent"] = self.percent
        return data
