# Viewport module
# Pan/zoom state and screen <-> scene coordinate mapping

from studio.viewport.transform import (
    MAX_SCALE,
    MIN_SCALE,
    Point,
    Rect,
    TransformManager,
    Viewport,
)

__all__ = [
    "MAX_SCALE",
    "MIN_SCALE",
    "Point",
    "Rect",
    "TransformManager",
    "Viewport",
]
