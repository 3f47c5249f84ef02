"""
Viewport transform: coordinate mapping, zoom clamping and pivot behaviour.
Run with: pytest backend/test_transform.py
"""

import pytest

from studio.viewport import MAX_SCALE, MIN_SCALE, Point, Rect, TransformManager


def _approx_point(p: Point):
    return (pytest.approx(p.x), pytest.approx(p.y))


def test_identity_mapping():
    tm = TransformManager()
    assert tm.screen_to_scene(Point(12, 34)) == Point(12, 34)
    assert tm.percent == 100


def _panned_and_zoomed(scale: float) -> TransformManager:
    tm = TransformManager()
    tm.pan_by(30, -20)
    tm.zoom_by(scale - 1, Point(50, 60))
    tm.pan_by(-5, 8)
    assert tm.scale == pytest.approx(scale)
    return tm


POINTS = (Point(0, 0), Point(123.5, 77), Point(-40, 900))


@pytest.mark.parametrize("scale", [MIN_SCALE, 0.7, 1.0, 2.5, MAX_SCALE])
def test_screen_scene_screen_round_trip(scale):
    tm = _panned_and_zoomed(scale)

    for p in POINTS:
        back = tm.scene_to_screen(tm.screen_to_scene(p))
        assert (back.x, back.y) == _approx_point(p)


@pytest.mark.parametrize("scale", [MIN_SCALE, 0.7, 1.0, 2.5, MAX_SCALE])
def test_scene_screen_scene_round_trip(scale):
    tm = _panned_and_zoomed(scale)

    for p in POINTS:
        back = tm.screen_to_scene(tm.scene_to_screen(p))
        assert (back.x, back.y) == _approx_point(p)


def test_zoom_is_clamped():
    tm = TransformManager()
    tm.zoom_by(100)
    assert tm.scale == MAX_SCALE

    tm.zoom_by(-100)
    assert tm.scale == MIN_SCALE


def test_zoom_at_limit_leaves_translation_alone():
    tm = TransformManager()
    tm.zoom_by(100, Point(10, 10))
    before = tm.translation

    tm.zoom_by(1, Point(300, 200))

    assert tm.scale == MAX_SCALE
    assert tm.translation == before


def test_zoom_keeps_pivot_scene_point_fixed():
    tm = TransformManager()
    tm.pan_by(40, 25)
    pivot = Point(200, 150)
    before = tm.screen_to_scene(pivot)

    tm.zoom_by(0.5, pivot)
    after = tm.screen_to_scene(pivot)

    assert tm.scale == pytest.approx(1.5)
    assert (after.x, after.y) == _approx_point(before)


def test_zoom_without_pivot_uses_anchor():
    anchor = Point(400, 300)
    tm = TransformManager(anchor=anchor)
    before = tm.screen_to_scene(anchor)

    tm.zoom_in()
    tm.zoom_in()

    after = tm.screen_to_scene(anchor)
    assert tm.percent == 120
    assert (after.x, after.y) == _approx_point(before)


def test_wheel_up_zooms_in():
    tm = TransformManager()
    tm.zoom_from_wheel(-100)
    assert tm.scale == pytest.approx(1.1)

    tm.zoom_from_wheel(200)
    assert tm.scale == pytest.approx(0.9)


def test_rect_mapping_scales_size():
    tm = TransformManager()
    tm.zoom_by(1.0)
    tm.pan_by(10, 20)

    rect = tm.rect_to_screen(Rect(5, 5, 50, 20))
    assert rect == Rect(20, 30, 100, 40)
    assert tm.rect_to_scene(rect) == Rect(5, 5, 50, 20)


def test_reset_view():
    tm = TransformManager()
    tm.pan_by(100, 100)
    tm.zoom_by(2)

    tm.reset_view()

    assert tm.scale == 1.0
    assert tm.translation == Point(0, 0)
    assert tm.snapshot() == {"scale": 1.0, "translation": {"x": 0.0, "y": 0.0}, "percent": 100}
