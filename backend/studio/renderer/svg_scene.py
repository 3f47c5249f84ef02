"""
Reads the geometry of a rendered Mermaid SVG into a RenderedScene.

Only what hit-testing and conversion need is extracted:
- node groups (<g class="node ...">) with their label and bounding box
- edge paths with their point lists
Positions accumulate every translate(...) on the way down the tree.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional, Tuple

from studio.errors import RenderError
from studio.viewport.transform import Point
from studio.visual.scene_schema import RenderedScene, SceneEdge, SceneNode


_TRANSLATE_RE = re.compile(
    r"translate\(\s*(-?[\d.]+(?:e-?\d+)?)(?:[\s,]+(-?[\d.]+(?:e-?\d+)?))?\s*\)",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(r"-?\d*\.?\d+(?:e-?\d+)?", re.IGNORECASE)
_NODE_ID_RE = re.compile(r"^flowchart-(.+)-\d+$")

_SHAPE_TAGS = ("rect", "polygon", "circle", "ellipse", "path")
_LABEL_TAGS = ("span", "text", "p")

Box = Tuple[float, float, float, float]     # x, y, width, height


def _local(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _classes(elem: ET.Element) -> List[str]:
    return (elem.get("class") or "").split()


def _float(value: Optional[str], default: float = 0.0) -> float:
    if value is None:
        return default
    match = _NUMBER_RE.search(value)
    return float(match.group(0)) if match else default


def _translate(elem: ET.Element) -> Tuple[float, float]:
    match = _TRANSLATE_RE.search(elem.get("transform") or "")
    if not match:
        return 0.0, 0.0
    return float(match.group(1)), float(match.group(2) or 0.0)


def _pairs(numbers: List[float]) -> List[Tuple[float, float]]:
    return list(zip(numbers[0::2], numbers[1::2]))


def _path_points(d: str) -> List[Tuple[float, float]]:
    return _pairs([float(n) for n in _NUMBER_RE.findall(d or "")])


def _bbox(points: List[Tuple[float, float]]) -> Optional[Box]:
    if not points:
        return None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys)


def _shape_box(elem: ET.Element) -> Optional[Box]:
    tag = _local(elem.tag)
    dx, dy = _translate(elem)

    if tag == "rect":
        box = (
            _float(elem.get("x")),
            _float(elem.get("y")),
            _float(elem.get("width")),
            _float(elem.get("height")),
        )
    elif tag == "circle":
        r = _float(elem.get("r"))
        box = (_float(elem.get("cx")) - r, _float(elem.get("cy")) - r, 2 * r, 2 * r)
    elif tag == "ellipse":
        rx = _float(elem.get("rx"))
        ry = _float(elem.get("ry"))
        box = (_float(elem.get("cx")) - rx, _float(elem.get("cy")) - ry, 2 * rx, 2 * ry)
    elif tag == "polygon":
        numbers = [float(n) for n in _NUMBER_RE.findall(elem.get("points") or "")]
        box = _bbox(_pairs(numbers))
    elif tag == "path":
        box = _bbox(_path_points(elem.get("d")))
    else:
        box = None

    if box is None:
        return None
    x, y, w, h = box
    return x + dx, y + dy, w, h


def _shape_kind(elem: ET.Element) -> str:
    tag = _local(elem.tag)
    if tag == "polygon":
        return "diamond"
    if tag in ("circle", "ellipse"):
        return "circle"
    return tag


def _node_id(elem: ET.Element) -> str:
    if elem.get("data-id"):
        return elem.get("data-id")
    raw = elem.get("id") or ""
    match = _NODE_ID_RE.match(raw)
    return match.group(1) if match else raw


def _clean_text(parts: Iterator[str]) -> str:
    return re.sub(r"\s+", " ", "".join(parts)).strip()


def _node_label(elem: ET.Element) -> str:
    for child in elem.iter():
        if _local(child.tag) in _LABEL_TAGS:
            text = _clean_text(child.itertext())
            if text:
                return text
    return _clean_text(elem.itertext())


def _node_shape(elem: ET.Element) -> Optional[ET.Element]:
    # The outline is a direct child; label groups carry their own rects.
    for child in elem:
        if _local(child.tag) in _SHAPE_TAGS:
            return child
    for child in elem.iter():
        if child is not elem and _local(child.tag) in _SHAPE_TAGS:
            return child
    return None


def _is_edge_path(elem: ET.Element, parent_classes: List[str]) -> bool:
    if _local(elem.tag) != "path":
        return False
    classes = _classes(elem)
    return "flowchart-link" in classes or "edgePaths" in parent_classes


def _canvas_size(root: ET.Element) -> Tuple[float, float]:
    view_box = root.get("viewBox")
    if view_box:
        numbers = [float(n) for n in _NUMBER_RE.findall(view_box)]
        if len(numbers) == 4:
            return numbers[2], numbers[3]
    return _float(root.get("width")), _float(root.get("height"))


def parse_scene(svg: str) -> RenderedScene:
    """
    Parse rendered SVG text into a RenderedScene.

    Raises RenderError if the text is not well-formed SVG.
    """
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as exc:
        raise RenderError(f"Renderer returned unreadable SVG: {exc}") from exc

    nodes: List[SceneNode] = []
    edges: List[SceneEdge] = []

    def _walk(elem: ET.Element, ox: float, oy: float, parent_classes: List[str]) -> None:
        for child in elem:
            tag = _local(child.tag)
            if not tag:
                continue

            classes = _classes(child)

            if tag == "g" and "node" in classes:
                tx, ty = _translate(child)
                shape = _node_shape(child)
                box = _shape_box(shape) if shape is not None else None
                if box is None:
                    continue
                x, y, w, h = box
                nodes.append(
                    SceneNode(
                        id=_node_id(child),
                        label=_node_label(child),
                        x=ox + tx + x,
                        y=oy + ty + y,
                        width=w,
                        height=h,
                        shape=_shape_kind(shape),
                    )
                )
                continue

            if _is_edge_path(child, parent_classes):
                tx, ty = _translate(child)
                points = [
                    Point(ox + tx + px, oy + ty + py)
                    for px, py in _path_points(child.get("d"))
                ]
                edges.append(SceneEdge(id=child.get("id") or f"edge{len(edges) + 1}", points=points))
                continue

            if tag == "g":
                tx, ty = _translate(child)
                _walk(child, ox + tx, oy + ty, classes)

    _walk(root, 0.0, 0.0, [])

    width, height = _canvas_size(root)
    return RenderedScene(svg=svg, nodes=nodes, edges=edges, width=width, height=height)
