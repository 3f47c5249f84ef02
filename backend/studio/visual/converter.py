from typing import List

from studio.errors import ConversionError
from studio.visual.scene_schema import CanonicalElement, RenderedScene, SceneEdge, SceneNode


# Rendered node outline -> scene-library element type
SHAPE_TO_ELEMENT = {
    "rect": "rectangle",
    "path": "rectangle",
    "circle": "ellipse",
    "diamond": "diamond",
}

CONVERTED_STROKE = "#000000"


def _node_element(node: SceneNode) -> CanonicalElement:
    return CanonicalElement(
        id=f"node-{node.id}",
        type=SHAPE_TO_ELEMENT.get(node.shape, "rectangle"),
        x=node.x,
        y=node.y,
        width=node.width,
        height=node.height,
        stroke_color=CONVERTED_STROKE,
        label=node.label or None,
    )


def _edge_element(edge: SceneEdge, index: int) -> CanonicalElement:
    start = edge.points[0]
    points = [[p.x - start.x, p.y - start.y] for p in edge.points]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return CanonicalElement(
        id=f"edge-{index}",
        type="arrow",
        x=start.x,
        y=start.y,
        width=max(xs) - min(xs),
        height=max(ys) - min(ys),
        stroke_color=CONVERTED_STROKE,
        points=points,
    )


def scene_to_elements(scene: RenderedScene) -> List[CanonicalElement]:
    """
    Convert a rendered scene into scene-library elements.

    Nodes become shapes carrying their label, edges become start-anchored
    arrows. Strokes come out black; the dark-theme patch fixes them up.
    """
    if scene is None or scene.empty:
        raise ConversionError("There is no rendered diagram to convert")
    if not scene.nodes:
        raise ConversionError("The rendered diagram has no nodes to convert")

    elements = [_node_element(node) for node in scene.nodes]
    for index, edge in enumerate(scene.edges, start=1):
        if len(edge.points) >= 2:
            elements.append(_edge_element(edge, index))

    print(f"[CONVERT] {len(scene.nodes)} nodes, {len(elements) - len(scene.nodes)} arrows")
    return elements
