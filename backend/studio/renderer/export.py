from typing import Optional

from studio.errors import RenderError
from studio.visual.element_style import style_for
from studio.visual.scene_schema import RenderedScene


PNG_SCALE_FACTOR = 3
SVG_MEDIA_TYPE = "image/svg+xml"
PNG_MEDIA_TYPE = "image/png"


def export_svg(scene: Optional[RenderedScene]) -> str:
    """The rendered SVG, unchanged."""
    if scene is None or scene.empty:
        raise RenderError("Nothing to export")
    return scene.svg


def export_png(scene: Optional[RenderedScene], dark_mode: bool = True, scale: int = PNG_SCALE_FACTOR) -> bytes:
    """
    Rasterize the rendered SVG onto a theme-coloured background.

    Output is ``scale`` times the SVG's view box.
    """
    if scene is None or scene.empty:
        raise RenderError("Nothing to export")

    # cairosvg needs the native cairo library; load it only when exporting.
    import cairosvg

    kwargs = {"background_color": style_for(dark_mode)["export_background"]}
    if scene.width and scene.height:
        kwargs["output_width"] = int(scene.width * scale)
        kwargs["output_height"] = int(scene.height * scale)
    else:
        kwargs["scale"] = scale

    return cairosvg.svg2png(bytestring=scene.svg.encode("utf-8"), **kwargs)
