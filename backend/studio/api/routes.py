import traceback
from typing import Optional

from fastapi import APIRouter, Depends, Response

from studio.api.serializers import error_payload, serialize
from studio.dsl.mermaid import SHAPE_SNIPPETS, TEMPLATES
from studio.inference.config import SUPPORTED_MODELS
from studio.inference.generator import DiagramGenerator
from studio.renderer import KrokiBackend, RendererAdapter
from studio.renderer.export import PNG_MEDIA_TYPE, SVG_MEDIA_TYPE
from studio.schemas import (
    CommitRequest,
    GenerateRequest,
    HistorySelectRequest,
    InjectRequest,
    ModeRequest,
    NormalizeRequest,
    PanRequest,
    PointRequest,
    RenderRequest,
    ZoomRequest,
)
from studio.sync.controller import SyncController
from studio.sync.state import DiagramType
from studio.viewport.transform import Point

router = APIRouter()

_controller: Optional[SyncController] = None


def get_controller() -> SyncController:
    """One studio session per process, built on first use."""
    global _controller
    if _controller is None:
        _controller = SyncController(
            RendererAdapter(KrokiBackend()),
            generator=DiagramGenerator(),
        )
    return _controller


def _render_response(controller: SyncController, result) -> dict:
    return {
        "status": "success" if result.ok else "error",
        "render": result.to_dict(),
        "state": controller.snapshot(),
    }


# ============================================================
# RENDERING
# ============================================================

@router.post("/render")
async def render(request: RenderRequest, controller: SyncController = Depends(get_controller)):
    try:
        result = await controller.set_source(request.source, theme=request.theme)
        return _render_response(controller, result)
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.post("/mode")
async def set_mode(request: ModeRequest, controller: SyncController = Depends(get_controller)):
    """Toggle pan mode and/or the global dark theme"""
    try:
        if request.pan_mode is not None:
            controller.set_pan_mode(request.pan_mode)
        if request.dark_mode is not None and request.dark_mode != controller.dark_mode:
            await controller.set_dark_mode(request.dark_mode)
        return {"status": "success", "state": controller.snapshot()}
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.post("/orientation/toggle")
async def toggle_orientation(controller: SyncController = Depends(get_controller)):
    try:
        result = await controller.toggle_orientation()
        return _render_response(controller, result)
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.post("/inject")
async def inject_shape(request: InjectRequest, controller: SyncController = Depends(get_controller)):
    if request.kind not in SHAPE_SNIPPETS:
        return {
            "status": "error",
            "code": "UNKNOWN_SHAPE",
            "message": f"Unknown shape '{request.kind}'. Use one of: {', '.join(SHAPE_SNIPPETS)}",
        }
    try:
        result = await controller.inject_shape(request.kind)
        return _render_response(controller, result)
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


# ============================================================
# IN-PLACE EDITING
# ============================================================

@router.post("/edit/locate")
def locate_node(request: PointRequest, controller: SyncController = Depends(get_controller)):
    session = controller.begin_edit(Point(request.x, request.y))
    if session is None:
        return {"status": "miss", "session": None, "state": controller.snapshot()}
    return {"status": "success", "session": session.to_dict(), "state": controller.snapshot()}


@router.post("/edit/commit")
async def commit_edit(request: CommitRequest, controller: SyncController = Depends(get_controller)):
    try:
        outcome = await controller.commit_edit(request.text)
        return {
            "status": "success" if not outcome.warnings else "warning",
            "changed": outcome.changed,
            "warnings": [str(w) for w in outcome.warnings],
            "state": controller.snapshot(),
        }
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.post("/edit/cancel")
def cancel_edit(controller: SyncController = Depends(get_controller)):
    controller.cancel_edit()
    return {"status": "success", "state": controller.snapshot()}


# ============================================================
# VIEWPORT
# ============================================================

@router.post("/viewport/pan")
def pan(request: PanRequest, controller: SyncController = Depends(get_controller)):
    controller.pan_by(request.dx, request.dy)
    return {"status": "success", "viewport": controller.transform.snapshot()}


@router.post("/viewport/zoom")
def zoom(request: ZoomRequest, controller: SyncController = Depends(get_controller)):
    pivot = Point(request.pivot.x, request.pivot.y) if request.pivot else None
    if request.wheel_delta_y is not None:
        controller.transform.zoom_from_wheel(request.wheel_delta_y, pivot)
    else:
        controller.zoom_by(request.delta or 0.0, pivot)
    return {
        "status": "success",
        "viewport": controller.transform.snapshot(),
        "overlay": serialize(controller.edit_overlay()),
    }


@router.post("/viewport/reset")
def reset_viewport(controller: SyncController = Depends(get_controller)):
    controller.reset_view()
    return {"status": "success", "viewport": controller.transform.snapshot()}


# ============================================================
# CANONICAL ELEMENTS
# ============================================================

@router.post("/elements/normalize")
def normalize_elements(request: NormalizeRequest, controller: SyncController = Depends(get_controller)):
    try:
        if request.raw is not None:
            result = controller.ingest_shape_json(request.raw, title=request.title)
        else:
            result = controller.apply_elements(request.elements or [], title=request.title)
        return {"status": "success", **result.to_dict()}
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.post("/convert")
async def convert_diagram(controller: SyncController = Depends(get_controller)):
    try:
        result = await controller.convert_to_elements()
        return {"status": "success", **result.to_dict(), "state": controller.snapshot()}
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


# ============================================================
# GENERATION & HISTORY
# ============================================================

@router.post("/generate")
async def generate_diagram(request: GenerateRequest, controller: SyncController = Depends(get_controller)):
    try:
        diagram_type = DiagramType(request.type)
        entry = await controller.generate(request.prompt, diagram_type, request.model)
        return {"status": "success", "entry": entry.to_dict(), "state": controller.snapshot()}
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.get("/history")
def list_history(controller: SyncController = Depends(get_controller)):
    return {"entries": controller.history.to_list()}


@router.post("/history/select")
async def select_history(request: HistorySelectRequest, controller: SyncController = Depends(get_controller)):
    entry = await controller.select_history(request.id)
    if entry is None:
        return {"status": "error", "code": "NOT_FOUND", "message": f"History entry '{request.id}' not found"}
    return {"status": "success", "entry": entry.to_dict(), "state": controller.snapshot()}


@router.get("/templates")
def list_templates():
    return {
        "templates": TEMPLATES,
        "models": SUPPORTED_MODELS,
        "shapes": list(SHAPE_SNIPPETS),
    }


@router.get("/state")
def get_state(controller: SyncController = Depends(get_controller)):
    return controller.snapshot()


# ============================================================
# EXPORT
# ============================================================

@router.get("/export/svg")
def export_svg(controller: SyncController = Depends(get_controller)):
    try:
        svg = controller.export_svg()
        return Response(
            svg,
            media_type=SVG_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="diagram.svg"'},
        )
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)


@router.get("/export/png")
def export_png(controller: SyncController = Depends(get_controller)):
    try:
        png = controller.export_png()
        return Response(
            png,
            media_type=PNG_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="diagram.png"'},
        )
    except Exception as e:
        traceback.print_exc()
        return error_payload(e)
