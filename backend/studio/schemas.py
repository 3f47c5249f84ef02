from pydantic import BaseModel
from typing import Optional, Dict, Any, List


class RenderRequest(BaseModel):
    source: str
    theme: Optional[str] = None  # dark | default | forest | neutral


class PointRequest(BaseModel):
    """A pointer position in screen coordinates"""
    x: float
    y: float


class CommitRequest(BaseModel):
    text: Optional[str] = None  # Falls back to the session draft


class InjectRequest(BaseModel):
    kind: str  # rectangle | circle | decision | connector | icon


class PanRequest(BaseModel):
    dx: float
    dy: float


class ZoomRequest(BaseModel):
    delta: Optional[float] = None      # Explicit scale change
    wheel_delta_y: Optional[float] = None  # Raw wheel delta, overrides delta
    pivot: Optional[PointRequest] = None


class ModeRequest(BaseModel):
    pan_mode: Optional[bool] = None
    dark_mode: Optional[bool] = None


class NormalizeRequest(BaseModel):
    """Shape list either as parsed JSON or as raw text (e.g. a pasted file)"""
    elements: Optional[List[Any]] = None
    raw: Optional[str] = None
    title: Optional[str] = None


class GenerateRequest(BaseModel):
    prompt: str
    type: str = "textual"  # textual | visual
    model: Optional[str] = None


class HistorySelectRequest(BaseModel):
    id: str
