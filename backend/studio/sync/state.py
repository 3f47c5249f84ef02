import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from studio.config import HISTORY_LIMIT
from studio.visual.scene_schema import DiagramState


class DiagramType(Enum):
    TEXTUAL = "textual"     # Mermaid source text
    VISUAL = "visual"       # canonical whiteboard elements


class SyncState(Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    EDITING = "editing"
    ERROR = "error"


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    timestamp: int              # epoch milliseconds
    type: DiagramType
    preview: str
    state: DiagramState

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type.value,
            "preview": self.preview,
            "state": self.state.to_dict(),
        }


class History:
    """Newest-first list of generated states, capped at ``limit`` entries."""

    def __init__(self, limit: int = HISTORY_LIMIT):
        self.limit = limit
        self.entries: List[HistoryEntry] = []
        self._sequence = 0

    def record(self, state: DiagramState, diagram_type: DiagramType) -> HistoryEntry:
        now = int(time.time() * 1000)
        self._sequence += 1
        entry = HistoryEntry(
            id=f"{now}-{self._sequence}",
            timestamp=now,
            type=diagram_type,
            preview=state.title,
            state=state,
        )
        self.entries = [entry] + self.entries[: self.limit - 1]
        return entry

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def to_list(self) -> List[dict]:
        return [e.to_dict() for e in self.entries]
