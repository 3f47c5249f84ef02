from studio.editing.patch_engine import (
    EditSession,
    NodePatchEngine,
    PatchOutcome,
    apply_patch,
)

__all__ = [
    "EditSession",
    "NodePatchEngine",
    "PatchOutcome",
    "apply_patch",
]
