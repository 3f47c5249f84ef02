"""
Error taxonomy for the diagram studio.

Every error carries a stable machine-readable ``code`` next to the
human-readable message so the API layer can report both.
"""


class StudioError(ValueError):
    """Base class for recoverable studio errors."""

    code = "STUDIO_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class RenderError(StudioError):
    """Source text could not be rendered; message is already classified."""

    code = "RENDER_ERROR"


class BackendError(StudioError):
    """The rendering service rejected the request or was unreachable."""

    code = "BACKEND_ERROR"


class PatchNoMatch(StudioError):
    """No delimited occurrence of the node label exists in the source."""

    code = "PATCH_NO_MATCH"


class SchemaError(StudioError):
    """Shape list input is not a parseable list of objects."""

    code = "SCHEMA_ERROR"


class ConversionError(StudioError):
    """Text to scene-element conversion failed."""

    code = "CONVERSION_ERROR"


class GenerationError(StudioError):
    """The generation service failed to produce a diagram."""

    code = "GENERATION_ERROR"
