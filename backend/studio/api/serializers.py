from enum import Enum
from typing import Any

from studio.errors import StudioError


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize(obj: Any):
    """
    Serialize studio objects into JSON-compatible structures.
    Objects with their own to_dict() win over attribute walking.
    """

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, (list, tuple)):
        return [serialize(item) for item in obj]

    if isinstance(obj, dict):
        return {k: serialize(v) for k, v in obj.items()}

    if hasattr(obj, "to_dict"):
        return serialize(obj.to_dict())

    if hasattr(obj, "__dict__"):
        return {
            key: serialize(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def error_payload(error: Exception) -> dict:
    """Error dict returned by routes instead of raising HTTP errors."""
    if isinstance(error, StudioError):
        return {"status": "error", **error.to_dict()}
    return {"status": "error", "code": "INTERNAL_ERROR", "message": str(error)}
