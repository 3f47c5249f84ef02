import json
import re
from typing import Any, List

from studio.errors import SchemaError


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences a model may wrap its output in."""
    text = re.sub(r"^```[a-zA-Z]*\s*", "", text.strip())
    text = re.sub(r"\s*```$", "", text.strip())
    return text.strip()


def extract_json_array(text: str) -> List[Any]:
    """
    Parse a JSON array of shape objects from generation-service output.

    Strategy:
    1. Strip markdown fences, try direct json.loads
    2. Fallback to extracting the first [...] block
    3. A scene file ({"elements": [...]}) yields its element list

    Raises SchemaError when no list of objects can be recovered.
    """
    if not text or not isinstance(text, str):
        raise SchemaError("invalid data structure")

    cleaned = strip_code_fences(text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\[.*\]", cleaned, re.DOTALL)
        if not match:
            raise SchemaError("invalid data structure")
        try:
            data = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            raise SchemaError("invalid data structure") from e

    if isinstance(data, dict) and isinstance(data.get("elements"), list):
        data = data["elements"]

    if not isinstance(data, list):
        raise SchemaError("invalid data structure")

    if not all(isinstance(item, dict) for item in data):
        raise SchemaError("invalid data structure")

    return data
