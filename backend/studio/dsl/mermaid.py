import random
import re
import string
from typing import Optional, Tuple


DIRECTIONS = ("TD", "LR", "TB", "BT", "RL")

# First line style header: "graph TD" / "flowchart LR"
DIRECTION_RE = re.compile(r"^(graph|flowchart)\s+(TD|LR|TB|BT|RL)\b", re.MULTILINE)
HEADER_ONLY_RE = re.compile(r"^(graph|flowchart)[ \t]*$", re.MULTILINE)
HEADER_ANY_RE = re.compile(r"^(graph|flowchart)[ \t]+[A-Za-z]+", re.MULTILINE)

# Shape delimiters a node label can sit between: [..] (..) {..} >..] /../ \..\ |..|
LABEL_OPENERS = r"[\[\(\{>/\\|]"
LABEL_CLOSERS = r"[\]\)\}/\\|]"

SHAPE_SNIPPETS = {
    "rectangle": "{id}[Rectangle]",
    "circle": "{id}((Circle)) ",
    "decision": "{id}{{Decision}}",
    "connector": " --> ",
    "icon": "{id}[<i class='fa fa-user'></i> User]",
}

TEMPLATES = [
    {
        "name": "Flowchart",
        "type": "textual",
        "code": "graph TD\n  A[Start] --> B{Decision}\n  B -- Yes --> C[Process]\n  B -- No --> D[End]",
    },
    {
        "name": "Sequence",
        "type": "textual",
        "code": "sequenceDiagram\n  Alice->>John: Hello John, how are you?\n  John-->>Alice: Great!",
    },
    {
        "name": "Class",
        "type": "textual",
        "code": (
            "classDiagram\n  class Animal{\n    +String name\n    +move()\n  }\n"
            "  class Dog{\n    +bark()\n  }\n  Animal <|-- Dog"
        ),
    },
]

DEFAULT_SOURCE = """graph TD
    A[Start] --> B{Is it working?}
    B -- Yes --> C[Great!]
    B -- No --> D[Debug]"""


# ------------------------------------------------------------
# Orientation
# ------------------------------------------------------------

def detect_direction(source: str) -> Optional[str]:
    match = DIRECTION_RE.search(source or "")
    return match.group(2) if match else None


def next_direction(current: str) -> str:
    """TD and TB flip to LR; every other direction flips back to TD."""
    return "LR" if current in ("TD", "TB") else "TD"


def set_direction(source: str, direction: str) -> str:
    """
    Rewrite the diagram direction keyword.

    Only the header is touched; node and edge lines stay as they are.
    Source without a graph/flowchart header gets one prepended.
    """
    new_source, count = DIRECTION_RE.subn(lambda m: f"{m.group(1)} {direction}", source, count=1)
    if count:
        return new_source

    new_source, count = HEADER_ONLY_RE.subn(lambda m: f"{m.group(1)} {direction}", source, count=1)
    if count:
        return new_source

    new_source, count = HEADER_ANY_RE.subn(lambda m: f"{m.group(1)} {direction}", source, count=1)
    if count:
        return new_source

    return f"graph {direction}\n{source}"


def toggle_orientation(source: str, current: str = "TD") -> Tuple[str, str]:
    """Flip the direction; the header in the source wins over ``current``."""
    direction = next_direction(detect_direction(source) or current)
    return set_direction(source, direction), direction


# ------------------------------------------------------------
# Shape injection
# ------------------------------------------------------------

def random_node_id(length: int = 4) -> str:
    alphabet = string.digits + string.ascii_uppercase
    return "".join(random.choice(alphabet) for _ in range(length))


def shape_syntax(kind: str, node_id: Optional[str] = None) -> str:
    if kind not in SHAPE_SNIPPETS:
        raise ValueError(f"Unknown shape kind: {kind}")
    return SHAPE_SNIPPETS[kind].format(id=node_id or random_node_id())


def inject_syntax(source: str, syntax: str) -> str:
    return f"{source}\n{syntax}"


# ------------------------------------------------------------
# Label patching
# ------------------------------------------------------------

def label_pattern(label: str) -> re.Pattern:
    """
    Opening delimiter, the label (literal, optionally quoted, padded by
    whitespace), closing delimiter.
    """
    escaped = re.escape(label.strip())
    return re.compile(
        rf'({LABEL_OPENERS}"?)(\s*{escaped}\s*)("?{LABEL_CLOSERS})'
    )


def patch_label(source: str, old_label: str, new_label: str) -> Tuple[str, bool]:
    """
    Replace the first delimited occurrence of ``old_label``.

    Nodes sharing a label are not told apart: the first one in the source
    is rewritten. Returns (source, matched).
    """
    if not old_label.strip():
        return source, False

    new_source, count = label_pattern(old_label).subn(
        lambda m: f"{m.group(1)}{new_label}{m.group(3)}", source, count=1
    )
    return new_source, bool(count)


# ------------------------------------------------------------
# Generated source cleanup
# ------------------------------------------------------------

def clean_generated_source(text: str) -> str:
    """Drop markdown fences the model may have wrapped its code in."""
    return (text or "").replace("```mermaid", "").replace("```", "").strip()
