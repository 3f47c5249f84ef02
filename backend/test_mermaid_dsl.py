"""
Mermaid source helpers: orientation, shape injection, label patching.
Run with: pytest backend/test_mermaid_dsl.py
"""

import re

import pytest

from studio.dsl.mermaid import (
    clean_generated_source,
    detect_direction,
    inject_syntax,
    patch_label,
    random_node_id,
    shape_syntax,
    toggle_orientation,
)


# ------------------------------------------------------------
# Orientation
# ------------------------------------------------------------

def test_toggle_flips_td_and_lr():
    source = "graph TD\n    A[Start] --> B[End]"

    flipped, direction = toggle_orientation(source)
    assert direction == "LR"
    assert flipped == "graph LR\n    A[Start] --> B[End]"

    back, direction = toggle_orientation(flipped, direction)
    assert direction == "TD"
    assert back == source


def test_toggle_prepends_header_when_missing():
    source, direction = toggle_orientation("A --> B")
    assert direction == "LR"
    assert source == "graph LR\nA --> B"


def test_toggle_fills_bare_header():
    source, direction = toggle_orientation("flowchart\n  A --> B")
    assert source == "flowchart LR\n  A --> B"


def test_other_directions_flip_to_td():
    source, direction = toggle_orientation("flowchart BT\n  A --> B", current="LR")
    assert direction == "TD"
    assert detect_direction(source) == "TD"


def test_header_wins_over_stored_direction():
    _, direction = toggle_orientation("graph LR\n  A --> B", current="TD")
    assert direction == "TD"


def test_toggle_only_touches_header():
    source = "graph TD\n  A[graph TD] --> B"
    flipped, _ = toggle_orientation(source)
    assert flipped == "graph LR\n  A[graph TD] --> B"


# ------------------------------------------------------------
# Shape injection
# ------------------------------------------------------------

@pytest.mark.parametrize(
    "kind,expected",
    [
        ("rectangle", "N1A2[Rectangle]"),
        ("circle", "N1A2((Circle)) "),
        ("decision", "N1A2{Decision}"),
        ("connector", " --> "),
        ("icon", "N1A2[<i class='fa fa-user'></i> User]"),
    ],
)
def test_shape_syntax(kind, expected):
    assert shape_syntax(kind, "N1A2") == expected


def test_random_ids_are_four_base36_characters():
    for _ in range(20):
        assert re.fullmatch(r"[0-9A-Z]{4}", random_node_id())


def test_unknown_shape_kind():
    with pytest.raises(ValueError):
        shape_syntax("hexagon")


def test_inject_appends_on_new_line():
    assert inject_syntax("graph TD\n  A", "B[Rectangle]") == "graph TD\n  A\nB[Rectangle]"


# ------------------------------------------------------------
# Label patching
# ------------------------------------------------------------

def test_patch_inside_each_delimiter():
    assert patch_label("A[Old]", "Old", "New") == ("A[New]", True)
    assert patch_label("A(Old)", "Old", "New") == ("A(New)", True)
    assert patch_label("A{Old}", "Old", "New") == ("A{New}", True)
    assert patch_label("A>Old]", "Old", "New") == ("A>New]", True)
    assert patch_label("A[/Old/]", "Old", "New") == ("A[/New/]", True)


def test_patch_keeps_quotes_and_drops_padding():
    assert patch_label('A["Old Name"]', "Old Name", "New") == ('A["New"]', True)
    assert patch_label("A( Start )", "Start", "Go") == ("A(Go)", True)


def test_patch_escapes_regex_characters():
    source = "graph TD\n  B{Is it working?} --> C[a+b]"
    assert patch_label(source, "Is it working?", "Done?") == (
        "graph TD\n  B{Done?} --> C[a+b]",
        True,
    )
    assert patch_label(source, "a+b", "sum")[0].endswith("C[sum]")


def test_patch_ignores_undelimited_text():
    source = "graph TD\n  A -- Yes --> B[Yes]"
    assert patch_label(source, "Yes", "No") == ("graph TD\n  A -- Yes --> B[No]", True)


def test_patch_without_match():
    assert patch_label("A[Start]", "Missing", "X") == ("A[Start]", False)
    assert patch_label("A[Start]", "   ", "X") == ("A[Start]", False)


def test_clean_generated_source():
    assert clean_generated_source("```mermaid\ngraph TD\nA-->B\n```") == "graph TD\nA-->B"
    assert clean_generated_source(None) == ""


def test_same_label_on_two_nodes_rewrites_the_first():
    assert patch_label("A[Box]\nB[Box]", "Box", "Square") == ("A[Square]\nB[Box]", True)
