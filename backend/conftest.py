"""
Shared fixtures for the studio tests.

FakeBackend stands in for the rendering service and returns Mermaid-shaped
SVG, so nothing here touches the network.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from studio.renderer import RendererAdapter
from studio.sync.controller import SyncController


# Two nodes: A "Box" (rect) and B "Other" (diamond), one edge A -> B.
SAMPLE_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 300" width="100%">
  <g>
    <g class="root">
      <g class="edgePaths">
        <path d="M100,50L100,140" id="L-A-B-0" class="edge-thickness-normal flowchart-link"/>
      </g>
      <g class="edgeLabels"><g class="edgeLabel"><g class="label"><text></text></g></g></g>
      <g class="nodes">
        <g class="node default" id="flowchart-A-0" transform="translate(100, 30)">
          <rect class="basic label-container" x="-40" y="-20" width="80" height="40"/>
          <g class="label" transform="translate(-20, -10)">
            <rect/>
            <foreignObject width="40" height="20">
              <div xmlns="http://www.w3.org/1999/xhtml"><span class="nodeLabel">Box</span></div>
            </foreignObject>
          </g>
        </g>
        <g class="node default" id="flowchart-B-1" transform="translate(100, 170)">
          <polygon points="0,-30 30,0 0,30 -30,0" class="label-container"/>
          <g class="label"><text><tspan>Other</tspan></text></g>
        </g>
      </g>
    </g>
  </g>
</svg>"""

SAMPLE_SOURCE = "graph TD\n    A[Box] --> B{Other}"

# Single node labelled "Old", used to tell stale renders apart.
OLD_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <g class="nodes">
    <g class="node default" id="flowchart-Z-0" transform="translate(50, 50)">
      <rect x="-30" y="-15" width="60" height="30"/>
      <g class="label"><text>Old</text></g>
    </g>
  </g>
</svg>"""


class FakeBackend:
    """
    Returns canned SVG. Sources containing a key of ``failures`` raise
    with the mapped message; sources containing a key of ``gates`` wait
    on that event before answering.
    """

    def __init__(self, svg: str = SAMPLE_SVG):
        self.svg = svg
        self.by_marker: Dict[str, str] = {}
        self.failures: Dict[str, str] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.calls: List[Tuple[str, str]] = []

    async def render_svg(self, source: str, theme: str = "default") -> str:
        self.calls.append((source, theme))

        for marker, event in self.gates.items():
            if marker in source:
                await event.wait()

        for marker, message in self.failures.items():
            if marker in source:
                raise RuntimeError(message)

        for marker, svg in self.by_marker.items():
            if marker in source:
                return svg
        return self.svg


class FakeGenerator:
    """Canned generation output keyed by diagram type value."""

    def __init__(self, outputs: Optional[Dict[str, str]] = None, error: Optional[Exception] = None):
        self.outputs = outputs or {}
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt, diagram_type, model=None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.outputs[diagram_type.value]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def controller(backend: FakeBackend) -> SyncController:
    return SyncController(RendererAdapter(backend), source=SAMPLE_SOURCE)
