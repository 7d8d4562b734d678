"""Mermaid source to SVG, without any external renderer.

``compile_diagram`` returns a ``Diagram`` or ``UNRENDERABLE``; callers that only
need markup use ``render_mermaid_svg`` and fall back to showing the raw source
as a code block when it returns ``None``.
"""
from __future__ import annotations

import logging
from typing import Optional

from promptnest_mermaid.ir.schemas import (
    UNRENDERABLE,
    Diagram,
    DiagramResult,
    DiagramSource,
    FlowchartSource,
    SequenceSource,
)
from promptnest_mermaid.layout.grid import layout_flowchart
from promptnest_mermaid.layout.lifeline import layout_sequence
from promptnest_mermaid.parsers.flowchart import build_flow_graph
from promptnest_mermaid.parsers.sequence import build_sequence_graph
from promptnest_mermaid.parsers.statements import classify_diagram, split_statements
from promptnest_mermaid.renderers.svg_emitter import emit_flowchart_svg, emit_sequence_svg

logger = logging.getLogger(__name__)


def parse_diagram_source(source: Optional[str]) -> Optional[DiagramSource]:
    statements = split_statements(source)
    if statements is None:
        return None
    return classify_diagram(statements)


def _compile_flowchart(parsed: FlowchartSource) -> DiagramResult:
    graph = build_flow_graph(parsed.statements)
    if not graph.nodes:
        return UNRENDERABLE
    layout = layout_flowchart(graph, parsed.direction)
    return Diagram(
        kind="flowchart",
        width=layout.width,
        height=layout.height,
        svg_markup=emit_flowchart_svg(layout),
    )


def _compile_sequence(parsed: SequenceSource) -> DiagramResult:
    graph = build_sequence_graph(parsed.statements)
    if not graph.participants or not graph.messages:
        return UNRENDERABLE
    layout = layout_sequence(graph)
    return Diagram(
        kind="sequence",
        width=layout.width,
        height=layout.height,
        svg_markup=emit_sequence_svg(layout),
    )


def compile_diagram(source: Optional[str]) -> DiagramResult:
    """Compile mermaid flowchart/sequence source into a ``Diagram``.

    Never raises: empty, unsupported or broken input yields ``UNRENDERABLE``.
    """
    try:
        parsed = parse_diagram_source(source)
        if isinstance(parsed, FlowchartSource):
            return _compile_flowchart(parsed)
        if isinstance(parsed, SequenceSource):
            return _compile_sequence(parsed)
        return UNRENDERABLE
    except Exception:
        logger.debug("Mermaid compilation failed; falling back to source", exc_info=True)
        return UNRENDERABLE


def render_mermaid_svg(source: Optional[str]) -> Optional[str]:
    """Return SVG markup for ``source`` or ``None`` when it cannot be drawn."""
    result = compile_diagram(source)
    if isinstance(result, Diagram):
        return result.svg_markup
    return None
