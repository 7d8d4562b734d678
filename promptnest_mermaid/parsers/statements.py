"""Statement splitting and diagram classification for mermaid sources."""
from __future__ import annotations

import re
from typing import List, Optional

from promptnest_mermaid.ir.schemas import (
    DiagramSource,
    FlowchartSource,
    LayoutDirection,
    SequenceSource,
    UnrecognizedSource,
)
from promptnest_mermaid.parsers.flowchart import EDGE_OPERATOR_RE


COMMENT_MARKER = "%%"

_SEQUENCE_HEADER_RE = re.compile(r"^sequenceDiagram\b", re.IGNORECASE)
_FLOWCHART_HEADER_RE = re.compile(r"^(?:flowchart|graph)\b(?:\s+([A-Za-z]{2})\b)?", re.IGNORECASE)

# Diagram types mermaid knows about that this engine does not draw.
_OTHER_DIAGRAM_HEADER_RE = re.compile(
    r"^(?:classDiagram|stateDiagram|erDiagram|gantt|pie|journey|gitGraph|mindmap|timeline"
    r"|quadrantChart|requirementDiagram|C4\w+|sankey|xychart|block|packet|kanban|architecture|zenuml)\b",
    re.IGNORECASE,
)


def split_statements(source: Optional[str]) -> Optional[List[str]]:
    """Split raw diagram text into trimmed, comment-free statements.

    Returns ``None`` when the source is empty or whitespace only.
    """
    text = (source or "").strip()
    if not text:
        return None
    statements: List[str] = []
    for line in text.splitlines():
        for piece in line.split(";"):
            piece = piece.strip()
            if not piece or piece.startswith(COMMENT_MARKER):
                continue
            statements.append(piece)
    return statements


def classify_diagram(statements: List[str]) -> DiagramSource:
    if not statements:
        return UnrecognizedSource()

    header = statements[0]
    if _SEQUENCE_HEADER_RE.match(header):
        return SequenceSource(statements=statements[1:])

    flow = _FLOWCHART_HEADER_RE.match(header)
    if flow:
        return FlowchartSource(statements=statements[1:], direction=LayoutDirection.parse(flow.group(1)))

    if _OTHER_DIAGRAM_HEADER_RE.match(header) and not EDGE_OPERATOR_RE.search(header):
        return UnrecognizedSource()

    # Headerless input that still reads like a flowchart.
    if any(EDGE_OPERATOR_RE.search(statement) for statement in statements):
        return FlowchartSource(statements=list(statements), direction=LayoutDirection.TD)
    return UnrecognizedSource()
