"""Serialize laid-out diagrams into self-contained SVG markup.

The output is meant to be dropped verbatim into an HTML preview, so every piece
of user text goes through ``escape_text`` and no scripts, style sheets or
foreign objects are ever emitted.
"""
from __future__ import annotations

import html
import re
from typing import Iterable, List, Optional, Tuple

from promptnest_mermaid.layout.geometry import Segment, trim_mermaid_label, wrap_label
from promptnest_mermaid.layout.grid import FlowLayout, PositionedNode
from promptnest_mermaid.layout.lifeline import PositionedMessage, PositionedParticipant, SequenceLayout


SVG_NS = "http://www.w3.org/2000/svg"
ARROW_MARKER_ID = "pn-mermaid-arrow"

FONT_FAMILY = "system-ui, -apple-system, Segoe UI, sans-serif"
FONT_SIZE = 13
LINE_HEIGHT = 15
BASELINE_SHIFT = 4

NODE_LABEL_CHARS = 18
NODE_LABEL_LINES = 3
PARTICIPANT_LABEL_CHARS = 18
MESSAGE_TEXT_OFFSET = 7

STROKE = "#475569"
NODE_FILL = "#f8fafc"
TEXT_FILL = "#0f172a"

_CORNER_RADIUS = {
    "square": 6,
    "round": 18,
    "circle": 28,
    "rhombus": 2,
}

Attrs = Iterable[Tuple[str, object]]


# Characters XML 1.0 does not allow anywhere in a document.
_XML_ILLEGAL_RE = re.compile(r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def escape_text(value: object) -> str:
    return html.escape(_XML_ILLEGAL_RE.sub("", str(value)), quote=True)


def format_number(value: float) -> str:
    rounded = round(float(value), 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")


def _attr_value(value: object) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return escape_text(value)


def _render_attrs(attrs: Attrs) -> str:
    return " ".join(f'{name}="{_attr_value(value)}"' for name, value in attrs)


def _element(tag: str, attrs: Attrs, children: Optional[str] = None) -> str:
    rendered = _render_attrs(attrs)
    opening = f"<{tag} {rendered}" if rendered else f"<{tag}"
    if children is None:
        return opening + "/>"
    return f"{opening}>{children}</{tag}>"


def _open_svg(kind: str, width: float, height: float) -> str:
    attrs = [
        ("xmlns", SVG_NS),
        ("class", f"pn-mermaid pn-mermaid-{kind}"),
        ("viewBox", f"0 0 {format_number(width)} {format_number(height)}"),
        ("width", width),
        ("height", height),
        ("role", "img"),
        ("aria-label", f"{kind.capitalize()} diagram"),
        ("font-family", FONT_FAMILY),
        ("font-size", FONT_SIZE),
    ]
    return f"<svg {_render_attrs(attrs)}>"


def _arrow_marker() -> str:
    head = _element("path", [("d", "M 0 0 L 10 5 L 0 10 z"), ("fill", STROKE)])
    marker = _element(
        "marker",
        [
            ("id", ARROW_MARKER_ID),
            ("viewBox", "0 0 10 10"),
            ("refX", 10),
            ("refY", 5),
            ("markerWidth", 8),
            ("markerHeight", 8),
            ("orient", "auto-start-reverse"),
        ],
        head,
    )
    return _element("defs", [], marker)


def _arrow_line(css_class: str, segment: Segment, dashed: bool = False, extra: Attrs = ()) -> str:
    attrs: List[Tuple[str, object]] = [
        ("class", css_class),
        ("x1", segment.x1),
        ("y1", segment.y1),
        ("x2", segment.x2),
        ("y2", segment.y2),
        ("stroke", STROKE),
        ("stroke-width", 1.5),
    ]
    if dashed:
        attrs.append(("stroke-dasharray", "6 4"))
    attrs.extend(extra)
    attrs.append(("marker-end", f"url(#{ARROW_MARKER_ID})"))
    return _element("line", attrs)


def _text_block(css_class: str, center_x: float, center_y: float, lines: List[str]) -> str:
    """Vertically centred multi-line text, one ``<tspan>`` per line."""
    first_offset = -(len(lines) - 1) * LINE_HEIGHT / 2
    spans = []
    for index, line in enumerate(lines):
        y = center_y + first_offset + index * LINE_HEIGHT + BASELINE_SHIFT
        spans.append(_element("tspan", [("x", center_x), ("y", y)], escape_text(line)))
    return _element(
        "text",
        [("class", css_class), ("text-anchor", "middle"), ("fill", TEXT_FILL)],
        "".join(spans),
    )


def _flow_node(item: PositionedNode) -> str:
    node = item.node
    box = item.box
    rect = _element(
        "rect",
        [
            ("class", "pn-mermaid-node"),
            ("data-node-id", node.id),
            ("data-shape", node.shape),
            ("x", item.x),
            ("y", item.y),
            ("width", item.width),
            ("height", item.height),
            ("rx", _CORNER_RADIUS.get(node.shape, 6)),
            ("fill", NODE_FILL),
            ("stroke", STROKE),
        ],
    )
    lines = wrap_label(trim_mermaid_label(node.label), NODE_LABEL_CHARS, NODE_LABEL_LINES)
    if not lines:
        lines = [trim_mermaid_label(node.id, NODE_LABEL_CHARS)]
    return rect + _text_block("pn-mermaid-label", box.center_x, box.center_y, lines)


def emit_flowchart_svg(layout: FlowLayout) -> str:
    parts = [_open_svg("flowchart", layout.width, layout.height), _arrow_marker()]
    for item in layout.edges:
        parts.append(
            _arrow_line(
                "pn-mermaid-edge",
                item.segment,
                extra=[("data-from", item.edge.from_), ("data-to", item.edge.to)],
            )
        )
    for node in layout.nodes:
        parts.append(_flow_node(node))
    parts.append("</svg>")
    return "".join(parts)


def _participant_header(item: PositionedParticipant) -> str:
    participant = item.participant
    rect = _element(
        "rect",
        [
            ("class", "pn-mermaid-participant"),
            ("data-participant-id", participant.id),
            ("x", item.x),
            ("y", item.y),
            ("width", item.width),
            ("height", item.height),
            ("rx", 6),
            ("fill", NODE_FILL),
            ("stroke", STROKE),
        ],
    )
    label = trim_mermaid_label(participant.label, PARTICIPANT_LABEL_CHARS)
    return rect + _text_block("pn-mermaid-participant-label", item.center_x, item.y + item.height / 2, [label])


def _message(item: PositionedMessage) -> str:
    segment = item.segment
    line = _arrow_line(
        "pn-mermaid-message",
        segment,
        dashed=item.message.dashed,
        extra=[("data-row", item.row)],
    )
    if not item.message.text:
        return line
    text = _element(
        "text",
        [
            ("class", "pn-mermaid-message-text"),
            ("data-row", item.row),
            ("x", (segment.x1 + segment.x2) / 2),
            ("y", segment.y1 - MESSAGE_TEXT_OFFSET),
            ("text-anchor", "middle"),
            ("fill", TEXT_FILL),
        ],
        escape_text(item.message.text),
    )
    return line + text


def emit_sequence_svg(layout: SequenceLayout) -> str:
    parts = [_open_svg("sequence", layout.width, layout.height), _arrow_marker()]
    for header, lifeline in zip(layout.participants, layout.lifelines):
        parts.append(
            _element(
                "line",
                [
                    ("class", "pn-mermaid-lifeline"),
                    ("data-participant-id", header.participant.id),
                    ("x1", lifeline.x1),
                    ("y1", lifeline.y1),
                    ("x2", lifeline.x2),
                    ("y2", lifeline.y2),
                    ("stroke", STROKE),
                    ("stroke-dasharray", "4 4"),
                ],
            )
        )
    for header in layout.participants:
        parts.append(_participant_header(header))
    for message in layout.messages:
        parts.append(_message(message))
    parts.append("</svg>")
    return "".join(parts)
