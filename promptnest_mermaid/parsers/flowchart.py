"""Flowchart token parser and graph builder.

Each statement is either an edge (``A[Start] --> B``) or a single node
declaration (``A[Start]``). Statements that match neither are dropped.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from promptnest_mermaid.ir.schemas import FlowGraph, NodeShape


# Alternation order is the precedence order: at the leftmost position where
# any operator starts, the first listed operator that fits wins.
EDGE_OPERATORS: Tuple[str, ...] = ("<-->", "-.->", "-->", "==>", "---", "<--", "->", "<-")
EDGE_OPERATOR_RE = re.compile("|".join(re.escape(op) for op in EDGE_OPERATORS))

_REVERSED_OPERATORS = {"<--", "<-"}

_SKIPPED_STATEMENT_RE = re.compile(r"^(?:subgraph|end|style|classDef|class|linkStyle|click)(?:\s|$)")

_EDGE_LABEL_PREFIX_RE = re.compile(r"^\|[^|]*\|")
_EDGE_LABEL_SUFFIX_RE = re.compile(r"\|[^|]*\|$")

_ID = r"(?P<id>[\w.-]+)"

# Tried in order; ((label)) must come before (label).
_NODE_PATTERNS: Tuple[Tuple[re.Pattern[str], NodeShape], ...] = (
    (re.compile(_ID + r"\(\((?P<label>.*)\)\)$"), "circle"),
    (re.compile(_ID + r"\[(?P<label>.*)\]$"), "square"),
    (re.compile(_ID + r"\((?P<label>.*)\)$"), "round"),
    (re.compile(_ID + r"\{(?P<label>.*)\}$"), "rhombus"),
    (re.compile(_ID + r"$"), "square"),
)

NodeToken = Tuple[str, str, NodeShape]


def _clean_label(raw: str) -> str:
    label = raw.strip()
    if len(label) >= 2 and label[0] == label[-1] and label[0] in {'"', "'"}:
        label = label[1:-1].strip()
    return label


def strip_edge_label(endpoint: str) -> str:
    """Remove a ``|label|`` glued to either end of an edge endpoint."""
    endpoint = _EDGE_LABEL_PREFIX_RE.sub("", endpoint.strip()).strip()
    return _EDGE_LABEL_SUFFIX_RE.sub("", endpoint).strip()


def parse_node_token(token: str) -> Optional[NodeToken]:
    """Return ``(id, label, shape)`` for a node token, or ``None``."""
    token = token.strip()
    if not token:
        return None
    for pattern, shape in _NODE_PATTERNS:
        match = pattern.match(token)
        if not match:
            continue
        node_id = match.group("id")
        label = _clean_label(match.groupdict().get("label") or "") or node_id
        return node_id, label, shape
    return None


def split_edge(statement: str) -> Optional[Tuple[str, str, bool]]:
    """Split a statement around its leftmost edge operator.

    Returns ``(left, right, reversed)`` with edge labels removed from both
    endpoints; ``reversed`` is set for left-pointing operators.
    """
    match = EDGE_OPERATOR_RE.search(statement)
    if not match:
        return None
    left = strip_edge_label(statement[: match.start()])
    right = strip_edge_label(statement[match.end():])
    return left, right, match.group(0) in _REVERSED_OPERATORS


def build_flow_graph(statements: List[str]) -> FlowGraph:
    graph = FlowGraph()
    for statement in statements:
        if _SKIPPED_STATEMENT_RE.match(statement):
            continue
        edge = split_edge(statement)
        if edge is None:
            node = parse_node_token(statement)
            if node is not None:
                graph.register_node(*node)
            continue

        left_token, right_token, reversed_edge = edge
        left = parse_node_token(left_token)
        right = parse_node_token(right_token)
        if left is None or right is None:
            continue
        # Nodes register in reading order; only the edge is flipped.
        left_node = graph.register_node(*left)
        right_node = graph.register_node(*right)
        if reversed_edge:
            graph.add_edge(right_node, left_node)
        else:
            graph.add_edge(left_node, right_node)
    return graph
