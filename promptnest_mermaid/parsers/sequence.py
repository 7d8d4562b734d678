"""Sequence diagram token parser and graph builder."""
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from promptnest_mermaid.ir.schemas import SequenceGraph
from promptnest_mermaid.layout.geometry import trim_mermaid_label


MESSAGE_TEXT_LIMIT = 44

MESSAGE_OPERATORS = ("->>", "-->>", "->", "-->", "=>", "==>", "<--", "<<--", "<-", "<->")
_REVERSED_OPERATORS = {"<--", "<<--", "<-"}

_SKIPPED_STATEMENT_RE = re.compile(
    r"^(?:autonumber|activate|deactivate|note|rect|loop|alt|else|end|opt|par|critical|break)(?:\s|$)",
    re.IGNORECASE,
)

_PARTICIPANT_RE = re.compile(
    r"^(?P<kind>participant|actor)\s+(?P<id>\S+?)(?:\s+as\s+(?P<label>.+))?$",
    re.IGNORECASE,
)

# Longest operators first so ``-->>`` is not read as ``-->`` followed by ``>``.
_OPERATOR_RE = re.compile("|".join(re.escape(op) for op in sorted(MESSAGE_OPERATORS, key=len, reverse=True)))
_PARTICIPANT_TOKEN_RE = re.compile(r"[^\s:]+")


def split_message(statement: str) -> Optional[Tuple[str, str, str, str]]:
    """Split ``source op target: text`` into its four parts.

    The text starts at the first colon and the operator is the leftmost one
    before it, so each statement is scanned once.
    """
    head, colon, text = statement.partition(":")
    if not colon:
        return None
    operator = _OPERATOR_RE.search(head)
    if not operator:
        return None
    source = head[:operator.start()].strip()
    target = head[operator.end():].strip()
    if target[:1] in ("+", "-"):
        target = target[1:]
    if not (_PARTICIPANT_TOKEN_RE.fullmatch(source) and _PARTICIPANT_TOKEN_RE.fullmatch(target)):
        return None
    return source, operator.group(0), target, text


def build_sequence_graph(statements: List[str]) -> SequenceGraph:
    graph = SequenceGraph()
    for statement in statements:
        if _SKIPPED_STATEMENT_RE.match(statement):
            continue

        declared = _PARTICIPANT_RE.match(statement)
        if declared:
            label = (declared.group("label") or "").strip()
            graph.register_participant(declared.group("id"), label or None)
            continue

        message = split_message(statement)
        if not message:
            continue
        source, op, target, text = message
        graph.register_participant(source)
        graph.register_participant(target)
        if op in _REVERSED_OPERATORS:
            source, target = target, source
        graph.add_message(
            source,
            target,
            trim_mermaid_label(text, MESSAGE_TEXT_LIMIT),
            dashed="--" in op,
        )
    return graph
