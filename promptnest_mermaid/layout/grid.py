"""Grid placement for flowcharts.

Nodes fill a roughly square grid in insertion order; direction only decides
the fill order and which axes are mirrored.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from promptnest_mermaid.ir.schemas import FlowEdge, FlowGraph, FlowNode, LayoutDirection
from promptnest_mermaid.layout.geometry import Box, Segment, clip_edge


NODE_WIDTH = 168
NODE_HEIGHT = 56
GAP_X = 44
GAP_Y = 34
PADDING = 28


@dataclass(frozen=True)
class PositionedNode:
    node: FlowNode
    x: float
    y: float
    width: float = NODE_WIDTH
    height: float = NODE_HEIGHT

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class PositionedEdge:
    edge: FlowEdge
    segment: Segment


@dataclass
class FlowLayout:
    direction: LayoutDirection
    columns: int
    rows: int
    width: float
    height: float
    nodes: List[PositionedNode]
    edges: List[PositionedEdge]


def grid_shape(count: int) -> Tuple[int, int]:
    """Return ``(columns, rows)`` for ``count`` cells."""
    if count <= 0:
        return 0, 0
    columns = math.ceil(math.sqrt(count))
    rows = math.ceil(count / columns)
    return columns, rows


def grid_cell(index: int, columns: int, rows: int, direction: LayoutDirection) -> Tuple[int, int]:
    """Map a node index to its ``(column, row)`` cell."""
    horizontal = direction in (LayoutDirection.LR, LayoutDirection.RL)
    if horizontal and rows > 1:
        column, row = index // rows, index % rows
    else:
        column, row = index % columns, index // columns
    if direction == LayoutDirection.RL:
        column = columns - 1 - column
    if direction == LayoutDirection.BT:
        row = rows - 1 - row
    return column, row


def layout_flowchart(graph: FlowGraph, direction: LayoutDirection = LayoutDirection.TD) -> FlowLayout:
    columns, rows = grid_shape(len(graph.nodes))

    positioned: Dict[str, PositionedNode] = {}
    for index, node in enumerate(graph.nodes.values()):
        column, row = grid_cell(index, columns, rows, direction)
        positioned[node.id] = PositionedNode(
            node=node,
            x=PADDING + column * (NODE_WIDTH + GAP_X),
            y=PADDING + row * (NODE_HEIGHT + GAP_Y),
        )

    edges: List[PositionedEdge] = []
    for edge in graph.edges:
        source = positioned.get(edge.from_)
        target = positioned.get(edge.to)
        if source is None or target is None:
            continue
        edges.append(PositionedEdge(edge=edge, segment=clip_edge(source.box, target.box)))

    width = PADDING * 2 + columns * NODE_WIDTH + max(columns - 1, 0) * GAP_X
    height = PADDING * 2 + rows * NODE_HEIGHT + max(rows - 1, 0) * GAP_Y
    return FlowLayout(
        direction=direction,
        columns=columns,
        rows=rows,
        width=width,
        height=height,
        nodes=list(positioned.values()),
        edges=edges,
    )
