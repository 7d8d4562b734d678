"""Graph models produced by the mermaid token parsers.

Identity maps are plain dicts so that insertion order (and therefore layout
order) is preserved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


NodeShape = Literal["square", "round", "circle", "rhombus"]


class LayoutDirection(str, Enum):
    TD = "TD"
    BT = "BT"
    LR = "LR"
    RL = "RL"

    @classmethod
    def parse(cls, token: Optional[str]) -> "LayoutDirection":
        value = (token or "").strip().upper()
        if value == "TB":
            return cls.TD
        try:
            return cls(value)
        except ValueError:
            return cls.TD


class FlowNode(BaseModel):
    id: str
    label: str
    shape: NodeShape = "square"

    @property
    def is_bare(self) -> bool:
        return self.label == self.id


class FlowEdge(BaseModel):
    from_: str = Field(..., alias="from")
    to: str

    model_config = {
        "populate_by_name": True,
    }


class FlowGraph(BaseModel):
    nodes: Dict[str, FlowNode] = {}
    edges: List[FlowEdge] = []

    def register_node(self, node_id: str, label: Optional[str] = None, shape: NodeShape = "square") -> FlowNode:
        """Add a node, or upgrade the label of a node only known by its id.

        An explicit label is never replaced by a later bare reference or by a
        second explicit label.
        """
        label = label or node_id
        existing = self.nodes.get(node_id)
        if existing is None:
            node = FlowNode(id=node_id, label=label, shape=shape)
            self.nodes[node_id] = node
            return node
        if label != node_id and existing.is_bare:
            existing.label = label
            existing.shape = shape
        return existing

    def add_edge(self, source: FlowNode, target: FlowNode) -> FlowEdge:
        edge = FlowEdge(from_=source.id, to=target.id)
        self.edges.append(edge)
        return edge

    def to_dict(self) -> dict:
        return {
            "nodes": [node.model_dump() for node in self.nodes.values()],
            "edges": [edge.model_dump(by_alias=True) for edge in self.edges],
        }


class Participant(BaseModel):
    id: str
    label: str


class Message(BaseModel):
    from_: str = Field(..., alias="from")
    to: str
    text: str
    dashed: bool = False

    model_config = {
        "populate_by_name": True,
    }


class SequenceGraph(BaseModel):
    participants: Dict[str, Participant] = {}
    messages: List[Message] = []

    def register_participant(self, participant_id: str, label: Optional[str] = None) -> Participant:
        existing = self.participants.get(participant_id)
        if existing is None:
            participant = Participant(id=participant_id, label=label or participant_id)
            self.participants[participant_id] = participant
            return participant
        if label:
            existing.label = label
        return existing

    def add_message(self, source: str, target: str, text: str, dashed: bool = False) -> Message:
        message = Message(from_=source, to=target, text=text, dashed=dashed)
        self.messages.append(message)
        return message

    def to_dict(self) -> dict:
        return {
            "participants": [p.model_dump() for p in self.participants.values()],
            "messages": [m.model_dump(by_alias=True) for m in self.messages],
        }


class Diagram(BaseModel):
    kind: Literal["flowchart", "sequence"]
    width: float
    height: float
    svg_markup: str

    model_config = {
        "frozen": True,
    }


@dataclass(frozen=True)
class Unrenderable:
    """Unit result: the source cannot be drawn by this engine."""


UNRENDERABLE = Unrenderable()

DiagramResult = Union[Diagram, Unrenderable]


@dataclass(frozen=True)
class FlowchartSource:
    statements: List[str] = field(default_factory=list)
    direction: LayoutDirection = LayoutDirection.TD


@dataclass(frozen=True)
class SequenceSource:
    statements: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class UnrecognizedSource:
    pass


DiagramSource = Union[FlowchartSource, SequenceSource, UnrecognizedSource]
