"""Lifeline placement for sequence diagrams."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from promptnest_mermaid.ir.schemas import Message, Participant, SequenceGraph
from promptnest_mermaid.layout.geometry import Segment


COLUMN_WIDTH = 170
HEADER_WIDTH = 120
HEADER_HEIGHT = 34
PADDING = 24
HEADER_TOP = PADDING
FIRST_ROW_GAP = 30
ROW_HEIGHT = 36
BOTTOM_MARGIN = 24
SELF_MESSAGE_STUB = 36


@dataclass(frozen=True)
class PositionedParticipant:
    participant: Participant
    x: float
    y: float
    width: float = HEADER_WIDTH
    height: float = HEADER_HEIGHT

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


@dataclass(frozen=True)
class PositionedMessage:
    message: Message
    row: int
    segment: Segment


@dataclass
class SequenceLayout:
    width: float
    height: float
    participants: List[PositionedParticipant]
    lifelines: List[Segment]
    messages: List[PositionedMessage]


def message_row_y(row: int) -> float:
    return HEADER_TOP + HEADER_HEIGHT + FIRST_ROW_GAP + row * ROW_HEIGHT


def layout_sequence(graph: SequenceGraph) -> SequenceLayout:
    count = len(graph.participants)
    width = count * COLUMN_WIDTH + PADDING * 2
    height = message_row_y(0) + len(graph.messages) * ROW_HEIGHT + BOTTOM_MARGIN
    lifeline_bottom = height - BOTTOM_MARGIN

    positioned: Dict[str, PositionedParticipant] = {}
    lifelines: List[Segment] = []
    for index, participant in enumerate(graph.participants.values()):
        column_center = PADDING + index * COLUMN_WIDTH + COLUMN_WIDTH / 2
        header = PositionedParticipant(
            participant=participant,
            x=column_center - HEADER_WIDTH / 2,
            y=HEADER_TOP,
        )
        positioned[participant.id] = header
        lifelines.append(Segment(column_center, HEADER_TOP + HEADER_HEIGHT, column_center, lifeline_bottom))

    messages: List[PositionedMessage] = []
    for row, message in enumerate(graph.messages):
        source = positioned.get(message.from_)
        target = positioned.get(message.to)
        if source is None or target is None:
            continue
        y = message_row_y(row)
        x1 = source.center_x
        x2 = target.center_x
        if message.from_ == message.to:
            x2 = x1 + SELF_MESSAGE_STUB
        messages.append(PositionedMessage(message=message, row=row, segment=Segment(x1, y, x2, y)))

    return SequenceLayout(
        width=width,
        height=height,
        participants=list(positioned.values()),
        lifelines=lifelines,
        messages=messages,
    )
