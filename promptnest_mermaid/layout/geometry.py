"""Label trimming, label wrapping and edge clipping shared by both layouts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

ELLIPSIS = "…"
DEFAULT_LABEL_LIMIT = 44
DEFAULT_MAX_LINES = 3


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


@dataclass(frozen=True)
class Segment:
    x1: float
    y1: float
    x2: float
    y2: float


def trim_mermaid_label(value: object, max_length: int = DEFAULT_LABEL_LIMIT) -> str:
    """Collapse whitespace and cut to ``max_length`` characters.

    A cut label ends with a single ellipsis character and the result never
    exceeds ``max_length``.
    """
    compact = " ".join(str(value or "").split())
    if len(compact) <= max_length:
        return compact
    if max_length <= 1:
        return ELLIPSIS[:max_length]
    return compact[: max_length - 1].rstrip() + ELLIPSIS


def wrap_label(text: str, max_chars: int, max_lines: int = DEFAULT_MAX_LINES) -> List[str]:
    """Greedily pack words into at most ``max_lines`` lines.

    Words that do not fit once the line limit is reached are dropped. A word
    longer than ``max_chars`` gets a line of its own.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars or not current:
            current = candidate
            continue
        lines.append(current)
        if len(lines) >= max_lines:
            return lines
        current = word
    if current and len(lines) < max_lines:
        lines.append(current)
    return lines


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def clip_edge(source: Box, target: Box) -> Segment:
    """Line between two box centres, pulled in to the box borders.

    Only the dominant axis is clipped: horizontal-ish edges stop at the left or
    right side of each box, vertical-ish edges at the top or bottom.
    """
    x1, y1 = source.center_x, source.center_y
    x2, y2 = target.center_x, target.center_y
    dx = x2 - x1
    dy = y2 - y1
    if abs(dx) >= abs(dy):
        step = _sign(dx)
        return Segment(x1 + step * source.width / 2, y1, x2 - step * target.width / 2, y2)
    step = _sign(dy)
    return Segment(x1, y1 + step * source.height / 2, x2, y2 - step * target.height / 2)
