"""Safety checks for emitted diagram SVG before it is written or embedded."""
from __future__ import annotations

from typing import Iterable
from xml.etree import ElementTree as ET


_FORBIDDEN_TAGS = {"script", "foreignObject", "iframe", "style"}


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def _iter_event_attrs(root: ET.Element) -> Iterable[str]:
    for el in root.iter():
        for name in el.attrib:
            if _strip_ns(name).lower().startswith("on"):
                yield name


def validate_diagram_svg(svg_text: str) -> ET.Element:
    """Parse ``svg_text`` and reject anything unsafe to embed.

    Returns the parsed root element so callers can inspect it further.
    """
    try:
        root = ET.fromstring(svg_text)
    except ET.ParseError as exc:
        raise ValueError(f"Invalid SVG XML: {exc}") from exc
    if _strip_ns(root.tag) != "svg":
        raise ValueError("Root element is not <svg>.")
    if not root.get("viewBox"):
        raise ValueError("SVG is missing a viewBox.")
    for el in root.iter():
        tag = _strip_ns(el.tag)
        if tag in _FORBIDDEN_TAGS:
            raise ValueError(f"<{tag}> elements are not allowed.")
    handler = next(iter(_iter_event_attrs(root)), None)
    if handler is not None:
        raise ValueError(f"Event handler attribute '{handler}' is not allowed.")
    return root
