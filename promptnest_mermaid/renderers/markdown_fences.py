"""Render mermaid fences inside exported Markdown.

A fence the engine cannot draw is kept readable as an escaped code block.
"""
from __future__ import annotations

import html
import re

from promptnest_mermaid.renderers.mermaid_renderer import render_mermaid_svg


_MERMAID_FENCE_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*(?:mermaid|mmd)[ \t]*\r?\n"  # opening fence + info string
    r"(?P<code>.*?)"
    r"^(?P=fence)[ \t]*(?=\r?$)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)


def render_code_block(code: str, language: str = "mermaid") -> str:
    escaped = html.escape(code, quote=True)
    return f'<pre><code class="language-{html.escape(language, quote=True)}">{escaped}</code></pre>'


def render_diagram_block(code: str) -> str:
    """HTML for one mermaid block: an inline SVG figure, or the source."""
    svg = render_mermaid_svg(code)
    if svg is None:
        return render_code_block(code)
    return f'<figure class="pn-mermaid-figure">{svg}</figure>'


def render_markdown_diagrams(markdown: str) -> str:
    """Replace every mermaid fence in ``markdown`` with rendered HTML."""
    return _MERMAID_FENCE_RE.sub(lambda m: render_diagram_block(m.group("code")), markdown or "")
