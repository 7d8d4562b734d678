"""Mermaid flowchart and sequence diagram compiler for PromptNest exports."""
from promptnest_mermaid.ir.schemas import UNRENDERABLE, Diagram, Unrenderable
from promptnest_mermaid.layout.geometry import trim_mermaid_label
from promptnest_mermaid.renderers.markdown_fences import render_markdown_diagrams
from promptnest_mermaid.renderers.mermaid_renderer import compile_diagram, render_mermaid_svg

__all__ = [
    "Diagram",
    "UNRENDERABLE",
    "Unrenderable",
    "compile_diagram",
    "render_markdown_diagrams",
    "render_mermaid_svg",
    "trim_mermaid_label",
]
