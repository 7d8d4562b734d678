from promptnest_mermaid.renderers.markdown_fences import (
    render_code_block,
    render_diagram_block,
    render_markdown_diagrams,
)


EXPORT = """# Chat export

Here is the flow:

```mermaid
graph LR
  A[Ask] --> B[Answer]
```

And some code:

```python
print("a --> b")
```
"""


def test_mermaid_fence_becomes_inline_svg():
    html = render_markdown_diagrams(EXPORT)
    assert '<figure class="pn-mermaid-figure"><svg' in html
    assert "```mermaid" not in html
    assert "# Chat export" in html


def test_other_fences_are_left_alone():
    html = render_markdown_diagrams(EXPORT)
    assert '```python\nprint("a --> b")\n```' in html


def test_unrenderable_fence_falls_back_to_code_block():
    html = render_markdown_diagrams("```mermaid\nclassDiagram\n  Animal <|-- Duck\n```\n")
    assert html.startswith('<pre><code class="language-mermaid">classDiagram')
    assert "&lt;|--" in html
    assert "<svg" not in html


def test_tilde_fences_and_uppercase_info_strings():
    html = render_markdown_diagrams("~~~MERMAID\nsequenceDiagram\nA->>B: hi\n~~~")
    assert 'class="pn-mermaid pn-mermaid-sequence"' in html


def test_render_diagram_block_and_code_block():
    assert render_diagram_block("graph TD\nA").startswith('<figure class="pn-mermaid-figure">')
    assert render_diagram_block("") == '<pre><code class="language-mermaid"></code></pre>'
    assert render_code_block("<b>", "text") == '<pre><code class="language-text">&lt;b&gt;</code></pre>'


def test_crlf_exports_are_rendered():
    html = render_markdown_diagrams("Intro\r\n\r\n```mermaid\r\ngraph TD\r\nA --> B\r\n```\r\nOutro\r\n")
    assert '<figure class="pn-mermaid-figure"><svg' in html
    assert "```" not in html
    assert html.endswith("\r\nOutro\r\n")
