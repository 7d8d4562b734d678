import pytest

from promptnest_mermaid.ir.schemas import UNRENDERABLE, Diagram
from promptnest_mermaid.renderers import mermaid_renderer
from promptnest_mermaid.renderers.mermaid_renderer import compile_diagram, render_mermaid_svg
from promptnest_mermaid.renderers.svg_validator import validate_diagram_svg


SVG = "{http://www.w3.org/2000/svg}"

FLOWCHART = """flowchart LR
  %% checkout flow
  Cart[Shopping cart] --> Pay{Paid?}
  Pay -->|yes| Ship((Ship it))
  Pay -->|no| Cart
"""

SEQUENCE = """sequenceDiagram
  participant U as User
  U->>API: one
  API-->>U: two
"""


def test_flowchart_compiles_to_diagram():
    result = compile_diagram(FLOWCHART)
    assert isinstance(result, Diagram)
    assert result.kind == "flowchart"
    root = validate_diagram_svg(result.svg_markup)
    assert root.get("viewBox") == f"0 0 {int(result.width)} {int(result.height)}"
    assert len(root.findall(f"{SVG}line")) == 3
    assert len(root.findall(f"{SVG}defs/{SVG}marker")) == 1


def test_output_is_deterministic():
    assert render_mermaid_svg(FLOWCHART) == render_mermaid_svg(FLOWCHART)
    assert render_mermaid_svg(SEQUENCE) == render_mermaid_svg(SEQUENCE)


@pytest.mark.parametrize("source", ["", "   \n\t", "%% only a comment", "%% one\n%% two", None])
def test_empty_sources_are_unrenderable(source):
    assert render_mermaid_svg(source) is None
    assert compile_diagram(source) is UNRENDERABLE


def test_node_count_matches_rect_count():
    svg = render_mermaid_svg("graph TD\nA\nB[Bee]\nC((Sea))\nD{Dee}\nE(Eee)")
    assert svg.count('<rect class="pn-mermaid-node"') == 5
    assert "pn-mermaid-edge" not in svg


def test_single_edge_source_has_two_nodes():
    root = validate_diagram_svg(render_mermaid_svg("A --> B"))
    nodes = root.findall(f"{SVG}rect")
    assert [n.get("data-node-id") for n in nodes] == ["A", "B"]
    labels = ["".join(t.itertext()) for t in root.findall(f"{SVG}text")]
    assert labels == ["A", "B"]


def test_label_upgrade_is_order_independent():
    for source in ("graph TD\nA --> B\nA[Start]", "graph TD\nA[Start]\nA --> B"):
        root = validate_diagram_svg(render_mermaid_svg(source))
        labels = ["".join(t.itertext()) for t in root.findall(f"{SVG}text")]
        assert labels[0] == "Start"


def _node_x(svg):
    root = validate_diagram_svg(svg)
    return {rect.get("data-node-id"): float(rect.get("x")) for rect in root.findall(f"{SVG}rect")}


def test_direction_mirroring():
    lr = _node_x(render_mermaid_svg("flowchart LR\nA --> B"))
    rl = _node_x(render_mermaid_svg("flowchart RL\nA --> B"))
    assert lr["A"] < lr["B"]
    assert rl["A"] > rl["B"]


def test_sequence_rows_follow_message_order():
    result = compile_diagram(SEQUENCE)
    assert isinstance(result, Diagram)
    assert result.kind == "sequence"
    root = validate_diagram_svg(result.svg_markup)
    rows = {
        text.text: float(text.get("y"))
        for text in root.iter(f"{SVG}text")
        if text.get("class") == "pn-mermaid-message-text"
    }
    assert rows["two"] > rows["one"]
    lifelines = [line for line in root.iter(f"{SVG}line") if line.get("class") == "pn-mermaid-lifeline"]
    assert len(lifelines) == 2
    assert "User" in result.svg_markup


def test_sequence_without_messages_is_unrenderable():
    assert render_mermaid_svg("sequenceDiagram\nparticipant A\nparticipant B") is None


def test_unsupported_diagram_types_are_unrenderable():
    assert render_mermaid_svg("classDiagram\n  Animal <|-- Duck") is None
    assert render_mermaid_svg("gantt\n  title Plan") is None
    assert render_mermaid_svg("just a sentence") is None


def test_flowchart_without_nodes_is_unrenderable():
    assert render_mermaid_svg("graph TD\nsubgraph x\nend") is None


def test_labels_are_escaped():
    svg = render_mermaid_svg('graph TD\nA["<script>alert(1)</script>"] --> B')
    assert "<script" not in svg
    assert "&lt;script&gt;" in svg
    validate_diagram_svg(svg)


def test_message_quotes_and_ampersands_are_escaped():
    svg = render_mermaid_svg("sequenceDiagram\nA->>B: say \"hi\" & 'bye' <b>")
    assert "&quot;hi&quot; &amp; &#x27;bye&#x27; &lt;b&gt;" in svg
    validate_diagram_svg(svg)


def test_xml_illegal_control_characters_are_dropped():
    svg = render_mermaid_svg("graph TD\nA[x\x01y] --> B")
    assert ">xy<" in svg
    assert "\x01" not in svg
    validate_diagram_svg(svg)

    svg = render_mermaid_svg("sequenceDiagram\nA\x02->>B: ping\x1f")
    assert "\x02" not in svg and "\x1f" not in svg
    validate_diagram_svg(svg)


def test_internal_errors_become_unrenderable(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("layout exploded")

    monkeypatch.setattr(mermaid_renderer, "layout_flowchart", boom)
    assert compile_diagram("graph TD\nA --> B") is UNRENDERABLE
    assert render_mermaid_svg("graph TD\nA --> B") is None
