from promptnest_mermaid.ir.schemas import (
    FlowchartSource,
    LayoutDirection,
    SequenceSource,
    UnrecognizedSource,
)
from promptnest_mermaid.parsers.statements import classify_diagram, split_statements


def test_split_returns_none_for_blank_source():
    assert split_statements("") is None
    assert split_statements("   \n\t  ") is None
    assert split_statements(None) is None


def test_split_drops_comments_and_splits_on_semicolons():
    source = "graph TD; A-->B\n  %% a comment\n\n  B --> C ;  ;\n%%another"
    assert split_statements(source) == ["graph TD", "A-->B", "B --> C"]


def test_comment_only_source_has_no_statements():
    assert split_statements("%% one\n%% two") == []
    assert isinstance(classify_diagram([]), UnrecognizedSource)


def test_classify_sequence_header_is_case_insensitive():
    parsed = classify_diagram(["SEQUENCEDIAGRAM", "A->>B: hi"])
    assert isinstance(parsed, SequenceSource)
    assert parsed.statements == ["A->>B: hi"]


def test_classify_flowchart_direction():
    assert classify_diagram(["flowchart LR", "A"]).direction == LayoutDirection.LR
    assert classify_diagram(["graph rl"]).direction == LayoutDirection.RL
    assert classify_diagram(["graph BT"]).direction == LayoutDirection.BT
    assert classify_diagram(["graph"]).direction == LayoutDirection.TD


def test_unknown_and_synonym_directions_fall_back_to_top_down():
    assert classify_diagram(["flowchart TB"]).direction == LayoutDirection.TD
    assert classify_diagram(["flowchart XY"]).direction == LayoutDirection.TD


def test_flowchart_header_is_not_a_body_statement():
    parsed = classify_diagram(["graph TD", "A --> B"])
    assert isinstance(parsed, FlowchartSource)
    assert parsed.statements == ["A --> B"]


def test_headerless_edges_default_to_top_down_flowchart():
    parsed = classify_diagram(["A --> B", "B --> C"])
    assert isinstance(parsed, FlowchartSource)
    assert parsed.direction == LayoutDirection.TD
    assert parsed.statements == ["A --> B", "B --> C"]


def test_other_diagram_types_are_unrecognized():
    assert isinstance(classify_diagram(["classDiagram", "Animal <|-- Duck", "Duck --> Pond"]), UnrecognizedSource)
    assert isinstance(classify_diagram(["pie title Pets", '"Dogs" : 386']), UnrecognizedSource)
    assert isinstance(classify_diagram(["just some words"]), UnrecognizedSource)
