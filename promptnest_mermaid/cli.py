"""CLI interface."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from promptnest_mermaid.ir.schemas import Diagram, FlowchartSource, SequenceSource
from promptnest_mermaid.parsers.flowchart import build_flow_graph
from promptnest_mermaid.parsers.sequence import build_sequence_graph
from promptnest_mermaid.renderers.markdown_fences import render_markdown_diagrams
from promptnest_mermaid.renderers.mermaid_renderer import compile_diagram, parse_diagram_source
from promptnest_mermaid.renderers.svg_validator import validate_diagram_svg
from promptnest_mermaid.utils.config import settings
from promptnest_mermaid.utils.file_utils import read_text_file, write_text_file

app = typer.Typer(add_completion=False)
logger = logging.getLogger(__name__)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level."),
):
    """Compile mermaid flowcharts and sequence diagrams to SVG."""
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_source(source: str) -> str:
    try:
        return read_text_file(source)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="SOURCE") from exc


@app.command()
def render(
    source: str = typer.Argument(..., help="Path to a .mmd diagram source."),
    output_name: Optional[str] = typer.Option(None, "--output-name", help="Output file stem (defaults to the source stem)."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the SVG instead of writing a file."),
):
    """Render a diagram source file to SVG."""
    text = _read_source(source)
    result = compile_diagram(text)
    if not isinstance(result, Diagram):
        typer.echo(f"{source}: not a renderable flowchart or sequence diagram", err=True)
        raise typer.Exit(code=1)
    if settings.validate_svg:
        try:
            validate_diagram_svg(result.svg_markup)
        except ValueError as exc:
            typer.echo(f"{source}: rendered SVG failed validation: {exc}", err=True)
            raise typer.Exit(code=1) from exc
    if stdout:
        typer.echo(result.svg_markup)
        return
    name = output_name or Path(source).stem
    svg_path = write_text_file(settings.output_dir, name, ".svg", result.svg_markup)
    logger.info("Wrote %s diagram to %s", result.kind, svg_path)
    typer.echo(json.dumps({
        "file_path": str(svg_path),
        "kind": result.kind,
        "width": result.width,
        "height": result.height,
    }, indent=2))


@app.command()
def inspect(
    source: str = typer.Argument(..., help="Path to a .mmd diagram source."),
):
    """Print the parsed graph model as JSON."""
    parsed = parse_diagram_source(_read_source(source))
    if isinstance(parsed, FlowchartSource):
        payload = {"kind": "flowchart", "direction": parsed.direction.value}
        payload.update(build_flow_graph(parsed.statements).to_dict())
    elif isinstance(parsed, SequenceSource):
        payload = {"kind": "sequence"}
        payload.update(build_sequence_graph(parsed.statements).to_dict())
    else:
        payload = {"kind": "unrecognized"}
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def markdown(
    source: str = typer.Argument(..., help="Path to a Markdown document."),
):
    """Print a Markdown document with its mermaid fences rendered inline."""
    typer.echo(render_markdown_diagrams(_read_source(source)))


if __name__ == "__main__":
    app()
