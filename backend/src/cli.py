"""Command-line access to the context graph."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .models.document import DocumentBundle
from .models.graph import ColorMode, GraphScope, GraphSummary
from .services.config import get_config
from .services.document_store import find_document, flatten_leaves, load_bundle
from .services.graph_builder import GraphService
from .services.links import build_link_report
from .services.renderer import GraphRenderer

logger = logging.getLogger(__name__)

app = typer.Typer(
    help=(
        "Context graph: derive backlink and similarity edges between notes.\n\n"
        "SOURCE is a bundle JSON file or a folder of markdown notes."
    ),
    no_args_is_help=True,
)


def _load(source: Path) -> DocumentBundle:
    try:
        return load_bundle(source)
    except (OSError, ValueError) as exc:
        print(f"[red]Could not load {source}: {exc}[/red]")
        raise typer.Exit(code=1)


@app.command("graph")
def graph(
    source: Path = typer.Argument(..., help="Bundle JSON file or markdown vault directory"),
    scope: GraphScope = typer.Option(GraphScope.ALL, "--scope", "-s", help="all | single | connected"),
    focus: Optional[str] = typer.Option(None, "--focus", "-f", help="Focus document id"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    html: Optional[Path] = typer.Option(None, "--html", help="Write the rendered view to this file"),
    color_by: Optional[ColorMode] = typer.Option(None, "--color-by", help="connections | group"),
):
    """
    Assemble the graph and print its nodes and summary.
    """
    bundle = _load(source)
    if focus and find_document(bundle.documents, focus) is None:
        print(f"[red]Document not found: {focus}[/red]")
        raise typer.Exit(code=1)

    config = get_config()
    data = GraphService(config).assemble(bundle.documents, scope, focus)
    summary = GraphSummary.from_graph(data)

    if html is not None:
        GraphRenderer(config).export_html(data, html, color_by=color_by)

    if json_output:
        typer.echo(json.dumps({"graph": data.model_dump(mode="json"), "summary": summary.model_dump()}))
        return

    table = Table(title="Context Graph")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Connections", justify="right", style="magenta")
    table.add_column("Size", justify="right")
    for node in sorted(data.nodes, key=lambda n: (-n.connection_count, n.id)):
        table.add_row(node.id, node.display_name, str(node.connection_count), f"{node.visual_size:.1f}")
    print(table)
    print(
        f"[bold]{summary.node_count}[/bold] nodes, [bold]{summary.edge_count}[/bold] connections "
        f"({summary.explicit_edge_count} explicit, {summary.similarity_edge_count} similarity)"
    )
    if html is not None:
        print(f"[green]Wrote {html}[/green]")


@app.command("links")
def links(
    source: Path = typer.Argument(..., help="Bundle JSON file or markdown vault directory"),
    document_id: str = typer.Argument(..., help="Document to inspect"),
):
    """
    Show the [[links]] in a document and where they resolve.
    """
    bundle = _load(source)
    document = find_document(bundle.documents, document_id)
    if document is None:
        print(f"[red]Document not found: {document_id}[/red]")
        raise typer.Exit(code=1)

    report = build_link_report(document, flatten_leaves(bundle.documents))
    if not report.links:
        print("No links found.")
        return

    table = Table(title=f"Links in {document.name}")
    table.add_column("Link", style="cyan")
    table.add_column("Target")
    for link in report.links:
        target = link.target_id if link.is_resolved else "[dim](not found)[/dim]"
        table.add_row(link.link_text, target)
    print(table)


if __name__ == "__main__":
    app()
