"""CLI for sankey-flow."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
import networkx as nx

from sankey_flow import __version__
from sankey_flow.layout import compute_layout, export_geometry
from sankey_flow.layout.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    NODE_PADDING,
    NODE_WIDTH,
    RELAX_ITERATIONS,
)
from sankey_flow.layout.layers import flow_digraph
from sankey_flow.parser import Alignment, FlowGraph, build_flow_graph, read_flow_table
from sankey_flow.parser.rows import parse_value
from sankey_flow.parser.table import FlowTable
from sankey_flow.render import ColorPalette, render_svg
from sankey_flow.themes import THEMES

ALIGNMENTS = [a.value for a in Alignment]


def _table_options(func):
    """Options selecting the source/target/value columns of the input table."""
    func = click.option("--delimiter", default=",", show_default=True,
                        help="Field delimiter of the input table")(func)
    func = click.option("--value", "value_col", default=None,
                        help="Value column name (default: third column)")(func)
    func = click.option("--target", "target_col", default=None,
                        help="Target column name (default: second column)")(func)
    func = click.option("--source", "source_col", default=None,
                        help="Source column name (default: first column)")(func)
    return func


def _layout_options(func):
    """Options controlling the layout engine."""
    func = click.option("--iterations", type=int, default=RELAX_ITERATIONS,
                        help=f"Relaxation rounds (default: {RELAX_ITERATIONS})")(func)
    func = click.option("--node-padding", type=float, default=NODE_PADDING,
                        help=f"Vertical gap between nodes (default: {NODE_PADDING:g})")(func)
    func = click.option("--node-width", type=float, default=NODE_WIDTH,
                        help=f"Node thickness in pixels (default: {NODE_WIDTH:g})")(func)
    func = click.option("--height", type=int, default=int(DEFAULT_HEIGHT),
                        help=f"Drawing height in pixels (default: {DEFAULT_HEIGHT:g})")(func)
    func = click.option("--width", type=int, default=int(DEFAULT_WIDTH),
                        help=f"Drawing width in pixels (default: {DEFAULT_WIDTH:g})")(func)
    func = click.option("--align", "alignment", type=click.Choice(ALIGNMENTS),
                        default=Alignment.JUSTIFY.value,
                        help="Node alignment policy (default: justify)")(func)
    return func


def _load_table(
    input_file: Path,
    source_col: str | None,
    target_col: str | None,
    value_col: str | None,
    delimiter: str,
) -> FlowTable:
    try:
        return read_flow_table(input_file, source_col, target_col, value_col, delimiter)
    except ValueError as e:
        raise click.ClickException(str(e)) from e


def _build(table: FlowTable, palette: tuple[str, ...]) -> FlowGraph:
    return build_flow_graph(table.label_columns, table.values, ColorPalette(palette))


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log layout progress to stderr")
def cli(verbose: bool) -> None:
    """sankey-flow: Lay out and render Sankey flow diagrams from tables."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="light",
              help="Visual theme (default: light)")
@click.option("--title", default="", help="Title drawn in the top-left corner")
@_layout_options
@_table_options
def render(
    input_file: Path,
    output: Path | None,
    theme: str,
    title: str,
    alignment: str,
    width: int,
    height: int,
    node_width: float,
    node_padding: float,
    iterations: int,
    source_col: str | None,
    target_col: str | None,
    value_col: str | None,
    delimiter: str,
) -> None:
    """Render a source/target/value table to an SVG flow diagram."""
    table = _load_table(input_file, source_col, target_col, value_col, delimiter)
    theme_obj = THEMES[theme]
    graph = _build(table, theme_obj.palette)

    laid_out = compute_layout(
        graph, width=width, height=height, node_width=node_width,
        node_padding=node_padding, alignment=alignment, iterations=iterations,
    )
    svg = render_svg(laid_out, theme_obj, width=width, height=height, title=title)
    if not svg.endswith("\n"):
        svg += "\n"

    if output is None:
        output = input_file.with_suffix(".svg")

    output.write_text(svg)
    click.echo(f"Rendered {len(laid_out.nodes)} nodes, "
               f"{len(laid_out.links)} links, "
               f"{laid_out.column_count} columns -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output JSON file path. Writes to stdout when omitted")
@_layout_options
@_table_options
def layout(
    input_file: Path,
    output: Path | None,
    alignment: str,
    width: int,
    height: int,
    node_width: float,
    node_padding: float,
    iterations: int,
    source_col: str | None,
    target_col: str | None,
    value_col: str | None,
    delimiter: str,
) -> None:
    """Compute the layout and write node/link geometry as JSON."""
    table = _load_table(input_file, source_col, target_col, value_col, delimiter)
    graph = _build(table, THEMES["light"].palette)
    laid_out = compute_layout(
        graph, width=width, height=height, node_width=node_width,
        node_padding=node_padding, alignment=alignment, iterations=iterations,
    )
    text = json.dumps(
        export_geometry(laid_out, width=width, height=height).to_dict(), indent=2
    )
    if output is None:
        click.echo(text)
    else:
        output.write_text(text + "\n")
        click.echo(f"Wrote geometry for {len(laid_out.nodes)} nodes -> {output}",
                   err=True)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@_table_options
def validate(
    input_file: Path,
    source_col: str | None,
    target_col: str | None,
    value_col: str | None,
    delimiter: str,
) -> None:
    """Validate a source/target/value table."""
    table = _load_table(input_file, source_col, target_col, value_col, delimiter)

    errors = []
    warnings = []

    if len(table) == 0:
        errors.append("Table has no data rows")

    # Row numbers count the header as row 1
    for i, raw in enumerate(table.values):
        if parse_value(raw) is None:
            errors.append(f"Row {i + 2}: value '{raw}' is not numeric")

    for i, (src, tgt) in enumerate(zip(table.sources, table.targets)):
        if src == tgt:
            warnings.append(f"Row {i + 2}: '{src}' links to itself")

    graph = build_flow_graph(table.label_columns, table.values)
    if graph.nodes and not nx.is_directed_acyclic_graph(flow_digraph(graph)):
        warnings.append("Flows contain a cycle; columns will be approximate")

    for warning in warnings:
        click.echo(f"Warning: {warning}", err=True)

    if errors:
        click.echo("Validation errors:", err=True)
        for err in errors:
            click.echo(f"  - {err}", err=True)
        raise SystemExit(1)

    click.echo(f"Valid: {len(graph.nodes)} nodes, {len(graph.links)} links")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@_table_options
def info(
    input_file: Path,
    source_col: str | None,
    target_col: str | None,
    value_col: str | None,
    delimiter: str,
) -> None:
    """Show information about a source/target/value table."""
    table = _load_table(input_file, source_col, target_col, value_col, delimiter)
    graph = build_flow_graph(table.label_columns, table.values)

    click.echo(f"Fields: {table.source_column} -> {table.target_column} "
               f"({table.value_column})")
    click.echo(f"Rows: {len(table)}")
    click.echo(f"Nodes: {len(graph.nodes)}")
    click.echo(f"Links: {len(graph.links)}")
    layouts = {a: compute_layout(graph, alignment=a) for a in Alignment}
    click.echo(f"Columns: {layouts[Alignment.LEFT].column_count}")
    for node in graph.nodes:
        left = layouts[Alignment.LEFT].nodes[node.index]
        placed = ", ".join(
            f"{a.value} {laid.nodes[node.index].column}" for a, laid in layouts.items()
        )
        click.echo(f"  {node.name}: value {left.value:g} ({placed})")
