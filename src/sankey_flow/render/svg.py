"""SVG generation for flow diagrams using drawsvg."""

from __future__ import annotations

import drawsvg as draw

from sankey_flow.layout.geometry import link_path
from sankey_flow.layout.labels import LabelPlacement, place_labels
from sankey_flow.parser.model import FlowGraph
from sankey_flow.render.constants import (
    FALLBACK_COLOR,
    FALLBACK_LINK_COLOR,
    MIN_LINK_STROKE,
    TITLE_X_OFFSET,
    TITLE_Y_OFFSET,
)
from sankey_flow.render.style import Theme


def render_svg(
    graph: FlowGraph,
    theme: Theme,
    width: int | None = None,
    height: int | None = None,
    title: str = "",
) -> str:
    """Render a laid-out flow graph to an SVG string.

    width/height default to the layout extent plus its margins.
    """
    x_min, y_min, x_max, y_max = graph.extent
    svg_width = width or int(round(x_max + x_min))
    svg_height = height or int(round(y_max + y_min))

    if graph.is_empty:
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{svg_width}" height="{svg_height}"></svg>'
        )

    d = draw.Drawing(svg_width, svg_height)

    if theme.background_color != "none":
        d.append(draw.Rectangle(
            0, 0, svg_width, svg_height, fill=theme.background_color,
        ))

    _render_nodes(d, graph, theme)
    _render_links(d, graph, theme)
    _render_labels(d, graph, place_labels(graph, width=svg_width), theme)

    if title:
        d.append(draw.Text(
            title,
            theme.title_font_size,
            TITLE_X_OFFSET, TITLE_Y_OFFSET,
            fill=theme.title_color,
            font_family=theme.label_font_family,
            font_weight="bold",
        ))

    return d.as_svg()


def _link_stroke(color: str, alpha: str) -> str:
    """Append the theme's alpha to a #rrggbb colour."""
    if not color:
        return FALLBACK_LINK_COLOR
    if color.startswith("#") and len(color) == 7:
        return f"{color}{alpha}"
    return color


def _render_nodes(d: draw.Drawing, graph: FlowGraph, theme: Theme) -> None:
    """Render nodes as rectangles with a name/value hover title."""
    for node in graph.nodes:
        rect = draw.Rectangle(
            node.x0, node.y0,
            node.x1 - node.x0, max(node.height, 0.0),
            fill=node.color or FALLBACK_COLOR,
            stroke=theme.node_stroke,
            stroke_width=theme.node_stroke_width,
            class_="node",
        )
        rect.append_title(f"{node.name}\n{node.value:g}")
        d.append(rect)


def _render_links(d: draw.Drawing, graph: FlowGraph, theme: Theme) -> None:
    """Render links as horizontal cubic curves stroked at band width."""
    for link in graph.links:
        start, c1, c2, end = link_path(graph, link)
        path = draw.Path(
            stroke=_link_stroke(link.color, theme.link_alpha),
            stroke_width=max(MIN_LINK_STROKE, link.width),
            fill="none",
            class_="link",
        )
        path.M(*start).C(*c1, *c2, *end)
        source = graph.nodes[link.source].name
        target = graph.nodes[link.target].name
        path.append_title(f"{source} -> {target}\n{link.value:g}")
        d.append(path)


def _render_labels(
    d: draw.Drawing,
    graph: FlowGraph,
    labels: list[LabelPlacement],
    theme: Theme,
) -> None:
    """Render node name labels beside their nodes."""
    for label in labels:
        if not label.text:
            continue
        node = graph.nodes[label.node_index]
        d.append(draw.Text(
            label.text,
            theme.label_font_size,
            label.x, label.y,
            fill=theme.label_color or node.color or FALLBACK_COLOR,
            font_family=theme.label_font_family,
            text_anchor=label.text_anchor,
            dominant_baseline="central",
        ))
