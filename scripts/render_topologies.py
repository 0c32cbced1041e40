#!/usr/bin/env python3
"""Batch render all topology fixtures and the examples under every alignment.

Outputs go to /tmp/sankey_flow_topology_renders/<alignment>/.

Usage:
    python scripts/render_topologies.py [--theme dark]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from sankey_flow.layout.engine import compute_layout  # noqa: E402
from sankey_flow.parser import Alignment, build_flow_graph, read_flow_table  # noqa: E402
from sankey_flow.render import ColorPalette  # noqa: E402
from sankey_flow.render.svg import render_svg  # noqa: E402
from sankey_flow.themes import THEMES  # noqa: E402

OUTPUT_DIR = Path("/tmp/sankey_flow_topology_renders")
TOPOLOGIES_DIR = project_root / "tests" / "fixtures" / "topologies"
EXAMPLES_DIR = project_root / "examples"

# Files to render, with the delimiter each one uses
FIXTURE_FILES = [(p, ",") for p in sorted(TOPOLOGIES_DIR.glob("*.csv"))]
EXTRA_FILES = [(EXAMPLES_DIR / "energy.csv", ","), (EXAMPLES_DIR / "budget.csv", ";")]


def render_file(
    csv_path: Path,
    delimiter: str,
    output_dir: Path,
    alignment: Alignment,
    theme_name: str,
) -> tuple[str, list[str]]:
    """Read, lay out and render a table to SVG.

    Returns (name, list_of_issues).
    """
    name = csv_path.stem
    issues: list[str] = []
    theme = THEMES[theme_name]

    try:
        table = read_flow_table(csv_path, delimiter=delimiter)
    except ValueError as e:
        return name, [f"READ ERROR: {e}"]

    graph = build_flow_graph(
        table.label_columns, table.values, ColorPalette(theme.palette)
    )
    if graph.is_empty:
        issues.append("empty graph")

    try:
        laid_out = compute_layout(graph, alignment=alignment)
    except Exception as e:
        return name, [f"LAYOUT ERROR: {e}"]

    try:
        svg_str = render_svg(laid_out, theme, title=f"{name} ({alignment.value})")
    except Exception as e:
        return name, [f"RENDER ERROR: {e}"]

    svg_path = output_dir / f"{name}.svg"
    svg_path.write_text(svg_str + "\n")

    return name, issues


def main():
    parser = argparse.ArgumentParser(description="Batch render topology fixtures")
    parser.add_argument(
        "--theme", choices=sorted(THEMES), default="light", help="Theme to render with"
    )
    args = parser.parse_args()

    all_files = FIXTURE_FILES + EXTRA_FILES
    print(f"Rendering {len(all_files)} files x {len(Alignment)} alignments "
          f"to {OUTPUT_DIR}/")
    print()

    max_name_len = max(len(f.stem) for f, _ in all_files)
    any_errors = False

    for alignment in Alignment:
        out_dir = OUTPUT_DIR / alignment.value
        out_dir.mkdir(parents=True, exist_ok=True)
        print(f"[{alignment.value}]")
        for csv_path, delimiter in all_files:
            name, issues = render_file(
                csv_path, delimiter, out_dir, alignment, args.theme
            )
            status = "OK" if not issues else "ISSUES"
            if any("ERROR" in i for i in issues):
                status = "FAIL"
                any_errors = True

            print(f"  {name:<{max_name_len}}  [{status}]")
            for issue in issues:
                print(f"    - {issue}")

    print(f"\nOutputs in: {OUTPUT_DIR}/")

    if any_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
