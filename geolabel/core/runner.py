# geolabel/core/runner.py
"""
CLI entrypoint: load a diagram JSON, render it, audit the layout, export.
Usage: python -m geolabel.core.runner --input diagram.json --run-name demo [--png]
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from geolabel.core.error_codes import DiagramError, user_message
from geolabel.core.io import load_diagram
from geolabel.core.layout import summarize_layout
from geolabel.core.reporting import (
    ensure_report_dir,
    write_layout_json,
    write_run_metadata_json,
    write_svg,
)
from geolabel.core.transformation_diagram import render_transformation_diagram
from geolabel.core.triangle_diagram import render_triangle_diagram
from geolabel.core.types import RenderResult, TransformationDiagram

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Render a geometry diagram with collision-free labels.")
    p.add_argument("--input", type=str, required=True, help="Diagram JSON path (repo-relative)")
    p.add_argument("--run-name", type=str, default="run", dest="run_name", help="Reports subdir name")
    p.add_argument("--output-dir", type=str, default="reports", dest="output_dir", help="Output directory (repo-relative)")
    p.add_argument("--repo-root", type=str, default=None, dest="repo_root", help="Repo root (default: cwd)")
    p.add_argument("--png", action="store_true", help="Also write a PNG preview")
    return p.parse_args(argv)


def render_diagram(diagram) -> RenderResult:
    """Dispatch to the renderer of the diagram's family."""
    if isinstance(diagram, TransformationDiagram):
        return render_transformation_diagram(diagram)
    return render_triangle_diagram(diagram)


def main(argv: list[str] | None = None) -> int:
    # Configure logging from env (e.g. LOG_LEVEL=DEBUG for development)
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO))

    args = _parse_args(argv)
    repo_root = Path(args.repo_root).resolve() if args.repo_root else Path.cwd().resolve()

    try:
        diagram = load_diagram(args.input, repo_root=repo_root)
        result = render_diagram(diagram)
    except DiagramError as e:
        print(f"{user_message(e.error_key)} ({e})", file=sys.stderr)
        return 1

    summary = summarize_layout(result.occupied)
    if not summary.clean:
        logger.info(
            "layout fallback: %d label(s) on lines, %d overlapping pair(s)",
            summary.labels_on_segments,
            summary.overlapping_pairs,
        )

    report_dir = ensure_report_dir(repo_root, args.run_name, output_dir=args.output_dir)
    diagram_type = "transformationDiagram" if isinstance(diagram, TransformationDiagram) else "triangleDiagram"
    paths = [
        write_svg(report_dir, result),
        write_layout_json(report_dir, result, summary),
        write_run_metadata_json(report_dir, args.run_name, args.input, diagram_type),
    ]
    if args.png:
        from geolabel.core.render import render_canvas_png

        png_path = report_dir / "diagram.png"
        render_canvas_png(result.canvas, png_path)
        paths.append(png_path)

    for p in paths:
        print(p)
    return 0


if __name__ == "__main__":
    sys.exit(main())
