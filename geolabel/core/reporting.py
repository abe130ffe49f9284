# geolabel/core/reporting.py
"""
Create reports/<run_name>/ and write diagram.svg, layout.json, run_metadata.json.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from geolabel.core.config import (
    HORIZONTAL_MAX_ITER,
    HORIZONTAL_STEP,
    LABEL_EDGE_PAD,
    LABEL_SEPARATION,
    PADDING_PX,
    REPORTS_DIR,
    RIGHT_ANGLE_MARKER_SIZE,
    TANGENTIAL_MAX_ITER,
    TANGENTIAL_STEP,
    VERTEX_LABEL_OFFSET,
)
from geolabel.core.layout import LayoutSummary
from geolabel.core.types import RenderResult


def ensure_report_dir(
    repo_root: Path,
    run_name: str,
    output_dir: str | None = None,
) -> Path:
    """Create output_dir/<run_name>/ under repo_root; return path. Default output_dir from config."""
    base = output_dir if output_dir is not None else REPORTS_DIR
    out = (repo_root / base).resolve() / run_name
    out.mkdir(parents=True, exist_ok=True)
    return out


def write_svg(report_dir: Path, result: RenderResult) -> Path:
    path = report_dir / "diagram.svg"
    path.write_text(result.svg, encoding="utf-8")
    return path


def layout_to_dict(result: RenderResult, summary: LayoutSummary) -> dict:
    """Placed label rects, drawn segment count and the audit summary."""
    return {
        "labels": [
            {"x": r.x, "y": r.y, "width": r.width, "height": r.height}
            for r in result.occupied.labels
        ],
        "image_vertices": [{"x": p.x, "y": p.y} for p in result.image_vertices],
        "summary": summary.to_dict(),
    }


def write_layout_json(report_dir: Path, result: RenderResult, summary: LayoutSummary) -> Path:
    """Write layout.json to report_dir. Returns path to file."""
    path = report_dir / "layout.json"
    path.write_text(json.dumps(layout_to_dict(result, summary), indent=2), encoding="utf-8")
    return path


def run_metadata_dict(run_name: str, input_path: str, diagram_type: str) -> dict:
    """Timestamp and config snapshot for run_metadata.json."""
    return {
        "run_name": run_name,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
        "input_path": input_path,
        "diagram_type": diagram_type,
        "config": {
            "PADDING_PX": PADDING_PX,
            "VERTEX_LABEL_OFFSET": VERTEX_LABEL_OFFSET,
            "TANGENTIAL_STEP": TANGENTIAL_STEP,
            "TANGENTIAL_MAX_ITER": TANGENTIAL_MAX_ITER,
            "HORIZONTAL_STEP": HORIZONTAL_STEP,
            "HORIZONTAL_MAX_ITER": HORIZONTAL_MAX_ITER,
            "LABEL_EDGE_PAD": LABEL_EDGE_PAD,
            "LABEL_SEPARATION": LABEL_SEPARATION,
            "RIGHT_ANGLE_MARKER_SIZE": RIGHT_ANGLE_MARKER_SIZE,
        },
    }


def write_run_metadata_json(report_dir: Path, run_name: str, input_path: str, diagram_type: str) -> Path:
    """Write run_metadata.json to report_dir."""
    path = report_dir / "run_metadata.json"
    data = run_metadata_dict(run_name, input_path, diagram_type)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
