"""GeoJSON -> legend + PNG batch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .config import AppConfig
from .errors import EmptyGeometryError
from .geometry import extract_features
from .io_geojson import load_features
from .legend import build_color_mapping, write_color_mapping
from .render import MapRenderer, save_png


@dataclass(slots=True)
class PipelineReport:
    input_path: Path | None = None
    color_mapping_path: Path | None = None
    image_path: Path | None = None
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)


def run_pipeline(cfg: AppConfig, input_path: Path) -> PipelineReport:
    """Extract rings, write the tzid legend, then rasterize every ring.

    Fatal conditions raise `TzMapError` subclasses; nothing is written when
    the input cannot produce a canvas.
    """
    report = PipelineReport(input_path=input_path)

    features = load_features(input_path)
    data = extract_features(features)
    report.summary["features"] = data.feature_count
    report.summary["rings"] = len(data.rings)
    report.summary["skipped_features"] = len(data.skipped)
    report.add_info(f"Extracted {len(data.rings)} rings from {data.feature_count} features")
    if data.skipped:
        report.add_warning(
            f"Skipped {len(data.skipped)} features without drawable geometry "
            f"(first: #{data.skipped[0].feature_index}, {data.skipped[0].reason})"
        )
    if not data.rings:
        raise EmptyGeometryError(f"No Polygon or MultiPolygon rings found in {input_path}")

    renderer = MapRenderer(cfg.render)
    width_px, height_px = renderer.canvas_size(data)
    report.summary["canvas_width"] = width_px
    report.summary["canvas_height"] = height_px
    report.add_info(
        "Bounds: x=[{:.6f}, {:.6f}] y=[{:.6f}, {:.6f}] -> canvas {}x{}".format(
            data.bounds.min_x,
            data.bounds.max_x,
            data.bounds.min_y,
            data.bounds.max_y,
            width_px,
            height_px,
        )
    )

    mapping = build_color_mapping(features, data, color_by=cfg.render.color_by)
    report.color_mapping_path = write_color_mapping(cfg.output.color_mapping_path, mapping)
    report.summary["legend_entries"] = len(mapping)
    report.add_info(f"Color mapping with {len(mapping)} entries written to {report.color_mapping_path}")

    canvas = renderer.render(data)
    report.image_path = save_png(canvas, cfg.output.image_path)
    if renderer.last_stats is not None:
        report.summary["pixels_written"] = renderer.last_stats.pixels_written
    report.add_info(f"Image written to {report.image_path}")
    return report


def format_report_lines(report: PipelineReport) -> Sequence[str]:
    lines: list[str] = []
    lines.extend(f"[INFO] {msg}" for msg in report.infos)
    lines.extend(f"[WARN] {msg}" for msg in report.warnings)
    lines.append("[OK] Map rendering completed.")
    return lines
