"""Render stage: map extracted rings to screen space and fill them."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from .canvas import PixelCanvas, parse_color
from .config import FILL_EVENODD_HOLES, FILL_INDEPENDENT, RenderConfig
from .errors import InputOutputError
from .models import GeoData, Point, Ring
from .palette import RGB, color_for_index, color_index_for_ring
from .projection import CanvasSize, ScreenMapper, canvas_size_for_bounds
from .scanline import fill_polygon

_LOGGER = logging.getLogger("tzmap.render")


@dataclass(frozen=True, slots=True)
class _FillJob:
    """One even-odd pass: screen-space rings sharing a single color."""

    rings: tuple[tuple[Point, ...], ...]
    color: RGB
    first_position: int


@dataclass(frozen=True, slots=True)
class RenderStats:
    canvas_size: CanvasSize
    fill_jobs: int
    pixels_written: int
    elapsed_s: float


class MapRenderer:
    """Deterministic flat-color renderer for one GeoData collection."""

    def __init__(self, cfg: RenderConfig) -> None:
        self.cfg = cfg
        self.background = parse_color(cfg.background)
        self.last_stats: RenderStats | None = None

    def canvas_size(self, data: GeoData) -> CanvasSize:
        return canvas_size_for_bounds(
            data.bounds,
            self.cfg.height_px,
            degenerate=self.cfg.degenerate_bounds,
        )

    def render(self, data: GeoData) -> PixelCanvas:
        started = time.perf_counter()
        size = self.canvas_size(data)
        mapper = ScreenMapper.fit(data.bounds, size, degenerate=self.cfg.degenerate_bounds)
        canvas = PixelCanvas(size[0], size[1], background=self.background)

        jobs = self._plan_fill_jobs(data, mapper)
        pixels = 0
        for job in jobs:
            written = fill_polygon(canvas, job.rings, job.color)
            pixels += written
            _LOGGER.debug(
                "Filled ring group at position %d (%d rings) with %s: %d px",
                job.first_position,
                len(job.rings),
                job.color,
                written,
            )

        self.last_stats = RenderStats(
            canvas_size=size,
            fill_jobs=len(jobs),
            pixels_written=pixels,
            elapsed_s=time.perf_counter() - started,
        )
        _LOGGER.info(
            "Rendered %d rings as %d fills on a %dx%d canvas in %.2fs",
            len(data.rings),
            len(jobs),
            size[0],
            size[1],
            self.last_stats.elapsed_s,
        )
        return canvas

    def _ring_color(self, position: int, ring: Ring) -> RGB:
        return color_for_index(color_index_for_ring(position, ring, self.cfg.color_by))

    def _plan_fill_jobs(self, data: GeoData, mapper: ScreenMapper) -> list[_FillJob]:
        if self.cfg.fill_policy == FILL_INDEPENDENT:
            return [
                _FillJob(
                    rings=(mapper.map_points(ring.points),),
                    color=self._ring_color(position, ring),
                    first_position=position,
                )
                for position, ring in enumerate(data.rings)
            ]
        if self.cfg.fill_policy == FILL_EVENODD_HOLES:
            return self._plan_polygon_jobs(data, mapper)
        raise ValueError(f"Unsupported fill policy: {self.cfg.fill_policy!r}")

    def _plan_polygon_jobs(self, data: GeoData, mapper: ScreenMapper) -> list[_FillJob]:
        # Rings of one polygon are contiguous in extraction order.
        jobs: list[_FillJob] = []
        group: list[tuple[Point, ...]] = []
        group_key: tuple[int, int] | None = None
        group_color: RGB = self.background
        group_position = 0
        for position, ring in enumerate(data.rings):
            if ring.polygon_key != group_key:
                if group:
                    jobs.append(_FillJob(tuple(group), group_color, group_position))
                group = []
                group_key = ring.polygon_key
                group_color = self._ring_color(position, ring)
                group_position = position
            group.append(mapper.map_points(ring.points))
        if group:
            jobs.append(_FillJob(tuple(group), group_color, group_position))
        return jobs


def save_png(canvas: PixelCanvas, path: Path) -> Path:
    try:
        return canvas.save_png(path)
    except OSError as exc:
        raise InputOutputError(f"Failed writing image '{path}': {exc}") from exc
