"""World -> canvas coordinate mapping with a uniform, aspect-preserving scale."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from .errors import DegenerateBoundsError
from .models import BoundingBox, Point

_LOGGER = logging.getLogger("tzmap.projection")

DEGENERATE_ERROR = "error"
DEGENERATE_UNIT_SCALE = "unit_scale"
DEGENERATE_CHOICES = (DEGENERATE_ERROR, DEGENERATE_UNIT_SCALE)

CanvasSize = tuple[int, int]


def _check_degenerate(bounds: BoundingBox, degenerate: str) -> bool:
    """Return True when the unit-scale fallback applies; raise when it may not."""
    if degenerate not in DEGENERATE_CHOICES:
        raise ValueError(f"degenerate must be one of: {', '.join(DEGENERATE_CHOICES)}")
    if bounds.is_empty:
        raise DegenerateBoundsError("Bounding box is empty; no coordinates were observed")
    if not bounds.is_degenerate:
        return False
    if degenerate == DEGENERATE_ERROR:
        raise DegenerateBoundsError(
            f"Bounding box has zero extent (width={bounds.width}, height={bounds.height})"
        )
    return True


def canvas_size_for_bounds(
    bounds: BoundingBox,
    height_px: int,
    *,
    degenerate: str = DEGENERATE_ERROR,
) -> CanvasSize:
    """Canvas `(width, height)` with a fixed height and the data's aspect ratio."""
    if height_px < 1:
        raise ValueError(f"height_px must be >= 1, got {height_px}")
    if _check_degenerate(bounds, degenerate):
        _LOGGER.warning("Degenerate bounds; using a square %dx%d canvas", height_px, height_px)
        return (height_px, height_px)
    aspect = bounds.width / bounds.height
    return (max(int(round(height_px * aspect)), 1), height_px)


@dataclass(frozen=True, slots=True)
class ScreenMapper:
    """Precomputed transform for one bounds/canvas pair."""

    min_x: float
    min_y: float
    scale: float
    canvas_height: int

    @classmethod
    def fit(
        cls,
        bounds: BoundingBox,
        canvas_size: CanvasSize,
        *,
        degenerate: str = DEGENERATE_ERROR,
    ) -> ScreenMapper:
        width_px, height_px = canvas_size
        if _check_degenerate(bounds, degenerate):
            scale = 1.0
        else:
            scale = min(width_px / bounds.width, height_px / bounds.height)
        return cls(min_x=bounds.min_x, min_y=bounds.min_y, scale=scale, canvas_height=height_px)

    def to_screen(self, point: Point) -> Point:
        # Canvas rows grow downward while world y grows northward.
        return Point(
            x=(point.x - self.min_x) * self.scale,
            y=self.canvas_height - (point.y - self.min_y) * self.scale,
        )

    def map_points(self, points: Sequence[Point]) -> tuple[Point, ...]:
        return tuple(self.to_screen(point) for point in points)


def to_screen(point: Point, bounds: BoundingBox, canvas_size: CanvasSize) -> Point:
    """Map a single world point onto the canvas."""
    return ScreenMapper.fit(bounds, canvas_size).to_screen(point)
