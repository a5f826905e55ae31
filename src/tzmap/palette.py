"""Deterministic 80-color palette: a 4x4x4 RGB grid plus a 16-step gray ramp."""

from __future__ import annotations

from .models import Ring

RGB = tuple[int, int, int]

PALETTE_SIZE = 80
_GRID_SIZE = 64
_LEVEL_STEP = 85
_GRAY_STEP = 16

COLOR_BY_RING = "ring"
COLOR_BY_FEATURE = "feature"
COLOR_BY_CHOICES = (COLOR_BY_RING, COLOR_BY_FEATURE)


def color_for_index(index: int) -> RGB:
    """Return the palette color for a non-negative index, cycling every 80."""
    if index < 0:
        raise ValueError(f"Color index must be >= 0, got {index}")
    idx = index % PALETTE_SIZE
    if idx >= _GRID_SIZE:
        gray = (idx - _GRID_SIZE) * _GRAY_STEP
        return (gray, gray, gray)
    return (
        (idx % 4) * _LEVEL_STEP,
        ((idx // 4) % 4) * _LEVEL_STEP,
        ((idx // 16) % 4) * _LEVEL_STEP,
    )


def to_hex(rgb: RGB) -> str:
    r, g, b = rgb
    return f"#{r:02X}{g:02X}{b:02X}"


def color_index_for_ring(position: int, ring: Ring, color_by: str) -> int:
    """Color index of the ring at `position` in extraction order."""
    if color_by == COLOR_BY_RING:
        return position
    if color_by == COLOR_BY_FEATURE:
        return ring.feature_index
    raise ValueError(f"color_by must be one of: {', '.join(COLOR_BY_CHOICES)}")
