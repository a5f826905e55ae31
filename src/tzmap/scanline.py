"""Even-odd scanline polygon fill."""

from __future__ import annotations

import math
from typing import Iterator, Sequence

from .canvas import PixelCanvas
from .models import Point
from .palette import RGB

Span = tuple[int, float, float]


def _edges(rings: Sequence[Sequence[Point]]) -> list[tuple[Point, Point]]:
    edges: list[tuple[Point, Point]] = []
    for points in rings:
        if len(points) < 3:
            continue
        # Pairs (p[j], p[i]) with j trailing i, wrapping last -> first.
        j = len(points) - 1
        for i in range(len(points)):
            edges.append((points[j], points[i]))
            j = i
    return edges


def scanline_intercepts(edges: Sequence[tuple[Point, Point]], y: float) -> list[float]:
    """Sorted x positions where the edges cross the horizontal line `y`.

    An edge counts only when exactly one endpoint lies strictly below
    (greater y than) the line, so a vertex on the line is counted once and
    horizontal edges never are.
    """
    xs: list[float] = []
    for pj, pi in edges:
        if (pi.y > y) != (pj.y > y):
            xs.append(pj.x + (pi.x - pj.x) * (y - pj.y) / (pi.y - pj.y))
    xs.sort()
    return xs


def pair_intercepts(xs: Sequence[float]) -> list[tuple[float, float]]:
    """Pair sorted intercepts 1st-2nd, 3rd-4th, ...; a trailing odd one is dropped."""
    return [(xs[k], xs[k + 1]) for k in range(0, len(xs) - 1, 2)]


def _edge_table(edges: Sequence[tuple[Point, Point]]) -> list[tuple[int, int, Point, Point]]:
    # (first_row, stop_row, pj, pi): the edge crosses integer rows in
    # [first_row, stop_row), which is the strict straddle test for whole y.
    table = []
    for pj, pi in edges:
        lo, hi = min(pj.y, pi.y), max(pj.y, pi.y)
        if lo == hi:
            continue
        table.append((math.ceil(lo), math.ceil(hi), pj, pi))
    table.sort(key=lambda entry: entry[0])
    return table


def scanline_spans(
    rings: Sequence[Sequence[Point]],
    *,
    row_limit: tuple[int, int] | None = None,
) -> Iterator[Span]:
    """Yield `(y, x_start, x_end)` interior spans of the rings under even-odd.

    Every ring with at least three points contributes its edges to the same
    pass. Edges enter an active list at their first crossed row and leave it
    after their last, so each row only looks at the edges it crosses. An odd
    intercept count leaves the last intercept unpaired, and it is dropped.
    `row_limit` restricts scanlines to an inclusive row range.
    """
    edges = _edges(rings)
    if not edges:
        return
    ys = [p.y for edge in edges for p in edge]
    y_start = math.floor(min(ys))
    y_end = math.floor(max(ys))
    if row_limit is not None:
        y_start = max(y_start, row_limit[0])
        y_end = min(y_end, row_limit[1])

    table = _edge_table(edges)
    pending = 0
    active: list[tuple[int, int, Point, Point]] = []
    for y in range(y_start, y_end + 1):
        while pending < len(table) and table[pending][0] <= y:
            active.append(table[pending])
            pending += 1
        active = [entry for entry in active if entry[1] > y]
        if not active:
            if pending == len(table):
                return
            continue
        xs = sorted(pj.x + (pi.x - pj.x) * (y - pj.y) / (pi.y - pj.y) for _, _, pj, pi in active)
        for x_start, x_end in pair_intercepts(xs):
            yield (y, x_start, x_end)


def fill_polygon(canvas: PixelCanvas, rings: Sequence[Sequence[Point]], color: RGB) -> int:
    """Fill screen-space rings in one even-odd pass; return pixels written."""
    written = 0
    for y, x_start, x_end in scanline_spans(rings, row_limit=(0, canvas.height - 1)):
        written += canvas.fill_span(y, math.floor(x_start), math.floor(x_end), color)
    return written


def fill_ring(canvas: PixelCanvas, points: Sequence[Point], color: RGB) -> int:
    """Fill one screen-space ring as a solid shape."""
    return fill_polygon(canvas, [points], color)
