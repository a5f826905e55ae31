"""Domain models shared across pipeline modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class BoundingBox:
    """Running min/max over every coordinate observed so far.

    A fresh box is empty: its minimums sit at +inf and its maximums at -inf,
    so the first included point becomes both corners exactly.
    """

    min_x: float = math.inf
    min_y: float = math.inf
    max_x: float = -math.inf
    max_y: float = -math.inf

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    @property
    def width(self) -> float:
        return 0.0 if self.is_empty else self.max_x - self.min_x

    @property
    def height(self) -> float:
        return 0.0 if self.is_empty else self.max_y - self.min_y

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0.0 or self.height <= 0.0

    def include(self, x: float, y: float) -> None:
        if x < self.min_x:
            self.min_x = x
        if x > self.max_x:
            self.max_x = x
        if y < self.min_y:
            self.min_y = y
        if y > self.max_y:
            self.max_y = y


@dataclass(frozen=True, slots=True)
class Ring:
    """One closed polygon boundary in world coordinates.

    `ring_index` 0 is the outer boundary of its GeoJSON polygon; higher
    indices are holes. The last point connects back to the first.
    """

    points: tuple[Point, ...]
    feature_index: int
    polygon_index: int = 0
    ring_index: int = 0

    @property
    def polygon_key(self) -> tuple[int, int]:
        return (self.feature_index, self.polygon_index)


@dataclass(frozen=True, slots=True)
class SkippedFeature:
    feature_index: int
    reason: str


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of extracting one geometry node: rings, or a skip reason."""

    status: str
    rings: tuple[Ring, ...] = ()
    reason: str = ""

    EXTRACTED = "extracted"
    SKIPPED = "skipped"

    @property
    def extracted(self) -> bool:
        return self.status == self.EXTRACTED

    @classmethod
    def from_rings(cls, rings: tuple[Ring, ...]) -> ExtractionResult:
        return cls(status=cls.EXTRACTED, rings=rings)

    @classmethod
    def skipped(cls, reason: str) -> ExtractionResult:
        return cls(status=cls.SKIPPED, reason=reason)


@dataclass(slots=True)
class GeoData:
    """Rings and bounds accumulated during a single extraction pass."""

    rings: list[Ring] = field(default_factory=list)
    bounds: BoundingBox = field(default_factory=BoundingBox)
    skipped: list[SkippedFeature] = field(default_factory=list)
    feature_count: int = 0

    def add_rings(self, rings: tuple[Ring, ...]) -> None:
        for ring in rings:
            for point in ring.points:
                self.bounds.include(point.x, point.y)
            self.rings.append(ring)

    def first_ring_positions(self) -> dict[int, int]:
        """Map feature index -> position of that feature's first ring."""
        positions: dict[int, int] = {}
        for position, ring in enumerate(self.rings):
            positions.setdefault(ring.feature_index, position)
        return positions
