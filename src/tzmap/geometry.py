"""Ring extraction from GeoJSON Polygon / MultiPolygon geometry nodes."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Sequence

from .errors import MalformedGeometryError
from .models import ExtractionResult, GeoData, Point, Ring, SkippedFeature

_LOGGER = logging.getLogger("tzmap.geometry")

SUPPORTED_TYPES = ("Polygon", "MultiPolygon")


def _require_array(value: Any, location: str) -> Sequence[Any]:
    if not isinstance(value, list):
        raise MalformedGeometryError("Expected coordinate array", location=location)
    return value


def _coordinate(value: Any, location: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedGeometryError(f"Expected numeric coordinate, got {value!r}", location=location)
    try:
        number = float(value)
    except OverflowError as exc:
        raise MalformedGeometryError("Coordinate out of range", location=location) from exc
    if not math.isfinite(number):
        raise MalformedGeometryError(f"Non-finite coordinate {value!r}", location=location)
    return number


def _parse_position(value: Any, location: str) -> Point:
    position = _require_array(value, location)
    if len(position) < 2:
        raise MalformedGeometryError(
            f"Position needs at least 2 values, got {len(position)}",
            location=location,
        )
    # A third value (altitude) is allowed by GeoJSON and ignored here.
    return Point(
        x=_coordinate(position[0], f"{location}/0"),
        y=_coordinate(position[1], f"{location}/1"),
    )


def _parse_ring(value: Any, location: str) -> tuple[Point, ...]:
    positions = _require_array(value, location)
    return tuple(
        _parse_position(position, f"{location}/{idx}") for idx, position in enumerate(positions)
    )


def _parse_polygon(
    value: Any,
    location: str,
    *,
    feature_index: int,
    polygon_index: int,
) -> list[Ring]:
    rings: list[Ring] = []
    for ring_index, raw_ring in enumerate(_require_array(value, location)):
        ring_location = f"{location}/{ring_index}"
        points = _parse_ring(raw_ring, ring_location)
        if not points:
            _LOGGER.debug("Ignoring empty ring at %s", ring_location)
            continue
        rings.append(
            Ring(
                points=points,
                feature_index=feature_index,
                polygon_index=polygon_index,
                ring_index=ring_index,
            )
        )
    return rings


def parse_geometry(geometry: Any, *, feature_index: int = 0) -> ExtractionResult:
    """Turn a geometry node into rings without touching any shared state.

    Unsupported or incomplete nodes produce a skipped result. Malformed
    coordinates raise `MalformedGeometryError`.
    """
    if not isinstance(geometry, Mapping):
        return ExtractionResult.skipped("geometry is not an object")
    geom_type = geometry.get("type")
    if "coordinates" not in geometry or geom_type is None:
        return ExtractionResult.skipped("geometry has no type or coordinates")
    if geom_type not in SUPPORTED_TYPES:
        return ExtractionResult.skipped(f"unsupported geometry type {geom_type!r}")

    coordinates = geometry["coordinates"]
    location = f"/features/{feature_index}/geometry/coordinates"
    rings: list[Ring] = []
    if geom_type == "Polygon":
        rings.extend(
            _parse_polygon(coordinates, location, feature_index=feature_index, polygon_index=0)
        )
    else:
        for polygon_index, polygon in enumerate(_require_array(coordinates, location)):
            rings.extend(
                _parse_polygon(
                    polygon,
                    f"{location}/{polygon_index}",
                    feature_index=feature_index,
                    polygon_index=polygon_index,
                )
            )
    return ExtractionResult.from_rings(tuple(rings))


def extract_geometry(geometry: Any, data: GeoData, *, feature_index: int = 0) -> ExtractionResult:
    """Extract one geometry node into `data`, updating its bounding box.

    All rings are validated before any is committed, so a malformed node
    leaves `data` untouched.
    """
    result = parse_geometry(geometry, feature_index=feature_index)
    if result.extracted:
        data.add_rings(result.rings)
    return result


def extract_features(features: Sequence[Any]) -> GeoData:
    """Walk a feature list in order and collect every ring plus global bounds.

    Features without usable geometry are skipped; malformed geometry is
    logged and skipped so one bad feature does not abort the batch.
    """
    data = GeoData(feature_count=len(features))
    for idx, feature in enumerate(features):
        if not isinstance(feature, Mapping):
            _record_skip(data, idx, "feature is not an object", warn=True)
            continue
        geometry = feature.get("geometry")
        if geometry is None:
            _record_skip(data, idx, "feature has no geometry", warn=False)
            continue
        try:
            result = extract_geometry(geometry, data, feature_index=idx)
        except MalformedGeometryError as exc:
            _record_skip(data, idx, f"malformed geometry: {exc}", warn=True)
            continue
        if not result.extracted:
            _record_skip(data, idx, result.reason, warn=False)

    _LOGGER.debug(
        "Extracted %d rings from %d features (%d skipped)",
        len(data.rings),
        len(features),
        len(data.skipped),
    )
    return data


def _record_skip(data: GeoData, feature_index: int, reason: str, *, warn: bool) -> None:
    data.skipped.append(SkippedFeature(feature_index=feature_index, reason=reason))
    if warn:
        _LOGGER.warning("Skipping feature %d: %s", feature_index, reason)
    else:
        _LOGGER.debug("Skipping feature %d: %s", feature_index, reason)
