"""tzid -> hex color legend export."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from .errors import InputOutputError, ParseError
from .models import GeoData
from .palette import COLOR_BY_FEATURE, COLOR_BY_RING, color_for_index, to_hex
from .util import write_json

_LOGGER = logging.getLogger("tzmap.legend")

MAPPING_KEY = "color_mapping"


def _feature_tzid(feature: Any) -> str | None:
    if not isinstance(feature, Mapping):
        return None
    properties = feature.get("properties")
    if not isinstance(properties, Mapping):
        return None
    tzid = properties.get("tzid")
    if not isinstance(tzid, str):
        return None
    return tzid


def build_color_mapping(
    features: Sequence[Any],
    data: GeoData,
    *,
    color_by: str = COLOR_BY_RING,
) -> dict[str, str]:
    """Map every feature tzid to the color its rings are rendered with.

    The color index comes from the feature's position (`feature`) or from the
    position of its first extracted ring (`ring`), the same index the
    renderer uses, so skipped features cannot shift later colors.
    """
    if color_by not in (COLOR_BY_RING, COLOR_BY_FEATURE):
        raise ValueError(f"Unsupported color_by: {color_by!r}")

    first_ring = data.first_ring_positions()
    mapping: dict[str, str] = {}
    for idx, feature in enumerate(features):
        tzid = _feature_tzid(feature)
        if tzid is None:
            continue
        position = first_ring.get(idx)
        if position is None:
            _LOGGER.warning("tzid %r has no drawable rings; leaving it out of the legend", tzid)
            continue
        color_index = idx if color_by == COLOR_BY_FEATURE else position
        if tzid in mapping:
            _LOGGER.warning("Duplicate tzid %r at feature %d; keeping the later color", tzid, idx)
        mapping[tzid] = to_hex(color_for_index(color_index))
    return mapping


def write_color_mapping(path: Path, mapping: Mapping[str, str]) -> Path:
    try:
        write_json(path, {MAPPING_KEY: dict(mapping)})
    except OSError as exc:
        raise InputOutputError(f"Failed writing color mapping '{path}': {exc}") from exc
    _LOGGER.debug("Wrote %d legend entries to %s", len(mapping), path)
    return path


def read_color_mapping(path: Path) -> dict[str, str]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as exc:
        raise InputOutputError(f"Failed reading color mapping '{path}': {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ParseError(f"Color mapping '{path}' is not valid JSON: {exc}") from exc
    if not isinstance(raw, Mapping) or not isinstance(raw.get(MAPPING_KEY), Mapping):
        raise ParseError(f"Expected an object with '{MAPPING_KEY}' in {path}")
    return {str(k): str(v) for k, v in raw[MAPPING_KEY].items()}
