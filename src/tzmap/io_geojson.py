"""GeoJSON document loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .errors import InputOutputError, ParseError

_LOGGER = logging.getLogger("tzmap.io_geojson")


def read_document(path: Path) -> Any:
    """Read and decode a UTF-8 JSON document."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except OSError as exc:
        raise InputOutputError(f"Cannot read input file '{path}': {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"Input file '{path}' is not UTF-8 text: {exc}") from exc
    except ValueError as exc:
        # JSONDecodeError, or the integer digit limit hit while decoding.
        raise ParseError(f"Input file '{path}' is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseError(f"Input file '{path}' is nested too deeply") from exc


def feature_list(document: Any) -> list[Any]:
    """Return the `features` array of a FeatureCollection-shaped document."""
    if not isinstance(document, Mapping):
        raise ParseError("Top-level GeoJSON value must be an object")
    if "features" not in document:
        raise ParseError("GeoJSON document has no 'features' member")
    features = document["features"]
    if not isinstance(features, list):
        raise ParseError("GeoJSON 'features' member must be an array")
    return features


def load_features(path: Path) -> list[Any]:
    features = feature_list(read_document(path))
    _LOGGER.info("Loaded %d features from %s", len(features), path)
    return features
