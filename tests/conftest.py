"""Shared fixtures for tzmap tests."""

import json
import logging

import pytest
from factories import collection, polygon_feature, square


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """The CLI reconfigures root logging; put the previous handlers back."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def two_square_collection():
    """Two 10x10 squares side by side with a 10-unit gap."""
    return collection(
        polygon_feature([square(0, 0, 10)], tzid="Europe/Paris"),
        polygon_feature([square(20, 0, 10)], tzid="America/New_York"),
    )


@pytest.fixture
def write_geojson(tmp_path):
    def _write(payload, name="input.geojson"):
        path = tmp_path / name
        if isinstance(payload, str):
            path.write_text(payload, encoding="utf-8")
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
