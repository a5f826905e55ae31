"""Tests for the tzid color legend."""

import json

import pytest
from factories import polygon_feature, square

from tzmap.errors import ParseError
from tzmap.geometry import extract_features
from tzmap.legend import build_color_mapping, read_color_mapping, write_color_mapping
from tzmap.palette import color_for_index, to_hex


@pytest.fixture
def features():
    return [
        polygon_feature([square(0, 0, 10), square(2, 2, 2)], tzid="Europe/Paris"),
        polygon_feature([square(20, 0, 5)]),
        polygon_feature([square(30, 0, 5)], tzid="Asia/Tokyo"),
        {"type": "Feature", "properties": {"tzid": "Etc/Nowhere"}, "geometry": None},
    ]


class TestBuildColorMapping:
    """Tests for build_color_mapping."""

    def test_ring_policy_uses_first_ring_position(self, features):
        data = extract_features(features)
        mapping = build_color_mapping(features, data, color_by="ring")
        assert mapping == {
            "Europe/Paris": to_hex(color_for_index(0)),
            "Asia/Tokyo": to_hex(color_for_index(3)),
        }
        assert mapping["Asia/Tokyo"] == "#FF0000"

    def test_feature_policy_uses_feature_position(self, features):
        data = extract_features(features)
        mapping = build_color_mapping(features, data, color_by="feature")
        assert mapping["Asia/Tokyo"] == to_hex(color_for_index(2))

    def test_tzid_without_rings_is_left_out(self, features):
        data = extract_features(features)
        assert "Etc/Nowhere" not in build_color_mapping(features, data)

    def test_skipped_features_do_not_shift_later_colors(self):
        features = [
            polygon_feature([[[0, 0], ["bad", 0], [1, 1]]], tzid="Bad/Zone"),
            polygon_feature([square(0, 0, 1)], tzid="Good/Zone"),
        ]
        data = extract_features(features)
        assert build_color_mapping(features, data, color_by="feature") == {
            "Good/Zone": to_hex(color_for_index(1))
        }
        assert build_color_mapping(features, data, color_by="ring") == {
            "Good/Zone": to_hex(color_for_index(0))
        }

    def test_duplicate_tzid_keeps_later_color(self):
        features = [
            polygon_feature([square(0, 0, 1)], tzid="Dup/Zone"),
            polygon_feature([square(2, 0, 1)], tzid="Dup/Zone"),
        ]
        data = extract_features(features)
        assert build_color_mapping(features, data) == {"Dup/Zone": to_hex(color_for_index(1))}

    def test_non_string_tzid_is_ignored(self):
        features = [polygon_feature([square(0, 0, 1)], tzid=42)]
        data = extract_features(features)
        assert build_color_mapping(features, data) == {}

    def test_order_follows_features(self):
        features = [
            polygon_feature([square(i, 0, 1)], tzid=name)
            for i, name in enumerate(["Zulu/Z", "Alpha/A", "Mike/M"])
        ]
        data = extract_features(features)
        assert list(build_color_mapping(features, data)) == ["Zulu/Z", "Alpha/A", "Mike/M"]


class TestColorMappingFile:
    """Tests for writing and reading the legend file."""

    def test_round_trip_matches_palette(self, tmp_path, features):
        data = extract_features(features)
        mapping = build_color_mapping(features, data)
        path = write_color_mapping(tmp_path / "timezone_colors.json", mapping)

        loaded = read_color_mapping(path)
        assert loaded == mapping
        positions = data.first_ring_positions()
        assert loaded["Asia/Tokyo"] == to_hex(color_for_index(positions[2]))

    def test_file_is_pretty_and_slashes_unescaped(self, tmp_path):
        path = write_color_mapping(tmp_path / "legend.json", {"America/New_York": "#55AAFF"})
        text = path.read_text(encoding="utf-8")
        assert text.startswith('{\n  "color_mapping": {\n')
        assert '"America/New_York": "#55AAFF"' in text
        assert "\\/" not in text
        assert text.endswith("\n")
        assert json.loads(text) == {"color_mapping": {"America/New_York": "#55AAFF"}}

    def test_reading_wrong_shape_raises(self, tmp_path):
        path = tmp_path / "legend.json"
        path.write_text('{"colors": {}}', encoding="utf-8")
        with pytest.raises(ParseError):
            read_color_mapping(path)
