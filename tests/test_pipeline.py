"""End-to-end tests for the pipeline and the CLI."""

import json

import pytest
from factories import collection, polygon_feature, square
from PIL import Image

from tzmap.cli import main
from tzmap.config import AppConfig, RenderConfig
from tzmap.errors import (
    DegenerateBoundsError,
    EmptyGeometryError,
    InputOutputError,
    ParseError,
)
from tzmap.legend import read_color_mapping
from tzmap.palette import color_for_index, to_hex
from tzmap.pipeline import format_report_lines, run_pipeline


@pytest.fixture
def small_cfg(tmp_path):
    return AppConfig(render=RenderConfig(height_px=60)).with_output_directory(tmp_path / "out")


class TestRunPipeline:
    """Tests for run_pipeline."""

    def test_writes_legend_and_image(self, small_cfg, write_geojson, two_square_collection):
        report = run_pipeline(small_cfg, write_geojson(two_square_collection))

        assert report.summary["rings"] == 2
        assert report.summary["legend_entries"] == 2
        assert (report.summary["canvas_width"], report.summary["canvas_height"]) == (180, 60)

        mapping = read_color_mapping(report.color_mapping_path)
        assert mapping == {
            "Europe/Paris": to_hex(color_for_index(0)),
            "America/New_York": to_hex(color_for_index(1)),
        }
        with Image.open(report.image_path) as image:
            assert image.size == (180, 60)
            assert image.getpixel((30, 30)) == color_for_index(0)
            assert image.getpixel((150, 30)) == color_for_index(1)
            assert image.getpixel((90, 30)) == (245, 245, 245)

    def test_legend_colors_match_rendered_rings(self, small_cfg, write_geojson):
        payload = collection(
            polygon_feature([[[0, 0], ["oops", 0], [1, 1]]], tzid="Broken/Zone"),
            polygon_feature([square(0, 0, 10)]),
            polygon_feature([square(20, 0, 10)], tzid="Kept/Zone"),
        )
        report = run_pipeline(small_cfg, write_geojson(payload))

        assert report.summary["skipped_features"] == 1
        assert report.warnings
        mapping = read_color_mapping(report.color_mapping_path)
        assert list(mapping) == ["Kept/Zone"]
        with Image.open(report.image_path) as image:
            rendered = image.getpixel((150, 30))
        assert mapping["Kept/Zone"] == to_hex(rendered)

    def test_report_lines(self, small_cfg, write_geojson, two_square_collection):
        report = run_pipeline(small_cfg, write_geojson(two_square_collection))
        lines = format_report_lines(report)
        assert lines[0].startswith("[INFO] Extracted 2 rings")
        assert lines[-1] == "[OK] Map rendering completed."

    def test_missing_input(self, small_cfg, tmp_path):
        with pytest.raises(InputOutputError):
            run_pipeline(small_cfg, tmp_path / "absent.geojson")

    def test_invalid_json(self, small_cfg, write_geojson):
        with pytest.raises(ParseError):
            run_pipeline(small_cfg, write_geojson("{not json"))

    @pytest.mark.parametrize(
        "text",
        [
            "[" + "9" * 5000 + "]",
            "[" * 100_000 + "]" * 100_000,
        ],
        ids=["huge-integer", "deep-nesting"],
    )
    def test_undecodable_json_is_a_parse_error(self, small_cfg, write_geojson, text):
        with pytest.raises(ParseError):
            run_pipeline(small_cfg, write_geojson(text))

    @pytest.mark.parametrize("payload", [[], {"type": "FeatureCollection"}, {"features": {}}])
    def test_missing_features(self, small_cfg, write_geojson, payload):
        with pytest.raises(ParseError):
            run_pipeline(small_cfg, write_geojson(payload))

    def test_no_rings(self, small_cfg, write_geojson):
        payload = collection({"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}})
        with pytest.raises(EmptyGeometryError):
            run_pipeline(small_cfg, write_geojson(payload))

    def test_degenerate_bounds_write_nothing(self, small_cfg, write_geojson):
        payload = collection(polygon_feature([[[0, 0], [5, 0], [10, 0]]], tzid="Flat/Zone"))
        with pytest.raises(DegenerateBoundsError):
            run_pipeline(small_cfg, write_geojson(payload))
        assert not small_cfg.output.color_mapping_path.exists()
        assert not small_cfg.output.image_path.exists()


class TestCli:
    """Tests for CLI exit codes."""

    def test_success(self, tmp_path, write_geojson, two_square_collection):
        out = tmp_path / "cli-out"
        code = main([str(write_geojson(two_square_collection)), "--output-dir", str(out)])
        assert code == 0
        assert (out / "output.png").exists()
        legend = json.loads((out / "timezone_colors.json").read_text(encoding="utf-8"))
        assert set(legend["color_mapping"]) == {"Europe/Paris", "America/New_York"}

    def test_config_file_is_used(self, tmp_path, write_geojson, two_square_collection):
        config = tmp_path / "config.yaml"
        config.write_text("render:\n  height_px: 30\noutput:\n  directory: built\n", encoding="utf-8")
        code = main([str(write_geojson(two_square_collection)), "--config", str(config)])
        assert code == 0
        with Image.open(tmp_path / "built" / "output.png") as image:
            assert image.size == (90, 30)

    def test_missing_argument(self):
        assert main([]) == 1

    def test_extra_argument(self, tmp_path):
        assert main([str(tmp_path / "a.json"), str(tmp_path / "b.json")]) == 1

    def test_help(self):
        assert main(["--help"]) == 0

    def test_unreadable_input(self, tmp_path):
        assert main([str(tmp_path / "absent.geojson"), "--output-dir", str(tmp_path)]) == 1

    def test_bad_config(self, tmp_path, write_geojson, two_square_collection):
        config = tmp_path / "config.yaml"
        config.write_text("render:\n  fill_policy: nonzero\n", encoding="utf-8")
        assert main([str(write_geojson(two_square_collection)), "--config", str(config)]) == 1

    def test_unparseable_config(self, tmp_path, write_geojson, two_square_collection):
        config = tmp_path / "config.yaml"
        config.write_text("render: [unclosed\n", encoding="utf-8")
        assert main([str(write_geojson(two_square_collection)), "--config", str(config)]) == 1

    def test_parse_error(self, tmp_path, write_geojson):
        assert main([str(write_geojson("[1, 2")), "--output-dir", str(tmp_path)]) == 2

    def test_empty_geometry(self, tmp_path, write_geojson):
        assert main([str(write_geojson(collection())), "--output-dir", str(tmp_path)]) == 3

    def test_degenerate_bounds(self, tmp_path, write_geojson):
        payload = collection(polygon_feature([[[1, 1], [1, 1], [1, 1]]]))
        assert main([str(write_geojson(payload)), "--output-dir", str(tmp_path)]) == 4
