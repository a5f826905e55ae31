"""Typed configuration loader for the optional YAML config file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence, cast

import yaml

from .canvas import parse_color
from .palette import COLOR_BY_CHOICES, COLOR_BY_RING
from .projection import DEGENERATE_CHOICES, DEGENERATE_ERROR

FILL_INDEPENDENT = "independent"
FILL_EVENODD_HOLES = "evenodd_holes"
FILL_POLICY_CHOICES = (FILL_INDEPENDENT, FILL_EVENODD_HOLES)

_EMPTY: Mapping[str, Any] = {}


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if value is None:
        return _EMPTY
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected integer for '{field_name}'")
    return value


def _choice(value: Any, field_name: str, allowed: Sequence[str]) -> str:
    normalized = _str(value, field_name).casefold()
    if normalized not in allowed:
        raise ValueError(f"{field_name} must be one of: " + ", ".join(sorted(allowed)))
    return normalized


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    p = Path(_str(value, field_name))
    return p if p.is_absolute() else root_dir / p


@dataclass(frozen=True, slots=True)
class RenderConfig:
    height_px: int = 600
    background: str = "#F5F5F5"
    fill_policy: str = FILL_INDEPENDENT
    color_by: str = COLOR_BY_RING
    degenerate_bounds: str = DEGENERATE_ERROR

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> RenderConfig:
        defaults = cls()
        height_px = _int(raw.get("height_px", defaults.height_px), "render.height_px")
        if height_px < 1:
            raise ValueError("render.height_px must be >= 1")
        background = _str(raw.get("background", defaults.background), "render.background")
        try:
            parse_color(background)
        except ValueError as exc:
            raise ValueError(f"render.background is not a color: {background!r}") from exc
        return cls(
            height_px=height_px,
            background=background,
            fill_policy=_choice(
                raw.get("fill_policy", defaults.fill_policy),
                "render.fill_policy",
                FILL_POLICY_CHOICES,
            ),
            color_by=_choice(raw.get("color_by", defaults.color_by), "render.color_by", COLOR_BY_CHOICES),
            degenerate_bounds=_choice(
                raw.get("degenerate_bounds", defaults.degenerate_bounds),
                "render.degenerate_bounds",
                DEGENERATE_CHOICES,
            ),
        )


@dataclass(frozen=True, slots=True)
class OutputConfig:
    directory: Path = Path(".")
    color_mapping: str = "timezone_colors.json"
    image: str = "output.png"

    @property
    def color_mapping_path(self) -> Path:
        return self.directory / self.color_mapping

    @property
    def image_path(self) -> Path:
        return self.directory / self.image

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> OutputConfig:
        defaults = cls()
        directory = (
            _path_from_cfg(raw["directory"], "output.directory", root_dir)
            if raw.get("directory") is not None
            else defaults.directory
        )
        return cls(
            directory=directory,
            color_mapping=_str(raw.get("color_mapping", defaults.color_mapping), "output.color_mapping"),
            image=_str(raw.get("image", defaults.image), "output.image"),
        )


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    file: Path | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> LoggingConfig:
        file_raw = raw.get("file")
        if file_raw is None:
            return cls()
        return cls(file=_path_from_cfg(file_raw, "logging.file", root_dir))


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path | None = None
    render: RenderConfig = RenderConfig()
    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        return cls(
            source_path=source_path.resolve(),
            render=RenderConfig.from_mapping(_mapping(raw.get("render"), "render")),
            output=OutputConfig.from_mapping(_mapping(raw.get("output"), "output"), root_dir),
            logging=LoggingConfig.from_mapping(_mapping(raw.get("logging"), "logging"), root_dir),
        )

    def with_output_directory(self, directory: Path) -> AppConfig:
        output = OutputConfig(
            directory=directory,
            color_mapping=self.output.color_mapping,
            image=self.output.image,
        )
        return AppConfig(
            source_path=self.source_path,
            render=self.render,
            output=output,
            logging=self.logging,
        )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate the YAML config file; no path means built-in defaults."""
    if path is None:
        return AppConfig()
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ValueError(f"Config file is not valid YAML: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
