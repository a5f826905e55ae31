"""Flat RGB pixel buffer, origin top-left, exported through Pillow."""

from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageColor

from .palette import RGB

_CHANNELS = 3


def parse_color(value: str) -> RGB:
    """Resolve a Pillow color string ("#F5F5F5", "white", "rgb(1,2,3)")."""
    rgb = ImageColor.getrgb(value)
    return (rgb[0], rgb[1], rgb[2])


class PixelCanvas:
    """Mutable RGB grid written by span fills.

    Writes outside the grid are dropped; polygons are never clipped, only
    the individual pixel writes are kept in range.
    """

    def __init__(self, width: int, height: int, background: RGB = (0, 0, 0)) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.background = background
        self._stride = width * _CHANNELS
        self._buffer = bytearray(bytes(background) * (width * height))

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def fill_span(self, y: int, x_start: int, x_end: int, color: RGB) -> int:
        """Paint pixels `x_start..x_end` (inclusive) on row `y`; return the count."""
        if y < 0 or y >= self.height:
            return 0
        x0 = max(x_start, 0)
        x1 = min(x_end, self.width - 1)
        if x1 < x0:
            return 0
        count = x1 - x0 + 1
        offset = y * self._stride + x0 * _CHANNELS
        self._buffer[offset : offset + count * _CHANNELS] = bytes(color) * count
        return count

    def get_pixel(self, x: int, y: int) -> RGB:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")
        offset = y * self._stride + x * _CHANNELS
        r, g, b = self._buffer[offset : offset + _CHANNELS]
        return (r, g, b)

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGB", self.size, bytes(self._buffer))

    def save_png(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_image().save(path, format="PNG")
        return path
