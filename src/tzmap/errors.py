"""Error taxonomy and CLI exit codes."""

from __future__ import annotations


EXIT_OK = 0
EXIT_USAGE = 1
EXIT_IO = 1
EXIT_PARSE = 2
EXIT_EMPTY_GEOMETRY = 3
EXIT_DEGENERATE_BOUNDS = 4


class TzMapError(Exception):
    """Base class for all failures raised by the pipeline."""

    exit_code = EXIT_USAGE


class UsageError(TzMapError):
    exit_code = EXIT_USAGE


class InputOutputError(TzMapError):
    """A file could not be opened, read or written."""

    exit_code = EXIT_IO


class ParseError(TzMapError, ValueError):
    """Input is not JSON or lacks the FeatureCollection fields we need."""

    exit_code = EXIT_PARSE


class MalformedGeometryError(TzMapError, ValueError):
    """Coordinate arrays have the wrong shape or non-numeric values."""

    exit_code = EXIT_PARSE

    def __init__(self, message: str, *, location: str = "") -> None:
        self.location = location
        super().__init__(f"{message} at {location}" if location else message)


class DegenerateBoundsError(TzMapError, ValueError):
    """Bounding box has zero width or height; no canvas can be derived."""

    exit_code = EXIT_DEGENERATE_BOUNDS


class EmptyGeometryError(TzMapError):
    """No drawable ring survived extraction."""

    exit_code = EXIT_EMPTY_GEOMETRY
