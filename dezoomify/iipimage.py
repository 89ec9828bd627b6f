"""Zoom levels for images served by an IIPImage server."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .vec2d import Vec2d, tile_positions

META_REQUEST_PARAMS = "&OBJ=Max-size&OBJ=Tile-size&OBJ=Resolution-number"

_FIF = re.compile(r"\?FIF", re.IGNORECASE)
_UINT = re.compile(r"\+?[0-9]+")
_ASCII_WHITESPACE = re.compile(r"[ \t\n\r\x0c]+")
_U32_MAX = 2**32 - 1


class IIPError(ValueError):
    """Raised when an IIPImage metadata file or URL is invalid."""


def _parse_u32(text: str) -> int | None:
    if _UINT.fullmatch(text):
        value = int(text)
        if value <= _U32_MAX:
            return value
    return None


@dataclass(frozen=True)
class Metadata:
    """Image size, tile size and number of resolutions of an IIPImage image."""

    size: Vec2d
    tile_size: Vec2d
    levels: int

    @classmethod
    def parse(cls, text: bytes | str) -> Metadata:
        """Read a metadata reply; raises IIPError if a key is missing."""
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as error:
                raise IIPError(f"Invalid IIPImage metadata file: {error}") from error
        size = tile_size = levels = None
        for line in text.split("\n"):
            parts = line.split(":")
            key = parts[0].strip().lower()
            value = parts[1].strip() if len(parts) > 1 else ""
            numbers = [_parse_u32(n) for n in _ASCII_WHITESPACE.split(value) if n]
            first = numbers[0] if numbers else None
            second = numbers[1] if len(numbers) > 1 else None
            if key == "max-size":
                if first is not None and second is not None:
                    size = Vec2d(first, second)
            elif key == "tile-size":
                if first is not None and second is not None:
                    tile_size = Vec2d(first, second)
            elif key == "resolution-number":
                if first is not None:
                    levels = first
        for value, key in ((size, "Max-size"), (tile_size, "Tile-size"),
                           (levels, "Resolution-number")):
            if value is None:
                raise IIPError(f"missing key '{key}' in the IIPImage metadata file")
        return cls(size, tile_size, levels)


@dataclass(frozen=True)
class IIPImageLevel:
    """One resolution of an IIPImage image."""

    metadata: Metadata
    base: str
    level: int

    def size(self) -> Vec2d:
        reverse_level = self.metadata.levels - self.level - 1
        return self.metadata.size // 2**reverse_level

    def tile_url(self, pos: Vec2d) -> str:
        width = self.size().ceil_div(self.metadata.tile_size).x
        return f"{self.base}&JTL={self.level},{pos.y * width + pos.x}"

    def tile_references(self) -> list[tuple[str, Vec2d]]:
        """The URL and canvas position of every tile of this level, row by row."""
        tile_size = self.metadata.tile_size
        return [
            (self.tile_url(pos), tile_size * pos)
            for pos in tile_positions(self.size(), tile_size)
        ]

    def __repr__(self) -> str:
        return "IIPImage"


def metadata_uri(uri: str) -> str:
    """The URL of the metadata describing the image that ``uri`` points to."""
    if uri.endswith(META_REQUEST_PARAMS):
        return uri
    if not _FIF.search(uri):
        raise IIPError(f"not an IIPImage URL: {uri!r}")
    return uri.split("&", 1)[0] + META_REQUEST_PARAMS


def iter_levels(uri: str, contents: bytes | str) -> list[IIPImageLevel]:
    """All the levels of an image, from its metadata URL and the metadata itself."""
    base = uri
    while base.endswith(META_REQUEST_PARAMS):
        base = base[:-len(META_REQUEST_PARAMS)]
    metadata = Metadata.parse(contents)
    return [IIPImageLevel(metadata, base, level) for level in range(metadata.levels)]