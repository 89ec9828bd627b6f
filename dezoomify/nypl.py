"""Zoom levels for images of the New York Public Library digital collections."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from .json_utils import number_or_string
from .vec2d import Vec2d, tile_positions

NYPL_IMAGE_VIEW_PREFIX = "https://digitalcollections.nypl.org/items/"
NYPL_META_PREFIX = "https://access.nypl.org/image.php/"
NYPL_META_POSTFIX = "/tiles/config.js"

_IMAGE_ID = re.compile(r"https://digitalcollections.nypl.org/items/([a-f0-9\-]+)")
_U32_MAX = 2**32 - 1

_NO_METADATA = (
    "No metadata found. This image is probably not tiled, and you can download it "
    "directly by right-clicking on it from your browser without any external tool."
)


class NYPLError(ValueError):
    """Raised when a NYPL URL or metadata file cannot be used."""


def get_image_id_from_meta_url(meta_url: str) -> str:
    """The image identifier contained in a metadata URL."""
    return meta_url.replace(NYPL_META_PREFIX, "").replace(NYPL_META_POSTFIX, "")


def parse_image_id(image_view_url: str) -> str | None:
    """The image identifier in the URL of an item page, if there is one."""
    match = _IMAGE_ID.search(image_view_url)
    return match.group(1) if match else None


def metadata_uri(image_view_url: str) -> str:
    """The URL of the tile configuration of the image shown at ``image_view_url``."""
    if image_view_url.startswith(NYPL_IMAGE_VIEW_PREFIX):
        image_id = parse_image_id(image_view_url)
        if image_id is None:
            raise NYPLError(f'Unable to extract an image id from "{image_view_url}"')
        return f"{NYPL_META_PREFIX}{image_id}{NYPL_META_POSTFIX}"
    if NYPL_META_PREFIX in image_view_url:
        return image_view_url
    raise NYPLError(f"not a NYPL image URL: {image_view_url!r}")


def _u32(value: Any) -> int:
    number = number_or_string(value)
    if number > _U32_MAX:
        raise ValueError(f"number too large: {number}")
    return number


@dataclass(frozen=True)
class NYPLMetadata:
    """Size, tile size, format and tile overlap of a NYPL image."""

    size: Vec2d
    tile_size: int
    format: str
    overlap: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> NYPLMetadata:
        """Build the metadata from one decoded configuration; raises NYPLError."""
        try:
            if not isinstance(data, dict):
                raise TypeError(f"expected an object, got {data!r}")
            size = data["size"]
            if not isinstance(size, dict):
                raise TypeError(f"expected an object for 'size', got {size!r}")
            tile_size = data["tile_size"] if "tile_size" in data else data["tilesize"]
            image_format = data["format"]
            if not isinstance(image_format, str):
                raise TypeError(f"expected a string for 'format', got {image_format!r}")
            return cls(
                size=Vec2d(_u32(size["width"]), _u32(size["height"])),
                tile_size=_u32(tile_size),
                format=image_format,
                overlap=_u32(data.get("overlap", 0)),
            )
        except (KeyError, TypeError, ValueError) as error:
            raise NYPLError(f"Invalid nypl metadata: {error}") from error

    def level_count(self) -> int:
        """Number of halvings from the full image down to a single pixel."""
        return max(self.size.x, self.size.y).bit_length()


@dataclass(frozen=True)
class NYPLLevel:
    """One level of a NYPL image."""

    metadata: NYPLMetadata
    base: str
    level: int

    def size(self) -> Vec2d:
        reverse_level = self.metadata.level_count() - self.level
        return self.metadata.size // 2**reverse_level

    def _tile_size(self) -> Vec2d:
        return Vec2d.square(self.metadata.tile_size)

    def tile_url(self, pos: Vec2d) -> str:
        return (
            f"{NYPL_META_PREFIX}{self.base}/tiles/0/{self.level}/"
            f"{pos.x}_{pos.y}.{self.metadata.format}"
        )

    def tile_ref(self, pos: Vec2d) -> tuple[str, Vec2d]:
        """The URL of the tile at ``pos`` and its position, accounting for overlap."""
        overlap = self.metadata.overlap
        delta = Vec2d(0 if pos.x == 0 else overlap, 0 if pos.y == 0 else overlap)
        return self.tile_url(pos), self._tile_size() * pos - delta

    def tile_references(self) -> list[tuple[str, Vec2d]]:
        """The URL and canvas position of every tile of this level, row by row."""
        return [self.tile_ref(pos) for pos in tile_positions(self.size(), self._tile_size())]

    def __repr__(self) -> str:
        return "NYPL Image"


def iter_levels(uri: str, contents: bytes | str) -> list[NYPLLevel]:
    """All levels of the image whose configuration was downloaded from ``uri``."""
    if not contents:
        raise NYPLError(_NO_METADATA)
    base = get_image_id_from_meta_url(uri)
    try:
        root = json.loads(contents)
    except ValueError as error:
        raise NYPLError(f"Invalid nypl metadata: {error}") from error
    if not isinstance(root, dict) or not isinstance(root.get("configs"), dict):
        raise NYPLError("Invalid nypl metadata: missing field 'configs'")
    configs = {key: NYPLMetadata.from_dict(value) for key, value in root["configs"].items()}
    metadata = configs.get("0")
    if metadata is None:
        raise NYPLError(_NO_METADATA)
    return [NYPLLevel(metadata, base, level) for level in range(metadata.level_count() + 1)]