"""The ``ImageProperties.xml`` description of a Zoomify image and its levels."""

from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass

from .vec2d import Vec2d

logger = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1


@dataclass(frozen=True)
class ZoomLevelInfo:
    """Size of one Zoomify level and the number of tiles in the levels before it."""

    size: Vec2d
    tile_size: Vec2d
    tiles_before: int

    def tile_group(self, pos: Vec2d) -> int:
        """Index of the TileGroup folder holding the tile at ``pos``."""
        num_tiles_x = self.size.ceil_div(self.tile_size).x
        return (self.tiles_before + pos.x + pos.y * num_tiles_x) // 256


def _attribute(element: ElementTree.Element, name: str) -> int:
    raw = element.get(name)
    if raw is None:
        return 0
    if not raw.isdigit() or int(raw) > _U32_MAX:
        raise ValueError(f"invalid value for attribute {name}: {raw!r}")
    return int(raw)


@dataclass
class ImageProperties:
    """Dimensions and tile information of a Zoomify image."""

    width: int = 0
    height: int = 0
    tile_size: int = 0
    num_tiles: int = 0

    @classmethod
    def parse(cls, xml: bytes | str) -> ImageProperties:
        """Read the attributes of an ``IMAGE_PROPERTIES`` element; raises ValueError."""
        if isinstance(xml, bytes):
            xml = xml.decode("utf-8")
        try:
            root = ElementTree.fromstring(xml.lstrip())
        except ElementTree.ParseError as error:
            raise ValueError(str(error)) from error
        return cls(
            width=_attribute(root, "WIDTH"),
            height=_attribute(root, "HEIGHT"),
            tile_size=_attribute(root, "TILESIZE"),
            num_tiles=_attribute(root, "NUMTILES"),
        )

    def _size(self) -> Vec2d:
        return Vec2d(self.width, self.height)

    def levels(self) -> list[ZoomLevelInfo]:
        """All levels, from the smallest to the full resolution."""
        if self.tile_size == 0:
            raise ValueError("the tile size of a Zoomify image cannot be zero")
        tile_size = Vec2d.square(self.tile_size)
        sizes, tile_counts = self._halving_levels(tile_size)
        if sum(tile_counts) != self.num_tiles:
            logger.info(
                "The computed number of tiles (%d) does not match the number of tiles "
                "specified in ImageProperties.xml (%d). Trying the second computation method...",
                sum(tile_counts), self.num_tiles,
            )
            sizes, tile_counts = self._rounded_levels(tile_size)
            if sum(tile_counts) != self.num_tiles:
                logger.warning(
                    "The computed number of tiles (%d) does not match the number of tiles "
                    "specified in ImageProperties.xml (%d)",
                    sum(tile_counts), self.num_tiles,
                )
        levels = []
        total = 0
        for size, count in zip(reversed(sizes), reversed(tile_counts)):
            levels.append(ZoomLevelInfo(size, tile_size, total))
            total += count
        return levels

    def _halving_levels(self, tile_size: Vec2d) -> tuple[list[Vec2d], list[int]]:
        """The level computation used by the reference Zoomify viewer."""
        width, height = float(self.width), float(self.height)
        tile_width, tile_height = float(tile_size.x), float(tile_size.y)
        sizes: list[Vec2d] = []
        counts: list[int] = []
        while width > tile_width or height > tile_height:
            counts.append(math.ceil(width / tile_width) * math.ceil(height / tile_height))
            sizes.append(Vec2d(int(width), int(height)))
            width /= 2
            height /= 2
        return sizes, counts

    def _rounded_levels(self, tile_size: Vec2d) -> tuple[list[Vec2d], list[int]]:
        """Alternative computation, rounding odd level dimensions up."""
        sizes: list[Vec2d] = []
        counts: list[int] = []
        size = self._size()
        ratio = 2
        while True:
            counts.append(size.ceil_div(tile_size).area())
            sizes.append(size)
            if size.fits_inside(tile_size):
                break
            size = self._size() // ratio
            size = Vec2d(size.x + size.x % 2, size.y + size.y % 2)
            ratio *= 2
        return sizes, counts