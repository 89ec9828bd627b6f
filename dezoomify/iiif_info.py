"""Data model of IIIF ``info.json`` image descriptions."""

from __future__ import annotations

import dataclasses
import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .vec2d import Vec2d

logger = logging.getLogger(__name__)

# Image qualities, from least favorite to favorite
QUALITY_ORDER = ("bitonal", "gray", "color", "native", "default")

# Image formats, from least favorite to favorite
FORMAT_ORDER = ("webp", "gif", "bmp", "tif", "png", "jpg", "jpeg")

_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_TEST_ID = re.compile(r"^https?://((www\.)?example\.|localhost)")


class TileSizeFormat(Enum):
    """How the size of a requested tile is written in a tile URL."""

    WIDTH_HEIGHT = "w,h"
    WIDTH = "w,"


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {data!r}")
    return data


def _lookup(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _uint(value: Any, name: str, limit: int = _U32_MAX) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= limit:
        raise ValueError(f"invalid value for {name!r}: {value!r}")
    return value


def _opt_uint(data: dict[str, Any], key: str, limit: int = _U32_MAX) -> int | None:
    value = data.get(key)
    return None if value is None else _uint(value, key, limit)


def _opt_str(data: dict[str, Any], *keys: str) -> str | None:
    value = _lookup(data, *keys)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"invalid value for {keys[0]!r}: {value!r}")
    return value


def _opt_str_list(data: dict[str, Any], *keys: str) -> list[str] | None:
    value = _lookup(data, *keys)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"invalid value for {keys[0]!r}: {value!r}")
    return list(value)


def _uint_list(value: Any, name: str) -> list[int]:
    if not isinstance(value, list):
        raise ValueError(f"invalid value for {name!r}: {value!r}")
    return [_uint(v, name) for v in value]


def _best(candidates: list[str], order: tuple[str, ...]) -> str | None:
    """The most favoured candidate; unknown values rank lowest, ties go to the last."""
    best: str | None = None
    best_rank = -2
    for candidate in candidates:
        rank = order.index(candidate) if candidate in order else -1
        if rank >= best_rank:
            best, best_rank = candidate, rank
    return best


@dataclass
class ProfileInfo:
    """Capabilities and limits advertised by an IIIF image server."""

    formats: list[str] | None = None
    qualities: list[str] | None = None
    supports: list[str] | None = None
    max_width: int | None = None
    max_height: int | None = None
    max_area: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ProfileInfo:
        data = _require_dict(data, "profile")
        return cls(
            formats=_opt_str_list(data, "formats", "extraFormats"),
            qualities=_opt_str_list(data, "qualities", "extraQualities"),
            supports=_opt_str_list(data, "supports", "extraFeatures"),
            max_width=_opt_uint(data, "maxWidth"),
            max_height=_opt_uint(data, "maxHeight"),
            max_area=_opt_uint(data, "maxArea", _U64_MAX),
        )

    def crop_tile_size(self, size: Vec2d) -> Vec2d:
        """Shrink ``size`` so that it respects the limits of this profile."""
        x, y = size.x, size.y
        if self.max_width is not None:
            x = min(x, self.max_width)
            max_height = self.max_height if self.max_height is not None else self.max_width
            y = min(y, max_height)
        if self.max_area is not None and x * y > self.max_area:
            side = int(math.sqrt(float(self.max_area)))
            x, y = min(side, x), min(side, y)
        return Vec2d(x, y)

    def tile_size_fits(self, size: Vec2d) -> bool:
        """Whether ``size`` already respects the limits of this profile."""
        return self.crop_tile_size(size) == size


Profile = Union[str, ProfileInfo, list]

PROFILE_REFERENCES: dict[str, dict[str, Any]] = {
    "http://iiif.io/api/image/2/level0.json": {
        "formats": ["jpg"],
        "qualities": ["default"],
        "supports": ["sizeByWhListed"],
    },
    "http://iiif.io/api/image/2/level1.json": {
        "formats": ["jpg"],
        "qualities": ["default"],
        "supports": [
            "baseUriRedirect", "cors", "jsonldMediaType",
            "regionByPx", "sizeByH", "sizeByPct", "sizeByW",
        ],
    },
    "http://iiif.io/api/image/2/level2.json": {
        "formats": ["jpg", "png"],
        "qualities": ["default", "bitonal"],
        "supports": [
            "baseUriRedirect", "cors", "jsonldMediaType",
            "regionByPct", "regionByPx", "rotationBy90s",
            "sizeByForcedWh", "sizeByH", "sizeByPct", "sizeByW", "sizeByWh",
        ],
    },
}


def _parse_profile(value: Any) -> Profile:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return ProfileInfo.from_dict(value)
    if isinstance(value, list):
        return [_parse_profile(item) for item in value]
    if value is None:
        return []
    raise ValueError(f"invalid IIIF profile: {value!r}")


def profile_info(profile: Profile | None) -> ProfileInfo:
    """Resolve a profile (reference, inline description or list of both) to its info."""
    if profile is None:
        return ProfileInfo()
    if isinstance(profile, str):
        reference = PROFILE_REFERENCES.get(profile)
        if reference is None:
            logger.warning("Unknown IIIF profile reference: %s", profile)
            return ProfileInfo()
        return ProfileInfo.from_dict(reference)
    if isinstance(profile, ProfileInfo):
        return profile
    merged = ProfileInfo(formats=[], qualities=[], supports=[])
    for item in profile:
        info = profile_info(item)
        merged.formats.extend(info.formats or [])
        merged.qualities.extend(info.qualities or [])
        merged.supports.extend(info.supports or [])
        for name in ("max_width", "max_height", "max_area"):
            new = getattr(info, name)
            if new is not None:
                old = getattr(merged, name)
                setattr(merged, name, new if old is None else min(new, old))
    return merged


@dataclass
class TileInfo:
    """A tile size offered by the server and the scale factors it is available at."""

    width: int = 512
    height: int | None = None
    scale_factors: list[int] = field(default_factory=lambda: [1])

    @classmethod
    def from_dict(cls, data: Any) -> TileInfo:
        data = _require_dict(data, "tile description")
        if "width" not in data:
            raise ValueError("missing field 'width' in tile description")
        if "scaleFactors" not in data:
            raise ValueError("missing field 'scaleFactors' in tile description")
        return cls(
            width=_uint(data["width"], "width"),
            height=_opt_uint(data, "height"),
            scale_factors=_uint_list(data["scaleFactors"], "scaleFactors"),
        )

    def size(self) -> Vec2d:
        return Vec2d(self.width, self.height if self.height is not None else self.width)


@dataclass
class ImageInfo:
    """The contents of an IIIF ``info.json`` file (versions 1 and 2)."""

    width: int = 0
    height: int = 0
    context: str | None = None
    iiif_type: str | None = None
    protocol: str | None = None
    profile: Profile | None = None
    id: str | None = None
    qualities: list[str] | None = None
    formats: list[str] | None = None
    tiles: list[TileInfo] | None = None
    scale_factors: list[int] | None = None
    tile_width: int | None = None
    tile_height: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ImageInfo:
        """Build an image description from decoded JSON; raises ValueError if invalid."""
        data = _require_dict(data, "IIIF image information")
        for key in ("width", "height"):
            if key not in data:
                raise ValueError(f"missing field {key!r} in IIIF image information")
        profile = data.get("profile")
        tiles = data.get("tiles")
        if tiles is not None and not isinstance(tiles, list):
            raise ValueError(f"invalid value for 'tiles': {tiles!r}")
        scale_factors = data.get("scale_factors")
        return cls(
            width=_uint(data["width"], "width"),
            height=_uint(data["height"], "height"),
            context=_opt_str(data, "@context"),
            iiif_type=_opt_str(data, "type", "@type"),
            protocol=_opt_str(data, "protocol"),
            profile=None if profile is None else _parse_profile(profile),
            id=_opt_str(data, "@id"),
            qualities=_opt_str_list(data, "qualities"),
            formats=_opt_str_list(data, "formats", "preferredFormats"),
            tiles=None if tiles is None else [TileInfo.from_dict(t) for t in tiles],
            scale_factors=(
                None if scale_factors is None else _uint_list(scale_factors, "scale_factors")
            ),
            tile_width=_opt_uint(data, "tile_width"),
            tile_height=_opt_uint(data, "tile_height"),
        )

    def size(self) -> Vec2d:
        return Vec2d(self.width, self.height)

    def _profile_info(self) -> ProfileInfo:
        return profile_info(self.profile)

    def best_quality(self) -> str:
        pinfo = self._profile_info()
        best = _best([*(self.qualities or []), *(pinfo.qualities or [])], QUALITY_ORDER)
        if best is None:
            logger.info("No image quality specified. Using 'default'.")
            return "default"
        return best

    def best_format(self) -> str:
        pinfo = self._profile_info()
        best = _best([*(self.formats or []), *(pinfo.formats or [])], FORMAT_ORDER)
        if best is None:
            logger.info("No image format specified. Using 'jpg'.")
            return "jpg"
        return best

    def preferred_size_format(self) -> TileSizeFormat:
        supports = set(self._profile_info().supports or [])
        if "sizeByW" in supports and "sizeByWh" not in supports:
            return TileSizeFormat.WIDTH
        return TileSizeFormat.WIDTH_HEIGHT

    def tiles(self) -> list[TileInfo]:  # noqa: F811 - method shadows the field on purpose
        """Usable tile sizes, adding one for full resolution if none covers it."""
        pinfo = self._profile_info()
        tiles = [
            dataclasses.replace(tile, scale_factors=list(tile.scale_factors))
            for tile in (self.__dict__["tiles"] or [])
            if pinfo.tile_size_fits(tile.size())
        ]
        if not any(1 in tile.scale_factors for tile in tiles):
            default = TileInfo()
            if self.tile_width is not None:
                default.width = self.tile_width
            if self.tile_height is not None:
                default.height = self.tile_height
            cropped = pinfo.crop_tile_size(default.size())
            default.width = cropped.x
            default.height = cropped.y
            if self.scale_factors is not None:
                default.scale_factors = list(self.scale_factors)
            tiles.append(default)
        return tiles

    def has_distinctive_iiif_properties(self) -> bool:
        """Whether this looks like a real IIIF description rather than any width/height object."""
        return (
            self.id is not None
            or self.protocol is not None
            or self.context is not None
            or self.__dict__["tiles"] is not None
            or self.formats is not None
            or self.iiif_type in ("iiif:ImageProfile", "ImageService3")
        )

    def remove_test_id(self) -> None:
        """Drop an ``@id`` that points to a placeholder host such as localhost."""
        if self.id is not None and _TEST_ID.match(self.id):
            logger.info("Removing probably invalid IIIF id '%s'", self.id)
            self.id = None