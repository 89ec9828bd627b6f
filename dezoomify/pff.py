"""Zoom levels for images served by the Zoomify PFF servlet."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import parse_qsl

from .pff_properties import (
    HeaderInfo,
    PffHeader,
    PffImageInfo,
    RequestType,
    TileIndices,
    parse_reply,
)
from .vec2d import Vec2d, tile_positions


class PffError(ValueError):
    """Raised when a PFF servlet URL or reply cannot be understood."""


class NeedsData(Exception):
    """Raised when more data must be downloaded from ``uri`` before continuing."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Need to download data from {uri}")
        self.uri = uri


@dataclass
class PffZoomLevel:
    """One level of a PFF image."""

    image_info: PffImageInfo
    tiles_before: int
    size: Vec2d

    @property
    def tile_size(self) -> Vec2d:
        return Vec2d.square(self.image_info.header_info.header.tile_size)

    def tile_url(self, pos: Vec2d) -> str:
        num_tiles_x = self.size.ceil_div(self.tile_size).x
        return self.image_info.tile_url(self.tiles_before + pos.x + pos.y * num_tiles_x)

    def tile_references(self) -> list[tuple[str, Vec2d]]:
        """The URL and canvas position of every tile of this level, row by row."""
        tile_size = self.tile_size
        return [
            (self.tile_url(pos), tile_size * pos)
            for pos in tile_positions(self.size, tile_size)
        ]

    def __repr__(self) -> str:
        return "Zoomify PFF"


def zoom_levels(info: PffImageInfo) -> list[PffZoomLevel]:
    """Every level of the image, from the full resolution down to a single tile."""
    header = info.header_info.header
    if header.tile_size == 0:
        raise PffError("the tile size of a PFF image cannot be zero")
    tile_size = Vec2d.square(header.tile_size)
    size = Vec2d(header.width, header.height)
    tiles_before = 0
    levels = []
    while size.x >= tile_size.x and size.y >= tile_size.y:
        levels.append(PffZoomLevel(info, tiles_before, size))
        tiles_before += size.ceil_div(tile_size).area()
        smaller = size.ceil_div(2)
        if smaller == size:
            break
        size = smaller
    return levels


def _parse_initial_params(params: str) -> tuple[str, int]:
    values = dict(parse_qsl(params, keep_blank_values=True))
    for key in ("file", "requestType"):
        if key not in values:
            raise PffError(f"Invalid meta information file: missing field '{key}'")
    request_type = values["requestType"]
    if not request_type.isdigit() or int(request_type) > 255:
        raise PffError(f"Invalid meta information file: invalid requestType {request_type!r}")
    return values["file"], int(request_type)


class PffDezoomer:
    """Walks through the PFF servlet protocol: header first, then tile offsets."""

    name = "pff"

    def __init__(self) -> None:
        self.header_info: HeaderInfo | None = None

    def zoom_levels(self, uri: str, contents: bytes | str | None = None) -> list[PffZoomLevel]:
        """Levels of the image at ``uri``; raises NeedsData while data is missing."""
        base_url, separator, params = uri.partition("?")
        if not separator:
            raise PffError(f"not a PFF servlet URL: {uri!r}")
        if self.header_info is None:
            self._read_header(uri, base_url, params, contents)
        if contents is None:
            raise NeedsData(uri)
        try:
            tiles = TileIndices.parse(parse_reply(contents))
        except ValueError as error:
            raise PffError(f"Invalid meta information file: {error}") from error
        return zoom_levels(PffImageInfo(self.header_info, tiles))

    def _read_header(
        self, uri: str, base_url: str, params: str, contents: bytes | str | None
    ) -> None:
        file, request_type = _parse_initial_params(params)
        if request_type != RequestType.METADATA:
            raise NeedsData(f"{base_url}?file={file}&requestType={int(RequestType.METADATA)}")
        if contents is None:
            raise NeedsData(uri)
        try:
            header = PffHeader.parse(parse_reply(contents))
        except ValueError as error:
            raise PffError(f"Invalid meta information file: {error}") from error
        self.header_info = HeaderInfo(base_url=base_url, file=file, header=header)
        raise NeedsData(self.header_info.tiles_index_url())