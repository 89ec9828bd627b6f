"""Header and tile index data of the Zoomify PFF servlet protocol."""

from __future__ import annotations

import re
import string
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass, field
from enum import IntEnum
from urllib.parse import parse_qsl

_HEADER_OFFSET = 0x424
_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1
_UINT = re.compile(r"\+?[0-9]+")
_ASCII_WHITESPACE = re.compile(r"[ \t\n\r\x0c]+")
_FORM_SAFE = frozenset(string.ascii_letters + string.digits + "*-._")


class RequestType(IntEnum):
    """The kind of data requested from the PFF servlet."""

    TILE_IMAGE = 0
    METADATA = 1
    TILE_INDICES = 2


class ParseTileIndicesError(ValueError):
    """Raised when a tile indices reply cannot be parsed."""


def _form_encode(value: str) -> str:
    pieces = []
    for byte in value.encode("utf-8"):
        char = chr(byte)
        if byte == 0x20:
            pieces.append("+")
        elif char in _FORM_SAFE:
            pieces.append(char)
        else:
            pieces.append(f"%{byte:02X}")
    return "".join(pieces)


def _parse_uint(text: str, limit: int) -> int | None:
    if _UINT.fullmatch(text):
        value = int(text)
        if value <= limit:
            return value
    return None


def parse_reply(text: bytes | str) -> str:
    """The ``reply_data`` field of a url-encoded servlet reply; raises ValueError."""
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    for key, value in parse_qsl(text, keep_blank_values=True):
        if key == "reply_data":
            return value
    raise ValueError("missing field 'reply_data' in the servlet reply")


def _attribute(element: ElementTree.Element, name: str, limit: int = _U32_MAX) -> int:
    raw = element.get(name)
    if raw is None:
        return 0
    value = _parse_uint(raw, limit)
    if value is None:
        raise ValueError(f"invalid value for attribute {name}: {raw!r}")
    return value


@dataclass(frozen=True)
class PffHeader:
    """The attributes of the ``PFFHEADER`` element describing a PFF file."""

    width: int = 0
    height: int = 0
    tile_size: int = 0
    num_tiles: int = 0
    header_size: int = 0
    version: int = 0

    @classmethod
    def parse(cls, text: bytes | str) -> PffHeader:
        """Read a ``PFFHEADER`` XML element; raises ValueError."""
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        try:
            root = ElementTree.fromstring(text.lstrip())
        except ElementTree.ParseError as error:
            raise ValueError(str(error)) from error
        return cls(
            width=_attribute(root, "WIDTH"),
            height=_attribute(root, "HEIGHT"),
            tile_size=_attribute(root, "TILESIZE"),
            num_tiles=_attribute(root, "NUMTILES"),
            header_size=_attribute(root, "HEADERSIZE", _U64_MAX),
            version=_attribute(root, "VERSION"),
        )


@dataclass(frozen=True)
class TileIndices:
    """End offsets of every tile in the PFF file."""

    indices: list[int] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> TileIndices:
        """Parse ``first, offset offset ...``; raises ParseTileIndicesError."""
        parts = text.split(",")
        first = _parse_uint(parts[0], _U64_MAX)
        if first is None:
            raise ParseTileIndicesError(f"Invalid tile index: {parts[0]!r}")
        if len(parts) < 2:
            raise ParseTileIndicesError("Missing a part of tile indices string")
        indices = []
        for token in _ASCII_WHITESPACE.split(parts[1]):
            if not token:
                continue
            offset = _parse_uint(token, _U64_MAX)
            if offset is None:
                raise ParseTileIndicesError(f"Invalid tile index: {token!r}")
            indices.append(first + offset)
        return cls(indices)


@dataclass(frozen=True)
class HeaderInfo:
    """Where a PFF file is served from, and its header."""

    base_url: str
    file: str
    header: PffHeader

    def request_url(
        self, version: int, head: int, begin: int, end: int, request_type: RequestType | int
    ) -> str:
        """URL asking the servlet for the bytes between ``begin`` and ``end``."""
        params = (
            ("file", self.file),
            ("vers", str(version)),
            ("head", str(head)),
            ("begin", str(begin)),
            ("end", str(end)),
            ("requestType", str(int(request_type))),
        )
        query = "&".join(f"{_form_encode(k)}={_form_encode(v)}" for k, v in params)
        return f"{self.base_url}?{query}"

    def tiles_index_url(self) -> str:
        """URL of the table of tile offsets."""
        header = self.header
        begin = _HEADER_OFFSET + header.header_size
        end = begin + 8 * header.num_tiles
        return self.request_url(
            header.version, header.header_size, begin, end, RequestType.TILE_INDICES
        )


@dataclass(frozen=True)
class PffImageInfo:
    """A PFF file header together with its tile offsets."""

    header_info: HeaderInfo
    tiles: TileIndices

    def tile_url(self, tile_number: int) -> str:
        """URL of the image data of tile number ``tile_number``."""
        header = self.header_info.header
        indices = self.tiles.indices
        if tile_number > 0:
            begin = indices[tile_number - 1]
        else:
            begin = _HEADER_OFFSET + header.header_size + 8 * header.num_tiles
        return self.header_info.request_url(
            header.version, header.header_size, begin, indices[tile_number],
            RequestType.TILE_IMAGE,
        )