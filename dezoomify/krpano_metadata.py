"""The XML description of krpano panoramas and the tile levels it declares."""

from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ElementTree
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .vec2d import Vec2d

logger = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1
_UINT = re.compile(r"\+?[0-9]+")

SIDES = ("forward", "back", "left", "right", "up", "down")

_SHAPE_KINDS = ("cube", "cylinder", "flat", "left", "right", "front", "back", "up", "down")
_IGNORED_KINDS = ("mobile", "tablet")
LEVEL_KINDS = ("level", *_IGNORED_KINDS, *_SHAPE_KINDS)


def _parse_u32(text: str | None) -> int | None:
    if text is not None and _UINT.fullmatch(text):
        value = int(text)
        if value <= _U32_MAX:
            return value
    return None


def _required_u32(element: ElementTree.Element, name: str) -> int:
    raw = element.get(name)
    if raw is None:
        raise ValueError(f"missing attribute {name!r} in <{element.tag}>")
    value = _parse_u32(raw)
    if value is None:
        raise ValueError(f"invalid value for attribute {name!r}: {raw!r}")
    return value


def _optional_u32(element: ElementTree.Element, name: str) -> int | None:
    raw = element.get(name)
    if raw is None:
        return None
    value = _parse_u32(raw)
    if value is None:
        raise ValueError(f"invalid value for attribute {name!r}: {raw!r}")
    return value


class TemplateVariable(Enum):
    """A placeholder that can appear in a krpano tile URL template."""

    X = "x"
    Y = "y"
    SIDE = "side"
    LEVEL_INDEX = "level"


class XY(Enum):
    """A coordinate placeholder left in a template once side and level are known."""

    X = "x"
    Y = "y"


@dataclass(frozen=True)
class Literal:
    """Fixed text in a URL template."""

    text: str


@dataclass(frozen=True)
class Variable:
    """A placeholder in a URL template, zero-padded to ``padding`` digits."""

    padding: int
    variable: Union[TemplateVariable, XY]


TemplatePart = Union[Literal, Variable]

_VARIABLE_CHARS = {
    "h": TemplateVariable.X,
    "x": TemplateVariable.X,
    "u": TemplateVariable.X,
    "c": TemplateVariable.X,
    "v": TemplateVariable.Y,
    "y": TemplateVariable.Y,
    "r": TemplateVariable.Y,
    "s": TemplateVariable.SIDE,
    "l": TemplateVariable.LEVEL_INDEX,
}


@dataclass(frozen=True)
class TemplateString:
    """A krpano URL template such as ``tiles/%s/l%l/%0v_%0h.jpg``."""

    parts: tuple[TemplatePart, ...]

    @classmethod
    def parse(cls, text: str) -> TemplateString:
        """Split a template into literals and placeholders; raises ValueError."""
        parts: list[TemplatePart] = []
        pos = 0
        length = len(text)
        while True:
            end = text.find("%", pos)
            if end < 0:
                end = length
            if end > pos:
                parts.append(Literal(text[pos:end]))
            if end >= length:
                break
            pos = end + 1
            padding = 1
            while pos < length and text[pos] == "0":
                padding += 1
                pos += 1
            if pos >= length:
                raise ValueError(f"Invalid templating syntax in '{text}'")
            char = text[pos]
            pos += 1
            if char == "%":
                parts.append(Literal("%"))
            elif char in _VARIABLE_CHARS:
                parts.append(Variable(padding, _VARIABLE_CHARS[char]))
            else:
                raise ValueError(f"Unknown template variable '{char}' in '{text}'")
        return cls(tuple(parts))

    def all_sides(self, level: int) -> Iterator[tuple[str, TemplateString]]:
        """Yield each cube side with the template specialised for it and for ``level``.

        A template without a side placeholder yields a single entry with an empty side.
        """
        has_side = any(
            isinstance(part, Variable) and part.variable is TemplateVariable.SIDE
            for part in self.parts
        )
        for side in SIDES if has_side else ("",):
            yield side, TemplateString(
                tuple(_with_side(part, side, level) for part in self.parts)
            )


def _with_side(part: TemplatePart, side: str, level: int) -> TemplatePart:
    if isinstance(part, Literal):
        return part
    variable = part.variable
    if variable is TemplateVariable.X:
        return Variable(part.padding, XY.X)
    if variable is TemplateVariable.Y:
        return Variable(part.padding, XY.Y)
    if variable is TemplateVariable.SIDE:
        return Literal(side[:1])
    if variable is TemplateVariable.LEVEL_INDEX:
        return Literal(f"{level:0{part.padding}d}")
    return part


@dataclass
class ShapeDesc:
    """A shape element: the URL template of its tiles and an optional multires list."""

    url: TemplateString
    multires: str | None = None


@dataclass
class LevelDesc:
    """A single zoom level of one shape."""

    name: str
    size: Vec2d
    tilesize: Vec2d | None
    url: TemplateString
    level_index: int


def _multires_entries(text: str) -> Iterator[tuple[Vec2d, Vec2d] | ValueError]:
    parts = text.split(",")
    tile_width = _parse_u32(parts[0])
    for entry in parts[1:]:
        if tile_width is None:
            yield ValueError("missing tile size")
            continue
        dims = entry.split("x")
        width = _parse_u32(dims[0])
        if width is None:
            yield ValueError("invalid width")
            continue
        height = _parse_u32(dims[1]) if len(dims) > 1 else None
        tile_size = _parse_u32(dims[2]) if len(dims) > 2 else None
        yield (
            Vec2d(width, width if height is None else height),
            Vec2d.square(tile_width if tile_size is None else tile_size),
        )


def parse_multires(text: str) -> list[tuple[Vec2d, Vec2d]]:
    """Parse a multires attribute into (image size, tile size) pairs; raises ValueError."""
    result = []
    for entry in _multires_entries(text):
        if isinstance(entry, ValueError):
            raise entry
        result.append(entry)
    return result


@dataclass
class KrpanoLevel:
    """An element inside an ``<image>``: a ``<level>``, a shape, or a device-specific group."""

    kind: str
    shape: ShapeDesc | None = None
    size: Vec2d | None = None
    children: list[KrpanoLevel] = field(default_factory=list)

    @classmethod
    def _from_element(cls, element: ElementTree.Element) -> KrpanoLevel:
        kind = element.tag
        if kind == "level":
            size = Vec2d(
                _required_u32(element, "tiledimagewidth"),
                _required_u32(element, "tiledimageheight"),
            )
            return cls(kind, size=size, children=[cls._from_element(c) for c in element])
        if kind in _IGNORED_KINDS:
            return cls(kind, children=[cls._from_element(c) for c in element])
        if kind in _SHAPE_KINDS:
            url = element.get("url")
            if url is None:
                raise ValueError(f"missing attribute 'url' in <{kind}>")
            return cls(kind, shape=ShapeDesc(TemplateString.parse(url), element.get("multires")))
        raise ValueError(f"unknown krpano level element <{kind}>")

    def level_descriptions(self, size: Vec2d | None = None) -> list[LevelDesc]:
        """Every zoom level this element describes; invalid levels are logged and skipped."""
        if self.kind == "level":
            return [
                desc
                for child in self.children
                for desc in child.level_descriptions(self.size)
            ]
        if self.shape is None:
            return []
        name = self.kind.capitalize()
        if self.shape.multires is not None:
            descriptions = []
            for index, entry in enumerate(_multires_entries(self.shape.multires)):
                if isinstance(entry, ValueError):
                    logger.warning("bad krpano level: %s", entry)
                    continue
                level_size, tile_size = entry
                descriptions.append(LevelDesc(name, level_size, tile_size, self.shape.url, index))
            return descriptions
        if size is not None:
            return [LevelDesc(name, size, None, self.shape.url, 0)]
        logger.warning("bad krpano level: missing multires attribute")
        return []


@dataclass
class KrpanoImage:
    """An ``<image>`` element."""

    tilesize: int | None = None
    baseindex: int = 1
    levels: list[KrpanoLevel] = field(default_factory=list)

    @classmethod
    def _from_element(cls, element: ElementTree.Element) -> KrpanoImage:
        baseindex = _optional_u32(element, "baseindex")
        return cls(
            tilesize=_optional_u32(element, "tilesize"),
            baseindex=1 if baseindex is None else baseindex,
            levels=[KrpanoLevel._from_element(child) for child in element],
        )


@dataclass
class ImageInfo:
    """An image together with the names of the scenes that contain it."""

    image: KrpanoImage
    name: str


def _json_title(text: str) -> str | None:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("title"), str):
        return data["title"]
    return None


@dataclass
class KrpanoMetadata:
    """A ``<krpano>`` or ``<scene>`` element."""

    children: list[Union[KrpanoImage, KrpanoMetadata]] = field(default_factory=list)
    name: str = ""
    titles: list[str] = field(default_factory=list)

    @classmethod
    def from_element(cls, element: ElementTree.Element) -> KrpanoMetadata:
        """Read a parsed XML element; raises ValueError on an invalid description."""
        children: list[Union[KrpanoImage, KrpanoMetadata]] = []
        titles: list[str] = []
        for child in element:
            if child.tag == "image":
                children.append(KrpanoImage._from_element(child))
            elif child.tag == "scene":
                children.append(cls.from_element(child))
            elif child.tag == "source_details":
                titles.append(child.get("subject", ""))
            elif child.tag == "data":
                title = _json_title(child.text or "")
                if title is not None:
                    titles.append(title)
        return cls(children=children, name=element.get("name", ""), titles=titles)

    def _images_with_name(self, outer: str) -> Iterator[ImageInfo]:
        name = self.name if not outer else f"{outer} {self.name}"
        for child in self.children:
            if isinstance(child, KrpanoImage):
                yield ImageInfo(child, name)
            else:
                yield from child._images_with_name(name)

    def images(self) -> Iterator[ImageInfo]:
        """Every image, including those inside scenes, with its scene names."""
        return self._images_with_name("")

    def get_title(self) -> str | None:
        """The title given by a ``<source_details>`` or JSON ``<data>`` element."""
        return self.titles[0] if self.titles else None


def parse_metadata(xml: bytes | str) -> KrpanoMetadata:
    """Parse a krpano XML document; raises ValueError if it is invalid."""
    try:
        root = ElementTree.fromstring(xml.lstrip())
    except ElementTree.ParseError as error:
        raise ValueError(str(error)) from error
    return KrpanoMetadata.from_element(root)