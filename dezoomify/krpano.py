"""Zoom levels for panoramas described by krpano XML files."""

from __future__ import annotations

from dataclasses import dataclass

from .krpano_metadata import XY, Literal, TemplateString, parse_metadata
from .network import remove_bom, resolve_relative
from .vec2d import Vec2d, tile_positions


class KrpanoError(ValueError):
    """Raised when a krpano XML file cannot be parsed."""


@dataclass
class KrpanoZoomLevel:
    """One level of one side of a krpano image."""

    base_url: str
    size: Vec2d
    tile_size: Vec2d
    base_index: int
    template: TemplateString
    shape_name: str
    side_name: str
    scene_name: str
    image_title: str

    def tile_url(self, pos: Vec2d) -> str:
        """URL of the tile at the given column and row."""
        pieces = []
        for part in self.template.parts:
            if isinstance(part, Literal):
                pieces.append(part.text)
            else:
                coordinate = pos.x if part.variable is XY.X else pos.y
                pieces.append(f"{self.base_index + coordinate:0{part.padding}d}")
        return resolve_relative(self.base_url, "".join(pieces))

    def tile_ref(self, pos: Vec2d) -> tuple[str, Vec2d]:
        """The URL of the tile at ``pos`` and its position on the canvas."""
        return self.tile_url(pos), self.tile_size * pos

    def title(self) -> str | None:
        if not self.image_title and not self.scene_name:
            return None
        return f"{self.image_title} {self.scene_name}"

    def name(self) -> str:
        parts = ("Krpano", self.shape_name, self.side_name, self.scene_name)
        return " ".join(part for part in parts if part)

    def tile_references(self) -> list[tuple[str, Vec2d]]:
        """The URL and canvas position of every tile of this level, row by row."""
        return [self.tile_ref(pos) for pos in tile_positions(self.size, self.tile_size)]

    def __repr__(self) -> str:
        return self.name()


def load_from_properties(url: str, contents: bytes | str) -> list[KrpanoZoomLevel]:
    """Every zoom level declared by the krpano XML file found at ``url``."""
    if isinstance(contents, str):
        contents = contents.encode("utf-8")
    try:
        metadata = parse_metadata(remove_bom(contents))
    except ValueError as error:
        raise KrpanoError(f"Unable to parse the krpano xml file: {error}") from error
    title = metadata.get_title() or ""
    levels = []
    for info in metadata.images():
        image = info.image
        root_tile_size = None if image.tilesize is None else Vec2d.square(image.tilesize)
        for level in image.levels:
            for desc in level.level_descriptions(None):
                tile_size = desc.tilesize if desc.tilesize is not None else root_tile_size
                if tile_size is None:
                    continue
                level_number = desc.level_index + image.baseindex
                for side, template in desc.url.all_sides(level_number):
                    levels.append(KrpanoZoomLevel(
                        base_url=url,
                        size=desc.size,
                        tile_size=tile_size,
                        base_index=image.baseindex,
                        template=template,
                        shape_name=desc.name,
                        side_name=side,
                        scene_name=info.name,
                        image_title=title,
                    ))
    return levels