import io

import pytest
from PIL import Image, UnidentifiedImageError

from dezoomify.tile import Tile
from dezoomify.vec2d import Vec2d


def _png(width, height, color):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_empty_tile_size_and_position():
    tile = Tile.empty(Vec2d(1, 2), Vec2d(3, 4))
    assert tile.size() == Vec2d(3, 4)
    assert tile.position == Vec2d(1, 2)
    assert tile.bottom_right() == tile.position + tile.size()


def test_empty_tile_is_transparent():
    tile = Tile.empty(Vec2d(0, 0), Vec2d(5, 5))
    assert tile.image.mode == "RGBA"
    assert tile.image.getbbox() is None


def test_from_bytes_round_trip():
    tile = Tile.from_bytes(_png(5, 3, (255, 0, 0)), Vec2d(10, 20))
    assert tile.size() == Vec2d(5, 3)
    assert tile == Tile(Image.new("RGB", (5, 3), (255, 0, 0)), Vec2d(10, 20))


def test_from_bytes_invalid_data():
    with pytest.raises(UnidentifiedImageError):
        Tile.from_bytes(b"not an image", Vec2d(0, 0))


def test_equality_depends_on_pixels_and_position():
    base = Tile(Image.new("RGB", (2, 2), (0, 0, 255)), Vec2d(0, 0))
    other_color = Tile(Image.new("RGB", (2, 2), (0, 255, 0)), Vec2d(0, 0))
    other_position = Tile(Image.new("RGB", (2, 2), (0, 0, 255)), Vec2d(1, 0))
    assert (base == other_color) is False
    assert (base == other_position) is False
    assert base == Tile(Image.new("RGB", (2, 2), (0, 0, 255)), Vec2d(0, 0))


def test_repr():
    assert repr(Tile.empty(Vec2d(1, 2), Vec2d(3, 4))) == "Tile(x=1, y=2, width=3, height=4)"