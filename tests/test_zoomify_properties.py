import pytest

from dezoomify.vec2d import Vec2d
from dezoomify.zoomify_properties import ImageProperties, ZoomLevelInfo


def test_deserialize():
    src = """
        <IMAGE_PROPERTIES
            WIDTH="4000" HEIGHT="2559"
            NUMTILES="217"
            NUMIMAGES="1"
            VERSION="1.8"
            TILESIZE="256" />"""
    props = ImageProperties.parse(src)
    assert props.width == 4000
    assert props.height == 2559
    assert props.tile_size == 256
    assert props.num_tiles == 217


def test_missing_attributes_default_to_zero():
    props = ImageProperties.parse(b'<IMAGE_PROPERTIES WIDTH="10"/>')
    assert props == ImageProperties(width=10, height=0, tile_size=0, num_tiles=0)


def test_invalid_xml():
    with pytest.raises(ValueError):
        ImageProperties.parse("<IMAGE_PROPERTIES WIDTH=")


def test_invalid_number():
    with pytest.raises(ValueError):
        ImageProperties.parse('<IMAGE_PROPERTIES WIDTH="-3"/>')


def test_real_num_tiles():
    props = ImageProperties(width=10, height=5, tile_size=3, num_tiles=4 * 2)
    tile_size = Vec2d(3, 3)
    assert props.levels() == [
        ZoomLevelInfo(Vec2d(2, 2), tile_size, 0),
        ZoomLevelInfo(Vec2d(6, 2), tile_size, 1),
        ZoomLevelInfo(Vec2d(10, 5), tile_size, 3),
    ]


def test_levels_recount():
    props = ImageProperties(width=2052, height=3185, tile_size=256, num_tiles=117)
    tile_size = Vec2d(256, 256)
    assert props.levels() == [
        ZoomLevelInfo(Vec2d(128, 200), tile_size, 0),
        ZoomLevelInfo(Vec2d(256, 398), tile_size, 1),
        ZoomLevelInfo(Vec2d(514, 796), tile_size, 1 + 2),
        ZoomLevelInfo(Vec2d(1026, 1592), tile_size, 1 + 2 + 12),
        ZoomLevelInfo(Vec2d(2052, 3185), tile_size, 1 + 2 + 12 + 35),
    ]


def test_zero_tile_size():
    with pytest.raises(ValueError):
        ImageProperties(width=10, height=10, tile_size=0, num_tiles=1).levels()


def test_tile_group():
    level = ZoomLevelInfo(Vec2d(1000, 1000), Vec2d(10, 10), 200)
    assert level.tile_group(Vec2d(0, 0)) == 0
    assert level.tile_group(Vec2d(56, 0)) == 1
    assert level.tile_group(Vec2d(0, 1)) == 1