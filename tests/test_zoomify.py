import pytest

from dezoomify.vec2d import Vec2d
from dezoomify.zoomify import ZoomifyError, load_from_properties


def test_panorama():
    url = "http://x.fr/y/ImageProperties.xml?t"
    contents = b"""
        <IMAGE_PROPERTIES
            WIDTH="174550" HEIGHT="16991" NUMTILES="61284"
            NUMIMAGES="1" VERSION="1.8" TILESIZE="256"/>"""
    levels = load_from_properties(url, contents)
    assert len(levels) == 11
    tiles = [url for url, _ in levels[3].tile_references()]
    assert tiles == [
        "http://x.fr/y/TileGroup0/3-0-0.jpg",
        "http://x.fr/y/TileGroup0/3-1-0.jpg",
        "http://x.fr/y/TileGroup0/3-2-0.jpg",
        "http://x.fr/y/TileGroup0/3-3-0.jpg",
        "http://x.fr/y/TileGroup0/3-4-0.jpg",
        "http://x.fr/y/TileGroup0/3-5-0.jpg",
    ]


def test_tilegroups():
    url = "http://x.fr/y/ImageProperties.xml?t"
    contents = b"""<IMAGE_PROPERTIES WIDTH="12000" HEIGHT="9788"
                                NUMTILES="2477" NUMIMAGES="1" VERSION="1.8" TILESIZE="256"/>"""
    levels = load_from_properties(url, contents)
    tiles = {url for url, _ in levels[5].tile_references()}
    assert "http://x.fr/y/TileGroup1/5-0-14.jpg" in tiles
    assert "http://x.fr/y/TileGroup2/5-0-15.jpg" in tiles


def test_positions_and_size():
    contents = b'<IMAGE_PROPERTIES WIDTH="10" HEIGHT="5" NUMTILES="8" TILESIZE="3"/>'
    levels = load_from_properties("http://a.b/ImageProperties.xml", contents)
    assert [level.size() for level in levels] == [Vec2d(2, 2), Vec2d(6, 2), Vec2d(10, 5)]
    refs = levels[1].tile_references()
    assert refs == [
        ("http://a.b/TileGroup0/1-0-0.jpg", Vec2d(0, 0)),
        ("http://a.b/TileGroup0/1-1-0.jpg", Vec2d(3, 0)),
    ]


def test_invalid_xml():
    with pytest.raises(ZoomifyError):
        load_from_properties("http://a.b/ImageProperties.xml", b"<not closed")