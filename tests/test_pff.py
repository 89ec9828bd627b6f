import pytest

from dezoomify.pff import NeedsData, PffDezoomer, PffError, PffZoomLevel, zoom_levels
from dezoomify.pff_properties import HeaderInfo, PffHeader, PffImageInfo, TileIndices
from dezoomify.vec2d import Vec2d

HEADER_REPLY = (
    'Error=0&newSize=126&reply_data=<PFFHEADER WIDTH="512" HEIGHT="512" '
    'NUMTILES="5" HEADERSIZE="10" VERSION="106" TILESIZE="256"/>'
)
INDICES_REPLY = "Error=0&newSize=126&reply_data=100, 0 10 20 30 40"


def _info(width=512, height=512, tile_size=256):
    header = PffHeader(width=width, height=height, tile_size=tile_size, num_tiles=5,
                       header_size=10, version=106)
    return PffImageInfo(HeaderInfo("http://x.com/servlet", "img.pff", header),
                        TileIndices.parse("100, 0 10 20 30 40"))


def test_first_step_asks_for_metadata():
    dezoomer = PffDezoomer()
    with pytest.raises(NeedsData) as needs:
        dezoomer.zoom_levels("http://x.com/servlet?file=img.pff&requestType=0")
    assert needs.value.uri == "http://x.com/servlet?file=img.pff&requestType=1"
    assert dezoomer.header_info is None


def test_full_protocol():
    dezoomer = PffDezoomer()
    meta_uri = "http://x.com/servlet?file=img.pff&requestType=1"
    with pytest.raises(NeedsData) as needs:
        dezoomer.zoom_levels(meta_uri, HEADER_REPLY)
    assert dezoomer.header_info.header.width == 512
    assert needs.value.uri == dezoomer.header_info.tiles_index_url()
    levels = dezoomer.zoom_levels(needs.value.uri, INDICES_REPLY)
    assert levels[0].size == Vec2d(512, 512)
    assert levels[0].image_info.tiles.indices == [100, 110, 120, 130, 140]


def test_metadata_url_without_contents_requests_it():
    dezoomer = PffDezoomer()
    uri = "http://x.com/servlet?file=img.pff&requestType=1"
    with pytest.raises(NeedsData) as needs:
        dezoomer.zoom_levels(uri)
    assert needs.value.uri == uri


def test_url_without_query_is_rejected():
    with pytest.raises(PffError):
        PffDezoomer().zoom_levels("http://x.com/servlet")


def test_missing_file_parameter():
    with pytest.raises(PffError):
        PffDezoomer().zoom_levels("http://x.com/servlet?requestType=1")


def test_invalid_header_reply():
    with pytest.raises(PffError):
        PffDezoomer().zoom_levels("http://x.com/servlet?file=a&requestType=1", "Error=0")


def test_invalid_indices_reply():
    dezoomer = PffDezoomer()
    with pytest.raises(NeedsData) as needs:
        dezoomer.zoom_levels("http://x.com/servlet?file=a&requestType=1", HEADER_REPLY)
    with pytest.raises(PffError):
        dezoomer.zoom_levels(needs.value.uri, "reply_data=100")


def test_levels_halve_until_tile_size():
    levels = zoom_levels(_info())
    assert len(levels) == 2
    assert levels[1].size == levels[0].size.ceil_div(2)
    assert levels[0].tiles_before == 0
    assert levels[1].tiles_before == len(levels[0].tile_references())


def test_image_smaller_than_tile_has_no_levels():
    assert zoom_levels(_info(width=100, height=100)) == []


def test_zero_tile_size():
    with pytest.raises(PffError):
        zoom_levels(_info(tile_size=0))


def test_tile_url_uses_global_tile_number():
    info = _info()
    level = PffZoomLevel(info, tiles_before=4, size=Vec2d(256, 256))
    assert level.tile_url(Vec2d(0, 0)) == info.tile_url(4)


def test_tile_references_positions():
    info = _info()
    level = zoom_levels(info)[0]
    refs = level.tile_references()
    assert [position for _, position in refs] == [
        Vec2d(0, 0), Vec2d(256, 0), Vec2d(0, 256), Vec2d(256, 256),
    ]
    assert refs[3][0] == info.tile_url(3)


def test_repr():
    assert repr(zoom_levels(_info())[0]) == "Zoomify PFF"