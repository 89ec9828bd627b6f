import pytest

from dezoomify.vec2d import Vec2d, max_size_in_rect, tile_positions


def test_str_format():
    assert str(Vec2d(3, 4)) == "x=3 y=4"


def test_square():
    assert Vec2d.square(7) == Vec2d(7, 7)


def test_negative_component_rejected():
    with pytest.raises(ValueError):
        Vec2d(-1, 2)


@pytest.mark.parametrize("a,b", [(Vec2d(1, 2), Vec2d(3, 4)), (Vec2d(10, 0), Vec2d(0, 10))])
def test_add_sub_round_trip(a, b):
    assert (a + b) - b == a
    assert (a + b) - a == b


def test_saturating_sub():
    assert Vec2d(1, 5) - Vec2d(3, 2) == Vec2d(0, 3)


@pytest.mark.parametrize("a,b", [(Vec2d(1, 9), Vec2d(5, 3)), (Vec2d(4, 4), Vec2d(4, 4))])
def test_min_max_invariants(a, b):
    low, high = a.min(b), a.max(b)
    assert low.fits_inside(a) and low.fits_inside(b)
    assert a.fits_inside(high) and b.fits_inside(high)
    assert low + high == a + b


def test_coercion_of_tuples_and_ints():
    v = Vec2d(1, 2)
    assert v.max((3, 0)) == v.max(Vec2d(3, 0))
    assert v * 3 == v * Vec2d.square(3)
    assert 3 * v == v * 3


@pytest.mark.parametrize(
    "size,tile",
    [(Vec2d(15001, 48002), Vec2d(512, 512)), (Vec2d(600, 350), Vec2d(512, 512)), (Vec2d(1, 1), Vec2d(3, 3))],
)
def test_ceil_div_covers_exactly(size, tile):
    n = size.ceil_div(tile)
    assert size.fits_inside(n * tile)
    assert not size.fits_inside((n - Vec2d(1, 1)) * tile) or n - Vec2d(1, 1) == n


def test_ceil_div_equals_floor_div_when_exact():
    assert Vec2d(1024, 512).ceil_div(512) == Vec2d(1024, 512) // 512


def test_floor_div():
    assert Vec2d(5156, 3816) // 10 == Vec2d(515, 381)


def test_area():
    assert Vec2d(512, 512).area() == 262144


def test_max_size_in_rect_cropped():
    assert max_size_in_rect(Vec2d(0, 32768), Vec2d(32768, 32768), Vec2d(15001, 48002)) == Vec2d(15001, 15234)
    assert max_size_in_rect(Vec2d(512, 0), Vec2d(512, 512), Vec2d(600, 350)) == Vec2d(88, 350)


def test_max_size_in_rect_fully_inside():
    assert max_size_in_rect(Vec2d(0, 0), Vec2d(512, 512), Vec2d(1024, 1024)) == Vec2d(512, 512)


def test_tile_positions_row_major():
    positions = [p * 512 for p in tile_positions(Vec2d(1024, 1024), Vec2d(512, 512))]
    assert positions == [Vec2d(0, 0), Vec2d(512, 0), Vec2d(0, 512), Vec2d(512, 512)]


def test_tile_positions_count_matches_grid():
    size, tile = Vec2d(600, 350), Vec2d(512, 512)
    positions = list(tile_positions(size, tile))
    assert len(positions) == size.ceil_div(tile).area()
    assert len(set(positions)) == len(positions)