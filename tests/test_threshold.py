import pytest

from inkdash.bitmap import THRESHOLD, RasterImage, brightness, classify, is_white
from inkdash.errors import RasterError

from .conftest import BLACK, WHITE, raster_from_rows


def test_threshold_constant():
    assert THRESHOLD == 128


def test_brightness_is_unweighted_mean():
    assert brightness(30, 60, 90) == 60
    assert brightness(255, 0, 0) == 85


def test_brightness_128_is_black():
    assert is_white((128, 128, 128, 255)) is False


def test_brightness_129_is_white():
    assert is_white((129, 129, 129, 255)) is True


def test_fractional_brightness_above_threshold_is_white():
    # (128 + 128 + 129) / 3 = 128.33
    assert is_white((128, 128, 129, 255)) is True


def test_alpha_is_ignored():
    assert is_white((255, 255, 255, 0)) is True
    assert is_white((0, 0, 0, 0)) is False


def test_classify_keeps_dimensions_and_order():
    raster = raster_from_rows(
        [
            [WHITE, BLACK, WHITE],
            [BLACK, BLACK, WHITE],
        ]
    )
    grid = classify(raster)
    assert (grid.width, grid.height) == (3, 2)
    assert grid.white == [True, False, True, False, False, True]
    assert grid.row(1) == [False, False, True]
    assert grid.is_white(2, 1) is True


def test_classify_single_pixel():
    grid = classify(RasterImage(1, 1, [WHITE]))
    assert grid.white == [True]


@pytest.mark.parametrize("width,height", [(0, 1), (1, 0), (0, 0), (-1, 4)])
def test_zero_dimension_raster_is_rejected(width, height):
    with pytest.raises(RasterError):
        classify(RasterImage(width, height, []))


def test_pixel_count_mismatch_is_rejected():
    with pytest.raises(RasterError):
        classify(RasterImage(2, 2, [WHITE, WHITE, WHITE]))


def test_pixel_accessor():
    raster = raster_from_rows([[WHITE, BLACK], [BLACK, WHITE]])
    assert raster.pixel(1, 0) == BLACK
    assert raster.pixel(1, 1) == WHITE
    with pytest.raises(RasterError):
        raster.pixel(2, 0)
