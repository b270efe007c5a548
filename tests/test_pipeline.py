import io

import pytest
from PIL import Image

from inkdash.bitmap import OutputFormat, classify, unpack_pbm
from inkdash.config import CANVAS_HEIGHT, CANVAS_WIDTH
from inkdash.errors import CaptureError, RasterError
from inkdash.pipeline import DashboardPipeline
from inkdash.rendering import CaptureBackend, raster_from_image

from .conftest import FailingCapture, FakeCapture


def test_capture_uses_fixed_canvas_by_default():
    capture = FakeCapture()
    raster = DashboardPipeline(capture).capture("<html></html>")
    assert (raster.width, raster.height) == (CANVAS_WIDTH, CANVAS_HEIGHT)
    assert capture.calls == [("<html></html>", 480, 800)]


def test_bits_output():
    pipeline = DashboardPipeline(FakeCapture(), width=16, height=2)
    image = pipeline.render("<html></html>", OutputFormat.BITS)
    assert image.content_type == "application/octet-stream"
    # Left 8 columns white, right 8 black.
    assert image.data == b"\xff\x00\xff\x00"


def test_pbm_output():
    pipeline = DashboardPipeline(FakeCapture(), width=16, height=2)
    image = pipeline.render("<html></html>", OutputFormat.PBM)
    assert image.content_type == "application/octet-stream"
    assert image.data == b"P4\n16 2\n\x00\xff\x00\xff"


def test_png_output_is_thresholded_greyscale():
    pipeline = DashboardPipeline(FakeCapture(lambda w, h: Image.new("RGB", (w, h), (140, 130, 120))), width=4, height=3)
    image = pipeline.render("<html></html>", OutputFormat.PNG)
    assert image.content_type == "image/png"
    with Image.open(io.BytesIO(image.data)) as img:
        assert img.mode == "L"
        assert img.size == (4, 3)
        assert set(img.tobytes()) == {255}


def test_all_formats_share_one_threshold_rule():
    def draw(width, height):
        img = Image.new("RGB", (width, height))
        img.putdata([((x * 37 + y * 11) % 256,) * 3 for y in range(height) for x in range(width)])
        return img

    pipeline = DashboardPipeline(FakeCapture(draw), width=13, height=5)
    grid = classify(pipeline.capture(""))
    bits = pipeline.render("", OutputFormat.BITS).data
    pbm = pipeline.render("", OutputFormat.PBM).data
    png = pipeline.render("", OutputFormat.PNG).data

    assert unpack_pbm(pbm) == grid
    for index, white in enumerate(grid.white):
        assert bool(bits[index // 8] >> (7 - index % 8) & 1) == white
    with Image.open(io.BytesIO(png)) as img:
        assert [value == 255 for value in img.tobytes()] == grid.white


def test_capture_failure_propagates():
    with pytest.raises(CaptureError):
        DashboardPipeline(FailingCapture()).render("", OutputFormat.BITS)


def test_undecodable_capture_is_rejected():
    class GarbageCapture(CaptureBackend):
        def capture(self, html, width, height):
            return b"not a png"

    with pytest.raises(RasterError):
        DashboardPipeline(GarbageCapture()).render("", OutputFormat.PBM)


def test_output_format_names():
    assert OutputFormat.from_name("PBM") is OutputFormat.PBM
    assert OutputFormat.from_name(".bits") is OutputFormat.BITS
    assert OutputFormat.PNG.suffix == ".png"
    with pytest.raises(ValueError):
        OutputFormat.from_name("gif")


def test_raster_from_rgb_image_adds_opaque_alpha():
    img = Image.new("RGB", (2, 1))
    img.putdata([(10, 20, 30), (200, 210, 220)])
    raster = raster_from_image(img)
    assert raster.pixels == [(10, 20, 30, 255), (200, 210, 220, 255)]
