import pytest

from conftest import CLEAR, RED, solid
from pixelart.models.block_model import SampledBlock
from pixelart.models.pixelation_config import PixelationConfig


def _render(process_service, render_service, image, cfg):
    loop = process_service.alignment_bounds(*image.size, cfg.block_size, cfg.align_pixels)
    grid = process_service.sample_blocks(image, cfg.block_size, *loop)
    return grid, render_service.render(grid, cfg, loop)


def _close(actual, expected, tolerance=1):
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected))


@pytest.mark.parametrize("block_size, expected", [(1, 1.0), (20, 1.0), (30, 1.5), (100, 5.0)])
def test_border_line_width(render_service, block_size, expected):
    assert render_service.border_line_width(block_size) == pytest.approx(expected)


@pytest.mark.parametrize("block_size, expected", [(20, 1), (30, 2), (50, 3), (100, 5)])
def test_stroke_width_is_whole_pixels(render_service, block_size, expected):
    assert render_service.stroke_width(block_size) == expected


def test_squares_fill_sample_footprint(process_service, render_service):
    grid, out = _render(process_service, render_service, solid((25, 12)), PixelationConfig(10))
    assert out.size == (25, 12)
    assert out.getcolors() == [(25 * 12, RED)]


def test_square_borders_stay_inside_block(process_service, render_service):
    _, out = _render(process_service, render_service, solid((600, 600)), PixelationConfig(20, draw_borders=True))
    # stroke of black at 20% over opaque red
    assert _close(out.getpixel((0, 0)), (204, 0, 0, 255))
    assert _close(out.getpixel((19, 19)), (204, 0, 0, 255))
    assert _close(out.getpixel((20, 5)), (204, 0, 0, 255))
    assert out.getpixel((1, 1)) == RED
    assert out.getpixel((10, 10)) == RED


def test_no_borders_for_tiny_blocks(process_service, render_service):
    _, out = _render(process_service, render_service, solid((600, 600)), PixelationConfig(2, draw_borders=True))
    assert out.getcolors() == [(600 * 600, RED)]


def test_borders_skip_empty_blocks(process_service, render_service):
    img = solid((40, 20), CLEAR)
    img.paste(RED, (0, 0, 20, 20))
    _, out = _render(process_service, render_service, img, PixelationConfig(20, draw_borders=True))
    assert out.getpixel((20, 0)) == CLEAR
    assert out.getpixel((39, 19)) == CLEAR


def test_circle_fills_disc_inside_block(process_service, render_service):
    _, out = _render(process_service, render_service, solid((600, 600)), PixelationConfig(20, pixel_shape="circle"))
    assert out.getpixel((10, 10)) == RED
    assert out.getpixel((0, 0)) == CLEAR
    assert out.getpixel((19, 19)) == CLEAR


def test_circle_border_strokes_disc_edge(process_service, render_service):
    cfg = PixelationConfig(20, pixel_shape="circle", draw_borders=True)
    _, out = _render(process_service, render_service, solid((600, 600)), cfg)
    top_row = [out.getpixel((x, 0)) for x in range(20)]
    assert any(_close(px, (204, 0, 0, 255)) for px in top_row)
    assert out.getpixel((10, 10)) == RED
    assert out.getpixel((0, 0)) == CLEAR


def test_disc_geometry_uses_configured_block_size(render_service):
    block = SampledBlock(600, 40, 4, 20, 255, 0, 0, 255)
    assert render_service.disc_geometry(block, 20) == (610.0, 50.0, 10.0)
    assert render_service.disc_bbox(block, 20) == (600, 40, 619, 59)


def test_trailing_circle_extends_past_sampled_footprint(process_service, render_service):
    # current behaviour: radius comes from block_size even for a 4px trailing block
    cfg = PixelationConfig(20, pixel_shape="circle")
    grid, out = _render(process_service, render_service, solid((604, 604)), cfg)
    assert list(grid.widths)[-1] == 4

    trailing = [b for b in grid.blocks() if b.x == 600 and b.y == 0][0]
    assert trailing.sample_width == 4
    cx, cy, radius = render_service.disc_geometry(trailing, cfg.block_size)
    assert (cx, cy, radius) == (610.0, 10.0, 10.0)
    assert cx + radius > trailing.x + trailing.sample_width

    # the disc is clipped by the surface edge, leaving the block's corners empty
    assert out.getpixel((603, 10)) == RED
    assert out.getpixel((600, 0)) == CLEAR
    assert out.getpixel((600, 600)) == CLEAR
    assert out.getpixel((603, 603)) == RED


def test_circle_block_size_one_paints_every_block(process_service, render_service):
    img = solid((7, 5))
    img.putpixel((3, 2), (1, 2, 3, 200))
    _, out = _render(process_service, render_service, img, PixelationConfig(1, pixel_shape="circle"))
    assert list(out.getdata()) == list(img.getdata())


def test_circle_block_size_one_through_pipeline(process_service):
    out = process_service.pixelate_image(solid((600, 600)), PixelationConfig(1, pixel_shape="circle"))
    assert out.getcolors() == [(600 * 600, RED)]
