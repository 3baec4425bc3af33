import pytest
from PIL import Image, ImageChops

from app.core.errors import AssetLoadFailure
from app.schemas.QRStyle import QRStyleConfig
from app.services import assets, compositor
from app.services.renderer import build_symbol, render_raster

RED = (255, 0, 0)


def red_bbox(image):
    """Bounding box of (near) pure red pixels, i.e. the logo."""
    diff = ImageChops.difference(image.convert("RGB"), Image.new("RGB", image.size, RED))
    return diff.convert("L").point(lambda v: 255 if v < 16 else 0).getbbox()


def test_load_logo_from_data_url(logo_data_url):
    logo = assets.load_logo(logo_data_url)
    assert logo.mode == "RGBA"
    assert logo.size == (64, 64)


@pytest.mark.parametrize("reference", [
    "",
    "file:///etc/passwd",
    "data:image/png;base64",
    "data:image/png;base64,@@@@",
])
def test_load_logo_rejects_bad_references(reference):
    with pytest.raises(AssetLoadFailure):
        assets.load_logo(reference)


def test_load_logo_rejects_undecodable_bytes(broken_logo_data_url):
    with pytest.raises(AssetLoadFailure):
        assets.load_logo(broken_logo_data_url)


def test_overlay_centers_logo_with_opaque_patch(logo_data_url):
    logo = assets.load_logo(logo_data_url)
    image = render_raster(build_symbol("https://example.com", "H"), 200)
    compositor.overlay(image, logo, 40, padding=5)

    assert red_bbox(image) == (80, 80, 120, 120)
    # Patch edges are opaque white
    assert image.getpixel((75, 75)) == (255, 255, 255)
    assert image.getpixel((124, 124)) == (255, 255, 255)


@pytest.mark.parametrize("logo_size", [40, 45, 37.5])
def test_logo_centered_at_each_export_resolution(logo_data_url, logo_size):
    logo = assets.load_logo(logo_data_url)
    style = QRStyleConfig(size=200, logo_url=logo_data_url, logo_size=logo_size)
    symbol = build_symbol("https://example.com/centered", "H")

    for canvas_size in (1000, 800):
        canvas = render_raster(symbol, canvas_size)
        compositor.composite_at(canvas, logo, style, compositor.EXPORT_PADDING)
        x0, y0, x1, y1 = red_bbox(canvas)
        center = canvas_size / 2
        assert abs((x0 + x1) / 2 - center) < 1
        assert abs((y0 + y1) / 2 - center) < 1
        # Logo is drawn at the target resolution, not scaled from the preview
        expected = logo_size * canvas_size / 200
        assert abs((x1 - x0) - expected) <= 1


def test_default_logo_size_is_twenty_percent():
    assert QRStyleConfig(size=250).effective_logo_size == 50
    assert QRStyleConfig(size=250, logo_size=30).effective_logo_size == 30


def test_overlay_respects_logo_transparency():
    logo = Image.new("RGBA", (10, 10), (0, 0, 255, 0))
    image = Image.new("RGB", (100, 100), (0, 0, 0))
    compositor.overlay(image, logo, 10, padding=5)
    # Transparent logo leaves the white patch visible, not dark modules
    assert image.getpixel((50, 50)) == (255, 255, 255)
