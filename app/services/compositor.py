"""Centered logo overlay for rendered QR images.

The logo is composited directly on each output canvas at that canvas's
resolution. A composited image is never rescaled afterwards.
"""
import logging

from PIL import Image, ImageDraw

from app.services.renderer import parse_color

logger = logging.getLogger(__name__)

PREVIEW_PADDING = 5
EXPORT_PADDING = 10
DEFAULT_LOGO_RATIO = 0.2
PATCH_COLOR = "#ffffff"


def logo_box(canvas_size: int, logo_size: float):
    """Return the integer (x, y, side) placement of a centered square logo."""
    side = max(1, int(round(logo_size)))
    offset = (canvas_size - side) // 2
    return offset, offset, side


def scaled_logo_size(logo_size: float, preview_size: int, canvas_size: int) -> float:
    return logo_size * canvas_size / preview_size


def overlay(image: Image.Image, logo: Image.Image, logo_size: float,
            padding: int = PREVIEW_PADDING, patch_color: str = PATCH_COLOR) -> Image.Image:
    """Draw an opaque patch and the logo centered on ``image`` (modified in place)."""
    x, y, side = logo_box(image.width, logo_size)

    draw = ImageDraw.Draw(image)
    draw.rectangle(
        [x - padding, y - padding, x + side + padding - 1, y + side + padding - 1],
        fill=parse_color(patch_color),
    )

    resized = logo.resize((side, side), Image.Resampling.LANCZOS)
    image.paste(resized, (x, y), resized if resized.mode == "RGBA" else None)
    return image


def composite_at(image: Image.Image, logo: Image.Image, style, padding: int) -> Image.Image:
    """Overlay ``logo`` on a canvas of any resolution using the style's preview geometry."""
    logo_size = scaled_logo_size(style.effective_logo_size, style.size, image.width)
    logger.debug("Compositing logo at %dpx on %dpx canvas", round(logo_size), image.width)
    return overlay(image, logo, logo_size, padding)
