"""Download pipeline: renders a symbol at a fixed target size and adds the logo.

The logo asset is decoded up front, before any canvas work, and composited at
the target resolution. Bytes are produced only after compositing is done.
"""
from dataclasses import dataclass, field
from html import escape
from io import BytesIO
from typing import List, Optional
import logging

from PIL import Image

from app.core.errors import AssetLoadFailure, InvalidPayload
from app.services import assets, compositor
from app.services.renderer import QRSymbol, parse_color, render_raster, render_svg
from app.utils.encoding import slugify_content

logger = logging.getLogger(__name__)

PNG_SIZE = 1000
JPEG_SIZE = 800
SVG_SIZE = 1000
JPEG_QUALITY = 90

FORMATS = {
    # format: (canvas size, media type, extension)
    "png": (PNG_SIZE, "image/png", "png"),
    "jpeg": (JPEG_SIZE, "image/jpeg", "jpg"),
    "svg": (SVG_SIZE, "image/svg+xml", "svg"),
}


@dataclass
class ExportResult:
    content: bytes
    media_type: str
    filename: str
    logo_applied: bool = False
    warnings: List[str] = field(default_factory=list)


def export_filename(content: str, extension: str) -> str:
    return f"qrcode-{slugify_content(content)}.{extension}"


def _decode_logo(style, warnings: List[str]) -> Optional[Image.Image]:
    if not style.logo_url:
        return None
    try:
        return assets.load_logo(style.logo_url)
    except AssetLoadFailure as e:
        logger.warning("Logo skipped: %s", e)
        warnings.append(f"logo skipped: {e}")
        return None


def _raster_canvas(symbol: QRSymbol, style, canvas_size: int) -> Image.Image:
    canvas = Image.new("RGB", (canvas_size, canvas_size), parse_color(style.background_color))
    base = render_raster(symbol, canvas_size, style.foreground_color, style.background_color)
    canvas.paste(base, (0, 0))
    return canvas


def _svg_logo_elements(style, logo_url: str, canvas_size: int) -> str:
    logo_size = compositor.scaled_logo_size(style.effective_logo_size, style.size, canvas_size)
    pos = (canvas_size - logo_size) / 2
    pad = compositor.EXPORT_PADDING
    return (
        f'<rect x="{pos - pad:g}" y="{pos - pad:g}" '
        f'width="{logo_size + 2 * pad:g}" height="{logo_size + 2 * pad:g}" fill="white"/>'
        f'<image href="{escape(logo_url, quote=True)}" x="{pos:g}" y="{pos:g}" '
        f'width="{logo_size:g}" height="{logo_size:g}"/>'
    )


def _export_svg(symbol: QRSymbol, style, warnings: List[str]) -> ExportResult:
    svg = render_svg(symbol, SVG_SIZE, style.foreground_color, style.background_color)
    logo_applied = False
    if style.logo_url:
        # The image element only references the asset, but a broken logo is still reported
        if _decode_logo(style, warnings) is not None:
            svg = svg.replace("</svg>", _svg_logo_elements(style, style.logo_url, SVG_SIZE) + "</svg>")
            logo_applied = True
    return ExportResult(
        content=svg.encode("utf-8"),
        media_type="image/svg+xml",
        filename=export_filename(symbol.content, "svg"),
        logo_applied=logo_applied,
        warnings=warnings,
    )


def export(symbol: QRSymbol, style, fmt: str) -> ExportResult:
    """Produce download bytes for ``symbol`` in ``fmt`` (png, jpeg or svg)."""
    fmt = (fmt or "").lower()
    if fmt == "jpg":
        fmt = "jpeg"
    if fmt not in FORMATS:
        raise InvalidPayload(f"Unsupported export format: {fmt!r}")
    warnings: List[str] = []

    if fmt == "svg":
        return _export_svg(symbol, style, warnings)

    canvas_size, media_type, extension = FORMATS[fmt]
    logo = _decode_logo(style, warnings)

    canvas = _raster_canvas(symbol, style, canvas_size)
    if logo is not None:
        compositor.composite_at(canvas, logo, style, compositor.EXPORT_PADDING)

    buf = BytesIO()
    if fmt == "png":
        canvas.save(buf, format="PNG")
    else:
        canvas.save(buf, format="JPEG", quality=JPEG_QUALITY)

    logger.info("Exported %s %dx%d for %r", fmt, canvas_size, canvas_size, symbol.content[:50])
    return ExportResult(
        content=buf.getvalue(),
        media_type=media_type,
        filename=export_filename(symbol.content, extension),
        logo_applied=logo is not None,
        warnings=warnings,
    )


def preview(symbol: QRSymbol, style) -> ExportResult:
    """PNG at the style's own size, with the tighter preview padding around the logo."""
    warnings: List[str] = []
    logo = _decode_logo(style, warnings)
    image = render_raster(symbol, style.size, style.foreground_color, style.background_color)
    if logo is not None:
        compositor.overlay(image, logo, style.effective_logo_size, compositor.PREVIEW_PADDING)

    buf = BytesIO()
    image.save(buf, format="PNG")
    return ExportResult(
        content=buf.getvalue(),
        media_type="image/png",
        filename=export_filename(symbol.content, "png"),
        logo_applied=logo is not None,
        warnings=warnings,
    )
