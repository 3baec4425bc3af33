"""QR symbol construction and rasterization.

Matrix computation is delegated to the ``qrcode`` package; this module only
turns the module pattern into a raster image or an SVG document of a
requested pixel size, with a 1-module quiet zone.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image, ImageColor

from app.core.config import settings
from app.core.errors import InvalidPayload, PayloadTooLarge

logger = logging.getLogger(__name__)

QUIET_ZONE = 1
MAX_QR_VERSION = 40

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

RASTER = "raster"
VECTOR = "vector"


@dataclass(frozen=True)
class QRSymbol:
    content: str
    ecc: str
    version: int
    # Rows of dark/light flags, quiet zone included
    matrix: Tuple[Tuple[bool, ...], ...]

    @property
    def modules(self) -> int:
        return len(self.matrix)


def parse_color(value: str) -> Tuple[int, int, int]:
    try:
        return ImageColor.getrgb(value)[:3]
    except (ValueError, AttributeError):
        raise InvalidPayload(f"Invalid color value: {value!r}")


def to_hex(rgb: Tuple[int, int, int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def _check_size(size: int) -> int:
    if not isinstance(size, int) or size <= 0:
        raise InvalidPayload(f"Size must be a positive integer, got {size!r}")
    return size


def build_symbol(content: str, ecc: str = "M", max_version: Optional[int] = None) -> QRSymbol:
    """Encode ``content`` into the smallest QR version that fits at ``ecc``.

    Raises PayloadTooLarge when no version up to ``max_version`` can hold it.
    """
    level = ERROR_CORRECTION_LEVELS.get((ecc or "").upper())
    if level is None:
        raise InvalidPayload(f"Unknown error correction level: {ecc!r}")
    ecc = ecc.upper()
    ceiling = min(max_version or settings.QR_MAX_VERSION, MAX_QR_VERSION)

    qr = qrcode.QRCode(version=None, error_correction=level, box_size=1, border=QUIET_ZONE)
    qr.add_data(content)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError):
        # Newer qrcode releases report overflow as an invalid version 41
        logger.warning("Content of %d chars overflows QR capacity at level %s", len(content), ecc)
        raise PayloadTooLarge(len(content), ecc, ceiling)
    if qr.version > ceiling:
        logger.warning("Content needs QR version %d, ceiling is %d", qr.version, ceiling)
        raise PayloadTooLarge(len(content), ecc, ceiling)

    matrix = tuple(tuple(bool(cell) for cell in row) for row in qr.get_matrix())
    return QRSymbol(content=content, ecc=ecc, version=qr.version, matrix=matrix)


def render_raster(symbol: QRSymbol, size: int, fg: str = "#000000", bg: str = "#ffffff") -> Image.Image:
    """Rasterize the symbol to an RGB image of exactly ``size`` x ``size`` pixels."""
    _check_size(size)
    fg_rgb, bg_rgb = parse_color(fg), parse_color(bg)

    mask = Image.new("L", (symbol.modules, symbol.modules), 0)
    mask.putdata([255 if dark else 0 for row in symbol.matrix for dark in row])
    mask = mask.resize((size, size), Image.Resampling.NEAREST)

    return Image.composite(
        Image.new("RGB", (size, size), fg_rgb),
        Image.new("RGB", (size, size), bg_rgb),
        mask,
    )


def _fmt(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".")


def render_svg(symbol: QRSymbol, size: int, fg: str = "#000000", bg: str = "#ffffff") -> str:
    """Return an SVG document whose viewBox is ``0 0 size size``."""
    _check_size(size)
    fg_hex, bg_hex = to_hex(parse_color(fg)), to_hex(parse_color(bg))
    step = size / symbol.modules
    s = _fmt(step)

    path = []
    for y, row in enumerate(symbol.matrix):
        for x, dark in enumerate(row):
            if dark:
                path.append(f"M{_fmt(x * step)} {_fmt(y * step)}h{s}v{s}h-{s}z")

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{size}" height="{size}" viewBox="0 0 {size} {size}" '
        f'shape-rendering="crispEdges">'
        f'<rect width="{size}" height="{size}" fill="{bg_hex}"/>'
        f'<path fill="{fg_hex}" d="{"".join(path)}"/>'
        f'</svg>'
    )


def render(content: str, size: int, fg: str = "#000000", bg: str = "#ffffff",
           ecc: str = "M", target: str = RASTER):
    """Encode and draw ``content`` in one step; raster returns a PIL image, vector an SVG string."""
    symbol = build_symbol(content, ecc)
    if target == RASTER:
        return render_raster(symbol, size, fg, bg)
    if target == VECTOR:
        return render_svg(symbol, size, fg, bg)
    raise InvalidPayload(f"Unknown render target: {target!r}")
