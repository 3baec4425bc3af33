import base64
import binascii
import logging
from io import BytesIO

import requests
from PIL import Image, UnidentifiedImageError

from app.core.config import settings
from app.core.errors import AssetLoadFailure

logger = logging.getLogger(__name__)


def _read_data_url(reference: str) -> bytes:
    header, sep, data = reference.partition(",")
    if not sep:
        raise AssetLoadFailure("Malformed data URL")
    try:
        if header.endswith(";base64"):
            return base64.b64decode(data, validate=True)
        return data.encode()
    except (binascii.Error, ValueError) as e:
        raise AssetLoadFailure(f"Logo data URL is not valid base64: {e}")


def _fetch(reference: str) -> bytes:
    try:
        resp = requests.get(reference, timeout=settings.LOGO_FETCH_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise AssetLoadFailure(f"Failed to fetch logo {reference[:80]}: {e}")
    return resp.content


def load_logo(reference: str) -> Image.Image:
    """Fetch and fully decode a logo referenced by a data: or http(s) URL.

    The returned image is RGBA and already loaded, so compositing never waits
    on the asset. Any failure raises AssetLoadFailure.
    """
    if not reference:
        raise AssetLoadFailure("Empty logo reference")

    if reference.startswith("data:"):
        raw = _read_data_url(reference)
    elif reference.startswith(("http://", "https://")):
        raw = _fetch(reference)
    else:
        raise AssetLoadFailure(f"Unsupported logo reference: {reference[:30]}")

    try:
        with Image.open(BytesIO(raw)) as img:
            img.load()
            logo = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise AssetLoadFailure(f"Logo could not be decoded: {e}")

    logger.debug("Decoded logo %dx%d", logo.width, logo.height)
    return logo
