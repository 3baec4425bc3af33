class QRLinksError(Exception):
    """Base class for errors raised by the QR links core."""


class InvalidPayload(QRLinksError, ValueError):
    """A URL, email or other type-specific field is malformed."""


class PayloadTooLarge(QRLinksError):
    """Content does not fit in a QR symbol at the requested error-correction level."""

    def __init__(self, length: int, ecc: str, max_version: int):
        self.length = length
        self.ecc = ecc
        self.max_version = max_version
        super().__init__(
            f"Content of {length} characters exceeds QR capacity "
            f"at error correction {ecc} (max version {max_version})"
        )


class AssetLoadFailure(QRLinksError):
    """A logo asset could not be fetched or decoded."""


class UniquenessConflict(QRLinksError):
    """A generated short code is already taken."""


class CodeSpaceExhausted(QRLinksError):
    """No free short code was found within the allowed attempts."""
