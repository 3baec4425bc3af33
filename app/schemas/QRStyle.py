from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"

ErrorCorrectionLevel = Literal["L", "M", "Q", "H"]


class QRStyleConfig(BaseModel):
    """Immutable render settings handed to the renderer and export pipeline."""
    foreground_color: str = Field(default_factory=lambda: settings.QR_DEFAULT_FOREGROUND, pattern=HEX_COLOR_PATTERN)
    background_color: str = Field(default_factory=lambda: settings.QR_DEFAULT_BACKGROUND, pattern=HEX_COLOR_PATTERN)
    size: int = Field(default_factory=lambda: settings.QR_DEFAULT_SIZE, gt=0)
    error_correction_level: ErrorCorrectionLevel = Field(default_factory=lambda: settings.QR_DEFAULT_ERROR_CORRECTION)
    logo_url: Optional[str] = None
    logo_size: Optional[float] = Field(default=None, gt=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def effective_logo_size(self) -> float:
        # Falls back to 20% of the symbol when unset
        return self.logo_size or self.size * 0.2


class QRStyleUpdate(BaseModel):
    # Omitted colors/size/level keep their stored values; the logo pair is always replaced
    foreground_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    background_color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    size: Optional[int] = Field(default=None, gt=0, le=settings.QR_MAX_SIZE)
    error_correction_level: Optional[ErrorCorrectionLevel] = None
    logo_url: Optional[str] = None
    logo_size: Optional[float] = Field(default=None, gt=0)

    @field_validator('logo_url')
    def validate_logo_url(cls, v):
        if v is None:
            return v
        if not v.startswith(("data:image/", "http://", "https://")):
            raise ValueError('logo_url must be a data:image/ URL or an http(s) URL')
        return v

