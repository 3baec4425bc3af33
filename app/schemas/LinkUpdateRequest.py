from pydantic import BaseModel, field_validator
from typing import Optional

from app.schemas.QRPayload import validate_http_url
from app.schemas.QRStyle import QRStyleUpdate

class LinkUpdateRequest(BaseModel):
    original_url: Optional[str] = None
    qr_style: Optional[QRStyleUpdate] = None

    @field_validator('original_url')
    def validate_url(cls, v):
        if v is None:
            return v
        return validate_http_url(v)
