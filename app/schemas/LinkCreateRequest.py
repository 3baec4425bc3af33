from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.schemas.QRPayload import validate_http_url

# Request DTOs
class LinkCreateRequest(BaseModel):
    original_url: str
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None

    @field_validator('original_url')
    def validate_url(cls, v):
        return validate_http_url(v)
