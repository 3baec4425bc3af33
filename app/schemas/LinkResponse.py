from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

from app.schemas.QRStyle import QRStyleConfig

# Response DTOs
class LinkResponse(BaseModel):
    id: int
    original_url: str
    short_code: str
    short_url: str
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    click_count: int
    is_active: bool
    qr_type: Optional[str] = None
    qr_content: Optional[str] = None
    qr_style: Optional[QRStyleConfig] = None

    model_config = ConfigDict(from_attributes=True)
