from pydantic import BaseModel, Field
from typing import Optional

from app.schemas.QRPayload import QRPayload

class QRCodeCreateRequest(BaseModel):
    payload: QRPayload
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None

class EncodeResponse(BaseModel):
    type: str
    content: str

class EncodeRequest(BaseModel):
    payload: QRPayload
