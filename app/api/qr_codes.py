from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
import logging

from app.db import repository
from app.db.Connection import database
from app.schemas.LinkResponse import LinkResponse
from app.schemas.QRCodeCreateRequest import EncodeRequest, EncodeResponse, QRCodeCreateRequest
from app.services import payloads
from app.services.shortener import URLService, to_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["qr-codes"])


@router.post("/qr-codes", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def create_qr_code_endpoint(qr_in: QRCodeCreateRequest, db: Session = Depends(database.get_db)):
    link = URLService.create_qr_code(db, qr_in.payload, qr_in.title, qr_in.description)
    return to_response(link)


@router.get("/qr-codes", response_model=List[LinkResponse])
def list_qr_codes_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(database.get_db),
):
    return [to_response(link) for link in repository.list_qr_payload_records(db, skip, limit)]


@router.post("/qr/encode", response_model=EncodeResponse)
def encode_payload_endpoint(encode_in: EncodeRequest):
    payload = encode_in.payload
    return EncodeResponse(type=payload.type, content=payloads.encode(payload))
