from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.orm import Session
import logging

from app.db.Connection import database
from app.services.shortener import URLService
from app.services import metrics
from app.utils.encoding import is_short_code

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/{short_code}", tags=["redirect"])
def redirect_to_url_endpoint(short_code: str, request: Request, db: Session = Depends(database.get_db)):
    resolved = URLService.resolve(db, short_code) if is_short_code(short_code) else None
    if resolved is None:
        logger.warning(f"Redirect 404: Short code not found: {short_code}")
        raise HTTPException(status_code=404, detail="Link not found")

    metrics.record_click(db, resolved.id, request)

    if resolved.redirects:
        return RedirectResponse(url=resolved.original_url, status_code=status.HTTP_302_FOUND)
    # Non-URL payloads (wifi, vcard, ...) have nowhere to redirect to
    return PlainTextResponse(resolved.qr_content or "")
