from fastapi import Request
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.db import repository
import logging

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else "unknown"


def record_click(db: Session, link_id: int, request: Request) -> bool:
    """Bump the counter and append a click event; failures are logged, never raised."""
    try:
        repository.increment_click_count(db, link_id)
        repository.record_click(
            db,
            link_id,
            user_agent=request.headers.get("user-agent"),
            referrer=request.headers.get("referer"),
            ip_address=get_client_ip(request),
        )
        logger.info("metrics.record_click: counters updated for link %s", link_id)
        return True
    except SQLAlchemyError:
        db.rollback()
        logger.exception("metrics.record_click: failed to update DB for link %s", link_id)
        return False
