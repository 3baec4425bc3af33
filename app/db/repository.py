from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from datetime import datetime, timedelta
import logging

from app.core.config import settings
from app.core.errors import CodeSpaceExhausted, UniquenessConflict
from app.db.Models.models import Click, Link, QRStyle
from app.schemas.QRStyle import QRStyleConfig, QRStyleUpdate
from app.utils.encoding import generate_short_code

logger = logging.getLogger(__name__)


def get_link_by_short_code(db: Session, short_code: str) -> Optional[Link]:
    return db.query(Link).filter(Link.short_code == short_code).first()

def get_link_by_id(db: Session, link_id: int) -> Optional[Link]:
    return db.query(Link).filter(Link.id == link_id).first()

def get_links(db: Session, skip: int = 0, limit: int = 100) -> List[Link]:
    return (
        db.query(Link)
        .order_by(Link.created_at.desc(), Link.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )

def count_links(db: Session) -> int:
    return db.query(func.count(Link.id)).scalar()

def list_qr_payload_records(db: Session, skip: int = 0, limit: int = 100) -> List[Link]:
    return (
        db.query(Link)
        .filter(Link.qr_type.isnot(None))
        .order_by(Link.created_at.desc(), Link.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def _commit_and_refresh(db: Session, db_link: Link) -> Link:
    try:
        db.add(db_link)
        db.commit()
        db.refresh(db_link)
        return db_link
    except IntegrityError as e:
        db.rollback()
        error_msg = str(e.orig).lower() if getattr(e, 'orig', None) is not None else str(e).lower()
        if "short_code" in error_msg:
            raise UniquenessConflict(db_link.short_code) from e
        logger.warning(
            "IntegrityError creating Link short_code=%s: %s", db_link.short_code, error_msg
        )
        raise

def _default_style() -> QRStyle:
    defaults = QRStyleConfig()
    return QRStyle(
        foreground_color=defaults.foreground_color,
        background_color=defaults.background_color,
        size=defaults.size,
        error_correction_level=defaults.error_correction_level,
    )

def _create_and_generate_code(db: Session, **fields) -> Link:
    max_retries = settings.SHORT_CODE_MAX_ATTEMPTS

    for attempt in range(max_retries):
        db_link = Link(short_code=generate_short_code(), qr_style=_default_style(), **fields)
        try:
            return _commit_and_refresh(db, db_link)
        except UniquenessConflict as e:
            logger.info(f"Short code collision on '{e}' attempt {attempt + 1}/{max_retries}")

    raise CodeSpaceExhausted(f"Failed to generate unique short code after {max_retries} attempts")

def create_link(db: Session, original_url: str, title: Optional[str] = None,
                description: Optional[str] = None) -> Link:
    return _create_and_generate_code(
        db, original_url=original_url, title=title, description=description
    )

def create_qr_payload_record(db: Session, qr_type: str, content: str, title: Optional[str] = None,
                             description: Optional[str] = None) -> Link:
    # URL payloads keep original_url so they still redirect
    original_url = content if qr_type == "url" else ""
    return _create_and_generate_code(
        db,
        original_url=original_url,
        title=title,
        description=description,
        qr_type=qr_type,
        qr_content=content,
    )


def update_link_url(db: Session, link_id: int, original_url: str) -> Optional[Link]:
    link = get_link_by_id(db, link_id)
    if not link:
        return None
    link.original_url = original_url
    if link.qr_type == "url":
        link.qr_content = original_url
    link.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(link)
    return link

def update_qr_style(db: Session, link_id: int, update: QRStyleUpdate) -> Optional[QRStyle]:
    style = db.query(QRStyle).filter(QRStyle.link_id == link_id).first()
    if not style:
        if not get_link_by_id(db, link_id):
            return None
        style = _default_style()
        style.link_id = link_id
        db.add(style)

    for column in ("foreground_color", "background_color", "size", "error_correction_level"):
        value = getattr(update, column)
        if value is not None:
            setattr(style, column, value)
    style.logo_url = update.logo_url
    style.logo_size = update.logo_size
    style.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(style)
    return style

def delete_link(db: Session, link_id: int) -> bool:
    link = get_link_by_id(db, link_id)
    if not link:
        return False
    db.delete(link)
    db.commit()
    return True


def increment_click_count(db: Session, link_id: int) -> int:
    updated = db.query(Link).filter(Link.id == link_id).update({
        Link.click_count: Link.click_count + 1,
    })
    db.commit()
    return updated

def record_click(db: Session, link_id: int, user_agent: Optional[str] = None,
                 referrer: Optional[str] = None, ip_address: Optional[str] = None) -> Click:
    click = Click(
        link_id=link_id,
        user_agent=(user_agent or None) and user_agent[:512],
        referrer=(referrer or None) and referrer[:2048],
        ip_address=ip_address,
    )
    db.add(click)
    db.commit()
    return click


def get_total_stats(db: Session):
    total_links, total_clicks = (
        db.query(func.count(Link.id), func.coalesce(func.sum(Link.click_count), 0))
        .filter(Link.is_active.is_(True))
        .one()
    )
    return total_links or 0, total_clicks or 0

def get_top_links(db: Session, limit: int = 10) -> List[Link]:
    return (
        db.query(Link)
        .filter(Link.is_active.is_(True))
        .order_by(Link.click_count.desc(), Link.id)
        .limit(limit)
        .all()
    )

def get_clicks_over_time(db: Session, days: int = 30):
    since = datetime.utcnow() - timedelta(days=days)
    day = func.date(Click.clicked_at)
    return (
        db.query(day.label("date"), func.count(Click.id).label("clicks"))
        .filter(Click.clicked_at >= since)
        .group_by(day)
        .order_by(day)
        .all()
    )

def get_recent_clicks(db: Session, limit: int = 20):
    return (
        db.query(Click, Link)
        .join(Link, Click.link_id == Link.id)
        .order_by(Click.clicked_at.desc(), Click.id.desc())
        .limit(limit)
        .all()
    )
