from dataclasses import dataclass
from typing import Optional
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import InvalidPayload
from app.db import repository
from app.db.Models.models import Link
from app.schemas.LinkResponse import LinkResponse
from app.schemas.QRPayload import QR_TYPE_LABELS
from app.schemas.QRStyle import QRStyleConfig, QRStyleUpdate
from app.services import RedisURLCache, payloads
from app.services.renderer import build_symbol

logger = logging.getLogger(__name__)


@dataclass
class ResolvedLink:
    id: int
    original_url: str
    qr_type: Optional[str]
    qr_content: Optional[str]

    @property
    def redirects(self) -> bool:
        return bool(self.original_url)


def short_url(short_code: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/{short_code}"


def qr_content_for(link: Link) -> str:
    """What a link's QR symbol encodes: its payload, or else its short URL."""
    return link.qr_content or short_url(link.short_code)


def style_for(link: Link) -> QRStyleConfig:
    if link.qr_style is None:
        return QRStyleConfig()
    return QRStyleConfig.model_validate(link.qr_style)


def to_response(link: Link) -> LinkResponse:
    return LinkResponse(
        id=link.id,
        original_url=link.original_url,
        short_code=link.short_code,
        short_url=short_url(link.short_code),
        title=link.title,
        description=link.description,
        created_at=link.created_at,
        updated_at=link.updated_at,
        click_count=link.click_count or 0,
        is_active=link.is_active,
        qr_type=link.qr_type,
        qr_content=link.qr_content,
        qr_style=style_for(link) if link.qr_style is not None else None,
    )


class URLService:

    @staticmethod
    def create_link(db: Session, original_url: str, title: Optional[str] = None,
                    description: Optional[str] = None) -> Link:
        link = repository.create_link(db, original_url, title, description)
        logger.info("Created link %s -> %s", link.short_code, original_url[:50])
        return link

    @staticmethod
    def create_qr_code(db: Session, payload, title: Optional[str] = None,
                       description: Optional[str] = None) -> Link:
        content = payloads.encode(payload)
        # Fail before storing when the content cannot fit the default style
        build_symbol(content, QRStyleConfig().error_correction_level)
        link = repository.create_qr_payload_record(
            db, payload.type, content,
            title=title or f"{QR_TYPE_LABELS[payload.type]} QR Code",
            description=description,
        )
        logger.info("Created %s QR code %s (%d chars)", payload.type, link.short_code, len(content))
        return link

    @staticmethod
    def update_link(db: Session, link_id: int, original_url: Optional[str] = None,
                    qr_style: Optional[QRStyleUpdate] = None) -> Optional[Link]:
        link = repository.get_link_by_id(db, link_id)
        if link is None:
            return None
        if original_url:
            if link.qr_type not in (None, "url"):
                raise InvalidPayload(f"A {link.qr_type} QR code has no redirect target to update")
            repository.update_link_url(db, link_id, original_url)
            RedisURLCache.invalidate(link.short_code)
        if qr_style is not None:
            repository.update_qr_style(db, link_id, qr_style)
        db.refresh(link)
        return link

    @staticmethod
    def delete_link(db: Session, link_id: int) -> bool:
        link = repository.get_link_by_id(db, link_id)
        if link is None:
            return False
        short_code = link.short_code
        repository.delete_link(db, link_id)
        RedisURLCache.invalidate(short_code)
        logger.info("Deleted link %s", short_code)
        return True

    @staticmethod
    def resolve(db: Session, short_code: str) -> Optional[ResolvedLink]:
        cached = RedisURLCache.get(short_code)
        if cached:
            return ResolvedLink(**cached)

        link = repository.get_link_by_short_code(db, short_code)
        if link is None or not link.is_active:
            return None
        resolved = ResolvedLink(
            id=link.id,
            original_url=link.original_url,
            qr_type=link.qr_type,
            qr_content=link.qr_content,
        )
        RedisURLCache.put(short_code, resolved.__dict__)
        return resolved
