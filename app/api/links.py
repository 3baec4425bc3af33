from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
import logging

from app.db import repository
from app.db.Connection import database
from app.schemas.LinkCreateRequest import LinkCreateRequest
from app.schemas.LinkResponse import LinkResponse
from app.schemas.LinkUpdateRequest import LinkUpdateRequest
from app.schemas.PaginatedLinkList import PaginatedLinkList
from app.schemas.QRStyle import QRStyleConfig, QRStyleUpdate
from app.services import exporter
from app.services.renderer import build_symbol
from app.services.shortener import URLService, qr_content_for, style_for, to_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/links", tags=["links"])


def _get_or_404(db: Session, link_id: int):
    link = repository.get_link_by_id(db, link_id)
    if link is None:
        logger.warning(f"Link 404: id not found: {link_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return link


def _image_response(result: exporter.ExportResult, disposition: str) -> Response:
    if result.logo_applied:
        logo_status = "applied"
    elif result.warnings:
        logo_status = "skipped"
    else:
        logo_status = "none"
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'{disposition}; filename="{result.filename}"',
            "X-Logo-Status": logo_status,
        },
    )


@router.post("", response_model=LinkResponse, status_code=status.HTTP_201_CREATED)
def create_link_endpoint(link_in: LinkCreateRequest, db: Session = Depends(database.get_db)):
    link = URLService.create_link(db, link_in.original_url, link_in.title, link_in.description)
    return to_response(link)


@router.get("", response_model=PaginatedLinkList)
def list_links_endpoint(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(database.get_db)
):
    links = repository.get_links(db, skip=skip, limit=limit)
    return PaginatedLinkList(
        total=repository.count_links(db),
        skip=skip,
        limit=limit,
        links=[to_response(link) for link in links],
    )


@router.get("/{link_id}", response_model=LinkResponse)
def get_link_endpoint(link_id: int, db: Session = Depends(database.get_db)):
    return to_response(_get_or_404(db, link_id))


@router.put("/{link_id}", response_model=LinkResponse)
def update_link_endpoint(link_id: int, link_in: LinkUpdateRequest, db: Session = Depends(database.get_db)):
    link = URLService.update_link(db, link_id, link_in.original_url, link_in.qr_style)
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    logger.info(f"Updated link {link.short_code}")
    return to_response(link)


@router.put("/{link_id}/qr-style", response_model=QRStyleConfig)
def update_qr_style_endpoint(link_id: int, style_in: QRStyleUpdate, db: Session = Depends(database.get_db)):
    style = repository.update_qr_style(db, link_id, style_in)
    if style is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return QRStyleConfig.model_validate(style)


@router.delete("/{link_id}")
def delete_link_endpoint(link_id: int, db: Session = Depends(database.get_db)):
    if not URLService.delete_link(db, link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return {"success": True}


@router.get("/{link_id}/qr")
def preview_qr_endpoint(link_id: int, db: Session = Depends(database.get_db)):
    link = _get_or_404(db, link_id)
    style = style_for(link)
    symbol = build_symbol(qr_content_for(link), style.error_correction_level)
    return _image_response(exporter.preview(symbol, style), "inline")


@router.get("/{link_id}/qr/export")
def export_qr_endpoint(
    link_id: int,
    format: str = Query("png", pattern="^(png|jpeg|jpg|svg)$"),
    db: Session = Depends(database.get_db),
):
    link = _get_or_404(db, link_id)
    style = style_for(link)
    symbol = build_symbol(qr_content_for(link), style.error_correction_level)
    result = exporter.export(symbol, style, format)
    logger.info(f"Export {format} for link {link.short_code}: logo_applied={result.logo_applied}")
    return _image_response(result, "attachment")
