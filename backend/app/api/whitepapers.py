"""Whitepaper API routes (admin)"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.content import WhitepaperCreate, WhitepaperUpdate
from app.services import whitepaper_service

router = APIRouter(prefix="/api/whitepapers", tags=["whitepapers"])


@router.get("")
def list_whitepapers(
    status: Optional[str] = None,
    category: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    return {"whitepapers": whitepaper_service.list_whitepapers(
        db, status=status, category=category, featured=featured, search=search
    )}


@router.post("")
def create_whitepaper(request_data: WhitepaperCreate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        whitepaper = whitepaper_service.create_whitepaper(request_data.model_dump(), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "whitepaper": whitepaper}


@router.get("/{whitepaper_id}")
def get_whitepaper(whitepaper_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"whitepaper": whitepaper_service.get_whitepaper(whitepaper_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.patch("/{whitepaper_id}")
def update_whitepaper(whitepaper_id: int, request_data: WhitepaperUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        whitepaper = whitepaper_service.update_whitepaper(whitepaper_id, request_data.model_dump(exclude_unset=True), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "whitepaper": whitepaper}


@router.delete("/{whitepaper_id}")
def delete_whitepaper(whitepaper_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        whitepaper_service.delete_whitepaper(whitepaper_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True}


@router.post("/{whitepaper_id}/toggle-featured")
def toggle_featured(whitepaper_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"success": True, **whitepaper_service.toggle_whitepaper_featured(whitepaper_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
