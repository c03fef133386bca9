"""Blog API routes"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.content import BlogCreate, BlogUpdate
from app.services import blog_service

router = APIRouter(prefix="/api/blogs", tags=["blogs"])


@router.get("")
def list_blogs(
    status: Optional[str] = None,
    featured: Optional[bool] = None,
    search: Optional[str] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    return {"blogs": blog_service.list_blogs(db, status=status, featured=featured, search=search)}


@router.get("/published")
def list_published_blogs(
    exclude_id: Optional[int] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    """Options for the related-posts picker"""
    return {"blogs": blog_service.list_published_blogs(db, exclude_id=exclude_id)}


@router.post("")
def create_blog(request_data: BlogCreate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        blog = blog_service.create_blog(request_data.model_dump(), session, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "blog": blog}


@router.get("/{blog_id}")
def get_blog(blog_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"blog": blog_service.get_blog(blog_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.patch("/{blog_id}")
def update_blog(blog_id: int, request_data: BlogUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        blog = blog_service.update_blog(blog_id, request_data.model_dump(exclude_unset=True), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True, "blog": blog}


@router.delete("/{blog_id}")
def delete_blog(blog_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        blog_service.delete_blog(blog_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
    return {"success": True}


@router.post("/{blog_id}/toggle-featured")
def toggle_featured(blog_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"success": True, **blog_service.toggle_blog_featured(blog_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
