"""Whitepaper service - CRUD and public lookup for whitepapers"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ServiceError
from app.db.helpers import apply_search, ensure_unique, get_or_404, to_dict
from app.models.whitepaper import Whitepaper
from app.utils.templates import generate_slug

logger = logging.getLogger(__name__)

SLUG_CONFLICT = "A whitepaper with this slug already exists"


def create_whitepaper(data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    slug = (data.get("slug") or "").strip() or generate_slug(data["title"])
    if not slug:
        raise ServiceError("Slug cannot be empty")
    ensure_unique(db, Whitepaper, "slug", slug, SLUG_CONFLICT)

    fields = {k: v for k, v in data.items() if k != "slug"}
    whitepaper = Whitepaper(**fields, slug=slug, views=0, downloads=0)
    db.add(whitepaper)
    db.commit()
    db.refresh(whitepaper)
    logger.info(f"Whitepaper {whitepaper.id} created (slug: {slug})")
    return to_dict(whitepaper)


def update_whitepaper(whitepaper_id: int, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    whitepaper = get_or_404(db, Whitepaper, whitepaper_id, "Whitepaper")

    if "slug" in data:
        slug = (data["slug"] or "").strip() or generate_slug(data.get("title") or whitepaper.title)
        if not slug:
            raise ServiceError("Slug cannot be empty")
        ensure_unique(db, Whitepaper, "slug", slug, SLUG_CONFLICT, exclude_id=whitepaper.id)
        data = {**data, "slug": slug}

    for key, value in data.items():
        setattr(whitepaper, key, value)
    db.commit()
    db.refresh(whitepaper)
    return to_dict(whitepaper)


def delete_whitepaper(whitepaper_id: int, db: Session) -> None:
    whitepaper = get_or_404(db, Whitepaper, whitepaper_id, "Whitepaper")
    db.delete(whitepaper)
    db.commit()
    logger.info(f"Whitepaper {whitepaper_id} deleted")


def get_whitepaper(whitepaper_id: int, db: Session) -> Dict[str, Any]:
    return to_dict(get_or_404(db, Whitepaper, whitepaper_id, "Whitepaper"))


def list_whitepapers(db: Session, status: Optional[str] = None, category: Optional[str] = None,
                     featured: Optional[bool] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
    query = db.query(Whitepaper)
    if status:
        query = query.filter(Whitepaper.status == status)
    if category:
        query = query.filter(Whitepaper.category == category)
    if featured is not None:
        query = query.filter(Whitepaper.featured == featured)
    query = apply_search(query, search, [Whitepaper.title, Whitepaper.description, Whitepaper.author])
    return [to_dict(w) for w in query.order_by(Whitepaper.created_at.desc(), Whitepaper.id.desc()).all()]


def toggle_whitepaper_featured(whitepaper_id: int, db: Session) -> Dict[str, Any]:
    whitepaper = get_or_404(db, Whitepaper, whitepaper_id, "Whitepaper")
    whitepaper.featured = not whitepaper.featured
    db.commit()
    return {"id": whitepaper.id, "featured": whitepaper.featured}


def get_published_whitepaper_by_slug(slug: str, db: Session) -> Dict[str, Any]:
    """Public landing page lookup; counts a view"""
    whitepaper = db.query(Whitepaper).filter(
        Whitepaper.slug == slug,
        Whitepaper.status == "published"
    ).first()
    if not whitepaper:
        raise NotFoundError("Whitepaper not found")

    whitepaper.views = Whitepaper.views + 1
    db.commit()
    db.refresh(whitepaper)

    data = to_dict(whitepaper)
    # The PDF is only handed out through the download form
    data.pop("pdf_url", None)
    return data
