"""Blog service - CRUD for blog posts"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.db.helpers import apply_search, ensure_unique, get_or_404, to_dict
from app.models.blog import Blog
from app.schemas.auth import SessionPayload
from app.utils.templates import generate_slug

logger = logging.getLogger(__name__)

SLUG_CONFLICT = "A blog with this slug already exists"


def _resolve_slug(slug: Optional[str], title: str) -> str:
    slug = (slug or "").strip() or generate_slug(title)
    if not slug:
        raise ServiceError("Slug cannot be empty")
    return slug


def create_blog(data: Dict[str, Any], session: SessionPayload, db: Session) -> Dict[str, Any]:
    """Create a blog post authored by the signed-in user"""
    slug = _resolve_slug(data.get("slug"), data["title"])
    ensure_unique(db, Blog, "slug", slug, SLUG_CONFLICT)

    fields = {k: v for k, v in data.items() if k != "slug"}
    blog = Blog(
        **fields,
        slug=slug,
        author=session.email,
        author_id=session.user_id,
        views=0,
        published_at=datetime.now(timezone.utc) if data.get("status") == "published" else None,
    )
    db.add(blog)
    db.commit()
    db.refresh(blog)
    logger.info(f"Blog {blog.id} created by {session.email} (slug: {slug})")
    return to_dict(blog)


def update_blog(blog_id: int, data: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Apply a partial update; published_at is stamped on the move into published"""
    blog = get_or_404(db, Blog, blog_id, "Blog")

    if "slug" in data or "title" in data:
        if "slug" in data:
            slug = _resolve_slug(data["slug"], data.get("title") or blog.title)
        else:
            slug = blog.slug
        ensure_unique(db, Blog, "slug", slug, SLUG_CONFLICT, exclude_id=blog.id)
        data = {**data, "slug": slug}

    if data.get("status") == "published" and blog.status != "published":
        blog.published_at = datetime.now(timezone.utc)

    for key, value in data.items():
        setattr(blog, key, value)
    db.commit()
    db.refresh(blog)
    return to_dict(blog)


def delete_blog(blog_id: int, db: Session) -> None:
    blog = get_or_404(db, Blog, blog_id, "Blog")
    db.delete(blog)
    db.commit()
    logger.info(f"Blog {blog_id} deleted")


def get_blog(blog_id: int, db: Session) -> Dict[str, Any]:
    return to_dict(get_or_404(db, Blog, blog_id, "Blog"))


def list_blogs(db: Session, status: Optional[str] = None, featured: Optional[bool] = None,
               search: Optional[str] = None) -> List[Dict[str, Any]]:
    """All blog posts matching the filters, newest first"""
    query = db.query(Blog)
    if status:
        query = query.filter(Blog.status == status)
    if featured is not None:
        query = query.filter(Blog.featured == featured)
    query = apply_search(query, search, [Blog.title, Blog.excerpt, Blog.tags])
    return [to_dict(b) for b in query.order_by(Blog.created_at.desc(), Blog.id.desc()).all()]


def list_published_blogs(db: Session, exclude_id: Optional[int] = None) -> List[Dict[str, Any]]:
    """Published posts for the related-posts picker (id, title, slug)"""
    query = db.query(Blog).filter(Blog.status == "published")
    if exclude_id is not None:
        query = query.filter(Blog.id != exclude_id)
    blogs = query.order_by(Blog.published_at.desc()).limit(50).all()
    return [{"id": b.id, "title": b.title, "slug": b.slug} for b in blogs]


def toggle_blog_featured(blog_id: int, db: Session) -> Dict[str, Any]:
    blog = get_or_404(db, Blog, blog_id, "Blog")
    blog.featured = not blog.featured
    db.commit()
    return {"id": blog.id, "featured": blog.featured}
