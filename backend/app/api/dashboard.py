"""Admin area pages

Everything under the admin prefix is behind the route guard middleware;
these handlers only run with a valid session cookie.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import require_session
from app.db.session import get_db
from app.models import Blog, Speaker, Training, Whitepaper
from app.schemas.auth import SessionPayload
from app.services import download_service, payment_service

router = APIRouter(prefix=settings.ADMIN_PATH_PREFIX, tags=["admin"])


@router.get("")
def admin_home():
    return RedirectResponse(f"{settings.ADMIN_PATH_PREFIX}/dashboard", status_code=307)


@router.get("/login")
def login_page():
    """Login page placeholder; the form posts to /api/auth/login"""
    return {"login": "/api/auth/login"}


@router.get("/dashboard")
def dashboard(session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    """Summary counts for the dashboard landing page"""
    return {
        "user": {"email": session.email, "role": session.role},
        "content": {
            "blogs": db.query(func.count(Blog.id)).scalar() or 0,
            "whitepapers": db.query(func.count(Whitepaper.id)).scalar() or 0,
            "trainings": db.query(func.count(Training.id)).scalar() or 0,
            "speakers": db.query(func.count(Speaker.id)).scalar() or 0,
        },
        "downloads": download_service.get_download_stats(db),
        "payments": payment_service.get_payment_stats(db),
    }
