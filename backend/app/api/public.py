"""Public API routes - lead capture, whitepaper pages and training checkout

No session required.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.db.session import get_db
from app.schemas.downloads import DownloadCreate, LeadContact
from app.schemas.payments import CheckoutRequest
from app.services import download_service, payment_service, whitepaper_service

router = APIRouter(prefix="/api/public", tags=["public"])
logger = logging.getLogger(__name__)


def _request_metadata(request: Request) -> dict:
    client_ip = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if not client_ip and request.client:
        client_ip = request.client.host
    return {
        "ip_address": client_ip or None,
        "user_agent": request.headers.get("User-Agent"),
        "referrer": request.headers.get("Referer"),
    }


@router.get("/whitepapers/{slug}")
def get_whitepaper(slug: str, db: Session = Depends(get_db)):
    """Published whitepaper landing page data"""
    try:
        return {"whitepaper": whitepaper_service.get_published_whitepaper_by_slug(slug, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.post("/whitepapers/{whitepaper_id}/download")
def track_whitepaper_download(whitepaper_id: int, request_data: LeadContact, request: Request, db: Session = Depends(get_db)):
    """Record the lead, queue the delivery email and hand back the PDF link"""
    try:
        return download_service.track_whitepaper_download(
            whitepaper_id, request_data.model_dump(), db, metadata=_request_metadata(request)
        )
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.post("/downloads")
def create_download(request_data: DownloadCreate, request: Request, db: Session = Depends(get_db)):
    """Lead capture for other resource types (no email)"""
    return download_service.create_download({**request_data.model_dump(), **_request_metadata(request)}, db)


@router.post("/checkout")
def create_checkout(request_data: CheckoutRequest, db: Session = Depends(get_db)):
    try:
        return payment_service.create_training_checkout(request_data.model_dump(), db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.post("/payments/complete")
def complete_payment(session_id: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    """Reconcile the payment after Stripe's success redirect"""
    try:
        return payment_service.complete_payment(session_id, db)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
