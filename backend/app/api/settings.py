"""Email and Stripe configuration API routes (admin)"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.settings import EmailConfigUpdate, SendTestEmailRequest, StripeConfigUpdate
from app.services import config_service, email_service

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/email")
def get_email_settings(session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    """Current email configuration, secrets masked; null when never saved"""
    return {"config": config_service.get_email_config_view(db)}


@router.put("/email")
def save_email_settings(request_data: EmailConfigUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    config = config_service.save_email_config(request_data.model_dump(exclude_unset=True), db)
    return {"success": True, "config": config}


@router.post("/email/test")
def send_test_email(request_data: SendTestEmailRequest, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    """Send a test message with the saved configuration"""
    result = email_service.send_test_email(request_data.to, db)
    if not result.success:
        raise HTTPException(400, result.error or "Failed to send test email")
    return result.to_dict()


@router.get("/email/logs")
def email_logs(limit: int = 50, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    return {"logs": email_service.get_email_logs(db, limit=min(max(limit, 1), 500))}


@router.get("/stripe")
def get_stripe_settings(session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    """Current Stripe configuration, secrets masked; null when never saved"""
    return {"config": config_service.get_stripe_config_view(db)}


@router.put("/stripe")
def save_stripe_settings(request_data: StripeConfigUpdate, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    config = config_service.save_stripe_config(request_data.model_dump(exclude_unset=True), db)
    return {"success": True, "config": config}
