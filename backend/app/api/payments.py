"""Payment API routes (admin)"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.errors import ServiceError
from app.core.security import require_session
from app.db.session import get_db
from app.schemas.auth import SessionPayload
from app.schemas.payments import RefundRequest
from app.services import payment_service

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.get("")
def list_payments(
    status: Optional[str] = None,
    training_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    return {"payments": payment_service.list_payments(
        db, status=status, training_id=training_id, date_from=date_from, date_to=date_to
    )}


@router.get("/stats")
def payment_stats(session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    return payment_service.get_payment_stats(db)


@router.get("/{payment_id}")
def get_payment(payment_id: int, session: SessionPayload = Depends(require_session), db: Session = Depends(get_db)):
    try:
        return {"payment": payment_service.get_payment(payment_id, db)}
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))


@router.post("/{payment_id}/refund")
def refund_payment(
    payment_id: int,
    request_data: Optional[RefundRequest] = Body(None),
    session: SessionPayload = Depends(require_session),
    db: Session = Depends(get_db)
):
    """Refund a completed payment (full refund when no amount is given)"""
    amount = request_data.amount if request_data else None
    try:
        return payment_service.refund_payment(payment_id, db, amount=amount)
    except ServiceError as e:
        raise HTTPException(e.status_code, str(e))
