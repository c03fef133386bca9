"""Payment service - training checkout, completion, refunds and reporting

Status only moves forward: pending -> completed | failed, completed -> refunded.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError
from app.core.metrics import payments_counter
from app.db.helpers import apply_date_range, get_or_404, to_dict
from app.models.payment import Payment
from app.models.training import Training
from app.services import stripe_service

logger = logging.getLogger(__name__)
payments_logger = logging.getLogger("payments")


def to_minor_units(amount: float) -> int:
    """Major currency units to the integer minor units Stripe expects"""
    return int(round(amount * 100))


def create_training_checkout(params: Dict[str, Any], db: Session) -> Dict[str, Any]:
    """Start a Stripe Checkout for a published training

    The pending Payment row is only written once Stripe has created the
    session.

    Raises:
        NotFoundError: Unknown training
        ConflictError: Training is not published
        ConfigurationError: Stripe not configured
        IntegrationError: Stripe rejected the session
    """
    training = db.query(Training).filter(Training.id == params["training_id"]).first()
    if not training:
        raise NotFoundError("Training not found")
    if training.status != "published":
        raise ConflictError("Training not available")

    price = training.discount_price or training.regular_price
    currency = stripe_service.get_currency(db)

    session = stripe_service.create_checkout_session(
        db,
        training_id=training.id,
        training_title=training.title,
        unit_amount=to_minor_units(price),
        currency=currency,
        customer_email=params["user_email"],
        success_url=params["success_url"],
        cancel_url=params["cancel_url"],
        metadata={
            "userName": params["user_name"],
            "userPhone": params.get("user_phone") or "",
            "userCompany": params.get("user_company") or "",
        },
    )

    payment = Payment(
        training_id=training.id,
        training_title=training.title,
        training_type=training.type,
        training_date=training.date,
        amount=price,
        currency=currency.upper(),
        discount_applied=(training.regular_price - training.discount_price) if training.discount_price else 0,
        final_amount=price,
        user_email=params["user_email"],
        user_name=params["user_name"],
        user_phone=params.get("user_phone"),
        user_company=params.get("user_company"),
        payment_provider="stripe",
        payment_status="pending",
        session_id=session["id"],
    )
    db.add(payment)
    db.commit()

    payments_counter.labels(status="pending").inc()
    payments_logger.info(f"Payment pending for training {training.id} ({params['user_email']}, session {session['id']})")
    return {"success": True, "sessionId": session["id"], "url": session["url"]}


def complete_payment(session_id: str, db: Session) -> Dict[str, Any]:
    """Reconcile a Payment with its Checkout Session after the success redirect

    An unknown session id is not an error: nothing is updated and the
    gateway status is still returned. Payments that already left pending
    are left as they are.
    """
    session = stripe_service.retrieve_checkout_session(session_id, db)
    paid = session["payment_status"] == "paid"

    payment = db.query(Payment).filter(Payment.session_id == session_id).first()
    if not payment:
        logger.warning(f"No payment row for checkout session {session_id}")
    elif payment.payment_status != "pending":
        logger.info(f"Payment {payment.id} already {payment.payment_status}, ignoring completion")
    else:
        payment.payment_status = "completed" if paid else "failed"
        payment.payment_intent_id = session["payment_intent"] or session["id"]
        if paid:
            payment.paid_at = datetime.now(timezone.utc)
        db.commit()
        payments_counter.labels(status=payment.payment_status).inc()
        payments_logger.info(f"Payment {payment.id} {payment.payment_status} (session {session_id})")

    return {"success": True, "paymentStatus": session["payment_status"]}


def refund_payment(payment_id: int, db: Session, amount: Optional[float] = None) -> Dict[str, Any]:
    """Refund a completed payment, in full or for amount (major units)

    Raises:
        NotFoundError: Unknown payment
        ConflictError: Payment is not completed or has no payment intent
        IntegrationError: Stripe refused the refund
    """
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise NotFoundError("Payment not found")
    if payment.payment_status != "completed":
        raise ConflictError("Can only refund completed payments")
    if not payment.payment_intent_id:
        raise ConflictError("No payment intent ID found")

    refund = stripe_service.create_refund(
        payment.payment_intent_id,
        db,
        amount=to_minor_units(amount) if amount else None,
    )

    payment.payment_status = "refunded"
    payment.refunded_at = datetime.now(timezone.utc)
    db.commit()

    payments_counter.labels(status="refunded").inc()
    payments_logger.info(f"Payment {payment.id} refunded (refund {refund['id']})")
    return {"success": True, "refund": refund}


def list_payments(db: Session, status: Optional[str] = None, training_id: Optional[int] = None,
                  date_from: Optional[datetime] = None, date_to: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Payments matching the filters, newest first; status "all" means no filter"""
    query = db.query(Payment)
    if status and status != "all":
        query = query.filter(Payment.payment_status == status)
    if training_id is not None:
        query = query.filter(Payment.training_id == training_id)
    query = apply_date_range(query, Payment.created_at, date_from, date_to)
    return [to_dict(p) for p in query.order_by(Payment.created_at.desc(), Payment.id.desc()).all()]


def get_payment(payment_id: int, db: Session) -> Dict[str, Any]:
    return to_dict(get_or_404(db, Payment, payment_id, "Payment"))


def get_payment_stats(db: Session) -> Dict[str, Any]:
    """Dashboard aggregates; pending counts everything not completed"""
    total = db.query(func.count(Payment.id)).scalar() or 0
    completed = db.query(func.count(Payment.id)).filter(Payment.payment_status == "completed").scalar() or 0
    revenue = db.query(func.sum(Payment.final_amount)).filter(Payment.payment_status == "completed").scalar() or 0
    recent = db.query(Payment).order_by(Payment.created_at.desc(), Payment.id.desc()).limit(10).all()

    return {
        "total_payments": total,
        "completed_payments": completed,
        "pending_payments": total - completed,
        "total_revenue": float(revenue),
        "recent_payments": [to_dict(p) for p in recent],
    }
