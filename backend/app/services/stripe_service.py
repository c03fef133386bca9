"""Stripe gateway wrapper - Checkout Sessions and refunds

Keys come from the stripe_config document on every call (passed as
api_key=...), so a config change applies without a restart.
"""
import logging
import stripe
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from app.core.errors import ConfigurationError, IntegrationError
from app.services.config_service import get_stripe_config

logger = logging.getLogger(__name__)
payments_logger = logging.getLogger("payments")


def get_stripe_api_key(db: Session) -> str:
    """Secret key of an enabled Stripe configuration

    Raises:
        ConfigurationError: If Stripe is not configured or disabled
    """
    config = get_stripe_config(db)
    if not config or not config.get("enabled") or not config.get("secret_key"):
        raise ConfigurationError("Stripe not configured")
    return config["secret_key"]


def get_currency(db: Session) -> str:
    config = get_stripe_config(db) or {}
    return (config.get("currency") or "usd").lower()


def create_checkout_session(db: Session, training_id: int, training_title: str, unit_amount: int,
                            currency: str, customer_email: str, success_url: str, cancel_url: str,
                            metadata: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Create a one-item payment-mode Checkout Session

    Args:
        unit_amount: Price in minor currency units (cents)

    Returns:
        {"id": session id, "url": hosted checkout URL}
    """
    api_key = get_stripe_api_key(db)
    try:
        session = stripe.checkout.Session.create(
            api_key=api_key,
            payment_method_types=["card"],
            line_items=[{
                "price_data": {
                    "currency": currency.lower(),
                    "product_data": {
                        "name": training_title,
                        "description": f"Training: {training_title}",
                    },
                    "unit_amount": unit_amount,
                },
                "quantity": 1,
            }],
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=customer_email,
            metadata={"trainingId": str(training_id), **(metadata or {})},
        )
    except stripe.StripeError as e:
        logger.error(f"Stripe checkout session creation failed for training {training_id}: {e}")
        raise IntegrationError(f"Stripe error: {e.user_message or str(e)}")

    payments_logger.info(f"Checkout session {session.id} created for training {training_id}")
    return {"id": session.id, "url": session.url}


def retrieve_checkout_session(session_id: str, db: Session) -> Dict[str, Any]:
    """Current payment state of a Checkout Session"""
    api_key = get_stripe_api_key(db)
    try:
        session = stripe.checkout.Session.retrieve(session_id, api_key=api_key)
    except stripe.StripeError as e:
        logger.error(f"Failed to retrieve checkout session {session_id}: {e}")
        raise IntegrationError(f"Stripe error: {e.user_message or str(e)}")

    # payment_intent is an id, or an object when expanded
    payment_intent = getattr(session, "payment_intent", None)
    if payment_intent is not None and not isinstance(payment_intent, str):
        payment_intent = getattr(payment_intent, "id", None)

    return {
        "id": session.id,
        "payment_status": getattr(session, "payment_status", None),
        "payment_intent": payment_intent,
        "amount_total": getattr(session, "amount_total", None),
        "currency": getattr(session, "currency", None),
    }


def create_refund(payment_intent_id: str, db: Session, amount: Optional[int] = None) -> Dict[str, Any]:
    """Refund a PaymentIntent in full, or amount minor units of it"""
    api_key = get_stripe_api_key(db)
    params = {"payment_intent": payment_intent_id, "api_key": api_key}
    if amount is not None:
        params["amount"] = amount
    try:
        refund = stripe.Refund.create(**params)
    except stripe.StripeError as e:
        logger.error(f"Stripe refund failed for {payment_intent_id}: {e}")
        raise IntegrationError(f"Stripe error: {e.user_message or str(e)}")

    payments_logger.info(f"Refund {refund.id} created for {payment_intent_id} ({refund.status})")
    return {"id": refund.id, "status": refund.status, "amount": refund.amount}
