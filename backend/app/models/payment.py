"""Payment model"""
from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey
from datetime import datetime, timezone
from app.models.base import Base


class Payment(Base):
    """Training purchase made through Stripe Checkout"""
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    training_id = Column(Integer, ForeignKey("trainings.id", ondelete="SET NULL"), nullable=True, index=True)
    training_title = Column(String(500), nullable=False)
    training_type = Column(String(20), nullable=True)
    training_date = Column(DateTime(timezone=True), nullable=True)

    # Amounts in major currency units
    amount = Column(Float, nullable=False)
    currency = Column(String(10), nullable=False, default="USD")
    discount_applied = Column(Float, nullable=False, default=0)
    final_amount = Column(Float, nullable=False)

    user_email = Column(String(255), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=True)
    user_company = Column(String(255), nullable=True)

    payment_provider = Column(String(20), nullable=False, default="stripe")
    payment_status = Column(String(20), nullable=False, default="pending", index=True)  # pending, completed, failed, refunded
    session_id = Column(String(255), unique=True, nullable=True, index=True)  # Stripe checkout session ID
    payment_intent_id = Column(String(255), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    refunded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)
