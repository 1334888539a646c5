"""
Payment Record Model — One row per charge accepted by the Square gateway.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, JSON, Numeric, Text

from payments_api.config import AMOUNT_SCALE
from payments_api.database import Base


class PaymentRecord(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(String(64), nullable=True, index=True)
    tournament_id = Column(String(64), nullable=True, index=True)

    square_payment_id = Column(String(64), nullable=False, unique=True, index=True)
    amount = Column(Numeric(18, AMOUNT_SCALE), nullable=False)   # Major units (pounds, not pence)
    currency = Column(String(3), nullable=False)

    # Status tracking
    status = Column(String(16), nullable=False)       # pending | approved | completed | canceled | failed | refunded
    payment_type = Column(String(16), nullable=False)  # entry_fee | other
    description = Column(Text, nullable=True)

    # "metadata" is reserved on declarative classes
    payment_metadata = Column("metadata", JSON, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=True)
