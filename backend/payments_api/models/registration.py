"""
Tournament Registration Model — Maps to the 'tournament_registrations' table.

Rows are created and removed by the registration flow; the payments API only
writes the payment_* columns of an existing row.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Numeric, UniqueConstraint

from payments_api.config import AMOUNT_SCALE
from payments_api.database import Base


class TournamentRegistration(Base):
    __tablename__ = "tournament_registrations"
    __table_args__ = (UniqueConstraint("tournament_id", "user_id", name="uq_registration_tournament_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    tournament_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    payment_status = Column(String(16), default="pending")  # pending | completed
    payment_id = Column(String(64), nullable=True)
    payment_amount = Column(Numeric(18, AMOUNT_SCALE), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
