"""
Payment Store — Reads and writes payments and registration payment fields.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, Dict

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from payments_api.database import get_db
from payments_api.exceptions import PersistenceFailure
from payments_api.models.payment import PaymentRecord
from payments_api.models.registration import TournamentRegistration


class PaymentStore:
    """SQLAlchemy-backed access to the payments tables.

    Database errors are rolled back and re-raised as PersistenceFailure so
    callers never handle SQLAlchemy exceptions directly.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert_payment(
        self,
        square_payment_id: str,
        amount: Decimal,
        currency: str,
        status: str,
        payment_type: str,
        user_id: Optional[str] = None,
        tournament_id: Optional[str] = None,
        description: Optional[str] = None,
        metadata: Optional[Dict] = None,
    ) -> PaymentRecord:
        record = PaymentRecord(
            user_id=user_id,
            tournament_id=tournament_id,
            square_payment_id=square_payment_id,
            amount=amount,
            currency=currency,
            status=status,
            payment_type=payment_type,
            description=description,
            payment_metadata=metadata or {},
        )
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceFailure(f"Could not insert payment {square_payment_id}: {exc}") from exc
        return record

    def sync_registration(
        self,
        tournament_id: str,
        user_id: str,
        payment_id: str,
        amount: Decimal,
    ) -> int:
        """Mark the (tournament, user) registration as paid.

        Returns:
            Number of registration rows updated (0 when none exists).
        """
        try:
            updated = (
                self.db.query(TournamentRegistration)
                .filter(
                    TournamentRegistration.tournament_id == tournament_id,
                    TournamentRegistration.user_id == user_id,
                )
                .update(
                    {
                        TournamentRegistration.payment_status: "completed",
                        TournamentRegistration.payment_id: payment_id,
                        TournamentRegistration.payment_amount: amount,
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceFailure(
                f"Could not update registration for tournament {tournament_id}, user {user_id}: {exc}"
            ) from exc
        return updated

    def get_by_gateway_id(self, square_payment_id: str) -> Optional[PaymentRecord]:
        try:
            return (
                self.db.query(PaymentRecord)
                .filter(PaymentRecord.square_payment_id == square_payment_id)
                .first()
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceFailure(f"Could not look up payment {square_payment_id}: {exc}") from exc

    def update_status(self, record: PaymentRecord, status: str, expected_status: str) -> Optional[PaymentRecord]:
        """Set the status only if the row still holds `expected_status`.

        Returns:
            The refreshed record, or None when another writer changed the
            status first (nothing is written).
        """
        square_payment_id = record.square_payment_id
        try:
            updated = (
                self.db.query(PaymentRecord)
                .filter(
                    PaymentRecord.id == record.id,
                    PaymentRecord.status == expected_status,
                )
                .update(
                    {
                        PaymentRecord.status: status,
                        PaymentRecord.updated_at: datetime.utcnow(),
                    },
                    synchronize_session=False,
                )
            )
            self.db.commit()
            if not updated:
                return None
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceFailure(f"Could not update payment {square_payment_id}: {exc}") from exc
        return record


def get_payment_store(db: Session = Depends(get_db)) -> PaymentStore:
    """FastAPI dependency: store bound to the request's database session."""
    return PaymentStore(db)
