"""
Payment Intake Service — Charge, record, and reconcile tournament payments.

Order of work for a new payment:
    validate -> charge via Square -> insert payment row -> sync registration

A charge that succeeded at Square is never reported as a failure. If the
payment row cannot be written the caller still gets success plus a warning,
and the log line carries what reconciliation needs (Square ID, idempotency key).
"""
import logging
from typing import Optional

from fastapi import Depends

from payments_api.config import Settings, get_settings
from payments_api.exceptions import InvalidRequest, GatewayRejected, PersistenceFailure
from payments_api.models.payment import PaymentRecord
from payments_api.schemas.schemas import PaymentSubmitRequest, PaymentSubmitResponse
from payments_api.services.payment_store import PaymentStore, get_payment_store
from payments_api.services.square_gateway import ChargeOutcomeKind, SquareClient, get_gateway
from payments_api.utils.money import parse_minor_amount, to_major_units
from payments_api.utils.payment_status import PaymentStatus, can_transition

logger = logging.getLogger("payments_api.payments")

RECORD_FAILED_WARNING = "Payment processed but record creation failed"
STATUS_UPDATE_FAILED = "Failed to update payment status"
STATUS_UPDATE_ATTEMPTS = 3


class PaymentIntakeService:
    """Handles payment submissions and status updates for one request."""

    def __init__(self, gateway: SquareClient, store: PaymentStore, settings: Settings):
        self.gateway = gateway
        self.store = store
        self.settings = settings

    def submit(self, payload: PaymentSubmitRequest) -> PaymentSubmitResponse:
        """Charge the payment token and record the result.

        Raises:
            InvalidRequest: missing fields or a non-positive / fractional amount.
            GatewayRejected: Square declined the charge; message is Square's.
        """
        if not payload.source_id or not payload.amount or not payload.idempotency_key:
            raise InvalidRequest("Missing required payment information")

        amount = parse_minor_amount(payload.amount)
        if amount is None:
            raise InvalidRequest("Invalid payment amount")

        reference_id = f"tournament_{payload.tournament_id}" if payload.tournament_id else None
        outcome = self.gateway.create_payment(
            source_id=payload.source_id,
            amount=amount,
            currency=self.settings.PAYMENT_CURRENCY,
            idempotency_key=payload.idempotency_key,
            note=payload.description,
            reference_id=reference_id,
        )

        if outcome.kind is ChargeOutcomeKind.REJECTED:
            logger.warning("Square rejected payment (key %s): %s", payload.idempotency_key, outcome.error)
            raise GatewayRejected(outcome.error)

        payment = outcome.payment
        try:
            major_amount = to_major_units(payment.amount, payment.currency, self.settings.CURRENCY_MINOR_UNITS)
            record = self.store.insert_payment(
                square_payment_id=payment.id,
                amount=major_amount,
                currency=payment.currency,
                status=payment.status.lower(),
                payment_type="entry_fee" if payload.tournament_id else "other",
                user_id=payload.user_id,
                tournament_id=payload.tournament_id,
                description=payload.description,
                metadata={
                    "square_payment": payment.raw,
                    "idempotency_key": payload.idempotency_key,
                },
            )
        except (PersistenceFailure, ValueError) as exc:
            logger.error(
                "Payment %s charged but not recorded (idempotency key %s), needs reconciliation: %s",
                payment.id, payload.idempotency_key, exc,
            )
            return PaymentSubmitResponse(payment_id=payment.id, warning=RECORD_FAILED_WARNING)

        logger.info("Recorded payment %s as record %s (%s %s)", payment.id, record.id, major_amount, payment.currency)

        if payload.tournament_id and payload.user_id:
            self._sync_registration(payload.tournament_id, payload.user_id, payment.id, major_amount)

        return PaymentSubmitResponse(
            payment_id=payment.id,
            amount=payment.amount,
            status=payment.status,
            record_id=record.id,
        )

    def _sync_registration(self, tournament_id: str, user_id: str, payment_id: str, amount) -> None:
        # Failures here never affect the payment response
        try:
            updated = self.store.sync_registration(tournament_id, user_id, payment_id, amount)
        except PersistenceFailure as exc:
            logger.error("Registration update error for payment %s: %s", payment_id, exc)
            return

        if not updated:
            logger.info("No registration found for tournament %s, user %s", tournament_id, user_id)

    def update_status(self, payment_id: Optional[str], status: Optional[str]) -> PaymentRecord:
        """Overwrite the stored status of a payment, matched by Square ID.

        Raises:
            InvalidRequest: missing fields, unknown status, or a disallowed transition.
            PersistenceFailure: payment not found or the write failed.
        """
        if not payment_id or not status:
            raise InvalidRequest("Missing payment ID or status")

        target = PaymentStatus.parse(status)
        if target is None:
            raise InvalidRequest(f"Unknown payment status: {status}")

        # The write only lands if the status is still the one checked; a
        # concurrent update in between forces a re-read and a fresh check.
        for _ in range(STATUS_UPDATE_ATTEMPTS):
            try:
                record = self.store.get_by_gateway_id(payment_id)
            except PersistenceFailure as exc:
                logger.error("Payment update error for %s: %s", payment_id, exc)
                raise PersistenceFailure(STATUS_UPDATE_FAILED) from exc

            if record is None:
                logger.error("Payment update error: no payment with Square ID %s", payment_id)
                raise PersistenceFailure(STATUS_UPDATE_FAILED)

            previous = record.status
            if not can_transition(previous, target):
                raise InvalidRequest(f"Cannot change payment status from {previous} to {target.value}")

            try:
                updated = self.store.update_status(record, target.value, expected_status=previous)
            except PersistenceFailure as exc:
                logger.error("Payment update error for %s: %s", payment_id, exc)
                raise PersistenceFailure(STATUS_UPDATE_FAILED) from exc

            if updated is not None:
                logger.info("Payment %s status %s -> %s", payment_id, previous, updated.status)
                return updated

            logger.info("Payment %s changed status concurrently, re-checking", payment_id)

        logger.error("Payment update error for %s: status kept changing underneath", payment_id)
        raise PersistenceFailure(STATUS_UPDATE_FAILED)


def get_payment_service(
    gateway: SquareClient = Depends(get_gateway),
    store: PaymentStore = Depends(get_payment_store),
) -> PaymentIntakeService:
    """FastAPI dependency: service wired to the request's gateway and store."""
    return PaymentIntakeService(gateway, store, get_settings())
