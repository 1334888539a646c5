"""
Square Gateway — Charges payment-method tokens through Square's Payments API.

Docs: https://developer.squareup.com/reference/square/payments-api/create-payment
"""
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Optional

import httpx

from payments_api.config import Settings, get_settings
from payments_api.exceptions import GatewayUnavailable


@dataclass
class GatewayPayment:
    """The authoritative charge result returned by Square."""

    id: str
    amount: int          # Minor units
    currency: str
    status: str          # Square casing: APPROVED | PENDING | COMPLETED | CANCELED | FAILED
    raw: dict = field(default_factory=dict)


class ChargeOutcomeKind(str, Enum):
    CHARGED = "charged"
    REJECTED = "rejected"


@dataclass
class ChargeOutcome:
    kind: ChargeOutcomeKind
    payment: Optional[GatewayPayment] = None
    error: Optional[str] = None

    @classmethod
    def charged(cls, payment: GatewayPayment) -> "ChargeOutcome":
        return cls(kind=ChargeOutcomeKind.CHARGED, payment=payment)

    @classmethod
    def rejected(cls, message: str) -> "ChargeOutcome":
        return cls(kind=ChargeOutcomeKind.REJECTED, error=message)


class SquareClient:
    """Thin client over Square's REST API.

    Declines and malformed requests (4xx) come back as a REJECTED outcome.
    Square outages (5xx) and network failures raise GatewayUnavailable.
    """

    PAYMENTS_PATH = "/v2/payments"

    def __init__(
        self,
        access_token: str,
        base_url: str,
        api_version: str,
        location_id: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.location_id = location_id or None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._headers = {
            "Authorization": f"Bearer {access_token}",
            "Square-Version": api_version,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "SquareClient":
        return cls(
            access_token=settings.SQUARE_ACCESS_TOKEN,
            base_url=settings.square_base_url,
            api_version=settings.SQUARE_API_VERSION,
            location_id=settings.SQUARE_LOCATION_ID,
            timeout=settings.SQUARE_TIMEOUT_SECONDS,
        )

    @property
    def base_url(self) -> str:
        return str(self._http.base_url).rstrip("/")

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    def create_payment(
        self,
        source_id: str,
        amount: int,
        currency: str,
        idempotency_key: str,
        note: Optional[str] = None,
        reference_id: Optional[str] = None,
    ) -> ChargeOutcome:
        """Charge `amount` minor units of `currency` against a payment-method token.

        Args:
            source_id: Card nonce / payment token from the Web Payments SDK.
            amount: Amount in minor units (e.g. pence).
            currency: ISO 4217 code.
            idempotency_key: Forwarded as-is; Square dedupes retries on it.
            note: Free-text note shown in the Square dashboard.
            reference_id: Merchant reference, e.g. "tournament_42".

        Returns:
            ChargeOutcome tagged CHARGED or REJECTED.
        """
        body = {
            "source_id": source_id,
            "idempotency_key": idempotency_key,
            "amount_money": {"amount": amount, "currency": currency},
        }
        if note:
            body["note"] = note
        if reference_id:
            body["reference_id"] = reference_id
        if self.location_id:
            body["location_id"] = self.location_id

        try:
            response = self._http.post(self.PAYMENTS_PATH, json=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise GatewayUnavailable(f"Square request failed: {exc}") from exc

        if response.status_code >= 500:
            raise GatewayUnavailable(f"Square returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code >= 400:
            return ChargeOutcome.rejected(_error_message(data, response.status_code))

        payment = data.get("payment")
        if not payment:
            raise GatewayUnavailable("Square response did not include a payment")

        money = payment.get("amount_money") or {}
        return ChargeOutcome.charged(GatewayPayment(
            id=payment["id"],
            amount=money.get("amount", amount),
            currency=money.get("currency", currency),
            status=payment.get("status", ""),
            raw=payment,
        ))

    def close(self):
        self._http.close()


def _error_message(data: dict, status_code: int) -> str:
    """First error's detail (or code) from a Square error body."""
    errors = data.get("errors") or []
    if errors:
        first = errors[0]
        return first.get("detail") or first.get("code") or "Payment was declined"
    return f"Square returned HTTP {status_code}"


@lru_cache()
def get_gateway() -> SquareClient:
    """FastAPI dependency: process-wide Square client built from settings."""
    return SquareClient.from_settings(get_settings())


def close_gateway():
    """Close the cached Square client, if one was ever built."""
    if get_gateway.cache_info().currsize:
        get_gateway().close()
        get_gateway.cache_clear()
