"""Tests for the Square Payments API client."""
import json

import httpx
import pytest
from pydantic import ValidationError

from payments_api.config import Settings
from payments_api.exceptions import GatewayUnavailable
from payments_api.services.square_gateway import ChargeOutcomeKind, SquareClient, close_gateway, get_gateway

SANDBOX = "https://connect.squareupsandbox.com"


def make_client(handler, location_id="LOC-1"):
    http = httpx.Client(base_url=SANDBOX, transport=httpx.MockTransport(handler))
    return SquareClient(
        access_token="sq-token",
        base_url=SANDBOX,
        api_version="2024-10-17",
        location_id=location_id,
        http_client=http,
    )


def payment_body(status="COMPLETED"):
    return {
        "payment": {
            "id": "R2B3Z8WMVt3EAmzYWLZvz7Y69EbZY",
            "amount_money": {"amount": 2500, "currency": "GBP"},
            "status": status,
            "source_type": "CARD",
            "reference_id": "tournament_t-42",
        }
    }


class TestCreatePayment:
    def test_sends_payment_request(self):
        seen = {}

        def handler(request):
            seen["request"] = request
            return httpx.Response(200, json=payment_body())

        client = make_client(handler)
        client.create_payment(
            source_id="cnon:card-nonce-ok",
            amount=2500,
            currency="GBP",
            idempotency_key="idem-key-1",
            note="Spring Open entry fee",
            reference_id="tournament_t-42",
        )

        request = seen["request"]
        assert request.method == "POST"
        assert str(request.url) == f"{SANDBOX}/v2/payments"
        assert request.headers["Authorization"] == "Bearer sq-token"
        assert request.headers["Square-Version"] == "2024-10-17"
        assert json.loads(request.content) == {
            "source_id": "cnon:card-nonce-ok",
            "idempotency_key": "idem-key-1",
            "amount_money": {"amount": 2500, "currency": "GBP"},
            "note": "Spring Open entry fee",
            "reference_id": "tournament_t-42",
            "location_id": "LOC-1",
        }

    def test_optional_fields_are_omitted(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=payment_body())

        make_client(handler, location_id="").create_payment(
            source_id="cnon:card-nonce-ok", amount=2500, currency="GBP", idempotency_key="idem-key-1",
        )

        assert set(seen["body"]) == {"source_id", "idempotency_key", "amount_money"}

    def test_success_is_charged_outcome(self):
        client = make_client(lambda request: httpx.Response(200, json=payment_body("APPROVED")))

        outcome = client.create_payment(
            source_id="cnon:card-nonce-ok", amount=2500, currency="GBP", idempotency_key="idem-key-1",
        )

        assert outcome.kind is ChargeOutcomeKind.CHARGED
        assert outcome.error is None
        assert outcome.payment.id == "R2B3Z8WMVt3EAmzYWLZvz7Y69EbZY"
        assert outcome.payment.amount == 2500
        assert outcome.payment.currency == "GBP"
        assert outcome.payment.status == "APPROVED"
        assert outcome.payment.raw["source_type"] == "CARD"

    def test_decline_is_rejected_outcome(self):
        errors = {"errors": [{
            "category": "PAYMENT_METHOD_ERROR",
            "code": "CARD_DECLINED",
            "detail": "Authorization error: 'CARD_DECLINED'",
        }]}
        client = make_client(lambda request: httpx.Response(402, json=errors))

        outcome = client.create_payment(
            source_id="cnon:card-nonce-declined", amount=2500, currency="GBP", idempotency_key="idem-key-1",
        )

        assert outcome.kind is ChargeOutcomeKind.REJECTED
        assert outcome.payment is None
        assert outcome.error == "Authorization error: 'CARD_DECLINED'"

    def test_rejection_without_detail_uses_code(self):
        errors = {"errors": [{"category": "INVALID_REQUEST_ERROR", "code": "INVALID_CARD_DATA"}]}
        client = make_client(lambda request: httpx.Response(400, json=errors))

        outcome = client.create_payment(
            source_id="bad", amount=2500, currency="GBP", idempotency_key="idem-key-1",
        )

        assert outcome.error == "INVALID_CARD_DATA"

    def test_rejection_without_body(self):
        client = make_client(lambda request: httpx.Response(401, text="Unauthorized"))

        outcome = client.create_payment(
            source_id="cnon:card-nonce-ok", amount=2500, currency="GBP", idempotency_key="idem-key-1",
        )

        assert outcome.kind is ChargeOutcomeKind.REJECTED
        assert outcome.error == "Square returned HTTP 401"

    def test_server_error_raises(self):
        client = make_client(lambda request: httpx.Response(503, json={"errors": []}))

        with pytest.raises(GatewayUnavailable):
            client.create_payment(
                source_id="cnon:card-nonce-ok", amount=2500, currency="GBP", idempotency_key="idem-key-1",
            )

    def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(GatewayUnavailable):
            client.create_payment(
                source_id="cnon:card-nonce-ok", amount=2500, currency="GBP", idempotency_key="idem-key-1",
            )


class TestSettings:
    def test_production_host(self):
        client = SquareClient.from_settings(Settings(SQUARE_ACCESS_TOKEN="tok", SQUARE_ENVIRONMENT="production"))

        assert client.base_url == "https://connect.squareup.com"
        client.close()

    def test_sandbox_host(self):
        client = SquareClient.from_settings(Settings(SQUARE_ACCESS_TOKEN="tok", SQUARE_ENVIRONMENT="sandbox"))

        assert client.base_url == SANDBOX
        client.close()

    def test_unknown_environment_is_refused(self):
        with pytest.raises(ValidationError):
            Settings(SQUARE_ENVIRONMENT="prod")

    def test_divisor_beyond_stored_scale_is_refused(self):
        with pytest.raises(ValidationError):
            Settings(CURRENCY_MINOR_UNITS={"GBP": 100, "XXX": 100000})

    def test_divisor_must_be_power_of_ten(self):
        with pytest.raises(ValidationError):
            Settings(CURRENCY_MINOR_UNITS={"GBP": 50})

    def test_three_decimal_currency_is_accepted(self):
        settings = Settings(CURRENCY_MINOR_UNITS={"gbp": 100, "KWD": 1000})

        assert settings.CURRENCY_MINOR_UNITS == {"GBP": 100, "KWD": 1000}


def test_close_gateway_releases_cached_client():
    get_gateway.cache_clear()
    client = get_gateway()

    close_gateway()

    assert client.is_closed
    assert get_gateway.cache_info().currsize == 0


def test_close_gateway_without_client_is_a_no_op():
    get_gateway.cache_clear()

    close_gateway()

    assert get_gateway.cache_info().currsize == 0
