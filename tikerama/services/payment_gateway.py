# tikerama/services/payment_gateway.py
import random
import time

import requests

from tikerama.domain.schemas import PaymentDetails
from tikerama.services import endpoints
from tikerama.services.api_client import ApiClient, ApiError
from tikerama.utils.settings import PAYMENT_GATEWAY, PAYMENT_MOCK_DELAY_SECONDS
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGatewayError(Exception):
    pass


class MockMobileMoneyGateway:
    """
    Stand-in for the mobile-money providers: no real settlement.
    Status checks roll a die: > 0.5 success, > 0.1 still pending, otherwise refused.
    """

    def __init__(self, rng: random.Random | None = None, delay: float = PAYMENT_MOCK_DELAY_SECONDS, clock=time.time):
        self.rng = rng or random.Random()
        self.delay = delay
        self.clock = clock

    def _wait(self, factor: float = 1.0):
        if self.delay > 0:
            time.sleep(self.delay * factor)

    def initiate(self, details: PaymentDetails) -> str:
        self._wait()
        transaction_id = f"TXN-{int(self.clock() * 1000)}"
        logger.info(f"[MOCK] {details.provider} payment {details.reference} -> {transaction_id}")
        return transaction_id

    def check_status(self, transaction_id: str) -> str:
        self._wait(0.75)
        roll = self.rng.random()
        if roll > 0.5:
            return "success"
        if roll > 0.1:
            return "pending"
        return "failed"

    def confirm(self, transaction_id: str) -> str:
        self._wait()
        return "success"


# backend answers -> storefront payment statuses
_STATUS_MAP = {
    "success": "success",
    "successful": "success",
    "completed": "success",
    "pending": "pending",
    "processing": "processing",
    "failed": "failed",
    "cancelled": "failed",
    "refused": "failed",
}


class ApiPaymentGateway:
    """Drives the backend's /payments endpoints."""

    def __init__(self, api: ApiClient):
        self.api = api

    def _call(self, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (ApiError, requests.RequestException) as e:
            raise PaymentGatewayError(str(e)) from e

    def initiate(self, details: PaymentDetails) -> str:
        data = self._call(
            self.api.post,
            endpoints.PAYMENTS_INITIATE,
            {
                "provider": details.provider,
                "phone_number": details.phone_number,
                "amount": str(details.amount),
                "currency": details.currency,
                "reference": details.reference,
            },
        )
        transaction_id = (data or {}).get("transaction_id") or (data or {}).get("transactionId")
        if not transaction_id:
            raise PaymentGatewayError("Réponse de paiement sans identifiant de transaction")
        return str(transaction_id)

    def _status_of(self, data) -> str:
        raw = str((data or {}).get("status", "")).lower()
        if raw not in _STATUS_MAP:
            raise PaymentGatewayError(f"Statut de paiement inconnu: {raw!r}")
        return _STATUS_MAP[raw]

    def check_status(self, transaction_id: str) -> str:
        return self._status_of(self._call(self.api.get, endpoints.payment_status(transaction_id)))

    def confirm(self, transaction_id: str) -> str:
        return self._status_of(self._call(self.api.post, endpoints.payment_confirm(transaction_id)))


def make_gateway(api: ApiClient, kind: str | None = None):
    kind = kind or PAYMENT_GATEWAY
    if kind == "api":
        return ApiPaymentGateway(api)
    if kind == "mock":
        return MockMobileMoneyGateway()
    raise ValueError(f"Unknown payment gateway {kind!r}")
