# tikerama/services/payment_store.py
import math
import random
import string
import threading
import time

from tikerama.domain.schemas import CART_LOCKING_STATUSES, PaymentDetails, PaymentOut, TERMINAL_PAYMENT_STATUSES
from tikerama.services.payment_gateway import PaymentGatewayError
from tikerama.utils.format import format_phone_number
from tikerama.utils.settings import CURRENCY_CODE, PAYMENT_COOLDOWN_SECONDS, SESSION_TTL_SECONDS
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_reference(clock=time.time, rng: random.Random | None = None) -> str:
    """Display/idempotency reference, TKR-<ms base36>-<6 chars>. Not a secret."""
    rng = rng or random.Random()
    timestamp = to_base36(int(clock() * 1000))
    token = "".join(rng.choice(_BASE36) for _ in range(6))
    return f"TKR-{timestamp}-{token}".upper()


class PaymentStore:
    """
    One in-flight mobile-money payment:

        idle -> initiating -> pending -> processing -> success | failed
        cancel / reset -> idle

    A new attempt is refused until PAYMENT_COOLDOWN_SECONDS have passed since
    the previous one, and for good once a payment succeeded.
    Lives in process memory only. Sync routes run in a threadpool, so the
    attempt guard and its bookkeeping happen under one lock.
    """

    def __init__(self, gateway, clock=time.time, cooldown: float = PAYMENT_COOLDOWN_SECONDS, rng: random.Random | None = None):
        self.gateway = gateway
        self.clock = clock
        self.cooldown = cooldown
        self.rng = rng or random.Random()

        self.status = "idle"
        self.details: PaymentDetails | None = None
        self.error: str | None = None
        self.transaction_id: str | None = None
        self.reference: str | None = None
        self.last_attempt_time: float | None = None
        self._lock = threading.Lock()

    def initiate_payment(self, provider: str, phone_number: str, amount, currency: str = CURRENCY_CODE) -> bool:
        """
        Returns False when the attempt is refused (already paid or cooldown
        running); the reason is left in self.error.
        """
        with self._lock:
            if self.status == "success":
                self.error = "Ce paiement a déjà été effectué."
                return False

            if not self.can_retry_payment():
                remaining = math.ceil(self.get_time_until_retry())
                self.error = f"Veuillez patienter {remaining}s avant de réessayer."
                logger.info(f"Payment attempt refused, cooldown {remaining}s left")
                return False

            reference = generate_reference(self.clock, self.rng)

            self.status = "initiating"
            self.error = None
            self.transaction_id = None
            self.reference = reference
            self.last_attempt_time = self.clock()
            self.details = PaymentDetails(
                provider=provider,
                phone_number=phone_number,
                amount=amount,
                currency=currency,
                reference=reference,
            )

        logger.info(
            f"Initiating {provider} payment {reference} of {amount} {currency} "
            f"from {format_phone_number(phone_number)}"
        )

        try:
            transaction_id = self.gateway.initiate(self.details)
        except PaymentGatewayError as e:
            logger.error(f"Payment {reference} initiation failed: {e}")
            self.status = "failed"
            self.error = "Échec de l'initiation du paiement. Veuillez réessayer."
            return True

        self.transaction_id = transaction_id
        self.details = self.details.model_copy(update={"transaction_id": transaction_id})
        self.status = "pending"
        logger.info(f"Payment {reference} pending as {transaction_id}")
        return True

    def check_payment_status(self) -> str:
        if not self.transaction_id or self.status in TERMINAL_PAYMENT_STATUSES:
            return self.status

        self.status = "processing"

        try:
            new_status = self.gateway.check_status(self.transaction_id)
        except PaymentGatewayError as e:
            logger.error(f"Status check of {self.transaction_id} failed: {e}")
            self.status = "failed"
            self.error = "Erreur de vérification du paiement."
            return self.status

        if new_status == "failed":
            self.error = "Le paiement a été refusé."

        self.status = new_status
        logger.info(f"Payment {self.transaction_id} is {new_status}")
        return new_status

    def confirm_payment(self) -> str:
        if not self.transaction_id or self.status in TERMINAL_PAYMENT_STATUSES:
            return self.status

        self.status = "processing"

        try:
            new_status = self.gateway.confirm(self.transaction_id)
        except PaymentGatewayError as e:
            logger.error(f"Confirmation of {self.transaction_id} failed: {e}")
            new_status = "failed"

        if new_status == "failed":
            self.error = "Échec de la confirmation du paiement."

        self.status = new_status
        return new_status

    def cancel_payment(self) -> None:
        # last_attempt_time survives, the cooldown keeps running
        self.status = "idle"
        self.error = None
        self.transaction_id = None
        self.reference = None
        self.details = None

    def reset_payment(self) -> None:
        self.cancel_payment()
        self.last_attempt_time = None

    def can_retry_payment(self) -> bool:
        if self.status == "success":
            return False
        if self.last_attempt_time is None:
            return True
        return self.clock() - self.last_attempt_time >= self.cooldown

    def get_time_until_retry(self) -> float:
        if self.last_attempt_time is None:
            return 0
        elapsed = self.clock() - self.last_attempt_time
        return max(0, self.cooldown - elapsed)

    def holds_cart(self) -> bool:
        """True while a payment for the current cart is in flight or settled."""
        return self.status in CART_LOCKING_STATUSES

    def set_error(self, error: str | None) -> None:
        self.error = error

    def snapshot(self) -> PaymentOut:
        return PaymentOut(
            status=self.status,
            details=self.details,
            error=self.error,
            transaction_id=self.transaction_id,
            reference=self.reference,
            last_attempt_time=self.last_attempt_time,
            can_retry=self.can_retry_payment(),
            time_until_retry=self.get_time_until_retry(),
        )


# session id -> (store, last access)
_stores: dict[str, tuple[PaymentStore, float]] = {}
_stores_lock = threading.Lock()


def get_payment_store(session_id: str, gateway_factory, clock=time.time, idle_ttl: float = SESSION_TTL_SECONDS) -> PaymentStore:
    """
    Process-local registry, one payment per storefront session.
    Stores untouched for idle_ttl seconds are evicted, like the session's cart.
    """
    now = clock()
    with _stores_lock:
        expired = [sid for sid, (_, seen) in _stores.items() if now - seen > idle_ttl]
        for sid in expired:
            del _stores[sid]
        if expired:
            logger.info(f"Evicted {len(expired)} idle payment store(s)")

        entry = _stores.get(session_id)
        store = entry[0] if entry else PaymentStore(gateway_factory())
        _stores[session_id] = (store, now)
    return store


def drop_payment_store(session_id: str) -> None:
    with _stores_lock:
        _stores.pop(session_id, None)
