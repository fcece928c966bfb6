# tikerama/api/routers/payments.py
from fastapi import APIRouter, Depends, HTTPException

from tikerama.api.deps import get_cart_store, get_payment, get_session_id, get_settled_payment
from tikerama.domain.providers import MOMO_PROVIDERS, detect_provider, provider_name
from tikerama.domain.schemas import InitiatePaymentIn, PaymentOut
from tikerama.services.cart_store import CartStore
from tikerama.services.payment_store import PaymentStore, drop_payment_store
from tikerama.utils.format import format_currency, is_valid_phone_number
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/", response_model=PaymentOut)
def get_payment_state(payment: PaymentStore = Depends(get_payment)):
    return payment.snapshot()


@router.get("/providers")
def list_providers():
    return [
        {"id": p["id"], "name": p["name"], "prefixes": list(p["prefix"])}
        for p in MOMO_PROVIDERS.values()
    ]


@router.post("/initiate", response_model=PaymentOut)
def initiate(
    payload: InitiatePaymentIn,
    payment: PaymentStore = Depends(get_payment),
    cart: CartStore = Depends(get_cart_store),
):
    """
    Starts a mobile-money payment for the whole cart.
    Refused with 429 while the cooldown of the previous attempt runs.
    """
    if not cart.items:
        raise HTTPException(status_code=400, detail="Le panier est vide")

    if not is_valid_phone_number(payload.phone_number):
        raise HTTPException(status_code=400, detail="Numéro de téléphone invalide")

    # 8-digit legacy numbers carry no prefix, anything else must match the wallet
    detected = detect_provider(payload.phone_number)
    if detected is not None and detected != payload.provider:
        raise HTTPException(
            status_code=400,
            detail=f"Ce numéro n'est pas un numéro {provider_name(payload.provider)}",
        )

    if not payment.initiate_payment(payload.provider, payload.phone_number, cart.total, cart.currency):
        raise HTTPException(status_code=429, detail=payment.error)

    return payment.snapshot()


@router.post("/status", response_model=PaymentOut)
def check_status(payment: PaymentStore = Depends(get_payment)):
    payment.check_payment_status()
    return payment.snapshot()


@router.post("/confirm", response_model=PaymentOut)
def confirm(payment: PaymentStore = Depends(get_payment)):
    if not payment.transaction_id:
        raise HTTPException(status_code=409, detail="Aucun paiement en cours")
    payment.confirm_payment()
    return payment.snapshot()


@router.post("/cancel", response_model=PaymentOut)
def cancel(payment: PaymentStore = Depends(get_payment)):
    payment.cancel_payment()
    return payment.snapshot()


@router.post("/reset", response_model=PaymentOut)
def reset(
    session_id: str = Depends(get_session_id),
    payment: PaymentStore = Depends(get_payment),
):
    payment.reset_payment()
    drop_payment_store(session_id)
    return payment.snapshot()


@router.post("/complete")
def complete_checkout(
    session_id: str = Depends(get_session_id),
    payment: PaymentStore = Depends(get_settled_payment),
    cart: CartStore = Depends(get_cart_store),
):
    """Closes a successful checkout: empties the cart and frees the payment slot."""
    paid = payment.details
    receipt = {
        "reference": payment.reference,
        "transactionId": payment.transaction_id,
        "total": str(paid.amount),
        "currency": paid.currency,
        "totalLabel": format_currency(paid.amount),
    }

    cart.clear_cart()
    payment.reset_payment()
    drop_payment_store(session_id)
    logger.info(f"Checkout {receipt['reference']} completed")

    return receipt
