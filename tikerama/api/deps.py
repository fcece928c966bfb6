# tikerama/api/deps.py
from fastapi import Depends, Header, HTTPException

from tikerama.services.api_client import ApiClient
from tikerama.services.auth_store import AuthStore
from tikerama.services.cart_store import CartStore
from tikerama.services.payment_gateway import make_gateway
from tikerama.services.payment_store import PaymentStore, get_payment_store
from tikerama.services.storage_service import local_storage, session_storage
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

ADMIN_ROLES = ("admin", "organizer")


def get_session_id(x_session_id: str = Header(..., min_length=8, max_length=128)) -> str:
    return x_session_id


def get_api_client(session_id: str = Depends(get_session_id)) -> ApiClient:
    return ApiClient(local_storage(session_id))


def get_cart_store(session_id: str = Depends(get_session_id)) -> CartStore:
    return CartStore(session_storage(session_id))


def get_auth_store(
    session_id: str = Depends(get_session_id),
    api: ApiClient = Depends(get_api_client),
) -> AuthStore:
    return AuthStore(api, local_storage(session_id))


def get_payment(
    session_id: str = Depends(get_session_id),
    api: ApiClient = Depends(get_api_client),
) -> PaymentStore:
    return get_payment_store(session_id, lambda: make_gateway(api))


def require_user(auth: AuthStore = Depends(get_auth_store)) -> AuthStore:
    auth.check_auth()
    if not auth.is_authenticated:
        raise HTTPException(status_code=401, detail="Authentification requise")
    return auth


def require_admin(auth: AuthStore = Depends(require_user)) -> AuthStore:
    if not auth.has_role(ADMIN_ROLES):
        raise HTTPException(
            status_code=403,
            detail=f"Vous n'avez pas les droits d'accès à cette page. (Rôle: {auth.user.role})",
        )
    return auth


def get_editable_cart(
    cart: CartStore = Depends(get_cart_store),
    payment: PaymentStore = Depends(get_payment),
) -> CartStore:
    """The cart, unless a payment for it is in flight or already settled."""
    if payment.holds_cart():
        raise HTTPException(
            status_code=409,
            detail="Le panier ne peut plus être modifié pendant le paiement",
        )
    return cart


def get_settled_payment(
    cart: CartStore = Depends(get_cart_store),
    payment: PaymentStore = Depends(get_payment),
) -> PaymentStore:
    """The session's payment once it succeeded for exactly the current cart."""
    if payment.status != "success" or payment.details is None:
        raise HTTPException(status_code=409, detail="Le paiement n'est pas encore confirmé")

    paid = payment.details
    if cart.total != paid.amount or cart.currency != paid.currency:
        payment.set_error("Le panier ne correspond plus au montant payé.")
        logger.warning(f"Payment {payment.reference} of {paid.amount} does not match cart total {cart.total}")
        raise HTTPException(status_code=409, detail=payment.error)

    return payment
