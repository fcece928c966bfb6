# tikerama/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from tikerama.api.deps import get_api_client, get_cart_store, get_settled_payment, require_user
from tikerama.domain.schemas import Order, Ticket
from tikerama.services.api_client import ApiClient
from tikerama.services.cart_store import CartStore
from tikerama.services.order_service import OrderService
from tikerama.services.payment_store import PaymentStore

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(require_user)])


def get_service(api: ApiClient = Depends(get_api_client)):
    return OrderService(api)


@router.post("/", response_model=Order, status_code=201)
def create_order(
    svc: OrderService = Depends(get_service),
    cart: CartStore = Depends(get_cart_store),
    payment: PaymentStore = Depends(get_settled_payment),
):
    """
    Records the cart as an order at the backend.
    Requires the session's payment to be successful for this very cart.
    """
    try:
        return svc.create_order(cart.snapshot(), payment.details)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[Order])
def list_orders(svc: OrderService = Depends(get_service)):
    return svc.list_orders()


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: str, svc: OrderService = Depends(get_service)):
    return svc.get_order(order_id)


@router.get("/{order_id}/tickets", response_model=List[Ticket])
def get_order_tickets(order_id: str, svc: OrderService = Depends(get_service)):
    return svc.get_order_tickets(order_id)
