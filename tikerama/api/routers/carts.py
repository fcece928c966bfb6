# tikerama/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException

from tikerama.api.deps import get_api_client, get_cart_store, get_editable_cart
from tikerama.domain.schemas import AddItemIn, CartOut, UpdateQuantityIn
from tikerama.services.api_client import ApiClient
from tikerama.services.cart_store import CartStore
from tikerama.services.event_service import EventService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("/", response_model=CartOut)
def get_cart(cart: CartStore = Depends(get_cart_store)):
    return cart.snapshot()


@router.post("/items", response_model=CartOut)
def add_item(
    payload: AddItemIn,
    cart: CartStore = Depends(get_editable_cart),
    api: ApiClient = Depends(get_api_client),
):
    # price and per-order limit come from the catalog, never from the caller
    try:
        event, ticket_type = EventService(api).get_ticket_type(payload.event_id, payload.ticket_type_id)
        cart.add_item(event, ticket_type, payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return cart.snapshot()


@router.patch("/items/{ticket_type_id}", response_model=CartOut)
def update_quantity(
    ticket_type_id: str,
    payload: UpdateQuantityIn,
    cart: CartStore = Depends(get_editable_cart),
):
    if not cart.get_item_by_ticket_type(ticket_type_id):
        raise HTTPException(status_code=404, detail="Article introuvable dans le panier")
    cart.update_quantity(ticket_type_id, payload.quantity)
    return cart.snapshot()


@router.delete("/items/{ticket_type_id}", response_model=CartOut)
def remove_item(ticket_type_id: str, cart: CartStore = Depends(get_editable_cart)):
    cart.remove_item(ticket_type_id)
    return cart.snapshot()


@router.delete("/", response_model=CartOut)
def clear_cart(cart: CartStore = Depends(get_editable_cart)):
    cart.clear_cart()
    return cart.snapshot()
