# tikerama/services/cart_store.py
from decimal import Decimal
from typing import List

from pydantic import ValidationError

from tikerama.domain.schemas import CartItem, CartOut, Event, TicketType
from tikerama.services.storage_service import StorageService
from tikerama.utils.settings import CURRENCY_CODE
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

CART_STORAGE_KEY = "tikerama-cart"


def calculate_total(items: List[CartItem]) -> Decimal:
    return sum((i.line_total for i in items), Decimal("0"))


class CartStore:
    """
    Cart of one storefront session.
    Every mutation recomputes the total and writes {items, total, currency}
    to session storage.
    No reconciliation with the backend's stock counts.
    """

    def __init__(self, storage: StorageService, currency: str = CURRENCY_CODE):
        self.storage = storage
        self.items: List[CartItem] = []
        self.total = Decimal("0")
        self.currency = currency
        self._hydrate()

    def _hydrate(self):
        saved = self.storage.get_json(CART_STORAGE_KEY)
        if not saved:
            return

        try:
            self.items = [CartItem.model_validate(i) for i in saved.get("items", [])]
        except ValidationError as e:
            logger.warning(f"Dropping unreadable cart of session {self.storage.session_id}: {e}")
            self.items = []

        self.currency = saved.get("currency", self.currency)
        self.total = calculate_total(self.items)

    def _commit(self, items: List[CartItem]):
        self.items = items
        self.total = calculate_total(items)
        self.storage.set_json(
            CART_STORAGE_KEY,
            {
                "items": [i.model_dump(mode="json", by_alias=True) for i in items],
                "total": str(self.total),
                "currency": self.currency,
            },
        )

    #commands
    def add_item(self, event: Event, ticket_type: TicketType, quantity: int) -> None:
        if quantity < 1:
            raise ValueError("La quantité doit être supérieure à 0")

        existing = self.get_item_by_ticket_type(ticket_type.id)

        if existing:
            merged = min(existing.quantity + quantity, ticket_type.max_per_order)
            logger.info(
                f"Ticket type {ticket_type.id} already in cart, quantity "
                f"{existing.quantity} -> {merged}"
            )
            items = [
                i.model_copy(update={"quantity": merged, "max_per_order": ticket_type.max_per_order})
                if i.ticket_type_id == ticket_type.id
                else i
                for i in self.items
            ]
        else:
            logger.info(f"Adding ticket type {ticket_type.id} of event {event.id} to cart")
            items = self.items + [
                CartItem(
                    ticket_type_id=ticket_type.id,
                    ticket_type_name=ticket_type.name,
                    event_id=str(event.id),
                    event_title=event.title,
                    event_date=event.display_date,
                    quantity=min(quantity, ticket_type.max_per_order),
                    unit_price=ticket_type.price,
                    currency=ticket_type.currency,
                    max_per_order=ticket_type.max_per_order,
                )
            ]

        self._commit(items)

    def remove_item(self, ticket_type_id: str) -> None:
        self._commit([i for i in self.items if i.ticket_type_id != ticket_type_id])

    def update_quantity(self, ticket_type_id: str, quantity: int) -> None:
        if quantity < 1:
            self.remove_item(ticket_type_id)
            return

        items = []
        for item in self.items:
            if item.ticket_type_id == ticket_type_id:
                limit = item.max_per_order or quantity
                item = item.model_copy(update={"quantity": min(quantity, limit)})
            items.append(item)

        self._commit(items)

    def clear_cart(self) -> None:
        self._commit([])

    #queries
    def get_item_count(self) -> int:
        return sum(i.quantity for i in self.items)

    def get_item_by_ticket_type(self, ticket_type_id: str) -> CartItem | None:
        return next((i for i in self.items if i.ticket_type_id == ticket_type_id), None)

    def snapshot(self) -> CartOut:
        return CartOut(
            items=list(self.items),
            total=self.total,
            currency=self.currency,
            item_count=self.get_item_count(),
        )
