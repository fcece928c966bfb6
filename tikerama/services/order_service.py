# tikerama/services/order_service.py
from typing import List

from tikerama.domain.schemas import CartOut, Order, PaymentDetails, Ticket
from tikerama.services import endpoints
from tikerama.services.api_client import ApiClient
from tikerama.services.event_service import as_list
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """Orders and tickets as held by the backend."""

    def __init__(self, api: ApiClient):
        self.api = api

    def create_order(self, cart: CartOut, payment: PaymentDetails) -> Order:
        if not cart.items:
            raise ValueError("Le panier est vide")

        payload = {
            "items": [
                {"ticket_type_id": i.ticket_type_id, "event_id": i.event_id, "quantity": i.quantity}
                for i in cart.items
            ],
            "total_amount": str(payment.amount),
            "currency": payment.currency,
            "payment_provider": payment.provider,
            "payment_reference": payment.reference,
            "transaction_id": payment.transaction_id,
        }
        order = Order.model_validate(self.api.post(endpoints.ORDERS, payload))
        logger.info(f"Order {order.id} created for payment {payment.reference}")
        return order

    def list_orders(self) -> List[Order]:
        return [Order.model_validate(o) for o in as_list(self.api.get(endpoints.ORDERS))]

    def get_order(self, order_id) -> Order:
        return Order.model_validate(self.api.get(endpoints.order_detail(order_id)))

    def get_order_tickets(self, order_id) -> List[Ticket]:
        return [Ticket.model_validate(t) for t in as_list(self.api.get(endpoints.order_tickets(order_id)))]


def split_tickets(tickets: List[Ticket]) -> tuple[List[Ticket], List[Ticket]]:
    """(valid, past): anything not valid any more counts as past."""
    valid = [t for t in tickets if t.status == "valid"]
    past = [t for t in tickets if t.status != "valid"]
    return valid, past


class TicketService:
    def __init__(self, api: ApiClient):
        self.api = api

    def list_tickets(self) -> List[Ticket]:
        return [Ticket.model_validate(t) for t in as_list(self.api.get(endpoints.TICKETS))]

    def get_ticket(self, ticket_id) -> Ticket:
        return Ticket.model_validate(self.api.get(endpoints.ticket_detail(ticket_id)))

    def validate_ticket(self, ticket_id) -> Ticket:
        ticket = Ticket.model_validate(self.api.post(endpoints.ticket_validate(ticket_id)))
        logger.info(f"Ticket {ticket_id} validated, now {ticket.status}")
        return ticket
