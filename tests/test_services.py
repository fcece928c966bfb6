from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from tikerama.domain.schemas import CartOut, Event, EventPayload, PaymentDetails, Sale, Ticket
from tikerama.services.admin_service import summarize_sales
from tikerama.services.api_client import ApiClient, ApiError
from tikerama.services.event_service import EventService, filter_events
from tikerama.services.order_service import OrderService, split_tickets
from tikerama.services.payment_gateway import ApiPaymentGateway, PaymentGatewayError, make_gateway, MockMobileMoneyGateway

EVENT = {
    "id": "evt-001",
    "title": "Abidjan Comedy Club",
    "description": "Stand-up",
    "location": "Treichville",
    "date": "2026-02-20",
    "ticketTypes": [
        {"id": "tkt-1", "name": "Standard", "price": 7500, "currency": "XOF", "available": 300, "maxPerOrder": 6},
    ],
}


@pytest.fixture
def api():
    return MagicMock(spec=ApiClient)


def test_list_events_drops_empty_filters(api):
    api.get.return_value = [EVENT]

    events = EventService(api).list_events({"category": "", "city": "Abidjan"})

    api.get.assert_called_once_with("/events/", params={"city": "Abidjan"})
    assert events[0].ticket_types[0].max_per_order == 6


def test_list_events_accepts_paginated_answer(api):
    api.get.return_value = {"count": 1, "results": [EVENT]}

    assert [e.id for e in EventService(api).list_events()] == ["evt-001"]


def test_get_ticket_type(api):
    api.get.return_value = EVENT

    event, ticket_type = EventService(api).get_ticket_type("evt-001", "tkt-1")

    api.get.assert_called_once_with("/events/evt-001/")
    assert event.title == "Abidjan Comedy Club"
    assert ticket_type.price == Decimal("7500")


def test_get_unknown_ticket_type(api):
    api.get.return_value = EVENT

    with pytest.raises(ValueError):
        EventService(api).get_ticket_type("evt-001", "nope")


def test_publish_and_unpublish_patch_status(api):
    api.patch.return_value = EVENT
    svc = EventService(api)

    svc.publish(3)
    svc.unpublish(3)

    assert api.patch.call_args_list[0].args == ("/events/3/", {"status": "published"})
    assert api.patch.call_args_list[1].args == ("/events/3/", {"status": "draft"})


def test_create_event_with_image_posts_multipart(api):
    api.post.return_value = EVENT
    payload = EventPayload(title="Show", capacity=100, ticket_price=Decimal("5000"))

    EventService(api).create_event(payload, image=("poster.png", b"...", "image/png"))

    kwargs = api.post.call_args.kwargs
    assert kwargs["data"] == {"title": "Show", "capacity": "100", "ticket_price": "5000"}
    assert kwargs["files"] == {"image": ("poster.png", b"...", "image/png")}


def test_filter_events():
    events = [
        Event(id=1, title="Jazz au Plateau", description="Soirée", location="Plateau"),
        Event(id=2, title="Match ASEC", description="Football au stade", location="Treichville"),
    ]

    assert [e.id for e in filter_events(events, search="football")] == [2]
    assert [e.id for e in filter_events(events, location="plateau")] == [1]
    assert [e.id for e in filter_events(events, search="  ")] == [1, 2]
    assert filter_events(events, search="jazz", location="treichville") == []


def test_create_order_requires_items(api):
    cart = CartOut(items=[], total=Decimal("0"), currency="XOF")
    details = PaymentDetails(provider="wave", phone_number="0100000000", amount=0, currency="XOF")

    with pytest.raises(ValueError):
        OrderService(api).create_order(cart, details)
    api.post.assert_not_called()


def _ticket(ticket_id, status):
    return Ticket(
        id=ticket_id, event_id="evt-1", event_title="Show", event_date="2026-04-15",
        ticket_type="VIP", qr_code=f"TKR-{ticket_id}", status=status, price=Decimal("15000"),
    )


def test_split_tickets():
    valid, past = split_tickets([_ticket("a", "valid"), _ticket("b", "used"), _ticket("c", "expired")])

    assert [t.id for t in valid] == ["a"]
    assert [t.id for t in past] == ["b", "c"]


def _sale(sale_id, buyer, status, amount):
    return Sale(id=sale_id, order_id=f"TK-2024-00{sale_id}", event="Concert Magic System",
                buyer=buyer, status=status, amount=Decimal(amount))


def test_summarize_sales():
    sales = [
        _sale("1", "Kouassi Jean", "success", 50000),
        _sale("2", "Diallo Fatou", "success", 60000),
        _sale("3", "Koné Ibrahim", "pending", 10000),
        _sale("4", "Ouattara Seydou", "failed", 50000),
    ]

    summary = summarize_sales(sales)
    assert summary.total_revenue == Decimal("110000")
    assert summary.total_orders == 4
    assert summary.successful_orders == 2
    assert summary.pending_orders == 1

    by_buyer = summarize_sales(sales, search="FATOU")
    assert [s.id for s in by_buyer.sales] == ["2"]

    pending = summarize_sales(sales, status="pending")
    assert pending.total_revenue == Decimal("0")
    assert pending.total_orders == 1


def test_api_gateway_maps_backend_statuses(api):
    api.post.return_value = {"transaction_id": "TXN-9"}
    api.get.return_value = {"status": "COMPLETED"}
    gateway = ApiPaymentGateway(api)
    details = PaymentDetails(provider="wave", phone_number="0100000000", amount=5000, currency="XOF", reference="TKR-1")

    assert gateway.initiate(details) == "TXN-9"
    assert gateway.check_status("TXN-9") == "success"
    api.get.assert_called_once_with("/payments/TXN-9/status/")


def test_api_gateway_wraps_backend_errors(api):
    api.get.side_effect = ApiError("Transaction inconnue", 404)

    with pytest.raises(PaymentGatewayError):
        ApiPaymentGateway(api).check_status("TXN-0")


def test_api_gateway_rejects_unknown_status(api):
    api.get.return_value = {"status": "weird"}

    with pytest.raises(PaymentGatewayError):
        ApiPaymentGateway(api).check_status("TXN-0")


def test_make_gateway(api):
    assert isinstance(make_gateway(api, "mock"), MockMobileMoneyGateway)
    assert isinstance(make_gateway(api, "api"), ApiPaymentGateway)
    with pytest.raises(ValueError):
        make_gateway(api, "paypal")
