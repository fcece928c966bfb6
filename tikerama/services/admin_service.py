# tikerama/services/admin_service.py
from decimal import Decimal
from typing import List

from tikerama.domain.schemas import DashboardStats, Event, Sale, SalesSummary
from tikerama.services import endpoints
from tikerama.services.api_client import ApiClient
from tikerama.services.event_service import as_list


def summarize_sales(sales: List[Sale], search: str = "", status: str = "all") -> SalesSummary:
    """Filters on buyer / order id / event name and status, then totals the successful sales."""
    query = search.lower()
    filtered = [
        s for s in sales
        if (query in s.buyer.lower() or query in s.order_id.lower() or query in s.event.lower())
        and (status == "all" or s.status == status)
    ]
    successful = [s for s in filtered if s.status == "success"]

    return SalesSummary(
        sales=filtered,
        total_revenue=sum((s.amount for s in successful), Decimal("0")),
        total_orders=len(filtered),
        successful_orders=len(successful),
        pending_orders=sum(1 for s in filtered if s.status == "pending"),
    )


class AdminService:
    def __init__(self, api: ApiClient):
        self.api = api

    def get_dashboard(self) -> DashboardStats:
        return DashboardStats.model_validate(self.api.get(endpoints.ADMIN_DASHBOARD))

    def list_sales(self) -> List[Sale]:
        return [Sale.model_validate(s) for s in as_list(self.api.get(endpoints.ADMIN_SALES))]

    def list_events(self) -> List[Event]:
        return [Event.model_validate(e) for e in as_list(self.api.get(endpoints.ADMIN_EVENTS))]
