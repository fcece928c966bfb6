# tikerama/api/routers/admin.py
from typing import List

from fastapi import APIRouter, Depends, Query

from tikerama.api.deps import get_api_client, require_admin
from tikerama.domain.schemas import DashboardStats, Event, SalesSummary
from tikerama.services.admin_service import AdminService, summarize_sales
from tikerama.services.api_client import ApiClient

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def get_service(api: ApiClient = Depends(get_api_client)):
    return AdminService(api)


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(svc: AdminService = Depends(get_service)):
    return svc.get_dashboard()


@router.get("/sales", response_model=SalesSummary)
def sales(
    search: str = Query(""),
    status: str = Query("all", pattern="^(all|success|pending|failed)$"),
    svc: AdminService = Depends(get_service),
):
    return summarize_sales(svc.list_sales(), search=search, status=status)


@router.get("/events", response_model=List[Event])
def events(svc: AdminService = Depends(get_service)):
    return svc.list_events()
