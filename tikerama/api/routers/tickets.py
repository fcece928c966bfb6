# tikerama/api/routers/tickets.py
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tikerama.api.deps import get_api_client, require_admin, require_user
from tikerama.domain.schemas import Ticket
from tikerama.services.api_client import ApiClient
from tikerama.services.order_service import TicketService, split_tickets

router = APIRouter(prefix="/tickets", tags=["tickets"], dependencies=[Depends(require_user)])


class MyTicketsOut(BaseModel):
    valid: List[Ticket]
    past: List[Ticket]


def get_service(api: ApiClient = Depends(get_api_client)):
    return TicketService(api)


@router.get("/", response_model=MyTicketsOut)
def my_tickets(svc: TicketService = Depends(get_service)):
    valid, past = split_tickets(svc.list_tickets())
    return {"valid": valid, "past": past}


@router.get("/{ticket_id}", response_model=Ticket)
def get_ticket(ticket_id: str, svc: TicketService = Depends(get_service)):
    return svc.get_ticket(ticket_id)


@router.post("/{ticket_id}/validate", response_model=Ticket, dependencies=[Depends(require_admin)])
def validate_ticket(ticket_id: str, svc: TicketService = Depends(get_service)):
    return svc.validate_ticket(ticket_id)
