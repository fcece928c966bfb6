# tikerama/api/routers/events.py
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from tikerama.api.deps import get_api_client, require_admin
from tikerama.domain.schemas import Event, EventPayload, EventStatus
from tikerama.services.api_client import ApiClient
from tikerama.services.event_service import EventService, filter_events

router = APIRouter(prefix="/events", tags=["events"])


def get_service(api: ApiClient = Depends(get_api_client)):
    return EventService(api)


def event_form(
    title: str | None = Form(None),
    description: str | None = Form(None),
    location: str | None = Form(None),
    start_date: str | None = Form(None),
    end_date: str | None = Form(None),
    capacity: int | None = Form(None, ge=0),
    ticket_price: Decimal | None = Form(None, ge=0),
    status: EventStatus | None = Form(None),
) -> EventPayload:
    """Organizer event form, posted as multipart so a poster can ride along."""
    return EventPayload(
        title=title,
        description=description,
        location=location,
        start_date=start_date,
        end_date=end_date,
        capacity=capacity,
        ticket_price=ticket_price,
        status=status,
    )


def as_upload(image: UploadFile | None):
    # (filename, fileobj, content_type) as requests expects it
    if image is None or not image.filename:
        return None
    return (image.filename, image.file, image.content_type)


@router.get("/", response_model=List[Event])
def list_events(
    search: str = Query(""),
    location: str = Query(""),
    category: str = Query(""),
    upcoming: bool = Query(False),
    svc: EventService = Depends(get_service),
):
    events = svc.list_events({"category": category})
    return filter_events(events, search=search, location=location, upcoming=upcoming)


@router.get("/featured", response_model=List[Event])
def list_featured(svc: EventService = Depends(get_service)):
    return svc.list_featured()


@router.get("/mine", response_model=List[Event], dependencies=[Depends(require_admin)])
def my_events(svc: EventService = Depends(get_service)):
    return svc.get_my_events()


@router.get("/{event_id}", response_model=Event)
def get_event(event_id: str, svc: EventService = Depends(get_service)):
    return svc.get_event(event_id)


@router.post("/", response_model=Event, status_code=201, dependencies=[Depends(require_admin)])
def create_event(
    payload: EventPayload = Depends(event_form),
    image: UploadFile | None = File(None),
    svc: EventService = Depends(get_service),
):
    if not payload.title:
        raise HTTPException(status_code=400, detail="Le titre est obligatoire")
    return svc.create_event(payload, image=as_upload(image))


@router.patch("/{event_id}", response_model=Event, dependencies=[Depends(require_admin)])
def update_event(
    event_id: str,
    payload: EventPayload = Depends(event_form),
    image: UploadFile | None = File(None),
    svc: EventService = Depends(get_service),
):
    return svc.update_event(event_id, payload, image=as_upload(image))


@router.post("/{event_id}/publish", response_model=Event, dependencies=[Depends(require_admin)])
def publish(event_id: str, svc: EventService = Depends(get_service)):
    return svc.publish(event_id)


@router.post("/{event_id}/unpublish", response_model=Event, dependencies=[Depends(require_admin)])
def unpublish(event_id: str, svc: EventService = Depends(get_service)):
    return svc.unpublish(event_id)


@router.delete("/{event_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_event(event_id: str, svc: EventService = Depends(get_service)):
    svc.delete_event(event_id)
