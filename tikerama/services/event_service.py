# tikerama/services/event_service.py
from typing import List

from tikerama.domain.schemas import Event, EventPayload, TicketType
from tikerama.services import endpoints
from tikerama.services.api_client import ApiClient
from tikerama.utils.format import is_upcoming
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)


def as_list(data) -> list:
    # the backend answers either a bare list or a paginated {"results": [...]}
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return data["results"]
    return []


def _is_upcoming(event: Event) -> bool:
    try:
        return bool(event.display_date) and is_upcoming(event.display_date)
    except ValueError:
        return False


def filter_events(
    events: List[Event], search: str = "", location: str = "", upcoming: bool = False
) -> List[Event]:
    """Case-insensitive search on title/description, location substring, optionally future dates only."""
    filtered = events

    query = search.strip().lower()
    if query:
        filtered = [
            e for e in filtered
            if query in e.title.lower() or query in (e.description or "").lower()
        ]

    place = location.strip().lower()
    if place:
        filtered = [
            e for e in filtered
            if place in (e.location or e.city or "").lower()
        ]

    if upcoming:
        filtered = [e for e in filtered if _is_upcoming(e)]

    return filtered


class EventService:
    def __init__(self, api: ApiClient):
        self.api = api

    #queries
    def list_events(self, filters: dict | None = None) -> List[Event]:
        params = {k: str(v) for k, v in (filters or {}).items() if v}
        data = self.api.get(endpoints.EVENTS, params=params or None)
        return [Event.model_validate(e) for e in as_list(data)]

    def list_featured(self) -> List[Event]:
        return self.list_events({"featured": "true"})

    def get_my_events(self) -> List[Event]:
        return [Event.model_validate(e) for e in as_list(self.api.get(endpoints.EVENTS_MINE))]

    def get_event(self, event_id) -> Event:
        return Event.model_validate(self.api.get(endpoints.event_detail(event_id)))

    def get_ticket_type(self, event_id, ticket_type_id: str) -> tuple[Event, TicketType]:
        event = self.get_event(event_id)
        ticket_type = next((t for t in event.ticket_types if t.id == ticket_type_id), None)
        if ticket_type is None:
            raise ValueError("Type de billet introuvable pour cet événement")
        return event, ticket_type

    #commands
    def _form(self, payload: EventPayload) -> dict:
        return {
            k: str(v)
            for k, v in payload.model_dump(exclude_none=True).items()
            if k != "image"
        }

    def create_event(self, payload: EventPayload, image=None) -> Event:
        """image: optional (filename, fileobj, content_type) tuple sent as multipart."""
        if image is not None:
            data = self.api.post(endpoints.EVENTS, data=self._form(payload), files={"image": image})
        else:
            data = self.api.post(endpoints.EVENTS, payload.model_dump(mode="json", exclude_none=True))
        event = Event.model_validate(data)
        logger.info(f"Event {event.id} created")
        return event

    def update_event(self, event_id, payload: EventPayload, image=None) -> Event:
        if image is not None:
            data = self.api.patch(
                endpoints.event_detail(event_id), data=self._form(payload), files={"image": image}
            )
        else:
            data = self.api.patch(
                endpoints.event_detail(event_id), payload.model_dump(mode="json", exclude_none=True)
            )
        logger.info(f"Event {event_id} updated")
        return Event.model_validate(data)

    def publish(self, event_id) -> Event:
        return Event.model_validate(self.api.patch(endpoints.event_detail(event_id), {"status": "published"}))

    def unpublish(self, event_id) -> Event:
        return Event.model_validate(self.api.patch(endpoints.event_detail(event_id), {"status": "draft"}))

    def delete_event(self, event_id) -> None:
        self.api.delete(endpoints.event_detail(event_id))
        logger.info(f"Event {event_id} deleted")
