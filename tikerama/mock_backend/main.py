# tikerama/mock_backend/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Tikerama Backend (dev mock)")

# run with: uvicorn tikerama.mock_backend.main:app --port 8000 --root-path /api/v1
EVENTS = {
    "evt-001": {
        "id": "evt-001",
        "title": "Festival des Musiques Urbaines d'Anoumabo",
        "description": "Concerts live, DJ sets et village artisanal.",
        "date": "2026-04-15",
        "time": "18:00",
        "venue": "Village Ki-Yi M'Bock",
        "city": "Abidjan",
        "location": "Anoumabo, Marcory",
        "category": "Musique",
        "isFeatured": True,
        "isPublished": True,
        "ticketTypes": [
            {"id": "tkt-001-1", "name": "Pass Journée", "price": 5000, "currency": "XOF", "available": 500, "maxPerOrder": 5},
            {"id": "tkt-001-2", "name": "Pass 4 Jours", "price": 15000, "currency": "XOF", "available": 200, "maxPerOrder": 4},
            {"id": "tkt-001-3", "name": "VIP", "price": 50000, "currency": "XOF", "available": 50, "maxPerOrder": 2},
        ],
    },
    "evt-002": {
        "id": "evt-002",
        "title": "Abidjan Comedy Club",
        "description": "Soirée stand-up avec les meilleurs humoristes ivoiriens.",
        "date": "2026-02-20",
        "time": "20:30",
        "venue": "Palais de la Culture",
        "city": "Abidjan",
        "location": "Treichville",
        "category": "Humour",
        "isFeatured": False,
        "isPublished": True,
        "ticketTypes": [
            {"id": "tkt-002-1", "name": "Standard", "price": 7500, "currency": "XOF", "available": 300, "maxPerOrder": 6},
            {"id": "tkt-002-2", "name": "Premium", "price": 15000, "currency": "XOF", "available": 80, "maxPerOrder": 4},
        ],
    },
}


@app.get("/events/")
def list_events(featured: bool | None = None):
    events = list(EVENTS.values())
    if featured is not None:
        events = [e for e in events if e["isFeatured"] == featured]
    return events


@app.get("/events/{event_id}/")
def get_event(event_id: str):
    event = EVENTS.get(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Événement introuvable")
    return event
