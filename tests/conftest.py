from decimal import Decimal

import pytest

from tikerama.domain.schemas import Event, TicketType
from tikerama.services.storage_service import MemoryStorage

SESSION_ID = "sess-test-0001"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def storage_data():
    return {}


@pytest.fixture
def session_store(storage_data):
    return MemoryStorage(SESSION_ID, "session", ttl=60, data=storage_data)


@pytest.fixture
def local_store(storage_data):
    return MemoryStorage(SESSION_ID, "local", data=storage_data)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def vip():
    return TicketType(id="tkt-vip", name="VIP", price=Decimal("50000"), currency="XOF", available=50, max_per_order=2)


@pytest.fixture
def standard():
    return TicketType(id="tkt-std", name="Standard", price=Decimal("5000"), currency="XOF", available=500, max_per_order=5)


@pytest.fixture
def event(vip, standard):
    return Event(
        id="evt-001",
        title="Festival des Musiques Urbaines",
        date="2026-04-15",
        location="Anoumabo, Marcory",
        ticket_types=[vip, standard],
    )
