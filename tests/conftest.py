import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from skylux.bookings.booking_service import BookingService
from skylux.bookings.schemas import FlightSelection, PassengerInfo, PaymentInfo
from skylux.bookings.store import InMemoryBookingRepository
from skylux.bookings.ticket_service import ETicketIssuer
from skylux.catalog.schemas import CabinClass, Flight
from skylux.catalog.seed import generate_seat_map, get_aircraft_layout
from skylux.catalog.service import FlightCatalog
from skylux.fares.fare_service import FareEngine
from skylux.promotions.ledger import PromotionLedger
from skylux.seats.inventory import SeatInventory

FIXED_NOW = datetime(2025, 6, 1, 12, 0)

class FrozenClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)

def build_flight(
    flight_id,
    origin="JFK",
    destination="LAX",
    economy="299",
    premium="549",
    business="1299",
    first="2499",
    taxes="50",
    surcharges="25",
    aircraft="Boeing 787-9",
    available_seats=None,
    capacity=None,
):
    layout = get_aircraft_layout(aircraft)
    capacity = capacity or dict(layout.capacity)
    return Flight(
        id=flight_id,
        flight_number=f"SL {flight_id[2:]}",
        aircraft=aircraft,
        origin=origin,
        destination=destination,
        date="2025-06-15",
        departure_time="08:00",
        arrival_time="11:30",
        duration="5h 30m",
        capacity=capacity,
        available_seats=available_seats or dict(capacity),
        base_fares={
            "economy": Decimal(economy),
            "premium": Decimal(premium),
            "business": Decimal(business),
            "first": Decimal(first),
        },
        taxes=Decimal(taxes),
        surcharges=Decimal(surcharges),
        seat_map=generate_seat_map(aircraft),
    )

@pytest.fixture
def clock():
    return FrozenClock(FIXED_NOW)

@pytest.fixture
def catalog():
    """SL001 JFK-LAX and SL002 LAX-JFK on a Boeing 787-9, plus a cheap SL003"""
    return FlightCatalog([
        build_flight("SL001"),
        build_flight("SL002", origin="LAX", destination="JFK", economy="320", taxes="60", surcharges="30"),
        build_flight("SL003", origin="BOS", destination="DCA", economy="50", taxes="20", surcharges="10"),
    ])

@pytest.fixture
def inventory(catalog):
    return SeatInventory(catalog)

@pytest.fixture
def ledger(clock):
    return PromotionLedger(clock=clock)

@pytest.fixture
def fare_engine(catalog, ledger):
    return FareEngine(catalog, ledger)

@pytest.fixture
def ticket_issuer(tmp_path):
    return ETicketIssuer(str(tmp_path / "tickets"), default_format="JSON")

@pytest.fixture
def repository():
    return InMemoryBookingRepository()

@pytest.fixture
def booking_service(catalog, inventory, fare_engine, ledger, repository, ticket_issuer):
    return BookingService(
        catalog=catalog,
        inventory=inventory,
        fare_engine=fare_engine,
        ledger=ledger,
        repository=repository,
        ticket_issuer=ticket_issuer,
    )

@pytest.fixture
def make_passenger():
    def _make(passenger_id="p1", first_name="Alice", last_name="Walker", **overrides):
        data = {
            "id": passenger_id,
            "first_name": first_name,
            "last_name": last_name,
            "date_of_birth": "1990-04-12",
            "email": f"{first_name.lower()}@example.com",
            "phone": "+15551234567",
            "nationality": "US",
        }
        data.update(overrides)
        return PassengerInfo(**data)
    return _make

@pytest.fixture
def card_payment():
    return PaymentInfo(
        method="card",
        card_number="4111111111111111",
        expiry_month="12",
        expiry_year="2030",
        cvv="123",
        cardholder_name="Alice Walker",
    )

@pytest.fixture
def economy_sl001():
    return [FlightSelection(flight_id="SL001", cabin=CabinClass.ECONOMY)]

@pytest.fixture
def flight_factory():
    return build_flight
