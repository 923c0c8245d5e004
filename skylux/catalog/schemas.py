from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Tuple
from decimal import Decimal
from enum import Enum

class CabinClass(str, Enum):
    """Travel class partitions of a flight"""
    ECONOMY = "economy"
    PREMIUM = "premium"
    BUSINESS = "business"
    FIRST = "first"

class SeatType(str, Enum):
    """Seat type used to price upgrades"""
    STANDARD = "standard"
    EXTRA_LEGROOM = "extra_legroom"
    EMERGENCY_EXIT = "emergency_exit"
    WINDOW = "window"
    AISLE = "aisle"

CABIN_ORDER = [CabinClass.FIRST, CabinClass.BUSINESS, CabinClass.PREMIUM, CabinClass.ECONOMY]

class Seat(BaseModel):
    """Static seat layout entry; live status is kept by the seat inventory"""
    model_config = ConfigDict(frozen=True)

    id: str
    row: int
    letter: str
    cabin: CabinClass
    type: SeatType = SeatType.STANDARD

class Flight(BaseModel):
    """Flight record; only ``available_seats`` changes after catalog load"""
    id: str
    flight_number: str
    airline: str = "SkyLux Airlines"
    aircraft: str
    origin: str
    destination: str
    date: str
    departure_time: str
    arrival_time: str
    duration: str
    capacity: Dict[str, int] = Field(default_factory=dict)
    available_seats: Dict[str, int] = Field(default_factory=dict)
    base_fares: Dict[str, Decimal] = Field(default_factory=dict)
    taxes: Decimal = Decimal("0")
    surcharges: Decimal = Decimal("0")
    amenities: List[str] = Field(default_factory=list)
    status: str = "active"
    seat_map: Dict[str, List[List[Seat]]] = Field(default_factory=dict, repr=False)

    @property
    def route(self) -> str:
        return f"{self.origin}-{self.destination}"

    def get_base_fare(self, cabin: str) -> Decimal:
        return self.base_fares.get(_cabin_key(cabin), Decimal("0"))

    def get_available_seats(self, cabin: str) -> int:
        return self.available_seats.get(_cabin_key(cabin), 0)

    def has_available_seats(self, cabin: str, passenger_count: int) -> bool:
        return self.get_available_seats(cabin) >= passenger_count

    def get_total_fare(self, cabin: str, passenger_count: int = 1) -> Decimal:
        """Base fare plus taxes and surcharges, without seat upgrades"""
        per_person = self.get_base_fare(cabin) + self.taxes + self.surcharges
        return per_person * passenger_count

    def find_seat(self, seat_id: str) -> Optional[Seat]:
        for rows in self.seat_map.values():
            for row in rows:
                for seat in row:
                    if seat.id == seat_id:
                        return seat
        return None

    def iter_seats(self, cabin: Optional[str] = None):
        cabins = [_cabin_key(cabin)] if cabin else list(self.seat_map.keys())
        for cabin_name in cabins:
            for row in self.seat_map.get(cabin_name, []):
                for seat in row:
                    yield seat

def _cabin_key(cabin) -> str:
    if isinstance(cabin, CabinClass):
        return cabin.value
    return str(cabin).lower() if cabin is not None else ""

class FlightSummary(BaseModel):
    """Flight listing without the seat map"""
    id: str
    flight_number: str
    airline: str
    aircraft: str
    origin: str
    destination: str
    date: str
    departure_time: str
    arrival_time: str
    duration: str
    available_seats: Dict[str, int]
    base_fares: Dict[str, Decimal]
    taxes: Decimal
    surcharges: Decimal
    amenities: List[str] = []
    status: str
    total_fare: Optional[Decimal] = None

    @classmethod
    def from_flight(cls, flight: Flight, total_fare: Optional[Decimal] = None) -> "FlightSummary":
        data = flight.model_dump(exclude={"seat_map", "capacity"})
        return cls(**data, total_fare=total_fare)

class FlightSearchRequest(BaseModel):
    """Request schema for flight search"""
    origin: str
    destination: str
    departure_date: str
    return_date: Optional[str] = None
    passengers: int = 1
    cabin: str = "economy"
    trip_type: str = "one-way"

class FlightSearchResponse(BaseModel):
    outbound_flights: List[FlightSummary]
    return_flights: List[FlightSummary] = []
    search_params: FlightSearchRequest

class AircraftLayout(BaseModel):
    """Seats per cabin as (rows, seats per row)"""
    type: str
    capacity: Dict[str, int]
    layout: Dict[str, Tuple[int, int]]
