"""
Flight Catalog Module

Supplies the flight records that the fare engine, seat inventory and booking
service read. It includes:

- Deterministic generation of SkyLux flights for a date window
- Per-aircraft seat layouts with seat types used for upgrade pricing
- Live per-cabin availability counters
- Route/date flight search

Key Components:
- seed.py: Route table, aircraft layouts and flight generation
- service.py: FlightCatalog lookup, search and availability counters
- router.py: FastAPI endpoints for flight listing and search
- schemas.py: Pydantic models for flights and seats
"""

from .schemas import (
    CabinClass, SeatType, Seat, Flight, FlightSummary,
    FlightSearchRequest, FlightSearchResponse, CABIN_ORDER
)
from .service import FlightCatalog
from .seed import generate_flights, generate_seat_map

__all__ = [
    "CabinClass",
    "SeatType",
    "Seat",
    "Flight",
    "FlightSummary",
    "FlightSearchRequest",
    "FlightSearchResponse",
    "CABIN_ORDER",
    "FlightCatalog",
    "generate_flights",
    "generate_seat_map",
]
