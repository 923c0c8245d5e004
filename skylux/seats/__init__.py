"""
Seat Inventory Module

Keeps the live seat status of every flight and enforces that a seat has at
most one occupant. It includes:

- Seat state machine (available / booked / occupied_male / occupied_female)
- Assignment, swap and release of seats
- Automatic seat assignment with aisle/window preference
- Seat map view with upgrade prices

Key Components:
- inventory.py: SeatInventory state and transitions
- pricing.py: Per-cabin, per-seat-type upgrade fees
- router.py: FastAPI endpoints for seat maps and assignment
- schemas.py: Pydantic models for seat state and requests
"""

from .inventory import SeatInventory
from .pricing import SEAT_PRICING, get_seat_price
from .schemas import (
    SeatStatus, SeatState, SeatAssignment, PassengerSeatInfo,
    AutoAssignPreferences, SeatMapResponse
)

__all__ = [
    "SeatInventory",
    "SEAT_PRICING",
    "get_seat_price",
    "SeatStatus",
    "SeatState",
    "SeatAssignment",
    "PassengerSeatInfo",
    "AutoAssignPreferences",
    "SeatMapResponse",
]
