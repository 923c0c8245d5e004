"""
Fare Engine Module

Computes deterministic USD fares from catalog flights. It includes:

- Base fare, taxes and surcharges per passenger count
- Seat upgrade fees by cabin and seat type
- Single and multi-segment totals with promo code quotes
- Cabin fare comparison

Key Components:
- fare_service.py: FareEngine calculations
- router.py: FastAPI endpoints for fare quotes
- schemas.py: Pydantic models for fare breakdowns and requests
"""

from .fare_service import FareEngine
from .schemas import (
    FareBreakdown, FareQuote, MultiFlightFareQuote, SeatSelection,
    FlightFareSelection, SeatUpgradeQuote, FareComparison
)

__all__ = [
    "FareEngine",
    "FareBreakdown",
    "FareQuote",
    "MultiFlightFareQuote",
    "SeatSelection",
    "FlightFareSelection",
    "SeatUpgradeQuote",
    "FareComparison",
]
