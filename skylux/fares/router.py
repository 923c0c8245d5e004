from fastapi import APIRouter, Depends, Path

from skylux.dependencies import get_fare_engine
from skylux.fares.fare_service import FareEngine
from skylux.fares.schemas import (
    BaseFareQuote, BaseFareRequest, FareCalculationRequest, FareComparison, FareQuote,
    MultiFlightFareQuote, MultiFlightFareRequest, SeatUpgradeQuote, SeatUpgradeRequest
)

router = APIRouter()

@router.post("/calculate", response_model=FareQuote)
def calculate_fare(
    request: FareCalculationRequest,
    fare_engine: FareEngine = Depends(get_fare_engine)
):
    """Fare breakdown for one flight, seats and an optional promo code"""
    return fare_engine.total_fare(
        request.flight_id,
        request.passengers,
        request.selected_seats,
        request.promo_code,
        request.cabin
    )

@router.post("/multi", response_model=MultiFlightFareQuote)
def calculate_multi_flight_fare(
    request: MultiFlightFareRequest,
    fare_engine: FareEngine = Depends(get_fare_engine)
):
    """Fare for round-trip or multi-segment itineraries"""
    return fare_engine.multi_flight_fare(
        request.flights, request.passengers, request.seat_selections, request.promo_code
    )

@router.post("/base", response_model=BaseFareQuote)
def calculate_base_fare(
    request: BaseFareRequest,
    fare_engine: FareEngine = Depends(get_fare_engine)
):
    return fare_engine.base_fare(request.flight_id, request.cabin, request.passengers)

@router.post("/seat-upgrade", response_model=SeatUpgradeQuote)
def calculate_seat_upgrade(
    request: SeatUpgradeRequest,
    fare_engine: FareEngine = Depends(get_fare_engine)
):
    return fare_engine.seat_upgrade_fare(request.flight_id, request.seat_id, request.cabin)

@router.get("/comparison/{flight_id}/{passengers}", response_model=FareComparison)
def get_fare_comparison(
    flight_id: str,
    passengers: int = Path(..., ge=1, le=9, description="Number of passengers"),
    fare_engine: FareEngine = Depends(get_fare_engine)
):
    """Compare totals across cabins of a flight"""
    return fare_engine.fare_comparison(flight_id, passengers)
