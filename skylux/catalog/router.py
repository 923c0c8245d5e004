from fastapi import APIRouter, Depends, Query
from typing import List

from skylux.dependencies import get_catalog
from skylux.catalog.schemas import FlightSearchRequest, FlightSearchResponse, FlightSummary
from skylux.catalog.service import FlightCatalog

router = APIRouter()

@router.get("", response_model=List[FlightSummary])
def list_flights(
    skip: int = Query(0, ge=0, description="Number of flights to skip"),
    limit: int = Query(50, ge=1, le=200, description="Maximum results"),
    catalog: FlightCatalog = Depends(get_catalog)
):
    """List catalog flights without seat maps"""
    return [FlightSummary.from_flight(flight) for flight in catalog.list_flights(skip, limit)]

@router.post("/search", response_model=FlightSearchResponse)
def search_flights(
    request: FlightSearchRequest,
    catalog: FlightCatalog = Depends(get_catalog)
):
    """Search flights by route, date, cabin and passenger count"""
    results = catalog.search_flights(request)
    return FlightSearchResponse(
        outbound_flights=results["outbound_flights"],
        return_flights=results["return_flights"],
        search_params=request
    )

@router.get("/{flight_id}", response_model=FlightSummary)
def get_flight(
    flight_id: str,
    catalog: FlightCatalog = Depends(get_catalog)
):
    """Get flight details by ID"""
    return FlightSummary.from_flight(catalog.require_flight(flight_id))
