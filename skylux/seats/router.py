from fastapi import APIRouter, Depends

from skylux.dependencies import get_inventory
from skylux.seats.inventory import SeatInventory
from skylux.seats.schemas import (
    AutoAssignRequest, AutoAssignResponse, SeatAssignment, SeatAssignRequest,
    SeatMapResponse, SeatReleaseRequest, SeatStatusResponse, SeatSwapRequest, SpecialSeats
)

router = APIRouter()

@router.get("/{flight_id}/map", response_model=SeatMapResponse)
def get_seat_map(
    flight_id: str,
    inventory: SeatInventory = Depends(get_inventory)
):
    """Seat map with live status and upgrade prices"""
    return inventory.get_seat_map(flight_id)

@router.get("/{flight_id}/special", response_model=SpecialSeats)
def get_special_seats(
    flight_id: str,
    inventory: SeatInventory = Depends(get_inventory)
):
    """Extra legroom, exit, window and aisle seats of a flight"""
    return inventory.highlight_special_seats(flight_id)

@router.get("/{flight_id}/{seat_id}/status", response_model=SeatStatusResponse)
def get_seat_status(
    flight_id: str,
    seat_id: str,
    inventory: SeatInventory = Depends(get_inventory)
):
    return inventory.get_seat_status(flight_id, seat_id)

@router.post("/assign", response_model=SeatAssignment)
def assign_seat(
    request: SeatAssignRequest,
    inventory: SeatInventory = Depends(get_inventory)
):
    """Assign a seat, freeing the passenger's previous seat on the flight"""
    return inventory.assign_seat(
        request.flight_id, request.passenger_id, request.seat_id, request.passenger_info
    )

@router.post("/swap", response_model=SeatAssignment)
def swap_seat(
    request: SeatSwapRequest,
    inventory: SeatInventory = Depends(get_inventory)
):
    return inventory.swap_seat(
        request.flight_id, request.passenger_id, request.new_seat_id, request.passenger_info
    )

@router.post("/release", response_model=SeatStatusResponse)
def release_seat(
    request: SeatReleaseRequest,
    inventory: SeatInventory = Depends(get_inventory)
):
    inventory.release(request.flight_id, request.seat_id)
    return inventory.get_seat_status(request.flight_id, request.seat_id)

@router.post("/auto-assign", response_model=AutoAssignResponse)
def auto_assign_seats(
    request: AutoAssignRequest,
    inventory: SeatInventory = Depends(get_inventory)
):
    """Assign the best free seats of a cabin to passengers in order"""
    assignments = inventory.auto_assign(
        request.flight_id, request.passengers, request.cabin, request.preferences
    )
    # Passengers are seated in order, so the unassigned ones are the tail
    unassigned = [
        p.id or f"passenger-{index + 1}"
        for index, p in enumerate(request.passengers)
        if index >= len(assignments)
    ]
    return AutoAssignResponse(
        flight_id=request.flight_id,
        assignments=assignments,
        unassigned_passengers=unassigned
    )
