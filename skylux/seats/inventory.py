import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from skylux.catalog.schemas import Flight, Seat, SeatType
from skylux.catalog.service import FlightCatalog
from skylux.exceptions import NotFound, SeatUnavailable
from skylux.seats.pricing import get_seat_price
from skylux.seats.schemas import (
    AutoAssignPreferences, PassengerAssignment, PassengerSeatInfo, SeatAssignment,
    SeatDetail, SeatMapResponse, SeatSelectionSummary, SeatState, SeatStatus,
    SeatStatusResponse, SeatView, SpecialSeats
)

logger = logging.getLogger(__name__)

class SeatInventory:
    """
    Per-flight seat status with single occupancy.

    A seat with no entry in the status map is available. Every mutation for a
    flight runs under that flight's lock, shared with the catalog counters.
    """

    def __init__(self, catalog: FlightCatalog):
        self.catalog = catalog
        self.locks = catalog.locks
        self._seat_status: Dict[str, Dict[str, SeatState]] = {}

    # ================================
    # Lookups
    # ================================

    def _resolve_seat(self, flight_id: str, seat_id: str) -> Tuple[Flight, Seat]:
        flight = self.catalog.require_flight(flight_id)
        seat = flight.find_seat(seat_id)
        if not seat:
            raise NotFound(f"Seat {seat_id} not found on flight {flight_id}")
        return flight, seat

    def _state(self, flight_id: str, seat_id: str) -> SeatState:
        return self._seat_status.get(flight_id, {}).get(seat_id) or SeatState()

    def get_seat_status(self, flight_id: str, seat_id: str) -> SeatStatusResponse:
        self._resolve_seat(flight_id, seat_id)
        state = self._state(flight_id, seat_id)
        return SeatStatusResponse(
            flight_id=flight_id,
            seat_id=seat_id,
            status=state.status,
            passenger_id=state.passenger_id,
            gender=state.gender,
            booked_at=state.booked_at
        )

    def find_passenger_seat(
        self,
        flight_id: str,
        passenger_id: str,
        holder: Optional[str] = None
    ) -> Optional[str]:
        """Seat held by ``passenger_id`` on behalf of ``holder``"""
        for seat_id, state in self._seat_status.get(flight_id, {}).items():
            if state.passenger_id == passenger_id and state.holder == holder and not state.is_available:
                return seat_id
        return None

    def get_seat_map(self, flight_id: str) -> SeatMapResponse:
        """Seat layout merged with live status and upgrade price"""
        flight = self.catalog.require_flight(flight_id)
        current_status = self._seat_status.get(flight_id, {})

        seat_map = {}
        for cabin, rows in flight.seat_map.items():
            seat_map[cabin] = [
                [
                    SeatView(
                        id=seat.id,
                        row=seat.row,
                        letter=seat.letter,
                        cabin=seat.cabin,
                        type=seat.type,
                        status=current_status[seat.id].status if seat.id in current_status else SeatStatus.AVAILABLE,
                        occupied_by=current_status[seat.id].passenger_id if seat.id in current_status else None,
                        price=get_seat_price(seat.type, cabin)
                    )
                    for seat in row
                ]
                for row in rows
            ]

        return SeatMapResponse(
            flight_id=flight.id,
            flight_number=flight.flight_number,
            aircraft=flight.aircraft,
            seat_map=seat_map
        )

    def highlight_special_seats(self, flight_id: str) -> SpecialSeats:
        flight = self.catalog.require_flight(flight_id)
        special = SpecialSeats()
        buckets = {
            SeatType.EXTRA_LEGROOM: special.extra_legroom,
            SeatType.EMERGENCY_EXIT: special.emergency_exit,
            SeatType.WINDOW: special.window,
            SeatType.AISLE: special.aisle,
        }
        for seat in flight.iter_seats():
            if seat.type in buckets:
                buckets[seat.type].append(seat.id)
        return special

    def get_passenger_assignments(self, flight_id: str) -> List[PassengerAssignment]:
        assignments = []
        for seat_id, state in self._seat_status.get(flight_id, {}).items():
            if state.passenger_id and not state.is_available:
                assignments.append(PassengerAssignment(
                    seat_id=seat_id,
                    passenger_id=state.passenger_id,
                    status=state.status,
                    booked_at=state.booked_at,
                    gender=state.gender
                ))
        return assignments

    def get_seat_selection_summary(self, flight_id: str, passenger_ids: List[str]) -> SeatSelectionSummary:
        """Seats held by the given passengers with their upgrade fees"""
        flight = self.catalog.require_flight(flight_id)
        assignments = [
            a for a in self.get_passenger_assignments(flight_id)
            if a.passenger_id in passenger_ids
        ]

        total_upgrade_fee = Decimal("0")
        seat_details = []
        for assignment in assignments:
            seat = flight.find_seat(assignment.seat_id)
            if not seat:
                continue
            upgrade_fee = get_seat_price(seat.type, seat.cabin)
            total_upgrade_fee += upgrade_fee
            seat_details.append(SeatDetail(
                passenger_id=assignment.passenger_id,
                seat_id=seat.id,
                seat_type=seat.type,
                cabin=seat.cabin,
                upgrade_fee=upgrade_fee
            ))

        return SeatSelectionSummary(
            total_assignments=len(assignments),
            total_upgrade_fee=total_upgrade_fee,
            seat_details=seat_details,
            assignments=assignments
        )

    # ================================
    # State transitions
    # ================================

    def assign(
        self,
        flight_id: str,
        seat_id: str,
        passenger_id: str,
        gender: Optional[str] = None,
        holder: Optional[str] = None
    ) -> SeatState:
        """available -> booked / occupied_*; never overwrites an occupant"""
        self._resolve_seat(flight_id, seat_id)

        with self.locks(flight_id):
            current = self._state(flight_id, seat_id)
            if not current.is_available:
                raise SeatUnavailable(f"Seat {seat_id} is not available")

            if gender == "male":
                status = SeatStatus.OCCUPIED_MALE
            elif gender == "female":
                status = SeatStatus.OCCUPIED_FEMALE
            else:
                status = SeatStatus.BOOKED

            state = SeatState(
                status=status,
                passenger_id=passenger_id,
                holder=holder,
                gender=gender,
                booked_at=datetime.now()
            )
            self._seat_status.setdefault(flight_id, {})[seat_id] = state
            return state

    def release(self, flight_id: str, seat_id: str, holder: Optional[str] = None) -> bool:
        """
        Back to available; releasing a free seat is a no-op.

        With ``holder`` the seat is only freed while that booking holds it.
        Returns whether an occupied seat was freed.
        """
        self._resolve_seat(flight_id, seat_id)

        with self.locks(flight_id):
            current = self._state(flight_id, seat_id)
            if current.is_available or (holder is not None and current.holder != holder):
                return False
            self._seat_status[flight_id].pop(seat_id, None)
            return True

    def release_passenger_seat(
        self,
        flight_id: str,
        passenger_id: str,
        holder: Optional[str] = None
    ) -> Optional[str]:
        """Free whatever seat the passenger holds on a flight"""
        with self.locks(flight_id):
            seat_id = self.find_passenger_seat(flight_id, passenger_id, holder)
            if seat_id:
                self._seat_status[flight_id].pop(seat_id, None)
            return seat_id

    def assign_seat(
        self,
        flight_id: str,
        passenger_id: str,
        seat_id: str,
        passenger_info: Optional[PassengerSeatInfo] = None,
        holder: Optional[str] = None
    ) -> SeatAssignment:
        """
        Move a passenger to ``seat_id``, freeing their previous seat on the flight.

        Only a seat taken for the same ``holder`` counts as the previous seat,
        so a seat held by a booking is never moved from here.
        """
        passenger_info = passenger_info or PassengerSeatInfo()
        self._resolve_seat(flight_id, seat_id)

        with self.locks(flight_id):
            previous_seat = self.find_passenger_seat(flight_id, passenger_id, holder)
            current = self._state(flight_id, seat_id)

            if previous_seat == seat_id:
                state = current
            else:
                # Check before freeing so a failed move keeps the old seat
                if not current.is_available:
                    raise SeatUnavailable(f"Seat {seat_id} is not available")
                if previous_seat:
                    self._seat_status[flight_id].pop(previous_seat, None)
                state = self.assign(flight_id, seat_id, passenger_id, passenger_info.gender, holder)

        passenger_name = f"{passenger_info.first_name or ''} {passenger_info.last_name or ''}".strip()
        logger.debug("Seat %s on %s assigned to %s", seat_id, flight_id, passenger_id)

        return SeatAssignment(
            flight_id=flight_id,
            passenger_id=passenger_id,
            seat_id=seat_id,
            status=state.status,
            assigned_at=state.booked_at or datetime.now(),
            passenger_name=passenger_name
        )

    def swap_seat(
        self,
        flight_id: str,
        passenger_id: str,
        new_seat_id: str,
        passenger_info: Optional[PassengerSeatInfo] = None,
        holder: Optional[str] = None
    ) -> SeatAssignment:
        return self.assign_seat(flight_id, passenger_id, new_seat_id, passenger_info, holder)

    def auto_assign(
        self,
        flight_id: str,
        passengers: List[PassengerSeatInfo],
        cabin: str,
        preferences: Optional[AutoAssignPreferences] = None
    ) -> List[SeatAssignment]:
        """
        Give each passenger, in order, the next free seat of the cabin.

        Seats of the preferred type come first, then lower rows. Passengers
        beyond the number of free seats stay unassigned. A passenger without an
        id gets a fresh one, so it never picks up another passenger's seat.
        """
        preferences = preferences or AutoAssignPreferences()
        flight = self.catalog.require_flight(flight_id)
        preferred = preferences.seat_type

        with self.locks(flight_id):
            available = [
                seat for seat in flight.iter_seats(cabin)
                if self._state(flight_id, seat.id).is_available
            ]
            available.sort(key=lambda seat: (
                0 if preferred and seat.type.value == preferred else 1,
                seat.row,
                seat.letter
            ))

            assignments = []
            for index, passenger in enumerate(passengers):
                if index >= len(available):
                    break
                passenger_id = passenger.id or f"passenger-{uuid.uuid4().hex[:8]}"
                assignments.append(
                    self.assign_seat(flight_id, passenger_id, available[index].id, passenger)
                )

        if len(assignments) < len(passengers):
            logger.info(
                "Auto-assign on %s left %d of %d passengers without a seat",
                flight_id, len(passengers) - len(assignments), len(passengers)
            )
        return assignments
