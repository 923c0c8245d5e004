import logging
from typing import Dict, Iterable, List, Optional

from skylux.catalog.schemas import CabinClass, Flight, FlightSearchRequest, FlightSummary
from skylux.exceptions import NotFound, SeatUnavailable, ValidationError
from skylux.locks import KeyedLocks

logger = logging.getLogger(__name__)

VALID_CABINS = [cabin.value for cabin in CabinClass]
VALID_TRIP_TYPES = ["one-way", "round-trip", "multi-city"]

class FlightCatalog:
    """Owns flight records and their live per-cabin availability counters"""

    def __init__(self, flights: Optional[Iterable[Flight]] = None, locks: Optional[KeyedLocks] = None):
        self._flights: Dict[str, Flight] = {}
        self.locks = locks or KeyedLocks()
        for flight in flights or []:
            self.add_flight(flight)

    def add_flight(self, flight: Flight) -> Flight:
        self._flights[flight.id] = flight
        return flight

    def get_flight(self, flight_id: str) -> Optional[Flight]:
        """Get flight by ID"""
        return self._flights.get(flight_id)

    def require_flight(self, flight_id: str) -> Flight:
        flight = self._flights.get(flight_id)
        if not flight:
            raise NotFound(f"Flight {flight_id} not found")
        return flight

    def list_flights(self, skip: int = 0, limit: int = 50) -> List[Flight]:
        flights = list(self._flights.values())
        return flights[skip:skip + limit]

    def __len__(self) -> int:
        return len(self._flights)

    # ================================
    # Availability counters
    # ================================

    def decrement_availability(self, flight_id: str, cabin: str, count: int) -> int:
        """Take ``count`` seats out of a cabin; fails if the cabin cannot hold them"""
        flight = self.require_flight(flight_id)
        cabin_key = _cabin_value(cabin)

        with self.locks(flight_id):
            available = flight.get_available_seats(cabin_key)
            if available < count:
                raise SeatUnavailable(
                    f"Only {available} {cabin_key} seats left on flight {flight_id}"
                )
            flight.available_seats[cabin_key] = available - count
            return flight.available_seats[cabin_key]

    def increment_availability(self, flight_id: str, cabin: str, count: int) -> int:
        """Return ``count`` seats to a cabin, never above its capacity"""
        flight = self.require_flight(flight_id)
        cabin_key = _cabin_value(cabin)

        with self.locks(flight_id):
            restored = flight.get_available_seats(cabin_key) + count
            capacity = flight.capacity.get(cabin_key)
            if capacity is not None:
                restored = min(restored, capacity)
            flight.available_seats[cabin_key] = restored
            return restored

    # ================================
    # Search
    # ================================

    def validate_search_input(self, request: FlightSearchRequest) -> List[str]:
        """Validate a flight search request, returning every failing rule"""
        errors = []

        if not request.origin or len(request.origin) < 3:
            errors.append("Valid origin airport code is required")

        if not request.destination or len(request.destination) < 3:
            errors.append("Valid destination airport code is required")

        if request.origin and request.origin == request.destination:
            errors.append("Origin and destination cannot be the same")

        if not request.departure_date:
            errors.append("Departure date is required")

        if request.trip_type == "round-trip" and request.return_date and request.departure_date:
            if request.return_date <= request.departure_date:
                errors.append("Return date must be after departure date")

        if request.passengers < 1 or request.passengers > 9:
            errors.append("Number of passengers must be between 1 and 9")

        if request.cabin not in VALID_CABINS:
            errors.append("Invalid travel class")

        if request.trip_type not in VALID_TRIP_TYPES:
            errors.append("Invalid trip type")

        return errors

    def get_available_flights(
        self,
        origin: str,
        destination: str,
        date: str,
        passengers: int,
        cabin: str,
    ) -> List[FlightSummary]:
        """Active flights on a route and date with room for every passenger"""
        results = []
        for flight in self._flights.values():
            if flight.origin != origin or flight.destination != destination:
                continue
            if flight.date != date:
                continue
            if flight.status != "active":
                continue
            if not flight.has_available_seats(cabin, passengers):
                continue
            results.append(FlightSummary.from_flight(flight, flight.get_total_fare(cabin, passengers)))

        return sorted(results, key=lambda f: f.departure_time)

    def search_flights(self, request: FlightSearchRequest) -> Dict[str, List[FlightSummary]]:
        errors = self.validate_search_input(request)
        if errors:
            raise ValidationError(errors)

        outbound = self.get_available_flights(
            request.origin, request.destination, request.departure_date,
            request.passengers, request.cabin
        )

        returning = []
        if request.trip_type == "round-trip" and request.return_date:
            returning = self.get_available_flights(
                request.destination, request.origin, request.return_date,
                request.passengers, request.cabin
            )

        logger.debug(
            "Search %s-%s on %s: %d outbound, %d return",
            request.origin, request.destination, request.departure_date, len(outbound), len(returning)
        )
        return {"outbound_flights": outbound, "return_flights": returning}

def _cabin_value(cabin) -> str:
    if isinstance(cabin, CabinClass):
        return cabin.value
    return str(cabin).lower()
