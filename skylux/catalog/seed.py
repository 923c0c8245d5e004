"""
Generated flight catalog.

Builds a deterministic set of SkyLux flights for a date window from a fixed
route table and aircraft layouts. Seat layouts are generated once per aircraft
type and shared by every flight flown with that aircraft.
"""

import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

from skylux.catalog.schemas import AircraftLayout, CabinClass, CABIN_ORDER, Flight, Seat, SeatType

AIRLINE = "SkyLux Airlines"

AMENITIES = [
    "Premium Lounge Access",
    "Gourmet Dining",
    "High-Speed WiFi",
    "In-flight Entertainment",
    "Extra Legroom",
    "Priority Boarding",
]

# (origin, destination, duration, economy, premium, business, first)
ROUTES = [
    # US domestic
    ("JFK", "LAX", "6h 30m", 299, 499, 899, 1599),
    ("LAX", "JFK", "5h 45m", 319, 519, 919, 1699),
    ("JFK", "MIA", "3h 15m", 199, 349, 649, 1199),
    ("MIA", "JFK", "3h 00m", 219, 369, 669, 1249),
    ("ORD", "SFO", "4h 30m", 249, 429, 799, 1449),
    ("SFO", "ORD", "4h 15m", 269, 449, 819, 1499),
    # US - Europe
    ("JFK", "LHR", "7h 00m", 599, 999, 2499, 4999),
    ("LHR", "JFK", "8h 30m", 649, 1099, 2699, 5299),
    ("JFK", "CDG", "7h 30m", 629, 1029, 2599, 5199),
    ("CDG", "JFK", "8h 45m", 679, 1129, 2799, 5499),
    ("LAX", "FRA", "11h 30m", 799, 1299, 3199, 6399),
    ("FRA", "LAX", "12h 15m", 849, 1399, 3399, 6799),
    # US - Asia
    ("LAX", "NRT", "11h 30m", 899, 1499, 3499, 6999),
    ("NRT", "LAX", "10h 45m", 949, 1599, 3699, 7399),
    ("SFO", "ICN", "12h 00m", 999, 1699, 3899, 7799),
    ("ICN", "SFO", "11h 15m", 1049, 1799, 4099, 8199),
    ("LAX", "SIN", "17h 30m", 1199, 1999, 4499, 8999),
    ("SIN", "LAX", "16h 45m", 1249, 2099, 4699, 9399),
    # Europe - Asia
    ("LHR", "DXB", "7h 00m", 499, 799, 1999, 3999),
    ("DXB", "LHR", "7h 30m", 549, 849, 2199, 4399),
    ("FRA", "BOM", "8h 30m", 699, 1199, 2799, 5599),
    ("BOM", "FRA", "9h 15m", 749, 1299, 2999, 5999),
    # Asia Pacific
    ("NRT", "SYD", "9h 30m", 799, 1299, 2999, 5999),
    ("SYD", "NRT", "9h 15m", 849, 1399, 3199, 6399),
    ("SIN", "BKK", "2h 30m", 199, 329, 599, 1199),
    ("BKK", "SIN", "2h 15m", 219, 349, 629, 1299),
    # Middle East hub
    ("DXB", "BOM", "3h 15m", 299, 499, 999, 1999),
    ("BOM", "DXB", "3h 30m", 319, 529, 1099, 2199),
    ("DXB", "SIN", "7h 30m", 599, 999, 2299, 4599),
    ("SIN", "DXB", "7h 15m", 629, 1049, 2499, 4999),
    # Pakistan
    ("KHI", "DXB", "2h 30m", 450, 750, 1499, 2999),
    ("DXB", "KHI", "2h 30m", 450, 750, 1499, 2999),
    ("LHE", "DXB", "2h 30m", 480, 800, 1599, 3199),
    ("DXB", "LHE", "2h 30m", 480, 800, 1599, 3199),
    ("SKT", "DXB", "2h 30m", 420, 700, 1399, 2799),
    ("DXB", "SKT", "2h 30m", 420, 700, 1399, 2799),
    ("ISB", "DXB", "2h 30m", 460, 760, 1519, 3039),
    ("DXB", "ISB", "2h 30m", 460, 760, 1519, 3039),
    ("KHI", "LHE", "1h 30m", 180, 300, 599, 1199),
    ("LHE", "KHI", "1h 30m", 175, 295, 589, 1179),
    ("SKT", "KHI", "1h 45m", 120, 200, 399, 799),
    ("KHI", "SKT", "1h 45m", 125, 210, 419, 839),
    ("LHE", "ISB", "1h 00m", 100, 170, 339, 679),
    ("ISB", "LHE", "1h 00m", 105, 175, 349, 699),
]

# Cabin layout as (rows, seats per row)
AIRCRAFT_LAYOUTS = {
    "Boeing 787-9": {"first": (2, 4), "business": (5, 6), "premium": (3, 6), "economy": (25, 9)},
    "Airbus A350": {"first": (2, 4), "business": (4, 6), "premium": (3, 6), "economy": (28, 9)},
    "Boeing 777-300ER": {"first": (3, 4), "business": (6, 6), "premium": (4, 7), "economy": (30, 10)},
    "Airbus A380": {"first": (3, 4), "business": (7, 6), "premium": (5, 8), "economy": (35, 10)},
    "Boeing 747-8": {"first": (2, 4), "business": (6, 6), "premium": (4, 7), "economy": (32, 10)},
}

DEFAULT_AIRCRAFT = "Boeing 787-9"

_layout_cache: Dict[str, Dict[str, List[List[Seat]]]] = {}


def get_aircraft_layout(aircraft_type: str) -> AircraftLayout:
    layout = AIRCRAFT_LAYOUTS.get(aircraft_type, AIRCRAFT_LAYOUTS[DEFAULT_AIRCRAFT])
    return AircraftLayout(
        type=aircraft_type,
        capacity={cabin: rows * per_row for cabin, (rows, per_row) in layout.items()},
        layout=layout,
    )


def classify_seat(row_index: int, seat_index: int, seats_per_row: int) -> SeatType:
    """Seat type from its position inside the cabin (0-based row and column)"""
    seat_type = SeatType.STANDARD

    # Front rows and the exit rows get extra legroom
    if row_index < 3 or 10 < row_index < 13:
        seat_type = SeatType.EXTRA_LEGROOM

    if row_index in (12, 13):
        seat_type = SeatType.EMERGENCY_EXIT

    if seat_type == SeatType.STANDARD:
        if seat_index == 0 or seat_index == seats_per_row - 1:
            seat_type = SeatType.WINDOW
        elif seat_index == 2 or seat_index == seats_per_row - 3:
            seat_type = SeatType.AISLE

    return seat_type


def generate_seat_map(aircraft_type: str) -> Dict[str, List[List[Seat]]]:
    """Seat layout for an aircraft; rows are numbered continuously across cabins"""
    if aircraft_type in _layout_cache:
        return _layout_cache[aircraft_type]

    layout = AIRCRAFT_LAYOUTS.get(aircraft_type, AIRCRAFT_LAYOUTS[DEFAULT_AIRCRAFT])
    seat_map: Dict[str, List[List[Seat]]] = {}
    row_number = 1

    for cabin in CABIN_ORDER:
        if cabin.value not in layout:
            continue
        rows, seats_per_row = layout[cabin.value]
        cabin_rows = []
        for row_index in range(rows):
            row_seats = []
            for seat_index in range(seats_per_row):
                letter = chr(ord("A") + seat_index)
                row_seats.append(Seat(
                    id=f"{row_number}{letter}",
                    row=row_number,
                    letter=letter,
                    cabin=cabin,
                    type=classify_seat(row_index, seat_index, seats_per_row),
                ))
            cabin_rows.append(row_seats)
            row_number += 1
        seat_map[cabin.value] = cabin_rows

    _layout_cache[aircraft_type] = seat_map
    return seat_map


def _arrival_time(hour: int, minute: int, duration: str) -> str:
    hours_part, minutes_part = duration.split("h ")
    duration_hours = int(hours_part)
    duration_minutes = int(minutes_part.replace("m", ""))

    arrival_hour = (hour + duration_hours + (minute + duration_minutes) // 60) % 24
    arrival_minute = (minute + duration_minutes) % 60
    return f"{arrival_hour:02d}:{arrival_minute:02d}"


def generate_flights(
    start_date: Optional[date] = None,
    days: int = 30,
    seed: int = 2024,
) -> List[Flight]:
    """Generate 2-4 flights per route per day for ``days`` days"""
    rng = random.Random(seed)
    start_date = start_date or date.today()
    aircraft_types = list(AIRCRAFT_LAYOUTS.keys())

    flights = []
    flight_counter = 1

    for day_offset in range(days):
        flight_date = (start_date + timedelta(days=day_offset)).isoformat()

        for origin, destination, duration, *prices in ROUTES:
            flights_per_day = rng.randint(2, 4)

            for flight_index in range(flights_per_day):
                aircraft = rng.choice(aircraft_types)
                layout = get_aircraft_layout(aircraft)

                # Spread departures through the day
                base_hour = (flight_index * 24) // flights_per_day
                hour = (base_hour + rng.randint(0, 2)) % 24
                minute = rng.randint(0, 59)

                # +/- 20% price variation around the route price
                variation = Decimal(str(round(0.8 + rng.random() * 0.4, 4)))
                base_fares = {
                    cabin.value: (Decimal(price) * variation).quantize(Decimal("1"))
                    for cabin, price in zip(
                        [CabinClass.ECONOMY, CabinClass.PREMIUM, CabinClass.BUSINESS, CabinClass.FIRST],
                        prices,
                    )
                }

                # 80-100% of capacity still for sale
                available_seats = {
                    cabin: int(capacity * (0.8 + rng.random() * 0.2))
                    for cabin, capacity in layout.capacity.items()
                }

                flights.append(Flight(
                    id=f"SL{flight_counter:03d}",
                    flight_number=f"SL {flight_counter:03d}",
                    airline=AIRLINE,
                    aircraft=aircraft,
                    origin=origin,
                    destination=destination,
                    date=flight_date,
                    departure_time=f"{hour:02d}:{minute:02d}",
                    arrival_time=_arrival_time(hour, minute, duration),
                    duration=duration,
                    capacity=dict(layout.capacity),
                    available_seats=available_seats,
                    base_fares=base_fares,
                    taxes=Decimal(rng.randint(50, 249)),
                    surcharges=Decimal(rng.randint(25, 124)),
                    amenities=list(AMENITIES),
                    status="active",
                    seat_map=generate_seat_map(aircraft),
                ))
                flight_counter += 1

    return flights
