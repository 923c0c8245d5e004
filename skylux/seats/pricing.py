from decimal import Decimal
from typing import Dict

from skylux.catalog.schemas import CabinClass, SeatType

# Upgrade fee per cabin and seat type; types missing from a cabin cost nothing
SEAT_PRICING: Dict[str, Dict[str, Decimal]] = {
    CabinClass.ECONOMY.value: {
        SeatType.STANDARD.value: Decimal("0"),
        SeatType.EXTRA_LEGROOM.value: Decimal("50"),
        SeatType.EMERGENCY_EXIT.value: Decimal("75"),
        SeatType.WINDOW.value: Decimal("25"),
        SeatType.AISLE.value: Decimal("25"),
    },
    CabinClass.PREMIUM.value: {
        SeatType.STANDARD.value: Decimal("0"),
        SeatType.EXTRA_LEGROOM.value: Decimal("75"),
        SeatType.EMERGENCY_EXIT.value: Decimal("100"),
        SeatType.WINDOW.value: Decimal("35"),
        SeatType.AISLE.value: Decimal("35"),
    },
    CabinClass.BUSINESS.value: {
        SeatType.STANDARD.value: Decimal("0"),
        SeatType.EXTRA_LEGROOM.value: Decimal("100"),
        SeatType.WINDOW.value: Decimal("50"),
        SeatType.AISLE.value: Decimal("50"),
    },
    CabinClass.FIRST.value: {
        SeatType.STANDARD.value: Decimal("0"),
        SeatType.WINDOW.value: Decimal("75"),
        SeatType.AISLE.value: Decimal("75"),
    },
}


def get_seat_price(seat_type, cabin) -> Decimal:
    """Upgrade fee for a seat type; unknown cabins use the economy table"""
    cabin_key = cabin.value if isinstance(cabin, CabinClass) else str(cabin or "").lower()
    type_key = seat_type.value if isinstance(seat_type, SeatType) else str(seat_type)

    cabin_pricing = SEAT_PRICING.get(cabin_key, SEAT_PRICING[CabinClass.ECONOMY.value])
    return cabin_pricing.get(type_key, Decimal("0"))
