from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from decimal import Decimal

from skylux.catalog.schemas import CabinClass, SeatType
from skylux.promotions.schemas import PromoSummary

class FareBreakdown(BaseModel):
    """
    Derived fare amounts in USD.

    ``subtotal`` is the exact sum of the four components; ``total_fare`` is
    ``max(0, subtotal - discount)``.
    """
    base_fare: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    surcharges: Decimal = Decimal("0")
    seat_upgrades: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    total_fare: Decimal = Decimal("0")
    currency: str = "USD"

    @classmethod
    def build(
        cls,
        base_fare: Decimal,
        taxes: Decimal,
        surcharges: Decimal,
        seat_upgrades: Decimal,
        discount: Decimal = Decimal("0")
    ) -> "FareBreakdown":
        subtotal = base_fare + taxes + surcharges + seat_upgrades
        return cls(
            base_fare=base_fare,
            taxes=taxes,
            surcharges=surcharges,
            seat_upgrades=seat_upgrades,
            subtotal=subtotal,
            discount=discount,
            total_fare=max(Decimal("0"), subtotal - discount)
        )

    def with_discount(self, discount: Decimal) -> "FareBreakdown":
        return FareBreakdown.build(
            self.base_fare, self.taxes, self.surcharges, self.seat_upgrades, discount
        )

class SeatSelection(BaseModel):
    """A seat picked for a passenger on one flight"""
    seat_id: str
    passenger_id: Optional[str] = None
    flight_id: Optional[str] = None

class FlightFareSelection(BaseModel):
    flight_id: str
    cabin: CabinClass = CabinClass.ECONOMY

class BaseFareQuote(BaseModel):
    flight_id: str
    cabin: str
    passengers: int
    base_fare_per_person: Decimal
    total_base_fare: Decimal
    currency: str = "USD"

class TaxQuote(BaseModel):
    flight_id: str
    passengers: int
    taxes_per_person: Decimal
    surcharges_per_person: Decimal
    total_taxes: Decimal
    total_surcharges: Decimal
    total_taxes_and_surcharges: Decimal
    currency: str = "USD"

class SeatUpgradeQuote(BaseModel):
    flight_id: str
    seat_id: str
    seat_type: SeatType
    cabin: CabinClass
    upgrade_fee: Decimal
    passenger_id: Optional[str] = None
    currency: str = "USD"

class FareQuote(BaseModel):
    """Single-flight fare with seat upgrade and promo details"""
    flight_id: str
    cabin: CabinClass
    passengers: int
    fare_breakdown: FareBreakdown
    seat_upgrade_details: List[SeatUpgradeQuote] = []
    promo_details: Optional[PromoSummary] = None
    promo_error: Optional[str] = None
    currency: str = "USD"

class SegmentFare(BaseModel):
    flight_index: int
    flight_id: str
    cabin: CabinClass
    fare_breakdown: FareBreakdown
    seat_upgrade_details: List[SeatUpgradeQuote] = []

class MultiFlightFareQuote(BaseModel):
    """Fare across segments with one discount on the combined subtotal"""
    passengers: int
    fare_breakdown: FareBreakdown
    flight_breakdowns: List[SegmentFare]
    promo_details: Optional[PromoSummary] = None
    promo_error: Optional[str] = None
    currency: str = "USD"

class CabinFareComparison(BaseModel):
    base_fare: Decimal
    total_fare: Decimal
    available_seats: int
    savings: Decimal

class FareComparison(BaseModel):
    flight_id: str
    passengers: int
    comparison: Dict[str, CabinFareComparison]
    currency: str = "USD"

# Request Models
class FareCalculationRequest(BaseModel):
    """Request to price one flight"""
    flight_id: str
    passengers: int = Field(1, ge=1, le=9)
    selected_seats: List[SeatSelection] = []
    promo_code: Optional[str] = None
    cabin: Optional[CabinClass] = None

class MultiFlightFareRequest(BaseModel):
    flights: List[FlightFareSelection] = Field(..., min_length=1)
    passengers: int = Field(1, ge=1, le=9)
    seat_selections: List[SeatSelection] = []
    promo_code: Optional[str] = None

class BaseFareRequest(BaseModel):
    flight_id: str
    cabin: str = "economy"
    passengers: int = Field(1, ge=1, le=9)

class SeatUpgradeRequest(BaseModel):
    flight_id: str
    seat_id: str
    cabin: Optional[CabinClass] = None
