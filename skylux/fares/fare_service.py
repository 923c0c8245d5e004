import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from skylux.catalog.schemas import CABIN_ORDER, CabinClass, Flight
from skylux.catalog.service import FlightCatalog
from skylux.exceptions import NotFound, PromoInvalid, ValidationError
from skylux.fares.schemas import (
    BaseFareQuote, CabinFareComparison, FareBreakdown, FareComparison, FareQuote,
    FlightFareSelection, MultiFlightFareQuote, SeatSelection, SeatUpgradeQuote,
    SegmentFare, TaxQuote
)
from skylux.promotions.ledger import PromotionLedger
from skylux.promotions.schemas import PromoSummary
from skylux.seats.pricing import get_seat_price

logger = logging.getLogger(__name__)

class FareEngine:
    """
    Fare computation over catalog flights.

    Nothing here mutates state: promo codes are only quoted, never consumed.
    Amounts stay exact until a discount is computed, which rounds to cents.
    """

    def __init__(self, catalog: FlightCatalog, ledger: PromotionLedger):
        self.catalog = catalog
        self.ledger = ledger

    def base_fare(self, flight_id: str, cabin: str, passenger_count: int) -> BaseFareQuote:
        """Per-person base fare times passengers; a cabin without a fare costs 0"""
        flight = self.catalog.require_flight(flight_id)
        per_person = flight.get_base_fare(cabin)

        return BaseFareQuote(
            flight_id=flight.id,
            cabin=getattr(cabin, "value", cabin),
            passengers=passenger_count,
            base_fare_per_person=per_person,
            total_base_fare=per_person * passenger_count
        )

    def taxes_and_surcharges(self, flight_id: str, passenger_count: int = 1) -> TaxQuote:
        flight = self.catalog.require_flight(flight_id)
        total_taxes = flight.taxes * passenger_count
        total_surcharges = flight.surcharges * passenger_count

        return TaxQuote(
            flight_id=flight.id,
            passengers=passenger_count,
            taxes_per_person=flight.taxes,
            surcharges_per_person=flight.surcharges,
            total_taxes=total_taxes,
            total_surcharges=total_surcharges,
            total_taxes_and_surcharges=total_taxes + total_surcharges
        )

    def seat_upgrade_fare(
        self,
        flight_id: str,
        seat_id: str,
        cabin: Optional[str] = None,
        passenger_id: Optional[str] = None
    ) -> SeatUpgradeQuote:
        """Upgrade fee of one seat, priced with ``cabin`` or the seat's own cabin"""
        flight = self.catalog.require_flight(flight_id)
        seat = flight.find_seat(seat_id)
        if not seat:
            raise NotFound(f"Seat {seat_id} not found on flight {flight_id}")

        return SeatUpgradeQuote(
            flight_id=flight.id,
            seat_id=seat.id,
            seat_type=seat.type,
            cabin=seat.cabin,
            upgrade_fee=get_seat_price(seat.type, cabin or seat.cabin),
            passenger_id=passenger_id
        )

    # ================================
    # Totals
    # ================================

    def _resolve_cabin(
        self,
        flight: Flight,
        cabin: Optional[str],
        selected_seats: Sequence[SeatSelection]
    ) -> CabinClass:
        if cabin:
            try:
                return CabinClass(getattr(cabin, "value", cabin))
            except ValueError:
                raise ValidationError([f"Unknown cabin class: {cabin}"])

        # Without an explicit cabin the first selected seat decides
        if selected_seats:
            seat = flight.find_seat(selected_seats[0].seat_id)
            if seat:
                return seat.cabin

        return CabinClass.ECONOMY

    def _price_segment(
        self,
        flight: Flight,
        cabin: CabinClass,
        passenger_count: int,
        selected_seats: Sequence[SeatSelection]
    ) -> Tuple[FareBreakdown, List[SeatUpgradeQuote]]:
        base = self.base_fare(flight.id, cabin, passenger_count)
        taxes = self.taxes_and_surcharges(flight.id, passenger_count)

        upgrades = []
        for selection in selected_seats:
            try:
                upgrades.append(self.seat_upgrade_fare(
                    flight.id, selection.seat_id, passenger_id=selection.passenger_id
                ))
            except NotFound:
                logger.debug("Unknown seat %s on %s left out of fare", selection.seat_id, flight.id)

        breakdown = FareBreakdown.build(
            base_fare=base.total_base_fare,
            taxes=taxes.total_taxes,
            surcharges=taxes.total_surcharges,
            seat_upgrades=sum((u.upgrade_fee for u in upgrades), Decimal("0"))
        )
        return breakdown, upgrades

    def _quote_promo(
        self,
        promo_code: Optional[str],
        amount: Decimal,
        cabin: Optional[CabinClass],
        route: Optional[str]
    ) -> Tuple[Decimal, Optional[PromoSummary], Optional[str]]:
        """Discount for a code without recording a use; an invalid code gives 0"""
        if not promo_code:
            return Decimal("0"), None, None

        try:
            quote = self.ledger.get_discount_amount(promo_code, amount, cabin, route)
        except PromoInvalid as e:
            return Decimal("0"), None, e.message

        return quote.discount, quote.promo_details, None

    def total_fare(
        self,
        flight_id: str,
        passengers: int,
        selected_seats: Optional[Sequence[SeatSelection]] = None,
        promo_code: Optional[str] = None,
        cabin: Optional[str] = None
    ) -> FareQuote:
        """
        Fare of one flight for ``passengers`` travellers.

        The cabin is ``cabin`` when given, else the cabin of the first selected
        seat, else economy. Seats that do not exist on the flight are left out.
        """
        flight = self.catalog.require_flight(flight_id)
        selected_seats = [
            s for s in (selected_seats or [])
            if not s.flight_id or s.flight_id == flight_id
        ]
        travel_class = self._resolve_cabin(flight, cabin, selected_seats)

        breakdown, upgrades = self._price_segment(flight, travel_class, passengers, selected_seats)
        discount, promo_details, promo_error = self._quote_promo(
            promo_code, breakdown.subtotal, travel_class, flight.route
        )

        return FareQuote(
            flight_id=flight.id,
            cabin=travel_class,
            passengers=passengers,
            fare_breakdown=breakdown.with_discount(discount),
            seat_upgrade_details=upgrades,
            promo_details=promo_details,
            promo_error=promo_error
        )

    def multi_flight_fare(
        self,
        flights: Sequence[FlightFareSelection],
        passengers: int,
        seat_selections: Optional[Sequence[SeatSelection]] = None,
        promo_code: Optional[str] = None
    ) -> MultiFlightFareQuote:
        """Sum every segment in its own cabin, then apply one discount to the total"""
        seat_selections = seat_selections or []

        segments = []
        base_fare = taxes = surcharges = seat_upgrades = Decimal("0")
        for index, selection in enumerate(flights):
            flight = self.catalog.require_flight(selection.flight_id)
            flight_seats = [s for s in seat_selections if s.flight_id == flight.id]

            breakdown, upgrades = self._price_segment(flight, selection.cabin, passengers, flight_seats)
            base_fare += breakdown.base_fare
            taxes += breakdown.taxes
            surcharges += breakdown.surcharges
            seat_upgrades += breakdown.seat_upgrades

            segments.append(SegmentFare(
                flight_index=index + 1,
                flight_id=flight.id,
                cabin=selection.cabin,
                fare_breakdown=breakdown,
                seat_upgrade_details=upgrades
            ))

        combined = FareBreakdown.build(base_fare, taxes, surcharges, seat_upgrades)

        cabin = flights[0].cabin if flights else None
        route = self.catalog.require_flight(flights[0].flight_id).route if len(flights) == 1 else None
        discount, promo_details, promo_error = self._quote_promo(
            promo_code, combined.subtotal, cabin, route
        )

        return MultiFlightFareQuote(
            passengers=passengers,
            fare_breakdown=combined.with_discount(discount),
            flight_breakdowns=segments,
            promo_details=promo_details,
            promo_error=promo_error
        )

    def fare_comparison(self, flight_id: str, passenger_count: int) -> FareComparison:
        """Totals per cabin and savings against economy"""
        flight = self.catalog.require_flight(flight_id)
        economy_total = flight.get_total_fare(CabinClass.ECONOMY, passenger_count)

        comparison = {}
        for cabin in reversed(CABIN_ORDER):
            if flight.capacity.get(cabin.value, 0) <= 0:
                continue

            total = flight.get_total_fare(cabin, passenger_count)
            comparison[cabin.value] = CabinFareComparison(
                base_fare=flight.get_base_fare(cabin) * passenger_count,
                total_fare=total,
                available_seats=flight.get_available_seats(cabin),
                savings=Decimal("0") if cabin == CabinClass.ECONOMY else economy_total - total
            )

        return FareComparison(flight_id=flight.id, passengers=passenger_count, comparison=comparison)
