import pytest
from decimal import Decimal

from skylux.catalog.schemas import CabinClass, SeatType
from skylux.exceptions import NotFound, ValidationError
from skylux.fares.schemas import FareBreakdown, FlightFareSelection, SeatSelection

class TestFareComponents:

    def test_base_fare_times_passengers(self, fare_engine):
        quote = fare_engine.base_fare("SL001", "economy", 2)

        assert quote.base_fare_per_person == Decimal("299")
        assert quote.total_base_fare == Decimal("598")

    def test_unknown_cabin_has_zero_base_fare(self, fare_engine):
        assert fare_engine.base_fare("SL001", "galactic", 2).total_base_fare == Decimal("0")

    def test_unknown_flight(self, fare_engine):
        with pytest.raises(NotFound):
            fare_engine.base_fare("SL999", "economy", 1)
        with pytest.raises(NotFound):
            fare_engine.taxes_and_surcharges("SL999", 1)

    def test_taxes_and_surcharges(self, fare_engine):
        quote = fare_engine.taxes_and_surcharges("SL001", 3)

        assert quote.total_taxes == Decimal("150")
        assert quote.total_surcharges == Decimal("75")
        assert quote.total_taxes_and_surcharges == Decimal("225")

    def test_seat_upgrade_uses_seat_cabin(self, fare_engine):
        quote = fare_engine.seat_upgrade_fare("SL001", "3A")

        assert quote.cabin == CabinClass.BUSINESS
        assert quote.seat_type == SeatType.EXTRA_LEGROOM
        assert quote.upgrade_fee == Decimal("100")

    def test_seat_upgrade_with_explicit_cabin(self, fare_engine):
        assert fare_engine.seat_upgrade_fare("SL001", "12A", "premium").upgrade_fee == Decimal("75")

    def test_seat_upgrade_unknown_seat(self, fare_engine):
        with pytest.raises(NotFound, match="Seat 99Z not found"):
            fare_engine.seat_upgrade_fare("SL001", "99Z")

class TestTotalFare:

    def test_two_passengers_no_seats_no_promo(self, fare_engine):
        breakdown = fare_engine.total_fare("SL001", 2).fare_breakdown

        assert breakdown.base_fare == Decimal("598")
        assert breakdown.taxes == Decimal("100")
        assert breakdown.surcharges == Decimal("50")
        assert breakdown.seat_upgrades == Decimal("0")
        assert breakdown.subtotal == Decimal("748")
        assert breakdown.discount == Decimal("0")
        assert breakdown.total_fare == Decimal("748")

    def test_welcome10_discount(self, fare_engine):
        quote = fare_engine.total_fare("SL001", 2, promo_code="WELCOME10")

        assert quote.fare_breakdown.discount == Decimal("74.80")
        assert quote.fare_breakdown.total_fare == Decimal("673.20")
        assert quote.promo_details.code == "WELCOME10"
        assert quote.promo_error is None

    def test_quote_does_not_consume_promo(self, fare_engine, ledger):
        fare_engine.total_fare("SL001", 2, promo_code="WELCOME10")

        assert ledger.get_promo_code("WELCOME10").used_count == 0

    def test_promo_below_minimum_leaves_discount_at_zero(self, fare_engine):
        """SAVE50 needs $200; SL003 for one passenger is $80"""
        quote = fare_engine.total_fare("SL003", 1, promo_code="SAVE50")

        assert quote.fare_breakdown.subtotal == Decimal("80")
        assert quote.fare_breakdown.discount == Decimal("0")
        assert quote.fare_breakdown.total_fare == Decimal("80")
        assert quote.promo_error == "Minimum amount of $200 required for this promo code"

    def test_seat_upgrades_are_added(self, fare_engine):
        seats = [
            SeatSelection(seat_id="12A", passenger_id="p1"),
            SeatSelection(seat_id="14A", passenger_id="p2"),
        ]

        quote = fare_engine.total_fare("SL001", 2, seats)

        assert quote.fare_breakdown.seat_upgrades == Decimal("75")
        assert quote.fare_breakdown.subtotal == Decimal("823")
        assert [d.upgrade_fee for d in quote.seat_upgrade_details] == [Decimal("50"), Decimal("25")]

    def test_first_selected_seat_decides_cabin(self, fare_engine):
        quote = fare_engine.total_fare("SL001", 1, [SeatSelection(seat_id="3A")])

        assert quote.cabin == CabinClass.BUSINESS
        assert quote.fare_breakdown.base_fare == Decimal("1299")

    def test_explicit_cabin_wins_over_seats(self, fare_engine):
        quote = fare_engine.total_fare("SL001", 1, [SeatSelection(seat_id="3A")], cabin=CabinClass.PREMIUM)

        assert quote.cabin == CabinClass.PREMIUM
        assert quote.fare_breakdown.base_fare == Decimal("549")

    def test_unknown_cabin_is_rejected(self, fare_engine):
        with pytest.raises(ValidationError) as exc_info:
            fare_engine.total_fare("SL001", 1, cabin="ultra")

        assert exc_info.value.errors == ["Unknown cabin class: ultra"]

    def test_unknown_seats_are_left_out(self, fare_engine):
        quote = fare_engine.total_fare("SL001", 1, [SeatSelection(seat_id="99Z")])

        assert quote.fare_breakdown.seat_upgrades == Decimal("0")
        assert quote.seat_upgrade_details == []

    def test_total_never_negative(self):
        breakdown = FareBreakdown.build(Decimal("10"), Decimal("0"), Decimal("0"), Decimal("0"), Decimal("25"))

        assert breakdown.total_fare == Decimal("0")

class TestMultiFlightFare:

    def test_segments_are_summed_before_one_discount(self, fare_engine):
        flights = [
            FlightFareSelection(flight_id="SL001", cabin=CabinClass.ECONOMY),
            FlightFareSelection(flight_id="SL002", cabin=CabinClass.ECONOMY),
        ]

        quote = fare_engine.multi_flight_fare(flights, 2, promo_code="WELCOME10")

        # SL001: 598 + 100 + 50, SL002: 640 + 120 + 60
        assert quote.fare_breakdown.subtotal == Decimal("1568")
        assert quote.fare_breakdown.discount == Decimal("156.80")
        assert quote.fare_breakdown.total_fare == Decimal("1411.20")
        assert [s.fare_breakdown.subtotal for s in quote.flight_breakdowns] == [Decimal("748"), Decimal("820")]

    def test_each_segment_uses_its_own_cabin_and_seats(self, fare_engine):
        flights = [
            FlightFareSelection(flight_id="SL001", cabin=CabinClass.ECONOMY),
            FlightFareSelection(flight_id="SL002", cabin=CabinClass.BUSINESS),
        ]
        seats = [
            SeatSelection(seat_id="12A", passenger_id="p1", flight_id="SL001"),
            SeatSelection(seat_id="3A", passenger_id="p1", flight_id="SL002"),
        ]

        quote = fare_engine.multi_flight_fare(flights, 1, seats)

        first, second = quote.flight_breakdowns
        assert first.fare_breakdown.base_fare == Decimal("299")
        assert first.fare_breakdown.seat_upgrades == Decimal("50")
        assert second.fare_breakdown.base_fare == Decimal("1299")
        assert second.fare_breakdown.seat_upgrades == Decimal("100")
        assert quote.fare_breakdown.seat_upgrades == Decimal("150")

class TestFareComparison:

    def test_savings_against_economy(self, fare_engine):
        comparison = fare_engine.fare_comparison("SL001", 1).comparison

        assert comparison["economy"].savings == Decimal("0")
        assert comparison["economy"].total_fare == Decimal("374")
        assert comparison["business"].total_fare == Decimal("1374")
        assert comparison["business"].savings == Decimal("-1000")

    def test_cabins_without_capacity_are_skipped(self, fare_engine, catalog, flight_factory):
        catalog.add_flight(flight_factory(
            "SL030", capacity={"economy": 100, "premium": 0, "business": 20, "first": 0}
        ))

        comparison = fare_engine.fare_comparison("SL030", 2).comparison

        assert set(comparison) == {"economy", "business"}
        assert comparison["economy"].available_seats == 100
