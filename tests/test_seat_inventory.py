import pytest
from decimal import Decimal

from skylux.catalog.schemas import CabinClass
from skylux.exceptions import NotFound, SeatUnavailable
from skylux.seats.pricing import get_seat_price
from skylux.seats.schemas import AutoAssignPreferences, PassengerSeatInfo, SeatStatus

class TestSeatAssignment:

    def test_assign_marks_seat_booked(self, inventory):
        state = inventory.assign("SL002", "12A", "P1")

        assert state.status == SeatStatus.BOOKED
        assert inventory.get_seat_status("SL002", "12A").passenger_id == "P1"

    def test_assign_occupied_seat_fails_and_keeps_occupant(self, inventory):
        """Test a second passenger cannot take a held seat"""
        inventory.assign("SL002", "12A", "P1")

        with pytest.raises(SeatUnavailable, match="Seat 12A is not available"):
            inventory.assign("SL002", "12A", "P2")

        status = inventory.get_seat_status("SL002", "12A")
        assert status.status == SeatStatus.BOOKED
        assert status.passenger_id == "P1"

    def test_gender_drives_occupied_status(self, inventory):
        assert inventory.assign("SL001", "14A", "P1", gender="female").status == SeatStatus.OCCUPIED_FEMALE
        assert inventory.assign("SL001", "14B", "P2", gender="male").status == SeatStatus.OCCUPIED_MALE

    def test_assign_unknown_seat_or_flight(self, inventory):
        with pytest.raises(NotFound):
            inventory.assign("SL001", "99Z", "P1")
        with pytest.raises(NotFound):
            inventory.assign("SL999", "12A", "P1")

    def test_release_is_idempotent(self, inventory):
        inventory.assign("SL001", "14A", "P1")

        inventory.release("SL001", "14A")
        inventory.release("SL001", "14A")

        assert inventory.get_seat_status("SL001", "14A").status == SeatStatus.AVAILABLE

    def test_release_for_a_holder_only_frees_its_own_seat(self, inventory):
        inventory.assign("SL001", "14A", "P1", holder="booking-1")

        assert inventory.release("SL001", "14A", holder="booking-2") is False
        assert inventory.get_seat_status("SL001", "14A").status == SeatStatus.BOOKED
        assert inventory.release("SL001", "14A", holder="booking-1") is True
        assert inventory.release("SL001", "14A", holder="booking-1") is False

    def test_seat_can_be_taken_again_after_release(self, inventory):
        inventory.assign("SL001", "14A", "P1")
        inventory.release("SL001", "14A")

        assert inventory.assign("SL001", "14A", "P2").passenger_id == "P2"

class TestSeatMoves:

    def test_assign_seat_frees_previous_seat(self, inventory):
        inventory.assign_seat("SL001", "P1", "14A")

        assignment = inventory.assign_seat(
            "SL001", "P1", "15C", PassengerSeatInfo(first_name="Alice", last_name="Walker")
        )

        assert assignment.seat_id == "15C"
        assert assignment.passenger_name == "Alice Walker"
        assert inventory.get_seat_status("SL001", "14A").status == SeatStatus.AVAILABLE
        assert inventory.find_passenger_seat("SL001", "P1") == "15C"

    def test_move_to_taken_seat_keeps_previous_seat(self, inventory):
        inventory.assign_seat("SL001", "P1", "14A")
        inventory.assign_seat("SL001", "P2", "15C")

        with pytest.raises(SeatUnavailable):
            inventory.swap_seat("SL001", "P1", "15C")

        assert inventory.find_passenger_seat("SL001", "P1") == "14A"
        assert inventory.find_passenger_seat("SL001", "P2") == "15C"

    def test_reassigning_same_seat_is_a_no_op(self, inventory):
        inventory.assign_seat("SL001", "P1", "14A")

        assignment = inventory.assign_seat("SL001", "P1", "14A")

        assert assignment.seat_id == "14A"
        assert inventory.get_passenger_assignments("SL001")[0].passenger_id == "P1"

    def test_release_passenger_seat(self, inventory):
        inventory.assign_seat("SL001", "P1", "14A")

        assert inventory.release_passenger_seat("SL001", "P1") == "14A"
        assert inventory.release_passenger_seat("SL001", "P1") is None

    def test_moves_leave_a_booking_held_seat_alone(self, inventory):
        inventory.assign("SL001", "14A", "P1", holder="booking-1")

        inventory.assign_seat("SL001", "P1", "15C")

        assert inventory.get_seat_status("SL001", "14A").status == SeatStatus.BOOKED
        assert inventory.find_passenger_seat("SL001", "P1", holder="booking-1") == "14A"
        assert inventory.find_passenger_seat("SL001", "P1") == "15C"
        assert inventory.release_passenger_seat("SL001", "P1") == "15C"
        assert inventory.get_seat_status("SL001", "14A").status == SeatStatus.BOOKED

    def test_move_within_a_booking(self, inventory):
        inventory.assign("SL001", "14A", "P1", holder="booking-1")

        inventory.swap_seat("SL001", "P1", "15C", holder="booking-1")

        assert inventory.get_seat_status("SL001", "14A").status == SeatStatus.AVAILABLE
        assert inventory.find_passenger_seat("SL001", "P1", holder="booking-1") == "15C"

class TestAutoAssign:

    def test_window_preference_comes_first(self, inventory):
        passengers = [PassengerSeatInfo(id="P1"), PassengerSeatInfo(id="P2")]

        assignments = inventory.auto_assign(
            "SL001", passengers, CabinClass.ECONOMY, AutoAssignPreferences(seat_type="window")
        )

        assert [a.seat_id for a in assignments] == ["14A", "14I"]

    def test_without_preference_orders_by_row_then_letter(self, inventory):
        assignments = inventory.auto_assign("SL001", [PassengerSeatInfo(id="P1")], "first")

        assert assignments[0].seat_id == "1A"

    def test_extra_passengers_stay_unassigned(self, inventory):
        first_class = [seat.id for seat in inventory.catalog.get_flight("SL001").iter_seats("first")]
        for index, seat_id in enumerate(first_class[:-1]):
            inventory.assign("SL001", seat_id, f"X{index}")

        passengers = [PassengerSeatInfo(id="P1"), PassengerSeatInfo(id="P2")]
        assignments = inventory.auto_assign("SL001", passengers, "first")

        assert len(assignments) == 1
        assert assignments[0].seat_id == first_class[-1]

    def test_passengers_without_id_get_distinct_ids(self, inventory):
        assignments = inventory.auto_assign("SL001", [PassengerSeatInfo(), PassengerSeatInfo()], "premium")

        ids = [a.passenger_id for a in assignments]
        assert len(set(ids)) == 2
        assert all(passenger_id.startswith("passenger-") for passenger_id in ids)

    def test_repeated_runs_keep_earlier_seats(self, inventory):
        first = inventory.auto_assign("SL001", [PassengerSeatInfo()], "premium")[0]
        second = inventory.auto_assign("SL001", [PassengerSeatInfo()], "premium")[0]

        assert (first.seat_id, second.seat_id) == ("8A", "8B")
        assert inventory.get_seat_status("SL001", "8A").status == SeatStatus.BOOKED
        assert len(inventory.get_passenger_assignments("SL001")) == 2

class TestSeatViews:

    def test_seat_map_merges_status_and_price(self, inventory):
        inventory.assign("SL001", "12A", "P1")

        seat_map = inventory.get_seat_map("SL001")
        economy_row = seat_map.seat_map["economy"][1]

        assert economy_row[0].id == "12A"
        assert economy_row[0].status == SeatStatus.BOOKED
        assert economy_row[0].occupied_by == "P1"
        assert economy_row[0].price == Decimal("50")

    def test_special_seats(self, inventory):
        special = inventory.highlight_special_seats("SL001")

        assert "12A" in special.extra_legroom
        assert "23A" in special.emergency_exit
        assert "14A" in special.window
        assert "14C" in special.aisle

    def test_selection_summary_totals_upgrade_fees(self, inventory):
        inventory.assign("SL001", "12A", "P1")
        inventory.assign("SL001", "14A", "P2")
        inventory.assign("SL001", "14B", "P3")

        summary = inventory.get_seat_selection_summary("SL001", ["P1", "P2"])

        assert summary.total_assignments == 2
        assert summary.total_upgrade_fee == Decimal("75")

class TestSeatPricing:

    def test_prices_by_cabin_and_type(self):
        assert get_seat_price("emergency_exit", "economy") == Decimal("75")
        assert get_seat_price("extra_legroom", "business") == Decimal("100")
        assert get_seat_price("window", "first") == Decimal("75")
        assert get_seat_price("standard", "premium") == Decimal("0")

    def test_unknown_cabin_uses_economy_prices(self):
        assert get_seat_price("aisle", "galactic") == Decimal("25")

    def test_unlisted_type_costs_nothing(self):
        assert get_seat_price("emergency_exit", "first") == Decimal("0")
