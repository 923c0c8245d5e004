import logging
import secrets
import string
import threading
import uuid
from datetime import datetime
from decimal import Decimal
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from skylux.bookings.schemas import (
    BookedFlight, Booking, BookingConfirmation, BookingStatus, BookingSummary,
    BookingUpdateResult, CancellationResult, ContactInfo, EmailResult, ETicketResult,
    FlightSelection, PassengerInfo, PaymentInfo, PaymentMethod, PaymentSummary,
    SeatAssignmentRecord
)
from skylux.bookings.store import BookingRepository
from skylux.bookings.ticket_service import ETicketIssuer
from skylux.bookings.validation import BookingValidator
from skylux.catalog.schemas import CabinClass, Flight
from skylux.catalog.service import FlightCatalog
from skylux.exceptions import (
    AlreadyCancelled, NotFound, PNRGenerationError, PromoInvalid, SeatUnavailable,
    ValidationError
)
from skylux.fares.fare_service import FareEngine
from skylux.fares.schemas import FareBreakdown, FlightFareSelection, SeatSelection
from skylux.promotions.ledger import PromotionLedger
from skylux.seats.inventory import SeatInventory

logger = logging.getLogger(__name__)

PNR_ALPHABET = string.ascii_uppercase + string.digits
PNR_LENGTH = 6

# Booking fields a customer may change after confirmation
UPDATABLE_FIELDS = {
    "contact_info": "contact_info",
    "contactInfo": "contact_info",
    "special_requests": "special_requests",
    "specialRequests": "special_requests",
}

Compensation = Tuple[str, Callable[[], Any]]

class BookingService:
    """
    Confirms, cancels and updates bookings on top of the catalog, seat
    inventory, fare engine and promotion ledger.

    Confirm, cancel and update run one at a time under the service lock; the
    collaborators take their own per-flight and per-code locks inside it.
    Every mutation made while confirming is paired with an undo action, run in
    reverse order if a later step fails, so a failed confirmation leaves no
    seats, counters, promo uses or gift card debits behind.
    """

    def __init__(
        self,
        catalog: FlightCatalog,
        inventory: SeatInventory,
        fare_engine: FareEngine,
        ledger: PromotionLedger,
        repository: BookingRepository,
        ticket_issuer: Optional[ETicketIssuer] = None,
        validator: Optional[BookingValidator] = None,
        strict_seat_assignment: bool = False,
        refund_rate: Decimal = Decimal("0.8"),
        pnr_max_attempts: int = 20,
        pnr_generator: Optional[Callable[[], str]] = None
    ):
        self.catalog = catalog
        self.inventory = inventory
        self.fare_engine = fare_engine
        self.ledger = ledger
        self.repository = repository
        self.ticket_issuer = ticket_issuer
        self.validator = validator or BookingValidator()
        self.strict_seat_assignment = strict_seat_assignment
        self.refund_rate = Decimal(refund_rate)
        self.pnr_max_attempts = pnr_max_attempts
        self._pnr_generator = pnr_generator or self._random_pnr
        self._lock = threading.RLock()

    # ================================
    # References
    # ================================

    @staticmethod
    def _random_pnr() -> str:
        return "".join(secrets.choice(PNR_ALPHABET) for _ in range(PNR_LENGTH))

    def generate_pnr(self) -> str:
        """A PNR not used by any stored booking"""
        for _ in range(self.pnr_max_attempts):
            pnr = self._pnr_generator()
            if not self.repository.pnr_exists(pnr):
                return pnr
        raise PNRGenerationError(
            f"Could not generate a unique PNR after {self.pnr_max_attempts} attempts"
        )

    # ================================
    # Confirmation
    # ================================

    def confirm_booking(
        self,
        passengers: Sequence[PassengerInfo],
        flights: Sequence[FlightSelection],
        selected_seats: Optional[Sequence[SeatSelection]] = None,
        payment_info: Optional[PaymentInfo] = None,
        promo_code: Optional[str] = None
    ) -> BookingConfirmation:
        """Validate, seat, price, charge and store a booking in one step"""
        errors = self.validator.validate_booking_data(passengers, flights, payment_info)
        if errors:
            raise ValidationError(errors)

        passengers = [
            p if p.id else p.model_copy(update={"id": f"passenger-{index + 1}"})
            for index, p in enumerate(passengers)
        ]
        selected_seats = list(selected_seats or [])
        warnings: List[str] = []

        with self._lock:
            resolved = [(s, self.catalog.require_flight(s.flight_id)) for s in flights]
            for selection, flight in resolved:
                if not flight.has_available_seats(selection.cabin, len(passengers)):
                    raise SeatUnavailable(
                        f"Only {flight.get_available_seats(selection.cabin)} {selection.cabin.value} "
                        f"seats left on flight {flight.id}"
                    )

            booking = Booking(
                id=str(uuid.uuid4()),
                pnr=self.generate_pnr(),
                passengers=passengers,
                flights=[self._booked_flight(flight, selection.cabin) for selection, flight in resolved],
                contact_info=ContactInfo(
                    email=passengers[0].email,
                    phone=passengers[0].phone,
                    emergency_contact=passengers[0].emergency_contact
                )
            )

            compensations: List[Compensation] = []
            try:
                booking.seats = self._assign_seats(booking, resolved, selected_seats, compensations, warnings)

                breakdown, cabin, route = self._price(booking, resolved)
                discount = Decimal("0")
                if promo_code:
                    discount = self._apply_promo(booking, promo_code, breakdown, cabin, route, compensations, warnings)

                booking.fare_breakdown = breakdown.with_discount(discount)
                booking.total_fare = booking.fare_breakdown.total_fare
                booking.discount = discount

                booking.payment = self._process_payment(booking, payment_info, compensations)

                for selection, flight in resolved:
                    self.catalog.decrement_availability(flight.id, selection.cabin, len(passengers))
                    compensations.append((
                        f"restore {selection.cabin.value} availability on {flight.id}",
                        partial(self.catalog.increment_availability, flight.id, selection.cabin, len(passengers))
                    ))

                booking.confirm()
                self.repository.add(booking)
            except Exception:
                self._compensate(booking, compensations)
                raise

        logger.info(
            "Booking %s confirmed: %d passenger(s), %d flight(s), total %s",
            booking.pnr, len(booking.passengers), len(booking.flights), booking.total_fare
        )

        if self.ticket_issuer:
            self._issue_after_confirmation(booking, warnings)

        return BookingConfirmation(
            booking=booking,
            e_ticket_generated=booking.e_ticket_generated,
            e_ticket_path=booking.e_ticket_path,
            warnings=warnings
        )

    def _booked_flight(self, flight: Flight, cabin: CabinClass) -> BookedFlight:
        return BookedFlight(
            flight_id=flight.id,
            flight_number=flight.flight_number,
            origin=flight.origin,
            destination=flight.destination,
            date=flight.date,
            departure_time=flight.departure_time,
            arrival_time=flight.arrival_time,
            cabin=cabin,
            base_fare=flight.get_base_fare(cabin)
        )

    def _assign_seats(
        self,
        booking: Booking,
        resolved: List[Tuple[FlightSelection, Flight]],
        selected_seats: List[SeatSelection],
        compensations: List[Compensation],
        warnings: List[str]
    ) -> List[SeatAssignmentRecord]:
        """
        Reserve each requested seat.

        A seat that cannot be reserved is skipped with a warning, or aborts the
        booking when strict seat assignment is on.
        """
        passengers = {p.id: p for p in booking.passengers}
        flights = {flight.id: (selection, flight) for selection, flight in resolved}
        flight_ids = list(flights)
        records = []

        for selection in selected_seats:
            flight_id = selection.flight_id or (flight_ids[0] if len(flight_ids) == 1 else None)
            passenger = passengers.get(selection.passenger_id)

            if flight_id not in flight_ids:
                problem = f"Seat {selection.seat_id}: flight {selection.flight_id} is not part of this booking"
            elif not passenger:
                problem = f"Seat {selection.seat_id}: passenger {selection.passenger_id} not found in booking"
            elif any(r.flight_id == flight_id and r.passenger_id == passenger.id for r in records):
                problem = f"Seat {selection.seat_id}: passenger {passenger.id} already has a seat on flight {flight_id}"
            else:
                problem = self._cabin_mismatch(selection.seat_id, *flights[flight_id])

            if not problem:
                try:
                    self.inventory.assign(
                        flight_id, selection.seat_id, passenger.id, passenger.gender, holder=booking.id
                    )
                except (SeatUnavailable, NotFound) as e:
                    problem = f"Seat {selection.seat_id}: {e.message}"

            if problem:
                if self.strict_seat_assignment:
                    raise SeatUnavailable(problem)
                logger.warning("Booking %s: %s; continuing without it", booking.pnr, problem)
                warnings.append(problem)
                continue

            compensations.append((
                f"release seat {selection.seat_id} on {flight_id}",
                partial(self.inventory.release, flight_id, selection.seat_id, booking.id)
            ))

            upgrade = self.fare_engine.seat_upgrade_fare(flight_id, selection.seat_id)
            records.append(SeatAssignmentRecord(
                passenger_id=passenger.id,
                flight_id=flight_id,
                seat_id=selection.seat_id,
                seat_type=upgrade.seat_type,
                upgrade_fee=upgrade.upgrade_fee
            ))

        return records

    @staticmethod
    def _cabin_mismatch(seat_id: str, selection: FlightSelection, flight: Flight) -> Optional[str]:
        seat = flight.find_seat(seat_id)
        if seat and seat.cabin != selection.cabin:
            return (
                f"Seat {seat_id}: seat is in {seat.cabin.value} but flight {flight.id} "
                f"is booked in {selection.cabin.value}"
            )
        return None

    def _price(
        self,
        booking: Booking,
        resolved: List[Tuple[FlightSelection, Flight]]
    ) -> Tuple[FareBreakdown, CabinClass, Optional[str]]:
        """Fare before discount, plus the cabin and route a promo is checked against"""
        seats = [
            SeatSelection(seat_id=r.seat_id, passenger_id=r.passenger_id, flight_id=r.flight_id)
            for r in booking.seats
        ]
        passenger_count = len(booking.passengers)
        first_selection, first_flight = resolved[0]

        if len(resolved) == 1:
            quote = self.fare_engine.total_fare(
                first_flight.id, passenger_count, seats, cabin=first_selection.cabin
            )
            return quote.fare_breakdown, first_selection.cabin, first_flight.route

        quote = self.fare_engine.multi_flight_fare(
            [FlightFareSelection(flight_id=flight.id, cabin=s.cabin) for s, flight in resolved],
            passenger_count,
            seats
        )
        return quote.fare_breakdown, first_selection.cabin, None

    def _apply_promo(
        self,
        booking: Booking,
        promo_code: str,
        breakdown: FareBreakdown,
        cabin: CabinClass,
        route: Optional[str],
        compensations: List[Compensation],
        warnings: List[str]
    ) -> Decimal:
        """Consume the promo code; an ineligible code leaves the discount at 0"""
        try:
            application = self.ledger.apply_promo_code(
                promo_code, booking.id, breakdown.subtotal, cabin, route
            )
        except PromoInvalid as e:
            logger.warning("Booking %s: promo code %s not applied: %s", booking.pnr, promo_code, e.message)
            warnings.append(f"Promo code {promo_code.upper()} not applied: {e.message}")
            return Decimal("0")

        compensations.append((
            f"revoke promo {application.promo_details.code}",
            partial(self.ledger.revoke_promo_usage, application.promo_details.code, booking.id)
        ))
        booking.promo_code = application.promo_details.code
        return application.discount

    def _process_payment(
        self,
        booking: Booking,
        payment_info: PaymentInfo,
        compensations: List[Compensation]
    ) -> PaymentSummary:
        """Record the payment; a gift card covers what it can and the method pays the rest"""
        amount_due = booking.total_fare
        gift_card_amount = Decimal("0")

        if payment_info.gift_card_code and amount_due > 0:
            application = self.ledger.apply_gift_card(payment_info.gift_card_code, booking.id, amount_due)
            gift_card_amount = application.amount_applied
            compensations.append((
                f"refund gift card {application.code}",
                partial(self.ledger.refund_gift_card, application.code, booking.id, gift_card_amount)
            ))

        remainder = amount_due - gift_card_amount
        if payment_info.method == PaymentMethod.GIFT_CARD.value and remainder > 0:
            raise ValidationError([f"Gift card balance is insufficient: ${remainder} remains to be paid"])

        return PaymentSummary(
            method=payment_info.method,
            last4=payment_info.card_number[-4:] if payment_info.card_number else None,
            transaction_id=f"TXN{secrets.token_hex(8).upper()}",
            processed_at=datetime.now(),
            gift_card_code=payment_info.gift_card_code.upper() if gift_card_amount else None,
            gift_card_amount=gift_card_amount,
            amount_charged=remainder
        )

    def _compensate(self, booking: Booking, compensations: List[Compensation]):
        for description, undo in reversed(compensations):
            logger.warning("Booking %s failed, undoing: %s", booking.pnr, description)
            try:
                undo()
            except Exception:
                logger.exception("Booking %s: could not %s", booking.pnr, description)

    def _issue_after_confirmation(self, booking: Booking, warnings: List[str]):
        # The booking is already stored; a ticket failure must not undo it
        try:
            result = self.ticket_issuer.issue_eticket(booking)
        except Exception:
            logger.exception("E-ticket issuance failed for %s", booking.pnr)
            warnings.append("E-ticket could not be issued")
            return

        booking.e_ticket_generated = True
        booking.e_ticket_path = result.file_path

    # ================================
    # Lookup
    # ================================

    def retrieve_booking(self, pnr: str) -> Booking:
        booking = self.repository.get_by_pnr(pnr)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repository.get(booking_id)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def get_booking_summary(self, booking_id: str) -> BookingSummary:
        booking = self.get_booking(booking_id)
        return BookingSummary(
            pnr=booking.pnr,
            status=booking.status,
            booking_date=booking.booking_date,
            total_fare=booking.total_fare,
            passenger_count=len(booking.passengers),
            flight_count=len(booking.flights),
            seat_count=len(booking.seats),
            contact_email=booking.contact_info.email,
            e_ticket_generated=booking.e_ticket_generated
        )

    def list_bookings(self) -> List[Booking]:
        return self.repository.list_bookings()

    # ================================
    # Changes
    # ================================

    def cancel_booking(self, pnr: str) -> CancellationResult:
        """
        Cancel a confirmed booking.

        Seats still held by the booking are released and every
        segment gets its seats back. The refund is a flat share of the total.
        """
        with self._lock:
            booking = self.retrieve_booking(pnr)
            booking.cancel()

            released = []
            for seat in booking.seats:
                if self.inventory.release(seat.flight_id, seat.seat_id, holder=booking.id):
                    released.append(seat.seat_id)

            for flight in booking.flights:
                self.catalog.increment_availability(flight.flight_id, flight.cabin, len(booking.passengers))

        refund_amount = booking.total_fare * self.refund_rate
        logger.info("Booking %s cancelled, refund %s", booking.pnr, refund_amount)

        return CancellationResult(
            pnr=booking.pnr,
            refund_amount=refund_amount,
            released_seats=released,
            cancelled_at=booking.cancelled_at
        )

    def update_booking(self, pnr: str, patch: Dict[str, Any]) -> BookingUpdateResult:
        """Shallow-merge contact info and special requests; other keys are ignored"""
        with self._lock:
            booking = self.retrieve_booking(pnr)
            if booking.status == BookingStatus.CANCELLED:
                raise AlreadyCancelled("Cannot update cancelled booking")

            updated, ignored = [], []
            for key, value in (patch or {}).items():
                field = UPDATABLE_FIELDS.get(key)
                if not field:
                    ignored.append(key)
                    continue
                if not isinstance(value, dict):
                    raise ValidationError([f"{key} must be an object"])

                if field == "contact_info":
                    booking.contact_info = ContactInfo(**{**booking.contact_info.model_dump(), **value})
                else:
                    booking.special_requests = {**booking.special_requests, **value}
                updated.append(field)

        if ignored:
            logger.info("Booking %s update ignored fields: %s", booking.pnr, ", ".join(ignored))
        logger.info("Booking %s updated: %s", booking.pnr, ", ".join(updated) or "nothing")

        return BookingUpdateResult(
            pnr=booking.pnr,
            updated_fields=updated,
            ignored_fields=ignored,
            booking=booking
        )

    # ================================
    # E-tickets
    # ================================

    def issue_eticket(self, booking_id: str, fmt: Optional[str] = None) -> ETicketResult:
        if not self.ticket_issuer:
            raise NotFound("E-ticket issuing is disabled")

        booking = self.get_booking(booking_id)
        result = self.ticket_issuer.issue_eticket(booking, fmt)
        booking.e_ticket_generated = True
        booking.e_ticket_path = result.file_path
        return result

    def send_eticket(self, email: str, pnr: str, ticket_path: Optional[str] = None) -> EmailResult:
        if not self.ticket_issuer:
            raise NotFound("E-ticket issuing is disabled")

        booking = self.retrieve_booking(pnr)
        return self.ticket_issuer.send_eticket_by_email(email, ticket_path or booking.e_ticket_path, booking)
