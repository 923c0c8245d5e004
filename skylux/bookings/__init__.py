"""
Booking Orchestrator Module

Turns passengers, flight selections, seat choices and payment details into a
confirmed booking with a unique PNR. It includes:

- Aggregated validation of passengers, flights and payment details
- Seat reservation with per-seat leniency or strict mode
- Fare pricing with promo codes and partial gift card payments
- Undo of every reservation if a confirmation step fails
- Cancellation with seat release and flat-rate refund
- Contact info and special request updates
- E-ticket documents (PDF with QR code, or JSON) and e-mail composition

Key Components:
- booking_service.py: BookingService confirm / cancel / update workflow
- store.py: Booking repository keyed by id with a PNR index
- validation.py: Booking input rules
- ticket_service.py: E-ticket data, PDF/JSON files and e-mail
- router.py: FastAPI endpoints for bookings and e-tickets
- schemas.py: Pydantic models for bookings, results and requests
"""

from .booking_service import BookingService
from .store import BookingRepository, InMemoryBookingRepository
from .validation import BookingValidator
from .ticket_service import ETicketIssuer
from .schemas import (
    Booking, BookingStatus, BookingConfirmation, CancellationResult, BookingUpdateResult,
    BookingSummary, PassengerInfo, FlightSelection, PaymentInfo, PaymentSummary
)

__all__ = [
    "BookingService",
    "BookingRepository",
    "InMemoryBookingRepository",
    "BookingValidator",
    "ETicketIssuer",
    "Booking",
    "BookingStatus",
    "BookingConfirmation",
    "CancellationResult",
    "BookingUpdateResult",
    "BookingSummary",
    "PassengerInfo",
    "FlightSelection",
    "PaymentInfo",
    "PaymentSummary",
]
