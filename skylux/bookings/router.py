from fastapi import APIRouter, Body, Depends
from typing import Any, Dict, Optional

from skylux.dependencies import get_booking_service
from skylux.bookings.booking_service import BookingService
from skylux.bookings.schemas import (
    Booking, BookingConfirmation, BookingRequest, BookingSummary, BookingUpdateResult,
    CancellationResult, EmailResult, ETicketEmailRequest, ETicketRequest, ETicketResult
)

router = APIRouter()

# Booking Lifecycle Endpoints
@router.post("/confirm", response_model=BookingConfirmation, status_code=201)
def confirm_booking(
    request: BookingRequest,
    booking_service: BookingService = Depends(get_booking_service)
):
    """Confirm a booking: seats, fare, promo code, payment and e-ticket"""
    return booking_service.confirm_booking(
        passengers=request.passengers,
        flights=request.flights,
        selected_seats=request.selected_seats,
        payment_info=request.payment_info,
        promo_code=request.promo_code
    )

@router.get("/{pnr}", response_model=Booking)
def retrieve_booking(
    pnr: str,
    booking_service: BookingService = Depends(get_booking_service)
):
    """Get booking details by PNR"""
    return booking_service.retrieve_booking(pnr)

@router.get("/id/{booking_id}/summary", response_model=BookingSummary)
def get_booking_summary(
    booking_id: str,
    booking_service: BookingService = Depends(get_booking_service)
):
    return booking_service.get_booking_summary(booking_id)

@router.post("/{pnr}/cancel", response_model=CancellationResult)
def cancel_booking(
    pnr: str,
    booking_service: BookingService = Depends(get_booking_service)
):
    """Cancel a booking and release its seats"""
    return booking_service.cancel_booking(pnr)

@router.put("/{pnr}", response_model=BookingUpdateResult)
def update_booking(
    pnr: str,
    patch: Dict[str, Any] = Body(..., description="contact_info and/or special_requests"),
    booking_service: BookingService = Depends(get_booking_service)
):
    return booking_service.update_booking(pnr, patch)

# E-Ticket Endpoints
@router.post("/id/{booking_id}/eticket", response_model=ETicketResult)
def issue_eticket(
    booking_id: str,
    request: Optional[ETicketRequest] = None,
    booking_service: BookingService = Depends(get_booking_service)
):
    """Generate the e-ticket document for a booking"""
    return booking_service.issue_eticket(booking_id, request.format if request else None)

@router.post("/eticket/email", response_model=EmailResult)
def send_eticket_email(
    request: ETicketEmailRequest,
    booking_service: BookingService = Depends(get_booking_service)
):
    return booking_service.send_eticket(request.email, request.pnr, request.ticket_path)
