from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from skylux.catalog.schemas import CabinClass, SeatType
from skylux.exceptions import AlreadyCancelled, InvalidStateTransition
from skylux.fares.schemas import FareBreakdown, SeatSelection

class BookingStatus(str, Enum):
    """Booking status enumeration"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

class PaymentMethod(str, Enum):
    CARD = "card"
    GIFT_CARD = "gift_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"

# Booking inputs; fields are optional so validation can report every problem
class PassengerInfo(BaseModel):
    """Individual passenger information"""
    id: Optional[str] = None
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    passport_number: Optional[str] = None
    passport_expiry: Optional[str] = None
    emergency_contact: Optional[Dict[str, Any]] = None
    special_requests: List[str] = []

    @property
    def full_name(self) -> str:
        return f"{self.title or ''} {self.first_name or ''} {self.last_name or ''}".strip()

class FlightSelection(BaseModel):
    flight_id: Optional[str] = None
    cabin: Optional[CabinClass] = None

class PaymentInfo(BaseModel):
    """Payment details as entered; only a masked summary is kept"""
    method: Optional[str] = None
    card_number: Optional[str] = None
    expiry_month: Optional[str] = None
    expiry_year: Optional[str] = None
    cvv: Optional[str] = None
    cardholder_name: Optional[str] = None
    gift_card_code: Optional[str] = None

# Booking record
class BookedFlight(BaseModel):
    flight_id: str
    flight_number: str
    origin: str
    destination: str
    date: str
    departure_time: str
    arrival_time: str
    cabin: CabinClass
    base_fare: Decimal

class SeatAssignmentRecord(BaseModel):
    passenger_id: str
    flight_id: str
    seat_id: str
    seat_type: SeatType = SeatType.STANDARD
    upgrade_fee: Decimal = Decimal("0")

class PaymentSummary(BaseModel):
    method: str
    last4: Optional[str] = None
    transaction_id: str
    processed_at: datetime
    gift_card_code: Optional[str] = None
    gift_card_amount: Decimal = Decimal("0")
    amount_charged: Decimal = Decimal("0")

class ContactInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: Optional[str] = None
    phone: Optional[str] = None
    emergency_contact: Optional[Dict[str, Any]] = None

class Booking(BaseModel):
    """
    Stored booking.

    Status moves only forward: pending -> confirmed -> cancelled.
    """
    id: str
    pnr: str
    status: BookingStatus = BookingStatus.PENDING
    passengers: List[PassengerInfo] = []
    flights: List[BookedFlight] = []
    seats: List[SeatAssignmentRecord] = []
    fare_breakdown: FareBreakdown = Field(default_factory=FareBreakdown)
    total_fare: Decimal = Decimal("0")
    promo_code: Optional[str] = None
    discount: Decimal = Decimal("0")
    payment: Optional[PaymentSummary] = None
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    special_requests: Dict[str, Any] = {}
    booking_date: datetime = Field(default_factory=datetime.now)
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    e_ticket_generated: bool = False
    e_ticket_path: Optional[str] = None

    def confirm(self):
        if self.status != BookingStatus.PENDING:
            raise InvalidStateTransition(f"Booking cannot be confirmed. Status: {self.status.value}")
        self.status = BookingStatus.CONFIRMED
        self.confirmed_at = datetime.now()

    def cancel(self):
        if self.status == BookingStatus.CANCELLED:
            raise AlreadyCancelled("Booking is already cancelled")
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidStateTransition(f"Booking cannot be cancelled. Status: {self.status.value}")
        self.status = BookingStatus.CANCELLED
        self.cancelled_at = datetime.now()

# Results
class BookingConfirmation(BaseModel):
    """Outcome of a successful confirmation"""
    success: bool = True
    booking: Booking
    e_ticket_generated: bool = False
    e_ticket_path: Optional[str] = None
    warnings: List[str] = []

class CancellationResult(BaseModel):
    success: bool = True
    message: str = "Booking cancelled successfully"
    pnr: str
    refund_amount: Decimal
    released_seats: List[str] = []
    cancelled_at: datetime

class BookingUpdateResult(BaseModel):
    success: bool = True
    message: str = "Booking updated successfully"
    pnr: str
    updated_fields: List[str] = []
    ignored_fields: List[str] = []
    booking: Booking

class BookingSummary(BaseModel):
    pnr: str
    status: BookingStatus
    booking_date: datetime
    total_fare: Decimal
    currency: str = "USD"
    passenger_count: int
    flight_count: int
    seat_count: int
    contact_email: Optional[str] = None
    e_ticket_generated: bool

class ETicketData(BaseModel):
    """Printable content of an e-ticket"""
    pnr: str
    booking_id: str
    issue_date: datetime
    status: BookingStatus
    passengers: List[Dict[str, Any]]
    flights: List[Dict[str, Any]]
    seats: List[Dict[str, Any]]
    fare_breakdown: FareBreakdown
    total_fare: Decimal
    currency: str = "USD"
    contact_info: ContactInfo
    special_instructions: List[str]
    qr_code: str
    barcode: str

class ETicketResult(BaseModel):
    file_path: str
    file_name: str
    format: str
    eticket_data: ETicketData

class EmailResult(BaseModel):
    success: bool = True
    message: str = "E-ticket sent successfully"
    to: str
    subject: str
    body: str
    attachments: List[str] = []
    sent_at: datetime

# Request Models
class BookingRequest(BaseModel):
    """Request to confirm a booking"""
    passengers: List[PassengerInfo] = []
    flights: List[FlightSelection] = []
    selected_seats: List[SeatSelection] = []
    payment_info: Optional[PaymentInfo] = None
    promo_code: Optional[str] = None

class ETicketRequest(BaseModel):
    format: Literal["PDF", "JSON"] = "PDF"

class ETicketEmailRequest(BaseModel):
    email: str
    pnr: str
    ticket_path: Optional[str] = None
