from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Literal
from datetime import datetime
from decimal import Decimal
from enum import Enum

from skylux.catalog.schemas import CabinClass, SeatType

class SeatStatus(str, Enum):
    """Seat status; the occupied-by-gender states only drive seat map colouring"""
    AVAILABLE = "available"
    BOOKED = "booked"
    OCCUPIED_MALE = "occupied_male"
    OCCUPIED_FEMALE = "occupied_female"

class SeatState(BaseModel):
    """Live status of one seat"""
    status: SeatStatus = SeatStatus.AVAILABLE
    passenger_id: Optional[str] = None
    # Booking holding the seat; None for seats taken through the seat endpoints
    holder: Optional[str] = None
    gender: Optional[str] = None
    booked_at: Optional[datetime] = None

    @property
    def is_available(self) -> bool:
        return self.status == SeatStatus.AVAILABLE

class PassengerSeatInfo(BaseModel):
    """Passenger details the inventory needs when taking a seat"""
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None

class SeatAssignment(BaseModel):
    """Result of assigning a seat to a passenger"""
    flight_id: str
    passenger_id: str
    seat_id: str
    status: SeatStatus
    assigned_at: datetime = Field(default_factory=datetime.now)
    passenger_name: str = ""

class SeatView(BaseModel):
    """Seat as shown on a seat map"""
    id: str
    row: int
    letter: str
    cabin: CabinClass
    type: SeatType
    status: SeatStatus
    occupied_by: Optional[str] = None
    price: Decimal

class SeatMapResponse(BaseModel):
    flight_id: str
    flight_number: str
    aircraft: str
    seat_map: Dict[str, List[List[SeatView]]]

class SeatStatusResponse(BaseModel):
    flight_id: str
    seat_id: str
    status: SeatStatus
    passenger_id: Optional[str] = None
    gender: Optional[str] = None
    booked_at: Optional[datetime] = None

class PassengerAssignment(BaseModel):
    seat_id: str
    passenger_id: str
    status: SeatStatus
    booked_at: Optional[datetime] = None
    gender: Optional[str] = None

class SeatDetail(BaseModel):
    passenger_id: str
    seat_id: str
    seat_type: SeatType
    cabin: CabinClass
    upgrade_fee: Decimal

class SeatSelectionSummary(BaseModel):
    total_assignments: int
    total_upgrade_fee: Decimal
    seat_details: List[SeatDetail]
    assignments: List[PassengerAssignment]

class SpecialSeats(BaseModel):
    extra_legroom: List[str] = []
    emergency_exit: List[str] = []
    window: List[str] = []
    aisle: List[str] = []

class AutoAssignPreferences(BaseModel):
    seat_type: Optional[Literal["aisle", "window"]] = None

# Request Models
class SeatAssignRequest(BaseModel):
    flight_id: str
    passenger_id: str
    seat_id: str
    passenger_info: Optional[PassengerSeatInfo] = None

class SeatSwapRequest(BaseModel):
    flight_id: str
    passenger_id: str
    new_seat_id: str
    passenger_info: Optional[PassengerSeatInfo] = None

class SeatReleaseRequest(BaseModel):
    flight_id: str
    seat_id: str

class AutoAssignRequest(BaseModel):
    flight_id: str
    passengers: List[PassengerSeatInfo]
    cabin: CabinClass = CabinClass.ECONOMY
    preferences: AutoAssignPreferences = Field(default_factory=AutoAssignPreferences)

class AutoAssignResponse(BaseModel):
    flight_id: str
    assignments: List[SeatAssignment]
    unassigned_passengers: List[str] = []
