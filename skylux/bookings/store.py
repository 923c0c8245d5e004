from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from skylux.bookings.schemas import Booking
from skylux.exceptions import DuplicatePNR

class BookingRepository(ABC):
    """Storage for booking records, addressed by id or by PNR"""

    @abstractmethod
    def add(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    def get(self, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    def get_by_pnr(self, pnr: str) -> Optional[Booking]:
        pass

    @abstractmethod
    def pnr_exists(self, pnr: str) -> bool:
        pass

    @abstractmethod
    def list_bookings(self) -> List[Booking]:
        pass

class InMemoryBookingRepository(BookingRepository):
    """
    Bookings keyed by id with a PNR index.

    The PNR index only stores ids, so an update made to the record is seen
    from either key.
    """

    def __init__(self):
        self._bookings: Dict[str, Booking] = {}
        self._pnr_index: Dict[str, str] = {}

    def add(self, booking: Booking) -> Booking:
        if booking.pnr in self._pnr_index and self._pnr_index[booking.pnr] != booking.id:
            raise DuplicatePNR(f"PNR {booking.pnr} already belongs to another booking")
        self._bookings[booking.id] = booking
        self._pnr_index[booking.pnr] = booking.id
        return booking

    def get(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def get_by_pnr(self, pnr: str) -> Optional[Booking]:
        booking_id = self._pnr_index.get((pnr or "").upper())
        return self._bookings.get(booking_id) if booking_id else None

    def pnr_exists(self, pnr: str) -> bool:
        return pnr in self._pnr_index

    def list_bookings(self) -> List[Booking]:
        return list(self._bookings.values())

    def __len__(self) -> int:
        return len(self._bookings)
