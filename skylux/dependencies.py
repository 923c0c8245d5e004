from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from skylux.config import Settings, settings as default_settings
from skylux.catalog.seed import generate_flights
from skylux.catalog.service import FlightCatalog
from skylux.seats.inventory import SeatInventory
from skylux.fares.fare_service import FareEngine
from skylux.promotions.ledger import PromotionLedger
from skylux.bookings.store import InMemoryBookingRepository
from skylux.bookings.ticket_service import ETicketIssuer
from skylux.bookings.booking_service import BookingService

@dataclass
class ServiceRegistry:
    """Process-wide services; one instance per application"""
    catalog: FlightCatalog
    inventory: SeatInventory
    ledger: PromotionLedger
    fare_engine: FareEngine
    bookings: BookingService

def create_registry(
    config: Optional[Settings] = None,
    catalog: Optional[FlightCatalog] = None,
    ledger: Optional[PromotionLedger] = None,
    ticket_issuer: Optional[ETicketIssuer] = None,
) -> ServiceRegistry:
    """Wire catalog, inventory, ledger, fare engine and booking service together"""
    config = config or default_settings

    if catalog is None:
        catalog = FlightCatalog(generate_flights(
            start_date=config.CATALOG_START_DATE,
            days=config.CATALOG_DAYS,
            seed=config.CATALOG_SEED,
        ))

    inventory = SeatInventory(catalog)
    ledger = ledger or PromotionLedger()
    fare_engine = FareEngine(catalog, ledger)

    if ticket_issuer is None and config.ISSUE_ETICKETS:
        ticket_issuer = ETicketIssuer(config.TICKETS_DIR, default_format=config.ETICKET_FORMAT)

    bookings = BookingService(
        catalog=catalog,
        inventory=inventory,
        fare_engine=fare_engine,
        ledger=ledger,
        repository=InMemoryBookingRepository(),
        ticket_issuer=ticket_issuer,
        strict_seat_assignment=config.STRICT_SEAT_ASSIGNMENT,
        refund_rate=config.CANCELLATION_REFUND_RATE,
        pnr_max_attempts=config.PNR_MAX_ATTEMPTS,
    )

    return ServiceRegistry(
        catalog=catalog,
        inventory=inventory,
        ledger=ledger,
        fare_engine=fare_engine,
        bookings=bookings,
    )

def get_registry(request: Request) -> ServiceRegistry:
    return request.app.state.registry

def get_catalog(request: Request) -> FlightCatalog:
    return get_registry(request).catalog

def get_inventory(request: Request) -> SeatInventory:
    return get_registry(request).inventory

def get_ledger(request: Request) -> PromotionLedger:
    return get_registry(request).ledger

def get_fare_engine(request: Request) -> FareEngine:
    return get_registry(request).fare_engine

def get_booking_service(request: Request) -> BookingService:
    return get_registry(request).bookings
