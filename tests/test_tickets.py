import json
import re
import pytest

from skylux.bookings.ticket_service import ETicketIssuer, SPECIAL_INSTRUCTIONS
from skylux.exceptions import ValidationError
from skylux.fares.schemas import SeatSelection

@pytest.fixture
def booking(booking_service, make_passenger, economy_sl001, card_payment):
    return booking_service.confirm_booking(
        [make_passenger(title="Ms")],
        economy_sl001,
        [SeatSelection(seat_id="14A", passenger_id="p1")],
        card_payment
    ).booking

class TestETicketData:

    def test_codes_carry_the_pnr(self, ticket_issuer, booking):
        data = ticket_issuer.generate_eticket_data(booking)

        assert re.fullmatch(rf"SKYLUX:{booking.pnr}:\d+", data.qr_code)
        assert re.fullmatch(rf"\*{booking.pnr}\*\d{{6}}\*", data.barcode)
        assert data.qr_code.split(":")[-1].endswith(data.barcode.split("*")[2])

    def test_content(self, ticket_issuer, booking):
        data = ticket_issuer.generate_eticket_data(booking)

        assert data.passengers[0]["name"] == "Ms Alice Walker"
        assert data.flights[0]["route"] == "JFK → LAX"
        assert data.seats[0]["seat_number"] == "14A"
        assert data.special_instructions == SPECIAL_INSTRUCTIONS
        assert data.total_fare == booking.total_fare

    def test_qr_image_size(self, ticket_issuer):
        assert ticket_issuer.generate_qr_image("SKYLUX:ABC123:1", size=120).size == (120, 120)

class TestETicketFiles:

    def test_json_ticket(self, ticket_issuer, booking):
        result = ticket_issuer.issue_eticket(booking, "json")

        assert result.format == "JSON"
        assert result.file_name.startswith(f"eticket_{booking.pnr}_")
        with open(result.file_path, encoding="utf-8") as f:
            assert json.load(f)["pnr"] == booking.pnr

    def test_pdf_ticket(self, tmp_path, booking):
        issuer = ETicketIssuer(str(tmp_path / "pdf"))

        result = issuer.issue_eticket(booking)

        assert result.file_path.endswith(".pdf")
        with open(result.file_path, "rb") as f:
            assert f.read(4) == b"%PDF"

    def test_unsupported_format(self, ticket_issuer, booking):
        with pytest.raises(ValidationError, match="Unsupported e-ticket format: XML"):
            ticket_issuer.issue_eticket(booking, "xml")

    def test_issuing_does_not_touch_the_booking(self, tmp_path, booking):
        before = booking.model_dump()

        ETicketIssuer(str(tmp_path / "again"), default_format="JSON").issue_eticket(booking)

        assert booking.model_dump() == before

class TestETicketEmail:

    def test_email_composition(self, ticket_issuer, booking):
        result = ticket_issuer.send_eticket_by_email("alice@example.com", "/tmp/ticket.pdf", booking)

        assert result.subject == f"Your SkyLux Airlines E-Ticket - {booking.pnr}"
        assert result.body.startswith("Dear Alice,")
        assert f"- PNR: {booking.pnr}" in result.body
        assert result.attachments == ["/tmp/ticket.pdf"]

    def test_send_through_booking_service(self, booking_service, booking):
        result = booking_service.send_eticket("alice@example.com", booking.pnr)

        assert result.to == "alice@example.com"
        assert result.attachments == [booking.e_ticket_path]
