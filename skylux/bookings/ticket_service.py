import json
import logging
import os
from datetime import datetime
from io import BytesIO
from typing import Optional

import qrcode
from qrcode import constants
from PIL import Image

from skylux.bookings.schemas import Booking, EmailResult, ETicketData, ETicketResult
from skylux.exceptions import ValidationError

logger = logging.getLogger(__name__)

SPECIAL_INSTRUCTIONS = [
    "Please arrive at the airport at least 2 hours before domestic flights and 3 hours before international flights.",
    "Valid government-issued photo ID required for all passengers.",
    "Check-in online or at the airport kiosks for faster service.",
    "Baggage allowances and restrictions apply - check airline policy.",
]

class ETicketIssuer:
    """Builds e-ticket documents (PDF with QR code, or JSON) for confirmed bookings"""

    def __init__(self, tickets_dir: str = "static/tickets", default_format: str = "PDF"):
        self.tickets_dir = tickets_dir
        self.default_format = default_format.upper()

    def generate_eticket_data(self, booking: Booking) -> ETicketData:
        issued_at = datetime.now()
        timestamp = str(int(issued_at.timestamp() * 1000))

        return ETicketData(
            pnr=booking.pnr,
            booking_id=booking.id,
            issue_date=issued_at,
            status=booking.status,
            passengers=[
                {
                    "name": passenger.full_name,
                    "date_of_birth": passenger.date_of_birth,
                    "nationality": passenger.nationality,
                    "passport_number": passenger.passport_number,
                }
                for passenger in booking.passengers
            ],
            flights=[
                {
                    "flight_number": flight.flight_number,
                    "route": f"{flight.origin} → {flight.destination}",
                    "date": flight.date,
                    "departure_time": flight.departure_time,
                    "arrival_time": flight.arrival_time,
                    "cabin": flight.cabin.value,
                }
                for flight in booking.flights
            ],
            seats=[
                {
                    "passenger_id": seat.passenger_id,
                    "flight_id": seat.flight_id,
                    "seat_number": seat.seat_id,
                    "seat_type": seat.seat_type.value,
                }
                for seat in booking.seats
            ],
            fare_breakdown=booking.fare_breakdown,
            total_fare=booking.total_fare,
            contact_info=booking.contact_info,
            special_instructions=list(SPECIAL_INSTRUCTIONS),
            qr_code=f"SKYLUX:{booking.pnr}:{timestamp}",
            barcode=f"*{booking.pnr}*{timestamp[-6:]}*"
        )

    def generate_qr_image(self, data: str, size: int = 300) -> Image.Image:
        qr = qrcode.QRCode(
            version=1,
            error_correction=constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        qr_image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        return qr_image.resize((size, size), Image.LANCZOS)

    def issue_eticket(self, booking: Booking, fmt: Optional[str] = None) -> ETicketResult:
        """Write the e-ticket file and return its location"""
        fmt = (fmt or self.default_format).upper()
        if fmt not in ("PDF", "JSON"):
            raise ValidationError([f"Unsupported e-ticket format: {fmt}"])

        eticket_data = self.generate_eticket_data(booking)

        os.makedirs(self.tickets_dir, exist_ok=True)
        timestamp = int(eticket_data.issue_date.timestamp() * 1000)
        file_name = f"eticket_{booking.pnr}_{timestamp}.{fmt.lower()}"
        file_path = os.path.join(self.tickets_dir, file_name)

        if fmt == "PDF":
            self._write_pdf(eticket_data, file_path)
        else:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(eticket_data.model_dump(mode="json"), f, indent=2)

        logger.info("E-ticket for %s written to %s", booking.pnr, file_path)
        return ETicketResult(
            file_path=file_path,
            file_name=file_name,
            format=fmt,
            eticket_data=eticket_data
        )

    def _write_pdf(self, eticket_data: ETicketData, file_path: str):
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import getSampleStyleSheet
        from reportlab.platypus import Image as PDFImage
        from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

        doc = SimpleDocTemplate(file_path, pagesize=A4)
        styles = getSampleStyleSheet()
        story = []

        table_style = TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), colors.lightgrey),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.black),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ])

        story.append(Paragraph("SkyLux Airlines", styles['Title']))
        story.append(Paragraph(f"E-Ticket {eticket_data.pnr}", styles['Heading2']))
        story.append(Paragraph(
            f"Issued {eticket_data.issue_date.strftime('%Y-%m-%d %H:%M')} - "
            f"Status: {eticket_data.status.value.upper()}",
            styles['Normal']
        ))
        story.append(Spacer(1, 15))

        passenger_rows = [["Passenger", "Date of birth", "Nationality"]]
        for passenger in eticket_data.passengers:
            passenger_rows.append([
                passenger["name"], passenger["date_of_birth"] or "", passenger["nationality"] or ""
            ])
        passenger_table = Table(passenger_rows, colWidths=[200, 120, 120])
        passenger_table.setStyle(table_style)
        story.append(passenger_table)
        story.append(Spacer(1, 10))

        flight_rows = [["Flight", "Route", "Date", "Departs", "Arrives", "Cabin"]]
        for flight in eticket_data.flights:
            flight_rows.append([
                flight["flight_number"], flight["route"], flight["date"],
                flight["departure_time"], flight["arrival_time"], flight["cabin"].title()
            ])
        flight_table = Table(flight_rows)
        flight_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('BACKGROUND', (0, 1), (-1, -1), colors.lightblue),
            ('GRID', (0, 0), (-1, -1), 1, colors.black)
        ]))
        story.append(flight_table)
        story.append(Spacer(1, 10))

        if eticket_data.seats:
            seat_rows = [["Seat", "Type", "Flight"]]
            for seat in eticket_data.seats:
                seat_rows.append([seat["seat_number"], seat["seat_type"], seat["flight_id"]])
            seat_table = Table(seat_rows, colWidths=[80, 140, 100])
            seat_table.setStyle(table_style)
            story.append(seat_table)
            story.append(Spacer(1, 10))

        fare = eticket_data.fare_breakdown
        fare_rows = [
            ["Base Fare:", f"${fare.base_fare}"],
            ["Taxes:", f"${fare.taxes}"],
            ["Surcharges:", f"${fare.surcharges}"],
            ["Seat Upgrades:", f"${fare.seat_upgrades}"],
            ["Discount:", f"-${fare.discount}"],
            ["TOTAL:", f"${eticket_data.total_fare}"],
        ]
        fare_table = Table(fare_rows, colWidths=[120, 120])
        fare_table.setStyle(table_style)
        story.append(fare_table)
        story.append(Spacer(1, 15))

        qr_buffer = BytesIO()
        self.generate_qr_image(eticket_data.qr_code).save(qr_buffer, format="PNG")
        qr_buffer.seek(0)
        story.append(PDFImage(qr_buffer, width=120, height=120))
        story.append(Paragraph(f"Barcode: {eticket_data.barcode}", styles['Normal']))
        story.append(Spacer(1, 10))

        contact = eticket_data.contact_info
        story.append(Paragraph(f"Contact: {contact.email or ''} | {contact.phone or ''}", styles['Normal']))
        for instruction in eticket_data.special_instructions:
            story.append(Paragraph(instruction, styles['Italic']))

        doc.build(story)

    def send_eticket_by_email(self, email: str, ticket_path: Optional[str], booking: Booking) -> EmailResult:
        """Compose the e-ticket e-mail; delivery is only logged"""
        first_name = booking.passengers[0].first_name if booking.passengers else "Traveller"
        body = "\n".join([
            f"Dear {first_name},",
            "",
            "Thank you for choosing SkyLux Airlines!",
            "",
            "Your booking has been confirmed. Please find your e-ticket attached.",
            "",
            "Booking Details:",
            f"- PNR: {booking.pnr}",
            f"- Total Fare: ${booking.total_fare}",
            f"- Flights: {len(booking.flights)}",
            "",
            "Important Reminders:",
            "- Check-in online 24 hours before departure",
            "- Arrive at airport 2-3 hours before flight time",
            "- Bring valid government-issued photo ID",
            "",
            "For any assistance, contact us at support@skylux.com or call 1-800-SKYLUX.",
            "",
            "Safe travels!",
            "SkyLux Airlines Team",
        ])

        logger.info("Sending e-ticket for %s to %s (attachment: %s)", booking.pnr, email, ticket_path)

        return EmailResult(
            to=email,
            subject=f"Your SkyLux Airlines E-Ticket - {booking.pnr}",
            body=body,
            attachments=[ticket_path] if ticket_path else [],
            sent_at=datetime.now()
        )
