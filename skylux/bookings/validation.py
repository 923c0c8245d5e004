from typing import List, Optional, Sequence

from skylux.bookings.schemas import FlightSelection, PassengerInfo, PaymentInfo, PaymentMethod

class BookingValidator:
    """Input checks for a booking; every failing rule is reported"""

    def validate_passengers(self, passengers: Sequence[PassengerInfo]) -> List[str]:
        if not passengers:
            return ["At least one passenger is required"]

        errors = []
        for index, passenger in enumerate(passengers, start=1):
            if not passenger.first_name or len(passenger.first_name.strip()) < 2:
                errors.append(f"Passenger {index}: First name is required (minimum 2 characters)")
            if not passenger.last_name or len(passenger.last_name.strip()) < 2:
                errors.append(f"Passenger {index}: Last name is required (minimum 2 characters)")
            if not passenger.date_of_birth:
                errors.append(f"Passenger {index}: Date of birth is required")
            if not passenger.email or "@" not in passenger.email:
                errors.append(f"Passenger {index}: Valid email is required")
            if not passenger.phone or len(passenger.phone) < 10:
                errors.append(f"Passenger {index}: Valid phone number is required")
        return errors

    def validate_flights(self, flights: Sequence[FlightSelection]) -> List[str]:
        if not flights:
            return ["At least one flight is required"]

        errors = []
        for index, flight in enumerate(flights, start=1):
            if not flight.flight_id:
                errors.append(f"Flight {index}: Flight ID is required")
            if not flight.cabin:
                errors.append(f"Flight {index}: Travel class is required")
        return errors

    def validate_payment(self, payment_info: Optional[PaymentInfo]) -> List[str]:
        if not payment_info:
            return ["Payment information is required"]

        errors = []
        if not payment_info.method:
            errors.append("Payment method is required")

        if payment_info.method == PaymentMethod.CARD.value:
            if not payment_info.card_number or len(payment_info.card_number) < 13:
                errors.append("Valid card number is required")
            if not payment_info.expiry_month or not payment_info.expiry_year:
                errors.append("Card expiry date is required")
            if not payment_info.cvv or len(payment_info.cvv) < 3:
                errors.append("Valid CVV is required")
            if not payment_info.cardholder_name or len(payment_info.cardholder_name.strip()) < 2:
                errors.append("Cardholder name is required")
        elif payment_info.method == PaymentMethod.GIFT_CARD.value:
            if not payment_info.gift_card_code:
                errors.append("Gift card code is required")

        return errors

    def validate_booking_data(
        self,
        passengers: Sequence[PassengerInfo],
        flights: Sequence[FlightSelection],
        payment_info: Optional[PaymentInfo]
    ) -> List[str]:
        return (
            self.validate_passengers(passengers)
            + self.validate_flights(flights)
            + self.validate_payment(payment_info)
        )
