import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from skylux.config import Settings
from skylux.dependencies import create_registry
from skylux.main import create_app

API = "/api/v1"

@pytest.fixture
def client(catalog, ledger):
    registry = create_registry(config=Settings(ISSUE_ETICKETS=False), catalog=catalog, ledger=ledger)
    return TestClient(create_app(registry))

@pytest.fixture
def booking_payload():
    return {
        "passengers": [{
            "id": "p1",
            "first_name": "Alice",
            "last_name": "Walker",
            "date_of_birth": "1990-04-12",
            "email": "alice@example.com",
            "phone": "+15551234567",
        }],
        "flights": [{"flight_id": "SL001", "cabin": "economy"}],
        "selected_seats": [{"seat_id": "12A", "passenger_id": "p1"}],
        "payment_info": {
            "method": "card",
            "card_number": "4111111111111111",
            "expiry_month": "12",
            "expiry_year": "2030",
            "cvv": "123",
            "cardholder_name": "Alice Walker",
        },
        "promo_code": "WELCOME10",
    }

class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "flights": 3}

class TestFlightsAndSeats:

    def test_get_flight(self, client):
        response = client.get(f"{API}/flights/SL001")

        assert response.status_code == 200
        assert response.json()["origin"] == "JFK"
        assert "seat_map" not in response.json()

    def test_unknown_flight(self, client):
        response = client.get(f"{API}/flights/SL999")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Flight SL999 not found",
            "error_type": "not_found",
        }

    def test_seat_map(self, client):
        response = client.get(f"{API}/seats/SL001/map")

        assert response.status_code == 200
        assert response.json()["seat_map"]["first"][0][0]["id"] == "1A"

    def test_seat_conflict(self, client):
        body = {"flight_id": "SL001", "passenger_id": "P1", "seat_id": "14A"}
        assert client.post(f"{API}/seats/assign", json=body).status_code == 200

        response = client.post(f"{API}/seats/assign", json={**body, "passenger_id": "P2"})

        assert response.status_code == 409
        assert response.json()["error_type"] == "seat_unavailable"

class TestFares:

    def test_calculate(self, client):
        response = client.post(f"{API}/fares/calculate", json={
            "flight_id": "SL001", "passengers": 2, "promo_code": "WELCOME10"
        })

        breakdown = response.json()["fare_breakdown"]
        assert response.status_code == 200
        assert Decimal(breakdown["subtotal"]) == Decimal("748")
        assert Decimal(breakdown["total_fare"]) == Decimal("673.20")

    def test_comparison(self, client):
        response = client.get(f"{API}/fares/comparison/SL001/1")

        assert set(response.json()["comparison"]) == {"economy", "premium", "business", "first"}

class TestPromotions:

    def test_validate(self, client):
        response = client.post(f"{API}/promotions/validate", json={"code": "welcome10", "amount": "500"})

        assert response.status_code == 200
        assert response.json()["code"] == "WELCOME10"

    def test_validate_below_minimum(self, client):
        response = client.post(f"{API}/promotions/validate", json={"code": "SAVE50", "amount": "80"})

        assert response.status_code == 400
        assert response.json()["error"] == "Minimum amount of $200 required for this promo code"
        assert response.json()["error_type"] == "promo_invalid"

    def test_gift_card_purchase_and_balance(self, client):
        created = client.post(f"{API}/gift-cards", json={"amount": "150", "purchaser_email": "buyer@example.com"})
        assert created.status_code == 201

        balance = client.get(f"{API}/gift-cards/{created.json()['code']}/balance")

        assert Decimal(balance.json()["current_balance"]) == Decimal("150")

class TestBookings:

    def test_confirm_retrieve_cancel(self, client, booking_payload):
        confirmed = client.post(f"{API}/bookings/confirm", json=booking_payload)

        assert confirmed.status_code == 201
        booking = confirmed.json()["booking"]
        assert booking["status"] == "confirmed"
        assert Decimal(booking["total_fare"]) == Decimal("381.60")

        retrieved = client.get(f"{API}/bookings/{booking['pnr'].lower()}")
        assert retrieved.json()["id"] == booking["id"]

        cancelled = client.post(f"{API}/bookings/{booking['pnr']}/cancel")
        assert cancelled.status_code == 200
        assert Decimal(cancelled.json()["refund_amount"]) == Decimal("381.60") * Decimal("0.8")

        again = client.post(f"{API}/bookings/{booking['pnr']}/cancel")
        assert again.status_code == 409
        assert again.json()["error_type"] == "already_cancelled"

    def test_validation_errors(self, client, booking_payload):
        booking_payload["passengers"][0]["email"] = "not-an-email"
        booking_payload["payment_info"]["cvv"] = "1"

        response = client.post(f"{API}/bookings/confirm", json=booking_payload)

        assert response.status_code == 400
        assert response.json()["error_type"] == "validation_error"
        assert response.json()["errors"] == [
            "Passenger 1: Valid email is required",
            "Valid CVV is required",
        ]

    def test_update(self, client, booking_payload):
        pnr = client.post(f"{API}/bookings/confirm", json=booking_payload).json()["booking"]["pnr"]

        response = client.put(f"{API}/bookings/{pnr}", json={"contactInfo": {"phone": "+15550000000"}})

        assert response.status_code == 200
        assert response.json()["booking"]["contact_info"]["phone"] == "+15550000000"

    def test_unknown_pnr(self, client):
        response = client.get(f"{API}/bookings/ZZZZZZ")

        assert response.status_code == 404
        assert response.json()["error"] == "Booking not found"

    def test_eticket_disabled(self, client, booking_payload):
        booking_id = client.post(f"{API}/bookings/confirm", json=booking_payload).json()["booking"]["id"]

        response = client.post(f"{API}/bookings/id/{booking_id}/eticket")

        assert response.status_code == 404
