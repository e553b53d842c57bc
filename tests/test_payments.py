import json

import pytest

from conftest import bearer, login, post_json


@pytest.fixture
def booking_details():
    return {"salonId": 1, "date": "2025-02-01", "time": "16:30", "paymentMethod": "mada"}


def confirm(client, intent_id, booking_details, service_id=1, **kwargs):
    return post_json(
        client,
        "/api/payment/confirm-booking",
        {"paymentIntentId": intent_id, "serviceId": service_id, "bookingDetails": booking_details},
        **kwargs,
    )


def counts(client):
    bookings = json.loads(client.get("/api/bookings/my").data)
    transactions = json.loads(client.get("/api/payment/transactions").data)
    return len(bookings), len(transactions)


@pytest.mark.payment
class TestCreateIntent:
    """Test suite for payment intent creation."""

    def test_create_intent(self, customer_client, gateway, booking_details):
        response = post_json(
            customer_client,
            "/api/payment/create-intent",
            {"amount": 150.5, "serviceId": 1, "bookingDetails": booking_details},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["clientSecret"]
        intent = gateway.intents[data["paymentIntentId"]]
        assert intent.amount == 15050
        assert intent.metadata["userId"] == "4"
        assert intent.metadata["serviceId"] == "1"
        assert intent.metadata["salonId"] == "1"
        assert intent.metadata["date"] == "2025-02-01"
        assert intent.metadata["time"] == "16:30"

    @pytest.mark.parametrize("amount", [0, -20])
    def test_amount_must_be_positive(self, customer_client, amount):
        response = post_json(
            customer_client, "/api/payment/create-intent", {"amount": amount, "serviceId": 1}
        )

        assert response.status_code == 400

    def test_unknown_service(self, customer_client):
        response = post_json(
            customer_client, "/api/payment/create-intent", {"amount": 100, "serviceId": 999}
        )

        assert response.status_code == 404

    def test_gateway_failure(self, customer_client, gateway):
        gateway.fail_with = "Could not connect to Stripe"

        response = post_json(
            customer_client, "/api/payment/create-intent", {"amount": 100, "serviceId": 1}
        )

        assert response.status_code == 500
        assert json.loads(response.data)["error"] == "Could not connect to Stripe"

    def test_requires_login(self, client):
        response = post_json(client, "/api/payment/create-intent", {"amount": 100, "serviceId": 1})

        assert response.status_code == 401


@pytest.mark.payment
class TestConfirmBooking:
    """Test suite for turning a payment into a booking."""

    def test_confirm_success(self, customer_client, gateway, booking_details):
        gateway.add_intent("pi_ok", status="succeeded", amount=15000, user_id=4)

        response = confirm(customer_client, "pi_ok", booking_details)

        assert response.status_code == 201
        data = json.loads(response.data)
        booking = data["booking"]
        assert booking["status"] == "confirmed"
        assert booking["paymentStatus"] == "paid"
        assert booking["totalPrice"] == 150
        assert booking["paymentMethod"] == "mada"
        assert booking["loyaltyPointsEarned"] == 10
        transaction = data["paymentTransaction"]
        assert transaction["bookingId"] == booking["id"]
        assert transaction["gatewayTransactionId"] == "pi_ok"
        assert transaction["amount"] == 150
        assert transaction["currency"] == "sar"

        user = json.loads(customer_client.get("/api/user").data)
        assert user["loyaltyPoints"] == 10

    @pytest.mark.parametrize("status", ["requires_payment_method", "processing", "canceled"])
    def test_not_succeeded_writes_nothing(self, customer_client, gateway, booking_details, status):
        gateway.add_intent("pi_pending", status=status, user_id=4)

        response = confirm(customer_client, "pi_pending", booking_details)

        assert response.status_code == 400
        assert json.loads(response.data)["message"] == "لم تتم عملية الدفع بنجاح"
        assert counts(customer_client) == (0, 0)
        assert json.loads(customer_client.get("/api/user").data)["loyaltyPoints"] == 0

    def test_second_confirmation_conflicts(self, customer_client, gateway, booking_details):
        gateway.add_intent("pi_twice", user_id=4)

        assert confirm(customer_client, "pi_twice", booking_details).status_code == 201
        response = confirm(customer_client, "pi_twice", booking_details)

        assert response.status_code == 409
        assert counts(customer_client) == (1, 1)
        assert json.loads(customer_client.get("/api/user").data)["loyaltyPoints"] == 10

    def test_intent_of_another_user(self, client, gateway, booking_details):
        gateway.add_intent("pi_other", user_id=5)

        response = confirm(client, "pi_other", booking_details, headers=bearer(client, "customer"))

        assert response.status_code == 403

    def test_unknown_intent(self, customer_client, booking_details):
        response = confirm(customer_client, "pi_missing", booking_details)

        assert response.status_code == 500
        assert counts(customer_client) == (0, 0)

    def test_unknown_service(self, customer_client, gateway, booking_details):
        gateway.add_intent("pi_ok", user_id=4)

        response = confirm(customer_client, "pi_ok", booking_details, service_id=999)

        assert response.status_code == 404

    def test_invalid_booking_details(self, customer_client, gateway, booking_details):
        gateway.add_intent("pi_ok", user_id=4)
        booking_details["time"] = "late"

        response = confirm(customer_client, "pi_ok", booking_details)

        assert response.status_code == 400

    def test_loyalty_tier_upgrade(self, app, customer_client, gateway, booking_details):
        app.extensions["payments"].loyalty_points = 100
        gateway.add_intent("pi_big", user_id=4)

        confirm(customer_client, "pi_big", booking_details)

        user = json.loads(customer_client.get("/api/user").data)
        assert user["loyaltyPoints"] == 100
        assert user["membershipType"] == "Silver"

    def test_create_then_confirm(self, customer_client, gateway, booking_details):
        created = json.loads(
            post_json(
                customer_client,
                "/api/payment/create-intent",
                {"amount": 250, "serviceId": 3, "bookingDetails": booking_details},
            ).data
        )
        intent = gateway.intents[created["paymentIntentId"]]
        intent.status = "succeeded"

        response = confirm(customer_client, intent.id, booking_details, service_id=3)

        assert response.status_code == 201
        assert json.loads(response.data)["booking"]["totalPrice"] == 250


@pytest.mark.payment
class TestTransactions:
    def test_transactions_of_booking(self, client, gateway, booking_details):
        owner = bearer(client, "femaleowner")
        other_owner = bearer(client, "maleowner")
        other_customer = bearer(client, "malecustomer")
        login(client, "customer")
        gateway.add_intent("pi_ok", user_id=4)
        booking = json.loads(confirm(client, "pi_ok", booking_details).data)["booking"]
        url = f"/api/payment/transactions?bookingId={booking['id']}"

        mine = json.loads(client.get(url).data)
        assert [t["gatewayTransactionId"] for t in mine] == ["pi_ok"]
        # booking_details books salon 1
        assert len(json.loads(client.get(url, headers=owner).data)) == 1

        assert client.get(url, headers=other_owner).status_code == 403
        assert client.get(url, headers=other_customer).status_code == 403
        assert client.get("/api/payment/transactions?bookingId=999").status_code == 404

    def test_booking_without_payment(self, customer_client, booking_data):
        booking = json.loads(post_json(customer_client, "/api/bookings", booking_data).data)

        response = customer_client.get(f"/api/payment/transactions?bookingId={booking['id']}")

        assert response.status_code == 200
        assert json.loads(response.data) == []
