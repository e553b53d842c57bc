"""
Pytest configuration and shared fixtures for the salon booking API tests.

Every test gets its own app with a fresh in-memory database seeded with the
demo data. Stripe and OpenAI are replaced by in-process fakes.
"""

import json
from types import SimpleNamespace

import pytest

from main import create_app
from salon_app.errors import PaymentGatewayError
from salon_app.seed import DEMO_PASSWORD
from salon_app.services.payment_service import PaymentIntentInfo, to_minor_units

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    "SECRET_KEY": "test-secret-key-for-testing-only",
    "BCRYPT_ROUNDS": 4,
    "SEED_DEMO_DATA": True,
    "STRIPE_SECRET_KEY": "",
    "OPENAI_API_KEY": "",
    "EXPIRE_STALE_PENDING_BOOKINGS": False,
}


class FakeGateway:
    """Stands in for Stripe: intents live in a dict keyed by id."""

    def __init__(self):
        self.intents = {}
        self.fail_with = None

    def add_intent(self, intent_id, status="succeeded", amount=15000, user_id=None, currency="sar"):
        metadata = {"userId": str(user_id)} if user_id is not None else {}
        self.intents[intent_id] = PaymentIntentInfo(
            id=intent_id,
            status=status,
            amount=amount,
            currency=currency,
            client_secret=f"{intent_id}_secret",
            metadata=metadata,
        )
        return self.intents[intent_id]

    def create_intent(self, amount, metadata):
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)
        intent_id = f"pi_test_{len(self.intents) + 1}"
        self.intents[intent_id] = PaymentIntentInfo(
            id=intent_id,
            status="requires_payment_method",
            amount=to_minor_units(amount),
            currency="sar",
            client_secret=f"{intent_id}_secret_abc",
            metadata={k: str(v) for k, v in metadata.items() if v is not None},
        )
        return self.intents[intent_id]

    def retrieve_intent(self, payment_intent_id):
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)
        if payment_intent_id not in self.intents:
            raise PaymentGatewayError(f"No such payment_intent: '{payment_intent_id}'")
        return self.intents[payment_intent_id]


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLMClient:
    """Mimics ``client.chat.completions.create`` of the OpenAI SDK."""

    def __init__(self, content=None, error=None):
        if isinstance(content, (dict, list)):
            content = json.dumps(content)
        self.completions = FakeCompletions(content, error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)
    app.extensions["payments"].gateway = FakeGateway()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def storage(app):
    with app.app_context():
        yield app.extensions["storage"]


@pytest.fixture
def gateway(app):
    return app.extensions["payments"].gateway


@pytest.fixture
def recommender(app):
    return app.extensions["recommender"]


def login(client, username, password=DEMO_PASSWORD):
    response = client.post(
        "/api/login",
        data=json.dumps({"username": username, "password": password}),
        content_type="application/json",
    )
    assert response.status_code == 200, response.data
    return json.loads(response.data)


def bearer(client, username):
    """Authorization header for a demo user."""
    token = login(client, username)["token"]
    client.post("/api/logout")
    return {"Authorization": f"Bearer {token}"}


def post_json(client, url, payload, **kwargs):
    return client.post(url, data=json.dumps(payload), content_type="application/json", **kwargs)


def patch_json(client, url, payload, **kwargs):
    return client.patch(url, data=json.dumps(payload), content_type="application/json", **kwargs)


@pytest.fixture
def customer_client(client):
    """Test client logged in (session cookie) as the demo customer, user 4."""
    login(client, "customer")
    return client


@pytest.fixture
def owner_client(client):
    """Logged in as femaleowner (user 2), owner of salons 1 and 2."""
    login(client, "femaleowner")
    return client


@pytest.fixture
def admin_client(client):
    login(client, "admin")
    return client


@pytest.fixture
def booking_data():
    return {
        "serviceId": 5,
        "salonId": 2,
        "date": "2025-01-10",
        "time": "14:00",
        "totalPrice": 150,
        "paymentMethod": "cash",
    }


@pytest.fixture
def user_data():
    return {
        "username": "newcustomer",
        "password": "secret123",
        "name": "Test Customer",
        "email": "new.customer@example.com",
        "phoneNumber": "+966500000000",
        "gender": "female",
        "language": "en",
    }
