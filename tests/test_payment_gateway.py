from types import SimpleNamespace

import pytest
import stripe

from salon_app.errors import PaymentGatewayError
from salon_app.services.payment_service import PaymentGateway, PaymentIntentInfo, to_minor_units


def stripe_intent(**overrides):
    values = {
        "id": "pi_1",
        "status": "requires_payment_method",
        "amount": 15050,
        "currency": "sar",
        "client_secret": "pi_1_secret_abc",
        "metadata": {"userId": "4", "serviceId": "1"},
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def stripe_calls(monkeypatch):
    calls = []

    def fake_create(**kwargs):
        calls.append(("create", kwargs))
        return stripe_intent(metadata=kwargs["metadata"])

    def fake_retrieve(intent_id, **kwargs):
        calls.append(("retrieve", dict(kwargs, id=intent_id)))
        return stripe_intent(id=intent_id, status="succeeded")

    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", fake_retrieve)
    return calls


def raise_stripe_error(*args, **kwargs):
    raise stripe.StripeError("Your card was declined.")


@pytest.mark.payment
class TestPaymentGateway:
    """Test suite for the Stripe-backed payment gateway."""

    @pytest.mark.parametrize("amount,expected", [(150.5, 15050), (0.1, 10), (99.99, 9999), ("75", 7500)])
    def test_to_minor_units(self, amount, expected):
        assert to_minor_units(amount) == expected

    def test_create_intent(self, stripe_calls):
        gateway = PaymentGateway("sk_test_123")

        intent = gateway.create_intent(150.5, {"userId": 4, "serviceId": 1, "date": None})

        name, kwargs = stripe_calls[0]
        assert name == "create"
        assert kwargs["amount"] == 15050
        assert kwargs["currency"] == "sar"
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["metadata"] == {"userId": "4", "serviceId": "1"}
        assert isinstance(intent, PaymentIntentInfo)
        assert intent.id == "pi_1"
        assert intent.client_secret == "pi_1_secret_abc"
        assert intent.metadata == {"userId": "4", "serviceId": "1"}

    def test_custom_currency(self, stripe_calls):
        PaymentGateway("sk_test_123", currency="usd").create_intent(10, {})

        assert stripe_calls[0][1]["currency"] == "usd"
        assert stripe_calls[0][1]["amount"] == 1000

    def test_retrieve_intent(self, stripe_calls):
        intent = PaymentGateway("sk_test_123").retrieve_intent("pi_42")

        assert stripe_calls == [("retrieve", {"api_key": "sk_test_123", "id": "pi_42"})]
        assert intent.id == "pi_42"
        assert intent.status == "succeeded"
        assert intent.amount == 15050
        assert intent.metadata["userId"] == "4"

    @pytest.mark.parametrize("method", ["create", "retrieve"])
    def test_stripe_error_becomes_gateway_error(self, monkeypatch, method):
        monkeypatch.setattr(stripe.PaymentIntent, method, raise_stripe_error)
        gateway = PaymentGateway("sk_test_123")

        with pytest.raises(PaymentGatewayError) as exc_info:
            if method == "create":
                gateway.create_intent(20, {"userId": 4})
            else:
                gateway.retrieve_intent("pi_1")

        assert "declined" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, stripe.StripeError)

    def test_from_stripe_without_metadata(self):
        intent = PaymentIntentInfo.from_stripe(
            SimpleNamespace(id="pi_2", status="succeeded", amount=500, currency="sar", metadata=None)
        )

        assert intent.metadata == {}
        assert intent.client_secret is None
