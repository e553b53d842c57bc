"""
Card/Mada payments through Stripe.

``PaymentGateway`` is the only code that talks to the Stripe SDK.
``PaymentService`` turns a succeeded PaymentIntent into a confirmed, paid
booking exactly once.
"""

from dataclasses import dataclass, field

import stripe
from flask import current_app

from ..errors import (
    DuplicateTransactionError,
    PaymentGatewayError,
    PaymentNotSucceededError,
    PaymentOwnershipError,
)


def to_minor_units(amount):
    """SAR 150.5 -> 15050 halalas."""
    return int(round(float(amount) * 100))


@dataclass
class PaymentIntentInfo:
    id: str
    status: str
    amount: int
    currency: str
    client_secret: str = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, intent):
        metadata = getattr(intent, "metadata", None) or {}
        return cls(
            id=intent.id,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
            client_secret=getattr(intent, "client_secret", None),
            metadata={key: metadata[key] for key in metadata.keys()},
        )


class PaymentGateway:
    def __init__(self, api_key, currency="sar"):
        self.api_key = api_key
        self.currency = currency

    def create_intent(self, amount, metadata):
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=to_minor_units(amount),
                currency=self.currency,
                metadata={key: str(value) for key, value in metadata.items() if value is not None},
            )
        except stripe.StripeError as e:
            raise PaymentGatewayError(str(e)) from e
        return PaymentIntentInfo.from_stripe(intent)

    def retrieve_intent(self, payment_intent_id):
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self.api_key)
        except stripe.StripeError as e:
            raise PaymentGatewayError(str(e)) from e
        return PaymentIntentInfo.from_stripe(intent)


class PaymentService:
    def __init__(self, storage, gateway, loyalty_points=10):
        self.storage = storage
        self.gateway = gateway
        self.loyalty_points = loyalty_points

    def create_intent(self, user, service, amount, booking_details=None):
        details = booking_details or {}
        metadata = {
            "userId": user.id,
            "serviceId": service.id,
            "salonId": details.get("salon_id") or service.salon_id,
            "date": details.get("date"),
            "time": details.get("time"),
        }
        intent = self.gateway.create_intent(amount, metadata)
        current_app.logger.info(
            f"Created payment intent {intent.id} for user {user.id}, service {service.id}"
        )
        return intent

    def confirm_booking(self, user, service, payment_intent_id, booking_details):
        """
        Record a paid booking for a succeeded intent.

        Raises DuplicateTransactionError when the intent was already used,
        PaymentNotSucceededError when the gateway reports another status and
        PaymentOwnershipError when the intent belongs to someone else. Nothing
        is written in any of those cases.
        """
        if self.storage.get_payment_transaction_by_gateway_id(payment_intent_id):
            raise DuplicateTransactionError(payment_intent_id)

        intent = self.gateway.retrieve_intent(payment_intent_id)
        if intent.status != "succeeded":
            raise PaymentNotSucceededError(payment_intent_id, intent.status)

        owner_id = intent.metadata.get("userId")
        if owner_id is not None and str(owner_id) != str(user.id):
            raise PaymentOwnershipError(
                f"Payment intent {payment_intent_id} was not issued for user {user.id}"
            )

        payment_method = booking_details.get("payment_method") or "card"
        booking_fields = {
            "user_id": user.id,
            "salon_id": booking_details.get("salon_id") or service.salon_id,
            "service_id": service.id,
            "staff_id": booking_details.get("staff_id"),
            "date": booking_details["date"],
            "time": booking_details["time"],
            "total_price": intent.amount / 100,
            "payment_method": payment_method,
            "notes": booking_details.get("notes"),
        }
        transaction_fields = {
            "amount": intent.amount / 100,
            "currency": intent.currency,
            "payment_method": payment_method,
            "status": intent.status,
            "gateway": "stripe",
            "gateway_transaction_id": intent.id,
        }
        return self.storage.record_paid_booking(
            booking_fields, transaction_fields, self.loyalty_points
        )
