class PaymentGatewayError(Exception):
    """The payment gateway could not be reached or rejected the call."""


class PaymentNotSucceededError(Exception):
    def __init__(self, payment_intent_id, status):
        super().__init__(f"Payment intent {payment_intent_id} has status '{status}'")
        self.payment_intent_id = payment_intent_id
        self.status = status


class PaymentOwnershipError(Exception):
    """The payment intent was issued for a different user."""


class DuplicateTransactionError(Exception):
    def __init__(self, gateway_transaction_id):
        super().__init__(
            f"A transaction for gateway id {gateway_transaction_id} already exists"
        )
        self.gateway_transaction_id = gateway_transaction_id
