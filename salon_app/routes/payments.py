from flask import Blueprint, jsonify, request, current_app
from pydantic import ValidationError

from ..errors import (
    DuplicateTransactionError,
    PaymentGatewayError,
    PaymentNotSucceededError,
    PaymentOwnershipError,
)
from ..extensions import get_payment_service, get_storage
from ..messages import error_response
from ..schemas import ConfirmBookingRequest, PaymentIntentRequest
from ..utils.auth_utils import current_user, login_required
from ..utils.request_utils import parse_body, validation_details
from .bookings import can_access_booking

payments_bp = Blueprint("payments", __name__, url_prefix="/api/payment")


@payments_bp.route("/create-intent", methods=["POST"])
@login_required
def create_payment_intent():
    """
    Start a card/Mada payment
    ---
    tags:
      - Payments
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [amount, serviceId]
          properties:
            amount:
              type: number
              description: Amount in SAR, must be greater than 0
            serviceId: {type: integer}
            bookingDetails:
              $ref: '#/definitions/BookingDetails'
    responses:
      200:
        description: Intent created at the gateway
        schema:
          type: object
          properties:
            clientSecret: {type: string}
            paymentIntentId: {type: string}
      400:
        description: Invalid amount or payload
      404:
        description: Service not found
      500:
        description: Gateway error (raw message in error)
    """
    try:
        payload = parse_body(PaymentIntentRequest)
    except ValidationError as e:
        return error_response("invalid_payment", 400, validation_details(e))

    try:
        service = get_storage().get_service_by_id(payload.service_id)
        if not service:
            return error_response("service_not_found", 404)

        details = payload.booking_details.model_dump() if payload.booking_details else {}
        intent = get_payment_service().create_intent(
            current_user(), service, payload.amount, details
        )
        return jsonify(
            {"clientSecret": intent.client_secret, "paymentIntentId": intent.id}
        ), 200

    except PaymentGatewayError as e:
        current_app.logger.error(f"Payment gateway error creating intent: {e}")
        return error_response("payment_intent_error", 500, str(e))

    except Exception as e:
        current_app.logger.error(f"Error creating payment intent: {e}")
        return error_response("payment_intent_error", 500, str(e))


@payments_bp.route("/confirm-booking", methods=["POST"])
@login_required
def confirm_booking():
    """
    Turn a succeeded payment into a confirmed, paid booking
    ---
    tags:
      - Payments
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [paymentIntentId, serviceId, bookingDetails]
          properties:
            paymentIntentId: {type: string}
            serviceId: {type: integer}
            bookingDetails:
              $ref: '#/definitions/BookingDetails'
    responses:
      201:
        description: Booking, payment transaction and loyalty points recorded
        schema:
          type: object
          properties:
            booking:
              $ref: '#/definitions/Booking'
            paymentTransaction:
              $ref: '#/definitions/PaymentTransaction'
      400:
        description: Invalid payload, or the payment has not succeeded
      403:
        description: The payment intent belongs to another user
      404:
        description: Service not found
      409:
        description: This payment was already used for a booking
    """
    try:
        payload = parse_body(ConfirmBookingRequest)
    except ValidationError as e:
        return error_response("invalid_payment", 400, validation_details(e))

    storage = get_storage()
    user = current_user()
    try:
        service = storage.get_service_by_id(payload.service_id)
        if not service:
            return error_response("service_not_found", 404)

        booking, transaction = get_payment_service().confirm_booking(
            user,
            service,
            payload.payment_intent_id,
            payload.booking_details.model_dump(),
        )
        return jsonify(
            {"booking": booking.to_dict(), "paymentTransaction": transaction.to_dict()}
        ), 201

    except DuplicateTransactionError as e:
        current_app.logger.warning(f"Duplicate payment confirmation: {e}")
        return error_response("payment_already_processed", 409)

    except PaymentNotSucceededError as e:
        current_app.logger.warning(str(e))
        return error_response("payment_not_succeeded", 400, e.status)

    except PaymentOwnershipError as e:
        current_app.logger.warning(f"Rejected payment confirmation: {e}")
        return error_response("forbidden", 403)

    except PaymentGatewayError as e:
        current_app.logger.error(f"Payment gateway error confirming booking: {e}")
        return error_response("payment_confirm_error", 500, str(e))

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error confirming paid booking: {e}")
        return error_response("payment_confirm_error", 500, str(e))


@payments_bp.route("/transactions", methods=["GET"])
@login_required
def my_transactions():
    """
    Payment transactions of the current user, or of one booking
    ---
    tags:
      - Payments
    parameters:
      - name: bookingId
        in: query
        type: integer
        description: Only transactions of this booking (its customer, salon owner or an admin)
    responses:
      200:
        description: Transactions ordered by id
        schema:
          type: array
          items:
            $ref: '#/definitions/PaymentTransaction'
      403:
        description: The booking is not accessible to the caller
      404:
        description: Booking not found
    """
    try:
        storage = get_storage()
        user = current_user()
        booking_id = request.args.get("bookingId", type=int)
        if booking_id is not None:
            booking = storage.get_booking_by_id(booking_id)
            if not booking:
                return error_response("booking_not_found", 404)
            if not can_access_booking(user, booking):
                return error_response("forbidden", 403)
            transactions = storage.get_payment_transactions_by_booking_id(booking_id)
        else:
            transactions = storage.get_payment_transactions_by_user_id(user.id)
        return jsonify([transaction.to_dict() for transaction in transactions]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching transactions: {e}")
        return error_response("transactions_error", 500, str(e))
