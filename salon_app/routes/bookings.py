from flask import Blueprint, jsonify, current_app
from pydantic import ValidationError

from ..extensions import get_storage
from ..messages import error_response
from ..schemas import BookingCreate, BookingStatusUpdate
from ..utils.auth_utils import current_user, login_required
from ..utils.request_utils import parse_body, validation_details

bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def can_access_booking(user, booking):
    """The booking's customer, the salon's owner, or an admin."""
    if user.role == "admin" or booking.user_id == user.id:
        return True
    salon = get_storage().get_salon_by_id(booking.salon_id)
    return salon is not None and salon.owner_id == user.id


@bookings_bp.route("", methods=["POST"])
@login_required
def create_booking():
    """
    Book a service
    ---
    tags:
      - Bookings
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [serviceId, salonId, date, time, totalPrice]
          properties:
            serviceId: {type: integer, example: 5}
            salonId: {type: integer, example: 2}
            date: {type: string, format: date, example: "2025-01-10"}
            time: {type: string, example: "14:00"}
            totalPrice: {type: number, example: 150}
            paymentMethod: {type: string, enum: [card, mada, cash]}
            staffId: {type: integer}
            notes: {type: string}
    responses:
      201:
        description: Booking created with status pending
        schema:
          $ref: '#/definitions/Booking'
      400:
        description: Invalid booking data
        schema:
          $ref: '#/definitions/Error'
      401:
        description: Not logged in
      404:
        description: Salon, service or staff member not found
    """
    try:
        payload = parse_body(BookingCreate)
    except ValidationError as e:
        return error_response("invalid_booking", 400, validation_details(e))

    storage = get_storage()
    try:
        if not storage.get_salon_by_id(payload.salon_id):
            return error_response("salon_not_found", 404)
        if not storage.get_service_by_id(payload.service_id):
            return error_response("service_not_found", 404)
        if payload.staff_id is not None and not storage.get_staff_by_id(payload.staff_id):
            return error_response("staff_not_found", 404)

        fields = payload.model_dump()
        fields.update(user_id=current_user().id, status="pending", payment_status="pending")
        booking = storage.create_booking(fields)
        return jsonify(booking.to_dict()), 201

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error creating booking: {e}")
        return error_response("booking_create_error", 500, str(e))


@bookings_bp.route("/my", methods=["GET"])
@login_required
def my_bookings():
    try:
        bookings = get_storage().get_bookings_by_user_id(current_user().id)
        return jsonify([booking.to_dict() for booking in bookings]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching bookings: {e}")
        return error_response("bookings_error", 500, str(e))


@bookings_bp.route("/<int:booking_id>", methods=["GET"])
@login_required
def get_booking(booking_id):
    try:
        booking = get_storage().get_booking_by_id(booking_id)
        if not booking:
            return error_response("booking_not_found", 404)
        if not can_access_booking(current_user(), booking):
            return error_response("forbidden", 403)
        return jsonify(booking.to_dict()), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching booking {booking_id}: {e}")
        return error_response("booking_error", 500, str(e))


@bookings_bp.route("/<int:booking_id>/status", methods=["PATCH"])
@login_required
def update_booking_status(booking_id):
    """
    Change a booking's status
    ---
    tags:
      - Bookings
    parameters:
      - name: booking_id
        in: path
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [status]
          properties:
            status:
              type: string
              enum: [pending, confirmed, completed, cancelled]
    responses:
      200:
        description: Updated booking
        schema:
          $ref: '#/definitions/Booking'
      400:
        description: Status is not one of the four allowed values
        schema:
          $ref: '#/definitions/Error'
      403:
        description: Not the customer, the salon owner or an admin
      404:
        description: Booking not found
    """
    try:
        payload = parse_body(BookingStatusUpdate)
    except ValidationError as e:
        return error_response("invalid_booking_status", 400, validation_details(e))

    storage = get_storage()
    try:
        booking = storage.get_booking_by_id(booking_id)
        if not booking:
            return error_response("booking_not_found", 404)
        if not can_access_booking(current_user(), booking):
            return error_response("forbidden", 403)

        booking = storage.update_booking_status(booking_id, payload.status)
        return jsonify(booking.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating booking {booking_id}: {e}")
        return error_response("booking_status_error", 500, str(e))


@bookings_bp.route("/<int:booking_id>/cancel", methods=["POST"])
@login_required
def cancel_booking(booking_id):
    storage = get_storage()
    try:
        booking = storage.get_booking_by_id(booking_id)
        if not booking:
            return error_response("booking_not_found", 404)
        if not can_access_booking(current_user(), booking):
            return error_response("forbidden", 403)

        booking = storage.cancel_booking(booking_id)
        return jsonify(booking.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error cancelling booking {booking_id}: {e}")
        return error_response("booking_status_error", 500, str(e))
