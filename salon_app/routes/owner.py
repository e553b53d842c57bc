from flask import Blueprint, jsonify, current_app
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from ..extensions import get_storage
from ..messages import error_response
from ..models import Promotion, Salon, Service, Staff
from ..schemas import (
    PromotionCreate,
    PromotionUpdate,
    promotion_rule_error,
    SalonCreate,
    SalonUpdate,
    ServiceCreate,
    ServiceUpdate,
    StaffCreate,
    StaffUpdate,
)
from ..utils.auth_utils import current_user, owns_salon, role_required
from ..utils.request_utils import parse_body, update_fields, validation_details

owner_bp = Blueprint("owner", __name__, url_prefix="/api/owner")


def _owned_salons(user):
    storage = get_storage()
    if user.role == "admin":
        return storage.get_salons()
    return storage.get_salons_by_owner_id(user.id)


def _check_salon(salon_id):
    """Error response when the salon is missing or not the caller's, else None."""
    salon = get_storage().get_salon_by_id(salon_id)
    if not salon:
        return error_response("salon_not_found", 404)
    if not owns_salon(current_user(), salon):
        return error_response("forbidden", 403)
    return None


def _not_nullable_error(key, names):
    return error_response(key, 400, f"{', '.join(names)} cannot be null")


# -------------------------------------------------------------------------
# Salons
# -------------------------------------------------------------------------
@owner_bp.route("/salons", methods=["GET"])
@role_required("salon_owner")
def list_owned_salons():
    try:
        return jsonify([salon.to_dict() for salon in _owned_salons(current_user())]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching owner salons: {e}")
        return error_response("salons_error", 500, str(e))


@owner_bp.route("/salons", methods=["POST"])
@role_required("salon_owner")
def create_salon():
    """
    Register a new salon owned by the caller
    ---
    tags:
      - Owner
    parameters:
      - in: body
        name: body
        required: true
        schema:
          $ref: '#/definitions/Salon'
    responses:
      201:
        description: Salon created
        schema:
          $ref: '#/definitions/Salon'
      400:
        description: Invalid salon data
      403:
        description: Caller is not a salon owner
    """
    try:
        payload = parse_body(SalonCreate)
    except ValidationError as e:
        return error_response("invalid_salon", 400, validation_details(e))

    storage = get_storage()
    try:
        fields = payload.model_dump()
        fields["owner_id"] = current_user().id
        salon = storage.create_salon(fields)
        return jsonify(salon.to_dict()), 201

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error creating salon: {e}")
        return error_response("salon_save_error", 500, str(e))


@owner_bp.route("/salons/<int:salon_id>", methods=["PATCH"])
@role_required("salon_owner")
def update_salon(salon_id):
    try:
        payload = parse_body(SalonUpdate)
    except ValidationError as e:
        return error_response("invalid_salon", 400, validation_details(e))

    storage = get_storage()
    try:
        error = _check_salon(salon_id)
        if error:
            return error
        fields, not_nullable = update_fields(payload, Salon)
        if not_nullable:
            return _not_nullable_error("invalid_salon", not_nullable)
        salon = storage.update_salon(salon_id, fields)
        return jsonify(salon.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating salon {salon_id}: {e}")
        return error_response("salon_save_error", 500, str(e))


# -------------------------------------------------------------------------
# Services
# -------------------------------------------------------------------------
@owner_bp.route("/salons/<int:salon_id>/services", methods=["POST"])
@role_required("salon_owner")
def create_service(salon_id):
    try:
        payload = parse_body(ServiceCreate)
    except ValidationError as e:
        return error_response("invalid_service", 400, validation_details(e))

    storage = get_storage()
    try:
        error = _check_salon(salon_id)
        if error:
            return error
        fields = payload.model_dump()
        fields["salon_id"] = salon_id
        service = storage.create_service(fields)
        return jsonify(service.to_dict()), 201

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error creating service for salon {salon_id}: {e}")
        return error_response("service_save_error", 500, str(e))


@owner_bp.route("/services/<int:service_id>", methods=["PATCH"])
@role_required("salon_owner")
def update_service(service_id):
    try:
        payload = parse_body(ServiceUpdate)
    except ValidationError as e:
        return error_response("invalid_service", 400, validation_details(e))

    storage = get_storage()
    try:
        service = storage.get_service_by_id(service_id)
        if not service:
            return error_response("service_not_found", 404)
        error = _check_salon(service.salon_id)
        if error:
            return error

        fields, not_nullable = update_fields(payload, Service)
        if not_nullable:
            return _not_nullable_error("invalid_service", not_nullable)
        price = fields.get("price", service.price)
        discounted = fields.get("discounted_price", service.discounted_price)
        if discounted is not None and discounted > price:
            return error_response("invalid_service", 400, "discountedPrice cannot exceed price")

        service = storage.update_service(service_id, fields)
        return jsonify(service.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating service {service_id}: {e}")
        return error_response("service_save_error", 500, str(e))


@owner_bp.route("/services/<int:service_id>/bookings", methods=["GET"])
@role_required("salon_owner")
def list_service_bookings(service_id):
    try:
        storage = get_storage()
        service = storage.get_service_by_id(service_id)
        if not service:
            return error_response("service_not_found", 404)
        error = _check_salon(service.salon_id)
        if error:
            return error
        bookings = storage.get_bookings_by_service_id(service_id)
        return jsonify([booking.to_dict() for booking in bookings]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching bookings for service {service_id}: {e}")
        return error_response("bookings_error", 500, str(e))


# -------------------------------------------------------------------------
# Staff
# -------------------------------------------------------------------------
@owner_bp.route("/salons/<int:salon_id>/staff", methods=["POST"])
@role_required("salon_owner")
def create_staff(salon_id):
    try:
        payload = parse_body(StaffCreate)
    except ValidationError as e:
        return error_response("invalid_staff", 400, validation_details(e))

    storage = get_storage()
    try:
        error = _check_salon(salon_id)
        if error:
            return error
        fields = payload.model_dump()
        fields["salon_id"] = salon_id
        member = storage.create_staff(fields)
        return jsonify(member.to_dict()), 201

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error adding staff to salon {salon_id}: {e}")
        return error_response("staff_save_error", 500, str(e))


@owner_bp.route("/staff/<int:staff_id>", methods=["PATCH"])
@role_required("salon_owner")
def update_staff(staff_id):
    try:
        payload = parse_body(StaffUpdate)
    except ValidationError as e:
        return error_response("invalid_staff", 400, validation_details(e))

    storage = get_storage()
    try:
        member = storage.get_staff_by_id(staff_id)
        if not member:
            return error_response("staff_not_found", 404)
        error = _check_salon(member.salon_id)
        if error:
            return error
        fields, not_nullable = update_fields(payload, Staff)
        if not_nullable:
            return _not_nullable_error("invalid_staff", not_nullable)
        member = storage.update_staff(staff_id, fields)
        return jsonify(member.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating staff {staff_id}: {e}")
        return error_response("staff_save_error", 500, str(e))


# -------------------------------------------------------------------------
# Promotions
# -------------------------------------------------------------------------
def _check_promotion_scope(salon_id):
    # promotions without a salon are platform-wide and admin-only
    if salon_id is None:
        if current_user().role != "admin":
            return error_response("forbidden", 403)
        return None
    return _check_salon(salon_id)


@owner_bp.route("/promotions", methods=["POST"])
@role_required("salon_owner")
def create_promotion():
    try:
        payload = parse_body(PromotionCreate)
    except ValidationError as e:
        return error_response("invalid_promotion", 400, validation_details(e))

    storage = get_storage()
    try:
        error = _check_promotion_scope(payload.salon_id)
        if error:
            return error
        promotion = storage.create_promotion(payload.model_dump())
        return jsonify(promotion.to_dict()), 201

    except IntegrityError:
        storage.session.rollback()
        return error_response("invalid_promotion", 400, "Promotion code already exists")

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error creating promotion: {e}")
        return error_response("promotion_save_error", 500, str(e))


@owner_bp.route("/promotions/<int:promotion_id>", methods=["PATCH"])
@role_required("salon_owner")
def update_promotion(promotion_id):
    try:
        payload = parse_body(PromotionUpdate)
    except ValidationError as e:
        return error_response("invalid_promotion", 400, validation_details(e))

    storage = get_storage()
    try:
        promotion = storage.get_promotion_by_id(promotion_id)
        if not promotion:
            return error_response("promotion_not_found", 404)
        error = _check_promotion_scope(promotion.salon_id)
        if error:
            return error
        fields, not_nullable = update_fields(payload, Promotion)
        if not_nullable:
            return _not_nullable_error("invalid_promotion", not_nullable)
        rule_error = promotion_rule_error(
            fields.get("discount_type", promotion.discount_type),
            fields.get("discount_value", promotion.discount_value),
            fields.get("start_date", promotion.start_date),
            fields.get("end_date", promotion.end_date),
        )
        if rule_error:
            return error_response("invalid_promotion", 400, rule_error)

        promotion = storage.update_promotion(promotion_id, fields)
        return jsonify(promotion.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating promotion {promotion_id}: {e}")
        return error_response("promotion_save_error", 500, str(e))


# -------------------------------------------------------------------------
# Incoming bookings
# -------------------------------------------------------------------------
@owner_bp.route("/bookings", methods=["GET"])
@role_required("salon_owner")
def list_salon_bookings():
    """
    Bookings across all of the caller's salons
    ---
    tags:
      - Owner
    responses:
      200:
        description: Bookings ordered by salon, then id
        schema:
          type: array
          items:
            $ref: '#/definitions/Booking'
    """
    try:
        storage = get_storage()
        bookings = []
        for salon in _owned_salons(current_user()):
            bookings.extend(storage.get_bookings_by_salon_id(salon.id))
        return jsonify([booking.to_dict() for booking in bookings]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching salon bookings: {e}")
        return error_response("bookings_error", 500, str(e))
