from flask import Blueprint, jsonify, request, current_app

from ..extensions import get_storage
from ..messages import error_response
from ..utils.request_utils import arg_flag, arg_optional_bool

salons_bp = Blueprint("salons", __name__, url_prefix="/api")

SALON_FLAGS = {
    "hasPrivateRooms": "has_private_rooms",
    "hasFemaleStaffOnly": "has_female_staff_only",
    "providesHomeService": "provides_home_service",
}


@salons_bp.route("/salons", methods=["GET"])
def list_salons():
    """
    Browse salons
    ---
    tags:
      - Salons
    parameters:
      - name: gender
        in: query
        type: string
        enum: [female_only, male_only, both, female, male]
        description: Salons with this policy, plus salons serving both
      - name: city
        in: query
        type: string
        description: Arabic or English city name, case-insensitive
      - name: hasPrivateRooms
        in: query
        type: string
        enum: ["true"]
      - name: hasFemaleStaffOnly
        in: query
        type: string
        enum: ["true"]
      - name: providesHomeService
        in: query
        type: string
        enum: ["true"]
      - name: category
        in: query
        type: string
    responses:
      200:
        description: Salons matching every supplied filter
        schema:
          type: array
          items:
            $ref: '#/definitions/Salon'
      500:
        description: Storage error
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        filters = {
            "gender": request.args.get("gender"),
            "city": request.args.get("city"),
            "category": request.args.get("category"),
        }
        for arg, key in SALON_FLAGS.items():
            filters[key] = arg_flag(arg)

        salons = get_storage().get_salons(filters)
        return jsonify([salon.to_dict() for salon in salons]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching salons: {e}")
        return error_response("salons_error", 500, str(e))


@salons_bp.route("/salons/<int:salon_id>", methods=["GET"])
def get_salon(salon_id):
    """
    Salon details
    ---
    tags:
      - Salons
    parameters:
      - name: salon_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: The salon
        schema:
          $ref: '#/definitions/Salon'
      404:
        description: Salon not found
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        salon = get_storage().get_salon_by_id(salon_id)
        if not salon:
            return error_response("salon_not_found", 404)
        return jsonify(salon.to_dict()), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching salon {salon_id}: {e}")
        return error_response("salon_error", 500, str(e))


@salons_bp.route("/salons/<int:salon_id>/services", methods=["GET"])
def list_salon_services(salon_id):
    """
    Services offered by a salon
    ---
    tags:
      - Services
    parameters:
      - name: salon_id
        in: path
        type: integer
        required: true
      - name: category
        in: query
        type: string
      - name: isAvailable
        in: query
        type: string
        enum: ["true", "false"]
    responses:
      200:
        description: Services of the salon
        schema:
          type: array
          items:
            $ref: '#/definitions/Service'
    """
    try:
        services = get_storage().get_services(
            salon_id,
            category=request.args.get("category"),
            is_available=arg_optional_bool("isAvailable"),
        )
        return jsonify([service.to_dict() for service in services]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching services for salon {salon_id}: {e}")
        return error_response("services_error", 500, str(e))


@salons_bp.route("/salons/<int:salon_id>/featured-services", methods=["GET"])
def list_featured_services(salon_id):
    try:
        services = get_storage().get_featured_services(salon_id)
        return jsonify([service.to_dict() for service in services]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching featured services for salon {salon_id}: {e}")
        return error_response("featured_error", 500, str(e))


@salons_bp.route("/salons/<int:salon_id>/reviews", methods=["GET"])
def list_salon_reviews(salon_id):
    """
    Visible reviews of a salon
    ---
    tags:
      - Reviews
    parameters:
      - name: salon_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: Reviews not hidden by the owner
        schema:
          type: array
          items:
            $ref: '#/definitions/Review'
    """
    try:
        reviews = get_storage().get_reviews_by_salon_id(salon_id)
        return jsonify([review.to_dict() for review in reviews]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching reviews for salon {salon_id}: {e}")
        return error_response("reviews_error", 500, str(e))


@salons_bp.route("/salons/<int:salon_id>/staff", methods=["GET"])
def list_salon_staff(salon_id):
    try:
        staff = get_storage().get_staff_by_salon_id(salon_id)
        return jsonify([member.to_dict() for member in staff]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching staff for salon {salon_id}: {e}")
        return error_response("staff_error", 500, str(e))


@salons_bp.route("/salons/<int:salon_id>/promotions", methods=["GET"])
def list_salon_promotions(salon_id):
    try:
        promotions = get_storage().get_promotions(is_active=True, salon_id=salon_id)
        return jsonify([promotion.to_dict() for promotion in promotions]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching promotions for salon {salon_id}: {e}")
        return error_response("promotions_error", 500, str(e))


@salons_bp.route("/services/promoted", methods=["GET"])
def list_promoted_services():
    try:
        services = get_storage().get_promoted_services()
        return jsonify([service.to_dict() for service in services]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching promoted services: {e}")
        return error_response("services_error", 500, str(e))


@salons_bp.route("/services/<int:service_id>", methods=["GET"])
def get_service(service_id):
    """
    Service details
    ---
    tags:
      - Services
    parameters:
      - name: service_id
        in: path
        type: integer
        required: true
    responses:
      200:
        description: The service
        schema:
          $ref: '#/definitions/Service'
      404:
        description: Service not found
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        service = get_storage().get_service_by_id(service_id)
        if not service:
            return error_response("service_not_found", 404)
        return jsonify(service.to_dict()), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching service {service_id}: {e}")
        return error_response("service_error", 500, str(e))
