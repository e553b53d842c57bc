from flask import Blueprint, jsonify, request, current_app

from ..extensions import get_recommender, get_storage
from ..messages import error_response, t
from ..utils.auth_utils import current_user, login_required

recommendations_bp = Blueprint("recommendations", __name__, url_prefix="/api")


def _preferences_arg():
    raw = request.args.get("preferences", "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@recommendations_bp.route("/recommendations", methods=["GET"])
@login_required
def get_recommendations():
    """
    Personalized service recommendations
    ---
    tags:
      - Recommendations
    parameters:
      - name: salonId
        in: query
        type: integer
        description: Only recommend services of this salon
      - name: limit
        in: query
        type: integer
        description: Number of recommendations, 1 to 5 (default 3)
      - name: preferences
        in: query
        type: string
        description: Comma-separated extra preferences
    responses:
      200:
        description: Recommendations sorted by score, highest first
        schema:
          type: object
          properties:
            recommendations:
              type: array
              items:
                $ref: '#/definitions/Recommendation'
            message:
              type: string
      404:
        description: Salon not found
    """
    try:
        storage = get_storage()
        user = current_user()
        salon_id = request.args.get("salonId", type=int)
        limit = request.args.get(
            "limit", current_app.config["RECOMMENDATION_DEFAULT_LIMIT"], type=int
        )

        if salon_id is not None:
            if not storage.get_salon_by_id(salon_id):
                return error_response("salon_not_found", 404)
            candidates = storage.get_services(salon_id, is_available=True)
        else:
            candidates = storage.get_all_services(only_available=True)

        recommendations = get_recommender().recommend(
            user,
            candidates,
            history=storage.get_bookings_by_user_id(user.id),
            salon_id=salon_id,
            preferences=_preferences_arg(),
            limit=limit,
        )
        return jsonify(
            {"recommendations": recommendations, "message": t("recommendations_ready")}
        ), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching recommendations: {e}")
        return error_response("recommendations_error", 500, str(e))


@recommendations_bp.route("/user/welcome-message", methods=["GET"])
@login_required
def get_welcome_message():
    try:
        storage = get_storage()
        user = current_user()
        recommender = get_recommender()

        recommendations = recommender.recommend(
            user,
            storage.get_all_services(only_available=True),
            history=storage.get_bookings_by_user_id(user.id),
            limit=current_app.config["RECOMMENDATION_DEFAULT_LIMIT"],
        )
        message = recommender.welcome_message(user, recommendations)
        return jsonify({"message": message, "recommendations": recommendations}), 200

    except Exception as e:
        current_app.logger.error(f"Error creating welcome message: {e}")
        return error_response("welcome_error", 500, str(e))


@recommendations_bp.route("/services/<int:service_id>/suggested-times", methods=["GET"])
@login_required
def get_suggested_times(service_id):
    try:
        service = get_storage().get_service_by_id(service_id)
        if not service:
            return error_response("service_not_found", 404)

        times = get_recommender().suggest_times(service, current_user())
        return jsonify({"times": times}), 200

    except Exception as e:
        current_app.logger.error(f"Error suggesting times for service {service_id}: {e}")
        return error_response("suggested_times_error", 500, str(e))
