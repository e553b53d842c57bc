from flask import Blueprint, jsonify, request, current_app
from pydantic import ValidationError

from ..extensions import get_storage
from ..messages import error_response
from ..schemas import MembershipTierCreate
from ..utils.auth_utils import current_user, login_required, role_required
from ..utils.request_utils import arg_optional_bool, parse_body, validation_details

loyalty_bp = Blueprint("loyalty", __name__, url_prefix="/api")


@loyalty_bp.route("/membership-tiers", methods=["GET"])
def list_membership_tiers():
    try:
        tiers = get_storage().get_membership_tiers()
        return jsonify([tier.to_dict() for tier in tiers]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching membership tiers: {e}")
        return error_response("tiers_error", 500, str(e))


@loyalty_bp.route("/membership-tiers/<int:tier_id>", methods=["GET"])
def get_membership_tier(tier_id):
    try:
        tier = get_storage().get_membership_tier_by_id(tier_id)
        if not tier:
            return error_response("tier_not_found", 404)
        return jsonify(tier.to_dict()), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching membership tier {tier_id}: {e}")
        return error_response("tiers_error", 500, str(e))


@loyalty_bp.route("/membership-tiers", methods=["POST"])
@role_required("admin")
def create_membership_tier():
    try:
        payload = parse_body(MembershipTierCreate)
    except ValidationError as e:
        return error_response("invalid_tier", 400, validation_details(e))

    storage = get_storage()
    try:
        tier = storage.create_membership_tier(payload.model_dump())
        return jsonify(tier.to_dict()), 201

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error creating membership tier: {e}")
        return error_response("tier_save_error", 500, str(e))


@loyalty_bp.route("/user/loyalty", methods=["GET"])
@login_required
def my_loyalty():
    """
    Loyalty balance and tier progress of the current user
    ---
    tags:
      - Loyalty
    responses:
      200:
        description: Points, current tier and distance to the next tier
        schema:
          type: object
          properties:
            loyaltyPoints: {type: integer}
            membershipType: {type: string}
            currentTier: {type: object}
            nextTier: {type: object}
            pointsToNextTier: {type: integer}
    """
    try:
        storage = get_storage()
        user = current_user()
        points = user.loyalty_points or 0

        current_tier = storage.get_membership_tier_by_points_threshold(points)
        next_tier = next(
            (tier for tier in storage.get_membership_tiers() if tier.points_threshold > points),
            None,
        )

        return jsonify(
            {
                "loyaltyPoints": points,
                "membershipType": user.membership_type,
                "currentTier": current_tier.to_dict() if current_tier else None,
                "nextTier": next_tier.to_dict() if next_tier else None,
                "pointsToNextTier": next_tier.points_threshold - points if next_tier else 0,
            }
        ), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching loyalty points: {e}")
        return error_response("loyalty_error", 500, str(e))


@loyalty_bp.route("/promotions", methods=["GET"])
def list_promotions():
    try:
        salon_id = request.args.get("salonId", type=int)
        promotions = get_storage().get_promotions(
            is_active=arg_optional_bool("isActive"), salon_id=salon_id
        )
        return jsonify([promotion.to_dict() for promotion in promotions]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching promotions: {e}")
        return error_response("promotions_error", 500, str(e))


@loyalty_bp.route("/promotions/code/<code>", methods=["GET"])
def get_promotion_by_code(code):
    try:
        promotion = get_storage().get_promotion_by_code(code)
        if not promotion or not promotion.is_active:
            return error_response("promotion_not_found", 404)
        return jsonify(promotion.to_dict()), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching promotion {code}: {e}")
        return error_response("promotions_error", 500, str(e))
