from flask import Blueprint, jsonify, current_app
from pydantic import ValidationError

from ..extensions import get_storage
from ..messages import error_response
from ..schemas import ReviewCreate, ReviewResponse, ReviewVisibility
from ..utils.auth_utils import current_user, login_required, owns_salon
from ..utils.request_utils import parse_body, validation_details

reviews_bp = Blueprint("reviews", __name__, url_prefix="/api/reviews")


@reviews_bp.route("", methods=["POST"])
@login_required
def create_review():
    """
    Review a salon
    ---
    tags:
      - Reviews
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [salonId, rating]
          properties:
            salonId: {type: integer}
            rating: {type: number, minimum: 1, maximum: 5}
            comment: {type: string}
            serviceId: {type: integer}
            bookingId: {type: integer}
    responses:
      201:
        description: Review stored; salon rating recomputed
        schema:
          $ref: '#/definitions/Review'
      400:
        description: Invalid review data
      404:
        description: Salon or booking not found
    """
    try:
        payload = parse_body(ReviewCreate)
    except ValidationError as e:
        return error_response("invalid_review", 400, validation_details(e))

    storage = get_storage()
    user = current_user()
    try:
        if not storage.get_salon_by_id(payload.salon_id):
            return error_response("salon_not_found", 404)

        if payload.booking_id is not None:
            booking = storage.get_booking_by_id(payload.booking_id)
            if not booking:
                return error_response("booking_not_found", 404)
            if booking.user_id != user.id:
                return error_response("forbidden", 403)

        fields = payload.model_dump()
        fields["user_id"] = user.id
        review = storage.create_review(fields)
        return jsonify(review.to_dict()), 201

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error creating review: {e}")
        return error_response("review_create_error", 500, str(e))


@reviews_bp.route("/my", methods=["GET"])
@login_required
def my_reviews():
    try:
        reviews = get_storage().get_reviews_by_user_id(current_user().id)
        return jsonify([review.to_dict() for review in reviews]), 200

    except Exception as e:
        current_app.logger.error(f"Error fetching reviews: {e}")
        return error_response("reviews_error", 500, str(e))


def _owned_review(review_id):
    """Return (review, None) or (None, error response) for the salon's owner."""
    storage = get_storage()
    review = storage.get_review_by_id(review_id)
    if not review:
        return None, error_response("review_not_found", 404)
    if not owns_salon(current_user(), storage.get_salon_by_id(review.salon_id)):
        return None, error_response("forbidden", 403)
    return review, None


@reviews_bp.route("/<int:review_id>/response", methods=["POST"])
@login_required
def respond_to_review(review_id):
    try:
        payload = parse_body(ReviewResponse)
    except ValidationError as e:
        return error_response("invalid_review", 400, validation_details(e))

    storage = get_storage()
    try:
        review, error = _owned_review(review_id)
        if error:
            return error

        review = storage.respond_to_review(review.id, payload.response)
        return jsonify(review.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error responding to review {review_id}: {e}")
        return error_response("review_update_error", 500, str(e))


@reviews_bp.route("/<int:review_id>/visibility", methods=["PATCH"])
@login_required
def set_review_visibility(review_id):
    """
    Hide or show a review
    ---
    tags:
      - Reviews
    parameters:
      - name: review_id
        in: path
        type: integer
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [isHidden]
          properties:
            isHidden: {type: boolean}
    responses:
      200:
        description: Updated review; salon rating recomputed over visible reviews
        schema:
          $ref: '#/definitions/Review'
      403:
        description: Caller does not own the salon
      404:
        description: Review not found
    """
    try:
        payload = parse_body(ReviewVisibility)
    except ValidationError as e:
        return error_response("invalid_review", 400, validation_details(e))

    storage = get_storage()
    try:
        review, error = _owned_review(review_id)
        if error:
            return error

        review = storage.set_review_hidden(review.id, payload.is_hidden)
        return jsonify(review.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating review {review_id}: {e}")
        return error_response("review_update_error", 500, str(e))
