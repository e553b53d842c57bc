from flask import Blueprint, jsonify, current_app
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from ..extensions import get_storage
from ..messages import error_response, t
from ..models import User
from ..schemas import LoginRequest, UserRegister, UserUpdate
from ..utils.auth_utils import (
    create_token,
    current_user,
    hash_password,
    login_required,
    login_user,
    logout_user,
    verify_password,
)
from ..utils.request_utils import parse_body, update_fields, validation_details

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.route("/register", methods=["POST"])
def register():
    """
    Register a customer or salon owner account
    ---
    tags:
      - Authentication
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [username, password, name, email, phoneNumber]
          properties:
            username: {type: string}
            password: {type: string}
            name: {type: string}
            email: {type: string}
            phoneNumber: {type: string}
            role: {type: string, enum: [customer, salon_owner]}
            gender: {type: string}
            language: {type: string, enum: [ar, en]}
    responses:
      201:
        description: Account created and logged in
        schema:
          $ref: '#/definitions/User'
      400:
        description: Invalid data, or username/email already in use
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        payload = parse_body(UserRegister)
    except ValidationError as e:
        return error_response("invalid_registration", 400, validation_details(e))

    storage = get_storage()
    try:
        if storage.get_user_by_username(payload.username):
            return error_response("username_taken", 400)
        if storage.get_user_by_email(payload.email):
            return error_response("email_taken", 400)

        fields = payload.model_dump(exclude={"password"})
        fields["password_hash"] = hash_password(
            payload.password, current_app.config["BCRYPT_ROUNDS"]
        )
        tier = storage.get_membership_tier_by_points_threshold(0)
        if tier is not None:
            fields["membership_type"] = tier.name_en or tier.name
        user = storage.create_user(fields)
        login_user(user)

        return jsonify(user.to_dict()), 201

    except IntegrityError:
        storage.session.rollback()
        return error_response("username_taken", 400)

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error registering user: {e}")
        return error_response("registration_error", 500, str(e))


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Log in with username and password
    ---
    tags:
      - Authentication
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [username, password]
          properties:
            username: {type: string}
            password: {type: string}
    responses:
      200:
        description: Session cookie set; JWT returned for bearer auth
        schema:
          type: object
          properties:
            user:
              $ref: '#/definitions/User'
            token:
              type: string
      401:
        description: Invalid credentials
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        payload = parse_body(LoginRequest)
    except ValidationError:
        return error_response("invalid_credentials", 401)

    storage = get_storage()
    try:
        user = storage.get_user_by_username(payload.username)
        if not user or not verify_password(payload.password, user.password_hash):
            return error_response("invalid_credentials", 401)

        storage.record_login(user.id)
        login_user(user)

        return jsonify({"user": user.to_dict(), "token": create_token(user)}), 200

    except Exception as e:
        current_app.logger.error(f"Error logging in: {e}")
        return error_response("login_error", 500, str(e))


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"message": t("logged_out")}), 200


@auth_bp.route("/user", methods=["GET"])
@login_required
def get_current_user():
    """
    Current user profile
    ---
    tags:
      - Authentication
    responses:
      200:
        description: The logged-in user
        schema:
          $ref: '#/definitions/User'
      401:
        description: Not logged in
    """
    return jsonify(current_user().to_dict()), 200


@auth_bp.route("/user", methods=["PATCH"])
@login_required
def update_current_user():
    try:
        payload = parse_body(UserUpdate)
    except ValidationError as e:
        return error_response("invalid_profile", 400, validation_details(e))

    storage = get_storage()
    user = current_user()
    try:
        fields, not_nullable = update_fields(payload, User)
        if not_nullable:
            return error_response(
                "invalid_profile", 400, f"{', '.join(not_nullable)} cannot be null"
            )
        email = fields.get("email")
        if email:
            other = storage.get_user_by_email(email)
            if other is not None and other.id != user.id:
                return error_response("email_taken", 400)

        user = storage.update_user(user.id, fields)
        return jsonify(user.to_dict()), 200

    except Exception as e:
        storage.session.rollback()
        current_app.logger.error(f"Error updating profile for user {user.id}: {e}")
        return error_response("profile_error", 500, str(e))
