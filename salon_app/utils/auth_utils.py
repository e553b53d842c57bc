import datetime
from functools import wraps

import bcrypt
import jwt
from flask import current_app, request, session

from ..extensions import get_storage
from ..messages import error_response


def hash_password(password, rounds=12):
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password, password_hash):
    if not password_hash:
        return False
    stored_hash = password_hash
    if isinstance(stored_hash, str):
        stored_hash = stored_hash.encode("utf-8")
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored_hash)
    except ValueError:
        # not a bcrypt hash
        return False


def create_token(user):
    payload = {
        "user_id": user.id,
        "username": user.username,
        "role": user.role,
        "exp": datetime.datetime.now(datetime.timezone.utc)
        + datetime.timedelta(hours=current_app.config.get("JWT_EXPIRES_HOURS", 1)),
    }
    return jwt.encode(payload, current_app.config["SECRET_KEY"], algorithm="HS256")


def decode_token(token):
    """Return the token's user id, or None when it is invalid or expired."""
    try:
        payload = jwt.decode(
            token, current_app.config["SECRET_KEY"], algorithms=["HS256"]
        )
    except jwt.InvalidTokenError as e:
        current_app.logger.info(f"Rejected bearer token: {e}")
        return None
    return payload.get("user_id")


def login_user(user):
    session.clear()
    session["user_id"] = user.id


def logout_user():
    session.clear()


def current_user():
    """
    Resolve the caller from an ``Authorization: Bearer`` token or, failing
    that, the session cookie set at login.
    """
    user_id = None
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        user_id = decode_token(header[len("Bearer "):].strip())
    if user_id is None:
        user_id = session.get("user_id")

    if user_id is None:
        return None
    return get_storage().get_user(user_id)


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return error_response("login_required", 401)
        return view(*args, **kwargs)

    return wrapped


def role_required(*roles):
    """Like login_required, plus a role check. Admins pass every role check."""

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            user = current_user()
            if user is None:
                return error_response("login_required", 401)
            if user.role != "admin" and user.role not in roles:
                return error_response("forbidden", 403)
            return view(*args, **kwargs)

        return wrapped

    return decorator


def owns_salon(user, salon):
    return user.role == "admin" or (salon is not None and salon.owner_id == user.id)
