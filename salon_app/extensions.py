from flask import current_app
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def get_storage():
    """Storage repository built by create_app()."""
    return current_app.extensions["storage"]


def get_payment_service():
    return current_app.extensions["payments"]


def get_recommender():
    return current_app.extensions["recommender"]
