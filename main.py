from flask import Flask
from flask_cors import CORS
from flasgger import Swagger
from openai import OpenAI
from swagger__config import SWAGGER_CONFIG, SWAGGER_TEMPLATE
import os

from salon_app.config import Config, is_in_memory_database
from salon_app.extensions import db
from salon_app.messages import error_response
from salon_app.models import Base
from salon_app.routes.auth import auth_bp
from salon_app.routes.bookings import bookings_bp
from salon_app.routes.loyalty import loyalty_bp
from salon_app.routes.owner import owner_bp
from salon_app.routes.payments import payments_bp
from salon_app.routes.recommendations import recommendations_bp
from salon_app.routes.reviews import reviews_bp
from salon_app.routes.salons import salons_bp
from salon_app.scheduler import init_scheduler
from salon_app.seed import seed_demo_data
from salon_app.services.ai_service import RecommendationService
from salon_app.services.payment_service import PaymentGateway, PaymentService
from salon_app.storage import Storage


def create_app(test_config=None):
    app = Flask(__name__)
    try:
        app.config.from_object(Config)
        if test_config:
            app.config.update(test_config)

        app.logger.setLevel(app.config["LOG_LEVEL"])
        app.json.ensure_ascii = app.config.get("JSON_AS_ASCII", False)

        CORS(app)

        db.init_app(app)
        storage = Storage(db)
        with app.app_context():
            Base.metadata.create_all(bind=db.engine)
            if app.config["SEED_DEMO_DATA"]:
                if seed_demo_data(storage, app.config["BCRYPT_ROUNDS"]):
                    app.logger.info("Demo data loaded")

        if is_in_memory_database(app.config["SQLALCHEMY_DATABASE_URI"]):
            app.logger.info("Using in-memory store; data lives as long as the process")

        app.extensions["storage"] = storage
        app.extensions["payments"] = PaymentService(
            storage,
            PaymentGateway(app.config["STRIPE_SECRET_KEY"], app.config["PAYMENT_CURRENCY"]),
            app.config["LOYALTY_POINTS_PER_BOOKING"],
        )
        openai_key = app.config["OPENAI_API_KEY"]
        app.extensions["recommender"] = RecommendationService(
            OpenAI(api_key=openai_key) if openai_key else None,
            app.config["OPENAI_MODEL"],
            app.config["RECOMMENDATION_MAX_LIMIT"],
        )

        # Determine host based on environment
        host = os.environ.get("API_HOST", "127.0.0.1:5000")
        swagger_template = SWAGGER_TEMPLATE.copy()
        swagger_template["host"] = host
        Swagger(app, config=SWAGGER_CONFIG, template=swagger_template)

        blueprints = [
            auth_bp,
            salons_bp,
            bookings_bp,
            reviews_bp,
            owner_bp,
            loyalty_bp,
            payments_bp,
            recommendations_bp,
        ]

        for bp in blueprints:
            app.register_blueprint(bp)
            app.logger.debug(f"  ✓ {bp.name} registered")

        @app.errorhandler(404)
        def not_found(e):
            return error_response("not_found", 404)

        @app.errorhandler(405)
        def method_not_allowed(e):
            return error_response("method_not_allowed", 405)

        @app.errorhandler(500)
        def server_error(e):
            return error_response("server_error", 500)

        @app.route("/")
        def home():
            """
            Root endpoint - API status
            ---
            tags:
              - Utility
            responses:
              200:
                description: API is running
                schema:
                  type: object
                  properties:
                    status:
                      type: string
                    message:
                      type: string
            """
            return {"status": "ok", "message": "Salon booking API is running"}, 200

        init_scheduler(app)

        app.logger.debug(f"Total routes registered: {len(list(app.url_map.iter_rules()))}")

    except Exception as e:
        app.logger.error(f"Error during app creation: {e}")
        raise

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(
        host="0.0.0.0", port=port, debug=os.environ.get("FLASK_ENV") != "production"
    )
