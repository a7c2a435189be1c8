"""Application factory and app-wide configuration."""

from flask import Flask
from flask_cors import CORS

from investsim.app.api.routes import api_bp
from investsim.core.config import Settings, settings as default_settings
from investsim.core.logger import configure_logging


def create_app(settings: Settings = default_settings) -> Flask:
    """Build the Flask app instance."""
    configure_logging(settings.LOG_LEVEL)

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.config["DEBUG"] = settings.DEBUG

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.CORS_ORIGINS}},
        supports_credentials=True,
    )

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
