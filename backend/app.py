# backend/app.py

import logging
import os
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from . import db
from .auth import auth_bp, jwt
from .errors import register_error_handlers
from .transactions import bp as transactions_bp

# ---------------- Configuration ----------------
logger = logging.getLogger("finance-backend")

DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "finance.db")
TOKEN_LIFETIME = timedelta(days=30)


def configure_logging(level=None):
    level = level or os.environ.get("LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ---------------- Flask App Factory ----------------
def create_app(test_config=None):
    app = Flask(__name__)

    app.config.from_mapping(
        JWT_SECRET_KEY=os.environ.get("JWT_SECRET_KEY", "dev-key-for-local-development-only-change-me"),
        JWT_ACCESS_TOKEN_EXPIRES=TOKEN_LIFETIME,
        DB_PATH=os.environ.get("DB_PATH", DEFAULT_DB_PATH),
        CORS_ORIGINS=os.environ.get("CORS_ORIGINS", "http://localhost:8501"),
    )
    if test_config:
        app.config.update(test_config)

    jwt.init_app(app)

    # CORS
    origins = [o.strip() for o in app.config["CORS_ORIGINS"].split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}})

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(transactions_bp, url_prefix="/api/transactions")

    register_error_handlers(app)

    # Initialize DB
    db.init_app(app)
    logger.info(f"Database initialized at {app.config['DB_PATH']}")

    # ---------------- Core Endpoints ----------------
    @app.route("/")
    def root():
        return jsonify({"msg": "Finance Tracker API Running"})

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


def main():
    load_dotenv()
    configure_logging()
    app = create_app()
    port = int(os.environ.get("PORT", 5001))
    logger.info(f"🚀 Server running on port {port}")
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
