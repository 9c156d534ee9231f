from flask import Flask
from blockpress.extensions import db, cors, migrate
from blockpress.log_config import configure_logging
from blockpress.routes import register_routes

# Import models so metadata is complete for create_all / migrations
from blockpress import models  # noqa: F401


def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    # Initialize database
    db.init_app(app)

    # Initialize Flask-Migrate
    migrate.init_app(app, db)

    # CORS Configuration
    cors.init_app(app,
                  origins=app.config.get("CORS_ORIGINS", []),
                  supports_credentials=True,
                  allow_headers=["Content-Type", "Authorization", "If-Match"],
                  methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
                  expose_headers=["Content-Type", "ETag"])

    register_routes(app)

    return app
