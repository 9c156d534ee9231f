import logging
from datetime import datetime

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError
from blockpress.extensions import db

logger = logging.getLogger(__name__)


def home_index():
    return jsonify({
        "message": "blockpress content API",
    })


def health_check():
    db_status = "healthy"
    try:
        db.session.execute(db.text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        db_status = "unhealthy"

    return jsonify({
        "status": "online",
        "database": db_status,
        "server_time": datetime.utcnow().isoformat(),
    }), (200 if db_status == "healthy" else 503)
