"""
Health Check Route
Verifies the API is running and the database answers
"""
from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from weddinghub.logger_config import app_logger
from weddinghub.models import db

bp = Blueprint("health", __name__)


@bp.route("/health", methods=["GET"])
def health():
    """
    GET /api/health
    Health check endpoint - no authentication required
    """
    try:
        db.session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        db.session.rollback()
        app_logger.error(f"Health check database ping failed: {e}")
        database = "unavailable"

    status_code = 200 if database == "ok" else 503
    return jsonify({
        "status": "ok" if status_code == 200 else "degraded",
        "service": "muslim wedding hub backend",
        "database": database
    }), status_code
