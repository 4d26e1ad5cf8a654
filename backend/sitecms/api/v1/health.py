from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sitecms.extensions import db
from . import v1_bp

@v1_bp.route('/health', methods=['GET'])
def health_check():
    database = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        current_app.logger.warning("Health check could not reach the database: %s", exc)
        database = "unavailable"

    return jsonify({
        "status": "ok" if database == "ok" else "degraded",
        "service": "sitecms",
        "database": database,
        "mock_mode": bool(current_app.config.get("DATABASE_MOCK_MODE")),
    })
