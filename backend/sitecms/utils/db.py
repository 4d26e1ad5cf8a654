import logging
import time
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, current_app
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError

from sitecms.domain.exceptions import TransientDbError
from sitecms.extensions import db

logger = logging.getLogger(__name__)

MOCK_DATABASE_URI = "sqlite://"
LOCAL_HOSTS = {"", "localhost", "127.0.0.1", "::1"}
CONNECTION_ERROR_MARKERS = (
    "econnreset",
    "econnrefused",
    "etimedout",
    "connection reset",
    "connection refused",
    "could not connect",
    "server closed the connection",
    "connection timed out",
    "terminating connection",
)


def configure_database(app: Flask) -> None:
    """
    Resolve the database URI and pool options before Flask-SQLAlchemy binds.

    Without a configured URI the app runs in mock mode on an in-memory
    SQLite database: every read comes back empty and nothing is durable.
    """
    uri = app.config.get("SQLALCHEMY_DATABASE_URI")
    if not uri:
        app.logger.warning(
            "No database URI configured, running with an in-memory mock database"
        )
        app.config["SQLALCHEMY_DATABASE_URI"] = MOCK_DATABASE_URI
        app.config["DATABASE_MOCK_MODE"] = True
        return

    app.config["DATABASE_MOCK_MODE"] = False
    options = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
    options.update(engine_options(uri, app.config.get("DB_POOL_SIZE", 10)))
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = options


def engine_options(uri: str, pool_size: int) -> Dict[str, Any]:
    url = make_url(uri)
    if url.get_backend_name() == "sqlite":
        return {}

    # Remote databases fail fast on pool checkout
    local = (url.host or "") in LOCAL_HOSTS
    return {
        "pool_size": pool_size,
        "pool_pre_ping": True,
        "pool_timeout": 30 if local else 5,
    }


def is_connection_error(exc: BaseException) -> bool:
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if not isinstance(exc, (OperationalError, InterfaceError)):
        return False
    message = f"{exc} {getattr(exc, 'orig', '')}".lower()
    return any(marker in message for marker in CONNECTION_ERROR_MARKERS)


def with_db_retry(fn=None, *, attempts: Optional[int] = None):
    """
    Retry a unit of database work on connection-level failures.

    The session is rolled back between attempts and the wait doubles each
    time (``DB_RETRY_BASE_DELAY``, ``DB_RETRY_ATTEMPTS``). Any other error
    propagates untouched.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            max_attempts = attempts or current_app.config.get("DB_RETRY_ATTEMPTS", 3)
            base_delay = current_app.config.get("DB_RETRY_BASE_DELAY", 0.5)

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except (OperationalError, InterfaceError) as exc:
                    if not is_connection_error(exc):
                        raise
                    db.session.rollback()
                    if attempt == max_attempts:
                        logger.error(
                            "Database unreachable after %s attempts in %s",
                            attempt,
                            func.__name__,
                        )
                        raise TransientDbError(
                            f"Database connection failed after {attempt} attempts"
                        ) from exc
                    delay = base_delay * (2 ** (attempt - 1))
                    logger.warning(
                        "Connection error in %s (attempt %s/%s), retrying in %.2fs: %s",
                        func.__name__,
                        attempt,
                        max_attempts,
                        delay,
                        exc,
                    )
                    time.sleep(delay)

        return wrapper

    if fn is not None:
        return decorator(fn)
    return decorator
