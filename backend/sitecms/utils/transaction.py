import logging
from contextlib import contextmanager
from typing import Optional

from sitecms.extensions import db

logger = logging.getLogger(__name__)


@contextmanager
def transactional(label: Optional[str] = None):
    """
    Commit the session when the block exits cleanly, roll back otherwise.

    Nested use is not supported: the innermost block commits everything
    pending in the session.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.debug("Rolled back transaction%s", f" ({label})" if label else "")
        raise
