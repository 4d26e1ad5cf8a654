from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from sitecms.extensions import db

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def dialect_insert(model):
    """
    Return an ``INSERT`` construct that supports ``ON CONFLICT`` for the
    dialect the session is bound to.
    """
    dialect = db.session.get_bind().dialect.name
    try:
        return _INSERTS[dialect](model)
    except KeyError:
        raise NotImplementedError(f"ON CONFLICT upserts are not supported on {dialect}")
