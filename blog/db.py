import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from blog.errors import StorageError

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


@event.listens_for(Engine, "connect")
def _configure_sqlite(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return

    # sqlite ignores ON DELETE CASCADE unless foreign keys are switched on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

    # pysqlite defers BEGIN on its own, which breaks savepoints;
    # _begin_sqlite below emits it instead
    dbapi_connection.isolation_level = None


@event.listens_for(Engine, "begin")
def _begin_sqlite(conn):
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN")


@contextmanager
def storage_guard():
    """Turn driver faults into StorageError, leaving the session clean.

    IntegrityError passes through untouched so callers can map it to a
    conflict.
    """
    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error("Storage failure: %s", e)
        raise StorageError(str(e)) from e
