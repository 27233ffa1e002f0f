# File: triviastack_app/db_instance.py
import sqlite3

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _set_sqlite_pragmas(dbapi_connection, _connection_record):
    """Enable WAL mode, extend the busy timeout and hand transaction control to SQLAlchemy."""

    if not isinstance(dbapi_connection, sqlite3.Connection):
        return

    # pysqlite defers BEGIN until the first write, which would leave the reads
    # of a grading unit outside its transaction. BEGIN is emitted in _begin_sqlite.
    dbapi_connection.isolation_level = None

    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL;")
        cursor.execute("PRAGMA synchronous=NORMAL;")
        cursor.execute("PRAGMA busy_timeout=30000;")
        cursor.execute("PRAGMA foreign_keys=ON;")
    finally:
        cursor.close()


@event.listens_for(Engine, "begin")
def _begin_sqlite(connection):
    """Open an explicit SQLite transaction that holds the write lock from its first statement.

    A deferred BEGIN lets two units read, then fail the lock upgrade with
    SQLITE_BUSY without waiting on busy_timeout. IMMEDIATE makes writers queue.
    """

    if connection.dialect.name == "sqlite":
        connection.exec_driver_sql("BEGIN IMMEDIATE")
