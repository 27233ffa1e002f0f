"""Unit-of-work boundary shared by the grading and dispute services."""

from __future__ import annotations

from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError

from ..extensions import db
from .error_handlers import ConflictError, ConsistencyFailure, TriviaStackError

# SQLite lock errors and PostgreSQL serialization / deadlock failures.
_CONTENTION_MARKERS = ('database is locked', 'database table is locked', 'database is busy')
_RETRYABLE_PGCODES = ('40001', '40P01')


def _is_contention(error: OperationalError) -> bool:
    if getattr(error.orig, 'pgcode', None) in _RETRYABLE_PGCODES:
        return True
    message = str(error.orig).lower()
    return any(marker in message for marker in _CONTENTION_MARKERS)


@contextmanager
def unit_of_work(name: str):
    """
    Run the enclosed block as one all-or-nothing transaction.

    Commits when the block finishes, otherwise rolls back every write made
    through ``db.session`` and re-raises. A lost write race (lock timeout,
    serialization failure, uniqueness violation) surfaces as ``ConflictError``
    so the caller can re-read state and retry. The isolation level configured
    in GRADING_ISOLATION_LEVEL is applied when the unit opens a fresh connection.
    """
    session = db.session
    try:
        isolation = current_app.config.get('GRADING_ISOLATION_LEVEL')
        if isolation and not session.in_transaction():
            session.connection(execution_options={'isolation_level': isolation})

        yield session
        session.commit()
    except ConsistencyFailure as e:
        session.rollback()
        current_app.logger.critical(f"[{name}] {e.message} {e.details}")
        raise
    except TriviaStackError as e:
        session.rollback()
        current_app.logger.warning(f"[{name}] {e.code}: {e.message}")
        raise
    except IntegrityError as e:
        session.rollback()
        current_app.logger.warning(f"[{name}] write conflict, rolled back: {e.orig}")
        raise ConflictError('Concurrent update conflict, retry the operation',
                            details={'operation': name}) from e
    except OperationalError as e:
        session.rollback()
        if not _is_contention(e):
            current_app.logger.error(f"[{name}] unit of work failed, rolled back", exc_info=True)
            raise
        current_app.logger.warning(f"[{name}] lock contention, rolled back: {e.orig}")
        raise ConflictError('The store is busy with a concurrent update, retry the operation',
                            details={'operation': name}) from e
    except Exception:
        session.rollback()
        current_app.logger.error(f"[{name}] unit of work failed, rolled back", exc_info=True)
        raise
