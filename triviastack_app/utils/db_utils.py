"""Small SQL helpers for race-safe upserts."""

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from ..extensions import db


def insert_ignore(model, conflict_columns, **values) -> bool:
    """
    Insert a row unless one already exists for ``conflict_columns``.

    Relies on the table's unique constraint, so two concurrent writers cannot
    both create the row. Returns True when this call inserted it.
    """
    table = model.__table__
    dialect = db.session.get_bind().dialect.name

    if dialect == 'sqlite':
        stmt = sqlite_insert(table).values(**values).on_conflict_do_nothing(index_elements=conflict_columns)
    elif dialect == 'postgresql':
        stmt = pg_insert(table).values(**values).on_conflict_do_nothing(index_elements=conflict_columns)
    else:
        criteria = [table.c[name] == values[name] for name in conflict_columns]
        exists = db.session.execute(select(table.c[conflict_columns[0]]).where(*criteria)).first()
        if exists:
            return False
        stmt = table.insert().values(**values)

    result = db.session.execute(stmt)
    return bool(result.rowcount)
