"""Statement helpers shared by repositories.

Collections that several requests may change at once (read markers,
reactions, memberships) are stored as rows with a unique key and changed only
through single INSERT/DELETE statements, never by reading a list, editing it
in Python and writing it back.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import Table, and_, delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_UPSERT_DIALECTS = {"postgresql": postgresql.insert, "sqlite": sqlite.insert}


def insert_ignoring_duplicates(
    session: Session,
    table: Table,
    rows: Sequence[Mapping[str, Any]],
) -> int:
    """Insert ``rows`` skipping those whose primary key already exists.

    Returns the number of rows actually inserted.
    """

    if not rows:
        return 0
    insert_factory = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
    if insert_factory is not None:
        statement = insert_factory(table).values(list(rows)).on_conflict_do_nothing()
        return session.execute(statement).rowcount or 0

    inserted = 0
    key_columns = list(table.primary_key.columns)
    for row in rows:
        condition = and_(*(column == row[column.name] for column in key_columns))
        if session.execute(select(*key_columns).where(condition)).first() is None:
            session.execute(table.insert().values(**row))
            inserted += 1
    return inserted


def upsert(
    session: Session,
    table: Table,
    row: Mapping[str, Any],
    *,
    update_columns: Sequence[str],
    conflict_columns: Sequence[str] | None = None,
) -> None:
    """Insert ``row`` or overwrite ``update_columns`` when the key exists.

    ``conflict_columns`` names the unique key to match on and defaults to the
    primary key.
    """

    key_names = list(conflict_columns or [column.name for column in table.primary_key.columns])
    insert_factory = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
    if insert_factory is not None:
        statement = insert_factory(table).values(**row)
        statement = statement.on_conflict_do_update(
            index_elements=key_names,
            set_={name: statement.excluded[name] for name in update_columns},
        )
        session.execute(statement)
        return

    condition = and_(*(table.c[name] == row[name] for name in key_names))
    session.execute(delete(table).where(condition))
    session.execute(table.insert().values(**row))


__all__ = ["insert_ignoring_duplicates", "upsert"]
