"""
Database Query Helpers

Raw SQL in the repositories goes through ``typed_text`` so that date and
timestamp parameters are bound through the SQLAlchemy column types:
SQLite receives its ISO text format, asyncpg receives real ``date`` /
``datetime`` objects.

Usage:
    from database.query_helpers import typed_text

    query = typed_text("UPDATE tasks SET due_date = :due_date ...", params)
    await session.execute(query, params)
"""

from datetime import date, datetime
from typing import Any, Mapping, Optional

from sqlalchemy import Date, DateTime, bindparam, text
from sqlalchemy.sql.elements import TextClause

# Parameter name -> column type, for every temporal column in users/tasks
TEMPORAL_PARAMS = {
    "due_date": Date(),
    "created_at": DateTime(),
    "updated_at": DateTime(),
}


def typed_text(sql: str, params: Mapping[str, Any]) -> TextClause:
    """
    Build a ``text()`` clause with types attached to the temporal parameters
    present in ``params``.
    """
    query = text(sql)
    typed = [
        bindparam(name, type_=type_)
        for name, type_ in TEMPORAL_PARAMS.items()
        if name in params
    ]
    return query.bindparams(*typed) if typed else query


def as_date(value: Any) -> Optional[date]:
    """Column value to ``date``; SQLite hands back ISO strings."""
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        return value.date()
    return value


def as_datetime(value: Any) -> Optional[datetime]:
    """Column value to ``datetime``; SQLite hands back ISO strings."""
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value
