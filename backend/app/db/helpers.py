"""Query helpers shared by the content and lead repositories"""
from datetime import datetime
from typing import Any, Iterable, Optional, Type

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Query, Session

from app.core.errors import ConflictError, NotFoundError


def get_or_404(db: Session, model: Type, record_id: int, label: str):
    """Load a row by primary key or raise NotFoundError("<label> not found")"""
    record = db.query(model).filter(model.id == record_id).first()
    if not record:
        raise NotFoundError(f"{label} not found")
    return record


def ensure_unique(db: Session, model: Type, field: str, value: Any, message: str,
                  exclude_id: Optional[int] = None) -> None:
    """Raise ConflictError if another row already holds value in field

    exclude_id lets an update keep its own value.
    """
    column = getattr(model, field)
    query = db.query(model.id).filter(column == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first():
        raise ConflictError(message)


def apply_search(query: Query, search: Optional[str], columns: Iterable) -> Query:
    """Case-insensitive substring match across any of the given columns

    JSON columns (tags) are matched against their serialized text. LIKE
    wildcards in the search text match literally.
    """
    if not search:
        return query
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    clauses = []
    for column in columns:
        if isinstance(column.type, String):
            clauses.append(column.ilike(pattern, escape="\\"))
        else:
            clauses.append(cast(column, String).ilike(pattern, escape="\\"))
    return query.filter(or_(*clauses))


def apply_date_range(query: Query, column, date_from: Optional[datetime], date_to: Optional[datetime]) -> Query:
    """Inclusive date range filter; either bound may be omitted"""
    if date_from:
        query = query.filter(column >= date_from)
    if date_to:
        query = query.filter(column <= date_to)
    return query


def to_dict(record) -> dict:
    """Serialize a model row to a JSON-friendly dict (datetimes as ISO strings)"""
    data = {}
    for column in record.__table__.columns:
        value = getattr(record, column.name)
        if isinstance(value, datetime):
            value = value.isoformat()
        data[column.name] = value
    return data
