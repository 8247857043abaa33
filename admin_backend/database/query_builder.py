"""
Safe Query Builder

Builds single-table statements for a validated TableDescriptor. Values are
always bound parameters, typed by the column's reflected type so the driver
casts them to the column type (an integer key compares as an integer, not as
a string). Identifiers only reach SQL through `validated_column`/`table_clause`,
which check them against the descriptor and leave quoting to the dialect's
identifier preparer.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import Text, cast, column, delete, func, insert, literal, null, select, table, update
from sqlalchemy.sql.expression import ColumnClause, TableClause

from admin_backend.database.introspection import TableDescriptor
from admin_backend.errors import NotFoundError, ValidationError

_SCALAR_TYPES = (str, int, float, bool)
_TEMPORAL_TYPES = (datetime, date, time)
# key types a path segment is converted to before binding
_KEY_TYPES = (int, uuid.UUID)


@dataclass(frozen=True)
class QuerySpec:
    """Pagination and search parameters of a list call."""
    page: int = 1
    limit: int = 100
    search_term: Optional[str] = None
    search_column: Optional[str] = None

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError('page must be 1 or greater')
        if self.limit < 1:
            raise ValidationError('limit must be 1 or greater')

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def is_search(self) -> bool:
        return bool(self.search_term) and bool(self.search_column)


def validated_column(descriptor: TableDescriptor, name: str) -> ColumnClause:
    """The one place a caller-supplied name becomes a SQL identifier."""
    if not isinstance(name, str) or not descriptor.has_column(name):
        raise ValidationError(f'Unknown column "{name}" for table "{descriptor.name}"')
    return column(name)


def table_clause(descriptor: TableDescriptor) -> TableClause:
    """Lightweight table construct holding every described column.

    Columns are left untyped so result rows come back as the driver returns
    them; typing is applied to bound values only (see `bound_value`).
    """
    return table(
        descriptor.name,
        *[validated_column(descriptor, name) for name in descriptor.column_names],
        schema=descriptor.schema,
    )


def _python_type(sql_type) -> Optional[type]:
    if sql_type is None:
        return None
    try:
        return sql_type.python_type
    except NotImplementedError:
        return None


def _column_type(descriptor: TableDescriptor, name: str):
    column_descriptor = descriptor.get_column(name)
    return column_descriptor.sql_type if column_descriptor is not None else None


def bound_value(descriptor: TableDescriptor, name: str, value: Any):
    """Bind parameter for `value` carrying the reflected type of column `name`."""
    if value is None:
        return null()
    return literal(value, _column_type(descriptor, name))


def _parse_temporal(name: str, python_type: type, value: str):
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return python_type.fromisoformat(text)
    except ValueError:
        raise ValidationError(f'Invalid {python_type.__name__} for column "{name}"')


def coerce_value(name: str, value: Any, sql_type=None) -> Any:
    """Bindable form of one payload value.

    Nested objects go to JSON columns as-is and are serialized to text
    elsewhere; ISO-8601 strings are parsed for date/time columns.
    """
    python_type = _python_type(sql_type)
    if isinstance(value, (dict, list)):
        return value if python_type in (dict, list) else json.dumps(value)
    if isinstance(value, str) and python_type in _TEMPORAL_TYPES:
        return _parse_temporal(name, python_type, value)
    if isinstance(value, str) and python_type is bool:
        lowered = value.strip().lower()
        if lowered not in ('true', 'false'):
            raise ValidationError(f'Invalid boolean for column "{name}"')
        return lowered == 'true'
    if value is None or isinstance(value, _SCALAR_TYPES):
        return value
    raise ValidationError(f'Unsupported value for column "{name}"')


def coerce_record_id(descriptor: TableDescriptor, record_id: Any) -> Any:
    """Convert a path id to the primary key's Python type.

    An id that cannot be converted matches no row.
    """
    python_type = _python_type(_column_type(descriptor, descriptor.primary_key))
    if python_type not in _KEY_TYPES or not isinstance(record_id, str):
        return record_id
    try:
        return python_type(record_id.strip())
    except ValueError:
        raise NotFoundError('Record not found')


def filter_payload(descriptor: TableDescriptor, payload: Mapping[str, Any],
                   exclude_primary_key: bool = False) -> Dict[str, Any]:
    """Keep only keys naming real columns; unknown keys are dropped."""
    excluded = set(descriptor.primary_keys) if exclude_primary_key else set()
    return {
        key: coerce_value(key, value, _column_type(descriptor, key))
        for key, value in payload.items()
        if isinstance(key, str) and descriptor.has_column(key) and key not in excluded
    }


def _bound_values(descriptor: TableDescriptor, tbl: TableClause, values: Mapping[str, Any]):
    return {tbl.c[key]: bound_value(descriptor, key, value) for key, value in values.items()}


def _search_filter(descriptor: TableDescriptor, tbl: TableClause, spec: QuerySpec):
    if not spec.is_search:
        return None
    validated_column(descriptor, spec.search_column)
    return cast(tbl.c[spec.search_column], Text).icontains(spec.search_term, autoescape=True)


def build_select_page(descriptor: TableDescriptor, spec: QuerySpec):
    """Paginated SELECT ordered by the resolved order column, newest first."""
    tbl = table_clause(descriptor)
    stmt = select(tbl)
    where = _search_filter(descriptor, tbl, spec)
    if where is not None:
        stmt = stmt.where(where)
    order_column = descriptor.order_column()
    if order_column is not None:
        stmt = stmt.order_by(tbl.c[order_column].desc())
    return stmt.limit(spec.limit).offset(spec.offset)


def build_count(descriptor: TableDescriptor, spec: QuerySpec):
    """COUNT(*) sharing the search filter of the page query."""
    tbl = table_clause(descriptor)
    stmt = select(func.count()).select_from(tbl)
    where = _search_filter(descriptor, tbl, spec)
    if where is not None:
        stmt = stmt.where(where)
    return stmt


def _primary_key_filter(descriptor: TableDescriptor, tbl: TableClause, record_id: Any):
    if descriptor.primary_key is None:
        raise ValidationError('Table does not have a primary key')
    key = descriptor.primary_key
    return tbl.c[key] == bound_value(descriptor, key, coerce_record_id(descriptor, record_id))


def build_select_one(descriptor: TableDescriptor, record_id: Any):
    tbl = table_clause(descriptor)
    return select(tbl).where(_primary_key_filter(descriptor, tbl, record_id))


def build_insert(descriptor: TableDescriptor, values: Mapping[str, Any]):
    if not values:
        raise ValidationError('No valid columns provided')
    tbl = table_clause(descriptor)
    return insert(tbl).values(_bound_values(descriptor, tbl, values)).returning(*tbl.c)


def build_update(descriptor: TableDescriptor, record_id: Any, values: Mapping[str, Any]):
    tbl = table_clause(descriptor)
    where = _primary_key_filter(descriptor, tbl, record_id)
    if not values:
        raise ValidationError('No valid columns to update')
    return (
        update(tbl)
        .where(where)
        .values(_bound_values(descriptor, tbl, values))
        .returning(*tbl.c)
    )


def build_delete(descriptor: TableDescriptor, record_id: Any):
    tbl = table_clause(descriptor)
    return delete(tbl).where(_primary_key_filter(descriptor, tbl, record_id)).returning(*tbl.c)
