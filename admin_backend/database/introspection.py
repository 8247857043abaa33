"""
Schema Introspection

Reads catalog metadata through SQLAlchemy's inspector. Nothing is cached:
every call opens a fresh inspector so descriptors always reflect the current
schema.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from flask import current_app
from sqlalchemy import inspect
from sqlalchemy.exc import CompileError

from admin_backend.errors import NotFoundError
from admin_backend.extensions import db

logger = logging.getLogger(__name__)

# Columns used to order rows when a table has no primary key, by preference
FALLBACK_ORDER_COLUMNS = ('id', 'created_at')


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    data_type: str
    nullable: bool
    default: Optional[str]
    ordinal_position: int
    max_length: Optional[int] = None
    # reflected SQLAlchemy type; bound values for this column take it
    sql_type: Any = field(default=None, compare=False, repr=False)

    def to_dict(self):
        """Information-schema shaped view of the column."""
        return {
            'column_name': self.name,
            'data_type': self.data_type,
            'character_maximum_length': self.max_length,
            'is_nullable': 'YES' if self.nullable else 'NO',
            'column_default': self.default,
            'ordinal_position': self.ordinal_position,
        }


@dataclass(frozen=True)
class TableDescriptor:
    name: str
    schema: Optional[str]
    columns: Tuple[ColumnDescriptor, ...]
    primary_keys: Tuple[str, ...] = ()

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def primary_key(self) -> Optional[str]:
        """First primary-key column, the one used to address single rows."""
        return self.primary_keys[0] if self.primary_keys else None

    def has_column(self, name: str) -> bool:
        return name in self.column_names

    def get_column(self, name: str) -> Optional[ColumnDescriptor]:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def order_column(self) -> Optional[str]:
        """Primary key, else `id`, else `created_at`, else None."""
        if self.primary_key:
            return self.primary_key
        for candidate in FALLBACK_ORDER_COLUMNS:
            if self.has_column(candidate):
                return candidate
        return None


def _schema():
    return current_app.config.get('DB_SCHEMA')


def _type_name(column_type: Any) -> str:
    try:
        return column_type.compile(dialect=db.engine.dialect)
    except CompileError:
        return type(column_type).__name__


def list_tables() -> List[dict]:
    """All base tables of the configured schema, alphabetically."""
    inspector = inspect(db.engine)
    schema = _schema()
    table_schema = schema or inspector.default_schema_name
    return [
        {'table_name': name, 'table_schema': table_schema}
        for name in sorted(inspector.get_table_names(schema=schema))
    ]


def table_exists(name: str) -> bool:
    return any(table['table_name'] == name for table in list_tables())


def describe_table(name: str) -> TableDescriptor:
    """Describe a table, raising NotFoundError unless it is a listed table."""
    if not table_exists(name):
        logger.info('Table not found: %s', name)
        raise NotFoundError(f'Table "{name}" not found')

    inspector = inspect(db.engine)
    schema = _schema()
    columns = tuple(
        ColumnDescriptor(
            name=column['name'],
            data_type=_type_name(column['type']),
            nullable=bool(column.get('nullable', True)),
            default=column.get('default'),
            ordinal_position=position,
            max_length=getattr(column['type'], 'length', None),
            sql_type=column['type'],
        )
        for position, column in enumerate(inspector.get_columns(name, schema=schema), start=1)
    )
    pk_constraint = inspector.get_pk_constraint(name, schema=schema) or {}
    primary_keys = tuple(pk_constraint.get('constrained_columns') or ())
    return TableDescriptor(name=name, schema=schema, columns=columns, primary_keys=primary_keys)
