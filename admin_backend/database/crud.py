"""
CRUD Orchestrator

Combines introspection, statement building and result shaping for the
generic table editor. Each statement runs on its own pooled connection;
nothing here spans a transaction across statements.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping

from admin_backend.database import query_builder
from admin_backend.database.introspection import describe_table
from admin_backend.database.query_builder import QuerySpec
from admin_backend.errors import NotFoundError, ValidationError
from admin_backend.extensions import db

logger = logging.getLogger(__name__)


def _fetch_all(stmt) -> List[Dict[str, Any]]:
    with db.engine.begin() as conn:
        return [dict(row) for row in conn.execute(stmt).mappings()]


def _fetch_first(stmt):
    with db.engine.begin() as conn:
        row = conn.execute(stmt).mappings().first()
    return dict(row) if row is not None else None


def _scalar(stmt):
    with db.engine.begin() as conn:
        return conn.execute(stmt).scalar_one()


def _require_primary_key(descriptor):
    if descriptor.primary_key is None:
        raise ValidationError('Table does not have a primary key')


def _require_payload(payload):
    if not isinstance(payload, Mapping):
        raise ValidationError('Request body must be a JSON object')


def get_structure(table_name: str) -> Dict[str, Any]:
    descriptor = describe_table(table_name)
    return {
        'columns': [column.to_dict() for column in descriptor.columns],
        'primaryKeys': list(descriptor.primary_keys),
    }


def list_rows(table_name: str, spec: QuerySpec) -> Dict[str, Any]:
    """One page of rows plus pagination totals for the same filter."""
    descriptor = describe_table(table_name)
    if spec.search_term and spec.search_column and not descriptor.has_column(spec.search_column):
        raise ValidationError(f'Unknown search column "{spec.search_column}"')

    logger.debug('Fetching %s page=%s limit=%s search=%r on %r',
                 table_name, spec.page, spec.limit, spec.search_term, spec.search_column)
    rows = _fetch_all(query_builder.build_select_page(descriptor, spec))
    total = int(_scalar(query_builder.build_count(descriptor, spec)))
    logger.debug('Table %s returned %d of %d rows', table_name, len(rows), total)

    return {
        'data': rows,
        'pagination': {
            'page': spec.page,
            'limit': spec.limit,
            'total': total,
            'totalPages': math.ceil(total / spec.limit),
        },
    }


def get_row(table_name: str, record_id: Any) -> Dict[str, Any]:
    descriptor = describe_table(table_name)
    _require_primary_key(descriptor)
    row = _fetch_first(query_builder.build_select_one(descriptor, record_id))
    if row is None:
        raise NotFoundError('Record not found')
    return row


def create_row(table_name: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
    descriptor = describe_table(table_name)
    _require_payload(payload)
    values = query_builder.filter_payload(descriptor, payload)
    row = _fetch_first(query_builder.build_insert(descriptor, values))
    logger.info('Created record in %s', table_name)
    return row


def update_row(table_name: str, record_id: Any, payload: Mapping[str, Any]) -> Dict[str, Any]:
    descriptor = describe_table(table_name)
    _require_payload(payload)
    _require_primary_key(descriptor)
    values = query_builder.filter_payload(descriptor, payload, exclude_primary_key=True)
    row = _fetch_first(query_builder.build_update(descriptor, record_id, values))
    if row is None:
        raise NotFoundError('Record not found')
    logger.info('Updated record %s in %s', record_id, table_name)
    return row


def delete_row(table_name: str, record_id: Any) -> Dict[str, Any]:
    descriptor = describe_table(table_name)
    _require_primary_key(descriptor)
    row = _fetch_first(query_builder.build_delete(descriptor, record_id))
    if row is None:
        raise NotFoundError('Record not found')
    logger.info('Deleted record %s from %s', record_id, table_name)
    return row
