"""
Database Routes

Table listing, structure, paginated data, single-row CRUD and the raw
query escape hatch.
"""

from flask import current_app, jsonify, request
from flask_login import login_required

from admin_backend.database import crud, database_bp
from admin_backend.database.introspection import list_tables
from admin_backend.database.query_builder import QuerySpec
from admin_backend.database.raw_query import execute_raw


def _json_body():
    return request.get_json(silent=True)


def _query_spec():
    default_limit = current_app.config['DEFAULT_PAGE_SIZE']
    max_limit = current_app.config['MAX_PAGE_SIZE']
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', default_limit, type=int)
    return QuerySpec(
        page=page,
        limit=min(limit, max_limit),
        search_term=request.args.get('search') or None,
        search_column=request.args.get('searchColumn') or None,
    )


@database_bp.route('/tables')
@login_required
def get_tables():
    """All base tables in the application schema."""
    return jsonify(success=True, tables=list_tables())


@database_bp.route('/tables/<table_name>/structure')
@login_required
def get_table_structure(table_name):
    return jsonify(success=True, structure=crud.get_structure(table_name))


@database_bp.route('/tables/<table_name>/data')
@login_required
def get_table_data(table_name):
    """Paginated rows with optional `search`/`searchColumn` filter."""
    result = crud.list_rows(table_name, _query_spec())
    return jsonify(success=True, **result)


@database_bp.route('/tables/<table_name>/data/<record_id>')
@login_required
def get_record(table_name, record_id):
    return jsonify(success=True, data=crud.get_row(table_name, record_id))


@database_bp.route('/tables/<table_name>/data', methods=['POST'])
@login_required
def create_record(table_name):
    row = crud.create_row(table_name, _json_body())
    return jsonify(success=True, message='Record created successfully', data=row), 201


@database_bp.route('/tables/<table_name>/data/<record_id>', methods=['PUT'])
@login_required
def update_record(table_name, record_id):
    row = crud.update_row(table_name, record_id, _json_body())
    return jsonify(success=True, message='Record updated successfully', data=row)


@database_bp.route('/tables/<table_name>/data/<record_id>', methods=['DELETE'])
@login_required
def delete_record(table_name, record_id):
    row = crud.delete_row(table_name, record_id)
    return jsonify(success=True, message='Record deleted successfully', data=row)


@database_bp.route('/query', methods=['POST'])
@login_required
def run_query():
    """Execute a single raw SQL statement (denylist guarded)."""
    body = _json_body()
    sql = body.get('query') if isinstance(body, dict) else None
    rows, row_count = execute_raw(sql)
    return jsonify(success=True, data=rows, rowCount=row_count)
