import pytest


def test_tables_require_authentication(client, orders_table):
    r = client.get('/api/database/tables')
    assert r.status_code == 401
    assert r.get_json()['success'] is False


def test_list_tables_sorted(client, auth_headers, orders_table):
    r = client.get('/api/database/tables', headers=auth_headers)
    assert r.status_code == 200
    names = [t['table_name'] for t in r.get_json()['tables']]
    assert names == sorted(names)
    assert {'orders', 'users', 'notifications', 'notification_templates', 'app_settings'} <= set(names)


def test_table_structure(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/structure', headers=auth_headers)
    assert r.status_code == 200
    structure = r.get_json()['structure']
    assert structure['primaryKeys'] == ['id']
    columns = structure['columns']
    assert [c['column_name'] for c in columns] == ['id', 'customer', 'amount', 'status', 'created_at']
    assert [c['ordinal_position'] for c in columns] == [1, 2, 3, 4, 5]
    customer = columns[1]
    assert customer['is_nullable'] == 'NO'
    assert customer['data_type'] == 'TEXT'


@pytest.mark.parametrize('method,path', [
    ('get', '/api/database/tables/ghost/structure'),
    ('get', '/api/database/tables/ghost/data'),
    ('get', '/api/database/tables/ghost/data/1'),
    ('post', '/api/database/tables/ghost/data'),
    ('put', '/api/database/tables/ghost/data/1'),
    ('delete', '/api/database/tables/ghost/data/1'),
])
def test_unknown_table_is_not_found_everywhere(client, auth_headers, method, path):
    r = getattr(client, method)(path, headers=auth_headers, json={'name': 'x'})
    assert r.status_code == 404
    assert r.get_json() == {'success': False, 'message': 'Table "ghost" not found'}


@pytest.mark.parametrize('method,path', [
    ('post', '/api/database/tables/ghost/data'),
    ('put', '/api/database/tables/ghost/data/1'),
])
def test_unknown_table_without_body_is_not_found(client, auth_headers, method, path):
    r = getattr(client, method)(path, headers=auth_headers)
    assert r.status_code == 404
    assert r.get_json()['message'] == 'Table "ghost" not found'


def test_non_numeric_id_for_integer_key_is_not_found(client, auth_headers, orders_table):
    for method in ('get', 'put', 'delete'):
        r = getattr(client, method)('/api/database/tables/orders/data/abc', headers=auth_headers,
                                    json={'status': 'x'})
        assert r.status_code == 404
        assert r.get_json()['message'] == 'Record not found'


def test_injection_in_table_name_is_not_found(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders"; DROP TABLE users; --/data', headers=auth_headers)
    assert r.status_code == 404
    r = client.get('/api/database/tables', headers=auth_headers)
    assert 'users' in [t['table_name'] for t in r.get_json()['tables']]


def test_second_page_of_25_rows(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?page=2&limit=10', headers=auth_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body['pagination'] == {'page': 2, 'limit': 10, 'total': 25, 'totalPages': 3}
    assert [row['id'] for row in body['data']] == list(range(15, 5, -1))


def test_total_is_independent_of_page_and_limit(client, auth_headers, orders_table):
    for page, limit in [(1, 5), (3, 7), (9, 3), (1, 100)]:
        r = client.get(f'/api/database/tables/orders/data?page={page}&limit={limit}', headers=auth_headers)
        body = r.get_json()
        assert body['pagination']['total'] == 25
        assert len(body['data']) <= limit


def test_page_past_the_end_is_empty(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?page=4&limit=10', headers=auth_headers)
    body = r.get_json()
    assert body['data'] == []
    assert body['pagination']['totalPages'] == 3


def test_default_page_size(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data', headers=auth_headers)
    body = r.get_json()
    assert body['pagination'] == {'page': 1, 'limit': 100, 'total': 25, 'totalPages': 1}
    assert body['data'][0]['id'] == 25


def test_invalid_page_is_rejected(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?page=0', headers=auth_headers)
    assert r.status_code == 400
    r = client.get('/api/database/tables/orders/data?limit=-5', headers=auth_headers)
    assert r.status_code == 400


def test_search_filters_data_and_total(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?search=CUSTOMER-1&searchColumn=customer&limit=5',
                   headers=auth_headers)
    body = r.get_json()
    # customer-1 and customer-10..19
    assert body['pagination']['total'] == 11
    assert body['pagination']['totalPages'] == 3
    assert [row['id'] for row in body['data']] == [19, 18, 17, 16, 15]


def test_search_on_non_text_column(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?search=25&searchColumn=id', headers=auth_headers)
    body = r.get_json()
    assert [row['id'] for row in body['data']] == [25]


def test_search_wildcards_match_literally(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?search=%25&searchColumn=customer', headers=auth_headers)
    assert r.get_json()['pagination']['total'] == 0


def test_search_on_unknown_column_is_rejected(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data?search=x&searchColumn=password', headers=auth_headers)
    assert r.status_code == 400


def test_get_one_record(client, auth_headers, orders_table):
    r = client.get('/api/database/tables/orders/data/7', headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()['data']['customer'] == 'customer-7'

    r = client.get('/api/database/tables/orders/data/999', headers=auth_headers)
    assert r.status_code == 404
    assert r.get_json()['message'] == 'Record not found'


def test_create_then_get_round_trip(client, auth_headers, orders_table):
    payload = {'customer': 'Ada', 'amount': 42, 'status': 'paid', 'not_a_column': 'ignored'}
    r = client.post('/api/database/tables/orders/data', headers=auth_headers, json=payload)
    assert r.status_code == 201
    created = r.get_json()['data']
    assert 'not_a_column' not in created

    r = client.get(f"/api/database/tables/orders/data/{created['id']}", headers=auth_headers)
    fetched = r.get_json()['data']
    for key in ('customer', 'amount', 'status'):
        assert fetched[key] == payload[key]
    assert fetched == created


def test_create_parses_typed_columns(client, auth_headers, admin_user):
    payload = {'id': 'u-typed', 'email': 'typed@x.com', 'is_active': 'false',
               'created_at': '2024-05-01T10:00:00'}
    r = client.post('/api/database/tables/users/data', headers=auth_headers, json=payload)
    assert r.status_code == 201
    created = r.get_json()['data']
    assert created['created_at'].startswith('2024-05-01')
    assert not created['is_active']

    r = client.post('/api/database/tables/users/data', headers=auth_headers,
                    json={'id': 'u-bad', 'created_at': 'last tuesday'})
    assert r.status_code == 400


def test_create_with_no_valid_columns(client, auth_headers, orders_table):
    r = client.post('/api/database/tables/orders/data', headers=auth_headers, json={'bogus': 1})
    assert r.status_code == 400
    assert r.get_json()['message'] == 'No valid columns provided'


def test_create_requires_json_object(client, auth_headers, orders_table):
    r = client.post('/api/database/tables/orders/data', headers=auth_headers, json=['customer'])
    assert r.status_code == 400


def test_update_record(client, auth_headers, orders_table):
    r = client.put('/api/database/tables/orders/data/3', headers=auth_headers,
                   json={'id': 300, 'status': 'refunded'})
    assert r.status_code == 200
    row = r.get_json()['data']
    assert row['id'] == 3
    assert row['status'] == 'refunded'


def test_update_with_empty_payload_is_rejected(client, auth_headers, orders_table):
    r = client.put('/api/database/tables/orders/data/3', headers=auth_headers, json={})
    assert r.status_code == 400
    assert r.get_json()['message'] == 'No valid columns to update'

    r = client.put('/api/database/tables/orders/data/3', headers=auth_headers, json={'id': 4})
    assert r.status_code == 400


def test_update_missing_record(client, auth_headers, orders_table):
    r = client.put('/api/database/tables/orders/data/999', headers=auth_headers, json={'status': 'x'})
    assert r.status_code == 404


def test_delete_record(client, auth_headers, orders_table):
    r = client.delete('/api/database/tables/orders/data/5', headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()['data']['customer'] == 'customer-5'

    r = client.delete('/api/database/tables/orders/data/5', headers=auth_headers)
    assert r.status_code == 404

    r = client.get('/api/database/tables/orders/data', headers=auth_headers)
    assert r.get_json()['pagination']['total'] == 24


def test_keyless_table_lists_by_created_at(client, auth_headers, keyless_table):
    r = client.get('/api/database/tables/audit_log/data', headers=auth_headers)
    assert r.status_code == 200
    assert [row['message'] for row in r.get_json()['data']] == ['event 3', 'event 2', 'event 1']


@pytest.mark.parametrize('method', ['get', 'put', 'delete'])
def test_keyless_table_rejects_single_row_operations(client, auth_headers, keyless_table, method):
    r = getattr(client, method)('/api/database/tables/audit_log/data/1', headers=auth_headers,
                                json={'message': 'x'})
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Table does not have a primary key'


def test_keyless_table_accepts_inserts(client, auth_headers, keyless_table):
    r = client.post('/api/database/tables/audit_log/data', headers=auth_headers,
                    json={'message': 'event 4', 'created_at': '2024-02-04'})
    assert r.status_code == 201
    assert r.get_json()['data'] == {'message': 'event 4', 'created_at': '2024-02-04'}
