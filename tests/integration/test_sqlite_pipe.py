"""
End-to-end runs against a SQLite database file.
"""
import io
import json

import pytest
import sqlalchemy as sa
from dbpipe.config.type_tags import TypeTagConfig
from dbpipe.exceptions import ConnectionFailure, QueryError, ReadOnlyViolation
from dbpipe.options import PipeOptions
from dbpipe.pipe import run


def run_query(url, query, **kwargs):
    sink, out = io.BytesIO(), io.StringIO()
    count = run(PipeOptions(db=url, query=query, **kwargs), sink=sink, out=out)
    return count, sink.getvalue(), out.getvalue()


def test_csv_with_header(sqlite_url):
    count, data, _ = run_query(sqlite_url, 'select id, name, score, note from people order by id')
    assert count == 2
    assert data == (
        b'id,name,score,note\n'
        b'1,Alice,9.5,\n'
        b'2,O\'Brien,7.25,"He said ""hi"",\nbye"\n')


def test_csv_without_header(sqlite_url):
    _, data, _ = run_query(sqlite_url, 'select id from people order by id', no_header=True)
    assert data == b'1\n2\n'


def test_json_lines(sqlite_url):
    _, data, _ = run_query(sqlite_url, 'select id, name, score, note from people order by id',
                           json=True)
    lines = data.decode('utf-8').splitlines()
    assert lines[0] == '{"id":1,"name":"Alice","score":9.5,"note":null}'
    assert json.loads(lines[1]) == {
        'id': 2, 'name': "O'Brien", 'score': 7.25, 'note': 'He said "hi",\nbye'}


def test_empty_result_writes_header_only(sqlite_url):
    count, data, _ = run_query(sqlite_url, 'select id, name from people where id > 100')
    assert count == 0
    assert data == b'id,name\n'


def test_empty_result_json_is_empty(sqlite_url):
    _, data, _ = run_query(sqlite_url, 'select id from people where id > 100', json=True)
    assert data == b''


def test_duplicate_column_names(sqlite_url):
    _, data, _ = run_query(
        sqlite_url, 'select a.id, b.id from people a join people b on a.id = b.id order by a.id',
        json=True)
    first = json.loads(data.splitlines()[0], object_pairs_hook=list)
    assert first == [('id', 1), ('id', 1)]


def test_configured_type_tags(sqlite_url):
    config = TypeTagConfig.get_instance()
    config.add_column_mapping('sqlite', 'created_at', 'DATETIME')
    config.add_column_mapping('sqlite', 'active', 'BOOLEAN')

    _, data, _ = run_query(sqlite_url, 'select active, created_at from people order by id',
                           json=True)
    assert data == (
        b'{"active":true,"created_at":"2024-01-02 03:04:05"}\n'
        b'{"active":false,"created_at":"2024-02-03 04:05:06.250"}\n')


def test_destructive_query_needs_execute(sqlite_url):
    with pytest.raises(ReadOnlyViolation):
        run_query(sqlite_url, 'delete from people')


def test_execute_reports_affected_rows(sqlite_url):
    count, data, out = run_query(sqlite_url, 'update people set score = 0', execute=True)
    assert count == 2
    assert data == b''
    assert out == '2 row(s) affected\n'

    engine = sa.create_engine(sqlite_url)
    with engine.connect() as cn:
        assert cn.exec_driver_sql('select sum(score) from people').scalar() == 0
    engine.dispose()


def test_missing_table_is_query_error(sqlite_url):
    with pytest.raises(QueryError):
        run_query(sqlite_url, 'select * from nowhere')


def test_unreachable_database_is_connection_failure(tmp_path):
    url = f'sqlite:///{tmp_path / "missing" / "people.db"}'
    with pytest.raises(ConnectionFailure):
        run_query(url, 'select 1')


if __name__ == '__main__':
    __import__('pytest').main([__file__])
