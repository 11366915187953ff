import io

import pytest
import sqlalchemy as sa
from dbpipe.config import type_tags
from dbpipe.config.type_tags import TypeTagConfig


@pytest.fixture(autouse=True)
def isolated_type_tag_config(monkeypatch):
    """Keep type tag files on the test machine out of every test."""
    monkeypatch.setattr(type_tags, 'DEFAULT_LOCATIONS', ())
    TypeTagConfig.reset_instance()
    yield
    TypeTagConfig.reset_instance()


class FailingSink:
    """Byte sink that accepts ``fail_after`` writes and then raises."""

    def __init__(self, fail_after=0, exc=OSError('disk full')):
        self.buffer = io.BytesIO()
        self.fail_after = fail_after
        self.exc = exc
        self.calls = 0

    def write(self, data):
        if self.calls >= self.fail_after:
            raise self.exc
        self.calls += 1
        return self.buffer.write(data)

    def getvalue(self):
        return self.buffer.getvalue()


@pytest.fixture
def failing_sink():
    """Factory for sinks that fail after a number of successful writes."""
    def factory(fail_after=0, exc=None):
        return FailingSink(fail_after, exc or OSError('disk full'))
    return factory


@pytest.fixture
def sqlite_url(tmp_path):
    """SQLite database file with a small ``people`` table."""
    path = tmp_path / 'people.db'
    url = f'sqlite:///{path}'
    engine = sa.create_engine(url)
    with engine.begin() as cn:
        cn.exec_driver_sql("""
        CREATE TABLE people (
            id INTEGER PRIMARY KEY,
            name TEXT,
            score REAL,
            note TEXT,
            active INTEGER,
            created_at TEXT
        )
        """)
        cn.execute(sa.text("""
        INSERT INTO people (id, name, score, note, active, created_at)
        VALUES (:id, :name, :score, :note, :active, :created_at)
        """), [
            {'id': 1, 'name': 'Alice', 'score': 9.5, 'note': None,
             'active': 1, 'created_at': '2024-01-02 03:04:05'},
            {'id': 2, 'name': "O'Brien", 'score': 7.25, 'note': 'He said "hi",\nbye',
             'active': 0, 'created_at': '2024-02-03 04:05:06.250'},
            ])
    engine.dispose()
    return url
