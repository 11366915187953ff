"""
Database connection and result streaming through SQLAlchemy.

This module provides:
1. Connection URL construction with credential overrides
2. Engine creation (no pooling: one run, one connection)
3. Streaming of query results as Row objects
4. Execution of data-modifying statements
"""
import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager

import sqlalchemy as sa
from dbpipe.exceptions import ConnectionFailure, DbConnectionError, QueryError
from dbpipe.row import RowFactory
from dbpipe.strategy import get_strategy
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

__all__ = [
    'create_url',
    'create_engine',
    'connect',
    'stream_query',
    'execute_statement',
]

logger = logging.getLogger(__name__)

# Statements a server-side cursor can be declared for
_STREAMABLE_REGEX = re.compile(r'^\s*\(?\s*(SELECT|WITH|VALUES|TABLE)\b', re.IGNORECASE)


def create_url(db: str, user: str | None = None, password: str | None = None) -> sa.URL:
    """Build the SQLAlchemy URL for a connection string.

    Args:
        db: Connection URL, e.g. ``postgresql://host/dbname`` or ``sqlite:///file.db``
        user: Replaces the user name embedded in the URL
        password: Replaces the password embedded in the URL

    Returns
        sqlalchemy.URL with the dialect's preferred driver
    """
    url = sa.make_url(db)
    if user is not None:
        url = url.set(username=user)
    if password is not None:
        url = url.set(password=password)
    return get_strategy(url.get_backend_name()).adapt_url(url)


def create_engine(url: sa.URL) -> Engine:
    """Create an engine without connection pooling.
    """
    return sa.create_engine(url, poolclass=NullPool)


@contextmanager
def connect(engine: Engine) -> Iterator[sa.Connection]:
    """Open a connection, wrapping driver connection errors in ConnectionFailure.
    """
    logger.info(f'Connecting to {engine.url.host or engine.url.database}')
    try:
        cn = engine.connect()
    except DbConnectionError as exc:
        raise ConnectionFailure(f'Could not connect to {engine.url!r}: {exc}') from exc
    try:
        yield cn
    finally:
        cn.close()


def use_server_side_cursor(dialect: sa.Dialect, sql: str) -> bool:
    """Whether the query can run on a named server-side cursor.

    >>> from types import SimpleNamespace
    >>> pg = SimpleNamespace(supports_server_side_cursors=True)
    >>> use_server_side_cursor(pg, 'with t as (select 1) select * from t')
    True
    >>> use_server_side_cursor(pg, 'explain select 1')
    False
    """
    return bool(dialect.supports_server_side_cursors and _STREAMABLE_REGEX.match(sql))


def stream_query(cn: sa.Connection, sql: str) -> tuple[list[str], Iterator]:
    """Run a query and return its column names and a lazy iterator of rows.

    Row-returning queries on dialects with server-side cursors fetch rows
    incrementally, so memory use does not grow with the size of the result.
    Other statements (EXPLAIN, SHOW ...) run on a plain cursor.

    Returns
        (column names, iterator of Row)
    """
    if use_server_side_cursor(cn.dialect, sql):
        cn = cn.execution_options(stream_results=True)
    try:
        result = cn.exec_driver_sql(sql)
    except sa.exc.DBAPIError as exc:
        raise QueryError(f'Query failed: {exc.orig}') from exc

    if not result.returns_rows:
        logger.info('Query returned no result set')
        result.close()
        return [], iter(())

    factory = RowFactory(result.cursor.description, cn.dialect.name)
    return factory.names, _iter_rows(result, factory)


def _iter_rows(result: sa.CursorResult, factory: RowFactory) -> Iterator:
    try:
        for values in result:
            yield factory(tuple(values))
    except sa.exc.DBAPIError as exc:
        raise QueryError(f'Fetching rows failed: {exc.orig}') from exc
    finally:
        result.close()


def execute_statement(cn: sa.Connection, sql: str) -> int:
    """Execute a data-modifying statement, commit it and return the affected row count.
    """
    try:
        result = cn.exec_driver_sql(sql)
        rowcount = result.rowcount
        cn.commit()
    except sa.exc.DBAPIError as exc:
        cn.rollback()
        raise QueryError(f'Statement failed: {exc.orig}') from exc
    logger.debug(f'Statement affected {rowcount} row(s)')
    return rowcount
