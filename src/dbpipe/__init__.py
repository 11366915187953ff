"""
Stream database query results as CSV or newline-delimited JSON.

Rows are pulled from the cursor one at a time, encoded by a row writer and
written straight to a byte sink, so memory use does not grow with the size of
the result set:

    names, rows = stream_query(cn, 'select * from events')
    write_rows(rows, CsvWriter(sys.stdout.buffer), names)
"""
__version__ = '0.1.0'

from dbpipe.connection import connect, create_engine, create_url
from dbpipe.connection import execute_statement, stream_query
from dbpipe.exceptions import ConnectionFailure, DbpipeError, QueryError
from dbpipe.exceptions import ReadOnlyViolation, RowAccessError, SinkError
from dbpipe.pipe import run, write_rows
from dbpipe.query import check_read_only, is_query_destructive
from dbpipe.row import Column, Row, RowFactory
from dbpipe.types import TypeCategory, render_value, resolve_category
from dbpipe.writers import CsvWriter, JsonWriter, RowWriter, make_writer

__all__ = [
    'Column',
    'Row',
    'RowFactory',
    'RowWriter',
    'CsvWriter',
    'JsonWriter',
    'make_writer',
    'write_rows',
    'run',
    'connect',
    'create_engine',
    'create_url',
    'stream_query',
    'execute_statement',
    'check_read_only',
    'is_query_destructive',
    'TypeCategory',
    'render_value',
    'resolve_category',
    'DbpipeError',
    'ConnectionFailure',
    'QueryError',
    'ReadOnlyViolation',
    'RowAccessError',
    'SinkError',
]
