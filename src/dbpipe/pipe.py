"""
Pipeline: run a query and stream its rows through a row writer.
"""
import logging
import sys
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, BinaryIO

from dbpipe.connection import connect, create_engine, create_url
from dbpipe.connection import execute_statement, stream_query
from dbpipe.query import check_read_only
from dbpipe.writers import RowWriter, make_writer

if TYPE_CHECKING:
    from dbpipe.options import PipeOptions
    from dbpipe.row import Row

logger = logging.getLogger(__name__)


def write_rows(rows: Iterable['Row'], writer: RowWriter,
               names: Sequence[str] | None = None) -> int:
    """Feed every row to the writer in arrival order and return the row count.

    Rows are pulled one at a time and fully written before the next one is
    requested. Any failure (row source, accessor or sink) propagates at once;
    bytes already written for earlier rows stay on the sink. A row source with
    a ``close`` method is closed before returning or raising, so its cursor is
    released while the connection is still open.

    Args:
        rows: Lazily produced rows of one result set
        writer: Destination writer
        names: Column names known from result metadata, passed to ``writer.start``
    """
    count = 0
    try:
        if names is not None:
            writer.start(names)
        for row in rows:
            writer.write(row)
            count += 1
    finally:
        close = getattr(rows, 'close', None)
        if close is not None:
            close()
    logger.debug(f'Wrote {count} row(s)')
    return count


def run(options: 'PipeOptions', sink: BinaryIO | None = None, out: Any = None) -> int:
    """Run the configured query.

    In execute mode the statement is committed and ``N row(s) affected`` is
    printed to ``out``; otherwise the result rows are streamed to ``sink`` in
    the selected format.

    Returns
        Number of rows affected (execute mode) or written
    """
    sink = sink if sink is not None else sys.stdout.buffer
    out = out if out is not None else sys.stdout

    logger.info(f'Query to run: {options.query}')
    check_read_only(options.query, options.execute)

    engine = create_engine(create_url(options.db, options.user, options.password))
    try:
        with connect(engine) as cn:
            if options.execute:
                count = execute_statement(cn, options.query)
                print(f'{count} row(s) affected', file=out)
                return count
            names, rows = stream_query(cn, options.query)
            writer = make_writer(sink, options)
            return write_rows(rows, writer, names or None)
    finally:
        engine.dispose()
