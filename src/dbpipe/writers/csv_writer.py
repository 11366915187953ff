"""
CSV row writer.

Cells are separated by a single comma and rows end with a single line feed.
A cell is quoted only when it contains a double quote, a comma or a line
feed; embedded double quotes are doubled. NULL becomes an empty cell, so NULL
and the empty string cannot be told apart in the output.
"""
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, BinaryIO

from dbpipe.types import render_value
from dbpipe.writers.base import RowWriter, register_writer

if TYPE_CHECKING:
    from dbpipe.row import Row

logger = logging.getLogger(__name__)

QUOTE = b'"'
SEPARATOR = b','
TERMINATOR = b'\n'
_SPECIAL = (QUOTE, SEPARATOR, TERMINATOR)


def quote_cell(data: bytes) -> bytes:
    """Return the cell bytes, quoted and escaped only when needed.

    >>> quote_cell(b'plain')
    b'plain'
    >>> quote_cell(b'a "b" c')
    b'"a ""b"" c"'
    """
    if not any(special in data for special in _SPECIAL):
        return data
    return QUOTE + data.replace(QUOTE, QUOTE + QUOTE) + QUOTE


@register_writer('csv')
class CsvWriter(RowWriter):
    """Write rows as comma-separated lines with an optional header line.

    The header is taken from the column names of the first row (or from
    ``start``) and is written at most once per writer.
    """

    def __init__(self, sink: BinaryIO, header: bool = True, **kwargs: Any) -> None:
        super().__init__(sink)
        self.header_written = not header
        self.columns_written = 0

    def _write_cell(self, data: bytes) -> None:
        if self.columns_written > 0:
            self._emit(SEPARATOR)
        if data:
            self._emit(quote_cell(data))
        self.columns_written += 1

    def _finish_row(self) -> None:
        self._emit(TERMINATOR)
        self.columns_written = 0

    def _write_header(self, names: Sequence[str]) -> None:
        for name in names:
            self._write_cell(name.encode('utf-8'))
        self._finish_row()
        self.header_written = True
        logger.debug(f'Wrote CSV header with {len(names)} columns')

    def start(self, names: Sequence[str]) -> None:
        if not self.header_written:
            self._write_header(names)

    def write(self, row: 'Row') -> None:
        if not self.header_written:
            self._write_header(row.names)

        for index in range(len(row)):
            if row.is_null(index):
                self._write_cell(b'')
            else:
                self._write_cell(render_value(row, index).text.encode('utf-8'))

        self._finish_row()
