"""
Newline-delimited JSON row writer.

Every row becomes one compact JSON object on its own line, keys in column
order. Duplicate column names are written as duplicate keys; no enclosing
array is emitted, so the output can be consumed line by line.
"""
import logging
from typing import TYPE_CHECKING

from dbpipe.types import render_value
from dbpipe.writers.base import RowWriter, register_writer

if TYPE_CHECKING:
    from dbpipe.row import Row

logger = logging.getLogger(__name__)

NON_FINITE = frozenset({'NaN', 'inf', '-inf'})

_NAMED_ESCAPES = {
    '"': '\\"',
    '\\': '\\\\',
    '\b': '\\b',
    '\f': '\\f',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    }


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or 0x7f <= code <= 0x9f


def escape_string(value: str) -> str:
    """Quote a string as a JSON string literal.

    Quotes and backslashes get a backslash, the common control characters use
    their short escapes and the rest of the C0/C1 control range uses
    ``\\u00XX``. Everything else is copied through.

    >>> escape_string('a "b"\\n')
    '"a \\\\"b\\\\"\\\\n"'
    """
    parts = ['"']
    for char in value:
        if char in _NAMED_ESCAPES:
            parts.append(_NAMED_ESCAPES[char])
        elif _is_control(char):
            parts.append(f'\\u{ord(char):04x}')
        else:
            parts.append(char)
    parts.append('"')
    return ''.join(parts)


@register_writer('json')
class JsonWriter(RowWriter):
    """Write each row as one JSON object followed by a line feed.
    """

    def _encode_value(self, row: 'Row', index: int) -> str:
        if row.is_null(index):
            return 'null'
        rendered = render_value(row, index)
        if rendered.category.is_literal:
            # JSON has no token for NaN or infinity
            if rendered.text in NON_FINITE:
                return 'null'
            return rendered.text
        return escape_string(rendered.text)

    def write(self, row: 'Row') -> None:
        self._emit(b'{')
        for index, name in enumerate(row.names):
            if index > 0:
                self._emit(b',')
            self._emit(escape_string(name).encode('utf-8'))
            self._emit(b':')
            self._emit(self._encode_value(row, index).encode('utf-8'))
        self._emit(b'}\n')
