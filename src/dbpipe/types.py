"""
Type tag dispatch shared by every row writer.

This module provides:
- TypeCategory: the rendering families a column type tag falls into
- resolve_category: the single type tag -> category lookup table
- infer_type_tag: type tag for a bare Python value (dialects without declared types)
- render_value: (type tag, stored value) -> Rendered text for one cell
- format_float / format_datetime: textual forms shared by CSV and JSON output
"""
import datetime
import json
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from dbpipe.row import Row

logger = logging.getLogger(__name__)

TEXT_TAGS = frozenset({'CHAR', 'VARCHAR', 'TEXT', 'LONGTEXT'})
NULL_TAG = 'NULL'


class TypeCategory(Enum):
    """Rendering family selected by a column's type tag.
    """
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    FLOAT = 'float'
    DOUBLE = 'double'
    TEXT = 'text'
    DATETIME = 'datetime'
    OTHER = 'other'

    @property
    def is_numeric(self) -> bool:
        return self in {TypeCategory.INTEGER, TypeCategory.FLOAT, TypeCategory.DOUBLE}

    @property
    def is_literal(self) -> bool:
        """True when the rendered text is a bare JSON token rather than a string.
        """
        return self is TypeCategory.BOOLEAN or self.is_numeric


class Rendered(NamedTuple):
    category: TypeCategory
    text: str


def resolve_category(type_tag: str) -> TypeCategory:
    """Map a type tag to its rendering family.

    Matching is case-sensitive. The order matters: a tag is tested for
    BOOLEAN, then for the substring INT, then for the exact float names.

    >>> resolve_category('BIGINT')
    <TypeCategory.INTEGER: 'integer'>
    >>> resolve_category('NUMERIC')
    <TypeCategory.OTHER: 'other'>
    """
    if type_tag == 'BOOLEAN':
        return TypeCategory.BOOLEAN
    if 'INT' in type_tag:
        return TypeCategory.INTEGER
    if type_tag == 'FLOAT':
        return TypeCategory.FLOAT
    if type_tag == 'DOUBLE':
        return TypeCategory.DOUBLE
    if type_tag in TEXT_TAGS:
        return TypeCategory.TEXT
    if type_tag == 'DATETIME':
        return TypeCategory.DATETIME
    return TypeCategory.OTHER


def infer_type_tag(value: Any) -> str:
    """Type tag for a value whose column carries no declared type.
    """
    if value is None:
        return NULL_TAG
    if isinstance(value, bool | np.bool_):
        return 'BOOLEAN'
    if isinstance(value, int | np.integer):
        return 'INTEGER'
    if isinstance(value, np.float32):
        return 'FLOAT'
    if isinstance(value, float | np.floating):
        return 'DOUBLE'
    if isinstance(value, str):
        return 'TEXT'
    if isinstance(value, bytes | bytearray | memoryview):
        return 'BLOB'
    if isinstance(value, datetime.datetime):
        return 'DATETIME'
    return type(value).__name__.upper()


def format_float(value: np.floating) -> str:
    """Shortest positional text that round-trips at the value's own precision.

    Integral values drop the trailing ``.0``; no exponent is ever used.

    >>> format_float(np.float32(0.1))
    '0.1'
    >>> format_float(np.float64(2.0))
    '2'
    """
    if np.isnan(value):
        return 'NaN'
    if np.isinf(value):
        return 'inf' if value > 0 else '-inf'
    return np.format_float_positional(value, trim='-')


def format_datetime(value: datetime.datetime) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS`` with optional fraction.

    Fractions print as milliseconds when that is exact, otherwise as
    microseconds. Aware values keep their UTC offset.
    """
    if not value.microsecond:
        timespec = 'seconds'
    elif value.microsecond % 1000 == 0:
        timespec = 'milliseconds'
    else:
        timespec = 'microseconds'
    return value.isoformat(sep=' ', timespec=timespec)


def format_native(value: Any) -> str:
    """Native text form of a value with no dedicated rendering.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bytes | bytearray | memoryview):
        return '\\x' + bytes(value).hex()
    if isinstance(value, datetime.datetime):
        return format_datetime(value)
    if isinstance(value, dict | list):
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)
    if isinstance(value, np.generic):
        return str(value.item())
    return str(value)


def _render_boolean(row: 'Row', index: int) -> str:
    return 'true' if row.get_bool(index) else 'false'


def _render_integer(row: 'Row', index: int) -> str:
    return str(row.get_int(index))


def _render_float(row: 'Row', index: int) -> str:
    return format_float(row.get_float32(index))


def _render_double(row: 'Row', index: int) -> str:
    return format_float(row.get_float64(index))


def _render_text(row: 'Row', index: int) -> str:
    return row.get_str(index)


def _render_datetime(row: 'Row', index: int) -> str:
    return format_datetime(row.get_datetime(index))


def _render_other(row: 'Row', index: int) -> str:
    return row.get_text(index)


_RENDERERS = {
    TypeCategory.BOOLEAN: _render_boolean,
    TypeCategory.INTEGER: _render_integer,
    TypeCategory.FLOAT: _render_float,
    TypeCategory.DOUBLE: _render_double,
    TypeCategory.TEXT: _render_text,
    TypeCategory.DATETIME: _render_datetime,
    TypeCategory.OTHER: _render_other,
    }


def render_value(row: 'Row', index: int) -> Rendered:
    """Render the non-NULL value at ``index`` according to its column's type tag.

    Callers must check ``row.is_null(index)`` first; NULL never reaches the
    type dispatch. A stored value that does not fit the accessor its tag
    selects raises RowAccessError.
    """
    category = resolve_category(row.column(index).type_tag)
    return Rendered(category, _RENDERERS[category](row, index))
