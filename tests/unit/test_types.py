"""
Tests for the type tag dispatch table shared by the CSV and JSON writers.
"""
import datetime
from decimal import Decimal

import numpy as np
import pytest
from dbpipe.exceptions import RowAccessError
from dbpipe.row import Row
from dbpipe.types import TypeCategory, format_datetime, format_float
from dbpipe.types import infer_type_tag, render_value, resolve_category


@pytest.mark.parametrize(('type_tag', 'expected'), [
    ('BOOLEAN', TypeCategory.BOOLEAN),
    ('INTEGER', TypeCategory.INTEGER),
    ('BIGINT', TypeCategory.INTEGER),
    ('SMALLINT', TypeCategory.INTEGER),
    ('TINYINT', TypeCategory.INTEGER),
    ('FLOAT', TypeCategory.FLOAT),
    ('DOUBLE', TypeCategory.DOUBLE),
    ('CHAR', TypeCategory.TEXT),
    ('VARCHAR', TypeCategory.TEXT),
    ('TEXT', TypeCategory.TEXT),
    ('LONGTEXT', TypeCategory.TEXT),
    ('DATETIME', TypeCategory.DATETIME),
    ('NUMERIC', TypeCategory.OTHER),
    ('REAL', TypeCategory.OTHER),
    ('DATE', TypeCategory.OTHER),
    ('BLOB', TypeCategory.OTHER),
    ('NULL', TypeCategory.OTHER),
])
def test_resolve_category(type_tag, expected):
    assert resolve_category(type_tag) is expected


def test_resolve_category_is_case_sensitive():
    assert resolve_category('boolean') is TypeCategory.OTHER
    assert resolve_category('integer') is TypeCategory.OTHER
    assert resolve_category('Text') is TypeCategory.OTHER


def test_resolve_category_int_is_substring_match():
    """Any tag containing INT selects the integer family"""
    assert resolve_category('MEDIUMINT UNSIGNED') is TypeCategory.INTEGER
    assert resolve_category('INTERVAL') is TypeCategory.INTEGER


def test_literal_categories():
    assert TypeCategory.BOOLEAN.is_literal
    assert TypeCategory.INTEGER.is_literal
    assert TypeCategory.DOUBLE.is_literal
    assert not TypeCategory.TEXT.is_literal
    assert not TypeCategory.DATETIME.is_literal
    assert not TypeCategory.OTHER.is_literal


def render(type_tag, value):
    return render_value(Row.from_columns([('c', type_tag)], [value]), 0)


def test_render_boolean():
    assert render('BOOLEAN', True).text == 'true'
    assert render('BOOLEAN', False).text == 'false'
    assert render('BOOLEAN', 1).text == 'true'
    assert render('BOOLEAN', np.bool_(False)).text == 'false'


def test_render_integer():
    assert render('INTEGER', 42).text == '42'
    assert render('BIGINT', -9223372036854775808).text == '-9223372036854775808'
    assert render('SMALLINT', np.int16(-7)).text == '-7'


def test_render_integer_out_of_range():
    with pytest.raises(RowAccessError):
        render('BIGINT', 2 ** 63)


def test_render_float_uses_32_bit_precision():
    assert render('FLOAT', 0.1).text == '0.1'
    assert render('FLOAT', 1.1).text == '1.1'
    assert render('FLOAT', 16777217).text == '16777216'
    assert render('FLOAT', 2.0).text == '2'


def test_render_double():
    assert render('DOUBLE', 0.1).text == '0.1'
    assert render('DOUBLE', 1.0).text == '1'
    assert render('DOUBLE', -2.5).text == '-2.5'
    assert render('DOUBLE', 1e20).text == '100000000000000000000'
    assert render('DOUBLE', 7).text == '7'


def test_render_double_non_finite():
    assert render('DOUBLE', float('nan')).text == 'NaN'
    assert render('DOUBLE', float('inf')).text == 'inf'
    assert render('DOUBLE', float('-inf')).text == '-inf'


@pytest.mark.parametrize('type_tag', ['CHAR', 'VARCHAR', 'TEXT', 'LONGTEXT'])
def test_render_text(type_tag):
    rendered = render(type_tag, 'He said "hi",\nbye')
    assert rendered.category is TypeCategory.TEXT
    assert rendered.text == 'He said "hi",\nbye'


def test_render_text_rejects_non_string():
    with pytest.raises(RowAccessError):
        render('TEXT', 12)


def test_render_datetime():
    value = datetime.datetime(2024, 1, 2, 3, 4, 5)
    assert render('DATETIME', value).text == '2024-01-02 03:04:05'


def test_render_datetime_from_text():
    assert render('DATETIME', '2024-01-02T03:04:05').text == '2024-01-02 03:04:05'
    assert render('DATETIME', '2024-02-03 04:05:06.250').text == '2024-02-03 04:05:06.250'


def test_render_datetime_rejects_garbage():
    with pytest.raises(RowAccessError):
        render('DATETIME', 'yesterday-ish')
    with pytest.raises(RowAccessError):
        render('DATETIME', 17)


def test_render_other_uses_native_text():
    assert render('NUMERIC', Decimal('1.50')).text == '1.50'
    assert render('DATE', datetime.date(2024, 1, 2)).text == '2024-01-02'
    assert render('BLOB', b'\x01\xff').text == '\\x01ff'
    assert render('JSON', {'a': [1, 2]}).text == '{"a":[1,2]}'
    assert render('UNKNOWN', 'as is').text == 'as is'


def test_render_other_category():
    assert render('NUMERIC', Decimal('3')).category is TypeCategory.OTHER


def test_format_float_preserves_precision():
    assert format_float(np.float32(1.1)) == '1.1'
    assert format_float(np.float64(1.1)) == '1.1'
    assert format_float(np.float64(0.30000000000000004)) == '0.30000000000000004'


@pytest.mark.parametrize(('microsecond', 'expected'), [
    (0, '2024-01-02 03:04:05'),
    (250000, '2024-01-02 03:04:05.250'),
    (123456, '2024-01-02 03:04:05.123456'),
])
def test_format_datetime_fraction(microsecond, expected):
    value = datetime.datetime(2024, 1, 2, 3, 4, 5, microsecond)
    assert format_datetime(value) == expected


def test_format_datetime_keeps_offset():
    value = datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.UTC)
    assert format_datetime(value) == '2024-01-02 03:04:05+00:00'


@pytest.mark.parametrize(('value', 'expected'), [
    (None, 'NULL'),
    (True, 'BOOLEAN'),
    (3, 'INTEGER'),
    (np.int64(3), 'INTEGER'),
    (np.float32(1.5), 'FLOAT'),
    (1.5, 'DOUBLE'),
    ('x', 'TEXT'),
    (b'x', 'BLOB'),
    (datetime.datetime(2024, 1, 1), 'DATETIME'),
    (Decimal('1'), 'DECIMAL'),
])
def test_infer_type_tag(value, expected):
    assert infer_type_tag(value) == expected


if __name__ == '__main__':
    __import__('pytest').main([__file__])
