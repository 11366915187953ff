"""Row abstraction over streamed cursor results."""
import datetime
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Self

import dateutil.parser
import numpy as np
from dbpipe.config.type_tags import TypeTagConfig
from dbpipe.exceptions import RowAccessError
from dbpipe.strategy import get_strategy
from dbpipe.types import format_native, infer_type_tag

logger = logging.getLogger(__name__)

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True, slots=True)
class Column:
    """Metadata for one field position of one row.

    ``name`` is not unique within a row (self-joins, repeated expressions).
    ``is_null`` describes this row's value, independent of ``type_tag``.
    """
    name: str
    type_tag: str
    is_null: bool = False


class Row:
    """One query result record with ordered columns and typed accessors.

    Values are stored as the driver produced them. Every accessor checks the
    stored representation and raises RowAccessError on a mismatch instead of
    coercing, so a wrong entry in the type dispatch surfaces immediately.
    """

    __slots__ = ('_fields', '_values', '_infer')

    def __init__(self, fields: Sequence[tuple[str, str | None]], values: Sequence[Any],
                 infer: Callable[[Any], str] = infer_type_tag) -> None:
        """Initialize from column fields and the matching values.

        Args:
            fields: (name, declared type tag or None) per column, in cursor order
            values: stored values, None for SQL NULL
            infer: tag inference used where a column has no declared tag
        """
        if len(fields) != len(values):
            raise ValueError(f'Row has {len(values)} values for {len(fields)} columns')
        self._fields = fields
        self._values = values
        self._infer = infer

    @classmethod
    def from_columns(cls, columns: Sequence[tuple[str, str]], values: Sequence[Any]) -> Self:
        """Build a row from explicit (name, type_tag) pairs.
        """
        return cls(list(columns), list(values))

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f'Row({", ".join(f"{c.name}={v!r}" for c, v in zip(self.columns, self._values))})'

    @property
    def columns(self) -> list[Column]:
        """Columns in cursor order."""
        return [self.column(i) for i in range(len(self._fields))]

    @property
    def names(self) -> list[str]:
        """Column names in cursor order."""
        return [name for name, _ in self._fields]

    def column(self, index: int) -> Column:
        """Column metadata at a position, with the tag inferred when undeclared."""
        name, declared = self._fields[index]
        value = self._values[index]
        type_tag = declared if declared is not None else self._infer(value)
        return Column(name=name, type_tag=type_tag, is_null=value is None)

    def is_null(self, index: int) -> bool:
        """Whether the value at a position is SQL NULL."""
        return self._values[index] is None

    def _value(self, index: int) -> Any:
        value = self._values[index]
        if value is None:
            raise RowAccessError(f'Column {self._fields[index][0]!r} (position {index}) is NULL')
        return value

    def _mismatch(self, index: int, wanted: str) -> RowAccessError:
        name, _ = self._fields[index]
        value = self._values[index]
        return RowAccessError(
            f'Cannot read column {name!r} (position {index}) as {wanted}: '
            f'stored {type(value).__name__} {value!r}')

    def get_bool(self, index: int) -> bool:
        """Read a boolean. Integer 0/1 is accepted for drivers without a bool type.
        """
        value = self._value(index)
        if isinstance(value, bool | np.bool_):
            return bool(value)
        if isinstance(value, int | np.integer) and value in {0, 1}:
            return bool(value)
        raise self._mismatch(index, 'bool')

    def get_int(self, index: int) -> int:
        """Read a signed 64-bit integer.
        """
        value = self._value(index)
        if isinstance(value, bool | np.bool_) or not isinstance(value, int | np.integer):
            raise self._mismatch(index, 'i64')
        value = int(value)
        if not INT64_MIN <= value <= INT64_MAX:
            raise self._mismatch(index, 'i64')
        return value

    def _get_number(self, index: int, wanted: str) -> Any:
        value = self._value(index)
        if isinstance(value, bool | np.bool_) or not isinstance(value, int | float | np.number):
            raise self._mismatch(index, wanted)
        return value

    def get_float32(self, index: int) -> np.float32:
        return np.float32(self._get_number(index, 'f32'))

    def get_float64(self, index: int) -> np.float64:
        return np.float64(self._get_number(index, 'f64'))

    def get_str(self, index: int) -> str:
        value = self._value(index)
        if not isinstance(value, str):
            raise self._mismatch(index, 'str')
        return value

    def get_datetime(self, index: int) -> datetime.datetime:
        """Read a timestamp. ISO-8601 text (SQLite storage) is parsed.
        """
        value = self._value(index)
        if isinstance(value, datetime.datetime):
            if hasattr(value, 'to_pydatetime'):
                return value.to_pydatetime()
            return value
        if isinstance(value, np.datetime64) and not np.isnat(value):
            return value.astype('datetime64[us]').item()
        if isinstance(value, str):
            try:
                return dateutil.parser.isoparse(value)
            except ValueError as exc:
                raise self._mismatch(index, 'datetime') from exc
        raise self._mismatch(index, 'datetime')

    def get_text(self, index: int) -> str:
        """Native text representation of any stored value.
        """
        return format_native(self._value(index))


class RowFactory:
    """Factory that turns cursor value tuples into Row objects.

    Column names and declared type tags are resolved once from the cursor
    description; each call then wraps one value tuple without copying it.
    """

    def __init__(self, description: Sequence[Any] | None, dialect: str,
                 config: TypeTagConfig | None = None) -> None:
        """Initialize with cursor description to extract column metadata.

        Args:
            description: DB-API ``cursor.description``
            dialect: Dialect name used to resolve type codes ('postgresql', 'sqlite')
            config: Type tag overrides (defaults to the process-wide instance)
        """
        strategy = get_strategy(dialect)
        config = config or TypeTagConfig.get_instance()
        self.fields = []
        for item in description or []:
            name, type_code = item[0], item[1]
            type_tag = config.get_tag_for_column(dialect, name)
            if type_tag is None:
                type_tag = strategy.declared_type_tag(type_code)
            self.fields.append((name, type_tag))
        self.infer = strategy.infer_type_tag
        logger.debug(f'Result columns: {self.fields}')

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.fields]

    def __call__(self, values: Sequence[Any]) -> Row:
        return Row(self.fields, values, self.infer)
