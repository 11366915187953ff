"""
SQLite-specific strategy implementation.

The sqlite3 module leaves ``type_code`` empty in ``cursor.description``, and
SQLite stores values by storage class rather than by declared column type, so
tags come from each value: INTEGER, DOUBLE, TEXT, BLOB or NULL.
"""
import logging
from typing import Any

from dbpipe.strategy.base import DialectStrategy, register_strategy

logger = logging.getLogger(__name__)


@register_strategy('sqlite')
class SQLiteStrategy(DialectStrategy):
    """SQLite-specific type handling.
    """

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for SQLite."""
        return 'sqlite'

    def declared_type_tag(self, type_code: Any) -> str | None:
        """SQLite reports no type; a string code from another driver is upper-cased.
        """
        if isinstance(type_code, str) and type_code:
            return type_code.split('(')[0].strip().upper()
        return None
