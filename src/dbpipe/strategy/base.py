"""
Base strategy interface for dialect-specific result handling.

Each dialect reports column types differently in ``cursor.description``:
PostgreSQL hands out type OIDs while SQLite hands out nothing at all. A
strategy turns whatever the driver reports into the type tags the row
writers dispatch on, and adapts connection URLs to the driver we use.
"""
from abc import ABC, abstractmethod
from typing import Any

import sqlalchemy as sa
from dbpipe.types import infer_type_tag

# Registry of dialect name -> strategy class
_STRATEGY_REGISTRY: dict[str, type['DialectStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('postgresql')
        class PostgresStrategy(DialectStrategy):
            ...
    """
    def decorator(cls: type['DialectStrategy']) -> type['DialectStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class DialectStrategy(ABC):
    """Base class for dialect-specific type tag resolution.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect identifier."""

    @abstractmethod
    def declared_type_tag(self, type_code: Any) -> str | None:
        """Type tag for a ``cursor.description`` type code.

        Returns None when the driver reports no usable type, in which case
        the tag is inferred per value with ``infer_type_tag``.
        """

    def infer_type_tag(self, value: Any) -> str:
        """Type tag for a value from a column without a declared type.
        """
        return infer_type_tag(value)

    def adapt_url(self, url: sa.URL) -> sa.URL:
        """Return the connection URL with this dialect's preferred driver.
        """
        return url
