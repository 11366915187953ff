"""
PostgreSQL-specific strategy implementation.

Type OIDs from ``cursor.description`` are looked up in psycopg's builtin type
catalog and translated to the type tags the writers understand. Types outside
the catalog (extensions, user-defined enums and domains) get UNKNOWN and are
rendered through their native text form.
"""
import logging
from typing import Any

import sqlalchemy as sa
from dbpipe.strategy.base import DialectStrategy, register_strategy
from psycopg.postgres import types as pg_types

logger = logging.getLogger(__name__)

UNKNOWN_TAG = 'UNKNOWN'
ARRAY_TAG = 'ARRAY'
OPAQUE_TAG = 'OPAQUE'

_PG_TAGS: dict[str, str] = {
    'bool': 'BOOLEAN',
    'int2': 'SMALLINT',
    'int4': 'INTEGER',
    'int8': 'BIGINT',
    'oid': 'INTEGER',
    'float4': 'FLOAT',
    'float8': 'DOUBLE',
    'text': 'TEXT',
    'varchar': 'VARCHAR',
    'bpchar': 'CHAR',
    'char': 'CHAR',
    '"char"': 'CHAR',
    'name': 'VARCHAR',
    'timestamp': 'DATETIME',
    'timestamptz': 'DATETIME',
    'jsonb': 'JSON',
    'interval': 'DURATION',
    'point': 'GEOMETRY',
    }


@register_strategy('postgresql')
class PostgresStrategy(DialectStrategy):
    """PostgreSQL-specific type handling.
    """

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for PostgreSQL."""
        return 'postgresql'

    def declared_type_tag(self, type_code: Any) -> str | None:
        """Translate a type OID into a type tag.

        Array types map to ARRAY. Catalog names that merely contain ``int``
        (``int4range``, ``int2vector``) map to OPAQUE so they stay out of
        the integer family.
        """
        if type_code is None:
            return None
        info = pg_types.get(type_code)
        if info is None:
            logger.debug(f'No builtin type for OID {type_code}')
            return UNKNOWN_TAG
        if type_code == info.array_oid:
            return ARRAY_TAG
        if info.name in _PG_TAGS:
            return _PG_TAGS[info.name]
        tag = info.name.upper()
        if 'INT' in tag:
            return OPAQUE_TAG
        return tag

    def adapt_url(self, url: sa.URL) -> sa.URL:
        """Use the psycopg (v3) driver for plain ``postgresql://`` URLs.
        """
        if url.drivername in {'postgresql', 'postgres'}:
            return url.set(drivername='postgresql+psycopg')
        return url
