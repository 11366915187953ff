"""
Read-only guard for submitted queries.
"""
import logging
import re

from dbpipe.exceptions import ReadOnlyViolation

logger = logging.getLogger(__name__)

_DESTRUCTIVE_REGEX = re.compile(r'\b(UPDATE|DELETE)\b', re.IGNORECASE)


def is_query_destructive(sql: str) -> bool:
    """Check whether a query contains an UPDATE or DELETE keyword.

    This is a keyword match, not a parser: the words inside string literals
    or identifiers count too.

    >>> is_query_destructive('delete from t')
    True
    >>> is_query_destructive('select updated_at from t')
    False
    """
    return bool(_DESTRUCTIVE_REGEX.search(sql))


def check_read_only(sql: str, execute: bool) -> None:
    """Raise ReadOnlyViolation for a destructive query outside execute mode.
    """
    if not execute and is_query_destructive(sql):
        logger.debug(f'Rejected destructive query: {sql}')
        raise ReadOnlyViolation('Only SELECT queries are allowed when in read-only mode.')
