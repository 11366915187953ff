"""
Pipe-specific exception classes.
"""
import sqlalchemy as sa


class DbpipeError(Exception):
    """Base class for all dbpipe errors.
    """


class ConnectionFailure(DbpipeError):
    """Error establishing or maintaining the database connection.
    """


class QueryError(DbpipeError):
    """Error in query validation or execution.
    """


class ReadOnlyViolation(QueryError):
    """A destructive statement was submitted without execute mode.
    """


class RowAccessError(DbpipeError):
    """A typed accessor was applied to an incompatible stored value.
    """


class SinkError(DbpipeError):
    """Writing encoded bytes to the destination failed.
    """


# engine.connect() wraps driver errors, so only the SQLAlchemy classes reach callers
DbConnectionError = (
    sa.exc.OperationalError,
    sa.exc.InterfaceError,
    )
