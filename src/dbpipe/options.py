from dataclasses import dataclass

import sqlalchemy as sa
from dbpipe.strategy import get_available_dialects, is_supported_dialect

from libb import ConfigOptions

__all__ = ['PipeOptions']


@dataclass
class PipeOptions(ConfigOptions):
    """Options

    supported URL schemes: `postgresql`, `sqlite`

    - db: connection URL of the database
    - user, password: override the credentials embedded in the URL
    - execute: run an UPDATE or DELETE and report affected rows
    - json: write newline-delimited JSON instead of CSV
    - no_header: do not write the CSV header line
    - quiet, verbose: logging level selection for the command line
    - query: the SQL text (a list of words is joined with spaces)
    """
    db: str = None
    user: str = None
    password: str = None
    execute: bool = False
    json: bool = False
    no_header: bool = False
    quiet: bool = False
    verbose: int = 0
    query: str | list[str] = ''

    def __post_init__(self):
        if not self.db:
            raise ValueError('db connection URL is required')
        try:
            url = sa.make_url(self.db)
        except sa.exc.ArgumentError as exc:
            raise ValueError(f'Invalid db connection URL: {exc}') from exc
        if not is_supported_dialect(url.get_backend_name()):
            available = get_available_dialects()
            raise ValueError(f'db URL scheme must be one of: {available}')
        if isinstance(self.query, list | tuple):
            self.query = ' '.join(self.query)
        self.query = self.query.strip()
        if not self.query:
            raise ValueError('query is required')

    @property
    def dialect(self) -> str:
        return sa.make_url(self.db).get_backend_name()
