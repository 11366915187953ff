"""
Command line entry point.

    dbpipe --db postgresql://host/dbname select id, name from users
    dbpipe --db sqlite:///app.db --json select * from events
    dbpipe --db sqlite:///app.db --execute delete from events where id = 3
"""
import argparse
import logging
import os
import sys

from dbpipe.exceptions import DbpipeError, SinkError
from dbpipe.options import PipeOptions
from dbpipe.pipe import run

logger = logging.getLogger(__name__)

_VERBOSITY = [logging.ERROR, logging.WARNING, logging.INFO, logging.DEBUG]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dbpipe',
        description='Run a SQL query and write the result rows as CSV or JSON lines.')
    parser.add_argument('--db', default=os.environ.get('DBPIPE_DB'),
                        help='Connection URL of the database (env: DBPIPE_DB)')
    parser.add_argument('-u', '--user', default=os.environ.get('DBPIPE_USER'),
                        help='Database user name (env: DBPIPE_USER)')
    parser.add_argument('-p', '--password', default=os.environ.get('DBPIPE_PASSWORD'),
                        help='Database password (env: DBPIPE_PASSWORD)')
    parser.add_argument('-e', '--execute', action='store_true',
                        help='Execute an UPDATE or DELETE query')
    parser.add_argument('-j', '--json', action='store_true',
                        help='Write each matching row in JSON format separated by newlines')
    parser.add_argument('--no-header', action='store_true',
                        help="Don't print CSV headers")
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Silence all output')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Verbose mode (-v, -vv, -vvv)')
    parser.add_argument('query', nargs='+', help='The query to run')
    return parser


def configure_logging(quiet: bool, verbose: int) -> None:
    """Log to stderr: errors by default, one level more per -v, nothing when quiet.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    if quiet:
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.CRITICAL + 1)
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))
    root.addHandler(handler)
    root.setLevel(_VERBOSITY[min(verbose, len(_VERBOSITY) - 1)])


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.quiet, args.verbose)

    try:
        options = PipeOptions(**vars(args))
    except ValueError as exc:
        logger.error(str(exc))
        return 1

    try:
        run(options)
        sys.stdout.flush()
    except SinkError as exc:
        if isinstance(exc.__cause__, BrokenPipeError):
            # reader went away, e.g. piped into head
            return 0
        logger.error(str(exc))
        return 1
    except BrokenPipeError:
        return 0
    except DbpipeError as exc:
        logger.error(str(exc))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
