"""
Row writers for CSV and newline-delimited JSON output.
"""
from typing import Any, BinaryIO

from dbpipe.writers.base import _WRITER_REGISTRY
from dbpipe.writers.base import RowWriter as RowWriter
from dbpipe.writers.base import register_writer as register_writer
from dbpipe.writers.csv_writer import CsvWriter as CsvWriter
from dbpipe.writers.json_writer import JsonWriter as JsonWriter


def get_writer_class(name: str) -> type[RowWriter]:
    """Get the writer class registered for an output format."""
    if name not in _WRITER_REGISTRY:
        available = list(_WRITER_REGISTRY.keys())
        raise ValueError(f'Unsupported format: {name}. Available: {available}')
    return _WRITER_REGISTRY[name]


def make_writer(sink: BinaryIO, options: Any) -> RowWriter:
    """Create the writer selected by ``options.json`` and ``options.no_header``.
    """
    fmt = 'json' if options.json else 'csv'
    return get_writer_class(fmt)(sink, header=not options.no_header)
