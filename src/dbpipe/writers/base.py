"""
Base interface for streaming row writers.

A writer consumes one Row at a time and immediately emits its encoded bytes
to a sink: any object with a ``write(bytes)`` method (``sys.stdout.buffer``,
an open binary file, ``io.BytesIO``). Nothing is buffered between rows.
"""
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, BinaryIO

from dbpipe.exceptions import SinkError

if TYPE_CHECKING:
    from dbpipe.row import Row

logger = logging.getLogger(__name__)

# Registry of format name -> writer class
_WRITER_REGISTRY: dict[str, type['RowWriter']] = {}


def register_writer(name: str):
    """Decorator to register a writer class for an output format.

    Usage:
        @register_writer('csv')
        class CsvWriter(RowWriter):
            ...
    """
    def decorator(cls: type['RowWriter']) -> type['RowWriter']:
        _WRITER_REGISTRY[name] = cls
        return cls
    return decorator


class RowWriter(ABC):
    """Accepts rows in arrival order and writes each one to the sink.
    """

    def __init__(self, sink: BinaryIO, **kwargs: Any) -> None:
        self.sink = sink

    def _emit(self, data: bytes) -> None:
        """Write bytes to the sink, surfacing any I/O failure as SinkError.
        """
        try:
            self.sink.write(data)
        except OSError as exc:
            raise SinkError(f'Failed to write to output: {exc}') from exc

    def start(self, names: Sequence[str]) -> None:
        """Receive the result-set column names before any row arrives.
        """

    @abstractmethod
    def write(self, row: 'Row') -> None:
        """Encode one row and write it to the sink.
        """
