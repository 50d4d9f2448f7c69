"""File-backed event source reading a line-delimited event log."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from infrastructure.logging.logger import get_logger
from system.revenue_aggregator.domain.errors import SourceError


class FileEventSource:
    """Yield non-blank lines of an event log in file order.

    Lines are yielded as raw bytes. Text decoding belongs to the decoder, so
    a line that is not valid UTF-8 is skipped as one bad record instead of
    ending the whole read.

    Each call to ``records()`` reopens the file; the source holds no cursor
    between calls. The file is closed once the iterator is exhausted or
    discarded.

    Args:
        path: Location of the event log.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.logger = get_logger(self.__class__.__name__)

    def records(self) -> Iterator[bytes]:
        try:
            handle = self.path.open("rb")
        except OSError as e:
            raise SourceError(f"Cannot open event log {self.path}: {e}") from e

        self.logger.debug(f"Reading events from {self.path}")
        with handle:
            lines_read = 0
            try:
                for line in handle:
                    lines_read += 1
                    record = line.strip()
                    if record:
                        yield record
            except OSError as e:
                raise SourceError(
                    f"Cannot read event log {self.path} after line {lines_read}: {e}"
                ) from e
