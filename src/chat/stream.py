"""Incremental decoder for newline-delimited JSON event streams.

The chat backend answers with one JSON record per line, but the network hands
us arbitrary slices of that text. ``NDJSONDecoder`` keeps whatever has not yet
formed a complete record and only emits records once they parse.

A line that fails to parse is not treated as a protocol error. If it opens an
object it is kept and joined with the following line(s), in case the record was
split across a newline; as soon as a later line parses on its own, the stuck
text is dropped. Anything else that does not parse is dropped and logged.
"""

import json
from typing import Any

from src.chat.errors import StreamOverflowError
from src.utils.logger import get_logger

logger = get_logger("ndjson")


def _parse_record(text: str) -> dict[str, Any] | None:
    """Parse one record, or return None if ``text`` is not a complete JSON object."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


class NDJSONDecoder:
    """Buffering state machine: ``feed()`` text in, get complete records out."""

    def __init__(self, max_buffer_chars: int | None = None):
        """Initialize decoder.

        Args:
            max_buffer_chars: Upper bound on text held while waiting for a
                record to complete. ``None`` disables the bound.
        """
        self.max_buffer_chars = max_buffer_chars
        self._buffer = ""
        # Offset into _buffer up to which we already know there is no newline
        # that would complete the pending record
        self._scan_from = 0

    @property
    def pending(self) -> str:
        """Text received but not yet emitted as a record."""
        return self._buffer

    def feed(self, chunk: str) -> list[dict[str, Any]]:
        """Append a chunk and return every record it completed, in order."""
        self._buffer += chunk
        records = self._drain()

        # A final record may arrive without its trailing newline
        tail = self._buffer.strip()
        if tail.startswith("{") and tail.endswith("}"):
            record = _parse_record(tail)
            if record is not None:
                records.append(record)
                self._buffer = ""
                self._scan_from = 0

        if self.max_buffer_chars is not None and len(self._buffer) > self.max_buffer_chars:
            raise StreamOverflowError(len(self._buffer), self.max_buffer_chars)

        return records

    def close(self) -> list[dict[str, Any]]:
        """Flush at end of stream; unparseable leftovers are logged and discarded."""
        records = self._drain()
        leftover = self._buffer.strip()
        self._buffer = ""
        self._scan_from = 0
        if not leftover:
            return records

        record = _parse_record(leftover)
        if record is not None:
            records.append(record)
        else:
            # Salvage any individually valid lines from the unresolved block
            dropped = 0
            for line in leftover.splitlines():
                line_record = _parse_record(line.strip()) if line.strip() else None
                if line_record is not None:
                    records.append(line_record)
                elif line.strip():
                    dropped += 1
            if dropped:
                logger.warning(
                    "stream_leftover_discarded",
                    lines=dropped,
                    preview=leftover[:100],
                )
        return records

    def _drain(self) -> list[dict[str, Any]]:
        records: list[dict[str, Any]] = []
        while True:
            newline = self._buffer.find("\n", self._scan_from)
            if newline == -1:
                return records

            block = self._buffer[:newline].strip()
            if not block:
                self._consume(newline + 1)
                continue

            # A later line that parses on its own means the stuck prefix was
            # never the start of this record
            if self._scan_from > 0:
                line = self._buffer[self._scan_from:newline].strip()
                record = _parse_record(line) if line else None
                if record is not None:
                    self._discard(self._buffer[: self._scan_from])
                    records.append(record)
                    self._consume(newline + 1)
                    continue

            record = _parse_record(block)
            if record is not None:
                records.append(record)
                self._consume(newline + 1)
                continue

            if not block.startswith("{"):
                self._discard(block)
                self._consume(newline + 1)
                continue

            # Not complete yet: widen the candidate to the next newline
            self._scan_from = newline + 1

    def _discard(self, text: str) -> None:
        logger.warning("stream_line_discarded", preview=text.strip()[:100])

    def _consume(self, upto: int) -> None:
        self._buffer = self._buffer[upto:]
        self._scan_from = 0
