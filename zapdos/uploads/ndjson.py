"""Newline-delimited JSON decoding for chunked response bodies.

Chunk boundaries can fall anywhere, including inside a line or inside a
multi-byte UTF-8 sequence, so decoding is incremental: complete lines are
parsed as they arrive and the trailing fragment is held back until the next
chunk or the end of the stream.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import Any

from zapdos.core.exceptions import RecordDecodeError

logger = logging.getLogger(__name__)


def parse_line(line: str) -> Any:
    """Parse one NDJSON line.

    Raises:
        RecordDecodeError: If the line is not valid JSON.
    """
    try:
        return json.loads(line)
    except ValueError as e:
        raise RecordDecodeError(line, str(e)) from e


class NDJSONDecoder:
    """Incremental NDJSON decoder.

    Feed it byte chunks in order; each call returns the records completed by
    that chunk. Lines that fail to parse are logged and skipped.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received after the last newline."""
        return self._buffer

    def _parse_lines(self, lines: Iterable[str]) -> list[Any]:
        records = []
        for line in lines:
            if not line.strip():
                continue
            try:
                records.append(parse_line(line))
            except RecordDecodeError as e:
                logger.warning("%s", e)
        return records

    def feed(self, chunk: bytes) -> list[Any]:
        """Decode a chunk and return every record it completes."""
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return self._parse_lines(lines)

    def flush(self) -> list[Any]:
        """Decode whatever is left once the stream has ended."""
        self._buffer += self._decoder.decode(b"", final=True)
        rest, self._buffer = self._buffer, ""
        return self._parse_lines(rest.split("\n"))


def iter_ndjson(chunks: Iterable[bytes]) -> Iterator[Any]:
    """Lazily decode records from an iterable of byte chunks."""
    decoder = NDJSONDecoder()
    for chunk in chunks:
        yield from decoder.feed(chunk)
    yield from decoder.flush()


async def aiter_ndjson(chunks: AsyncIterable[bytes]) -> AsyncIterator[Any]:
    """Lazily decode records from an async iterable of byte chunks.

    Stopping iteration early leaves the underlying iterator unread; whoever
    owns the stream (usually an ``httpx`` response context) closes it.
    """
    decoder = NDJSONDecoder()
    async for chunk in chunks:
        for record in decoder.feed(chunk):
            yield record
    for record in decoder.flush():
        yield record
