"""
Incremental SSE line decoder.

Providers push server-sent events over a chunked HTTP body.  Transport
reads split that body at arbitrary byte offsets, including in the middle
of a multi-byte UTF-8 character, so both undecoded bytes and undelimited
text are carried across calls.
"""

import codecs
from typing import AsyncIterator, List

DATA_PREFIX = "data: "


class SSELineDecoder:
    """Turns raw byte chunks into complete ``data:`` lines.

    Feeding the same byte stream in any partition produces the same
    ordered list of lines.  Lines without the data prefix (``event:``,
    ``id:``, comments, blank separators) are discarded.
    """

    def __init__(self, prefix: str = DATA_PREFIX, encoding: str = "utf-8"):
        self.prefix = prefix
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    def feed(self, data: bytes) -> List[str]:
        """Consume one transport chunk and return the lines it completed."""
        self._buffer += self._decoder.decode(data)
        if "\n" not in self._buffer:
            return []

        parts = self._buffer.split("\n")
        self._buffer = parts.pop()
        return [line for line in (p.rstrip("\r") for p in parts) if self._accepts(line)]

    def flush(self) -> List[str]:
        """Drain the decoder at end-of-stream.

        Returns the trailing unterminated segment as a final line when
        it is a non-empty data line.
        """
        line = (self._buffer + self._decoder.decode(b"", final=True)).rstrip("\r")
        self._buffer = ""
        if line and self._accepts(line):
            return [line]
        return []

    def _accepts(self, line: str) -> bool:
        return line.startswith(self.prefix)


async def iter_sse_data(chunks: AsyncIterator[bytes], prefix: str = DATA_PREFIX) -> AsyncIterator[str]:
    """Yield the payload of every data line in an async byte stream."""
    decoder = SSELineDecoder(prefix=prefix)
    async for chunk in chunks:
        for line in decoder.feed(chunk):
            yield line[len(prefix):]
    for line in decoder.flush():
        yield line[len(prefix):]
