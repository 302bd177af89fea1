"""Reassembly of newline terminated lines from raw socket reads."""

from __future__ import annotations

import codecs


class LineFramer:
    """Incrementally decode socket chunks and hand out complete lines.

    A read may end in the middle of a line, or in the middle of a multi-byte
    UTF-8 sequence; both are held back until the next ``feed``.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, data: bytes) -> str:
        """Add ``data`` and return every complete line received so far.

        The returned text is newline terminated (or empty); an unterminated
        tail stays buffered.
        """
        self._buffer += self._decoder.decode(data)
        cut = self._buffer.rfind("\n")
        if cut < 0:
            return ""
        complete, self._buffer = self._buffer[: cut + 1], self._buffer[cut + 1 :]
        return complete

    def flush(self) -> str:
        """Return everything buffered, terminated or not, and reset."""
        text = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        self._decoder.reset()
        return text
