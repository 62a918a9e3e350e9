from __future__ import annotations


class ByteReader:
    """Single-pass reader over RTF bytes with one byte of lookahead."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = bytes(data)
        self.pos = 0

    def __len__(self) -> int:
        return len(self._data)

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self._data)

    def next(self) -> int | None:
        """Consume and return the next byte, or None at end of input."""
        if self.pos >= len(self._data):
            return None
        value = self._data[self.pos]
        self.pos += 1
        return value

    def peek(self) -> int | None:
        """Return the next byte without consuming it, or None at end of input."""
        if self.pos >= len(self._data):
            return None
        return self._data[self.pos]

    def skip(self, count: int) -> int:
        """Consume up to ``count`` bytes and return how many were consumed."""
        available = len(self._data) - self.pos
        skipped = max(0, min(count, available))
        self.pos += skipped
        return skipped
