from __future__ import annotations

_HIGH_SURROGATES = range(0xD800, 0xDC00)
_LOW_SURROGATES = range(0xDC00, 0xE000)


class TextEmitter:
    """Accumulates the recovered plain text in document order."""

    def __init__(self, newline: str = "\n"):
        self.newline = newline
        self._parts: list[str] = []

    def emit(self, text: str) -> None:
        if not text:
            return
        if self._parts and ord(text[0]) in _LOW_SURROGATES:
            previous = self._parts[-1]
            if ord(previous[-1]) in _HIGH_SURROGATES:
                # \u escapes carry UTF-16 code units; join split pairs
                high = ord(previous[-1]) - 0xD800
                low = ord(text[0]) - 0xDC00
                combined = chr(0x10000 + (high << 10) + low)
                if len(previous) > 1:
                    self._parts[-1] = previous[:-1]
                else:
                    self._parts.pop()
                text = combined + text[1:]
        self._parts.append(text)

    def emit_break(self) -> None:
        self._parts.append(self.newline)

    def text(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        return sum(len(part) for part in self._parts)
