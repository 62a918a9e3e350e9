from __future__ import annotations

import codecs
import logging

from stickies2text.rtf.control_words import (
    BREAK_SYMBOLS,
    BREAK_WORDS,
    TEXT_SYMBOLS,
    TEXT_WORDS,
)
from stickies2text.rtf.emitter import TextEmitter
from stickies2text.rtf.tokenizer import (
    ControlSymbol,
    ControlWord,
    HexByte,
    PlainByte,
    Token,
)

logger = logging.getLogger(__name__)


class CodePageDecoder:
    """Incremental decoder for bytes written in the document's code page."""

    def __init__(self, encoding: str):
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def decode(self, value: int) -> str:
        return self._decoder.decode(bytes((value,)))

    def flush(self) -> str:
        """Finish any incomplete multi-byte sequence."""
        pending = self._decoder.decode(b"", final=True)
        self._decoder.reset()
        return pending


def unicode_scalar(parameter: int) -> str:
    """
    Map the parameter of ``\\uN`` to a character.

    N is one UTF-16 code unit written as a signed 16-bit value, so negative
    numbers stand for the code units above 32767. Anything outside
    -32768..65535 is not a code unit and maps to U+FFFD.
    """
    if -0x8000 <= parameter < 0:
        parameter += 0x10000
    if 0 <= parameter <= 0xFFFF:
        return chr(parameter)
    return "\N{REPLACEMENT CHARACTER}"


class EscapeResolver:
    """Turns content tokens into output characters."""

    def __init__(self, emitter: TextEmitter, encoding: str = "cp1252"):
        self.emitter = emitter
        self._decoder = CodePageDecoder(encoding)

    @property
    def encoding(self) -> str:
        return self._decoder.encoding

    def use_encoding(self, encoding: str) -> None:
        if encoding == self._decoder.encoding:
            return
        self.flush()
        self._decoder = CodePageDecoder(encoding)

    def flush(self) -> None:
        self.emitter.emit(self._decoder.flush())

    def emit_unicode(self, parameter: int) -> None:
        self.flush()
        self.emitter.emit(unicode_scalar(parameter))

    def resolve(self, token: Token) -> None:
        if isinstance(token, (PlainByte, HexByte)):
            if isinstance(token, PlainByte) and token.value == 0:
                # NUL padding from damaged files
                return
            self.emitter.emit(self._decoder.decode(token.value))
            return

        self.flush()
        if isinstance(token, ControlWord):
            if token.name in BREAK_WORDS:
                self.emitter.emit_break()
            elif token.name in TEXT_WORDS:
                self.emitter.emit(TEXT_WORDS[token.name])
        elif isinstance(token, ControlSymbol):
            if token.char in TEXT_SYMBOLS:
                self.emitter.emit(TEXT_SYMBOLS[token.char])
            elif token.char in BREAK_SYMBOLS:
                self.emitter.emit_break()
