"""
RTF tokenizer.

Turns the raw bytes of an RTF document into a lazy stream of tokens. The
tokenizer knows the lexical rules of the format only: which spans are
groups, control words, control symbols, hex escapes and plain bytes. It never
raises on malformed input; broken constructs produce no token and scanning
carries on with the next byte.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field

from stickies2text.rtf.byte_reader import ByteReader
from stickies2text.rtf.control_words import BINARY_WORD, RECOGNIZED_WORDS

logger = logging.getLogger(__name__)

_BACKSLASH = ord("\\")
_OPEN = ord("{")
_CLOSE = ord("}")
_QUOTE = ord("'")
_SPACE = ord(" ")
_MINUS = ord("-")
_CR = ord("\r")
_LF = ord("\n")

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")


def _is_letter(value: int | None) -> bool:
    return value is not None and (
        ord("a") <= value <= ord("z") or ord("A") <= value <= ord("Z")
    )


def _is_digit(value: int | None) -> bool:
    return value is not None and ord("0") <= value <= ord("9")


@dataclass(frozen=True)
class Token:
    pos: int = field(default=0, compare=False)


@dataclass(frozen=True)
class GroupOpen(Token):
    pass


@dataclass(frozen=True)
class GroupClose(Token):
    pass


@dataclass(frozen=True)
class ControlWord(Token):
    name: str = ""
    parameter: int | None = None

    @property
    def recognized(self) -> bool:
        return self.name in RECOGNIZED_WORDS


@dataclass(frozen=True)
class ControlSymbol(Token):
    char: str = ""


@dataclass(frozen=True)
class PlainByte(Token):
    value: int = 0


@dataclass(frozen=True)
class HexByte(Token):
    value: int = 0


@dataclass
class TokenizerStats:
    malformed_escapes: int = 0
    truncated_binary: int = 0


class Tokenizer:
    """
    Lazy token stream over a ByteReader.

    Iterating a Tokenizer consumes its reader, so a tokenizer can be
    iterated exactly once.
    """

    def __init__(self, reader: ByteReader | bytes):
        if not isinstance(reader, ByteReader):
            reader = ByteReader(reader)
        self.reader = reader
        self.stats = TokenizerStats()

    def __iter__(self) -> typing.Iterator[Token]:
        reader = self.reader
        while True:
            pos = reader.pos
            value = reader.next()
            if value is None:
                return
            if value == _OPEN:
                yield GroupOpen(pos=pos)
            elif value == _CLOSE:
                yield GroupClose(pos=pos)
            elif value == _BACKSLASH:
                token = self._read_escape(pos)
                if token is not None:
                    yield token
            elif value in (_CR, _LF):
                # Raw line breaks are layout only
                continue
            else:
                yield PlainByte(pos=pos, value=value)

    def _read_escape(self, pos: int) -> Token | None:
        reader = self.reader
        nxt = reader.peek()
        if nxt is None:
            logger.debug(f"Dangling backslash at end of input (offset {pos})")
            self.stats.malformed_escapes += 1
            return None
        if _is_letter(nxt):
            return self._read_control_word(pos)
        if nxt == _QUOTE:
            reader.next()
            return self._read_hex_byte(pos)
        if _is_digit(nxt):
            reader.next()
            logger.debug(f"Backslash followed by a digit at offset {pos}")
            self.stats.malformed_escapes += 1
            return None
        reader.next()
        return ControlSymbol(pos=pos, char=chr(nxt))

    def _read_control_word(self, pos: int) -> Token | None:
        reader = self.reader
        letters = bytearray()
        while _is_letter(reader.peek()):
            letters.append(reader.next())
        name = letters.decode("ascii")

        parameter = None
        negative = False
        if reader.peek() == _MINUS:
            reader.next()
            negative = True
        digits = bytearray()
        while _is_digit(reader.peek()):
            digits.append(reader.next())
        if digits:
            parameter = int(digits)
            if negative:
                parameter = -parameter
        elif negative:
            # "\word-" without digits, the hyphen is swallowed
            self.stats.malformed_escapes += 1

        if reader.peek() == _SPACE:
            reader.next()

        if name == BINARY_WORD:
            self._skip_binary(pos, parameter)

        return ControlWord(pos=pos, name=name, parameter=parameter)

    def _skip_binary(self, pos: int, length: int | None) -> None:
        wanted = max(length or 0, 0)
        skipped = self.reader.skip(wanted)
        if skipped < wanted:
            logger.debug(
                f"Binary block at offset {pos} truncated ({skipped} of {wanted} bytes)"
            )
            self.stats.truncated_binary += 1

    def _read_hex_byte(self, pos: int) -> Token | None:
        reader = self.reader
        digits = bytearray()
        while len(digits) < 2 and reader.peek() in _HEX_DIGITS:
            digits.append(reader.next())
        if len(digits) < 2:
            logger.debug(f"Unterminated hex escape at offset {pos}")
            self.stats.malformed_escapes += 1
            return None
        return HexByte(pos=pos, value=int(digits, 16))


def tokenize(data: bytes | ByteReader) -> typing.Iterator[Token]:
    """Convenience wrapper yielding the tokens of ``data``."""
    return iter(Tokenizer(data))
