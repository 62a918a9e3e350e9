"""
Group and destination tracking.

Every ``{`` pushes a GroupContext and every ``}`` pops one. A group is either
part of the document text or a destination whose content is skipped (font
table, style sheet, pictures, ``{\\*...}`` extension groups and so on). Skip
is sticky: once a group is marked, it and all groups nested in it stay
skipped until it closes.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace

from stickies2text.data_types import ConversionDiagnostics
from stickies2text.options import is_text_encoding
from stickies2text.rtf.control_words import (
    CODEPAGE_WORD,
    ENCODING_WORDS,
    IGNORABLE_DESTINATION_SYMBOL,
    SKIP_DESTINATIONS,
    UNICODE_SKIP_WORD,
    UNICODE_WORD,
    codepage_to_encoding,
)
from stickies2text.rtf.emitter import TextEmitter
from stickies2text.rtf.escapes import EscapeResolver
from stickies2text.rtf.tokenizer import (
    ControlSymbol,
    ControlWord,
    GroupClose,
    GroupOpen,
    Token,
)

logger = logging.getLogger(__name__)


class Destination(enum.Enum):
    DOCUMENT = "document"
    SKIP = "skip"


@dataclass
class GroupContext:
    destination: Destination = Destination.DOCUMENT
    encoding: str = "cp1252"
    # \ucN: fallback tokens that follow each \uN escape
    unicode_skip: int = 1

    def child(self) -> "GroupContext":
        return replace(self)


@dataclass
class ConversionState:
    """Mutable state of one conversion; never shared between conversions."""

    stack: list[GroupContext]
    emitter: TextEmitter
    diagnostics: ConversionDiagnostics = field(default_factory=ConversionDiagnostics)
    # fallback tokens still to drop after the last \uN
    pending_skip: int = 0
    document_encoding: str | None = None

    @property
    def top(self) -> GroupContext:
        return self.stack[-1]

    @property
    def in_document(self) -> bool:
        # stack[0] is the implicit root; the outermost {...} sits above it
        return len(self.stack) > 1


class DestinationStateMachine:
    """Decides which tokens are visible text and forwards them for decoding."""

    def __init__(
        self,
        emitter: TextEmitter,
        *,
        encoding: str = "cp1252",
        unicode_skip: int = 1,
    ):
        root = GroupContext(encoding=encoding, unicode_skip=unicode_skip)
        self.state = ConversionState(stack=[root], emitter=emitter)
        self.resolver = EscapeResolver(emitter, encoding)

    def feed(self, token: Token) -> None:
        state = self.state

        if isinstance(token, GroupOpen):
            self.resolver.flush()
            state.pending_skip = 0
            state.stack.append(state.top.child())
            return

        if isinstance(token, GroupClose):
            self.resolver.flush()
            state.pending_skip = 0
            if not state.in_document:
                state.diagnostics.unbalanced_closes += 1
                logger.debug(f"Unbalanced closing brace at offset {token.pos}")
                return
            state.stack.pop()
            return

        if not state.in_document:
            # header bytes before the first group or junk after the last one
            return

        top = state.top
        if top.destination is Destination.SKIP:
            return

        if state.pending_skip > 0:
            state.pending_skip -= 1
            return

        if isinstance(token, ControlWord):
            self._control_word(token, top)
        elif (
            isinstance(token, ControlSymbol)
            and token.char == IGNORABLE_DESTINATION_SYMBOL
        ):
            self._skip_group(top)
        else:
            self.resolver.use_encoding(top.encoding)
            self.resolver.resolve(token)

    def _control_word(self, token: ControlWord, top: GroupContext) -> None:
        name = token.name
        parameter = token.parameter

        if name in SKIP_DESTINATIONS:
            self._skip_group(top)
        elif name in ENCODING_WORDS:
            self._set_encoding(top, ENCODING_WORDS[name])
        elif name == CODEPAGE_WORD:
            if parameter is not None:
                self._set_encoding(top, codepage_to_encoding(parameter))
        elif name == UNICODE_SKIP_WORD:
            if parameter is not None and parameter >= 0:
                top.unicode_skip = parameter
        elif name == UNICODE_WORD:
            if parameter is not None:
                self.resolver.emit_unicode(parameter)
                self.state.pending_skip = top.unicode_skip
        else:
            self.resolver.resolve(token)

    def _skip_group(self, top: GroupContext) -> None:
        self.resolver.flush()
        top.destination = Destination.SKIP
        self.state.diagnostics.skipped_groups += 1

    def _set_encoding(self, top: GroupContext, encoding: str) -> None:
        if not is_text_encoding(encoding):
            logger.debug(f"Unsupported code page {encoding}, keeping {top.encoding}")
            return
        top.encoding = encoding
        self.state.document_encoding = encoding

    def finish(self) -> ConversionState:
        """Flush pending bytes and record groups left open by a truncated file."""
        self.resolver.flush()
        open_groups = len(self.state.stack) - 1
        if open_groups > 0:
            self.state.diagnostics.unclosed_groups = open_groups
        return self.state
