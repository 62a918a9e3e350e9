from __future__ import annotations

import codecs
from dataclasses import dataclass


def is_text_encoding(name: str) -> bool:
    """True when ``name`` is a codec that decodes bytes to str."""
    try:
        info = codecs.lookup(name)
    except LookupError:
        return False
    return getattr(info, "_is_text_encoding", True)


@dataclass(frozen=True)
class ConversionOptions:
    """
    Knobs for one RTF to plain text conversion.

    The defaults match what the Stickies application writes: Western
    (cp1252) code page, one fallback character after every ``\\u`` escape
    and UTF-8 output.
    """

    default_encoding: str = "cp1252"
    default_unicode_skip: int = 1
    newline: str = "\n"
    output_encoding: str = "utf-8"

    def __post_init__(self) -> None:
        for name in ("default_encoding", "output_encoding"):
            value = getattr(self, name)
            if not is_text_encoding(value):
                raise ValueError(f"Unknown text codec for {name}: {value!r}")
        if self.default_unicode_skip < 0:
            raise ValueError(
                f"default_unicode_skip must be >= 0 (got {self.default_unicode_skip})"
            )


DEFAULT_OPTIONS = ConversionOptions()
