"""
stickies2text: Plain text recovery for Stickies notes.

Converts the RTF documents kept in Stickies ``.rtfd`` note bundles into
plain UTF-8 text. Formatting is dropped; only the visible text survives.
"""

import io
from pathlib import Path
from typing import Any, Generator

from stickies2text.converter import (
    BatchFailure,
    BatchResult,
    convert,
    convert_directory,
    convert_many,
    parse_rtf,
    read_rtf,
    rtf_to_text,
)
from stickies2text.data_types import ConversionDiagnostics, NoteContent, NoteMetadata
from stickies2text.exceptions import (
    ConversionError,
    InputUnavailableError,
    OutputUnwritableError,
)
from stickies2text.options import DEFAULT_OPTIONS, ConversionOptions
from stickies2text.router import is_supported_path, resolve_rtf_path

__version__ = "0.1.0"


def read_file(
    path: str | Path,
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> Generator[NoteContent, Any, None]:
    """
    Read a note and extract its text without writing anything.

    Args:
        path: RTF file or ``.rtfd`` note bundle.

    Yields:
        One NoteContent with the recovered text.

    Raises:
        InputUnavailableError: If the file cannot be read.

    Example:
        >>> import stickies2text
        >>> for note in stickies2text.read_file("Groceries.rtfd"):
        ...     print(note.get_full_text())
    """
    source = resolve_rtf_path(path)
    try:
        with open(source, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise InputUnavailableError(str(source), cause=exc) from exc
    yield from read_rtf(io.BytesIO(data), str(source), options=options)


__all__ = [
    # Version
    "__version__",
    # Main functions
    "convert",
    "convert_many",
    "convert_directory",
    "read_file",
    "read_rtf",
    "parse_rtf",
    "rtf_to_text",
    "is_supported_path",
    # Types
    "BatchFailure",
    "BatchResult",
    "ConversionDiagnostics",
    "ConversionOptions",
    "DEFAULT_OPTIONS",
    "NoteContent",
    "NoteMetadata",
    # Errors
    "ConversionError",
    "InputUnavailableError",
    "OutputUnwritableError",
]
