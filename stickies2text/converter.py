"""
Stickies Note Converter
=======================

Converts the RTF documents stored by the Stickies application into plain
UTF-8 text.

Pipeline
--------
Each conversion runs the same single pass:

    ByteReader -> Tokenizer -> DestinationStateMachine -> EscapeResolver
    -> TextEmitter

The byte reader and tokenizer know the lexical rules of RTF only. The state
machine keeps one frame per open group and decides which tokens belong to
the visible document text; metadata destinations (font table, color table,
pictures, ``{\\*...}`` extension groups) are dropped wholesale. The resolver
turns what is left into characters, including ``\\uN`` escapes and
``\\'hh`` bytes decoded through the active code page.

Error Handling
--------------
Only the I/O boundary fails: an unreadable or missing input raises
InputUnavailableError, an output that cannot be written raises
OutputUnwritableError. Malformed markup never raises; the notes come from
old and possibly damaged backups and partial text beats no text. Recovered
anomalies are counted in ConversionDiagnostics and logged as warnings.

Output is written to a temporary file next to the destination and renamed
into place, so a failed conversion leaves nothing behind.

Concurrency
-----------
Every call builds its own reader, stack and output buffer. Separate
conversions share no state and may run in parallel threads or processes.
"""

import contextlib
import io
import logging
import os
import re
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generator, Iterable

from stickies2text.data_types import NoteContent, NoteMetadata
from stickies2text.exceptions import (
    ConversionError,
    InputUnavailableError,
    OutputUnwritableError,
)
from stickies2text.options import DEFAULT_OPTIONS, ConversionOptions
from stickies2text.router import note_name, resolve_rtf_path
from stickies2text.rtf.byte_reader import ByteReader
from stickies2text.rtf.destinations import DestinationStateMachine
from stickies2text.rtf.emitter import TextEmitter
from stickies2text.rtf.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

_RTF_SIGNATURE = b"{\\rtf"
_RE_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


# =============================================================================
# In-memory conversion
# =============================================================================


def parse_rtf(
    data: bytes,
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
    path: str | Path | None = None,
) -> NoteContent:
    """Run the RTF pipeline over ``data`` and return the recovered note."""
    emitter = TextEmitter(newline=options.newline)
    machine = DestinationStateMachine(
        emitter,
        encoding=options.default_encoding,
        unicode_skip=options.default_unicode_skip,
    )
    tokenizer = Tokenizer(ByteReader(data))

    token_count = 0
    for token in tokenizer:
        machine.feed(token)
        token_count += 1
    state = machine.finish()

    diagnostics = state.diagnostics
    diagnostics.malformed_escapes = tokenizer.stats.malformed_escapes
    diagnostics.truncated_binary = tokenizer.stats.truncated_binary
    if not data.lstrip().startswith(_RTF_SIGNATURE):
        diagnostics.missing_header = True
        logger.warning("Not a valid RTF file - missing RTF header")

    if not diagnostics.is_clean():
        logger.warning(
            "Recovered from malformed RTF"
            + (f" [{path}]" if path else "")
            + f": {diagnostics.to_dict()}"
        )
    logger.debug(f"Processed {token_count} tokens, {len(emitter)} characters")

    metadata = NoteMetadata(
        encoding=state.document_encoding or options.default_encoding
    )
    if path is not None:
        metadata.populate_from_path(path)
        metadata.note_name = note_name(path)

    return NoteContent(
        text=emitter.text(),
        metadata=metadata,
        diagnostics=diagnostics,
        newline=options.newline,
    )


def rtf_to_text(
    data: bytes, *, options: ConversionOptions = DEFAULT_OPTIONS
) -> str:
    """Return the plain text of an RTF document held in memory."""
    return parse_rtf(data, options=options).text


def read_rtf(
    file_like: io.BytesIO,
    path: str | None = None,
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> Generator[NoteContent, Any, None]:
    """
    Extract the text of an RTF note from a file-like object.

    Uses a generator pattern for API consistency; yields exactly one
    NoteContent.
    """
    logger.debug("Reading RTF note")
    file_like.seek(0)
    yield parse_rtf(file_like.read(), options=options, path=path)


# =============================================================================
# File conversion
# =============================================================================


def _read_input(input_path: str | Path | None) -> tuple[Path, bytes]:
    if input_path is None or str(input_path) == "":
        raise InputUnavailableError(input_path, "No input path supplied")

    path = resolve_rtf_path(input_path)
    try:
        return path, path.read_bytes()
    except OSError as exc:
        raise InputUnavailableError(str(path), cause=exc) from exc


def replace_lone_surrogates(text: str) -> str:
    """Replace UTF-16 halves that were never paired with U+FFFD."""
    return _RE_LONE_SURROGATE.sub("\ufffd", text)


def _write_output(
    output_path: str | Path, text: str, options: ConversionOptions
) -> None:
    target = Path(output_path)
    text = replace_lone_surrogates(text)

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
    except OSError as exc:
        raise OutputUnwritableError(str(target), cause=exc) from exc

    try:
        with os.fdopen(
            fd, "w", encoding=options.output_encoding, errors="replace", newline=""
        ) as handle:
            handle.write(text)
        if target.is_file():
            # mkstemp creates 0600; keep the mode of the file being replaced
            shutil.copymode(target, tmp_name)
        os.replace(tmp_name, target)
    except OSError as exc:
        _discard(tmp_name)
        raise OutputUnwritableError(str(target), cause=exc) from exc
    except BaseException:
        _discard(tmp_name)
        raise


def _discard(tmp_name: str) -> None:
    with contextlib.suppress(OSError):
        os.unlink(tmp_name)


def convert(
    input_path: str | Path | None,
    output_path: str | Path | None,
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> NoteContent:
    """
    Convert one RTF note to a plain text file.

    Args:
        input_path: RTF file, or a .rtfd note bundle containing TXT.rtf.
        output_path: Text file to create or overwrite.
        options: Encoding and newline settings.

    Returns:
        The NoteContent that was written.

    Raises:
        InputUnavailableError: The input is missing or unreadable, or a
            required path was not supplied.
        OutputUnwritableError: The output could not be created or written.
    """
    if output_path is None or str(output_path) == "":
        raise InputUnavailableError(output_path, "No output path supplied")

    source, data = _read_input(input_path)
    logger.debug(f"Converting {source} to {output_path}")

    content = parse_rtf(data, options=options, path=source)
    _write_output(output_path, content.text, options)
    return content


@dataclass
class BatchFailure:
    note_name: str
    input_path: str
    error: ConversionError


@dataclass
class BatchResult:
    converted: list[NoteContent] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def convert_many(
    pairs: Iterable[tuple[str | Path, str | Path]],
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> BatchResult:
    """Convert every (input, output) pair, skipping notes that fail."""
    result = BatchResult()
    for input_path, output_path in pairs:
        name = note_name(input_path) if input_path else str(input_path)
        try:
            result.converted.append(convert(input_path, output_path, options=options))
        except ConversionError as exc:
            logger.warning(f"Error converting note from rtf to txt: {name} ({exc})")
            result.failed.append(
                BatchFailure(note_name=name, input_path=str(input_path), error=exc)
            )
    return result


def convert_directory(
    inputs: Iterable[str | Path],
    output_dir: str | Path,
    *,
    options: ConversionOptions = DEFAULT_OPTIONS,
) -> BatchResult:
    """Convert notes into ``output_dir``, one ``<note name>.txt`` per note."""
    out = Path(output_dir)
    pairs = [(path, out / f"{note_name(path)}.txt") for path in inputs]
    return convert_many(pairs, options=options)
