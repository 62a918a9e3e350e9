import io
import logging
import os
import random
import string
from pathlib import Path
from unittest import TestCase

import pytest

from stickies2text import read_file
from stickies2text.converter import (
    convert,
    convert_directory,
    convert_many,
    parse_rtf,
    read_rtf,
    rtf_to_text,
)
from stickies2text.data_types import NoteContent
from stickies2text.exceptions import InputUnavailableError, OutputUnwritableError
from stickies2text.options import ConversionOptions, is_text_encoding

logger = logging.getLogger(__name__)

tc = TestCase()

RESOURCES = Path(__file__).parent / "resources"

COCOA_NOTE_TEXT = (
    "Groceries\n"
    "- milk\n"
    "- caf\N{LATIN SMALL LETTER E WITH ACUTE} au lait\n"
    "Call Jos\N{LATIN SMALL LETTER E WITH ACUTE} \N{SNOWMAN} tomorrow"
    + chr(0x1F60A)
)


#############
# Scenarios #
#############


def test_font_table_suppressed_and_paragraphs_split() -> None:
    data = b"{\\rtf1\\ansi{\\fonttbl\\f0\\fswiss Helvetica;}\\pard Hello\\par World}"

    tc.assertEqual("Hello\nWorld", rtf_to_text(data))


def test_unicode_escape_replaces_fallback() -> None:
    text = rtf_to_text(b"{\\rtf1 Snow \\u9731? man}")

    tc.assertIn("\N{SNOWMAN}", text)
    tc.assertNotIn("?", text)


def test_minimal_document_with_paragraphs() -> None:
    text = rtf_to_text(b"{\\rtf1 one\\par two\\par three}")

    tc.assertEqual("one\ntwo\nthree", text)


def test_plain_runs_joined_by_par() -> None:
    rng = random.Random(20240229)
    alphabet = string.ascii_letters + string.digits + " .,;:!?'\"()"

    for _ in range(50):
        runs = [
            "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 12)))
            for _ in range(rng.randint(1, 6))
        ]
        parts = []
        for idx, run in enumerate(runs):
            encoded = run.encode("ascii")
            parts.append(b"{" + encoded + b"}" if idx % 2 else encoded)
        data = b"{" + b"\\par ".join(parts) + b"}"

        tc.assertEqual("\n".join(runs), rtf_to_text(data), data)


def test_unicode_escape_with_fallback_runs() -> None:
    for value in list(range(0, 65536, 257)) + [65535]:
        for skip in range(11):
            for parameter in {value, value - 65536 if value > 32767 else value}:
                data = b"{\\rtf1\\uc%d\\u%d %s}" % (skip, parameter, b"?" * skip)

                tc.assertEqual(chr(value), rtf_to_text(data), data)


def test_every_hex_escape_yields_one_character() -> None:
    for value in range(256):
        tc.assertEqual(1, len(rtf_to_text(b"{\\rtf1\\'%02x}" % value)), value)


def test_invalid_hex_escape_yields_nothing() -> None:
    tc.assertEqual("azqb", rtf_to_text(b"{\\rtf1 a\\'zqb}"))
    tc.assertEqual("", rtf_to_text(b"{\\rtf1\\'"))


def test_utf8_code_page() -> None:
    data = b"{\\rtf1\\ansicpg65001 \\'e2\\'98\\'83}"

    tc.assertEqual("\N{SNOWMAN}", rtf_to_text(data))


def test_escaped_braces_and_backslash() -> None:
    tc.assertEqual("{a}\\b", rtf_to_text(b"{\\rtf1 \\{a\\}\\\\b}"))


############
# Fixtures #
############


def test_cocoa_note_fixture() -> None:
    content = parse_rtf((RESOURCES / "cocoa_note.rtf").read_bytes())

    tc.assertEqual(COCOA_NOTE_TEXT, content.text)
    tc.assertTrue(content.diagnostics.is_clean())
    tc.assertEqual("cp1252", content.metadata.encoding)


def test_wordpad_fixture() -> None:
    content = parse_rtf((RESOURCES / "wordpad.rtf").read_bytes())

    tc.assertEqual(
        "First line\nSecond bold line\n"
        "Quote: \N{LEFT DOUBLE QUOTATION MARK}hi\N{RIGHT DOUBLE QUOTATION MARK}\n",
        content.text,
    )
    tc.assertEqual(["First line", "Second bold line"], list(content.iterator())[:2])


def test_truncated_fixture_keeps_recovered_text() -> None:
    content = parse_rtf((RESOURCES / "truncated.rtf").read_bytes())

    tc.assertEqual("Recovered text\nsurvives even when", content.text)
    tc.assertEqual(2, content.diagnostics.unclosed_groups)
    tc.assertFalse(content.diagnostics.is_clean())


def test_missing_header_is_flagged() -> None:
    content = parse_rtf(b"{Hello}")

    tc.assertEqual("Hello", content.text)
    tc.assertTrue(content.diagnostics.missing_header)


##################
# In-memory APIs #
##################


def test_read_rtf_yields_one_note() -> None:
    path = RESOURCES / "cocoa_note.rtf"
    with open(path, mode="rb") as file:
        file_like = io.BytesIO(file.read())

    notes = list(read_rtf(file_like, str(path)))

    tc.assertEqual(1, len(notes))
    tc.assertIsInstance(notes[0], NoteContent)
    tc.assertEqual(COCOA_NOTE_TEXT, notes[0].get_full_text())
    tc.assertEqual("cocoa_note.rtf", notes[0].get_metadata().filename)
    tc.assertEqual("cocoa_note", notes[0].get_metadata().note_name)


def test_read_file_resolves_bundle() -> None:
    note = next(read_file(RESOURCES / "Groceries.rtfd"))

    tc.assertEqual(COCOA_NOTE_TEXT, note.text)
    tc.assertEqual("Groceries", note.metadata.note_name)
    tc.assertEqual("TXT.rtf", note.metadata.filename)


def test_read_file_missing_raises_input_unavailable(tmp_path: Path) -> None:
    with pytest.raises(InputUnavailableError):
        next(read_file(tmp_path / "nope.rtf"))


def test_custom_newline() -> None:
    options = ConversionOptions(newline="\r\n")
    content = parse_rtf(b"{\\rtf1 a\\par b\\line c}", options=options)

    tc.assertEqual("a\r\nb\r\nc", content.text)
    tc.assertEqual(["a", "b", "c"], list(content.iterator()))


def test_default_encoding_option() -> None:
    options = ConversionOptions(default_encoding="cp1251")

    tc.assertEqual("\N{CYRILLIC SMALL LETTER A}", rtf_to_text(b"{\\rtf1\\'e0}", options=options))


def test_default_unicode_skip_option() -> None:
    options = ConversionOptions(default_unicode_skip=0)

    tc.assertEqual("\N{SNOWMAN}?", rtf_to_text(b"{\\rtf1\\u9731?}", options=options))


def test_invalid_options() -> None:
    with pytest.raises(ValueError):
        ConversionOptions(default_encoding="no-such-codec")
    with pytest.raises(ValueError):
        ConversionOptions(default_unicode_skip=-1)


@pytest.mark.parametrize("codec", ["rot13", "base64", "hex"])
def test_options_reject_non_text_codecs(codec: str) -> None:
    with pytest.raises(ValueError):
        ConversionOptions(output_encoding=codec)
    with pytest.raises(ValueError):
        ConversionOptions(default_encoding=codec)


def test_is_text_encoding() -> None:
    tc.assertTrue(is_text_encoding("cp1252"))
    tc.assertTrue(is_text_encoding("mac_roman"))
    tc.assertFalse(is_text_encoding("rot13"))
    tc.assertFalse(is_text_encoding("no-such-codec"))


###################
# File conversion #
###################


def test_convert_writes_utf8(tmp_path: Path) -> None:
    output = tmp_path / "note.txt"

    content = convert(RESOURCES / "cocoa_note.rtf", output)

    tc.assertEqual(COCOA_NOTE_TEXT, output.read_text(encoding="utf-8"))
    tc.assertEqual(COCOA_NOTE_TEXT, content.text)


def test_convert_overwrites_existing_output(tmp_path: Path) -> None:
    source = tmp_path / "in.rtf"
    source.write_bytes(b"{\\rtf1 new}")
    output = tmp_path / "out.txt"
    output.write_text("old contents that are longer", encoding="utf-8")

    convert(source, output)

    tc.assertEqual("new", output.read_text(encoding="utf-8"))


def test_convert_accepts_bundle(tmp_path: Path) -> None:
    output = tmp_path / "Groceries.txt"

    content = convert(str(RESOURCES / "Groceries.rtfd"), str(output))

    tc.assertEqual("Groceries", content.metadata.note_name)
    tc.assertEqual(COCOA_NOTE_TEXT, output.read_text(encoding="utf-8"))


def test_convert_missing_input_creates_no_output(tmp_path: Path) -> None:
    output = tmp_path / "out.txt"

    with pytest.raises(InputUnavailableError) as exc_info:
        convert(tmp_path / "missing.rtf", output)

    tc.assertFalse(output.exists())
    tc.assertIsInstance(exc_info.value.__cause__, OSError)


@pytest.mark.parametrize(
    "input_path, output_path",
    [(None, "out.txt"), ("in.rtf", None), ("", "out.txt")],
)
def test_convert_requires_both_paths(input_path, output_path) -> None:
    with pytest.raises(InputUnavailableError):
        convert(input_path, output_path)


def test_convert_unwritable_output_leaves_nothing(tmp_path: Path) -> None:
    source = tmp_path / "in.rtf"
    source.write_bytes(b"{\\rtf1 text}")

    with pytest.raises(OutputUnwritableError):
        convert(source, tmp_path / "missing_dir" / "out.txt")

    tc.assertEqual(["in.rtf"], sorted(p.name for p in tmp_path.iterdir()))


def test_convert_output_is_directory(tmp_path: Path) -> None:
    source = tmp_path / "in.rtf"
    source.write_bytes(b"{\\rtf1 text}")
    target = tmp_path / "taken"
    target.mkdir()

    with pytest.raises(OutputUnwritableError):
        convert(source, target)

    tc.assertEqual(["in.rtf", "taken"], sorted(p.name for p in tmp_path.iterdir()))
    tc.assertEqual([], list(target.iterdir()))


def test_malformed_body_still_converts(tmp_path: Path) -> None:
    source = tmp_path / "broken.rtf"
    source.write_bytes(b"{\\rtf1 Hello}} more \\'zz \\bin99 x")
    output = tmp_path / "broken.txt"

    convert(source, output)

    tc.assertEqual("Hello", output.read_text(encoding="utf-8"))


def test_lone_surrogate_written_as_replacement(tmp_path: Path) -> None:
    source = tmp_path / "in.rtf"
    source.write_bytes(b"{\\rtf1 a\\u55357?b}")
    output = tmp_path / "out.txt"

    content = convert(source, output)

    tc.assertEqual("a" + chr(0xD83D) + "b", content.text)
    tc.assertEqual("a\N{REPLACEMENT CHARACTER}b", output.read_text(encoding="utf-8"))


#########
# Batch #
#########


def test_convert_many_skips_failures(tmp_path: Path, caplog) -> None:
    good = tmp_path / "good.rtf"
    good.write_bytes(b"{\\rtf1 fine}")

    with caplog.at_level(logging.WARNING):
        result = convert_many(
            [
                (tmp_path / "Lost.rtfd", tmp_path / "Lost.txt"),
                (good, tmp_path / "good.txt"),
            ]
        )

    tc.assertFalse(result.ok)
    tc.assertEqual(1, len(result.converted))
    tc.assertEqual(1, len(result.failed))
    tc.assertEqual("Lost", result.failed[0].note_name)
    tc.assertIsInstance(result.failed[0].error, InputUnavailableError)
    tc.assertIn("Lost", caplog.text)
    tc.assertEqual("fine", (tmp_path / "good.txt").read_text(encoding="utf-8"))
    tc.assertFalse((tmp_path / "Lost.txt").exists())


def test_convert_directory_names_outputs_after_notes(tmp_path: Path) -> None:
    result = convert_directory(
        [RESOURCES / "Groceries.rtfd", RESOURCES / "wordpad.rtf"], tmp_path
    )

    tc.assertTrue(result.ok)
    tc.assertEqual(["Groceries.txt", "wordpad.txt"], sorted(p.name for p in tmp_path.iterdir()))
    tc.assertEqual(COCOA_NOTE_TEXT, (tmp_path / "Groceries.txt").read_text(encoding="utf-8"))


def test_convert_keeps_mode_of_replaced_output(tmp_path: Path) -> None:
    source = tmp_path / "in.rtf"
    source.write_bytes(b"{\\rtf1 text}")
    output = tmp_path / "out.txt"
    output.write_text("old", encoding="utf-8")
    output.chmod(0o644)

    convert(source, output)

    tc.assertEqual(0o644, output.stat().st_mode & 0o777)
    tc.assertEqual("text", output.read_text(encoding="utf-8"))


def test_convert_removes_temp_file_on_any_error(tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "in.rtf"
    source.write_bytes(b"{\\rtf1 text}")

    def fail_replace(src, dst):
        raise RuntimeError("interrupted")

    monkeypatch.setattr(os, "replace", fail_replace)
    with pytest.raises(RuntimeError):
        convert(source, tmp_path / "out.txt")

    tc.assertEqual(["in.rtf"], sorted(p.name for p in tmp_path.iterdir()))
