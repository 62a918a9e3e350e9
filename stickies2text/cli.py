from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

import stickies2text
from stickies2text.converter import replace_lone_surrogates
from stickies2text.exceptions import ConversionError
from stickies2text.options import ConversionOptions
from stickies2text.serialization import serialize_note


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stickies2text",
        description="Recover the plain text of Stickies notes (.rtf files or .rtfd bundles).",
    )
    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        metavar="path",
        help="RTF file or .rtfd note bundle to convert.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Write the text of a single note to this file.",
    )
    target.add_argument(
        "-d",
        "--output-dir",
        type=Path,
        help="Write one <note name>.txt per note into this existing directory.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the conversion result as JSON instead of plain text.",
    )
    parser.add_argument(
        "--encoding",
        default="cp1252",
        help="Code page assumed until the document declares one (default: cp1252).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log conversion details to stderr.",
    )
    return parser


def _print_result(content: stickies2text.NoteContent, *, as_json: bool) -> None:
    if as_json:
        json.dump(serialize_note(content), sys.stdout)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(replace_lone_surrogates(content.get_full_text()))
        sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        options = ConversionOptions(default_encoding=args.encoding)
        if args.output_dir is not None:
            if args.json:
                raise ValueError("--json cannot be combined with --output-dir")
            result = stickies2text.convert_directory(
                args.paths, args.output_dir, options=options
            )
            for failure in result.failed:
                print(
                    f"stickies2text: skipped {failure.note_name}: {failure.error}",
                    file=sys.stderr,
                )
            return 0 if result.ok else 1

        if len(args.paths) > 1:
            raise ValueError("multiple paths require --output-dir")

        if args.output is not None:
            content = stickies2text.convert(args.paths[0], args.output, options=options)
            if args.json:
                _print_result(content, as_json=True)
            return 0

        content = next(stickies2text.read_file(args.paths[0], options=options))
        _print_result(content, as_json=args.json)
        return 0
    except (ConversionError, ValueError) as exc:
        print(f"stickies2text: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
