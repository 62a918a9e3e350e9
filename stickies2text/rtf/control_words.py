"""
Control word tables for plain text extraction.

Only the words that change what ends up in the text are listed here. Every
other word is formatting and has no effect on the output.
"""

# Destinations whose whole group (nested groups included) is metadata
SKIP_DESTINATIONS = frozenset(
    {
        "fonttbl",
        "colortbl",
        "expandedcolortbl",
        "stylesheet",
        "listtable",
        "listoverridetable",
        "info",
        "pict",
        "shppict",
        "nonshppict",
        "object",
        "objdata",
        "datafield",
        "fldinst",
        "ftnsep",
        "ftnsepc",
        "aftnsep",
        "aftnsepc",
        "header",
        "footer",
        "headerl",
        "headerr",
        "headerf",
        "footerl",
        "footerr",
        "footerf",
        "pnseclvl",
        "xmlnstbl",
        "rsidtbl",
        "mmathPr",
        "generator",
        "revtbl",
        "themedata",
        "colorschememapping",
        "latentstyles",
        "datastore",
        "NeXTGraphic",
    }
)

# Words that select the code page used for \'hh escapes
ENCODING_WORDS = {
    "ansi": "cp1252",
    "mac": "mac_roman",
    "pc": "cp437",
    "pca": "cp850",
}

# \ansicpgN values whose Python codec is not simply "cpN"
CODEPAGE_ENCODINGS = {
    437: "cp437",
    708: "iso8859_6",
    819: "latin_1",
    850: "cp850",
    852: "cp852",
    862: "cp862",
    866: "cp866",
    874: "cp874",
    932: "cp932",
    936: "gbk",
    949: "cp949",
    950: "cp950",
    10000: "mac_roman",
    10001: "shift_jis",
    10004: "mac_arabic",
    10005: "hebrew",
    10006: "mac_greek",
    10007: "mac_cyrillic",
    10008: "gb2312",
    10029: "mac_latin2",
    10079: "mac_iceland",
    10081: "mac_turkish",
    20127: "ascii",
    20866: "koi8_r",
    21866: "koi8_u",
    28591: "latin_1",
    65001: "utf-8",
}

# Words that emit a line break
BREAK_WORDS = frozenset({"par", "line", "page", "sect", "row"})

# Words that emit a fixed piece of text
TEXT_WORDS = {
    "tab": "\t",
    "cell": "\t",
    "lquote": "‘",
    "rquote": "’",
    "ldblquote": "“",
    "rdblquote": "”",
    "bullet": "•",
    "endash": "–",
    "emdash": "—",
    "enspace": "\u2002",
    "emspace": "\u2003",
    "qmspace": "\u2005",
}

# Symbols (backslash + one character) that emit text
TEXT_SYMBOLS = {
    "\\": "\\",
    "{": "{",
    "}": "}",
    "~": "\u00a0",
    "-": "-",
    "_": "-",
}

# Backslash followed by a raw newline is a paragraph break (Cocoa RTF)
BREAK_SYMBOLS = frozenset({"\n", "\r"})

# Marks the enclosing group as an ignorable destination
IGNORABLE_DESTINATION_SYMBOL = "*"

UNICODE_WORD = "u"
UNICODE_SKIP_WORD = "uc"
CODEPAGE_WORD = "ansicpg"
BINARY_WORD = "bin"

# Formatting words that are commonly seen and knowingly ignored
FORMATTING_WORDS = frozenset(
    {
        "rtf",
        "deff",
        "deflang",
        "deflangfe",
        "pard",
        "plain",
        "f",
        "fs",
        "cf",
        "cb",
        "highlight",
        "b",
        "i",
        "ul",
        "ulnone",
        "strike",
        "super",
        "sub",
        "nosupersub",
        "ql",
        "qr",
        "qc",
        "qj",
        "li",
        "ri",
        "fi",
        "sa",
        "sb",
        "sl",
        "slmult",
        "tx",
        "lang",
        "paperw",
        "paperh",
        "margl",
        "margr",
        "margt",
        "margb",
        "viewkind",
        "vieww",
        "viewh",
        "cocoartf",
        "cocoasubrtf",
        "cocoatextscaling",
        "cocoaplatform",
        "pardirnatural",
        "partightenfactor",
        "fswiss",
        "fnil",
        "froman",
        "fmodern",
        "fcharset",
        "red",
        "green",
        "blue",
        "expnd",
        "expndtw",
        "kerning",
        "outl",
        "strokewidth",
        "ltrch",
        "rtlch",
    }
)

RECOGNIZED_WORDS = SKIP_DESTINATIONS.union(
    ENCODING_WORDS,
    BREAK_WORDS,
    TEXT_WORDS,
    FORMATTING_WORDS,
    {UNICODE_WORD, UNICODE_SKIP_WORD, CODEPAGE_WORD, BINARY_WORD},
)


def codepage_to_encoding(codepage: int) -> str:
    """Return the Python codec name for an ``\\ansicpg`` value."""
    return CODEPAGE_ENCODINGS.get(codepage, f"cp{codepage}")
