import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Stickies keeps every note as a <name>.rtfd bundle holding TXT.rtf
NOTE_BUNDLE_SUFFIX = ".rtfd"
BUNDLE_TEXT_NAME = "TXT.rtf"
RTF_SUFFIX = ".rtf"


def _is_bundle(path: Path) -> bool:
    return path.suffix.lower() == NOTE_BUNDLE_SUFFIX


def resolve_rtf_path(path: str | Path) -> Path:
    """Return the RTF file to read for ``path``.

    A note bundle maps to the TXT.rtf inside it; anything else is returned
    unchanged.
    """
    p = Path(path)
    if _is_bundle(p) or p.is_dir():
        logger.debug(f"Resolved note bundle {p} to {BUNDLE_TEXT_NAME}")
        return p / BUNDLE_TEXT_NAME
    return p


def note_name(path: str | Path) -> str:
    """Name identifying a note: the bundle name, or the file stem."""
    p = Path(path)
    if p.name == BUNDLE_TEXT_NAME and _is_bundle(p.parent):
        return p.parent.stem
    return p.stem


def is_supported_path(path: str | Path) -> bool:
    """Checks if the path is an RTF file or a note bundle"""
    suffix = Path(path).suffix.lower()
    return suffix in (RTF_SUFFIX, NOTE_BUNDLE_SUFFIX)
