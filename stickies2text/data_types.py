import typing
from dataclasses import asdict, dataclass, field
from pathlib import Path


@dataclass
class FileMetadataInterface:
    filename: str | None = None
    file_extension: str | None = None
    file_path: str | None = None
    folder_path: str | None = None

    def populate_from_path(self, path: str | Path | None) -> None:
        """Populate file metadata fields from a path."""
        if path is None:
            return
        p = Path(path)
        self.filename = p.name
        self.file_extension = p.suffix
        self.file_path = str(p.resolve()) if p.exists() else str(p)
        self.folder_path = (
            str(p.parent.resolve()) if p.parent.exists() else str(p.parent)
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class NoteMetadata(FileMetadataInterface):
    # name of the .rtfd bundle (or file stem) the note came from
    note_name: str | None = None
    # code page in effect for \'hh escapes when the document ended
    encoding: str | None = None


@dataclass
class ConversionDiagnostics:
    """Counters for malformed input that was recovered from."""

    unbalanced_closes: int = 0
    unclosed_groups: int = 0
    malformed_escapes: int = 0
    truncated_binary: int = 0
    skipped_groups: int = 0
    missing_header: bool = False

    def is_clean(self) -> bool:
        return not (
            self.unbalanced_closes
            or self.unclosed_groups
            or self.malformed_escapes
            or self.truncated_binary
            or self.missing_header
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class NoteContent:
    text: str = ""
    metadata: NoteMetadata = field(default_factory=NoteMetadata)
    diagnostics: ConversionDiagnostics = field(default_factory=ConversionDiagnostics)
    newline: str = "\n"

    def iterator(self) -> typing.Iterator[str]:
        """Yields the paragraphs of the note, empty lines included."""
        if not self.text:
            return
        yield from self.text.split(self.newline)

    def get_full_text(self) -> str:
        return self.text

    def get_metadata(self) -> NoteMetadata:
        return self.metadata
