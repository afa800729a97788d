from pathlib import Path
from typing import Any, Iterable, Protocol

from lxml import etree


class FrontmatterCodec(Protocol):
    """
    Round-trip the metadata block at the top of a note.
    """

    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        pass

    def encode(self, meta: dict[str, Any]) -> str:
        pass


class NoteStore(Protocol):
    """
    Flat store: one directory, files named <note name>.md
    """

    def path_for(self, name: str) -> Path:
        pass

    def exists(self, path: Path) -> bool:
        pass

    def read(self, path: Path) -> str:
        pass

    def write(self, path: Path, contents: str) -> None:
        pass

    def delete(self, path: Path) -> None:
        pass

    def list_paths(self) -> Iterable[Path]:
        pass


class DocumentSource(Protocol):
    """
    Anything that yields a parsed outline document and its image files.
    """

    def document(self) -> etree._ElementTree:
        pass

    def images(self) -> Iterable[Path]:
        pass
