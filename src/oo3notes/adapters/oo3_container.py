"""Read OmniOutliner 3 packages (`*.oo3` directories)."""

import gzip
import shutil
from pathlib import Path
from typing import Iterable

from lxml import etree

from ..core.errors import ContainerError, SchemaError
from ..core.ports import DocumentSource
from .fs_storage import ensure_dir

CONTENTS = "contents.xml"


def decompress(raw: bytes) -> str:
    """Gunzip the outline payload; older packages store it uncompressed."""
    if raw[:2] == b"\x1f\x8b":
        raw = gzip.decompress(raw)
    return raw.decode("utf-8")


def parse(markup: str) -> etree._ElementTree:
    """
    Parse outline markup without fetching the OmniOutliner DTD.

    lxml refuses str input carrying an encoding declaration, so feed bytes.
    """
    parser = etree.XMLParser(load_dtd=False, no_network=True, resolve_entities=False)
    try:
        root = etree.fromstring(markup.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise SchemaError("<document>", e) from e
    return root.getroottree()


class OO3File(DocumentSource):
    def __init__(self, path: Path):
        path = Path(path)
        if not path.is_dir():
            raise ContainerError(f"Outline package not found or not a directory: {path}")
        if not (path / CONTENTS).is_file():
            raise ContainerError(f"No {CONTENTS} in outline package: {path}")
        self.path = path

    def open(self) -> bytes:
        return (self.path / CONTENTS).read_bytes()

    def markup(self) -> str:
        return decompress(self.open())

    def document(self) -> etree._ElementTree:
        return parse(self.markup())

    def images(self) -> Iterable[Path]:
        return sorted(self.path.glob("*.png"))

    def image_ids(self) -> set[str]:
        return {p.stem for p in self.images()}


def copy_images(source: DocumentSource, image_dir: Path) -> list[Path]:
    """Copy every embedded image into `image_dir`, keeping file names."""
    ensure_dir(image_dir)
    copied = []
    for src in source.images():
        dst = image_dir / src.name
        shutil.copy2(src, dst)
        copied.append(dst)
    return copied
