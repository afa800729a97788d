"""Shared fixtures: tiny OmniOutliner 3 documents and .oo3 packages."""

import gzip
from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

import pytest

from oo3notes.adapters.oo3_container import parse

HEADER = (
    '<?xml version="1.0" encoding="utf-8" standalone="no"?>\n'
    '<!DOCTYPE outline PUBLIC "-//omnigroup.com//DTD OUTLINE 3.0//EN" '
    '"http://www.omnigroup.com/namespace/OmniOutliner/xmloutline-v3.dtd">\n'
)


def _cell_p(attr: str, value: str) -> str:
    return f"<p><run><lit><cell {attr}={quoteattr(value)}/></lit></run></p>"


def item_xml(
    title: str = "",
    note_id: str | None = None,
    images: tuple[str, ...] = (),
    note_images: tuple[str, ...] = (),
    comments: tuple[str, ...] = (),
    children: tuple[str, ...] = (),
) -> str:
    """One <item>, laid out the way MarginNote exports its outline columns."""
    col1 = f"<text><p><run><lit>{escape(title)}</lit></run></p></text>"
    col2 = "<text>" + "".join(_cell_p("refid", i) for i in images) + "</text>"
    col3 = "<text><p><run><lit>3</lit></run></p></text>"
    col4 = "<text><p><run><lit>page</lit></run></p>"
    if note_id is not None:
        col4 += _cell_p("href", f"marginnote3app://note/{note_id}")
    col4 += "</text>"

    note = ""
    if comments or note_images:
        paras = "".join(f"<p><run><lit>{escape(c)}</lit></run></p>" for c in comments)
        paras += "".join(_cell_p("refid", i) for i in note_images)
        note = f"<note><text>{paras}</text></note>"

    kids = f"<children>{''.join(children)}</children>" if children else ""
    return f"<item><values>{col1}{col2}{col3}{col4}</values>{note}{kids}</item>"


def outline_xml(*items: str) -> str:
    return (
        HEADER
        + '<outline xmlns="http://www.omnigroup.com/namespace/OmniOutliner/v3" version="3">'
        + "<root>" + "".join(items) + "</root></outline>"
    )


@pytest.fixture
def item():
    return item_xml


@pytest.fixture
def outline():
    """Build and parse an outline document from item_xml() fragments."""
    def build(*items: str):
        return parse(outline_xml(*items))
    return build


@pytest.fixture
def oo3_package(tmp_path):
    """Write a fake .oo3 package with gzipped contents.xml and PNG files."""
    def build(*items: str, images: tuple[str, ...] = (), name: str = "book.oo3") -> Path:
        pkg = tmp_path / name
        pkg.mkdir(exist_ok=True)
        (pkg / "contents.xml").write_bytes(gzip.compress(outline_xml(*items).encode("utf-8")))
        for image_id in images:
            (pkg / f"{image_id}.png").write_bytes(b"\x89PNG\r\n\x1a\n" + image_id.encode())
        return pkg
    return build
