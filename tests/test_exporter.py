"""Tests for identity-stable note export."""

import pytest

from oo3notes.adapters.fs_storage import FsStorage
from oo3notes.adapters.yaml_codec import YamlFrontmatter
from oo3notes.core.errors import ContainerError, NameCollisionError
from oo3notes.core.model import Item, ItemTree
from oo3notes.export.exporter import Exporter, build_id_map
from oo3notes.export.note import NoteFrontMatter


def titled(title: str, stable_id: str | None, **kw) -> Item:
    return Item(title=title, given_title=title, stable_id=stable_id, **kw)


def sample_tree(summary_title: str = "Summary") -> ItemTree:
    tree = ItemTree()
    book = tree.add(titled("Book", None))
    ch1 = tree.add(titled("Chapter 1", "C1"), book)
    tree.add(titled(summary_title, "S1", image_refs=("img1",)), ch1)
    ch2 = tree.add(titled("Chapter 2", "C2"), book)
    tree.add(titled("Summary", "S2", comment_text="note"), ch2)
    return tree


def snapshot(notes_dir):
    return {p.name: p.read_text(encoding="utf-8") for p in sorted(notes_dir.glob("*.md"))}


def export(notes_dir, tree, **kw):
    return Exporter(FsStorage(notes_dir)).export(tree, **kw)


def test_export_writes_one_file_per_item(tmp_path):
    notes = tmp_path / "notes"
    report = export(notes, sample_tree("Overview"))

    assert sorted(p.name for p in notes.glob("*.md")) == [
        "(LIT) Book.md",
        "(LIT) Chapter 1.md",
        "(LIT) Chapter 2.md",
        "(LIT) Overview.md",
        "(LIT) Summary.md",
    ]
    assert len(report.written) == 5
    assert report.deleted == []


def test_links_use_final_names(tmp_path):
    notes = tmp_path / "notes"
    export(notes, sample_tree())

    ch2 = (notes / "(LIT) Chapter 2.md").read_text(encoding="utf-8")
    second = (notes / "(LIT) Summary ((LIT) Chapter 2).md").read_text(encoding="utf-8")

    assert "- [[(LIT) Summary ((LIT) Chapter 2)]]" in ch2
    assert "parent: '[[(LIT) Chapter 2]]'" in second
    assert "note" in second


def test_export_is_idempotent(tmp_path):
    notes = tmp_path / "notes"
    export(notes, sample_tree())
    before = snapshot(notes)

    report = export(notes, sample_tree())

    assert snapshot(notes) == before
    assert report.deleted == []
    assert report.unchanged == len(report.written) == 5


def test_rename_deletes_old_file(tmp_path):
    notes = tmp_path / "notes"
    export(notes, sample_tree("Overview"))
    assert (notes / "(LIT) Overview.md").exists()

    report = export(notes, sample_tree("Key Points"))

    assert not (notes / "(LIT) Overview.md").exists()
    new_file = notes / "(LIT) Key Points.md"
    assert new_file.exists()
    meta, _ = YamlFrontmatter().decode(new_file.read_text(encoding="utf-8"))
    assert meta["margin_note_id"] == "S1"
    assert report.deleted == [notes / "(LIT) Overview.md"]
    # only one file carries the id
    holders = [p for p in notes.glob("*.md") if "margin_note_id: S1" in p.read_text(encoding="utf-8")]
    assert holders == [new_file]


def test_unrenamed_file_is_not_deleted(tmp_path):
    # regression: deletion must happen only when the path changed
    notes = tmp_path / "notes"
    export(notes, sample_tree())

    exporter = Exporter(FsStorage(notes))
    deleted = []
    exporter.store.delete = deleted.append
    exporter.export(sample_tree())

    assert deleted == []


def test_swapped_names_keep_both_files(tmp_path):
    notes = tmp_path / "notes"
    tree = ItemTree()
    tree.add(titled("Alpha", "A"))
    tree.add(titled("Beta", "B"))
    export(notes, tree)

    swapped = ItemTree()
    swapped.add(titled("Beta", "A"))
    swapped.add(titled("Alpha", "B"))
    export(notes, swapped)

    ids = build_id_map(FsStorage(notes), YamlFrontmatter())
    assert ids == {"A": notes / "(LIT) Beta.md", "B": notes / "(LIT) Alpha.md"}


def test_dry_run_touches_nothing(tmp_path):
    notes = tmp_path / "notes"
    export(notes, sample_tree("Overview"))
    before = snapshot(notes)

    report = export(notes, sample_tree("Key Points"), dry_run=True)

    assert snapshot(notes) == before
    assert report.dry_run
    assert report.renamed == 1
    assert notes / "(LIT) Key Points.md" in report.written


def test_id_map_skips_files_without_front_matter(tmp_path):
    notes = tmp_path / "notes"
    notes.mkdir()
    (notes / "plain.md").write_text("# Just text\n", encoding="utf-8")
    (notes / "broken.md").write_text("---\nkey: [unclosed\n---\n", encoding="utf-8")
    (notes / "scalar.md").write_text("---\njust a string\n---\n", encoding="utf-8")
    (notes / "other.md").write_text("---\ntags:\n- mine\n---\n", encoding="utf-8")
    (notes / "vault.md").write_text("---\ntags: 5\n---\n", encoding="utf-8")
    (notes / "flag.md").write_text("---\ntags: true\nmargin_note_id: Y1\n---\n", encoding="utf-8")
    (notes / "latin.md").write_bytes(b"---\ntitle: caf\xe9\n---\n")
    (notes / "ours.md").write_text("---\nmargin_note_id: X1\n---\n", encoding="utf-8")
    (notes / "image.png").write_bytes(b"\x89PNG")

    ids = build_id_map(FsStorage(notes), YamlFrontmatter())

    assert ids == {"X1": notes / "ours.md", "Y1": notes / "flag.md"}


def test_previous_index_is_a_snapshot(tmp_path):
    notes = tmp_path / "notes"
    exporter = Exporter(FsStorage(notes))

    exporter.export(sample_tree())

    assert exporter.previous_id_map == {}


def test_every_written_note_parses_back(tmp_path):
    notes = tmp_path / "notes"
    tree = sample_tree()
    export(notes, tree)

    ids = build_id_map(FsStorage(notes), YamlFrontmatter())

    assert set(ids) == {"C1", "C2", "S1", "S2"}
    for stable_id, path in ids.items():
        meta, _ = YamlFrontmatter().decode(path.read_text(encoding="utf-8"))
        assert NoteFrontMatter.from_dict(meta).margin_note_id == stable_id


def test_collision_fails_before_writing(tmp_path):
    notes = tmp_path / "notes"
    tree = ItemTree()
    tree.add(titled("Same", "1"))
    tree.add(titled("Same", "2"))

    with pytest.raises(NameCollisionError):
        export(notes, tree)

    assert not notes.exists() or list(notes.glob("*.md")) == []


def test_notes_path_must_be_directory(tmp_path):
    not_a_dir = tmp_path / "notes"
    not_a_dir.write_text("oops")

    with pytest.raises(ContainerError):
        Exporter(FsStorage(not_a_dir))


def test_non_utf8_target_is_overwritten(tmp_path):
    notes = tmp_path / "notes"
    notes.mkdir()
    target = notes / "(LIT) Alpha.md"
    target.write_bytes(b"caf\xe9\n")
    tree = ItemTree()
    tree.add(titled("Alpha", "A"))

    report = export(notes, tree)

    assert report.unchanged == 0
    assert "margin_note_id: A" in target.read_text(encoding="utf-8")


def test_store_exists_only_for_files(tmp_path):
    notes = tmp_path / "notes"
    notes.mkdir()
    store = FsStorage(notes)
    (notes / "sub.md").mkdir()
    (notes / "note.md").write_text("x", encoding="utf-8")

    assert store.exists(notes / "note.md")
    assert not store.exists(notes / "missing.md")
    assert not store.exists(notes / "sub.md")


def test_group_collision_fails_before_writing(tmp_path):
    notes = tmp_path / "notes"
    tree = ItemTree()
    tree.add(titled("Same", "1"))
    tree.add(titled("Same", None))

    with pytest.raises(NameCollisionError):
        export(notes, tree)

    assert list(notes.glob("*.md")) == []
