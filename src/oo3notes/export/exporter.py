"""Write one note per item, keeping file identity stable across runs."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ..adapters.yaml_codec import YamlFrontmatter
from ..core.model import ItemTree
from ..core.ports import FrontmatterCodec, NoteStore
from .naming import NameTable, NamingRules, build_name_table
from .note import DEFAULT_TAG, NoteFrontMatter, render_note

log = logging.getLogger(__name__)


@dataclass
class ExportReport:
    """What an export run did (or would do, for a dry run)."""

    written: list[Path] = field(default_factory=list)
    deleted: list[Path] = field(default_factory=list)
    unchanged: int = 0
    dry_run: bool = False

    @property
    def renamed(self) -> int:
        return len(self.deleted)


def build_id_map(store: NoteStore, codec: FrontmatterCodec) -> dict[str, Path]:
    """
    Map margin note id -> note file currently holding it. Files without
    readable front matter are simply not part of the map.
    """
    id_map: dict[str, Path] = {}
    for path in store.list_paths():
        try:
            text = store.read(path)
        except UnicodeDecodeError as e:
            log.debug("Skipping %s: not UTF-8 (%s)", path, e)
            continue
        try:
            meta, _ = codec.decode(text)
        except yaml.YAMLError as e:
            log.debug("Skipping %s: invalid front matter (%s)", path, e)
            continue
        try:
            margin_note_id = NoteFrontMatter.from_dict(meta).margin_note_id if meta else None
        except (TypeError, ValueError) as e:
            log.debug("Skipping %s: unexpected front matter values (%s)", path, e)
            continue
        if margin_note_id is None:
            log.debug("Skipping %s: no margin_note_id", path)
            continue
        id_map[margin_note_id] = path
    return id_map


class Exporter:
    def __init__(
        self,
        store: NoteStore,
        codec: FrontmatterCodec | None = None,
        rules: NamingRules | None = None,
        tag: str = DEFAULT_TAG,
    ):
        self.store = store
        self.codec = codec or YamlFrontmatter()
        self.rules = rules or NamingRules()
        self.tag = tag
        # Snapshot of the note directory before this run; never refreshed mid-run
        self.previous_id_map = build_id_map(store, self.codec)

    def previous_path(self, stable_id: str | None) -> Path | None:
        if stable_id is None:
            return None
        return self.previous_id_map.get(stable_id)

    def is_unchanged(self, path: Path, text: str) -> bool:
        if not self.store.exists(path):
            return False
        try:
            return self.store.read(path) == text
        except UnicodeDecodeError:
            return False

    def names(self, tree: ItemTree) -> NameTable:
        return build_name_table(tree, self.rules)

    def export(self, tree: ItemTree, dry_run: bool = False) -> ExportReport:
        names = self.names(tree)
        report = ExportReport(dry_run=dry_run)
        written: set[Path] = set()

        for node in tree.walk():
            item = tree[node]
            new_path = self.store.path_for(names[node])
            previous_path = self.previous_path(item.stable_id)

            # Delete old file if we have renamed the note since
            if previous_path is not None and previous_path != new_path:
                if previous_path in written:
                    log.info("Keeping %s: already rewritten for another note", previous_path)
                else:
                    log.info("Renamed %s -> %s", previous_path.name, new_path.name)
                    if not dry_run:
                        self.store.delete(previous_path)
                    report.deleted.append(previous_path)

            parent = tree.parent(node)
            text = render_note(
                item,
                names[parent] if parent is not None else None,
                [names[child] for child in tree.children(node)],
                tag=self.tag,
                codec=self.codec,
            )

            if self.is_unchanged(new_path, text):
                report.unchanged += 1
            if not dry_run:
                self.store.write(new_path, text)
            written.add(new_path)
            report.written.append(new_path)

        return report
