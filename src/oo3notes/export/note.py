"""Render one item as a Markdown note with YAML front matter."""

from dataclasses import dataclass, field
from typing import Any

from ..adapters.yaml_codec import YamlFrontmatter
from ..core.model import Item
from ..core.ports import FrontmatterCodec
from ..extract.queries import NOTE_URL_PREFIX

DEFAULT_TAG = "source-margin-note"


def link(name: str) -> str:
    return f"[[{name}]]"


def embed(image_id: str) -> str:
    return f"![[{image_id}.png]]"


def source_url(stable_id: str) -> str:
    return f"{NOTE_URL_PREFIX}{stable_id}"


@dataclass
class NoteFrontMatter:
    """The metadata block persisted at the top of every exported note."""

    tags: list[str] = field(default_factory=lambda: [DEFAULT_TAG])
    margin_note_id: str | None = None
    parent: str | None = None  # "[[<parent note name>]]"
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"tags": list(self.tags)}
        if self.margin_note_id is not None:
            meta["margin_note_id"] = self.margin_note_id
        if self.parent is not None:
            meta["parent"] = self.parent
        if self.title is not None:
            meta["title"] = self.title
        return meta

    @classmethod
    def from_dict(cls, meta: dict[str, Any]) -> "NoteFrontMatter":
        """Lenient reader: unknown keys are ignored, older tags-only notes load."""
        tags = meta.get("tags")
        if tags is None:
            tags = []
        elif not isinstance(tags, list):
            tags = [tags]

        def opt_str(key: str) -> str | None:
            v = meta.get(key)
            return None if v is None else str(v)

        return cls(
            tags=[str(t) for t in tags],
            margin_note_id=opt_str("margin_note_id"),
            parent=opt_str("parent"),
            title=opt_str("title"),
        )


def front_matter_for(item: Item, parent_name: str | None, tag: str = DEFAULT_TAG) -> NoteFrontMatter:
    return NoteFrontMatter(
        tags=[tag],
        margin_note_id=item.stable_id,
        parent=link(parent_name) if parent_name is not None else None,
        title=item.given_title,
    )


def render_note(
    item: Item,
    parent_name: str | None,
    child_names: list[str],
    tag: str = DEFAULT_TAG,
    codec: FrontmatterCodec | None = None,
) -> str:
    """
    Blocks, in order, separated by a blank line; optional ones drop out when
    there is nothing to say. The child list and image list are always there.
    """
    codec = codec or YamlFrontmatter()
    header = codec.encode(front_matter_for(item, parent_name, tag).to_dict()).rstrip("\n")

    blocks: list[str | None] = [
        header,
        f"# {item.given_title}" if item.given_title else None,
        f"> [source]({source_url(item.stable_id)})" if item.stable_id else None,
        "\n".join(f"- {link(name)}" for name in child_names),
        item.comment_text,
        "\n".join(embed(image_id) for image_id in item.image_refs),
    ]
    return "\n\n".join(b for b in blocks if b is not None) + "\n"
