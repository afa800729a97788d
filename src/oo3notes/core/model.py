from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Iterator

ItemId = int


@dataclass(frozen=True)
class Item:
    title: str  # display name: given title, else stable id
    given_title: str | None = None
    stable_id: str | None = None  # e.g. "9A1F...-..." from marginnote3app://note/<id>
    source_url: str | None = None
    image_refs: tuple[str, ...] = ()
    comment_text: str | None = None


@dataclass
class ItemTree:
    """
    Arena of items. Nodes are addressed by their insertion index; parent and
    child links are indices so ancestor lookups are O(1).
    """

    items: list[Item] = field(default_factory=list)
    parents: list[ItemId | None] = field(default_factory=list)
    child_ids: list[list[ItemId]] = field(default_factory=list)
    roots: list[ItemId] = field(default_factory=list)

    def add(self, item: Item, parent: ItemId | None = None) -> ItemId:
        node = len(self.items)
        self.items.append(item)
        self.parents.append(parent)
        self.child_ids.append([])
        if parent is None:
            self.roots.append(node)
        else:
            self.child_ids[parent].append(node)
        return node

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, node: ItemId) -> Item:
        return self.items[node]

    def parent(self, node: ItemId) -> ItemId | None:
        return self.parents[node]

    def children(self, node: ItemId) -> list[ItemId]:
        return list(self.child_ids[node])

    def ancestors(self, node: ItemId) -> Iterator[ItemId]:
        p = self.parents[node]
        while p is not None:
            yield p
            p = self.parents[p]

    def walk(self) -> Iterator[ItemId]:
        """Pre-order, document order."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(self.child_ids[node]))

    def toc(self, name_of: Callable[[ItemId], str] | None = None) -> str:
        """Nested bullet list of [[links]] for the whole outline."""
        label = name_of or (lambda node: self.items[node].title)

        lines: list[str] = []

        def visit(node: ItemId, depth: int) -> None:
            lines.append(f"{'  ' * depth}- [[{label(node)}]]")
            for child in self.child_ids[node]:
                visit(child, depth + 1)

        for root in self.roots:
            visit(root, 0)
        return "\n".join(lines)
