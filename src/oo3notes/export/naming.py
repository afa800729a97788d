"""Stable, collision-free note names for every item in an outline."""

import logging
from dataclasses import dataclass, field

from ..core.errors import NameCollisionError
from ..core.model import Item, ItemId, ItemTree

log = logging.getLogger(__name__)

DEFAULT_PREFIX = "(LIT) "
# FRACTION SLASH looks like "/" but is legal in file names
DEFAULT_SEPARATOR_SUBSTITUTE = "⁄"


@dataclass(frozen=True)
class NamingRules:
    prefix: str = DEFAULT_PREFIX
    separator_substitute: str = DEFAULT_SEPARATOR_SUBSTITUTE

    def safe(self, text: str) -> str:
        return text.replace("/", self.separator_substitute).replace(
            "\\", self.separator_substitute
        )

    def initial_name(self, item: Item) -> str:
        if item.given_title:
            return self.prefix + self.safe(item.given_title)
        # stable id is verbatim; extraction guarantees one of the two exists
        return self.prefix + (item.stable_id or "")


@dataclass
class NameTable:
    """
    Final note name for every node, plus the stable id -> name view used to
    resolve links. Built for the whole tree before anything is written.
    """

    names: dict[ItemId, str] = field(default_factory=dict)
    by_stable_id: dict[str, str] = field(default_factory=dict)

    def __getitem__(self, node: ItemId) -> str:
        return self.names[node]

    def __len__(self) -> int:
        return len(self.names)


def disambiguate(
    tree: ItemTree, node: ItemId, taken: set[str], rules: NamingRules
) -> str:
    """
    Append "(<ancestor initial name>)" walking up from the parent until the
    name is free. Running out of ancestors is an error, never an overwrite.
    """
    item = tree[node]
    name = rules.initial_name(item)
    ancestors = tree.ancestors(node)
    while name in taken:
        ancestor = next(ancestors, None)
        if ancestor is None:
            log.error("Name collision for %s persists to the root: %r", item.stable_id, name)
            raise NameCollisionError(name, item.stable_id)
        name = f"{name} ({rules.initial_name(tree[ancestor])})"
    return name


def build_name_table(tree: ItemTree, rules: NamingRules | None = None) -> NameTable:
    rules = rules or NamingRules()
    table = NameTable()
    taken: set[str] = set()

    for node in tree.walk():
        item = tree[node]
        if item.stable_id is None:
            # groups keep their initial name; one that lands on a taken name
            # would overwrite another note's file
            name = rules.initial_name(item)
            if name in taken:
                log.error("Group name %r is already used by another note", name)
                raise NameCollisionError(name)
            taken.add(name)
            table.names[node] = name
            continue

        name = disambiguate(tree, node, taken, rules)
        if name != rules.initial_name(item):
            log.info("Renamed duplicate %r to %r", rules.initial_name(item), name)
        taken.add(name)
        table.names[node] = name
        table.by_stable_id[item.stable_id] = name

    return table
