"""Check image references against the images shipped in the outline package."""

import logging
from dataclasses import dataclass

from ..core.model import ItemTree

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissingImage:
    title: str
    image_id: str


def find_missing_images(tree: ItemTree, available: set[str]) -> list[MissingImage]:
    """Image refs with no `<id>.png` among `available` (file stems)."""
    missing = []
    for node in tree.walk():
        item = tree[node]
        for image_id in item.image_refs:
            if image_id not in available:
                log.warning("Image %s.png referenced by %r not found", image_id, item.title)
                missing.append(MissingImage(item.title, image_id))
    return missing
