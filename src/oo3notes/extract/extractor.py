"""Build an ItemTree from a parsed OmniOutliner document."""

import logging
import re

from lxml import etree

from ..core.errors import SchemaError, UntitledItemError
from ..core.model import Item, ItemId, ItemTree
from .queries import CompiledQueries, OutlineQueries

log = logging.getLogger(__name__)

_WS = re.compile(r"\s+")


def clean_title(raw: str) -> str:
    """Trim and collapse whitespace runs to single spaces."""
    return _WS.sub(" ", raw.strip()).strip()


def margin_note_id(url: str, prefix: str) -> str:
    if not url.startswith(prefix):
        log.warning("Note link %r does not start with %r", url, prefix)
    return url[len(prefix):]


class OutlineExtractor:
    def __init__(self, queries: OutlineQueries | None = None):
        self.queries = CompiledQueries(queries or OutlineQueries())

    # Typed evaluation: any other result kind means a document we don't understand
    def _nodeset(self, xpath: etree.XPath, node) -> list:
        result = xpath(node)
        if not isinstance(result, list):
            raise SchemaError(xpath.path, result)
        return result

    def _elements(self, xpath: etree.XPath, node) -> list[etree._Element]:
        result = self._nodeset(xpath, node)
        if not all(isinstance(n, etree._Element) for n in result):
            raise SchemaError(xpath.path, result)
        return result

    def _strings(self, xpath: etree.XPath, node) -> list[str]:
        result = self._nodeset(xpath, node)
        if not all(isinstance(n, str) for n in result):
            raise SchemaError(xpath.path, result)
        return [str(n) for n in result]

    def _string(self, xpath: etree.XPath, node) -> str:
        result = xpath(node)
        if not isinstance(result, str):
            raise SchemaError(xpath.path, result)
        return str(result)

    def root_elements(self, document) -> list[etree._Element]:
        """Top-level <item> elements in document order."""
        return self._elements(self.queries.root_items, document)

    def root_items(self, document) -> ItemTree:
        """Extract every top-level item and its subtree; `tree.roots` holds the roots."""
        tree = ItemTree()
        for node in self.root_elements(document):
            self._build(tree, node, None)
        return tree

    def _build(self, tree: ItemTree, node: etree._Element, parent: ItemId | None) -> ItemId:
        url, stable_id = self.extract_url_and_id(node)
        given_title, title = self.extract_title(node, stable_id)
        item = Item(
            title=title,
            given_title=given_title,
            stable_id=stable_id,
            source_url=url,
            image_refs=tuple(self.extract_image_refs(node)),
            comment_text=self.extract_comments(node),
        )
        item_id = tree.add(item, parent)
        for child in self._elements(self.queries.children, node):
            self._build(tree, child, item_id)
        return item_id

    def extract_url_and_id(self, node) -> tuple[str | None, str | None]:
        urls = self._strings(self.queries.note_url, node)
        if not urls:
            return None, None
        url = urls[0]
        return url, margin_note_id(url, self.queries.source.note_url_prefix)

    def extract_title(self, node, stable_id: str | None) -> tuple[str | None, str]:
        given = clean_title(self._string(self.queries.title, node))
        if given:
            return given, given
        if stable_id:
            log.warning("Using margin note id as title for %s", stable_id)
            return None, stable_id
        raise UntitledItemError(
            f"Cannot determine title for item at line {node.sourceline}"
        )

    def extract_image_refs(self, node) -> list[str]:
        return self._strings(self.queries.value_images, node) + self._strings(
            self.queries.note_images, node
        )

    def extract_comments(self, node) -> str | None:
        runs = self._strings(self.queries.comments, node)
        if not runs:
            return None
        return "".join(runs)
