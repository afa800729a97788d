"""The fixed XPath query set for MarginNote-flavoured OmniOutliner 3 outlines."""

from dataclasses import dataclass, field

from lxml import etree

OO3_NS = "http://www.omnigroup.com/namespace/OmniOutliner/v3"
NOTE_URL_PREFIX = "marginnote3app://note/"


@dataclass(frozen=True)
class OutlineQueries:
    """
    Query text for each structural lookup. Column 1 holds the title, column 4
    paragraph 2 holds the link back to the margin note.
    """

    root_items: str = "/o:outline/o:root/o:item"
    title: str = "string(./o:values/o:text[1]/o:p/o:run/o:lit/text())"
    note_url: str = "./o:values/o:text[4]/o:p[2]/o:run/o:lit/o:cell/@href"
    value_images: str = "./o:values//o:cell/@refid"
    note_images: str = "./o:note//o:cell/@refid"
    comments: str = "./o:note//o:p//o:lit/text()"
    children: str = "o:children/o:item"
    namespaces: dict[str, str] = field(default_factory=lambda: {"o": OO3_NS})
    note_url_prefix: str = NOTE_URL_PREFIX


class CompiledQueries:
    def __init__(self, queries: OutlineQueries):
        self.source = queries
        ns = queries.namespaces
        self.root_items = etree.XPath(queries.root_items, namespaces=ns)
        self.title = etree.XPath(queries.title, namespaces=ns)
        self.note_url = etree.XPath(queries.note_url, namespaces=ns)
        self.value_images = etree.XPath(queries.value_images, namespaces=ns)
        self.note_images = etree.XPath(queries.note_images, namespaces=ns)
        self.comments = etree.XPath(queries.comments, namespaces=ns)
        self.children = etree.XPath(queries.children, namespaces=ns)
