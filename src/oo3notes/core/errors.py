"""Exceptions raised while extracting and exporting outlines."""


class Oo3NotesError(Exception):
    """Base exception for oo3notes."""
    pass


class SchemaError(Oo3NotesError):
    """Raised when the outline does not have the shape the queries expect."""

    def __init__(self, query: str, got: object):
        self.query = query
        self.got = got
        super().__init__(
            f"Unexpected XML for query {query!r}, got {type(got).__name__}: {got!r}"
        )


class UntitledItemError(Oo3NotesError):
    """Raised when an item has neither a title nor a margin note id."""
    pass


class NameCollisionError(Oo3NotesError):
    """Raised when a note name stays ambiguous after walking to the root."""

    def __init__(self, name: str, stable_id: str | None = None):
        self.name = name
        self.stable_id = stable_id
        super().__init__(
            f"Cannot disambiguate note name {name!r} (margin note {stable_id})"
        )


class ContainerError(Oo3NotesError):
    """Raised when an outline container or output directory is unusable."""
    pass
