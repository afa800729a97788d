"""oo3notes - export OmniOutliner margin-note outlines to linked Markdown notes."""

__version__ = "0.3.0"
