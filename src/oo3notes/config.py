"""Configuration loader for oo3notes.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .export.naming import DEFAULT_PREFIX, DEFAULT_SEPARATOR_SUBSTITUTE
from .export.note import DEFAULT_TAG

CONFIG_NAME = "oo3notes.toml"


@dataclass
class OutputConfig:
    """Where notes and images are written."""
    notes: Path = Path("notes")
    images: Path = Path("img")


@dataclass
class NamingConfig:
    """Note file naming."""
    prefix: str = DEFAULT_PREFIX
    separator_substitute: str = DEFAULT_SEPARATOR_SUBSTITUTE


@dataclass
class FrontMatterConfig:
    """Front matter written into each note."""
    tag: str = DEFAULT_TAG


@dataclass
class Oo3NotesConfig:
    """Complete oo3notes configuration."""
    output: OutputConfig = field(default_factory=OutputConfig)
    naming: NamingConfig = field(default_factory=NamingConfig)
    front_matter: FrontMatterConfig = field(default_factory=FrontMatterConfig)


def load_config(config_path: Path | None = None, container_path: Path | None = None) -> Oo3NotesConfig:
    """
    Load configuration from oo3notes.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/oo3notes.toml
    3. next to the outline package (container_path/../oo3notes.toml)

    Args:
        config_path: Explicit path to config file
        container_path: Outline package path for fallback search

    Returns:
        Oo3NotesConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if container_path:
        search_paths.append(Path(container_path).parent / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    output_data = toml_data.get("output", {})
    output_config = OutputConfig(
        notes=Path(output_data.get("notes", "notes")),
        images=Path(output_data.get("images", "img")),
    )

    naming_data = toml_data.get("naming", {})
    naming_config = NamingConfig(
        prefix=naming_data.get("prefix", DEFAULT_PREFIX),
        separator_substitute=naming_data.get(
            "separator_substitute", DEFAULT_SEPARATOR_SUBSTITUTE
        ),
    )

    fm_data = toml_data.get("front_matter", {})
    fm_config = FrontMatterConfig(tag=fm_data.get("tag", DEFAULT_TAG))

    return Oo3NotesConfig(
        output=output_config,
        naming=naming_config,
        front_matter=fm_config,
    )
