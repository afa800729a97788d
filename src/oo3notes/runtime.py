"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_storage import FsStorage
from .adapters.oo3_container import OO3File
from .adapters.yaml_codec import YamlFrontmatter
from .config import Oo3NotesConfig, load_config
from .export.exporter import Exporter
from .export.naming import NamingRules
from .extract.extractor import OutlineExtractor


@dataclass
class Runtime:
    """Container for all wired components."""
    container: OO3File
    extractor: OutlineExtractor
    exporter: Exporter
    notes_dir: Path
    images_dir: Path
    config: Oo3NotesConfig


def build_runtime(
    container_path: Path,
    notes_dir: Path | None = None,
    images_dir: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for one outline package."""
    config = load_config(config_path=config_path, container_path=container_path)

    # Use config values if CLI args not provided
    if notes_dir is None:
        notes_dir = config.output.notes
    if images_dir is None:
        images_dir = config.output.images

    container = OO3File(container_path)
    rules = NamingRules(
        prefix=config.naming.prefix,
        separator_substitute=config.naming.separator_substitute,
    )
    exporter = Exporter(
        FsStorage(notes_dir),
        codec=YamlFrontmatter(),
        rules=rules,
        tag=config.front_matter.tag,
    )

    return Runtime(
        container=container,
        extractor=OutlineExtractor(),
        exporter=exporter,
        notes_dir=notes_dir,
        images_dir=images_dir,
        config=config,
    )
