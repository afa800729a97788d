from pathlib import Path
from typing import Iterable
from ..core.errors import ContainerError
from ..core.ports import NoteStore


def ensure_dir(path: Path) -> Path:
    """Create `path` if missing; refuse paths that exist but are not directories."""
    if path.exists() and not path.is_dir():
        raise ContainerError(f"Path exists but is not a directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


class FsStorage(NoteStore):
    def __init__(self, root: Path):
        self.root = root

    def path_for(self, name: str) -> Path:
        return self.root / f"{name}.md"

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write(self, path: Path, contents: str) -> None:
        ensure_dir(self.root)
        path.write_text(contents, encoding="utf-8")

    def delete(self, path: Path) -> None:
        path.unlink()

    def list_paths(self) -> Iterable[Path]:
        if not self.root.exists():
            return []
        if not self.root.is_dir():
            raise ContainerError(f"Path exists but is not a directory: {self.root}")
        return sorted(self.root.glob("*.md"))
