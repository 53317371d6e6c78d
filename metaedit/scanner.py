from pathlib import Path
from typing import Iterable, List
from .models import FileTarget

class FolderScanner:
    """Scans a folder (optionally recursively) and returns FileTarget objects."""

    def __init__(self, root: Path, recursive: bool = True, ignore_hidden: bool = True):
        self.root = root
        self.recursive = recursive
        self.ignore_hidden = ignore_hidden

    def scan(self) -> List[FileTarget]:
        paths: Iterable[Path]
        if self.recursive:
            paths = self.root.rglob("*")
        else:
            paths = self.root.glob("*")

        files: List[FileTarget] = []
        for p in sorted(paths):
            if not p.is_file():
                continue
            # .metaedit log folder counts as hidden
            if self.ignore_hidden and any(part.startswith('.') for part in p.relative_to(self.root).parts):
                continue
            files.append(FileTarget(p))
        return files
