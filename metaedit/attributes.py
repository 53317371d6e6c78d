import ctypes
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Set

from .errors import FilesystemError
from .models import TimestampPair


class FileAttributes:
    """Filesystem primitives the updater relies on."""

    def read(self, path: Path) -> TimestampPair:
        raise NotImplementedError

    def write(self, path: Path, timestamps: TimestampPair) -> None:
        raise NotImplementedError

    def move(self, src: Path, dst: Path) -> None:
        raise NotImplementedError

    def exists(self, path: Path) -> bool:
        raise NotImplementedError


def _from_epoch(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


class LocalFileAttributes(FileAttributes):
    """Reads and writes timestamps on the real filesystem."""

    def read(self, path: Path) -> TimestampPair:
        try:
            st = os.stat(path)
        except OSError as e:
            raise FilesystemError(f"Cannot read attributes of {path}: {e}", path=path) from e
        if hasattr(st, "st_birthtime"):
            created = st.st_birthtime
        elif sys.platform == "win32":
            created = st.st_ctime
        else:
            # write() parks the creation time in atime; st_ctime is just "last touched"
            created = min(st.st_atime, st.st_ctime)
        # a copied file can be born after its preserved mtime
        created = min(created, st.st_mtime)
        return TimestampPair(created=_from_epoch(created), modified=_from_epoch(st.st_mtime))

    def write(self, path: Path, timestamps: TimestampPair) -> None:
        created = timestamps.created.timestamp()
        modified = timestamps.modified.timestamp()
        try:
            if sys.platform == "darwin":
                # APFS/HFS+ pull the birth time back to an older mtime
                os.utime(path, (created, created))
            os.utime(path, (created, modified))
            if sys.platform == "win32":
                _set_windows_creation_time(path, created)
        except OSError as e:
            raise FilesystemError(f"Cannot write attributes of {path}: {e}", path=path) from e

    def move(self, src: Path, dst: Path) -> None:
        if src.parent != dst.parent:
            raise FilesystemError(f"Refusing to move {src.name} out of its folder", path=src)
        try:
            os.rename(src, dst)
        except OSError as e:
            raise FilesystemError(f"Cannot rename {src.name} to {dst.name}: {e}", path=src) from e

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)


def _set_windows_creation_time(path: Path, created: float) -> None:
    # FILETIME counts 100ns intervals since 1601-01-01
    ticks = int(created * 10_000_000) + 116444736000000000
    filetime = ctypes.c_ulonglong(ticks)
    kernel32 = ctypes.windll.kernel32
    kernel32.CreateFileW.restype = ctypes.c_void_p
    # FILE_WRITE_ATTRIBUTES, shared read/write, OPEN_EXISTING, FILE_FLAG_BACKUP_SEMANTICS
    handle = kernel32.CreateFileW(str(path), 0x100, 0x3, None, 3, 0x02000000, None)
    if handle is None or handle == ctypes.c_void_p(-1).value:
        raise ctypes.WinError()
    try:
        if not kernel32.SetFileTime(ctypes.c_void_p(handle), ctypes.byref(filetime), None, None):
            raise ctypes.WinError()
    finally:
        kernel32.CloseHandle(ctypes.c_void_p(handle))


class MemoryFileAttributes(FileAttributes):
    """In-memory filesystem for previews and tests.

    Paths listed in ``fail_read``, ``fail_write`` or ``fail_move`` raise
    ``FilesystemError`` from the matching primitive.
    """

    def __init__(self, entries: Dict[Path, TimestampPair] | None = None):
        self.entries: Dict[Path, TimestampPair] = {Path(p): t for p, t in (entries or {}).items()}
        self.fail_read: Set[Path] = set()
        self.fail_write: Set[Path] = set()
        self.fail_move: Set[Path] = set()
        self.calls: list = []

    def add(self, path: Path, timestamps: TimestampPair) -> Path:
        path = Path(path)
        self.entries[path] = timestamps
        return path

    def read(self, path: Path) -> TimestampPair:
        self.calls.append(("read", path))
        if path in self.fail_read or path not in self.entries:
            raise FilesystemError(f"Cannot read attributes of {path}", path=path)
        return self.entries[path]

    def write(self, path: Path, timestamps: TimestampPair) -> None:
        self.calls.append(("write", path))
        if path in self.fail_write or path not in self.entries:
            raise FilesystemError(f"Cannot write attributes of {path}", path=path)
        self.entries[path] = timestamps

    def move(self, src: Path, dst: Path) -> None:
        self.calls.append(("move", src, dst))
        if src in self.fail_move or src not in self.entries:
            raise FilesystemError(f"Cannot rename {src.name} to {dst.name}", path=src)
        self.entries[dst] = self.entries.pop(src)

    def exists(self, path: Path) -> bool:
        return path in self.entries
