from pathlib import Path
from typing import Optional


class MetaEditError(Exception):
    """Base error for the project."""
    kind = "error"


class InvalidPathError(MetaEditError):
    pass


class ValidationError(MetaEditError):
    """Bad name or bad date ordering. Nothing was touched."""
    kind = "validation"


class AlreadyExistsError(MetaEditError):
    kind = "already_exists"

    def __init__(self, name: str):
        super().__init__(f"A file named '{name}' already exists")
        self.name = name


class FilesystemError(MetaEditError):
    """A filesystem primitive failed.

    ``renamed_to`` is set when the rename had already committed before the
    timestamp write failed.
    """
    kind = "filesystem"

    def __init__(self, message: str, path: Optional[Path] = None, renamed_to: Optional[Path] = None):
        super().__init__(message)
        self.path = path
        self.renamed_to = renamed_to
