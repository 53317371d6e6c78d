from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass
class FileTarget:
    path: Path
    extension: str = field(init=False)

    def __post_init__(self):
        self.path = Path(self.path)
        self.extension = self.path.suffix[1:]

    @property
    def base_name(self) -> str:
        return self.path.stem

    def file_name_for(self, base_name: str) -> str:
        return f"{base_name}.{self.extension}" if self.extension else base_name


@dataclass(frozen=True)
class TimestampPair:
    created: datetime
    modified: datetime

    def is_ordered(self) -> bool:
        return self.created <= self.modified


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error_message: Optional[str] = None


class BulkDatePolicy(Enum):
    MODIFICATION_FROM_CREATION = "modification_from_creation"
    CREATION_FROM_MODIFICATION = "creation_from_modification"

    def derive(self, current: TimestampPair) -> TimestampPair:
        source = current.created if self is BulkDatePolicy.MODIFICATION_FROM_CREATION else current.modified
        return TimestampPair(created=source, modified=source)


class QuickAction(Enum):
    """Shortcuts for filling in the dates of a single-file edit."""
    NOW_FOR_BOTH = "now_for_both"
    MODIFIED_FROM_CREATED = "modified_from_created"
    CREATED_FROM_MODIFIED = "created_from_modified"

    def apply(self, pair: TimestampPair, now: Optional[datetime] = None) -> TimestampPair:
        if self is QuickAction.NOW_FOR_BOTH:
            now = now or datetime.now(timezone.utc)
            return TimestampPair(created=now, modified=now)
        if self is QuickAction.MODIFIED_FROM_CREATED:
            return TimestampPair(created=pair.created, modified=pair.created)
        return TimestampPair(created=pair.modified, modified=pair.modified)


@dataclass(frozen=True)
class BatchOutcome:
    target: FileTarget
    success: bool
    error: Optional[str] = None
    original_path: Optional[Path] = None
    previous: Optional[TimestampPair] = None  # what was read before the update
    applied: Optional[TimestampPair] = None   # None on failure


@dataclass(frozen=True)
class ChangeLogEntry:
    batch_id: str
    src: Path
    dst: Path
    previous: TimestampPair
    applied: TimestampPair
    timestamp: datetime
