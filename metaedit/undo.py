from typing import List

from .logger import ChangeLogger
from .models import BatchOutcome, ChangeLogEntry, FileTarget
from .updater import MetadataUpdater


class UndoManager:
    """Puts back the names and timestamps recorded for a logged batch."""

    def __init__(self, logger: ChangeLogger, updater: MetadataUpdater):
        self.logger = logger
        self.updater = updater

    def undo_batch(self, batch_id: str) -> List[BatchOutcome]:
        entries: List[ChangeLogEntry] = self.logger.load_batch(batch_id)
        results: List[BatchOutcome] = []
        # Reverse order so chained renames unwind cleanly
        for e in reversed(entries):
            target = FileTarget(e.dst)
            if not self.updater.attributes.exists(e.dst):
                results.append(BatchOutcome(target, False, "missing file for undo", original_path=e.dst))
                continue
            try:
                restored = self.updater.update(target, e.src.stem, e.previous)
            except Exception as exc:
                results.append(BatchOutcome(target, False, str(exc), original_path=e.dst, previous=e.applied))
                continue
            results.append(BatchOutcome(restored, True, original_path=e.dst, previous=e.applied, applied=e.previous))

        return results
