import queue
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .attributes import FileAttributes
from .errors import FilesystemError, MetaEditError
from .models import BatchOutcome, BulkDatePolicy, FileTarget, TimestampPair
from .updater import MetadataUpdater

ProgressCallback = Callable[[float], None]


class BatchProcessor:
    """Applies a date policy to many files, one after another.

    A failing file becomes a failed outcome; the batch always runs to the end.
    """

    def __init__(self, updater: MetadataUpdater, attributes: FileAttributes | None = None):
        self.updater = updater
        self.attributes = attributes or updater.attributes
        self.processed = 0
        self.total = 0

    @property
    def progress(self) -> float:
        return self.processed / self.total if self.total else 0.0

    def _current_timestamps(self, target: FileTarget) -> TimestampPair:
        try:
            return self.attributes.read(target.path)
        except FilesystemError:
            now = datetime.now(timezone.utc)
            return TimestampPair(created=now, modified=now)

    def process_one(self, target: FileTarget, policy: BulkDatePolicy) -> BatchOutcome:
        original = target.path
        previous = self._current_timestamps(target)
        wanted = policy.derive(previous)
        try:
            updated = self.updater.update(target, target.base_name, wanted)
        except Exception as e:
            return BatchOutcome(target, False, str(e), original_path=original, previous=previous)
        return BatchOutcome(updated, True, original_path=original, previous=previous, applied=wanted)

    def run_batch(self, targets: Sequence[FileTarget], policy: BulkDatePolicy,
                  on_progress: Optional[ProgressCallback] = None) -> List[BatchOutcome]:
        self.processed = 0
        self.total = len(targets)
        outcomes: List[BatchOutcome] = []
        try:
            for target in targets:
                outcomes.append(self.process_one(target, policy))
                self.processed += 1
                if on_progress:
                    on_progress(self.progress)
        finally:
            self.processed = 0
            self.total = 0
        return outcomes


class BackgroundBatch:
    """Runs a batch on a worker thread.

    Progress and the final result are queued; the host drains them with
    ``poll()`` from its own update loop, so callbacks run on its thread.
    ``main.bulk_flow`` drives one this way. A new run can start only after
    the previous result was collected.
    """

    def __init__(self, processor: BatchProcessor):
        self.processor = processor
        self.progress_q: queue.Queue[float] = queue.Queue()
        self.done_q: queue.Queue = queue.Queue()  # outcome list or exception
        self.worker_thread: Optional[threading.Thread] = None

    def is_running(self) -> bool:
        return self.worker_thread is not None and self.worker_thread.is_alive()

    def start(self, targets: Sequence[FileTarget], policy: BulkDatePolicy) -> None:
        if self.is_running():
            raise MetaEditError("A batch is already running")
        if not self.done_q.empty():
            raise MetaEditError("The previous batch result has not been collected")
        args = (list(targets), policy)
        self.worker_thread = threading.Thread(target=self._worker, args=args, daemon=True)
        self.worker_thread.start()

    def _worker(self, targets: List[FileTarget], policy: BulkDatePolicy) -> None:
        try:
            outcomes = self.processor.run_batch(targets, policy, on_progress=self.progress_q.put)
        except Exception as e:
            self.done_q.put(e)
        else:
            self.done_q.put(outcomes)

    def poll(self, on_progress: Optional[ProgressCallback] = None,
             on_complete: Optional[Callable[[List[BatchOutcome]], None]] = None) -> bool:
        """Deliver queued events. Returns True once completion was delivered."""
        # checked first: every progress event is queued before completion
        finished = not self.done_q.empty()
        while not self.progress_q.empty():
            ratio = self.progress_q.get_nowait()
            if on_progress:
                on_progress(ratio)

        if not finished:
            return False
        result = self.done_q.get_nowait()
        if isinstance(result, Exception):
            raise result
        if on_complete:
            on_complete(result)
        return True

    def wait(self, timeout: float | None = None) -> None:
        if self.worker_thread:
            self.worker_thread.join(timeout)
