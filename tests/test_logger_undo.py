from __future__ import annotations

import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from metaedit.attributes import MemoryFileAttributes
from metaedit.batch import BatchProcessor
from metaedit.logger import ChangeLogger, entries_from_outcomes
from metaedit.models import BatchOutcome, BulkDatePolicy, ChangeLogEntry, FileTarget, TimestampPair
from metaedit.undo import UndoManager
from metaedit.updater import MetadataUpdater


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


DOCS = Path("/docs")
OLD = TimestampPair(utc(2019, 5, 1), utc(2019, 6, 1))
NEW = TimestampPair(utc(2020, 1, 1), utc(2020, 1, 2))


class ChangeLoggerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.logger = ChangeLogger(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_creates_meta_folder_with_csv_header(self) -> None:
        csv_text = (self.root / ".metaedit" / "changes.csv").read_text(encoding="utf-8")
        self.assertTrue(csv_text.startswith("batch_id,src,dst,old_created"))
        self.assertEqual(self.logger.list_batches(), [])

    def test_batch_round_trips_through_json(self) -> None:
        entry = ChangeLogEntry("20240101-120000", DOCS / "draft.txt", DOCS / "final.txt", OLD, NEW, datetime(2024, 1, 1, 12))
        self.logger.write_batch([entry])

        self.assertEqual(self.logger.list_batches(), ["20240101-120000"])
        self.assertEqual(self.logger.load_batch("20240101-120000"), [entry])

    def test_batches_listed_newest_first(self) -> None:
        for batch_id in ("20240101-120000", "20240301-080000", "20240201-000000"):
            self.logger.write_batch([ChangeLogEntry(batch_id, DOCS / "a", DOCS / "a", OLD, NEW, datetime(2024, 1, 1))])
        self.assertEqual(self.logger.list_batches(), ["20240301-080000", "20240201-000000", "20240101-120000"])

    def test_empty_batch_and_unknown_batch(self) -> None:
        self.logger.write_batch([])
        self.assertEqual(self.logger.list_batches(), [])
        self.assertEqual(self.logger.load_batch("nope"), [])

    def test_only_successful_outcomes_are_logged(self) -> None:
        ok = BatchOutcome(FileTarget(DOCS / "b.txt"), True, original_path=DOCS / "a.txt", previous=OLD, applied=NEW)
        failed = BatchOutcome(FileTarget(DOCS / "c.txt"), False, "boom", original_path=DOCS / "c.txt", previous=OLD)

        entries = entries_from_outcomes("x", [ok, failed])

        self.assertEqual(len(entries), 1)
        self.assertEqual((entries[0].src, entries[0].dst), (DOCS / "a.txt", DOCS / "b.txt"))


class UndoManagerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.logger = ChangeLogger(Path(self._tmp.name))
        self.fs = MemoryFileAttributes()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_undo_restores_name_and_dates(self) -> None:
        draft = self.fs.add(DOCS / "draft.txt", OLD)
        target = FileTarget(draft)
        MetadataUpdater(self.fs).update(target, "final", NEW)
        outcome = BatchOutcome(target, True, original_path=draft, previous=OLD, applied=NEW)
        self.logger.write_batch(entries_from_outcomes("b1", [outcome]))

        results = UndoManager(self.logger, MetadataUpdater(self.fs)).undo_batch("b1")

        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].success)
        self.assertEqual(results[0].target.path, draft)
        self.assertEqual(self.fs.read(draft), OLD)
        self.assertFalse(self.fs.exists(DOCS / "final.txt"))

    def test_undo_of_a_bulk_batch(self) -> None:
        before = {}
        for i, name in enumerate(["a.jpg", "b.jpg"], 1):
            before[name] = TimestampPair(utc(2018, i, 1), utc(2022, i, 1))
            self.fs.add(DOCS / name, before[name])
        outcomes = BatchProcessor(MetadataUpdater(self.fs)).run_batch(
            [FileTarget(DOCS / n) for n in before], BulkDatePolicy.MODIFICATION_FROM_CREATION
        )
        self.logger.write_batch(entries_from_outcomes("bulk", outcomes))

        results = UndoManager(self.logger, MetadataUpdater(self.fs)).undo_batch("bulk")

        self.assertEqual([r.target.path.name for r in results], ["b.jpg", "a.jpg"])
        for name, pair in before.items():
            self.assertEqual(self.fs.read(DOCS / name), pair)

    def test_missing_file_is_reported_and_others_continue(self) -> None:
        self.fs.add(DOCS / "kept.txt", NEW)
        entries = [
            ChangeLogEntry("b2", DOCS / "gone-old.txt", DOCS / "gone.txt", OLD, NEW, datetime(2024, 1, 1)),
            ChangeLogEntry("b2", DOCS / "kept.txt", DOCS / "kept.txt", OLD, NEW, datetime(2024, 1, 1)),
        ]
        self.logger.write_batch(entries)

        results = UndoManager(self.logger, MetadataUpdater(self.fs)).undo_batch("b2")

        self.assertEqual([r.success for r in results], [True, False])
        self.assertEqual(results[1].error, "missing file for undo")
        self.assertEqual(self.fs.read(DOCS / "kept.txt"), OLD)

    def test_collision_on_undo_becomes_failed_outcome(self) -> None:
        self.fs.add(DOCS / "final.txt", NEW)
        self.fs.add(DOCS / "draft.txt", NEW)  # something took the old name
        self.logger.write_batch([ChangeLogEntry("b3", DOCS / "draft.txt", DOCS / "final.txt", OLD, NEW, datetime(2024, 1, 1))])

        results = UndoManager(self.logger, MetadataUpdater(self.fs)).undo_batch("b3")

        self.assertFalse(results[0].success)
        self.assertIn("already exists", results[0].error)
        self.assertEqual(self.fs.read(DOCS / "final.txt"), NEW)

    def test_preview_changes_nothing(self) -> None:
        self.fs.add(DOCS / "final.txt", NEW)
        self.logger.write_batch([ChangeLogEntry("b4", DOCS / "draft.txt", DOCS / "final.txt", OLD, NEW, datetime(2024, 1, 1))])

        results = UndoManager(self.logger, MetadataUpdater(self.fs, dry_run=True)).undo_batch("b4")

        self.assertTrue(results[0].success)
        self.assertEqual(results[0].target.path, DOCS / "draft.txt")
        self.assertTrue(self.fs.exists(DOCS / "final.txt"))
        self.assertEqual(self.fs.read(DOCS / "final.txt"), NEW)


if __name__ == "__main__":
    unittest.main()
