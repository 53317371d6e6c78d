import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from .defaults import META_DIR_NAME
from .models import BatchOutcome, ChangeLogEntry, TimestampPair

HEADER = ["batch_id", "src", "dst", "old_created", "old_modified", "new_created", "new_modified", "timestamp"]


def new_batch_id() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


def entries_from_outcomes(batch_id: str, outcomes: Iterable[BatchOutcome]) -> List[ChangeLogEntry]:
    """Log entries for the outcomes that actually changed something."""
    now = datetime.now()
    return [
        ChangeLogEntry(batch_id, o.original_path, o.target.path, o.previous, o.applied, now)
        for o in outcomes
        if o.success and o.applied is not None
    ]


class ChangeLogger:
    """Append-only log of metadata changes. Also writes a JSON file per batch for undo."""
    def __init__(self, root: Path):
        self.root = root
        self.meta_dir = self.root / META_DIR_NAME
        self.meta_dir.mkdir(parents=True, exist_ok=True)
        self.csv_path = self.meta_dir / "changes.csv"

        if not self.csv_path.exists():
            with self.csv_path.open("w", newline="", encoding="utf-8") as f:
                csv.writer(f).writerow(HEADER)

    def write_batch(self, entries: Iterable[ChangeLogEntry]) -> None:
        entries = list(entries)
        if not entries:
            return

        with self.csv_path.open("a", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            for e in entries:
                writer.writerow([
                    e.batch_id,
                    str(e.src),
                    str(e.dst),
                    e.previous.created.isoformat(),
                    e.previous.modified.isoformat(),
                    e.applied.created.isoformat(),
                    e.applied.modified.isoformat(),
                    e.timestamp.isoformat(),
                ])

        batch_file = self.meta_dir / f"{entries[0].batch_id}.json"
        data = [
            {
                "src": str(e.src),
                "dst": str(e.dst),
                "previous": {"created": e.previous.created.isoformat(), "modified": e.previous.modified.isoformat()},
                "applied": {"created": e.applied.created.isoformat(), "modified": e.applied.modified.isoformat()},
                "timestamp": e.timestamp.isoformat(),
            }
            for e in entries
        ]
        batch_file.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def list_batches(self) -> List[str]:
        """Return batch ids sorted newest→oldest."""
        ids = []
        with self.csv_path.open("r", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                ids.append(row["batch_id"])
        return sorted(set(ids), reverse=True)

    def load_batch(self, batch_id: str) -> List[ChangeLogEntry]:
        path = self.meta_dir / f"{batch_id}.json"
        if not path.exists():
            return []
        raw = json.loads(path.read_text(encoding="utf-8"))
        return [
            ChangeLogEntry(
                batch_id=batch_id,
                src=Path(item["src"]),
                dst=Path(item["dst"]),
                previous=_pair(item["previous"]),
                applied=_pair(item["applied"]),
                timestamp=datetime.fromisoformat(item["timestamp"]),
            )
            for item in raw
        ]


def _pair(raw: dict) -> TimestampPair:
    return TimestampPair(
        created=datetime.fromisoformat(raw["created"]),
        modified=datetime.fromisoformat(raw["modified"]),
    )
