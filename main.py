import time
from pathlib import Path

from metaedit import config
from metaedit.attributes import LocalFileAttributes
from metaedit.batch import BackgroundBatch, BatchProcessor
from metaedit.errors import MetaEditError
from metaedit.logger import ChangeLogger, entries_from_outcomes, new_batch_id
from metaedit.models import BatchOutcome, BulkDatePolicy, FileTarget, QuickAction, TimestampPair
from metaedit.scanner import FolderScanner
from metaedit.undo import UndoManager
from metaedit.updater import MetadataUpdater
from metaedit.utils import ensure_file, ensure_path, format_timestamp, parse_timestamp, pick_choice

POLICY_LABELS = {
    BulkDatePolicy.MODIFICATION_FROM_CREATION: "Modified = Created",
    BulkDatePolicy.CREATION_FROM_MODIFICATION: "Created = Modified",
}
QUICK_ACTION_LABELS = {
    QuickAction.NOW_FOR_BOTH: "Current time for both",
    QuickAction.MODIFIED_FROM_CREATED: "Modified = Created",
    QuickAction.CREATED_FROM_MODIFIED: "Created = Modified",
}
POLL_INTERVAL = 0.1  # seconds

def ask_yes_no(prompt: str) -> bool:
    return input(prompt + " [y/N]: ").strip().lower() == "y"

def log_root() -> Path:
    return Path.home()

def print_outcomes(outcomes, limit: int = 30):
    for o in outcomes[:limit]:
        if o.success:
            print(f"OK    {o.target.path.name}")
        else:
            print(f"FAIL  {o.target.path.name}: {o.error}")
    if len(outcomes) > limit:
        print(f"...and {len(outcomes) - limit} more")

def edit_flow():
    path = ensure_file(input("File to edit: ").strip())
    attributes = LocalFileAttributes()
    target = FileTarget(path)
    current = attributes.read(path)

    print(f"Name:     {path.name}")
    print(f"Created:  {format_timestamp(current.created)}")
    print(f"Modified: {format_timestamp(current.modified)}")

    name = input(f"New name without extension (blank = {target.base_name}): ") or target.base_name
    created_in = input("New creation date, ISO format (blank = keep): ").strip()
    modified_in = input("New modification date, ISO format (blank = keep): ").strip()
    wanted = TimestampPair(
        created=parse_timestamp(created_in) if created_in else current.created,
        modified=parse_timestamp(modified_in) if modified_in else current.modified,
    )

    actions = list(QuickAction)
    for i, a in enumerate(actions, 1):
        print(f"{i}) {QUICK_ACTION_LABELS[a]}")
    action = pick_choice(input("Quick action (blank = none): "), actions, None)
    if action:
        wanted = action.apply(wanted)
    print(f"Dates to write: {format_timestamp(wanted.created)} / {format_timestamp(wanted.modified)}")

    original = target.path
    updater = MetadataUpdater(attributes)
    updater.update(target, name, wanted)

    batch_id = new_batch_id()
    outcome = BatchOutcome(target, True, original_path=original, previous=current, applied=wanted)
    ChangeLogger(log_root()).write_batch(entries_from_outcomes(batch_id, [outcome]))
    print(f"Updated {target.path}. Batch ID: {batch_id}")

def choose_policy() -> BulkDatePolicy:
    default = config.load_policy()
    policies = list(BulkDatePolicy)
    for i, p in enumerate(policies, 1):
        marker = " (default)" if p is default else ""
        print(f"{i}) {POLICY_LABELS[p]}{marker}")
    return pick_choice(input("Policy: "), policies, default)

def bulk_flow():
    last = config.load_last_folder()
    folder_in = input(f"Folder with files (blank = {last or 'none'}): ").strip() or last
    folder = ensure_path(folder_in)
    recursive = ask_yes_no("Include subfolders?")
    policy = choose_policy()
    config.save_last_folder(folder)
    config.save_policy(policy)

    attributes = LocalFileAttributes()
    targets = FolderScanner(folder, recursive=recursive).scan()
    print(f"Found {len(targets)} files.")
    if not targets:
        return

    # Dry run
    preview = BatchProcessor(MetadataUpdater(attributes, dry_run=True)).run_batch(targets, policy)
    print("\n--- DRY RUN --- (first 30 shown)")
    print_outcomes(preview)

    if not ask_yes_no("Apply these dates?"):
        print("Aborted (dry-run only).")
        return

    # Real run on a worker; progress is printed from this thread
    background = BackgroundBatch(BatchProcessor(MetadataUpdater(attributes)))
    background.start(targets, policy)
    result = []
    while not background.poll(
        on_progress=lambda ratio: print(f"\r{int(ratio * 100)}% done", end="", flush=True),
        on_complete=result.extend,
    ):
        time.sleep(POLL_INTERVAL)
    outcomes = result
    print()

    batch_id = new_batch_id()
    entries = entries_from_outcomes(batch_id, outcomes)
    ChangeLogger(log_root()).write_batch(entries)

    failed = [o for o in outcomes if not o.success]
    print(f"\nDone. Updated {len(entries)} of {len(outcomes)} files. Batch ID: {batch_id}")
    if failed:
        print("Failures:")
        print_outcomes(failed)

def undo_flow():
    logger = ChangeLogger(log_root())
    batches = logger.list_batches()
    if not batches:
        print("No batches found.")
        return
    print("Available batches (newest first):")
    for i, b in enumerate(batches, 1):
        print(f"{i}. {b}")
    batch_id = pick_choice(input("Which batch to undo? (number, blank=1): "), batches, batches[0])

    attributes = LocalFileAttributes()
    previews = UndoManager(logger, MetadataUpdater(attributes, dry_run=True)).undo_batch(batch_id)
    print("\n--- UNDO DRY RUN ---")
    print_outcomes(previews)
    if not ask_yes_no("Perform undo?"):
        print("Undo cancelled.")
        return

    done = UndoManager(logger, MetadataUpdater(attributes)).undo_batch(batch_id)
    restored = sum(1 for r in done if r.success)
    print(f"Undo complete. Restored {restored} files.")
    print_outcomes([r for r in done if not r.success])

def main():
    print("1) Edit one file")
    print("2) Bulk dates")
    print("3) Undo a batch")
    action = input("Select: ").strip()
    try:
        if action == "2":
            bulk_flow()
        elif action == "3":
            undo_flow()
        else:
            edit_flow()
    except MetaEditError as e:
        print(f"ERROR: {e}")

if __name__ == "__main__":
    main()
