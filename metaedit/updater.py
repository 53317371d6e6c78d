from .attributes import FileAttributes
from .errors import AlreadyExistsError, FilesystemError, ValidationError
from .models import FileTarget, TimestampPair
from .validator import NameValidator


class MetadataUpdater:
    """Renames a file and rewrites its timestamps as one operation.

    The rename goes first because it is the only step that can collide with
    another entry. The timestamp write comes last. If it fails after a
    committed rename, the error says so and the rename is not rolled back.
    """

    def __init__(self, attributes: FileAttributes, validator: NameValidator | None = None,
                 dry_run: bool = False):
        self.attributes = attributes
        self.validator = validator or NameValidator()
        self.dry_run = dry_run

    def update(self, target: FileTarget, new_base_name: str, timestamps: TimestampPair) -> FileTarget:
        result = self.validator.validate(new_base_name)
        if not result.valid:
            raise ValidationError(result.error_message)
        if not timestamps.is_ordered():
            raise ValidationError("creation date after modification date")

        current = target.path
        candidate = current.parent / target.file_name_for(new_base_name)
        renamed = candidate != current

        if renamed and self.attributes.exists(candidate):
            raise AlreadyExistsError(candidate.name)

        if self.dry_run:
            return FileTarget(candidate)

        if renamed:
            self.attributes.move(current, candidate)
            target.path = candidate

        try:
            self.attributes.write(target.path, timestamps)
        except FilesystemError as e:
            if not renamed:
                raise
            raise FilesystemError(
                f"Renamed {current.name} to {candidate.name}, but timestamps were not updated: {e}",
                path=current,
                renamed_to=candidate,
            ) from e
        return target
