from .models import BulkDatePolicy

# Characters that may not appear anywhere in a file name.
RESERVED_CHARACTERS = frozenset({"/", "\\", ":", "*", '"', "<", ">", "|", "\0"})

# Device names reserved on Windows; refused everywhere.
RESERVED_NAMES = frozenset(
    {"CON", "PRN", "AUX", "NUL"}
    | {f"COM{i}" for i in range(1, 10)}
    | {f"LPT{i}" for i in range(1, 10)}
)

MAX_NAME_LENGTH = 255

META_DIR_NAME = ".metaedit"
DEFAULT_POLICY = BulkDatePolicy.MODIFICATION_FROM_CREATION
