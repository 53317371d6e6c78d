import os

from .defaults import MAX_NAME_LENGTH, RESERVED_CHARACTERS, RESERVED_NAMES
from .models import ValidationResult


class NameValidator:
    """Checks a proposed base name against syntax and reserved-name rules."""

    def validate(self, name: str) -> ValidationResult:
        trimmed = name.strip()
        if not trimmed:
            return ValidationResult(False, "name must not be empty")

        if len(trimmed) > MAX_NAME_LENGTH:
            return ValidationResult(False, f"name too long (max {MAX_NAME_LENGTH} characters)")

        for char in trimmed:
            if char in RESERVED_CHARACTERS:
                shown = "NUL" if char == "\0" else char
                return ValidationResult(False, f"invalid character '{shown}' in name")

        stem = os.path.splitext(trimmed)[0].upper()
        if stem in RESERVED_NAMES:
            return ValidationResult(False, f"'{stem}' is a reserved name")

        if trimmed == ".":
            return ValidationResult(False, "name must not be a single dot")
        if trimmed == "..":
            return ValidationResult(False, "name must not be '..'")

        if trimmed.endswith(" "):
            return ValidationResult(False, "name must not end with a space")

        return ValidationResult(True)
