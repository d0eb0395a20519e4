"""Custom exceptions for the hostel rules engine."""

from pathlib import Path


class RulesEngineError(Exception):
    """Base exception for rules engine errors."""

    pass


class FieldValidationError(RulesEngineError):
    """A single field of an input row failed validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ResolutionError(RulesEngineError):
    """A referenced course, branch, room or occupant could not be resolved."""

    def __init__(self, kind: str, reference: str):
        self.kind = kind
        self.reference = reference
        super().__init__(f"Unknown {kind}: '{reference}'")


class AllocationConflictError(RulesEngineError):
    """A bed or locker is already assigned to another occupant."""

    def __init__(
        self,
        room_number: str,
        bed_number: str | None = None,
        locker_number: str | None = None,
        reason: str | None = None,
    ):
        self.room_number = room_number
        self.bed_number = bed_number
        self.locker_number = locker_number
        self.reason = reason

        parts = [f"room {room_number}"]
        if bed_number:
            parts.append(f"bed {bed_number}")
        if locker_number:
            parts.append(f"locker {locker_number}")
        message = f"Allocation conflict for {', '.join(parts)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InvalidOperationError(RulesEngineError):
    """A workflow operation is not defined for the given state."""

    pass


class ConfigurationError(RulesEngineError):
    """A configuration file is malformed."""

    def __init__(self, path: str | Path | None, message: str):
        self.path = str(path) if path else None
        location = f" in '{self.path}'" if self.path else ""
        super().__init__(f"Invalid configuration{location}: {message}")


class InputFileError(RulesEngineError):
    """An input spreadsheet could not be read."""

    def __init__(self, path: str | Path, message: str):
        self.path = str(path)
        super().__init__(f"Cannot read '{self.path}': {message}")
