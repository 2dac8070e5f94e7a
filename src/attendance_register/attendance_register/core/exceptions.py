class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateRollError(ValidationError):
    """Raised when a roll number is already held by another student."""

    def __init__(self, roll: str):
        super().__init__(f"Roll already exists: {roll!r}. Choose a unique roll/ID.")
        self.roll = roll


class StudentNotFoundError(ValidationError):
    """Raised when an edit targets a roll that is not on the roster."""

    def __init__(self, roll: str):
        super().__init__(f"No student with roll {roll!r}")
        self.roll = roll


class InvalidBackupError(ValidationError):
    """Raised when an imported backup document cannot be loaded."""


class MalformedStorageDataError(DomainError):
    """Persisted data could not be parsed; the table was reset to empty.

    Never raised out of ``RegisterStore.load``; collected as a startup notice.
    """

    def __init__(self, key: str, reason: str):
        super().__init__(f"Stored data under {key!r} is unreadable ({reason}); starting empty")
        self.key = key
        self.reason = reason


class StorageWriteError(DomainError):
    """Raised when persisting to storage fails. In-memory state is kept."""


class RegisterInvariantError(DomainError):
    """Raised when the register is found in a state materialization rules out."""
