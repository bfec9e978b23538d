"""Errors raised by the reconciliation services."""
from hyenescores.store.base import StoreError


class PersistenceError(Exception):
    """A write did not go through. ``message`` is the store's own message."""

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code

    @classmethod
    def from_store_error(cls, operation: str, error: StoreError) -> "PersistenceError":
        return cls(f"{operation}: {error.message}", code=error.code)


class InvalidDocumentError(ValueError):
    """The document to import does not have the expected shape."""


class PartialRenameError(PersistenceError):
    """Some rename propagation targets failed; nothing was rolled back."""

    def __init__(self, failed: dict[str, str], succeeded: list[str]):
        self.failed = failed
        self.succeeded = succeeded
        super().__init__(
            f"Partial rename: {len(failed)} table(s) failed",
            code="partial_rename",
        )

    @property
    def failed_count(self) -> int:
        return len(self.failed)
