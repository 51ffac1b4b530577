from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when no operator is attached to the request."""


class SourceUnavailable(DomainError):
    """A remote directory or event fetch failed (network error, timeout, bad payload)."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source
        self.reason = reason


class PersonNotFound(DomainError):
    """No roster entry matched a scanned or typed code."""

    def __init__(self, searched: str, roster_size: int):
        super().__init__(f"No matching person for {searched!r} ({roster_size} searched)")
        self.searched = searched
        self.roster_size = roster_size


class WriteFailed(DomainError):
    """A guardian-attributed write did not go through."""

    GENERIC_MESSAGE = "Failed to mark attendance"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.GENERIC_MESSAGE)
        self.message = message or self.GENERIC_MESSAGE


class WriteRejected(WriteFailed):
    """The backend answered success=false."""


class WriteNetworkFailure(WriteFailed):
    """The write request itself failed to complete."""


class CommitInFlight(DomainError):
    """A commit for this person is already outstanding."""


class WorkflowStateError(RuntimeError):
    """An impossible workflow transition was attempted (programming error)."""
