"""Exception hierarchy for session orchestration."""

from __future__ import annotations

from pathlib import Path


class SessionError(Exception):
    """Base exception for all session errors."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnclassifiedCategory(SessionError):
    """Raised when a topic category has no workspace strategy mapping."""

    def __init__(self, category: str, topic_id: str | None = None) -> None:
        self.category = category
        self.topic_id = topic_id
        message = f"No workspace strategy for category '{category}'"
        if topic_id:
            message += f" (topic: {topic_id})"
        super().__init__(message, {"category": category, "topic_id": topic_id})


class SessionIOError(SessionError):
    """Raised when the ledger, catalog, lessons or workspace cannot be read or written."""

    def __init__(self, operation: str, path: Path | str, cause: OSError | UnicodeError | None = None) -> None:
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        message = f"Could not {operation}: {path}"
        if cause is not None:
            message += f" ({getattr(cause, 'strerror', None) or cause})"
        details: dict[str, object] = {"operation": operation, "path": str(path)}
        if cause is not None:
            details["cause"] = str(cause)
        super().__init__(message, details)


class CatalogError(SessionError, ValueError):
    """Raised when the curriculum catalog is malformed."""

    def __init__(self, message: str, source: Path | str | None = None) -> None:
        self.source = source
        if source is not None:
            message = f"{source}: {message}"
        super().__init__(message, {"source": str(source) if source is not None else None})


class SessionStateError(SessionError):
    """Raised when a session operation is invoked from the wrong state."""

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while session is {state}", {"operation": operation, "state": state})


class StaleLedgerReference(SessionError):
    """A ledger entry whose topic id is not in the catalog.

    Collected and logged as a warning; resolution simply ignores the id.
    """

    def __init__(self, topic_id: str) -> None:
        self.topic_id = topic_id
        super().__init__(f"Ledger references unknown topic '{topic_id}'", {"topic_id": topic_id})
