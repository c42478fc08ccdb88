"""Error taxonomy for pay statements."""

from __future__ import annotations


class PayStatementError(Exception):
    """Base class for all pay statement errors."""


class ConfigurationError(PayStatementError):
    """Raised when settings cannot produce a usable configuration.

    Not recoverable by retrying; surfaces immediately.
    """


class NotFoundError(PayStatementError):
    """Raised at API/collaborator boundaries when a lookup misses."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class ValidationError(PayStatementError):
    """Raised when a statement cannot be assembled or saved."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class CollaboratorError(PayStatementError):
    """Raised when a directory, store, renderer or uploader fails."""

    def __init__(self, collaborator: str, message: str):
        self.collaborator = collaborator
        self.message = message
        super().__init__(f"{collaborator}: {message}")
