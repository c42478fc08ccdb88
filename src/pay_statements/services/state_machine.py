"""Statement lifecycle state machine with transition validation."""

from __future__ import annotations

from enum import Enum


class StatementStatus(str, Enum):
    """Client-side statement lifecycle states."""

    EMPTY = "empty"
    SEEDED = "seeded"
    EDITING = "editing"
    PREVIEWING = "previewing"
    SAVED = "saved"
    DISCARDED = "discarded"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class StatementStateMachine:
    """State machine for statement lifecycle transitions.

    Allowed transitions:
    - empty → seeded | editing | discarded
    - seeded → editing | previewing | saved | discarded
    - editing → editing | previewing | saved | discarded
    - previewing → editing | saved | discarded
    - saved → editing | previewing (a later save is a new version)
    - discarded is terminal
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        StatementStatus.EMPTY: [
            StatementStatus.SEEDED,
            StatementStatus.EDITING,
            StatementStatus.DISCARDED,
        ],
        StatementStatus.SEEDED: [
            StatementStatus.EDITING,
            StatementStatus.PREVIEWING,
            StatementStatus.SAVED,
            StatementStatus.DISCARDED,
        ],
        StatementStatus.EDITING: [
            StatementStatus.EDITING,
            StatementStatus.PREVIEWING,
            StatementStatus.SAVED,
            StatementStatus.DISCARDED,
        ],
        StatementStatus.PREVIEWING: [
            StatementStatus.EDITING,
            StatementStatus.SAVED,
            StatementStatus.DISCARDED,
        ],
        StatementStatus.SAVED: [StatementStatus.EDITING, StatementStatus.PREVIEWING],
        StatementStatus.DISCARDED: [],  # Terminal state
    }

    # Statuses holding a record that may be rendered or saved
    HAS_RECORD = {
        StatementStatus.SEEDED,
        StatementStatus.EDITING,
        StatementStatus.PREVIEWING,
        StatementStatus.SAVED,
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def has_record(cls, status: str) -> bool:
        return status in cls.HAS_RECORD

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])
