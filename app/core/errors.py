# app/core/errors.py
from __future__ import annotations


class AttendanceError(Exception):
    """
    Base class for typed failures raised by the attendance engine.

    Routes translate these into HTTP errors with a specific message instead
    of letting them surface as a generic 500.
    """


class MalformedEventError(AttendanceError):
    """
    A raw session record is missing its name or has unusable timestamps.

    Raised per record and absorbed by the normalizer, which skips the record.
    """


class EmptyRosterError(AttendanceError):
    """
    A window required by the lesson scope produced no participants at all.
    """

    def __init__(self, window: str, dropped: int = 0) -> None:
        self.window = window
        self.dropped = dropped
        message = f"No participants found for the {window} session."
        if dropped:
            message += f" {dropped} malformed record(s) were skipped."
        super().__init__(message)


class InvalidMergeError(AttendanceError):
    """
    A merge was rejected: self-merge, or an id that is not in the roster
    (for example a stale selection after a previous merge).
    """


class ParticipantNotFoundError(AttendanceError):
    """
    A roster operation referenced a participant id that is not in the roster.
    """

    def __init__(self, participant_id: str) -> None:
        self.participant_id = participant_id
        super().__init__(f"Participant with id '{participant_id}' not found.")


class InvalidRosterOperationError(AttendanceError):
    """
    A roster edit cannot be applied (blank manual name, move out of range).
    """


class InsufficientDataWarning(UserWarning):
    """
    Lesson hours could not be derived from activity and the static default
    schedule was used instead.
    """
