"""Failure values shared by the voting core.

Business-rule failures travel as :class:`Failure` values so every caller has
to look at ``kind``. Storage problems are raised as exceptions by
``storage_mongo`` and turned into ``Failure`` values by the ballot
coordinator.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    ELECTION_NOT_ACTIVE = "election_not_active"
    ALREADY_VOTED = "already_voted"
    DUPLICATE_POSITION = "duplicate_position_in_ballot"
    CANDIDATE_MISMATCH = "candidate_mismatch"
    NOT_FOUND = "not_found"
    STORAGE_FAILURE = "storage_failure"


HTTP_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DUPLICATE_POSITION: 400,
    ErrorKind.CANDIDATE_MISMATCH: 400,
    ErrorKind.ELECTION_NOT_ACTIVE: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_VOTED: 409,
    ErrorKind.STORAGE_FAILURE: 500,
}


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.kind]

    def to_body(self) -> Dict[str, Any]:
        body = {"message": self.message, "error": self.kind.value}
        body.update(self.detail)
        return body


class StorageError(Exception):
    """Raised by the storage layer when MongoDB fails or is unreachable."""


class DuplicateVoteError(StorageError):
    """A vote for the same (student, position) pair already exists."""

    def __init__(self, student_id: str, position_id: Optional[str] = None):
        self.student_id = student_id
        self.position_id = position_id
        super().__init__(f"Duplicate vote for student {student_id} position {position_id}")
