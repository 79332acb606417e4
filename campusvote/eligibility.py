"""Per-position eligibility.

Eligibility is decided from vote rows, never from ``Student.has_voted``. The
answer is advisory: the unique index on votes settles races at commit time.
"""
from dataclasses import dataclass
from typing import Union

from campusvote.errors import ErrorKind, Failure
from campusvote.status import ElectionContext


@dataclass(frozen=True)
class Eligible:
    student_id: str
    position_id: str


Ineligible = Failure
EligibilityResult = Union[Eligible, Ineligible]


def election_closed_failure(context: ElectionContext) -> Failure:
    return Failure(
        ErrorKind.ELECTION_NOT_ACTIVE,
        "No active election found. Voting is currently closed.",
        {"status": context.status},
    )


def already_voted_failure(position_id: str) -> Failure:
    return Failure(
        ErrorKind.ALREADY_VOTED,
        "You have already voted for this position",
        {"positionId": position_id},
    )


def check_eligibility(storage, context: ElectionContext, student_id: str, position_id: str) -> EligibilityResult:
    if not context.voting_open:
        return election_closed_failure(context)
    if storage.get_student(student_id) is None:
        return Failure(ErrorKind.NOT_FOUND, "Student not found")
    if storage.get_position(position_id) is None:
        return Failure(ErrorKind.NOT_FOUND, "Position not found", {"positionId": position_id})
    if position_id in storage.voted_position_ids(student_id, [position_id]):
        return already_voted_failure(position_id)
    return Eligible(student_id=student_id, position_id=position_id)
