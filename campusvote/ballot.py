"""Ballot submission.

A ballot is validated completely before anything is written, then committed
as one unit through :meth:`MongoStorage.commit_ballot`. The duplicate-key
signal from the votes index is what finally decides ``already_voted``.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from campusvote import config
from campusvote.eligibility import already_voted_failure, election_closed_failure
from campusvote.errors import DuplicateVoteError, ErrorKind, Failure, StorageError
from campusvote.models.vote_model import Vote
from campusvote.security import Identity
from campusvote.status import ElectionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BallotAccepted:
    votes_submitted: int
    votes: List[Vote] = field(default_factory=list)


BallotResult = Union[BallotAccepted, Failure]


def _validate(storage, context: ElectionContext, student_id: str, selections, require_complete: bool) -> Optional[Failure]:
    if not context.voting_open:
        return election_closed_failure(context)

    if not selections:
        return Failure(ErrorKind.VALIDATION, "At least one selection is required")

    if storage.get_student(student_id) is None:
        return Failure(ErrorKind.NOT_FOUND, "Student not found")

    counts = Counter(s.position_id for s in selections)
    duplicated = sorted(pid for pid, n in counts.items() if n > 1)
    if duplicated:
        return Failure(
            ErrorKind.DUPLICATE_POSITION,
            f"Only one selection per position is allowed: {', '.join(duplicated)}",
            {"positionIds": duplicated},
        )

    positions = {p.id: p for p in storage.list_positions()}
    unknown = [s.position_id for s in selections if s.position_id not in positions]
    if unknown:
        return Failure(
            ErrorKind.NOT_FOUND,
            f"Invalid position IDs: {', '.join(unknown)}",
            {"positionIds": unknown},
        )

    candidates = storage.get_candidates(s.candidate_id for s in selections)
    for selection in selections:
        candidate = candidates.get(selection.candidate_id)
        if candidate is None:
            return Failure(
                ErrorKind.NOT_FOUND,
                f"Invalid candidate ID: {selection.candidate_id}",
                {"candidateId": selection.candidate_id},
            )
        if candidate.position_id != selection.position_id:
            return Failure(
                ErrorKind.CANDIDATE_MISMATCH,
                f"Candidate {selection.candidate_id} does not belong to position {selection.position_id}",
                {"candidateId": selection.candidate_id, "positionId": selection.position_id},
            )

    if require_complete:
        missing = [p for pid, p in positions.items() if pid not in counts]
        if missing:
            return Failure(
                ErrorKind.VALIDATION,
                f"Missing votes for positions: {', '.join(p.title for p in missing)}",
                {"missingPositions": [{"id": p.id, "title": p.title} for p in missing]},
            )

    already = storage.voted_position_ids(student_id, list(counts))
    for selection in selections:
        if selection.position_id in already:
            return already_voted_failure(selection.position_id)
    return None


def submit_ballot(
    storage,
    context: ElectionContext,
    identity: Identity,
    selections: Sequence,
    require_complete: Optional[bool] = None,
) -> BallotResult:
    """
    Validate and commit a ballot for the authenticated student.

    Args:
        storage: MongoStorage
        context: the current election, read once for this request
        identity: the verified caller
        selections: objects with ``position_id`` and ``candidate_id``
        require_complete: override for ``config.REQUIRE_COMPLETE_BALLOT``

    Returns:
        BallotAccepted on success, otherwise a Failure; no votes are kept on failure
    """
    if require_complete is None:
        require_complete = config.REQUIRE_COMPLETE_BALLOT
    student_id = identity.student_id

    failure = _validate(storage, context, student_id, selections, require_complete)
    if failure is not None:
        logger.info(f"Ballot rejected for student {student_id}: {failure.kind.value}")
        return failure

    try:
        votes = storage.commit_ballot(student_id, [(s.position_id, s.candidate_id) for s in selections])
    except DuplicateVoteError as e:
        logger.info(f"Ballot rejected for student {student_id}: already voted for {e.position_id}")
        if e.position_id:
            return already_voted_failure(e.position_id)
        return Failure(ErrorKind.ALREADY_VOTED, "You have already voted for this position")
    except StorageError:
        logger.exception(f"Ballot commit failed for student {student_id}")
        return Failure(ErrorKind.STORAGE_FAILURE, "Failed to submit votes")

    logger.info(f"Ballot accepted for student {student_id}: {len(votes)} positions")
    return BallotAccepted(votes_submitted=len(votes), votes=votes)
