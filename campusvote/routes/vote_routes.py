from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from campusvote.ballot import submit_ballot
from campusvote.eligibility import check_eligibility
from campusvote.errors import Failure
from campusvote.schemas import BallotRequest, BallotResponse, EligibilityOut, VoteOut
from campusvote.security import Identity, get_current_identity
from campusvote.status import get_status
from campusvote.storage_mongo import MongoStorage, get_storage

vote_router = APIRouter(prefix="/votes", tags=["Vote"])


def _failure_response(failure: Failure) -> JSONResponse:
    return JSONResponse(status_code=failure.status_code, content=failure.to_body())


@vote_router.post("", response_model=BallotResponse)
def cast_ballot(
    ballot: BallotRequest,
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    """
    Casts one vote per selected position, all or nothing.
    """
    context = get_status(storage)
    result = submit_ballot(storage, context, identity, ballot.selections)
    if isinstance(result, Failure):
        return _failure_response(result)
    return BallotResponse(message="Votes submitted successfully", votes_submitted=result.votes_submitted)


@vote_router.get("/my-votes")
def my_votes(
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    votes = storage.list_votes_by_student(identity.student_id)
    return {"votes": [VoteOut.model_validate(v.model_dump()).model_dump(by_alias=True, mode="json") for v in votes]}


@vote_router.get("/eligibility/{position_id}", response_model=EligibilityOut, response_model_exclude_none=True)
def eligibility(
    position_id: str,
    identity: Identity = Depends(get_current_identity),
    storage: MongoStorage = Depends(get_storage),
):
    """
    Checks whether the caller may still vote for a position.
    """
    result = check_eligibility(storage, get_status(storage), identity.student_id, position_id)
    if isinstance(result, Failure):
        return EligibilityOut(eligible=False, reason=result.kind.value, message=result.message)
    return EligibilityOut(eligible=True)
