from fastapi import APIRouter, Depends, HTTPException

from campusvote.schemas import CandidateOut, PositionOut
from campusvote.storage_mongo import MongoStorage, get_storage

position_router = APIRouter(prefix="/positions", tags=["Positions"])
candidate_router = APIRouter(prefix="/candidates", tags=["Candidates"])


def _dump(schema, items):
    return [schema.model_validate(item.model_dump()).model_dump(by_alias=True) for item in items]


@position_router.get("")
def list_positions(storage: MongoStorage = Depends(get_storage)):
    return {"positions": _dump(PositionOut, storage.list_positions())}


@position_router.get("/{position_id}")
def get_position(position_id: str, storage: MongoStorage = Depends(get_storage)):
    position = storage.get_position(position_id)
    if position is None:
        raise HTTPException(status_code=404, detail="Position not found")
    return {"position": _dump(PositionOut, [position])[0]}


@candidate_router.get("")
def list_candidates(storage: MongoStorage = Depends(get_storage)):
    return {"candidates": _dump(CandidateOut, storage.list_candidates())}


@candidate_router.get("/position/{position_id}")
def list_candidates_by_position(position_id: str, storage: MongoStorage = Depends(get_storage)):
    return {"candidates": _dump(CandidateOut, storage.list_candidates(position_id))}


@candidate_router.get("/{candidate_id}")
def get_candidate(candidate_id: str, storage: MongoStorage = Depends(get_storage)):
    candidate = storage.get_candidate(candidate_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    return {"candidate": _dump(CandidateOut, [candidate])[0]}
