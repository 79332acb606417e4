from fastapi import APIRouter, Depends, HTTPException

from campusvote.schemas import PositionResult, ResultsResponse
from campusvote.storage_mongo import MongoStorage, get_storage
from campusvote.tally import compute_results

result_router = APIRouter(prefix="/results", tags=["Results"])


@result_router.get("", response_model=ResultsResponse)
def get_results(storage: MongoStorage = Depends(get_storage)):
    return ResultsResponse(results=compute_results(storage))


@result_router.get("/position/{position_id}", response_model=PositionResult)
def get_results_by_position(position_id: str, storage: MongoStorage = Depends(get_storage)):
    results = compute_results(storage, position_id)
    if not results:
        raise HTTPException(status_code=404, detail="Position not found")
    return results[0]
