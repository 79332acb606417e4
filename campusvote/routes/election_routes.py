from fastapi import APIRouter, Depends

from campusvote.status import get_status
from campusvote.storage_mongo import MongoStorage, get_storage

router = APIRouter(prefix="/election", tags=["Election"])


@router.get("/status")
def election_status(storage: MongoStorage = Depends(get_storage)):
    return get_status(storage).to_dict()
