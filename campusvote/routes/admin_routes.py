import logging

from fastapi import APIRouter, Depends, HTTPException

from campusvote.schemas import ElectionOut, ElectionStatusUpdate
from campusvote.security import AdminIdentity, get_current_admin
from campusvote.storage_mongo import MongoStorage, get_storage

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/admin", tags=["Admin"])


@admin_router.put("/elections/{election_id}/status")
def update_election_status(
    election_id: str,
    update: ElectionStatusUpdate,
    admin: AdminIdentity = Depends(get_current_admin),
    storage: MongoStorage = Depends(get_storage),
):
    """
    Moves an election to upcoming, active or closed.
    """
    if not storage.update_election_status(election_id, update.status):
        raise HTTPException(status_code=404, detail="Election not found")
    logger.info(f"Admin {admin.admin_id} set election {election_id} to {update.status}")
    election = storage.get_election_by_id(election_id)
    return {"election": ElectionOut.model_validate(election.model_dump()).model_dump(by_alias=True, mode="json")}
