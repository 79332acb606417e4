from pydantic import BaseModel
from datetime import datetime


class Vote(BaseModel):
    id: str
    student_id: str
    position_id: str
    candidate_id: str
    ballot_id: str
    committed: bool = True
    created_at: datetime
