from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime

ElectionStatus = Literal["upcoming", "active", "closed"]


class Election(BaseModel):
    id: str
    status: ElectionStatus = "upcoming"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class Position(BaseModel):
    id: str
    title: str = Field(..., examples=["President"])
    order: int = 0


class Candidate(BaseModel):
    id: str
    position_id: str
    name: str
    photo_url: Optional[str] = None
    manifesto: Optional[str] = None
