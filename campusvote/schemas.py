from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from campusvote.models.election_model import ElectionStatus


class CamelModel(BaseModel):
    """Snake case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Ballots ---

class Selection(CamelModel):
    position_id: str = Field(..., min_length=1)
    candidate_id: str = Field(..., min_length=1)


class BallotRequest(CamelModel):
    selections: List[Selection]


class BallotResponse(CamelModel):
    message: str
    votes_submitted: int


class VoteOut(CamelModel):
    id: str
    position_id: str
    candidate_id: str
    created_at: datetime


class EligibilityOut(CamelModel):
    eligible: bool
    reason: Optional[str] = None
    message: Optional[str] = None


# --- Results ---

class CandidateResult(CamelModel):
    id: str
    name: str
    photo_url: Optional[str] = None
    manifesto: Optional[str] = None
    votes: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)


class PositionResult(CamelModel):
    position_id: str
    position_title: str
    total_votes: int
    candidates: List[CandidateResult]


class ResultsResponse(CamelModel):
    results: List[PositionResult]


# --- Positions & candidates ---

class PositionOut(CamelModel):
    id: str
    title: str
    order: int = 0


class CandidateOut(CamelModel):
    id: str
    position_id: str
    name: str
    photo_url: Optional[str] = None
    manifesto: Optional[str] = None


# --- Auth ---

class LoginRequest(CamelModel):
    index_number: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class StudentOut(CamelModel):
    id: str
    index_number: str
    full_name: str
    email: Optional[str] = None
    year: Optional[str] = None
    has_voted: bool = False


class LoginResponse(CamelModel):
    message: str
    token: str
    user: StudentOut


class AdminLoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminLoginResponse(CamelModel):
    message: str
    token: str


# --- Admin ---

class ElectionStatusUpdate(CamelModel):
    status: ElectionStatus


class ElectionOut(CamelModel):
    id: str
    status: ElectionStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Mongo hands back naive UTC datetimes
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
