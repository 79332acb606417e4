from pydantic import BaseModel
from typing import Optional


class Student(BaseModel):
    id: str
    index_number: str
    full_name: str
    password_hash: str
    email: Optional[str] = None
    year: Optional[str] = None  # e.g. "Year 1"
    # cache of "has at least one committed vote", see MongoStorage.refresh_has_voted
    has_voted: bool = False
