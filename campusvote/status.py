"""Election status gate: whether voting is currently permitted."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ACTIVE = "active"
UPCOMING = "upcoming"
CLOSED = "closed"


def _utc_iso(value: datetime) -> str:
    # pymongo hands back naive datetimes that are UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


@dataclass(frozen=True)
class ElectionContext:
    status: str = UPCOMING
    election_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @property
    def voting_open(self) -> bool:
        return self.status == ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status}
        if self.start_date is not None:
            data["startDate"] = _utc_iso(self.start_date)
        if self.end_date is not None:
            data["endDate"] = _utc_iso(self.end_date)
        return data


def get_status(storage) -> ElectionContext:
    """Read the current election; no election row reads as ``upcoming``."""
    election = storage.get_election()
    if election is None:
        return ElectionContext()
    return ElectionContext(
        status=election.status,
        election_id=election.id,
        start_date=election.start_date,
        end_date=election.end_date,
    )
