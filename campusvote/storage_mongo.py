# storage_mongo.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple
from uuid import uuid4

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import BulkWriteError, DuplicateKeyError, PyMongoError

from campusvote import config
from campusvote.database import MongoConnector
from campusvote.errors import DuplicateVoteError, StorageError
from campusvote.models.admin_model import Admin
from campusvote.models.election_model import Candidate, Election, Position
from campusvote.models.student_model import Student
from campusvote.models.vote_model import Vote

logger = logging.getLogger(__name__)

DUPLICATE_KEY_CODE = 11000


def _new_id() -> str:
    return uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _from_doc(model, doc: Optional[Dict[str, Any]]):
    if doc is None:
        return None
    data = dict(doc)
    data["id"] = data.pop("_id")
    return model.model_validate(data)


def _duplicate_write_error(error: BulkWriteError) -> Optional[Dict[str, Any]]:
    for write_error in error.details.get("writeErrors", []):
        if write_error.get("code") == DUPLICATE_KEY_CODE:
            return write_error
    return None


class MongoStorage:
    """Persistence for students, the election, positions, candidates and votes.

    The compound unique index on ``votes (student_id, position_id)`` is the
    only authority on whether a student already voted for a position. Reads
    that feed results only see votes with ``committed=True``.
    """

    def __init__(self, db, client=None, use_transactions: bool = False):
        self.client = client
        self.db = db
        self.use_transactions = use_transactions
        self.students = db[config.STUDENTS_COLLECTION]
        self.elections = db[config.ELECTIONS_COLLECTION]
        self.positions = db[config.POSITIONS_COLLECTION]
        self.candidates = db[config.CANDIDATES_COLLECTION]
        self.votes = db[config.VOTES_COLLECTION]
        self.admins = db[config.ADMINS_COLLECTION]
        self.ensure_indexes()

    def ensure_indexes(self) -> None:
        self.students.create_index("index_number", unique=True)
        self.admins.create_index("username", unique=True)
        self.candidates.create_index("position_id")
        self.votes.create_index(
            [("student_id", ASCENDING), ("position_id", ASCENDING)],
            unique=True,
            name="one_vote_per_position",
        )
        self.votes.create_index("ballot_id")

    # --- Students ---

    def get_student(self, student_id: str) -> Optional[Student]:
        return _from_doc(Student, self.students.find_one({"_id": student_id}))

    def get_student_by_index_number(self, index_number: str) -> Optional[Student]:
        return _from_doc(Student, self.students.find_one({"index_number": index_number}))

    def save_student(
        self,
        index_number: str,
        full_name: str,
        password_hash: str,
        email: Optional[str] = None,
        year: Optional[str] = None,
    ) -> Optional[Student]:
        """
        Insert a student record.

        Returns:
            The stored student, or None if the index number is taken
        """
        doc = {
            "_id": _new_id(),
            "index_number": index_number,
            "full_name": full_name,
            "password_hash": password_hash,
            "email": email,
            "year": year,
            "has_voted": False,
            "created_at": _now(),
        }
        try:
            self.students.insert_one(doc)
        except DuplicateKeyError:
            logger.warning(f"Student {index_number} already exists")
            return None
        logger.info(f"Student {index_number} saved successfully")
        return _from_doc(Student, doc)

    def refresh_has_voted(self, student_id: str, session=None) -> bool:
        """Recompute the cached ``has_voted`` flag from committed votes."""
        has_voted = self.votes.count_documents(
            {"student_id": student_id, "committed": True}, limit=1, session=session
        ) > 0
        self.students.update_one(
            {"_id": student_id},
            {"$set": {"has_voted": has_voted, "updated_at": _now()}},
            session=session,
        )
        return has_voted

    # --- Admins ---

    def get_admin_by_username(self, username: str) -> Optional[Admin]:
        return _from_doc(Admin, self.admins.find_one({"username": username}))

    def save_admin(self, username: str, password_hash: str) -> Optional[Admin]:
        doc = {"_id": _new_id(), "username": username, "password_hash": password_hash, "created_at": _now()}
        try:
            self.admins.insert_one(doc)
        except DuplicateKeyError:
            logger.warning(f"Admin {username} already exists")
            return None
        logger.info(f"Admin {username} saved successfully")
        return _from_doc(Admin, doc)

    # --- Election ---

    def get_election(self) -> Optional[Election]:
        """The current election is the most recently created one."""
        doc = self.elections.find_one({}, sort=[("created_at", DESCENDING)])
        return _from_doc(Election, doc)

    def save_election(
        self,
        status: str = "upcoming",
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Election:
        doc = {
            "_id": _new_id(),
            "status": status,
            "start_date": start_date,
            "end_date": end_date,
            "created_at": _now(),
        }
        self.elections.insert_one(doc)
        logger.info(f"Election {doc['_id']} created with status {status}")
        return _from_doc(Election, doc)

    def get_election_by_id(self, election_id: str) -> Optional[Election]:
        return _from_doc(Election, self.elections.find_one({"_id": election_id}))

    def update_election_status(self, election_id: str, status: str) -> bool:
        result = self.elections.update_one({"_id": election_id}, {"$set": {"status": status}})
        if result.matched_count:
            logger.info(f"Election {election_id} status set to {status}")
        return result.matched_count > 0

    # --- Positions & candidates ---

    def list_positions(self) -> List[Position]:
        cursor = self.positions.find({}).sort([("order", ASCENDING), ("title", ASCENDING), ("_id", ASCENDING)])
        return [_from_doc(Position, doc) for doc in cursor]

    def get_position(self, position_id: str) -> Optional[Position]:
        return _from_doc(Position, self.positions.find_one({"_id": position_id}))

    def get_position_by_title(self, title: str) -> Optional[Position]:
        return _from_doc(Position, self.positions.find_one({"title": title}))

    def save_position(self, title: str, order: int = 0) -> Position:
        doc = {"_id": _new_id(), "title": title, "order": order}
        self.positions.insert_one(doc)
        return _from_doc(Position, doc)

    def list_candidates(self, position_id: Optional[str] = None) -> List[Candidate]:
        query = {"position_id": position_id} if position_id else {}
        cursor = self.candidates.find(query).sort([("_id", ASCENDING)])
        return [_from_doc(Candidate, doc) for doc in cursor]

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        return _from_doc(Candidate, self.candidates.find_one({"_id": candidate_id}))

    def get_candidates(self, candidate_ids: Iterable[str]) -> Dict[str, Candidate]:
        cursor = self.candidates.find({"_id": {"$in": list(candidate_ids)}})
        return {doc["_id"]: _from_doc(Candidate, doc) for doc in cursor}

    def save_candidate(
        self,
        position_id: str,
        name: str,
        photo_url: Optional[str] = None,
        manifesto: Optional[str] = None,
    ) -> Candidate:
        doc = {
            "_id": _new_id(),
            "position_id": position_id,
            "name": name,
            "photo_url": photo_url,
            "manifesto": manifesto,
        }
        self.candidates.insert_one(doc)
        return _from_doc(Candidate, doc)

    # --- Votes ---

    def voted_position_ids(self, student_id: str, position_ids: Optional[Sequence[str]] = None) -> Set[str]:
        """Positions holding a vote row for the student, pending rows included."""
        query: Dict[str, Any] = {"student_id": student_id}
        if position_ids is not None:
            query["position_id"] = {"$in": list(position_ids)}
        return {doc["position_id"] for doc in self.votes.find(query, {"position_id": 1})}

    def list_votes_by_student(self, student_id: str) -> List[Vote]:
        cursor = self.votes.find({"student_id": student_id, "committed": True}).sort([("created_at", ASCENDING)])
        return [_from_doc(Vote, doc) for doc in cursor]

    def count_votes(self, position_ids: Sequence[str]) -> Dict[str, int]:
        """Committed vote counts keyed by candidate id."""
        pipeline = [
            {"$match": {"position_id": {"$in": list(position_ids)}, "committed": True}},
            {"$group": {"_id": "$candidate_id", "count": {"$sum": 1}}},
        ]
        return {row["_id"]: row["count"] for row in self.votes.aggregate(pipeline)}

    def commit_ballot(self, student_id: str, selections: Sequence[Tuple[str, str]]) -> List[Vote]:
        """
        Insert one vote per (position_id, candidate_id) selection as a single unit.

        Raises:
            DuplicateVoteError: a vote already exists for one of the positions;
                nothing from this ballot is kept
            StorageError: any other database failure; nothing from this ballot is kept
        """
        ballot_id = _new_id()
        created_at = _now()
        docs = [
            {
                "_id": _new_id(),
                "student_id": student_id,
                "position_id": position_id,
                "candidate_id": candidate_id,
                "ballot_id": ballot_id,
                "committed": self.use_transactions,
                "created_at": created_at,
            }
            for position_id, candidate_id in selections
        ]
        if self.use_transactions:
            self._commit_in_transaction(student_id, docs)
        else:
            self._commit_two_phase(student_id, ballot_id, docs)
        logger.info(f"Ballot {ballot_id} committed for student {student_id} ({len(docs)} votes)")
        for doc in docs:
            doc["committed"] = True
        return [_from_doc(Vote, doc) for doc in docs]

    def _commit_in_transaction(self, student_id: str, docs: List[Dict[str, Any]]) -> None:
        def write(session):
            self.votes.insert_many(docs, ordered=True, session=session)
            self.refresh_has_voted(student_id, session=session)

        # with_transaction retries on TransientTransactionError, so a WriteConflict
        # with a concurrent ballot is replayed and then surfaces as a duplicate key.
        with self.client.start_session() as session:
            try:
                session.with_transaction(write)
            except BulkWriteError as e:
                self._raise_insert_error(student_id, e)
            except PyMongoError as e:
                logger.error(f"Ballot transaction failed for student {student_id}: {e}")
                raise StorageError("Ballot transaction failed") from e

    def _commit_two_phase(self, student_id: str, ballot_id: str, docs: List[Dict[str, Any]]) -> None:
        # Rows go in as pending so readers never see half a ballot; they still
        # hold the unique (student_id, position_id) slot while pending.
        try:
            self.votes.insert_many(docs, ordered=True)
        except BulkWriteError as e:
            self._rollback(ballot_id)
            self._raise_insert_error(student_id, e)
        except PyMongoError as e:
            self._rollback(ballot_id)
            logger.error(f"Ballot insert failed for student {student_id}: {e}")
            raise StorageError("Ballot insert failed") from e

        try:
            self.votes.update_many({"ballot_id": ballot_id}, {"$set": {"committed": True}})
        except PyMongoError as e:
            self._rollback(ballot_id)
            logger.error(f"Ballot commit failed for student {student_id}: {e}")
            raise StorageError("Ballot commit failed") from e

        try:
            self.refresh_has_voted(student_id)
        except PyMongoError as e:
            # votes are committed; the flag is only a cache and is refreshed on the next ballot
            logger.error(f"Could not refresh has_voted for student {student_id}: {e}")

    def _rollback(self, ballot_id: str) -> None:
        try:
            result = self.votes.delete_many({"ballot_id": ballot_id})
            if result.deleted_count:
                logger.warning(f"Rolled back {result.deleted_count} votes of ballot {ballot_id}")
        except PyMongoError as e:
            logger.error(f"Rollback of ballot {ballot_id} failed, pending votes remain: {e}")

    def _raise_insert_error(self, student_id: str, error: BulkWriteError) -> None:
        duplicate = _duplicate_write_error(error)
        if duplicate is not None:
            position_id = (duplicate.get("op") or {}).get("position_id")
            logger.warning(f"Student {student_id} already voted for position {position_id}")
            raise DuplicateVoteError(student_id, position_id) from error
        logger.error(f"Ballot insert failed for student {student_id}: {error.details}")
        raise StorageError("Ballot insert failed") from error

    def close(self):
        """Close MongoDB connection"""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")


_storage: Optional[MongoStorage] = None


def get_storage() -> MongoStorage:
    """FastAPI dependency returning the shared storage instance."""
    global _storage
    if _storage is None:
        connector = MongoConnector()
        _storage = MongoStorage(
            connector.db, client=connector.client, use_transactions=config.MONGO_TRANSACTIONS
        )
    return _storage
