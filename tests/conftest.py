from types import SimpleNamespace

import mongomock
import pytest
from fastapi.testclient import TestClient

from campusvote.main import app
from campusvote.schemas import Selection
from campusvote.security import AdminIdentity, Identity, create_access_token, hash_password
from campusvote.storage_mongo import MongoStorage, get_storage

PASSWORD = "correct horse"


@pytest.fixture
def storage():
    client = mongomock.MongoClient()
    return MongoStorage(client["campus_vote_test"], client=client)


@pytest.fixture
def election(storage):
    return storage.save_election(status="active")


@pytest.fixture
def ballot(storage):
    """Two positions: President (alice, bob) and Secretary (carol, dave)."""
    president = storage.save_position("President", order=0)
    secretary = storage.save_position("Secretary", order=1)
    return SimpleNamespace(
        president=president,
        secretary=secretary,
        alice=storage.save_candidate(president.id, "Alice"),
        bob=storage.save_candidate(president.id, "Bob"),
        carol=storage.save_candidate(secretary.id, "Carol"),
        dave=storage.save_candidate(secretary.id, "Dave"),
    )


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def make_student(storage, password_hash):
    counter = iter(range(1, 1000))

    def _make(full_name="Test Student"):
        return storage.save_student(f"UEB{next(counter):07d}", full_name, password_hash, year="Year 2")
    return _make


@pytest.fixture
def student(make_student):
    return make_student()


@pytest.fixture
def identity(student):
    return Identity(student_id=student.id)


def _selections(*pairs):
    return [Selection(position_id=p.id, candidate_id=c.id) for p, c in pairs]


@pytest.fixture
def pick():
    """pick((position, candidate), ...) -> list of Selection"""
    return _selections


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(student):
    token = create_access_token(Identity(student_id=student.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(storage, password_hash):
    return storage.save_admin("returning-officer", password_hash)


@pytest.fixture
def admin_headers(admin):
    token = create_access_token(AdminIdentity(admin_id=admin.id))
    return {"Authorization": f"Bearer {token}"}
