from campusvote import config
from campusvote.seed import POSITIONS, STUDENTS, seed


def test_seed_is_idempotent(storage, password_hash, monkeypatch):
    monkeypatch.setattr("campusvote.seed.hash_password", lambda password: password_hash)
    seed(storage)
    seed(storage)

    assert storage.get_election().status == "active"
    assert [p.title for p in storage.list_positions()] == list(POSITIONS)
    assert len(storage.list_candidates()) == sum(len(names) for names in POSITIONS.values())
    assert storage.students.count_documents({}) == len(STUDENTS)
    assert storage.admins.count_documents({}) == 1
    assert storage.get_admin_by_username(config.ADMIN_USERNAME) is not None
