import pytest
from fastapi import HTTPException
from jose import jwt

from campusvote import config
from campusvote.security import (
    AdminIdentity,
    Identity,
    create_access_token,
    get_current_admin,
    get_current_identity,
    hash_password,
    verify_admin_token,
    verify_password,
    verify_token,
)


def test_password_round_trip():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_token_identifies_student():
    token = create_access_token(Identity(student_id="abc"))
    assert verify_token(token) == Identity(student_id="abc")


@pytest.mark.parametrize("token", [
    "not-a-token",
    create_access_token(Identity(student_id="abc"), expires_minutes=-1),
    jwt.encode({"sub": "abc", "type": "admin"}, config.SECRET_KEY, algorithm=config.ALGORITHM),
    jwt.encode({"sub": "abc", "type": "student"}, "some-other-key", algorithm=config.ALGORITHM),
])
def test_rejected_tokens(token):
    assert verify_token(token) is None


def test_bearer_header_wins_over_cookie():
    header_token = create_access_token(Identity(student_id="from-header"))
    cookie_token = create_access_token(Identity(student_id="from-cookie"))
    identity = get_current_identity(authorization=f"Bearer {header_token}", token=cookie_token)
    assert identity.student_id == "from-header"
    assert get_current_identity(authorization=None, token=cookie_token).student_id == "from-cookie"


def test_missing_token():
    with pytest.raises(HTTPException) as excinfo:
        get_current_identity(authorization=None, token=None)
    assert excinfo.value.status_code == 401


def test_admin_token_is_not_a_student_token():
    token = create_access_token(AdminIdentity(admin_id="root"))
    assert verify_admin_token(token) == AdminIdentity(admin_id="root")
    assert verify_token(token) is None
    assert verify_admin_token(create_access_token(Identity(student_id="abc"))) is None


def test_student_token_is_forbidden_for_admin_routes():
    token = create_access_token(Identity(student_id="abc"))
    with pytest.raises(HTTPException) as excinfo:
        get_current_admin(authorization=f"Bearer {token}", token=None)
    assert excinfo.value.status_code == 403

    with pytest.raises(HTTPException) as excinfo:
        get_current_admin(authorization="Bearer junk", token=None)
    assert excinfo.value.status_code == 401

    admin_token = create_access_token(AdminIdentity(admin_id="root"))
    assert get_current_admin(authorization=None, token=admin_token).admin_id == "root"
