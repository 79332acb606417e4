from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Cookie, Header, HTTPException
from jose import JWTError, jwt
from passlib.context import CryptContext

from campusvote import config

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

STUDENT = "student"
ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    student_id: str
    kind: str = STUDENT

    @property
    def subject(self) -> str:
        return self.student_id


@dataclass(frozen=True)
class AdminIdentity:
    admin_id: str
    kind: str = ADMIN

    @property
    def subject(self) -> str:
        return self.admin_id


# Hash a password
def hash_password(password: str) -> str:
    return pwd_context.hash(password)


# Verify a plain password against a hash
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# Create JWT access token
def create_access_token(identity, expires_minutes: int = config.ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": identity.subject,
        "type": identity.kind,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def _decode_subject(token: str, kind: str) -> Optional[str]:
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not subject or payload.get("type") != kind:
        return None
    return subject


def verify_token(token: str) -> Optional[Identity]:
    """Decode a token; None when it is malformed, expired or not a student token."""
    subject = _decode_subject(token, STUDENT)
    return Identity(student_id=subject) if subject else None


def verify_admin_token(token: str) -> Optional[AdminIdentity]:
    subject = _decode_subject(token, ADMIN)
    return AdminIdentity(admin_id=subject) if subject else None


def _extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return cookie_token


def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    token: Optional[str] = Cookie(default=None),
) -> Identity:
    """FastAPI dependency: bearer header first, then the ``token`` cookie."""
    raw = _extract_token(authorization, token)
    if not raw:
        raise HTTPException(status_code=401, detail="No token provided")
    identity = verify_token(raw)
    if identity is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return identity


def get_current_admin(
    authorization: Optional[str] = Header(default=None),
    token: Optional[str] = Cookie(default=None),
) -> AdminIdentity:
    """FastAPI dependency for admin-only routes; a valid student token gets 403."""
    raw = _extract_token(authorization, token)
    if not raw:
        raise HTTPException(status_code=401, detail="No token provided")
    admin = verify_admin_token(raw)
    if admin is not None:
        return admin
    if verify_token(raw) is not None:
        raise HTTPException(status_code=403, detail="Admin access required")
    raise HTTPException(status_code=401, detail="Invalid or expired token")
