"""Password hashing and the access/refresh token pair.

Access tokens are short-lived and never stored. Refresh tokens are long-lived,
signed with a different secret, and only honoured while they match the value
stored on the user row, so overwriting that value revokes every copy in the
wild.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
import secrets
import uuid

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from wallmasters.config import get_settings
from wallmasters.errors import TokenExpiredError, TokenInvalidError
from wallmasters.models.user import User

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


def _encode(user_id: str, token_type: str, secret: str, lifetime: timedelta) -> str:
    settings = get_settings()
    payload = {
        "sub": user_id,
        "type": token_type,
        "jti": str(uuid.uuid4()),
        "exp": datetime.utcnow() + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return _encode(user_id, ACCESS_TOKEN_TYPE, settings.jwt_secret, lifetime)


def create_refresh_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT refresh token."""
    settings = get_settings()
    lifetime = expires_delta or timedelta(days=settings.refresh_token_expire_days)
    return _encode(user_id, REFRESH_TOKEN_TYPE, settings.jwt_refresh_secret, lifetime)


def issue_token_pair(user_id: str) -> TokenPair:
    """Mint a fresh access/refresh pair for ``user_id``.

    The caller must persist ``refresh_token`` on the user before handing it
    out; see :func:`issue_session`.
    """
    return TokenPair(
        access_token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
    )


def verify_token(token: str, secret: str, expected_type: str = ACCESS_TOKEN_TYPE) -> str:
    """Check signature, expiry and token type; return the user id."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise TokenInvalidError() from exc

    if payload.get("type") != expected_type:
        raise TokenInvalidError("Invalid token type")

    user_id = payload.get("sub")
    if not user_id:
        raise TokenInvalidError()
    return user_id


def verify_access_token(token: str) -> str:
    return verify_token(token, get_settings().jwt_secret, ACCESS_TOKEN_TYPE)


def verify_refresh_token(token: str) -> str:
    return verify_token(token, get_settings().jwt_refresh_secret, REFRESH_TOKEN_TYPE)


def issue_session(db: Session, user: User) -> TokenPair:
    """Issue a pair and store its refresh token, replacing any previous one."""
    pair = issue_token_pair(user.id)
    user.refresh_token = pair.refresh_token
    db.commit()
    return pair


def generate_reset_token() -> str:
    """32 random bytes, hex encoded."""
    return secrets.token_hex(32)
