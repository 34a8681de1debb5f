"""Shared API dependencies."""
import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from wallmasters.database import get_db
from wallmasters.errors import NotFoundError, TokenInvalidError
from wallmasters.models.user import User
from wallmasters.security import verify_access_token

__all__ = ["get_db", "get_current_user", "get_current_user_id", "get_optional_user_id"]

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Resolve the bearer access token to a user id.

    Expired and invalid tokens both surface as 401.
    """
    if credentials is None:
        raise TokenInvalidError("No token provided")
    try:
        return verify_access_token(credentials.credentials)
    except TokenInvalidError as exc:
        logger.info(f"Rejected access token: {exc.message}")
        raise TokenInvalidError("Invalid token") from exc


def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Like :func:`get_current_user_id` but lets anonymous callers through."""
    if credentials is None:
        return None
    return get_current_user_id(credentials)


def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user
