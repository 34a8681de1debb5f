"""Authentication API endpoints."""
from datetime import datetime, timedelta
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wallmasters.api.deps import get_current_user, get_db
from wallmasters.config import get_settings
from wallmasters.errors import (
    BadRequestError,
    InvalidCredentialsError,
    NotFoundError,
    ServerFaultError,
    TokenExpiredError,
    TokenInvalidError,
)
from wallmasters.models.user import User, normalize_email
from wallmasters.schemas.auth import (
    AuthResponse,
    MessageResponse,
    PasswordChange,
    PasswordReset,
    PasswordResetRequest,
    RefreshResponse,
    TokenRefresh,
    UserDetails,
    UserLogin,
    UserRegister,
    UserSummary,
)
from wallmasters.security import (
    generate_reset_token,
    get_password_hash,
    issue_session,
    verify_password,
    verify_refresh_token,
)
from wallmasters.services import mailer

router = APIRouter(tags=["auth"])
settings = get_settings()
logger = logging.getLogger(__name__)


def _find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user and sign them in."""
    if _find_user_by_email(db, user_data.email):
        raise BadRequestError("User already exists")

    user = User(
        name=user_data.name.strip(),
        email=normalize_email(user_data.email),
        password_hash=get_password_hash(user_data.password),
    )
    db.add(user)
    db.flush()

    pair = issue_session(db, user)
    logger.info(f"Registered user {user.id}")

    return AuthResponse(
        message="User registered successfully",
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=UserSummary.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(user_data: UserLogin, db: Session = Depends(get_db)):
    """Login and get tokens. Replaces any session open on another device."""
    user = _find_user_by_email(db, user_data.email)

    if not user or not verify_password(user_data.password, user.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentialsError("Invalid credentials")

    pair = issue_session(db, user)

    return AuthResponse(
        message="Login successful",
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=UserSummary.model_validate(user),
    )


@router.post("/refresh-token", response_model=RefreshResponse)
def refresh_tokens(token_data: TokenRefresh, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new pair, rotating the stored token."""
    presented = token_data.refresh_token
    if not presented:
        raise TokenInvalidError("No refresh token provided")

    try:
        user_id = verify_refresh_token(presented)
    except TokenExpiredError as exc:
        raise TokenExpiredError("Invalid or expired refresh token", status.HTTP_403_FORBIDDEN) from exc
    except TokenInvalidError as exc:
        raise TokenInvalidError("Invalid or expired refresh token", status.HTTP_403_FORBIDDEN) from exc

    # A validly signed token is still refused once it has been rotated out.
    user = db.query(User).filter(User.id == user_id).first()
    if not user or user.refresh_token != presented:
        logger.warning(f"Refresh token not on file for user {user_id}")
        raise TokenInvalidError("Invalid refresh token", status.HTTP_403_FORBIDDEN)

    pair = issue_session(db, user)

    return RefreshResponse(
        success=True,
        token=pair.access_token,
        refresh_token=pair.refresh_token,
        user=UserSummary.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Logout and revoke the stored refresh token."""
    current_user.refresh_token = None
    db.commit()
    return MessageResponse(message="Successfully logged out")


@router.get("/user/details", response_model=UserDetails)
def user_details(current_user: User = Depends(get_current_user)):
    return UserDetails(user_id=current_user.id, name=current_user.name, email=current_user.email)


@router.get("/auth/verify-session", response_model=MessageResponse)
def verify_session(current_user: User = Depends(get_current_user)):
    return MessageResponse(message="Token is valid")


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    password_data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not verify_password(password_data.old_password, current_user.password_hash):
        raise BadRequestError("Incorrect old password")

    current_user.password_hash = get_password_hash(password_data.new_password)
    db.commit()
    logger.info(f"Password changed for user {current_user.id}")
    return MessageResponse(message="Password changed successfully")


@router.post("/request-password-reset", response_model=MessageResponse)
def request_password_reset(request_data: PasswordResetRequest, db: Session = Depends(get_db)):
    """Store a one-hour reset token and mail the reset link.

    A new request supersedes any earlier token.
    """
    user = _find_user_by_email(db, request_data.email)
    if not user:
        raise NotFoundError("User not found.")

    token = generate_reset_token()
    user.reset_token = token
    user.reset_token_expires_at = (
        datetime.utcnow() + timedelta(minutes=settings.reset_token_expire_minutes)
    ).isoformat()
    db.commit()

    if not mailer.send_password_reset_email(user.email, token):
        raise ServerFaultError("Failed to send password reset email.")

    return MessageResponse(message="Password reset link sent to your email.")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(reset_data: PasswordReset, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.reset_token == reset_data.token).first()

    expired = True
    if user and user.reset_token_expires_at:
        try:
            expired = datetime.fromisoformat(user.reset_token_expires_at) <= datetime.utcnow()
        except ValueError:
            expired = True

    if not user or expired:
        raise BadRequestError("Invalid or expired token")

    user.password_hash = get_password_hash(reset_data.password)
    user.reset_token = None
    user.reset_token_expires_at = None
    # Sessions opened with the old password end here.
    user.refresh_token = None
    db.commit()
    logger.info(f"Password reset for user {user.id}")

    return MessageResponse(message="Password has been reset successfully")
