"""Authentication schemas."""
from pydantic import BaseModel, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    """User login request."""

    email: str
    password: str


class TokenRefresh(BaseModel):
    """Token refresh request. A missing token is answered with 401, not 400."""

    refresh_token: str | None = Field(None, alias="refreshToken")

    class Config:
        populate_by_name = True


class UserSummary(BaseModel):
    """User as embedded in auth responses."""

    id: str = Field(..., alias="_id")
    name: str
    email: str

    class Config:
        from_attributes = True
        populate_by_name = True


class AuthResponse(BaseModel):
    """Login/registration response."""

    message: str
    token: str
    refresh_token: str = Field(..., alias="refreshToken")
    user: UserSummary

    class Config:
        populate_by_name = True


class RefreshResponse(BaseModel):
    """Token refresh response."""

    success: bool = True
    token: str
    refresh_token: str = Field(..., alias="refreshToken")
    user: UserSummary

    class Config:
        populate_by_name = True


class UserDetails(BaseModel):
    user_id: str = Field(..., alias="userId")
    name: str
    email: str

    class Config:
        populate_by_name = True


class PasswordResetRequest(BaseModel):
    email: str


class PasswordReset(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PasswordChange(BaseModel):
    old_password: str = Field(..., alias="oldPassword")
    new_password: str = Field(..., alias="newPassword", min_length=1)

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
