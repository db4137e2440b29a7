"""User Pydantic schemas for request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserBase(BaseModel):
    """Base user schema."""

    username: str
    email: EmailStr


class UserCreate(UserBase):
    """Schema for creating a new user."""

    password: str


class UserResponse(UserBase):
    """Schema for user response."""

    id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    """Schema for login request. Either email or username identifies the account."""

    email: str | None = None
    username: str | None = None
    password: str


class AuthResponse(BaseModel):
    """Token plus the profile it was issued for."""

    token: str
    user: UserResponse


class UserEnvelope(BaseModel):
    user: UserResponse


class TokenData(BaseModel):
    """Schema for token payload data."""

    user_id: int
    username: str | None = None


class TokenVerifiedUser(BaseModel):
    id: int
    username: str | None = None


class TokenVerifyResponse(BaseModel):
    message: str
    user: TokenVerifiedUser


class TokenResponse(BaseModel):
    token: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    """Schema for confirming a password reset."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    new_password: str = Field(alias="newPassword")


class MessageResponse(BaseModel):
    message: str
