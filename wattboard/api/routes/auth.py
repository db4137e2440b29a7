"""Authentication routes for registration, login, tokens and password reset."""

from fastapi import APIRouter, Depends, status

from wattboard.api.dependencies import get_auth_service, get_current_token
from wattboard.schemas.user import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    TokenData,
    TokenResponse,
    TokenVerifiedUser,
    TokenVerifyResponse,
    UserCreate,
    UserEnvelope,
)
from wattboard.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, auth: AuthService = Depends(get_auth_service)):
    """Register a new user and return a session token."""
    return auth.register(user.email, user.username, user.password)


@router.post("/login", response_model=AuthResponse)
def login(login_data: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Login with email or username and receive a session token."""
    return auth.login(login_data.email or login_data.username, login_data.password)


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    data: ForgotPasswordRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Email a password reset link."""
    auth.request_password_reset(data.email)
    return MessageResponse(message="Password reset email sent")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    data: ResetPasswordRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """Set a new password using the emailed reset token."""
    auth.confirm_password_reset(data.token, data.new_password)
    return MessageResponse(message="Password has been reset successfully")


@router.get("/verify", response_model=TokenVerifyResponse)
def verify(token_data: TokenData = Depends(get_current_token)):
    """Check that the presented token is valid."""
    return TokenVerifyResponse(
        message="Token is valid",
        user=TokenVerifiedUser(id=token_data.user_id, username=token_data.username),
    )


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_token(
    token_data: TokenData = Depends(get_current_token),
    auth: AuthService = Depends(get_auth_service),
):
    """Exchange a valid token for one with a fresh expiry."""
    return TokenResponse(token=auth.refresh_token(token_data))


@router.get("/user", response_model=UserEnvelope)
def get_user(
    token_data: TokenData = Depends(get_current_token),
    auth: AuthService = Depends(get_auth_service),
):
    """Get the profile of the signed-in user."""
    return UserEnvelope(user=auth.get_profile(token_data.user_id))
