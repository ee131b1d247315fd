"""
User Endpoints
HTTP API for registration, login and account management.
"""

from fastapi import APIRouter, Depends, status

from blog_api.api.deps import get_current_identity, get_user_service
from blog_api.core.responses import envelope
from blog_api.schemas.user import (
    UserRegister,
    UserLogin,
    PasswordChange,
    PasswordReset,
    ProfileUpdate,
    TokenIdentity,
)
from blog_api.services.user_service import UserService

# ============================================================
# Router Setup
# ============================================================

router = APIRouter(tags=["Users"])


@router.get("/test-api")
async def test_api():
    """Check that the server answers and the API key is accepted."""
    return envelope(message="Server is running")


# ============================================================
# Registration Endpoint
# ============================================================

@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Signup successful"},
        400: {"description": "Validation failed"},
        409: {"description": "Email, username or phone already exists"},
    }
)
async def register(
    user_data: UserRegister,
    user_service: UserService = Depends(get_user_service)
):
    """
    Register a new user account.

    Send ``social_id`` instead of ``password`` for Google / Facebook sign-ups.
    """
    user = await user_service.register(user_data)
    return envelope(
        message="Signup successful",
        data=user,
        status_code=status.HTTP_201_CREATED,
    )


# ============================================================
# Login Endpoint
# ============================================================
@router.post(
    "/login",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
    }
)
async def login(
    login_data: UserLogin,
    user_service: UserService = Depends(get_user_service)
):
    """
    Authenticate with email or phone and get an access token.

    - **login_email_phone**: Registered email address or phone number
    - **password**: Account password (not needed with ``social_id``)
    """
    data = await user_service.login(login_data)
    return envelope(message="Login successful", data=data)


# ============================================================
# Logout Endpoint
# ============================================================
@router.post("/logout")
async def logout(
    identity: TokenIdentity = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service)
):
    await user_service.logout(identity.id)
    return envelope(message="Logout successful")


# ============================================================
# Password Endpoints
# ============================================================
@router.post("/forgot-password")
async def forgot_password(
    data: PasswordChange,
    identity: TokenIdentity = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service)
):
    """Change the password. The old password must be supplied."""
    await user_service.change_password(identity.id, data)
    return envelope(message="Password changed successfully")


@router.post("/reset-password")
async def reset_password(
    data: PasswordReset,
    identity: TokenIdentity = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service)
):
    """Set a new password. Only allowed while logged in with a normal account."""
    await user_service.reset_password(identity.id, data)
    return envelope(message="Password reset successful")


# ============================================================
# Profile Endpoint
# ============================================================
@router.post("/edit-profile")
async def edit_profile(
    data: ProfileUpdate,
    identity: TokenIdentity = Depends(get_current_identity),
    user_service: UserService = Depends(get_user_service)
):
    user = await user_service.edit_profile(identity.id, data)
    return envelope(message="Profile updated successfully", data=user)
