"""Auth API routes."""

import logging

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from app.core.config import get_settings
from app.core.dependencies import AsyncSessionDep, CurrentUser
from app.core.security import create_session_token, hash_password, verify_password
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    CurrentUserResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


def _auth_failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=AuthResponse(success=False, message=message).model_dump(mode="json"),
    )


def _set_session_cookie(response: Response, user: User) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=create_session_token(user.id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSessionDep,
):
    """
    Authenticate a user and start a session.

    Args:
        payload: Login credentials (email, password).
        response: Response the session cookie is set on.
        session: Database session.

    Returns:
        AuthResponse with the user, or 401 if the credentials are invalid.
    """
    result = await session.execute(
        select(User).where(User.email == payload.email)
    )
    user = result.scalar_one_or_none()

    if user is None or not verify_password(payload.password, user.hashed_password):
        logger.info(f"Failed login for {payload.email}")
        return _auth_failure(status.HTTP_401_UNAUTHORIZED, "Invalid email or password")

    _set_session_cookie(response, user)

    return AuthResponse(
        success=True,
        message="Login successful",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    response: Response,
    session: AsyncSessionDep,
):
    """
    Register a new user and start a session.

    Returns:
        AuthResponse with the created user, or 409 if the email is taken.
    """
    result = await session.execute(
        select(User).where(User.email == payload.email)
    )
    if result.scalar_one_or_none() is not None:
        return _auth_failure(status.HTTP_409_CONFLICT, "User already exists")

    user = User(
        email=payload.email,
        hashed_password=hash_password(payload.password),
        name=payload.name or None,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError:
        # Registered concurrently between the lookup and the insert
        await session.rollback()
        return _auth_failure(status.HTTP_409_CONFLICT, "User already exists")
    await session.refresh(user)

    logger.info(f"Registered user {user.id}")
    _set_session_cookie(response, user)

    return AuthResponse(
        success=True,
        message="Registration successful",
        data=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=AuthResponse)
async def logout(response: Response) -> AuthResponse:
    """End the session by clearing the cookie."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return AuthResponse(success=True, message="Logout successful")


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(current_user: CurrentUser) -> CurrentUserResponse:
    """Return the user behind the current session."""
    return CurrentUserResponse(data=UserResponse.model_validate(current_user))
