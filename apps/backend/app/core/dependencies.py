"""Request dependencies: the database session and the logged-in user."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyCookie
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.constants import UNAUTHORIZED_MESSAGE
from app.core.security import read_session_token
from app.db.session import get_async_session
from app.models.user import User

settings = get_settings()

# auto_error is off so a missing cookie gets the same 401 body as a bad one
session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)

AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]


async def get_current_user(
    token: Annotated[str | None, Depends(session_cookie)],
    session: AsyncSessionDep,
) -> User:
    """
    Resolve the session cookie to a user.

    Raises:
        HTTPException 401: If the cookie is missing, invalid, expired or
            names a user that no longer exists.
    """
    user_id = read_session_token(token) if token else None
    user = await session.get(User, user_id) if user_id else None

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=UNAUTHORIZED_MESSAGE,
        )
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
