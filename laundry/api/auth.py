"""
Authentication API routes for login, registration and logout.

This module provides FastAPI routes for:
- Logging in with a username and password
- Registering a new customer account (which also logs it in)
- Logging out and inspecting the current session

The application keeps a single session, like one browser tab would, so the
routes act on the shared SessionManager rather than on per-client cookies.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from laundry.core.dependencies import get_session_manager
from laundry.domain.errors import UsernameTakenError
from laundry.domain.models import LoginRequest, RegisterRequest, User, ROLE_ADMIN, ROLE_CUSTOMER
from laundry.services.authentication import SessionManager


router = APIRouter()


def public_user(user: User) -> dict:
    """
    Serialize a user for API responses, leaving out the password.
    """
    return user.model_dump(mode="json", by_alias=True, exclude={"password"})


async def require_user(sessions: SessionManager = Depends(get_session_manager)) -> User:
    """
    Dependency returning the logged-in user.

    Raises:
        HTTPException: 401 if nobody is logged in.
    """
    user = sessions.current_user
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in")
    return user


async def require_admin(user: User = Depends(require_user)) -> User:
    """
    Dependency returning the logged-in administrator.

    Raises:
        HTTPException: 403 if the current user is not an administrator.
    """
    if user.role != ROLE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator access required")
    return user


async def require_customer(user: User = Depends(require_user)) -> User:
    """
    Dependency returning the logged-in customer.

    Raises:
        HTTPException: 403 if the current user is not a customer.
    """
    if user.role != ROLE_CUSTOMER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Customer access required")
    return user


@router.post("/login")
async def login(body: LoginRequest, sessions: SessionManager = Depends(get_session_manager)) -> dict:
    """
    Authenticate with a username and password.

    Returns the user on success; any mismatch yields 401 without saying
    which of the two was wrong.
    """
    user = sessions.login(body.username, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    return {"user": public_user(user)}


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest, sessions: SessionManager = Depends(get_session_manager)) -> dict:
    """
    Create a customer account and log it in.

    A username that is already taken yields 409 and creates nothing.
    """
    try:
        user = sessions.register(
            name=body.name,
            email=body.email,
            phone=body.phone,
            username=body.username,
            password=body.password,
        )
    except UsernameTakenError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with that username already exists.",
        )
    return {"user": public_user(user)}


@router.post("/logout")
async def logout(sessions: SessionManager = Depends(get_session_manager)) -> dict:
    sessions.logout()
    return {"status": "ok"}


@router.get("/me")
async def me(user: User = Depends(require_user)) -> dict:
    return {"user": public_user(user)}
