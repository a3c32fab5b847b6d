"""
Authentication Routes

POST /auth/register - Create an account, its workspace and default profile
POST /auth/login - Start a session (cookie + bearer token)
POST /auth/logout - Clear the session cookie
GET /auth/me - Current user and workspace
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, Depends, Response, status
from sqlalchemy import func, insert, select

from careerhub.core.config import get_settings
from careerhub.db.postgres import get_db_session, fetch_one
from careerhub.db.tables import users, workspaces, profiles, login_attempts
from careerhub.core.auth import (
    hash_password, verify_password, create_access_token, get_current_user,
    set_session_cookie, clear_session_cookie,
)
from careerhub.services.view_presets import seed_view_presets
from careerhub.utils.dates import utcnow
from careerhub.schemas.schemas import (
    RegisterRequest, LoginRequest, SessionResponse, UserResponse, MessageResponse
)

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _start_session(response: Response, user_id: int, email: str, display_name, workspace_id: int) -> SessionResponse:
    token = create_access_token({"sub": str(user_id), "wid": workspace_id})
    set_session_cookie(response, token)
    return SessionResponse(
        user=UserResponse(user_id=user_id, email=email, display_name=display_name, workspace_id=workspace_id),
        access_token=token,
    )


@router.post("/register", response_model=SessionResponse, status_code=201)
async def register(request: RegisterRequest, response: Response):
    """
    Register a new account.

    Creates the user's workspace, an empty resume profile and the view
    definition presets, then signs the user in.
    """
    email = request.email.lower()
    display_name = request.display_name or email.split("@")[0]
    with get_db_session() as db:
        if fetch_one(db, select(users.c.id).where(users.c.email == email)):
            raise HTTPException(status_code=400, detail="Email already registered")

        user_id = db.execute(
            insert(users).values(email=email, password_hash=hash_password(request.password),
                                 display_name=display_name, is_active=True)
        ).inserted_primary_key[0]
        workspace_id = db.execute(
            insert(workspaces).values(name=f"{display_name}'s workspace", owner_user_id=user_id)
        ).inserted_primary_key[0]
        db.execute(
            insert(profiles).values(workspace_id=workspace_id, full_name=display_name, email=email,
                                    location={}, social_profiles=[])
        )
        seed_view_presets(db, workspace_id)

    logger.info("Registered user %s with workspace %s", user_id, workspace_id)
    return _start_session(response, user_id, email, display_name, workspace_id)


@router.post("/login", response_model=SessionResponse)
async def login(request: LoginRequest, response: Response):
    """
    Login with email and password.

    Repeated failures lock the email out for the configured window.
    """
    email = request.email.lower()
    window_start = utcnow() - timedelta(minutes=settings.login_window_minutes)

    with get_db_session() as db:
        failures = db.execute(
            select(func.count()).select_from(login_attempts).where(
                login_attempts.c.email == email,
                login_attempts.c.success.is_(False),
                login_attempts.c.attempted_at >= window_start,
            )
        ).scalar_one()
        if failures >= settings.login_max_attempts:
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many login attempts")

        user = fetch_one(db, select(users).where(users.c.email == email))
        ok = bool(user) and user["is_active"] and verify_password(request.password, user["password_hash"])
        db.execute(insert(login_attempts).values(email=email, success=ok))
        workspace = None
        if ok:
            workspace = fetch_one(
                db,
                select(workspaces.c.id).where(workspaces.c.owner_user_id == user["id"]).order_by(workspaces.c.id)
            )

    if not ok or not workspace:
        logger.warning("Failed login for %s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    return _start_session(response, user["id"], user["email"], user["display_name"], workspace["id"])


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    clear_session_cookie(response)
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current user info."""
    return UserResponse(**user)
