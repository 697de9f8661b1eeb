"""Authentication routes: registration, password login, logout, user admin."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from eventdesk.config.settings import Settings
from eventdesk.models.api import CreateUserRequest, LoginRequest, RegisterRequest, UserResponse
from eventdesk.models.database import User
from eventdesk.web.auth.passwords import hash_password, verify_password
from eventdesk.web.auth.rbac import require_admin
from eventdesk.web.auth.session import CurrentSession, SessionAuth, get_session_auth, require_auth
from eventdesk.web.dependencies import Repositories, get_app_settings, get_repos
from eventdesk.web.tenant_context import Principal

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/api/auth/register", status_code=201, response_model=UserResponse)
async def register(body: RegisterRequest, repos: Repositories = Depends(get_repos)) -> User:
    """Self-registration. The first account becomes admin, later ones couples."""
    user = await repos.users.register(
        username=body.username,
        password_hash=hash_password(body.password),
        name=body.name,
        email=body.email,
    )
    logger.info("user_registered", user_id=user.id, role=user.role)
    return user


@router.post("/api/auth/login", response_model=UserResponse)
async def login(
    body: LoginRequest,
    response: Response,
    repos: Repositories = Depends(get_repos),
    auth: SessionAuth = Depends(get_session_auth),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """Create a session via username/password."""
    if not body.username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password required")

    user = await repos.users.get_by_username(body.username)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.warning("login_failed", username=body.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    session = await auth.create_session(user)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
        max_age=settings.session_max_age,
    )
    logger.info("user_logged_in", user_id=user.id, username=user.username)
    return user


@router.post("/api/auth/logout")
async def logout(
    request: Request,
    response: Response,
    auth: SessionAuth = Depends(get_session_auth),
    settings: Settings = Depends(get_app_settings),
) -> dict[str, str]:
    """Destroy the current session, if any."""
    token = request.cookies.get(settings.session_cookie_name)
    if token:
        await auth.destroy_session(token)
    response.delete_cookie(settings.session_cookie_name)
    return {"status": "ok"}


@router.get("/api/auth/user")
async def current_user(
    session: CurrentSession = Depends(require_auth),
    repos: Repositories = Depends(get_repos),
) -> dict[str, Any]:
    user = await repos.users.get_by_id(session.data.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    payload = UserResponse.model_validate(user).model_dump(by_alias=True)
    payload["currentEventId"] = session.data.current_event_id
    return payload


@router.post("/api/users", status_code=201, response_model=UserResponse)
async def create_user(
    body: CreateUserRequest,
    admin: Principal = Depends(require_admin),
    repos: Repositories = Depends(get_repos),
) -> User:
    """Create a user with an explicit role (admin only)."""
    user = await repos.users.create(
        username=body.username,
        password_hash=hash_password(body.password),
        role=body.role,
        name=body.name,
        email=body.email,
    )
    logger.info("user_created_by_admin", user_id=user.id, admin_id=admin.user_id)
    return user
