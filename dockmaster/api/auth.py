"""JWT login/logout/me/change-password and auth dependencies (get_current_user, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from dockmaster.api.deps import AuditLogDep, AuthServiceDep
from dockmaster.core.errors import ForbiddenError, InvalidCredentialsError, UnauthorizedError
from dockmaster.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    UserInfo,
)
from dockmaster.schemas.common import MessageResponse
from dockmaster.services.auth import ADMIN_ROLE

logger = logging.getLogger(__name__)

public_router = APIRouter()
router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: AuthServiceDep,
) -> CurrentUser:
    """Dependency: require a valid Bearer JWT; the caller is also stored on request.state.user."""
    if credentials is None:
        raise UnauthorizedError("Authorization header required")
    claims = auth.validate_token(credentials.credentials)
    user = CurrentUser(username=claims.username, role=claims.role)
    request.state.user = user
    return user


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_admin(current_user: CurrentUserDep) -> CurrentUser:
    """Dependency: require role 'admin'. Raises 403 for anyone else."""
    if current_user.role != ADMIN_ROLE:
        raise ForbiddenError("Admin access required")
    return current_user


@public_router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, auth: AuthServiceDep, audit: AuditLogDep) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT bearer token.
    Include it in the Authorization header as: Bearer <token>
    """
    try:
        user = auth.authenticate(body.username, body.password)
    except InvalidCredentialsError:
        audit.record("warning", "Login failed", {"username": body.username})
        raise
    token, expires_at = auth.issue_token(user)
    logger.info("User logged in", extra={"username": user.username})
    audit.record("info", "User logged in", {"username": user.username})
    return LoginResponse(
        token=token,
        expires_at=expires_at,
        user=UserInfo(username=user.username, role=user.role),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: CurrentUserDep, audit: AuditLogDep) -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    audit.record("info", "User logged out", {"username": current_user.username})
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=CurrentUser)
def me(current_user: CurrentUserDep) -> CurrentUser:
    return current_user


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: CurrentUserDep,
    auth: AuthServiceDep,
    audit: AuditLogDep,
) -> MessageResponse:
    auth.change_password(current_user.username, body.current_password, body.new_password)
    audit.record("info", "Password changed", {"username": current_user.username})
    return MessageResponse(message="Password changed successfully")
