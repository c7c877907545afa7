"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class UserInfo(BaseModel):
    """Public view of a user (no password hash)."""

    username: str
    role: str


class LoginResponse(BaseModel):
    """Signed bearer token returned after successful login."""

    token: str = Field(..., description="JWT bearer token")
    expires_at: int = Field(..., description="Expiry as Unix seconds")
    user: UserInfo


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=8, max_length=128)


class CurrentUser(BaseModel):
    """Authenticated caller (username, role) for dependency injection."""

    username: str
    role: str


class StoredUser(BaseModel):
    """A credential record as held by the credential store."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    password_hash: str
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
