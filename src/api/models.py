"""Pydantic models for API request/response."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from domain.model.project import Project
from domain.model.user import User


# ── Auth requests ────────────────────────────────────────


class SignupRequest(BaseModel):
    """Request model for email/password registration."""
    email: EmailStr
    password: str
    name: Optional[str] = None


class SigninRequest(BaseModel):
    """Request model for email/password sign-in.

    email is a plain string so malformed addresses get the same 401 as
    unknown ones.
    """
    email: str
    password: str


class FederatedLoginRequest(BaseModel):
    """Identity asserted by an external provider (already verified upstream)."""
    model_config = ConfigDict(populate_by_name=True)

    id_token: Optional[str] = Field(None, alias="idToken")
    email: EmailStr
    name: Optional[str] = None
    photo_url: Optional[str] = Field(None, alias="photoURL")


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    new_password: str = Field(..., alias="newPassword")


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword")


# ── Auth responses ───────────────────────────────────────


class UserResponse(BaseModel):
    """Public view of a user; never includes the password hash."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    name: str
    photo_url: Optional[str] = Field(None, serialization_alias="photoURL")
    provider: str
    created_at: datetime
    updated_at: datetime
    last_login: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            photo_url=user.photo_url,
            provider=user.provider.value,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )


class AuthResponse(BaseModel):
    """Response model for signup, signin and federated login."""
    success: bool = True
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


# ── Projects ─────────────────────────────────────────────


class ProjectResponse(BaseModel):
    id: str
    data: dict
    updated_at: datetime

    @classmethod
    def from_domain(cls, project: Project) -> "ProjectResponse":
        return cls(id=project.id, data=project.data, updated_at=project.updated_at)


class ProjectListResponse(BaseModel):
    projects: list[ProjectResponse]


class ProjectSavedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    project_id: str = Field(..., serialization_alias="projectId")
