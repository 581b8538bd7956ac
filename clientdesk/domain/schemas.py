"""Pydantic schemas for API request/response."""
from datetime import datetime
from typing import Annotated

from email_validator import validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field


def _check_email(value: str) -> str:
    # Syntax check only; the address is stored and matched exactly as submitted
    validate_email(value, check_deliverability=False)
    return value


Email = Annotated[str, AfterValidator(_check_email)]


# ===== Auth Schemas =====


class UserLoginRequest(BaseModel):
    """User login request."""

    email: str
    password: str


class UserSummary(BaseModel):
    """Public view of a user (never includes the password hash)."""

    id: int
    email: str
    username: str
    roles: list[str]

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """JWT token plus the authenticated user."""

    token: str
    user: UserSummary


# ===== User Schemas =====


class UserCreateRequest(BaseModel):
    """User creation request."""

    email: Email
    username: str
    password: str
    roles: list[str] | None = None


class UserUpdateRequest(BaseModel):
    """Partial user update; absent or null fields are left untouched."""

    email: Email | None = None
    username: str | None = None
    roles: list[str] | None = None


class DeletedUserResponse(BaseModel):
    """Identity of a removed user."""

    email: str
    username: str


# ===== Client Schemas =====


class ClientCreateRequest(BaseModel):
    """Client creation request."""

    name: str
    cif: str
    email: str | None = None
    phone: str | None = None
    web: str | None = None


class ClientUpdateRequest(BaseModel):
    """Partial client update; absent or null fields are left untouched."""

    name: str | None = None
    cif: str | None = None
    email: str | None = None
    phone: str | None = None
    web: str | None = None


class ClientResponse(BaseModel):
    """Client response."""

    id: int
    name: str
    cif: str
    email: str | None
    phone: str | None
    web: str | None

    model_config = ConfigDict(from_attributes=True)


class ClientImportResponse(BaseModel):
    """CSV import outcome."""

    imported: int
    skipped: int


# ===== Project File Schemas =====


class FileUploaderResponse(BaseModel):
    id: int
    username: str


class ProjectFileResponse(BaseModel):
    """Project file list item."""

    id: int
    original_name: str = Field(serialization_alias="originalName")
    file_name: str = Field(serialization_alias="fileName")
    uploaded_at: str = Field(serialization_alias="uploadedAt")  # YYYY-MM-DD HH:mm
    user: FileUploaderResponse


class ProjectFileUploadResponse(BaseModel):
    id: int
    original_name: str = Field(serialization_alias="originalName")
    file_name: str = Field(serialization_alias="fileName")
    uploaded_at: datetime = Field(serialization_alias="uploadedAt")


class ProjectFileRenameRequest(BaseModel):
    """Rename request; the name is checked by the usecase."""

    original_name: str | None = Field(default=None, alias="originalName")
