"""API schemas for auth and client requests and responses."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Generic, Literal, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from src.client.rules import (
    Email,
    FullName,
    StrongPassword,
    matching_confirmation,
    min_length,
    optional_text,
    trimmed_text,
)

ClientName = trimmed_text("Name is required", 200)
ClientType = trimmed_text("Client type is required", 50)
ClientStatusText = trimmed_text("Status is required", 50)
Phone = optional_text(50)
ShortText = optional_text(255)
Notes = optional_text(5000)


# =============================================================================
# Auth requests
# =============================================================================


class AuthRequest(BaseModel):
    """Base for auth payloads, which use camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SignupRequest(AuthRequest):
    full_name: FullName
    email: Email
    password: StrongPassword
    confirm_password: str

    passwords_match = model_validator(mode="wrap")(matching_confirmation("confirm_password", "password"))


class LoginRequest(AuthRequest):
    email: Email
    password: Annotated[str, min_length(1, "Password is required")]


class RefreshTokenRequest(AuthRequest):
    refresh_token: Annotated[str, min_length(1, "Refresh token is required")]


class VerificationType(str, Enum):
    SIGNUP = "signup"
    RECOVERY = "recovery"
    EMAIL_CHANGE = "email_change"


class VerifyEmailRequest(AuthRequest):
    token: Annotated[str, min_length(1, "Verification token is required")]
    type: VerificationType


class ResendVerificationRequest(AuthRequest):
    email: Email


class ForgotPasswordRequest(AuthRequest):
    email: Email


class ResetPasswordRequest(AuthRequest):
    token: Annotated[str, min_length(1, "Reset token is required")]
    password: StrongPassword
    confirm_password: str

    passwords_match = model_validator(mode="wrap")(matching_confirmation("confirm_password", "password"))


class ChangePasswordRequest(AuthRequest):
    current_password: Annotated[str, min_length(1, "Current password is required")]
    new_password: StrongPassword
    confirm_new_password: str

    passwords_match = model_validator(mode="wrap")(
        matching_confirmation("confirm_new_password", "new_password")
    )


# =============================================================================
# Client requests
# =============================================================================


class CreateClientRequest(BaseModel):
    """Request schema for creating a new client."""
    name: ClientName
    email: Email
    client_type: ClientType
    status: ClientStatusText = "prospect"
    phone: Phone = None
    company: ShortText = None
    address: ShortText = None
    license_number: ShortText = None
    notes: Notes = None


class UpdateClientRequest(BaseModel):
    """
    Request schema for partially updating a client.

    Only keys present in the body are applied; use ``model_dump(exclude_unset=True)``.
    Required columns may be omitted but not set to null.
    """
    name: ClientName = None
    email: Email = None
    client_type: ClientType = None
    status: ClientStatusText = None
    phone: Phone = None
    company: ShortText = None
    address: ShortText = None
    license_number: ShortText = None
    notes: Notes = None


class ClientListQuery(BaseModel):
    """Query-string filters accepted by the client listing."""
    search: str | None = None
    status: str | None = None
    type: str | None = None


# =============================================================================
# Responses
# =============================================================================

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T


class MessageResponse(BaseModel):
    success: Literal[True] = True
    message: str


class DataMessageResponse(BaseModel, Generic[T]):
    success: Literal[True] = True
    message: str
    data: T


class ErrorDetail(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str = "Validation error"
    details: list[ErrorDetail]


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    message: str


class ClientResponse(BaseModel):
    """Response schema for client data returned by the API."""
    id: UUID
    name: str
    email: str
    phone: str | None = None
    company: str | None = None
    address: str | None = None
    license_number: str | None = None
    client_type: str
    status: str
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClientStatsResponse(BaseModel):
    total_clients: int = Field(..., ge=0)
    active_clients: int = Field(..., ge=0)
    prospect_clients: int = Field(..., ge=0)
    archived_clients: int = Field(..., ge=0)


class UserResponse(BaseModel):
    id: str
    email: str | None = None
    full_name: str | None = None
    email_confirmed: bool = False


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    user: UserResponse


class SignupResponse(BaseModel):
    user: UserResponse
    session: SessionResponse | None = None
