"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Missing fields default to empty values so that the domain's own validation
decides what "required" means and reports it consistently.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.domain.ports import AccountStatus


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    name: str = Field("", description="Display name")
    # An empty email is left to the domain's required-field check
    email: EmailStr | Literal[""] = Field("", description="Email address, unique across accounts")
    password: str = Field("", description="Account password")


class LoginRequest(BaseModel):
    """Request model for login."""

    email: str = ""
    password: str = ""


class AccountResponse(BaseModel):
    """Public view of an account. Never includes the hash or the verification token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    status: AccountStatus
    last_login: datetime | None
    created_at: datetime


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    account: AccountResponse


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    token: str
    account: AccountResponse


class VerifyResponse(BaseModel):
    """Response model for a redeemed verification token."""

    message: str
    activated: bool


class BulkRequest(BaseModel):
    """Selected account ids for a bulk operation."""

    user_ids: list[int] = Field(default_factory=list)


class BulkResponse(BaseModel):
    """Response model for block/unblock/delete."""

    message: str
    requested: int = Field(..., description="Distinct ids in the selection")
    affected: int = Field(..., description="Accounts actually changed; ids that no longer exist are skipped")
    self_affected: bool = Field(
        ..., description="The acting account was in the selection; the client should end its session"
    )


class PurgeResponse(BaseModel):
    """Response model for deleting unverified accounts."""

    message: str
    deleted: int
    self_affected: bool


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str


class SessionErrorDetail(BaseModel):
    message: str
    redirect: bool


class SessionErrorResponse(BaseModel):
    """Error returned by the authorization gate."""

    detail: SessionErrorDetail
