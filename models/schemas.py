"""
Pydantic schemas for request/response validation.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for every wire model: camelCase aliases, construction by field name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests. Fields are optional so missing values are reported by the services
# with the same {success, message} body as every other rejection.


class CredentialsRequest(ApiModel):
    username: str | None = None
    password: str | None = None


class SaveSettingsRequest(ApiModel):
    user_id: str | None = None
    settings: dict[str, Any] | None = None


# Domain payloads


class AuthorizedIdentity(ApiModel):
    """Identity decoded from a verified access token."""

    user_id: str
    username: str
    iat: int
    exp: int

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.iat, UTC)

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, UTC)


class AccessGrant(ApiModel):
    """Result of a successful credential check."""

    token: str
    user_id: str
    username: str
    expires_at: datetime


class GeneralSettings(ApiModel):
    past_data_hours: int = 24
    data_refresh: int = 5
    timezone: float = 0.0


class PastTrailSettings(ApiModel):
    hours: int = 24
    plot_size: str = "Small"


class SettingsDocument(ApiModel):
    """Stored per-account settings."""

    id: str
    user_id: str
    general: GeneralSettings
    past_trail: PastTrailSettings
    updated_at: datetime


# Responses


class ErrorResponse(BaseModel):
    """Standard error payload for API responses."""

    success: bool = False
    message: str

    model_config = {"extra": "forbid"}


class MessageResponse(ApiModel):
    success: bool = True
    message: str


class LoginResponse(MessageResponse):
    token: str
    username: str
    user_id: str


class ProtectedResponse(MessageResponse):
    user: AuthorizedIdentity


class SettingsResponse(MessageResponse):
    settings: SettingsDocument = Field(..., description="Stored settings document")
