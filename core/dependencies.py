"""
FastAPI dependency injection: settings, store sessions, services, auth.
Collaborators live on app.state and are built once by create_app.
"""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from core.database import Database
from core.security import TokenCodec
from models.schemas import AuthorizedIdentity
from repositories import AccountRepository, SettingsRepository
from services.access_gate import AccessGate
from services.credential_service import CredentialService
from services.settings_service import SettingsService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[Database, Depends(get_database)]


async def get_session(database: DatabaseDep) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_access_gate(tokens: Annotated[TokenCodec, Depends(get_token_codec)]) -> AccessGate:
    return AccessGate(tokens)


def get_credential_service(
    session: SessionDep,
    settings: SettingsDep,
    tokens: Annotated[TokenCodec, Depends(get_token_codec)],
) -> CredentialService:
    return CredentialService(AccountRepository(session), tokens, settings.STORE_TIMEOUT_SECONDS)


def get_settings_service(session: SessionDep, settings: SettingsDep) -> SettingsService:
    return SettingsService(SettingsRepository(session), settings.STORE_TIMEOUT_SECONDS)


security_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security_scheme)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
) -> AuthorizedIdentity:
    """Required bearer auth: MissingTokenError / InvalidTokenError become 401."""
    return gate.authorize_credentials(credentials)


CurrentIdentity = Annotated[AuthorizedIdentity, Depends(get_current_identity)]
CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]
SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]
