"""
Account endpoints: login, signup and a protected probe.
Paths and payloads match the existing web client.
"""

from fastapi import APIRouter

from core.dependencies import CredentialServiceDep, CurrentIdentity
from models.schemas import (
    CredentialsRequest,
    ErrorResponse,
    LoginResponse,
    MessageResponse,
    ProtectedResponse,
)

router = APIRouter(tags=["auth"])

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/validateUser", response_model=LoginResponse, responses=_ERRORS)
async def validate_user(body: CredentialsRequest, credentials: CredentialServiceDep) -> LoginResponse:
    """Check username/password and return a 24h bearer token."""
    grant = await credentials.validate_credentials(body.username, body.password)
    return LoginResponse(
        message="User validated successfully",
        token=grant.token,
        username=grant.username,
        user_id=grant.user_id,
    )


@router.post("/signup", response_model=MessageResponse, responses=_ERRORS)
async def signup(body: CredentialsRequest, credentials: CredentialServiceDep) -> MessageResponse:
    """Register an account. Log in separately to get a token."""
    await credentials.register_account(body.username, body.password)
    return MessageResponse(message="User registered successfully")


@router.get("/protected", response_model=ProtectedResponse, responses={401: {"model": ErrorResponse}})
async def protected(user: CurrentIdentity) -> ProtectedResponse:
    return ProtectedResponse(message="Protected data", user=user)
