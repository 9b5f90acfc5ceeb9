"""Settings endpoints. Both require a bearer token."""

from fastapi import APIRouter

from core.dependencies import CurrentIdentity, SettingsServiceDep
from models.schemas import ErrorResponse, SaveSettingsRequest, SettingsResponse

router = APIRouter(tags=["settings"])


@router.post(
    "/saveSettings",
    response_model=SettingsResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 500)},
)
async def save_settings(
    body: SaveSettingsRequest,
    user: CurrentIdentity,
    settings: SettingsServiceDep,
) -> SettingsResponse:
    """
    Create or replace the settings document for body.userId.
    Any authenticated caller may write any userId; there is no per-account ownership check.
    """
    document = await settings.save_settings(body.user_id, body.settings)
    return SettingsResponse(message="Settings saved successfully", settings=document)


@router.get(
    "/getSettings/{user_id}",
    response_model=SettingsResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 404, 500)},
)
async def get_settings(user_id: str, user: CurrentIdentity, settings: SettingsServiceDep) -> SettingsResponse:
    document = await settings.get_settings(user_id)
    return SettingsResponse(message="Settings retrieved successfully", settings=document)


@router.get("/getSettings", response_model=SettingsResponse, include_in_schema=False)
async def get_settings_without_id(user: CurrentIdentity, settings: SettingsServiceDep) -> SettingsResponse:
    """Always 400: the account id is part of the path."""
    document = await settings.get_settings(None)
    return SettingsResponse(message="Settings retrieved successfully", settings=document)
