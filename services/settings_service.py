"""
Settings business logic: validate, coerce and upsert one document per account.
"""

from typing import Any

from core.database import store_call
from core.exceptions import InvalidInputError, NotFoundError, OutOfRangeError
from models.schemas import SettingsDocument
from repositories import SettingsRepository
from utils.logging import get_logger
from utils.validators import float_or_default, int_or_default, is_blank

logger = get_logger(__name__)

TIMEZONE_MIN = -12.0
TIMEZONE_MAX = 14.0

# INTEGER columns are 32-bit on PostgreSQL.
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

DEFAULT_PAST_DATA_HOURS = 24
DEFAULT_DATA_REFRESH = 5
DEFAULT_TIMEZONE = 0.0
DEFAULT_TRAIL_HOURS = 24
DEFAULT_PLOT_SIZE = "Small"


def _require_account_id(account_id: Any) -> str:
    if not isinstance(account_id, str) or not account_id.strip():
        raise InvalidInputError("UserId is required")
    return account_id.strip()


def coerce_settings(raw: Any) -> dict[str, Any]:
    """
    Validate the raw settings object and return column values.

    timezone is required only to be present (0 is valid). The other required
    fields follow the older rule where 0, "" and false count as missing.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("general"), dict):
        raise InvalidInputError("Invalid settings structure. General section is required.")
    general = raw["general"]
    trail = raw.get("pastTrail")
    if not isinstance(trail, dict):
        raise InvalidInputError("Invalid settings structure. PastTrail section is required.")

    if (
        is_blank(general.get("pastDataHours"))
        or is_blank(general.get("dataRefresh"))
        or "timezone" not in general
        or is_blank(trail.get("hours"))
        or is_blank(trail.get("plotSize"))
    ):
        raise InvalidInputError("Missing required settings fields")

    timezone = float_or_default(general["timezone"], DEFAULT_TIMEZONE)
    if not TIMEZONE_MIN <= timezone <= TIMEZONE_MAX:
        raise OutOfRangeError()

    values = {
        "past_data_hours": int_or_default(general["pastDataHours"], DEFAULT_PAST_DATA_HOURS),
        "data_refresh": int_or_default(general["dataRefresh"], DEFAULT_DATA_REFRESH),
        "timezone": timezone,
        "trail_hours": int_or_default(trail["hours"], DEFAULT_TRAIL_HOURS),
        "plot_size": str(trail["plotSize"]) or DEFAULT_PLOT_SIZE,
    }
    for key in ("past_data_hours", "data_refresh", "trail_hours"):
        if not INT_MIN <= values[key] <= INT_MAX:
            raise OutOfRangeError(f"Invalid {key}. Must be between {INT_MIN} and {INT_MAX}")
    return values


class SettingsService:
    """Reads and writes per-account settings documents."""

    def __init__(self, settings: SettingsRepository, store_timeout: float = 5.0):
        self.settings = settings
        self.store_timeout = store_timeout

    async def save_settings(self, account_id: Any, raw_settings: Any) -> SettingsDocument:
        """
        Upsert the account's settings, replacing general and pastTrail wholesale.
        Raises InvalidInputError, OutOfRangeError or ServiceUnavailableError.
        """
        if is_blank(account_id) or raw_settings is None:
            raise InvalidInputError("UserId and settings are required")
        account_id = _require_account_id(account_id)
        values = coerce_settings(raw_settings)
        record = await store_call(
            self.settings.upsert(account_id, values), self.store_timeout, "upsert_settings"
        )
        logger.info("settings_saved", extra={"user_id": account_id, **values})
        return record.to_document()

    async def get_settings(self, account_id: Any) -> SettingsDocument:
        """Raises InvalidInputError, NotFoundError or ServiceUnavailableError."""
        account_id = _require_account_id(account_id)
        record = await store_call(
            self.settings.get_by_user(account_id), self.store_timeout, "get_settings"
        )
        if record is None:
            raise NotFoundError()
        return record.to_document()
