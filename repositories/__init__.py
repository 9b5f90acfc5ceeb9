"""Repository layer for data access."""

from repositories.account_repository import AccountRepository
from repositories.base import BaseRepository
from repositories.settings_repository import SettingsRepository

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "SettingsRepository",
]
