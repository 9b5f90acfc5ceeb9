"""Settings repository: one document per account, written by upsert."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from models.records import AccountSettings, new_id, utcnow
from repositories.base import BaseRepository

_NATIVE_UPSERT = {
    "sqlite": sqlite_insert,
    "postgresql": pg_insert,
}


class SettingsRepository(BaseRepository[AccountSettings]):
    """Repository for AccountSettings operations."""

    model = AccountSettings

    async def get_by_user(self, user_id: str) -> Optional[AccountSettings]:
        return await self.get_by(user_id=user_id)

    async def upsert(self, user_id: str, values: dict[str, Any], now: datetime | None = None) -> AccountSettings:
        """
        Create or overwrite the account's settings and stamp updated_at.

        Uses INSERT ... ON CONFLICT (user_id) DO UPDATE where the dialect has
        it; other dialects fall back to read-then-write in one transaction.
        """
        stamped = {**values, "updated_at": now or utcnow()}
        insert = _NATIVE_UPSERT.get(self.dialect_name)
        if insert is not None:
            stmt = insert(AccountSettings).values(
                id=new_id(), user_id=user_id, **stamped
            )
            stmt = stmt.on_conflict_do_update(index_elements=["user_id"], set_=stamped)
            await self.session.execute(stmt)
        else:
            record = await self.get_by_user(user_id)
            if record is None:
                self.session.add(AccountSettings(user_id=user_id, **stamped))
            else:
                for key, value in stamped.items():
                    setattr(record, key, value)
        await self.commit()
        return await self.get_by_user(user_id)
