"""Account repository with credential lookups."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from models.records import Account
from repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for Account operations."""

    model = Account

    async def get_by_username(self, username: str) -> Optional[Account]:
        """Exact, case-sensitive username match."""
        return await self.get_by(username=username)

    async def insert_if_absent(self, username: str, password_hash: str) -> Optional[Account]:
        """
        Insert a new account in its own transaction.

        Returns None when the username is taken. The unique constraint on
        users.username decides, so concurrent signups cannot both succeed.
        """
        account = Account(username=username, password=password_hash)
        self.session.add(account)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            return None
        return account
