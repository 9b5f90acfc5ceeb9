"""
Credential business logic: login and signup.
Password hashing is CPU-bound and runs in the default executor.
"""

import asyncio
from typing import Any

from core.exceptions import AuthenticationFailedError, ConflictError, InvalidInputError
from core.database import store_call
from core.security import TokenCodec, hash_password, is_safe_for_log, verify_password
from models.records import Account
from models.schemas import AccessGrant
from repositories import AccountRepository
from utils.logging import get_logger

logger = get_logger(__name__)


def _require_credentials(username: Any, password: Any) -> tuple[str, str]:
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        raise InvalidInputError("Username and password are required")
    return username, password


class CredentialService:
    """Validates credentials, registers accounts and issues access tokens."""

    def __init__(self, accounts: AccountRepository, tokens: TokenCodec, store_timeout: float = 5.0):
        self.accounts = accounts
        self.tokens = tokens
        self.store_timeout = store_timeout

    async def validate_credentials(self, username: Any, password: Any) -> AccessGrant:
        """
        Check a username/password pair and issue a signed token.
        Raises InvalidInputError, AuthenticationFailedError or ServiceUnavailableError.
        """
        username, password = _require_credentials(username, password)
        account = await store_call(
            self.accounts.get_by_username(username), self.store_timeout, "get_account"
        )
        loop = asyncio.get_event_loop()
        if account is None or not await loop.run_in_executor(
            None, verify_password, password, account.password
        ):
            logger.info("login_failed", extra={"username": is_safe_for_log(username)})
            raise AuthenticationFailedError()

        token, expires_at = self.tokens.issue(account.id, account.username)
        logger.info("login_succeeded", extra={"user_id": account.id})
        return AccessGrant(
            token=token,
            user_id=account.id,
            username=account.username,
            expires_at=expires_at,
        )

    async def register_account(self, username: Any, password: Any) -> Account:
        """
        Create an account. No token is issued; the caller logs in separately.
        Raises InvalidInputError, ConflictError or ServiceUnavailableError.
        """
        username, password = _require_credentials(username, password)
        loop = asyncio.get_event_loop()
        password_hash = await loop.run_in_executor(None, hash_password, password)
        account = await store_call(
            self.accounts.insert_if_absent(username, password_hash), self.store_timeout, "insert_account"
        )
        if account is None:
            logger.info("signup_conflict", extra={"username": is_safe_for_log(username)})
            raise ConflictError()
        logger.info("signup_succeeded", extra={"user_id": account.id})
        return account
