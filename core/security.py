"""
Security utilities: signed access tokens, bearer header parsing, password hashing.
The signing secret is owned by a TokenCodec built from settings, never read from a global.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt
from passlib.context import CryptContext

from core.config import Settings
from core.exceptions import InvalidTokenError, MissingTokenError
from models.schemas import AuthorizedIdentity

# pbkdf2_sha256 is pure passlib; no native backend needed.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class TokenCodec:
    """
    Issues and verifies signed access tokens.
    Claims: sub (account id), username, iat, exp. Tokens are not persisted.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", lifetime: timedelta = timedelta(hours=24)):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.lifetime = lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            lifetime=timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES),
        )

    def issue(self, account_id: str, username: str, issued_at: datetime | None = None) -> tuple[str, datetime]:
        """Sign a token for the account. Returns the token and its expiry."""
        now = issued_at or datetime.now(UTC)
        expire = now + self.lifetime
        payload = {"sub": str(account_id), "username": username, "iat": now, "exp": expire}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm), expire

    def verify(self, token: str, now: datetime | None = None) -> AuthorizedIdentity:
        """
        Check signature and expiry. Raises InvalidTokenError on any failure.
        A token is valid only while now < exp; jose alone still accepts now == exp.
        """
        try:
            claims: dict[str, Any] = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidTokenError() from e
        sub, username = claims.get("sub"), claims.get("username")
        if not sub or not isinstance(username, str) or not isinstance(claims.get("exp"), int):
            raise InvalidTokenError()
        if claims["exp"] <= (now or datetime.now(UTC)).timestamp():
            raise InvalidTokenError()
        return AuthorizedIdentity(
            user_id=sub,
            username=username,
            iat=int(claims.get("iat", 0)),
            exp=int(claims["exp"]),
        )


def extract_bearer_token(header_value: str | None) -> str:
    """Return the token from 'Bearer <token>'. Raises MissingTokenError otherwise."""
    scheme, token = get_authorization_scheme_param(header_value)
    if scheme.lower() != "bearer" or not token:
        raise MissingTokenError()
    return token


def hash_password(plain: str) -> str:
    """Hash password for storage. Use with verify_password on login."""
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plain password against stored hash. Unknown hash formats never match."""
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def is_safe_for_log(value: str, max_length: int = 200) -> str:
    """Redact or truncate user-supplied data before logging."""
    if not value or len(value) > max_length:
        return "(redacted)" if value else ""
    return value[:max_length]
