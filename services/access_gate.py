"""Access gate: bearer token check in front of protected operations."""

from typing import Mapping

from fastapi.security import HTTPAuthorizationCredentials

from core.exceptions import MissingTokenError
from core.security import TokenCodec, extract_bearer_token
from models.schemas import AuthorizedIdentity


class AccessGate:
    """
    Stateless verifier for bearer credentials.

    The decoded identity is trusted until the token expires; the account is not
    looked up again, so deleting an account does not revoke its tokens.
    """

    def __init__(self, tokens: TokenCodec):
        self.tokens = tokens

    def authorize(self, headers: Mapping[str, str]) -> AuthorizedIdentity:
        """Check raw request headers. Raises MissingTokenError or InvalidTokenError."""
        header = next((v for k, v in headers.items() if k.lower() == "authorization"), None)
        return self.tokens.verify(extract_bearer_token(header))

    def authorize_credentials(self, credentials: HTTPAuthorizationCredentials | None) -> AuthorizedIdentity:
        """Check credentials already parsed by HTTPBearer; None means no usable header."""
        if credentials is None or not credentials.credentials:
            raise MissingTokenError()
        return self.tokens.verify(credentials.credentials)
