"""
JWT utilities for issuing and verifying tokens.

Functions
---------
encode_token(data: dict, expires_minutes: int | None = None) -> str
    Creates a signed JWT with `iat` and `exp` claims.
decode_token(token: str) -> dict
    Verifies a JWT's signature & expiration and returns its claims.
extract_token(header: str | None) -> str | None
    Strips an optional `Bearer ` prefix from an authorisation header.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for JWTs. Both functions refuse to work without it.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Default token lifetime window in minutes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError

from kompagnon.database.config.config import settings
from kompagnon.errors import (
    InvalidTokenError,
    TokenConfigurationError,
    TokenExpiredError,
    TokenVerificationError,
)


def encode_token(data: dict, expires_minutes: Optional[int] = None) -> str:
    """
    Create a signed JWT.

    Parameters
    ----------
    data : dict
        Claims to embed in the token; returned by `decode_token`.
    expires_minutes : int, optional
        Lifetime of the token. Defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns
    -------
    str
        Encoded JWT string.

    Raises
    ------
    TokenConfigurationError
        If SECRET_KEY is empty.
    """
    if not settings.SECRET_KEY:
        raise TokenConfigurationError()

    if expires_minutes is None:
        expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    issued_at = int(datetime.now(timezone.utc).timestamp())
    encoding = data.copy()
    # exp is a NumericDate (seconds since epoch)
    encoding.update({"iat": issued_at, "exp": issued_at + int(expires_minutes) * 60})
    return jwt.encode(encoding, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify a JWT and return its claims.

    Raises
    ------
    TokenExpiredError
        The `exp` claim is in the past.
    InvalidTokenError
        Malformed token or bad signature.
    TokenVerificationError
        Any other claim validation failure.
    TokenConfigurationError
        If SECRET_KEY is empty.
    """
    if not settings.SECRET_KEY:
        raise TokenConfigurationError()

    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError() from None
    except JWTClaimsError:
        raise TokenVerificationError() from None
    except JWTError:
        raise InvalidTokenError() from None


def extract_token(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return header.strip() or None
