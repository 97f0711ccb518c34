"""
FastAPI dependencies gating routes behind a valid token.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException

from kompagnon.api.models import AuthenticatedUser
from kompagnon.api.utils import decode_token, extract_token
from kompagnon.database.daos.user_dao import UserDao
from kompagnon.errors import ERRORS, TokenConfigurationError, TokenError

logger = logging.getLogger(__name__)


async def get_authenticated_user(
    authorisation: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
) -> AuthenticatedUser:
    """
    Resolve the caller from its token.

    The token is read from the ``Authorisation`` header (raw token) or from
    ``Authorization: Bearer <token>``.

    Raises
    ------
    HTTPException
        401 when the token is missing, invalid or expired, names an unknown
        user, or the user cannot be loaded.
    """
    token = extract_token(authorisation or authorization)
    if not token:
        raise HTTPException(status_code=401, detail=ERRORS["TOKEN"]["REQUIRED"])

    try:
        decoded = decode_token(token)
    except (TokenError, TokenConfigurationError) as e:
        raise HTTPException(status_code=401, detail=str(e))

    user_id = decoded.get("userId")
    if not user_id:
        raise HTTPException(status_code=401, detail=ERRORS["TOKEN"]["INVALID_TOKEN"])

    try:
        user = await UserDao().findById(user_id)
    except Exception:
        logger.exception("Error while resolving the authenticated user %s", user_id)
        raise HTTPException(status_code=401, detail=ERRORS["INTERNAL_SERVER_ERROR"])

    if user is None:
        logger.warning("Token presented for unknown user %s", user_id)
        raise HTTPException(status_code=401, detail=ERRORS["TOKEN"]["INVALID_TOKEN"])

    return AuthenticatedUser(firstName=user["firstname"], lastName=user["lastname"], userId=user["id"])
