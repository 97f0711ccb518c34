"""
FastAPI Router — Authentication • Health
========================================

Purpose
-------
Defines the HTTP API for:
- Registration, with an activation link sent by email
- Authentication, returning a signed JWT
- Account activation from the emailed token
- Password reset by emailed link, and lockout after repeated failed logins
- Resolving the current user from a token
- Health check

Key Notes
---------
- Input validation via Pydantic models in `kompagnon.api.models`; invalid bodies
  are answered with 400 (see `kompagnon.main`).
- Handlers translate service results and exceptions into status codes; the
  services themselves never raise HTTP errors.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from kompagnon.api.dependencies import get_authenticated_user
from kompagnon.api.models import (
    ActivationResponse,
    AuthenticatedUser,
    AuthenticationResponse,
    MessageResponse,
    PasswordReset,
    PasswordResetRequest,
    UserCredentials,
    UserRegistration,
)
from kompagnon.api.utils import decode_token
from kompagnon.database.core.funcs import (
    activate_user,
    authenticate_user,
    register_user,
    request_password_reset,
    reset_password,
)
from kompagnon.errors import ERRORS, MESSAGE, EmailAlreadyExistsError, TokenError, WeakPasswordError

logger = logging.getLogger(__name__)

router = APIRouter()
"""Root router: health check plus the authentication routes."""

authentication_router = APIRouter(prefix="/api/authentication", tags=["authentication"])


@router.get("/api/health", response_class=PlainTextResponse)
async def health():
    """Liveness check."""
    return "api is ok!"


@authentication_router.post("/register", status_code=201)
async def register(data: UserRegistration):
    """Register a new user account.

    Request body:
        UserRegistration {firstname, lastname, email, password, birthday}

    Response:
        201: empty body, activation email sent (or logged when mail is disabled)
        400: {'message', 'details'} when the password is too weak
        409: {'message'} when the email is already registered
        500: {'message'} on unexpected errors
    """
    try:
        await register_user(
            firstname=data.firstname,
            lastname=data.lastname,
            email=data.email,
            password=data.password,
            birthday=data.birthday,
        )
    except WeakPasswordError as e:
        return JSONResponse(status_code=400, content={"message": str(e), "details": e.details})
    except EmailAlreadyExistsError:
        return JSONResponse(status_code=409, content={"message": ERRORS["USER"]["EMAIL_ALREADY_EXISTS"]})
    except Exception:
        logger.exception("User registration failed")
        return JSONResponse(status_code=500, content={"message": ERRORS["INTERNAL_SERVER_ERROR"]})
    return Response(status_code=201)


@authentication_router.post("/authenticate", response_model=AuthenticationResponse)
async def authenticate(data: UserCredentials):
    """Authenticate a user and return its id with a signed JWT.

    Response:
        200: {'data': {'userId', 'token'}}
        401: {'message'} invalid credentials
        423: {'message'} account locked after too many failed attempts
        404: empty body, account not activated
        500: {'message'} on unexpected errors
    """
    try:
        auth = await authenticate_user(email=data.email, password=data.password)
    except Exception:
        logger.exception("Error while authenticating user")
        return JSONResponse(status_code=500, content={"message": ERRORS["INTERNAL_SERVER_ERROR"]})

    if auth["locked"]:
        return JSONResponse(status_code=423, content={"message": auth["detail"]})
    if not auth["authenticated"]:
        return JSONResponse(status_code=401, content={"message": auth["detail"]})
    if not auth["active"]:
        return Response(status_code=404)
    return {"data": auth["user_details"]}


@authentication_router.get("/activate", status_code=201, response_model=ActivationResponse)
async def activate(token: Optional[str] = None):
    """Activate an account with the token sent by email.

    Response:
        201: {'message': 'User activated successfully'}
        400: {'error'} missing, invalid or expired token
        401: {'error'} user not found or already active
        500: {'error'} on unexpected errors
    """
    if not token:
        logger.warning("Activation attempt without token")
        return JSONResponse(status_code=400, content={"error": ERRORS["TOKEN"]["REQUIRED"]})

    try:
        user_id = decode_token(token).get("userId")
        if not user_id:
            return JSONResponse(status_code=400, content={"error": ERRORS["TOKEN"]["INVALID_OR_EXPIRED"]})
        activated = await activate_user(user_id)
    except TokenError:
        return JSONResponse(status_code=400, content={"error": ERRORS["TOKEN"]["INVALID_OR_EXPIRED"]})
    except Exception:
        logger.exception("Error during user activation")
        return JSONResponse(status_code=500, content={"error": ERRORS["INTERNAL_SERVER_ERROR"]})

    if not activated:
        return JSONResponse(status_code=401, content={"error": ERRORS["USER"]["NOT_FOUND_OR_ALREADY_ACTIVE"]})
    return {"message": MESSAGE["USER_ACTIVATED_SUCCESSFULLY"]}


@authentication_router.post("/password-reset/request", response_model=MessageResponse)
async def password_reset_request(data: PasswordResetRequest):
    """Email a password reset link.

    The answer is the same whether or not the email is registered.

    Response:
        200: {'message'}
        500: {'message'} on unexpected errors
    """
    try:
        await request_password_reset(data.email)
    except Exception:
        logger.exception("Error while requesting a password reset")
        return JSONResponse(status_code=500, content={"message": ERRORS["INTERNAL_SERVER_ERROR"]})
    return {"message": MESSAGE["PASSWORD_RESET_REQUESTED"]}


@authentication_router.post("/password-reset", response_model=MessageResponse)
async def password_reset(data: PasswordReset):
    """Set a new password with the token sent by email.

    Response:
        200: {'message'} password changed, token consumed
        400: {'message', 'details'} when the new password is too weak
        400: {'error'} invalid, expired or already used token
        500: {'error'} on unexpected errors
    """
    try:
        await reset_password(data.token, data.newPassword)
    except WeakPasswordError as e:
        return JSONResponse(status_code=400, content={"message": str(e), "details": e.details})
    except TokenError:
        return JSONResponse(status_code=400, content={"error": ERRORS["PASSWORD_RESET"]["INVALID_TOKEN"]})
    except Exception:
        logger.exception("Error during password reset")
        return JSONResponse(status_code=500, content={"error": ERRORS["INTERNAL_SERVER_ERROR"]})
    return {"message": MESSAGE["PASSWORD_RESET_SUCCESSFULLY"]}


@authentication_router.get("/me", response_model=AuthenticatedUser)
async def me(user: AuthenticatedUser = Depends(get_authenticated_user)):
    """Return the user the presented token belongs to."""
    return user


router.include_router(authentication_router)
