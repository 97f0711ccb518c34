"""
Service-layer operations for registration, authentication, activation and
password reset.

Functions that touch several rows are wrapped with `@with_transaction`: the
DAO calls they make share one transaction, committed when the function returns
and rolled back if it raises. Called from an enclosing transactional block they
simply join it.

CPU-bound bcrypt work and the SMTP round-trip run on worker threads. New
password hashes are computed before the transaction opens and mails are sent
after it commits, so no pooled connection is held while they run.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy.engine import RowMapping

from kompagnon.api.utils import decode_token, encode_token
from kompagnon.crypt.encrypt_decrypt import EncryptionDec
from kompagnon.database.config.config import settings
from kompagnon.database.daos.user_dao import UserDao, normalize_email
from kompagnon.database.helpers.transactionManagement import with_transaction
from kompagnon.errors import ERRORS, PasswordResetTokenError, WeakPasswordError
from kompagnon.mail.activation_mail import send_activation_mail
from kompagnon.mail.password_reset_mail import send_password_reset_mail

logger = logging.getLogger(__name__)

PASSWORD_RESET_TOKEN_TYPE = "password_reset"


@with_transaction
async def create_user(
    firstname: str,
    lastname: str,
    email: str,
    birthday: str,
    hashed_password: str,
    user_type: Optional[str] = None,
) -> int:
    """Insert an inactive user and return its id."""
    user_dao = UserDao()
    return await user_dao.createUser(
        {
            "firstname": firstname,
            "lastname": lastname,
            "email": email,
            "birthday": birthday,
            "hashed_password": hashed_password,
            "user_type": user_type,
        }
    )


async def register_user(firstname: str, lastname: str, email: str, password: str, birthday: str) -> int:
    """
    Register a new account and email its activation link.

    Parameters
    ----------
    firstname, lastname, email, birthday : str
        Profile fields; trimmed (and the email lowercased) at DAO level.
    password : str
        Plaintext password, checked against the strength policy then hashed.

    Returns
    -------
    int
        Id of the new user.

    Raises
    ------
    WeakPasswordError
        The password fails one or more policy rules.
    EmailAlreadyExistsError
        The email is already registered.

    Notes
    -----
    - The user starts inactive; the emailed token carries ``{"userId": id}``.
    - A failure to send the email is logged and does not undo the registration.
    """
    enc = EncryptionDec()
    errors = enc.validate_password_strength(password)
    if errors:
        raise WeakPasswordError(errors)

    hashed_password = await asyncio.to_thread(enc.hash_password, password)
    user_id = await create_user(
        firstname=firstname,
        lastname=lastname,
        email=email,
        birthday=birthday,
        hashed_password=hashed_password,
    )

    token = encode_token({"userId": user_id}, expires_minutes=settings.ACTIVATION_TOKEN_EXPIRE_MINUTES)
    try:
        await send_activation_mail(firstname=firstname, lastname=lastname, email=normalize_email(email), token=token)
    except Exception:
        logger.exception("Failed to send activation email for user %s", user_id)
    return user_id


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _failed_authentication(detail: str, locked: bool = False) -> dict[str, Any]:
    return {"authenticated": False, "active": False, "locked": locked, "detail": detail, "user_details": None}


@with_transaction
async def authenticate_user(email: str, password: str) -> dict[str, Any]:
    """
    Check credentials and, on success, record the login and issue a token.

    Returns
    -------
    dict
        - authenticated (bool): True if the credentials are valid.
        - active (bool): Whether the account has been activated.
        - locked (bool): True while the account is locked out.
        - detail (str): Error message when not authenticated.
        - user_details (dict | None): ``{"userId", "token"}`` on success.

    Notes
    -----
    - Unknown email and wrong password give the same answer.
    - A locked account is refused before its password is checked.
    - Each wrong password is counted; reaching MAX_LOGIN_ATTEMPTS locks the
      account for ACCOUNT_LOCK_MINUTES. A successful login clears the count.
    - Inactive accounts get no token and no login timestamp.
    """
    user_dao = UserDao()
    enc = EncryptionDec()
    user = await user_dao.findByEmail(email)
    if user is None:
        return _failed_authentication(ERRORS["AUTHENTICATION"]["INVALID_CREDENTIALS"])

    now = datetime.now(timezone.utc)
    locked_until = _as_utc(user["account_locked_until"])
    if locked_until is not None and now < locked_until:
        logger.warning("Authentication refused for locked account %s", user["id"])
        return _failed_authentication(ERRORS["AUTHENTICATION"]["ACCOUNT_LOCKED"], locked=True)

    if not await asyncio.to_thread(enc.check_passwords, password, user["hashed_password"]):
        attempts = await user_dao.incrementLoginAttempts(user["id"])
        if attempts >= settings.MAX_LOGIN_ATTEMPTS:
            await user_dao.lockAccountUntil(user["id"], now + timedelta(minutes=settings.ACCOUNT_LOCK_MINUTES))
        return _failed_authentication(ERRORS["AUTHENTICATION"]["INVALID_CREDENTIALS"])

    if not user["is_active"]:
        return {"authenticated": True, "active": False, "locked": False, "detail": "", "user_details": None}

    if user["login_attempts"] or user["account_locked_until"] is not None:
        await user_dao.resetLoginAttempts(user["id"])
    token = encode_token({"userId": user["id"], "userType": user["user_type"]})
    await user_dao.updateLastLoggedAt(user["id"])
    return {
        "authenticated": True,
        "active": True,
        "locked": False,
        "detail": "",
        "user_details": {"userId": user["id"], "token": token},
    }


@with_transaction
async def activate_user(user_id: int) -> bool:
    """
    Activate an account.

    Returns
    -------
    bool
        False when the user does not exist or is already active.
    """
    user_dao = UserDao()
    user = await user_dao.findById(user_id)
    if user is None or user["is_active"]:
        logger.warning("Activation attempt for non-existent or already active user %s", user_id)
        return False
    await user_dao.activateUserById(user_id)
    return True


@with_transaction
async def create_password_reset_token(email: str) -> Optional[tuple[RowMapping, str]]:
    """
    Issue a reset token for the account registered under `email`.

    The token replaces any pending one, so only the latest link works.
    Returns None when no account matches.
    """
    user_dao = UserDao()
    user = await user_dao.findByEmail(email)
    if user is None:
        return None
    token = encode_token(
        {"userId": user["id"], "email": user["email"], "type": PASSWORD_RESET_TOKEN_TYPE},
        expires_minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES,
    )
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)
    await user_dao.setPasswordResetToken(user["id"], token, expires_at)
    return user, token


async def request_password_reset(email: str) -> bool:
    """
    Email a password reset link to the account registered under `email`.

    Returns
    -------
    bool
        True if an account matched. Callers answer the same either way so the
        endpoint does not reveal which emails are registered.

    Notes
    -----
    A failure to send the email is logged; the stored token stays valid.
    """
    issued = await create_password_reset_token(email)
    if issued is None:
        logger.info("Password reset requested for unknown email")
        return False
    user, token = issued
    try:
        await send_password_reset_mail(
            firstname=user["firstname"], lastname=user["lastname"], email=user["email"], token=token
        )
    except Exception:
        logger.exception("Failed to send password reset email for user %s", user["id"])
    return True


@with_transaction
async def apply_password_reset(user_id: int, token: str, hashed_password: str) -> None:
    """
    Replace the password if `token` is still the pending reset token of the user.

    Raises
    ------
    PasswordResetTokenError
        Unknown user, a different or already used token, or a stored expiry in the past.
    """
    user_dao = UserDao()
    user = await user_dao.findById(user_id)
    if user is None or user["password_reset_token"] != token:
        raise PasswordResetTokenError()
    expires_at = _as_utc(user["password_reset_expires"])
    if expires_at is None or expires_at <= datetime.now(timezone.utc):
        raise PasswordResetTokenError()
    await user_dao.updatePassword(user_id, hashed_password)


async def reset_password(token: str, new_password: str) -> int:
    """
    Set a new password from an emailed reset token.

    Returns
    -------
    int
        Id of the user whose password changed.

    Raises
    ------
    TokenError
        The token is malformed, expired, not a reset token or no longer pending.
    WeakPasswordError
        The new password fails one or more policy rules.

    Notes
    -----
    A successful reset consumes the token and clears any login lockout.
    """
    claims = decode_token(token)
    user_id = claims.get("userId")
    if claims.get("type") != PASSWORD_RESET_TOKEN_TYPE or user_id is None:
        raise PasswordResetTokenError()

    enc = EncryptionDec()
    errors = enc.validate_password_strength(new_password)
    if errors:
        raise WeakPasswordError(errors)

    hashed_password = await asyncio.to_thread(enc.hash_password, new_password)
    await apply_password_reset(user_id, token, hashed_password)
    return user_id
