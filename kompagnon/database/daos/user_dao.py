"""
User DAO

Purpose
-------
Thin data-access layer for the `users` table. Provides:
- Creation of inactive users
- Lookup by email (case-insensitive, trimmed) or by id
- Activation
- Last-login timestamp updates
- Failed login counting and lockout
- Password reset token storage and password updates

Design
------
- Every method queries through :func:`get_connection`, so it joins the ambient
  transaction when called from a transactional block and autocommits otherwise.
  The DAO never commits or rolls back itself.
- Rows are returned as read-only mappings (``RowMapping``) keyed by column name.
- Passwords arrive already hashed; hashing lives in the service layer.

Error Handling
--------------
- A unique violation on ``users.email`` becomes :class:`EmailAlreadyExistsError`.
- Activating an unknown id raises :class:`UserNotFoundError`.
- Other database errors are logged and re-raised unchanged.

Usage
-----
.. code-block:: python

    dao = UserDao()
    user_id = await dao.createUser({"firstname": "John", "lastname": "Doe",
                                    "email": "john.doe@example.net",
                                    "birthday": "01/01/1970",
                                    "hashed_password": hashed})
    user = await dao.findById(user_id)
    await dao.activateUserById(user_id)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError

from kompagnon.database.entities.user import DEFAULT_USER_TYPE, users_table
from kompagnon.database.helpers.transactionManagement import get_connection
from kompagnon.errors import EmailAlreadyExistsError, UserNotFoundError

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserDao:
    """
    Data Access Object (DAO) for the `users` table.
    """

    async def createUser(self, user_data: Mapping[str, Any]) -> int:
        """
        Insert a new, inactive user.

        Parameters
        ----------
        user_data : mapping
            ``firstname``, ``lastname``, ``email``, ``birthday``,
            ``hashed_password`` and optionally ``user_type``.

        Returns
        -------
        int
            Id of the created user.

        Raises
        ------
        EmailAlreadyExistsError
            If the email is already registered.
        """
        user_type = user_data.get("user_type") or DEFAULT_USER_TYPE
        statement = (
            insert(users_table)
            .values(
                firstname=user_data["firstname"].strip(),
                lastname=user_data["lastname"].strip(),
                email=normalize_email(user_data["email"]),
                birthday=user_data["birthday"].strip(),
                hashed_password=user_data["hashed_password"],
                user_type=getattr(user_type, "value", user_type),
                is_active=False,
                is_checked=False,
            )
            .returning(users_table.c.id)
        )
        try:
            user_id = await get_connection().scalar(statement)
        except IntegrityError as e:
            logger.warning("Failed to create user: email %s already exists", user_data["email"])
            raise EmailAlreadyExistsError(user_data["email"]) from e
        except Exception:
            logger.exception("Error in UserDao.createUser")
            raise
        logger.info("User created successfully with ID: %s", user_id)
        return user_id

    async def findByEmail(self, email: str) -> Optional[RowMapping]:
        """
        Fetch a user by email.

        Returns
        -------
        RowMapping | None
            The user row, or None when no user has that email.
        """
        statement = select(users_table).where(users_table.c.email == normalize_email(email))
        try:
            result = await get_connection().execute(statement)
        except Exception:
            logger.exception("Failed to find user by email: %s", email)
            raise
        return result.mappings().first()

    async def findById(self, user_id: int) -> Optional[RowMapping]:
        """
        Fetch a user by id.

        Returns
        -------
        RowMapping | None
            The user row, or None when the id is unknown.
        """
        statement = select(users_table).where(users_table.c.id == user_id)
        try:
            result = await get_connection().execute(statement)
        except Exception:
            logger.exception("Failed to find user by ID: %s", user_id)
            raise
        return result.mappings().first()

    async def activateUserById(self, user_id: int) -> RowMapping:
        """
        Mark a user as active.

        Returns
        -------
        RowMapping
            The updated user row.

        Raises
        ------
        UserNotFoundError
            If no user has that id.
        """
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(is_active=True, updated_at=func.now())
            .returning(*users_table.c)
        )
        result = await get_connection().execute(statement)
        user = result.mappings().first()
        if user is None:
            raise UserNotFoundError(user_id)
        logger.info("User activated successfully with ID: %s", user_id)
        return user

    async def updateLastLoggedAt(self, user_id: int) -> None:
        """Stamp the time of the user's last successful authentication."""
        now = datetime.now(timezone.utc)
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(last_logged_at=now, updated_at=func.now())
        )
        await get_connection().execute(statement)

    async def incrementLoginAttempts(self, user_id: int) -> int:
        """
        Count one more failed authentication.

        Returns
        -------
        int
            The number of consecutive failed attempts, this one included.
        """
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(login_attempts=users_table.c.login_attempts + 1, last_login_attempt=datetime.now(timezone.utc))
            .returning(users_table.c.login_attempts)
        )
        return await get_connection().scalar(statement)

    async def lockAccountUntil(self, user_id: int, locked_until: datetime) -> None:
        statement = update(users_table).where(users_table.c.id == user_id).values(account_locked_until=locked_until)
        await get_connection().execute(statement)
        logger.warning("Account %s locked until %s", user_id, locked_until.isoformat())

    async def resetLoginAttempts(self, user_id: int) -> None:
        """Clear the failed attempt counter and any lockout."""
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(login_attempts=0, last_login_attempt=None, account_locked_until=None)
        )
        await get_connection().execute(statement)

    async def setPasswordResetToken(self, user_id: int, token: str, expires_at: datetime) -> None:
        """Store the pending reset token, replacing any previous one."""
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(password_reset_token=token, password_reset_expires=expires_at, updated_at=func.now())
        )
        await get_connection().execute(statement)

    async def updatePassword(self, user_id: int, hashed_password: str) -> RowMapping:
        """
        Replace the password hash.

        The pending reset token, the failed attempt counter and any lockout are
        cleared at the same time.

        Raises
        ------
        UserNotFoundError
            If no user has that id.
        """
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(
                hashed_password=hashed_password,
                password_reset_token=None,
                password_reset_expires=None,
                login_attempts=0,
                last_login_attempt=None,
                account_locked_until=None,
                updated_at=func.now(),
            )
            .returning(*users_table.c)
        )
        result = await get_connection().execute(statement)
        user = result.mappings().first()
        if user is None:
            raise UserNotFoundError(user_id)
        logger.info("Password updated for user %s", user_id)
        return user
