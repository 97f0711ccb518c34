"""
User ORM Model
==============

The ``User`` ORM model represents a registered user of the platform. It maps to
the ``users`` table and holds identity, profile and account-state information.

Key features
~~~~~~~~~~~~
- Integer autoincrement primary key (``id``)
- Unique, lowercased email address
- bcrypt password hash
- User type (``user``, ``admin``, ``moderator``)
- Activation (``is_active``) and review (``is_checked``) flags
- Last successful login timestamp
- Failed login counter and temporary lockout
- Pending password reset token

"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import VARCHAR, Boolean, DateTime, Integer, TEXT, false, func
from sqlalchemy.orm import Mapped, mapped_column

from kompagnon.database.config.connection_engine import declarativeBase


class UserType(str, enum.Enum):
    """Kinds of accounts."""

    USER = "user"
    ADMIN = "admin"
    MODERATOR = "moderator"


DEFAULT_USER_TYPE = UserType.USER
"""User type given to new registrations."""


class User(declarativeBase):
    """
    ORM model for the `users` table.

    Attributes
    ----------
    id : int
        Primary key.
    firstname : str
        First name of the user.
    lastname : str
        Last name of the user.
    email : str
        Email address, unique and stored lowercased.
    birthday : str
        Birthday as entered at registration.
    hashed_password : str
        bcrypt hash of the password.
    user_type : str
        One of :class:`UserType`.
    is_active : bool
        Whether the account has been activated from the email link.
    is_checked : bool
        Whether the account has been reviewed.
    last_logged_at : datetime | None
        Time of the last successful authentication.
    login_attempts : int
        Failed authentications since the last success.
    last_login_attempt : datetime | None
        Time of the last failed authentication.
    account_locked_until : datetime | None
        End of the current lockout, if any.
    password_reset_token : str | None
        Pending password reset token.
    password_reset_expires : datetime | None
        Expiry of the pending password reset token.
    created_at, updated_at : datetime
        Row timestamps.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    firstname: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    lastname: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)
    """Email address of the user, unique across the table."""

    birthday: Mapped[str] = mapped_column(VARCHAR(32), nullable=False)

    hashed_password: Mapped[str] = mapped_column(TEXT, nullable=False)
    """bcrypt hash of the user's password."""

    user_type: Mapped[str] = mapped_column(
        VARCHAR(32), nullable=False, default=DEFAULT_USER_TYPE.value, server_default=DEFAULT_USER_TYPE.value
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    """False until the user follows the activation link."""

    is_checked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    last_logged_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    """Consecutive failed authentications since the last successful one."""

    last_login_attempt: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    account_locked_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    """Authentication is refused until this time."""

    password_reset_token: Mapped[Optional[str]] = mapped_column(TEXT, nullable=True)
    """Last password reset token issued; cleared once used."""

    password_reset_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __str__(self) -> str:
        return f"User: id:{self.id}, email: {self.email}, active: {self.is_active}"


users_table = User.__table__
"""Core `Table` used by the repository for statement building."""
