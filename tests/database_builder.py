"""Helpers inserting rows straight into the test database."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import insert

from kompagnon.crypt.encrypt_decrypt import EncryptionDec
from kompagnon.database.config.connection_engine import connection_engine
from kompagnon.database.entities.user import users_table

_enc = EncryptionDec(rounds=4)


async def build_user(
    email: str = "john.doe@example.net",
    password: str = "Str0ng!Password",
    firstname: str = "John",
    lastname: str = "Doe",
    birthday: str = "01/01/1970",
    is_active: bool = True,
    user_type: str = "user",
    updated_at: Optional[datetime] = None,
    login_attempts: int = 0,
    account_locked_until: Optional[datetime] = None,
    password_reset_token: Optional[str] = None,
    password_reset_expires: Optional[datetime] = None,
) -> dict[str, Any]:
    """Insert a user and return its column values (plus ``password``)."""
    values = {
        "firstname": firstname,
        "lastname": lastname,
        "email": email,
        "birthday": birthday,
        "hashed_password": _enc.hash_password(password),
        "user_type": user_type,
        "is_active": is_active,
        "is_checked": False,
        "updated_at": updated_at or datetime(2020, 1, 1, tzinfo=timezone.utc),
        "login_attempts": login_attempts,
        "account_locked_until": account_locked_until,
        "password_reset_token": password_reset_token,
        "password_reset_expires": password_reset_expires,
    }
    async with connection_engine.begin() as connection:
        result = await connection.execute(insert(users_table).values(**values).returning(users_table.c.id))
        values["id"] = result.scalar_one()
    values["password"] = password
    return values
