"""
Seed the database with sample data.

Usage::

    python -m kompagnon.database.core.seeds
"""

import asyncio
import logging
import sys

from kompagnon.crypt.encrypt_decrypt import EncryptionDec
from kompagnon.database.config.connection_engine import connection_engine
from kompagnon.database.core.funcs import create_user
from kompagnon.database.core.schema import create_schema
from kompagnon.database.daos.user_dao import UserDao
from kompagnon.database.helpers.transactionManagement import run_in_transaction
from kompagnon.logging_config import configure_logging

logger = logging.getLogger(__name__)

SEED_USERS = [
    {
        "firstname": "simple",
        "lastname": "user",
        "email": "simple.user@example.net",
        "birthday": "01/01/1970",
        "password": "password",
    },
]


async def seed_users() -> list[int]:
    """Create and activate the sample users that are not in the database yet."""
    user_dao = UserDao()
    enc = EncryptionDec()
    hashed_passwords = {
        data["email"]: await asyncio.to_thread(enc.hash_password, data["password"]) for data in SEED_USERS
    }

    async def work() -> list[int]:
        created = []
        for data in SEED_USERS:
            if await user_dao.findByEmail(data["email"]) is not None:
                logger.info("Seed user %s already exists, skipping", data["email"])
                continue
            user_id = await create_user(
                firstname=data["firstname"],
                lastname=data["lastname"],
                email=data["email"],
                birthday=data["birthday"],
                hashed_password=hashed_passwords[data["email"]],
            )
            await user_dao.activateUserById(user_id)
            created.append(user_id)
        return created

    return await run_in_transaction(work)


async def seed() -> int:
    logger.info("Starting database seeding...")
    try:
        await create_schema()
        created = await seed_users()
        logger.info("Successfully created %s users", len(created))
        logger.info("Database seeding completed successfully")
        return 0
    except Exception:
        logger.exception("Error during database seeding")
        return 1
    finally:
        await connection_engine.dispose()


def main() -> None:
    """CLI entrypoint."""
    configure_logging()
    sys.exit(asyncio.run(seed()))


if __name__ == "__main__":
    main()
