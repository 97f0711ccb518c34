"""
Connection handles
==================

Two interchangeable database handles returned by
:func:`kompagnon.database.helpers.transactionManagement.get_connection`:

- ``DirectConnection``: bound to the engine. Every statement runs on its own
  pooled connection and is committed as soon as it completes, so one instance
  can be shared by concurrent call chains.
- ``TransactionConnection``: bound to a single connection with an open
  transaction. Every statement joins that transaction.

Both expose the same coroutine methods, so repositories use them without
knowing which one they received. Results that return rows are buffered so they
stay readable once the underlying connection has gone back to the pool.
"""

from typing import Any, Mapping, Optional

from sqlalchemy.engine import Result
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.sql import Executable


def _buffered(result: Result) -> Result:
    if result.returns_rows:
        return result.freeze()()
    return result


class DirectConnection:
    """Non-transactional handle: one short-lived connection per statement."""

    is_transaction = False

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def execute(self, statement: Executable, parameters: Optional[Mapping[str, Any]] = None) -> Result:
        async with self.engine.begin() as connection:
            result = await connection.execute(statement, parameters)
            return _buffered(result)

    async def scalar(self, statement: Executable, parameters: Optional[Mapping[str, Any]] = None) -> Any:
        result = await self.execute(statement, parameters)
        return result.scalar()


class TransactionConnection:
    """
    Transaction-scoped handle: all statements share one open transaction.

    ``active`` is cleared once the block that opened the transaction exits, so
    tasks that copied the context before then stop seeing it as ambient.
    """

    is_transaction = True

    def __init__(self, connection: AsyncConnection):
        self.connection = connection
        self.active = True

    async def execute(self, statement: Executable, parameters: Optional[Mapping[str, Any]] = None) -> Result:
        result = await self.connection.execute(statement, parameters)
        return _buffered(result)

    async def scalar(self, statement: Executable, parameters: Optional[Mapping[str, Any]] = None) -> Any:
        result = await self.execute(statement, parameters)
        return result.scalar()
