"""
Database Transaction Management
===============================

Ambient transactions for the async SQLAlchemy engine.

A transaction opened with :func:`run_in_transaction` is stored in a context
variable, so every coroutine awaited from inside the block (and every task it
creates) obtains the same handle from :func:`get_connection` without it being
passed through arguments. Code running outside any block gets the shared
non-transactional :data:`default_connection`.

Key features
~~~~~~~~~~~~
- Context variable to store the active transaction handle
- Implicit reuse of an enclosing transaction by nested blocks
- Automatic commit on success and rollback on error
- Previous context restored when the block exits
- Decorator (:func:`with_transaction`) for function-level transaction management

Example
-------
>>> @with_transaction
... async def register(data):
...     user_id = await user_dao.createUser(data)
...     await user_dao.updateLastLoggedAt(user_id)
...     return user_id

Nested transactional functions join the outer transaction; only the block that
opened it commits or rolls it back. ``options`` passed to a nested block are
ignored.
"""

import contextvars
import inspect
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union

from kompagnon.database.config.connection_engine import connection_engine
from kompagnon.database.helpers.connections import DirectConnection, TransactionConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")

db_transaction_context: contextvars.ContextVar[Optional[TransactionConnection]] = contextvars.ContextVar(
    "db_transaction_context", default=None
)
"""Context variable storing the active transaction handle of the current call chain."""

default_connection = DirectConnection(connection_engine)
"""Process-wide handle used when no transaction is active."""


class InvalidArgumentError(TypeError):
    """Raised when something other than a callable is wrapped in a transaction."""


def get_connection() -> Union[TransactionConnection, DirectConnection]:
    """
    Return the handle repositories should query through.

    Returns
    -------
    TransactionConnection | DirectConnection
        The active transaction of the current call chain if there is one,
        otherwise :data:`default_connection`.
    """
    transaction = _active_transaction()
    if transaction is not None:
        return transaction
    return default_connection


def _active_transaction() -> Optional[TransactionConnection]:
    transaction = db_transaction_context.get()
    if transaction is not None and transaction.active:
        return transaction
    return None


async def _call(work: Callable[[], Union[T, Awaitable[T]]]) -> T:
    result = work()
    if inspect.isawaitable(result):
        result = await result
    return result


async def run_in_transaction(
    work: Callable[[], Union[T, Awaitable[T]]],
    options: Optional[Mapping[str, Any]] = None,
) -> T:
    """
    Run ``work`` inside the ambient transaction, opening one if needed.

    Parameters
    ----------
    work : callable
        Zero-argument function, sync or async, holding the unit of work.
    options : mapping, optional
        Connection execution options applied before the transaction begins
        (e.g. ``{"isolation_level": "SERIALIZABLE"}``). Ignored when an
        enclosing transaction already exists.

    Returns
    -------
    Any
        Whatever ``work`` returns.

    Raises
    ------
    Exception
        Any error raised by ``work``, unchanged, after the transaction has been
        rolled back.
    """
    if _active_transaction() is not None:
        return await _call(work)

    async with connection_engine.connect() as connection:
        if options:
            await connection.execution_options(**options)
        async with connection.begin():
            transaction = TransactionConnection(connection)
            token = db_transaction_context.set(transaction)
            logger.debug("Transaction opened")
            try:
                return await _call(work)
            finally:
                transaction.active = False
                db_transaction_context.reset(token)


def with_transaction(
    fn: Callable[..., Any],
    options: Optional[Mapping[str, Any]] = None,
) -> Callable[..., Awaitable[Any]]:
    """
    Wrap ``fn`` so that every call runs inside :func:`run_in_transaction`.

    Parameters
    ----------
    fn : callable
        The function to wrap. It may be sync or async; the wrapper is always a
        coroutine function taking the same arguments.
    options : mapping, optional
        Forwarded to :func:`run_in_transaction`.

    Raises
    ------
    InvalidArgumentError
        If ``fn`` is not callable. Raised immediately, no transaction is opened.
    """
    if not callable(fn):
        raise InvalidArgumentError("Expected a function to wrap with transaction")

    @wraps(fn)
    async def wrap_func(*args, **kwargs):
        return await run_in_transaction(lambda: fn(*args, **kwargs), options)

    return wrap_func
