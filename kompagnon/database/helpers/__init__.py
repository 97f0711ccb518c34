"""
The `helpers` package provides utilities that support database operations.

Contents
--------
- transactionManagement
    Ambient transaction management:
        - Context variable (`db_transaction_context`) propagating the active transaction across awaits
        - `run_in_transaction(work, options)` — joins the current transaction or opens, commits and rolls back a new one
        - `get_connection()` — the active transaction handle, or the shared default connection
        - `with_transaction(fn, options)` — decorator form of `run_in_transaction`
- connections
    The two handle implementations sharing one query surface:
        - `DirectConnection` — autocommit per statement, safe to share
        - `TransactionConnection` — bound to one open transaction
"""
