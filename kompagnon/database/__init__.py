"""
The `database` package is responsible for all interactions with the application's database.

Contents:
    - config:
        Settings and the async engine, metadata and declarative base.

    - entities:
        SQLAlchemy entity models representing the database tables.

    - daos:
        Data Access Objects providing queries over the entities. They obtain
        their handle from `helpers.transactionManagement.get_connection`.

    - core:
        Identity services (register, authenticate, activate), schema
        bootstrap and seeds.

    - helpers:
        Ambient transaction management and the connection handles.
"""
