"""
Kompagnon API — user registration, email activation and authentication.

Contents:
    - api:
        FastAPI router, request models, token utilities and the
        authentication dependency.
    - crypt:
        Password hashing and password policy.
    - database:
        Configuration, engine, entities, DAOs, ambient transaction
        management and the identity services built on them.
    - mail:
        Outgoing email (SMTP) and the activation message.
    - errors:
        Error messages and exception types.
    - main:
        The FastAPI application.
"""
