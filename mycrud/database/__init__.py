"""
The `database` package is responsible for all interactions with the application's database.
It provides configuration, the user entity, CRUD operations, and transaction helpers.

Contents:
    - config:
        Environment-driven settings and the SQLAlchemy connection engine.

    - entities:
        SQLAlchemy entity models representing the database tables.

    - daos:
        Data Access Objects (DAOs) providing CRUD operations for the entities.

    - core:
        Service functions the CLI calls, each run in its own transaction.

    - helpers:
        Utility helpers to manage database transactions and sessions.
"""
